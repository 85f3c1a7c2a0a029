"""Explicit content-index sequence handed to tile construction."""

from __future__ import annotations


class IndexSequence:
    """Monotonic integer generator owned by the gallery orchestrator."""

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError("start must be >= 0")
        self._start = int(start)
        self._next = int(start)

    def next(self) -> int:
        value = self._next
        self._next += 1
        return value

    def peek(self) -> int:
        return self._next

    def reset(self, start: int | None = None) -> None:
        """Rewind to `start` (or the original seed)."""
        if start is not None:
            if start < 0:
                raise ValueError("start must be >= 0")
            self._start = int(start)
        self._next = self._start

    def take(self, count: int) -> list[int]:
        return [self.next() for _ in range(max(0, count))]
