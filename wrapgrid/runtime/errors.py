"""Error taxonomy and recoverable-exception policy helpers."""

from __future__ import annotations

import logging
from typing import TypeAlias


class WrapGridError(Exception):
    """Base class for errors raised by the wrap runtime."""


class DegenerateLayoutError(WrapGridError):
    """Raised by strict layout computation for zero-sized screens or tiles."""


class FetchError(WrapGridError):
    """Base class for image fetch failures."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{reason}: {url}")
        self.url = url
        self.reason = reason


class FetchTimeoutError(FetchError):
    """The fetch did not complete before its deadline."""


class FetchFailedError(FetchError):
    """Network, HTTP, or payload failure while fetching an image."""


# Explicitly bounded set of fetch failures that degrade to a fallback payload.
RecoverableFetchErrors: TypeAlias = tuple[type[BaseException], ...]
RECOVERABLE_FETCH_ERRORS: RecoverableFetchErrors = (
    FetchError,
    OSError,
    ValueError,
    RuntimeError,
)


def log_recoverable(
    logger: logging.Logger,
    message: str,
    *args: object,
    level: int = logging.DEBUG,
) -> None:
    """Emit structured observability for tolerated recoverable exceptions."""
    logger.log(level, message, *args, exc_info=True)


__all__ = [
    "DegenerateLayoutError",
    "FetchError",
    "FetchFailedError",
    "FetchTimeoutError",
    "RECOVERABLE_FETCH_ERRORS",
    "WrapGridError",
    "log_recoverable",
]
