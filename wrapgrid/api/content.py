"""Content catalog and image-fetch collaborator contracts."""

from __future__ import annotations

from typing import Protocol


class Catalog(Protocol):
    """Maps content indices onto a finite catalog of fetchable items."""

    def content_key_for_index(self, index: int) -> str:
        """Opaque content id for `index` (wrapping modulo the catalog size)."""
        ...

    def catalog_size(self) -> int: ...

    def url_for_index(self, index: int) -> str: ...


class ImageFetcher(Protocol):
    """Blocking image download, executed on a fetch worker thread.

    Implementations raise `FetchTimeoutError` or `FetchFailedError`.
    """

    def fetch(self, url: str, timeout_seconds: float) -> bytes: ...
