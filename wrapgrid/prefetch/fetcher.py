"""HTTP image fetcher built on `urllib.request`."""

from __future__ import annotations

import logging
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from wrapgrid.runtime.errors import FetchFailedError, FetchTimeoutError

_LOG = logging.getLogger("wrapgrid.fetch")

DEFAULT_USER_AGENT = "wrapgrid/0.1"


class UrllibImageFetcher:
    """Blocking image download with a per-request socket timeout."""

    def __init__(
        self,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        max_bytes: int = 8 * 1024 * 1024,
    ) -> None:
        if max_bytes <= 0:
            raise ValueError("max_bytes must be > 0")
        self._user_agent = user_agent
        self._max_bytes = max_bytes

    def fetch(self, url: str, timeout_seconds: float) -> bytes:
        request = Request(url, headers={"User-Agent": self._user_agent, "Accept": "image/*"})
        try:
            with urlopen(request, timeout=timeout_seconds) as resp:  # noqa: S310
                data = resp.read(self._max_bytes + 1)
        except HTTPError as exc:
            raise FetchFailedError(url, f"http status {exc.code}") from exc
        except URLError as exc:
            if isinstance(exc.reason, TimeoutError):
                raise FetchTimeoutError(url, "connect timeout") from exc
            raise FetchFailedError(url, f"url error {exc.reason}") from exc
        except TimeoutError as exc:
            raise FetchTimeoutError(url, "read timeout") from exc
        except OSError as exc:
            raise FetchFailedError(url, f"os error {exc}") from exc
        if not data:
            raise FetchFailedError(url, "empty body")
        if len(data) > self._max_bytes:
            raise FetchFailedError(url, f"body exceeds {self._max_bytes} bytes")
        _LOG.debug("fetch_ok url=%s bytes=%d", url, len(data))
        return data
