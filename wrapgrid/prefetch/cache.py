"""Predictive prefetch cache for tile imagery.

The cache owns three structures and is their only mutator:

- `_entries`: key -> `CacheEntry`, insertion ordered (capacity eviction drops
  the oldest insertions first; this is deliberately not LRU).
- `_in_flight`: key -> pending fetch record. Key presence is the single
  source of truth for "a fetch for this key is in progress".
- `_completions`: thread-safe queue that fetch workers post outcomes to.

Workers never touch `_entries` or `_in_flight`. Outcomes are merged by
`pump()`, which the owner calls once at the start of each tick, so a fetch
completing mid-tick becomes visible on the next tick. Failures and timeouts
resolve to a fallback payload that is cached like a real result.
"""

from __future__ import annotations

import logging
import queue
import random
from collections.abc import Collection, Iterable, Sequence
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from itertools import islice
from time import monotonic
from typing import TYPE_CHECKING

from wrapgrid.api.content import Catalog, ImageFetcher
from wrapgrid.layout.geometry import Size, index_to_cell
from wrapgrid.prefetch.distance import cyclic_distance, preload_candidates
from wrapgrid.prefetch.payload import CacheEntry, Payload, RealPayload, make_fallback
from wrapgrid.runtime.config import PrefetchConfig
from wrapgrid.runtime.errors import RECOVERABLE_FETCH_ERRORS, log_recoverable
from wrapgrid.runtime.time import TimeSource

if TYPE_CHECKING:
    from wrapgrid.layout.grid import GridLayout
    from wrapgrid.motion.scroll import ScrollDirection, ScrollState
    from wrapgrid.motion.wrap import Tile

_LOG = logging.getLogger("wrapgrid.cache")


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Diagnostics snapshot of cache occupancy and fetch activity."""

    entries: int
    real_entries: int
    fallback_entries: int
    in_flight: int
    fetches_started: int
    fetches_failed: int
    fetches_expired: int
    results_dropped: int
    evicted: int
    max_entries: int
    preload_distance: int


@dataclass(slots=True)
class _InFlight:
    key: int
    token: int
    url: str
    started_at: float
    waiters: list[Future[CacheEntry]]


@dataclass(frozen=True, slots=True)
class _Completion:
    key: int
    token: int
    payload: RealPayload | None = None
    error: BaseException | None = None


class PrefetchCache:
    """Bounded key -> payload cache with fetch dedup and distance eviction."""

    def __init__(
        self,
        catalog: Catalog,
        fetcher: ImageFetcher,
        config: PrefetchConfig | None = None,
        *,
        executor: Executor | None = None,
        time_source: TimeSource | None = None,
        rng: random.Random | None = None,
        fallback_size: Size = Size(128.0, 192.0),
    ) -> None:
        self._catalog = catalog
        self._fetcher = fetcher
        self._config = config or PrefetchConfig()
        _validate_config(self._config)
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=self._config.max_workers,
            thread_name_prefix="wrapgrid-fetch",
        )
        self._time_source = time_source or monotonic
        self._rng = rng or random.Random()
        self._fallback_size = fallback_size
        self._entries: dict[int, CacheEntry] = {}
        self._in_flight: dict[int, _InFlight] = {}
        self._completions: queue.SimpleQueue[_Completion] = queue.SimpleQueue()
        self._next_token = 1
        self._fetches_started = 0
        self._fetches_failed = 0
        self._fetches_expired = 0
        self._results_dropped = 0
        self._evicted = 0
        _LOG.info(
            "prefetch_cache_ready catalog_size=%d max_entries=%d preload_distance=%d",
            self._catalog.catalog_size(),
            self._config.max_entries,
            self._config.preload_distance,
        )

    @property
    def config(self) -> PrefetchConfig:
        return self._config

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, index: object) -> bool:
        return isinstance(index, int) and self.key_for(index) in self._entries

    def key_for(self, index: int) -> int:
        """Cache key for a content index (index modulo the catalog size)."""
        size = self._catalog.catalog_size()
        if size <= 0:
            return index
        return index % size

    def keys(self) -> list[int]:
        """Cached keys, oldest insertion first."""
        return list(self._entries)

    def get(self, index: int) -> CacheEntry | None:
        return self._entries.get(self.key_for(index))

    def is_in_flight(self, index: int) -> bool:
        return self.key_for(index) in self._in_flight

    def request(self, index: int) -> Future[CacheEntry]:
        """Return a future for the entry, starting at most one fetch per key.

        Each caller gets its own future, resolved during a later `pump()`;
        cancelling one leaves the others and the fetch itself untouched.
        """
        key = self.key_for(index)
        entry = self._entries.get(key)
        if entry is not None:
            done: Future[CacheEntry] = Future()
            done.set_result(entry)
            return done
        pending = self._in_flight.get(key)
        if pending is not None:
            waiter: Future[CacheEntry] = Future()
            pending.waiters.append(waiter)
            return waiter
        return self._start_fetch(key)

    def pump(self, now: float | None = None) -> int:
        """Merge finished fetches and expire overdue ones; return entries stored."""
        merged = 0
        while True:
            try:
                completion = self._completions.get_nowait()
            except queue.Empty:
                break
            pending = self._in_flight.get(completion.key)
            if pending is None or pending.token != completion.token:
                self._results_dropped += 1
                _LOG.debug("fetch_result_dropped key=%d token=%d", completion.key, completion.token)
                continue
            del self._in_flight[completion.key]
            payload: Payload
            if completion.payload is not None:
                payload = completion.payload
            else:
                self._fetches_failed += 1
                _LOG.debug("fetch_fallback key=%d error=%r", completion.key, completion.error)
                payload = self._fallback()
            _resolve(pending.waiters, self._store(completion.key, payload))
            merged += 1
        return merged + self._expire_overdue(self._time_source() if now is None else now)

    def preload_around(
        self,
        center: int,
        direction: ScrollDirection | None,
        total: int,
    ) -> set[int]:
        """Request ring neighbors of `center`, extended along the scroll direction."""
        candidates = preload_candidates(center, total, self._config.preload_distance, direction)
        for index in sorted(candidates):
            self._request_if_missing(index)
        return candidates

    def preload_visible(self, tiles: Iterable[Tile]) -> int:
        """Request content for every instantiated tile regardless of distance."""
        started = 0
        for tile in tiles:
            if self._request_if_missing(tile.content_index):
                started += 1
        if started:
            _LOG.debug("preload_visible started=%d", started)
        return started

    def preload_by_grid(
        self,
        scroll: ScrollState,
        layout: GridLayout,
        tiles: Sequence[Tile],
    ) -> list[int]:
        """Request tiles inside the base grid plus a direction-widened margin."""
        if layout.base_columns <= 0 or not tiles:
            return []
        velocity = scroll.velocity
        extra_rows = 2 if scroll.is_actively_scrolling and velocity.y != 0.0 else 1
        extra_cols = 2 if scroll.is_actively_scrolling and velocity.x != 0.0 else 1
        requested: list[int] = []
        for tile in tiles:
            cell = index_to_cell(tile.slot, layout.base_columns)
            if cell.row >= layout.base_rows + extra_rows:
                continue
            if cell.col >= layout.base_columns + extra_cols:
                continue
            if self._request_if_missing(tile.content_index):
                requested.append(tile.content_index)
        return requested

    def evict_by_distance(
        self,
        center: int,
        total: int,
        protected: Collection[int] = frozenset(),
    ) -> int:
        """Drop entries farther than `eviction_multiplier * preload_distance` from center.

        Keys in `protected` (content held by live tiles) are never dropped.
        """
        limit = self._config.eviction_multiplier * self._config.preload_distance
        doomed = [
            key
            for key in self._entries
            if key not in protected and cyclic_distance(key, center, total) > limit
        ]
        for key in doomed:
            del self._entries[key]
        if doomed:
            self._evicted += len(doomed)
            _LOG.debug("evict_by_distance center=%d removed=%d", center, len(doomed))
        return len(doomed)

    def evict_to_capacity(
        self,
        max_entries: int | None = None,
        protected: Collection[int] = frozenset(),
    ) -> int:
        """Drop oldest-inserted unprotected entries until at or under the cap.

        When protected entries alone exceed the cap the cache stays over it.
        """
        cap = self._config.max_entries if max_entries is None else max(0, int(max_entries))
        overflow = len(self._entries) - cap
        if overflow <= 0:
            return 0
        doomed = list(islice((key for key in self._entries if key not in protected), overflow))
        for key in doomed:
            del self._entries[key]
        if doomed:
            self._evicted += len(doomed)
            _LOG.debug("evict_to_capacity cap=%d removed=%d", cap, len(doomed))
        return len(doomed)

    def abandon(self, index: int) -> bool:
        """Stop caring about an in-flight fetch; its result is dropped on arrival."""
        pending = self._in_flight.pop(self.key_for(index), None)
        if pending is None:
            return False
        _cancel(pending.waiters)
        return True

    def clear(self) -> None:
        """Drop every entry and abandon every in-flight fetch."""
        for pending in self._in_flight.values():
            _cancel(pending.waiters)
        self._in_flight.clear()
        self._entries.clear()
        _LOG.info("prefetch_cache_cleared")

    def stats(self) -> CacheStats:
        fallback = sum(1 for entry in self._entries.values() if entry.is_fallback)
        return CacheStats(
            entries=len(self._entries),
            real_entries=len(self._entries) - fallback,
            fallback_entries=fallback,
            in_flight=len(self._in_flight),
            fetches_started=self._fetches_started,
            fetches_failed=self._fetches_failed,
            fetches_expired=self._fetches_expired,
            results_dropped=self._results_dropped,
            evicted=self._evicted,
            max_entries=self._config.max_entries,
            preload_distance=self._config.preload_distance,
        )

    def update_config(self, **changes: int | float) -> PrefetchConfig:
        config = replace(self._config, **changes)
        _validate_config(config)
        self._config = config
        _LOG.info("prefetch_config_updated %s", config)
        return config

    def shutdown(self, *, wait: bool = False) -> None:
        self.clear()
        if self._owns_executor:
            self._executor.shutdown(wait=wait, cancel_futures=True)

    def _request_if_missing(self, index: int) -> bool:
        key = self.key_for(index)
        if key in self._entries or key in self._in_flight:
            return False
        self._start_fetch(key)
        return True

    def _start_fetch(self, key: int) -> Future[CacheEntry]:
        url = self._catalog.url_for_index(key)
        token = self._next_token
        self._next_token += 1
        future: Future[CacheEntry] = Future()
        self._in_flight[key] = _InFlight(
            key=key,
            token=token,
            url=url,
            started_at=self._time_source(),
            waiters=[future],
        )
        self._fetches_started += 1
        _LOG.debug("fetch_start key=%d token=%d url=%s", key, token, url)
        try:
            submitted = self._executor.submit(self._run_fetch, key, token, url)
        except RuntimeError:
            # Executor already shut down: resolve straight to a fallback.
            _LOG.warning("fetch_submit_rejected key=%d", key, exc_info=True)
            del self._in_flight[key]
            future.set_result(self._store(key, self._fallback()))
            return future
        submitted.add_done_callback(_log_worker_crash)
        return future

    def _run_fetch(self, key: int, token: int, url: str) -> None:
        # Runs on a worker thread: only the completion queue is touched here.
        try:
            data = self._fetcher.fetch(url, self._config.fetch_timeout_seconds)
        except RECOVERABLE_FETCH_ERRORS as exc:
            log_recoverable(_LOG, "fetch_failed key=%d url=%s", key, url)
            self._completions.put(_Completion(key=key, token=token, error=exc))
            return
        self._completions.put(
            _Completion(key=key, token=token, payload=RealPayload(data=data, url=url))
        )

    def _expire_overdue(self, now: float) -> int:
        timeout = self._config.fetch_timeout_seconds
        overdue = [
            pending
            for pending in self._in_flight.values()
            if now - pending.started_at > timeout
        ]
        for pending in overdue:
            del self._in_flight[pending.key]
            self._fetches_expired += 1
            _LOG.debug(
                "fetch_timeout key=%d url=%s after=%.3fs",
                pending.key,
                pending.url,
                now - pending.started_at,
            )
            _resolve(pending.waiters, self._store(pending.key, self._fallback()))
        return len(overdue)

    def _store(self, key: int, payload: Payload) -> CacheEntry:
        entry = CacheEntry(key=key, payload=payload)
        self._entries.pop(key, None)
        self._entries[key] = entry
        return entry

    def _fallback(self) -> Payload:
        return make_fallback(
            int(self._fallback_size.width),
            int(self._fallback_size.height),
            rng=self._rng,
        )


def _resolve(waiters: list[Future[CacheEntry]], entry: CacheEntry) -> None:
    for waiter in waiters:
        # Callers may cancel the futures they were handed.
        if not waiter.cancelled():
            waiter.set_result(entry)


def _cancel(waiters: list[Future[CacheEntry]]) -> None:
    for waiter in waiters:
        waiter.cancel()


def _log_worker_crash(submitted: Future[None]) -> None:
    if submitted.cancelled():
        return
    exc = submitted.exception()
    if exc is not None:
        # The in-flight record stays until its deadline and then falls back.
        _LOG.error("fetch_worker_crashed", exc_info=exc)


def _validate_config(config: PrefetchConfig) -> None:
    if config.preload_distance < 0:
        raise ValueError("preload_distance must be >= 0")
    if config.max_entries < 0:
        raise ValueError("max_entries must be >= 0")
    if config.fetch_timeout_seconds <= 0.0:
        raise ValueError("fetch_timeout_seconds must be > 0")
    if config.eviction_multiplier < 1:
        raise ValueError("eviction_multiplier must be >= 1")
    if config.max_workers < 1:
        raise ValueError("max_workers must be >= 1")
