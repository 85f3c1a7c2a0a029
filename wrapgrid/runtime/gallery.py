"""Frame orchestrator for the infinite wrapping gallery."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from concurrent.futures import Executor
from dataclasses import asdict, dataclass
from time import monotonic

from wrapgrid.api.content import Catalog, ImageFetcher
from wrapgrid.api.render import TileView, TileViewFactory
from wrapgrid.layout.geometry import Size, Vec2
from wrapgrid.layout.grid import GridLayout, LayoutCalculator
from wrapgrid.layout.render_space import RenderSpace
from wrapgrid.motion.scroll import ScrollState, ScrollTracker
from wrapgrid.motion.wrap import Tile, WrapEngine
from wrapgrid.prefetch.cache import PrefetchCache
from wrapgrid.prefetch.payload import CacheEntry
from wrapgrid.runtime.config import GalleryConfig, get_gallery_config
from wrapgrid.runtime.scheduler import Scheduler
from wrapgrid.runtime.sequence import IndexSequence
from wrapgrid.runtime.time import FrameClock, Throttle, TimeSource

_LOG = logging.getLogger("wrapgrid.gallery")

ViewRelease = Callable[[TileView], None]


@dataclass(frozen=True, slots=True)
class FrameReport:
    """What one `InfiniteGallery.frame()` call did."""

    frame_index: int
    delta_seconds: float
    scroll: ScrollState
    merged_fetches: int
    wrapped_tiles: int
    presented_tiles: int
    preload_ran: bool
    fetches_started: int
    evicted: int
    center_index: int | None


class InfiniteGallery:
    """Owns the tile pool and drives layout, scroll, wrap and prefetch per frame.

    Input handlers talk to `scroll`; the host calls `resize()` on viewport
    changes and `frame()` once per rendered frame.
    """

    def __init__(
        self,
        config: GalleryConfig | None = None,
        *,
        catalog: Catalog,
        fetcher: ImageFetcher,
        view_factory: TileViewFactory,
        view_release: ViewRelease | None = None,
        executor: Executor | None = None,
        time_source: TimeSource | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config or get_gallery_config()
        self._catalog = catalog
        self._view_factory = view_factory
        self._view_release = view_release
        time_source = time_source or monotonic
        tile_size = Size(self._config.tile.width, self._config.tile.height)
        self._clock = FrameClock(time_source=time_source)
        self._scheduler = Scheduler()
        self._scroll = ScrollTracker(self._config.scroll, scheduler=self._scheduler)
        self._calculator = LayoutCalculator(
            tile=tile_size,
            gap=self._config.tile.gap,
            buffer=self._config.tile.buffer,
        )
        self._cache = PrefetchCache(
            catalog,
            fetcher,
            self._config.prefetch,
            executor=executor,
            time_source=time_source,
            rng=rng,
            fallback_size=tile_size,
        )
        self._throttle = Throttle(self._config.prefetch.preload_interval_seconds)
        self._sequence = IndexSequence()
        self._layout = GridLayout.empty(tile=tile_size, gap=self._config.tile.gap)
        self._wrap = WrapEngine(
            RenderSpace(screen=Size(0.0, 0.0), viewport=Size(0.0, 0.0)),
            Size(0.0, 0.0),
        )
        self._tiles: list[Tile] = []
        self._views: list[TileView] = []
        self._presented: dict[int, CacheEntry] = {}
        self._center_index: int | None = None
        self._frame_index = 0
        self._closed = False

    @property
    def config(self) -> GalleryConfig:
        return self._config

    @property
    def scroll(self) -> ScrollTracker:
        return self._scroll

    @property
    def cache(self) -> PrefetchCache:
        return self._cache

    @property
    def layout(self) -> GridLayout:
        return self._layout

    @property
    def tiles(self) -> tuple[Tile, ...]:
        return tuple(self._tiles)

    @property
    def wrap_engine(self) -> WrapEngine:
        return self._wrap

    @property
    def is_closed(self) -> bool:
        return self._closed

    def resize(self, screen: Size) -> GridLayout:
        """Rebuild the tile pool for a new screen size."""
        computed = self._calculator.compute(screen)
        layout = computed.rebased(computed.pool_extent)
        render_space = RenderSpace.from_camera(
            screen,
            fov_degrees=self._config.camera.fov_degrees,
            distance=self._config.camera.distance,
        )
        self._wrap.relayout(render_space, layout.grid_period)
        self._release_views()
        self._layout = layout
        self._sequence.reset()
        self._presented.clear()
        self._center_index = None
        for slot in range(layout.total):
            view = self._view_factory(slot)
            self._views.append(view)
            self._tiles.append(
                Tile(
                    slot=slot,
                    bounds=layout.slot_bounds(slot),
                    content_index=self._sequence.next(),
                    view=view,
                )
            )
        self._place_all(self._scroll.state())
        self._cache.preload_visible(self._tiles)
        self._throttle.reset()
        _LOG.info(
            "gallery_resized screen=%.0fx%.0f tiles=%d grid=%dx%d period=%.1fx%.1f",
            screen.width,
            screen.height,
            layout.total,
            layout.columns,
            layout.rows,
            layout.grid_period.width,
            layout.grid_period.height,
        )
        return layout

    def frame(self) -> FrameReport:
        """Run one tick: merge fetches, ease scroll, wrap tiles, prefetch."""
        if self._closed:
            raise RuntimeError("gallery is shut down")
        time_context = self._clock.next()
        self._scheduler.advance(time_context.delta_seconds)
        merged = self._cache.pump(time_context.now_seconds)
        state = self._scroll.tick()

        wrapped = 0
        center: Tile | None = None
        best = float("inf")
        for tile in self._tiles:
            result = self._wrap.update(tile, state)
            if result.wrapped:
                wrapped += 1
            distance = origin_distance(result.position)
            if distance < best:
                best = distance
                center = tile
        if center is not None:
            self._center_index = center.content_index

        presented = self._present_cached()

        preload_ran = False
        started = 0
        evicted = 0
        if self._tiles and self._throttle.ready(time_context.now_seconds):
            preload_ran = True
            started, evicted = self._predictive_pass(state)

        report = FrameReport(
            frame_index=time_context.frame_index,
            delta_seconds=time_context.delta_seconds,
            scroll=state,
            merged_fetches=merged,
            wrapped_tiles=wrapped,
            presented_tiles=presented,
            preload_ran=preload_ran,
            fetches_started=started,
            evicted=evicted,
            center_index=self._center_index,
        )
        if _LOG.isEnabledFor(logging.DEBUG) and (wrapped or merged or evicted):
            _LOG.debug(
                "frame=%d dt=%.4f merged=%d wrapped=%d presented=%d started=%d evicted=%d",
                report.frame_index,
                report.delta_seconds,
                merged,
                wrapped,
                presented,
                started,
                evicted,
            )
        self._frame_index = time_context.frame_index + 1
        return report

    def debug_info(self) -> dict[str, object]:
        """Diagnostics snapshot for overlays and logs."""
        state = self._scroll.state()
        return {
            "frames": self._frame_index,
            "tiles": len(self._tiles),
            "columns": self._layout.columns,
            "rows": self._layout.rows,
            "grid_period": (self._layout.grid_period.width, self._layout.grid_period.height),
            "scroll_current": (state.current.x, state.current.y),
            "scroll_target": (state.target.x, state.target.y),
            "direction": (state.direction.x.value, state.direction.y.value),
            "actively_scrolling": state.is_actively_scrolling,
            "center_index": self._center_index,
            "cache": asdict(self._cache.stats()),
        }

    def shutdown(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._scroll.dispose()
        self._scheduler.clear()
        self._cache.shutdown()
        self._release_views()
        _LOG.info("gallery_shutdown frames=%d", self._frame_index)

    def _place_all(self, state: ScrollState) -> None:
        for tile in self._tiles:
            self._wrap.reset_tile(tile)
            if tile.view is None:
                continue
            tile.view.set_scale(self._wrap.tile_scale(tile))
            tile.view.set_position(self._wrap.position_of(tile, state.current))

    def _present_cached(self) -> int:
        presented = 0
        for tile, view in zip(self._tiles, self._views, strict=True):
            entry = self._cache.get(tile.content_index)
            if entry is None or self._presented.get(tile.slot) is entry:
                continue
            view.present(entry.payload)
            self._presented[tile.slot] = entry
            presented += 1
        return presented

    def _predictive_pass(self, state: ScrollState) -> tuple[int, int]:
        started_before = self._cache.stats().fetches_started
        total = self._catalog.catalog_size()
        key_for = self._cache.key_for
        # Content on live tiles and the freshly requested ring is never evicted.
        protected = {key_for(tile.content_index) for tile in self._tiles}
        if self._center_index is not None:
            direction = state.direction if state.is_actively_scrolling else None
            ring = self._cache.preload_around(self._center_index, direction, total)
            protected.update(key_for(index) for index in ring)
        self._cache.preload_by_grid(state, self._layout, self._tiles)
        evicted = 0
        if self._center_index is not None:
            evicted += self._cache.evict_by_distance(self._center_index, total, protected)
        evicted += self._cache.evict_to_capacity(protected=protected)
        started = self._cache.stats().fetches_started - started_before
        return started, evicted

    def _release_views(self) -> None:
        if self._view_release is not None:
            for view in self._views:
                self._view_release(view)
        self._views = []
        self._tiles = []


def origin_distance(position: Vec2) -> float:
    """Squared distance of a render-space point from the viewport center."""
    return position.x * position.x + position.y * position.y
