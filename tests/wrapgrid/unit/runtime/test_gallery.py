from __future__ import annotations

import pytest

from wrapgrid.layout.geometry import Size
from wrapgrid.prefetch.payload import FallbackPayload, RealPayload
from wrapgrid.runtime.config import GalleryConfig, PrefetchConfig, TileConfig
from wrapgrid.runtime.errors import FetchFailedError
from wrapgrid.runtime.gallery import InfiniteGallery

SCREEN = Size(400.0, 400.0)


def _gallery(
    catalog,
    fetcher,
    executor,
    clock,
    views,
    *,
    prefetch: PrefetchConfig | None = None,
) -> InfiniteGallery:
    config = GalleryConfig(
        tile=TileConfig(width=100.0, height=100.0, gap=0.0, buffer=2),
        prefetch=prefetch or PrefetchConfig(),
    )
    return InfiniteGallery(
        config,
        catalog=catalog,
        fetcher=fetcher,
        view_factory=views,
        view_release=views.release,
        executor=executor,
        time_source=clock,
    )


def test_resize_builds_pool_and_preloads_visible_content(
    fake_catalog, scripted_fetcher, manual_executor, manual_clock, view_factory
) -> None:
    gallery = _gallery(
        fake_catalog, scripted_fetcher, manual_executor, manual_clock, view_factory
    )

    layout = gallery.resize(SCREEN)

    assert (layout.columns, layout.rows) == (6, 6)
    assert layout.grid_period == Size(600.0, 600.0)
    assert len(gallery.tiles) == 36
    assert len(view_factory.created) == 36
    assert [tile.content_index for tile in gallery.tiles] == list(range(36))
    assert manual_executor.submitted == 10


def test_resize_releases_old_views_and_restarts_indices(
    fake_catalog, scripted_fetcher, manual_executor, manual_clock, view_factory
) -> None:
    gallery = _gallery(
        fake_catalog, scripted_fetcher, manual_executor, manual_clock, view_factory
    )
    gallery.resize(SCREEN)
    first_views = list(view_factory.created)

    gallery.resize(Size(200.0, 200.0))

    assert all(view.released for view in first_views)
    assert len(gallery.tiles) == 16
    assert gallery.tiles[0].content_index == 0
    assert all(tile.extra.x == 0.0 and tile.extra.y == 0.0 for tile in gallery.tiles)


def test_frame_merges_fetches_and_presents_each_entry_once(
    fake_catalog, scripted_fetcher, manual_executor, manual_clock, view_factory
) -> None:
    gallery = _gallery(
        fake_catalog, scripted_fetcher, manual_executor, manual_clock, view_factory
    )
    gallery.resize(SCREEN)
    manual_executor.run_all()

    report = gallery.frame()

    assert report.merged_fetches == 10
    assert report.presented_tiles == 36
    assert all(len(view.presented) == 1 for view in view_factory.created)
    assert view_factory.created[12].presented[0] == RealPayload(
        data=b"image:mem://item-2", url="mem://item-2"
    )

    manual_clock.advance(0.016)
    assert gallery.frame().presented_tiles == 0


def test_fetch_completed_mid_tick_is_visible_next_tick(
    fake_catalog, scripted_fetcher, manual_executor, manual_clock, view_factory
) -> None:
    gallery = _gallery(
        fake_catalog, scripted_fetcher, manual_executor, manual_clock, view_factory
    )
    gallery.resize(SCREEN)

    first = gallery.frame()
    assert first.presented_tiles == 0

    manual_executor.run_all()
    manual_clock.advance(0.016)
    second = gallery.frame()
    assert second.merged_fetches == 10
    assert second.presented_tiles == 36


def test_failed_fetch_presents_fallback(
    fake_catalog, scripted_fetcher, manual_executor, manual_clock, view_factory
) -> None:
    scripted_fetcher.failures["mem://item-0"] = FetchFailedError("mem://item-0", "empty body")
    gallery = _gallery(
        fake_catalog, scripted_fetcher, manual_executor, manual_clock, view_factory
    )
    gallery.resize(SCREEN)
    manual_executor.run_all()

    gallery.frame()

    payload = view_factory.created[0].presented[0]
    assert isinstance(payload, FallbackPayload)
    assert (payload.width, payload.height) == (100, 100)


def test_predictive_pass_is_throttled(
    fake_catalog, scripted_fetcher, manual_executor, manual_clock, view_factory
) -> None:
    gallery = _gallery(
        fake_catalog, scripted_fetcher, manual_executor, manual_clock, view_factory
    )
    gallery.resize(SCREEN)

    assert gallery.frame().preload_ran is True
    manual_clock.advance(0.01)
    assert gallery.frame().preload_ran is False
    manual_clock.advance(0.05)
    assert gallery.frame().preload_ran is True


def test_predictive_pass_keeps_visible_content_over_capacity(
    catalog_factory, scripted_fetcher, manual_executor, manual_clock, view_factory
) -> None:
    gallery = _gallery(
        catalog_factory(1000),
        scripted_fetcher,
        manual_executor,
        manual_clock,
        view_factory,
        prefetch=PrefetchConfig(max_entries=5),
    )
    gallery.resize(SCREEN)
    manual_executor.run_all()
    gallery.frame()
    gallery.cache.request(500)
    manual_executor.run_all()

    manual_clock.advance(0.06)
    report = gallery.frame()

    assert report.preload_ran
    assert report.evicted >= 1
    assert report.center_index is not None
    assert 500 not in gallery.cache
    assert all(tile.content_index in gallery.cache for tile in gallery.tiles)
    assert len(gallery.cache) > 5


@pytest.mark.parametrize("catalog_size", [40, 1000])
def test_idle_gallery_settles_without_refetching(
    catalog_size, catalog_factory, scripted_fetcher, manual_executor, manual_clock, view_factory
) -> None:
    scripted_fetcher.failures["mem://item-0"] = FetchFailedError("mem://item-0", "empty body")
    gallery = InfiniteGallery(
        GalleryConfig(),
        catalog=catalog_factory(catalog_size),
        fetcher=scripted_fetcher,
        view_factory=view_factory,
        view_release=view_factory.release,
        executor=manual_executor,
        time_source=manual_clock,
    )
    gallery.resize(Size(1000.0, 1000.0))
    assert len(gallery.tiles) == 80

    fetches: list[int] = []
    presents: list[int] = []
    for _ in range(40):
        manual_executor.run_all()
        manual_clock.advance(0.06)
        gallery.frame()
        fetches.append(len(scripted_fetcher.calls))
        presents.append(sum(len(view.presented) for view in view_factory.created))

    assert fetches[-1] == fetches[10]
    assert presents[-1] == presents[10]
    assert all(len(view.presented) == 1 for view in view_factory.created)
    assert gallery.cache.stats().in_flight == 0


def test_scrolling_wraps_tiles_and_settles(
    fake_catalog, scripted_fetcher, manual_executor, manual_clock, view_factory
) -> None:
    gallery = _gallery(
        fake_catalog, scripted_fetcher, manual_executor, manual_clock, view_factory
    )
    gallery.resize(SCREEN)
    gallery.scroll.add_scroll(300.0, 0.0)

    wrapped = 0
    for _ in range(20):
        manual_clock.advance(0.016)
        wrapped += gallery.frame().wrapped_tiles
    assert wrapped > 0
    assert gallery.scroll.is_actively_scrolling

    gallery.scroll.set_target(gallery.scroll.state().current.x, 0.0)
    manual_clock.advance(0.016)
    gallery.frame()
    for _ in range(10):
        manual_clock.advance(0.05)
        gallery.frame()
    assert gallery.scroll.is_actively_scrolling is False
    for tile in gallery.tiles:
        assert tile.extra.x == tile.wrap_steps_x * gallery.wrap_engine.period.x


def test_degenerate_screen_runs_frames_without_tiles(
    fake_catalog, scripted_fetcher, manual_executor, manual_clock, view_factory
) -> None:
    gallery = _gallery(
        fake_catalog, scripted_fetcher, manual_executor, manual_clock, view_factory
    )

    gallery.resize(Size(0.0, 300.0))
    report = gallery.frame()

    assert gallery.tiles == ()
    assert report.wrapped_tiles == 0
    assert report.preload_ran is False
    assert manual_executor.submitted == 0


def test_debug_info_and_shutdown(
    fake_catalog, scripted_fetcher, manual_executor, manual_clock, view_factory
) -> None:
    gallery = _gallery(
        fake_catalog, scripted_fetcher, manual_executor, manual_clock, view_factory
    )
    gallery.resize(SCREEN)
    gallery.frame()

    info = gallery.debug_info()
    assert info["tiles"] == 36
    assert info["frames"] == 1
    assert info["cache"]["in_flight"] == 10

    gallery.shutdown()

    assert gallery.is_closed
    assert all(view.released for view in view_factory.created)
    assert gallery.cache.stats().in_flight == 0
    with pytest.raises(RuntimeError):
        gallery.frame()
    gallery.shutdown()
