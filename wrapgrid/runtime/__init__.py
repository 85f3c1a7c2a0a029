"""Runtime support: configuration, errors, logging, timing and scheduling.

`wrapgrid.runtime.gallery` is imported directly (or via `wrapgrid`) since it
depends on every other subpackage.
"""

from wrapgrid.runtime.config import (
    CameraConfig,
    CatalogConfig,
    GalleryConfig,
    PrefetchConfig,
    ScrollConfig,
    TileConfig,
    get_gallery_config,
    initialize_gallery_config,
    load_gallery_config,
    set_gallery_config,
)
from wrapgrid.runtime.errors import (
    RECOVERABLE_FETCH_ERRORS,
    DegenerateLayoutError,
    FetchError,
    FetchFailedError,
    FetchTimeoutError,
    WrapGridError,
    log_recoverable,
)
from wrapgrid.runtime.logging import configure_logging, setup_logging, shutdown_logging
from wrapgrid.runtime.scheduler import Scheduler
from wrapgrid.runtime.sequence import IndexSequence
from wrapgrid.runtime.time import FrameClock, FrameTime, Throttle

__all__ = [
    "CameraConfig",
    "CatalogConfig",
    "DegenerateLayoutError",
    "FetchError",
    "FetchFailedError",
    "FetchTimeoutError",
    "FrameClock",
    "FrameTime",
    "GalleryConfig",
    "IndexSequence",
    "PrefetchConfig",
    "RECOVERABLE_FETCH_ERRORS",
    "Scheduler",
    "ScrollConfig",
    "Throttle",
    "TileConfig",
    "WrapGridError",
    "configure_logging",
    "get_gallery_config",
    "initialize_gallery_config",
    "load_gallery_config",
    "log_recoverable",
    "set_gallery_config",
    "setup_logging",
    "shutdown_logging",
]
