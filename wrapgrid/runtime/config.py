"""Centralized runtime configuration ownership for the wrap gallery."""

from __future__ import annotations

import os
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Mapping

DEFAULT_COVER_URL_TEMPLATE = "https://covers.openlibrary.org/b/isbn/{key}-{size}.jpg"


@dataclass(frozen=True, slots=True)
class TileConfig:
    width: float = 128.0
    height: float = 192.0
    gap: float = 5.0
    buffer: int = 2


@dataclass(frozen=True, slots=True)
class ScrollConfig:
    ease: float = 0.05
    epsilon: float = 0.1
    debounce_seconds: float = 0.1
    wheel_multiplier: float = 0.5
    drag_multiplier: float = 2.0


@dataclass(frozen=True, slots=True)
class PrefetchConfig:
    preload_distance: int = 3
    max_entries: int = 100
    fetch_timeout_seconds: float = 5.0
    eviction_multiplier: int = 4
    preload_interval_seconds: float = 0.05
    max_workers: int = 4


@dataclass(frozen=True, slots=True)
class CameraConfig:
    fov_degrees: float = 45.0
    distance: float = 5.0


@dataclass(frozen=True, slots=True)
class CatalogConfig:
    cover_url_template: str = DEFAULT_COVER_URL_TEMPLATE
    cover_size: str = "M"


@dataclass(frozen=True, slots=True)
class GalleryConfig:
    tile: TileConfig = TileConfig()
    scroll: ScrollConfig = ScrollConfig()
    prefetch: PrefetchConfig = PrefetchConfig()
    camera: CameraConfig = CameraConfig()
    catalog: CatalogConfig = CatalogConfig()
    log_level: str = "INFO"


_GALLERY_CONFIG: ContextVar[GalleryConfig | None] = ContextVar(
    "wrapgrid_gallery_config", default=None
)


def _raw(name: str, *, env: Mapping[str, str] | None = None) -> str | None:
    value = os.getenv(name) if env is None else env.get(name)
    return None if value is None else str(value)


def _int(
    name: str,
    default: int,
    *,
    minimum: int | None = None,
    env: Mapping[str, str] | None = None,
) -> int:
    raw = _raw(name, env=env)
    if raw is None:
        value = int(default)
    else:
        try:
            value = int(raw.strip())
        except ValueError:
            value = int(default)
    if minimum is None:
        return value
    return max(int(minimum), value)


def _float(
    name: str,
    default: float,
    *,
    minimum: float | None = None,
    maximum: float | None = None,
    env: Mapping[str, str] | None = None,
) -> float:
    raw = _raw(name, env=env)
    if raw is None:
        value = float(default)
    else:
        try:
            value = float(raw.strip())
        except ValueError:
            value = float(default)
    if minimum is not None:
        value = max(float(minimum), value)
    if maximum is not None:
        value = min(float(maximum), value)
    return value


def _text(name: str, default: str, *, env: Mapping[str, str] | None = None) -> str:
    raw = _raw(name, env=env)
    if raw is None:
        return str(default)
    value = raw.strip()
    return value if value else str(default)


def _cover_size(raw: str) -> str:
    value = raw.strip().upper()
    if value not in {"S", "M", "L"}:
        return "M"
    return value


def resolve_log_level_name(
    default: str = "INFO", *, env: Mapping[str, str] | None = None
) -> str:
    """Resolve log level with package-prefixed override."""
    value = _raw("WRAPGRID_LOG_LEVEL", env=env)
    if value is None:
        value = _raw("LOG_LEVEL", env=env) or default
    return value.strip().upper() or default


def load_gallery_config(*, env: Mapping[str, str] | None = None) -> GalleryConfig:
    """Load immutable gallery configuration from env vars."""
    tile = TileConfig(
        width=_float("WRAPGRID_TILE_WIDTH", 128.0, minimum=1.0, env=env),
        height=_float("WRAPGRID_TILE_HEIGHT", 192.0, minimum=1.0, env=env),
        gap=_float("WRAPGRID_TILE_GAP", 5.0, minimum=0.0, env=env),
        buffer=_int("WRAPGRID_TILE_BUFFER", 2, minimum=0, env=env),
    )
    scroll = ScrollConfig(
        ease=_float("WRAPGRID_SCROLL_EASE", 0.05, minimum=0.001, maximum=1.0, env=env),
        epsilon=_float("WRAPGRID_SCROLL_EPSILON", 0.1, minimum=0.0, env=env),
        debounce_seconds=_float("WRAPGRID_SCROLL_DEBOUNCE_MS", 100.0, minimum=1.0, env=env)
        / 1000.0,
        wheel_multiplier=_float("WRAPGRID_SCROLL_WHEEL_MULTIPLIER", 0.5, env=env),
        drag_multiplier=_float("WRAPGRID_SCROLL_DRAG_MULTIPLIER", 2.0, env=env),
    )
    prefetch = PrefetchConfig(
        preload_distance=_int("WRAPGRID_PRELOAD_DISTANCE", 3, minimum=0, env=env),
        max_entries=_int("WRAPGRID_CACHE_MAX_ENTRIES", 100, minimum=1, env=env),
        fetch_timeout_seconds=_float("WRAPGRID_FETCH_TIMEOUT_MS", 5000.0, minimum=1.0, env=env)
        / 1000.0,
        eviction_multiplier=_int("WRAPGRID_EVICTION_MULTIPLIER", 4, minimum=1, env=env),
        preload_interval_seconds=_float(
            "WRAPGRID_PRELOAD_INTERVAL_MS", 50.0, minimum=0.0, env=env
        )
        / 1000.0,
        max_workers=_int("WRAPGRID_FETCH_WORKERS", 4, minimum=1, env=env),
    )
    camera = CameraConfig(
        fov_degrees=_float("WRAPGRID_CAMERA_FOV", 45.0, minimum=1.0, maximum=179.0, env=env),
        distance=_float("WRAPGRID_CAMERA_Z", 5.0, minimum=0.001, env=env),
    )
    catalog = CatalogConfig(
        cover_url_template=_text(
            "WRAPGRID_COVER_URL_TEMPLATE", DEFAULT_COVER_URL_TEMPLATE, env=env
        ),
        cover_size=_cover_size(_text("WRAPGRID_COVER_SIZE", "M", env=env)),
    )
    return GalleryConfig(
        tile=tile,
        scroll=scroll,
        prefetch=prefetch,
        camera=camera,
        catalog=catalog,
        log_level=resolve_log_level_name(env=env),
    )


def initialize_gallery_config(*, env: Mapping[str, str] | None = None) -> GalleryConfig:
    config = load_gallery_config(env=env)
    _GALLERY_CONFIG.set(config)
    return config


def set_gallery_config(config: GalleryConfig) -> GalleryConfig:
    _GALLERY_CONFIG.set(config)
    return config


def get_gallery_config() -> GalleryConfig:
    config = _GALLERY_CONFIG.get()
    if config is not None:
        return config
    return initialize_gallery_config()


__all__ = [
    "CameraConfig",
    "CatalogConfig",
    "DEFAULT_COVER_URL_TEMPLATE",
    "GalleryConfig",
    "PrefetchConfig",
    "ScrollConfig",
    "TileConfig",
    "get_gallery_config",
    "initialize_gallery_config",
    "load_gallery_config",
    "resolve_log_level_name",
    "set_gallery_config",
]
