"""Infinite wrapping tile gallery runtime."""

from wrapgrid.layout.geometry import Size, Vec2
from wrapgrid.prefetch.catalog import BookCatalog
from wrapgrid.prefetch.fetcher import UrllibImageFetcher
from wrapgrid.runtime.config import GalleryConfig, load_gallery_config
from wrapgrid.runtime.gallery import FrameReport, InfiniteGallery

__all__ = [
    "BookCatalog",
    "FrameReport",
    "GalleryConfig",
    "InfiniteGallery",
    "Size",
    "UrllibImageFetcher",
    "Vec2",
    "load_gallery_config",
]
