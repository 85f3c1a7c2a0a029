"""Public collaborator contracts for the wrap runtime."""

from wrapgrid.api.content import Catalog, ImageFetcher
from wrapgrid.api.logging import LoggingConfig
from wrapgrid.api.render import DisplaySlot, Placeable, TileView, TileViewFactory

__all__ = [
    "Catalog",
    "DisplaySlot",
    "ImageFetcher",
    "LoggingConfig",
    "Placeable",
    "TileView",
    "TileViewFactory",
]
