"""Pixel-space to render-space mapping helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass

from wrapgrid.layout.geometry import Size, Vec2


@dataclass(frozen=True, slots=True)
class RenderSpace:
    """Affine map between screen pixels and render-space units.

    Render space is centered on the viewport with y pointing up; pixel space
    has its origin at the top-left corner with y pointing down.
    """

    screen: Size
    viewport: Size

    @classmethod
    def from_camera(
        cls, screen: Size, *, fov_degrees: float = 45.0, distance: float = 5.0
    ) -> RenderSpace:
        """Viewport visible by a perspective camera at `distance` from the plane."""
        if screen.is_degenerate:
            return cls(screen=screen, viewport=Size(0.0, 0.0))
        fov = math.radians(fov_degrees)
        height = 2.0 * math.tan(fov / 2.0) * distance
        width = height * (screen.width / screen.height)
        return cls(screen=screen, viewport=Size(width, height))

    @classmethod
    def from_pixel_ratio(cls, screen: Size, pixel_ratio: float = 1.0) -> RenderSpace:
        return cls(
            screen=screen,
            viewport=Size(screen.width * pixel_ratio, screen.height * pixel_ratio),
        )

    @property
    def is_degenerate(self) -> bool:
        return self.screen.is_degenerate or self.viewport.is_degenerate

    @property
    def scale(self) -> Vec2:
        """Render units per pixel on each axis (zero when degenerate)."""
        if self.is_degenerate:
            return Vec2(0.0, 0.0)
        return Vec2(
            self.viewport.width / self.screen.width,
            self.viewport.height / self.screen.height,
        )

    def size_to_render(self, size: Size) -> Size:
        scale = self.scale
        return Size(size.width * scale.x, size.height * scale.y)

    def size_to_pixels(self, size: Size) -> Size:
        if self.is_degenerate:
            return Size(0.0, 0.0)
        scale = self.scale
        return Size(size.width / scale.x, size.height / scale.y)

    def point_to_pixels(self, point: Vec2) -> Vec2:
        """Render-space point to screen pixel coordinates."""
        if self.is_degenerate:
            return Vec2(0.0, 0.0)
        return Vec2(
            point.x / self.viewport.width * self.screen.width + self.screen.width / 2.0,
            -point.y / self.viewport.height * self.screen.height + self.screen.height / 2.0,
        )

    def screen_to_normalized(self, x: float, y: float) -> Vec2:
        """Pixel coordinates to normalized device coordinates in [-1, 1]."""
        if self.screen.is_degenerate:
            return Vec2(0.0, 0.0)
        return Vec2(
            (x / self.screen.width) * 2.0 - 1.0,
            -((y / self.screen.height) * 2.0 - 1.0),
        )
