"""Cache payloads: fetched image bytes or a synthesized solid-color fallback."""

from __future__ import annotations

import colorsys
import random
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

import numpy as np

FALLBACK_SATURATION = 0.70
FALLBACK_LIGHTNESS = 0.50


class PayloadKind(Enum):
    REAL = "real"
    FALLBACK = "fallback"


@dataclass(frozen=True, slots=True)
class RealPayload:
    """Encoded image bytes as returned by the fetcher."""

    data: bytes
    url: str = ""

    @property
    def kind(self) -> PayloadKind:
        return PayloadKind.REAL


@dataclass(frozen=True, slots=True)
class FallbackPayload:
    """Solid-color substitute shown when real content is unavailable."""

    rgb: tuple[int, int, int]
    width: int
    height: int
    hue: float = 0.0

    @property
    def kind(self) -> PayloadKind:
        return PayloadKind.FALLBACK

    def bitmap(self) -> np.ndarray:
        """RGBA `uint8` image of shape (height, width, 4)."""
        pixels = np.empty((self.height, self.width, 4), dtype=np.uint8)
        pixels[..., 0] = self.rgb[0]
        pixels[..., 1] = self.rgb[1]
        pixels[..., 2] = self.rgb[2]
        pixels[..., 3] = 255
        return pixels


Payload: TypeAlias = RealPayload | FallbackPayload


@dataclass(frozen=True, slots=True)
class CacheEntry:
    key: int
    payload: Payload

    @property
    def kind(self) -> PayloadKind:
        return self.payload.kind

    @property
    def is_fallback(self) -> bool:
        return self.payload.kind is PayloadKind.FALLBACK


def hsl_to_rgb(hue: float, saturation: float, lightness: float) -> tuple[int, int, int]:
    """Convert HSL (hue in degrees, s/l in [0, 1]) to 8-bit RGB."""
    r, g, b = colorsys.hls_to_rgb((hue % 360.0) / 360.0, lightness, saturation)
    return round(r * 255), round(g * 255), round(b * 255)


def make_fallback(
    width: int,
    height: int,
    *,
    rng: random.Random | None = None,
    hue: float | None = None,
) -> FallbackPayload:
    """Random-hue fallback sized like a tile."""
    resolved_hue = hue if hue is not None else (rng or random).uniform(0.0, 360.0)
    return FallbackPayload(
        rgb=hsl_to_rgb(resolved_hue, FALLBACK_SATURATION, FALLBACK_LIGHTNESS),
        width=max(1, int(width)),
        height=max(1, int(height)),
        hue=resolved_hue,
    )
