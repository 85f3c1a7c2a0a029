"""Cyclic index-space helpers for preload prediction and eviction."""

from __future__ import annotations

from wrapgrid.motion.scroll import HorizontalDirection, ScrollDirection, VerticalDirection


def cyclic_distance(a: int, b: int, total: int) -> int:
    """Shortest distance between two indices on a ring of `total` slots."""
    if total <= 0:
        return abs(a - b)
    delta = (a % total) - (b % total)
    return min(abs(delta), abs(delta + total), abs(delta - total))


def ring_neighbors(center: int, radius: int, total: int) -> set[int]:
    """Indices within `radius` of `center` on the ring, excluding `center`."""
    if total <= 0:
        return set()
    origin = center % total
    neighbors = {(origin + offset) % total for offset in range(-radius, radius + 1)}
    neighbors.discard(origin)
    return neighbors


def directional_run(center: int, length: int, step: int, total: int) -> set[int]:
    """`length` indices walked from `center` in `step` (+1/-1) order."""
    if total <= 0 or step == 0:
        return set()
    origin = center % total
    run = {(origin + step * offset) % total for offset in range(1, length + 1)}
    run.discard(origin)
    return run


def preload_candidates(
    center: int,
    total: int,
    radius: int,
    direction: ScrollDirection | None = None,
) -> set[int]:
    """Neighbors within `radius`, extended by `2 * radius` along each scrolling axis."""
    candidates = ring_neighbors(center, radius, total)
    if direction is None:
        return candidates
    extended = radius * 2
    step_x = 1 if direction.x is HorizontalDirection.RIGHT else -1
    step_y = 1 if direction.y is VerticalDirection.DOWN else -1
    candidates |= directional_run(center, extended, step_x, total)
    candidates |= directional_run(center, extended, step_y, total)
    return candidates
