#!/usr/bin/env python3
"""
Flood fill region search for the pixel art editor

The region is computed against a snapshot of the grid and returned as a
stroke; the grid itself is never modified here.
"""

from typing import Optional

import numpy as np

from .pixeledit_models import PixelGrid
from .pixeledit_utils import Color, Point, debug_log

# 4-connected neighbourhood (right, down, left, up)
NEIGHBOUR_OFFSETS = ((1, 0), (0, 1), (-1, 0), (0, -1))


def flood_fill(
    grid: PixelGrid, seed: Point, target_color: Optional[Color] = None
) -> list[Point]:
    """
    Find the 4-connected region of cells sharing the seed's color

    Args:
        grid: Grid to search
        seed: Starting cell
        target_color: Color the caller expects at the seed. Matching is always
            done against the seed's current color.

    Returns:
        Every cell of the region exactly once, or an empty list if the seed
        is outside the grid
    """
    sx, sy = seed
    if not grid.in_bounds(sx, sy):
        return []

    seed_color = grid.get(sx, sy)
    if target_color is not None and tuple(target_color) != seed_color:
        debug_log(
            "FILL",
            f"Target {tuple(target_color)} differs from seed color {seed_color}, "
            "filling the seed's region",
            "DEBUG",
        )

    # True where a cell still has to be visited
    candidates = np.all(grid.data == np.array(seed_color, dtype=np.uint8), axis=2)

    region: list[Point] = []
    stack = [(sx, sy)]
    candidates[sy, sx] = False

    while stack:
        cx, cy = stack.pop()
        region.append((cx, cy))

        for dx, dy in NEIGHBOUR_OFFSETS:
            nx, ny = cx + dx, cy + dy
            if 0 <= nx < grid.width and 0 <= ny < grid.height and candidates[ny, nx]:
                candidates[ny, nx] = False
                stack.append((nx, ny))

    return region
