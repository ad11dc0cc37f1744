#!/usr/bin/env python3
"""
Shape rasterizers for the pixel art editor
Line, circle and ellipse outlines as lists of grid cells
"""

from .pixeledit_exceptions import ValidationError
from .pixeledit_utils import Point, unique_points


def line_points(start: Point, end: Point) -> list[Point]:
    """Get all points on a line using Bresenham's algorithm"""
    x0, y0 = start
    x1, y1 = end
    points = []

    dx = abs(x1 - x0)
    dy = abs(y1 - y0)

    # Determine direction
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1

    err = dx - dy
    x, y = x0, y0

    while True:
        points.append((x, y))

        if x == x1 and y == y1:
            break

        e2 = 2 * err

        if e2 > -dy:
            err -= dy
            x += sx

        if e2 < dx:
            err += dx
            y += sy

    return points


def circle_points(radius: int, center: Point) -> list[Point]:
    """
    Get the outline of a circle using the midpoint algorithm
    One octant is computed and mirrored eight ways
    """
    if radius < 0:
        raise ValidationError(f"Circle radius must not be negative, got {radius}")
    cx, cy = center
    if radius == 0:
        return [(cx, cy)]

    octant = [(0, radius)]
    x, y = 0, radius
    p = 1 - radius

    while x < y:
        x += 1
        if p < 0:
            p += 2 * x + 1
        else:
            y -= 1
            p += 2 * x + 1 - 2 * y
        octant.append((x, y))

    mirrored = []
    for sign_x, sign_y, swap in (
        (1, 1, False), (1, 1, True), (-1, 1, True), (-1, 1, False),
        (-1, -1, False), (-1, -1, True), (1, -1, True), (1, -1, False),
    ):
        for ox, oy in octant:
            if swap:
                ox, oy = oy, ox
            mirrored.append((cx + sign_x * ox, cy + sign_y * oy))

    return unique_points(mirrored)


def ellipse_points(radius_x: int, radius_y: int, center: Point) -> list[Point]:
    """
    Get the outline of an axis-aligned ellipse using the midpoint algorithm
    One quadrant is computed and mirrored four ways
    """
    if radius_x < 0 or radius_y < 0:
        raise ValidationError(
            f"Ellipse radii must not be negative, got {radius_x}x{radius_y}"
        )
    cx, cy = center
    if radius_y == 0:
        return [(cx + dx, cy) for dx in range(-radius_x, radius_x + 1)]

    rx2 = radius_x * radius_x
    ry2 = radius_y * radius_y
    x, y = 0, radius_y
    quadrant = [(x, y)]

    # Region 1: slope shallower than -1
    p1 = ry2 - rx2 * radius_y + 0.25 * rx2
    while ry2 * x < rx2 * y:
        x += 1
        if p1 < 0:
            p1 += 2 * ry2 * x + ry2
        else:
            y -= 1
            p1 += 2 * ry2 * x - 2 * rx2 * y + ry2
        quadrant.append((x, y))

    # Region 2: slope steeper than -1
    p2 = ry2 * (x + 0.5) ** 2 + rx2 * (y - 1) ** 2 - rx2 * ry2
    while y > 0:
        y -= 1
        if p2 > 0:
            p2 += rx2 - 2 * rx2 * y
        else:
            x += 1
            p2 += 2 * ry2 * x - 2 * rx2 * y + rx2
        quadrant.append((x, y))

    mirrored = []
    for sign_x, sign_y in ((1, 1), (-1, 1), (-1, -1), (1, -1)):
        for qx, qy in quadrant:
            mirrored.append((cx + sign_x * qx, cy + sign_y * qy))

    return unique_points(mirrored)
