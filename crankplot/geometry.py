"""Planar geometry primitives shared by the solvers.

The frame is the drawing frame of the robot: origin midway between the two servo
axes, +x along the axis line, +y pointing down toward the paper.
"""

from __future__ import annotations

import math
from typing import NamedTuple, Optional, Tuple


class Point(NamedTuple):
    x: float
    y: float


def _vec2(a: Point, b: Point) -> Tuple[float, float]:
    return b[0] - a[0], b[1] - a[1]


def _cross2(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    return a[0] * b[1] - a[1] * b[0]


def distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def polar_offset(origin: Point, length: float, angle_rad: float) -> Point:
    """Point ``length`` away from ``origin`` in direction ``angle_rad``."""

    return Point(origin[0] + length * math.cos(angle_rad), origin[1] + length * math.sin(angle_rad))


def side_of_line(origin: Point, through: Point, point: Point) -> float:
    """Signed area test of ``point`` against the directed line ``origin -> through``.

    With +y down, a positive value means ``point`` lies to the right of the line
    when looking along it on screen (e.g. on the -x side of a line pointing down).
    """

    return _cross2(_vec2(origin, through), _vec2(origin, point))


def circle_intersections(
    x0: float, y0: float, r0: float, x1: float, y1: float, r1: float
) -> Optional[Tuple[Point, Point]]:
    """Intersect two circles given by centre and radius.

    Returns exactly two points (equal when the circles are tangent) or ``None`` when
    the circles are too far apart, when one contains the other, or when they are
    concentric. Identical circles count as concentric, and so do centres that are
    not finite. Radii must be finite and positive.
    """

    if not (0.0 < r0 < math.inf and 0.0 < r1 < math.inf):
        raise ValueError("circle radii must be finite and positive")

    dx = x1 - x0
    dy = y1 - y0
    d = math.hypot(dx, dy)
    if not math.isfinite(d) or d == 0.0:
        return None
    if d > r0 + r1:
        return None
    if d < abs(r0 - r1):
        return None

    # distance from centre 0 to the radical line, then half chord
    a = (r0 * r0 - r1 * r1 + d * d) / (2.0 * d)
    h_sq = r0 * r0 - a * a
    # tangency can leave a tiny negative through round-off
    h = math.sqrt(h_sq) if h_sq > 0.0 else 0.0

    ux = dx / d
    uy = dy / d
    mx = x0 + a * ux
    my = y0 + a * uy
    return (
        Point(mx + h * uy, my - h * ux),
        Point(mx - h * uy, my + h * ux),
    )


__all__ = [
    "Point",
    "circle_intersections",
    "distance",
    "polar_offset",
    "side_of_line",
]
