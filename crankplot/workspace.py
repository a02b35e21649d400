"""Reachable-workspace analysis for a configured solver."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import numpy as np
from scipy.optimize import brentq

from .geometry import Point, distance
from .solver import BentCrankSolver

logger = logging.getLogger(__name__)


def reachability_grid(solver: BentCrankSolver, xs: Sequence[float], ys: Sequence[float]) -> np.ndarray:
    """Boolean mask of shape ``(len(ys), len(xs))``; True where ``inverse`` succeeds."""

    xs_arr = np.asarray(xs, dtype=float)
    ys_arr = np.asarray(ys, dtype=float)
    mask = np.zeros((ys_arr.size, xs_arr.size), dtype=bool)
    for row, y in enumerate(ys_arr):
        for col, x in enumerate(xs_arr):
            mask[row, col] = solver.solve_inverse(float(x), float(y)).found
    logger.debug("Reachability grid %s: %d/%d reachable", mask.shape, int(mask.sum()), mask.size)
    return mask


def servo_grid(
    solver: BentCrankSolver, xs: Sequence[float], ys: Sequence[float]
) -> Tuple[np.ndarray, np.ndarray]:
    """Left and right servo angles over a grid, NaN where unreachable."""

    xs_arr = np.asarray(xs, dtype=float)
    ys_arr = np.asarray(ys, dtype=float)
    left = np.full((ys_arr.size, xs_arr.size), np.nan)
    right = np.full_like(left, np.nan)
    for row, y in enumerate(ys_arr):
        for col, x in enumerate(xs_arr):
            servos = solver.inverse(float(x), float(y))
            if servos is not None:
                left[row, col], right[row, col] = servos
    return left, right


def reach_margin(solver: BentCrankSolver, x: float, y: float) -> float:
    """Signed slack of ``(x, y)``: positive inside the workspace, negative outside.

    Outside either arm's annulus this is the annulus slack in mm. Inside both it is
    the smaller of that slack and the servo-range slack in degrees.
    """

    config = solver.config
    crank = solver.geometry.effective_crank_length
    arm = config.main_arm_length
    target = Point(float(x), float(y))

    slacks = []
    for axis in solver.servo_axes:
        d = distance(axis, target)
        slacks.append(min(crank + arm - d, d - abs(crank - arm)))
    geometric = min(slacks)
    if geometric < 0.0:
        return geometric

    result = solver.solve_inverse(target.x, target.y)
    if result.servos is None:
        # concentric or round-off corner of the annulus
        return -1e-12
    lo = config.servo_min_deg - config.servo_tolerance_deg
    hi = config.servo_max_deg + config.servo_tolerance_deg
    angular = min(min(angle - lo, hi - angle) for angle in result.servos)
    return min(geometric, angular)


def _along(origin: Point, angle_rad: float, t: float) -> Point:
    return Point(origin.x + t * math.cos(angle_rad), origin.y + t * math.sin(angle_rad))


def boundary_along_ray(
    solver: BentCrankSolver,
    origin: Tuple[float, float],
    angle_deg: float,
    max_distance: float = 500.0,
    *,
    steps: int = 200,
    xtol: float = 1e-7,
) -> Optional[float]:
    """Distance from ``origin`` to the first workspace boundary along a ray.

    The ray is scanned in ``steps`` increments for the first sign change of
    :func:`reach_margin`, which is then refined with Brent's method. Returns ``None``
    if the ray stays inside the workspace up to ``max_distance``.
    """

    start = Point(float(origin[0]), float(origin[1]))
    if reach_margin(solver, start.x, start.y) <= 0.0:
        raise ValueError(f"ray origin ({start.x:g}, {start.y:g}) is not reachable")

    angle = math.radians(angle_deg)

    def margin(t: float) -> float:
        p = _along(start, angle, t)
        return reach_margin(solver, p.x, p.y)

    step = max_distance / steps
    prev_t = 0.0
    for i in range(1, steps + 1):
        t = i * step
        if margin(t) <= 0.0:
            return float(brentq(margin, prev_t, t, xtol=xtol))
        prev_t = t
    return None


def workspace_outline(
    solver: BentCrankSolver,
    origin: Tuple[float, float],
    rays: int = 72,
    max_distance: float = 500.0,
) -> List[Point]:
    """Boundary points found on ``rays`` evenly spaced rays around ``origin``."""

    start = Point(float(origin[0]), float(origin[1]))
    outline: List[Point] = []
    for i in range(rays):
        angle_deg = 360.0 * i / rays
        reach = boundary_along_ray(solver, start, angle_deg, max_distance)
        if reach is None:
            logger.debug("Ray %.1f deg stays inside the workspace", angle_deg)
            continue
        outline.append(_along(start, math.radians(angle_deg), reach))
    logger.info("Workspace outline: %d/%d rays hit the boundary", len(outline), rays)
    return outline


@dataclass(frozen=True)
class SafeArea:
    """Axis-aligned drawing rectangle, given by its centre and size."""

    center_x: float = 0.0
    center_y: float = 200.0
    width: float = 100.0
    height: float = 100.0

    _KEYS = {
        "SAFE_X": "center_x",
        "SAFE_Y": "center_y",
        "SAFE_W": "width",
        "SAFE_H": "height",
        "center_x": "center_x",
        "center_y": "center_y",
        "width": "width",
        "height": "height",
    }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SafeArea":
        values = {}
        for key, value in data.items():
            field = cls._KEYS.get(str(key))
            if field is not None:
                values[field] = float(value)
        return cls(**values)

    def corners(self) -> List[Point]:
        hw = self.width / 2.0
        hh = self.height / 2.0
        cx, cy = self.center_x, self.center_y
        return [
            Point(cx - hw, cy - hh),
            Point(cx + hw, cy - hh),
            Point(cx + hw, cy + hh),
            Point(cx - hw, cy + hh),
        ]

    def sample(self, n: int = 11) -> List[Point]:
        """``n`` x ``n`` lattice covering the rectangle, edges included."""

        if n < 2:
            return [Point(self.center_x, self.center_y)]
        xs = np.linspace(self.center_x - self.width / 2.0, self.center_x + self.width / 2.0, n)
        ys = np.linspace(self.center_y - self.height / 2.0, self.center_y + self.height / 2.0, n)
        return [Point(float(x), float(y)) for y in ys for x in xs]


def check_safe_area(solver: BentCrankSolver, area: SafeArea, samples: int = 11) -> List[Point]:
    """Sample points of ``area`` that the robot cannot reach (empty when drawable)."""

    points = area.sample(samples)
    unreachable = [p for p in points if not solver.solve_inverse(p.x, p.y).found]
    if unreachable:
        logger.warning(
            "Safe area %s: %d of %d sample points unreachable", area, len(unreachable), len(points)
        )
    else:
        logger.info("Safe area %s is fully reachable", area)
    return unreachable


__all__ = [
    "SafeArea",
    "boundary_along_ray",
    "check_safe_area",
    "reach_margin",
    "reachability_grid",
    "servo_grid",
    "workspace_outline",
]
