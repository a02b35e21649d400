"""Inverse kinematics: pen position to servo angles."""

from __future__ import annotations

import logging
import math
from typing import Optional, Tuple

from ..config import CrankGeometry, LinkageConfig
from ..geometry import Point, circle_intersections, side_of_line
from ..logging_utils import apply_debug_logging
from .forward_kinematics import servo_axes
from .model import InverseResult, ServoPair

logger = logging.getLogger(__name__)


def _wrap_degrees(angle: float) -> float:
    """Map ``angle`` into [-180, 180)."""

    return (angle + 180.0) % 360.0 - 180.0


def _outboard_first_left(axis: Point, pen: Point, candidates: Tuple[Point, Point]) -> Tuple[Point, Point]:
    # outboard is the -x side of the axis-to-pen line
    first, second = candidates
    if side_of_line(axis, pen, first) >= side_of_line(axis, pen, second):
        return first, second
    return second, first


def _outboard_first_right(axis: Point, pen: Point, candidates: Tuple[Point, Point]) -> Tuple[Point, Point]:
    # mirror image of the left side: outboard is the +x side
    first, second = candidates
    if side_of_line(axis, pen, first) <= side_of_line(axis, pen, second):
        return first, second
    return second, first


def _pen_hangs_below(config: LinkageConfig, left_elbow: Point, right_elbow: Point, pen: Point) -> bool:
    """True when ``pen`` is the lower of the two main-arm meeting points.

    That is the root forward kinematics picks, so only these targets round-trip.
    """

    roots = circle_intersections(
        left_elbow.x,
        left_elbow.y,
        config.main_arm_length,
        right_elbow.x,
        right_elbow.y,
        config.main_arm_length,
    )
    if roots is None:
        return False
    first, second = roots
    lower = first if first.y >= second.y else second
    return math.dist(lower, pen) <= 1e-6 * config.main_arm_length


def _servo_angles(
    geometry: CrankGeometry, left_axis: Point, right_axis: Point, left_elbow: Point, right_elbow: Point
) -> ServoPair:
    theta_left = math.atan2(left_elbow.y - left_axis.y, left_elbow.x - left_axis.x)
    theta_right = math.atan2(right_elbow.y - right_axis.y, right_elbow.x - right_axis.x)
    # undo the phase offset, then the per-side direction convention
    return ServoPair(
        _wrap_degrees(180.0 - math.degrees(theta_left + geometry.phase_offset_rad)),
        _wrap_degrees(math.degrees(theta_right - geometry.phase_offset_rad)),
    )


def _range_excess(config: LinkageConfig, angle: float) -> float:
    """Degrees by which ``angle`` misses the tolerated servo range (0 inside)."""

    tol = config.servo_tolerance_deg
    return max(config.servo_min_deg - tol - angle, angle - config.servo_max_deg - tol, 0.0)


def elbow_candidates(
    config: LinkageConfig, geometry: CrankGeometry, axis: Point, pen: Point
) -> Optional[Tuple[Point, Point]]:
    """Possible virtual elbow positions joining ``axis`` to ``pen``."""

    return circle_intersections(
        axis.x,
        axis.y,
        geometry.effective_crank_length,
        pen.x,
        pen.y,
        config.main_arm_length,
    )


def in_servo_range(config: LinkageConfig, angle: float) -> bool:
    tol = config.servo_tolerance_deg
    return config.servo_min_deg - tol <= angle <= config.servo_max_deg + tol




def solve_inverse(config: LinkageConfig, geometry: CrankGeometry, x: float, y: float) -> InverseResult:
    """Find the servo angles that put the pen at ``(x, y)``.

    Each side has two elbow roots. Pairs are tried outboard first and the first one
    whose pen is the lower main-arm root and whose angles are in range wins; which
    root that is depends on the phase offset. If no pair is in range, the closest
    miss is reported as ``out_of_range``. Failures are returned as results, never
    raised.
    """

    pen = Point(float(x), float(y))
    left_axis, right_axis = servo_axes(config)

    left_candidates = elbow_candidates(config, geometry, left_axis, pen)
    if left_candidates is None:
        return InverseResult(
            status="unreachable",
            side="left",
            reason=f"({pen.x:g}, {pen.y:g}) is outside the left arm's annulus",
        )
    right_candidates = elbow_candidates(config, geometry, right_axis, pen)
    if right_candidates is None:
        return InverseResult(
            status="unreachable",
            side="right",
            reason=f"({pen.x:g}, {pen.y:g}) is outside the right arm's annulus",
        )

    left_elbows = _outboard_first_left(left_axis, pen, left_candidates)
    right_elbows = _outboard_first_right(right_axis, pen, right_candidates)

    closest: Optional[ServoPair] = None
    closest_excess = math.inf
    for left_elbow in left_elbows:
        for right_elbow in right_elbows:
            if not _pen_hangs_below(config, left_elbow, right_elbow, pen):
                continue
            servos = _servo_angles(geometry, left_axis, right_axis, left_elbow, right_elbow)
            excess = max(_range_excess(config, servos.left), _range_excess(config, servos.right))
            if excess == 0.0:
                return InverseResult(status="ok", servos=servos)
            if excess < closest_excess:
                closest, closest_excess = servos, excess

    if closest is None:
        return InverseResult(
            status="unreachable",
            reason=f"({pen.x:g}, {pen.y:g}) is only reachable with crossed main arms",
        )

    side = "left" if not in_servo_range(config, closest.left) else "right"
    angle = closest.left if side == "left" else closest.right
    return InverseResult(
        status="out_of_range",
        servos=closest,
        side=side,  # type: ignore[arg-type]
        reason=(
            f"{side} servo angle {angle:.3f} outside "
            f"[{config.servo_min_deg:g}, {config.servo_max_deg:g}]"
        ),
    )


apply_debug_logging(globals(), logger=logger)


__all__ = ["elbow_candidates", "in_servo_range", "solve_inverse"]
