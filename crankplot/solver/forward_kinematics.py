"""Forward kinematics: servo angles to pen position."""

from __future__ import annotations

import logging
import math
from typing import Tuple

from ..config import CrankGeometry, LinkageConfig
from ..geometry import Point, circle_intersections, polar_offset
from ..logging_utils import apply_debug_logging
from .model import ForwardResult, ForwardSolution

logger = logging.getLogger(__name__)


def servo_axes(config: LinkageConfig) -> Tuple[Point, Point]:
    half = config.shoulder_separation / 2.0
    return Point(-half, 0.0), Point(half, 0.0)


def crank_directions(geometry: CrankGeometry, servo_left: float, servo_right: float) -> Tuple[float, float]:
    """Effective (virtual link) directions in radians for both cranks.

    Positive servo angles swing the cranks down toward the paper: the left crank
    starts pointing at 180 degrees and the right one at 0 degrees. The phase offset is
    mirrored between the two sides.
    """

    left = math.radians(180.0 - servo_left) - geometry.phase_offset_rad
    right = math.radians(servo_right) + geometry.phase_offset_rad
    return left, right


def solve_forward(
    config: LinkageConfig, geometry: CrankGeometry, servo_left: float, servo_right: float
) -> ForwardResult:
    """Place the pen for the given servo angles.

    No servo range check happens here so out-of-range poses can still be shown. The
    only failures are non-finite angles and main arms that cannot meet.
    """

    if not (math.isfinite(servo_left) and math.isfinite(servo_right)):
        return ForwardResult(
            status="unreachable",
            reason=f"servo angles must be finite (got {servo_left!r}, {servo_right!r})",
        )

    left_axis, right_axis = servo_axes(config)
    theta_left, theta_right = crank_directions(geometry, servo_left, servo_right)
    left_elbow = polar_offset(left_axis, geometry.effective_crank_length, theta_left)
    right_elbow = polar_offset(right_axis, geometry.effective_crank_length, theta_right)

    candidates = circle_intersections(
        left_elbow.x,
        left_elbow.y,
        config.main_arm_length,
        right_elbow.x,
        right_elbow.y,
        config.main_arm_length,
    )
    if candidates is None:
        return ForwardResult(
            status="unreachable",
            reason=(
                f"main arms cannot meet: elbows {math.dist(left_elbow, right_elbow):.3f} apart, "
                f"arm length {config.main_arm_length:g}"
            ),
        )

    # The pen hangs below the elbows; the upper root is the crossed-arm pose that
    # the linkage cannot reach without folding through itself.
    first, second = candidates
    pen = first if first.y >= second.y else second

    return ForwardResult(
        status="ok",
        solution=ForwardSolution(
            pen=pen,
            left_axis=left_axis,
            right_axis=right_axis,
            left_elbow=left_elbow,
            right_elbow=right_elbow,
        ),
    )


apply_debug_logging(globals(), logger=logger)


__all__ = ["crank_directions", "servo_axes", "solve_forward"]
