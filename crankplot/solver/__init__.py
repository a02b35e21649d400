"""Solver façade: bent-crank kinematics on a shared default solver."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from .bent_crank import BentCrankSolver, default_solver, reset_default_solver
from .forward_kinematics import crank_directions, servo_axes
from .inverse_kinematics import elbow_candidates, in_servo_range
from .model import (
    ForwardResult,
    ForwardSolution,
    InverseResult,
    KinematicModel,
    ServoPair,
    Side,
    SolveStatus,
)

logger = logging.getLogger(__name__)


def set_configuration(updates: Optional[Mapping[str, Any]] = None, **fields: Any) -> None:
    """Merge ``updates`` into the default solver's configuration."""

    keys = sorted(set(updates or {}) | set(fields))
    logger.info("Updating default linkage configuration: %s", ", ".join(map(str, keys)) or "(no fields)")
    default_solver().set_configuration(updates, **fields)


def solve_forward(servo_left: float, servo_right: float) -> ForwardResult:
    return default_solver().solve_forward(servo_left, servo_right)


def forward(servo_left: float, servo_right: float) -> Optional[ForwardSolution]:
    return default_solver().forward(servo_left, servo_right)


def solve_inverse(x: float, y: float) -> InverseResult:
    return default_solver().solve_inverse(x, y)


def inverse(x: float, y: float) -> Optional[ServoPair]:
    return default_solver().inverse(x, y)


__all__ = [
    "BentCrankSolver",
    "ForwardResult",
    "ForwardSolution",
    "InverseResult",
    "KinematicModel",
    "ServoPair",
    "Side",
    "SolveStatus",
    "crank_directions",
    "default_solver",
    "elbow_candidates",
    "forward",
    "in_servo_range",
    "inverse",
    "reset_default_solver",
    "servo_axes",
    "set_configuration",
    "solve_forward",
    "solve_inverse",
]
