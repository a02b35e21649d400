"""Turn pen waypoints into a sequence of servo poses."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from .geometry import Point
from .solver import BentCrankSolver, ServoPair

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Waypoint:
    x: float
    y: float
    pen_down: bool = True


@dataclass(frozen=True)
class TraceStep:
    """One planned step.

    ``servos`` is the pose the robot holds after the step. For an invalid step it is
    the last reachable pose (``None`` if nothing was reachable yet).
    """

    target: Point
    pen_down: bool
    servos: Optional[ServoPair]
    valid: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.target.x,
            "y": self.target.y,
            "penDown": self.pen_down,
            "valid": self.valid,
            "servoLeft": None if self.servos is None else self.servos.left,
            "servoRight": None if self.servos is None else self.servos.right,
        }


def plan_trace(solver: BentCrankSolver, waypoints: Iterable[Waypoint]) -> List[TraceStep]:
    """Solve ``waypoints`` in order.

    Reachable waypoints move the robot. Unreachable ones leave it in place and are
    kept as invalid steps while the pen is down; pen-up travel to an unreachable
    point is dropped.
    """

    steps: List[TraceStep] = []
    pose: Optional[ServoPair] = None
    dropped = 0
    for waypoint in waypoints:
        target = Point(float(waypoint.x), float(waypoint.y))
        servos = solver.inverse(target.x, target.y)
        if servos is not None:
            pose = servos
            steps.append(TraceStep(target, waypoint.pen_down, servos, True))
        elif waypoint.pen_down:
            steps.append(TraceStep(target, True, pose, False))
        else:
            dropped += 1
    if dropped:
        logger.debug("Dropped %d unreachable pen-up waypoint(s)", dropped)
    return steps


def trace_summary(steps: Iterable[TraceStep]) -> Dict[str, int]:
    summary = {"total": 0, "valid": 0, "invalid": 0, "pen_up": 0}
    for step in steps:
        summary["total"] += 1
        summary["valid" if step.valid else "invalid"] += 1
        if not step.pen_down:
            summary["pen_up"] += 1
    return summary


def _parse_waypoint(item: Any, index: int) -> Waypoint:
    if isinstance(item, dict):
        if "x" not in item or "y" not in item:
            raise ValueError(f"waypoint {index}: missing x or y")
        pen_down = item.get("penDown", item.get("pen_down", True))
        return Waypoint(float(item["x"]), float(item["y"]), bool(pen_down))
    if isinstance(item, (list, tuple)) and len(item) in (2, 3):
        pen_down = bool(item[2]) if len(item) == 3 else True
        return Waypoint(float(item[0]), float(item[1]), pen_down)
    raise ValueError(f"waypoint {index}: expected [x, y], [x, y, penDown] or an object, got {item!r}")


def waypoints_from_json(data: Any) -> List[Waypoint]:
    """Build waypoints from decoded JSON (a list, or an object with ``points``)."""

    if isinstance(data, dict):
        data = data.get("points")
    if not isinstance(data, list):
        raise ValueError("waypoint data must be a list of points")
    return [_parse_waypoint(item, idx) for idx, item in enumerate(data)]


__all__ = ["TraceStep", "Waypoint", "plan_trace", "trace_summary", "waypoints_from_json"]
