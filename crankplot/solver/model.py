"""Value objects exchanged with the kinematic solvers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional, Protocol, Literal

from ..geometry import Point

SolveStatus = Literal["ok", "unreachable", "out_of_range"]
Side = Literal["left", "right"]


class ServoPair(NamedTuple):
    """Left and right servo angles in degrees."""

    left: float
    right: float


@dataclass(frozen=True)
class ForwardSolution:
    """Pen position plus the joint positions needed to draw the mechanism."""

    pen: Point
    left_axis: Point
    right_axis: Point
    left_elbow: Point
    right_elbow: Point


@dataclass(frozen=True)
class ForwardResult:
    status: SolveStatus
    solution: Optional[ForwardSolution] = None
    reason: str = ""

    @property
    def found(self) -> bool:
        return self.status == "ok"


@dataclass(frozen=True)
class InverseResult:
    """Outcome of an inverse solve.

    ``servos`` is set for ``ok`` and also for ``out_of_range``, where it holds the
    geometric solution that the servo limits rejected. ``side`` names the arm that
    failed, if any.
    """

    status: SolveStatus
    servos: Optional[ServoPair] = None
    side: Optional[Side] = None
    reason: str = ""

    @property
    def found(self) -> bool:
        return self.status == "ok"


class KinematicModel(Protocol):
    """Forward/inverse surface shared by every kinematic mode."""

    def forward(self, servo_left: float, servo_right: float) -> Optional[ForwardSolution]:
        ...

    def inverse(self, x: float, y: float) -> Optional[ServoPair]:
        ...

    def solve_forward(self, servo_left: float, servo_right: float) -> ForwardResult:
        ...

    def solve_inverse(self, x: float, y: float) -> InverseResult:
        ...


__all__ = [
    "ForwardResult",
    "ForwardSolution",
    "InverseResult",
    "KinematicModel",
    "ServoPair",
    "Side",
    "SolveStatus",
]
