"""Stateful façade over the forward and inverse bent-crank solvers."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from ..config import (
    CrankGeometry,
    LinkageConfig,
    derive_crank_geometry,
    get_default_config,
    merge_config,
)
from ..geometry import Point
from .forward_kinematics import servo_axes, solve_forward
from .inverse_kinematics import solve_inverse
from .model import ForwardResult, ForwardSolution, InverseResult, ServoPair

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    config: LinkageConfig
    geometry: CrankGeometry


class BentCrankSolver:
    """Kinematics of one rigid bent-crank five-bar drawing robot.

    The configuration and its derived crank geometry travel together as one immutable
    snapshot. Reconfiguring builds and validates a new snapshot first and then swaps
    it in, so a solve never sees a half-applied change and a rejected configuration
    leaves the solver as it was.
    """

    def __init__(self, config: Optional[LinkageConfig] = None) -> None:
        self._lock = threading.Lock()
        self._pending: LinkageConfig = config if config is not None else get_default_config()
        self._snapshot: Optional[_Snapshot] = None
        if config is not None:
            self._snapshot = _Snapshot(config, derive_crank_geometry(config))

    def _current(self) -> _Snapshot:
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot
        with self._lock:
            if self._snapshot is None:
                logger.debug("Deriving crank geometry on first use")
                self._snapshot = _Snapshot(self._pending, derive_crank_geometry(self._pending))
            return self._snapshot

    @property
    def config(self) -> LinkageConfig:
        return self._current().config

    @property
    def geometry(self) -> CrankGeometry:
        return self._current().geometry

    @property
    def servo_axes(self) -> Tuple[Point, Point]:
        return servo_axes(self.config)

    def _install(self, config: LinkageConfig) -> _Snapshot:
        # caller holds self._lock
        snapshot = _Snapshot(config, derive_crank_geometry(config))
        self._pending = config
        self._snapshot = snapshot
        return snapshot

    def _log_reconfigured(self, snapshot: _Snapshot) -> None:
        logger.info(
            "Linkage reconfigured: effective crank %.3f, phase offset %.3f deg",
            snapshot.geometry.effective_crank_length,
            snapshot.geometry.phase_offset_deg,
        )

    def replace_configuration(self, config: LinkageConfig) -> None:
        with self._lock:
            snapshot = self._install(config)
        self._log_reconfigured(snapshot)

    def set_configuration(self, updates: Optional[Mapping[str, Any]] = None, **fields: Any) -> None:
        """Merge ``updates`` (and keyword fields) into the current configuration."""

        merged = dict(updates or {})
        merged.update(fields)
        with self._lock:
            base = self._snapshot.config if self._snapshot is not None else self._pending
            snapshot = self._install(merge_config(base, merged))
        self._log_reconfigured(snapshot)

    def solve_forward(self, servo_left: float, servo_right: float) -> ForwardResult:
        snapshot = self._current()
        return solve_forward(snapshot.config, snapshot.geometry, servo_left, servo_right)

    def forward(self, servo_left: float, servo_right: float) -> Optional[ForwardSolution]:
        return self.solve_forward(servo_left, servo_right).solution

    def solve_inverse(self, x: float, y: float) -> InverseResult:
        snapshot = self._current()
        return solve_inverse(snapshot.config, snapshot.geometry, x, y)

    def inverse(self, x: float, y: float) -> Optional[ServoPair]:
        result = self.solve_inverse(x, y)
        return result.servos if result.found else None

    def forward_many(self, pairs: Iterable[Tuple[float, float]]) -> List[ForwardResult]:
        snapshot = self._current()
        return [solve_forward(snapshot.config, snapshot.geometry, left, right) for left, right in pairs]

    def inverse_many(self, points: Iterable[Tuple[float, float]]) -> List[InverseResult]:
        snapshot = self._current()
        return [solve_inverse(snapshot.config, snapshot.geometry, x, y) for x, y in points]

    def __repr__(self) -> str:
        return f"BentCrankSolver(config={self.config!r})"


_DEFAULT_SOLVER: Optional[BentCrankSolver] = None
_DEFAULT_SOLVER_LOCK = threading.Lock()


def default_solver() -> BentCrankSolver:
    """Process-wide solver used by the module-level helpers."""

    global _DEFAULT_SOLVER
    with _DEFAULT_SOLVER_LOCK:
        if _DEFAULT_SOLVER is None:
            _DEFAULT_SOLVER = BentCrankSolver()
        return _DEFAULT_SOLVER


def reset_default_solver() -> None:
    global _DEFAULT_SOLVER
    with _DEFAULT_SOLVER_LOCK:
        _DEFAULT_SOLVER = None


__all__ = ["BentCrankSolver", "default_solver", "reset_default_solver"]
