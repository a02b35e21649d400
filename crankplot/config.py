"""Linkage configuration and the derived bent-crank geometry."""

from __future__ import annotations

import dataclasses
import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when a linkage configuration cannot describe a real mechanism."""


@dataclass(frozen=True)
class LinkageConfig:
    """Physical parameters of the bent-crank five-bar linkage (lengths in mm)."""

    shoulder_separation: float = 140.0
    body_arm_length: float = 50.0
    upper_arm_length: float = 80.0
    bend_angle_deg: float = 120.0
    main_arm_length: float = 180.0
    servo_min_deg: float = -30.0
    servo_max_deg: float = 60.0
    servo_tolerance_deg: float = 0.1

    def __post_init__(self) -> None:
        for field in dataclasses.fields(self):
            object.__setattr__(self, field.name, float(getattr(self, field.name)))


@dataclass(frozen=True)
class CrankGeometry:
    """The bent crank seen as one straight virtual link.

    ``phase_offset_rad`` is the angle between the body arm and the line from the servo
    axis to the crank's free end (the virtual elbow).
    """

    effective_crank_length: float
    phase_offset_rad: float

    @property
    def phase_offset_deg(self) -> float:
        return math.degrees(self.phase_offset_rad)


_KEY_ALIASES: Dict[str, str] = {
    "shoulderSeparation": "shoulder_separation",
    "bodyArmLength": "body_arm_length",
    "upperArmLength": "upper_arm_length",
    "bendAngleDegrees": "bend_angle_deg",
    "mainArmLength": "main_arm_length",
    "servoMinDegrees": "servo_min_deg",
    "servoMaxDegrees": "servo_max_deg",
    "servoToleranceDegrees": "servo_tolerance_deg",
    "SHOULDER_SEP": "shoulder_separation",
    "L_BODY": "body_arm_length",
    "L_BLUE": "upper_arm_length",
    "A_BEND": "bend_angle_deg",
    "L_MAIN": "main_arm_length",
}

_FIELD_NAMES = frozenset(field.name for field in dataclasses.fields(LinkageConfig))


def _canonical_key(key: str) -> Optional[str]:
    if key in _FIELD_NAMES:
        return key
    return _KEY_ALIASES.get(key)


def _as_number(key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"{key} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{key} must be a number, got {value!r}") from exc


def merge_config(base: LinkageConfig, updates: Optional[Mapping[str, Any]] = None) -> LinkageConfig:
    """Return ``base`` with the recognised fields of ``updates`` applied.

    Keys may be snake_case field names, camelCase interface names or the upper-case
    names used by browser-side configs. Anything else is ignored.
    """

    if not updates:
        return base

    changes: Dict[str, float] = {}
    ignored = []
    for key, value in updates.items():
        canonical = _canonical_key(str(key))
        if canonical is None:
            ignored.append(key)
            continue
        changes[canonical] = _as_number(str(key), value)

    if ignored:
        logger.debug("Ignoring configuration keys not used by the linkage: %s", sorted(map(str, ignored)))
    if not changes:
        return base
    return dataclasses.replace(base, **changes)


def validate_config(config: LinkageConfig) -> None:
    lengths = {
        "shoulder_separation": config.shoulder_separation,
        "body_arm_length": config.body_arm_length,
        "upper_arm_length": config.upper_arm_length,
        "main_arm_length": config.main_arm_length,
    }
    for name, value in lengths.items():
        if not math.isfinite(value) or value <= 0.0:
            raise ConfigurationError(f"{name} must be a finite positive length (got {value})")

    bend = config.bend_angle_deg
    if not math.isfinite(bend) or not 0.0 < bend < 180.0:
        raise ConfigurationError(f"bend_angle_deg must lie strictly between 0 and 180 (got {bend})")

    lo, hi, tol = config.servo_min_deg, config.servo_max_deg, config.servo_tolerance_deg
    if not (math.isfinite(lo) and math.isfinite(hi)) or lo >= hi:
        raise ConfigurationError(f"servo range [{lo}, {hi}] is empty")
    if not math.isfinite(tol) or tol < 0.0:
        raise ConfigurationError(f"servo_tolerance_deg must be non-negative (got {tol})")


def derive_crank_geometry(config: LinkageConfig) -> CrankGeometry:
    """Collapse the bent crank into its virtual straight link.

    Law of Cosines for the length; the phase offset is the crank triangle's angle at
    the servo axis. The ``atan2`` form agrees with the Law-of-Sines
    ``asin(upper * sin(bend) / length)`` while that angle is acute and stays correct
    when it is obtuse.
    """

    validate_config(config)

    body = config.body_arm_length
    upper = config.upper_arm_length
    bend = math.radians(config.bend_angle_deg)

    length_sq = body * body + upper * upper - 2.0 * body * upper * math.cos(bend)
    length = math.sqrt(length_sq) if length_sq > 0.0 else 0.0
    if not math.isfinite(length) or length <= 0.0:
        raise ConfigurationError(
            f"crank triangle is degenerate (body={body}, upper={upper}, bend={config.bend_angle_deg})"
        )

    phase = math.atan2(upper * math.sin(bend), body - upper * math.cos(bend))
    if not math.isfinite(phase):
        raise ConfigurationError("crank phase offset is undefined for this configuration")

    return CrankGeometry(effective_crank_length=length, phase_offset_rad=phase)


def load_config(path: Union[str, Path], base: Optional[LinkageConfig] = None) -> LinkageConfig:
    """Read a JSON object from ``path`` and merge it over ``base`` (defaults)."""

    with open(path, encoding="utf-8") as fin:
        try:
            data = json.load(fin)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"{path}: invalid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: expected a JSON object")
    config = merge_config(base or get_default_config(), data)
    validate_config(config)
    logger.info("Loaded linkage configuration from %s", path)
    return config


def config_to_dict(config: LinkageConfig) -> Dict[str, float]:
    return dataclasses.asdict(config)


_DEFAULT_CONFIG = LinkageConfig()


def get_default_config() -> LinkageConfig:
    return _DEFAULT_CONFIG


def set_default_config(config: LinkageConfig) -> None:
    global _DEFAULT_CONFIG
    validate_config(config)
    _DEFAULT_CONFIG = config


__all__ = [
    "ConfigurationError",
    "CrankGeometry",
    "LinkageConfig",
    "config_to_dict",
    "derive_crank_geometry",
    "get_default_config",
    "load_config",
    "merge_config",
    "set_default_config",
    "validate_config",
]
