import json
import math

import pytest

from crankplot.config import (
    ConfigurationError,
    LinkageConfig,
    config_to_dict,
    derive_crank_geometry,
    get_default_config,
    load_config,
    merge_config,
    set_default_config,
    validate_config,
)


def test_defaults_match_reference_robot():
    config = LinkageConfig()

    assert config.shoulder_separation == 140.0
    assert config.body_arm_length == 50.0
    assert config.upper_arm_length == 80.0
    assert config.bend_angle_deg == 120.0
    assert config.main_arm_length == 180.0
    assert (config.servo_min_deg, config.servo_max_deg) == (-30.0, 60.0)


def test_default_crank_geometry():
    geometry = derive_crank_geometry(LinkageConfig())

    assert math.isclose(geometry.effective_crank_length, math.sqrt(12900.0), rel_tol=1e-12)
    expected_phase = math.asin(80.0 * math.sin(math.radians(120.0)) / math.sqrt(12900.0))
    assert math.isclose(geometry.phase_offset_rad, expected_phase, rel_tol=1e-12)
    assert geometry.phase_offset_deg == pytest.approx(37.589, abs=1e-3)


def test_phase_offset_handles_obtuse_servo_angle():
    # short body arm, long upper arm, sharp bend: the angle at the servo exceeds 90
    config = LinkageConfig(body_arm_length=20.0, upper_arm_length=100.0, bend_angle_deg=60.0)
    geometry = derive_crank_geometry(config)

    length = geometry.effective_crank_length
    cos_at_servo = (20.0 ** 2 + length ** 2 - 100.0 ** 2) / (2 * 20.0 * length)
    assert cos_at_servo < 0.0
    assert math.isclose(geometry.phase_offset_rad, math.acos(cos_at_servo), rel_tol=1e-9)


@pytest.mark.parametrize(
    "updates",
    [
        {"shoulderSeparation": 150, "mainArmLength": 200},
        {"SHOULDER_SEP": 150, "L_MAIN": 200},
        {"shoulder_separation": 150.0, "main_arm_length": 200.0},
    ],
)
def test_merge_accepts_all_key_styles(updates):
    merged = merge_config(LinkageConfig(), updates)

    assert merged.shoulder_separation == 150.0
    assert merged.main_arm_length == 200.0
    assert merged.body_arm_length == 50.0


def test_merge_ignores_unknown_keys():
    base = LinkageConfig()
    merged = merge_config(base, {"MODE": "linear_parallel", "OriginL": -100, "SAFE_W": 100})

    assert merged == base


def test_merge_rejects_non_numeric_values():
    with pytest.raises(ConfigurationError):
        merge_config(LinkageConfig(), {"bodyArmLength": "long"})
    with pytest.raises(ConfigurationError):
        merge_config(LinkageConfig(), {"bodyArmLength": True})


@pytest.mark.parametrize(
    "fields, message_part",
    [
        ({"body_arm_length": 0.0}, "body_arm_length"),
        ({"main_arm_length": -5.0}, "main_arm_length"),
        ({"shoulder_separation": float("nan")}, "shoulder_separation"),
        ({"bend_angle_deg": 0.0}, "bend_angle_deg"),
        ({"bend_angle_deg": 180.0}, "bend_angle_deg"),
        ({"servo_min_deg": 60.0, "servo_max_deg": -30.0}, "servo range"),
        ({"servo_tolerance_deg": -0.1}, "servo_tolerance_deg"),
    ],
)
def test_validate_rejects_degenerate_linkages(fields, message_part):
    config = LinkageConfig(**fields)

    with pytest.raises(ConfigurationError) as exc:
        validate_config(config)

    assert message_part in str(exc.value)


def test_derive_rejects_straight_equal_crank():
    config = LinkageConfig(body_arm_length=50.0, upper_arm_length=50.0, bend_angle_deg=180.0)

    with pytest.raises(ConfigurationError):
        derive_crank_geometry(config)


def test_configuration_error_is_value_error():
    assert issubclass(ConfigurationError, ValueError)


def test_load_config_merges_over_defaults(tmp_path):
    path = tmp_path / "robot.json"
    path.write_text(json.dumps({"L_MAIN": 190, "SAFE_Y": 210}), encoding="utf-8")

    config = load_config(path)

    assert config.main_arm_length == 190.0
    assert config.shoulder_separation == 140.0


@pytest.mark.parametrize("text", ["[1, 2]", "{not json"])
def test_load_config_rejects_bad_files(tmp_path, text):
    path = tmp_path / "robot.json"
    path.write_text(text, encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(path)


def test_default_config_can_be_replaced():
    original = get_default_config()
    try:
        custom = LinkageConfig(main_arm_length=200.0)
        set_default_config(custom)
        assert get_default_config() == custom
        with pytest.raises(ConfigurationError):
            set_default_config(LinkageConfig(bend_angle_deg=200.0))
        assert get_default_config() == custom
    finally:
        set_default_config(original)


def test_config_to_dict_round_trips():
    config = LinkageConfig(main_arm_length=175.0)

    assert LinkageConfig(**config_to_dict(config)) == config
