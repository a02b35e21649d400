import math

import numpy as np
import pytest

from crankplot.config import LinkageConfig
from crankplot.solver import BentCrankSolver
from crankplot.workspace import (
    SafeArea,
    boundary_along_ray,
    check_safe_area,
    reach_margin,
    reachability_grid,
    servo_grid,
    workspace_outline,
)


@pytest.fixture
def solver():
    return BentCrankSolver(LinkageConfig())


def _along(origin, angle_deg, t):
    rad = math.radians(angle_deg)
    return origin[0] + t * math.cos(rad), origin[1] + t * math.sin(rad)


def test_reachability_grid_shape_and_values(solver):
    mask = reachability_grid(solver, [0.0], [-200.0, 200.0, 250.0])

    assert mask.shape == (3, 1)
    assert mask.dtype == bool
    assert mask[:, 0].tolist() == [False, True, True]


def test_servo_grid_marks_unreachable_with_nan(solver):
    left, right = servo_grid(solver, [-20.0, 0.0], [-200.0, 250.0])

    assert np.isnan(left[0]).all() and np.isnan(right[0]).all()
    assert not np.isnan(left[1]).any()
    assert left[1, 1] == pytest.approx(right[1, 1])


@pytest.mark.parametrize(
    "point, sign",
    [((0.0, 200.0), 1), ((0.0, -200.0), -1), ((0.0, 400.0), -1), ((70.0, 10.0), -1)],
)
def test_reach_margin_sign(solver, point, sign):
    assert math.copysign(1.0, reach_margin(solver, *point)) == sign


def test_boundary_below_safe_area_is_the_servo_limit(solver):
    origin = (0.0, 200.0)
    reach = boundary_along_ray(solver, origin, 90.0)

    assert reach is not None
    assert 80.0 < reach < 90.0
    inside = solver.inverse(*_along(origin, 90.0, reach - 0.05))
    assert inside is not None
    assert inside.left == pytest.approx(60.0, abs=0.1)
    assert solver.inverse(*_along(origin, 90.0, reach + 0.05)) is None


def test_boundary_search_needs_reachable_origin(solver):
    with pytest.raises(ValueError):
        boundary_along_ray(solver, (0.0, -200.0), 90.0)


def test_boundary_beyond_max_distance_returns_none(solver):
    assert boundary_along_ray(solver, (0.0, 200.0), 90.0, max_distance=10.0) is None


def test_workspace_outline_points_sit_on_the_boundary(solver):
    origin = (0.0, 200.0)
    outline = workspace_outline(solver, origin, rays=8)

    assert len(outline) == 8
    for index, point in enumerate(outline):
        angle = 360.0 * index / 8
        reach = math.hypot(point.x - origin[0], point.y - origin[1])
        assert solver.inverse(*_along(origin, angle, reach - 1e-3)) is not None
        assert solver.inverse(*_along(origin, angle, reach + 1e-3)) is None


def test_safe_area_from_browser_config():
    area = SafeArea.from_mapping({"SAFE_W": 100, "SAFE_H": 100, "SAFE_X": 0, "SAFE_Y": 200, "L_MAIN": 180})

    assert area == SafeArea()
    assert area.corners() == [(-50.0, 150.0), (50.0, 150.0), (50.0, 250.0), (-50.0, 250.0)]


def test_safe_area_sample_includes_edges():
    points = SafeArea(center_x=10.0, center_y=100.0, width=20.0, height=40.0).sample(3)

    assert len(points) == 9
    assert points[0] == pytest.approx((0.0, 80.0))
    assert points[4] == pytest.approx((10.0, 100.0))
    assert points[-1] == pytest.approx((20.0, 120.0))
    assert SafeArea().sample(1) == [(0.0, 200.0)]


def test_default_safe_area_is_drawable(solver):
    assert check_safe_area(solver, SafeArea(), samples=3) == []


def test_safe_area_above_the_robot_is_not_drawable(solver):
    unreachable = check_safe_area(solver, SafeArea(center_y=-200.0), samples=3)

    assert len(unreachable) == 9
