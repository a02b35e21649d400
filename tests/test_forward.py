import math

import pytest

from crankplot.config import LinkageConfig, derive_crank_geometry
from crankplot.solver import BentCrankSolver, crank_directions, servo_axes
from crankplot.solver.forward_kinematics import solve_forward


@pytest.fixture
def solver():
    return BentCrankSolver(LinkageConfig())


def test_zero_pose_is_symmetric(solver):
    solution = solver.forward(0.0, 0.0)

    assert solution is not None
    assert abs(solution.pen.x) < 1e-9
    assert solution.pen.y > 50.0
    assert abs(solution.left_elbow.x + solution.right_elbow.x) < 1e-9
    assert math.isclose(solution.left_elbow.y, solution.right_elbow.y, abs_tol=1e-9)


def test_zero_pose_positions(solver):
    solution = solver.forward(0.0, 0.0)

    assert solution.left_axis == pytest.approx((-70.0, 0.0))
    assert solution.right_axis == pytest.approx((70.0, 0.0))
    # the virtual elbow of a 50/80/120 crank lies 90 out and 80*sin(120) down
    assert solution.left_elbow == pytest.approx((-160.0, 80.0 * math.sin(math.radians(120.0))))
    assert solution.right_elbow == pytest.approx((160.0, 80.0 * math.sin(math.radians(120.0))))
    expected_y = 80.0 * math.sin(math.radians(120.0)) + math.sqrt(180.0 ** 2 - 160.0 ** 2)
    assert solution.pen.y == pytest.approx(expected_y)


def test_pen_is_lower_root_and_arms_have_main_length(solver):
    solution = solver.forward(20.0, 35.0)

    assert solution is not None
    assert math.dist(solution.left_elbow, solution.pen) == pytest.approx(180.0)
    assert math.dist(solution.right_elbow, solution.pen) == pytest.approx(180.0)
    assert solution.pen.y > solution.left_elbow.y
    assert solution.pen.y > solution.right_elbow.y


def test_elbows_sit_at_effective_crank_length(solver):
    solution = solver.forward(12.0, -7.0)
    crank = solver.geometry.effective_crank_length

    assert math.dist(solution.left_axis, solution.left_elbow) == pytest.approx(crank)
    assert math.dist(solution.right_axis, solution.right_elbow) == pytest.approx(crank)


def test_negative_servo_inputs_raise_the_pen(solver):
    neutral = solver.forward(0.0, 0.0)
    raised = solver.forward(-10.0, -10.0)

    assert raised is not None
    assert raised.pen.y < neutral.pen.y


def test_wings_fully_up_cannot_meet(solver):
    result = solver.solve_forward(-30.0, -30.0)

    assert not result.found
    assert result.status == "unreachable"
    assert result.solution is None
    assert "cannot meet" in result.reason
    assert solver.forward(-30.0, -30.0) is None


def test_larger_servo_angles_reach_deeper(solver):
    ys = [solver.forward(angle, angle).pen.y for angle in (0.0, 15.0, 30.0, 45.0, 60.0)]

    assert ys == sorted(ys)


def test_out_of_range_angles_are_still_solved(solver):
    solution = solver.forward(65.0, 65.0)

    assert solution is not None
    assert solution.pen.y > solver.forward(60.0, 60.0).pen.y


def test_crank_directions_mirror_each_other():
    geometry = derive_crank_geometry(LinkageConfig())
    left, right = crank_directions(geometry, 25.0, 25.0)

    assert math.cos(left) == pytest.approx(-math.cos(right))
    assert math.sin(left) == pytest.approx(math.sin(right))


def test_solve_forward_function_matches_solver(solver):
    config = LinkageConfig()
    result = solve_forward(config, derive_crank_geometry(config), 10.0, 20.0)

    assert result.found
    assert result.solution == solver.forward(10.0, 20.0)


def test_servo_axes_follow_shoulder_separation():
    left, right = servo_axes(LinkageConfig(shoulder_separation=100.0))

    assert left == (-50.0, 0.0)
    assert right == (50.0, 0.0)


@pytest.mark.parametrize("left, right", [(float("nan"), 0.0), (0.0, float("inf")), (float("-inf"), float("nan"))])
def test_non_finite_servo_angles_are_rejected(solver, left, right):
    result = solver.solve_forward(left, right)

    assert result.status == "unreachable"
    assert result.solution is None
    assert "finite" in result.reason
