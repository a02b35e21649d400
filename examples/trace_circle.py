"""Example pipeline: plan servo poses for a circle inside the drawing area."""

import math

from crankplot import BentCrankSolver, Waypoint, plan_trace, trace_summary

CENTER = (0.0, 200.0)
RADIUS = 50.0
STEPS = 36


def circle_waypoints():
    cx, cy = CENTER
    yield Waypoint(cx + RADIUS, cy, pen_down=False)
    for i in range(STEPS + 1):
        angle = 2.0 * math.pi * i / STEPS
        yield Waypoint(cx + RADIUS * math.cos(angle), cy + RADIUS * math.sin(angle))


def main() -> None:
    solver = BentCrankSolver()
    steps = plan_trace(solver, circle_waypoints())

    print(f"Summary: {trace_summary(steps)}")
    for step in steps:
        pose = "-" if step.servos is None else f"L={step.servos.left:7.2f} R={step.servos.right:7.2f}"
        flag = "" if step.valid else "  (unreachable)"
        print(f"  ({step.target.x:7.2f}, {step.target.y:7.2f}) pen={'down' if step.pen_down else 'up  '} {pose}{flag}")


if __name__ == "__main__":
    main()
