import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from crankplot import (
    BentCrankSolver,
    ConfigurationError,
    SafeArea,
    check_safe_area,
    get_default_config,
    load_config,
    plan_trace,
    trace_summary,
    waypoints_from_json,
)

logger = logging.getLogger(__name__)

EXIT_NOT_FOUND = 1
EXIT_BAD_INPUT = 2


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _parse_safe_area(value: Optional[str]) -> SafeArea:
    if not value:
        return SafeArea()
    parts = [part.strip() for part in value.split(",") if part.strip()]
    if len(parts) != 4:
        raise ValueError("safe area must be CX,CY,W,H")
    cx, cy, width, height = (float(part) for part in parts)
    return SafeArea(center_x=cx, center_y=cy, width=width, height=height)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crankplot", description="Bent-crank five-bar drawing robot kinematics"
    )
    parser.add_argument("--config", help="JSON file with linkage parameters")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    fwd = commands.add_parser("forward", help="Pen position for a servo pair")
    fwd.add_argument("left", type=float, help="Left servo angle in degrees")
    fwd.add_argument("right", type=float, help="Right servo angle in degrees")

    inv = commands.add_parser("inverse", help="Servo pair for a pen position")
    inv.add_argument("x", type=float)
    inv.add_argument("y", type=float)

    trace = commands.add_parser("trace", help="Plan servo poses for a JSON waypoint file")
    trace.add_argument("path", help="JSON list of [x, y(, penDown)] items")
    trace.add_argument("--output", help="Write the planned steps to this file instead of stdout")

    ws = commands.add_parser("workspace", help="Report derived geometry and safe-area reachability")
    ws.add_argument("--safe-area", help="Drawing rectangle as CX,CY,W,H (default: 0,200,100,100)")
    ws.add_argument("--samples", type=int, default=11, help="Lattice size per side (default: 11)")
    return parser


def _run_forward(solver: BentCrankSolver, args: argparse.Namespace) -> int:
    result = solver.solve_forward(args.left, args.right)
    if not result.found:
        print(f"NOT_FOUND: {result.reason}")
        return EXIT_NOT_FOUND
    solution = result.solution
    print(f"Pen: ({solution.pen.x:.6f}, {solution.pen.y:.6f})")
    print(f"Left axis: ({solution.left_axis.x:.6f}, {solution.left_axis.y:.6f})")
    print(f"Right axis: ({solution.right_axis.x:.6f}, {solution.right_axis.y:.6f})")
    print(f"Left elbow: ({solution.left_elbow.x:.6f}, {solution.left_elbow.y:.6f})")
    print(f"Right elbow: ({solution.right_elbow.x:.6f}, {solution.right_elbow.y:.6f})")
    return 0


def _run_inverse(solver: BentCrankSolver, args: argparse.Namespace) -> int:
    result = solver.solve_inverse(args.x, args.y)
    if not result.found:
        print(f"NOT_FOUND ({result.status}): {result.reason}")
        return EXIT_NOT_FOUND
    print(f"Servo left: {result.servos.left:.6f}")
    print(f"Servo right: {result.servos.right:.6f}")
    return 0


def _run_trace(solver: BentCrankSolver, args: argparse.Namespace) -> int:
    with open(args.path, encoding="utf-8") as fin:
        waypoints = waypoints_from_json(json.load(fin))
    logger.info("Planning %d waypoint(s) from %s", len(waypoints), args.path)
    steps = plan_trace(solver, waypoints)
    summary = trace_summary(steps)
    logger.info("Trace summary: %s", summary)

    payload = json.dumps({"summary": summary, "steps": [step.to_dict() for step in steps]}, indent=2)
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(payload, encoding="utf-8")
        print(f"Trace written to {output_path}")
    else:
        print(payload)
    return 0


def _run_workspace(solver: BentCrankSolver, args: argparse.Namespace) -> int:
    area = _parse_safe_area(args.safe_area)
    geometry = solver.geometry
    print(f"Effective crank length: {geometry.effective_crank_length:.6f}")
    print(f"Phase offset: {geometry.phase_offset_deg:.6f} deg")
    unreachable = check_safe_area(solver, area, args.samples)
    if unreachable:
        print(f"Safe area: {len(unreachable)} unreachable sample point(s)")
        for point in unreachable:
            print(f"  ({point.x:.3f}, {point.y:.3f})")
        return EXIT_NOT_FOUND
    print("Safe area: fully reachable")
    return 0


_COMMANDS = {
    "forward": _run_forward,
    "inverse": _run_inverse,
    "trace": _run_trace,
    "workspace": _run_workspace,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging(args.log_level)

    try:
        config = load_config(args.config) if args.config else get_default_config()
        solver = BentCrankSolver(config)
        return _COMMANDS[args.command](solver, args)
    except ConfigurationError as exc:
        logger.error("Invalid configuration: %s", exc)
    except (OSError, ValueError, TypeError) as exc:
        logger.error("%s", exc)
    return EXIT_BAD_INPUT


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
