"""Example pipeline: retune the linkage and check the drawing area still fits."""

from crankplot import BentCrankSolver, SafeArea, check_safe_area, workspace_outline

CONFIG = {
    "SHOULDER_SEP": 140,
    "L_BODY": 50,
    "L_BLUE": 80,
    "A_BEND": 120,
    "L_MAIN": 180,
    "SAFE_W": 100,
    "SAFE_H": 100,
    "SAFE_X": 0,
    "SAFE_Y": 200,
}


def main() -> None:
    solver = BentCrankSolver()
    solver.set_configuration(CONFIG)
    area = SafeArea.from_mapping(CONFIG)

    geometry = solver.geometry
    print(f"Effective crank length: {geometry.effective_crank_length:.3f}")
    print(f"Phase offset: {geometry.phase_offset_deg:.3f} deg")

    unreachable = check_safe_area(solver, area, samples=21)
    print(f"Safe area {area}: {'OK' if not unreachable else f'{len(unreachable)} unreachable points'}")

    print("Workspace outline around the safe-area centre:")
    for point in workspace_outline(solver, (area.center_x, area.center_y), rays=24):
        print(f"  ({point.x:8.3f}, {point.y:8.3f})")


if __name__ == "__main__":
    main()
