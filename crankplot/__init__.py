from .config import (
    ConfigurationError,
    CrankGeometry,
    LinkageConfig,
    derive_crank_geometry,
    get_default_config,
    load_config,
    merge_config,
    set_default_config,
    validate_config,
)
from .geometry import Point, circle_intersections
from .solver import (
    BentCrankSolver,
    ForwardResult,
    ForwardSolution,
    InverseResult,
    KinematicModel,
    ServoPair,
    default_solver,
    forward,
    inverse,
    set_configuration,
    solve_forward,
    solve_inverse,
)
from .trace import TraceStep, Waypoint, plan_trace, trace_summary, waypoints_from_json
from .workspace import (
    SafeArea,
    boundary_along_ray,
    check_safe_area,
    reach_margin,
    reachability_grid,
    servo_grid,
    workspace_outline,
)

__all__ = [
    'ConfigurationError',
    'CrankGeometry',
    'LinkageConfig',
    'derive_crank_geometry',
    'get_default_config',
    'load_config',
    'merge_config',
    'set_default_config',
    'validate_config',
    'Point',
    'circle_intersections',
    'BentCrankSolver',
    'ForwardResult',
    'ForwardSolution',
    'InverseResult',
    'KinematicModel',
    'ServoPair',
    'default_solver',
    'forward',
    'inverse',
    'set_configuration',
    'solve_forward',
    'solve_inverse',
    'TraceStep',
    'Waypoint',
    'plan_trace',
    'trace_summary',
    'waypoints_from_json',
    'SafeArea',
    'boundary_along_ray',
    'check_safe_area',
    'reach_margin',
    'reachability_grid',
    'servo_grid',
    'workspace_outline',
]
