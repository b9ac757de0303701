from dataclasses import dataclass, field
from ortools.sat.python import cp_model
from typing import Any, Dict, Optional, Tuple
from core.state import AssignmentState
from exceptions.custom_errors import NoFeasibleSolutionError
from utils.constants import REWARD_SCALE, SOLVER_SEED, SOLVER_TIMEOUT_SECONDS, SOLVER_WORKERS
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class SolverResult:
    """
    Outcome of one solve.

    Attributes:
        status: CP-SAT status code (OPTIMAL or FEASIBLE; anything else raises).
        status_name: Human readable status.
        objective_value: Objective in reward units (scaled value divided back).
        wall_time: Solve time in seconds.
        values: Chosen value of every candidate variable.
        admin_values: Chosen value of every administrative fallback variable.
        aux_values: Chosen values of scenario helper variables, per group.
    """

    status: Any
    status_name: str
    objective_value: float
    wall_time: float
    values: Dict[Any, int] = field(default_factory=dict)
    admin_values: Dict[Any, int] = field(default_factory=dict)
    aux_values: Dict[str, Dict[Any, int]] = field(default_factory=dict)

    @property
    def feasible(self) -> bool:
        return self.status in (cp_model.OPTIMAL, cp_model.FEASIBLE)

    @property
    def optimal(self) -> bool:
        return self.status == cp_model.OPTIMAL


def configure_solver(
    timeout: float = SOLVER_TIMEOUT_SECONDS,
    seed: int = SOLVER_SEED,
    workers: int = SOLVER_WORKERS,
) -> cp_model.CpSolver:
    """Configure the CP solver."""
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    solver.parameters.random_seed = seed
    solver.parameters.num_search_workers = workers
    solver.parameters.log_search_progress = False
    return solver


def get_model_size(model: cp_model.CpModel) -> Tuple[int, int]:
    """Get the number of constraints and boolean variables in the model."""
    proto = model.Proto()
    num_constraints = len(proto.constraints)
    num_bool_vars = len(proto.variables)
    return num_constraints, num_bool_vars


def solve_assignment(
    model: cp_model.CpModel,
    state: AssignmentState,
    timeout: Optional[float] = None,
    seed: Optional[int] = None,
) -> SolverResult:
    """
    Solve an assignment model built by `build_assignment_model`.

    Raises:
        NoFeasibleSolutionError: If CP-SAT reports neither OPTIMAL nor FEASIBLE.
            No partial result is returned in that case.
    """
    num_constraints, num_bool_vars = get_model_size(model)
    logger.info(f"→ #constraints = {num_constraints},  #bool_vars = {num_bool_vars}")

    logger.info("🚀 Solving assignment model...")
    solver = configure_solver(
        timeout=SOLVER_TIMEOUT_SECONDS if timeout is None else timeout,
        seed=SOLVER_SEED if seed is None else seed,
    )
    status = solver.Solve(model)
    status_name = solver.StatusName(status)
    logger.info(f"⏱ Solve time: {solver.WallTime():.2f} seconds ({status_name})")

    if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        logger.info("⚠️ No feasible assignment found.")
        raise NoFeasibleSolutionError(
            f"❌ No feasible assignment: solver status {status_name}"
        )
    if status != cp_model.OPTIMAL:
        logger.warning(
            "⚠️ Time limit reached before optimality was proven; returning the best assignment found"
        )

    objective = solver.ObjectiveValue() / REWARD_SCALE if state.objective_terms else 0.0
    result = SolverResult(
        status=status,
        status_name=status_name,
        objective_value=objective,
        wall_time=solver.WallTime(),
        values={k: solver.Value(v) for k, v in state.x.items()},
        admin_values={k: solver.Value(v) for k, v in state.admin_vars.items()},
        aux_values={
            group: {k: solver.Value(v) for k, v in variables.items()}
            for group, variables in state.aux_vars.items()
        },
    )
    logger.info(f"✅ Solution found: objective = {objective:.3f}")
    return result
