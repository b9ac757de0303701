from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List, Mapping
import pandas as pd
from core.entities import ADMIN_CATEGORY, Assignment, DemandUnit, HalfDay, UnitKey
from core.state import AssignmentState
from scheduler.demand import total_demand
from utils.logger import get_logger
from utils.time_utils import sort_key
from .solver import SolverResult

logger = get_logger(__name__)


@dataclass
class SolverStats:
    objective_value: float
    total_demand: float
    total_satisfied: int
    satisfaction_percentage: float
    feasible: bool
    optimal: bool = True

    def to_dict(self) -> dict:
        return asdict(self)


def _assignment_order(a: Assignment):
    return (sort_key(a.date), a.half_day != HalfDay.MORNING, a.category, a.worker_id)


def extract_assignments(state: AssignmentState, result: SolverResult) -> List[Assignment]:
    """Turn chosen candidate (and administrative) variables into Assignment records."""
    assignments = [
        Assignment(
            worker_id=w,
            date=unit_key[0],
            half_day=unit_key[1],
            category=unit_key[2],
            linked_entity_id=unit_key[3],
        )
        for (w, unit_key), value in result.values.items()
        if value
    ]
    assignments.extend(
        Assignment(worker_id=w, date=day, half_day=half_day, category=ADMIN_CATEGORY)
        for (w, day, half_day), value in result.admin_values.items()
        if value
    )
    return sorted(assignments, key=_assignment_order)


def compute_stats(
    units: Mapping[UnitKey, DemandUnit],
    assignments: Iterable[Assignment],
    objective_value: float,
    feasible: bool = True,
    optimal: bool = True,
) -> SolverStats:
    """
    Coverage statistics of a solved scenario.

    Satisfied demand counts the assignments landing in a demand unit, capped
    per unit at its capacity; administrative placements never count.
    Partial coverage is reported here, never raised.
    """
    filled: Dict[UnitKey, int] = {}
    for a in assignments:
        key = (a.date, a.half_day, a.category, a.linked_entity_id)
        if key in units:
            filled[key] = filled.get(key, 0) + 1
    satisfied = sum(min(n, units[k].capacity) for k, n in filled.items())
    demand = total_demand(units)
    capacity = sum(u.capacity for u in units.values())
    percentage = round(100.0 * satisfied / capacity, 2) if capacity else 100.0

    if percentage < 100.0:
        logger.warning(
            f"⚠️ Partial coverage: {satisfied}/{capacity} positions filled ({percentage}%)"
        )
    return SolverStats(
        objective_value=round(objective_value, 4),
        total_demand=round(demand, 4),
        total_satisfied=satisfied,
        satisfaction_percentage=percentage,
        feasible=feasible,
        optimal=optimal,
    )


def assignments_frame(assignments: Iterable[Assignment]) -> pd.DataFrame:
    columns = ["worker_id", "date", "half_day", "category", "linked_entity_id", "role"]
    return pd.DataFrame([a.to_dict() for a in assignments], columns=columns)


def unit_coverage_frame(
    units: Mapping[UnitKey, DemandUnit], assignments: Iterable[Assignment]
) -> pd.DataFrame:
    """One row per demand unit with its capacity, filled count and assigned workers."""
    by_unit: Dict[UnitKey, List[str]] = {}
    for a in assignments:
        by_unit.setdefault((a.date, a.half_day, a.category, a.linked_entity_id), []).append(
            a.worker_id
        )
    rows = []
    for key in sorted(units, key=lambda k: (sort_key(k[0]), k[1] != HalfDay.MORNING, k[2], k[3] or "")):
        unit = units[key]
        workers = sorted(by_unit.get(key, []))
        rows.append(
            {
                **unit.to_dict(),
                "filled": len(workers),
                "missing": max(0, unit.capacity - len(workers)),
                "workers": workers,
            }
        )
    return pd.DataFrame(rows)
