from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Set
import pandas as pd
from core.entities import Assignment, AvailabilitySlot, DemandUnit, SlotKey, UnitKey
from core.state import CandidateKey
from scheduler.builder import build_assignment_model
from scheduler.extractor import (
    SolverStats,
    assignments_frame,
    compute_stats,
    extract_assignments,
    unit_coverage_frame,
)
from scheduler.solver import SolverResult, solve_assignment
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ScenarioResult:
    """Assignments and statistics of one solved scenario."""

    scenario: str
    assignments: List[Assignment]
    units: Dict[UnitKey, DemandUnit]
    stats: SolverStats
    extras: Dict[str, Any] = field(default_factory=dict)

    @property
    def booked_slots(self) -> Set[SlotKey]:
        """Worker slots taken by a demand assignment (administrative ones excluded)."""
        return {a.slot for a in self.assignments if not a.is_admin}

    def assignments_frame(self) -> pd.DataFrame:
        return assignments_frame(self.assignments)

    def coverage_frame(self) -> pd.DataFrame:
        return unit_coverage_frame(self.units, self.assignments)

    def to_dict(self) -> dict:
        return {
            "scenario": self.scenario,
            "assignments": [a.to_dict() for a in self.assignments],
            "coverage": self.coverage_frame().to_dict(orient="records"),
            "stats": self.stats.to_dict(),
            **self.extras,
        }


def eligible_pairs(
    units: Mapping[UnitKey, DemandUnit],
    slots: Mapping[SlotKey, AvailabilitySlot],
) -> List[CandidateKey]:
    """Every (worker, unit) pair where the worker is available and capable that half-day."""
    by_half_day: Dict[tuple, List[DemandUnit]] = {}
    for unit in units.values():
        if unit.capacity > 0:
            by_half_day.setdefault((unit.date, unit.half_day), []).append(unit)

    pairs = []
    for (w, day, half_day), slot in slots.items():
        for unit in by_half_day.get((day, half_day), []):
            if unit.category in slot.categories:
                pairs.append((w, unit.key))
    return pairs


def run_scenario(
    scenario: str,
    units: Mapping[UnitKey, DemandUnit],
    rewards: Mapping[CandidateKey, float],
    params: Optional[dict] = None,
    pre_rules: Iterable[Callable] = (),
    post_rules: Iterable[Callable] = (),
    timeout: Optional[float] = None,
):
    """
    Build, solve and extract one scenario.

    Returns:
        tuple: (ScenarioResult, SolverResult). The raw solver result carries the
            helper variable values scenarios read for their own reporting.
    """
    logger.info(f"📋 Scenario {scenario}: {len(units)} units, {len(rewards)} pairs")
    model, state = build_assignment_model(units, rewards, params, pre_rules, post_rules)
    result: SolverResult = solve_assignment(model, state, timeout=timeout)
    assignments = extract_assignments(state, result)
    stats = compute_stats(
        units, assignments, result.objective_value, result.feasible, result.optimal
    )
    logger.info(
        f"✅ Scenario {scenario}: {len(assignments)} assignments, "
        f"{stats.satisfaction_percentage}% of positions filled"
    )
    return ScenarioResult(scenario, assignments, dict(units), stats), result
