from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional
from core.entities import DemandRecord, ShiftRecord, Worker
from scheduler.availability import build_availability
from scheduler.demand import aggregate_demand
from scheduler.runner import ScenarioResult, eligible_pairs, run_scenario
from utils.constants import BASE_COVERAGE_REWARD
from utils.logger import get_logger
from utils.validate import validate_weekday_keys

logger = get_logger(__name__)


@dataclass
class WhatIfScenario:
    """Hypothetical workers and demand appended to the real inputs of a base run."""

    fictional_workers: List[Worker] = field(default_factory=list)
    fictional_shifts: List[ShiftRecord] = field(default_factory=list)
    fictional_demands: List[DemandRecord] = field(default_factory=list)


def run_base_schedule(
    workers: Iterable[Worker],
    shifts: Iterable[ShiftRecord],
    demand_records: Iterable[DemandRecord],
    what_if: Optional[WhatIfScenario] = None,
    timeout: Optional[float] = None,
) -> ScenarioResult:
    """
    Solve the recurring weekly schedule.

    Days are ISO weekdays (1-7). Every satisfied (worker, unit) pairing is worth
    the same reward, so the solver maximizes plain coverage. A what-if scenario
    adds fictional workers and demand before solving; their assignments are
    reported separately.
    """
    workers = list(workers)
    shifts = list(shifts)
    demand_records = list(demand_records)

    fictional_ids = set()
    if what_if:
        fictional = [replace(w, fictional=True) for w in what_if.fictional_workers]
        fictional_ids = {w.id for w in fictional}
        workers += fictional
        shifts += what_if.fictional_shifts
        demand_records += what_if.fictional_demands
        logger.info(
            f"🧪 What-if: +{len(fictional)} workers, +{len(what_if.fictional_demands)} demand records"
        )

    validate_weekday_keys([s.date for s in shifts], "shift records")
    validate_weekday_keys([r.date for r in demand_records], "demand records")

    units = aggregate_demand(demand_records)
    slots = build_availability(workers, shifts, units)
    rewards = {pair: BASE_COVERAGE_REWARD for pair in eligible_pairs(units, slots)}

    result, _ = run_scenario("base_schedule", units, rewards, timeout=timeout)
    if what_if:
        result.extras["fictional_workers"] = sorted(fictional_ids)
        result.extras["fictional_assignments"] = [
            a.to_dict() for a in result.assignments if a.worker_id in fictional_ids
        ]
    return result
