from typing import Iterable, Mapping, Optional, Set
from core.entities import (
    Absence,
    DemandRecord,
    HalfDay,
    ShiftRecord,
    SlotKey,
    Worker,
)
from scheduler.availability import absence_half_days, build_availability
from scheduler.demand import aggregate_demand
from scheduler.rules import admin_fallback_rule, category_change_rule, closure_continuity_rule
from scheduler.runner import ScenarioResult, eligible_pairs, run_scenario
from utils.constants import (
    ADMIN_BASE_REWARD,
    ADMIN_PREFERENCE_BONUS,
    ADMIN_REPEAT_PENALTY,
    CATEGORY_CHANGE_PENALTY,
    CLOSURE_CONTINUITY_BONUS,
    LINKED_ENTITY_BONUS,
    RELUCTANT_SITE_PENALTY,
    RELUCTANT_SITES,
    SITE_COVERAGE_TARGET,
    SITE_PREFERENCE_REWARDS,
)
from utils.logger import get_logger
from utils.time_utils import sort_key

logger = get_logger(__name__)


def admin_reward_for(roster: Mapping[str, Worker]):
    """Reward of a worker's k-th administrative half-day (k counts from 0)."""

    def reward(worker_id: str, k: int) -> float:
        worker = roster[worker_id]
        bonus = ADMIN_PREFERENCE_BONUS if worker.prefers_admin else 0.0
        return ADMIN_BASE_REWARD + bonus - ADMIN_REPEAT_PENALTY * k

    return reward


def site_preference_reward(
    worker: Worker, site: str, reluctant_sites: Iterable[str] = RELUCTANT_SITES
) -> float:
    """
    Bonus for placing `worker` at `site` from its site ranking.

    The preferred site earns the most, then the secondary and tertiary ones.
    Sites in `reluctant_sites` cost a penalty for workers who do not rank them.
    """
    ranking = list(worker.site_preferences)
    if worker.preferred_site and worker.preferred_site not in ranking:
        ranking.insert(0, worker.preferred_site)
    if site in ranking:
        rank = ranking.index(site)
        return SITE_PREFERENCE_REWARDS[rank] if rank < len(SITE_PREFERENCE_REWARDS) else 0.0
    if site in reluctant_sites:
        return -RELUCTANT_SITE_PENALTY
    return 0.0


def run_site_coverage(
    workers: Iterable[Worker],
    shifts: Iterable[ShiftRecord],
    demand_records: Iterable[DemandRecord],
    absences: Iterable[Absence] = (),
    blocked_slots: Optional[Set[SlotKey]] = None,
    closure_sites: Iterable[str] = (),
    allow_admin: bool = True,
    reluctant_sites: Iterable[str] = RELUCTANT_SITES,
    timeout: Optional[float] = None,
) -> ScenarioResult:
    """
    Solve the dated site/specialty coverage for a horizon.

    Each pair is worth `100 / capacity` of its unit, plus a bonus when the
    worker's linked doctor is among the unit's linked entities and a smaller
    one from the worker's site ranking. Changing category between morning and
    afternoon costs a little, staying both half-days at a site that needs
    closing earns a little. Available workers left without demand can take administrative half-days, whose reward
    decreases with each one the worker already holds.

    `blocked_slots` are slots already taken elsewhere (e.g. operating-room
    bookings); they are never offered here.
    """
    reluctant = set(reluctant_sites)
    roster = {w.id: w for w in workers}
    blocked = absence_half_days(absences) | set(blocked_slots or ())

    units = aggregate_demand(demand_records)
    slots = build_availability(roster.values(), shifts, units, blocked=blocked)

    rewards = {}
    for w, unit_key in eligible_pairs(units, slots):
        unit = units[unit_key]
        reward = SITE_COVERAGE_TARGET / unit.capacity
        linked = roster[w].linked_entity_id
        if linked and linked in unit.linked_entities:
            reward += LINKED_ENTITY_BONUS
        reward += site_preference_reward(roster[w], unit.category, reluctant)
        rewards[(w, unit_key)] = reward

    admin_slots = []
    if allow_admin:
        admin_slots = sorted(
            slots,
            key=lambda k: (k[0], sort_key(k[1]), k[2] != HalfDay.MORNING),
        )

    params = {
        "category_change_penalty": CATEGORY_CHANGE_PENALTY,
        "closure_sites": set(closure_sites),
        "closure_continuity_bonus": CLOSURE_CONTINUITY_BONUS,
        "admin_slots": admin_slots,
        "admin_reward": admin_reward_for(roster),
    }
    result, solved = run_scenario(
        "site_coverage",
        units,
        rewards,
        params,
        pre_rules=[admin_fallback_rule],
        post_rules=[category_change_rule, closure_continuity_rule],
        timeout=timeout,
    )
    changes = solved.aux_values.get("change", {})
    result.extras["category_changes"] = sum(changes.values())
    result.extras["admin_half_days"] = sum(1 for a in result.assignments if a.is_admin)
    return result
