from datetime import date, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Set
from core.entities import (
    HALF_DAYS,
    Absence,
    Assignment,
    DemandRecord,
    UnitKey,
    Worker,
)
from exceptions.custom_errors import InvalidQuotaError
from scheduler.availability import absence_half_days
from scheduler.demand import aggregate_demand
from scheduler.extractor import compute_stats
from scheduler.rules import admin_fallback_rule, floater_displacement_rule, floater_full_day_rule
from scheduler.runner import ScenarioResult, run_scenario
from utils.constants import (
    FLOATER_DISPLACE_NON_PREFERRING_REWARD,
    FLOATER_DISPLACE_PREFERRING_PENALTY,
    FLOATER_DISPLACEMENT_PENALTY,
    FLOATER_FILL_REWARD,
    FLOATER_OTHER_SITE_REWARD,
    FLOATER_PREFERRED_SITE_REWARD,
    WORKING_DAYS_PER_WEEK,
)
from utils.logger import get_logger
from utils.time_utils import is_weekday, iter_dates
from utils.validate import validate_worker_quota

logger = get_logger(__name__)


def week_days(week_start: date) -> List[date]:
    """Working days of the week starting at `week_start`."""
    return [d for d in iter_dates(week_start, week_start + timedelta(days=6)) if is_weekday(d)]


def base_quota(worker: Worker) -> int:
    """Target full days per week from the explicit quota or the work percentage."""
    validate_worker_quota(worker)
    if worker.quota_days is not None:
        return int(worker.quota_days)
    if worker.work_percentage is not None:
        return int(round(worker.work_percentage / 100 * WORKING_DAYS_PER_WEEK))
    return 0


def compute_floater_quota(
    worker: Worker,
    available_days: int,
    override: Optional[int] = None,
) -> int:
    """
    Weekly quota of a floater.

    The base quota is capped at `available_days`, the working days of the week
    left after holidays and whole-day absences. An explicit override replaces
    the computed value but is capped the same way.
    """
    if override is not None:
        if override < 0:
            raise InvalidQuotaError(f"Quota override for {worker.id} must be >= 0 (got {override})")
        if override > available_days:
            logger.warning(
                f"⚠️ Quota override {override} for {worker.id} exceeds {available_days} available days; capped"
            )
        return min(override, available_days)
    return max(0, min(base_quota(worker), available_days))


def run_floater_placement(
    workers: Iterable[Worker],
    current_assignments: Iterable[Assignment],
    demand_records: Iterable[DemandRecord],
    week_start: date,
    holidays: Iterable[date] = (),
    absences: Iterable[Absence] = (),
    quota_overrides: Optional[Mapping[str, int]] = None,
    timeout: Optional[float] = None,
) -> ScenarioResult:
    """
    Place flexible floaters on full days of a week.

    A floater either fills a free position of a unit or displaces one of its
    current occupants. Displacing someone who does not prefer the site is
    rewarded, displacing someone who does is penalized, and every displacement
    costs a fixed penalty. The number of full days of each floater equals its
    quota; days without useful demand become administrative days.

    Returns:
        ScenarioResult: floater assignments; `extras` carries quotas, placed
            days and the displaced occupants.
    """
    roster = {w.id: w for w in workers}
    floaters = [w for w in roster.values() if w.flexible]
    current = [a for a in current_assignments if not a.is_admin]
    overrides = dict(quota_overrides or {})

    units = aggregate_demand(demand_records)
    days = week_days(week_start)
    holiday_set = set(holidays) & set(days)
    blocked = absence_half_days(absences)

    floater_days: Dict[str, List[date]] = {}
    quotas: Dict[str, int] = {}
    day_targets: Dict[str, int] = {}
    for f in floaters:
        halves_off = {d: sum((f.id, d, h) in blocked for h in HALF_DAYS) for d in days}
        # a day is lost only when both halves are blocked
        available = [
            d for d in days if d not in holiday_set and halves_off[d] < len(HALF_DAYS)
        ]
        workable = [d for d in available if not halves_off[d]]
        floater_days[f.id] = workable
        quotas[f.id] = compute_floater_quota(f, len(available), overrides.get(f.id))
        day_targets[f.id] = min(quotas[f.id], len(workable))
        if day_targets[f.id] < quotas[f.id]:
            logger.warning(
                f"⚠️ {f.id} has {len(workable)} full days free for a quota of {quotas[f.id]}; "
                "half-day absences leave the rest unplaced"
            )
    logger.info(f"🗓️ Floater quotas: {quotas}")

    floater_ids = set(floater_days)
    occupants: Dict[UnitKey, List[str]] = {}
    for a in current:
        if a.worker_id in floater_ids:
            continue
        key = (a.date, a.half_day, a.category, a.linked_entity_id)
        if key in units:
            occupants.setdefault(key, []).append(a.worker_id)
    occupant_prefers = {
        (key, occ): roster[occ].prefers_site(key[2]) if occ in roster else False
        for key, occs in occupants.items()
        for occ in occs
    }

    rewards = {}
    for f in floaters:
        open_days = set(floater_days[f.id])
        for key, unit in units.items():
            if unit.capacity <= 0 or unit.date not in open_days or not f.can_cover(unit.category):
                continue
            rewards[(f.id, key)] = (
                FLOATER_PREFERRED_SITE_REWARD
                if f.prefers_site(unit.category)
                else FLOATER_OTHER_SITE_REWARD
            )

    admin_slots = [(f, d, h) for f, ds in floater_days.items() for d in ds for h in HALF_DAYS]
    params = {
        "occupants": occupants,
        "occupant_prefers": occupant_prefers,
        "fill_reward": FLOATER_FILL_REWARD,
        "displace_non_preferring_reward": FLOATER_DISPLACE_NON_PREFERRING_REWARD,
        "displace_preferring_penalty": FLOATER_DISPLACE_PREFERRING_PENALTY,
        "displacement_penalty": FLOATER_DISPLACEMENT_PENALTY,
        "floater_days": floater_days,
        "quotas": day_targets,
        "admin_slots": admin_slots,
        "admin_reward": lambda worker_id, k: 0,
    }
    result, solved = run_scenario(
        "floater_placement",
        units,
        rewards,
        params,
        pre_rules=[admin_fallback_rule, floater_displacement_rule],
        post_rules=[floater_full_day_rule],
        timeout=timeout,
    )

    displaced = [
        {
            "occupant_id": occ,
            "floater_id": f,
            "date": key[0],
            "half_day": key[1].value,
            "category": key[2],
        }
        for (f, key, occ), value in solved.aux_values.get("displace", {}).items()
        if value
    ]
    displaced_slots: Set[tuple] = {
        (d["occupant_id"], d["date"], d["half_day"]) for d in displaced
    }
    remaining = [
        a for a in current if (a.worker_id, a.date, a.half_day.value) not in displaced_slots
    ]
    result.stats = compute_stats(
        units,
        remaining + result.assignments,
        result.stats.objective_value,
        optimal=result.stats.optimal,
    )
    placed_days = {
        f: sorted(d for (w, d), v in solved.aux_values.get("day", {}).items() if w == f and v)
        for f in floater_ids
    }
    for d in displaced:
        logger.info(
            f"🔁 {d['floater_id']} displaces {d['occupant_id']} at {d['category']} on {d['date']} {d['half_day']}"
        )
    result.extras.update(
        {"quotas": quotas, "placed_days": placed_days, "displaced": displaced}
    )
    return result
