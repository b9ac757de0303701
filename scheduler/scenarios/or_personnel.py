from typing import Iterable, Mapping, Optional
from core.entities import Absence, Procedure, ShiftRecord, Worker
from scheduler.availability import absence_half_days, build_availability
from scheduler.demand import expand_procedure_demand
from scheduler.runner import ScenarioResult, eligible_pairs, run_scenario
from utils.constants import (
    CORE_ROLE_REWARD,
    RECEPTION_ROLE_REWARD,
    RECEPTION_ROLES,
    ROLE_CAPABILITIES,
)
from utils.logger import get_logger

logger = get_logger(__name__)


def role_reward(role: str) -> float:
    """Unfilled surgical roles hurt more than unfilled reception desks."""
    return RECEPTION_ROLE_REWARD if role in RECEPTION_ROLES else CORE_ROLE_REWARD


def run_or_personnel(
    workers: Iterable[Worker],
    shifts: Iterable[ShiftRecord],
    procedures: Iterable[Procedure],
    requirements: Mapping[str, Mapping[str, int]],
    absences: Iterable[Absence] = (),
    role_capabilities: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
) -> ScenarioResult:
    """
    Staff operating-room procedures role by role.

    Each (procedure, half-day, role) is its own unit. A role is covered by
    workers holding the capability it maps to in `role_capabilities`.
    The result's `booked_slots` should be passed as `blocked_slots` to the
    site coverage run so nobody is placed twice.
    """
    capabilities = dict(ROLE_CAPABILITIES if role_capabilities is None else role_capabilities)
    units = expand_procedure_demand(procedures, requirements)
    slots = build_availability(
        workers,
        shifts,
        units,
        blocked=absence_half_days(absences),
        capability_for=lambda role: capabilities.get(role, role),
    )
    rewards = {
        (w, unit_key): role_reward(unit_key[2]) for w, unit_key in eligible_pairs(units, slots)
    }

    result, _ = run_scenario("or_personnel", units, rewards, timeout=timeout)
    result.extras["booked_slots"] = [
        {"worker_id": w, "date": day, "half_day": half_day.value}
        for (w, day, half_day) in sorted(
            result.booked_slots, key=lambda k: (k[0], str(k[1]), k[2].value)
        )
    ]
    return result
