from typing import Callable, Dict, Iterable, Mapping, Optional, Set
import pandas as pd
from core.entities import (
    HALF_DAYS,
    Absence,
    AvailabilitySlot,
    DemandUnit,
    HalfDay,
    ShiftRecord,
    SlotKey,
    UnitKey,
    Worker,
)
from exceptions.custom_errors import InputMismatchError
from scheduler.demand import categories_by_half_day
from utils.constants import AVAILABILITY_THRESHOLD_MINUTES, HALF_DAY_WINDOWS
from utils.logger import get_logger
from utils.time_utils import half_day_overlaps, iter_dates, sort_key, to_minutes

logger = get_logger(__name__)


def covered_half_days(
    shifts: Iterable[ShiftRecord], threshold_minutes: int = AVAILABILITY_THRESHOLD_MINUTES
) -> Set[SlotKey]:
    """(worker, date, half-day) keys covered by at least one shift for `threshold_minutes`."""
    covered: Set[SlotKey] = set()
    for shift in shifts:
        for half_day in half_day_overlaps(shift.start, shift.end, threshold_minutes):
            covered.add((shift.worker_id, shift.date, half_day))
    return covered


def absence_half_days(absences: Iterable[Absence]) -> Set[SlotKey]:
    """
    Expand absences into blocked (worker, date, half-day) keys.

    Absences without hours block both half-days of every date in range; timed
    absences block each half-day they touch at all.
    """
    blocked: Set[SlotKey] = set()
    for absence in absences:
        for day in iter_dates(absence.start_date, absence.end_date):
            if absence.start is None or absence.end is None:
                for half_day in HALF_DAYS:
                    blocked.add((absence.worker_id, day, half_day))
                continue
            start, end = to_minutes(absence.start), to_minutes(absence.end)
            for half_day in HALF_DAYS:
                w_start, w_end = (to_minutes(t) for t in HALF_DAY_WINDOWS[half_day.value])
                if start < w_end and end > w_start:
                    blocked.add((absence.worker_id, day, half_day))
    return blocked


def build_availability(
    workers: Iterable[Worker],
    shifts: Iterable[ShiftRecord],
    demand_units: Optional[Mapping[UnitKey, DemandUnit]] = None,
    threshold_minutes: int = AVAILABILITY_THRESHOLD_MINUTES,
    blocked: Optional[Set[SlotKey]] = None,
    capability_for: Optional[Callable[[str], str]] = None,
) -> Dict[SlotKey, AvailabilitySlot]:
    """
    Build per-(worker, date, half-day) availability from raw shift records.

    A worker is available for a half-day if any of their shifts covers it for at
    least `threshold_minutes`. The eligible categories of a slot are the
    categories with demand in that half-day that the worker is capable of;
    `capability_for` maps a demand category to the capability tag it requires
    (identity by default). Slots in `blocked` (absences, earlier bookings) are
    dropped.

    Raises:
        InputMismatchError: If a shift references a worker not in `workers`.
    """
    roster = {w.id: w for w in workers}
    shifts = list(shifts)
    unknown = {s.worker_id for s in shifts} - set(roster)
    if unknown:
        raise InputMismatchError(
            f"Shift records reference unknown workers: {', '.join(sorted(unknown))}"
        )

    demand_categories = categories_by_half_day(demand_units or {})
    requirement = capability_for or (lambda category: category)
    blocked = blocked or set()

    slots: Dict[SlotKey, AvailabilitySlot] = {}
    for worker_id, day, half_day in covered_half_days(shifts, threshold_minutes):
        key = (worker_id, day, half_day)
        if key in blocked:
            continue
        worker = roster[worker_id]
        wanted = demand_categories.get((day, half_day), set())
        eligible = frozenset(c for c in wanted if worker.can_cover(requirement(c)))
        slots[key] = AvailabilitySlot(worker_id, day, half_day, eligible)

    dropped = sum(1 for k in blocked if k[0] in roster)
    logger.info(
        f"🧑‍⚕️ {len(slots)} available half-days for {len(roster)} workers ({dropped} blocked)"
    )
    return slots


def availability_frame(slots: Mapping[SlotKey, AvailabilitySlot]) -> pd.DataFrame:
    ordered = sorted(
        slots.values(),
        key=lambda s: (s.worker_id, sort_key(s.date), s.half_day != HalfDay.MORNING),
    )
    return pd.DataFrame(
        [
            {
                "worker_id": s.worker_id,
                "date": s.date,
                "half_day": s.half_day.value,
                "categories": sorted(s.categories),
            }
            for s in ordered
        ],
        columns=["worker_id", "date", "half_day", "categories"],
    )
