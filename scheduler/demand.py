from typing import Dict, Iterable, List, Mapping, Optional
import pandas as pd
from core.entities import DemandRecord, DemandUnit, HalfDay, Procedure, UnitKey
from exceptions.custom_errors import InputMismatchError
from utils.constants import DEMAND_THRESHOLD_MINUTES
from utils.logger import get_logger
from utils.time_utils import expand_half_day, half_day_overlaps, sort_key

logger = get_logger(__name__)


def record_half_day_shares(
    record: DemandRecord, threshold_minutes: int = DEMAND_THRESHOLD_MINUTES
) -> Dict[HalfDay, float]:
    """Proportion of each half-day the record occupies (1.0 for explicit half-day records)."""
    if record.half_day:
        return {h: 1.0 for h in expand_half_day(record.half_day)}
    if record.start is None or record.end is None:
        raise InputMismatchError(
            f"Demand record {record.id} has neither a half-day nor a time range."
        )
    overlaps = half_day_overlaps(record.start, record.end, threshold_minutes)
    return {h: o.proportion for h, o in overlaps.items()}


def aggregate_demand(
    records: Iterable[DemandRecord],
    threshold_minutes: int = DEMAND_THRESHOLD_MINUTES,
) -> Dict[UnitKey, DemandUnit]:
    """
    Group raw demand records into DemandUnits keyed by (date, half-day, category).

    Each record contributes `quantity x proportion` to every half-day it covers
    for at least `threshold_minutes`. Fractional sums are kept on the unit;
    `DemandUnit.capacity` rounds them up for the solver. Distinct categories
    never merge. The function has no side effects, so identical input always
    yields identical units.

    Args:
        records: Raw demand records (one per scheduled professional per day).
        threshold_minutes: Minimum overlap for a record to count in a half-day.

    Returns:
        Dict[UnitKey, DemandUnit]: Units keyed by `(date, half_day, category, None)`.
    """
    units: Dict[UnitKey, DemandUnit] = {}
    for record in records:
        shares = record_half_day_shares(record, threshold_minutes)
        for half_day, proportion in shares.items():
            key = (record.date, half_day, record.category, None)
            unit = units.get(key)
            if unit is None:
                unit = DemandUnit(
                    date=record.date, half_day=half_day, category=record.category
                )
                units[key] = unit
            unit.demand += float(record.quantity) * proportion
            if record.linked_entity_id:
                unit.linked_entities.add(record.linked_entity_id)

    logger.info(f"📦 Aggregated demand into {len(units)} units")
    return units


def procedure_half_days(
    procedure: Procedure, threshold_minutes: int = DEMAND_THRESHOLD_MINUTES
) -> List[HalfDay]:
    if procedure.half_day:
        return expand_half_day(procedure.half_day)
    if procedure.start is None or procedure.end is None:
        raise InputMismatchError(
            f"Procedure {procedure.id} has neither a half-day nor a time range."
        )
    return list(half_day_overlaps(procedure.start, procedure.end, threshold_minutes))


def expand_procedure_demand(
    procedures: Iterable[Procedure],
    requirements: Mapping[str, Mapping[str, int]],
    threshold_minutes: int = DEMAND_THRESHOLD_MINUTES,
) -> Dict[UnitKey, DemandUnit]:
    """
    Build one DemandUnit per (procedure, half-day, role).

    Operating-room units are never aggregated across procedures: the procedure
    id is kept as the unit's linked entity so each team is staffed on its own.
    `requirements` maps a procedure type to `{role: required_count}`.
    """
    units: Dict[UnitKey, DemandUnit] = {}
    for procedure in procedures:
        roles = requirements.get(procedure.procedure_type)
        if not roles:
            logger.warning(
                f"⚠️ No staffing requirement for procedure type {procedure.procedure_type} ({procedure.id})"
            )
            continue
        for half_day in procedure_half_days(procedure, threshold_minutes):
            for role, count in roles.items():
                if count <= 0:
                    continue
                unit = DemandUnit(
                    date=procedure.date,
                    half_day=half_day,
                    category=role,
                    demand=float(count),
                    linked_entity_id=procedure.id,
                )
                if procedure.doctor_id:
                    unit.linked_entities.add(procedure.doctor_id)
                units[unit.key] = unit
    logger.info(f"📦 Expanded procedures into {len(units)} role units")
    return units


def demand_units_frame(units: Mapping[UnitKey, DemandUnit]) -> pd.DataFrame:
    """Tabular view of demand units, ordered by date, half-day and category."""
    ordered = sorted(
        units.values(),
        key=lambda u: (sort_key(u.date), u.half_day.value != "morning", u.category),
    )
    columns = [
        "date",
        "half_day",
        "category",
        "linked_entity_id",
        "demand",
        "capacity",
        "linked_entities",
    ]
    return pd.DataFrame([u.to_dict() for u in ordered], columns=columns)


def total_demand(units: Mapping[UnitKey, DemandUnit]) -> float:
    return sum(u.demand for u in units.values())


def categories_by_half_day(
    units: Mapping[UnitKey, DemandUnit],
) -> Dict[tuple, set]:
    """(date, half_day) -> categories with demand in that half-day."""
    result: Dict[tuple, set] = {}
    for unit in units.values():
        if unit.capacity <= 0:
            continue
        result.setdefault((unit.date, unit.half_day), set()).add(unit.category)
    return result


def find_unit(
    units: Mapping[UnitKey, DemandUnit],
    date,
    half_day: HalfDay,
    category: str,
    linked_entity_id: Optional[str] = None,
) -> Optional[DemandUnit]:
    return units.get((date, half_day, category, linked_entity_id))
