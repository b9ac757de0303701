import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple
import pandas as pd
from core.entities import DayKey, HalfDay, Procedure
from exceptions.custom_errors import InvalidLayoutError
from scheduler.demand import procedure_half_days
from utils.constants import MULTI_FLOW_SIZES, ROOMS
from utils.logger import get_logger
from utils.time_utils import sort_key

logger = get_logger(__name__)


@dataclass(frozen=True)
class RoomLayout:
    """Configured rooms for `flow_count` concurrent procedures of one type, in order."""

    procedure_type: str
    flow_count: int
    rooms: Tuple[str, ...]


@dataclass(frozen=True)
class RoomAllocation:
    procedure_id: str
    date: DayKey
    half_day: HalfDay
    room: str

    def to_dict(self) -> dict:
        return {
            "procedure_id": self.procedure_id,
            "date": self.date,
            "half_day": self.half_day.value,
            "room": self.room,
        }


@dataclass
class RoomAllocationResult:
    allocations: List[RoomAllocation] = field(default_factory=list)
    unassigned: List[dict] = field(default_factory=list)

    def frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [a.to_dict() for a in self.allocations],
            columns=["procedure_id", "date", "half_day", "room"],
        )

    def to_dict(self) -> dict:
        return {
            "allocations": [a.to_dict() for a in self.allocations],
            "unassigned": self.unassigned,
        }


def validate_layouts(layouts: Iterable[RoomLayout], rooms: Sequence[str]) -> Dict[tuple, RoomLayout]:
    """
    Index layouts by (procedure_type, flow_count).

    Raises:
        InvalidLayoutError: If a layout has an unsupported flow count, a room
            count different from its flow count, duplicate or unknown rooms.
    """
    indexed = {}
    for layout in layouts:
        label = f"{layout.procedure_type} x{layout.flow_count}"
        if layout.flow_count not in MULTI_FLOW_SIZES:
            raise InvalidLayoutError(
                f"Layout {label}: flow count must be one of {list(MULTI_FLOW_SIZES)}"
            )
        if len(layout.rooms) != layout.flow_count:
            raise InvalidLayoutError(
                f"Layout {label}: expected {layout.flow_count} rooms, got {len(layout.rooms)}"
            )
        if len(set(layout.rooms)) != len(layout.rooms):
            raise InvalidLayoutError(f"Layout {label}: duplicate rooms {list(layout.rooms)}")
        unknown = [r for r in layout.rooms if r not in rooms]
        if unknown:
            raise InvalidLayoutError(f"Layout {label}: unknown rooms {unknown}")
        indexed[(layout.procedure_type, layout.flow_count)] = layout
    return indexed


def group_procedures(procedures: Iterable[Procedure]) -> Dict[tuple, List[Procedure]]:
    """(date, half_day, procedure_type) -> procedures, full-day ones in both halves."""
    groups: Dict[tuple, List[Procedure]] = {}
    for procedure in procedures:
        for half_day in procedure_half_days(procedure):
            groups.setdefault((procedure.date, half_day, procedure.procedure_type), []).append(
                procedure
            )
    return groups


def allocate_rooms(
    procedures: Iterable[Procedure],
    layouts: Iterable[RoomLayout] = (),
    preferred_rooms: Optional[Mapping[str, str]] = None,
    rooms: Sequence[str] = tuple(ROOMS),
    rng: Optional[random.Random] = None,
) -> RoomAllocationResult:
    """
    Give each procedure a room for each half-day it runs.

    Concurrent procedures of one type matching a multi-flow layout take the
    layout's rooms in order when all of them are free. Otherwise a lone
    procedure gets its type's preferred room if free; several procedures
    competing for it are shuffled and take it first-come, the others falling
    back to the first free room. A room never holds two procedures in the same
    half-day; procedures left without a room are returned in `unassigned`.

    Args:
        procedures: Procedures with a half-day label or a time range.
        layouts: Multi-flow layouts.
        preferred_rooms: Procedure type -> preferred room.
        rooms: Room names in fallback order.
        rng: Source of the tie-break shuffle; seed it for reproducible runs.
    """
    rng = rng or random.Random()
    preferred_rooms = dict(preferred_rooms or {})
    layout_index = validate_layouts(layouts, rooms)
    unknown = {t: r for t, r in preferred_rooms.items() if r not in rooms}
    if unknown:
        raise InvalidLayoutError(f"Preferred rooms not configured: {unknown}")

    taken: Dict[tuple, Set[str]] = {}
    result = RoomAllocationResult()
    groups = group_procedures(procedures)

    for key in sorted(groups, key=lambda k: (sort_key(k[0]), k[1] != HalfDay.MORNING, k[2])):
        day, half_day, procedure_type = key
        group = groups[key]
        used = taken.setdefault((day, half_day), set())

        def place(procedure: Procedure, room: str):
            used.add(room)
            result.allocations.append(RoomAllocation(procedure.id, day, half_day, room))

        def first_free() -> Optional[str]:
            return next((r for r in rooms if r not in used), None)

        layout = layout_index.get((procedure_type, len(group)))
        if layout and not used.intersection(layout.rooms):
            for procedure, room in zip(group, layout.rooms):
                place(procedure, room)
            continue

        preferred = preferred_rooms.get(procedure_type)
        if preferred and len(group) == 1 and preferred not in used:
            place(group[0], preferred)
            continue

        ordered = list(group)
        if preferred:
            rng.shuffle(ordered)
        for procedure in ordered:
            room = preferred if preferred and preferred not in used else first_free()
            if room is None:
                logger.warning(
                    f"⚠️ No free room for procedure {procedure.id} on {day} {half_day.value}"
                )
                result.unassigned.append(
                    {"procedure_id": procedure.id, "date": day, "half_day": half_day.value}
                )
                continue
            place(procedure, room)

    logger.info(
        f"🚪 Allocated {len(result.allocations)} rooms, {len(result.unassigned)} procedures unassigned"
    )
    return result
