from dataclasses import dataclass, field, asdict
from datetime import date, time
from enum import Enum
import math
from typing import Any, Dict, FrozenSet, Optional, Set, Tuple, Union

# Recurring (base) schedules are keyed by ISO weekday, dated runs by calendar date.
DayKey = Union[date, int]


class HalfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"


HALF_DAYS = (HalfDay.MORNING, HalfDay.AFTERNOON)


class ClosingRole(str, Enum):
    """Closing responsibility attached to a full-day site assignment.

    A single field instead of separate flags, so a worker can never hold two
    roles on the same assignment.
    """

    NONE = "none"
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"

    @property
    def is_closer(self) -> bool:
        return self in (ClosingRole.SECONDARY, ClosingRole.TERTIARY)


ADMIN_CATEGORY = "admin"

# (date, half_day, category, linked_entity_id)
UnitKey = Tuple[DayKey, HalfDay, str, Optional[str]]
# (worker_id, date, half_day)
SlotKey = Tuple[str, DayKey, HalfDay]


@dataclass
class Worker:
    id: str
    name: str = ""
    capabilities: Tuple[str, ...] = ()
    """Category tags the worker can cover: specialties, sites or room roles."""
    site_preferences: Tuple[str, ...] = ()
    """Ordered site ranking: preferred, secondary, tertiary."""
    prefers_admin: bool = False
    preferred_site: Optional[str] = None
    linked_entity_id: Optional[str] = None
    """Doctor the worker is attached to, if any."""
    flexible: bool = False
    quota_days: Optional[int] = None
    work_percentage: Optional[float] = None
    fictional: bool = False

    def __post_init__(self):
        self.capabilities = tuple(self.capabilities)
        self.site_preferences = tuple(self.site_preferences)
        if self.preferred_site is None and self.site_preferences:
            self.preferred_site = self.site_preferences[0]

    def can_cover(self, category: str) -> bool:
        return category in self.capabilities

    def prefers_site(self, site_id: str) -> bool:
        return self.preferred_site is not None and self.preferred_site == site_id


@dataclass
class ShiftRecord:
    worker_id: str
    date: DayKey
    start: Union[str, time]
    end: Union[str, time]


@dataclass
class DemandRecord:
    id: str
    date: DayKey
    start: Union[str, time, None]
    end: Union[str, time, None]
    category: str
    quantity: float = 1.0
    linked_entity_id: Optional[str] = None
    half_day: Optional[str] = None
    """Explicit "morning", "afternoon" or "full_day"; bypasses the overlap calculation."""


@dataclass
class Absence:
    worker_id: str
    start_date: date
    end_date: date
    start: Union[str, time, None] = None
    end: Union[str, time, None] = None


@dataclass
class Procedure:
    id: str
    date: DayKey
    procedure_type: str
    start: Union[str, time, None] = None
    end: Union[str, time, None] = None
    half_day: Optional[str] = None
    doctor_id: Optional[str] = None


@dataclass
class DemandUnit:
    date: DayKey
    half_day: HalfDay
    category: str
    demand: float = 0.0
    linked_entity_id: Optional[str] = None
    linked_entities: Set[str] = field(default_factory=set)

    @property
    def key(self) -> UnitKey:
        return (self.date, self.half_day, self.category, self.linked_entity_id)

    @property
    def capacity(self) -> int:
        # Round first so float noise (e.g. 3 x 0.1) never adds a whole worker
        return max(0, math.ceil(round(self.demand, 6)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "half_day": self.half_day.value,
            "category": self.category,
            "linked_entity_id": self.linked_entity_id,
            "demand": round(self.demand, 4),
            "capacity": self.capacity,
            "linked_entities": sorted(self.linked_entities),
        }


@dataclass(frozen=True)
class AvailabilitySlot:
    worker_id: str
    date: DayKey
    half_day: HalfDay
    categories: FrozenSet[str] = frozenset()

    @property
    def key(self) -> SlotKey:
        return (self.worker_id, self.date, self.half_day)


@dataclass(frozen=True)
class Assignment:
    worker_id: str
    date: DayKey
    half_day: HalfDay
    category: str
    linked_entity_id: Optional[str] = None
    role: ClosingRole = ClosingRole.NONE

    @property
    def slot(self) -> SlotKey:
        return (self.worker_id, self.date, self.half_day)

    @property
    def is_admin(self) -> bool:
        return self.category == ADMIN_CATEGORY

    def to_dict(self) -> Dict[str, Any]:
        record = asdict(self)
        record["half_day"] = self.half_day.value
        record["role"] = self.role.value
        return record
