from pydantic import BaseModel, model_validator, Field, ConfigDict
from typing import List, Optional, Union
from datetime import date
from core.entities import (
    Absence,
    Assignment,
    ClosingRole,
    DemandRecord,
    HalfDay,
    Procedure,
    ShiftRecord,
    Worker,
)

# Recurring schedules use ISO weekdays (1-7), dated runs calendar dates
DayValue = Union[int, date]


class WorkerProfile(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""
    capabilities: List[str] = Field(default_factory=list)
    sitePreferences: List[str] = Field(default_factory=list)
    prefersAdmin: bool = False
    preferredSite: Optional[str] = None
    linkedEntityId: Optional[str] = None
    flexible: bool = False
    quotaDays: Optional[int] = None
    workPercentage: Optional[float] = None

    def to_entity(self) -> Worker:
        return Worker(
            id=self.id,
            name=self.name,
            capabilities=tuple(self.capabilities),
            site_preferences=tuple(self.sitePreferences),
            prefers_admin=self.prefersAdmin,
            preferred_site=self.preferredSite,
            linked_entity_id=self.linkedEntityId,
            flexible=self.flexible,
            quota_days=self.quotaDays,
            work_percentage=self.workPercentage,
        )


class ShiftIn(BaseModel):
    model_config = ConfigDict(extra="allow")

    workerId: str
    date: DayValue
    start: str
    end: str

    def to_entity(self) -> ShiftRecord:
        return ShiftRecord(self.workerId, self.date, self.start, self.end)


def _check_half_day_or_range(half_day, start, end, label: str):
    if half_day is None and (start is None or end is None):
        raise ValueError(f"{label} needs either halfDay or both start and end.")


class DemandIn(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    date: DayValue
    category: str
    start: Optional[str] = None
    end: Optional[str] = None
    quantity: float = Field(default=1.0, ge=0)
    linkedEntityId: Optional[str] = None
    halfDay: Optional[str] = None

    @model_validator(mode="after")
    def check_time_source(self) -> "DemandIn":
        _check_half_day_or_range(self.halfDay, self.start, self.end, f"Demand {self.id}")
        return self

    def to_entity(self) -> DemandRecord:
        return DemandRecord(
            id=self.id,
            date=self.date,
            start=self.start,
            end=self.end,
            category=self.category,
            quantity=self.quantity,
            linked_entity_id=self.linkedEntityId,
            half_day=self.halfDay,
        )


class AbsenceIn(BaseModel):
    model_config = ConfigDict(extra="allow")

    workerId: str
    startDate: date
    endDate: date
    start: Optional[str] = None
    end: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self) -> "AbsenceIn":
        if self.endDate < self.startDate:
            raise ValueError("endDate must be after or same as startDate.")
        return self

    def to_entity(self) -> Absence:
        return Absence(self.workerId, self.startDate, self.endDate, self.start, self.end)


class ProcedureIn(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    date: DayValue
    procedureType: str
    start: Optional[str] = None
    end: Optional[str] = None
    halfDay: Optional[str] = None
    doctorId: Optional[str] = None

    @model_validator(mode="after")
    def check_time_source(self) -> "ProcedureIn":
        _check_half_day_or_range(self.halfDay, self.start, self.end, f"Procedure {self.id}")
        return self

    def to_entity(self) -> Procedure:
        return Procedure(
            id=self.id,
            date=self.date,
            procedure_type=self.procedureType,
            start=self.start,
            end=self.end,
            half_day=self.halfDay,
            doctor_id=self.doctorId,
        )


class AssignmentIn(BaseModel):
    model_config = ConfigDict(extra="allow")

    workerId: str
    date: DayValue
    halfDay: HalfDay
    category: str
    linkedEntityId: Optional[str] = None
    role: ClosingRole = ClosingRole.NONE

    def to_entity(self) -> Assignment:
        return Assignment(
            worker_id=self.workerId,
            date=self.date,
            half_day=self.halfDay,
            category=self.category,
            linked_entity_id=self.linkedEntityId,
            role=self.role,
        )


class SlotIn(BaseModel):
    workerId: str
    date: DayValue
    halfDay: HalfDay

    def to_key(self):
        return (self.workerId, self.date, self.halfDay)
