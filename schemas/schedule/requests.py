from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Dict, List, Optional
from datetime import date
from schemas.closing.assign import PriorScore
from utils.constants import RELUCTANT_SITES, TERTIARY_WEEKDAYS
from .records import DemandIn, ShiftIn, SlotIn, WorkerProfile


class WhatIfIn(BaseModel):
    model_config = ConfigDict(extra="allow")

    fictionalWorkers: List[WorkerProfile] = Field(default_factory=list)
    fictionalShifts: List[ShiftIn] = Field(default_factory=list)
    fictionalDemands: List[DemandIn] = Field(default_factory=list)


class BaseScheduleRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    whatIf: Optional[WhatIfIn] = None
    timeout: Optional[float] = Field(default=None, gt=0)


class SiteCoverageRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    closureSites: List[str] = Field(default_factory=list)
    blockedSlots: List[SlotIn] = Field(default_factory=list)
    allowAdmin: bool = True
    reluctantSites: List[str] = Field(default_factory=lambda: list(RELUCTANT_SITES))
    timeout: Optional[float] = Field(default=None, gt=0)


class BlocRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    # procedure type -> {role: required count}
    requirements: Dict[str, Dict[str, int]]
    roleCapabilities: Optional[Dict[str, str]] = None
    timeout: Optional[float] = Field(default=None, gt=0)


class FloaterRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    weekStart: date
    holidays: List[date] = Field(default_factory=list)
    quotaOverrides: Dict[str, int] = Field(default_factory=dict)
    timeout: Optional[float] = Field(default=None, gt=0)


class WeekRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    # procedure type -> {role: required count}
    requirements: Dict[str, Dict[str, int]] = Field(default_factory=dict)
    roleCapabilities: Optional[Dict[str, str]] = None
    closureSites: List[str] = Field(default_factory=list)
    allowAdmin: bool = True
    reluctantSites: List[str] = Field(default_factory=lambda: list(RELUCTANT_SITES))
    finalizedDates: List[date] = Field(default_factory=list)
    priorScores: Dict[str, PriorScore] = Field(default_factory=dict)
    tertiaryWeekdays: List[int] = Field(default_factory=lambda: list(TERTIARY_WEEKDAYS))
    tertiaryDoctorIds: Optional[List[str]] = None
    timeout: Optional[float] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def check_weekdays(self) -> "WeekRequest":
        bad = [d for d in self.tertiaryWeekdays if not 1 <= d <= 7]
        if bad:
            raise ValueError(f"tertiaryWeekdays must be ISO weekdays 1-7, got {bad}.")
        return self
