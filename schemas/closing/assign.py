from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Dict, List, Optional
from datetime import date
from utils.constants import MAX_EXCHANGE_ITERATIONS, TERTIARY_WEEKDAYS


class PriorScore(BaseModel):
    primary: int = Field(default=0, ge=0)
    secondary: int = Field(default=0, ge=0)
    tertiary: int = Field(default=0, ge=0)


class ClosingRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    closureSites: List[str]
    finalizedDates: List[date] = Field(default_factory=list)
    priorScores: Dict[str, PriorScore] = Field(default_factory=dict)
    tertiaryWeekdays: List[int] = Field(default_factory=lambda: list(TERTIARY_WEEKDAYS))
    tertiaryDoctorIds: Optional[List[str]] = None
    maxIterations: int = Field(default=MAX_EXCHANGE_ITERATIONS, ge=0)

    @model_validator(mode="after")
    def check_weekdays(self) -> "ClosingRequest":
        bad = [d for d in self.tertiaryWeekdays if not 1 <= d <= 7]
        if bad:
            raise ValueError(f"tertiaryWeekdays must be ISO weekdays 1-7, got {bad}.")
        return self
