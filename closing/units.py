from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from core.entities import ClosingRole, DayKey


@dataclass
class ClosingUnit:
    """A (site, date) that needs closing, with its pool of full-day workers."""

    site: str
    date: DayKey
    pool: List[str] = field(default_factory=list)
    tertiary: bool = False
    primary: Optional[str] = None
    closer: Optional[str] = None
    finalized: bool = False

    @property
    def key(self) -> Tuple[str, DayKey]:
        return (self.site, self.date)

    @property
    def closer_role(self) -> ClosingRole:
        return ClosingRole.TERTIARY if self.tertiary else ClosingRole.SECONDARY

    @property
    def is_complete(self) -> bool:
        return self.primary is not None and self.closer is not None

    def role_of(self, worker_id: str) -> ClosingRole:
        if worker_id == self.closer:
            return self.closer_role
        if worker_id == self.primary:
            return ClosingRole.PRIMARY
        return ClosingRole.NONE
