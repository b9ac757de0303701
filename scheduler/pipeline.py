from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional
from closing import ClosingResult, assign_closing_roles
from closing.scoring import ScoreLike
from core.entities import Absence, Assignment, DemandRecord, Procedure, ShiftRecord, Worker
from scheduler.runner import ScenarioResult
from scheduler.scenarios import run_or_personnel, run_site_coverage
from utils.constants import MAX_EXCHANGE_ITERATIONS, RELUCTANT_SITES, TERTIARY_WEEKDAYS
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class WeekPlan:
    """Operating-room staffing, site coverage and closing roles of one run."""

    bloc: ScenarioResult
    sites: ScenarioResult
    closing: ClosingResult

    @property
    def assignments(self) -> List[Assignment]:
        """Every assignment of the run, closing roles included."""
        return self.closing.assignments

    def to_dict(self) -> dict:
        return {
            "assignments": [a.to_dict() for a in self.assignments],
            "bloc": self.bloc.to_dict(),
            "sites": self.sites.to_dict(),
            "closing": self.closing.to_dict(),
        }


def run_week_pipeline(
    workers: Iterable[Worker],
    shifts: Iterable[ShiftRecord],
    site_demand: Iterable[DemandRecord],
    procedures: Iterable[Procedure],
    requirements: Mapping[str, Mapping[str, int]],
    closure_sites: Iterable[str] = (),
    absences: Iterable[Absence] = (),
    doctor_demand: Optional[Iterable[DemandRecord]] = None,
    role_capabilities: Optional[Mapping[str, str]] = None,
    allow_admin: bool = True,
    reluctant_sites: Iterable[str] = RELUCTANT_SITES,
    finalized_dates: Iterable = (),
    prior_scores: Optional[Mapping[str, ScoreLike]] = None,
    tertiary_weekdays: Iterable[int] = TERTIARY_WEEKDAYS,
    tertiary_doctor_ids: Optional[Iterable[str]] = None,
    max_iterations: int = MAX_EXCHANGE_ITERATIONS,
    timeout: Optional[float] = None,
) -> WeekPlan:
    """
    Plan a horizon in dependency order.

    1. Operating-room personnel are staffed first.
    2. Site coverage runs with every slot booked by the operating room blocked,
       so nobody is placed twice.
    3. Closing roles are assigned on the combined assignments.

    `doctor_demand` tells the closing step which doctors are present; it
    defaults to `site_demand`, whose records carry the doctor as linked entity.
    """
    workers = list(workers)
    shifts = list(shifts)
    absences = list(absences)
    site_demand = list(site_demand)
    closure_sites = list(closure_sites)

    logger.info("📋 Week pipeline: operating-room personnel")
    bloc = run_or_personnel(
        workers,
        shifts,
        procedures,
        requirements,
        absences=absences,
        role_capabilities=role_capabilities,
        timeout=timeout,
    )

    logger.info(f"📋 Week pipeline: site coverage ({len(bloc.booked_slots)} slots booked)")
    sites = run_site_coverage(
        workers,
        shifts,
        site_demand,
        absences=absences,
        blocked_slots=bloc.booked_slots,
        closure_sites=closure_sites,
        allow_admin=allow_admin,
        reluctant_sites=reluctant_sites,
        timeout=timeout,
    )

    logger.info("📋 Week pipeline: closing roles")
    closing = assign_closing_roles(
        bloc.assignments + sites.assignments,
        closure_sites,
        site_demand if doctor_demand is None else doctor_demand,
        finalized_dates=finalized_dates,
        prior_scores=prior_scores,
        tertiary_weekdays=tertiary_weekdays,
        tertiary_doctor_ids=tertiary_doctor_ids,
        max_iterations=max_iterations,
    )
    logger.info(
        f"✅ Week pipeline done: {len(closing.assignments)} assignments, "
        f"{len(closing.unassigned)} closure units unassigned"
    )
    return WeekPlan(bloc=bloc, sites=sites, closing=closing)
