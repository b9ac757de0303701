from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Mapping, Optional, Set
import pandas as pd
from core.entities import HALF_DAYS, Assignment, ClosingRole, DemandRecord, HalfDay
from scheduler.demand import record_half_day_shares
from utils.constants import MAX_EXCHANGE_ITERATIONS, TERTIARY_WEEKDAYS
from utils.logger import get_logger
from utils.time_utils import iso_weekday, next_day, sort_key
from .phase1 import run_phase1
from .phase2 import run_phase2
from .scoring import GlobalMetrics, ScoreLike, ScoreTable, compute_metrics
from .units import ClosingUnit

logger = get_logger(__name__)


@dataclass
class ClosingLogEntry:
    site: str
    date: object
    primary: Optional[str]
    closer: Optional[str]
    closer_role: ClosingRole
    primary_score: Optional[dict] = None
    closer_score: Optional[dict] = None
    finalized: bool = False

    def to_dict(self) -> dict:
        return {
            "site": self.site,
            "date": self.date,
            "primary": self.primary,
            "closer": self.closer,
            "closer_role": self.closer_role.value,
            "primary_score": self.primary_score,
            "closer_score": self.closer_score,
            "finalized": self.finalized,
        }


@dataclass
class ClosingResult:
    assignments: List[Assignment]
    log: List[ClosingLogEntry]
    unassigned: List[dict]
    metrics: GlobalMetrics
    scores: Dict[str, dict] = field(default_factory=dict)
    trace: List[int] = field(default_factory=list)

    def log_frame(self) -> pd.DataFrame:
        return pd.DataFrame([e.to_dict() for e in self.log])

    def to_dict(self) -> dict:
        return {
            "assignments": [a.to_dict() for a in self.assignments],
            "log": [e.to_dict() for e in self.log],
            "unassigned": self.unassigned,
            "metrics": self.metrics.to_dict(),
            "scores": self.scores,
            "trace": self.trace,
        }


def doctor_presence(doctor_demand: Iterable[DemandRecord]) -> Dict[tuple, Dict[HalfDay, Set[str]]]:
    """(site, date) -> half-day -> doctors present, from doctor demand records."""
    presence: Dict[tuple, Dict[HalfDay, Set[str]]] = {}
    for record in doctor_demand:
        for half_day in record_half_day_shares(record):
            doctors = presence.setdefault((record.category, record.date), {}).setdefault(
                half_day, set()
            )
            doctors.add(record.linked_entity_id or record.id)
    return presence


def full_day_doctors(presence: Mapping[HalfDay, Set[str]]) -> Set[str]:
    return set.intersection(*(set(presence.get(h, set())) for h in HALF_DAYS))


def find_closing_units(
    site_assignments: Iterable[Assignment],
    closure_sites: Iterable[str],
    doctor_demand: Iterable[DemandRecord],
    tertiary_weekdays: Iterable[int] = TERTIARY_WEEKDAYS,
    tertiary_doctor_ids: Optional[Iterable[str]] = None,
) -> List[ClosingUnit]:
    """
    Closure units of a week.

    A (site, date) needs closing when the site is flagged and doctors are
    present both half-days. Its pool is the workers assigned to the site both
    half-days. The unit takes the tertiary role instead of the secondary one
    when one of its full-day doctors is back at the site the next day, on the
    configured weekdays (and, if given, only for the listed doctors).
    """
    closure_sites = set(closure_sites)
    weekdays = set(tertiary_weekdays)
    watched = set(tertiary_doctor_ids) if tertiary_doctor_ids is not None else None
    presence = doctor_presence(doctor_demand)

    halves_by_worker: Dict[tuple, Dict[str, Set[HalfDay]]] = {}
    for a in site_assignments:
        if a.is_admin or a.category not in closure_sites:
            continue
        halves_by_worker.setdefault((a.category, a.date), {}).setdefault(
            a.worker_id, set()
        ).add(a.half_day)

    units = []
    for (site, day), halves in presence.items():
        if site not in closure_sites:
            continue
        if not all(halves.get(h) for h in HALF_DAYS):
            continue
        workers = halves_by_worker.get((site, day), {})
        pool = sorted(w for w, hs in workers.items() if hs.issuperset(HALF_DAYS))

        tertiary = False
        if iso_weekday(day) in weekdays:
            today = full_day_doctors(halves)
            tomorrow = full_day_doctors(presence.get((site, next_day(day)), {}))
            repeat = today & tomorrow
            if watched is not None:
                repeat &= watched
            tertiary = bool(repeat)
        units.append(ClosingUnit(site=site, date=day, pool=pool, tertiary=tertiary))

    units.sort(key=lambda u: (sort_key(u.date), u.site))
    logger.info(f"🔒 {len(units)} closure units ({sum(u.tertiary for u in units)} tertiary)")
    return units


def _load_finalized(unit: ClosingUnit, assignments: Iterable[Assignment]):
    """Read the roles already stored on a finalized unit's assignments."""
    for a in assignments:
        if a.category != unit.site or a.date != unit.date:
            continue
        if a.role == ClosingRole.PRIMARY:
            unit.primary = a.worker_id
        elif a.role.is_closer:
            unit.closer = a.worker_id
            unit.tertiary = a.role == ClosingRole.TERTIARY
    unit.finalized = True


def assign_closing_roles(
    site_assignments: Iterable[Assignment],
    closure_sites: Iterable[str],
    doctor_demand: Iterable[DemandRecord],
    finalized_dates: Iterable = (),
    prior_scores: Optional[Mapping[str, ScoreLike]] = None,
    tertiary_weekdays: Iterable[int] = TERTIARY_WEEKDAYS,
    tertiary_doctor_ids: Optional[Iterable[str]] = None,
    max_iterations: int = MAX_EXCHANGE_ITERATIONS,
) -> ClosingResult:
    """
    Assign closing roles for one week.

    Units on `finalized_dates` keep the roles already stored on their
    assignments; those roles count toward the scores but are never moved.
    `prior_scores` seeds the burden table (e.g. roles held earlier in the
    week). Phase 1 assigns every open unit greedily, phase 2 improves the
    result with swaps and exchanges.

    Returns:
        ClosingResult: the input assignments with roles set on closure units,
            the per-unit log, units left without roles and fairness metrics.
    """
    site_assignments = list(site_assignments)
    finalized_dates = set(finalized_dates)
    units = find_closing_units(
        site_assignments, closure_sites, doctor_demand, tertiary_weekdays, tertiary_doctor_ids
    )

    table = ScoreTable(prior_scores)
    open_units = []
    for unit in units:
        if unit.date in finalized_dates:
            _load_finalized(unit, site_assignments)
            if unit.primary:
                table.add(unit.primary, ClosingRole.PRIMARY)
            if unit.closer:
                table.add(unit.closer, unit.closer_role)
        else:
            open_units.append(unit)

    has_closed = {w for w, score in table.items() if score.closer_count > 0}
    unassigned = run_phase1(open_units, table, has_closed)
    table, trace = run_phase2(open_units, table, max_iterations)

    roles = {}
    for unit in units:
        for worker_id in unit.pool:
            roles[(worker_id, unit.site, unit.date)] = unit.role_of(worker_id)
    closing_keys = {(u.site, u.date) for u in units}

    assignments = []
    for a in site_assignments:
        key = (a.worker_id, a.category, a.date)
        if key in roles:
            a = replace(a, role=roles[key])
        elif (a.category, a.date) in closing_keys and a.date not in finalized_dates:
            a = replace(a, role=ClosingRole.NONE)
        assignments.append(a)

    log = [
        ClosingLogEntry(
            site=u.site,
            date=u.date,
            primary=u.primary,
            closer=u.closer,
            closer_role=u.closer_role,
            primary_score=table[u.primary].to_dict() if u.primary else None,
            closer_score=table[u.closer].to_dict() if u.closer else None,
            finalized=u.finalized,
        )
        for u in units
        if u.primary or u.closer
    ]
    metrics = compute_metrics(table)
    logger.info(
        f"✅ Closing roles: {len(log)} units assigned, {len(unassigned)} unassigned, "
        f"metric = {metrics.sum_of_squares}"
    )
    return ClosingResult(
        assignments=assignments,
        log=log,
        unassigned=unassigned,
        metrics=metrics,
        scores=table.to_dict(),
        trace=trace,
    )
