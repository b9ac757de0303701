from typing import List, Set, Tuple
from core.entities import ClosingRole
from utils.logger import get_logger
from utils.time_utils import sort_key
from .scoring import ScoreTable
from .units import ClosingUnit

logger = get_logger(__name__)


def _unassigned(unit: ClosingUnit, reason: str) -> dict:
    return {"site": unit.site, "date": unit.date, "pool": list(unit.pool), "reason": reason}


def choose_pair_of_two(unit: ClosingUnit, table: ScoreTable) -> Tuple[str, str]:
    """(primary, closer): the worker with fewer closing roles this week closes."""
    ranked = sorted(
        enumerate(unit.pool),
        key=lambda iw: (table[iw[1]].closer_count, table[iw[1]].penalized, iw[0]),
    )
    closer = ranked[0][1]
    primary = ranked[1][1]
    return primary, closer


def choose_best_pair(
    unit: ClosingUnit, table: ScoreTable, has_closed: Set[str]
) -> Tuple[str, str, int]:
    """
    Try every ordered (primary, closer) pair and keep the one with the lowest
    global metric. Closers are drawn from workers who have not closed this
    week when the pool has any; ties keep the first pair in pool order.
    """
    closers = [w for w in unit.pool if w not in has_closed] or list(unit.pool)
    best = None
    for primary in unit.pool:
        for closer in closers:
            if primary == closer:
                continue
            simulated = table.copy()
            simulated.add(primary, ClosingRole.PRIMARY)
            simulated.add(closer, unit.closer_role)
            metric = simulated.metric()
            if best is None or metric < best[2]:
                best = (primary, closer, metric)
    return best


def commit(unit: ClosingUnit, table: ScoreTable, has_closed: Set[str], primary, closer):
    """Write both roles of a unit at once."""
    unit.primary, unit.closer = primary, closer
    if primary is not None:
        table.add(primary, ClosingRole.PRIMARY)
    table.add(closer, unit.closer_role)
    has_closed.add(closer)


def run_phase1(
    units: List[ClosingUnit], table: ScoreTable, has_closed: Set[str]
) -> List[dict]:
    """
    Greedy assignment, scarcest pools first (then by date).

    Mutates `units`, `table` and `has_closed`.

    Returns:
        List[dict]: Units left without closing roles and why.
    """
    logger.info(f"🚀 Closing phase 1: {len(units)} units")
    unassigned = []
    ordered = sorted(units, key=lambda u: (len(u.pool), sort_key(u.date), u.site))
    for unit in ordered:
        size = len(unit.pool)
        if size == 0:
            logger.warning(f"⚠️ No full-day worker at {unit.site} on {unit.date}")
            unassigned.append(_unassigned(unit, "no full-day worker"))
            continue

        if size == 1:
            worker = unit.pool[0]
            if worker in has_closed:
                logger.warning(
                    f"⚠️ Only {worker} at {unit.site} on {unit.date}, already closing this week"
                )
                unassigned.append(_unassigned(unit, "single worker already closed this week"))
                continue
            commit(unit, table, has_closed, None, worker)
        elif size == 2:
            primary, closer = choose_pair_of_two(unit, table)
            commit(unit, table, has_closed, primary, closer)
        else:
            primary, closer, metric = choose_best_pair(unit, table, has_closed)
            logger.debug(f"{unit.site} {unit.date}: best of {size} workers gives metric {metric}")
            commit(unit, table, has_closed, primary, closer)

        logger.debug(
            f"{unit.site} {unit.date}: primary={unit.primary} {unit.closer_role.value}={unit.closer}"
        )
    logger.info(f"✅ Closing phase 1 done: metric = {table.metric()}")
    return unassigned
