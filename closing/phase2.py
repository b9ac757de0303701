from typing import List, Optional, Tuple
from core.entities import ClosingRole
from utils.constants import MAX_EXCHANGE_ITERATIONS
from utils.logger import get_logger
from .scoring import ScoreTable
from .units import ClosingUnit

logger = get_logger(__name__)


def _reassign(table: ScoreTable, unit: ClosingUnit, primary: str, closer: str) -> ScoreTable:
    """Copy of `table` with the unit's roles moved to (primary, closer)."""
    simulated = table.copy()
    simulated.add(unit.primary, ClosingRole.PRIMARY, -1)
    simulated.add(unit.closer, unit.closer_role, -1)
    simulated.add(primary, ClosingRole.PRIMARY)
    simulated.add(closer, unit.closer_role)
    return simulated


def simulate_swap(table: ScoreTable, unit: ClosingUnit) -> ScoreTable:
    """Primary and closer of one unit trade roles."""
    return _reassign(table, unit, unit.closer, unit.primary)


def exchange_is_legal(a: ClosingUnit, b: ClosingUnit) -> bool:
    return (
        b.primary in a.pool
        and b.closer in a.pool
        and a.primary in b.pool
        and a.closer in b.pool
    )


def simulate_exchange(table: ScoreTable, a: ClosingUnit, b: ClosingUnit) -> Optional[ScoreTable]:
    """
    Units a and b trade their (primary, closer) pairs.

    Returns None when the exchange is illegal: some worker is not in the other
    unit's pool, or a closer would end up holding more than one closing role.
    """
    if not exchange_is_legal(a, b):
        return None
    simulated = _reassign(table, a, b.primary, b.closer)
    simulated = _reassign(simulated, b, a.primary, a.closer)
    if simulated[a.closer].closer_count > 1 or simulated[b.closer].closer_count > 1:
        return None
    return simulated


def run_phase2(
    units: List[ClosingUnit],
    table: ScoreTable,
    max_iterations: int = MAX_EXCHANGE_ITERATIONS,
) -> Tuple[ScoreTable, List[int]]:
    """
    Strict hill climbing over role swaps and pair exchanges.

    Each iteration evaluates every intra-unit swap and every legal cross-unit
    exchange on copies of the score table and applies the single best move
    that strictly lowers the global metric. Stops when no move improves or
    after `max_iterations`.

    Returns:
        tuple: The final score table and the metric trace (initial value
            first, non-increasing).
    """
    movable = [u for u in units if u.is_complete and not u.finalized]
    current = table.metric()
    trace = [current]
    logger.info(f"🚀 Closing phase 2: {len(movable)} movable units, metric = {current}")

    for iteration in range(max_iterations):
        best = None
        for i, unit in enumerate(movable):
            simulated = simulate_swap(table, unit)
            metric = simulated.metric()
            if metric < current and (best is None or metric < best[0]):
                best = (metric, simulated, ("swap", unit))
            for other in movable[i + 1:]:
                simulated = simulate_exchange(table, unit, other)
                if simulated is None:
                    continue
                metric = simulated.metric()
                if metric < current and (best is None or metric < best[0]):
                    best = (metric, simulated, ("exchange", unit, other))

        if best is None:
            break

        current, table, move = best
        if move[0] == "swap":
            unit = move[1]
            unit.primary, unit.closer = unit.closer, unit.primary
        else:
            a, b = move[1], move[2]
            (a.primary, a.closer), (b.primary, b.closer) = (b.primary, b.closer), (a.primary, a.closer)
        trace.append(current)
        logger.debug(f"iteration {iteration + 1}: {move[0]} → metric {current}")

    logger.info(f"✅ Closing phase 2 done after {len(trace) - 1} moves: metric = {current}")
    return table, trace
