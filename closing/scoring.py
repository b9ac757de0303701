import statistics
from dataclasses import dataclass, asdict
from typing import Dict, Iterator, Mapping, Optional, Tuple, Union
from core.entities import ClosingRole
from utils.constants import (
    FAIR_SCORE_CEILING,
    MULTIPLE_CLOSER_SURCHARGE,
    OVERLOAD_SURCHARGE,
    PRIMARY_WEIGHT,
    SECONDARY_WEIGHT,
    TERTIARY_WEIGHT,
)


@dataclass
class BurdenScore:
    """Closing roles a worker holds this week."""

    primary: int = 0
    secondary: int = 0
    tertiary: int = 0

    def add(self, role: ClosingRole, delta: int = 1):
        if role == ClosingRole.PRIMARY:
            self.primary += delta
        elif role == ClosingRole.SECONDARY:
            self.secondary += delta
        elif role == ClosingRole.TERTIARY:
            self.tertiary += delta

    @property
    def closer_count(self) -> int:
        return self.secondary + self.tertiary

    @property
    def total(self) -> int:
        return self.primary + self.secondary + self.tertiary

    @property
    def base(self) -> int:
        return (
            self.primary * PRIMARY_WEIGHT
            + self.secondary * SECONDARY_WEIGHT
            + self.tertiary * TERTIARY_WEIGHT
        )

    @property
    def surcharge(self) -> int:
        extra = 0
        if self.closer_count >= 2:
            extra += (self.closer_count - 1) * MULTIPLE_CLOSER_SURCHARGE
        if self.total >= 3:
            extra += (self.total - 2) * OVERLOAD_SURCHARGE
        return extra

    @property
    def penalized(self) -> int:
        return self.base + self.surcharge

    def copy(self) -> "BurdenScore":
        return BurdenScore(self.primary, self.secondary, self.tertiary)

    def to_dict(self) -> dict:
        return {**asdict(self), "score": self.base, "penalized_score": self.penalized}


ScoreLike = Union[BurdenScore, Mapping[str, int]]


class ScoreTable:
    """
    Per-worker burden scores of one run.

    Moves are evaluated on `copy()` and the copy replaces the live table only
    once the move is accepted.
    """

    def __init__(self, scores: Optional[Mapping[str, ScoreLike]] = None):
        self._scores: Dict[str, BurdenScore] = {}
        for worker_id, score in (scores or {}).items():
            if isinstance(score, BurdenScore):
                self._scores[worker_id] = score.copy()
            else:
                self._scores[worker_id] = BurdenScore(
                    primary=int(score.get("primary", 0)),
                    secondary=int(score.get("secondary", 0)),
                    tertiary=int(score.get("tertiary", 0)),
                )

    def __getitem__(self, worker_id: str) -> BurdenScore:
        return self._scores.setdefault(worker_id, BurdenScore())

    def __contains__(self, worker_id: str) -> bool:
        return worker_id in self._scores

    def __iter__(self) -> Iterator[str]:
        return iter(self._scores)

    def items(self) -> Iterator[Tuple[str, BurdenScore]]:
        return iter(self._scores.items())

    def add(self, worker_id: str, role: ClosingRole, delta: int = 1):
        self[worker_id].add(role, delta)

    def copy(self) -> "ScoreTable":
        return ScoreTable(self._scores)

    def metric(self) -> int:
        return global_metric(self)

    def to_dict(self) -> Dict[str, dict]:
        return {w: s.to_dict() for w, s in sorted(self._scores.items())}


def penalized_score(score: BurdenScore) -> int:
    """Base score plus the concentration surcharges."""
    return score.penalized


def global_metric(table: ScoreTable) -> int:
    """Sum of squared penalized scores over every worker in the table."""
    return sum(score.penalized ** 2 for _, score in table.items())


@dataclass
class GlobalMetrics:
    sum_of_squares: int
    workers_over_ceiling: int
    max_score: int
    stddev: float
    total_surcharge: int

    def to_dict(self) -> dict:
        return asdict(self)


def compute_metrics(table: ScoreTable) -> GlobalMetrics:
    scores = [s for _, s in table.items() if s.total > 0]
    penalized = [s.penalized for s in scores]
    return GlobalMetrics(
        sum_of_squares=global_metric(table),
        workers_over_ceiling=sum(1 for p in penalized if p > FAIR_SCORE_CEILING),
        max_score=max(penalized, default=0),
        stddev=round(statistics.pstdev(penalized), 4) if len(penalized) > 1 else 0.0,
        total_surcharge=sum(s.surcharge for s in scores),
    )
