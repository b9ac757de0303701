"""
Tests for closing-role scoring, both phases and the full assignor.
"""
from datetime import date

import pytest

from closing import BurdenScore, ScoreTable, assign_closing_roles, find_closing_units, global_metric
from closing.phase1 import run_phase1
from closing.phase2 import exchange_is_legal, run_phase2
from closing.scoring import compute_metrics
from closing.units import ClosingUnit
from core.entities import ClosingRole, DemandRecord

THURSDAY = date(2025, 1, 9)
FRIDAY = date(2025, 1, 10)


def _doctor(day, site="s1", doctor="D"):
    return DemandRecord(f"{doctor}-{day}", day, None, None, site, linked_entity_id=doctor,
                        half_day="full_day")


# == Scoring ==
def test_weighted_and_penalized_scores():
    assert BurdenScore(primary=1, secondary=1, tertiary=1).base == 6
    assert BurdenScore(secondary=2).penalized == 4 + 10
    assert BurdenScore(primary=1, secondary=2).penalized == 5 + 10 + 5
    assert BurdenScore(secondary=1, tertiary=2).penalized == 8 + 20 + 5


def test_global_metric_is_sum_of_squares():
    table = ScoreTable({"a": {"secondary": 2}, "b": {"primary": 1}, "c": {"secondary": 1}})
    assert global_metric(table) == 196 + 1 + 4


def test_copy_does_not_touch_original():
    table = ScoreTable({"a": {"primary": 1}})
    simulated = table.copy()
    simulated.add("a", ClosingRole.SECONDARY)
    assert table["a"].secondary == 0


def test_global_metrics_summary():
    metrics = compute_metrics(ScoreTable({"a": {"secondary": 2}, "b": {"primary": 1}}))
    assert metrics.sum_of_squares == 197
    assert metrics.workers_over_ceiling == 1
    assert metrics.max_score == 14
    assert metrics.total_surcharge == 10


# == Phase 1 ==
def test_pool_of_two_gives_closing_to_fresh_worker(monday):
    unit = ClosingUnit("s1", monday, pool=["x", "y"])
    table = ScoreTable({"x": {"secondary": 1}})
    run_phase1([unit], table, has_closed={"x"})
    assert (unit.primary, unit.closer) == ("x", "y")
    assert table["x"].base == 3
    assert table["y"].base == 2


@pytest.mark.parametrize("has_closed", [{"a"}, set()])
def test_pool_of_three_avoids_concentration(monday, has_closed):
    unit = ClosingUnit("s1", monday, pool=["a", "b", "c"])
    table = ScoreTable({"a": {"secondary": 2}})
    run_phase1([unit], table, has_closed=set(has_closed))
    assert (unit.primary, unit.closer) == ("b", "c")
    assert table.metric() == 201


def test_single_worker_only_closes(monday):
    unit = ClosingUnit("s1", monday, pool=["x"])
    table = ScoreTable()
    unassigned = run_phase1([unit], table, has_closed=set())
    assert unassigned == []
    assert unit.primary is None
    assert unit.closer == "x"
    assert table["x"].secondary == 1


def test_single_worker_who_already_closed_is_reported(monday):
    unit = ClosingUnit("s1", monday, pool=["x"])
    unassigned = run_phase1([unit], ScoreTable({"x": {"secondary": 1}}), has_closed={"x"})
    assert unit.closer is None
    assert unassigned[0]["reason"] == "single worker already closed this week"


def test_empty_pool_is_reported(monday):
    unassigned = run_phase1([ClosingUnit("s1", monday)], ScoreTable(), has_closed=set())
    assert unassigned[0]["site"] == "s1"


def test_phase1_is_deterministic(monday):
    def run():
        units = [
            ClosingUnit("s1", monday, pool=["a", "b", "c"]),
            ClosingUnit("s2", monday, pool=["d", "e"]),
            ClosingUnit("s1", date(2025, 1, 7), pool=["a", "b", "c"]),
        ]
        table = ScoreTable()
        run_phase1(units, table, has_closed=set())
        return [(u.primary, u.closer) for u in units], table.to_dict()

    assert run() == run()


# == Phase 2 ==
def test_swap_relieves_overloaded_closer(monday):
    unit = ClosingUnit("s1", monday, pool=["p", "c"], primary="p", closer="c")
    table = ScoreTable({"c": {"secondary": 2}, "p": {"primary": 1}})
    table, trace = run_phase2([unit], table)
    assert (unit.primary, unit.closer) == ("c", "p")
    assert trace == [197, 13]
    assert all(a >= b for a, b in zip(trace, trace[1:]))


def test_iteration_cap_stops_search(monday):
    unit = ClosingUnit("s1", monday, pool=["p", "c"], primary="p", closer="c")
    table = ScoreTable({"c": {"secondary": 2}, "p": {"primary": 1}})
    _, trace = run_phase2([unit], table, max_iterations=0)
    assert trace == [197]
    assert unit.closer == "c"


def test_finalized_units_are_not_moved(monday):
    unit = ClosingUnit("s1", monday, pool=["p", "c"], primary="p", closer="c", finalized=True)
    _, trace = run_phase2([unit], ScoreTable({"c": {"secondary": 2}, "p": {"primary": 1}}))
    assert trace == [197]


def test_exchange_needs_both_pairs_in_both_pools(monday):
    a = ClosingUnit("s1", monday, pool=["w1", "w2", "w3"], primary="w1", closer="w2")
    b = ClosingUnit("s2", THURSDAY, pool=["w3", "w4", "w1", "w2"], primary="w3", closer="w4")
    assert not exchange_is_legal(a, b)
    a.pool.append("w4")
    assert exchange_is_legal(a, b)


def test_exchange_moves_tertiary_burden_across_units(monday):
    pool = ["c1", "c2", "p1", "p2"]
    a = ClosingUnit("s1", THURSDAY, pool=list(pool), tertiary=True, primary="p1", closer="c1")
    b = ClosingUnit("s2", monday, pool=list(pool), primary="p2", closer="c2")
    table = ScoreTable(
        {
            "p1": {"primary": 2},
            "c1": {"primary": 1, "tertiary": 1},
            "p2": {"primary": 1},
            "c2": {"secondary": 1},
        }
    )
    table, trace = run_phase2([a, b], table)

    assert (a.primary, a.closer) == ("p2", "c2")
    assert (b.primary, b.closer) == ("p1", "c1")
    assert trace == [25, 23]
    assert all(x > y for x, y in zip(trace, trace[1:]))
    assert table["c2"].tertiary == 1 and table["c2"].secondary == 0
    assert table["c1"].secondary == 1 and table["c1"].tertiary == 0


# == Assignor ==
def test_full_run_sets_roles_on_both_halves(full_day_at, monday):
    assignments = full_day_at("w1", "s1") + full_day_at("w2", "s1") + full_day_at("w3", "s2")
    result = assign_closing_roles(assignments, ["s1"], [_doctor(monday)])
    roles = {(a.worker_id, a.half_day.value): a.role for a in result.assignments}
    assert roles[("w1", "morning")] == roles[("w1", "afternoon")] == ClosingRole.SECONDARY
    assert roles[("w2", "morning")] == roles[("w2", "afternoon")] == ClosingRole.PRIMARY
    assert roles[("w3", "morning")] == ClosingRole.NONE
    assert len(result.log) == 1
    assert result.log[0].closer_score["score"] == 2


def test_site_without_doctor_all_day_needs_no_closing(full_day_at, monday):
    morning_only = DemandRecord("d", monday, None, None, "s1", linked_entity_id="D",
                                half_day="morning")
    units = find_closing_units(full_day_at("w1", "s1"), ["s1"], [morning_only])
    assert units == []


def test_repeated_doctor_calls_for_tertiary(full_day_at):
    assignments = []
    for day in (THURSDAY, FRIDAY):
        assignments += full_day_at("w1", "s1", day) + full_day_at("w2", "s1", day)
    doctors = [_doctor(THURSDAY), _doctor(FRIDAY)]

    units = {u.date: u for u in find_closing_units(assignments, ["s1"], doctors)}
    assert units[THURSDAY].tertiary
    assert not units[FRIDAY].tertiary

    units = find_closing_units(assignments, ["s1"], doctors, tertiary_doctor_ids=["X"])
    assert not any(u.tertiary for u in units)

    result = assign_closing_roles(assignments, ["s1"], doctors)
    roles = {e.date: e.closer_role for e in result.log}
    assert roles == {THURSDAY: ClosingRole.TERTIARY, FRIDAY: ClosingRole.SECONDARY}
    assert {e.closer for e in result.log} == {"w1", "w2"}


def test_finalized_dates_keep_roles_and_count(full_day_at, monday):
    tuesday = date(2025, 1, 7)
    assignments = (
        full_day_at("w1", "s1", monday, ClosingRole.PRIMARY)
        + full_day_at("w2", "s1", monday, ClosingRole.SECONDARY)
        + full_day_at("w1", "s1", tuesday)
        + full_day_at("w2", "s1", tuesday)
    )
    result = assign_closing_roles(
        assignments, ["s1"], [_doctor(monday), _doctor(tuesday)], finalized_dates=[monday]
    )
    log = {e.date: e for e in result.log}
    assert (log[monday].primary, log[monday].closer) == ("w1", "w2")
    assert log[monday].finalized
    assert (log[tuesday].primary, log[tuesday].closer) == ("w2", "w1")
    assert result.scores["w1"]["score"] == 3
    assert result.scores["w2"]["score"] == 3


def test_prior_scores_seed_the_table(full_day_at, monday):
    assignments = full_day_at("w1", "s1") + full_day_at("w2", "s1")
    result = assign_closing_roles(
        assignments, ["s1"], [_doctor(monday)], prior_scores={"w1": {"secondary": 1}}
    )
    assert (result.log[0].primary, result.log[0].closer) == ("w1", "w2")


def test_unstaffed_closure_site_is_unassigned(full_day_at, monday):
    result = assign_closing_roles(full_day_at("w1", "s2"), ["s1"], [_doctor(monday)])
    assert result.log == []
    assert result.unassigned[0]["reason"] == "no full-day worker"
