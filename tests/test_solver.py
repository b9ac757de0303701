"""
Tests for the shared assignment model: uniqueness, capacity, objective and
failure modes.
"""
import pytest
from ortools.sat.python import cp_model

from core.entities import DemandUnit, HalfDay
from exceptions.custom_errors import ModelConstructionError, NoFeasibleSolutionError
from scheduler.builder import build_assignment_model
from scheduler.extractor import compute_stats, extract_assignments
from scheduler.solver import SolverResult, solve_assignment


def _unit(day, category, demand, half_day=HalfDay.MORNING):
    return DemandUnit(day, half_day, category, demand=demand)


def _solve(units, rewards, **kwargs):
    model, state = build_assignment_model(units, rewards, **kwargs)
    result = solve_assignment(model, state, timeout=10)
    return state, result, extract_assignments(state, result)


def test_one_assignment_per_worker_half_day(monday):
    u1, u2 = _unit(monday, "s1", 1), _unit(monday, "s2", 1)
    units = {u1.key: u1, u2.key: u2}
    rewards = {("w1", u1.key): 1.0, ("w1", u2.key): 2.0}
    _, result, assignments = _solve(units, rewards)
    assert len(assignments) == 1
    assert assignments[0].category == "s2"
    assert result.objective_value == pytest.approx(2.0)


def test_capacity_is_respected(monday):
    unit = _unit(monday, "s1", 1.5)
    units = {unit.key: unit}
    rewards = {(w, unit.key): 1.0 for w in ("w1", "w2", "w3")}
    _, _, assignments = _solve(units, rewards)
    assert len(assignments) == unit.capacity == 2


def test_rewards_are_rescaled(monday):
    unit = _unit(monday, "s1", 3)
    units = {unit.key: unit}
    rewards = {("w1", unit.key): 100 / 3, ("w2", unit.key): 100 / 3}
    _, result, _ = _solve(units, rewards)
    assert result.objective_value == pytest.approx(66.666, abs=1e-2)


def test_candidate_for_unknown_unit_raises(monday):
    unit = _unit(monday, "s1", 1)
    with pytest.raises(ModelConstructionError):
        build_assignment_model({}, {("w1", unit.key): 1.0})


def test_candidate_for_unit_without_capacity_raises(monday):
    unit = _unit(monday, "s1", 0)
    with pytest.raises(ModelConstructionError):
        build_assignment_model({unit.key: unit}, {("w1", unit.key): 1.0})


def test_infeasible_model_raises(monday):
    unit = _unit(monday, "s1", 1)

    def impossible(model, state):
        model.Add(sum(state.x.values()) >= 2)

    model, state = build_assignment_model(
        {unit.key: unit}, {("w1", unit.key): 1.0}, post_rules=[impossible]
    )
    with pytest.raises(NoFeasibleSolutionError):
        solve_assignment(model, state, timeout=5)


def test_partial_coverage_is_reported(monday):
    u1, u2 = _unit(monday, "s1", 2), _unit(monday, "s2", 1)
    units = {u1.key: u1, u2.key: u2}
    _, result, assignments = _solve(units, {("w1", u1.key): 1.0})
    stats = compute_stats(units, assignments, result.objective_value)
    assert stats.total_satisfied == 1
    assert stats.satisfaction_percentage == pytest.approx(33.33)
    assert stats.feasible


def test_solver_beats_greedy_first_fit(monday):
    # greedy by reward puts a on s1 and leaves b idle
    u1, u2 = _unit(monday, "s1", 1), _unit(monday, "s2", 1)
    units = {u1.key: u1, u2.key: u2}
    rewards = {("a", u1.key): 2.0, ("a", u2.key): 1.0, ("b", u1.key): 1.5}
    _, result, assignments = _solve(units, rewards)
    assert {(a.worker_id, a.category) for a in assignments} == {("a", "s2"), ("b", "s1")}
    assert result.objective_value == pytest.approx(2.5)
    assert result.optimal


def test_feasible_but_unproven_result_is_flagged(monday):
    result = SolverResult(
        status=cp_model.FEASIBLE, status_name="FEASIBLE", objective_value=1.0, wall_time=60.0
    )
    assert result.feasible
    assert not result.optimal

    unit = _unit(monday, "s1", 1)
    stats = compute_stats({unit.key: unit}, [], 1.0, result.feasible, result.optimal)
    assert stats.to_dict()["optimal"] is False
    assert stats.feasible
