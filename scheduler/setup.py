from typing import Dict, Mapping, Optional, Tuple
from ortools.sat.python import cp_model
from core.entities import DemandUnit, UnitKey
from core.state import AssignmentState, CandidateKey
from exceptions.custom_errors import ModelConstructionError


def make_model():
    """Creates a new CP-SAT model instance."""
    model = cp_model.CpModel()
    return model


def var_label(worker_id: str, unit_key: UnitKey) -> str:
    day, half_day, category, linked = unit_key
    suffix = f"_{linked}" if linked else ""
    return f"x_{worker_id}_{day}_{half_day.value}_{category}{suffix}"


def build_variables(
    model: cp_model.CpModel, rewards: Mapping[CandidateKey, float]
) -> Dict[CandidateKey, cp_model.IntVar]:
    """Builds one x[worker, unit] BoolVar per eligible candidate pair."""
    return {
        (w, unit_key): model.NewBoolVar(var_label(w, unit_key))
        for (w, unit_key) in rewards
    }


def setup_model(
    units: Mapping[UnitKey, DemandUnit],
    rewards: Mapping[CandidateKey, float],
    params: Optional[dict] = None,
) -> Tuple[cp_model.CpModel, AssignmentState]:
    """
    Sets up the assignment model for one scenario.

    Validates that every candidate pair points at a known demand unit, creates
    the decision variables and indexes them by worker slot and by unit so the
    rules can add uniqueness and capacity constraints.

    Args:
        units: Demand units keyed by unit key.
        rewards: Reward coefficient per `(worker_id, unit_key)` pair.
        params: Scenario parameters made available to the rules.

    Returns:
        tuple: The CP-SAT model and the populated AssignmentState.

    Raises:
        ModelConstructionError: If a candidate references an unknown unit, a
            unit has negative demand or a candidate unit has no capacity.
    """
    missing = sorted({str(k) for (_, k) in rewards if k not in units})
    if missing:
        raise ModelConstructionError(
            f"Candidate pairs reference undefined demand units: {', '.join(missing[:5])}"
        )
    negative = [u for u in units.values() if u.demand < 0]
    if negative:
        raise ModelConstructionError(
            f"Demand unit {negative[0].key} has negative demand {negative[0].demand}"
        )
    empty = sorted({str(k) for (_, k) in rewards if units[k].capacity <= 0})
    if empty:
        raise ModelConstructionError(
            f"Candidate pairs reference units without capacity: {', '.join(empty[:5])}"
        )

    model = make_model()
    x = build_variables(model, rewards)
    state = AssignmentState(
        units=dict(units), rewards=dict(rewards), x=x, params=dict(params or {})
    )

    for (w, unit_key), var in x.items():
        day, half_day = unit_key[0], unit_key[1]
        state.slot_vars.setdefault((w, day, half_day), []).append(var)
        state.unit_vars.setdefault(unit_key, []).append(var)
        state.add_objective(var, rewards[(w, unit_key)])

    return model, state
