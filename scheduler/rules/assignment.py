from core.state import AssignmentState
from utils.constants import REWARD_SCALE

"""
This module contains the rules every assignment scenario shares: one
assignment per worker per half-day, unit capacities and the objective.
"""


def uniqueness_rule(model, state: AssignmentState):
    """Each worker holds at most one assignment per (date, half-day)."""
    for slot, variables in state.slot_vars.items():
        if len(variables) > 1:
            model.AddAtMostOne(variables)


def capacity_rule(model, state: AssignmentState):
    """Each demand unit receives at most `ceil(demand)` workers."""
    for unit_key, variables in state.unit_vars.items():
        capacity = state.units[unit_key].capacity
        model.Add(sum(variables) <= capacity)


def scaled_weight(weight: float) -> int:
    """CP-SAT needs integer coefficients; rewards are fixed-point scaled."""
    return int(round(weight * REWARD_SCALE))


def objective_rule(model, state: AssignmentState):
    """Maximize the weighted sum of every registered objective term."""
    terms = [
        scaled_weight(weight) * var
        for var, weight in state.objective_terms
        if scaled_weight(weight) != 0
    ]
    if terms:
        model.Maximize(sum(terms))
