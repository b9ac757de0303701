from collections import defaultdict
from core.entities import HALF_DAYS
from core.state import AssignmentState

"""
Rules of the flexible-floater scenario: filling free slots or displacing
current occupants, and full-day placement against a weekly quota.
"""


def floater_displacement_rule(model, state: AssignmentState):
    """
    Split each floater placement into "fill a free slot" or "displace occupant o".

    x[f, u] == fill[f, u] + sum_o disp[f, u, o]. Free slots of a unit are its
    capacity minus its current occupants; each occupant is displaced at most
    once and every displacement drives a penalty variable.
    """
    occupants = state.params.get("occupants", {})
    prefers = state.params.get("occupant_prefers", {})
    fill_reward = state.params["fill_reward"]
    displace_reward = state.params["displace_non_preferring_reward"]
    displace_penalty = state.params["displace_preferring_penalty"]
    displacement_penalty = state.params["displacement_penalty"]

    fills = state.aux("fill")
    displacements = state.aux("displace")
    fills_by_unit = defaultdict(list)
    disp_by_occupant = defaultdict(list)

    for (f, unit_key), x in state.x.items():
        fill = model.NewBoolVar(f"fill_{f}_{unit_key[0]}_{unit_key[1].value}_{unit_key[2]}")
        fills[(f, unit_key)] = fill
        fills_by_unit[unit_key].append(fill)
        state.add_objective(fill, fill_reward)
        parts = [fill]
        for occ in occupants.get(unit_key, []):
            if occ == f:
                continue
            disp = model.NewBoolVar(f"disp_{f}_{occ}_{unit_key[0]}_{unit_key[1].value}")
            displacements[(f, unit_key, occ)] = disp
            disp_by_occupant[(unit_key, occ)].append(disp)
            parts.append(disp)
            if prefers.get((unit_key, occ), False):
                state.add_objective(disp, -displace_penalty)
            else:
                state.add_objective(disp, displace_reward)
        model.Add(x == sum(parts))

    for unit_key, unit_fills in fills_by_unit.items():
        free = max(0, state.units[unit_key].capacity - len(occupants.get(unit_key, [])))
        model.Add(sum(unit_fills) <= free)

    penalties = state.aux("displacement_penalty")
    for (unit_key, occ), disps in disp_by_occupant.items():
        pen = model.NewBoolVar(f"displaced_{occ}_{unit_key[0]}_{unit_key[1].value}")
        model.Add(pen == sum(disps))
        penalties[(unit_key, occ)] = pen
        state.add_objective(pen, -displacement_penalty)


def floater_full_day_rule(model, state: AssignmentState):
    """
    Floaters work whole days: a day variable equals the placement of each
    half-day, so it is 1 exactly when both halves are filled, and the day
    variables of a floater sum to its weekly quota.
    """
    floater_days = state.params.get("floater_days", {})
    quotas = state.params.get("quotas", {})
    day_vars = state.aux("day")
    for f, days in floater_days.items():
        own = []
        for day in days:
            d = model.NewBoolVar(f"day_{f}_{day}")
            day_vars[(f, day)] = d
            own.append(d)
            for half_day in HALF_DAYS:
                model.Add(sum(state.slot_vars.get((f, day, half_day), [])) == d)
        if own:
            model.Add(sum(own) == quotas.get(f, 0))
