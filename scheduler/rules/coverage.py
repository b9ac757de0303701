from collections import defaultdict
from core.entities import HalfDay
from core.state import AssignmentState

"""
Soft rules of the ad-hoc site coverage scenario (also reused by the floater
scenario for administrative placements).
"""


def _vars_by_category(state: AssignmentState):
    """(worker, date) -> half_day -> category -> [vars]"""
    grouped = defaultdict(lambda: defaultdict(lambda: defaultdict(list)))
    for (w, unit_key), var in state.x.items():
        day, half_day, category = unit_key[0], unit_key[1], unit_key[2]
        grouped[(w, day)][half_day][category].append(var)
    return grouped


def category_change_rule(model, state: AssignmentState):
    """
    Penalize a worker whose morning and afternoon on the same date fall in
    different categories. One change variable per (morning, afternoon)
    category pair is forced to 1 when both assignments are chosen.
    """
    penalty = state.params.get("category_change_penalty", 0)
    if not penalty:
        return
    changes = state.aux("change")
    for (w, day), halves in _vars_by_category(state).items():
        morning = halves.get(HalfDay.MORNING, {})
        afternoon = halves.get(HalfDay.AFTERNOON, {})
        for cat_a, m_vars in morning.items():
            for cat_b, a_vars in afternoon.items():
                if cat_a == cat_b:
                    continue
                change = model.NewBoolVar(f"change_{w}_{day}_{cat_a}_{cat_b}")
                model.Add(sum(m_vars) + sum(a_vars) - change <= 1)
                changes[(w, day, cat_a, cat_b)] = change
                state.add_objective(change, -penalty)


def closure_continuity_rule(model, state: AssignmentState):
    """Bonus for a worker present both half-days at a site that needs closing."""
    closure_sites = state.params.get("closure_sites") or set()
    bonus = state.params.get("closure_continuity_bonus", 0)
    if not closure_sites or not bonus:
        return
    continuity = state.aux("continuity")
    for (w, day), halves in _vars_by_category(state).items():
        for site in closure_sites:
            m_vars = halves.get(HalfDay.MORNING, {}).get(site)
            a_vars = halves.get(HalfDay.AFTERNOON, {}).get(site)
            if not m_vars or not a_vars:
                continue
            cont = model.NewBoolVar(f"cont_{site}_{w}_{day}")
            model.Add(cont <= sum(m_vars))
            model.Add(cont <= sum(a_vars))
            continuity[(w, day, site)] = cont
            state.add_objective(cont, bonus)


def admin_fallback_rule(model, state: AssignmentState):
    """
    Let available workers take an administrative half-day instead of idling.

    `admin_slots` lists the (worker, date, half-day) slots in the order the
    worker's repeat penalty grows; `admin_reward(worker_id, k)` gives the reward
    of the worker's k-th administrative slot.
    """
    slots = state.params.get("admin_slots") or []
    reward_for = state.params.get("admin_reward")
    seen = defaultdict(int)
    for slot in slots:
        w, day, half_day = slot
        var = model.NewBoolVar(f"admin_{w}_{day}_{half_day.value}")
        state.admin_vars[slot] = var
        state.slot_vars.setdefault(slot, []).append(var)
        reward = reward_for(w, seen[w]) if reward_for else 0
        seen[w] += 1
        state.add_objective(var, reward)
