from dataclasses import dataclass, field
from ortools.sat.python import cp_model
from typing import Any, Dict, List, Tuple
from core.entities import DemandUnit, SlotKey, UnitKey

# (worker_id, unit_key)
CandidateKey = Tuple[str, UnitKey]


@dataclass
class AssignmentState:
    """
    A dataclass to hold all the state relevant to building and solving one
    binary-assignment scenario.
    """

    # model inputs
    units: Dict[UnitKey, DemandUnit]
    """Demand units keyed by `(date, half_day, category, linked_entity_id)`."""
    rewards: Dict[CandidateKey, float]
    """Reward coefficient of every eligible `(worker_id, unit_key)` pair."""
    x: Dict[CandidateKey, cp_model.IntVar]
    """Decision variable of every eligible pair."""

    # collections to fill
    slot_vars: Dict[SlotKey, List[cp_model.IntVar]] = field(default_factory=dict)
    """Every variable occupying a `(worker_id, date, half_day)` slot, including
    administrative fallbacks. The uniqueness rule bounds each list by one.
    """
    unit_vars: Dict[UnitKey, List[cp_model.IntVar]] = field(default_factory=dict)
    """Decision variables assigning into each unit."""
    objective_terms: List[Tuple[Any, float]] = field(default_factory=list)
    """`(variable, weight)` pairs summed into the maximized objective."""
    admin_vars: Dict[SlotKey, cp_model.IntVar] = field(default_factory=dict)
    """Administrative placement variables, when the scenario allows them."""
    aux_vars: Dict[str, Dict[Any, cp_model.IntVar]] = field(default_factory=dict)
    """Scenario-specific helper variables grouped by purpose, e.g. "change"."""
    params: Dict[str, Any] = field(default_factory=dict)
    """Scenario parameters read by the rules."""

    def add_objective(self, var, weight: float):
        if weight:
            self.objective_terms.append((var, weight))

    def aux(self, group: str) -> Dict[Any, cp_model.IntVar]:
        return self.aux_vars.setdefault(group, {})
