from typing import Callable, Iterable, Mapping, Optional, Tuple
from ortools.sat.python import cp_model
from core.constraint_manager import ConstraintManager
from core.entities import DemandUnit, UnitKey
from core.state import AssignmentState, CandidateKey
from scheduler.rules import capacity_rule, objective_rule, uniqueness_rule
from scheduler.setup import setup_model
from utils.logger import get_logger

logger = get_logger(__name__)


# == Build Assignment Model ==
def build_assignment_model(
    units: Mapping[UnitKey, DemandUnit],
    rewards: Mapping[CandidateKey, float],
    params: Optional[dict] = None,
    pre_rules: Iterable[Callable] = (),
    post_rules: Iterable[Callable] = (),
) -> Tuple[cp_model.CpModel, AssignmentState]:
    """
    Builds the binary assignment program shared by every scenario.

    One BoolVar per candidate `(worker, unit)` pair, at most one assignment per
    worker slot, at most `capacity` workers per unit, and an objective
    maximizing the summed rewards.

    `pre_rules` run before the uniqueness rule, so any variable they append to
    `state.slot_vars` (e.g. administrative fallbacks) is covered by it;
    `post_rules` run after the capacity rule and before the objective is set.
    """
    logger.info(f"📋 Building model: {len(units)} units, {len(rewards)} candidate pairs")
    model, state = setup_model(units, rewards, params)

    cm = ConstraintManager(model, state)
    for rule in pre_rules:
        cm.add_rule(rule)
    cm.add_rule(uniqueness_rule)  # one assignment per worker slot
    cm.add_rule(capacity_rule)  # at most ceil(demand) per unit
    for rule in post_rules:
        cm.add_rule(rule)
    cm.add_rule(objective_rule)

    cm.apply_all()  # Apply all rules
    return model, state
