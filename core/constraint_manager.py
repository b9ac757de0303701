from typing import Callable, List, Tuple
from ortools.sat.python import cp_model
from core.state import AssignmentState
from utils.logger import get_logger

logger = get_logger(__name__)


class ConstraintManager:
    def __init__(self, model: cp_model.CpModel, state: AssignmentState):
        self.model = model
        self.state = state
        self.rules: List[Tuple[str, Callable]] = []

    def add_rule(self, rule_func: Callable, condition: bool = True):
        """Register a rule with optional enablement condition."""
        if condition:
            name = getattr(rule_func, "__name__", None) or getattr(
                rule_func, "func", rule_func
            ).__name__
            self.rules.append((name, rule_func))

    def apply_all(self):
        """Apply all registered rules in order."""
        for name, rule in self.rules:
            before = len(self.model.Proto().constraints)
            rule(self.model, self.state)
            added = len(self.model.Proto().constraints) - before
            logger.debug(f"rule {name}: +{added} constraints")
