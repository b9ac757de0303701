"""
closing
-------

Closing-responsibility roles for full-day workers at sites that need closing:

- `scoring`: Burden scores, penalized scores and the global fairness metric.
- `phase1`: Greedy assignment, scarcest pools first.
- `phase2`: Hill climbing over swaps and exchanges.
- `assignor`: Closure unit detection and the full run.
"""
from .assignor import ClosingResult, assign_closing_roles, find_closing_units
from .scoring import BurdenScore, ScoreTable, global_metric
