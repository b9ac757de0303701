"""
scheduler.scenarios
-------------------

The four assignment scenarios solved with the shared model:

- `base_schedule`: Recurring weekly schedule, optionally with a what-if scenario.
- `site_coverage`: Dated site/specialty coverage with administrative fallback.
- `or_personnel`: Operating-room staffing, one unit per procedure role.
- `floater`: Full-day placement of flexible floaters against a weekly quota.
"""
from .base_schedule import WhatIfScenario, run_base_schedule
from .floater import compute_floater_quota, run_floater_placement
from .or_personnel import run_or_personnel
from .site_coverage import run_site_coverage, site_preference_reward
