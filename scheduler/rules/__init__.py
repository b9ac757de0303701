"""
scheduler.rules
---------------

Exposes all assignment constraints by importing from:

- `assignment`: Rules shared by every scenario (uniqueness, capacity, objective).
- `coverage`: Soft rules for site coverage (category changes, closure continuity, admin fallback).
- `floater`: Displacement and full-day quota rules for flexible floaters.

Allows unified access to all rule and constraint definitions via wildcard imports.
"""
from .assignment import *
from .coverage import *
from .floater import *
