"""
scheduler
---------

Main assignment module. Initializes key components:

- `demand` / `availability`: Half-day demand units and worker availability.
- `builder`: Model construction and constraint setup.
- `runner`: Solving and result handling logic.
- `scenarios`: The four scenario formulations.
- `rooms`: Room allocation for concurrent procedures.

Provides high-level access to core scheduling functionality.
"""
from . import builder, runner
