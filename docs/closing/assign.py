closing_assign_description = """
Assign closing roles (primary, secondary, tertiary) for one week.

### Request Body

- `assignments`: List of `AssignmentIn` objects (site assignments of the week, with stored roles)
- `doctorDemand`: List of `DemandIn` objects; `category` is the site, `linkedEntityId` the doctor
- `request`: `ClosingRequest`:
    - `closureSites`: Sites that need closing

    - `finalizedDates`: Dates whose stored roles are kept and only counted
    - `priorScores`: worker id -> {primary, secondary, tertiary} held earlier
    - `tertiaryWeekdays`, `tertiaryDoctorIds`: When a repeated doctor calls for a tertiary closer
    - `maxIterations`: Exchange iteration cap (default 50)

### Response

`assignments` with roles, per-unit `log`, `unassigned` units, `metrics`, final `scores`
and the fairness metric `trace`.
"""
