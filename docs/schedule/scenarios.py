_records_description = """
- `workers`: List of `WorkerProfile` objects:
    - `id`: Primary key of the worker

    - `name`: Name of the worker
    - `capabilities`: Category tags the worker can cover (sites, specialties, operating-room roles)
    - `sitePreferences`: Ordered site ranking (preferred, secondary, tertiary) (Optional)
    - `prefersAdmin`: Whether the worker prefers administrative half-days (Optional)
    - `linkedEntityId`: Doctor the worker is attached to (Optional)
    - `flexible`, `quotaDays`, `workPercentage`: Floater settings (Optional)

- `shifts`: List of `ShiftIn` objects:
    - `workerId`: Worker id

    - `date`: Calendar date, or ISO weekday (1-7) for the base schedule
    - `start`, `end`: "HH:MM" times
"""

schedule_base_description = (
    """
Solve the recurring weekly schedule. Days are ISO weekdays (1 = Monday).

### Request Body
"""
    + _records_description
    + """
- `demands`: List of `DemandIn` objects:
    - `id`, `date`, `category`, `quantity`

    - `start`, `end` or `halfDay` ("morning", "afternoon", "full_day")

- `request`: `BaseScheduleRequest`:
    - `whatIf`: Fictional workers, shifts and demands appended to the real ones (Optional)

    - `timeout`: Solver time limit in seconds (Optional)

### Response

`assignments`, per-unit `coverage`, `stats` and, for what-if runs, `fictional_workers`
and `fictional_assignments`.
"""
)

schedule_sites_description = (
    """
Solve dated site/specialty coverage with administrative fallback.

### Request Body
"""
    + _records_description
    + """
- `demands`: List of `DemandIn` objects (site or specialty demand)
- `absences`: List of `AbsenceIn` objects (Optional)
- `request`: `SiteCoverageRequest`:
    - `closureSites`: Sites needing closing; workers staying both half-days there earn a bonus

    - `blockedSlots`: Slots already booked, e.g. by the operating-room run
    - `allowAdmin`: Offer administrative half-days to idle workers (default true)
    - `reluctantSites`: Sites that cost a penalty for workers who do not rank them (Optional)
    - `timeout`: Solver time limit in seconds (Optional)
"""
)

schedule_bloc_description = (
    """
Staff operating-room procedures role by role.

### Request Body
"""
    + _records_description
    + """
- `procedures`: List of `ProcedureIn` objects (`id`, `date`, `procedureType`, `start`/`end` or `halfDay`, `doctorId`)
- `absences`: List of `AbsenceIn` objects (Optional)
- `request`: `BlocRequest`:
    - `requirements`: procedure type -> {role: required count}

    - `roleCapabilities`: role -> capability tag required (Optional)

### Response

`assignments`, `coverage`, `stats` and `booked_slots` to block in the site coverage run.
"""
)

schedule_floaters_description = """
Place flexible floaters on full days of a week.

### Request Body

- `workers`: Worker profiles; floaters have `flexible: true` and a `quotaDays` or `workPercentage`
- `currentAssignments`: List of `AssignmentIn` objects already scheduled for the week
- `demands`: List of `DemandIn` objects
- `absences`: List of `AbsenceIn` objects (Optional)
- `request`: `FloaterRequest`:
    - `weekStart`: Monday of the week

    - `holidays`: Public holidays in the week
    - `quotaOverrides`: worker id -> full days (capped at available days)

### Response

Floater `assignments`, `quotas`, `placed_days` and `displaced` occupants.
"""

schedule_week_description = (
    """
Plan a horizon in one call: operating-room personnel first, then site coverage with the
operating-room bookings blocked, then closing roles on the combined assignments.

### Request Body
"""
    + _records_description
    + """
- `demands`: List of `DemandIn` objects (site demand; `linkedEntityId` is the doctor)
- `procedures`: List of `ProcedureIn` objects
- `absences`: List of `AbsenceIn` objects (Optional)
- `request`: `WeekRequest`:
    - `requirements`: procedure type -> {role: required count}

    - `roleCapabilities`: role -> capability tag required (Optional)
    - `closureSites`: Sites needing a closing team
    - `allowAdmin`, `reluctantSites`: Site coverage settings (Optional)
    - `finalizedDates`, `priorScores`, `tertiaryWeekdays`, `tertiaryDoctorIds`: Closing settings (Optional)
    - `timeout`: Solver time limit in seconds, per run (Optional)

### Response

Combined `assignments` with closing roles, plus the `bloc`, `sites` and `closing` results.
"""
)
