rooms_allocate_description = """
Assign operating rooms to concurrent procedures.

### Request Body

- `procedures`: List of `ProcedureIn` objects (`id`, `date`, `procedureType`, `halfDay` or `start`/`end`)

- `request`: `RoomRequest`:
    - `layouts`: Multi-flow layouts (`procedureType`, `flowCount`, `rooms` in order)

    - `preferredRooms`: procedure type -> preferred room
    - `rooms`: Room names in fallback order (default: rouge, verte, jaune)
    - `seed`: Seed of the tie-break shuffle (Optional)

### Response

`allocations` (`procedure_id`, `date`, `half_day`, `room`) and the `unassigned` procedures.
"""
