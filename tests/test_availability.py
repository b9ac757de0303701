"""
Tests for availability slots built from shift records.
"""
from datetime import date

import pytest

from core.entities import Absence, HalfDay, ShiftRecord
from exceptions.custom_errors import InputMismatchError
from scheduler.availability import absence_half_days, availability_frame, build_availability
from scheduler.demand import aggregate_demand


def test_45_minute_shift_is_not_available(worker, monday):
    slots = build_availability([worker("w1", "s1")], [ShiftRecord("w1", monday, "07:30", "08:15")])
    assert slots == {}


def test_categories_intersect_capabilities_and_demand(worker, full_day_shift, site_demand, monday):
    units = aggregate_demand(
        [site_demand("r1", "s1"), site_demand("r2", "s2", half_day="afternoon")]
    )
    slots = build_availability([worker("w1", "s1", "s2", "s3")], [full_day_shift("w1")], units)
    assert slots[("w1", monday, HalfDay.MORNING)].categories == {"s1"}
    assert slots[("w1", monday, HalfDay.AFTERNOON)].categories == {"s1", "s2"}


def test_available_slot_without_demand_is_kept(worker, full_day_shift, monday):
    slots = build_availability([worker("w1", "s1")], [full_day_shift("w1")])
    assert len(slots) == 2
    assert all(s.categories == frozenset() for s in slots.values())


def test_unknown_worker_raises(worker, full_day_shift):
    with pytest.raises(InputMismatchError):
        build_availability([worker("w1")], [full_day_shift("ghost")])


def test_absences_and_blocked_slots_are_removed(worker, full_day_shift, monday):
    tuesday = date(2025, 1, 7)
    absences = [Absence("w1", monday, monday, "14:00", "15:00")]
    blocked = absence_half_days(absences) | {("w1", tuesday, HalfDay.MORNING)}
    slots = build_availability(
        [worker("w1")],
        [full_day_shift("w1"), full_day_shift("w1", tuesday)],
        blocked=blocked,
    )
    assert set(slots) == {("w1", monday, HalfDay.MORNING), ("w1", tuesday, HalfDay.AFTERNOON)}


def test_whole_day_absence_blocks_every_half_day(monday):
    blocked = absence_half_days([Absence("w1", monday, date(2025, 1, 7))])
    assert len(blocked) == 4


def test_capability_mapping(worker, full_day_shift, monday):
    from core.entities import Procedure
    from scheduler.demand import expand_procedure_demand

    units = expand_procedure_demand(
        [Procedure("P1", monday, "cataract", half_day="morning")],
        {"cataract": {"instrumentiste_aide_salle": 1}},
    )
    slots = build_availability(
        [worker("w1", "instrumentiste")],
        [full_day_shift("w1")],
        units,
        capability_for={"instrumentiste_aide_salle": "instrumentiste"}.get,
    )
    assert slots[("w1", monday, HalfDay.MORNING)].categories == {"instrumentiste_aide_salle"}


def test_availability_frame(worker, full_day_shift):
    frame = availability_frame(build_availability([worker("w1")], [full_day_shift("w1")]))
    assert list(frame["half_day"]) == ["morning", "afternoon"]
