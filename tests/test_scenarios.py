"""
Tests for the four assignment scenarios.
"""
from datetime import date

import pytest

from core.entities import (
    ADMIN_CATEGORY,
    Absence,
    Assignment,
    DemandRecord,
    HalfDay,
    Procedure,
    ShiftRecord,
)
from exceptions.custom_errors import InvalidQuotaError, InvalidTimeRangeError
from scheduler.scenarios import (
    WhatIfScenario,
    compute_floater_quota,
    run_base_schedule,
    run_floater_placement,
    run_or_personnel,
    run_site_coverage,
    site_preference_reward,
)


def _weekday_demand(record_id, category, weekday=1):
    return DemandRecord(record_id, weekday, "08:00", "12:00", category)


# == Base schedule ==
def test_base_schedule_covers_weekday_demand(worker):
    result = run_base_schedule(
        [worker("w1", "s1"), worker("w2", "s1")],
        [ShiftRecord("w1", 1, "08:00", "12:00"), ShiftRecord("w2", 1, "08:00", "12:00")],
        [_weekday_demand("r1", "s1")],
        timeout=10,
    )
    assert len(result.assignments) == 1
    assert result.assignments[0].date == 1
    assert result.stats.satisfaction_percentage == 100.0


def test_base_schedule_rejects_calendar_dates(worker, monday):
    with pytest.raises(InvalidTimeRangeError):
        run_base_schedule(
            [worker("w1", "s1")],
            [ShiftRecord("w1", monday, "08:00", "12:00")],
            [_weekday_demand("r1", "s1")],
        )


def test_what_if_flags_fictional_workers(worker):
    what_if = WhatIfScenario(
        fictional_workers=[worker("ghost", "s2")],
        fictional_shifts=[ShiftRecord("ghost", 1, "08:00", "12:00")],
        fictional_demands=[_weekday_demand("r2", "s2")],
    )
    result = run_base_schedule(
        [worker("w1", "s1")],
        [ShiftRecord("w1", 1, "08:00", "12:00")],
        [_weekday_demand("r1", "s1")],
        what_if=what_if,
        timeout=10,
    )
    assert result.extras["fictional_workers"] == ["ghost"]
    assert [a["category"] for a in result.extras["fictional_assignments"]] == ["s2"]
    assert len(result.assignments) == 2


# == Site coverage ==
def test_site_coverage_avoids_midday_category_change(worker, full_day_shift, site_demand, monday):
    result = run_site_coverage(
        [worker("w1", "s1", "s2")],
        [full_day_shift("w1")],
        [site_demand("r1", "s1"), site_demand("r2", "s2", half_day="afternoon")],
        timeout=10,
    )
    by_half = {a.half_day: a.category for a in result.assignments}
    assert by_half == {HalfDay.MORNING: "s1", HalfDay.AFTERNOON: "s1"}
    assert result.extras["category_changes"] == 0


def test_idle_worker_gets_admin_half_days(worker, full_day_shift, site_demand):
    result = run_site_coverage(
        [worker("w1", "s1"), worker("w2", prefers_admin=True)],
        [full_day_shift("w1"), full_day_shift("w2")],
        [site_demand("r1", "s1")],
        timeout=10,
    )
    admin = [a for a in result.assignments if a.category == ADMIN_CATEGORY]
    assert {a.worker_id for a in admin} == {"w2"}
    assert result.extras["admin_half_days"] == 2
    assert result.stats.satisfaction_percentage == 100.0


def test_admin_fallback_can_be_disabled(worker, full_day_shift, site_demand):
    result = run_site_coverage(
        [worker("w1")], [full_day_shift("w1")], [site_demand("r1", "s1")], allow_admin=False,
        timeout=10,
    )
    assert result.assignments == []


def test_linked_doctor_bonus_picks_attached_worker(worker, full_day_shift, site_demand):
    result = run_site_coverage(
        [worker("w1", "s1"), worker("w2", "s1", linked_entity_id="doc1")],
        [full_day_shift("w1"), full_day_shift("w2")],
        [site_demand("r1", "s1", linked="doc1")],
        timeout=10,
    )
    site = {a.worker_id for a in result.assignments if a.category == "s1"}
    assert site == {"w2"}


def test_preferred_worker_wins_contested_site(worker, full_day_shift, site_demand):
    result = run_site_coverage(
        [worker("w1", "s1", "s2"), worker("w2", "s1", site_preferences=("s2", "s1"))],
        [full_day_shift("w1"), full_day_shift("w2")],
        [site_demand("r1", "s1")],
        timeout=10,
    )
    site = {a.worker_id for a in result.assignments if a.category == "s1"}
    assert site == {"w2"}


def test_site_ranking_rewards(worker):
    ranked = worker("w1", site_preferences=("s1", "s2", "s3", "s4"))
    assert [site_preference_reward(ranked, s) for s in ("s1", "s2", "s3", "s4")] == [3, 2, 1, 0]
    assert site_preference_reward(worker("w2"), "far", reluctant_sites={"far"}) == -2
    assert site_preference_reward(ranked, "s4", reluctant_sites={"s4"}) == 0
    assert site_preference_reward(worker("w3", preferred_site="far"), "far", {"far"}) == 3


def test_blocked_slots_are_not_offered(worker, full_day_shift, site_demand, monday):
    result = run_site_coverage(
        [worker("w1", "s1")],
        [full_day_shift("w1")],
        [site_demand("r1", "s1")],
        blocked_slots={("w1", monday, HalfDay.MORNING)},
        timeout=10,
    )
    assert [(a.half_day, a.category) for a in result.assignments] == [
        (HalfDay.AFTERNOON, "s1")
    ]


# == Operating room ==
def test_or_personnel_prefers_core_roles(worker, monday):
    result = run_or_personnel(
        [worker("w1", "instrumentiste", "accueil_ophtalmo")],
        [ShiftRecord("w1", monday, "07:30", "12:00")],
        [Procedure("P1", monday, "cataract", half_day="morning")],
        {"cataract": {"instrumentiste_aide_salle": 1, "accueil_ophtalmo": 1}},
        timeout=10,
    )
    assert len(result.assignments) == 1
    assignment = result.assignments[0]
    assert assignment.category == "instrumentiste_aide_salle"
    assert assignment.linked_entity_id == "P1"
    assert result.booked_slots == {("w1", monday, HalfDay.MORNING)}
    assert result.stats.satisfaction_percentage == 50.0


def test_booked_slots_feed_site_coverage(worker, full_day_shift, site_demand, monday):
    bloc = run_or_personnel(
        [worker("w1", "instrumentiste", "s1")],
        [full_day_shift("w1")],
        [Procedure("P1", monday, "cataract", half_day="morning")],
        {"cataract": {"instrumentiste": 1}},
        timeout=10,
    )
    sites = run_site_coverage(
        [worker("w1", "instrumentiste", "s1")],
        [full_day_shift("w1")],
        [site_demand("r1", "s1")],
        blocked_slots=bloc.booked_slots,
        timeout=10,
    )
    assert [a.half_day for a in sites.assignments] == [HalfDay.AFTERNOON]


# == Floaters ==
def test_floater_quota_from_percentage(worker):
    assert compute_floater_quota(worker("f", work_percentage=60), available_days=5) == 3
    assert compute_floater_quota(worker("f", work_percentage=60), available_days=4) == 3
    assert compute_floater_quota(worker("f", work_percentage=60), available_days=2) == 2
    assert compute_floater_quota(worker("f", quota_days=4), available_days=2) == 2
    assert compute_floater_quota(worker("f", quota_days=2), 5, override=9) == 5


def test_invalid_quota_raises(worker):
    with pytest.raises(InvalidQuotaError):
        compute_floater_quota(worker("f", work_percentage=120), 5)
    with pytest.raises(InvalidQuotaError):
        compute_floater_quota(worker("f", quota_days=2), 5, override=-1)


def test_floater_works_quota_full_days(worker, site_demand, monday):
    days = [date(2025, 1, d) for d in range(6, 11)]
    floater = worker("f1", "s1", flexible=True, quota_days=2, site_preferences=("s1",))
    result = run_floater_placement(
        [floater],
        [],
        [site_demand(f"r{i}", "s1", day=d) for i, d in enumerate(days)],
        week_start=monday,
        timeout=10,
    )
    placed = result.extras["placed_days"]["f1"]
    assert result.extras["quotas"] == {"f1": 2}
    assert len(placed) == 2
    assert all(a.category == "s1" for a in result.assignments)
    assert sorted((a.date, a.half_day.value) for a in result.assignments) == sorted(
        (d, h) for d in placed for h in ("morning", "afternoon")
    )


def test_holiday_only_caps_floater_quota(worker, monday):
    floater = worker("f1", "s1", flexible=True, work_percentage=60)
    result = run_floater_placement(
        [floater], [], [], week_start=monday, holidays=[monday], timeout=10
    )
    assert result.extras["quotas"] == {"f1": 3}
    assert len(result.extras["placed_days"]["f1"]) == 3
    assert all(a.is_admin for a in result.assignments)
    assert monday not in result.extras["placed_days"]["f1"]


def test_half_day_absence_keeps_day_in_quota(worker, monday):
    tuesday, wednesday = date(2025, 1, 7), date(2025, 1, 8)
    floater = worker("f1", "s1", flexible=True, quota_days=3)
    result = run_floater_placement(
        [floater],
        [],
        [],
        week_start=monday,
        absences=[
            Absence("f1", tuesday, tuesday, "08:00", "10:00"),
            Absence("f1", wednesday, wednesday),
        ],
        timeout=10,
    )
    placed = result.extras["placed_days"]["f1"]
    assert result.extras["quotas"] == {"f1": 3}
    assert len(placed) == 3
    assert tuesday not in placed and wednesday not in placed


def test_floater_displaces_non_preferring_occupant(worker, site_demand, full_day_at, monday):
    occupant = worker("o1", "s1", site_preferences=("s2",))
    floater = worker("f1", "s1", flexible=True, quota_days=1, site_preferences=("s1",))
    result = run_floater_placement(
        [occupant, floater],
        full_day_at("o1", "s1"),
        [site_demand("r1", "s1")],
        week_start=monday,
        timeout=10,
    )
    displaced = result.extras["displaced"]
    assert {d["occupant_id"] for d in displaced} == {"o1"}
    assert {d["half_day"] for d in displaced} == {"morning", "afternoon"}
    assert result.extras["placed_days"]["f1"] == [monday]
    assert result.stats.satisfaction_percentage == 100.0
