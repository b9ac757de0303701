"""
Shared fixtures for the staffing tests.
"""
from datetime import date

import pytest

from core.entities import Assignment, DemandRecord, HalfDay, ShiftRecord, Worker

MONDAY = date(2025, 1, 6)


@pytest.fixture
def monday():
    return MONDAY


@pytest.fixture
def full_day_shift():
    def make(worker_id, day=MONDAY):
        return ShiftRecord(worker_id, day, "07:30", "17:00")

    return make


@pytest.fixture
def site_demand():
    def make(record_id, category, day=MONDAY, half_day="full_day", quantity=1.0, linked=None):
        return DemandRecord(
            id=record_id,
            date=day,
            start=None,
            end=None,
            category=category,
            quantity=quantity,
            linked_entity_id=linked,
            half_day=half_day,
        )

    return make


@pytest.fixture
def full_day_at():
    """Both half-day assignments of a worker at a site."""

    def make(worker_id, site, day=MONDAY, role=None):
        extra = {"role": role} if role is not None else {}
        return [
            Assignment(worker_id, day, HalfDay.MORNING, site, **extra),
            Assignment(worker_id, day, HalfDay.AFTERNOON, site, **extra),
        ]

    return make


@pytest.fixture
def worker():
    def make(worker_id, *capabilities, **kwargs):
        return Worker(id=worker_id, name=worker_id.title(), capabilities=capabilities, **kwargs)

    return make
