from dataclasses import dataclass
from datetime import date as dt_date, datetime, time, timedelta
from typing import Dict, Iterator, List, Optional, Tuple, Union
import pandas as pd
from core.entities import HALF_DAYS, HalfDay
from exceptions.custom_errors import InvalidTimeRangeError
from utils.constants import HALF_DAY_WINDOWS

TimeLike = Union[str, time]


@dataclass(frozen=True)
class HalfDayOverlap:
    minutes: int
    proportion: float


def parse_time(value: TimeLike) -> time:
    """Parse "HH:MM" / "HH:MM:SS" strings (or pass through a time)."""
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        text = value.strip()
        for fmt in ("%H:%M:%S", "%H:%M"):
            try:
                return datetime.strptime(text, fmt).time()
            except ValueError:
                continue
    raise InvalidTimeRangeError(f"Could not parse time value {value!r}")


def to_minutes(value: TimeLike) -> int:
    t = parse_time(value)
    return t.hour * 60 + t.minute


def _window_minutes(half_day: HalfDay) -> Tuple[int, int]:
    start, end = HALF_DAY_WINDOWS[half_day.value]
    return to_minutes(start), to_minutes(end)


def window_duration(half_day: HalfDay) -> int:
    """Length of a half-day window in minutes."""
    start, end = _window_minutes(half_day)
    return end - start


def overlap_minutes(start: int, end: int, window_start: int, window_end: int) -> int:
    """Minutes shared by [start, end) and [window_start, window_end)."""
    return max(0, min(end, window_end) - max(start, window_start))


def half_day_overlaps(
    start: TimeLike, end: TimeLike, threshold_minutes: int
) -> Dict[HalfDay, HalfDayOverlap]:
    """
    Split a time range over the morning and afternoon windows.

    A half-day is returned only when the range overlaps it by at least
    `threshold_minutes`; short boundary overlaps are ignored. A range spanning
    both windows yields two independent entries.

    Raises:
        InvalidTimeRangeError: If the range is empty or cannot be parsed.
    """
    start_min, end_min = to_minutes(start), to_minutes(end)
    if end_min <= start_min:
        raise InvalidTimeRangeError(f"Time range {start}-{end} ends before it starts")

    overlaps: Dict[HalfDay, HalfDayOverlap] = {}
    for half_day in HALF_DAYS:
        w_start, w_end = _window_minutes(half_day)
        minutes = overlap_minutes(start_min, end_min, w_start, w_end)
        if minutes > 0 and minutes >= threshold_minutes:
            overlaps[half_day] = HalfDayOverlap(
                minutes=minutes, proportion=minutes / (w_end - w_start)
            )
    return overlaps


def expand_half_day(label: Optional[str]) -> List[HalfDay]:
    """Map "morning" / "afternoon" / "full_day" labels to half-days."""
    if label is None:
        return []
    key = str(label).strip().lower()
    if key in ("full_day", "toute_journee", "both"):
        return list(HALF_DAYS)
    try:
        return [HalfDay(key)]
    except ValueError:
        raise InvalidTimeRangeError(f"Unknown half-day label {label!r}")


def normalise_date(input_date) -> dt_date:
    """
    Convert input to a datetime.date object.
    Supports formats like:
      - '2025-07-07', '2025/07/07', '20250707', pandas Timestamps, datetimes.
    """
    if isinstance(input_date, dt_date) and not isinstance(input_date, datetime):
        return input_date
    elif isinstance(input_date, pd.Timestamp):
        return input_date.date()
    elif isinstance(input_date, datetime):
        return input_date.date()
    elif isinstance(input_date, str):
        try:
            return pd.to_datetime(input_date, errors="raise").date()
        except (ValueError, TypeError) as e:
            raise ValueError(f"Could not parse date string '{input_date}': {e}")
    raise ValueError(f"Unsupported date type: {type(input_date)}")


def iter_dates(start: dt_date, end: dt_date) -> Iterator[dt_date]:
    """Inclusive calendar range."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def is_weekday(day: dt_date) -> bool:
    return day.weekday() < 5


def next_day(day):
    """Following day for calendar dates; following ISO weekday for recurring keys."""
    if isinstance(day, dt_date):
        return day + timedelta(days=1)
    return day + 1


def iso_weekday(day) -> int:
    if isinstance(day, dt_date):
        return day.isoweekday()
    return int(day)


def sort_key(day) -> Tuple[int, str]:
    """Orders mixed date / weekday keys without comparing across types."""
    if isinstance(day, dt_date):
        return (1, day.isoformat())
    return (0, f"{int(day):02d}")
