"""Tests for Saturday-to-Friday week bucketing."""

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from calorie_insights.services.weeks import day_bounds, slot_index, week_window

FRIDAY = 4
SATURDAY = 5

# Every weekday of one week plus a month and a year boundary.
REFERENCES = [
    *(datetime(2024, 6, day, 15, 45, tzinfo=UTC) for day in range(1, 9)),
    datetime(2024, 2, 29, 23, 59, 59, tzinfo=UTC),
    datetime(2024, 12, 31, 0, 0, tzinfo=UTC),
    datetime(2025, 1, 4, 0, 0, tzinfo=UTC),
]


@pytest.mark.parametrize("reference", REFERENCES)
def test_week_window_spans_saturday_to_friday(reference: datetime) -> None:
    window = week_window(reference)

    assert window.start_of_week.weekday() == SATURDAY
    assert window.end_of_week.weekday() == FRIDAY
    assert window.start_of_week.time() == datetime.min.time()
    assert window.end_of_week.time() == datetime.max.time()
    assert (window.end_of_week.date() - window.start_of_week.date()).days == 6
    assert window.contains(reference)


@pytest.mark.parametrize("reference", REFERENCES)
def test_reference_maps_to_a_slot(reference: datetime) -> None:
    slot = slot_index(reference, week_window(reference))

    assert slot is not None
    assert 0 <= slot <= 6


def test_slots_follow_saturday_first_order() -> None:
    window = week_window(datetime(2024, 6, 5, tzinfo=UTC))
    saturday = datetime(2024, 6, 1, 8, tzinfo=UTC)

    slots = [
        slot_index(saturday + timedelta(days=offset), window) for offset in range(7)
    ]

    assert slots == [0, 1, 2, 3, 4, 5, 6]


def test_saturday_starts_a_new_week() -> None:
    window = week_window(datetime(2024, 6, 8, 9, tzinfo=UTC))

    assert window.start_of_week.date().isoformat() == "2024-06-08"
    assert window.end_of_week.date().isoformat() == "2024-06-14"


def test_sunday_belongs_to_week_started_yesterday() -> None:
    window = week_window(datetime(2024, 6, 2, 9, tzinfo=UTC))

    assert window.start_of_week.date().isoformat() == "2024-06-01"
    assert window.end_of_week.date().isoformat() == "2024-06-07"


def test_out_of_window_moments_have_no_slot() -> None:
    window = week_window(datetime(2024, 6, 5, tzinfo=UTC))

    assert slot_index(datetime(2024, 5, 31, 23, 59, tzinfo=UTC), window) is None
    assert slot_index(datetime(2024, 6, 8, 0, 0, tzinfo=UTC), window) is None


def test_boundaries_are_inclusive() -> None:
    window = week_window(datetime(2024, 6, 5, tzinfo=UTC))

    assert window.contains(window.start_of_week)
    assert window.contains(window.end_of_week)
    assert slot_index(window.start_of_week, window) == 0
    assert slot_index(window.end_of_week, window) == 6


def test_slot_uses_the_window_timezone() -> None:
    tz = ZoneInfo("America/New_York")
    window = week_window(datetime(2024, 6, 5, 12, tzinfo=tz))
    # 02:00 UTC on Sunday is still Saturday evening in New York.
    moment = datetime(2024, 6, 2, 2, 0, tzinfo=UTC)

    assert slot_index(moment, window) == 0


def test_week_window_across_daylight_saving_change() -> None:
    tz = ZoneInfo("Europe/Berlin")
    window = week_window(datetime(2024, 4, 2, 10, tzinfo=tz))

    assert window.start_of_week == datetime(2024, 3, 30, tzinfo=tz)
    assert window.end_of_week.date().isoformat() == "2024-04-05"
    assert window.start_of_week.utcoffset() == timedelta(hours=1)
    assert window.end_of_week.utcoffset() == timedelta(hours=2)


def test_day_bounds_are_local_midnights() -> None:
    start, end = day_bounds(datetime(2024, 6, 5, 18, 20, tzinfo=UTC))

    assert start == datetime(2024, 6, 5, tzinfo=UTC)
    assert end == datetime(2024, 6, 6, tzinfo=UTC)


def test_naive_moments_are_read_in_the_window_zone() -> None:
    tz = ZoneInfo("America/New_York")
    window = week_window(datetime(2024, 6, 5, 12, tzinfo=tz))

    assert window.contains(datetime(2024, 6, 1, 0, 30))
    assert not window.contains(datetime(2024, 5, 31, 23, 30))
    assert slot_index(datetime(2024, 6, 7, 23, 59), window) == 6


def test_naive_window_accepts_aware_moments() -> None:
    window = week_window(datetime(2024, 6, 5, 12))

    assert window.contains(datetime(2024, 6, 3, 9, tzinfo=UTC))
    assert slot_index(datetime(2024, 6, 3, 9, tzinfo=UTC), window) == 2
