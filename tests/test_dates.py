"""Tests for calendar date parsing and schedule slots."""

from datetime import date, datetime, time

import pytest

from dispatch.exceptions import InvalidDateFormatError, ValidationError
from dispatch.services.dates import (
    AllDay,
    Timed,
    contiguous_runs,
    each_day,
    parse_calendar_date,
    parse_clock_time,
    reschedule,
    slot_from_values,
)


@pytest.mark.parametrize(
    "value",
    [
        "2024-03-01",
        "2024-03-01T08:00",
        "2024-03-01T23:59:59",
        "2024-03-01 10:15",
        date(2024, 3, 1),
        datetime(2024, 3, 1, 17, 30),
    ],
)
def test_parse_calendar_date(value):
    assert parse_calendar_date(value) == date(2024, 3, 1)


@pytest.mark.parametrize("value", ["01.03.2024", "2024-02-30", "", "yesterday", None, 20240301])
def test_parse_calendar_date_rejects_garbage(value):
    with pytest.raises(InvalidDateFormatError):
        parse_calendar_date(value)


def test_invalid_date_is_a_400():
    with pytest.raises(ValidationError) as exc_info:
        parse_calendar_date("03/01/2024")
    assert exc_info.value.status_code == 400


def test_parse_clock_time():
    assert parse_clock_time("08:00") == time(8, 0)
    assert parse_clock_time("7:05") == time(7, 5)
    assert parse_clock_time(time(9, 30)) == time(9, 30)


@pytest.mark.parametrize("value", ["8", "25:00", "08:60", "8am", None])
def test_parse_clock_time_rejects_garbage(value):
    with pytest.raises(InvalidDateFormatError):
        parse_clock_time(value)


def test_each_day_is_inclusive():
    assert each_day(date(2024, 2, 28), date(2024, 3, 1)) == [
        date(2024, 2, 28),
        date(2024, 2, 29),
        date(2024, 3, 1),
    ]


def test_each_day_single():
    assert each_day(date(2024, 3, 1), date(2024, 3, 1)) == [date(2024, 3, 1)]


def test_contiguous_runs_sorts_and_dedupes():
    runs = contiguous_runs(
        [date(2024, 3, 5), date(2024, 3, 2), date(2024, 3, 1), date(2024, 3, 2)]
    )
    assert runs == [[date(2024, 3, 1), date(2024, 3, 2)], [date(2024, 3, 5)]]


def test_contiguous_runs_across_month_end():
    runs = contiguous_runs([date(2024, 1, 31), date(2024, 2, 1)])
    assert runs == [[date(2024, 1, 31), date(2024, 2, 1)]]


def test_contiguous_runs_empty():
    assert contiguous_runs([]) == []


def test_all_day_slot():
    slot = AllDay(date(2024, 3, 1))
    assert slot.all_day is True
    assert slot.day == date(2024, 3, 1)
    assert slot.hour is None
    assert slot.as_strings() == ("2024-03-01", "2024-03-01")


def test_timed_slot():
    slot = Timed.on(date(2024, 3, 1), time(8, 0), time(16, 0))
    assert slot.all_day is False
    assert slot.day == date(2024, 3, 1)
    assert slot.hour == 8
    assert slot.as_strings() == ("2024-03-01T08:00", "2024-03-01T16:00")


def test_timed_slot_rejects_reversed_window():
    with pytest.raises(ValidationError):
        Timed(datetime(2024, 3, 1, 16, 0), datetime(2024, 3, 1, 8, 0))


def test_timed_slot_rejects_overnight_window():
    with pytest.raises(ValidationError):
        Timed(datetime(2024, 3, 1, 22, 0), datetime(2024, 3, 2, 2, 0))


def test_slot_from_values_all_day_ignores_time():
    slot = slot_from_values("2024-03-01T00:00", "2024-03-01T00:00", all_day=True)
    assert slot == AllDay(date(2024, 3, 1))


def test_slot_from_values_timed():
    slot = slot_from_values("2024-03-01T09:00", "2024-03-01T11:30", all_day=False)
    assert slot == Timed(datetime(2024, 3, 1, 9, 0), datetime(2024, 3, 1, 11, 30))


def test_slot_from_values_timed_needs_timestamps():
    with pytest.raises(InvalidDateFormatError):
        slot_from_values("tomorrow", "tomorrow", all_day=False)


def test_reschedule_timed_start_only_keeps_end_time():
    slot = Timed(datetime(2024, 3, 1, 8, 0), datetime(2024, 3, 1, 16, 0))
    moved = reschedule(slot, all_day=False, start="2024-03-05T09:00")
    assert moved == Timed(datetime(2024, 3, 5, 9, 0), datetime(2024, 3, 5, 16, 0))


def test_reschedule_timed_to_bare_date_keeps_both_times():
    slot = Timed(datetime(2024, 3, 1, 8, 0), datetime(2024, 3, 1, 16, 0))
    moved = reschedule(slot, all_day=False, start="2024-03-05")
    assert moved == Timed(datetime(2024, 3, 5, 8, 0), datetime(2024, 3, 5, 16, 0))


def test_reschedule_end_only():
    slot = Timed(datetime(2024, 3, 1, 8, 0), datetime(2024, 3, 1, 16, 0))
    moved = reschedule(slot, all_day=False, end="2024-03-01T12:30")
    assert moved == Timed(datetime(2024, 3, 1, 8, 0), datetime(2024, 3, 1, 12, 30))


def test_reschedule_all_day_to_timed_uses_default_window():
    moved = reschedule(
        AllDay(date(2024, 3, 1)), all_day=False, default_window=(time(7, 0), time(15, 0))
    )
    assert moved == Timed(datetime(2024, 3, 1, 7, 0), datetime(2024, 3, 1, 15, 0))


def test_reschedule_timed_to_all_day():
    slot = Timed(datetime(2024, 3, 1, 8, 0), datetime(2024, 3, 1, 16, 0))
    assert reschedule(slot, all_day=True) == AllDay(date(2024, 3, 1))
    assert reschedule(slot, all_day=True, start="2024-03-04") == AllDay(date(2024, 3, 4))


def test_reschedule_start_past_kept_end_is_rejected():
    slot = Timed(datetime(2024, 3, 1, 8, 0), datetime(2024, 3, 1, 16, 0))
    with pytest.raises(ValidationError):
        reschedule(slot, all_day=False, start="2024-03-01T17:00")
