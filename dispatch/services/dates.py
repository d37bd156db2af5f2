"""
Calendar date helpers shared by the layout and scheduling services.

All dates are naive local calendar dates. An appointment occupies a
single day, either the whole day (``AllDay``) or a clock-time window on
that day (``Timed``).
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, Union

from dispatch.exceptions import InvalidDateFormatError, ValidationError

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp into a naive local datetime.

    Offset-aware values (``...Z``, ``+02:00``) are converted to the
    server's local time before the offset is dropped.
    """
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        raise InvalidDateFormatError(value, "ISO-8601 timestamp") from None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_calendar_date(value: object) -> date:
    """
    Read a calendar date from a date, datetime, bare date string or timestamp.

    Raises InvalidDateFormatError for anything else.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if _DATE_RE.match(text):
            try:
                return date.fromisoformat(text)
            except ValueError:
                raise InvalidDateFormatError(value) from None
        if "T" in text or " " in text:
            return parse_timestamp(text).date()
    raise InvalidDateFormatError(value)


def parse_clock_time(value: object) -> time:
    """Parse an ``HH:MM`` clock time."""
    if isinstance(value, time):
        return value
    match = _CLOCK_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidDateFormatError(value, "HH:MM")
    try:
        return time(int(match.group(1)), int(match.group(2)))
    except ValueError:
        raise InvalidDateFormatError(value, "HH:MM") from None


def each_day(start: date, end: date) -> list[date]:
    """Every calendar day from start to end, both inclusive."""
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def contiguous_runs(dates: Iterable[date]) -> list[list[date]]:
    """
    Split dates into maximal runs of consecutive calendar days.

    Input order and duplicates are irrelevant; runs come out sorted.
    """
    runs: list[list[date]] = []
    for day in sorted(set(dates)):
        if runs and (day - runs[-1][-1]).days == 1:
            runs[-1].append(day)
        else:
            runs.append([day])
    return runs


@dataclass(frozen=True)
class AllDay:
    """Occupies the whole of one calendar day."""

    day: date

    all_day = True

    @property
    def start(self) -> datetime:
        return datetime.combine(self.day, time.min)

    @property
    def end(self) -> datetime:
        return datetime.combine(self.day, time.min)

    @property
    def hour(self) -> None:
        return None

    def as_strings(self) -> tuple[str, str]:
        """Wire form: the bare date for both ends."""
        text = self.day.isoformat()
        return text, text


@dataclass(frozen=True)
class Timed:
    """Occupies a clock-time window within one calendar day."""

    start: datetime
    end: datetime

    all_day = False

    def __post_init__(self):
        if self.end < self.start:
            raise ValidationError("Appointment end time is before its start time")
        if self.end.date() != self.start.date():
            raise ValidationError("A timed appointment must start and end on the same day")

    @property
    def day(self) -> date:
        return self.start.date()

    @property
    def hour(self) -> int:
        return self.start.hour

    def as_strings(self) -> tuple[str, str]:
        """Wire form: naive ISO timestamps."""
        return (
            self.start.isoformat(timespec="minutes"),
            self.end.isoformat(timespec="minutes"),
        )

    @classmethod
    def on(cls, day: date, start_time: time, end_time: time) -> "Timed":
        """Build a window on ``day`` from two clock times."""
        return cls(datetime.combine(day, start_time), datetime.combine(day, end_time))


ScheduleSlot = Union[AllDay, Timed]


def slot_from_values(start: object, end: object, all_day: bool) -> ScheduleSlot:
    """
    Build a slot from stored or submitted start/end values.

    All-day slots only need a readable date in ``start``; timed slots need
    two timestamps on the same day.
    """
    if all_day:
        return AllDay(parse_calendar_date(start))
    start_dt = start if isinstance(start, datetime) else None
    end_dt = end if isinstance(end, datetime) else None
    if start_dt is None:
        if not isinstance(start, str):
            raise InvalidDateFormatError(start, "ISO-8601 timestamp")
        start_dt = parse_timestamp(start)
    if end_dt is None:
        if not isinstance(end, str):
            raise InvalidDateFormatError(end, "ISO-8601 timestamp")
        end_dt = parse_timestamp(end)
    return Timed(start_dt, end_dt)


def _at(value: object, clock: time) -> datetime:
    """A timestamp as given, or a bare date placed at ``clock``."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, clock)
    if isinstance(value, str):
        if _DATE_RE.match(value.strip()):
            return datetime.combine(parse_calendar_date(value), clock)
        return parse_timestamp(value)
    raise InvalidDateFormatError(value, "ISO-8601 timestamp")


def reschedule(
    slot: ScheduleSlot,
    all_day: bool,
    start: object = None,
    end: object = None,
    default_window: tuple[time, time] = (time(8, 0), time(16, 0)),
) -> ScheduleSlot:
    """
    The slot after an edit of its kind, start or end.

    ``None`` keeps the current value. A timed slot given only a new start
    keeps its end time of day on the new start's day; a bare date moves it
    with both clock times unchanged. An all-day slot made timed gets
    ``default_window``.
    """
    if all_day:
        return AllDay(parse_calendar_date(slot.day if start is None else start))

    if isinstance(slot, Timed):
        start_time, end_time = slot.start.time(), slot.end.time()
    else:
        start_time, end_time = default_window

    new_start = datetime.combine(slot.day, start_time) if start is None else _at(start, start_time)
    if end is None:
        new_end = datetime.combine(new_start.date(), end_time)
    else:
        new_end = _at(end, end_time)
    return Timed(new_start, new_end)
