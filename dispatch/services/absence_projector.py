"""
Show approved absences on the calendar.

Each approved absence becomes one all-day entry per day it covers. A
multi-day absence is grouped like a multi-day appointment so that the
span resolver draws it as a single bar. Nothing here is stored; the
entries are rebuilt from the absences on every call.
"""

from typing import Any, Iterable, Mapping

from dispatch.services.dates import AllDay, each_day, parse_calendar_date
from dispatch.services.entries import CalendarEntry

ABSENCE_COLOR = "#9ca3af"
UNKNOWN_WORKER = "Worker"


def _entry(absence: Any, label: str, day, entry_id: str, **grouping) -> CalendarEntry:
    return CalendarEntry(
        id=entry_id,
        title=label,
        location=label,
        slot=AllDay(day),
        color=ABSENCE_COLOR,
        notes=absence.reason,
        workers=(absence.user_id,),
        source="absence",
        **grouping,
    )


def project_absences(absences: Iterable[Any], names: Mapping[int, str]) -> list[CalendarEntry]:
    """
    Calendar entries for every approved absence.

    Single-day absences give one ungrouped entry ``absence_{id}``. Longer
    absences give ``absence_{id}_{n}`` for each day, all sharing the group
    ``absence_multi_{id}``, so repeated calls produce identical output.
    """
    entries: list[CalendarEntry] = []

    for absence in absences:
        if absence.status != "approved":
            continue

        worker = names.get(absence.user_id) or UNKNOWN_WORKER
        label = f"{worker} - {absence.reason}"
        start = parse_calendar_date(absence.start_date)
        end = parse_calendar_date(absence.end_date)

        if start == end:
            entries.append(_entry(absence, label, start, f"absence_{absence.id}"))
            continue

        days = each_day(start, end)
        group_id = f"absence_multi_{absence.id}"
        for index, day in enumerate(days):
            entries.append(
                _entry(
                    absence,
                    label,
                    day,
                    f"absence_{absence.id}_{index}",
                    multi_day_group_id=group_id,
                    is_first_day=index == 0,
                    is_last_day=index == len(days) - 1,
                )
            )

    return entries
