"""
Calendar grids for the day, week, month and year views.

Weeks start on Monday.
"""

import calendar
from datetime import date, timedelta
from enum import Enum

from dispatch.exceptions import ValidationError
from dispatch.services.dates import each_day


class ViewKind(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


def _as_view(view: ViewKind | str) -> ViewKind:
    try:
        return ViewKind(view)
    except ValueError:
        raise ValidationError(f"Unknown calendar view: {view!r}") from None


def start_of_week(day: date) -> date:
    return day - timedelta(days=day.weekday())


def end_of_week(day: date) -> date:
    return start_of_week(day) + timedelta(days=6)


def grid_for(anchor: date, view: ViewKind | str) -> list[date]:
    """
    Ordered cells for rendering ``view`` around ``anchor``.

    - day: the anchor itself
    - week: Monday through Sunday of the anchor's week
    - month: Monday on/before the 1st through Sunday on/after the last day
      (28, 35 or 42 cells)
    - year: the 1st of each month of the anchor's year
    """
    view = _as_view(view)
    if view is ViewKind.DAY:
        return [anchor]
    if view is ViewKind.WEEK:
        return each_day(start_of_week(anchor), end_of_week(anchor))
    if view is ViewKind.MONTH:
        first = anchor.replace(day=1)
        last = anchor.replace(day=calendar.monthrange(anchor.year, anchor.month)[1])
        return each_day(start_of_week(first), end_of_week(last))
    return [date(anchor.year, month, 1) for month in range(1, 13)]


def week_rows(cells: list[date], width: int = 7) -> list[list[date]]:
    """Split a grid into rows of ``width`` cells."""
    return [cells[i : i + width] for i in range(0, len(cells), width)]


def _add_months(anchor: date, months: int) -> date:
    index = anchor.year * 12 + anchor.month - 1 + months
    year, month = divmod(index, 12)
    month += 1
    day = min(anchor.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def navigate(anchor: date, direction: str, view: ViewKind | str) -> date:
    """
    Move the anchor one view-step backwards ("prev") or forwards ("next").

    Month and year steps keep the day of month where possible and clamp it
    to the length of the target month otherwise (31 Jan + 1 month = 29 Feb).
    """
    if direction not in ("prev", "next"):
        raise ValidationError(f"Unknown direction: {direction!r}")
    step = -1 if direction == "prev" else 1
    view = _as_view(view)

    if view is ViewKind.DAY:
        return anchor + timedelta(days=step)
    if view is ViewKind.WEEK:
        return anchor + timedelta(weeks=step)
    if view is ViewKind.MONTH:
        return _add_months(anchor, step)
    return _add_months(anchor, 12 * step)
