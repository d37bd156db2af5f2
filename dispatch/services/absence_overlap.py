"""
Overlap detection for absence requests.

Reports which other workers are already away (approved or still pending)
during a proposed absence. Whether that blocks anything is decided by the
caller; see routers/absences.py.
"""

from datetime import date
from typing import Any, Iterable, Mapping

from dispatch.services.dates import parse_calendar_date

BLOCKING_STATUSES = frozenset({"pending", "approved"})


def intervals_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Closed-interval overlap; touching endpoints count."""
    return start_a <= end_b and start_b <= end_a


def user_names(users: Iterable[Any]) -> dict[int, str]:
    """Map user id to full name."""
    return {user.id: user.full_name for user in users}


def find_overlaps(
    start: date | str,
    end: date | str,
    exclude_user_id: int | None,
    absences: Iterable[Any],
    names: Mapping[int, str],
) -> list[str]:
    """
    Names of other users whose pending/approved absence overlaps [start, end].

    Names are de-duplicated and returned in the order their first
    overlapping absence appears in ``absences``. Absences of users missing
    from ``names`` are ignored.
    """
    start = parse_calendar_date(start)
    end = parse_calendar_date(end)
    found: list[str] = []

    for absence in absences:
        if absence.status not in BLOCKING_STATUSES or absence.user_id == exclude_user_id:
            continue
        other_start = parse_calendar_date(absence.start_date)
        other_end = parse_calendar_date(absence.end_date)
        if not intervals_overlap(start, end, other_start, other_end):
            continue
        name = names.get(absence.user_id)
        if name is not None and name not in found:
            found.append(name)

    return found
