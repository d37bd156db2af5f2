"""
Calendar layout: single-day cells and multi-day span bars.

Entries without a multi_day_group_id are placed in the cell of their own
day. Entries sharing a multi_day_group_id are drawn as one bar that is
split at every row boundary of the grid (one segment per week row in the
month view).
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

from dispatch.services.entries import CalendarEntry


@dataclass(frozen=True)
class SpanSegment:
    group_id: str
    appointments: tuple[CalendarEntry, ...]
    row: int
    start_col: int
    end_col: int
    color: str
    label: str
    is_first_row_segment: bool
    is_last_row_segment: bool

    @property
    def key(self) -> str:
        return f"{self.group_id}-week-{self.row}"


@dataclass(frozen=True)
class DayAgenda:
    day: date
    all_day: list[CalendarEntry]
    by_hour: dict[int, list[CalendarEntry]]


def cell_appointments(entries: Iterable[CalendarEntry], day: date) -> list[CalendarEntry]:
    """Ungrouped entries whose own day is ``day``."""
    return [e for e in entries if not e.multi_day_group_id and e.day == day]


def group_entries(entries: Iterable[CalendarEntry]) -> dict[str, list[CalendarEntry]]:
    """Grouped entries by multi_day_group_id, in first-encountered order."""
    groups: dict[str, list[CalendarEntry]] = {}
    for entry in entries:
        if entry.multi_day_group_id:
            groups.setdefault(entry.multi_day_group_id, []).append(entry)
    return groups


def group_bounds(members: Sequence[CalendarEntry]) -> tuple[date, date, list[CalendarEntry]]:
    """
    First and last day of a group plus its members ordered by start.

    The is_first_day / is_last_day markers win; sort order is the fallback
    when a marker is missing or the markers contradict each other.
    """
    ordered = sorted(members, key=lambda e: e.slot.start)
    first = next((e for e in ordered if e.is_first_day), ordered[0])
    last = next((e for e in reversed(ordered) if e.is_last_day), ordered[-1])
    if first.day > last.day:
        first, last = ordered[0], ordered[-1]
    return first.day, last.day, ordered


def compute_spans(
    entries: Iterable[CalendarEntry],
    grid: Sequence[date],
    row_width: int = 7,
) -> list[SpanSegment]:
    """
    Segments for every multi-day group visible in ``grid``.

    Groups reaching outside the grid are clipped to it; a clipped end does
    not get its first/last flag since the real boundary is off-screen.
    Groups whose visible ends are not grid cells (the year grid) are
    skipped. Segments are ordered by group first appearance, then row.
    """
    if not grid:
        return []

    index = {day: i for i, day in enumerate(grid)}
    first_cell, last_cell = grid[0], grid[-1]
    segments: list[SpanSegment] = []

    for group_id, members in group_entries(entries).items():
        start, end, ordered = group_bounds(members)
        if end < first_cell or start > last_cell:
            continue

        visible_start = max(start, first_cell)
        visible_end = min(end, last_cell)
        if visible_start not in index or visible_end not in index:
            continue

        start_idx = index[visible_start]
        end_idx = index[visible_end]
        start_row = start_idx // row_width
        end_row = end_idx // row_width
        head = ordered[0]

        for row in range(start_row, end_row + 1):
            row_first = row * row_width
            row_last = row_first + row_width - 1
            segments.append(
                SpanSegment(
                    group_id=group_id,
                    appointments=tuple(ordered),
                    row=row,
                    start_col=max(start_idx, row_first) - row_first,
                    end_col=min(end_idx, row_last) - row_first,
                    color=head.color,
                    label=head.label,
                    is_first_row_segment=row == start_row and visible_start == start,
                    is_last_row_segment=row == end_row and visible_end == end,
                )
            )

    return segments


def max_cell_load(entries: Sequence[CalendarEntry], row: Iterable[date]) -> int:
    """Largest number of single-day entries in any cell of a week row."""
    return max((len(cell_appointments(entries, day)) for day in row), default=0)


def day_agenda(entries: Iterable[CalendarEntry], day: date) -> DayAgenda:
    """
    Everything on ``day`` (grouped or not), split for the day view.

    Timed entries are bucketed by start hour, each bucket ordered by start.
    """
    all_day: list[CalendarEntry] = []
    by_hour: dict[int, list[CalendarEntry]] = defaultdict(list)
    for entry in entries:
        if entry.day != day:
            continue
        if entry.all_day:
            all_day.append(entry)
        else:
            by_hour[entry.slot.hour].append(entry)

    return DayAgenda(
        day=day,
        all_day=all_day,
        by_hour={
            hour: sorted(bucket, key=lambda e: e.slot.start)
            for hour, bucket in sorted(by_hour.items())
        },
    )


def month_counts(entries: Iterable[CalendarEntry], year: int) -> dict[int, int]:
    """Number of entries per month (1-12) of ``year``."""
    counts = {month: 0 for month in range(1, 13)}
    for entry in entries:
        if entry.day.year == year:
            counts[entry.day.month] += 1
    return counts
