"""
Pydantic schemas for the calendar layout endpoints.
"""

from typing import Dict, List, Optional

from dispatch.schemas.base import BaseSchema, DateSimple


class CalendarEntryResponse(BaseSchema):
    """An appointment or approved absence as drawn on the calendar."""
    id: str
    source: str = "appointment"
    title: str
    location: str = ""
    equipment: str = ""
    label: str = ""
    color: str
    workers: List[int] = []
    vehicle_id: Optional[int] = None
    all_day: bool
    start_date: str
    end_date: str
    multi_day_group_id: Optional[str] = None
    is_first_day: Optional[bool] = None
    is_last_day: Optional[bool] = None
    job_group_id: Optional[str] = None


class SpanSegmentResponse(BaseSchema):
    """One row's piece of a multi-day bar."""
    key: str
    group_id: str
    row: int
    start_col: int
    end_col: int
    color: str
    label: str
    is_first_row_segment: bool
    is_last_row_segment: bool
    appointment_ids: List[str]


class CellResponse(BaseSchema):
    """A grid cell with its single-day entries."""
    date: DateSimple
    in_month: bool = True
    appointments: List[CalendarEntryResponse] = []


class DayAgendaResponse(BaseSchema):
    """Day view: all-day entries and timed entries by start hour."""
    all_day: List[CalendarEntryResponse]
    by_hour: Dict[int, List[CalendarEntryResponse]]


class GridResponse(BaseSchema):
    view: str
    anchor: DateSimple
    cells: List[DateSimple]


class NavigateResponse(BaseSchema):
    view: str
    anchor: DateSimple


class CalendarViewResponse(BaseSchema):
    """
    Complete layout for one calendar view.

    ``row_loads`` is only set for the month view, ``agenda`` for the day
    view and ``month_counts`` for the year view.
    """
    view: str
    anchor: DateSimple
    cells: List[CellResponse]
    spans: List[SpanSegmentResponse] = []
    row_loads: Optional[List[int]] = None
    agenda: Optional[DayAgendaResponse] = None
    month_counts: Optional[Dict[int, int]] = None
