"""
Calendar API router.
Composes the day, week, month and year layouts from stored appointments
and approved absences. Nothing is cached; every request reads the
current rows.
"""

from datetime import date, datetime, time, timedelta
from typing import List, Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dispatch.database import get_db_readonly
from dispatch.middleware.auth import SessionUser, get_current_user
from dispatch.models.absence import Absence
from dispatch.models.appointment import Appointment
from dispatch.schemas.calendar import CalendarViewResponse, GridResponse, NavigateResponse
from dispatch.services.absence_overlap import user_names
from dispatch.services.absence_projector import project_absences
from dispatch.services.date_grid import ViewKind, grid_for, navigate, week_rows
from dispatch.services.entries import CalendarEntry
from dispatch.services.response_builders import (
    build_entry_response,
    build_segment_response,
    entry_from_appointment,
)
from dispatch.services.span_resolver import (
    cell_appointments,
    compute_spans,
    day_agenda,
    max_cell_load,
    month_counts,
)

router = APIRouter()


def visible_range(anchor: date, view: ViewKind, cells: List[date]) -> tuple[date, date]:
    if view is ViewKind.YEAR:
        return date(anchor.year, 1, 1), date(anchor.year, 12, 31)
    return cells[0], cells[-1]


async def load_entries(
    db: AsyncSession, first: date, last: date
) -> tuple[List[CalendarEntry], List[CalendarEntry]]:
    """
    Entries on [first, last], and the entries to lay out spans with.

    The second list also holds the off-screen days of every multi-day
    group touching the range, so a group clipped at the grid edge keeps
    its real first and last day.
    """
    result = await db.execute(
        select(Appointment)
        .where(
            Appointment.start_date >= datetime.combine(first, time.min),
            Appointment.start_date < datetime.combine(last + timedelta(days=1), time.min),
        )
        .order_by(Appointment.start_date, Appointment.id)
    )
    appointments = result.scalars().all()
    group_ids = sorted({a.multi_day_group_id for a in appointments if a.multi_day_group_id})

    span_appointments = [a for a in appointments if not a.multi_day_group_id]
    if group_ids:
        result = await db.execute(
            select(Appointment)
            .where(Appointment.multi_day_group_id.in_(group_ids))
            .order_by(Appointment.start_date, Appointment.id)
        )
        span_appointments.extend(result.scalars().all())

    result = await db.execute(
        select(Absence)
        .where(
            Absence.status == "approved",
            Absence.start_date <= last,
            Absence.end_date >= first,
        )
        .options(selectinload(Absence.user))
        .order_by(Absence.start_date, Absence.id)
    )
    absences = result.scalars().all()
    names = user_names(a.user for a in absences if a.user is not None)
    projected = project_absences(absences, names)

    visible = [entry_from_appointment(a) for a in appointments]
    visible += [e for e in projected if first <= e.day <= last]
    spanned = [entry_from_appointment(a) for a in span_appointments] + projected
    return visible, spanned


def entry_list(entries: List[CalendarEntry]) -> List[dict]:
    return [build_entry_response(e) for e in entries]


@router.get("/calendar/grid", response_model=GridResponse)
async def get_grid(
    anchor: date = Query(...),
    view: ViewKind = Query(ViewKind.MONTH),
    user: SessionUser = Depends(get_current_user),
):
    """Cells of a calendar view around ``anchor``."""
    return {"view": view.value, "anchor": anchor, "cells": grid_for(anchor, view)}


@router.get("/calendar/navigate", response_model=NavigateResponse)
async def get_navigation(
    anchor: date = Query(...),
    view: ViewKind = Query(ViewKind.MONTH),
    direction: Literal["prev", "next"] = Query(...),
    user: SessionUser = Depends(get_current_user),
):
    """Anchor one view-step before or after ``anchor``."""
    return {"view": view.value, "anchor": navigate(anchor, direction, view)}


@router.get("/calendar/view", response_model=CalendarViewResponse)
async def get_calendar_view(
    anchor: date = Query(...),
    view: ViewKind = Query(ViewKind.MONTH),
    db: AsyncSession = Depends(get_db_readonly),
    user: SessionUser = Depends(get_current_user),
):
    """
    Complete layout of one view.

    Every view returns its cells with their single-day entries. Day, week
    and month views add the multi-day span segments; the month view adds
    the per-row cell load, the day view the hourly agenda and the year
    view the number of entries per month.
    """
    cells = grid_for(anchor, view)
    first, last = visible_range(anchor, view, cells)
    entries, span_entries = await load_entries(db, first, last)

    response = {
        "view": view.value,
        "anchor": anchor,
        "cells": [
            {
                "date": day,
                "in_month": view is not ViewKind.MONTH or day.month == anchor.month,
                "appointments": entry_list(cell_appointments(entries, day)),
            }
            for day in cells
        ],
        "spans": [],
    }

    if view is not ViewKind.YEAR:
        segments = compute_spans(span_entries, cells)
        response["spans"] = [build_segment_response(s) for s in segments]

    if view is ViewKind.MONTH:
        response["row_loads"] = [max_cell_load(entries, row) for row in week_rows(cells)]
    elif view is ViewKind.DAY:
        agenda = day_agenda(entries, anchor)
        response["agenda"] = {
            "all_day": entry_list(agenda.all_day),
            "by_hour": {hour: entry_list(bucket) for hour, bucket in agenda.by_hour.items()},
        }
    elif view is ViewKind.YEAR:
        response["month_counts"] = month_counts(entries, anchor.year)

    return response
