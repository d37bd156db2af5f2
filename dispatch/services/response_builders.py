"""
Shared response builder utilities.

Centralizes the conversion of ORM models and calendar values into API
response dicts, and of appointments into calendar entries.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dispatch.services.entries import AppointmentDraft, CalendarEntry

if TYPE_CHECKING:
    from dispatch.models.absence import Absence
    from dispatch.models.appointment import Appointment
    from dispatch.models.user import User
    from dispatch.services.span_resolver import SpanSegment


def entry_from_appointment(appointment: Appointment) -> CalendarEntry:
    """Calendar entry for a stored appointment, with vehicle name/color joined."""
    return CalendarEntry(
        id=str(appointment.id),
        title=appointment.title,
        location=appointment.location,
        address=appointment.address,
        customer_name=appointment.customer_name,
        notes=appointment.notes,
        equipment=appointment.display_name,
        color=appointment.display_color,
        workers=tuple(appointment.workers or ()),
        vehicle_id=appointment.vehicle_id,
        slot=appointment.slot,
        multi_day_group_id=appointment.multi_day_group_id,
        is_first_day=appointment.is_first_day,
        is_last_day=appointment.is_last_day,
        job_group_id=appointment.job_group_id,
    )


def build_appointment_response(appointment: Appointment) -> dict:
    """Build appointment response dict."""
    start, end = appointment.slot.as_strings()
    return {
        "id": appointment.id,
        "title": appointment.title,
        "location": appointment.location,
        "address": appointment.address,
        "customer_name": appointment.customer_name,
        "notes": appointment.notes,
        "workers": list(appointment.workers or []),
        "vehicle_id": appointment.vehicle_id,
        "equipment": appointment.display_name,
        "color": appointment.display_color,
        "all_day": appointment.all_day,
        "start_date": start,
        "end_date": end,
        "multi_day_group_id": appointment.multi_day_group_id,
        "is_first_day": appointment.is_first_day,
        "is_last_day": appointment.is_last_day,
        "job_group_id": appointment.job_group_id,
    }


def build_draft_response(draft: AppointmentDraft) -> dict:
    """Build response dict for an unsaved draft."""
    start, end = draft.slot.as_strings()
    return {
        "title": draft.title,
        "location": draft.location,
        "address": draft.address,
        "customer_name": draft.customer_name,
        "notes": draft.notes,
        "workers": list(draft.workers),
        "vehicle_id": draft.vehicle_id,
        "equipment": draft.equipment,
        "color": draft.color,
        "all_day": draft.slot.all_day,
        "start_date": start,
        "end_date": end,
        "multi_day_group_id": draft.multi_day_group_id,
        "is_first_day": draft.is_first_day,
        "is_last_day": draft.is_last_day,
        "job_group_id": draft.job_group_id,
    }


def build_entry_response(entry: CalendarEntry) -> dict:
    """Build response dict for a calendar entry."""
    start, end = entry.slot.as_strings()
    return {
        "id": entry.id,
        "source": entry.source,
        "title": entry.title,
        "location": entry.location,
        "equipment": entry.equipment,
        "label": entry.label,
        "color": entry.color,
        "workers": list(entry.workers),
        "vehicle_id": entry.vehicle_id,
        "all_day": entry.all_day,
        "start_date": start,
        "end_date": end,
        "multi_day_group_id": entry.multi_day_group_id,
        "is_first_day": entry.is_first_day,
        "is_last_day": entry.is_last_day,
        "job_group_id": entry.job_group_id,
    }


def build_segment_response(segment: SpanSegment) -> dict:
    """Build response dict for a span segment."""
    return {
        "key": segment.key,
        "group_id": segment.group_id,
        "row": segment.row,
        "start_col": segment.start_col,
        "end_col": segment.end_col,
        "color": segment.color,
        "label": segment.label,
        "is_first_row_segment": segment.is_first_row_segment,
        "is_last_row_segment": segment.is_last_row_segment,
        "appointment_ids": [entry.id for entry in segment.appointments],
    }


def build_absence_response(absence: Absence, can_edit: bool = False) -> dict:
    """Build absence response dict."""
    return {
        "id": absence.id,
        "user_id": absence.user_id,
        "user_name": absence.user.full_name if absence.user else "",
        "start_date": absence.start_date,
        "end_date": absence.end_date,
        "reason": absence.reason,
        "absence_type": absence.absence_type,
        "custom_reason": absence.custom_reason,
        "status": absence.status,
        "requires_approval": absence.requires_approval,
        "created_at": absence.created_at,
        "can_edit": can_edit,
    }


def build_user_response(user: User) -> dict:
    """Build user response dict (password omitted)."""
    return {
        "id": user.id,
        "username": user.username,
        "full_name": user.full_name,
        "role": user.role,
        "avatar_url": user.avatar_url,
        "created_at": user.created_at,
    }
