"""
Appointments API router.
Handles appointment CRUD, bulk creation and scheduling of calendar selections.

Deleting an appointment follows the calendar's grouping: by default the
whole job (job_group_id) goes, else the whole multi-day group, else just
the one record. ``?scope=single`` always deletes only the one record.
"""

import logging
from datetime import datetime, time, timedelta
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch.config import get_settings
from dispatch.database import get_db
from dispatch.exceptions import ConfirmationRequiredError, NotFoundError
from dispatch.middleware.auth import SessionUser, get_current_user, require_admin
from dispatch.models.appointment import Appointment
from dispatch.models.vehicle import Vehicle
from dispatch.routers.vehicles import get_vehicle_or_404
from dispatch.schemas.appointment import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentUpdate,
    SelectionCreate,
    SelectionPreviewResponse,
)
from dispatch.services.dates import parse_calendar_date, parse_clock_time, reschedule
from dispatch.services.entries import AppointmentDraft
from dispatch.services.range_expander import (
    DEFAULT_VEHICLE_COLOR,
    DayConfig,
    SelectionRequest,
    expand_selection,
    missing_fields,
)
from dispatch.services.response_builders import (
    build_appointment_response,
    build_draft_response,
)

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_appointment_or_404(db: AsyncSession, appointment_id: int) -> Appointment:
    result = await db.execute(select(Appointment).where(Appointment.id == appointment_id))
    appointment = result.scalar_one_or_none()
    if not appointment:
        raise NotFoundError("Appointment", appointment_id)
    return appointment


def appointment_from_draft(draft: AppointmentDraft, vehicle: Optional[Vehicle]) -> Appointment:
    """Unsaved ORM row for a draft; the vehicle is attached for display."""
    appointment = Appointment(
        title=draft.title,
        location=draft.location,
        address=draft.address,
        customer_name=draft.customer_name,
        notes=draft.notes,
        workers=list(draft.workers),
        vehicle_id=draft.vehicle_id,
        equipment=draft.equipment,
        color=draft.color,
        multi_day_group_id=draft.multi_day_group_id,
        is_first_day=draft.is_first_day,
        is_last_day=draft.is_last_day,
        job_group_id=draft.job_group_id,
    )
    appointment.slot = draft.slot
    appointment.vehicle = vehicle
    return appointment


async def build_appointment(db: AsyncSession, data: AppointmentCreate) -> Appointment:
    """Unsaved ORM row for a create request, snapshotting the vehicle."""
    vehicle = None
    if data.vehicle_id is not None:
        vehicle = await get_vehicle_or_404(db, data.vehicle_id)

    appointment = Appointment(
        title=data.title,
        location=data.location,
        address=data.address,
        customer_name=data.customer_name,
        notes=data.notes,
        workers=list(data.workers),
        vehicle_id=data.vehicle_id,
        equipment=data.equipment or (vehicle.name if vehicle else ""),
        color=data.color or (vehicle.color if vehicle else DEFAULT_VEHICLE_COLOR),
        multi_day_group_id=data.multi_day_group_id,
        is_first_day=data.is_first_day,
        is_last_day=data.is_last_day,
        job_group_id=data.job_group_id,
    )
    appointment.slot = data.to_slot()
    appointment.vehicle = vehicle
    return appointment


def build_selection_request(data: SelectionCreate) -> SelectionRequest:
    """Selection request with per-day overrides; missing times use the defaults."""
    settings = get_settings()
    configs = {}
    for day in data.days:
        configs[day.day] = DayConfig(
            day=day.day,
            all_day=day.all_day,
            start_time=parse_clock_time(day.start_time or settings.default_start_time),
            end_time=parse_clock_time(day.end_time or settings.default_end_time),
        )
    return SelectionRequest(
        dates=tuple(data.dates),
        task=data.task,
        worker_ids=tuple(data.worker_ids),
        vehicle_ids=tuple(data.vehicle_ids),
        notes=data.notes,
        day_configs=configs,
    )


async def load_vehicles(db: AsyncSession, vehicle_ids: List[int]) -> List[Vehicle]:
    if not vehicle_ids:
        return []
    result = await db.execute(select(Vehicle).where(Vehicle.id.in_(vehicle_ids)))
    return list(result.scalars().all())


async def expand_request(
    db: AsyncSession, data: SelectionCreate
) -> tuple[List[AppointmentDraft], List[str], dict]:
    """Drafts, warnings and the vehicle catalogue used for a selection."""
    request = build_selection_request(data)
    vehicles = await load_vehicles(db, data.vehicle_ids)
    drafts = expand_selection(request, vehicles)
    return drafts, missing_fields(request), {v.id: v for v in vehicles}


@router.get("/appointments", response_model=List[AppointmentResponse])
async def get_appointments(
    start: Optional[str] = Query(None),
    end: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    user: SessionUser = Depends(get_current_user),
):
    """
    Get appointments ordered by start.

    ``start`` / ``end`` (YYYY-MM-DD, inclusive) restrict the days returned.
    """
    query = select(Appointment)
    if start:
        start_day = parse_calendar_date(start)
        query = query.where(Appointment.start_date >= datetime.combine(start_day, time.min))
    if end:
        end_day = parse_calendar_date(end) + timedelta(days=1)
        query = query.where(Appointment.start_date < datetime.combine(end_day, time.min))

    result = await db.execute(query.order_by(Appointment.start_date, Appointment.id))
    return [build_appointment_response(a) for a in result.scalars().all()]


@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    db: AsyncSession = Depends(get_db),
    user: SessionUser = Depends(get_current_user),
):
    """Get a specific appointment by ID."""
    appointment = await get_appointment_or_404(db, appointment_id)
    return build_appointment_response(appointment)


@router.get("/appointments/{appointment_id}/related", response_model=List[AppointmentResponse])
async def get_related_appointments(
    appointment_id: int,
    db: AsyncSession = Depends(get_db),
    user: SessionUser = Depends(get_current_user),
):
    """
    All appointments of the same job (every vehicle, every day).

    Falls back to the multi-day group, then to the appointment itself.
    """
    appointment = await get_appointment_or_404(db, appointment_id)
    if appointment.job_group_id:
        condition = Appointment.job_group_id == appointment.job_group_id
    elif appointment.multi_day_group_id:
        condition = Appointment.multi_day_group_id == appointment.multi_day_group_id
    else:
        return [build_appointment_response(appointment)]

    result = await db.execute(
        select(Appointment).where(condition).order_by(Appointment.start_date, Appointment.id)
    )
    return [build_appointment_response(a) for a in result.scalars().all()]


@router.post("/appointments", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    db: AsyncSession = Depends(get_db),
    admin: SessionUser = Depends(require_admin),
):
    """Create a single appointment. Requires admin."""
    appointment = await build_appointment(db, data)
    db.add(appointment)
    await db.commit()
    await db.refresh(appointment)

    return build_appointment_response(appointment)


@router.post("/appointments/bulk", response_model=List[AppointmentResponse], status_code=201)
async def create_appointments_bulk(
    data: List[AppointmentCreate],
    db: AsyncSession = Depends(get_db),
    admin: SessionUser = Depends(require_admin),
):
    """Create many appointments in one transaction. Requires admin."""
    appointments = [await build_appointment(db, item) for item in data]
    db.add_all(appointments)
    await db.commit()
    for appointment in appointments:
        await db.refresh(appointment)

    logger.info("Bulk-created %d appointments", len(appointments))
    return [build_appointment_response(a) for a in appointments]


@router.post("/appointments/selection/preview", response_model=SelectionPreviewResponse)
async def preview_selection(
    data: SelectionCreate,
    db: AsyncSession = Depends(get_db),
    admin: SessionUser = Depends(require_admin),
):
    """
    Drafts a selection would create, without saving them.

    Missing task, workers or vehicles are reported as warnings.
    """
    drafts, warnings, _ = await expand_request(db, data)
    return {
        "drafts": [build_draft_response(d) for d in drafts],
        "warnings": warnings,
        "job_group_id": drafts[0].job_group_id if drafts else None,
        "multi_day_groups": len({d.multi_day_group_id for d in drafts if d.multi_day_group_id}),
    }


@router.post(
    "/appointments/selection",
    response_model=List[AppointmentResponse],
    status_code=201,
)
async def schedule_selection(
    data: SelectionCreate,
    db: AsyncSession = Depends(get_db),
    admin: SessionUser = Depends(require_admin),
):
    """
    Create the appointments for a calendar selection.

    Responds 409 with the missing fields unless ``force`` is set.
    """
    drafts, warnings, catalogue = await expand_request(db, data)
    if warnings and not data.force:
        raise ConfirmationRequiredError("Selection is incomplete", warnings)

    appointments = [appointment_from_draft(d, catalogue.get(d.vehicle_id)) for d in drafts]
    db.add_all(appointments)
    await db.commit()
    for appointment in appointments:
        await db.refresh(appointment)

    logger.info(
        "Scheduled %d appointments for %d vehicles (job %s)",
        len(appointments),
        len(set(data.vehicle_ids)),
        drafts[0].job_group_id if drafts else None,
    )
    return [build_appointment_response(a) for a in appointments]


@router.put("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: int,
    data: AppointmentUpdate,
    db: AsyncSession = Depends(get_db),
    admin: SessionUser = Depends(require_admin),
):
    """
    Update an appointment. Requires admin.

    Only the fields sent are changed. Sending ``"vehicle_id": null``
    unlinks the vehicle and keeps its current name and color as the
    stored display values. A timed appointment moved with only
    ``start_date`` keeps its end time of day.
    """
    appointment = await get_appointment_or_404(db, appointment_id)
    update_fields = data.model_dump(exclude_unset=True)

    for field in ("title", "location", "address", "customer_name", "notes", "workers"):
        if update_fields.get(field) is not None:
            setattr(appointment, field, update_fields[field])

    if "vehicle_id" in update_fields:
        vehicle_id = update_fields["vehicle_id"]
        if vehicle_id is None:
            if appointment.vehicle is not None:
                appointment.equipment = appointment.vehicle.name
                appointment.color = appointment.vehicle.color
            appointment.vehicle_id = None
            appointment.vehicle = None
        elif vehicle_id != appointment.vehicle_id:
            vehicle = await get_vehicle_or_404(db, vehicle_id)
            appointment.vehicle_id = vehicle.id
            appointment.vehicle = vehicle
            appointment.equipment = vehicle.name
            appointment.color = vehicle.color

    if update_fields.keys() & {"all_day", "start_date", "end_date"}:
        all_day = update_fields.get("all_day")
        settings = get_settings()
        appointment.slot = reschedule(
            appointment.slot,
            appointment.all_day if all_day is None else all_day,
            update_fields.get("start_date"),
            update_fields.get("end_date"),
            (
                parse_clock_time(settings.default_start_time),
                parse_clock_time(settings.default_end_time),
            ),
        )

    await db.commit()
    await db.refresh(appointment)

    return build_appointment_response(appointment)


@router.delete("/appointments/group/{group_id}")
async def delete_multi_day_group(
    group_id: str,
    db: AsyncSession = Depends(get_db),
    admin: SessionUser = Depends(require_admin),
):
    """Delete every day of a multi-day group. Requires admin."""
    result = await db.execute(
        delete(Appointment).where(Appointment.multi_day_group_id == group_id)
    )
    await db.commit()

    logger.info("Deleted multi-day group %s (%d appointments)", group_id, result.rowcount)
    return {"success": True, "deleted": result.rowcount}


@router.delete("/appointments/job/{job_group_id}")
async def delete_job(
    job_group_id: str,
    db: AsyncSession = Depends(get_db),
    admin: SessionUser = Depends(require_admin),
):
    """Delete every appointment of a job, across all vehicles. Requires admin."""
    result = await db.execute(delete(Appointment).where(Appointment.job_group_id == job_group_id))
    await db.commit()

    logger.info("Deleted job %s (%d appointments)", job_group_id, result.rowcount)
    return {"success": True, "deleted": result.rowcount}


@router.delete("/appointments/{appointment_id}")
async def delete_appointment(
    appointment_id: int,
    scope: Literal["auto", "single"] = Query("auto"),
    db: AsyncSession = Depends(get_db),
    admin: SessionUser = Depends(require_admin),
):
    """
    Delete an appointment together with its job or multi-day group.

    Requires admin.
    """
    appointment = await get_appointment_or_404(db, appointment_id)

    if scope == "auto" and appointment.job_group_id:
        condition = Appointment.job_group_id == appointment.job_group_id
    elif scope == "auto" and appointment.multi_day_group_id:
        condition = Appointment.multi_day_group_id == appointment.multi_day_group_id
    else:
        condition = Appointment.id == appointment.id

    result = await db.execute(delete(Appointment).where(condition))
    await db.commit()

    return {"success": True, "deleted": result.rowcount}
