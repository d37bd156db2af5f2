"""
Absences API router.
Handles worker time-off requests and their approval.

Lifecycle: a request that overlaps nobody is approved immediately. A
request overlapping other workers' pending or approved absences is
rejected with 409 (listing their names) unless ``confirm`` is set, in
which case it is stored as pending for an admin to decide.
"""

import logging
from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dispatch.database import get_db, get_db_readonly
from dispatch.exceptions import (
    ConfirmationRequiredError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from dispatch.middleware.auth import SessionUser, get_current_user, require_admin
from dispatch.models.absence import Absence
from dispatch.models.user import User
from dispatch.schemas.absence import (
    AbsenceCreate,
    AbsenceResponse,
    AbsenceStatusUpdate,
    OverlapResponse,
    PendingCountResponse,
)
from dispatch.services.absence_overlap import BLOCKING_STATUSES, find_overlaps, user_names
from dispatch.services.response_builders import build_absence_response

logger = logging.getLogger(__name__)

router = APIRouter()


def can_edit_absence(absence: Absence, user: SessionUser) -> bool:
    return absence.user_id == user.id or user.is_admin


async def get_absence_or_404(db: AsyncSession, absence_id: int) -> Absence:
    result = await db.execute(
        select(Absence)
        .where(Absence.id == absence_id)
        .options(selectinload(Absence.user))
    )
    absence = result.scalar_one_or_none()
    if not absence:
        raise NotFoundError("Absence", absence_id)
    return absence


async def overlapping_names(
    db: AsyncSession,
    start: date,
    end: date,
    exclude_user_id: Optional[int],
) -> List[str]:
    """Names of other workers away during [start, end]."""
    result = await db.execute(
        select(Absence)
        .where(
            Absence.status.in_(BLOCKING_STATUSES),
            Absence.start_date <= end,
            Absence.end_date >= start,
        )
        .options(selectinload(Absence.user))
        .order_by(Absence.start_date, Absence.id)
    )
    absences = result.scalars().all()
    names = user_names(a.user for a in absences if a.user is not None)
    return find_overlaps(start, end, exclude_user_id, absences, names)


@router.get("/absences", response_model=List[AbsenceResponse])
async def get_absences(
    status: Optional[Literal["pending", "approved", "rejected"]] = Query(None),
    db: AsyncSession = Depends(get_db_readonly),
    current_user: SessionUser = Depends(get_current_user),
):
    """
    Get absences ordered by start date.

    ``status`` restricts the result to one lifecycle state.
    """
    query = select(Absence).options(selectinload(Absence.user))
    if status:
        query = query.where(Absence.status == status)

    result = await db.execute(query.order_by(Absence.start_date, Absence.id))
    return [
        build_absence_response(a, can_edit=can_edit_absence(a, current_user))
        for a in result.scalars().all()
    ]


@router.get("/absences/pending/count", response_model=PendingCountResponse)
async def get_pending_count(
    db: AsyncSession = Depends(get_db_readonly),
    admin: SessionUser = Depends(require_admin),
):
    """Number of absences waiting for a decision. Requires admin."""
    result = await db.execute(
        select(func.count()).select_from(Absence).where(Absence.status == "pending")
    )
    return {"count": result.scalar_one()}


@router.get("/absences/overlaps", response_model=OverlapResponse)
async def get_overlaps(
    start: date = Query(...),
    end: Optional[date] = Query(None),
    user_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db_readonly),
    current_user: SessionUser = Depends(get_current_user),
):
    """
    Other workers already away during a proposed absence.

    ``user_id`` defaults to the current user and is excluded from the result.
    """
    exclude = user_id if user_id is not None else current_user.id
    names = await overlapping_names(db, start, end or start, exclude)
    return {"overlapping_users": names, "requires_approval": bool(names)}


@router.post("/absences", response_model=AbsenceResponse, status_code=201)
async def create_absence(
    data: AbsenceCreate,
    db: AsyncSession = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
):
    """
    Request an absence.

    Workers may only request absences for themselves; admins for anyone.
    """
    user_id = data.user_id if data.user_id is not None else current_user.id
    if user_id != current_user.id and not current_user.is_admin:
        raise ForbiddenError("You can only request absences for yourself")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError("User", user_id)

    names = await overlapping_names(db, data.start_date, data.end_date, user_id)
    if names and not data.confirm:
        raise ConfirmationRequiredError("Other workers are absent during this period", names)

    absence = Absence(
        user_id=user_id,
        start_date=data.start_date,
        end_date=data.end_date,
        reason=data.reason,
        absence_type=data.absence_type,
        custom_reason=data.custom_reason,
        status="pending" if names else "approved",
        requires_approval=bool(names),
    )
    db.add(absence)
    await db.commit()
    await db.refresh(absence)

    # Load user relationship
    absence.user = user

    logger.info(
        "Absence %s for user %s (%s to %s) created as %s",
        absence.id, user_id, absence.start_date, absence.end_date, absence.status,
    )
    return build_absence_response(absence, can_edit=True)


@router.put("/absences/{absence_id}/status", response_model=AbsenceResponse)
async def update_absence_status(
    absence_id: int,
    data: AbsenceStatusUpdate,
    db: AsyncSession = Depends(get_db),
    admin: SessionUser = Depends(require_admin),
):
    """Approve or reject a pending absence. Requires admin."""
    absence = await get_absence_or_404(db, absence_id)
    if absence.is_terminal:
        raise ConflictError(
            f"Absence is already {absence.status}",
            {"status": absence.status},
        )

    user = absence.user
    absence.status = data.status
    await db.commit()
    await db.refresh(absence)
    absence.user = user

    logger.info("Absence %s %s by user %s", absence.id, data.status, admin.id)
    return build_absence_response(absence, can_edit=True)


@router.delete("/absences/{absence_id}")
async def delete_absence(
    absence_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
):
    """Delete an absence. Allowed for its owner and for admins."""
    absence = await get_absence_or_404(db, absence_id)
    if not can_edit_absence(absence, current_user):
        raise ForbiddenError("You can only delete your own absences")

    await db.delete(absence)
    await db.commit()

    return {"success": True}
