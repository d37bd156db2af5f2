"""
Pydantic schemas for Absences.
"""

from datetime import date
from typing import List, Literal, Optional

from pydantic import Field, model_validator

from dispatch.schemas.base import BaseSchema, DateSimple, DateTimeNaive

VACATION_REASON = "Vacation"


class AbsenceResponse(BaseSchema):
    """Response model for absences."""
    id: int
    user_id: int
    user_name: str = ""
    start_date: DateSimple
    end_date: DateSimple
    reason: str
    absence_type: str
    custom_reason: Optional[str] = None
    status: str
    requires_approval: bool
    created_at: DateTimeNaive
    # Permission flag - set by endpoint based on current user
    can_edit: bool = False


class AbsenceCreate(BaseSchema):
    """
    Request model for requesting an absence.

    Leaving out ``end_date`` requests a single day. ``confirm`` acknowledges
    overlapping absences of other workers and sends the request for approval.
    """
    user_id: Optional[int] = None
    start_date: date
    end_date: Optional[date] = None
    absence_type: Literal["vacation", "other"] = "vacation"
    custom_reason: Optional[str] = Field(None, max_length=200)
    confirm: bool = False

    @model_validator(mode="after")
    def check_dates_and_reason(self) -> "AbsenceCreate":
        if self.end_date is None:
            self.end_date = self.start_date
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        if self.absence_type == "other":
            if not (self.custom_reason or "").strip():
                raise ValueError("custom_reason is required for absences of type 'other'")
            self.custom_reason = self.custom_reason.strip()
        else:
            self.custom_reason = None
        return self

    @property
    def reason(self) -> str:
        if self.absence_type == "vacation":
            return VACATION_REASON
        return self.custom_reason or ""


class AbsenceStatusUpdate(BaseSchema):
    """Request model for approving or rejecting an absence."""
    status: Literal["approved", "rejected"]


class OverlapResponse(BaseSchema):
    """Other workers away during a proposed absence."""
    overlapping_users: List[str]
    requires_approval: bool


class PendingCountResponse(BaseSchema):
    count: int
