"""
Pydantic schemas for Appointments and calendar selections.

``start_date`` / ``end_date`` are bare dates for all-day appointments and
naive ISO timestamps otherwise.
"""

from datetime import date
from typing import List, Optional

from pydantic import ConfigDict, Field

from dispatch.schemas.base import HEX_COLOR_PATTERN, BaseSchema
from dispatch.services.dates import ScheduleSlot, slot_from_values


class AppointmentFields(BaseSchema):
    """Fields shared by stored appointments and unsaved drafts."""
    title: str = ""
    location: str = ""
    address: str = ""
    customer_name: str = ""
    notes: str = ""
    workers: List[int] = []
    vehicle_id: Optional[int] = None
    equipment: str = ""
    color: str = "#3b82f6"
    all_day: bool = False
    start_date: str
    end_date: str
    multi_day_group_id: Optional[str] = None
    is_first_day: Optional[bool] = None
    is_last_day: Optional[bool] = None
    job_group_id: Optional[str] = None


class AppointmentResponse(AppointmentFields):
    """Response model for appointments."""
    id: int


class DraftResponse(AppointmentFields):
    """An appointment produced from a selection but not saved."""


class AppointmentCreate(BaseSchema):
    """Request model for creating an appointment."""
    title: str = Field("", max_length=200)
    location: str = Field("", max_length=200)
    address: str = Field("", max_length=300)
    customer_name: str = Field("", max_length=200)
    notes: str = ""
    workers: List[int] = []
    vehicle_id: Optional[int] = None
    equipment: str = Field("", max_length=200)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    all_day: bool = False
    start_date: str
    end_date: Optional[str] = None
    multi_day_group_id: Optional[str] = Field(None, max_length=64)
    is_first_day: Optional[bool] = None
    is_last_day: Optional[bool] = None
    job_group_id: Optional[str] = Field(None, max_length=64)

    def to_slot(self) -> ScheduleSlot:
        """Day and hours as a slot; raises InvalidDateFormatError."""
        return slot_from_values(self.start_date, self.end_date or self.start_date, self.all_day)


class AppointmentUpdate(BaseSchema):
    """Request model for updating an appointment."""
    title: Optional[str] = Field(None, max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    address: Optional[str] = Field(None, max_length=300)
    customer_name: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None
    workers: Optional[List[int]] = None
    vehicle_id: Optional[int] = None
    all_day: Optional[bool] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class DayConfigIn(BaseSchema):
    """Per-day override inside a selection (sent as ``date``)."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    day: date = Field(..., alias="date")
    all_day: bool = True
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class SelectionCreate(BaseSchema):
    """
    Request model for scheduling a calendar selection.

    ``days`` overrides individual dates; dates without an entry are all-day.
    """
    dates: List[date] = Field(..., min_length=1)
    task: str = Field("", max_length=200)
    worker_ids: List[int] = []
    vehicle_ids: List[int] = []
    notes: str = ""
    days: List[DayConfigIn] = []
    force: bool = False


class SelectionPreviewResponse(BaseSchema):
    """Drafts for a selection plus the soft-validation warnings."""
    drafts: List[DraftResponse]
    warnings: List[str] = []
    job_group_id: Optional[str] = None
    multi_day_groups: int = 0
