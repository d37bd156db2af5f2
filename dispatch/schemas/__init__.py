"""
Pydantic schemas for request/response validation.
"""

from dispatch.schemas.auth import (
    LoginRequest,
    LoginResponse,
    UserSessionInfo,
    AuthMeResponse,
)
from dispatch.schemas.user import (
    UserResponse,
    UserCreate,
    UserUpdate,
)
from dispatch.schemas.vehicle import (
    VehicleResponse,
    VehicleCreate,
    VehicleUpdate,
)
from dispatch.schemas.appointment import (
    AppointmentResponse,
    AppointmentCreate,
    AppointmentUpdate,
    DraftResponse,
    DayConfigIn,
    SelectionCreate,
    SelectionPreviewResponse,
)
from dispatch.schemas.absence import (
    AbsenceResponse,
    AbsenceCreate,
    AbsenceStatusUpdate,
    OverlapResponse,
    PendingCountResponse,
)
from dispatch.schemas.calendar import (
    CalendarEntryResponse,
    SpanSegmentResponse,
    CellResponse,
    DayAgendaResponse,
    GridResponse,
    NavigateResponse,
    CalendarViewResponse,
)

__all__ = [
    # Auth
    "LoginRequest",
    "LoginResponse",
    "UserSessionInfo",
    "AuthMeResponse",
    # Users
    "UserResponse",
    "UserCreate",
    "UserUpdate",
    # Vehicles
    "VehicleResponse",
    "VehicleCreate",
    "VehicleUpdate",
    # Appointments
    "AppointmentResponse",
    "AppointmentCreate",
    "AppointmentUpdate",
    "DraftResponse",
    "DayConfigIn",
    "SelectionCreate",
    "SelectionPreviewResponse",
    # Absences
    "AbsenceResponse",
    "AbsenceCreate",
    "AbsenceStatusUpdate",
    "OverlapResponse",
    "PendingCountResponse",
    # Calendar
    "CalendarEntryResponse",
    "SpanSegmentResponse",
    "CellResponse",
    "DayAgendaResponse",
    "GridResponse",
    "NavigateResponse",
    "CalendarViewResponse",
]
