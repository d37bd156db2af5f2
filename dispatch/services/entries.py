"""
In-memory appointment shapes used by the calendar services.

``CalendarEntry`` is what the layout code reads: persisted appointments
and absence-derived entries are both converted to it. ``AppointmentDraft``
is what the scheduling code produces before the database assigns an id.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from dispatch.services.dates import ScheduleSlot


@dataclass(frozen=True)
class CalendarEntry:
    id: str
    title: str
    slot: ScheduleSlot
    color: str
    location: str = ""
    address: str = ""
    customer_name: str = ""
    notes: str = ""
    equipment: str = ""
    workers: tuple[int, ...] = ()
    vehicle_id: Optional[int] = None
    multi_day_group_id: Optional[str] = None
    is_first_day: Optional[bool] = None
    is_last_day: Optional[bool] = None
    job_group_id: Optional[str] = None
    source: str = "appointment"

    @property
    def day(self) -> date:
        return self.slot.day

    @property
    def all_day(self) -> bool:
        return self.slot.all_day

    @property
    def label(self) -> str:
        """Vehicle name, falling back to the title."""
        return self.equipment or self.title


@dataclass(frozen=True)
class AppointmentDraft:
    title: str
    location: str
    slot: ScheduleSlot
    color: str
    equipment: str
    vehicle_id: Optional[int] = None
    workers: tuple[int, ...] = ()
    notes: str = ""
    address: str = ""
    customer_name: str = ""
    multi_day_group_id: Optional[str] = None
    is_first_day: bool = False
    is_last_day: bool = False
    job_group_id: Optional[str] = None

    @property
    def day(self) -> date:
        return self.slot.day
