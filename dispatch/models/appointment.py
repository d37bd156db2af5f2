"""
Appointment model.
Maps to the appointments table in PostgreSQL.

One row occupies exactly one calendar day. Multi-day work is stored as
one row per day sharing a multi_day_group_id; rows created together by a
single scheduling action additionally share a job_group_id.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dispatch.database import Base
from dispatch.services.dates import AllDay, ScheduleSlot, Timed

if TYPE_CHECKING:
    from dispatch.models.vehicle import Vehicle


class Appointment(Base):
    """Appointment model - a crew and vehicle booked for one day."""

    __tablename__ = "appointments"
    __table_args__ = (
        Index("ix_appointments_start_date", "start_date"),
        Index("ix_appointments_multi_day_group", "multi_day_group_id"),
        Index("ix_appointments_job_group", "job_group_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), default="", nullable=False)
    location: Mapped[str] = mapped_column(String(200), default="", nullable=False)
    address: Mapped[str] = mapped_column(String(300), default="", nullable=False)
    customer_name: Mapped[str] = mapped_column(String(200), default="", nullable=False)
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)
    workers: Mapped[List[int]] = mapped_column(ARRAY(Integer), default=list, nullable=False)
    vehicle_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("vehicles.id", ondelete="SET NULL"),
        nullable=True,
    )
    # Snapshot of the vehicle at creation time, used when the vehicle is gone
    equipment: Mapped[str] = mapped_column(String(200), default="", nullable=False)
    color: Mapped[str] = mapped_column(String(7), default="#3b82f6", nullable=False)
    all_day: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    multi_day_group_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    is_first_day: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    is_last_day: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    job_group_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    # Relationships
    vehicle: Mapped[Optional["Vehicle"]] = relationship("Vehicle", lazy="joined")

    @property
    def slot(self) -> ScheduleSlot:
        """The day (and hours) this appointment occupies."""
        if self.all_day:
            return AllDay(self.start_date.date())
        return Timed(self.start_date, self.end_date)

    @slot.setter
    def slot(self, value: ScheduleSlot) -> None:
        self.all_day = value.all_day
        self.start_date = value.start
        self.end_date = value.end

    @property
    def display_name(self) -> str:
        """Vehicle name, read from the linked vehicle when it still exists."""
        if self.vehicle is not None:
            return self.vehicle.name
        return self.equipment

    @property
    def display_color(self) -> str:
        """Vehicle color, read from the linked vehicle when it still exists."""
        if self.vehicle is not None:
            return self.vehicle.color
        return self.color

    def __repr__(self) -> str:
        return f"<Appointment {self.id} {self.title!r} on {self.start_date:%Y-%m-%d}>"
