"""
Absence model for worker time-off requests.
Maps to the absences table in PostgreSQL.
"""

from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dispatch.database import Base

if TYPE_CHECKING:
    from dispatch.models.user import User


ABSENCE_TYPES = ("vacation", "other")
ABSENCE_STATUSES = ("pending", "approved", "rejected")


class Absence(Base):
    """Absence model - represents a requested or approved time-off period."""

    __tablename__ = "absences"
    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="absences_date_order"),
        CheckConstraint(
            "absence_type IN ('vacation', 'other')",
            name="absences_type_check",
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="absences_status_check",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str] = mapped_column(String(200), default="", nullable=False)
    absence_type: Mapped[str] = mapped_column(String(20), default="vacation", nullable=False)
    custom_reason: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)
    requires_approval: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="absences")

    @property
    def is_terminal(self) -> bool:
        """Approved and rejected absences can no longer change status."""
        return self.status in ("approved", "rejected")

    def __repr__(self) -> str:
        return f"<Absence {self.user_id} ({self.start_date} to {self.end_date}, {self.status})>"
