"""
Base schema classes with custom serialization.

Calendar dates go over the wire as plain ``YYYY-MM-DD`` strings and
timestamps as naive ISO-8601 (no offset): scheduling works on local
calendar days, so no timezone conversion happens anywhere.
"""

from datetime import date, datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer


def serialize_date_simple(d: date | None) -> str | None:
    """Serialize date as simple ISO date string (YYYY-MM-DD)."""
    if d is None:
        return None
    return d.isoformat()


def serialize_datetime_naive(dt: datetime | None) -> str | None:
    """Serialize datetime as naive ISO-8601 with second precision."""
    if dt is None:
        return None
    return dt.replace(tzinfo=None).isoformat(timespec="seconds")


# Annotated types for Pydantic v2 serialization
DateSimple = Annotated[date, PlainSerializer(serialize_date_simple, return_type=str)]
DateTimeNaive = Annotated[datetime, PlainSerializer(serialize_datetime_naive, return_type=str)]

HEX_COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"


class BaseSchema(BaseModel):
    """
    Base schema class with standard configuration.
    Use DateSimple or DateTimeNaive types for date fields.
    """

    model_config = ConfigDict(
        from_attributes=True,
    )
