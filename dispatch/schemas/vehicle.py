"""
Pydantic schemas for Vehicles.
"""

from typing import Optional

from pydantic import Field

from dispatch.schemas.base import HEX_COLOR_PATTERN, BaseSchema, DateTimeNaive


class VehicleResponse(BaseSchema):
    """Response model for vehicles."""
    id: int
    name: str
    color: str
    created_at: DateTimeNaive


class VehicleCreate(BaseSchema):
    """Request model for creating a vehicle."""
    name: str = Field(..., min_length=1, max_length=200)
    color: str = Field("#3b82f6", pattern=HEX_COLOR_PATTERN)


class VehicleUpdate(BaseSchema):
    """Request model for updating a vehicle."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
