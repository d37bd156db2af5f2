"""
Pydantic schemas for Users.
"""

from typing import Literal, Optional

from pydantic import Field

from dispatch.schemas.base import BaseSchema, DateTimeNaive


class UserResponse(BaseSchema):
    """Response model for users (never includes the password)."""
    id: int
    username: str
    full_name: str
    role: str
    avatar_url: Optional[str] = None
    created_at: DateTimeNaive


class UserCreate(BaseSchema):
    """Request model for creating a user."""
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=255)
    full_name: str = Field(..., min_length=1, max_length=200)
    role: Literal["admin", "worker"] = "worker"
    avatar_url: Optional[str] = Field(None, max_length=500)


class UserUpdate(BaseSchema):
    """Request model for updating a user."""
    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    password: Optional[str] = Field(None, min_length=1, max_length=255)
    role: Optional[Literal["admin", "worker"]] = None
    avatar_url: Optional[str] = Field(None, max_length=500)
