"""
Pydantic schemas for Authentication.
"""

from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Request model for login."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserSessionInfo(BaseModel):
    """User info stored in session and returned on login."""
    id: int
    username: str
    full_name: str
    role: str


class LoginResponse(BaseModel):
    """Response model for successful login."""
    success: bool = True
    user: UserSessionInfo


class AuthMeResponse(BaseModel):
    """Response for /api/auth/me: the session user or null."""
    user: Optional[UserSessionInfo] = None
