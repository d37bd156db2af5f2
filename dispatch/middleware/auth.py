"""
Authentication middleware and dependencies.

Provides FastAPI dependencies for protecting routes with authentication
and role-based access control.
"""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch.config import get_settings
from dispatch.database import get_db
from dispatch.exceptions import ForbiddenError, UnauthorizedError
from dispatch.services.session import SessionService, parse_session_cookie


class SessionUser:
    """Lightweight user object built from session data."""

    def __init__(self, data: dict):
        self.id = data.get("id")
        self.username = data.get("username")
        self.full_name = data.get("full_name", "")
        self.role = data.get("role")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


async def get_session_id(request: Request) -> Optional[str]:
    """Extract session ID from the session cookie."""
    cookie = request.cookies.get(get_settings().session_cookie_name)
    if cookie:
        return parse_session_cookie(cookie)
    return None


async def get_current_user_optional(
    session_id: Optional[str] = Depends(get_session_id),
    db: AsyncSession = Depends(get_db),
) -> Optional[SessionUser]:
    """
    Get current user if authenticated, None otherwise.

    Use this for routes that work both authenticated and anonymous.
    """
    if not session_id:
        return None

    user_data = await SessionService(db).get_user_from_session(session_id)
    if not user_data or not user_data.get("id"):
        return None

    return SessionUser(user_data)


async def get_current_user(
    user: Optional[SessionUser] = Depends(get_current_user_optional),
) -> SessionUser:
    """
    Get current authenticated user.

    Raises 401 if not authenticated.
    """
    if not user:
        raise UnauthorizedError("Not authenticated")
    return user


async def require_admin(
    user: SessionUser = Depends(get_current_user),
) -> SessionUser:
    """
    Require admin role.

    Raises 403 if user is not an admin.
    """
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
    return user
