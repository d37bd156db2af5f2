"""
Authentication API router.
Handles login, logout and the current session.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch.config import get_settings
from dispatch.database import get_db
from dispatch.exceptions import UnauthorizedError
from dispatch.middleware.auth import get_session_id
from dispatch.models.user import User
from dispatch.schemas.auth import (
    AuthMeResponse,
    LoginRequest,
    LoginResponse,
    UserSessionInfo,
)
from dispatch.services.session import SessionService, build_session_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/auth/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """
    Authenticate user with username and password.

    Creates a session and sets the session cookie.
    """
    settings = get_settings()

    result = await db.execute(select(User).where(User.username == data.username))
    user = result.scalar_one_or_none()

    # Passwords are stored and compared in plain text
    if not user or user.password != data.password:
        logger.info("Failed login for %r", data.username)
        raise UnauthorizedError("Invalid username or password")

    session_id = await SessionService(db).create_session(user)

    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_id,
        max_age=settings.session_max_age,
        httponly=True,
        samesite="lax",
        secure=settings.secure_cookies,
        path="/",
    )

    return LoginResponse(success=True, user=UserSessionInfo(**build_session_user(user)))


@router.post("/auth/logout")
async def logout(
    response: Response,
    session_id: Optional[str] = Depends(get_session_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Log out the current user.

    Destroys the session and clears the cookie.
    """
    if session_id:
        await SessionService(db).delete_session(session_id)

    response.delete_cookie(key=get_settings().session_cookie_name, path="/")

    return {"success": True}


@router.get("/auth/me", response_model=AuthMeResponse)
async def get_current_session(
    session_id: Optional[str] = Depends(get_session_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Get current authenticated user.

    Returns { user: {...} } if authenticated, or { user: null }. The user
    is re-read from the database so renames and role changes show up.
    """
    if not session_id:
        return AuthMeResponse(user=None)

    user_data = await SessionService(db).get_user_from_session(session_id)
    if not user_data or not user_data.get("id"):
        return AuthMeResponse(user=None)

    result = await db.execute(select(User).where(User.id == user_data["id"]))
    user = result.scalar_one_or_none()
    if not user:
        return AuthMeResponse(user=None)

    return AuthMeResponse(user=UserSessionInfo(**build_session_user(user)))
