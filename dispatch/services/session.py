"""
Session service for cookie-based login sessions.

The session row stores a small snapshot of the user (id, name, role) so
authorization checks don't need to hit the users table.
"""

import json
import secrets
from datetime import datetime, timedelta
from typing import Optional
from urllib.parse import unquote

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch.config import get_settings
from dispatch.models.session import Session
from dispatch.models.user import User


def build_session_user(user: User) -> dict:
    """User snapshot kept in the session."""
    return {
        "id": user.id,
        "username": user.username,
        "full_name": user.full_name,
        "role": user.role,
    }


class SessionService:
    """Creates, reads and removes login sessions."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.settings = get_settings()

    def _generate_session_id(self) -> str:
        """Generate a secure random session ID."""
        return secrets.token_urlsafe(32)

    def _get_expiry_timestamp(self) -> int:
        """Get expiry timestamp in milliseconds."""
        expiry = datetime.utcnow() + timedelta(seconds=self.settings.session_max_age)
        return int(expiry.timestamp() * 1000)

    async def create_session(self, user: User) -> str:
        """
        Create a new session for a user.

        Returns the session ID to be set in the cookie.
        """
        session_id = self._generate_session_id()
        session = Session(
            sid=session_id,
            sess=json.dumps({"user": build_session_user(user)}),
            expired=self._get_expiry_timestamp(),
        )

        self.db.add(session)
        await self.db.commit()

        return session_id

    async def get_session(self, session_id: str) -> Optional[Session]:
        """
        Get a session by ID.

        Returns None if session doesn't exist or is expired.
        """
        result = await self.db.execute(select(Session).where(Session.sid == session_id))
        session = result.scalar_one_or_none()

        if session and session.is_expired:
            await self.delete_session(session_id)
            return None

        return session

    async def get_user_from_session(self, session_id: str) -> Optional[dict]:
        """Get the user snapshot stored in the session, or None."""
        session = await self.get_session(session_id)
        if session:
            return session.user
        return None

    async def delete_session(self, session_id: str) -> bool:
        """Delete a session."""
        result = await self.db.execute(delete(Session).where(Session.sid == session_id))
        await self.db.commit()
        return result.rowcount > 0

    async def cleanup_expired_sessions(self) -> int:
        """
        Delete all expired sessions.

        Returns the number of sessions deleted.
        """
        current_time_ms = int(datetime.utcnow().timestamp() * 1000)
        result = await self.db.execute(delete(Session).where(Session.expired < current_time_ms))
        await self.db.commit()
        return result.rowcount


def parse_session_cookie(cookie_value: str) -> Optional[str]:
    """
    Extract the session ID from the cookie value.

    Accepts both the plain ID and the signed ``s:{id}.{signature}`` form
    (optionally URL-encoded).
    """
    if not cookie_value:
        return None

    decoded = unquote(cookie_value)
    if decoded.startswith("s:"):
        return decoded[2:].split(".", 1)[0]

    return cookie_value
