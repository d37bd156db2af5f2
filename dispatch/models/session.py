"""
Session model for cookie-based login sessions.
Maps to the sessions table in PostgreSQL.
"""

import json
from datetime import datetime
from typing import Any

from sqlalchemy import BigInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dispatch.database import Base


class Session(Base):
    """
    Login session.

    ``sess`` holds a JSON blob with a snapshot of the logged-in user so that
    most requests can be authorized without loading the users table.
    """

    __tablename__ = "sessions"

    sid: Mapped[str] = mapped_column(String(255), primary_key=True)
    sess: Mapped[str] = mapped_column(Text, nullable=False)  # JSON blob
    expired: Mapped[int] = mapped_column(BigInteger, nullable=False)  # Unix timestamp ms

    @property
    def session_data(self) -> dict[str, Any]:
        """Parse session data from JSON."""
        try:
            return json.loads(self.sess)
        except json.JSONDecodeError:
            return {}

    @session_data.setter
    def session_data(self, data: dict[str, Any]) -> None:
        self.sess = json.dumps(data)

    @property
    def is_expired(self) -> bool:
        """Check if session has expired."""
        return self.expired < int(datetime.utcnow().timestamp() * 1000)

    @property
    def user(self) -> dict[str, Any] | None:
        """Get user data from session if present."""
        return self.session_data.get("user")

    def __repr__(self) -> str:
        return f"<Session {self.sid[:8]}... (expired: {self.is_expired})>"
