"""
Middleware package.
"""

from dispatch.middleware.auth import (
    SessionUser,
    get_current_user,
    get_current_user_optional,
    require_admin,
    get_session_id,
)

__all__ = [
    "SessionUser",
    "get_current_user",
    "get_current_user_optional",
    "require_admin",
    "get_session_id",
]
