"""
API routers package.
"""

from dispatch.routers import (
    absences,
    appointments,
    auth,
    calendar,
    health,
    users,
    vehicles,
)

__all__ = [
    "absences",
    "appointments",
    "auth",
    "calendar",
    "health",
    "users",
    "vehicles",
]
