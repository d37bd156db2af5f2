"""
SQLAlchemy models package.
All models inherit from the Base class defined in database.py.
"""

from dispatch.models.user import User
from dispatch.models.vehicle import Vehicle
from dispatch.models.appointment import Appointment
from dispatch.models.absence import Absence
from dispatch.models.session import Session

__all__ = [
    "User",
    "Vehicle",
    "Appointment",
    "Absence",
    "Session",
]
