"""Tests for data model imports and basic structure."""

from datetime import date, datetime

from dispatch.models import Absence, Appointment, Session, User, Vehicle
from dispatch.services.dates import AllDay, Timed


def test_table_names():
    assert User.__tablename__ == "users"
    assert Vehicle.__tablename__ == "vehicles"
    assert Appointment.__tablename__ == "appointments"
    assert Absence.__tablename__ == "absences"
    assert Session.__tablename__ == "sessions"


def test_appointment_slot_all_day():
    appointment = Appointment(
        all_day=True,
        start_date=datetime(2024, 3, 1),
        end_date=datetime(2024, 3, 1),
    )
    assert appointment.slot == AllDay(date(2024, 3, 1))


def test_appointment_slot_setter_timed():
    appointment = Appointment()
    appointment.slot = Timed(datetime(2024, 3, 1, 8, 0), datetime(2024, 3, 1, 16, 0))

    assert appointment.all_day is False
    assert appointment.start_date == datetime(2024, 3, 1, 8, 0)
    assert appointment.end_date == datetime(2024, 3, 1, 16, 0)


def test_appointment_display_uses_linked_vehicle():
    """A renamed vehicle shows its current name, not the snapshot."""
    appointment = Appointment(equipment="Old name", color="#111111")
    appointment.vehicle = Vehicle(id=1, name="New name", color="#222222")

    assert appointment.display_name == "New name"
    assert appointment.display_color == "#222222"


def test_appointment_display_falls_back_to_snapshot():
    appointment = Appointment(equipment="Van 3", color="#111111")

    assert appointment.display_name == "Van 3"
    assert appointment.display_color == "#111111"


def test_absence_is_terminal():
    absence = Absence(
        user_id=1,
        start_date=date(2024, 3, 1),
        end_date=date(2024, 3, 3),
        status="pending",
    )
    assert absence.is_terminal is False

    absence.status = "rejected"
    assert absence.is_terminal is True


def test_session_user_snapshot():
    session = Session(sid="abc", sess='{"user": {"id": 5}}', expired=0)
    assert session.user == {"id": 5}
    assert session.is_expired is True


def test_session_with_broken_json():
    session = Session(sid="abc", sess="not json", expired=0)
    assert session.session_data == {}
    assert session.user is None
