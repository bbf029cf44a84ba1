from __future__ import annotations

from datetime import date

import pytest

from src.timetable_attendance.timetable_attendance.common.datetime_utils import FixedClock
from src.timetable_attendance.timetable_attendance.container import assemble
from src.timetable_attendance.timetable_attendance.core.enums import AttendanceStatus, DayOfWeek
from src.timetable_attendance.timetable_attendance.main import create_app
from src.timetable_attendance.timetable_attendance.teachers.model import Teacher
from src.timetable_attendance.timetable_attendance.timetable.model import TimetableSlot
from tests.fakes import InMemoryAttendance, InMemoryHistory, InMemoryTeachers, InMemoryTimetable

TODAY = date(2026, 10, 19)  # a Monday


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance({"5A": [(41, "Aarav Shah"), (42, "Bella Chen"), (43, "Carlos Diaz")], "9Z": []})


@pytest.fixture
def container(attendance_repo):
    teachers = InMemoryTeachers(
        [
            Teacher(id=7, full_name="Anita Rao", subjects_taught=frozenset({"Math", "Physics"})),
            Teacher(id=8, full_name="Daniel Kim", subjects_taught=frozenset({"English"})),
        ]
    )
    timetable = InMemoryTimetable(
        [TimetableSlot("5A", DayOfWeek.MONDAY, 1, "Math", 7, "Anita Rao")]
    )
    history = InMemoryHistory(attendance_repo, staff={7: {TODAY: AttendanceStatus.PRESENT}})
    return assemble(
        timetable_repo=timetable,
        teachers_repo=teachers,
        attendance_repo=attendance_repo,
        history_repo=history,
        clock=FixedClock(TODAY),
    )


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sign_in(client):
    def _sign_in(role: str, user_id: int = 1):
        with client.session_transaction() as s:
            s["role"] = role
            s["user_id"] = user_id

    return _sign_in
