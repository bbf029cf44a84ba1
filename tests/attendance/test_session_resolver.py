from __future__ import annotations

from datetime import date

import pytest

from src.timetable_attendance.timetable_attendance.attendance.model import SessionKey
from src.timetable_attendance.timetable_attendance.attendance.resolver import AttendanceSessionResolver
from src.timetable_attendance.timetable_attendance.common.datetime_utils import FixedClock
from src.timetable_attendance.timetable_attendance.core.enums import (
    AttendanceStatus,
    DayOfWeek,
    IneligibleReason,
    SessionPhase,
)
from src.timetable_attendance.timetable_attendance.core.exceptions import InvalidTransition, RemoteFailure
from src.timetable_attendance.timetable_attendance.teachers.model import Teacher
from src.timetable_attendance.timetable_attendance.timetable.model import TimetableSlot
from src.timetable_attendance.timetable_attendance.timetable.service import TimetableGrid
from tests.fakes import InMemoryAttendance, InMemoryTeachers, InMemoryTimetable, UnreachableAttendance

MONDAY = date(2026, 10, 19)
TUESDAY = date(2026, 10, 20)
SUNDAY = date(2026, 10, 18)


def _math_slot(period: int = 1) -> TimetableSlot:
    return TimetableSlot(
        class_group="5A",
        day_of_week=DayOfWeek.MONDAY,
        period_number=period,
        subject_name="Math",
        teacher_id=7,
        teacher_name="Anita Rao",
    )


def _resolver(attendance=None, slots=None):
    teachers = InMemoryTeachers([Teacher(id=7, full_name="Anita Rao", subjects_taught=frozenset({"Math"}))])
    timetable = InMemoryTimetable([_math_slot(p) for p in (1, 2, 4, 5, 6, 8)] if slots is None else slots)
    attendance = attendance or InMemoryAttendance({"5A": [(41, "Aarav Shah"), (42, "Bella Chen"), (43, "Carlos Diaz")]})
    resolver = AttendanceSessionResolver(TimetableGrid(timetable, teachers), attendance, clock=FixedClock(MONDAY))
    return resolver, attendance


@pytest.mark.parametrize("period", [1, 2, 5, 8])
def test_sunday_is_always_a_rest_day(period):
    resolver, attendance = _resolver()

    state = resolver.resolve("5A", SUNDAY, period)

    assert state.phase == SessionPhase.INELIGIBLE
    assert state.reason == IneligibleReason.REST_DAY
    assert state.day_of_week == DayOfWeek.SUNDAY
    assert attendance.calls == []


@pytest.mark.parametrize("period", [2, 3, 4, 5, 6, 7, 8])
def test_only_period_one_takes_attendance(period):
    resolver, attendance = _resolver()

    state = resolver.resolve("5A", MONDAY, period)

    assert state.phase == SessionPhase.INELIGIBLE
    assert state.reason == IneligibleReason.ATTENDANCE_RESTRICTED_TO_PERIOD_ONE
    assert attendance.calls == []


def test_mark_then_resolve_again_is_already_marked():
    resolver, attendance = _resolver()

    state = resolver.resolve("5A", MONDAY, 1)
    assert state.phase == SessionPhase.ELIGIBLE
    assert state.subject_name == "Math"

    ready, editor = resolver.load_roster(state, teacher_id=7)
    assert ready.phase == SessionPhase.READY
    assert {e.status for e in editor.entries()} == {AttendanceStatus.PRESENT}

    editor.set_status(42, "Absent")
    result = editor.submit()

    assert result.saved == 3
    assert (result.present, result.absent) == (2, 1)
    assert result.key == SessionKey("5A", MONDAY, 1, "Math")
    assert attendance.records[(42, "5A", MONDAY, 1, "Math")] == (AttendanceStatus.ABSENT, 7)
    assert attendance.records[(41, "5A", MONDAY, 1, "Math")] == (AttendanceStatus.PRESENT, 7)

    again = resolver.resolve("5A", MONDAY, 1)
    assert again.phase == SessionPhase.ALREADY_MARKED
    assert again.is_already_marked


def test_unassigned_first_period_falls_back_to_general_attendance():
    resolver, _ = _resolver()

    state = resolver.resolve("5A", TUESDAY, 1)

    assert state.phase == SessionPhase.ELIGIBLE
    assert state.subject_name == "General Attendance"


def test_reopen_for_edit_seeds_stored_statuses():
    resolver, attendance = _resolver()
    state = resolver.resolve("5A", MONDAY, 1)
    _, editor = resolver.load_roster(state, teacher_id=7)
    editor.set_many({41: "A", 43: "Absent"})
    editor.submit()

    marked = resolver.resolve("5A", MONDAY, 1)
    ready, edit = resolver.reopen_for_edit(marked, teacher_id=7)

    assert ready.phase == SessionPhase.READY
    assert edit.status_of(41) == AttendanceStatus.ABSENT
    assert edit.status_of(42) == AttendanceStatus.PRESENT
    assert edit.status_of(43) == AttendanceStatus.ABSENT

    edit.set_status(41, "Present")
    edit.submit()
    assert attendance.records[(41, "5A", MONDAY, 1, "Math")][0] == AttendanceStatus.PRESENT


def test_stored_sunday_record_can_be_reopened():
    resolver, attendance = _resolver()
    attendance.records[(42, "5A", SUNDAY, 1, "General Attendance")] = (AttendanceStatus.ABSENT, 7)

    assert resolver.resolve("5A", SUNDAY, 1).reason == IneligibleReason.REST_DAY
    marked = resolver.find_marked("5A", SUNDAY, 1)
    ready, edit = resolver.reopen_for_edit(marked, teacher_id=7)

    assert marked.phase == SessionPhase.ALREADY_MARKED
    assert marked.day_of_week == DayOfWeek.SUNDAY
    assert ready.phase == SessionPhase.READY
    assert edit.status_of(42) == AttendanceStatus.ABSENT
    assert edit.status_of(41) == AttendanceStatus.PRESENT


def test_stored_later_period_record_can_be_reopened():
    resolver, attendance = _resolver()
    attendance.records[(41, "5A", MONDAY, 2, "Math")] = (AttendanceStatus.ABSENT, 7)

    marked = resolver.find_marked("5A", MONDAY, 2)
    _, edit = resolver.reopen_for_edit(marked, teacher_id=7)
    edit.set_status(41, "Present")
    edit.submit()

    assert marked.subject_name == "Math"
    assert attendance.records[(41, "5A", MONDAY, 2, "Math")][0] == AttendanceStatus.PRESENT


def test_find_marked_is_none_without_stored_records():
    resolver, _ = _resolver()

    assert resolver.find_marked("5A", SUNDAY, 1) is None
    assert resolver.find_marked("5A", MONDAY, 2) is None


def test_transitions_from_the_wrong_phase_are_refused():
    resolver, _ = _resolver()
    eligible = resolver.resolve("5A", MONDAY, 1)
    ineligible = resolver.resolve("5A", SUNDAY, 1)

    with pytest.raises(InvalidTransition):
        resolver.reopen_for_edit(eligible, teacher_id=7)
    with pytest.raises(InvalidTransition):
        resolver.load_roster(ineligible, teacher_id=7)

    ready, _ = resolver.load_roster(eligible, teacher_id=7)
    with pytest.raises(InvalidTransition):
        resolver.load_roster(ready, teacher_id=7)


def test_remote_failure_surfaces_without_a_new_state():
    unreachable = UnreachableAttendance()
    resolver, _ = _resolver(attendance=unreachable)

    with pytest.raises(RemoteFailure):
        resolver.resolve("5A", MONDAY, 1)

    assert unreachable.calls == 1


def test_remote_failure_is_not_reached_for_rule_violations():
    unreachable = UnreachableAttendance()
    resolver, _ = _resolver(attendance=unreachable)

    assert resolver.resolve("5A", SUNDAY, 1).phase == SessionPhase.INELIGIBLE
    assert resolver.resolve("5A", MONDAY, 2).phase == SessionPhase.INELIGIBLE
    assert unreachable.calls == 0


def test_resolve_today_uses_the_injected_clock():
    resolver, _ = _resolver()

    state = resolver.resolve_today("5A")

    assert state.date == MONDAY
    assert state.day_of_week == DayOfWeek.MONDAY
    assert state.subject_name == "Math"


def test_sessions_for_different_classes_are_independent():
    resolver, attendance = _resolver()
    attendance.students["6B"] = [(51, "Dina Haddad")]

    first = resolver.resolve("5A", MONDAY, 1)
    _, editor = resolver.load_roster(first, teacher_id=7)
    editor.submit()

    other = resolver.resolve("6B", MONDAY, 1)
    assert other.phase == SessionPhase.ELIGIBLE
    assert other.subject_name == "General Attendance"
