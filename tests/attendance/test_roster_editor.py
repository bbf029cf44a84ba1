from __future__ import annotations

from datetime import date

import pytest

from src.timetable_attendance.timetable_attendance.attendance.model import RosterEntry, SessionState
from src.timetable_attendance.timetable_attendance.attendance.roster import AttendanceRosterEditor
from src.timetable_attendance.timetable_attendance.core.enums import AttendanceStatus, DayOfWeek, SessionPhase
from src.timetable_attendance.timetable_attendance.core.exceptions import InvalidTransition, RemoteFailure, ValidationError
from tests.fakes import InMemoryAttendance, UnreachableAttendance

MONDAY = date(2026, 10, 19)


def _ready_state(**overrides) -> SessionState:
    values = dict(
        phase=SessionPhase.READY,
        class_group="5A",
        date=MONDAY,
        period_number=1,
        day_of_week=DayOfWeek.MONDAY,
        subject_name="Math",
    )
    values.update(overrides)
    return SessionState(**values)


ROSTER = [RosterEntry(41, "Aarav Shah", "1"), RosterEntry(42, "Bella Chen", "2")]


def _editor(attendance=None, roster=ROSTER):
    statuses = {e.student_id: AttendanceStatus.PRESENT for e in roster}
    return AttendanceRosterEditor(_ready_state(), roster, statuses, attendance or InMemoryAttendance(), teacher_id=7)


def test_editor_needs_a_ready_session():
    with pytest.raises(InvalidTransition):
        AttendanceRosterEditor(_ready_state(phase=SessionPhase.ELIGIBLE), ROSTER, {}, InMemoryAttendance(), teacher_id=7)


def test_late_cannot_be_set_while_marking():
    editor = _editor()

    with pytest.raises(ValidationError):
        editor.set_status(41, AttendanceStatus.LATE)
    with pytest.raises(ValidationError):
        editor.set_status(41, "L")

    assert editor.status_of(41) == AttendanceStatus.PRESENT


def test_student_not_on_roster_is_rejected():
    editor = _editor()

    with pytest.raises(ValidationError):
        editor.set_status(99, "Absent")
    with pytest.raises(ValidationError):
        editor.status_of(99)


def test_set_many_is_all_or_nothing():
    editor = _editor()

    with pytest.raises(ValidationError):
        editor.set_many({41: "Absent", 42: "Sick"})

    assert editor.status_of(41) == AttendanceStatus.PRESENT


def test_counts_follow_edits():
    editor = _editor()
    editor.set_status(42, "A")

    assert editor.counts() == {"total": 2, "present": 1, "absent": 1}


def test_empty_roster_submits_nothing():
    attendance = InMemoryAttendance()
    editor = _editor(attendance, roster=[])

    result = editor.submit()

    assert result.saved == 0
    assert attendance.calls == []
    assert not editor.is_submitted


def test_failed_submit_keeps_local_statuses_for_a_retry():
    editor = _editor(UnreachableAttendance())
    editor.set_status(42, "Absent")

    with pytest.raises(RemoteFailure):
        editor.submit()

    assert not editor.is_submitted
    assert editor.status_of(42) == AttendanceStatus.ABSENT


def test_submitting_twice_is_an_idempotent_upsert():
    attendance = InMemoryAttendance()
    editor = _editor(attendance)
    editor.set_status(42, "Absent")

    editor.submit()
    editor.submit()

    assert len(attendance.records) == 2
    assert editor.is_submitted


def test_records_carry_the_session_key_and_recorder():
    editor = _editor()
    editor.set_status(42, "Absent")

    records = editor.records()

    assert {(r.student_id, r.status) for r in records} == {(41, AttendanceStatus.PRESENT), (42, AttendanceStatus.ABSENT)}
    assert {(r.class_group, r.date, r.period_number, r.subject_name, r.teacher_id) for r in records} == {
        ("5A", MONDAY, 1, "Math", 7)
    }


def test_unresolved_session_has_no_key():
    with pytest.raises(InvalidTransition):
        SessionState.idle("5A", MONDAY, 1).key

    statuses = {e.student_id: AttendanceStatus.PRESENT for e in ROSTER}
    editor = AttendanceRosterEditor(_ready_state(subject_name=None), ROSTER, statuses, InMemoryAttendance(), teacher_id=7)
    with pytest.raises(InvalidTransition):
        editor.submit()
