from __future__ import annotations

from datetime import date
from typing import Optional

from src.timetable_attendance.timetable_attendance.attendance.model import RosterEntry, SessionKey
from src.timetable_attendance.timetable_attendance.core.enums import AttendanceStatus, DayOfWeek
from src.timetable_attendance.timetable_attendance.core.exceptions import RemoteFailure
from src.timetable_attendance.timetable_attendance.reports.model import (
    ClassScope,
    HistoryEntry,
    StaffScope,
    StudentRef,
    StudentScope,
)
from src.timetable_attendance.timetable_attendance.teachers.model import Teacher
from src.timetable_attendance.timetable_attendance.timetable.model import TimetableSlot


class InMemoryTeachers:
    def __init__(self, teachers=()):
        self.by_id: dict[int, Teacher] = {t.id: t for t in teachers}

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda t: t.full_name)

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        return self.by_id.get(int(teacher_id))


class InMemoryTimetable:
    def __init__(self, slots=()):
        self.slots: dict[tuple[str, DayOfWeek, int], TimetableSlot] = {}
        self.upserts = 0
        for s in slots:
            self.slots[(s.class_group, s.day_of_week, s.period_number)] = s

    def get(self, *, class_group: str, day_of_week: DayOfWeek, period_number: int) -> Optional[TimetableSlot]:
        return self.slots.get((class_group, day_of_week, period_number))

    def upsert(self, slot: TimetableSlot) -> None:
        self.upserts += 1
        self.slots[(slot.class_group, slot.day_of_week, slot.period_number)] = slot

    def list_for_class(self, class_group: str):
        return [s for (c, _, _), s in self.slots.items() if c == class_group]

    def list_for_teacher(self, teacher_id: int):
        return [s for s in self.slots.values() if s.teacher_id == teacher_id]


class InMemoryAttendance:
    """Class rosters plus stored records keyed like the attendance_records unique key."""

    def __init__(self, students: Optional[dict[str, list[tuple[int, str]]]] = None):
        self.students: dict[str, list[tuple[int, str]]] = dict(students or {})
        # (student_id, class_group, date, period, subject) -> (status, teacher_id)
        self.records: dict[tuple[int, str, date, int, str], tuple[AttendanceStatus, int]] = {}
        self.calls: list[str] = []

    def is_marked(self, key: SessionKey) -> bool:
        self.calls.append("is_marked")
        return any(
            (c, d, p, s) == (key.class_group, key.date, key.period_number, key.subject_name)
            for (_, c, d, p, s) in self.records
        )

    def get_roster(self, *, class_group: str, on_date: date, period_number: int, subject_name: Optional[str] = None):
        self.calls.append("get_roster")
        roster = []
        for roll, (student_id, full_name) in enumerate(self.students.get(class_group, []), start=1):
            status = None
            for (sid, c, d, p, s), (stored, _) in self.records.items():
                if (sid, c, d, p) == (student_id, class_group, on_date, period_number) and subject_name in (None, s):
                    status = stored
                    break
            roster.append(RosterEntry(student_id=student_id, full_name=full_name, roll_no=str(roll), status=status))
        return roster

    def upsert_batch(self, key: SessionKey, *, teacher_id: int, records) -> int:
        self.calls.append("upsert_batch")
        for student_id, status in records:
            self.records[(student_id, key.class_group, key.date, key.period_number, key.subject_name)] = (
                status,
                teacher_id,
            )
        return len(records)


class InMemoryHistory:
    """History rows read straight out of an InMemoryAttendance, plus staff days."""

    def __init__(self, attendance: InMemoryAttendance, staff: Optional[dict[int, dict[date, AttendanceStatus]]] = None):
        self.attendance = attendance
        self.staff = dict(staff or {})

    def _names(self) -> dict[int, str]:
        return {sid: name for students in self.attendance.students.values() for sid, name in students}

    def list_history(self, scope, *, start: date, end: date):
        if isinstance(scope, StaffScope):
            days = self.staff.get(scope.teacher_id, {})
            return [HistoryEntry(date=d, status=s) for d, s in sorted(days.items()) if start <= d <= end]

        names = self._names()
        rows = []
        for (sid, c, d, p, subject), (status, teacher_id) in sorted(self.attendance.records.items()):
            if not start <= d <= end:
                continue
            if isinstance(scope, StudentScope) and sid != scope.student_id:
                continue
            if isinstance(scope, ClassScope):
                if c != scope.class_group:
                    continue
                if scope.subject_name and subject != scope.subject_name:
                    continue
                if scope.teacher_id is not None and teacher_id != scope.teacher_id:
                    continue
            rows.append(HistoryEntry(date=d, status=status, student_id=sid, full_name=names.get(sid)))
        return rows

    def list_class_students(self, class_group: str):
        return [StudentRef(student_id=sid, full_name=name) for sid, name in self.attendance.students.get(class_group, [])]


class StaticHistory:
    """History repository that returns canned rows regardless of the query."""

    def __init__(self, entries=(), students=()):
        self.entries = list(entries)
        self.students = list(students)
        self.queries: list[tuple[object, date, date]] = []

    def list_history(self, scope, *, start: date, end: date):
        self.queries.append((scope, start, end))
        return [e for e in self.entries if start <= e.date <= end]

    def list_class_students(self, class_group: str):
        return list(self.students)


class UnreachableAttendance:
    """Every call fails the way a dropped database or API connection does."""

    def __init__(self):
        self.calls = 0

    def _fail(self, *args, **kwargs):
        self.calls += 1
        raise RemoteFailure("connection refused")

    is_marked = _fail
    get_roster = _fail
    upsert_batch = _fail
