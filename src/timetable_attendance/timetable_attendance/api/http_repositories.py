from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..attendance.model import RosterEntry, SessionKey
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import parse_iso_date
from ..core.enums import AttendanceStatus, DayOfWeek
from ..core.exceptions import RemoteFailure
from ..reports.model import ClassScope, HistoryEntry, StaffScope, StudentRef, StudentScope, SubjectScope
from ..reports.repository import AttendanceHistoryRepository
from ..teachers.model import Teacher
from ..teachers.repository import TeacherRepository
from ..timetable.model import TimetableSlot
from ..timetable.repository import TimetableRepository
from .client import ApiClient, path_segment


def _optional_int(value) -> Optional[int]:
    return int(value) if value not in (None, "") else None


def _slot_from_json(data: dict, *, class_group: Optional[str] = None) -> TimetableSlot:
    try:
        return TimetableSlot(
            class_group=data.get("class_group") or class_group,
            day_of_week=DayOfWeek.parse(data["day_of_week"]),
            period_number=int(data["period_number"]),
            subject_name=data.get("subject_name") or None,
            teacher_id=_optional_int(data.get("teacher_id")),
            teacher_name=data.get("teacher_name"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise RemoteFailure(f"Malformed timetable slot: {data!r}") from e


class HttpTimetableRepository(TimetableRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def get(self, *, class_group: str, day_of_week: DayOfWeek, period_number: int) -> Optional[TimetableSlot]:
        data = self._client.get(
            f"timetable/{path_segment(class_group)}/{path_segment(day_of_week.value)}/{int(period_number)}"
        )
        if not data or (not data.get("subject_name") and data.get("teacher_id") is None):
            return None
        return TimetableSlot(
            class_group=class_group,
            day_of_week=day_of_week,
            period_number=int(period_number),
            subject_name=data.get("subject_name") or None,
            teacher_id=_optional_int(data.get("teacher_id")),
            teacher_name=data.get("teacher_name"),
        )

    def upsert(self, slot: TimetableSlot) -> None:
        self._client.put(
            f"timetable/{path_segment(slot.class_group)}/{path_segment(slot.day_of_week.value)}/{slot.period_number}",
            {"subject_name": slot.subject_name, "teacher_id": slot.teacher_id},
        )

    def list_for_class(self, class_group: str) -> Sequence[TimetableSlot]:
        rows = self._client.get(f"timetable/{path_segment(class_group)}") or []
        return [_slot_from_json(r, class_group=class_group) for r in rows]

    def list_for_teacher(self, teacher_id: int) -> Sequence[TimetableSlot]:
        rows = self._client.get(f"timetable/teacher/{int(teacher_id)}") or []
        return [_slot_from_json(r) for r in rows]


class HttpTeacherRepository(TeacherRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def list_all(self) -> Sequence[Teacher]:
        rows = self._client.get("teachers") or []
        return [
            Teacher(
                id=int(r["id"]),
                full_name=r["full_name"],
                subjects_taught=frozenset(r.get("subjects_taught") or ()),
            )
            for r in rows
        ]

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        for teacher in self.list_all():
            if teacher.id == int(teacher_id):
                return teacher
        return None


class HttpAttendanceRepository(AttendanceRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def is_marked(self, key: SessionKey) -> bool:
        data = self._client.get(
            "attendance/status",
            params={
                "class_group": key.class_group,
                "date": key.date.isoformat(),
                "period_number": key.period_number,
                "subject_name": key.subject_name,
            },
        )
        return bool((data or {}).get("isMarked"))

    def get_roster(
        self,
        *,
        class_group: str,
        on_date: date,
        period_number: int,
        subject_name: Optional[str] = None,
    ) -> Sequence[RosterEntry]:
        params = {"class_group": class_group, "date": on_date.isoformat(), "period_number": period_number}
        if subject_name:
            params["subject_name"] = subject_name
        rows = self._client.get("attendance/sheet", params=params) or []
        return [
            RosterEntry(
                student_id=int(r.get("student_id", r.get("id"))),
                full_name=r["full_name"],
                roll_no=str(r["roll_no"]) if r.get("roll_no") is not None else None,
                status=AttendanceStatus.parse(r["status"]) if r.get("status") else None,
            )
            for r in rows
        ]

    def upsert_batch(self, key: SessionKey, *, teacher_id: int, records) -> int:
        if not records:
            return 0
        data = self._client.post(
            "attendance",
            {
                "class_group": key.class_group,
                "subject_name": key.subject_name,
                "period_number": key.period_number,
                "date": key.date.isoformat(),
                "teacher_id": int(teacher_id),
                "records": [{"student_id": int(sid), "status": status.value} for sid, status in records],
            },
        )
        return int((data or {}).get("saved", len(records)))


class HttpAttendanceHistoryRepository(AttendanceHistoryRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def list_history(self, scope: SubjectScope, *, start: date, end: date) -> Sequence[HistoryEntry]:
        params = {"start": start.isoformat(), "end": end.isoformat(), **scope_params(scope)}
        rows = self._client.get("attendance/history", params=params) or []
        try:
            return [
                HistoryEntry(
                    date=parse_iso_date(str(r["date"])[:10]),
                    status=AttendanceStatus.parse(r["status"]) if r.get("status") else None,
                    student_id=_optional_int(r.get("student_id")),
                    full_name=r.get("full_name"),
                )
                for r in rows
            ]
        except (KeyError, ValueError) as e:
            raise RemoteFailure("Malformed attendance history") from e

    def list_class_students(self, class_group: str) -> Sequence[StudentRef]:
        rows = self._client.get("students", params={"class_group": class_group}) or []
        return [StudentRef(student_id=int(r["id"]), full_name=r["full_name"]) for r in rows]


def scope_params(scope: SubjectScope) -> dict:
    """Query-string form of a report scope (see reports.controller.parse_scope)."""

    if isinstance(scope, StaffScope):
        return {"scope": "staff", "teacher_id": scope.teacher_id}
    if isinstance(scope, StudentScope):
        return {"scope": "student", "student_id": scope.student_id}
    if isinstance(scope, ClassScope):
        params = {"scope": "class", "class_group": scope.class_group}
        if scope.subject_name:
            params["subject_name"] = scope.subject_name
        if scope.teacher_id is not None:
            params["teacher_id"] = scope.teacher_id
        return params
    raise TypeError(f"Unsupported report scope: {scope!r}")
