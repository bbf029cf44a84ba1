from __future__ import annotations

from datetime import date
from typing import Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import ClassScope, HistoryEntry, StaffScope, StudentRef, StudentScope, SubjectScope
from .repository import AttendanceHistoryRepository


class MySQLAttendanceHistoryRepository(AttendanceHistoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_history(self, scope: SubjectScope, *, start: date, end: date) -> Sequence[HistoryEntry]:
        if isinstance(scope, StaffScope):
            sql = """
                SELECT attendance_date, status
                FROM teacher_attendance
                WHERE teacher_id=%s AND attendance_date BETWEEN %s AND %s
                ORDER BY attendance_date
            """
            params: tuple = (int(scope.teacher_id), start, end)
        elif isinstance(scope, StudentScope):
            sql = """
                SELECT attendance_date, status
                FROM attendance_records
                WHERE student_id=%s AND attendance_date BETWEEN %s AND %s
                ORDER BY attendance_date, period_number
            """
            params = (int(scope.student_id), start, end)
        elif isinstance(scope, ClassScope):
            clauses = ["ar.class_group=%s", "ar.attendance_date BETWEEN %s AND %s"]
            values: list[object] = [scope.class_group, start, end]
            if scope.subject_name:
                clauses.append("ar.subject_name=%s")
                values.append(scope.subject_name)
            if scope.teacher_id is not None:
                clauses.append("ar.teacher_id=%s")
                values.append(int(scope.teacher_id))
            sql = f"""
                SELECT ar.attendance_date, ar.status, ar.student_id, u.full_name
                FROM attendance_records ar
                JOIN users u ON u.id = ar.student_id
                WHERE {" AND ".join(clauses)}
                ORDER BY ar.attendance_date, u.full_name
            """
            params = tuple(values)
        else:
            raise TypeError(f"Unsupported report scope: {scope!r}")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [
                HistoryEntry(
                    date=r["attendance_date"],
                    status=AttendanceStatus.parse(r["status"]) if r.get("status") else None,
                    student_id=int(r["student_id"]) if r.get("student_id") is not None else None,
                    full_name=r.get("full_name"),
                )
                for r in fetchall(cur)
            ]

    def list_class_students(self, class_group: str) -> Sequence[StudentRef]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, full_name FROM users WHERE role='student' AND class_group=%s ORDER BY full_name",
                (class_group,),
            )
            return [StudentRef(student_id=int(r["id"]), full_name=r["full_name"]) for r in fetchall(cur)]
