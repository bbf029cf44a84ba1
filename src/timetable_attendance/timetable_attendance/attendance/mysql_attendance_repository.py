from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import RosterEntry, SessionKey
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def is_marked(self, key: SessionKey) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS marked
                FROM attendance_records
                WHERE class_group=%s AND attendance_date=%s AND period_number=%s AND subject_name=%s
                LIMIT 1
                """,
                (key.class_group, key.date, int(key.period_number), key.subject_name),
            )
            return fetchone(cur) is not None

    def get_roster(
        self,
        *,
        class_group: str,
        on_date: date,
        period_number: int,
        subject_name: Optional[str] = None,
    ) -> Sequence[RosterEntry]:
        join = "ar.student_id = u.id AND ar.class_group = u.class_group AND ar.attendance_date=%s AND ar.period_number=%s"
        params: list[object] = [on_date, int(period_number)]
        if subject_name:
            join += " AND ar.subject_name=%s"
            params.append(subject_name)
        params.append(class_group)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT u.id AS student_id, u.full_name, u.roll_no, ar.status
                FROM users u
                LEFT JOIN attendance_records ar ON {join}
                WHERE u.role = 'student' AND u.class_group=%s
                ORDER BY u.roll_no, u.full_name
                """,
                tuple(params),
            )
            return [
                RosterEntry(
                    student_id=int(r["student_id"]),
                    full_name=r["full_name"],
                    roll_no=str(r["roll_no"]) if r.get("roll_no") is not None else None,
                    status=AttendanceStatus(r["status"]) if r.get("status") else None,
                )
                for r in fetchall(cur)
            ]

    def upsert_batch(
        self,
        key: SessionKey,
        *,
        teacher_id: int,
        records: Sequence[tuple[int, AttendanceStatus]],
    ) -> int:
        if not records:
            return 0

        rows = [
            (int(student_id), int(teacher_id), key.class_group, key.subject_name, key.date, int(key.period_number), status.value)
            for student_id, status in records
        ]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO attendance_records
                    (student_id, teacher_id, class_group, subject_name, attendance_date, period_number, status)
                VALUES (%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status), teacher_id=VALUES(teacher_id)
                """,
                rows,
            )
        return len(rows)
