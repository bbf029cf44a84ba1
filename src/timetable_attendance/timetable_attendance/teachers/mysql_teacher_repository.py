from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Teacher
from .repository import TeacherRepository


def _split_subjects(value) -> frozenset[str]:
    if not value:
        return frozenset()
    return frozenset(s.strip() for s in str(value).split(",") if s.strip())


class MySQLTeacherRepository(TeacherRepository):
    _SELECT = """
        SELECT u.id, u.full_name, GROUP_CONCAT(ts.subject_name ORDER BY ts.subject_name) AS subjects
        FROM users u
        LEFT JOIN teacher_subjects ts ON ts.teacher_id = u.id
        WHERE u.role = 'teacher' {where}
        GROUP BY u.id, u.full_name
        ORDER BY u.full_name
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(self._SELECT.format(where=""))
            return [self._to_teacher(r) for r in fetchall(cur)]

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(self._SELECT.format(where="AND u.id=%s"), (int(teacher_id),))
            rows = fetchall(cur)
            return self._to_teacher(rows[0]) if rows else None

    @staticmethod
    def _to_teacher(r: dict) -> Teacher:
        return Teacher(
            id=int(r["id"]),
            full_name=r["full_name"],
            subjects_taught=_split_subjects(r.get("subjects")),
        )
