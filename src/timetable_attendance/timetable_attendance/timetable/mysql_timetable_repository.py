from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import DayOfWeek
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import TimetableSlot
from .repository import TimetableRepository


class MySQLTimetableRepository(TimetableRepository):
    _SELECT = """
        SELECT t.class_group, t.day_of_week, t.period_number, t.subject_name, t.teacher_id,
               u.full_name AS teacher_name
        FROM timetables t
        LEFT JOIN users u ON u.id = t.teacher_id
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, class_group: str, day_of_week: DayOfWeek, period_number: int) -> Optional[TimetableSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                self._SELECT + " WHERE t.class_group=%s AND t.day_of_week=%s AND t.period_number=%s",
                (class_group, day_of_week.value, int(period_number)),
            )
            r = fetchone(cur)
            return self._to_slot(r) if r else None

    def upsert(self, slot: TimetableSlot) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO timetables(class_group, day_of_week, period_number, subject_name, teacher_id)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE subject_name=VALUES(subject_name), teacher_id=VALUES(teacher_id)
                """,
                (
                    slot.class_group,
                    slot.day_of_week.value,
                    int(slot.period_number),
                    slot.subject_name,
                    slot.teacher_id,
                ),
            )

    def list_for_class(self, class_group: str) -> Sequence[TimetableSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                self._SELECT + " WHERE t.class_group=%s ORDER BY t.period_number",
                (class_group,),
            )
            return [self._to_slot(r) for r in fetchall(cur)]

    def list_for_teacher(self, teacher_id: int) -> Sequence[TimetableSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                self._SELECT + " WHERE t.teacher_id=%s ORDER BY t.period_number",
                (int(teacher_id),),
            )
            return [self._to_slot(r) for r in fetchall(cur)]

    @staticmethod
    def _to_slot(r: dict) -> TimetableSlot:
        return TimetableSlot(
            class_group=r["class_group"],
            day_of_week=DayOfWeek(r["day_of_week"]),
            period_number=int(r["period_number"]),
            subject_name=r.get("subject_name") or None,
            teacher_id=int(r["teacher_id"]) if r.get("teacher_id") is not None else None,
            teacher_name=r.get("teacher_name"),
        )
