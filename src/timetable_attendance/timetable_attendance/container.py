from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .api.client import ApiClient
from .api.http_repositories import (
    HttpAttendanceHistoryRepository,
    HttpAttendanceRepository,
    HttpTeacherRepository,
    HttpTimetableRepository,
)
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.resolver import AttendanceSessionResolver
from .common.datetime_utils import Clock, SystemClock
from .core.constants import DEFAULT_API_TIMEOUT_SECONDS, DEFAULT_REST_DAY, DEFAULT_SUBJECT_LABEL, LOW_ATTENDANCE_THRESHOLD
from .core.enums import DayOfWeek
from .database.connection import DBConfig, DatabaseConnection
from .reports.mysql_history_repository import MySQLAttendanceHistoryRepository
from .reports.repository import AttendanceHistoryRepository
from .reports.service import AttendanceAggregator
from .teachers.mysql_teacher_repository import MySQLTeacherRepository
from .teachers.repository import TeacherRepository
from .timetable.colors import SubjectColorCache
from .timetable.mysql_timetable_repository import MySQLTimetableRepository
from .timetable.periods import PeriodTable
from .timetable.repository import TimetableRepository
from .timetable.service import TimetableGrid


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    timetable_repo: TimetableRepository
    teachers_repo: TeacherRepository
    attendance_repo: AttendanceRepository
    history_repo: AttendanceHistoryRepository

    timetable_grid: TimetableGrid
    session_resolver: AttendanceSessionResolver
    attendance_aggregator: AttendanceAggregator
    clock: Clock


def assemble(
    *,
    timetable_repo: TimetableRepository,
    teachers_repo: TeacherRepository,
    attendance_repo: AttendanceRepository,
    history_repo: AttendanceHistoryRepository,
    conn: Optional[DatabaseConnection] = None,
    clock: Optional[Clock] = None,
    periods: Optional[Sequence[dict]] = None,
    palette: Optional[Sequence[str]] = None,
    rest_day: str = DEFAULT_REST_DAY,
    fallback_subject: str = DEFAULT_SUBJECT_LABEL,
    low_attendance_threshold: float = LOW_ATTENDANCE_THRESHOLD,
) -> Container:
    """Wire the services on top of whichever repositories the caller picked."""

    clock = clock or SystemClock()
    colors = SubjectColorCache(palette) if palette else SubjectColorCache()

    timetable_grid = TimetableGrid(
        timetable_repo,
        teachers_repo,
        periods=PeriodTable.from_config(periods),
        colors=colors,
    )
    session_resolver = AttendanceSessionResolver(
        timetable_grid,
        attendance_repo,
        clock=clock,
        rest_day=DayOfWeek.parse(rest_day),
        fallback_subject=fallback_subject,
    )
    attendance_aggregator = AttendanceAggregator(
        history_repo,
        clock=clock,
        low_attendance_threshold=low_attendance_threshold,
    )

    return Container(
        conn=conn,
        timetable_repo=timetable_repo,
        teachers_repo=teachers_repo,
        attendance_repo=attendance_repo,
        history_repo=history_repo,
        timetable_grid=timetable_grid,
        session_resolver=session_resolver,
        attendance_aggregator=attendance_aggregator,
        clock=clock,
    )


def build_container(*, db_config: dict, **options) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        conn=conn,
        timetable_repo=MySQLTimetableRepository(conn),
        teachers_repo=MySQLTeacherRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        history_repo=MySQLAttendanceHistoryRepository(conn),
        **options,
    )


def build_api_container(
    base_url: str,
    *,
    timeout: float = DEFAULT_API_TIMEOUT_SECONDS,
    client: Optional[ApiClient] = None,
    **options,
) -> Container:
    """Same services, backed by a remote school API instead of MySQL."""

    client = client or ApiClient(base_url, timeout=timeout)

    return assemble(
        timetable_repo=HttpTimetableRepository(client),
        teachers_repo=HttpTeacherRepository(client),
        attendance_repo=HttpAttendanceRepository(client),
        history_repo=HttpAttendanceHistoryRepository(client),
        **options,
    )
