from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional, Sequence, Union

from ..common.datetime_utils import Clock, SystemClock
from ..core.constants import LOW_ATTENDANCE_THRESHOLD
from ..core.enums import AttendanceStatus, DailyStatus
from .model import (
    AttendanceSummary,
    ClassDayCount,
    ClassScope,
    DailyReport,
    Day,
    HistoryDay,
    HistoryEntry,
    PeriodSpec,
    StudentSummary,
    SubjectScope,
)
from .repository import AttendanceHistoryRepository

logger = logging.getLogger(__name__)

_ATTENDED = (AttendanceStatus.PRESENT, AttendanceStatus.LATE)


def percentage(present: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return present / total * 100


def collapse_day(statuses: Iterable[Optional[AttendanceStatus]]) -> DailyStatus:
    """One status for a day that may hold several rows.

    Present beats Late beats Absent; a day with no real record is No Record.
    """

    seen = {s for s in statuses if s is not None}
    if AttendanceStatus.PRESENT in seen:
        return DailyStatus.PRESENT
    if AttendanceStatus.LATE in seen:
        return DailyStatus.LATE
    if AttendanceStatus.ABSENT in seen:
        return DailyStatus.ABSENT
    return DailyStatus.NO_RECORD


class AttendanceAggregator:
    def __init__(
        self,
        history: AttendanceHistoryRepository,
        *,
        clock: Optional[Clock] = None,
        low_attendance_threshold: float = LOW_ATTENDANCE_THRESHOLD,
    ):
        self._history = history
        self._clock = clock or SystemClock()
        self._threshold = float(low_attendance_threshold)

    @property
    def clock(self) -> Clock:
        return self._clock

    def summarize(self, scope: SubjectScope, period_spec: PeriodSpec) -> Union[DailyReport, AttendanceSummary]:
        start, end = period_spec.bounds()
        entries = self._history.list_history(scope, start=start, end=end)

        if isinstance(period_spec, Day):
            return self._daily(scope, period_spec.on, entries)
        if isinstance(scope, ClassScope):
            return self._class_summary(scope, start, end, entries)
        return self._individual_summary(start, end, entries)

    def _daily(self, scope: SubjectScope, on: date, entries: Sequence[HistoryEntry]) -> DailyReport:
        rows = [e for e in entries if e.date == on]
        if not isinstance(scope, ClassScope):
            return DailyReport(date=on, status=collapse_day(e.status for e in rows))

        by_student: dict[int, list[Optional[AttendanceStatus]]] = defaultdict(list)
        for e in rows:
            if e.student_id is not None:
                by_student[e.student_id].append(e.status)
        day_statuses = [collapse_day(v) for v in by_student.values()]
        return DailyReport(
            date=on,
            status=None,
            students_present=sum(1 for s in day_statuses if s in (DailyStatus.PRESENT, DailyStatus.LATE)),
            students_absent=sum(1 for s in day_statuses if s == DailyStatus.ABSENT),
        )

    def _individual_summary(self, start: date, end: date, entries: Sequence[HistoryEntry]) -> AttendanceSummary:
        by_date: dict[date, list[Optional[AttendanceStatus]]] = defaultdict(list)
        for e in entries:
            by_date[e.date].append(e.status)

        history = [HistoryDay(date=d, status=collapse_day(by_date[d])) for d in sorted(by_date, reverse=True)]
        present = sum(1 for h in history if h.status == DailyStatus.PRESENT)
        late = sum(1 for h in history if h.status == DailyStatus.LATE)
        absent = sum(1 for h in history if h.status == DailyStatus.ABSENT)
        total = len(history)

        return AttendanceSummary(
            start=start,
            end=end,
            total_days=total,
            days_present=present + late,
            days_absent=absent,
            days_late=late,
            overall_percentage=percentage(present + late, total),
            detailed_history=tuple(history),
        )

    def _class_summary(self, scope: ClassScope, start: date, end: date, entries: Sequence[HistoryEntry]) -> AttendanceSummary:
        # Counted in student-days: every student is expected on every working day.
        names = {s.student_id: s.full_name for s in self._history.list_class_students(scope.class_group)}
        cells: dict[tuple[int, date], list[Optional[AttendanceStatus]]] = defaultdict(list)
        working_days: set[date] = set()
        for e in entries:
            working_days.add(e.date)
            if e.student_id is None:
                continue
            names.setdefault(e.student_id, e.full_name or str(e.student_id))
            cells[(e.student_id, e.date)].append(e.status)

        day_status = {k: collapse_day(v) for k, v in cells.items()}
        total_per_student = len(working_days)

        students = []
        for student_id, full_name in sorted(names.items(), key=lambda kv: (kv[1], kv[0])):
            statuses = [day_status.get((student_id, d), DailyStatus.NO_RECORD) for d in working_days]
            present = sum(1 for s in statuses if s in (DailyStatus.PRESENT, DailyStatus.LATE))
            absent = sum(1 for s in statuses if s == DailyStatus.ABSENT)
            students.append(
                StudentSummary(
                    student_id=student_id,
                    full_name=full_name,
                    total_days=total_per_student,
                    days_present=present,
                    days_absent=absent,
                    overall_percentage=percentage(present, total_per_student),
                )
            )

        daily_counts = []
        for d in sorted(working_days, reverse=True):
            statuses = [s for (sid, day), s in day_status.items() if day == d]
            daily_counts.append(
                ClassDayCount(
                    date=d,
                    present=sum(1 for s in statuses if s in (DailyStatus.PRESENT, DailyStatus.LATE)),
                    absent=sum(1 for s in statuses if s == DailyStatus.ABSENT),
                )
            )

        total = total_per_student * len(students)
        present = sum(s.days_present for s in students)
        absent = sum(s.days_absent for s in students)
        below = sum(1 for s in students if s.total_days > 0 and s.overall_percentage < self._threshold)

        logger.debug(f"Class summary {scope.class_group}: {len(students)} students over {total_per_student} days")
        return AttendanceSummary(
            start=start,
            end=end,
            total_days=total,
            days_present=present,
            days_absent=absent,
            overall_percentage=percentage(present, total),
            daily_counts=tuple(daily_counts),
            students=tuple(students),
            students_below_threshold=below,
        )
