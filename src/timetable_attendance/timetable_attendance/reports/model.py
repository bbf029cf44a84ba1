from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from ..common.datetime_utils import Clock
from ..core.enums import AttendanceStatus, DailyStatus
from ..core.exceptions import ValidationError


# --- Period specs -----------------------------------------------------------


@dataclass(frozen=True)
class Day:
    on: date

    @classmethod
    def today(cls, clock: Clock) -> "Day":
        return cls(clock.today())

    def bounds(self) -> tuple[date, date]:
        return self.on, self.on


@dataclass(frozen=True)
class Month:
    year: int
    month: int

    def __post_init__(self):
        if not 1 <= int(self.month) <= 12:
            raise ValidationError(f"Month must be between 1 and 12, got {self.month}")

    @classmethod
    def current(cls, clock: Clock) -> "Month":
        today = clock.today()
        return cls(today.year, today.month)

    def bounds(self) -> tuple[date, date]:
        last = calendar.monthrange(self.year, self.month)[1]
        return date(self.year, self.month, 1), date(self.year, self.month, last)


@dataclass(frozen=True)
class Year:
    year: int

    def __post_init__(self):
        if not 1 <= int(self.year) <= 9999:
            raise ValidationError(f"Year out of range: {self.year}")

    @classmethod
    def current(cls, clock: Clock) -> "Year":
        return cls(clock.today().year)

    def bounds(self) -> tuple[date, date]:
        return date(self.year, 1, 1), date(self.year, 12, 31)


@dataclass(frozen=True)
class Range:
    start: date
    end: date

    def __post_init__(self):
        if self.end < self.start:
            raise ValidationError("Range end date is before its start date")

    def bounds(self) -> tuple[date, date]:
        return self.start, self.end


PeriodSpec = Union[Day, Month, Year, Range]


# --- Scopes -----------------------------------------------------------------


@dataclass(frozen=True)
class StaffScope:
    """One staff member's own attendance."""

    teacher_id: int


@dataclass(frozen=True)
class StudentScope:
    student_id: int


@dataclass(frozen=True)
class ClassScope:
    """A class's student attendance, optionally narrowed to a subject and/or recorder."""

    class_group: str
    subject_name: Optional[str] = None
    teacher_id: Optional[int] = None


SubjectScope = Union[StaffScope, StudentScope, ClassScope]


# --- Query rows -------------------------------------------------------------


@dataclass(frozen=True)
class HistoryEntry:
    """One row returned by the history query.

    status None marks a working day that was expected but has no record.
    """

    date: date
    status: Optional[AttendanceStatus]
    student_id: Optional[int] = None
    full_name: Optional[str] = None


@dataclass(frozen=True)
class StudentRef:
    student_id: int
    full_name: str


# --- Results ----------------------------------------------------------------


@dataclass(frozen=True)
class HistoryDay:
    date: date
    status: DailyStatus

    def to_dict(self) -> dict:
        return {"date": self.date.isoformat(), "status": self.status.value}


@dataclass(frozen=True)
class ClassDayCount:
    date: date
    present: int
    absent: int

    def to_dict(self) -> dict:
        return {"date": self.date.isoformat(), "present": self.present, "absent": self.absent}


@dataclass(frozen=True)
class StudentSummary:
    student_id: int
    full_name: str
    total_days: int
    days_present: int
    days_absent: int
    overall_percentage: float

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "full_name": self.full_name,
            "totalDays": self.total_days,
            "daysPresent": self.days_present,
            "daysAbsent": self.days_absent,
            "overallPercentage": self.overall_percentage,
        }


@dataclass(frozen=True)
class DailyReport:
    """Single-day result: a status, never a percentage.

    For class scope status is None and the student counts carry the answer.
    """

    date: date
    status: Optional[DailyStatus]
    students_present: int = 0
    students_absent: int = 0

    def to_dict(self) -> dict:
        history = [{"date": self.date.isoformat(), "status": self.status.value}] if self.status else []
        return {
            "date": self.date.isoformat(),
            "status": self.status.value if self.status else None,
            "studentsPresent": self.students_present,
            "studentsAbsent": self.students_absent,
            "detailedHistory": history,
        }


@dataclass(frozen=True)
class AttendanceSummary:
    """Aggregate over a month / year / range.

    overall_percentage is kept at full precision; rounding is the consumer's job.
    """

    start: date
    end: date
    total_days: int
    days_present: int
    days_absent: int
    overall_percentage: float
    days_late: int = 0
    detailed_history: tuple[HistoryDay, ...] = ()
    daily_counts: tuple[ClassDayCount, ...] = ()
    students: tuple[StudentSummary, ...] = ()
    students_below_threshold: int = 0

    @property
    def days_without_record(self) -> int:
        return self.total_days - self.days_present - self.days_absent

    def to_dict(self) -> dict:
        out = {
            "stats": {
                "overallPercentage": self.overall_percentage,
                "daysPresent": self.days_present,
                "daysAbsent": self.days_absent,
                "daysLate": self.days_late,
                "daysWithoutRecord": self.days_without_record,
                "totalDays": self.total_days,
            },
            "detailedHistory": [h.to_dict() for h in self.detailed_history],
        }
        if self.students:
            out["dailyCounts"] = [c.to_dict() for c in self.daily_counts]
            out["students"] = [s.to_dict() for s in self.students]
            out["stats"]["studentsBelowThreshold"] = self.students_below_threshold
        return out
