from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization checks."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class DayOfWeek(str, Enum):
    """Calendar days, in date.weekday() order."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @classmethod
    def from_weekday(cls, weekday: int) -> "DayOfWeek":
        return list(cls)[weekday]

    @classmethod
    def parse(cls, value: str) -> "DayOfWeek":
        v = (value or "").strip().lower()
        for day in cls:
            if day.value.lower() == v or day.value[:3].lower() == v:
                return day
        raise ValueError(f"Unknown day of week: {value!r}")


# Days a timetable can hold slots for.
SCHOOL_DAYS = (
    DayOfWeek.MONDAY,
    DayOfWeek.TUESDAY,
    DayOfWeek.WEDNESDAY,
    DayOfWeek.THURSDAY,
    DayOfWeek.FRIDAY,
    DayOfWeek.SATURDAY,
)


class AttendanceStatus(str, Enum):
    """Status stored on an attendance record."""

    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"

    @classmethod
    def parse(cls, value: str) -> "AttendanceStatus":
        v = (value or "").strip().upper()
        short = {"P": cls.PRESENT, "A": cls.ABSENT, "L": cls.LATE}
        if v in short:
            return short[v]
        for status in cls:
            if status.name == v:
                return status
        raise ValueError(f"Unknown attendance status: {value!r}")


# Statuses a teacher may set while marking a class roster.
MARKABLE_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.ABSENT)


class DailyStatus(str, Enum):
    """Single-day report status; NO_RECORD is not the same as ABSENT."""

    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"
    NO_RECORD = "No Record"


class SessionPhase(str, Enum):
    IDLE = "Idle"
    RESOLVING = "Resolving"
    INELIGIBLE = "Ineligible"
    ALREADY_MARKED = "AlreadyMarked"
    ELIGIBLE = "Eligible"
    READY = "Ready"


class IneligibleReason(str, Enum):
    REST_DAY = "RestDay"
    ATTENDANCE_RESTRICTED_TO_PERIOD_ONE = "AttendanceRestrictedToPeriodOne"
