from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus, DayOfWeek, IneligibleReason, SessionPhase
from ..core.exceptions import InvalidTransition


@dataclass(frozen=True)
class SessionKey:
    """Identity shared by every record of one attendance-taking session."""

    class_group: str
    date: date
    period_number: int
    subject_name: str


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's status for one session."""

    student_id: int
    class_group: str
    date: date
    period_number: int
    subject_name: str
    status: AttendanceStatus
    teacher_id: Optional[int] = None


@dataclass(frozen=True)
class RosterEntry:
    """A student on a class roster; status is the stored one, if any."""

    student_id: int
    full_name: str
    roll_no: Optional[str] = None
    status: Optional[AttendanceStatus] = None

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "full_name": self.full_name,
            "roll_no": self.roll_no,
            "status": self.status.value if self.status else None,
        }


@dataclass(frozen=True)
class SessionState:
    """Where one (class, date, period) session stands in the resolution flow."""

    phase: SessionPhase
    class_group: str
    date: date
    period_number: int
    day_of_week: Optional[DayOfWeek] = None
    subject_name: Optional[str] = None
    reason: Optional[IneligibleReason] = None

    @classmethod
    def idle(cls, class_group: str, on_date: date, period_number: int) -> "SessionState":
        return cls(phase=SessionPhase.IDLE, class_group=class_group, date=on_date, period_number=period_number)

    @property
    def is_eligible(self) -> bool:
        return self.phase in (SessionPhase.ELIGIBLE, SessionPhase.READY)

    @property
    def is_already_marked(self) -> bool:
        return self.phase == SessionPhase.ALREADY_MARKED

    @property
    def key(self) -> SessionKey:
        if not self.subject_name:
            raise InvalidTransition(f"A {self.phase.value} session has no resolved subject yet")
        return SessionKey(
            class_group=self.class_group,
            date=self.date,
            period_number=self.period_number,
            subject_name=self.subject_name,
        )

    def to_dict(self) -> dict:
        return {
            "phase": self.phase.value,
            "class_group": self.class_group,
            "date": self.date.isoformat(),
            "period_number": self.period_number,
            "day_of_week": self.day_of_week.value if self.day_of_week else None,
            "subject_name": self.subject_name,
            "reason": self.reason.value if self.reason else None,
            "is_eligible": self.is_eligible,
            "is_already_marked": self.is_already_marked,
        }


@dataclass(frozen=True)
class SubmitResult:
    key: SessionKey
    saved: int
    present: int = 0
    absent: int = 0

    def to_dict(self) -> dict:
        return {
            "class_group": self.key.class_group,
            "date": self.key.date.isoformat(),
            "period_number": self.key.period_number,
            "subject_name": self.key.subject_name,
            "saved": self.saved,
            "present": self.present,
            "absent": self.absent,
        }
