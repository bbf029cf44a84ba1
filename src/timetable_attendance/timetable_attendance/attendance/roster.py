from __future__ import annotations

import logging
from typing import Mapping, Sequence, Union

from ..core.enums import MARKABLE_STATUSES, AttendanceStatus, SessionPhase
from ..core.exceptions import InvalidTransition, ValidationError
from .model import AttendanceRecord, RosterEntry, SessionState, SubmitResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def parse_markable_status(value: Union[AttendanceStatus, str]) -> AttendanceStatus:
    try:
        status = value if isinstance(value, AttendanceStatus) else AttendanceStatus.parse(value)
    except ValueError as e:
        raise ValidationError(str(e))
    if status not in MARKABLE_STATUSES:
        raise ValidationError(f"Status {status.value} cannot be set while marking a class")
    return status


class AttendanceRosterEditor:
    """Per-student statuses of one Ready session, submitted as a single upsert batch."""

    def __init__(
        self,
        state: SessionState,
        roster: Sequence[RosterEntry],
        statuses: Mapping[int, AttendanceStatus],
        attendance: AttendanceRepository,
        *,
        teacher_id: int,
    ):
        if state.phase != SessionPhase.READY:
            raise InvalidTransition(f"Roster can only be edited for a Ready session, not {state.phase.value}")

        self._state = state
        self._roster = {e.student_id: e for e in roster}
        self._statuses: dict[int, AttendanceStatus] = {sid: statuses[sid] for sid in self._roster}
        self._attendance = attendance
        self._teacher_id = int(teacher_id)
        self._submitted = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def teacher_id(self) -> int:
        return self._teacher_id

    @property
    def is_submitted(self) -> bool:
        return self._submitted

    def status_of(self, student_id: int) -> AttendanceStatus:
        try:
            return self._statuses[int(student_id)]
        except KeyError:
            raise ValidationError(f"Student {student_id} is not on this roster")

    def set_status(self, student_id: int, status: Union[AttendanceStatus, str]) -> None:
        student_id = int(student_id)
        if student_id not in self._statuses:
            raise ValidationError(f"Student {student_id} is not on this roster")
        self._statuses[student_id] = parse_markable_status(status)

    def set_many(self, changes: Mapping[int, Union[AttendanceStatus, str]]) -> None:
        """All-or-nothing: nothing changes if any entry is invalid."""

        parsed = {}
        for student_id, status in changes.items():
            if int(student_id) not in self._statuses:
                raise ValidationError(f"Student {student_id} is not on this roster")
            parsed[int(student_id)] = parse_markable_status(status)
        self._statuses.update(parsed)

    def entries(self) -> list[RosterEntry]:
        return [
            RosterEntry(student_id=sid, full_name=e.full_name, roll_no=e.roll_no, status=self._statuses[sid])
            for sid, e in self._roster.items()
        ]

    def records(self) -> list[AttendanceRecord]:
        """The batch submit would write, one record per roster student."""

        key = self._state.key
        return [
            AttendanceRecord(
                student_id=sid,
                class_group=key.class_group,
                date=key.date,
                period_number=key.period_number,
                subject_name=key.subject_name,
                status=status,
                teacher_id=self._teacher_id,
            )
            for sid, status in self._statuses.items()
        ]

    def counts(self) -> dict[str, int]:
        present = sum(1 for s in self._statuses.values() if s == AttendanceStatus.PRESENT)
        absent = sum(1 for s in self._statuses.values() if s == AttendanceStatus.ABSENT)
        return {"total": len(self._statuses), "present": present, "absent": absent}

    def submit(self) -> SubmitResult:
        key = self._state.key
        counts = self.counts()
        records = [(r.student_id, r.status) for r in self.records()]

        if not records:
            return SubmitResult(key=key, saved=0)

        saved = self._attendance.upsert_batch(key, teacher_id=self._teacher_id, records=records)
        self._submitted = True
        logger.info(
            f"Attendance saved for {key.class_group} {key.date.isoformat()} P{key.period_number} "
            f"({key.subject_name}): {counts['present']} present, {counts['absent']} absent"
        )
        return SubmitResult(key=key, saved=saved, present=counts["present"], absent=counts["absent"])
