from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from ..common.datetime_utils import Clock, SystemClock
from ..common.validators import require_non_empty, require_positive_int
from ..core.constants import ATTENDANCE_PERIOD, DEFAULT_SUBJECT_LABEL
from ..core.enums import AttendanceStatus, DayOfWeek, IneligibleReason, SessionPhase
from ..core.exceptions import InvalidTransition, RemoteFailure
from ..timetable.service import TimetableGrid
from .model import SessionKey, SessionState
from .repository import AttendanceRepository
from .roster import AttendanceRosterEditor

logger = logging.getLogger(__name__)


class AttendanceSessionResolver:
    """Decides whether attendance can be taken for a (class, date, period).

    Flow: Idle -> Resolving -> Ineligible | AlreadyMarked | Eligible;
    Eligible -> Ready via load_roster; AlreadyMarked -> Ready via reopen_for_edit.
    find_marked reaches AlreadyMarked directly for any stored session.

    Rest-day and period checks run before any repository call. A failing
    repository call raises RemoteFailure and hands back no state, so the
    caller is still holding its Idle state.
    """

    def __init__(
        self,
        timetable: TimetableGrid,
        attendance: AttendanceRepository,
        *,
        clock: Optional[Clock] = None,
        rest_day: DayOfWeek = DayOfWeek.SUNDAY,
        fallback_subject: str = DEFAULT_SUBJECT_LABEL,
    ):
        self._timetable = timetable
        self._attendance = attendance
        self._clock = clock or SystemClock()
        self._rest_day = rest_day
        self._fallback_subject = fallback_subject

    @property
    def clock(self) -> Clock:
        return self._clock

    def resolve(self, class_group: str, on_date: date, period_number: int) -> SessionState:
        class_group = require_non_empty(class_group, "Class group")
        period_number = require_positive_int(period_number, "Period number")

        day = self._clock.day_of_week(on_date)
        state = replace(SessionState.idle(class_group, on_date, period_number), phase=SessionPhase.RESOLVING, day_of_week=day)

        if day == self._rest_day:
            return replace(state, phase=SessionPhase.INELIGIBLE, reason=IneligibleReason.REST_DAY)

        if period_number != ATTENDANCE_PERIOD:
            return replace(
                state,
                phase=SessionPhase.INELIGIBLE,
                reason=IneligibleReason.ATTENDANCE_RESTRICTED_TO_PERIOD_ONE,
            )

        try:
            slot = self._timetable.get_slot(class_group, day, period_number)
            subject_name = slot.subject_name or self._fallback_subject
            key = SessionKey(class_group=class_group, date=on_date, period_number=period_number, subject_name=subject_name)
            marked = self._attendance.is_marked(key)
        except RemoteFailure:
            logger.error(f"Could not resolve attendance session {class_group} {on_date.isoformat()} P{period_number}")
            raise

        phase = SessionPhase.ALREADY_MARKED if marked else SessionPhase.ELIGIBLE
        return replace(state, phase=phase, subject_name=subject_name)

    def find_marked(self, class_group: str, on_date: date, period_number: int) -> Optional[SessionState]:
        """AlreadyMarked state when records exist for the session, else None.

        Day and period rules gate only new sessions and are not applied here.
        """

        class_group = require_non_empty(class_group, "Class group")
        period_number = require_positive_int(period_number, "Period number")

        day = self._clock.day_of_week(on_date)
        slot = self._timetable.get_slot(class_group, day, period_number)
        subject_name = slot.subject_name or self._fallback_subject
        key = SessionKey(class_group=class_group, date=on_date, period_number=period_number, subject_name=subject_name)
        if not self._attendance.is_marked(key):
            return None
        return replace(
            SessionState.idle(class_group, on_date, period_number),
            phase=SessionPhase.ALREADY_MARKED,
            day_of_week=day,
            subject_name=subject_name,
        )

    def load_roster(self, state: SessionState, *, teacher_id: int) -> tuple[SessionState, AttendanceRosterEditor]:
        """Eligible -> Ready. Every student starts Present; the teacher marks exceptions."""

        if state.phase != SessionPhase.ELIGIBLE:
            raise InvalidTransition(f"Cannot load a roster from {state.phase.value}")

        roster = self._attendance.get_roster(
            class_group=state.class_group,
            on_date=state.date,
            period_number=state.period_number,
        )
        ready = replace(state, phase=SessionPhase.READY)
        statuses = {e.student_id: AttendanceStatus.PRESENT for e in roster}
        return ready, AttendanceRosterEditor(ready, roster, statuses, self._attendance, teacher_id=teacher_id)

    def reopen_for_edit(self, state: SessionState, *, teacher_id: int) -> tuple[SessionState, AttendanceRosterEditor]:
        """AlreadyMarked -> Ready, seeded from the stored records.

        Eligibility rules gate only the creation path, so they are not re-run here.
        """

        if state.phase != SessionPhase.ALREADY_MARKED:
            raise InvalidTransition(f"Only a marked session can be reopened, not {state.phase.value}")

        roster = self._attendance.get_roster(
            class_group=state.class_group,
            on_date=state.date,
            period_number=state.period_number,
            subject_name=state.subject_name,
        )
        ready = replace(state, phase=SessionPhase.READY)
        statuses = {e.student_id: e.status or AttendanceStatus.PRESENT for e in roster}
        return ready, AttendanceRosterEditor(ready, roster, statuses, self._attendance, teacher_id=teacher_id)

    def resolve_today(self, class_group: str, period_number: int = ATTENDANCE_PERIOD) -> SessionState:
        return self.resolve(class_group, self._clock.today(), period_number)
