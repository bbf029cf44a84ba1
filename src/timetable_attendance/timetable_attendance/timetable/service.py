from __future__ import annotations

import logging
from typing import Optional, Sequence, Union

from ..common.validators import optional_text, require_non_empty, require_positive_int
from ..core.enums import SCHOOL_DAYS, DayOfWeek, Role
from ..core.exceptions import AuthorizationError, InvalidAssignment, ValidationError
from ..teachers.model import Teacher
from ..teachers.repository import TeacherRepository
from .colors import SubjectColorCache
from .model import GridCell, GridRow, TimetableSlot
from .periods import PeriodTable
from .repository import TimetableRepository

logger = logging.getLogger(__name__)


def coerce_day(value: Union[DayOfWeek, str]) -> DayOfWeek:
    if isinstance(value, DayOfWeek):
        return value
    try:
        return DayOfWeek.parse(value)
    except ValueError as e:
        raise ValidationError(str(e))


class TimetableGrid:
    """Weekly class/period -> (subject, teacher) assignment."""

    def __init__(
        self,
        timetable: TimetableRepository,
        teachers: TeacherRepository,
        *,
        periods: Optional[PeriodTable] = None,
        colors: Optional[SubjectColorCache] = None,
    ):
        self._timetable = timetable
        self._teachers = teachers
        self._periods = periods or PeriodTable.default()
        self._colors = colors or SubjectColorCache()

    @property
    def periods(self) -> PeriodTable:
        return self._periods

    def get_slot(self, class_group: str, day: Union[DayOfWeek, str], period: int) -> TimetableSlot:
        """Stored assignment, or the Free slot when nothing is stored.

        Raises NotConfigured only for a period missing from the period table.
        """

        definition = self._periods.get(period)
        day = coerce_day(day)
        class_group = require_non_empty(class_group, "Class group")

        if definition.is_break:
            return TimetableSlot.free(class_group, day, definition.period)

        slot = self._timetable.get(class_group=class_group, day_of_week=day, period_number=definition.period)
        return slot or TimetableSlot.free(class_group, day, definition.period)

    def set_slot(
        self,
        class_group: str,
        day: Union[DayOfWeek, str],
        period: int,
        subject_name: Optional[str] = None,
        teacher_id: Optional[int] = None,
        *,
        current_role: Role,
    ) -> TimetableSlot:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only an administrator can edit the timetable")

        class_group = require_non_empty(class_group, "Class group")
        day = coerce_day(day)
        if day not in SCHOOL_DAYS:
            raise InvalidAssignment(f"No timetable slots exist on {day.value}")

        definition = self._periods.get(period)
        if definition.is_break:
            raise InvalidAssignment(f"Period {definition.period} is a {definition.break_label.lower()} period")

        subject_name = optional_text(subject_name)
        if teacher_id in (None, ""):
            teacher_id = None
        else:
            teacher_id = require_positive_int(teacher_id, "Teacher")

        if subject_name is None and teacher_id is None:
            slot = TimetableSlot.free(class_group, day, definition.period)
            self._timetable.upsert(slot)
            logger.info(f"Cleared timetable slot {class_group} {day.value} P{definition.period}")
            return slot

        if subject_name is None:
            raise InvalidAssignment("A teacher needs a subject to teach in this slot")

        teacher = None
        if teacher_id is not None:
            teacher = self._teachers.get_by_id(teacher_id)
            if teacher is None:
                raise InvalidAssignment(f"Teacher {teacher_id} does not exist")
            if not teacher.teaches(subject_name):
                raise InvalidAssignment(f"{teacher.full_name} does not teach {subject_name}")

        slot = TimetableSlot(
            class_group=class_group,
            day_of_week=day,
            period_number=definition.period,
            subject_name=subject_name,
            teacher_id=teacher.id if teacher else None,
            teacher_name=teacher.full_name if teacher else None,
        )
        self._timetable.upsert(slot)
        logger.info(
            f"Assigned {subject_name} / teacher {slot.teacher_id} to {class_group} {day.value} P{definition.period}"
        )
        return slot

    def clear_slot(self, class_group: str, day: Union[DayOfWeek, str], period: int, *, current_role: Role) -> TimetableSlot:
        return self.set_slot(class_group, day, period, None, None, current_role=current_role)

    def color_for(self, subject_name: Optional[str]) -> str:
        return self._colors.color_for(subject_name)

    def week_grid(self, class_group: str) -> list[GridRow]:
        """Every period row across Monday..Saturday, break rows included."""

        class_group = require_non_empty(class_group, "Class group")
        by_key = {(s.day_of_week, s.period_number): s for s in self._timetable.list_for_class(class_group)}

        rows: list[GridRow] = []
        for definition in self._periods:
            if definition.is_break:
                cells = tuple(
                    GridCell(
                        day_of_week=day,
                        color=self._colors.neutral,
                        subject_name=definition.break_label,
                        is_break=True,
                    )
                    for day in SCHOOL_DAYS
                )
            else:
                cells = tuple(self._cell(day, by_key.get((day, definition.period))) for day in SCHOOL_DAYS)
            rows.append(
                GridRow(
                    period=definition.period,
                    time_range=definition.time_range,
                    cells=cells,
                    is_break=definition.is_break,
                )
            )
        return rows

    def _cell(self, day: DayOfWeek, slot: Optional[TimetableSlot]) -> GridCell:
        if slot is None or slot.is_free:
            return GridCell(day_of_week=day, color=self._colors.neutral)
        return GridCell(
            day_of_week=day,
            color=self.color_for(slot.subject_name),
            subject_name=slot.subject_name,
            teacher_id=slot.teacher_id,
            teacher_name=slot.teacher_name,
        )

    def teacher_week(self, teacher_id: int) -> list[TimetableSlot]:
        teacher_id = require_positive_int(teacher_id, "Teacher")
        slots = [s for s in self._timetable.list_for_teacher(teacher_id) if not s.is_free]
        order = {day: i for i, day in enumerate(SCHOOL_DAYS)}
        slots.sort(key=lambda s: (order.get(s.day_of_week, len(order)), s.period_number, s.class_group))
        return slots

    def subjects_for_class(self, class_group: str) -> list[str]:
        class_group = require_non_empty(class_group, "Class group")
        return sorted({s.subject_name for s in self._timetable.list_for_class(class_group) if s.subject_name})

    def teacher_assignments(self, teacher_id: int) -> list[dict]:
        pairs = {(s.class_group, s.subject_name) for s in self.teacher_week(teacher_id)}
        return [{"class_group": c, "subject_name": s} for c, s in sorted(pairs)]

    def list_teachers(self) -> Sequence[Teacher]:
        return self._teachers.list_all()
