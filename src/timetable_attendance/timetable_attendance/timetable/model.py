from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import DayOfWeek


@dataclass(frozen=True)
class PeriodDefinition:
    """One row of the school's period table; break rows are never assignable."""

    period: int
    time_range: str
    break_label: Optional[str] = None

    @property
    def is_break(self) -> bool:
        return self.break_label is not None


@dataclass(frozen=True)
class TimetableSlot:
    """Domain entity: one (class, day, period) cell of the weekly timetable.

    A slot with neither subject nor teacher is "Free", which is a valid state,
    not an absence.
    """

    class_group: str
    day_of_week: DayOfWeek
    period_number: int
    subject_name: Optional[str] = None
    teacher_id: Optional[int] = None
    teacher_name: Optional[str] = None

    @property
    def is_free(self) -> bool:
        return not self.subject_name and self.teacher_id is None

    @classmethod
    def free(cls, class_group: str, day_of_week: DayOfWeek, period_number: int) -> "TimetableSlot":
        return cls(class_group=class_group, day_of_week=day_of_week, period_number=period_number)

    def to_dict(self) -> dict:
        return {
            "class_group": self.class_group,
            "day_of_week": self.day_of_week.value,
            "period_number": self.period_number,
            "subject_name": self.subject_name,
            "teacher_id": self.teacher_id,
            "teacher_name": self.teacher_name,
        }


@dataclass(frozen=True)
class GridCell:
    day_of_week: DayOfWeek
    color: str
    subject_name: Optional[str] = None
    teacher_id: Optional[int] = None
    teacher_name: Optional[str] = None
    is_break: bool = False


@dataclass(frozen=True)
class GridRow:
    """Read-model: one period across Monday..Saturday, ready for rendering."""

    period: int
    time_range: str
    cells: tuple[GridCell, ...]
    is_break: bool = False

    def to_dict(self) -> dict:
        return {
            "period": self.period,
            "time": self.time_range,
            "is_break": self.is_break,
            "cells": [
                {
                    "day_of_week": c.day_of_week.value,
                    "subject_name": c.subject_name,
                    "teacher_id": c.teacher_id,
                    "teacher_name": c.teacher_name,
                    "color": c.color,
                    "is_break": c.is_break,
                }
                for c in self.cells
            ],
        }
