from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import DayOfWeek
from .model import TimetableSlot


class TimetableRepository(Protocol):
    def get(self, *, class_group: str, day_of_week: DayOfWeek, period_number: int) -> Optional[TimetableSlot]:
        raise NotImplementedError

    def upsert(self, slot: TimetableSlot) -> None:
        """Create or overwrite the slot keyed by (class_group, day, period).

        A slot with no subject/teacher is stored as Free.
        """

        raise NotImplementedError

    def list_for_class(self, class_group: str) -> Sequence[TimetableSlot]:
        raise NotImplementedError

    def list_for_teacher(self, teacher_id: int) -> Sequence[TimetableSlot]:
        raise NotImplementedError
