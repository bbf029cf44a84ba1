from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import HistoryEntry, StudentRef, SubjectScope


class AttendanceHistoryRepository(Protocol):
    """Read-only view of stored attendance, used for reporting."""

    def list_history(self, scope: SubjectScope, *, start: date, end: date) -> Sequence[HistoryEntry]:
        """Rows for the scope with start <= date <= end.

        Class scope rows carry student_id/full_name; the other scopes do not.
        """

        raise NotImplementedError

    def list_class_students(self, class_group: str) -> Sequence[StudentRef]:
        raise NotImplementedError
