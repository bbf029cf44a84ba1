from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import RosterEntry, SessionKey


class AttendanceRepository(Protocol):
    def is_marked(self, key: SessionKey) -> bool:
        """True if any record exists for the session key."""

        raise NotImplementedError

    def get_roster(
        self,
        *,
        class_group: str,
        on_date: date,
        period_number: int,
        subject_name: Optional[str] = None,
    ) -> Sequence[RosterEntry]:
        """Students of the class with their stored status for that date/period (None if unmarked)."""

        raise NotImplementedError

    def upsert_batch(
        self,
        key: SessionKey,
        *,
        teacher_id: int,
        records: Sequence[tuple[int, AttendanceStatus]],
    ) -> int:
        """Write every (student_id, status) of the session in one transaction.

        Existing rows for the same key are overwritten. Returns rows written.
        """

        raise NotImplementedError
