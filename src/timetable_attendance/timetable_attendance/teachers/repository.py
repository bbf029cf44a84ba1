from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Teacher


class TeacherRepository(Protocol):
    """Teacher directory (read-only from the engine's point of view)."""

    def list_all(self) -> Sequence[Teacher]:
        raise NotImplementedError

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        raise NotImplementedError
