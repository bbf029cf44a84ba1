from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Teacher:
    """Domain entity: a teacher and the subjects they may be assigned."""

    id: int
    full_name: str
    subjects_taught: frozenset[str] = field(default_factory=frozenset)

    def teaches(self, subject_name: str) -> bool:
        return subject_name in self.subjects_taught
