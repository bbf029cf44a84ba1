from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import NEUTRAL_COLOR, SUBJECT_COLOR_PALETTE


class SubjectColorCache:
    """Deterministic subject -> color binding (map + palette + cursor).

    The first time a subject is seen it takes the next palette color, wrapping
    around once the palette is exhausted. Free and break cells are always the
    neutral color and never consume a palette entry.
    """

    def __init__(self, palette: Sequence[str] = SUBJECT_COLOR_PALETTE, *, neutral: str = NEUTRAL_COLOR):
        if not palette:
            raise ValueError("Color palette must not be empty")
        self._palette = tuple(palette)
        self._neutral = neutral
        self._colors: dict[str, str] = {}
        self._cursor = 0

    @property
    def neutral(self) -> str:
        return self._neutral

    def color_for(self, subject_name: Optional[str]) -> str:
        if not subject_name:
            return self._neutral

        color = self._colors.get(subject_name)
        if color is not None:
            return color

        color = self._palette[self._cursor % len(self._palette)]
        self._cursor += 1
        # Two first-sight callers may race here; whoever lands first wins.
        return self._colors.setdefault(subject_name, color)

    def known_subjects(self) -> dict[str, str]:
        return dict(self._colors)
