from __future__ import annotations

from typing import Iterable, Iterator, Optional, Sequence

from ..core.constants import DEFAULT_PERIODS
from ..core.exceptions import NotConfigured
from .model import PeriodDefinition


class PeriodTable:
    """The configured period definitions, keyed by period number."""

    def __init__(self, definitions: Iterable[PeriodDefinition]):
        self._by_period: dict[int, PeriodDefinition] = {}
        for d in definitions:
            if d.period <= 0:
                raise ValueError(f"Period numbers must be positive, got {d.period}")
            if d.period in self._by_period:
                raise ValueError(f"Duplicate period definition: {d.period}")
            self._by_period[d.period] = d

    @classmethod
    def default(cls) -> "PeriodTable":
        return cls(PeriodDefinition(period=p, time_range=t, break_label=b) for p, t, b in DEFAULT_PERIODS)

    @classmethod
    def from_config(cls, rows: Optional[Sequence[dict]]) -> "PeriodTable":
        """Build from settings rows: {"period": 1, "time": "09:00-09:45", "break": "Lunch"}."""

        if not rows:
            return cls.default()
        return cls(
            PeriodDefinition(period=int(r["period"]), time_range=str(r.get("time", "")), break_label=r.get("break"))
            for r in rows
        )

    def get(self, period: int) -> PeriodDefinition:
        try:
            return self._by_period[int(period)]
        except (KeyError, TypeError, ValueError):
            raise NotConfigured(f"Period {period!r} is not in the period table")

    def is_break(self, period: int) -> bool:
        return self.get(period).is_break

    def teaching_periods(self) -> list[int]:
        return [d.period for d in self if not d.is_break]

    def __iter__(self) -> Iterator[PeriodDefinition]:
        return iter(sorted(self._by_period.values(), key=lambda d: d.period))

    def __len__(self) -> int:
        return len(self._by_period)
