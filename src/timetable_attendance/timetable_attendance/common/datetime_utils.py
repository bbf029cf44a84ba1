from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol

from ..core.enums import DayOfWeek


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_month(value: str) -> tuple[int, int]:
    """Parse YYYY-MM string into (year, month)."""
    d = datetime.strptime(value, "%Y-%m")
    return d.year, d.month


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


class Clock(Protocol):
    """Calendar abstraction: every "today" and day-of-week question goes here."""

    def today(self) -> date:
        raise NotImplementedError

    def day_of_week(self, value: date) -> DayOfWeek:
        raise NotImplementedError


class SystemClock:
    def today(self) -> date:
        return now_local().date()

    def day_of_week(self, value: date) -> DayOfWeek:
        return DayOfWeek.from_weekday(value.weekday())


@dataclass
class FixedClock:
    """Clock pinned to a given date (tests, back-dated batch jobs)."""

    current: date

    def today(self) -> date:
        return self.current

    def day_of_week(self, value: date) -> DayOfWeek:
        return DayOfWeek.from_weekday(value.weekday())
