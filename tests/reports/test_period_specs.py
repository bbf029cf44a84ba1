from __future__ import annotations

from datetime import date

import pytest
from werkzeug.datastructures import MultiDict

from src.timetable_attendance.timetable_attendance.common.datetime_utils import FixedClock
from src.timetable_attendance.timetable_attendance.core.exceptions import ValidationError
from src.timetable_attendance.timetable_attendance.reports.controller import parse_period_spec, parse_scope
from src.timetable_attendance.timetable_attendance.reports.model import (
    ClassScope,
    Day,
    Month,
    Range,
    StaffScope,
    StudentScope,
    Year,
)

CLOCK = FixedClock(date(2026, 10, 19))


def test_month_must_be_a_calendar_month():
    with pytest.raises(ValidationError):
        Month(2026, 13)


def test_range_end_before_start_is_rejected():
    with pytest.raises(ValidationError):
        Range(date(2026, 3, 2), date(2026, 3, 1))


def test_leap_february_bounds():
    assert Month(2028, 2).bounds()[1] == date(2028, 2, 29)


@pytest.mark.parametrize(
    "args,expected",
    [
        ({}, Day(date(2026, 10, 19))),
        ({"period": "daily", "date": "2026-10-01"}, Day(date(2026, 10, 1))),
        ({"period": "monthly", "targetMonth": "2026-02"}, Month(2026, 2)),
        ({"period": "monthly"}, Month(2026, 10)),
        ({"viewMode": "yearly", "targetYear": "2025"}, Year(2025)),
        ({"period": "custom", "startDate": "2026-01-05", "endDate": "2026-01-09"}, Range(date(2026, 1, 5), date(2026, 1, 9))),
    ],
)
def test_parse_period_spec(args, expected):
    assert parse_period_spec(MultiDict(args), CLOCK) == expected


@pytest.mark.parametrize(
    "args",
    [
        {"period": "weekly"},
        {"period": "custom", "start": "2026-01-05"},
        {"period": "daily", "date": "19/10/2026"},
        {"period": "yearly", "year": "soon"},
    ],
)
def test_bad_period_specs_are_validation_errors(args):
    with pytest.raises(ValidationError):
        parse_period_spec(MultiDict(args), CLOCK)


def test_parse_scope_variants():
    assert parse_scope(MultiDict({"scope": "staff", "teacher_id": "7"})) == StaffScope(7)
    assert parse_scope(MultiDict({"scope": "student", "student_id": "42"})) == StudentScope(42)
    assert parse_scope(MultiDict({"scope": "class", "class_group": "5A", "subject_name": "Math"})) == ClassScope(
        "5A", subject_name="Math"
    )

    with pytest.raises(ValidationError):
        parse_scope(MultiDict({"scope": "school"}))
    with pytest.raises(ValidationError):
        parse_scope(MultiDict({"scope": "staff"}))
