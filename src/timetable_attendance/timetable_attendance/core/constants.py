"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from __future__ import annotations

# Only the first period's attendance stands for the whole school day.
ATTENDANCE_PERIOD = 1
DEFAULT_SUBJECT_LABEL = "General Attendance"
DEFAULT_REST_DAY = "Sunday"

SUBJECT_COLOR_PALETTE = (
    "#B39DDB",
    "#80DEEA",
    "#FFAB91",
    "#A5D6A7",
    "#FFE082",
    "#F48FB1",
    "#C5CAE9",
    "#DCE775",
    "#FFCC80",
    "#B0BEC5",
)
NEUTRAL_COLOR = "#FFFFFF"

# (period, time range, break label or None)
DEFAULT_PERIODS = (
    (1, "09:00-09:45", None),
    (2, "09:45-10:30", None),
    (3, "10:30-10:45", "Break"),
    (4, "10:45-11:30", None),
    (5, "11:30-12:15", None),
    (6, "12:15-01:00", None),
    (7, "01:00-01:45", "Lunch"),
    (8, "01:45-02:30", None),
    (9, "02:30-03:15", None),
    (10, "03:15-04:00", None),
)

LOW_ATTENDANCE_THRESHOLD = 75.0
DEFAULT_API_TIMEOUT_SECONDS = 10
