"""Example: drive the services directly, without Flask.

Controllers are thin; the timetable, session and report rules live in the services.
Set APP_ENV and the DB_* variables (or a .env file) before running.
"""

import importlib

from config import get_settings_module

from src.timetable_attendance.timetable_attendance.container import build_container
from src.timetable_attendance.timetable_attendance.core.enums import SessionPhase
from src.timetable_attendance.timetable_attendance.reports.model import ClassScope, Month


def main(class_group="5A", teacher_id=7):
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    state = container.session_resolver.resolve(class_group, container.clock.today(), 1)
    print(state.to_dict())

    if state.phase == SessionPhase.ELIGIBLE:
        _, editor = container.session_resolver.load_roster(state, teacher_id=teacher_id)
        print(editor.counts())

    summary = container.attendance_aggregator.summarize(ClassScope(class_group), Month.current(container.clock))
    print(summary.to_dict()["stats"])


if __name__ == "__main__":
    main()
