from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.http import arg, current_user_id, date_arg, int_arg, json_errors
from ..container import Container
from ..core.enums import SessionPhase
from ..core.exceptions import ValidationError
from .model import SessionKey

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    resolver = container.session_resolver

    @app.route("/api/attendance/session", methods=["GET"], endpoint="api_attendance_session")
    @json_errors
    def session_state():
        state = resolver.resolve(arg("class_group"), date_arg("date"), int_arg("period_number"))
        return jsonify(state.to_dict())

    @app.route("/api/attendance/status", methods=["GET"], endpoint="api_attendance_status")
    @json_errors
    def status():
        key = SessionKey(
            class_group=arg("class_group"),
            date=date_arg("date"),
            period_number=int_arg("period_number"),
            subject_name=arg("subject_name"),
        )
        return jsonify({"isMarked": container.attendance_repo.is_marked(key)})

    @app.route("/api/attendance/sheet", methods=["GET"], endpoint="api_attendance_sheet")
    @json_errors
    def sheet():
        roster = container.attendance_repo.get_roster(
            class_group=arg("class_group"),
            on_date=date_arg("date"),
            period_number=int_arg("period_number"),
            subject_name=arg("subject_name", required=False),
        )
        return jsonify([e.to_dict() for e in roster])

    @app.route("/api/attendance", methods=["POST"], endpoint="api_attendance_submit")
    @json_errors
    def submit():
        body = request.get_json(silent=True) or {}
        class_group = arg("class_group", source=body)
        on_date = date_arg("date", source=body)
        period_number = int_arg("period_number", source=body)
        teacher_id = int_arg("teacher_id", required=False, source=body) or current_user_id()
        if teacher_id is None:
            raise ValidationError("teacher_id is required")

        records = body.get("records", body.get("attendanceData"))
        if not isinstance(records, list):
            raise ValidationError("records must be a list")

        if not records:
            return jsonify({"message": "No attendance data to save.", "saved": 0}), 200

        state = resolver.resolve(class_group, on_date, period_number)
        if state.phase == SessionPhase.INELIGIBLE:
            state = resolver.find_marked(class_group, on_date, period_number) or state
        if state.phase == SessionPhase.INELIGIBLE:
            logger.warning(
                f"Attendance refused for {class_group} {on_date.isoformat()} P{period_number}: {state.reason.value}"
            )
            return jsonify({"message": "Attendance cannot be marked here.", "session": state.to_dict()}), 422

        requested_subject = arg("subject_name", required=False, source=body)
        if requested_subject and requested_subject != state.subject_name:
            raise ValidationError(f"Period {period_number} on this day is {state.subject_name}, not {requested_subject}")

        if state.phase == SessionPhase.ALREADY_MARKED:
            _, editor = resolver.reopen_for_edit(state, teacher_id=teacher_id)
        else:
            _, editor = resolver.load_roster(state, teacher_id=teacher_id)

        try:
            changes = {int(r["student_id"]): r["status"] for r in records}
        except (KeyError, TypeError, ValueError):
            raise ValidationError("Each record needs a student_id and a status")
        editor.set_many(changes)

        result = editor.submit()
        return jsonify({"message": "Attendance saved successfully!", **result.to_dict()}), 201
