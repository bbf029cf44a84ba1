from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_role, json_errors
from ..container import Container


def register(app: Flask, container: Container) -> None:
    grid = container.timetable_grid

    @app.route("/api/teachers", methods=["GET"], endpoint="api_teachers")
    @json_errors
    def teachers():
        return jsonify(
            [
                {"id": t.id, "full_name": t.full_name, "subjects_taught": sorted(t.subjects_taught)}
                for t in grid.list_teachers()
            ]
        )

    @app.route("/api/timetable/<class_group>", methods=["GET"], endpoint="api_timetable_class")
    @json_errors
    def class_timetable(class_group: str):
        return jsonify([s.to_dict() for s in container.timetable_repo.list_for_class(class_group) if not s.is_free])

    @app.route("/api/timetable/<class_group>/grid", methods=["GET"], endpoint="api_timetable_grid")
    @json_errors
    def class_grid(class_group: str):
        return jsonify([row.to_dict() for row in grid.week_grid(class_group)])

    @app.route("/api/timetable/teacher/<int:teacher_id>", methods=["GET"], endpoint="api_timetable_teacher")
    @json_errors
    def teacher_timetable(teacher_id: int):
        return jsonify([s.to_dict() for s in grid.teacher_week(teacher_id)])

    @app.route("/api/timetable/<class_group>/<day>/<int:period>", methods=["GET"], endpoint="api_timetable_slot")
    @json_errors
    def get_slot(class_group: str, day: str, period: int):
        slot = grid.get_slot(class_group, day, period)
        data = slot.to_dict()
        data["color"] = grid.color_for(slot.subject_name)
        return jsonify(data)

    @app.route("/api/timetable/<class_group>/<day>/<int:period>", methods=["PUT"], endpoint="api_timetable_slot_put")
    @json_errors
    def put_slot(class_group: str, day: str, period: int):
        body = request.get_json(silent=True) or {}
        slot = grid.set_slot(
            class_group,
            day,
            period,
            body.get("subject_name"),
            body.get("teacher_id"),
            current_role=current_role(),
        )
        message = "Slot cleared." if slot.is_free else "Timetable updated successfully!"
        return jsonify({"message": message, "slot": slot.to_dict()})

    @app.route("/api/subjects/<class_group>", methods=["GET"], endpoint="api_subjects_for_class")
    @json_errors
    def subjects_for_class(class_group: str):
        return jsonify(grid.subjects_for_class(class_group))

    @app.route("/api/teacher-assignments/<int:teacher_id>", methods=["GET"], endpoint="api_teacher_assignments")
    @json_errors
    def teacher_assignments(teacher_id: int):
        return jsonify(grid.teacher_assignments(teacher_id))
