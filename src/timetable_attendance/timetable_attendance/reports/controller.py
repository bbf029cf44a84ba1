from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date, parse_iso_month
from ..common.http import arg, date_arg, int_arg, json_errors
from ..container import Container
from ..core.exceptions import ValidationError
from .model import ClassScope, Day, Month, PeriodSpec, Range, StaffScope, StudentScope, SubjectScope, Year


def parse_scope(args) -> SubjectScope:
    kind = (args.get("scope") or "").strip().lower()
    if kind == "staff":
        return StaffScope(teacher_id=int_arg("teacher_id", source=args))
    if kind == "student":
        return StudentScope(student_id=int_arg("student_id", source=args))
    if kind == "class":
        return ClassScope(
            class_group=arg("class_group", source=args),
            subject_name=arg("subject_name", required=False, source=args),
            teacher_id=int_arg("teacher_id", required=False, source=args),
        )
    raise ValidationError("scope must be one of staff, class, student")


def parse_period_spec(args, clock) -> PeriodSpec:
    """daily|monthly|yearly|custom; missing targets default to the clock's today."""

    period = (args.get("period") or args.get("viewMode") or "daily").strip().lower()
    try:
        if period == "daily":
            value = args.get("date") or args.get("targetDate")
            return Day(parse_iso_date(value)) if value else Day.today(clock)
        if period == "monthly":
            value = args.get("month") or args.get("targetMonth")
            return Month(*parse_iso_month(value)) if value else Month.current(clock)
        if period == "yearly":
            value = args.get("year") or args.get("targetYear")
            return Year(int(value)) if value else Year.current(clock)
        if period == "custom":
            start = args.get("start") or args.get("startDate")
            end = args.get("end") or args.get("endDate")
            if not start or not end:
                raise ValidationError("custom reports need a start and an end date")
            return Range(parse_iso_date(start), parse_iso_date(end))
    except ValueError:
        raise ValidationError("Invalid report date")
    raise ValidationError("period must be one of daily, monthly, yearly, custom")


def register(app: Flask, container: Container) -> None:
    aggregator = container.attendance_aggregator

    @app.route("/api/attendance/report", methods=["GET"], endpoint="api_attendance_report")
    @json_errors
    def report():
        scope = parse_scope(request.args)
        spec = parse_period_spec(request.args, aggregator.clock)
        return jsonify(aggregator.summarize(scope, spec).to_dict())

    @app.route("/api/teacher-attendance/report/<int:teacher_id>", methods=["GET"], endpoint="api_teacher_report")
    @json_errors
    def teacher_report(teacher_id: int):
        spec = parse_period_spec(request.args, aggregator.clock)
        return jsonify(aggregator.summarize(StaffScope(teacher_id=teacher_id), spec).to_dict())

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_attendance_history")
    @json_errors
    def history():
        scope = parse_scope(request.args)
        start, end = Range(date_arg("start"), date_arg("end")).bounds()
        rows = container.history_repo.list_history(scope, start=start, end=end)
        return jsonify(
            [
                {
                    "date": r.date.isoformat(),
                    "status": r.status.value if r.status else None,
                    "student_id": r.student_id,
                    "full_name": r.full_name,
                }
                for r in rows
            ]
        )

    @app.route("/api/students", methods=["GET"], endpoint="api_class_students")
    @json_errors
    def class_students():
        students = container.history_repo.list_class_students(arg("class_group"))
        return jsonify([{"id": s.student_id, "full_name": s.full_name} for s in students])
