"""Timetable & Attendance package.

Organized by feature modules (timetable, attendance, reports, ...) with a thin
Flask controller layer over service/repository layers.
"""
