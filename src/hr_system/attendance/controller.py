from __future__ import annotations

from dataclasses import asdict

from flask import Flask

from ..common.datetime_utils import now_utc
from ..common.web import current_actor, login_required, ok, own_employee_id, parse_body, parse_query, require_employee, role_required
from ..container import Container
from ..core.constants import HR_ADMIN_ROLES
from ..core.exceptions import ValidationError
from .schemas import AttendanceQuery, AttendanceReportQuery, CheckInIn, CheckOutIn, MarkAbsencesIn


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def check_in():
        employee_id = require_employee(current_actor())
        body = parse_body(CheckInIn)
        record = service.check_in(employee_id, now_utc(), location=body.to_point())
        return ok(record.to_dict(), message="Checked in successfully", status=201)

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def check_out():
        employee_id = require_employee(current_actor())
        body = parse_body(CheckOutIn)
        now = now_utc()
        work_date = body.work_date or service.get_work_date(now)
        record = service.check_out(employee_id, work_date, now, location=body.to_point())
        return ok(record.to_dict(), message="Checked out successfully")

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        employee_id = require_employee(current_actor())
        work_date = service.get_work_date(now_utc())
        record = service.get_record(employee_id, work_date)
        return ok({"work_date": work_date.isoformat(), "record": record.to_dict() if record else None})

    @app.route("/api/attendance/mark-absences", methods=["POST"], endpoint="attendance_mark_absences")
    @role_required(*HR_ADMIN_ROLES)
    def mark_absences():
        body = parse_body(MarkAbsencesIn)
        work_date = body.work_date or service.get_work_date(now_utc())
        created = service.mark_absences(work_date)
        return ok({"work_date": work_date.isoformat(), "created": created})

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @login_required
    def list_records():
        query = parse_query(AttendanceQuery)
        employee_id = own_employee_id(current_actor(), query.employee_id)
        records = service.list_records(
            employee_id=employee_id,
            start_date=query.start_date,
            end_date=query.end_date,
            status=query.status,
            limit=query.limit,
        )
        return ok([r.to_dict() for r in records])

    @app.route("/api/attendance/report", methods=["GET"], endpoint="attendance_report")
    @login_required
    def report():
        query = parse_query(AttendanceReportQuery)
        if query.start_date > query.end_date:
            raise ValidationError("start_date must be on or before end_date")
        employee_id = own_employee_id(current_actor(), query.employee_id)
        result = service.build_report(query.start_date, query.end_date, employee_id=employee_id)
        return ok(
            {
                "records": [r.to_dict() for r in result.records],
                "statistics": asdict(result.statistics),
            }
        )
