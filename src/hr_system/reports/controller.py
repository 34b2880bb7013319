from __future__ import annotations

from datetime import date
from typing import Optional

from flask import Flask
from pydantic import BaseModel, Field

from ..common.web import ok, parse_query, role_required
from ..container import Container
from ..core.constants import APPROVER_ROLES
from .service import ReportData


class PeriodQuery(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class RequiredPeriodQuery(BaseModel):
    start_date: date
    end_date: date


class MonthQuery(BaseModel):
    payroll_month: str = Field(pattern=r"^\d{4}-(0[1-9]|1[0-2])$")


def _payload(report: ReportData) -> dict:
    return {"rows": report.rows, "summary": report.summary, **report.groups}


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    @app.route("/api/reports/headcount", methods=["GET"], endpoint="report_headcount")
    @role_required(*APPROVER_ROLES)
    def headcount():
        return ok(_payload(service.headcount()))

    @app.route("/api/reports/attendance", methods=["GET"], endpoint="report_attendance")
    @role_required(*APPROVER_ROLES)
    def attendance():
        query = parse_query(RequiredPeriodQuery)
        return ok(_payload(service.attendance_summary(query.start_date, query.end_date)))

    @app.route("/api/reports/leave", methods=["GET"], endpoint="report_leave")
    @role_required(*APPROVER_ROLES)
    def leave():
        query = parse_query(PeriodQuery)
        return ok(_payload(service.leave_utilization(query.start_date, query.end_date)))

    @app.route("/api/reports/payroll", methods=["GET"], endpoint="report_payroll")
    @role_required(*APPROVER_ROLES)
    def payroll():
        query = parse_query(MonthQuery)
        return ok(_payload(service.payroll_summary(query.payroll_month)))
