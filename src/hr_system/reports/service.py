from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import inclusive_days, is_valid_month
from ..core.enums import AttendanceStatus, LeaveStatus
from ..core.exceptions import ValidationError
from ..employees.repository import DepartmentRepository, EmployeeRepository
from ..leave.repository import LeaveRepository
from ..payroll.repository import PayrollRepository


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: dict
    groups: dict


def _rate(numerator: float, denominator: float) -> float:
    return round(numerator / denominator * 100, 2) if denominator else 0.0


class ReportService:
    """Read-only aggregates over the HR store."""

    def __init__(
        self,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
        attendance: AttendanceRepository,
        leave: LeaveRepository,
        payrolls: PayrollRepository,
    ):
        self._employees = employees
        self._departments = departments
        self._attendance = attendance
        self._leave = leave
        self._payrolls = payrolls

    def _department_names(self) -> dict[int, str]:
        return {d.department_id: d.department_name for d in self._departments.list_all()}

    def headcount(self) -> ReportData:
        active = list(self._employees.list_active())
        names = self._department_names()

        by_department = Counter(e.department_id for e in active)
        by_status = Counter(e.employee_status.value for e in self._employees.list_all())
        by_type = Counter(e.employee_type.value for e in active)

        return ReportData(
            rows=[],
            summary={"total_employees": len(active)},
            groups={
                "by_department": [
                    {
                        "department_id": dept_id,
                        "department_name": names.get(dept_id, "Unknown"),
                        "employee_count": count,
                    }
                    for dept_id, count in sorted(by_department.items(), key=lambda kv: names.get(kv[0], ""))
                ],
                "by_status": [{"employee_status": k, "employee_count": v} for k, v in sorted(by_status.items())],
                "by_type": [{"employee_type": k, "employee_count": v} for k, v in sorted(by_type.items())],
            },
        )

    def attendance_summary(self, start: date, end: date) -> ReportData:
        """Per active employee counts for ``start..end``.

        The rate counts half days as 0.5 against every calendar day in range.
        """
        if start > end:
            raise ValidationError("start_date must be on or before end_date")

        calendar_days = inclusive_days(start, end)
        rows: list[dict] = []
        for employee in self._employees.list_active():
            records = self._attendance.list_records(employee_id=employee.employee_id, start_date=start, end_date=end)
            counts = Counter(r.status for r in records)
            present = counts[AttendanceStatus.PRESENT]
            late = counts[AttendanceStatus.LATE]
            half = counts[AttendanceStatus.HALF_DAY]
            rows.append(
                {
                    "employee_id": employee.employee_id,
                    "employee_code": employee.employee_code,
                    "employee_name": employee.full_name,
                    "total_days": len(records),
                    "present_days": present,
                    "late_days": late,
                    "absent_days": counts[AttendanceStatus.ABSENT],
                    "half_days": half,
                    "total_work_hours": round(sum(r.work_hours or 0.0 for r in records), 2),
                    "attendance_rate": _rate(present + late + half * 0.5, calendar_days),
                }
            )

        average = round(sum(r["attendance_rate"] for r in rows) / len(rows), 2) if rows else 0.0
        return ReportData(
            rows=rows,
            summary={
                "total_employees": len(rows),
                "average_attendance_rate": average,
                "total_absences": sum(r["absent_days"] for r in rows),
                "total_late_arrivals": sum(r["late_days"] for r in rows),
            },
            groups={},
        )

    def leave_utilization(self, start: Optional[date] = None, end: Optional[date] = None) -> ReportData:
        employees = {e.employee_id: e for e in self._employees.list_all()}
        types = {t.leave_type_id: t for t in self._leave.list_leave_types(active_only=False)}

        rows = []
        for balance in self._leave.list_balances():
            employee = employees.get(balance.employee_id)
            leave_type = types.get(balance.leave_type_id)
            rows.append(
                {
                    "employee_id": balance.employee_id,
                    "employee_code": employee.employee_code if employee else "",
                    "employee_name": employee.full_name if employee else "Unknown",
                    "leave_type": leave_type.leave_type_name if leave_type else "Unknown",
                    "year": balance.year,
                    "total_quota": balance.annual_quota,
                    "used_days": balance.used_days,
                    "remaining_days": balance.remaining_days,
                    "utilization_rate": _rate(balance.used_days, balance.annual_quota),
                }
            )

        # Requests are attributed to the period their first day falls in.
        requests = [
            r
            for r in self._leave.list_requests()
            if (start is None or r.start_date >= start) and (end is None or r.start_date <= end)
        ]

        per_type: dict[int, dict] = defaultdict(lambda: {"total_requests": 0, "approved_requests": 0, "total_days_taken": 0})
        for r in requests:
            item = per_type[r.leave_type_id]
            item["total_requests"] += 1
            if r.status == LeaveStatus.APPROVED:
                item["approved_requests"] += 1
                item["total_days_taken"] += r.requested_days

        by_leave_type = []
        for type_id, item in sorted(per_type.items()):
            leave_type = types.get(type_id)
            approved = item["approved_requests"]
            by_leave_type.append(
                {
                    "leave_type_id": type_id,
                    "leave_type_name": leave_type.leave_type_name if leave_type else "Unknown",
                    **item,
                    "average_days_per_request": round(item["total_days_taken"] / approved, 2) if approved else 0.0,
                }
            )

        statuses = Counter(r.status for r in requests)
        return ReportData(
            rows=rows,
            summary={
                "total_leave_requests": len(requests),
                "approved_requests": statuses[LeaveStatus.APPROVED],
                "pending_requests": statuses[LeaveStatus.PENDING],
                "rejected_requests": statuses[LeaveStatus.REJECTED],
                "cancelled_requests": statuses[LeaveStatus.CANCELLED],
            },
            groups={"by_leave_type": by_leave_type},
        )

    def payroll_summary(self, payroll_month: str) -> ReportData:
        if not is_valid_month(payroll_month):
            raise ValidationError("Invalid payroll_month format. Expected YYYY-MM")

        employees = {e.employee_id: e for e in self._employees.list_all()}
        names = self._department_names()
        money = ("base_salary", "allowances", "bonuses", "overtime_pay", "deductions", "net_salary")

        rows = []
        departments: dict[Optional[int], dict] = {}
        for payroll in self._payrolls.list_payrolls(payroll_month=payroll_month):
            employee = employees.get(payroll.employee_id)
            dept_id = employee.department_id if employee else None
            row = {
                "employee_id": payroll.employee_id,
                "employee_code": employee.employee_code if employee else "",
                "employee_name": employee.full_name if employee else "Unknown",
                "department_name": names.get(dept_id, "Unknown"),
                **{field: getattr(payroll, field) for field in money},
            }
            rows.append(row)

            dept = departments.setdefault(
                dept_id,
                {
                    "department_id": dept_id,
                    "department_name": names.get(dept_id, "Unknown"),
                    "employee_count": 0,
                    **{f"total_{field}": 0.0 for field in money},
                },
            )
            dept["employee_count"] += 1
            for field in money:
                dept[f"total_{field}"] = round(dept[f"total_{field}"] + row[field], 2)

        summary = {"total_employees": len(rows)}
        for field in money:
            summary[f"total_{field}"] = round(sum(r[field] for r in rows), 2)

        return ReportData(
            rows=rows,
            summary=summary,
            groups={"by_department": list(departments.values())},
        )
