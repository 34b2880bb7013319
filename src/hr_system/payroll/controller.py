from __future__ import annotations

from dataclasses import asdict

from flask import Flask, request

from ..common.web import current_actor, login_required, ok, own_employee_id, parse_body, parse_query, role_required
from ..container import Container
from ..core.constants import APPROVER_ROLES
from .schemas import PayrollCreateIn, PayrollGenerateIn, PayrollQuery, PayrollSummaryQuery, PayrollUpdateIn


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/payroll", methods=["GET"], endpoint="payroll_list")
    @login_required
    def list_payrolls():
        query = parse_query(PayrollQuery)
        employee_id = own_employee_id(current_actor(), query.employee_id)
        rows = service.list_payrolls(employee_id=employee_id, payroll_month=query.payroll_month, status=query.status)
        return ok([p.to_dict() for p in rows])

    @app.route("/api/payroll", methods=["POST"], endpoint="payroll_create")
    @role_required(*APPROVER_ROLES)
    def create_payroll():
        # {"payroll_month": ..., "employee_ids": [...]} without employee_id generates in bulk.
        body = request.get_json(silent=True) or {}
        if "employee_id" not in body:
            generate = parse_body(PayrollGenerateIn)
            result = service.generate_payroll(generate.payroll_month, generate.employee_ids)
            return ok(asdict(result), message="Payroll generated", status=201)

        data = parse_body(PayrollCreateIn)
        payroll = service.create_payroll(
            data.employee_id,
            data.payroll_month,
            data.base_salary,
            allowances=data.allowances,
            bonuses=data.bonuses,
            deductions=data.deductions,
            overtime_pay=data.overtime_pay,
        )
        return ok(payroll.to_dict(), message="Payroll created", status=201)

    @app.route("/api/payroll/summary", methods=["GET"], endpoint="payroll_summary")
    @role_required(*APPROVER_ROLES)
    def payroll_summary():
        query = parse_query(PayrollSummaryQuery)
        return ok(asdict(service.get_payroll_summary(query.payroll_month)))

    @app.route("/api/payroll/<int:payroll_id>", methods=["GET"], endpoint="payroll_get")
    @login_required
    def get_payroll(payroll_id: int):
        payroll = service.get_payroll(payroll_id)
        own_employee_id(current_actor(), payroll.employee_id)
        return ok(payroll.to_dict())

    @app.route("/api/payroll/<int:payroll_id>", methods=["PUT"], endpoint="payroll_update")
    @role_required(*APPROVER_ROLES)
    def update_payroll(payroll_id: int):
        data = parse_body(PayrollUpdateIn)
        payroll = service.update_payroll(
            payroll_id,
            base_salary=data.base_salary,
            allowances=data.allowances,
            bonuses=data.bonuses,
            deductions=data.deductions,
            overtime_pay=data.overtime_pay,
            payment_date=data.payment_date,
            status=data.payroll_status,
        )
        return ok(payroll.to_dict(), message="Payroll updated")

    @app.route("/api/payroll/<int:payroll_id>", methods=["DELETE"], endpoint="payroll_delete")
    @role_required(*APPROVER_ROLES)
    def delete_payroll(payroll_id: int):
        service.delete_payroll(payroll_id)
        return ok(message="Payroll deleted")

    @app.route("/api/payroll/<int:payroll_id>/approve", methods=["PUT"], endpoint="payroll_approve")
    @role_required(*APPROVER_ROLES)
    def approve_payroll(payroll_id: int):
        return ok(service.approve_payroll(payroll_id).to_dict(), message="Payroll approved")
