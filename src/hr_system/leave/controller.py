from __future__ import annotations

from flask import Flask

from ..common.web import current_actor, login_required, ok, own_employee_id, parse_body, parse_query, require_employee
from ..container import Container
from ..core.exceptions import NotFoundError
from .schemas import BalanceQuery, LeaveQuery, LeaveRequestIn, LeaveTypeQuery, RejectIn


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leave", methods=["GET"], endpoint="leave_list")
    @login_required
    def list_requests():
        query = parse_query(LeaveQuery)
        employee_id = own_employee_id(current_actor(), query.employee_id)
        requests = service.list_leave_requests(
            employee_id=employee_id,
            status=query.status,
            start_date=query.start_date,
            end_date=query.end_date,
        )
        return ok([r.to_dict() for r in requests])

    @app.route("/api/leave", methods=["POST"], endpoint="leave_create")
    @login_required
    def create_request():
        actor = current_actor()
        body = parse_body(LeaveRequestIn)
        employee_id = own_employee_id(actor, body.employee_id) or require_employee(actor)
        request = service.create_leave_request(
            employee_id,
            body.leave_type_id,
            body.start_date,
            body.end_date,
            body.reason,
        )
        return ok(request.to_dict(), message="Leave request submitted", status=201)

    @app.route("/api/leave/<int:request_id>", methods=["GET"], endpoint="leave_get")
    @login_required
    def get_request(request_id: int):
        request = service.get_leave_request(request_id)
        if request is None:
            raise NotFoundError("Leave request not found")
        own_employee_id(current_actor(), request.employee_id)
        return ok(request.to_dict())

    @app.route("/api/leave/<int:request_id>", methods=["DELETE"], endpoint="leave_cancel")
    @login_required
    def cancel_request(request_id: int):
        requester_id = require_employee(current_actor())
        request = service.cancel_leave_request(request_id, requester_id)
        return ok(request.to_dict(), message="Leave request cancelled")

    @app.route("/api/leave/<int:request_id>/approve", methods=["PUT"], endpoint="leave_approve")
    @login_required
    def approve_request(request_id: int):
        request = service.approve_leave_request(request_id, current_actor())
        return ok(request.to_dict(), message="Leave request approved")

    @app.route("/api/leave/<int:request_id>/reject", methods=["PUT"], endpoint="leave_reject")
    @login_required
    def reject_request(request_id: int):
        body = parse_body(RejectIn)
        request = service.reject_leave_request(request_id, current_actor(), body.rejection_reason)
        return ok(request.to_dict(), message="Leave request rejected")

    @app.route("/api/leave/balance", methods=["GET"], endpoint="leave_balance")
    @login_required
    def balances():
        actor = current_actor()
        query = parse_query(BalanceQuery)
        employee_id = own_employee_id(actor, query.employee_id) or require_employee(actor)
        rows = service.get_employee_leave_balances(employee_id, query.year)
        return ok([b.to_dict() for b in rows])

    @app.route("/api/leave-types", methods=["GET"], endpoint="leave_types")
    @login_required
    def leave_types():
        query = parse_query(LeaveTypeQuery)
        return ok([t.to_dict() for t in service.list_leave_types(active_only=not query.include_inactive)])
