from __future__ import annotations

from flask import Flask

from ..common.web import current_actor, login_required, ok, own_employee_id, parse_body, parse_query, role_required
from ..container import Container
from ..core.constants import APPROVER_ROLES, HR_ADMIN_ROLES
from .schemas import (
    DepartmentIn,
    DepartmentQuery,
    DepartmentUpdateIn,
    EmployeeCreateIn,
    EmployeeQuery,
    EmployeeUpdateIn,
)


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @role_required(*APPROVER_ROLES)
    def list_employees():
        query = parse_query(EmployeeQuery)
        rows = service.list_employees(
            search=query.search,
            department_id=query.department_id,
            status=query.employee_status,
            employee_type=query.employee_type,
        )
        return ok([e.to_dict() for e in rows])

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @role_required(*HR_ADMIN_ROLES)
    def create_employee():
        data = parse_body(EmployeeCreateIn)
        employee = service.create_employee(**data.model_dump())
        return ok(employee.to_dict(), message="Employee created", status=201)

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="employees_get")
    @login_required
    def get_employee(employee_id: int):
        own_employee_id(current_actor(), employee_id)
        return ok(service.get_employee(employee_id).to_dict())

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="employees_update")
    @role_required(*HR_ADMIN_ROLES)
    def update_employee(employee_id: int):
        data = parse_body(EmployeeUpdateIn)
        employee = service.update_employee(employee_id, **data.model_dump(exclude_none=True))
        return ok(employee.to_dict(), message="Employee updated")

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="employees_delete")
    @role_required(*HR_ADMIN_ROLES)
    def delete_employee(employee_id: int):
        service.delete_employee(employee_id)
        return ok(message="Employee deleted")

    @app.route("/api/departments", methods=["GET"], endpoint="departments_list")
    @login_required
    def list_departments():
        query = parse_query(DepartmentQuery)
        return ok([d.to_dict() for d in service.list_departments(include_inactive=query.include_inactive)])

    @app.route("/api/departments", methods=["POST"], endpoint="departments_create")
    @role_required(*HR_ADMIN_ROLES)
    def create_department():
        data = parse_body(DepartmentIn)
        return ok(service.create_department(data.department_name).to_dict(), message="Department created", status=201)

    @app.route("/api/departments/<int:department_id>", methods=["GET"], endpoint="departments_get")
    @login_required
    def get_department(department_id: int):
        return ok(service.get_department(department_id).to_dict())

    @app.route("/api/departments/<int:department_id>", methods=["PUT"], endpoint="departments_update")
    @role_required(*HR_ADMIN_ROLES)
    def update_department(department_id: int):
        data = parse_body(DepartmentUpdateIn)
        department = service.update_department(
            department_id,
            department_name=data.department_name,
            status=data.department_status,
        )
        return ok(department.to_dict(), message="Department updated")

    @app.route("/api/departments/<int:department_id>", methods=["DELETE"], endpoint="departments_delete")
    @role_required(*HR_ADMIN_ROLES)
    def delete_department(department_id: int):
        service.delete_department(department_id)
        return ok(message="Department deleted")
