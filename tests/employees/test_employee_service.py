from __future__ import annotations

from datetime import date

import pytest

from hr_system.core.enums import DepartmentStatus, EmployeeStatus, EmployeeType
from hr_system.core.exceptions import ConflictError, NotFoundError, ValidationError
from hr_system.employees.service import EmployeeService


@pytest.fixture
def service(employees, departments):
    return EmployeeService(employees, departments)


def test_create_employee(service, employees):
    employee = service.create_employee(
        employee_code=" E010 ",
        first_name="Meas",
        last_name="Bopha",
        email="Bopha@Acme.com.kh",
        department_id=20,
        employee_type=EmployeeType.CONTRACT,
        salary_amount=950,
        hire_date=date(2024, 3, 1),
    )

    assert employee.employee_id == 5
    assert employee.employee_code == "E010"
    assert employee.email == "bopha@acme.com.kh"
    assert employee.employee_status == EmployeeStatus.ACTIVE
    assert employees.list_active(employee_ids=[5]) == [employee]


def test_create_employee_rejects_duplicate_code(service):
    with pytest.raises(ConflictError):
        service.create_employee(employee_code="E001", first_name="A", last_name="B")


def test_create_employee_rejects_duplicate_email(service):
    service.create_employee(employee_code="E010", first_name="A", last_name="B", email="a@acme.com.kh")
    with pytest.raises(ConflictError):
        service.create_employee(employee_code="E011", first_name="C", last_name="D", email="A@acme.com.kh")


def test_create_employee_requires_active_department(service):
    archive = service.create_department("Archive")
    service.delete_department(archive.department_id)

    for department_id in (99, archive.department_id):
        with pytest.raises(ValidationError):
            service.create_employee(employee_code="E010", first_name="A", last_name="B", department_id=department_id)


def test_create_employee_requires_names_and_non_negative_salary(service):
    with pytest.raises(ValidationError):
        service.create_employee(employee_code="E010", first_name="  ", last_name="B")
    with pytest.raises(ValidationError):
        service.create_employee(employee_code="E010", first_name="A", last_name="B", salary_amount=-1)


def test_update_employee(service):
    updated = service.update_employee(2, salary_amount=900, employee_status=EmployeeStatus.INACTIVE, position=None)

    assert updated.salary_amount == 900
    assert updated.employee_status == EmployeeStatus.INACTIVE
    assert updated.first_name == "Chan"


def test_update_employee_code_taken(service):
    with pytest.raises(ConflictError):
        service.update_employee(2, employee_code="E001")


def test_update_unknown_employee(service):
    with pytest.raises(NotFoundError):
        service.update_employee(99, first_name="X")


def test_delete_employee_is_soft(service, employees):
    service.delete_employee(1)

    with pytest.raises(NotFoundError):
        service.get_employee(1)
    with pytest.raises(NotFoundError):
        service.delete_employee(1)
    assert employees.employees[1].employee_status == EmployeeStatus.TERMINATED
    assert [e.employee_id for e in employees.list_active()] == [2, 3]


def test_list_employees_filters(service):
    assert [e.employee_id for e in service.list_employees(search="son")] == []
    assert [e.employee_id for e in service.list_employees(search="dara")] == [1]
    assert [e.employee_id for e in service.list_employees(department_id=20)] == [3, 4]
    assert [e.employee_id for e in service.list_employees(status=EmployeeStatus.TERMINATED)] == [4]
    assert [e.employee_id for e in service.list_employees(employee_type=EmployeeType.PART_TIME)] == [2]


def test_department_lifecycle(service):
    department = service.create_department("Operations")
    assert department.department_status == DepartmentStatus.ACTIVE

    with pytest.raises(ConflictError):
        service.create_department("Finance")
    with pytest.raises(ConflictError):
        service.update_department(department.department_id, department_name="Engineering")

    renamed = service.update_department(department.department_id, department_name="Ops")
    assert renamed.department_name == "Ops"

    service.delete_department(department.department_id)
    assert "Ops" not in {d.department_name for d in service.list_departments()}
    assert "Ops" in {d.department_name for d in service.list_departments(include_inactive=True)}


def test_department_with_active_employees_cannot_be_deleted(service):
    with pytest.raises(ValidationError):
        service.delete_department(10)

    # Only employee 3 is active in Finance; employee 4 is terminated.
    service.update_employee(3, department_id=10)
    service.delete_department(20)
    assert service.get_department(20).department_status == DepartmentStatus.INACTIVE
