from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus, EmployeeType
from .model import Department, Employee, NewEmployee


class EmployeeRepository(Protocol):
    """Employee directory interface.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_active(self, *, employee_ids: Optional[Iterable[int]] = None) -> Sequence[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        """Every non-deleted employee regardless of status."""

        raise NotImplementedError

    def list_employees(
        self,
        *,
        search: Optional[str] = None,
        department_id: Optional[int] = None,
        status: Optional[EmployeeStatus] = None,
        employee_type: Optional[EmployeeType] = None,
    ) -> Sequence[Employee]:
        """``search`` matches code, names and email (case-insensitive substring)."""

        raise NotImplementedError

    def create(self, employee: NewEmployee) -> Optional[Employee]:
        """Returns None when the employee code or email is already taken."""

        raise NotImplementedError

    def update(self, employee: Employee) -> bool:
        """Returns False when the new code or email belongs to another employee."""

        raise NotImplementedError

    def soft_delete(self, employee_id: int) -> bool:
        """Mark the employee deleted and terminated; False if already deleted."""

        raise NotImplementedError


class DepartmentRepository(Protocol):
    def get_by_id(self, department_id: int) -> Optional[Department]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError

    def create(self, department_name: str) -> Optional[Department]:
        """Returns None when the name is already taken."""

        raise NotImplementedError

    def update(self, department: Department) -> bool:
        raise NotImplementedError
