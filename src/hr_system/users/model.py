from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class UserAccount:
    """Domain entity: login account, optionally linked to an employee."""

    user_id: int
    username: str
    password_hash: str
    role: Role
    employee_id: Optional[int]
    is_active: bool = True


@dataclass(frozen=True)
class Actor:
    """Authenticated identity passed explicitly into service calls."""

    user_id: int
    employee_id: Optional[int]
    role: Role

    def has_role(self, *roles: Role | str) -> bool:
        return self.role.value in {Role(r).value for r in roles}
