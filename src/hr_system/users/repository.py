from __future__ import annotations

from typing import Optional, Protocol

from .model import UserAccount


class UserRepository(Protocol):
    def get_by_username(self, username: str) -> Optional[UserAccount]:
        raise NotImplementedError
