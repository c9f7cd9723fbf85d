from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Role(StrEnum):
    CUSTOMER = "customer"
    ADMIN = "admin"


@dataclass(frozen=True)
class CustomerId:
    value: str


@dataclass(frozen=True)
class Identity:
    user_id: CustomerId
    email: str
    name: str
    role: Role = Role.CUSTOMER

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def owns(self, owner_id: CustomerId) -> bool:
        return self.user_id.value == owner_id.value
