from __future__ import annotations

from dataclasses import dataclass, field
from typing import AbstractSet, FrozenSet

from .models import TodoEntity

ADMIN_ROLE = "ADMIN"
USER_ROLE = "USER"


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Caller:
    """
    Authenticated subject of a request: its identity and granted roles.
    Resolved by the HTTP layer and passed into every service operation.
    """
    identity: str
    roles: FrozenSet[str] = field(default_factory=lambda: frozenset({USER_ROLE}))

    @property
    def is_admin(self) -> bool:
        return is_admin(self.roles)


def is_admin(roles: AbstractSet[str]) -> bool:
    return ADMIN_ROLE in roles


# PUBLIC_INTERFACE
def can_view(caller: str, roles: AbstractSet[str], record: TodoEntity) -> bool:
    """True when the caller owns the record or holds the admin role."""
    return is_admin(roles) or record["owner_id"] == caller


# PUBLIC_INTERFACE
def can_mutate(caller: str, roles: AbstractSet[str], record: TodoEntity) -> bool:
    """True when the caller owns the record or holds the admin role."""
    return is_admin(roles) or record["owner_id"] == caller


# PUBLIC_INTERFACE
def owns(caller: str, record: TodoEntity) -> bool:
    """
    True when the caller created the record. Personal record operations
    (get, update, delete, toggle) use this rule for every role, admins
    included.
    """
    return record["owner_id"] == caller
