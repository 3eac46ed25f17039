from __future__ import annotations

from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping

ADMIN = "Administrador"
MANAGER = "Gerente"
EMPLOYEE = "Empleado"
CASHIER = "Cajero"

ROLES = (ADMIN, MANAGER, EMPLOYEE, CASHIER)

PERMISSIONS = ("create", "read", "update", "delete", "assign", "manage", "admin")

ROLE_PERMISSIONS: Mapping[str, FrozenSet[str]] = MappingProxyType(
    {
        ADMIN: frozenset({"create", "read", "update", "delete", "assign", "admin"}),
        MANAGER: frozenset({"create", "read", "update", "assign", "manage"}),
        EMPLOYEE: frozenset({"read", "update", "create"}),
        CASHIER: frozenset({"read", "update"}),
    }
)


def resolve(roles: Iterable[str], verb: str) -> bool:
    """True iff at least one of ``roles`` grants ``verb``. Unknown roles grant nothing."""
    return any(verb in ROLE_PERMISSIONS.get(role, frozenset()) for role in roles)


def permissions_for(roles: Iterable[str]) -> FrozenSet[str]:
    granted: set[str] = set()
    for role in roles:
        granted |= ROLE_PERMISSIONS.get(role, frozenset())
    return frozenset(granted)
