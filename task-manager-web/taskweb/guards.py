"""Render-time gates for the Streamlit pages.

``require_login`` runs once at the top of a page script. ``capability_guard``
is evaluated wherever a widget or section should only appear for sessions
holding a permission or role. Both take the store explicitly; neither keeps
state of its own.
"""

from __future__ import annotations

from typing import Callable, Optional, Tuple, TypeVar

import streamlit as st

from taskweb import permissions
from taskweb.session import SessionStore

T = TypeVar("T")

LOGIN_PAGE = "app.py"


def _redirect_to_login() -> None:
    st.switch_page(LOGIN_PAGE)
    st.stop()


def require_login(store: SessionStore, *, redirect: Optional[Callable[[], None]] = None) -> bool:
    """Return True when a session exists; otherwise send the user to the login page.

    With the default redirect the script run ends here. A custom ``redirect``
    is called instead and the function returns False so the caller can bail.
    """
    if store.is_authenticated():
        return True
    (redirect or _redirect_to_login)()
    return False


def satisfies(store: SessionStore, *, permission: Optional[str] = None, role: Optional[str] = None) -> bool:
    if permission and not store.has_permission(permission):
        return False
    if role and not store.has_role(role):
        return False
    return True


def capability_guard(
    store: SessionStore,
    render: Callable[[], T],
    *,
    permission: Optional[str] = None,
    role: Optional[str] = None,
    fallback: Optional[Callable[[], T]] = None,
) -> Optional[T]:
    """Call ``render`` when the session meets every given requirement, else ``fallback``."""
    if satisfies(store, permission=permission, role=role):
        return render()
    if fallback is not None:
        return fallback()
    return None


class Permissions:
    """Shorthand checks for the current session, used to show or hide controls."""

    def __init__(self, store: SessionStore) -> None:
        self.store = store

    def has_permission(self, verb: str) -> bool:
        return self.store.has_permission(verb)

    def has_role(self, name: str) -> bool:
        return self.store.has_role(name)

    def roles(self) -> Tuple[str, ...]:
        return self.store.get_user_roles()

    def can_create(self) -> bool:
        return self.has_permission("create")

    def can_update(self) -> bool:
        return self.has_permission("update")

    def can_delete(self) -> bool:
        return self.has_permission("delete")

    def can_assign(self) -> bool:
        return self.has_permission("assign")

    def can_manage(self) -> bool:
        return self.has_permission("manage")

    def is_admin(self) -> bool:
        return self.has_role(permissions.ADMIN)

    def is_manager(self) -> bool:
        return self.has_role(permissions.MANAGER)

    def is_employee(self) -> bool:
        return self.has_role(permissions.EMPLOYEE)

    def is_cashier(self) -> bool:
        return self.has_role(permissions.CASHIER)


def render_access_denied(message: str = "Se requiere rol de administrador.") -> None:
    st.error(f"**Acceso Denegado**\n\nNo tienes permisos para acceder a esta página. {message}")
