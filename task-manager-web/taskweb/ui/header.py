from __future__ import annotations

import html
from typing import Iterable, Optional

import streamlit as st

from taskweb.context import drop_view
from taskweb.guards import LOGIN_PAGE, Permissions
from taskweb.session import SessionStore


def render_header(store: SessionStore, title: str, *, back_page: Optional[str] = None) -> None:
    """Page title with the user's name, a logout button and optional back link."""
    left, right = st.columns([0.7, 0.3])
    with left:
        if back_page:
            st.page_link(back_page, label="Volver", icon="⬅️")
        st.markdown(f'<div class="tw-header"><h1>{html.escape(title)}</h1></div>', unsafe_allow_html=True)
    with right:
        st.markdown(f'<div class="tw-user">👤 {html.escape(store.get_username())}</div>', unsafe_allow_html=True)
        if st.button("Salir", key="logout-btn"):
            store.logout()
            drop_view()
            st.switch_page(LOGIN_PAGE)


def render_sidebar(store: SessionStore) -> None:
    perms = Permissions(store)
    with st.sidebar:
        st.markdown("### Navegación")
        st.page_link("pages/1_Mis_Tareas.py", label="Mis Tareas", icon="📋")
        if perms.is_admin():
            st.page_link("pages/2_Administracion.py", label="Administración", icon="🛡️")
            st.page_link("pages/3_Gestion_de_Tareas.py", label="Gestión de Tareas", icon="🗂️")
            st.page_link("pages/4_Gestion_de_Usuarios.py", label="Gestión de Usuarios", icon="👥")
        roles = store.get_user_roles()
        if roles:
            st.caption("Roles: " + ", ".join(roles))


def state_badge(state: str, label: str) -> str:
    return f'<span class="tw-badge tw-state-{html.escape(state)}">{html.escape(label)}</span>'


def kpi(label: str, value, sub: str = "") -> None:
    st.markdown(
        f'<div class="tw-kpi"><div class="tw-kpi-label">{html.escape(str(label))}</div>'
        f'<div class="tw-kpi-value">{html.escape(str(value))}</div><div class="tw-kpi-sub">{html.escape(str(sub))}</div></div>',
        unsafe_allow_html=True,
    )


def role_badges(roles: Iterable[str]) -> str:
    return "".join(f'<span class="tw-badge tw-role">{html.escape(r)}</span>' for r in roles)
