import plotly.graph_objects as go
import streamlit as st

from taskweb import permissions
from taskweb.context import get_context, get_view
from taskweb.guards import capability_guard, render_access_denied, require_login
from taskweb.models import COMPLETED, IN_PROGRESS, PENDING, STATE_LABELS, TASK_STATES
from taskweb.ui.header import kpi, render_header, render_sidebar, role_badges
from taskweb.ui.notify import flush_notices
from taskweb.ui.theme import set_theme
from taskweb.views import AdminOverview

STATE_COLORS = {PENDING: "#636e72", IN_PROGRESS: "#0984e3", COMPLETED: "#00b894"}

ctx = get_context()
set_theme(page_title="Panel de Administración", page_icon="🛡️")
require_login(ctx.store)


def _page():
    view = get_view("admin-home", lambda: AdminOverview(ctx.store, ctx.tasks, ctx.admin))
    if flush_notices(view.ensure_loaded()):
        require_login(ctx.store)

    render_header(ctx.store, "Panel de Administración")
    render_sidebar(ctx.store)

    profile = ctx.store.get_user_profile()
    with st.container(border=True):
        st.markdown("#### 🛡️ Información del Administrador")
        c1, c2 = st.columns(2)
        with c1:
            st.caption("Nombre")
            st.write(profile.display_name if profile else "")
        with c2:
            st.caption("Email")
            st.write(profile.email if profile else "")
        st.caption("Roles")
        roles_html = role_badges(ctx.store.get_user_roles())
        st.markdown(roles_html or "—", unsafe_allow_html=True)

    summary = view.task_summary
    k1, k2, k3, k4 = st.columns(4)
    with k1:
        kpi("Total Tareas", summary.total, "Sistema completo")
    with k2:
        kpi("Pendientes", summary.count(PENDING), f"{summary.percent(PENDING)}% del total")
    with k3:
        kpi("En Progreso", summary.count(IN_PROGRESS), f"{summary.percent(IN_PROGRESS)}% del total")
    with k4:
        kpi("Completadas", summary.count(COMPLETED), f"{summary.percent(COMPLETED)}% del total")

    ch1, ch2 = st.columns(2)
    with ch1:
        fig_states = go.Figure(
            data=[
                go.Bar(
                    x=[STATE_LABELS[s] for s in TASK_STATES],
                    y=[summary.count(s) for s in TASK_STATES],
                    marker_color=[STATE_COLORS[s] for s in TASK_STATES],
                )
            ]
        )
        fig_states.update_layout(title="Tareas por estado", template="plotly_white", height=320, margin=dict(l=10, r=10, t=40, b=10))
        st.plotly_chart(fig_states, use_container_width=True)
    with ch2:
        stats = view.user_stats
        if stats is not None and stats.users_by_role:
            fig_roles = go.Figure(
                data=[go.Pie(labels=list(stats.users_by_role), values=list(stats.users_by_role.values()), hole=0.45)]
            )
            fig_roles.update_layout(title="Usuarios por rol", template="plotly_white", height=320, margin=dict(l=10, r=10, t=40, b=10))
            st.plotly_chart(fig_roles, use_container_width=True)
        else:
            st.info("Sin datos de usuarios por rol.")

    stats = view.user_stats
    if stats is not None:
        u1, u2, u3, u4 = st.columns(4)
        with u1:
            kpi("Usuarios", stats.total_users)
        with u2:
            kpi("Activos", stats.active_users)
        with u3:
            kpi("Inactivos", stats.inactive_users)
        with u4:
            kpi("Nuevos (7 días)", stats.recent_registrations)

    st.write("")
    a1, a2 = st.columns(2)
    with a1:
        with st.container(border=True):
            st.markdown("#### 👥 Gestión de Usuarios")
            st.caption("Administrar usuarios del sistema, roles y permisos desde una tabla centralizada")
            st.page_link("pages/4_Gestion_de_Usuarios.py", label="Ir a Gestión de Usuarios", icon="➡️")
    with a2:
        with st.container(border=True):
            st.markdown("#### 🗂️ Gestión de Tareas")
            st.caption("Crear, editar y asignar tareas a los usuarios")
            st.page_link("pages/3_Gestion_de_Tareas.py", label="Ir a Gestión de Tareas", icon="➡️")

    st.markdown("#### Resumen de Permisos")
    cols = st.columns(len(permissions.PERMISSIONS))
    for col, (verb, granted) in zip(cols, view.permission_summary()):
        with col:
            st.metric(verb, "✓" if granted else "✗")


capability_guard(ctx.store, _page, role=permissions.ADMIN, fallback=render_access_denied)
