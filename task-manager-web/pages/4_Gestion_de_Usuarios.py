import pandas as pd
import streamlit as st

from taskweb import permissions
from taskweb.context import get_context, get_view
from taskweb.guards import capability_guard, render_access_denied, require_login
from taskweb.ui.header import kpi, render_header, render_sidebar
from taskweb.ui.notify import flush_notices, queue_notice
from taskweb.ui.theme import set_theme
from taskweb.views import AdminUsersView, UserForm

ctx = get_context()
set_theme(page_title="Gestión de Usuarios", page_icon="👥")
require_login(ctx.store)

COLUMNS = {
    "nombre": "Nombre",
    "email": "Email",
    "edad": "Edad",
    "roles": "Roles",
    "tareas": "Tareas",
    "creado": "Creado",
}


def _act(notice):
    queue_notice(notice)
    st.rerun()


def _user_table(users):
    df = pd.DataFrame([u.to_record() for u in users])
    st.dataframe(df[list(COLUMNS)].rename(columns=COLUMNS), use_container_width=True, hide_index=True)


def _user_form(view: AdminUsersView, key: str, user=None) -> None:
    creating = user is None
    with st.form(key):
        c1, c2 = st.columns(2)
        with c1:
            first_name = st.text_input("Nombre", value="" if creating else user.first_name)
            email = st.text_input("Email", value="" if creating else user.email)
        with c2:
            last_name = st.text_input("Apellido", value="" if creating else user.last_name)
            age = st.text_input("Edad", value="" if creating or user.age is None else str(user.age))
        password = st.text_input("Contraseña", type="password") if creating else ""
        label = "Crear usuario" if creating else "Guardar cambios"
        if st.form_submit_button(label):
            form = UserForm(first_name=first_name, last_name=last_name, email=email, age=age, password=password)
            _act(view.save_user(form, None if creating else user.id))


def _page():
    view = get_view("admin-users", lambda: AdminUsersView(ctx.store, ctx.admin))
    if flush_notices([view.ensure_loaded()]):
        require_login(ctx.store)

    render_header(ctx.store, "Gestión de Usuarios", back_page="pages/2_Administracion.py")
    render_sidebar(ctx.store)

    k1, k2, k3 = st.columns(3)
    with k1:
        kpi("Usuarios activos", len(view.users))
    with k2:
        kpi("Usuarios eliminados", len(view.deleted_users))
    with k3:
        kpi("Administradores", sum(1 for u in view.users if permissions.ADMIN in u.roles))

    sc1, sc2 = st.columns([0.8, 0.2])
    with sc1:
        search = st.text_input(
            "Buscar usuarios...", key="admin-user-search", label_visibility="collapsed", placeholder="Buscar usuarios..."
        )
    with sc2:
        if st.button("🔄 Recargar", use_container_width=True):
            _act(view.load())

    with st.expander("➕ Nuevo Usuario"):
        _user_form(view, "create-user-form")

    active_tab, deleted_tab = st.tabs(["👥 Usuarios activos", "🗑️ Usuarios eliminados"])

    with active_tab:
        users = view.filtered(search)
        if not users:
            st.info("No hay usuarios registrados." if not search else "No hay usuarios que coincidan con la búsqueda.")
        else:
            _user_table(users)

        if view.users:
            options = {u.id: f"{u.full_name} ({u.email})" for u in view.users}
            user_id = st.selectbox("Seleccionar usuario", list(options), format_func=lambda i: options[i])
            user = view.find(user_id)
            if user is not None:
                edit_tab, role_tab, delete_tab = st.tabs(["✏️ Editar", "🔑 Rol", "🗑️ Eliminar"])
                with edit_tab:
                    _user_form(view, f"edit-user-form-{user.id}", user)
                with role_tab:
                    st.markdown(f"Rol actual: **{user.current_role or 'Sin rol'}**")
                    roles = list(permissions.ROLES)
                    index = roles.index(user.current_role) if user.current_role in roles else 0
                    with st.form(f"role-form-{user.id}"):
                        role_name = st.selectbox("Rol", roles, index=index)
                        if st.form_submit_button("Guardar rol"):
                            _act(view.save_role(user.id, role_name))
                with delete_tab:
                    confirm = st.checkbox(
                        f"Confirmo que deseo eliminar a {user.full_name}", key=f"confirm-delete-{user.id}"
                    )
                    if st.button("Eliminar usuario", disabled=not confirm, key=f"delete-{user.id}"):
                        _act(view.delete_user(user.id))

    with deleted_tab:
        if not view.deleted_users:
            st.info("No hay usuarios eliminados.")
        else:
            _user_table(view.deleted_users)
            options = {u.id: f"{u.full_name} ({u.email})" for u in view.deleted_users}
            with st.form("restore-user-form"):
                user_id = st.selectbox("Usuario a restaurar", list(options), format_func=lambda i: options[i])
                if st.form_submit_button("Restaurar"):
                    _act(view.restore_user(user_id))


capability_guard(ctx.store, _page, role=permissions.ADMIN, fallback=render_access_denied)
