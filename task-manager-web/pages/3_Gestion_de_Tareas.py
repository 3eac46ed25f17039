import pandas as pd
import streamlit as st

from taskweb import permissions
from taskweb.context import get_context, get_view
from taskweb.guards import Permissions, capability_guard, render_access_denied, require_login
from taskweb.models import STATE_LABELS, TASK_STATES
from taskweb.ui.header import render_header, render_sidebar, state_badge
from taskweb.ui.notify import flush_notices, queue_notice
from taskweb.ui.theme import set_theme
from taskweb.views import AdminTasksView, TaskForm

UNASSIGNED = ""

ctx = get_context()
set_theme(page_title="Gestión de Tareas", page_icon="🗂️")
require_login(ctx.store)


def _act(notice):
    queue_notice(notice)
    st.rerun()


def _state_select(label: str, key: str, current: str = TASK_STATES[0]) -> str:
    return st.selectbox(
        label,
        TASK_STATES,
        index=TASK_STATES.index(current) if current in TASK_STATES else 0,
        format_func=lambda s: STATE_LABELS[s],
        key=key,
    )


def _task_table(tasks):
    df = pd.DataFrame([t.to_record() for t in tasks])
    df["usuarios"] = df["assigned_users"].apply(lambda names: ", ".join(names) or "Sin asignar")
    st.dataframe(
        df[["title", "description", "status_label", "usuarios", "created_at"]].rename(
            columns={
                "title": "Título",
                "description": "Descripción",
                "status_label": "Estado",
                "usuarios": "Usuarios Asignados",
                "created_at": "Fecha Creación",
            }
        ),
        use_container_width=True,
        hide_index=True,
    )


def _page():
    view = get_view("admin-tasks", lambda: AdminTasksView(ctx.store, ctx.tasks, ctx.admin))
    if flush_notices([view.ensure_loaded()]):
        require_login(ctx.store)

    render_header(ctx.store, "Gestión de Tareas", back_page="pages/2_Administracion.py")
    render_sidebar(ctx.store)
    perms = Permissions(ctx.store)

    sc1, sc2 = st.columns([0.8, 0.2])
    with sc1:
        search = st.text_input(
            "Buscar tareas...", key="admin-task-search", label_visibility="collapsed", placeholder="Buscar tareas..."
        )
    with sc2:
        if st.button("🔄 Recargar", use_container_width=True):
            _act(view.load())

    if perms.can_create():
        user_names = {u.id: u.full_name for u in view.users}
        with st.expander("➕ Nueva Tarea"):
            with st.form("admin-create-task"):
                title = st.text_input("Título")
                description = st.text_area("Descripción")
                state = _state_select("Estado", "admin-create-state")
                user_id = st.selectbox(
                    "Asignar a",
                    [UNASSIGNED] + list(user_names),
                    format_func=lambda i: user_names.get(i, "Sin asignar"),
                )
                if st.form_submit_button("Crear tarea"):
                    form = TaskForm(
                        title=title,
                        description=description,
                        state=state,
                        assigned_users=[user_id] if user_id else [],
                    )
                    _act(view.create_task(form))

    tasks = view.filtered(search)
    st.subheader(f"Tareas ({len(tasks)})")
    if tasks:
        _task_table(tasks)
    else:
        st.info("No hay tareas registradas." if not search else "No hay tareas que coincidan con la búsqueda.")
    current = view.current_selection()
    if current is None:
        return

    options = {t.id: t.title for t in view.tasks}
    ids = list(options)
    task_id = st.selectbox(
        "Seleccionar tarea",
        ids,
        index=ids.index(current),
        format_func=lambda i: options[i],
        key="admin-task-select",
    )
    view.select(task_id)
    task = view.selected_task
    if task is None:
        return
    st.markdown(state_badge(task.state, task.status_label), unsafe_allow_html=True)

    edit_tab, assign_tab = st.tabs(["✏️ Editar", "👥 Asignar usuarios"])
    with edit_tab:
        if perms.can_update():
            with st.form(f"admin-edit-task-{task.id}"):
                title = st.text_input("Título", value=task.title)
                description = st.text_area("Descripción", value=task.description)
                state = _state_select("Estado", f"admin-edit-state-{task.id}", task.state)
                if st.form_submit_button("Guardar cambios"):
                    _act(view.save_edit(task.id, TaskForm(title=title, description=description, state=state)))
        else:
            st.caption("No tienes permisos para editar tareas.")

    with assign_tab:
        if not perms.can_assign():
            st.caption("No tienes permisos para asignar usuarios.")
            return
        st.markdown("**Usuarios asignados**")
        if not task.assigned_users:
            st.caption("Sin usuarios asignados")
        for user in task.assigned_users:
            c1, c2 = st.columns([0.8, 0.2])
            with c1:
                st.write(f"{user.full_name} ({user.email})" if user.email else user.full_name)
            with c2:
                if st.button("Quitar", key=f"unassign-{task.id}-{user.id}"):
                    _act(view.remove_user(task.id, user.id))

        candidates = {u.id: f"{u.full_name} ({u.email})" for u in view.assignable_users(task)}
        if not candidates:
            st.caption("Todos los usuarios ya están asignados a esta tarea.")
            return
        with st.form(f"assign-user-{task.id}"):
            user_id = st.selectbox("Agregar usuario", list(candidates), format_func=lambda i: candidates[i])
            if st.form_submit_button("Asignar"):
                _act(view.add_user(task.id, user_id))


capability_guard(ctx.store, _page, role=permissions.ADMIN, fallback=render_access_denied)
