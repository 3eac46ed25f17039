import pandas as pd
import streamlit as st

from taskweb.context import get_context, get_view
from taskweb.guards import capability_guard, require_login
from taskweb.models import COMPLETED, IN_PROGRESS, STATE_LABELS, TASK_STATES
from taskweb.ui.header import kpi, render_header, render_sidebar
from taskweb.ui.notify import flush_notices, queue_notice
from taskweb.ui.theme import set_theme
from taskweb.views import DashboardView, TaskForm

ctx = get_context()
set_theme(page_title="Mis Tareas", page_icon="📋")
require_login(ctx.store)

view = get_view("dashboard", lambda: DashboardView(ctx.store, ctx.tasks))
if flush_notices([view.ensure_loaded()]):
    require_login(ctx.store)

render_header(ctx.store, ctx.config.app_title)
render_sidebar(ctx.store)


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


# ----- Stats -----
summary = view.stats()
c1, c2, c3 = st.columns(3)
with c1:
    kpi("Total de Tareas", summary.total)
with c2:
    kpi("En Progreso", summary.count(IN_PROGRESS))
with c3:
    kpi("Completadas", summary.count(COMPLETED))

st.write("")

# ----- Actions bar -----
sc1, sc2 = st.columns([0.8, 0.2])
with sc1:
    search = st.text_input("Buscar mis tareas...", key="dash-search", label_visibility="collapsed", placeholder="Buscar mis tareas...")
with sc2:
    if st.button("🔄 Recargar", use_container_width=True):
        queue_notice(view.load())
        st.rerun()


def _create_form():
    with st.expander("➕ Nueva Tarea Personal"):
        with st.form("create-task-form", clear_on_submit=False):
            title = st.text_input("Título")
            description = st.text_area("Descripción")
            state = _state_select("Estado", "create-state")
            if st.form_submit_button("Crear tarea"):
                notice = view.create_personal_task(TaskForm(title=title, description=description, state=state))
                _act(notice)


capability_guard(ctx.store, _create_form, permission="create")

# ----- Tasks table -----
st.subheader("Mis Tareas Asignadas")
st.caption("Solo puedes ver y editar las tareas que te han sido asignadas")

tasks = view.filtered(search)
if not tasks:
    st.info("No tienes tareas asignadas." if not search else "No hay tareas que coincidan con la búsqueda.")
else:
    df = pd.DataFrame([t.to_record() for t in tasks])
    df["usuarios"] = df["assigned_users"].apply(lambda names: ", ".join(names))
    st.dataframe(
        df[["title", "description", "created_at", "status_label", "usuarios"]].rename(
            columns={
                "title": "Título",
                "description": "Descripción",
                "created_at": "Fecha Creación",
                "status_label": "Estado",
                "usuarios": "Usuarios Asignados",
            }
        ),
        use_container_width=True,
        hide_index=True,
    )


def _edit_section():
    st.subheader("Editar tarea")
    options = {t.id: t.title for t in view.tasks}
    task_id = st.selectbox("Tarea", list(options), format_func=lambda i: options[i], key="edit-task-id")
    task = view.find(task_id)
    if task is None:
        return

    edit_tab, state_tab = st.tabs(["✏️ Editar", "⚙️ Cambiar estado"])
    with edit_tab:
        with st.form(f"edit-task-form-{task.id}"):
            title = st.text_input("Título", value=task.title)
            description = st.text_area("Descripción", value=task.description)
            state = _state_select("Estado", f"edit-state-{task.id}", task.state)
            if st.form_submit_button("Guardar cambios"):
                _act(view.save_edit(task.id, TaskForm(title=title, description=description, state=state)))
    with state_tab:
        st.markdown(f"Estado actual: **{task.status_label}**")
        with st.form(f"state-task-form-{task.id}"):
            state = _state_select("Nuevo estado", f"new-state-{task.id}", task.state)
            if st.form_submit_button("Actualizar estado"):
                _act(view.save_state(task.id, state))


if view.tasks:
    capability_guard(ctx.store, _edit_section, permission="update")
