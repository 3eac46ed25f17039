from __future__ import annotations

from typing import List, Optional

from taskweb.errors import TaskWebError
from taskweb.models import STATE_LABELS, TASK_STATES, Task, TaskSummary, filter_tasks, summarize_tasks
from taskweb.services.tasks import TaskService
from taskweb.session import SessionStore
from taskweb.views.common import INVALID_STATE, Notice, after_reload, failure, load_failure, run_action, success
from taskweb.views.forms import TaskForm


class DashboardView:
    """Personal dashboard: the tasks assigned to the logged-in user."""

    def __init__(self, store: SessionStore, tasks: TaskService) -> None:
        self.store = store
        self.service = tasks
        self.tasks: List[Task] = []
        self.loaded = False

    def load(self) -> Optional[Notice]:
        user_id = self.store.get_user_id()
        self.loaded = True
        if not user_id:
            self.tasks = []
            return None
        try:
            self.tasks = self.service.list_tasks_for_user(user_id)
        except TaskWebError as exc:
            self.tasks = []
            return load_failure(exc, "Error al cargar las tareas")
        return None

    def ensure_loaded(self) -> Optional[Notice]:
        return None if self.loaded else self.load()

    def filtered(self, term: str) -> List[Task]:
        return filter_tasks(self.tasks, term)

    def stats(self) -> TaskSummary:
        return summarize_tasks(self.tasks)

    def find(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)

    def _reload_after(self, notice: Notice) -> Notice:
        return after_reload(notice, self.load())

    def create_personal_task(self, form: TaskForm) -> Notice:
        def action() -> Notice:
            user_id = self.store.get_user_id()
            if not user_id:
                return failure("Usuario no autenticado")
            if not form.cleaned_title():
                return failure("El título es obligatorio")
            if form.state not in TASK_STATES:
                return INVALID_STATE
            self.service.create_task(
                title=form.cleaned_title(),
                description=form.cleaned_description(),
                state=form.state,
                user_id=user_id,
            )
            return self._reload_after(success("Tarea creada", "Tu tarea personal ha sido creada exitosamente"))

        return run_action(self.store, action, error_message="Error al crear la tarea", permission="create")

    def save_edit(self, task_id: str, form: TaskForm) -> Notice:
        def action() -> Notice:
            if not form.cleaned_title():
                return failure("El título es obligatorio")
            if form.state not in TASK_STATES:
                return INVALID_STATE
            self.service.update_task(
                task_id,
                title=form.cleaned_title(),
                description=form.cleaned_description(),
                state=form.state,
            )
            return self._reload_after(success("Tarea actualizada", "La tarea ha sido actualizada exitosamente"))

        return run_action(self.store, action, error_message="Error al actualizar la tarea", permission="update")

    def save_state(self, task_id: str, state: str) -> Notice:
        def action() -> Notice:
            if state not in TASK_STATES:
                return INVALID_STATE
            self.service.update_task_state(task_id, state)
            label = STATE_LABELS[state]
            return self._reload_after(success("Estado actualizado", f"La tarea se cambió a {label}"))

        return run_action(self.store, action, error_message="Error al actualizar el estado", permission="update")
