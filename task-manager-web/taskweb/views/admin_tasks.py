from __future__ import annotations

from typing import List, Optional

from taskweb.errors import TaskWebError
from taskweb.models import TASK_STATES, AdminUser, Task, filter_tasks
from taskweb.services.admin import AdminService
from taskweb.services.tasks import TaskService
from taskweb.session import SessionStore
from taskweb.views.common import INVALID_STATE, Notice, after_reload, failure, load_failure, run_action, success
from taskweb.views.forms import TaskForm


class AdminTasksView:
    """Task administration: every task, plus assignment of users to tasks."""

    def __init__(self, store: SessionStore, tasks: TaskService, admin: AdminService) -> None:
        self.store = store
        self.service = tasks
        self.admin = admin
        self.tasks: List[Task] = []
        self.users: List[AdminUser] = []
        self.selected_task_id: Optional[str] = None
        self.loaded = False

    def load(self) -> Optional[Notice]:
        self.loaded = True
        try:
            self.tasks = self.service.list_tasks()
            self.users = self.admin.list_users()
        except TaskWebError as exc:
            return load_failure(exc, "Error al cargar los datos")
        return None

    def ensure_loaded(self) -> Optional[Notice]:
        return None if self.loaded else self.load()

    def filtered(self, term: str) -> List[Task]:
        return filter_tasks(self.tasks, term)

    def find(self, task_id: Optional[str]) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)

    @property
    def selected_task(self) -> Optional[Task]:
        return self.find(self.selected_task_id)

    def select(self, task_id: Optional[str]) -> None:
        self.selected_task_id = task_id

    def current_selection(self) -> Optional[str]:
        """Selected task id, or the first task's. The search filter never narrows it."""
        if self.find(self.selected_task_id) is not None:
            return self.selected_task_id
        return self.tasks[0].id if self.tasks else None

    def assignable_users(self, task: Task) -> List[AdminUser]:
        assigned = set(task.assigned_user_ids)
        return [u for u in self.users if u.id not in assigned]

    def _reload_after(self, notice: Notice) -> Notice:
        return after_reload(notice, self.load())

    def create_task(self, form: TaskForm) -> Notice:
        def action() -> Notice:
            if not form.cleaned_title():
                return failure("El título es obligatorio")
            if form.state not in TASK_STATES:
                return INVALID_STATE
            self.service.create_task(
                title=form.cleaned_title(),
                description=form.cleaned_description(),
                state=form.state,
                user_id=form.assigned_users[0] if form.assigned_users else None,
            )
            return self._reload_after(success("Tarea creada", "La tarea ha sido creada exitosamente"))

        return run_action(self.store, action, error_message="Error al guardar la tarea", permission="create")

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

        return run_action(self.store, action, error_message="Error al guardar la tarea", permission="update")

    def add_user(self, task_id: str, user_id: str) -> Notice:
        def action() -> Notice:
            if not user_id:
                return failure("Selecciona un usuario")
            task = self.find(task_id)
            if task is not None and task.is_assigned(user_id):
                return success("Sin cambios", "El usuario ya está asignado a la tarea")
            self.service.assign_user(task_id, user_id)
            return self._reload_after(success("Usuario asignado", "El usuario ha sido asignado a la tarea exitosamente"))

        return run_action(
            self.store, action, error_message="Error al asignar el usuario a la tarea", permission="assign"
        )

    def remove_user(self, task_id: str, user_id: str) -> Notice:
        def action() -> Notice:
            self.service.unassign_user(task_id, user_id)
            return self._reload_after(success("Usuario removido", "El usuario ha sido removido de la tarea exitosamente"))

        return run_action(
            self.store, action, error_message="Error al remover el usuario de la tarea", permission="assign"
        )
