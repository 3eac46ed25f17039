from __future__ import annotations

from typing import List, Optional

from taskweb import permissions
from taskweb.errors import TaskWebError
from taskweb.models import TaskSummary, UserStats, summarize_tasks
from taskweb.services.admin import AdminService
from taskweb.services.tasks import TaskService
from taskweb.session import SessionStore
from taskweb.views.common import Notice, load_failure


class AdminOverview:
    """Numbers for the admin landing page."""

    def __init__(self, store: SessionStore, tasks: TaskService, admin: AdminService) -> None:
        self.store = store
        self.tasks = tasks
        self.admin = admin
        self.task_summary = TaskSummary()
        self.user_stats: Optional[UserStats] = None
        self.loaded = False

    def load(self) -> List[Notice]:
        self.loaded = True
        notices: List[Notice] = []
        try:
            self.task_summary = summarize_tasks(self.tasks.list_tasks())
        except TaskWebError as exc:
            notices.append(load_failure(exc, "Error al cargar las estadísticas de tareas"))
        try:
            self.user_stats = self.admin.user_stats()
        except TaskWebError as exc:
            notices.append(load_failure(exc, "Error al cargar las estadísticas de usuarios"))
        return notices

    def ensure_loaded(self) -> List[Notice]:
        return [] if self.loaded else self.load()

    def permission_summary(self) -> List[tuple]:
        """(verb, granted) pairs for the current session, in table order."""
        granted = permissions.permissions_for(self.store.get_user_roles())
        return [(verb, verb in granted) for verb in permissions.PERMISSIONS]
