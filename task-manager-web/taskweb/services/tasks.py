from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from taskweb.http import AuthorizedApi
from taskweb.models import PENDING, Task, task_from_api, validate_state

logger = logging.getLogger(__name__)


def _tasks_from_payload(payload: Any) -> List[Task]:
    if not isinstance(payload, list):
        return []
    return [task_from_api(item) for item in payload if isinstance(item, dict)]


class TaskService:
    """Task endpoints of the backend. Every call is a single request/response."""

    def __init__(self, api: AuthorizedApi) -> None:
        self.api = api

    def list_tasks(self) -> List[Task]:
        return _tasks_from_payload(self.api.get("/tasks"))

    def list_tasks_for_user(self, user_id: str) -> List[Task]:
        """Tasks the given user is assigned to; there is no per-user endpoint."""
        return [t for t in self.list_tasks() if t.is_assigned(str(user_id))]

    def get_task(self, task_id: str) -> Task:
        return task_from_api(self.api.get(f"/tasks/{task_id}") or {})

    def create_task(
        self,
        *,
        title: str,
        description: str = "",
        state: str = PENDING,
        user_id: Optional[str] = None,
    ) -> Task:
        body: Dict[str, Any] = {
            "title": title,
            "description": description,
            "state": validate_state(state),
        }
        if user_id:
            body["user_id"] = user_id
        created = self.api.post("/tasks", json_body=body)
        logger.info("created task %r", title)
        return task_from_api(created or {})

    def update_task(
        self,
        task_id: str,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        state: Optional[str] = None,
    ) -> Task:
        body: Dict[str, Any] = {}
        if title is not None:
            body["title"] = title
        if description is not None:
            body["description"] = description
        if state is not None:
            body["state"] = validate_state(state)
        if not body:
            raise ValueError("update_task needs at least one field to change")
        return task_from_api(self.api.put(f"/tasks/{task_id}", json_body=body) or {})

    def update_task_state(self, task_id: str, state: str) -> Task:
        # Any state may follow any other; the backend owns the rules.
        body = {"state": validate_state(state)}
        return task_from_api(self.api.put(f"/tasks/{task_id}", json_body=body) or {})

    def assign_user(self, task_id: str, user_id: str) -> Any:
        return self.api.post(f"/tasks/{task_id}/assign", json_body={"user_id": user_id})

    def unassign_user(self, task_id: str, user_id: str) -> Any:
        return self.api.delete(f"/tasks/{task_id}/assign/{user_id}")
