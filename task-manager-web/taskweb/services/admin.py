from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from taskweb.http import AuthorizedApi
from taskweb.models import (
    AdminUser,
    RoleInfo,
    UserStats,
    UserSummary,
    admin_user_from_api,
    compute_user_stats,
    role_from_api,
    user_summary_from_api,
)

logger = logging.getLogger(__name__)


def _items(payload: Any) -> List[Dict[str, Any]]:
    if not isinstance(payload, list):
        return []
    return [item for item in payload if isinstance(item, dict)]


class AdminService:
    """User, role and soft-delete endpoints used by the admin console."""

    def __init__(self, api: AuthorizedApi) -> None:
        self.api = api

    # ---- listings ----

    def list_users(self) -> List[AdminUser]:
        return [admin_user_from_api(u) for u in _items(self.api.get("/users"))]

    def list_deleted_users(self) -> List[AdminUser]:
        return [admin_user_from_api(u, active=False) for u in _items(self.api.get("/users/deleted"))]

    def list_user_summaries(self) -> List[UserSummary]:
        return [user_summary_from_api(u) for u in _items(self.api.get("/users/simple"))]

    def list_roles(self) -> List[RoleInfo]:
        return [role_from_api(r) for r in _items(self.api.get("/roles"))]

    def user_stats(self, *, now: Optional[datetime] = None) -> UserStats:
        active = self.list_users()
        deleted = self.list_deleted_users()
        return compute_user_stats(active, deleted, now=now)

    # ---- mutations ----

    def create_user(self, *, first_name: str, last_name: str, email: str, password: str, age: int) -> AdminUser:
        body = {
            "firstName": first_name,
            "lastName": last_name,
            "emails": email,
            "password": password,
            "ages": int(age),
        }
        created = self.api.post("/users", json_body=body)
        logger.info("created user %s", email)
        return admin_user_from_api(created or {})

    def update_user(
        self,
        user_id: str,
        *,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        email: Optional[str] = None,
        age: Optional[int] = None,
    ) -> AdminUser:
        body: Dict[str, Any] = {}
        if first_name is not None:
            body["firstName"] = first_name
        if last_name is not None:
            body["lastName"] = last_name
        if email is not None:
            body["emails"] = email
        if age is not None:
            body["ages"] = int(age)
        return admin_user_from_api(self.api.put(f"/users/{user_id}", json_body=body) or {})

    def delete_user(self, user_id: str) -> None:
        self.api.delete(f"/users/{user_id}")
        logger.info("soft-deleted user %s", user_id)

    def restore_user(self, user_id: str) -> None:
        self.api.post(f"/users/{user_id}/restore")
        logger.info("restored user %s", user_id)

    def assign_role(self, user_id: str, role_name: str) -> AdminUser:
        """Give the user ``role_name``; the backend drops the previous role."""
        updated = self.api.post(f"/users/{user_id}/roles", json_body={"role_name": role_name})
        logger.info("assigned role %s to user %s", role_name, user_id)
        return admin_user_from_api(updated or {})

    def remove_role(self, user_id: str, role_name: str) -> AdminUser:
        updated = self.api.delete(f"/users/{user_id}/roles/{role_name}")
        return admin_user_from_api(updated or {})
