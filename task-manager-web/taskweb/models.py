"""View records and the adapters that build them from backend JSON.

The backend went through a field rename (``titulo``/``estado`` became
``title``/``state``) and older payloads still show up. ``task_from_api`` reads
either shape; everything past that boundary uses the canonical names. Old
consumers that want the Spanish names get them from ``Task.to_record()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

PENDING = "pending"
IN_PROGRESS = "in-progress"
COMPLETED = "completed"

TASK_STATES = (PENDING, IN_PROGRESS, COMPLETED)

STATE_LABELS: Mapping[str, str] = {
    PENDING: "Pendiente",
    IN_PROGRESS: "En Progreso",
    COMPLETED: "Completada",
}

LEGACY_STATES: Mapping[str, str] = {
    PENDING: "pendiente",
    IN_PROGRESS: "en-progreso",
    COMPLETED: "completada",
}
_FROM_LEGACY_STATE = {v: k for k, v in LEGACY_STATES.items()}


def normalize_state(value: Any) -> str:
    """Map canonical, legacy or loosely formatted state values to a canonical one.

    Unknown or missing values fall back to ``pending``.
    """
    raw = str(value or "").strip().lower().replace("_", "-").replace(" ", "-")
    if raw in TASK_STATES:
        return raw
    return _FROM_LEGACY_STATE.get(raw, PENDING)


def validate_state(value: str) -> str:
    if value not in TASK_STATES:
        raise ValueError(f"unknown task state {value!r}; expected one of {', '.join(TASK_STATES)}")
    return value


def _first(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _str_id(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class UserSummary:
    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""

    @property
    def full_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.email or self.id


def user_summary_from_api(data: Any) -> UserSummary:
    # Legacy task payloads list assignees as bare names.
    if not isinstance(data, Mapping):
        return UserSummary(id=_str_id(data), first_name=_str_id(data))
    return UserSummary(
        id=_str_id(_first(data, "id", "user_id")),
        first_name=str(_first(data, "firstName", "first_name", default="")),
        last_name=str(_first(data, "lastName", "last_name", default="")),
        email=str(_first(data, "emails", "email", default="")),
    )


def _dedupe_users(users: Iterable[UserSummary]) -> Tuple[UserSummary, ...]:
    seen: set[str] = set()
    out: List[UserSummary] = []
    for user in users:
        if user.id in seen:
            continue
        seen.add(user.id)
        out.append(user)
    return tuple(out)


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    description: str = ""
    state: str = PENDING
    assigned_users: Tuple[UserSummary, ...] = ()
    created_at: Optional[str] = None

    @property
    def status_label(self) -> str:
        return STATE_LABELS.get(self.state, STATE_LABELS[PENDING])

    @property
    def assigned_user_ids(self) -> Tuple[str, ...]:
        return tuple(u.id for u in self.assigned_users)

    def is_assigned(self, user_id: str) -> bool:
        return user_id in self.assigned_user_ids

    def to_record(self) -> Dict[str, Any]:
        """Flat record for tables, plus the legacy-named duplicates."""
        assignee_names = [u.full_name for u in self.assigned_users]
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "state": self.state,
            "status_label": self.status_label,
            "assigned_users": assignee_names,
            "created_at": self.created_at,
            "titulo": self.title,
            "descripcion": self.description,
            "estado": LEGACY_STATES[self.state],
            "usuariosAsignados": list(assignee_names),
            "fechaCreacion": self.created_at,
        }


def task_from_api(data: Mapping[str, Any]) -> Task:
    users_raw = _first(data, "users", "assigned_users", "usuariosAsignados", default=[]) or []
    return Task(
        id=_str_id(data.get("id")),
        title=str(_first(data, "title", "titulo", default="")),
        description=str(_first(data, "description", "descripcion", default="")),
        state=normalize_state(_first(data, "state", "estado")),
        assigned_users=_dedupe_users(user_summary_from_api(u) for u in users_raw),
        created_at=_first(data, "created_at", "create_at", "fechaCreacion"),
    )


@dataclass(frozen=True)
class AdminUser:
    id: str
    first_name: str
    last_name: str
    email: str
    age: Optional[int] = None
    roles: Tuple[str, ...] = ()
    active: bool = True
    tasks: Tuple[Task, ...] = ()
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def current_role(self) -> str:
        return self.roles[0] if self.roles else ""

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "nombre": self.full_name,
            "email": self.email,
            "edad": self.age,
            "roles": ", ".join(self.roles),
            "tareas": len(self.tasks),
            "activo": self.active,
            "creado": self.created_at,
        }


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def admin_user_from_api(data: Mapping[str, Any], *, active: Optional[bool] = None) -> AdminUser:
    """Build an AdminUser. ``active`` overrides the ``delete_at`` check when given."""
    if active is None:
        active = not data.get("delete_at")
    return AdminUser(
        id=_str_id(data.get("id")),
        first_name=str(_first(data, "firstName", "first_name", default="")),
        last_name=str(_first(data, "lastName", "last_name", default="")),
        email=str(_first(data, "emails", "email", default="")),
        age=_optional_int(_first(data, "ages", "age")),
        roles=tuple(str(r) for r in (data.get("roles") or [])),
        active=bool(active),
        tasks=tuple(task_from_api(t) for t in (data.get("tasks") or []) if isinstance(t, Mapping)),
        created_at=_first(data, "create_at", "created_at"),
        updated_at=_first(data, "update_at", "updated_at"),
    )


@dataclass(frozen=True)
class RoleInfo:
    id: str
    name: str
    permissions: str = ""


def role_from_api(data: Mapping[str, Any]) -> RoleInfo:
    return RoleInfo(
        id=_str_id(data.get("id")),
        name=str(_first(data, "rol_nombre", "name", default="")),
        permissions=str(_first(data, "rol_permisos", "permissions", default="")),
    )


@dataclass(frozen=True)
class TaskSummary:
    total: int = 0
    counts: Mapping[str, int] = field(default_factory=dict)

    def count(self, state: str) -> int:
        return int(self.counts.get(state, 0))

    def percent(self, state: str) -> int:
        if not self.total:
            return 0
        return round(self.count(state) / self.total * 100)


def summarize_tasks(tasks: Sequence[Task]) -> TaskSummary:
    counts = {state: 0 for state in TASK_STATES}
    for task in tasks:
        counts[task.state] = counts.get(task.state, 0) + 1
    return TaskSummary(total=len(tasks), counts=counts)


@dataclass(frozen=True)
class UserStats:
    total_users: int
    active_users: int
    inactive_users: int
    users_by_role: Mapping[str, int]
    recent_registrations: int


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.replace(tzinfo=None)


def compute_user_stats(
    active: Sequence[AdminUser],
    deleted: Sequence[AdminUser],
    *,
    now: Optional[datetime] = None,
    recent_days: int = 7,
) -> UserStats:
    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    cutoff = now - timedelta(days=recent_days)

    by_role: Dict[str, int] = {}
    for user in active:
        for role in user.roles:
            by_role[role] = by_role.get(role, 0) + 1

    recent = 0
    for user in active:
        created = _parse_timestamp(user.created_at)
        if created is not None and created >= cutoff:
            recent += 1

    return UserStats(
        total_users=len(active) + len(deleted),
        active_users=len(active),
        inactive_users=len(deleted),
        users_by_role=by_role,
        recent_registrations=recent,
    )


def filter_tasks(tasks: Sequence[Task], term: str) -> List[Task]:
    needle = (term or "").strip().lower()
    if not needle:
        return list(tasks)
    return [t for t in tasks if needle in t.title.lower() or needle in t.description.lower()]


def filter_users(users: Sequence[AdminUser], term: str) -> List[AdminUser]:
    needle = (term or "").strip().lower()
    if not needle:
        return list(users)
    return [
        u
        for u in users
        if needle in u.first_name.lower() or needle in u.last_name.lower() or needle in u.email.lower()
    ]
