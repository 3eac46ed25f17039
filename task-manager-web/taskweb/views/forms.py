from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from taskweb.models import PENDING


@dataclass
class TaskForm:
    title: str = ""
    description: str = ""
    state: str = PENDING
    assigned_users: List[str] = field(default_factory=list)

    def cleaned_title(self) -> str:
        return (self.title or "").strip()

    def cleaned_description(self) -> str:
        return (self.description or "").strip()


@dataclass
class UserForm:
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    age: str = ""
    password: str = ""

    def missing_fields(self) -> bool:
        return not all(str(v).strip() for v in (self.first_name, self.last_name, self.email, self.age))
