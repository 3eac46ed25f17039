"""Session store for the authenticated user.

The store wraps a mutable mapping: ``st.session_state`` when running under
Streamlit (one per browser session, survives page switches), or a plain dict
in tests. Three keys are persisted, mirroring what the backend hands back at
login: the access token, the user id and a JSON profile.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, MutableMapping, Optional, Tuple

from taskweb import permissions
from taskweb.errors import AuthenticationError, NetworkError
from taskweb.http import ApiClient

logger = logging.getLogger(__name__)

TOKEN_KEY = "access_token"
USER_ID_KEY = "user_id"
PROFILE_KEY = "user_profile"

SESSION_KEYS = (TOKEN_KEY, USER_ID_KEY, PROFILE_KEY)


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str


@dataclass(frozen=True)
class UserProfile:
    id: str
    email: str
    first_name: str
    last_name: str
    roles: Tuple[str, ...] = ()

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_json(self) -> str:
        return json.dumps(
            {
                "id": self.id,
                "email": self.email,
                "firstName": self.first_name,
                "lastName": self.last_name,
                "roles": list(self.roles),
            }
        )

    @classmethod
    def from_json(cls, raw: str) -> "UserProfile":
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("profile is not an object")
        roles = data.get("roles")
        return cls(
            id=str(data.get("id") or ""),
            email=str(data.get("email") or ""),
            first_name=str(data.get("firstName") or ""),
            last_name=str(data.get("lastName") or ""),
            roles=tuple(str(r) for r in roles) if isinstance(roles, list) else (),
        )


@dataclass(frozen=True)
class Session:
    subject_id: str
    display_name: str
    email: str
    roles: Tuple[str, ...]
    token: str


class SessionStore:
    def __init__(self, storage: MutableMapping[str, Any], client: Optional[ApiClient] = None) -> None:
        self._storage = storage
        self._client = client

    # ---- lifecycle ----

    def login(self, credentials: Credentials) -> Session:
        if self._client is None:
            raise RuntimeError("SessionStore has no ApiClient; cannot log in")

        try:
            resp = self._client.request(
                "POST",
                "/users/login",
                json_body={"emails": credentials.email, "password": credentials.password},
            )
        except NetworkError as exc:
            raise AuthenticationError("Error de conexión con el servidor") from exc

        if not resp.ok:
            detail = resp.error_detail() or "Error de autenticación"
            logger.info("login rejected for %s: %s", credentials.email, detail)
            raise AuthenticationError(detail)

        data: Dict[str, Any] = resp.data if isinstance(resp.data, dict) else {}
        token = data.get("access_token")
        roles = data.get("roles")
        if not token:
            raise AuthenticationError("Error de autenticación")

        profile = UserProfile(
            id=str(data.get("user_id") or ""),
            email=str(data.get("user_emails") or ""),
            first_name=str(data.get("first_name") or ""),
            last_name=str(data.get("last_name") or ""),
            roles=tuple(str(r) for r in roles) if isinstance(roles, list) else (),
        )
        self._storage[TOKEN_KEY] = str(token)
        self._storage[USER_ID_KEY] = profile.id
        self._storage[PROFILE_KEY] = profile.to_json()

        logger.info("user %s logged in with roles %s", profile.id, list(profile.roles))
        return Session(
            subject_id=profile.id,
            display_name=profile.display_name,
            email=profile.email,
            roles=profile.roles,
            token=str(token),
        )

    def logout(self) -> None:
        for key in SESSION_KEYS:
            self._storage.pop(key, None)

    # ---- projections (never raise) ----

    def is_authenticated(self) -> bool:
        return bool(self.get_token())

    def get_token(self) -> Optional[str]:
        token = self._storage.get(TOKEN_KEY)
        return str(token) if token else None

    def get_user_id(self) -> Optional[str]:
        user_id = self._storage.get(USER_ID_KEY)
        return str(user_id) if user_id else None

    def get_user_profile(self) -> Optional[UserProfile]:
        raw = self._storage.get(PROFILE_KEY)
        if not raw:
            return None
        try:
            return UserProfile.from_json(str(raw))
        except ValueError:
            logger.warning("stored user profile is unreadable; ignoring it")
            return None

    def get_username(self) -> str:
        profile = self.get_user_profile()
        return profile.display_name if profile else ""

    def get_user_roles(self) -> Tuple[str, ...]:
        profile = self.get_user_profile()
        return profile.roles if profile else ()

    def current(self) -> Optional[Session]:
        token = self.get_token()
        profile = self.get_user_profile()
        if not token or profile is None:
            return None
        return Session(
            subject_id=self.get_user_id() or profile.id,
            display_name=profile.display_name,
            email=profile.email,
            roles=profile.roles,
            token=token,
        )

    # ---- authorization ----

    def has_role(self, name: str) -> bool:
        return name in self.get_user_roles()

    def has_permission(self, verb: str) -> bool:
        return permissions.resolve(self.get_user_roles(), verb)
