# tests/conftest.py

from __future__ import annotations

from typing import Any, Callable, Dict

import pytest

from taskweb.http import ApiClient, AuthorizedApi
from taskweb.services import AdminService, TaskService
from taskweb.session import Credentials, SessionStore

from .fakes import FakeHttpSession, login_body

BASE_URL = "http://api.test"


@pytest.fixture()
def http() -> FakeHttpSession:
    return FakeHttpSession()


@pytest.fixture()
def storage() -> Dict[str, Any]:
    """Plays the part of st.session_state."""
    return {}


@pytest.fixture()
def client(http: FakeHttpSession) -> ApiClient:
    return ApiClient(base_url=BASE_URL, verify_ssl=False, timeout_seconds=5, session=http)


@pytest.fixture()
def store(storage: Dict[str, Any], client: ApiClient) -> SessionStore:
    return SessionStore(storage, client)


@pytest.fixture()
def login_as(store: SessionStore, http: FakeHttpSession) -> Callable[..., SessionStore]:
    """Log the store in with the given roles through the fake backend, then forget the login call."""

    def _login(*roles: str, user_id: str = "u1") -> SessionStore:
        http.reply("POST", "/users/login", 200, login_body(user_id=user_id, roles=roles))
        store.login(Credentials(email="ana@example.com", password="secret"))
        http.calls.clear()
        return store

    return _login


@pytest.fixture()
def api(client: ApiClient, store: SessionStore) -> AuthorizedApi:
    return AuthorizedApi(client, store)


@pytest.fixture()
def tasks(api: AuthorizedApi) -> TaskService:
    return TaskService(api)


@pytest.fixture()
def admin(api: AuthorizedApi) -> AdminService:
    return AdminService(api)
