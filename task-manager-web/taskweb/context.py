"""Per-run wiring for the Streamlit pages.

Config, logging and the HTTP client are process-wide (``st.cache_resource``).
The session store sits on ``st.session_state`` so each browser session has
its own login. View controllers live in a single session slot keyed by page,
so moving to another page drops the previous page's cached records.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TypeVar

import streamlit as st

from taskweb.config import AppConfig
from taskweb.http import ApiClient, AuthorizedApi
from taskweb.logging_setup import setup_logging
from taskweb.services import AdminService, TaskService
from taskweb.session import SessionStore

V = TypeVar("V")

_VIEW_SLOT = "_taskweb_view"


@st.cache_resource
def get_config() -> AppConfig:
    config = AppConfig.from_env()
    setup_logging(level=config.log_level, log_file=config.log_file)
    return config


@st.cache_resource
def get_api_client() -> ApiClient:
    return ApiClient.from_config(get_config())


@dataclass
class AppContext:
    config: AppConfig
    store: SessionStore
    tasks: TaskService
    admin: AdminService


def get_context() -> AppContext:
    config = get_config()
    client = get_api_client()
    store = SessionStore(st.session_state, client)
    api = AuthorizedApi(client, store)
    return AppContext(config=config, store=store, tasks=TaskService(api), admin=AdminService(api))


def get_view(page_key: str, factory: Callable[[], V]) -> V:
    """Return this page's controller, creating a fresh one after navigation."""
    slot = st.session_state.get(_VIEW_SLOT)
    if not slot or slot.get("page") != page_key:
        slot = {"page": page_key, "view": factory()}
        st.session_state[_VIEW_SLOT] = slot
    return slot["view"]


def drop_view() -> None:
    st.session_state.pop(_VIEW_SLOT, None)
