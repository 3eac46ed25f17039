from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional

from taskweb.errors import NotAuthenticated, SessionExpired, TaskWebError
from taskweb.guards import satisfies
from taskweb.models import TASK_STATES
from taskweb.session import SessionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    """Outcome of a user action, rendered by the page as a toast or banner."""

    ok: bool
    title: str
    message: str = ""
    session_expired: bool = False


def success(title: str, message: str = "") -> Notice:
    return Notice(ok=True, title=title, message=message)


def failure(message: str, *, title: str = "Error") -> Notice:
    return Notice(ok=False, title=title, message=message)


DENIED = Notice(ok=False, title="Acceso denegado", message="No tienes permisos para realizar esta acción")

EXPIRED = Notice(
    ok=False,
    title="Sesión expirada",
    message="Tu sesión ha expirado. Inicia sesión nuevamente.",
    session_expired=True,
)

INVALID_STATE = failure(f"Estado inválido; debe ser uno de: {', '.join(TASK_STATES)}")


def run_action(
    store: SessionStore,
    action: Callable[[], Notice],
    *,
    error_message: str,
    permission: Optional[str] = None,
    role: Optional[str] = None,
) -> Notice:
    """Check the capability, run ``action`` and turn service errors into a notice.

    Nothing is sent to the backend when the check fails.
    """
    if not satisfies(store, permission=permission, role=role):
        return DENIED
    try:
        return action()
    except (SessionExpired, NotAuthenticated):
        return EXPIRED
    except TaskWebError as exc:
        logger.warning("%s: %s", error_message, exc)
        return failure(f"{error_message}: {exc}")


def load_failure(exc: TaskWebError, message: str) -> Notice:
    if isinstance(exc, (SessionExpired, NotAuthenticated)):
        return EXPIRED
    logger.warning("%s: %s", message, exc)
    return failure(f"{message}: {exc}")


def after_reload(notice: Notice, load_notice: Optional[Notice]) -> Notice:
    """Combine an action's notice with the outcome of the re-fetch that follows it.

    An expired session wins. Any other load failure is appended so the page
    does not present a stale list as fresh.
    """
    if load_notice is None:
        return notice
    if load_notice.session_expired:
        return load_notice
    return replace(notice, message=f"{notice.message} ({load_notice.message})" if notice.message else load_notice.message)
