"""Exceptions raised by the session store and the remote data clients.

Pages never see raw ``requests`` exceptions: the transport turns them into
:class:`NetworkError`, and the authorized call path maps HTTP statuses onto
the rest of the hierarchy.
"""

from __future__ import annotations

from typing import Optional


class TaskWebError(Exception):
    """Base class for every error surfaced to the view layer."""


class AuthenticationError(TaskWebError):
    """The backend rejected the credentials, or could not be reached, at login."""


class NotAuthenticated(TaskWebError):
    """No access token is stored locally."""

    def __init__(self, message: str = "No authenticated") -> None:
        super().__init__(message)


class SessionExpired(TaskWebError):
    """The backend answered 401; the local session has already been cleared."""

    def __init__(self, message: str = "Session expired") -> None:
        super().__init__(message)


class RequestFailed(TaskWebError):
    """Any other non-success response from the backend."""

    def __init__(self, detail: str, status_code: Optional[int] = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class NetworkError(TaskWebError):
    """Transport-level failure (DNS, refused connection, timeout)."""
