from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

import requests

from taskweb.errors import NetworkError, NotAuthenticated, RequestFailed, SessionExpired

if TYPE_CHECKING:
    from taskweb.config import AppConfig
    from taskweb.session import SessionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiResponse:
    ok: bool
    status_code: int
    url: str
    method: str
    data: Any = None
    text: Optional[str] = None

    def error_detail(self) -> Optional[str]:
        """Human-readable message from an error body, or None if there isn't one.

        Handles ``{"detail": "..."}`` and validation-style
        ``{"detail": [{"msg": "..."}, ...]}`` bodies.
        """
        if not isinstance(self.data, dict):
            return None
        detail = self.data.get("detail")
        if isinstance(detail, str) and detail.strip():
            return detail.strip()
        if isinstance(detail, list):
            messages = [str(item.get("msg")) for item in detail if isinstance(item, dict) and item.get("msg")]
            if messages:
                return "; ".join(messages)
        return None


class ApiClient:
    """Thin JSON transport over ``requests`` for the task backend.

    Never interprets status codes; that is the caller's job. Transport
    exceptions become :class:`NetworkError`.
    """

    def __init__(
        self,
        *,
        base_url: str,
        verify_ssl: bool = True,
        timeout_seconds: float = 15.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.verify_ssl = bool(verify_ssl)
        self.timeout_seconds = float(timeout_seconds)

        self._session = session if session is not None else requests.Session()

    @classmethod
    def from_config(cls, config: "AppConfig", *, session: Optional[requests.Session] = None) -> "ApiClient":
        return cls(
            base_url=config.api_url,
            verify_ssl=config.verify_ssl,
            timeout_seconds=config.timeout_seconds,
            session=session,
        )

    def _build_headers(self, token: Optional[str], headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        merged: Dict[str, str] = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if token:
            merged["Authorization"] = f"Bearer {token}"
        if headers:
            merged.update({k: str(v) for k, v in headers.items()})
        return merged

    def request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str] = None,
        json_body: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> ApiResponse:
        method_u = (method or "GET").upper().strip()
        path = path or ""
        if not path.startswith("/"):
            path = "/" + path
        url = f"{self.base_url}{path}"

        logger.debug("%s %s", method_u, url)
        try:
            resp = self._session.request(
                method_u,
                url,
                params=params,
                json=json_body,
                headers=self._build_headers(token, headers),
                verify=self.verify_ssl,
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method_u, url, exc)
            raise NetworkError(str(exc)) from exc

        content_type = (resp.headers.get("Content-Type") or "").lower()
        text = resp.text or None
        parsed: Any = None

        if "application/json" in content_type:
            try:
                parsed = resp.json()
            except ValueError:
                parsed = None
        elif text:
            # Some error pages come back as text/plain with a JSON body.
            try:
                parsed = json.loads(text)
            except ValueError:
                parsed = None

        status = int(resp.status_code)
        return ApiResponse(
            ok=200 <= status < 300,
            status_code=status,
            url=url,
            method=method_u,
            data=parsed,
            text=text[:2000] if text else None,
        )


class AuthorizedApi:
    """Authenticated calls on behalf of the current session.

    Contract for every call:
    - no token -> NotAuthenticated, nothing is sent
    - 401 -> the session is logged out, then SessionExpired
    - other non-2xx -> RequestFailed with the backend's detail or "Error {status}"
    - 2xx -> the parsed JSON body (None for empty bodies)
    """

    def __init__(self, client: ApiClient, store: "SessionStore") -> None:
        self.client = client
        self.store = store

    def call(self, method: str, path: str, *, json_body: Any = None, params: Optional[Dict[str, Any]] = None) -> Any:
        token = self.store.get_token()
        if not token:
            raise NotAuthenticated()

        resp = self.client.request(method, path, token=token, json_body=json_body, params=params)

        if resp.status_code == 401:
            logger.warning("%s %s rejected the session token; logging out", resp.method, resp.url)
            self.store.logout()
            raise SessionExpired()

        if not resp.ok:
            detail = resp.error_detail() or f"Error {resp.status_code}"
            logger.warning("%s %s -> %s: %s", resp.method, resp.url, resp.status_code, detail)
            raise RequestFailed(detail, resp.status_code)

        return resp.data

    def get(self, path: str, **kwargs: Any) -> Any:
        return self.call("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        return self.call("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> Any:
        return self.call("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Any:
        return self.call("DELETE", path, **kwargs)
