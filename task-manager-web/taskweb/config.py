from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from taskweb.config_utils import env_bool, env_first, env_float, env_optional_str, env_str


@dataclass(frozen=True)
class AppConfig:
    """Runtime configuration for the task manager frontend.

    Env vars:
    - TASKWEB_API_URL (fallback API_URL, default http://localhost:8000)
    - TASKWEB_VERIFY_SSL (default true)
    - TASKWEB_TIMEOUT_SECONDS (default 15)
    - TASKWEB_LOG_LEVEL (default INFO)
    - TASKWEB_LOG_FILE (optional; enables the file handler)
    - TASKWEB_APP_TITLE (default "Gestor de Tareas")
    """

    api_url: str
    verify_ssl: bool
    timeout_seconds: float
    log_level: str
    log_file: Optional[str]
    app_title: str

    DEFAULT_API_URL: str = "http://localhost:8000"
    DEFAULT_VERIFY_SSL: bool = True
    DEFAULT_TIMEOUT_SECONDS: float = 15.0
    DEFAULT_LOG_LEVEL: str = "INFO"
    DEFAULT_APP_TITLE: str = "Gestor de Tareas"

    @classmethod
    def from_env(cls) -> "AppConfig":
        timeout = env_float("TASKWEB_TIMEOUT_SECONDS", cls.DEFAULT_TIMEOUT_SECONDS)
        if timeout <= 0:
            timeout = cls.DEFAULT_TIMEOUT_SECONDS

        return cls(
            api_url=env_first("TASKWEB_API_URL", "API_URL", default=cls.DEFAULT_API_URL).rstrip("/"),
            verify_ssl=env_bool("TASKWEB_VERIFY_SSL", cls.DEFAULT_VERIFY_SSL),
            timeout_seconds=timeout,
            log_level=env_str("TASKWEB_LOG_LEVEL", cls.DEFAULT_LOG_LEVEL).upper(),
            log_file=env_optional_str("TASKWEB_LOG_FILE"),
            app_title=env_str("TASKWEB_APP_TITLE", cls.DEFAULT_APP_TITLE),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "api_url": self.api_url,
            "verify_ssl": self.verify_ssl,
            "timeout_seconds": self.timeout_seconds,
            "log_level": self.log_level,
            "has_log_file": bool(self.log_file),
            "app_title": self.app_title,
        }
