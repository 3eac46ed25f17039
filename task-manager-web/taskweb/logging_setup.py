from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"
_HANDLER_TAG = "_taskweb_handler"


class _ConsoleNoiseFilter(logging.Filter):
    """Keep taskweb logs; let third-party libraries through only at WARNING+.

    Streamlit's own watcher and urllib3's connection pool are chatty at INFO.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("taskweb"):
            return True
        return record.levelno >= logging.WARNING


def _level(value: Union[int, str]) -> int:
    if isinstance(value, int):
        return value
    resolved = logging.getLevelName(str(value).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    *,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """Install the console handler (and optional file handler) on the root logger.

    Streamlit re-executes page scripts on every interaction, so this is
    idempotent: handlers installed by a previous call are replaced, handlers
    owned by anyone else are left alone.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(_level(level))
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    setattr(console, _HANDLER_TAG, True)
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(path), encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(fmt)
        setattr(file_handler, _HANDLER_TAG, True)
        root.addHandler(file_handler)

    logging.captureWarnings(True)
