"""Process-wide logging setup.

Modules import ``logging`` from here and create their own module loggers.
Records go to a file because the terminal is owned by the TUI while it runs.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from platformdirs import user_log_dir

APP_NAME = "lazylauncher"
LOG_LEVEL_ENV = "LAZYLAUNCHER_LOG_LEVEL"
DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / f"{APP_NAME}.log"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"


def resolve_log_level(level: str | None = None) -> int:
    """Map a level name (argument, then env var) to a ``logging`` level."""
    name = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").strip().upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: str | None = None, log_path: Path | None = None) -> Path | None:
    """Attach a file handler to the package logger.

    Returns the log file path, or ``None`` when the file could not be opened
    (logging then stays unconfigured and records are dropped).
    """
    target = DEFAULT_LOG_PATH if log_path is None else log_path
    package_logger = logging.getLogger(APP_NAME)
    package_logger.setLevel(resolve_log_level(level))
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target, encoding="utf-8")
    except OSError:
        package_logger.addHandler(logging.NullHandler())
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.propagate = False
    return target


__all__ = ["logging", "configure_logging", "resolve_log_level", "DEFAULT_LOG_PATH"]
