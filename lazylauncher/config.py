"""Launcher settings read from the JSON config file.

Covers the backend command, theme, buffer sizes, and backend restart policy.
Missing, malformed or out-of-range values fall back to defaults.
"""

from __future__ import annotations

import json
import shlex
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "lazylauncher"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_BACKEND_COMMAND: tuple[str, ...] = ("pop-launcher",)
DEFAULT_REQUEST_BUFFER_SIZE = 32
DEFAULT_EVENT_BUFFER_SIZE = 64
DEFAULT_RESTART_LIMIT = 3
DEFAULT_RESTART_DELAY_SECONDS = 1.0


@dataclass(frozen=True)
class LauncherSettings:
    """Resolved launcher settings after config file and CLI overrides."""

    backend_command: tuple[str, ...] = DEFAULT_BACKEND_COMMAND
    theme: str | None = None
    request_buffer_size: int = DEFAULT_REQUEST_BUFFER_SIZE
    event_buffer_size: int = DEFAULT_EVENT_BUFFER_SIZE
    restart_limit: int = DEFAULT_RESTART_LIMIT
    restart_delay_seconds: float = DEFAULT_RESTART_DELAY_SECONDS
    activation_token_command: tuple[str, ...] | None = None


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def parse_command(value: object) -> tuple[str, ...] | None:
    """Accept a JSON list of strings or a shell-style command string."""
    if isinstance(value, str):
        try:
            parts = shlex.split(value)
        except ValueError:
            return None
        return tuple(parts) if parts else None
    if isinstance(value, list) and value and all(isinstance(part, str) for part in value):
        return tuple(value)
    return None


def _positive_int(value: object, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return default
    return value


def _nonnegative_int(value: object, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return default
    return value


def _nonnegative_float(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        return default
    return float(value)


def _stripped_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def load_settings(
    *,
    backend_command: str | None = None,
    theme: str | None = None,
) -> LauncherSettings:
    """Build ``LauncherSettings`` from the config file plus CLI overrides."""
    data = load_config()
    command = parse_command(backend_command) if backend_command is not None else None
    if command is None:
        command = parse_command(data.get("backend_command")) or DEFAULT_BACKEND_COMMAND
    return LauncherSettings(
        backend_command=command,
        theme=theme if theme is not None else _stripped_str(data.get("theme")),
        request_buffer_size=_positive_int(data.get("request_buffer_size"), DEFAULT_REQUEST_BUFFER_SIZE),
        event_buffer_size=_positive_int(data.get("event_buffer_size"), DEFAULT_EVENT_BUFFER_SIZE),
        restart_limit=_nonnegative_int(data.get("restart_limit"), DEFAULT_RESTART_LIMIT),
        restart_delay_seconds=_nonnegative_float(
            data.get("restart_delay_seconds"), DEFAULT_RESTART_DELAY_SECONDS
        ),
        activation_token_command=parse_command(data.get("activation_token_command")),
    )
