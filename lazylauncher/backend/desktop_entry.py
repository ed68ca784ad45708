"""Desktop-entry resolution and detached process spawn.

Only the ``Exec`` key of the ``[Desktop Entry]`` group is used. Field codes
(``%f``, ``%U`` ...) are stripped since the launcher never passes files/URLs.
"""

from __future__ import annotations

import configparser
import os
import re
import shlex
import subprocess
from collections.abc import Sequence
from pathlib import Path

from ..logger import logging

logger = logging.getLogger(__name__)

DESKTOP_ENTRY_GROUP = "Desktop Entry"
ACTIVATION_ENV_KEYS: tuple[str, ...] = ("XDG_ACTIVATION_TOKEN", "DESKTOP_STARTUP_ID")
_FIELD_CODE_RE = re.compile(r"%[fFuUdDnNickvm]")


def load_desktop_exec(path: str | Path) -> str | None:
    """Return the ``Exec`` command line of a desktop file, or ``None``."""
    parser = configparser.ConfigParser(interpolation=None, strict=False)
    parser.optionxform = str  # keys are case-sensitive
    try:
        with open(path, encoding="utf-8") as handle:
            parser.read_file(handle)
    except (OSError, UnicodeDecodeError, configparser.Error) as exc:
        logger.warning("Cannot read desktop entry %s: %s", path, exc)
        return None
    if not parser.has_section(DESKTOP_ENTRY_GROUP):
        return None
    exec_line = parser.get(DESKTOP_ENTRY_GROUP, "Exec", fallback="").strip()
    return exec_line or None


def exec_to_argv(exec_line: str) -> list[str]:
    """Split an ``Exec`` value into argv with field codes removed."""
    cleaned = _FIELD_CODE_RE.sub("", exec_line).replace("%%", "%")
    try:
        return shlex.split(cleaned)
    except ValueError:
        return cleaned.split()


def activation_envs(token: str | None) -> list[tuple[str, str]]:
    """Environment pairs that hand the activation token to a spawned app."""
    if not token:
        return []
    return [(key, token) for key in ACTIVATION_ENV_KEYS]


def spawn_desktop_exec(exec_line: str, envs: Sequence[tuple[str, str]] = ()) -> bool:
    """Start ``exec_line`` detached from the launcher; return success."""
    argv = exec_to_argv(exec_line)
    if not argv:
        logger.warning("Empty Exec line: %r", exec_line)
        return False
    env = dict(os.environ)
    env.update(dict(envs))
    try:
        subprocess.Popen(
            argv,
            env=env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        logger.error("Failed to spawn %s: %s", argv, exc)
        return False
    logger.info("Spawned %s", argv)
    return True


__all__ = [
    "ACTIVATION_ENV_KEYS",
    "activation_envs",
    "exec_to_argv",
    "load_desktop_exec",
    "spawn_desktop_exec",
]
