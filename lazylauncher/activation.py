"""Host activation: single-instance pid file, toggle signal, activation tokens.

A running launcher records its pid; ``lazylauncher --toggle`` sends it
``SIGUSR1``. The signal handler only sets a flag that the UI loop polls.
"""

from __future__ import annotations

import os
import signal
import subprocess
import threading
from collections.abc import Sequence
from pathlib import Path

from platformdirs import user_runtime_dir

from .logger import logging

logger = logging.getLogger(__name__)

APP_NAME = "lazylauncher"
ACTIVATION_SIGNAL = signal.SIGUSR1
PID_PATH = Path(user_runtime_dir(APP_NAME, appauthor=False)) / f"{APP_NAME}.pid"
TOKEN_COMMAND_TIMEOUT_SECONDS = 2.0


class ActivationListener:
    """Collect host activation signals for the UI loop to consume."""

    def __init__(self) -> None:
        self._pending = threading.Event()
        self._previous_handler: object = None

    def install(self) -> None:
        self._previous_handler = signal.signal(ACTIVATION_SIGNAL, self._on_signal)

    def uninstall(self) -> None:
        if self._previous_handler is not None:
            signal.signal(ACTIVATION_SIGNAL, self._previous_handler)
            self._previous_handler = None

    def _on_signal(self, _signum: int, _frame: object) -> None:
        self._pending.set()

    def notify(self) -> None:
        """Record an activation without a signal (``--open`` at startup)."""
        self._pending.set()

    def consume(self) -> bool:
        """Return ``True`` once per pending activation burst."""
        if not self._pending.is_set():
            return False
        self._pending.clear()
        return True


def write_pid_file(path: Path | None = None) -> Path:
    target = PID_PATH if path is None else path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(f"{os.getpid()}\n", encoding="utf-8")
    return target


def remove_pid_file(path: Path | None = None) -> None:
    target = PID_PATH if path is None else path
    try:
        if target.read_text(encoding="utf-8").strip() == str(os.getpid()):
            target.unlink()
    except OSError:
        pass


def read_running_pid(path: Path | None = None) -> int | None:
    """Return the pid of a live launcher instance, or ``None``."""
    target = PID_PATH if path is None else path
    try:
        pid = int(target.read_text(encoding="utf-8").strip())
    except (OSError, ValueError):
        return None
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return None
    except PermissionError:
        return pid
    return pid


def send_toggle(path: Path | None = None) -> bool:
    """Signal the running instance to toggle; ``False`` if none is running."""
    pid = read_running_pid(path)
    if pid is None:
        return False
    os.kill(pid, ACTIVATION_SIGNAL)
    return True


def request_activation_token(command: Sequence[str] | None) -> str | None:
    """Ask the host for an activation token via ``command`` (stdout, stripped)."""
    if not command:
        return None
    try:
        completed = subprocess.run(
            list(command),
            capture_output=True,
            text=True,
            timeout=TOKEN_COMMAND_TIMEOUT_SECONDS,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.warning("Activation token command failed: %s", exc)
        return None
    if completed.returncode != 0:
        logger.warning("Activation token command exited with %s", completed.returncode)
        return None
    token = completed.stdout.strip()
    return token or None
