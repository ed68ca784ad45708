"""Runtime composition layer for lazylauncher.

Builds the bridge, surfaces, controller, and view, wires callbacks, and runs
the loop inside raw terminal mode. This is the only module where the backend,
the terminal, and host activation meet.
"""

from __future__ import annotations

import sys
from functools import partial

from ..activation import ActivationListener, remove_pid_file, request_activation_token, write_pid_file
from ..backend.bridge import BackendBridge
from ..backend.desktop_entry import load_desktop_exec, spawn_desktop_exec
from ..config import LauncherSettings
from ..input import KeybindingDispatcher
from ..logger import logging
from ..render import FrameLayout, ViewState, build_frame, write_frame
from ..session import SessionController, SessionOps
from ..surfaces import SurfaceContext, SurfaceManager
from ..ui_theme import resolve_theme
from .loop import RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop
from .shell import TerminalOverlayShell
from .terminal import TerminalController

logger = logging.getLogger(__name__)


def build_controller(
    settings: LauncherSettings,
    shell: TerminalOverlayShell,
    view: ViewState,
) -> SessionController:
    """Wire the session controller to the terminal shell and view focus."""
    surfaces = SurfaceManager(shell.as_overlay_shell(), SurfaceContext())
    controller: SessionController | None = None

    def item_count() -> int:
        return len(controller.state.launcher_items) if controller is not None else 0

    ops = SessionOps(
        focus_input=view.focus_input,
        focus_next=lambda: view.focus_next(item_count()),
        focus_previous=lambda: view.focus_previous(item_count()),
        load_desktop_exec=load_desktop_exec,
        request_activation_token=partial(request_activation_token, settings.activation_token_command),
        spawn_desktop_exec=spawn_desktop_exec,
    )
    controller = SessionController(surfaces, ops)
    return controller


def run_launcher(
    settings: LauncherSettings,
    *,
    no_color: bool = False,
    start_open: bool = False,
) -> None:
    """Run the interactive launcher until the user quits."""
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    theme = resolve_theme(settings.theme, no_color=no_color)
    shell = TerminalOverlayShell()
    view = ViewState()
    controller = build_controller(settings, shell, view)
    bridge = BackendBridge(
        settings.backend_command,
        request_buffer_size=settings.request_buffer_size,
        event_buffer_size=settings.event_buffer_size,
        restart_limit=settings.restart_limit,
        restart_delay_seconds=settings.restart_delay_seconds,
    )
    listener = ActivationListener()

    def render(columns: int, lines: int) -> FrameLayout:
        frame = build_frame(controller.state, view, shell, theme, columns, lines)
        write_frame(frame, stdout_fd)
        return frame.layout

    callbacks = RuntimeLoopCallbacks(
        consume_activation=listener.consume,
        drain_backend_events=bridge.drain_events,
        render=render,
    )

    terminal = TerminalController(stdin_fd, stdout_fd)
    listener.install()
    pid_path = write_pid_file()
    logger.info("Launcher running (pid file %s, backend %s)", pid_path, settings.backend_command)
    if start_open:
        listener.notify()
    try:
        bridge.start()
        with terminal.raw_mode():
            terminal.clear()
            run_main_loop(controller, KeybindingDispatcher(), view, stdin_fd, RuntimeLoopTiming(), callbacks)
    finally:
        bridge.stop()
        remove_pid_file(pid_path)
        listener.uninstall()
        logger.info("Launcher stopped")
