"""Launcher session state machine.

Receives user actions and backend events one at a time, mutates the single
``SessionState``, sends requests through the backend link, and tells the
surface manager which overlays should exist. Nothing else mutates the state.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..backend.bridge import BackendEvent, Exited, ResponseEvent, Started
from ..backend.desktop_entry import activation_envs
from ..backend.protocol import (
    ActivateContextRequest,
    ActivateRequest,
    CloseRequest,
    CloseResponse,
    ContextRequest,
    ContextResponse,
    DesktopEntryResponse,
    FillResponse,
    Request,
    Response,
    SearchRequest,
    UpdateResponse,
)
from ..logger import logging
from ..results import rank_results
from ..surfaces import SurfaceManager
from . import actions
from .state import PHASE_HIDDEN, MenuState, SessionState

logger = logging.getLogger(__name__)


class BackendLink:
    """Either no backend yet, or the ``send`` callable of the current handle."""

    def __init__(self) -> None:
        self._send: Callable[[Request], bool] | None = None

    @property
    def present(self) -> bool:
        return self._send is not None

    def attach(self, send: Callable[[Request], bool]) -> None:
        self._send = send

    def send(self, request: Request) -> bool:
        if self._send is None:
            logger.info("No backend handle yet; dropping %r", request)
            return False
        return self._send(request)


@dataclass(frozen=True)
class SessionOps:
    """Side effects the controller triggers outside its own state."""

    focus_input: Callable[[], None]
    focus_next: Callable[[], None]
    focus_previous: Callable[[], None]
    load_desktop_exec: Callable[[str], str | None]
    request_activation_token: Callable[[], str | None]
    spawn_desktop_exec: Callable[[str, Sequence[tuple[str, str]]], object]


class SessionController:
    """Owns the launcher session and processes one transition per call.

    ``handle_action`` and ``handle_backend_event`` return ``True`` when the
    rendered view may have changed.
    """

    def __init__(
        self,
        surfaces: SurfaceManager,
        ops: SessionOps,
        state: SessionState | None = None,
    ) -> None:
        self.surfaces = surfaces
        self.ops = ops
        self.state = state if state is not None else SessionState()
        self.backend = BackendLink()

    @property
    def phase(self) -> str:
        return self.state.phase

    # -- shared transitions -------------------------------------------------

    def hide(self) -> bool:
        """Reset the session, reset the backend for the next open, drop surfaces."""
        self.state.input_value = ""
        if self.backend.present:
            # Close resets the backend; the empty search primes it for the next open.
            self.backend.send(CloseRequest())
            self.backend.send(SearchRequest(""))
        else:
            logger.info("Hide before backend started; skipping backend reset")
        self._close_menu()
        self.surfaces.close_main()
        self.state.active_surface = False
        self.state.wait_for_result = False
        self.state.launcher_items = []
        return True

    def _close_menu(self) -> bool:
        if self.state.menu is None:
            return False
        self.state.menu = None
        self.surfaces.close_menu()
        return True

    def _open(self) -> bool:
        self.state.input_value = ""
        self.backend.send(SearchRequest(""))
        self.state.active_surface = True
        self.state.wait_for_result = True
        return True

    # -- user actions -------------------------------------------------------

    def handle_action(self, action: actions.SessionAction) -> bool:
        if isinstance(action, actions.ActivationSignal):
            if self.state.phase == PHASE_HIDDEN:
                return self._open()
            return self.hide()

        if isinstance(action, actions.InputChanged):
            self.state.input_value = action.value
            self.backend.send(SearchRequest(action.value))
            return True

        if isinstance(action, actions.Activate):
            item = self.state.item(action.index)
            if item is None:
                return False
            self.backend.send(ActivateRequest(item.id))
            return False

        if isinstance(action, actions.Context):
            if self._close_menu():
                return True
            item = self.state.item(action.index)
            if item is None:
                return False
            if self.state.cursor_position is None:
                logger.debug("Context request without pointer position ignored")
                return False
            self.backend.send(ContextRequest(item.id))
            return False

        if isinstance(action, actions.MenuButton):
            closed = self._close_menu()
            self.backend.send(ActivateContextRequest(action.result_id, action.option_id))
            return closed

        if isinstance(action, actions.CloseContextMenu):
            return self._close_menu()

        if isinstance(action, actions.CursorMoved):
            self.state.cursor_position = action.position
            return False

        if isinstance(action, actions.Hide):
            if self._close_menu():
                return True
            return self.hide()

        if isinstance(action, actions.FocusNext):
            self.ops.focus_next()
            return True

        if isinstance(action, actions.FocusPrevious):
            self.ops.focus_previous()
            return True

        if isinstance(action, actions.Unfocus):
            self.state.input_value = ""
            self.backend.send(SearchRequest(""))
            self.ops.focus_input()
            return True

        if isinstance(action, actions.SurfaceFocused):
            self.ops.focus_input()
            return True

        if isinstance(action, actions.SurfaceUnfocused):
            return self.hide()

        raise TypeError(f"unsupported session action: {action!r}")

    # -- backend events -----------------------------------------------------

    def handle_backend_event(self, event: BackendEvent) -> bool:
        if isinstance(event, Started):
            event.handle.send(SearchRequest(""))
            self.backend.attach(event.handle.send)
            logger.info("Backend handle attached")
            return False
        if isinstance(event, Exited):
            if event.will_restart:
                logger.warning("Backend exited with code %s; waiting for restart", event.returncode)
            else:
                logger.error("Backend exited with code %s; results will not refresh", event.returncode)
            return False
        if isinstance(event, ResponseEvent):
            return self.handle_response(event.response)
        raise TypeError(f"unsupported backend event: {event!r}")

    def handle_response(self, response: Response) -> bool:
        if isinstance(response, CloseResponse):
            return self.hide()

        if isinstance(response, UpdateResponse):
            self.state.launcher_items = rank_results(response.results)
            if self.state.wait_for_result:
                self.state.wait_for_result = False
                self.surfaces.show_main()
            return True

        if isinstance(response, ContextResponse):
            if not response.options:
                return False
            pointer = self.state.cursor_position
            if pointer is None:
                logger.debug("Dropping context menu for %s: pointer position unknown", response.id)
                return False
            if not self.surfaces.main_exists:
                logger.debug("Dropping context menu for %s: launcher not shown", response.id)
                return False
            self.state.menu = MenuState(result_id=response.id, options=tuple(response.options))
            self.surfaces.show_menu(pointer)
            return True

        if isinstance(response, FillResponse):
            self.state.input_value = response.text
            self.ops.focus_input()
            return True

        if isinstance(response, DesktopEntryResponse):
            exec_line = self.ops.load_desktop_exec(response.path)
            if exec_line is None:
                logger.info("Desktop entry %s has no Exec; ignoring", response.path)
                return False
            token = self.ops.request_activation_token()
            self.ops.spawn_desktop_exec(exec_line, activation_envs(token))
            return self.hide()

        raise TypeError(f"unsupported backend response: {response!r}")


__all__ = ["BackendLink", "SessionController", "SessionOps"]
