"""Main interactive event loop for the launcher.

One iteration handles pending host activations, drained backend events, an
optional redraw, and at most one input token. Every action is fully processed
by the session controller before the next one is looked at.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass

from ..backend.bridge import BackendEvent
from ..input import KeybindingDispatcher, edit_input, parse_mouse_col_row, read_key
from ..render import FrameLayout, ViewState
from ..session import SessionController, actions
from ..session.state import PHASE_HIDDEN, PHASE_AWAITING_FIRST_RESULT, SessionState

QUIT_KEYS = frozenset({"CTRL_C"})


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    key_poll_ms: int = 50


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``."""

    consume_activation: Callable[[], bool]
    drain_backend_events: Callable[[], list[BackendEvent]]
    render: Callable[[int, int], FrameLayout]


def _mouse_actions(
    key: str,
    state: SessionState,
    layout: FrameLayout,
    dispatcher: KeybindingDispatcher,
) -> list[actions.SessionAction]:
    out: list[actions.SessionAction] = []
    moved = dispatcher.pointer_action(key)
    if moved is not None:
        out.append(moved)
    if key.startswith("MOUSE_MOVE:"):
        return out

    col, row = parse_mouse_col_row(key)
    if col is None or row is None:
        return out
    cell_col, cell_row = col - 1, row - 1
    released = key.startswith("MOUSE_LEFT_UP:") or key.startswith("MOUSE_RIGHT_UP:")
    if not released:
        return out

    if state.menu is not None:
        option_idx = layout.option_at(cell_col, cell_row)
        if option_idx is not None and key.startswith("MOUSE_LEFT_UP:"):
            option = state.menu.options[option_idx]
            out.append(actions.MenuButton(state.menu.result_id, option.id))
        else:
            # Popup grabs input: any other click dismisses it.
            out.append(actions.CloseContextMenu())
        return out

    item_idx = layout.item_at(cell_col, cell_row)
    if item_idx is None:
        return out
    if key.startswith("MOUSE_LEFT_UP:"):
        out.append(actions.Activate(item_idx))
    else:
        out.append(actions.Context(item_idx))
    return out


def actions_for_key(
    key: str,
    state: SessionState,
    view: ViewState,
    layout: FrameLayout,
    dispatcher: KeybindingDispatcher,
) -> list[actions.SessionAction]:
    """Translate one input token into zero or more session actions."""
    if key.startswith("MOUSE"):
        return _mouse_actions(key, state, layout, dispatcher)

    shown = state.phase not in {PHASE_HIDDEN, PHASE_AWAITING_FIRST_RESULT}
    if not shown:
        # Keyboard belongs to the launcher surface only while it is shown.
        return []
    if key == "FOCUS_IN":
        return [actions.SurfaceFocused()]
    if key == "FOCUS_OUT":
        return [actions.SurfaceUnfocused()]
    if key == "ENTER":
        return [actions.Activate(view.focused if view.focused >= 0 else 0)]

    action = dispatcher.dispatch(key)
    if action is not None:
        return [action]

    edited = edit_input(state.input_value, key)
    if edited is not None:
        view.focus_input()
        return [actions.InputChanged(edited)]
    return []


def run_main_loop(
    controller: SessionController,
    dispatcher: KeybindingDispatcher,
    view: ViewState,
    stdin_fd: int,
    timing: RuntimeLoopTiming,
    callbacks: RuntimeLoopCallbacks,
) -> None:
    """Run the launcher loop until a quit key is read."""
    ops = callbacks
    dirty = True
    layout = FrameLayout()
    last_size: tuple[int, int] | None = None

    while True:
        if ops.consume_activation():
            dirty |= controller.handle_action(actions.ActivationSignal())

        for event in ops.drain_backend_events():
            dirty |= controller.handle_backend_event(event)

        term = shutil.get_terminal_size((80, 24))
        size = (term.columns, term.lines)
        if size != last_size:
            last_size = size
            dirty = True

        if dirty:
            view.clamp(len(controller.state.launcher_items))
            layout = ops.render(term.columns, term.lines)
            dirty = False

        try:
            key = read_key(stdin_fd, timeout_ms=timing.key_poll_ms)
        except KeyboardInterrupt:
            break
        if key == "":
            continue
        if key in QUIT_KEYS:
            break

        for action in actions_for_key(key, controller.state, view, layout, dispatcher):
            dirty |= controller.handle_action(action)
