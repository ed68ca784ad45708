"""Keybinding dispatch: key tokens to launcher session actions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..session import actions
from ..surfaces import Point
from .reader import parse_mouse_col_row

ActionFactory = Callable[[], "actions.SessionAction | None"]


@dataclass(frozen=True)
class KeyBinding:
    """One or more key tokens producing the same session action."""

    combos: tuple[str, ...]
    action: ActionFactory


class KeyBindingRegistry:
    """Token-to-action table with optional token normalization."""

    def __init__(self, normalize: Callable[[str], str] | None = None) -> None:
        self._normalize = normalize if normalize is not None else (lambda key: key)
        self._bindings: dict[str, ActionFactory] = {}

    def register(self, *bindings: KeyBinding) -> KeyBindingRegistry:
        """Register bindings (later ones win) and return ``self``."""
        for binding in bindings:
            for combo in binding.combos:
                self._bindings[self._normalize(combo)] = binding.action
        return self

    def lookup(self, key: str) -> actions.SessionAction | None:
        factory = self._bindings.get(self._normalize(key))
        if factory is None:
            return None
        return factory()


def _activate(index: int) -> ActionFactory:
    return lambda: actions.Activate(index)


def default_launcher_bindings() -> tuple[KeyBinding, ...]:
    """Ctrl+1..9 activate rows 0..8, Ctrl+0 row 9; vi/emacs-style focus keys."""
    digit_bindings = tuple(
        KeyBinding((f"CTRL_{digit}",), _activate((digit - 1) % 10)) for digit in range(10)
    )
    return digit_bindings + (
        KeyBinding(("UP", "CTRL_P", "CTRL_K"), actions.FocusPrevious),
        KeyBinding(("DOWN", "CTRL_N", "CTRL_J"), actions.FocusNext),
        KeyBinding(("ESC",), actions.Hide),
        KeyBinding(("CTRL_U",), actions.Unfocus),
    )


class KeybindingDispatcher:
    """Map raw key/mouse tokens to session actions.

    Pointer motion always yields ``CursorMoved``. Unrecognized tokens return
    ``None`` so the caller can route them to text editing.
    """

    def __init__(self, registry: KeyBindingRegistry | None = None) -> None:
        self.registry = (
            registry if registry is not None else KeyBindingRegistry().register(*default_launcher_bindings())
        )

    def dispatch(self, key: str) -> actions.SessionAction | None:
        if key.startswith("MOUSE_MOVE:"):
            return self.pointer_action(key)
        return self.registry.lookup(key)

    @staticmethod
    def pointer_action(key: str) -> actions.CursorMoved | None:
        """Build ``CursorMoved`` from any ``MOUSE_*:col:row`` token."""
        col, row = parse_mouse_col_row(key)
        if col is None or row is None:
            return None
        return actions.CursorMoved(Point(float(col), float(row)))


__all__ = [
    "KeyBinding",
    "KeyBindingRegistry",
    "KeybindingDispatcher",
    "default_launcher_bindings",
]
