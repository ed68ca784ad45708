"""High-level session actions produced by input handling and the host."""

from __future__ import annotations

from dataclasses import dataclass

from ..surfaces import Point


@dataclass(frozen=True)
class InputChanged:
    value: str


@dataclass(frozen=True)
class Activate:
    index: int


@dataclass(frozen=True)
class Context:
    index: int


@dataclass(frozen=True)
class MenuButton:
    result_id: int
    option_id: int


@dataclass(frozen=True)
class CloseContextMenu:
    pass


@dataclass(frozen=True)
class CursorMoved:
    position: Point


@dataclass(frozen=True)
class Hide:
    pass


@dataclass(frozen=True)
class FocusNext:
    pass


@dataclass(frozen=True)
class FocusPrevious:
    pass


@dataclass(frozen=True)
class Unfocus:
    pass


@dataclass(frozen=True)
class SurfaceFocused:
    pass


@dataclass(frozen=True)
class SurfaceUnfocused:
    pass


@dataclass(frozen=True)
class ActivationSignal:
    """Host asked to toggle the launcher."""


SessionAction = (
    InputChanged
    | Activate
    | Context
    | MenuButton
    | CloseContextMenu
    | CursorMoved
    | Hide
    | FocusNext
    | FocusPrevious
    | Unfocus
    | SurfaceFocused
    | SurfaceUnfocused
    | ActivationSignal
)

__all__ = [
    "Activate",
    "ActivationSignal",
    "CloseContextMenu",
    "Context",
    "CursorMoved",
    "FocusNext",
    "FocusPrevious",
    "Hide",
    "InputChanged",
    "MenuButton",
    "SessionAction",
    "SurfaceFocused",
    "SurfaceUnfocused",
    "Unfocus",
]
