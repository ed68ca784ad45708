"""Overlay-surface lifecycle for the Main panel and the context Menu.

The manager owns the create/destroy calls against an injected shell adapter
and remembers which surfaces currently exist. Surface ids live in a
``SurfaceContext`` handed in by the composition layer.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable
from dataclasses import dataclass, field

from .logger import logging

logger = logging.getLogger(__name__)

_SURFACE_IDS = itertools.count(1)

MAIN_NAMESPACE = "launcher"
MAIN_TOP_MARGIN = 16
MAIN_MAX_WIDTH = 600
MENU_MAX_WIDTH = 300
MENU_MAX_HEIGHT = 800

ANCHOR_TOP = "top"
ANCHOR_RIGHT = "right"
GRAVITY_RIGHT = "right"
KEYBOARD_EXCLUSIVE = "exclusive"


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class SizeLimits:
    min_width: float = 0.0
    min_height: float = 0.0
    max_width: float | None = None
    max_height: float | None = None


@dataclass(frozen=True)
class SurfaceId:
    value: int
    label: str

    @classmethod
    def unique(cls, label: str) -> SurfaceId:
        return cls(next(_SURFACE_IDS), label)


@dataclass(frozen=True)
class SurfaceContext:
    """Explicit identities for the two launcher surfaces."""

    main: SurfaceId = field(default_factory=lambda: SurfaceId.unique("main"))
    menu: SurfaceId = field(default_factory=lambda: SurfaceId.unique("menu"))


@dataclass(frozen=True)
class LayerSurfaceSettings:
    id: SurfaceId
    namespace: str
    anchor: str
    keyboard_interactivity: str
    margin_top: int
    size_limits: SizeLimits


@dataclass(frozen=True)
class PopupSettings:
    id: SurfaceId
    parent: SurfaceId
    anchor_rect: Rect
    anchor: str
    gravity: str
    reactive: bool
    size_limits: SizeLimits
    grab: bool


@dataclass(frozen=True)
class OverlayShell:
    """Adapter over the display server's overlay-surface primitives."""

    create_layer_surface: Callable[[LayerSurfaceSettings], None]
    destroy_layer_surface: Callable[[SurfaceId], None]
    create_popup: Callable[[PopupSettings], None]
    destroy_popup: Callable[[SurfaceId], None]


def main_surface_settings(context: SurfaceContext) -> LayerSurfaceSettings:
    return LayerSurfaceSettings(
        id=context.main,
        namespace=MAIN_NAMESPACE,
        anchor=ANCHOR_TOP,
        keyboard_interactivity=KEYBOARD_EXCLUSIVE,
        margin_top=MAIN_TOP_MARGIN,
        size_limits=SizeLimits(min_width=1.0, min_height=1.0, max_width=float(MAIN_MAX_WIDTH)),
    )


def menu_popup_settings(context: SurfaceContext, pointer: Point) -> PopupSettings:
    """Popup positioned to the right of a 1x1 rectangle under the pointer."""
    return PopupSettings(
        id=context.menu,
        parent=context.main,
        anchor_rect=Rect(x=round(pointer.x), y=round(pointer.y), width=1, height=1),
        anchor=ANCHOR_RIGHT,
        gravity=GRAVITY_RIGHT,
        reactive=True,
        size_limits=SizeLimits(
            min_width=1.0,
            min_height=1.0,
            max_width=float(MENU_MAX_WIDTH),
            max_height=float(MENU_MAX_HEIGHT),
        ),
        grab=True,
    )


class SurfaceManager:
    """Create and destroy launcher surfaces, keeping Menu nested in Main."""

    def __init__(self, shell: OverlayShell, context: SurfaceContext | None = None) -> None:
        self.shell = shell
        self.context = context if context is not None else SurfaceContext()
        self._main_exists = False
        self._menu_exists = False

    @property
    def main_exists(self) -> bool:
        return self._main_exists

    @property
    def menu_exists(self) -> bool:
        return self._menu_exists

    def show_main(self) -> bool:
        if self._main_exists:
            return False
        self.shell.create_layer_surface(main_surface_settings(self.context))
        self._main_exists = True
        logger.debug("Created main surface %s", self.context.main)
        return True

    def show_menu(self, pointer: Point) -> bool:
        """Open the menu popup; refused while Main does not exist."""
        if not self._main_exists:
            logger.debug("Refusing menu popup without a main surface")
            return False
        if self._menu_exists:
            self.shell.destroy_popup(self.context.menu)
        self.shell.create_popup(menu_popup_settings(self.context, pointer))
        self._menu_exists = True
        return True

    def close_menu(self) -> None:
        """Issue a popup destroy; harmless when no popup is shown."""
        self.shell.destroy_popup(self.context.menu)
        self._menu_exists = False

    def close_main(self) -> bool:
        if not self._main_exists:
            return False
        if self._menu_exists:
            self.close_menu()
        self.shell.destroy_layer_surface(self.context.main)
        self._main_exists = False
        logger.debug("Destroyed main surface %s", self.context.main)
        return True


__all__ = [
    "LayerSurfaceSettings",
    "OverlayShell",
    "Point",
    "PopupSettings",
    "Rect",
    "SizeLimits",
    "SurfaceContext",
    "SurfaceId",
    "SurfaceManager",
    "main_surface_settings",
    "menu_popup_settings",
]
