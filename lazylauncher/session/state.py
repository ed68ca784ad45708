from __future__ import annotations

from dataclasses import dataclass, field

from ..backend.protocol import ContextOption, SearchResult
from ..surfaces import Point

PHASE_HIDDEN = "hidden"
PHASE_AWAITING_FIRST_RESULT = "awaiting_first_result"
PHASE_VISIBLE = "visible"
PHASE_VISIBLE_WITH_MENU = "visible_with_menu"


@dataclass(frozen=True)
class MenuState:
    """Open context menu: the result it belongs to and its options."""

    result_id: int
    options: tuple[ContextOption, ...]


@dataclass
class SessionState:
    input_value: str = ""
    active_surface: bool = False
    launcher_items: list[SearchResult] = field(default_factory=list)
    wait_for_result: bool = False
    menu: MenuState | None = None
    cursor_position: Point | None = None

    @property
    def phase(self) -> str:
        """Session phase derived from the surface/menu flags."""
        if not self.active_surface:
            return PHASE_HIDDEN
        if self.wait_for_result:
            return PHASE_AWAITING_FIRST_RESULT
        if self.menu is not None:
            return PHASE_VISIBLE_WITH_MENU
        return PHASE_VISIBLE

    def item(self, index: int) -> SearchResult | None:
        """Return the result at ``index`` or ``None`` when out of range."""
        if 0 <= index < len(self.launcher_items):
            return self.launcher_items[index]
        return None
