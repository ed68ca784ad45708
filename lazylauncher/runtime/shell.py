"""Terminal stand-in for the compositor's overlay-surface primitives.

The launcher panel and its popup are drawn by the renderer; this adapter only
records which surfaces exist and with which settings. Size limits are given
in logical pixels and converted to cells with a fixed cell size.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..logger import logging
from ..surfaces import LayerSurfaceSettings, OverlayShell, PopupSettings, SurfaceId

logger = logging.getLogger(__name__)

CELL_WIDTH_PX = 8
CELL_HEIGHT_PX = 16


@dataclass(frozen=True)
class CellBox:
    left: int  # 0-based column
    top: int  # 0-based row
    width: int
    height: int

    def contains(self, col: int, row: int) -> bool:
        return self.left <= col < self.left + self.width and self.top <= row < self.top + self.height


class TerminalOverlayShell:
    """Track surface existence and turn surface settings into cell geometry."""

    def __init__(self, cell_width_px: int = CELL_WIDTH_PX, cell_height_px: int = CELL_HEIGHT_PX) -> None:
        self.cell_width_px = max(1, cell_width_px)
        self.cell_height_px = max(1, cell_height_px)
        self.main: LayerSurfaceSettings | None = None
        self.menu: PopupSettings | None = None

    def as_overlay_shell(self) -> OverlayShell:
        return OverlayShell(
            create_layer_surface=self.create_layer_surface,
            destroy_layer_surface=self.destroy_layer_surface,
            create_popup=self.create_popup,
            destroy_popup=self.destroy_popup,
        )

    def create_layer_surface(self, settings: LayerSurfaceSettings) -> None:
        self.main = settings

    def destroy_layer_surface(self, surface_id: SurfaceId) -> None:
        if self.main is not None and self.main.id == surface_id:
            self.main = None
            self.menu = None

    def create_popup(self, settings: PopupSettings) -> None:
        if self.main is None or self.main.id != settings.parent:
            logger.warning("Popup %s has no live parent; ignoring", settings.id)
            return
        self.menu = settings

    def destroy_popup(self, surface_id: SurfaceId) -> None:
        if self.menu is not None and self.menu.id == surface_id:
            self.menu = None

    def main_box(self, term_columns: int, content_rows: int) -> CellBox | None:
        """Top-anchored, horizontally centered panel box."""
        if self.main is None:
            return None
        limits = self.main.size_limits
        max_cols = term_columns
        if limits.max_width is not None:
            max_cols = min(max_cols, int(limits.max_width // self.cell_width_px))
        width = max(int(limits.min_width), min(term_columns, max_cols))
        left = max(0, (term_columns - width) // 2)
        top = self.main.margin_top // self.cell_height_px
        return CellBox(left=left, top=top, width=width, height=max(1, content_rows))

    def menu_box(self, term_columns: int, term_lines: int, content_cols: int, content_rows: int) -> CellBox | None:
        """Popup box right of the 1x1 anchor; flipped/slid to stay on screen."""
        if self.menu is None:
            return None
        limits = self.menu.size_limits
        max_cols = term_columns if limits.max_width is None else int(limits.max_width // self.cell_width_px)
        max_rows = term_lines if limits.max_height is None else int(limits.max_height // self.cell_height_px)
        width = max(int(limits.min_width), min(content_cols, max_cols, term_columns))
        height = max(int(limits.min_height), min(content_rows, max_rows, term_lines))
        anchor = self.menu.anchor_rect
        # Mouse coordinates are 1-based cells.
        anchor_col = anchor.x - 1
        anchor_row = anchor.y - 1
        left = anchor_col + anchor.width
        if self.menu.reactive and left + width > term_columns:
            left = max(0, anchor_col - width)
        top = anchor_row
        if self.menu.reactive and top + height > term_lines:
            top = max(0, term_lines - height)
        return CellBox(left=left, top=top, width=width, height=height)
