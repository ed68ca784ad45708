"""Launcher view construction and screen output.

Turns session state plus view focus into ANSI rows for the whole terminal and
records where each result row and menu option landed so mouse clicks can be
mapped back to actions. Rendering helpers are side-effect free except
``write_frame``.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

from .ansi import clip_ansi_line, display_width, pad_ansi_line
from .backend.protocol import SearchResult
from .results import result_display_text
from .runtime.shell import CellBox, TerminalOverlayShell
from .session.state import SessionState
from .ui_theme import UITheme

SEARCH_PLACEHOLDER = "Type to search apps or type “?” for more options..."
IDLE_HINT = "launcher hidden · run `lazylauncher --toggle` to open · Ctrl+C quits"
ICON_COLUMN_WIDTH = 12
HINT_COLUMN_WIDTH = 10


@dataclass
class ViewState:
    """Keyboard focus within the panel: ``-1`` is the search box."""

    focused: int = -1

    def focus_input(self) -> None:
        self.focused = -1

    def focus_next(self, item_count: int) -> None:
        # Cycle search box -> rows -> search box.
        self.focused = -1 if self.focused + 1 >= item_count else self.focused + 1

    def focus_previous(self, item_count: int) -> None:
        if self.focused < 0:
            self.focused = item_count - 1
        else:
            self.focused -= 1

    def clamp(self, item_count: int) -> None:
        if self.focused >= item_count:
            self.focused = -1


@dataclass(frozen=True)
class FrameLayout:
    """Hit-test map produced alongside a frame."""

    panel: CellBox | None = None
    menu: CellBox | None = None
    item_rows: dict[int, int] = field(default_factory=dict)
    option_rows: dict[int, int] = field(default_factory=dict)

    def item_at(self, col: int, row: int) -> int | None:
        if self.panel is None or not self.panel.contains(col, row):
            return None
        return self.item_rows.get(row)

    def option_at(self, col: int, row: int) -> int | None:
        if self.menu is None or not self.menu.contains(col, row):
            return None
        return self.option_rows.get(row)


@dataclass(frozen=True)
class Frame:
    rows: list[str]
    layout: FrameLayout


def _boxed(theme: UITheme, text: str, inner_width: int, style: str = "") -> str:
    body = pad_ansi_line(f"{style}{text}{theme.reset if style else ''}", inner_width)
    return f"{theme.panel_border}│{theme.reset}{body}{theme.reset}{theme.panel_border}│{theme.reset}"


def _border(theme: UITheme, width: int, top: bool) -> str:
    left, right = ("╭", "╮") if top else ("╰", "╯")
    return f"{theme.panel_border}{left}{'─' * max(0, width - 2)}{right}{theme.reset}"


def _input_row(state: SessionState, view: ViewState, theme: UITheme) -> str:
    cursor = f"{theme.input_cursor} {theme.reset}" if view.focused < 0 else " "
    if state.input_value:
        return f" {theme.input_text}{state.input_value}{theme.reset}{cursor}"
    return f" {cursor}{theme.input_placeholder}{SEARCH_PLACEHOLDER}{theme.reset}"


def _item_lines(
    index: int,
    item: SearchResult,
    theme: UITheme,
    inner_width: int,
    focused: bool,
) -> list[str]:
    text = result_display_text(item)
    icon_names = [
        source.icon_name for source in (item.category_icon, item.icon) if source is not None
    ]
    icon_label = clip_ansi_line(" ".join(icon_names), ICON_COLUMN_WIDTH - 1)
    hint = f"Ctrl + {(index + 1) % 10}"
    text_width = max(1, inner_width - ICON_COLUMN_WIDTH - HINT_COLUMN_WIDTH - 2)
    background = theme.item_focused if focused else ""

    primary = list(text.primary) or [""]
    lines: list[str] = []
    for line_idx, line in enumerate(primary):
        icon_cell = pad_ansi_line(icon_label if line_idx == 0 else "", ICON_COLUMN_WIDTH)
        label = pad_ansi_line(line, text_width)
        hint_cell = hint.rjust(HINT_COLUMN_WIDTH) if line_idx == 0 else " " * HINT_COLUMN_WIDTH
        lines.append(
            f"{background} {theme.item_icon}{icon_cell}{theme.reset}{background}"
            f"{theme.item_primary}{label}{theme.reset}{background}"
            f"{theme.item_hint}{hint_cell}{theme.reset}{background} "
        )
    for line in text.secondary:
        label = pad_ansi_line(line, text_width)
        lines.append(
            f"{background} {' ' * ICON_COLUMN_WIDTH}{theme.item_secondary}{label}{theme.reset}"
            f"{background}{' ' * HINT_COLUMN_WIDTH} "
        )
    return lines


def _panel_rows(
    state: SessionState,
    view: ViewState,
    theme: UITheme,
    width: int,
) -> tuple[list[str], dict[int, int]]:
    """Build panel rows and a panel-relative row -> item index map."""
    inner = max(1, width - 2)
    rows = [_border(theme, width, top=True), _boxed(theme, _input_row(state, view, theme), inner)]
    item_rows: dict[int, int] = {}
    if state.launcher_items:
        rows.append(_boxed(theme, "", inner))
        last = len(state.launcher_items) - 1
        for idx, item in enumerate(state.launcher_items):
            for line in _item_lines(idx, item, theme, inner, focused=view.focused == idx):
                item_rows[len(rows)] = idx
                rows.append(_boxed(theme, line, inner))
            if idx != last:
                rows.append(_boxed(theme, f"{theme.divider}{'─' * inner}{theme.reset}", inner))
    rows.append(_border(theme, width, top=False))
    return rows, item_rows


def _menu_rows(state: SessionState, theme: UITheme, box: CellBox) -> tuple[list[str], dict[int, int]]:
    inner = max(1, box.width - 2)
    rows = [f"{theme.menu_border}┌{'─' * inner}┐{theme.reset}"]
    option_rows: dict[int, int] = {}
    options = state.menu.options if state.menu is not None else ()
    for idx, option in enumerate(options[: max(0, box.height - 2)]):
        option_rows[len(rows)] = idx
        body = pad_ansi_line(f" {theme.menu_item}{option.name}{theme.reset}", inner)
        rows.append(f"{theme.menu_border}│{theme.reset}{body}{theme.menu_border}│{theme.reset}")
    rows.append(f"{theme.menu_border}└{'─' * inner}┘{theme.reset}")
    return rows, option_rows


def _overlay(canvas: list[str], rows: list[str], box: CellBox, term_columns: int) -> None:
    """Paint ``rows`` over ``canvas`` starting at ``box`` (plain-space canvas rows only)."""
    for offset, row in enumerate(rows):
        target = box.top + offset
        if not 0 <= target < len(canvas):
            continue
        width = min(box.width, max(0, term_columns - box.left))
        canvas[target] = " " * box.left + pad_ansi_line(row, width) + "\033[0m"


def menu_content_size(state: SessionState) -> tuple[int, int]:
    """Columns/rows the popup would like for the current options."""
    if state.menu is None:
        return 1, 1
    widest = max((display_width(option.name) for option in state.menu.options), default=1)
    return widest + 4, len(state.menu.options) + 2


def build_frame(
    state: SessionState,
    view: ViewState,
    shell: TerminalOverlayShell,
    theme: UITheme,
    term_columns: int,
    term_lines: int,
) -> Frame:
    """Compose the full screen for the current surfaces."""
    canvas = [""] * max(1, term_lines)
    if shell.main is None:
        hint_row = max(0, term_lines // 2)
        hint = clip_ansi_line(IDLE_HINT, term_columns)
        pad = max(0, (term_columns - display_width(hint)) // 2)
        canvas[min(hint_row, len(canvas) - 1)] = f"{' ' * pad}{theme.idle_hint}{hint}{theme.reset}"
        return Frame(rows=canvas, layout=FrameLayout())

    probe = shell.main_box(term_columns, 1)
    assert probe is not None
    panel_rows, item_rows = _panel_rows(state, view, theme, probe.width)
    panel_box = CellBox(left=probe.left, top=probe.top, width=probe.width, height=len(panel_rows))
    _overlay(canvas, panel_rows, panel_box, term_columns)
    screen_item_rows = {panel_box.top + row: idx for row, idx in item_rows.items()}

    menu_box = None
    screen_option_rows: dict[int, int] = {}
    if shell.menu is not None and state.menu is not None:
        content_cols, content_rows = menu_content_size(state)
        menu_box = shell.menu_box(term_columns, term_lines, content_cols, content_rows)
        if menu_box is not None:
            menu_rows, option_rows = _menu_rows(state, theme, menu_box)
            _overlay_at(canvas, menu_rows, menu_box, term_columns)
            screen_option_rows = {menu_box.top + row: idx for row, idx in option_rows.items()}

    return Frame(
        rows=canvas,
        layout=FrameLayout(
            panel=panel_box,
            menu=menu_box,
            item_rows=screen_item_rows,
            option_rows=screen_option_rows,
        ),
    )


def _overlay_at(canvas: list[str], rows: list[str], box: CellBox, term_columns: int) -> None:
    """Paint popup rows using absolute cursor positioning over existing content."""
    for offset, row in enumerate(rows):
        target = box.top + offset
        if not 0 <= target < len(canvas):
            continue
        width = min(box.width, max(0, term_columns - box.left))
        canvas[target] = (
            canvas[target]
            + f"\033[0m\033[{target + 1};{box.left + 1}H"
            + pad_ansi_line(row, width)
            + "\033[0m"
        )


def write_frame(frame: Frame, stdout_fd: int | None = None) -> None:
    """Redraw every terminal row of ``frame``."""
    out: list[str] = []
    for row_idx, row in enumerate(frame.rows):
        out.append(f"\033[{row_idx + 1};1H\033[0m\033[2K{row}\033[0m")
    payload = "".join(out).encode("utf-8", errors="replace")
    fd = sys.stdout.fileno() if stdout_fd is None else stdout_fd
    os.write(fd, payload)
