"""ANSI-aware text measurement and clipping.

Keeps launcher rows aligned when color codes and wide chars are present.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Combining marks consume no columns; East Asian wide/fullwidth characters
    consume two.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Visible column count of ``text`` with escape sequences ignored."""
    plain = ANSI_ESCAPE_RE.sub("", text)
    return sum(char_display_width(ch) for ch in plain)


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Escape sequences are kept verbatim and do not count toward width.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    pos = 0
    for match in ANSI_ESCAPE_RE.finditer(text):
        visible, full = _take_columns(text[pos : match.start()], max_cols - col)
        out.append(visible)
        col += display_width(visible)
        if full:
            return "".join(out)
        out.append(match.group(0))
        pos = match.end()
    visible, _full = _take_columns(text[pos:], max_cols - col)
    out.append(visible)
    return "".join(out)


def _take_columns(plain: str, budget: int) -> tuple[str, bool]:
    """Longest prefix of escape-free ``plain`` fitting ``budget`` columns."""
    used = 0
    for idx, ch in enumerate(plain):
        used += char_display_width(ch)
        if used > budget:
            return plain[:idx], True
    return plain, False


def pad_ansi_line(text: str, width: int) -> str:
    """Clip then right-pad ``text`` with spaces to exactly ``width`` columns."""
    clipped = clip_ansi_line(text, width)
    return clipped + " " * max(0, width - display_width(clipped))
