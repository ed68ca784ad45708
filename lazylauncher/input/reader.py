"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing, kitty ``CSI u`` key reports (needed to see
Ctrl+digit), focus reports, and SGR mouse events including pointer motion.
Sequences the launcher has no binding for decode to ``UNKNOWN_KEY`` so only a
real Escape press reads as ``"ESC"``.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

KITTY_CTRL_BIT = 4
KITTY_KEYPAD_DIGIT_BASE = 57399  # KP_0
_CSI_FINAL_ARROWS = {b"A": "UP", b"B": "DOWN", b"C": "RIGHT", b"D": "LEFT", b"H": "HOME", b"F": "END"}
_CSI_TILDE_KEYS = {
    "1": "HOME",
    "2": "INSERT",
    "3": "DELETE",
    "4": "END",
    "5": "PAGE_UP",
    "6": "PAGE_DOWN",
    "7": "HOME",
    "8": "END",
}

# Token for sequences with no launcher meaning: F-keys, kitty Ctrl+punctuation, garbled CSI.
UNKNOWN_KEY = "UNKNOWN"


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _decode_control(ch: bytes) -> str | None:
    code = ch[0]
    if ch == b"\t":
        return "TAB"
    if ch == b"\r":
        return "ENTER"
    if ch in {b"\x08", b"\x7f"}:
        return "BACKSPACE"
    if ch == b"\x00":
        return "CTRL_SPACE"
    if 1 <= code <= 26:
        return f"CTRL_{chr(ord('A') + code - 1)}"
    return None


def _decode_csi_u(params: str) -> str:
    """Decode ``CSI code ; modifiers u`` (kitty keyboard protocol)."""
    fields = params.split(";")
    try:
        code = int(fields[0].split(":")[0])
        modifiers = int(fields[1].split(":")[0]) - 1 if len(fields) > 1 and fields[1] else 0
    except ValueError:
        return UNKNOWN_KEY
    ctrl = bool(modifiers & KITTY_CTRL_BIT)
    if code == 27:
        return "ESC"
    if code == 13:
        return "ENTER"
    if code == 9:
        return "TAB"
    if code == 127:
        return "BACKSPACE"
    if KITTY_KEYPAD_DIGIT_BASE <= code <= KITTY_KEYPAD_DIGIT_BASE + 9:
        digit = str(code - KITTY_KEYPAD_DIGIT_BASE)
        return f"CTRL_{digit}" if ctrl else digit
    if 0 <= code <= 0x10FFFF:
        char = chr(code)
        if ctrl:
            return f"CTRL_{char.upper()}" if char.isalnum() else "CTRL_SPACE" if char == " " else UNKNOWN_KEY
        return char
    return UNKNOWN_KEY


def _decode_sgr_mouse(payload: bytes, final: bytes) -> str:
    try:
        btn_s, col_s, row_s = payload.decode("ascii").split(";")
        btn = int(btn_s)
        col = int(col_s)
        row = int(row_s)
    except Exception:
        return UNKNOWN_KEY
    button = btn & 0b11
    if btn & 0b0100_0000:
        if button == 0:
            return f"MOUSE_WHEEL_UP:{col}:{row}"
        if button == 1:
            return f"MOUSE_WHEEL_DOWN:{col}:{row}"
        return f"MOUSE_MOVE:{col}:{row}"
    if btn & 0b0010_0000:
        return f"MOUSE_MOVE:{col}:{row}"
    suffix = "DOWN" if final == b"M" else "UP"
    if button == 0:
        return f"MOUSE_LEFT_{suffix}:{col}:{row}"
    if button == 2:
        return f"MOUSE_RIGHT_{suffix}:{col}:{row}"
    return f"MOUSE_MOVE:{col}:{row}"


def _read_csi(fd: int) -> str:
    first = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if first is None:
        return UNKNOWN_KEY
    if first == b"I":
        return "FOCUS_IN"
    if first == b"O":
        return "FOCUS_OUT"
    if first == b"Z":
        return "SHIFT_TAB"
    if first in _CSI_FINAL_ARROWS:
        return _CSI_FINAL_ARROWS[first]

    payload = bytearray(first)
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return UNKNOWN_KEY
        if 0x40 <= part[0] <= 0x7E:
            final = part
            break
        payload.extend(part)
        if len(payload) > 64:
            return UNKNOWN_KEY

    if payload.startswith(b"<") and final in {b"M", b"m"}:
        return _decode_sgr_mouse(bytes(payload[1:]), final)
    text = payload.decode("ascii", errors="replace")
    if final == b"u":
        return _decode_csi_u(text)
    if final in _CSI_FINAL_ARROWS:
        # Modified arrows arrive as CSI 1 ; mods A.
        return _CSI_FINAL_ARROWS[final]
    if final == b"~":
        return _CSI_TILDE_KEYS.get(text.split(";")[0], UNKNOWN_KEY)
    return UNKNOWN_KEY


def _read_escape(fd: int) -> str:
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"[":
        return _read_csi(fd)
    if seq == b"\x1b":
        _PENDING_BYTES.append(seq)
        return "ESC"
    if seq == b"O":
        # SS3 arrows from terminals in application cursor mode.
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        return _CSI_FINAL_ARROWS.get(final, UNKNOWN_KEY) if final is not None else "ALT_O"
    if 0x20 < seq[0] < 0x7F:
        return f"ALT_{seq.decode('ascii')}"
    return UNKNOWN_KEY


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token from ``fd``; ``""`` means timeout or EOF."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""
        ch = os.read(fd, 1)
        if not ch:
            return ""

    if ch == b"\x1b":
        return _read_escape(fd)

    control = _decode_control(ch)
    if control is not None:
        return control
    if ch[0] < 0x20:
        return ""

    expected = _utf8_length(ch[0])
    raw = bytearray(ch)
    while len(raw) < expected:
        more = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if more is None:
            break
        raw.extend(more)
    return bytes(raw).decode("utf-8", errors="replace")


def parse_mouse_col_row(mouse_key: str) -> tuple[int | None, int | None]:
    """Parse ``MOUSE_*:col:row`` key tokens into integer coordinates."""
    parts = mouse_key.split(":")
    if len(parts) < 3:
        return None, None
    try:
        return int(parts[1]), int(parts[2])
    except Exception:
        return None, None
