"""Terminal control helpers for the launcher session.

Owns raw-mode lifecycle, alternate-screen switching, mouse and focus reporting,
and the kitty keyboard mode that makes Ctrl+digit distinguishable.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

# Alternate screen, hidden cursor, any-motion SGR mouse, focus in/out reports,
# kitty keyboard "disambiguate escape codes" flag.
_ENTER_SEQUENCE = b"\x1b[?1049h\x1b[?25l\x1b[?1000h\x1b[?1003h\x1b[?1006h\x1b[?1004h\x1b[>1u"
_LEAVE_SEQUENCE = b"\x1b[<u\x1b[?1004l\x1b[?1006l\x1b[?1003l\x1b[?1000l\x1b[?25h\x1b[?1049l"


class TerminalController:
    """Manage terminal mode transitions for the launcher UI."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, _ENTER_SEQUENCE)

    def disable_tui_mode(self) -> None:
        os.write(self.stdout_fd, _LEAVE_SEQUENCE)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def clear(self) -> None:
        os.write(self.stdout_fd, b"\x1b[2J\x1b[H")

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
