"""Input-layer public API for key decoding and launcher keybindings.

Exports are split between low-level terminal decoding (`read_key`) and the
dispatcher that turns tokens into session actions.
"""

from .keybindings import KeyBinding, KeyBindingRegistry, KeybindingDispatcher, default_launcher_bindings
from .line_editor import edit_input
from .reader import ESC_SEQUENCE_TIMEOUT_MS, UNKNOWN_KEY, parse_mouse_col_row, read_key

__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyBinding",
    "KeyBindingRegistry",
    "KeybindingDispatcher",
    "UNKNOWN_KEY",
    "default_launcher_bindings",
    "edit_input",
    "parse_mouse_col_row",
    "read_key",
]
