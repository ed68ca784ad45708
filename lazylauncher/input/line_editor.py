"""Search-box editing for key tokens the keybinding layer does not claim."""

from __future__ import annotations


def _is_text_token(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


def _delete_last_word(value: str) -> str:
    trimmed = value.rstrip()
    cut = trimmed.rfind(" ")
    return "" if cut < 0 else trimmed[: cut + 1]


def edit_input(value: str, key: str) -> str | None:
    """Return the edited search text, or ``None`` when ``key`` is not an edit."""
    if _is_text_token(key):
        return value + key
    if key == "BACKSPACE":
        return value[:-1] if value else None
    if key == "CTRL_W":
        return _delete_last_word(value) if value else None
    return None
