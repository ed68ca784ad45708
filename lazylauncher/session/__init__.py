"""Session controller package: actions, state, and the state machine."""

from .controller import BackendLink, SessionController, SessionOps
from .state import (
    PHASE_AWAITING_FIRST_RESULT,
    PHASE_HIDDEN,
    PHASE_VISIBLE,
    PHASE_VISIBLE_WITH_MENU,
    MenuState,
    SessionState,
)

__all__ = [
    "BackendLink",
    "MenuState",
    "PHASE_AWAITING_FIRST_RESULT",
    "PHASE_HIDDEN",
    "PHASE_VISIBLE",
    "PHASE_VISIBLE_WITH_MENU",
    "SessionController",
    "SessionOps",
    "SessionState",
]
