"""Search-backend bridge: wire protocol, process supervision, desktop entries."""

from .bridge import BackendBridge, BackendEvent, BackendHandle, Exited, ResponseEvent, Started
from .protocol import (
    ActivateContextRequest,
    ActivateRequest,
    CloseRequest,
    CloseResponse,
    ContextOption,
    ContextRequest,
    ContextResponse,
    DesktopEntryResponse,
    FillResponse,
    IconSource,
    ProtocolError,
    SearchRequest,
    SearchResult,
    UpdateResponse,
)

__all__ = [
    "ActivateContextRequest",
    "ActivateRequest",
    "BackendBridge",
    "BackendEvent",
    "BackendHandle",
    "CloseRequest",
    "CloseResponse",
    "ContextOption",
    "ContextRequest",
    "ContextResponse",
    "DesktopEntryResponse",
    "Exited",
    "FillResponse",
    "IconSource",
    "ProtocolError",
    "ResponseEvent",
    "SearchRequest",
    "SearchResult",
    "Started",
    "UpdateResponse",
]
