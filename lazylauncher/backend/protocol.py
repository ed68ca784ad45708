"""Typed request/response model and JSON line codec for the search backend.

The backend speaks one JSON document per line, externally tagged the way
pop-launcher does (``"Close"`` or ``{"Update": [...]}``). Requests carry no
correlation id; responses are delivered in backend emission order.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field


class ProtocolError(ValueError):
    """Raised when a backend line does not decode to a known response."""


@dataclass(frozen=True)
class IconSource:
    """Icon reference as sent by the backend (themed name or mime type)."""

    kind: str  # "name" or "mime"
    value: str

    @property
    def icon_name(self) -> str:
        return self.value


@dataclass(frozen=True)
class SearchResult:
    id: int
    name: str
    description: str
    icon: IconSource | None = None
    category_icon: IconSource | None = None
    window: tuple[int, int] | None = None

    @property
    def has_window(self) -> bool:
        return self.window is not None


@dataclass(frozen=True)
class ContextOption:
    id: int
    name: str


# Requests (controller -> backend)


@dataclass(frozen=True)
class CloseRequest:
    pass


@dataclass(frozen=True)
class ExitRequest:
    pass


@dataclass(frozen=True)
class SearchRequest:
    query: str


@dataclass(frozen=True)
class ActivateRequest:
    id: int


@dataclass(frozen=True)
class ContextRequest:
    id: int


@dataclass(frozen=True)
class ActivateContextRequest:
    id: int
    context: int


Request = (
    CloseRequest
    | ExitRequest
    | SearchRequest
    | ActivateRequest
    | ContextRequest
    | ActivateContextRequest
)


# Responses (backend -> controller)


@dataclass(frozen=True)
class UpdateResponse:
    results: tuple[SearchResult, ...] = ()


@dataclass(frozen=True)
class ContextResponse:
    id: int
    options: tuple[ContextOption, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FillResponse:
    text: str


@dataclass(frozen=True)
class DesktopEntryResponse:
    path: str
    gpu_preference: str = "Default"


@dataclass(frozen=True)
class CloseResponse:
    pass


Response = UpdateResponse | ContextResponse | FillResponse | DesktopEntryResponse | CloseResponse


def encode_request(request: Request) -> str:
    """Serialize one request to a single protocol line (without newline)."""
    if isinstance(request, CloseRequest):
        # Interrupt resets the backend's current session without exiting it.
        payload: object = "Interrupt"
    elif isinstance(request, ExitRequest):
        payload = "Exit"
    elif isinstance(request, SearchRequest):
        payload = {"Search": request.query}
    elif isinstance(request, ActivateRequest):
        payload = {"Activate": request.id}
    elif isinstance(request, ContextRequest):
        payload = {"Context": request.id}
    elif isinstance(request, ActivateContextRequest):
        payload = {"ActivateContext": {"id": request.id, "context": request.context}}
    else:
        raise TypeError(f"unsupported request: {request!r}")
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def _require_int(value: object, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ProtocolError(f"{what} must be an integer, got {value!r}")
    return value


def _require_str(value: object, what: str) -> str:
    if not isinstance(value, str):
        raise ProtocolError(f"{what} must be a string, got {value!r}")
    return value


def _decode_icon(value: object) -> IconSource | None:
    if value is None:
        return None
    if not isinstance(value, dict) or len(value) != 1:
        raise ProtocolError(f"malformed icon source: {value!r}")
    (tag, name), = value.items()
    if tag == "Name":
        return IconSource("name", _require_str(name, "icon name"))
    if tag == "Mime":
        return IconSource("mime", _require_str(name, "icon mime"))
    raise ProtocolError(f"unknown icon source tag: {tag!r}")


def _decode_window(value: object) -> tuple[int, int] | None:
    if value is None:
        return None
    if not isinstance(value, list) or len(value) != 2:
        raise ProtocolError(f"malformed window id: {value!r}")
    return (_require_int(value[0], "window id"), _require_int(value[1], "window id"))


def decode_search_result(data: object) -> SearchResult:
    if not isinstance(data, dict):
        raise ProtocolError(f"search result must be an object, got {data!r}")
    return SearchResult(
        id=_require_int(data.get("id"), "result id"),
        name=_require_str(data.get("name", ""), "result name"),
        description=_require_str(data.get("description", ""), "result description"),
        icon=_decode_icon(data.get("icon")),
        category_icon=_decode_icon(data.get("category_icon")),
        window=_decode_window(data.get("window")),
    )


def _decode_option(data: object) -> ContextOption:
    if not isinstance(data, dict):
        raise ProtocolError(f"context option must be an object, got {data!r}")
    return ContextOption(
        id=_require_int(data.get("id"), "option id"),
        name=_require_str(data.get("name", ""), "option name"),
    )


def decode_response(line: str) -> Response:
    """Parse one backend output line into a typed response.

    Raises ``ProtocolError`` for anything that is not a well-formed response.
    """
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as exc:
        raise ProtocolError(f"invalid JSON from backend: {exc}") from exc

    if payload == "Close":
        return CloseResponse()
    if not isinstance(payload, dict) or len(payload) != 1:
        raise ProtocolError(f"unrecognized backend response: {payload!r}")

    (tag, body), = payload.items()
    if tag == "Update":
        if not isinstance(body, list):
            raise ProtocolError("Update payload must be a list")
        return UpdateResponse(tuple(decode_search_result(item) for item in body))
    if tag == "Context":
        if not isinstance(body, dict):
            raise ProtocolError("Context payload must be an object")
        options = body.get("options", [])
        if not isinstance(options, list):
            raise ProtocolError("Context options must be a list")
        return ContextResponse(
            id=_require_int(body.get("id"), "context id"),
            options=tuple(_decode_option(option) for option in options),
        )
    if tag == "Fill":
        return FillResponse(_require_str(body, "fill text"))
    if tag == "DesktopEntry":
        if not isinstance(body, dict):
            raise ProtocolError("DesktopEntry payload must be an object")
        gpu_preference = body.get("gpu_preference", "Default")
        return DesktopEntryResponse(
            path=_require_str(body.get("path"), "desktop entry path"),
            gpu_preference=gpu_preference if isinstance(gpu_preference, str) else "Default",
        )
    raise ProtocolError(f"unknown backend response tag: {tag!r}")


__all__ = [
    "ActivateContextRequest",
    "ActivateRequest",
    "CloseRequest",
    "CloseResponse",
    "ContextOption",
    "ContextRequest",
    "ContextResponse",
    "DesktopEntryResponse",
    "ExitRequest",
    "FillResponse",
    "IconSource",
    "ProtocolError",
    "Request",
    "Response",
    "SearchRequest",
    "SearchResult",
    "UpdateResponse",
    "decode_response",
    "decode_search_result",
    "encode_request",
]
