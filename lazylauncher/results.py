"""Result ranking and display-text shaping for backend updates."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .backend.protocol import SearchResult

MAX_RESULTS = 10
PRIMARY_MAX_CHARS = 45
SECONDARY_MAX_CHARS = 60
ELLIPSIS = "..."


def rank_results(results: Iterable[SearchResult], limit: int = MAX_RESULTS) -> list[SearchResult]:
    """Put window-backed results first, keep order within groups, cap at ``limit``.

    This is a stable partition: ``sorted`` is stable and the key only
    distinguishes the two groups.
    """
    ranked = sorted(results, key=lambda result: 0 if result.has_window else 1)
    return ranked[: max(0, limit)]


@dataclass(frozen=True)
class ResultText:
    """Line-split primary/secondary labels for one result row."""

    primary: tuple[str, ...]
    secondary: tuple[str, ...]


def _shape_primary(line: str) -> str:
    if len(line) > PRIMARY_MAX_CHARS:
        return line[:PRIMARY_MAX_CHARS] + ELLIPSIS
    return line


def _shape_secondary(line: str) -> str:
    return line[:SECONDARY_MAX_CHARS]


def result_display_text(result: SearchResult) -> ResultText:
    """Derive row labels; window-backed results show the window title first."""
    if result.has_window:
        primary, secondary = result.description, result.name
    else:
        primary, secondary = result.name, result.description
    return ResultText(
        primary=tuple(_shape_primary(line) for line in primary.splitlines()),
        secondary=tuple(_shape_secondary(line) for line in secondary.splitlines()),
    )


__all__ = [
    "ELLIPSIS",
    "MAX_RESULTS",
    "PRIMARY_MAX_CHARS",
    "SECONDARY_MAX_CHARS",
    "ResultText",
    "rank_results",
    "result_display_text",
]
