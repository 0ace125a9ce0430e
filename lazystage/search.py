"""Name filter deriving the visible row list from the entry store."""

from __future__ import annotations

from collections.abc import Sequence

from .rows import HeaderRow, Row
from .runtime.state import AppState

MAX_SEARCH_CHARS = 256


def row_matches(row: Row, term: str) -> bool:
    """Return whether ``row`` passes the filter for ``term``.

    Headers always pass, even when every item below them is filtered out.
    Item paths are matched as case-sensitive substrings.
    """
    if not term:
        return True
    if isinstance(row, HeaderRow):
        return True
    return term in row.path


def filter_rows(rows: Sequence[Row], term: str) -> list[Row]:
    """Return rows passing ``term`` in their original order."""
    if not term:
        return list(rows)
    return [row for row in rows if row_matches(row, term)]


def append_to_term(term: str, text: str) -> str:
    """Append typed text, dropping characters beyond ``MAX_SEARCH_CHARS``."""
    room = MAX_SEARCH_CHARS - len(term)
    if room <= 0:
        return term
    return term + text[:room]


def refilter(state: AppState) -> None:
    """Recompute ``state.view`` from the store rows and current search term."""
    state.view = filter_rows(state.store.rows, state.search_term)
    state.dirty = True
