"""Mark flags, section marking, visual mode and bulk operations.

Bulk operations are a closed set (``stage`` / ``unstage``). What each one
means for a row depends on the row's category; ``operation_label`` gives the
user-facing name and the action controller owns the matching capability.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from .git_backend import GitError
from .navigation import resolve_index, selected_item
from .rows import (
    CATEGORY_INDEX,
    CATEGORY_UNTRACKED,
    CATEGORY_WORKSPACE,
    ItemRow,
    Row,
    RowKey,
)
from .runtime.state import AppState
from .store import EntryStore

logger = logging.getLogger(__name__)

OPERATION_STAGE = "stage"
OPERATION_UNSTAGE = "unstage"

_OPERATION_LABELS: dict[tuple[str, str], str] = {
    (OPERATION_STAGE, CATEGORY_INDEX): "",
    (OPERATION_STAGE, CATEGORY_WORKSPACE): "stage",
    (OPERATION_STAGE, CATEGORY_UNTRACKED): "stage",
    (OPERATION_UNSTAGE, CATEGORY_INDEX): "unstage",
    (OPERATION_UNSTAGE, CATEGORY_WORKSPACE): "stage delete",
    (OPERATION_UNSTAGE, CATEGORY_UNTRACKED): "delete file",
}


def operation_label(operation: str, category: str | None) -> str:
    """Return the status-bar name of ``operation`` for ``category``.

    An empty string means the operation does nothing for that category.
    """
    if category is None:
        return ""
    return _OPERATION_LABELS.get((operation, category), "")


def toggle_mark(row: Row | None) -> None:
    if isinstance(row, ItemRow):
        row.marked = not row.marked


def toggle_section(store: EntryStore, row: Row | None) -> None:
    """Set every item in ``row``'s category to the opposite of ``row``'s mark."""
    if not isinstance(row, ItemRow):
        return
    flag = not row.marked
    for item in store.items_in_category(row.category):
        item.marked = flag


def enter_visual_mode(state: AppState) -> None:
    toggle_mark(selected_item(state))
    state.visual_mark = True
    state.dirty = True


def exit_visual_mode(state: AppState, cancel: bool) -> None:
    """Leave visual mode; a cancel also drops every mark in the store."""
    state.visual_mark = False
    if cancel:
        state.store.clear_marks()
    state.dirty = True


def toggle_visual_mode(state: AppState) -> None:
    if state.visual_mark:
        exit_visual_mode(state, cancel=False)
    else:
        enter_visual_mode(state)


def recovery_anchor(state: AppState) -> RowKey | None:
    """Return the first unmarked item at or after the current view position."""
    position = resolve_index(state)
    if position is None:
        position = 0
    for row in state.view[position:]:
        if isinstance(row, ItemRow) and not row.marked:
            return row.key
    return None


@dataclass
class BulkResult:
    anchor: RowKey | None
    applied: list[RowKey] = field(default_factory=list)
    failures: list[tuple[RowKey, str]] = field(default_factory=list)

    def summary(self, operation: str) -> str:
        """Return a status-bar message, empty when everything succeeded."""
        if not self.failures:
            return ""
        total = len(self.applied) + len(self.failures)
        path, message = self.failures[0][0][0], self.failures[0][1]
        return f"{operation}: {len(self.failures)} of {total} failed ({path}: {message})"


def apply_to_marked(state: AppState, action: Callable[[ItemRow], None]) -> BulkResult:
    """Run ``action`` on every marked item in the store, clearing its mark.

    Items whose action raises ``GitError`` stay marked. Visual mode ends.
    The caller rebuilds the store and restores the selection to
    ``result.anchor`` (or the first item when it no longer resolves).
    """
    result = BulkResult(anchor=recovery_anchor(state))
    for item in state.store.marked_items():
        try:
            action(item)
        except GitError as exc:
            logger.warning("bulk action failed for %s: %s", item.path, exc)
            result.failures.append((item.key, str(exc)))
            continue
        item.marked = False
        result.applied.append(item.key)
    state.visual_mark = False
    state.dirty = True
    return result


__all__ = [
    "OPERATION_STAGE",
    "OPERATION_UNSTAGE",
    "BulkResult",
    "operation_label",
    "toggle_mark",
    "toggle_section",
    "enter_visual_mode",
    "exit_visual_mode",
    "toggle_visual_mode",
    "recovery_anchor",
    "apply_to_marked",
]
