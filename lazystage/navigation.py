"""Selection and cursor movement over the filtered row view.

The selection is stored as an item identity key, never as an index, so it
stays meaningful after the store is rebuilt. Every helper resolves the key
against ``state.view`` on demand and treats a missing key as stale.
"""

from __future__ import annotations

from .rows import ItemRow, RowKey
from .runtime.state import AppState

LINE_STEP = 1
PAGE_STEP = 10


def resolve_index(state: AppState) -> int | None:
    """Return the view position of the selected item, or ``None`` if stale."""
    if state.selected is None:
        return None
    for idx, row in enumerate(state.view):
        if isinstance(row, ItemRow) and row.key == state.selected:
            return idx
    return None


def index_of(state: AppState) -> int:
    """Return the selection's view position, ``0`` when unset or stale."""
    position = resolve_index(state)
    return 0 if position is None else position


def selected_item(state: AppState) -> ItemRow | None:
    position = resolve_index(state)
    if position is None:
        return None
    row = state.view[position]
    return row if isinstance(row, ItemRow) else None


def _select(state: AppState, row: ItemRow) -> bool:
    state.selected = row.key
    state.dirty = True
    return True


def select_first(state: AppState) -> bool:
    """Select the first item in view order; no-op when the view has none."""
    for row in state.view:
        if isinstance(row, ItemRow):
            return _select(state, row)
    return False


def select_last(state: AppState) -> bool:
    """Select the last row, falling back to the nearest preceding item."""
    for row in reversed(state.view):
        if isinstance(row, ItemRow):
            return _select(state, row)
    return False


def select_category(state: AppState, category: str) -> bool:
    for row in state.view:
        if isinstance(row, ItemRow) and row.category == category:
            return _select(state, row)
    return False


def select_by_index(state: AppState, index: int) -> bool:
    """Select the item at ``index``, skipping headers forward.

    Indices past the end clamp to the last row. Skipping past the final
    header also ends on the last selectable item.
    """
    view = state.view
    if not view:
        return False
    if index >= len(view):
        return select_last(state)
    idx = max(0, index)
    while idx < len(view):
        row = view[idx]
        if isinstance(row, ItemRow):
            return _select(state, row)
        idx += 1
    return select_last(state)


def _mark_landed(state: AppState) -> None:
    if not state.visual_mark:
        return
    item = selected_item(state)
    if item is not None:
        item.marked = True


def _step(state: AppState, direction: int) -> None:
    view = state.view
    position = resolve_index(state)
    if position is None:
        select_first(state)
        _mark_landed(state)
        return

    unit = 1 if direction > 0 else -1
    position += direction
    while True:
        if position < 0:
            select_last(state)
            break
        if position >= len(view):
            select_first(state)
            break
        row = view[position]
        if isinstance(row, ItemRow):
            _select(state, row)
            break
        position += unit
    _mark_landed(state)


def move(state: AppState, direction: int, count: int = 1) -> None:
    """Repeat a single ``direction`` step ``count`` times (at least once).

    Headers are skipped one row at a time in the same direction. Moving past
    either end wraps around. In visual mode each landed-on item is marked.
    """
    if direction == 0:
        return
    for _ in range(max(1, count)):
        _step(state, direction)


def restore_selection(state: AppState, key: RowKey | None, ordinal: int | None = None) -> None:
    """Re-resolve the selection after a rebuild or refilter.

    Identity wins. When ``key`` vanished, ``ordinal`` (the previous view
    position) picks the item now at or after it; otherwise the first item.
    """
    if key is not None:
        for row in state.view:
            if isinstance(row, ItemRow) and row.key == key:
                _select(state, row)
                return
    state.selected = None
    state.dirty = True
    if ordinal is not None and select_by_index(state, ordinal):
        return
    select_first(state)


__all__ = [
    "LINE_STEP",
    "PAGE_STEP",
    "resolve_index",
    "index_of",
    "selected_item",
    "select_first",
    "select_last",
    "select_category",
    "select_by_index",
    "move",
    "restore_selection",
]
