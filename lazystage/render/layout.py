"""Viewport and column layout for the change list.

``layout_list`` is pure: it only looks at the filtered view, the selected
identity and the terminal size, and returns a ``RenderPlan`` the renderer
turns into ANSI text.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..ansi import display_width
from ..rows import ItemRow, Row, RowKey

MIN_NUMBER_WIDTH = 3


@dataclass(frozen=True)
class PlanRow:
    """One visible row with its relative line number (``None`` for headers)."""

    row: Row
    relative: int | None
    selected: bool


@dataclass(frozen=True)
class RenderPlan:
    rows: tuple[PlanRow, ...]
    start: int
    list_height: int
    number_width: int
    path_width: int


def _selected_ordinal(view: Sequence[Row], selected_key: RowKey | None) -> int:
    if selected_key is None:
        return 0
    for idx, row in enumerate(view):
        if isinstance(row, ItemRow) and row.key == selected_key:
            return idx
    return 0


def window_start(selected: int, total: int, list_height: int) -> int:
    """Return the first visible view position, keeping the selection centered."""
    if list_height <= 0 or total < list_height:
        return 0
    upper = max(0, total - list_height)
    return max(0, min(selected - list_height // 2, upper))


def layout_list(
    view: Sequence[Row],
    selected_key: RowKey | None,
    width: int,
    height: int,
    status_rows: int = 1,
) -> RenderPlan:
    """Plan which rows fill the list viewport and how wide each column is.

    Relative numbers count items only, and only inside the window, as the
    distance from the selected row. Column widths come from visible rows.
    """
    list_height = max(0, height - status_rows)
    total = len(view)
    selected = _selected_ordinal(view, selected_key)
    start = window_start(selected, total, list_height)
    window = list(view[start : start + list_height])

    # Item count before the selected row inside the window.
    anchor = sum(1 for row in window[: max(0, selected - start)] if isinstance(row, ItemRow))

    plan_rows: list[PlanRow] = []
    item_ordinal = 0
    for row in window:
        if isinstance(row, ItemRow):
            plan_rows.append(
                PlanRow(
                    row=row,
                    relative=abs(item_ordinal - anchor),
                    selected=row.key == selected_key,
                )
            )
            item_ordinal += 1
        else:
            plan_rows.append(PlanRow(row=row, relative=None, selected=False))

    items = [plan.row for plan in plan_rows if isinstance(plan.row, ItemRow)]
    largest = max((plan.relative or 0 for plan in plan_rows), default=0)
    number_width = max(MIN_NUMBER_WIDTH, len(str(largest)))
    path_width = max((display_width(item.path) for item in items), default=0)
    return RenderPlan(
        rows=tuple(plan_rows),
        start=start,
        list_height=list_height,
        number_width=number_width,
        path_width=min(path_width, max(0, width)),
    )


__all__ = ["MIN_NUMBER_WIDTH", "PlanRow", "RenderPlan", "layout_list", "window_start"]
