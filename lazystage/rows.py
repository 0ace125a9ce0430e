"""Row datatypes shared by the store, filter, navigator and renderer.

A list row is either a ``HeaderRow`` (a category title) or an ``ItemRow``
(one changed path). Items are identified by ``(path, category)`` so a
selection survives wholesale list rebuilds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

CATEGORY_INDEX = "index"
CATEGORY_WORKSPACE = "workspace"
CATEGORY_UNTRACKED = "untracked"

CATEGORY_ORDER: tuple[str, ...] = (
    CATEGORY_INDEX,
    CATEGORY_WORKSPACE,
    CATEGORY_UNTRACKED,
)

CATEGORY_TITLES: dict[str, str] = {
    CATEGORY_INDEX: "Index",
    CATEGORY_WORKSPACE: "Workspace",
    CATEGORY_UNTRACKED: "Untracked",
}

RowKey = tuple[str, str]


@dataclass(frozen=True)
class HeaderRow:
    """Non-selectable title row introducing one category group."""

    category: str

    @property
    def title(self) -> str:
        return CATEGORY_TITLES.get(self.category, self.category)


@dataclass(eq=False)
class ItemRow:
    """One changed path shown in the list.

    ``marked`` is the only mutable field. Equality is object identity; use
    ``key`` to compare rows across rebuilds.
    """

    path: str
    status_label: str
    category: str
    marked: bool = False

    @property
    def key(self) -> RowKey:
        return (self.path, self.category)


Row = Union[HeaderRow, ItemRow]


__all__ = [
    "CATEGORY_INDEX",
    "CATEGORY_WORKSPACE",
    "CATEGORY_UNTRACKED",
    "CATEGORY_ORDER",
    "CATEGORY_TITLES",
    "RowKey",
    "HeaderRow",
    "ItemRow",
    "Row",
]
