"""Entry store rebuilt wholesale from git status snapshots.

The store owns the full ordered row list. It is never patched in place:
every refresh replaces all rows, carrying mark flags over for identities
that survive the rebuild.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .rows import (
    CATEGORY_INDEX,
    CATEGORY_ORDER,
    CATEGORY_UNTRACKED,
    CATEGORY_WORKSPACE,
    HeaderRow,
    ItemRow,
    Row,
    RowKey,
)

UNTRACKED_LABEL = "untracked"


@dataclass(frozen=True)
class StatusSnapshot:
    """Three ordered change groups as reported by the backend."""

    index: tuple[tuple[str, str], ...] = ()
    workspace: tuple[tuple[str, str], ...] = ()
    untracked: tuple[str, ...] = ()

    def groups(self) -> dict[str, list[tuple[str, str]]]:
        """Return ``(path, label)`` pairs keyed by category."""
        return {
            CATEGORY_INDEX: list(self.index),
            CATEGORY_WORKSPACE: list(self.workspace),
            CATEGORY_UNTRACKED: [(path, UNTRACKED_LABEL) for path in self.untracked],
        }

    @property
    def entry_count(self) -> int:
        return len(self.index) + len(self.workspace) + len(self.untracked)


@dataclass
class EntryStore:
    rows: list[Row] = field(default_factory=list)

    def rebuild(self, snapshot: StatusSnapshot) -> None:
        """Replace every row from ``snapshot`` in fixed category order.

        One header precedes each non-empty group. Marks are kept for items
        whose ``(path, category)`` identity exists in both old and new rows.
        """
        previously_marked = {item.key for item in self.marked_items()}
        rows: list[Row] = []
        groups = snapshot.groups()
        for category in CATEGORY_ORDER:
            entries = groups[category]
            if not entries:
                continue
            rows.append(HeaderRow(category))
            for path, label in entries:
                item = ItemRow(path=path, status_label=label, category=category)
                item.marked = item.key in previously_marked
                rows.append(item)
        self.rows = rows

    @property
    def is_empty(self) -> bool:
        return not any(isinstance(row, ItemRow) for row in self.rows)

    def items(self) -> list[ItemRow]:
        return [row for row in self.rows if isinstance(row, ItemRow)]

    def marked_items(self) -> list[ItemRow]:
        return [row for row in self.rows if isinstance(row, ItemRow) and row.marked]

    def items_in_category(self, category: str) -> list[ItemRow]:
        return [row for row in self.rows if isinstance(row, ItemRow) and row.category == category]

    def find(self, key: RowKey) -> ItemRow | None:
        for row in self.rows:
            if isinstance(row, ItemRow) and row.key == key:
                return row
        return None

    def clear_marks(self) -> None:
        for row in self.rows:
            if isinstance(row, ItemRow):
                row.marked = False


__all__ = [
    "UNTRACKED_LABEL",
    "StatusSnapshot",
    "EntryStore",
    "CATEGORY_INDEX",
    "CATEGORY_WORKSPACE",
    "CATEGORY_UNTRACKED",
]
