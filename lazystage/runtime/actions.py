"""Backend-triggering commands and the rebuild that follows each of them.

Bulk operations are dispatched through a capability table keyed by
``(operation, category)``; a missing entry means the operation does nothing
for that category.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from ..git_backend import (
    GitBackend,
    GitError,
    commit_command,
    diff_command,
    interactive_stage_command,
    push_command,
)
from ..marking import OPERATION_STAGE, OPERATION_UNSTAGE, apply_to_marked
from ..navigation import index_of, restore_selection, selected_item
from ..rows import CATEGORY_INDEX, CATEGORY_UNTRACKED, CATEGORY_WORKSPACE, ItemRow, RowKey
from ..search import refilter
from .config import Settings
from .external import ExternalRunner, launch_editor
from .state import AppState

logger = logging.getLogger(__name__)

STATUS_MESSAGE_SECONDS = 4.0
NO_ENTRIES_MESSAGE = "No entries found"
RESET_PROMPT = "Do you really want to reset all changes to this file?"
DELETE_PROMPT = "Delete File '{path}'?"
DELETED_LABEL = "deleted"


class ActionController:
    """Run stage/unstage/reset/external commands against one repository."""

    def __init__(
        self,
        state: AppState,
        backend: GitBackend,
        runner: ExternalRunner,
        confirm: Callable[[str], bool],
        settings: Settings | None = None,
    ) -> None:
        self.state = state
        self.backend = backend
        self.runner = runner
        self.confirm = confirm
        self.settings = settings if settings is not None else Settings()
        self._capabilities: dict[tuple[str, str], Callable[[ItemRow], None]] = {
            (OPERATION_STAGE, CATEGORY_WORKSPACE): self._stage,
            (OPERATION_STAGE, CATEGORY_UNTRACKED): self._stage,
            (OPERATION_UNSTAGE, CATEGORY_INDEX): self._unstage_from_index,
            (OPERATION_UNSTAGE, CATEGORY_WORKSPACE): self._unstage_from_workspace,
            (OPERATION_UNSTAGE, CATEGORY_UNTRACKED): self._delete_untracked,
        }

    def show_message(self, text: str) -> None:
        self.state.status_message = text
        self.state.status_message_until = time.monotonic() + STATUS_MESSAGE_SECONDS
        self.state.dirty = True

    def show_error(self, text: str) -> None:
        logger.warning("%s", text)
        self.show_message(text)

    def refresh(self, key: RowKey | None = None, ordinal: int | None = None) -> bool:
        """Rebuild the store from git and re-resolve the selection.

        Returns ``False`` when the status query failed or nothing is left to
        show; the latter finishes the session.
        """
        try:
            snapshot = self.backend.query_status()
        except GitError as exc:
            self.show_error(str(exc))
            return False
        state = self.state
        state.store.rebuild(snapshot)
        if state.store.is_empty:
            logger.debug("no entries left, finishing")
            state.finished = True
            state.exit_message = NO_ENTRIES_MESSAGE
            return False
        refilter(state)
        restore_selection(state, key, ordinal)
        return True

    def reload(self) -> None:
        self.refresh(self.state.selected, index_of(self.state))

    def _stage(self, item: ItemRow) -> None:
        self.backend.stage(item.path)

    def _unstage_from_index(self, item: ItemRow) -> None:
        self.backend.unstage_from_index(item.path)

    def _unstage_from_workspace(self, item: ItemRow) -> None:
        self.backend.unstage_from_workspace(item.path, deleted=item.status_label == DELETED_LABEL)

    def _delete_untracked(self, item: ItemRow) -> None:
        if self.confirm(DELETE_PROMPT.format(path=item.path)):
            self.backend.delete_untracked(item.path)

    def capability(self, operation: str, category: str) -> Callable[[ItemRow], None] | None:
        return self._capabilities.get((operation, category))

    def _apply(self, operation: str, item: ItemRow) -> None:
        capability = self.capability(operation, item.category)
        if capability is not None:
            capability(item)

    def _run_single(self, operation: str) -> None:
        item = selected_item(self.state)
        if item is None or self.capability(operation, item.category) is None:
            return
        ordinal = index_of(self.state)
        logger.debug("%s %s (%s)", operation, item.path, item.category)
        try:
            self._apply(operation, item)
        except GitError as exc:
            self.show_error(str(exc))
        self.refresh(item.key, ordinal)

    def stage_selected(self) -> None:
        self._run_single(OPERATION_STAGE)

    def unstage_selected(self) -> None:
        self._run_single(OPERATION_UNSTAGE)

    def apply_to_marked(self, operation: str) -> None:
        """Apply ``operation`` to every marked item, then rebuild once."""
        logger.debug("%s on %d marked entries", operation, len(self.state.store.marked_items()))
        result = apply_to_marked(self.state, lambda item: self._apply(operation, item))
        summary = result.summary(operation)
        if summary:
            self.show_error(summary)
        self.refresh(result.anchor)

    def reset_selected(self) -> None:
        item = selected_item(self.state)
        if item is None:
            return
        if item.category == CATEGORY_UNTRACKED:
            self.show_message("reset: untracked files have no changes to reset")
            return
        if not self.confirm(RESET_PROMPT):
            return
        ordinal = index_of(self.state)
        logger.debug("reset %s (%s)", item.path, item.category)
        try:
            self.backend.checkout(item.path, item.category)
        except GitError as exc:
            self.show_error(str(exc))
        self.refresh(item.key, ordinal)

    def _run_external(self, command: Sequence[str] | str, **kwargs) -> None:
        key = self.state.selected
        ordinal = index_of(self.state)
        error = self.runner.run(command, **kwargs)
        if error:
            self.show_error(error)
        self.refresh(key, ordinal)

    def diff_selected(self) -> None:
        item = selected_item(self.state)
        if item is None:
            return
        self._run_external(
            diff_command(item.path, item.category),
            env={"GIT_PAGER": self.settings.diff_pager},
        )

    def interactive_stage_selected(self) -> None:
        item = selected_item(self.state)
        if item is None:
            return
        self._run_external(interactive_stage_command(item.path))

    def commit(self, amend: bool = False) -> None:
        self._run_external(commit_command(amend))

    def push(self, set_upstream: bool = False) -> None:
        self._run_external(push_command(set_upstream), pause=self.settings.pause_after_command)

    def edit_selected(self) -> None:
        item = selected_item(self.state)
        if item is None:
            return
        key = item.key
        ordinal = index_of(self.state)
        error = launch_editor(self.backend.repo_root / item.path, self.runner)
        if error:
            self.show_error(error)
        self.refresh(key, ordinal)

    def run_command(self, text: str) -> None:
        self._run_external(text, pause=self.settings.pause_after_command)


__all__ = [
    "STATUS_MESSAGE_SECONDS",
    "NO_ENTRIES_MESSAGE",
    "RESET_PROMPT",
    "DELETE_PROMPT",
    "ActionController",
]
