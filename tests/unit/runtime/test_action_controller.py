"""Action controller tests with an in-memory git backend and runner."""

from __future__ import annotations

import unittest
from pathlib import Path
from unittest import mock

from lazystage.git_backend import GitError
from lazystage.navigation import select_category, select_first, selected_item
from lazystage.rows import CATEGORY_INDEX, CATEGORY_UNTRACKED, CATEGORY_WORKSPACE
from lazystage.runtime.actions import DELETE_PROMPT, NO_ENTRIES_MESSAGE, RESET_PROMPT, ActionController
from lazystage.runtime.config import Settings
from lazystage.runtime.state import AppState
from lazystage.search import refilter
from lazystage.store import StatusSnapshot

INITIAL = StatusSnapshot(
    index=(("a.py", "modified"),),
    workspace=(("b.py", "modified"), ("c.py", "deleted")),
    untracked=("d.txt",),
)


class _FakeBackend:
    def __init__(self, snapshot: StatusSnapshot) -> None:
        self.repo_root = Path("/repo")
        self.snapshot = snapshot
        self.calls: list[tuple] = []
        self.failing: set[str] = set()
        self.status_error: GitError | None = None

    def query_status(self) -> StatusSnapshot:
        self.calls.append(("query_status",))
        if self.status_error is not None:
            raise self.status_error
        return self.snapshot

    def _record(self, name: str, path: str, *extra) -> None:
        self.calls.append((name, path, *extra))
        if path in self.failing:
            raise GitError(f"{name} boom")

    def stage(self, path: str) -> None:
        self._record("stage", path)

    def unstage_from_index(self, path: str) -> None:
        self._record("unstage_from_index", path)

    def unstage_from_workspace(self, path: str, deleted: bool = False) -> None:
        self._record("unstage_from_workspace", path, deleted)

    def delete_untracked(self, path: str) -> None:
        self._record("delete_untracked", path)

    def checkout(self, path: str, category: str = CATEGORY_WORKSPACE) -> None:
        self._record("checkout", path, category)

    def mutations(self) -> list[tuple]:
        return [call for call in self.calls if call[0] != "query_status"]


def _make_controller(confirm_answer: bool = True, settings: Settings | None = None):
    state = AppState(repo_root=Path("/repo"))
    backend = _FakeBackend(INITIAL)
    runner = mock.Mock()
    runner.run.return_value = None
    prompts: list[str] = []

    def confirm(message: str) -> bool:
        prompts.append(message)
        return confirm_answer

    controller = ActionController(state, backend, runner, confirm, settings)
    state.store.rebuild(INITIAL)
    refilter(state)
    select_first(state)
    return controller, state, backend, runner, prompts


class SingleItemActionTests(unittest.TestCase):
    def test_stage_workspace_item_reselects_by_position(self) -> None:
        controller, state, backend, _runner, _prompts = _make_controller()
        select_category(state, CATEGORY_WORKSPACE)
        backend.snapshot = StatusSnapshot(
            index=(("a.py", "modified"), ("b.py", "modified")),
            workspace=(("c.py", "deleted"),),
            untracked=("d.txt",),
        )

        controller.stage_selected()

        self.assertEqual(backend.mutations(), [("stage", "b.py")])
        self.assertEqual(state.selected, ("c.py", CATEGORY_WORKSPACE))

    def test_stage_on_index_item_does_nothing(self) -> None:
        controller, state, backend, _runner, _prompts = _make_controller()

        controller.stage_selected()

        self.assertEqual(backend.calls, [])
        self.assertEqual(state.selected, ("a.py", CATEGORY_INDEX))

    def test_unstage_dispatches_by_category(self) -> None:
        controller, state, backend, _runner, _prompts = _make_controller()

        controller.unstage_selected()
        select_category(state, CATEGORY_WORKSPACE)
        state.selected = ("c.py", CATEGORY_WORKSPACE)
        controller.unstage_selected()

        self.assertEqual(
            backend.mutations(),
            [("unstage_from_index", "a.py"), ("unstage_from_workspace", "c.py", True)],
        )

    def test_untracked_delete_requires_confirmation(self) -> None:
        controller, state, backend, _runner, prompts = _make_controller(confirm_answer=False)
        select_category(state, CATEGORY_UNTRACKED)

        controller.unstage_selected()
        self.assertEqual(prompts, [DELETE_PROMPT.format(path="d.txt")])
        self.assertEqual(backend.mutations(), [])

        controller.confirm = lambda _message: True
        controller.unstage_selected()
        self.assertEqual(backend.mutations(), [("delete_untracked", "d.txt")])

    def test_git_failure_becomes_status_message(self) -> None:
        controller, state, backend, _runner, _prompts = _make_controller()
        select_category(state, CATEGORY_WORKSPACE)
        backend.failing.add("b.py")

        controller.stage_selected()

        self.assertEqual(state.status_message, "stage boom")
        self.assertEqual(state.selected, ("b.py", CATEGORY_WORKSPACE))
        self.assertFalse(state.finished)


class ResetTests(unittest.TestCase):
    def test_reset_refused_for_untracked(self) -> None:
        controller, state, backend, _runner, prompts = _make_controller()
        select_category(state, CATEGORY_UNTRACKED)

        controller.reset_selected()

        self.assertEqual(prompts, [])
        self.assertEqual(backend.calls, [])
        self.assertIn("untracked", state.status_message)

    def test_reset_checks_out_after_confirmation(self) -> None:
        controller, _state, backend, _runner, prompts = _make_controller()

        controller.reset_selected()

        self.assertEqual(prompts, [RESET_PROMPT])
        self.assertEqual(backend.mutations(), [("checkout", "a.py", CATEGORY_INDEX)])

    def test_declined_reset_leaves_repository_alone(self) -> None:
        controller, _state, backend, _runner, _prompts = _make_controller(confirm_answer=False)

        controller.reset_selected()

        self.assertEqual(backend.calls, [])


class BulkActionTests(unittest.TestCase):
    def test_failed_items_stay_marked_and_are_reported(self) -> None:
        controller, state, backend, _runner, _prompts = _make_controller()
        state.visual_mark = True
        for item in state.store.items():
            item.marked = item.path in {"b.py", "d.txt"}
        backend.failing.add("d.txt")
        backend.snapshot = StatusSnapshot(
            index=(("a.py", "modified"), ("b.py", "modified")),
            workspace=(("c.py", "deleted"),),
            untracked=("d.txt",),
        )

        controller.apply_to_marked("stage")

        self.assertEqual(backend.mutations(), [("stage", "b.py"), ("stage", "d.txt")])
        self.assertEqual(state.status_message, "stage: 1 of 2 failed (d.txt: stage boom)")
        self.assertEqual([item.path for item in state.store.marked_items()], ["d.txt"])
        self.assertFalse(state.visual_mark)
        self.assertEqual(state.selected, ("a.py", CATEGORY_INDEX))

    def test_operation_skipped_for_categories_without_capability(self) -> None:
        controller, state, backend, _runner, _prompts = _make_controller()
        for item in state.store.items():
            item.marked = item.path in {"a.py", "b.py"}

        controller.apply_to_marked("stage")

        self.assertEqual(backend.mutations(), [("stage", "b.py")])


class RefreshTests(unittest.TestCase):
    def test_empty_status_finishes_session(self) -> None:
        controller, state, backend, _runner, _prompts = _make_controller()
        backend.snapshot = StatusSnapshot()

        self.assertFalse(controller.refresh())

        self.assertTrue(state.finished)
        self.assertEqual(state.exit_message, NO_ENTRIES_MESSAGE)

    def test_status_failure_keeps_current_rows(self) -> None:
        controller, state, backend, _runner, _prompts = _make_controller()
        rows_before = list(state.store.rows)
        backend.status_error = GitError("git status failed: locked")

        controller.reload()

        self.assertEqual(state.store.rows, rows_before)
        self.assertEqual(state.status_message, "git status failed: locked")

    def test_reload_keeps_selection_identity(self) -> None:
        controller, state, _backend, _runner, _prompts = _make_controller()
        select_category(state, CATEGORY_UNTRACKED)

        controller.reload()

        self.assertEqual(selected_item(state).path, "d.txt")


class ExternalCommandTests(unittest.TestCase):
    def test_diff_uses_configured_pager(self) -> None:
        controller, state, _backend, runner, _prompts = _make_controller(settings=Settings(diff_pager="delta"))
        select_category(state, CATEGORY_WORKSPACE)

        controller.diff_selected()

        runner.run.assert_called_once_with(["git", "diff", "--", "b.py"], env={"GIT_PAGER": "delta"})

    def test_commit_push_and_interactive_stage(self) -> None:
        controller, _state, _backend, runner, _prompts = _make_controller(
            settings=Settings(pause_after_command=False)
        )

        controller.interactive_stage_selected()
        controller.commit(amend=True)
        controller.push(set_upstream=True)

        self.assertEqual(
            runner.run.call_args_list,
            [
                mock.call(["git", "add", "-p", "--", "a.py"]),
                mock.call(["git", "commit", "--amend"]),
                mock.call(["git", "push", "--set-upstream", "origin", "HEAD"], pause=False),
            ],
        )

    def test_shell_command_pauses_and_reports_launch_error(self) -> None:
        controller, state, backend, runner, _prompts = _make_controller()
        runner.run.return_value = "failed to launch tig: not found"

        controller.run_command("tig")

        runner.run.assert_called_once_with("tig", pause=True)
        self.assertEqual(state.status_message, "failed to launch tig: not found")
        self.assertIn(("query_status",), backend.calls)

    def test_edit_opens_path_under_repo_root(self) -> None:
        controller, _state, _backend, runner, _prompts = _make_controller()

        with mock.patch("lazystage.runtime.actions.launch_editor", return_value=None) as editor_mock:
            controller.edit_selected()

        editor_mock.assert_called_once_with(Path("/repo/a.py"), runner)


if __name__ == "__main__":
    unittest.main()
