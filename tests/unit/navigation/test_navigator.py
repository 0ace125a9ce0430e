"""Navigator tests: header skipping, wraparound, repeat counts and
selection re-resolution after rebuilds."""

from __future__ import annotations

import unittest
from pathlib import Path

from lazystage.navigation import (
    LINE_STEP,
    PAGE_STEP,
    index_of,
    move,
    restore_selection,
    select_by_index,
    select_category,
    select_first,
    select_last,
    selected_item,
)
from lazystage.rows import CATEGORY_INDEX, CATEGORY_UNTRACKED, CATEGORY_WORKSPACE
from lazystage.runtime.state import AppState
from lazystage.search import refilter
from lazystage.store import StatusSnapshot


def _state_from(snapshot: StatusSnapshot) -> AppState:
    state = AppState(repo_root=Path("/tmp"))
    state.store.rebuild(snapshot)
    refilter(state)
    select_first(state)
    return state


def _small_state() -> AppState:
    # View: [Index, a, Workspace, b, c, Untracked, d]
    return _state_from(
        StatusSnapshot(
            index=(("a", "modified"),),
            workspace=(("b", "modified"), ("c", "modified")),
            untracked=("d",),
        )
    )


def _selected_path(state: AppState) -> str | None:
    item = selected_item(state)
    return None if item is None else item.path


class SelectTests(unittest.TestCase):
    def test_select_first_and_last_pick_items(self) -> None:
        state = _small_state()

        self.assertEqual(_selected_path(state), "a")
        select_last(state)
        self.assertEqual(_selected_path(state), "d")

    def test_select_first_on_headers_only_view_is_noop(self) -> None:
        state = _small_state()
        state.search_term = "zzz"
        refilter(state)
        state.selected = None

        self.assertFalse(select_first(state))
        self.assertIsNone(state.selected)

    def test_select_category_jumps_to_first_item_of_group(self) -> None:
        state = _small_state()

        select_category(state, CATEGORY_UNTRACKED)
        self.assertEqual(_selected_path(state), "d")
        select_category(state, CATEGORY_WORKSPACE)
        self.assertEqual(_selected_path(state), "b")

    def test_select_category_without_items_keeps_selection(self) -> None:
        state = _state_from(StatusSnapshot(workspace=(("b", "modified"),)))

        self.assertFalse(select_category(state, CATEGORY_INDEX))
        self.assertEqual(_selected_path(state), "b")

    def test_select_by_index_skips_headers_forward(self) -> None:
        state = _small_state()

        select_by_index(state, 2)
        self.assertEqual(_selected_path(state), "b")
        select_by_index(state, 5)
        self.assertEqual(_selected_path(state), "d")

    def test_select_by_index_clamps_past_the_end(self) -> None:
        state = _small_state()

        select_by_index(state, 100)

        self.assertEqual(_selected_path(state), "d")

    def test_index_of_is_zero_for_stale_selection(self) -> None:
        state = _small_state()
        select_last(state)
        self.assertEqual(index_of(state), 6)

        state.selected = ("gone", CATEGORY_WORKSPACE)
        self.assertEqual(index_of(state), 0)


class MoveTests(unittest.TestCase):
    def test_line_moves_skip_headers(self) -> None:
        state = _small_state()

        move(state, LINE_STEP)
        self.assertEqual(_selected_path(state), "b")
        move(state, LINE_STEP, 2)
        self.assertEqual(_selected_path(state), "d")
        move(state, -LINE_STEP)
        self.assertEqual(_selected_path(state), "c")

    def test_moving_past_either_end_wraps(self) -> None:
        state = _small_state()

        move(state, -LINE_STEP)
        self.assertEqual(_selected_path(state), "d")
        move(state, LINE_STEP)
        self.assertEqual(_selected_path(state), "a")

    def test_count_repeats_single_steps_across_wraps(self) -> None:
        state = _small_state()

        move(state, LINE_STEP, 5)

        # a -> b -> c -> d -> (wrap) a -> b
        self.assertEqual(_selected_path(state), "b")

    def test_count_below_one_moves_once(self) -> None:
        state = _small_state()

        move(state, LINE_STEP, 0)

        self.assertEqual(_selected_path(state), "b")

    def test_page_down_landing_on_header_continues_forward(self) -> None:
        state = _state_from(
            StatusSnapshot(
                index=tuple((f"i{n}", "modified") for n in range(10)),
                workspace=(("w0", "modified"),),
            )
        )

        move(state, PAGE_STEP)

        self.assertEqual(_selected_path(state), "w0")

    def test_page_up_landing_on_header_continues_backward(self) -> None:
        state = _state_from(
            StatusSnapshot(
                index=(("i0", "modified"),),
                workspace=tuple((f"w{n}", "modified") for n in range(11)),
            )
        )
        restore_selection(state, ("w9", CATEGORY_WORKSPACE))

        move(state, -PAGE_STEP)

        self.assertEqual(_selected_path(state), "i0")

    def test_page_past_end_wraps_to_first(self) -> None:
        state = _state_from(
            StatusSnapshot(workspace=tuple((f"w{n:02d}", "modified") for n in range(15)))
        )

        move(state, PAGE_STEP)
        self.assertEqual(_selected_path(state), "w10")
        move(state, PAGE_STEP)
        self.assertEqual(_selected_path(state), "w00")

    def test_stale_selection_moves_to_first_item(self) -> None:
        state = _small_state()
        select_last(state)
        state.selected = ("gone", CATEGORY_WORKSPACE)

        move(state, LINE_STEP)

        self.assertEqual(_selected_path(state), "a")

    def test_visual_mode_marks_every_landed_item_including_wraps(self) -> None:
        state = _small_state()
        select_last(state)
        state.visual_mark = True

        move(state, LINE_STEP, 2)

        marked = [item.path for item in state.store.marked_items()]
        self.assertEqual(marked, ["a", "b"])
        self.assertFalse(state.store.find(("d", CATEGORY_UNTRACKED)).marked)


class RestoreSelectionTests(unittest.TestCase):
    def test_identity_wins_over_ordinal(self) -> None:
        state = _small_state()

        restore_selection(state, ("c", CATEGORY_WORKSPACE), ordinal=1)

        self.assertEqual(_selected_path(state), "c")

    def test_vanished_identity_uses_ordinal(self) -> None:
        state = _small_state()

        restore_selection(state, ("gone", CATEGORY_WORKSPACE), ordinal=4)

        self.assertEqual(_selected_path(state), "c")

    def test_vanished_identity_without_ordinal_selects_first(self) -> None:
        state = _small_state()
        select_last(state)

        restore_selection(state, ("gone", CATEGORY_WORKSPACE))

        self.assertEqual(_selected_path(state), "a")

    def test_ordinal_past_end_clamps_to_last(self) -> None:
        state = _small_state()

        restore_selection(state, None, ordinal=99)

        self.assertEqual(_selected_path(state), "d")


if __name__ == "__main__":
    unittest.main()
