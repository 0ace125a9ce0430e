"""Modal key routing for normal, search, command and help modes."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from ..marking import (
    OPERATION_STAGE,
    OPERATION_UNSTAGE,
    exit_visual_mode,
    toggle_mark,
    toggle_section,
    toggle_visual_mode,
)
from ..navigation import (
    LINE_STEP,
    PAGE_STEP,
    move,
    restore_selection,
    select_category,
    select_first,
    select_last,
    selected_item,
)
from ..rows import CATEGORY_INDEX, CATEGORY_UNTRACKED, CATEGORY_WORKSPACE
from ..runtime.state import (
    MAX_COUNT_DIGITS,
    MODE_COMMAND,
    MODE_HELP,
    MODE_NORMAL,
    MODE_SEARCH,
    AppState,
)
from ..search import append_to_term, refilter
from .key_registry import KeyComboBinding, KeyComboRegistry
from .keymap import build_keymap

ENTER_KEYS = frozenset({"ENTER", "ENTER_CR", "ENTER_LF"})
_DIGITS = frozenset("0123456789")


@dataclass(frozen=True)
class RouterActions:
    """Backend-triggering operations the router delegates to."""

    stage_selected: Callable[[], None]
    unstage_selected: Callable[[], None]
    apply_to_marked: Callable[[str], None]
    reset_selected: Callable[[], None]
    reload: Callable[[], None]
    diff_selected: Callable[[], None]
    interactive_stage_selected: Callable[[], None]
    commit: Callable[[bool], None]
    push: Callable[[bool], None]
    edit_selected: Callable[[], None]
    run_command: Callable[[str], None]


def is_printable_key(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


class InputRouter:
    """Route key tokens to the handler of the active mode.

    ``handle_key`` returns ``True`` when the application should quit.
    """

    def __init__(
        self,
        state: AppState,
        actions: RouterActions,
        keymap: Mapping[str, str] | None = None,
    ) -> None:
        self.state = state
        self.actions = actions
        self.keymap = dict(keymap) if keymap is not None else build_keymap()
        self._count = 1
        self._registry = self._build_registry()

    def _build_registry(self) -> KeyComboRegistry:
        handlers = self._command_handlers()
        keys_by_command: dict[str, list[str]] = {}
        for key, command in self.keymap.items():
            if command in handlers:
                keys_by_command.setdefault(command, []).append(key)
        registry = KeyComboRegistry()
        for command, keys in keys_by_command.items():
            registry.register_binding(KeyComboBinding(tuple(keys), handlers[command]))
        return registry

    def _command_handlers(self) -> dict[str, Callable[[], bool]]:
        state = self.state
        actions = self.actions

        def moving(step: int) -> Callable[[], bool]:
            def handler() -> bool:
                move(state, step, self._count)
                return False

            return handler

        def jumping(select: Callable[[AppState], bool]) -> Callable[[], bool]:
            def handler() -> bool:
                select(state)
                return False

            return handler

        def to_category(category: str) -> Callable[[], bool]:
            def handler() -> bool:
                select_category(state, category)
                return False

            return handler

        def calling(action: Callable[[], None]) -> Callable[[], bool]:
            def handler() -> bool:
                action()
                return False

            return handler

        def enter_mode(mode: str) -> Callable[[], bool]:
            def handler() -> bool:
                state.mode = mode
                if mode == MODE_COMMAND:
                    state.command_buffer = ""
                return False

            return handler

        def quit_action() -> bool:
            return True

        def mark_action() -> bool:
            toggle_mark(selected_item(state))
            return False

        def mark_section_action() -> bool:
            toggle_section(state.store, selected_item(state))
            return False

        def toggle_visual_action() -> bool:
            toggle_visual_mode(state)
            return False

        def cancel_action() -> bool:
            if state.search_term:
                state.search_term = ""
                refilter(state)
                restore_selection(state, state.selected)
            elif state.visual_mark:
                exit_visual_mode(state, cancel=True)
            return False

        return {
            "down": moving(LINE_STEP),
            "up": moving(-LINE_STEP),
            "page_down": moving(PAGE_STEP),
            "page_up": moving(-PAGE_STEP),
            "top": jumping(select_first),
            "bottom": jumping(select_last),
            "jump_index": to_category(CATEGORY_INDEX),
            "jump_workspace": to_category(CATEGORY_WORKSPACE),
            "jump_untracked": to_category(CATEGORY_UNTRACKED),
            "stage": calling(actions.stage_selected),
            "unstage": calling(actions.unstage_selected),
            "stage_marked": calling(lambda: actions.apply_to_marked(OPERATION_STAGE)),
            "unstage_marked": calling(lambda: actions.apply_to_marked(OPERATION_UNSTAGE)),
            "reset": calling(actions.reset_selected),
            "reload": calling(actions.reload),
            "mark": mark_action,
            "mark_section": mark_section_action,
            "toggle_visual": toggle_visual_action,
            "search": enter_mode(MODE_SEARCH),
            "command": enter_mode(MODE_COMMAND),
            "help": enter_mode(MODE_HELP),
            "quit": quit_action,
            "cancel": cancel_action,
            "diff": calling(actions.diff_selected),
            "interactive_stage": calling(actions.interactive_stage_selected),
            "commit": calling(lambda: actions.commit(False)),
            "amend": calling(lambda: actions.commit(True)),
            "push": calling(lambda: actions.push(False)),
            "push_upstream": calling(lambda: actions.push(True)),
            "edit": calling(actions.edit_selected),
        }

    def handle_key(self, key: str) -> bool:
        """Handle one key token in the current mode."""
        mode = self.state.mode
        if mode == MODE_HELP:
            self.state.mode = MODE_NORMAL
            self.state.dirty = True
            return False
        if mode == MODE_SEARCH:
            self._handle_search_key(key)
            return False
        if mode == MODE_COMMAND:
            self._handle_command_key(key)
            return False
        return self._handle_normal_key(key)

    def _handle_normal_key(self, key: str) -> bool:
        state = self.state
        if key in _DIGITS:
            if len(state.count_buffer) < MAX_COUNT_DIGITS:
                state.count_buffer += key
                state.dirty = True
            return False

        if not self._registry.handles(key):
            return False

        self._count = max(1, int(state.count_buffer)) if state.count_buffer else 1
        state.count_buffer = ""
        state.dirty = True
        try:
            return bool(self._registry.dispatch(key))
        finally:
            self._count = 1

    def _handle_search_key(self, key: str) -> None:
        state = self.state
        if key in ENTER_KEYS:
            state.mode = MODE_NORMAL
            if selected_item(state) is None:
                select_first(state)
        elif key == "ESC":
            state.mode = MODE_NORMAL
            state.search_term = ""
            refilter(state)
            restore_selection(state, state.selected)
        elif key == "BACKSPACE":
            if state.search_term:
                state.search_term = state.search_term[:-1]
                refilter(state)
        elif is_printable_key(key):
            state.search_term = append_to_term(state.search_term, key)
            refilter(state)
        state.dirty = True

    def _handle_command_key(self, key: str) -> None:
        state = self.state
        if key in ENTER_KEYS:
            text = state.command_buffer.strip()
            state.mode = MODE_NORMAL
            state.command_buffer = ""
            state.dirty = True
            if text:
                self.actions.run_command(text)
            return
        if key == "ESC":
            state.mode = MODE_NORMAL
            state.command_buffer = ""
        elif key == "BACKSPACE":
            state.command_buffer = state.command_buffer[:-1]
        elif is_printable_key(key):
            state.command_buffer += key
        state.dirty = True


__all__ = ["ENTER_KEYS", "InputRouter", "RouterActions", "is_printable_key"]
