"""Application bootstrap: wire backend, state, router and loop together."""

from __future__ import annotations

import logging
import shutil
import signal
import sys
from pathlib import Path

from ..git_backend import GitBackend
from ..input.keymap import build_keymap
from ..input.reader import KeyReader
from ..input.router import InputRouter, RouterActions
from ..navigation import select_first
from ..render import render_frame
from ..search import refilter
from ..ui_theme import resolve_theme
from .actions import NO_ENTRIES_MESSAGE, ActionController
from .config import Settings
from .dialog import confirm
from .external import ExternalRunner
from .loop import CancellationToken, RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop
from .state import AppState
from .terminal import TerminalController

logger = logging.getLogger(__name__)

INTERRUPT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def load_initial_state(backend: GitBackend) -> AppState:
    """Query status once and build the first view.

    Git failures propagate so the caller can report them before the
    terminal is touched.
    """
    state = AppState(repo_root=backend.repo_root)
    state.store.rebuild(backend.query_status())
    if state.store.is_empty:
        state.finished = True
        state.exit_message = NO_ENTRIES_MESSAGE
        return state
    refilter(state)
    select_first(state)
    return state


def _install_signal_handlers(cancel: CancellationToken) -> dict[int, object]:
    def handler(signum, _frame) -> None:
        cancel.set(signal.Signals(signum).name)

    previous: dict[int, object] = {}
    for signum in INTERRUPT_SIGNALS:
        previous[signum] = signal.signal(signum, handler)
    return previous


def _restore_signal_handlers(previous: dict[int, object]) -> None:
    for signum, old_handler in previous.items():
        signal.signal(signum, old_handler)


def run_app(path: Path, settings: Settings | None = None) -> str:
    """Run the interactive session for the repository at ``path``.

    Returns the message to print after the terminal is restored (empty for
    a normal quit).
    """
    settings = settings if settings is not None else Settings()
    backend = GitBackend.open(path)
    logger.debug("opened repository %s", backend.repo_root)
    state = load_initial_state(backend)
    if state.finished:
        return state.exit_message

    theme = resolve_theme(settings.theme_name, no_color=settings.no_color)
    keymap = build_keymap(settings.key_overrides)
    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    reader = KeyReader(stdin_fd)
    runner = ExternalRunner(terminal, backend.repo_root)
    timing = RuntimeLoopTiming()
    cancel = CancellationToken()

    def render(columns: int, lines: int) -> None:
        render_frame(state, theme, keymap, columns, lines)

    def redraw() -> None:
        term = shutil.get_terminal_size((80, 24))
        render(term.columns, term.lines)

    def confirm_prompt(message: str) -> bool:
        return confirm(
            state,
            message,
            redraw,
            lambda: reader.read_key(timeout_ms=timing.key_timeout_ms),
            cancel,
        )

    controller = ActionController(state, backend, runner, confirm_prompt, settings)
    router = InputRouter(
        state,
        RouterActions(
            stage_selected=controller.stage_selected,
            unstage_selected=controller.unstage_selected,
            apply_to_marked=controller.apply_to_marked,
            reset_selected=controller.reset_selected,
            reload=controller.reload,
            diff_selected=controller.diff_selected,
            interactive_stage_selected=controller.interactive_stage_selected,
            commit=controller.commit,
            push=controller.push,
            edit_selected=controller.edit_selected,
            run_command=controller.run_command,
        ),
        keymap,
    )

    previous_handlers = _install_signal_handlers(cancel)
    try:
        run_main_loop(
            state,
            terminal,
            reader,
            timing,
            RuntimeLoopCallbacks(render=render, handle_key=router.handle_key),
            cancel,
        )
    finally:
        _restore_signal_handlers(previous_handlers)
    return state.exit_message


__all__ = ["INTERRUPT_SIGNALS", "load_initial_state", "run_app"]
