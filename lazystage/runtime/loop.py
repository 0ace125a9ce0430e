"""Main interactive event loop for the terminal UI.

Coordinates status-message expiry, rendering, and input dispatch.
Feature logic lives in the injected callbacks.
"""

from __future__ import annotations

import logging
import shutil
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..input.reader import KeyReader
from .state import AppState
from .terminal import TerminalController

logger = logging.getLogger(__name__)

KEY_TIMEOUT_MS = 120


class CancellationToken:
    """Interrupt flag set from signal handlers or ``CTRL_C`` and polled by the loop."""

    def __init__(self) -> None:
        self._reason = ""
        self._set = False

    def set(self, reason: str = "") -> None:
        self._set = True
        self._reason = reason

    def clear(self) -> None:
        self._set = False
        self._reason = ""

    def is_set(self) -> bool:
        return self._set

    @property
    def reason(self) -> str:
        return self._reason


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    key_timeout_ms: int = KEY_TIMEOUT_MS


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``."""

    render: Callable[[int, int], None]
    handle_key: Callable[[str], bool]


def normalize_enter_key(state: AppState, key: str) -> str | None:
    """Fold CR, LF and CRLF into one ``ENTER`` token.

    Returns ``None`` for the LF half of a CRLF pair, which must be dropped.
    """
    if state.skip_next_lf and key == "ENTER_LF":
        state.skip_next_lf = False
        return None
    if key == "ENTER_CR":
        state.skip_next_lf = True
        return "ENTER"
    state.skip_next_lf = False
    if key == "ENTER_LF":
        return "ENTER"
    return key


def expire_status_message(state: AppState, now: float) -> None:
    if state.status_message and now >= state.status_message_until:
        state.status_message = ""
        state.status_message_until = 0.0
        state.dirty = True


def run_main_loop(
    state: AppState,
    terminal: TerminalController,
    reader: KeyReader,
    timing: RuntimeLoopTiming,
    callbacks: RuntimeLoopCallbacks,
    cancel: CancellationToken,
) -> None:
    """Run the interactive loop until quit, interrupt or ``state.finished``.

    Each iteration expires the status message, renders when dirty or resized,
    then reads and routes at most one key.
    """
    last_size: tuple[int, int] | None = None
    with terminal.raw_mode():
        while not state.finished:
            if cancel.is_set():
                logger.debug("loop cancelled: %s", cancel.reason or "signal")
                break
            term = shutil.get_terminal_size((80, 24))
            size = (term.columns, term.lines)
            if size != last_size:
                last_size = size
                state.dirty = True
            expire_status_message(state, time.monotonic())
            if state.dirty:
                callbacks.render(term.columns, term.lines)
                state.dirty = False

            try:
                key = reader.read_key(timeout_ms=timing.key_timeout_ms)
            except KeyboardInterrupt:
                cancel.set("keyboard interrupt")
                continue
            if key == "":
                continue
            if key == "CTRL_C":
                cancel.set("CTRL_C")
                continue
            normalized = normalize_enter_key(state, key)
            if normalized is None:
                continue
            if callbacks.handle_key(normalized):
                break


__all__ = [
    "KEY_TIMEOUT_MS",
    "CancellationToken",
    "RuntimeLoopTiming",
    "RuntimeLoopCallbacks",
    "normalize_enter_key",
    "expire_status_message",
    "run_main_loop",
]
