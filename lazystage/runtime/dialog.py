"""Blocking yes/no confirmation shown in the status bar."""

from __future__ import annotations

from collections.abc import Callable

from .loop import CancellationToken
from .state import AppState

YES_KEYS = frozenset({"y", "Y"})
NO_KEYS = frozenset({"n", "N", "ESC", "CTRL_C"})
RETRY_PREFIX = "PLEASE ENTER"


def prompt_text(message: str, retry: bool = False) -> str:
    return f"    {RETRY_PREFIX if retry else ''} {message} [Y]es or [N]o"


def confirm(
    state: AppState,
    message: str,
    render: Callable[[], None],
    read_key: Callable[[], str],
    cancel: CancellationToken,
) -> bool:
    """Ask ``message`` until the user answers.

    ``y``/``Y`` confirm; ``n``/``N``/``ESC`` decline. Any other key repeats
    the prompt with a reminder. Cancellation counts as a no.
    """
    retry = False
    try:
        while True:
            if cancel.is_set():
                return False
            state.prompt = prompt_text(message, retry)
            state.dirty = True
            render()
            key = read_key()
            if key == "":
                continue
            if key in YES_KEYS:
                return True
            if key in NO_KEYS:
                if key == "CTRL_C":
                    cancel.set("CTRL_C")
                return False
            retry = True
    finally:
        state.prompt = ""
        state.dirty = True


__all__ = ["YES_KEYS", "NO_KEYS", "RETRY_PREFIX", "prompt_text", "confirm"]
