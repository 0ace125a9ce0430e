"""External program launches that temporarily hand the terminal back.

Diffs, ``git add -p``, commits, pushes, ``$EDITOR`` and ``:`` shell commands
all run synchronously with full terminal control. Launch problems come back
as message strings for the status bar instead of raising.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

from .terminal import TerminalController

logger = logging.getLogger(__name__)

PRESS_ENTER_PROMPT = "\nPress Enter to return to lazystage..."


class ExternalRunner:
    """Run programs in the repository root with the TUI suspended."""

    def __init__(self, terminal: TerminalController, cwd: Path) -> None:
        self.terminal = terminal
        self.cwd = cwd

    def run(
        self,
        command: Sequence[str] | str,
        env: Mapping[str, str] | None = None,
        pause: bool = False,
    ) -> str | None:
        """Run ``command`` (argv, or a shell line when a string) to completion.

        The exit status is ignored. Returns an error message when the
        program could not be started.
        """
        shell = isinstance(command, str)
        name = command.split(" ", 1)[0] if isinstance(command, str) else command[0]
        child_env = {**os.environ, **env} if env else None
        logger.debug("running external %s", command)
        launch_error: str | None = None
        with self.terminal.suspended():
            try:
                subprocess.run(
                    command if shell else list(command),
                    cwd=self.cwd,
                    env=child_env,
                    shell=shell,
                    check=False,
                )
            except Exception as exc:
                launch_error = f"failed to launch {name}: {exc}"
            else:
                if pause:
                    wait_for_enter()
        if launch_error is not None:
            logger.warning("%s", launch_error)
        return launch_error


def wait_for_enter() -> None:
    sys.stdout.write(PRESS_ENTER_PROMPT)
    sys.stdout.flush()
    sys.stdin.readline()


def launch_editor(target: Path, runner: ExternalRunner) -> str | None:
    """Open ``target`` in ``$EDITOR``; returns an error message on failure."""
    editor_env = os.environ.get("EDITOR", "").strip()
    if not editor_env:
        return "Cannot edit: $EDITOR is not set."
    cmd = shlex.split(editor_env)
    if not cmd:
        return "Cannot edit: $EDITOR is empty."
    return runner.run([*cmd, str(target)])


__all__ = ["PRESS_ENTER_PROMPT", "ExternalRunner", "launch_editor", "wait_for_enter"]
