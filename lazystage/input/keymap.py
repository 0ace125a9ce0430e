"""Command table and the key tokens bound to each command.

The table order is also the order of status-bar hints and the help page.
Users can rebind commands through the ``keys`` config object; digits stay
reserved for the repeat-count prefix.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class CommandSpec:
    """One semantic command with its hint name and default key tokens."""

    name: str
    title: str
    description: str
    default_keys: tuple[str, ...]
    hint: bool = True


# Hint titles of the two bulk-aware actions are resolved per selected category.
STAGE_HINT = "ACTION_STAGE"
UNSTAGE_HINT = "ACTION_UNSTAGE"

COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec("down", "down", "Go to the next line", ("j", "DOWN")),
    CommandSpec("up", "up", "Go to the previous line", ("k", "UP")),
    CommandSpec("stage", STAGE_HINT, "Add file or stage changes", ("s",)),
    CommandSpec("unstage", UNSTAGE_HINT, "Unstage changes or delete file", ("u",)),
    CommandSpec("search", "filter", "Filter the list of files", ("/",)),
    CommandSpec("quit", "quit", "Quit the program", ("q",)),
    CommandSpec("diff", "diff", "Run `git diff` on the selected file", ("d",)),
    CommandSpec("interactive_stage", "add -p", "Run git interactive add on the selected file", ("i",)),
    CommandSpec("commit", "commit", "Run `git commit`", ("c",)),
    CommandSpec("page_down", "jump down", "Jump ten lines down", ("CTRL_D", "PAGE_DOWN")),
    CommandSpec("page_up", "jump up", "Jump ten lines up", ("CTRL_U", "PAGE_UP")),
    CommandSpec("jump_index", "go index", "Jump to the index [Shift 1]", ("!",)),
    CommandSpec("jump_workspace", "go workspace", "Jump to the workspace [Shift 2]", ("@",)),
    CommandSpec("jump_untracked", "go untracked", "Jump to the untracked [Shift 3]", ("#",)),
    CommandSpec("bottom", "bottom", "Jump to the bottom of the list", ("G", "END")),
    CommandSpec("top", "top", "Jump to the top of the list", ("g", "HOME")),
    CommandSpec("mark", "mark", "Mark / Unmark the selected file", ("m",)),
    CommandSpec("mark_section", "mark section", "Mark / Unmark all files in section", ("M",)),
    CommandSpec(
        "toggle_visual",
        "visual mark mode",
        "Toggle Visual Mark mode to mark files by moving. ESC cancels",
        ("V",),
    ),
    CommandSpec("amend", "amend", "Run `git commit --amend`", ("C",)),
    CommandSpec("stage_marked", "s action on marked", "Perform the add/stage action on all marked files", ("S",)),
    CommandSpec(
        "unstage_marked",
        "u action on marked",
        "Perform the unstage/delete action on all marked files",
        ("U",),
    ),
    CommandSpec(
        "reset",
        "reset",
        "Remove / Reset all changes this file has. Like `git checkout -- file`",
        ("x",),
    ),
    CommandSpec("push", "push", "Run `git push`", ("p",)),
    CommandSpec("push_upstream", "push -u", "Run `git push --set-upstream origin HEAD`", ("P",)),
    CommandSpec("edit", "edit", "Open the selected file in $EDITOR", ("e",)),
    CommandSpec("reload", "reload", "Reload the repository status", ("r",)),
    CommandSpec("command", "command", "Run a shell command in the repository", (":",)),
    CommandSpec("cancel", "cancel", "Clear the filter, then cancel visual mark mode", ("ESC",), hint=False),
    CommandSpec("help", "help", "Show this help", ("h", "?"), hint=False),
)

_KEY_DISPLAY_NAMES: dict[str, str] = {
    "CTRL_D": "C-d",
    "CTRL_U": "C-u",
    "PAGE_DOWN": "PgDn",
    "PAGE_UP": "PgUp",
    "DOWN": "Down",
    "UP": "Up",
    "HOME": "Home",
    "END": "End",
    "ESC": "Esc",
}


def display_key(token: str) -> str:
    """Return a short human-readable label for a key token."""
    return _KEY_DISPLAY_NAMES.get(token, token)


def _valid_key_token(token: object) -> bool:
    return isinstance(token, str) and bool(token) and not token.isdigit()


def build_keymap(overrides: Mapping[str, object] | None = None) -> dict[str, str]:
    """Return a ``key token -> command name`` table.

    ``overrides`` maps command names to a key token or list of tokens which
    replace that command's defaults. Unknown commands and digit keys are
    ignored.
    """
    bindings: dict[str, tuple[str, ...]] = {spec.name: spec.default_keys for spec in COMMANDS}
    for command, raw_keys in (overrides or {}).items():
        if command not in bindings:
            continue
        if isinstance(raw_keys, str):
            candidates: list[object] = [raw_keys]
        elif isinstance(raw_keys, list):
            candidates = list(raw_keys)
        else:
            continue
        keys = tuple(token for token in candidates if _valid_key_token(token))
        if keys:
            bindings[command] = keys  # type: ignore[assignment]

    keymap: dict[str, str] = {}
    for spec in COMMANDS:
        for token in bindings[spec.name]:
            keymap[token] = spec.name
    # Explicit overrides win over defaults that happen to share a key.
    for command in (overrides or {}):
        for token in bindings.get(command, ()):
            keymap[token] = command
    return keymap


def keys_for(keymap: Mapping[str, str], command: str) -> list[str]:
    return [token for token, name in keymap.items() if name == command]


__all__ = [
    "CommandSpec",
    "COMMANDS",
    "STAGE_HINT",
    "UNSTAGE_HINT",
    "build_keymap",
    "display_key",
    "keys_for",
]
