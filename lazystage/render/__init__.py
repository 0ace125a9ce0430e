"""Rendering engine for the change list and its status bar.

Frames are composed as one ANSI string from a ``RenderPlan`` and the current
``AppState`` without mutating either, then written to stdout in one call.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping, Sequence

from ..ansi import clip_ansi_line, display_width, pad_ansi_line
from ..input.keymap import COMMANDS, STAGE_HINT, UNSTAGE_HINT, display_key, keys_for
from ..marking import OPERATION_STAGE, OPERATION_UNSTAGE, operation_label
from ..navigation import selected_item
from ..rows import HeaderRow, ItemRow
from ..runtime.state import MODE_COMMAND, MODE_HELP, MODE_SEARCH, AppState
from ..ui_theme import UITheme
from .help import build_help_page
from .layout import PlanRow, RenderPlan, layout_list

SEARCH_HINT_LONG = "[Enter: back to list] [Escape: Cancel]"
SEARCH_HINT_SHORT = "[ENTER|ESC]"
HELP_HINT_NAME = "HELP"
VISUAL_TAG = "VISUAL"


def selected_with_ansi(text: str, theme: UITheme) -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text or not theme.reverse:
        return text

    # Keep reverse video active even when the text contains internal resets.
    return theme.reverse + text.replace(theme.reset, f"{theme.reset}{theme.reverse}") + theme.reset


def format_plan_row(plan_row: PlanRow, plan: RenderPlan, theme: UITheme, visual_mark: bool, width: int) -> str:
    """Return one list row clipped and padded to ``width`` columns."""
    usable = max(1, width - 1)
    gutter = " " * (plan.number_width + 1)
    row = plan_row.row
    if isinstance(row, HeaderRow):
        text = f"{gutter}  {theme.header}{row.title}{theme.reset}"
        return pad_ansi_line(text, usable) + theme.reset

    number = f"{theme.line_number}{plan_row.relative:>{plan.number_width}}{theme.reset} "
    mark = "*" if row.marked else " "
    path_pad = " " * max(0, plan.path_width - display_width(row.path))
    body = f"{mark} {row.path}{path_pad}  {row.status_label}"

    if visual_mark and (row.marked or plan_row.selected):
        color = theme.visual
    else:
        color = theme.category_color(row.category)
    styled = f"{color}{body}{theme.reset}" if color else body
    line = pad_ansi_line(number + styled, usable)
    if plan_row.selected:
        return selected_with_ansi(line, theme)
    return line + theme.reset


def status_hints(state: AppState, keymap: Mapping[str, str]) -> list[tuple[str, str]]:
    """Return ``(key, name)`` hint pairs for the status bar.

    The stage/unstage names follow the selected row's category; commands
    that do nothing there are left out.
    """
    item = selected_item(state)
    category = item.category if item is not None else None
    hints: list[tuple[str, str]] = []
    for spec in COMMANDS:
        if not spec.hint:
            continue
        keys = keys_for(keymap, spec.name)
        if not keys:
            continue
        name = spec.title
        if name == STAGE_HINT:
            name = operation_label(OPERATION_STAGE, category)
        elif name == UNSTAGE_HINT:
            name = operation_label(OPERATION_UNSTAGE, category)
        if not name:
            continue
        hints.append((display_key(keys[0]), name))
    return hints


def help_hint(keymap: Mapping[str, str]) -> str:
    keys = keys_for(keymap, "help")
    if not keys:
        return ""
    return f"[{display_key(keys[0])}: {HELP_HINT_NAME}]"


def build_status_line(left_text: str, width: int, right_text: str = "") -> str:
    """Lay out ``left_text`` and a right-pinned ``right_text`` in ``width`` columns."""
    usable = max(1, width - 1)
    right_w = display_width(right_text)
    if usable <= right_w:
        return clip_ansi_line(right_text, usable)
    left_limit = max(0, usable - right_w - 1) if right_text else usable
    left = clip_ansi_line(left_text, left_limit)
    gap = " " * (usable - display_width(left) - right_w)
    return f"{left}{gap}{right_text}"


def build_hint_text(hints: Sequence[tuple[str, str]], width: int) -> str:
    """Return as many ``[key: name]`` hints as fit into ``width`` columns."""
    parts: list[str] = []
    remaining = width
    for key, name in hints:
        title = f"[{key}: {name}] "
        remaining -= len(title)
        if remaining < 0:
            break
        parts.append(title)
    return "".join(parts).rstrip()


def build_search_text(term: str, width: int) -> str:
    """Return ``/term`` followed by the longest search hint that fits."""
    query = f"/{term}"
    for hint in (SEARCH_HINT_LONG, SEARCH_HINT_SHORT):
        if display_width(query) + 1 + len(hint) <= width:
            return build_status_line(query, width + 1, hint)
    return clip_ansi_line(query, width)


def build_status_bar(
    state: AppState,
    theme: UITheme,
    width: int,
    hints: Sequence[tuple[str, str]],
    help_text: str = "",
) -> str:
    """Return the styled status bar for the current state."""
    usable = max(1, width - 1)
    prefix_parts: list[str] = []
    if state.visual_mark:
        prefix_parts.append(VISUAL_TAG)
    if state.count_buffer:
        prefix_parts.append(f"{theme.count}{state.count_buffer}{theme.reset}{theme.reverse}")
    prefix = " ".join(prefix_parts)
    if prefix:
        prefix += " "
    room = max(0, usable - display_width(prefix))

    if state.prompt:
        content = build_status_line(state.prompt, room + 1)
    elif state.mode == MODE_COMMAND:
        content = build_status_line(f":{state.command_buffer}", room + 1)
    elif state.mode == MODE_SEARCH or state.search_term:
        content = build_search_text(state.search_term, room)
    elif state.status_message:
        content = build_status_line(
            f"{theme.status_message}{state.status_message}{theme.reset}{theme.reverse}",
            room + 1,
        )
    else:
        help_w = display_width(help_text)
        hint_room = max(0, room - help_w - 1) if help_text else room
        content = build_status_line(build_hint_text(hints, hint_room), room + 1, help_text)

    bar = pad_ansi_line(prefix + content, usable)
    return f"{theme.reverse}{bar}{theme.reset}"


def build_frame(
    state: AppState,
    plan: RenderPlan,
    theme: UITheme,
    width: int,
    height: int,
    hints: Sequence[tuple[str, str]],
    help_text: str = "",
) -> str:
    """Return the full ANSI frame: list viewport followed by the status bar."""
    out: list[str] = ["\033[H\033[J"]
    usable = max(1, width - 1)
    for row in range(plan.list_height):
        if row < len(plan.rows):
            line = format_plan_row(plan.rows[row], plan, theme, state.visual_mark, width)
        else:
            line = " " * usable
        out.append(line)
        out.append("\r\n")
    if height > plan.list_height:
        out.append(build_status_bar(state, theme, width, hints, help_text))
    return "".join(out)


def write_frame(frame: str) -> None:
    os.write(sys.stdout.fileno(), frame.encode("utf-8", errors="replace"))


def render_frame(
    state: AppState,
    theme: UITheme,
    keymap: Mapping[str, str],
    width: int,
    height: int,
) -> None:
    """Lay out, compose and write one frame for the current mode."""
    if state.mode == MODE_HELP:
        write_frame(build_help_page(theme, keymap, width, height))
        return
    plan = layout_list(state.view, state.selected, width, height)
    write_frame(
        build_frame(
            state,
            plan,
            theme,
            width,
            height,
            status_hints(state, keymap),
            help_hint(keymap),
        )
    )


__all__ = [
    "SEARCH_HINT_LONG",
    "SEARCH_HINT_SHORT",
    "VISUAL_TAG",
    "selected_with_ansi",
    "format_plan_row",
    "status_hints",
    "help_hint",
    "build_status_line",
    "build_hint_text",
    "build_search_text",
    "build_status_bar",
    "build_frame",
    "write_frame",
    "render_frame",
]
