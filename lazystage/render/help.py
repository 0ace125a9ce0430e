"""Full-screen help modal listing every command and its bound keys.

Rendering helpers here are presentation-only and side-effect free.
"""

from __future__ import annotations

from collections.abc import Mapping

from ..ansi import clip_ansi_line, display_width
from ..input.keymap import COMMANDS, display_key, keys_for
from ..ui_theme import UITheme

HELP_TITLE = "lazystage help"
HELP_FOOTER = "Press any key to go back"
COUNT_NOTE = "Use 1-9 before a movement key to repeat the action [like vi]"


def help_lines(theme: UITheme, keymap: Mapping[str, str]) -> list[str]:
    """Return styled help body lines in command-table order."""
    entries: list[tuple[str, str]] = []
    for spec in COMMANDS:
        keys = keys_for(keymap, spec.name)
        if not keys:
            continue
        entries.append(("/".join(display_key(key) for key in keys), spec.description))
    key_width = max((display_width(keys) for keys, _ in entries), default=0)

    lines = ["", f"{theme.help_heading}Keys{theme.reset}"]
    for keys, description in entries:
        pad = " " * (key_width - display_width(keys))
        lines.append(f"  {theme.help_key}{keys}{theme.reset}{pad}  {description}")
    lines.append("")
    lines.append(f"  {COUNT_NOTE}")
    lines.append("")
    lines.append(f"{theme.help_dim}{HELP_FOOTER}{theme.reset}")
    return lines


def build_help_page(theme: UITheme, keymap: Mapping[str, str], width: int, height: int) -> str:
    """Return the ANSI text of the help modal drawn over a cleared screen."""
    out: list[str] = ["\033[H\033[J"]
    lines = help_lines(theme, keymap)

    modal_w = max(4, min(96, width - 4))
    modal_h = max(3, min(len(lines) + 3, height - 1))
    x = max(0, (width - modal_w) // 2)
    y = max(0, (height - modal_h) // 2)
    inner_w = max(1, modal_w - 2)
    inner_h = max(1, modal_h - 2)
    border = theme.help_modal_border
    reset = theme.reset

    out.append(f"\033[{y + 1};{x + 1}H{border}╭")
    out.append("─" * inner_w)
    out.append(f"╮{reset}")
    for i in range(inner_h):
        out.append(f"\033[{y + 2 + i};{x + 1}H{border}│{reset}")
        out.append(" " * inner_w)
        out.append(f"{border}│{reset}")
    out.append(f"\033[{y + modal_h};{x + 1}H{border}╰")
    out.append("─" * inner_w)
    out.append(f"╯{reset}")

    title_x = x + max(2, (modal_w - 2 - len(HELP_TITLE)) // 2)
    out.append(f"\033[{y + 1};{title_x + 1}H")
    out.append(clip_ansi_line(f"{theme.help_modal_title}{HELP_TITLE}{reset}", max(0, inner_w - 2)))

    body_rows = min(len(lines), inner_h)
    for i in range(body_rows):
        text = clip_ansi_line(lines[i], max(0, inner_w - 2))
        out.append(f"\033[{y + 2 + i};{x + 3}H")
        out.append(text)
        out.append(reset)

    return "".join(out)


__all__ = ["HELP_TITLE", "HELP_FOOTER", "COUNT_NOTE", "help_lines", "build_help_page"]
