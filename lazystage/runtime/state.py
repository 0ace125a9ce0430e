from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..rows import Row, RowKey
from ..store import EntryStore

MODE_NORMAL = "normal"
MODE_SEARCH = "search"
MODE_COMMAND = "command"
MODE_HELP = "help"

MAX_COUNT_DIGITS = 7


@dataclass
class AppState:
    repo_root: Path
    store: EntryStore = field(default_factory=EntryStore)
    view: list[Row] = field(default_factory=list)
    selected: RowKey | None = None
    search_term: str = ""
    mode: str = MODE_NORMAL
    visual_mark: bool = False
    count_buffer: str = ""
    command_buffer: str = ""
    prompt: str = ""
    status_message: str = ""
    status_message_until: float = 0.0
    dirty: bool = True
    skip_next_lf: bool = False
    finished: bool = False
    exit_message: str = ""
