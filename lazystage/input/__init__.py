"""Input-layer public API for key decoding and modal routing.

Low-level terminal decoding (`KeyReader`) is kept apart from the router that
turns key tokens into commands.
"""

from .key_registry import KeyComboBinding, KeyComboRegistry
from .keymap import COMMANDS, CommandSpec, build_keymap, display_key, keys_for
from .reader import ESC_SEQUENCE_TIMEOUT_MS, UNKNOWN_KEY, KeyReader
from .router import ENTER_KEYS, InputRouter, RouterActions

__all__ = [
    "KeyReader",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "UNKNOWN_KEY",
    "KeyComboBinding",
    "KeyComboRegistry",
    "CommandSpec",
    "COMMANDS",
    "build_keymap",
    "display_key",
    "keys_for",
    "ENTER_KEYS",
    "InputRouter",
    "RouterActions",
]
