"""Key-token to command-handler dispatch table."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyComboBinding:
    """Key tokens that all trigger one command handler."""

    combos: tuple[str, ...]
    handler: Callable[[], bool]


class KeyComboRegistry:
    """Exact-match lookup from key token to the handler bound to it.

    A later binding for the same token replaces the earlier one.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], bool]] = {}

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def handles(self, key: str) -> bool:
        return key in self._handlers

    def dispatch(self, key: str) -> bool | None:
        """Run the handler bound to ``key``; ``None`` when nothing is bound.

        Handlers return ``True`` to request quitting.
        """
        handler = self._handlers.get(key)
        if handler is None:
            return None
        return handler()


__all__ = ["KeyComboBinding", "KeyComboRegistry"]
