"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing and multi-byte UTF-8 characters.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25

_CONTROL_TOKENS: dict[bytes, str] = {
    b"\x03": "CTRL_C",
    b"\x04": "CTRL_D",
    b"\x15": "CTRL_U",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\t": "TAB",
    b"\r": "ENTER_CR",
    b"\n": "ENTER_LF",
}

_CSI_FINAL_TOKENS: dict[bytes, str] = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}

_CSI_TILDE_TOKENS: dict[str, str] = {
    "1": "HOME",
    "3": "DELETE",
    "4": "END",
    "5": "PAGE_UP",
    "6": "PAGE_DOWN",
    "7": "HOME",
    "8": "END",
}

# xterm modifier parameter (the N in ``CSI 1;N final``) to token prefix.
_MODIFIER_PREFIXES: dict[str, str] = {
    "2": "SHIFT",
    "3": "ALT",
    "5": "CTRL",
    "9": "ALT",
}

UNKNOWN_KEY = "UNKNOWN"
MAX_CSI_LENGTH = 32


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


class KeyReader:
    """Blocking-with-timeout key reader bound to one input descriptor."""

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._pending: list[bytes] = []

    def _read_ready_byte(self, timeout_ms: int) -> bytes | None:
        if self._pending:
            return self._pending.pop(0)
        ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return None
        ch = os.read(self.fd, 1)
        if not ch:
            return None
        return ch

    def read_key(self, timeout_ms: int | None = None) -> str:
        """Return the next key token, or ``""`` when ``timeout_ms`` elapses."""
        if self._pending:
            ch = self._pending.pop(0)
        else:
            if timeout_ms is not None:
                ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
                if not ready:
                    return ""
            ch = os.read(self.fd, 1)
            if not ch:
                return ""

        token = _CONTROL_TOKENS.get(ch)
        if token is not None:
            return token
        if ch == b"\x1b":
            return self._read_escape_sequence()

        expected = _utf8_length(ch[0])
        data = ch
        while len(data) < expected:
            part = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if part is None:
                break
            data += part
        return data.decode("utf-8", errors="replace")

    def _read_escape_sequence(self) -> str:
        seq = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if seq is None:
            return "ESC"
        if seq == b"O":
            return self._read_ss3_sequence()
        if seq != b"[":
            # Alt+key or a lone ESC followed by a real key press.
            self._pending.append(seq)
            return "ESC"
        return self._read_csi_sequence()

    def _read_ss3_sequence(self) -> str:
        final = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return "ESC"
        return _CSI_FINAL_TOKENS.get(final, UNKNOWN_KEY)

    def _read_csi_sequence(self) -> str:
        """Consume a whole ``ESC [ params intermediates final`` sequence.

        Sequences without a known meaning come back as ``UNKNOWN_KEY`` so
        none of their bytes leak out as separate key presses.
        """
        params = bytearray()
        while True:
            part = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if part is None:
                return "ESC" if not params else UNKNOWN_KEY
            if 0x40 <= part[0] <= 0x7E:
                final = part
                break
            if not 0x20 <= part[0] <= 0x3F or len(params) >= MAX_CSI_LENGTH:
                return UNKNOWN_KEY
            params.extend(part)

        text = params.decode("ascii", errors="replace")
        if final == b"~":
            return _CSI_TILDE_TOKENS.get(text, UNKNOWN_KEY)
        token = _CSI_FINAL_TOKENS.get(final)
        if token is None:
            return UNKNOWN_KEY
        if not text:
            return token
        base, _, modifier = text.partition(";")
        prefix = _MODIFIER_PREFIXES.get(modifier)
        if base == "1" and prefix is not None:
            return f"{prefix}_{token}"
        return UNKNOWN_KEY


__all__ = ["ESC_SEQUENCE_TIMEOUT_MS", "UNKNOWN_KEY", "KeyReader"]

