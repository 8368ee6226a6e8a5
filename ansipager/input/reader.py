"""Low-level terminal input decoding.

Reads raw bytes from the keyboard descriptor and translates them into key
tokens. Multi-byte UTF-8 input becomes a single character; terminal resizes
arrive through a wakeup pipe and surface as ``RESIZE`` tokens.
"""

from __future__ import annotations

import os
import select

from ..diagnostics import Diagnostics

ESC_SEQUENCE_TIMEOUT_MS = 25

_CONTROL_KEYS: dict[bytes, str] = {
    b"\r": "ENTER",
    b"\n": "ENTER",
    b"\x7f": "BACKSPACE",
    b"\x08": "BACKSPACE",
    b"\x03": "CTRL_C",
    b"\x07": "CTRL_G",
    b"\t": "TAB",
}

_CSI_KEYS: dict[str, str] = {
    "A": "UP",
    "B": "DOWN",
    "C": "RIGHT",
    "D": "LEFT",
    "H": "HOME",
    "F": "END",
    "1~": "HOME",
    "7~": "HOME",
    "4~": "END",
    "8~": "END",
    "5~": "PAGE_UP",
    "6~": "PAGE_DOWN",
    "11~": "F1",
}

_SS3_KEYS: dict[bytes, str] = {
    b"P": "F1",
    b"H": "HOME",
    b"F": "END",
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
}


def _utf8_length(start_byte: int) -> int | None:
    if start_byte < 0x80:
        return 1
    if 0xC2 <= start_byte <= 0xDF:
        return 2
    if 0xE0 <= start_byte <= 0xEF:
        return 3
    if 0xF0 <= start_byte <= 0xF4:
        return 4
    return None


def _format_bytes(data: bytes) -> str:
    return "[" + ", ".join(f"0x{byte:02x}" for byte in data) + "]"


class KeyReader:
    """Decode key tokens from ``fd``, recording malformed input as warnings."""

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self.warnings = Diagnostics()
        self._pending: list[bytes] = []
        self._wakeup_read, self._wakeup_write = os.pipe()

    def close(self) -> None:
        os.close(self._wakeup_read)
        os.close(self._wakeup_write)

    def notify_resize(self) -> None:
        """Wake a blocked ``read_key``; safe to call from a signal handler."""
        os.write(self._wakeup_write, b"R")

    def _read_byte(self, timeout_ms: int | None = None) -> bytes | None:
        if self._pending:
            return self._pending.pop(0)
        timeout = None if timeout_ms is None else max(0.0, timeout_ms / 1000.0)
        ready, _, _ = select.select([self.fd], [], [], timeout)
        if not ready:
            return None
        ch = os.read(self.fd, 1)
        return ch or None

    def _wait_for_input(self) -> str | None:
        """Block until keyboard input or a resize; return ``"RESIZE"`` for the latter."""
        if self._pending:
            return None
        ready, _, _ = select.select([self.fd, self._wakeup_read], [], [])
        if self._wakeup_read in ready:
            os.read(self._wakeup_read, 64)
            return "RESIZE"
        return None

    def read_key(self) -> str:
        resized = self._wait_for_input()
        if resized is not None:
            return resized

        if self._pending:
            ch = self._pending.pop(0)
        else:
            ch = os.read(self.fd, 1)
            if not ch:
                return "EOF"

        control = _CONTROL_KEYS.get(ch)
        if control is not None:
            return control
        if ch == b"\x1b":
            return self._read_escape()
        return self._read_utf8(ch)

    def _read_utf8(self, first: bytes) -> str:
        length = _utf8_length(first[0])
        if length is None:
            self.warnings.add(f"WARNING: Unhandled key: start byte {first[0]} from keyboard")
            return first.decode("latin-1")

        data = first
        while len(data) < length:
            nxt = self._read_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if nxt is None:
                break
            if not 0x80 <= nxt[0] <= 0xBF:
                # Not a continuation byte; it starts the next key.
                self._pending.insert(0, nxt)
                self.warnings.add(f"WARNING: Unhandled key: {_format_bytes(data + nxt)} from keyboard")
                return first.decode("latin-1")
            data += nxt

        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            self.warnings.add(f"WARNING: Unhandled key: {_format_bytes(data)} from keyboard")
            return first.decode("latin-1")

    def _read_escape(self) -> str:
        seq = self._read_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if seq is None:
            return "ESC"
        if seq == b"O":
            final = self._read_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if final is None:
                return "ESC"
            return _SS3_KEYS.get(final, "UNKNOWN")
        if seq != b"[":
            self._pending.append(seq)
            return "ESC"

        params: list[bytes] = []
        while True:
            part = self._read_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if part is None:
                return "ESC"
            if 0x40 <= part[0] <= 0x7E:
                break
            params.append(part)
            if len(params) > 16:
                return "UNKNOWN"
        code = (b"".join(params) + part).decode("ascii", errors="replace")
        return _CSI_KEYS.get(code, "UNKNOWN")
