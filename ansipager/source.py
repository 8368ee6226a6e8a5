"""Incrementally read, randomly indexable document lines.

A ``LazyLineSource`` wraps either a fully materialized line list or an open
stream. Streams are only consumed as far as callers ask for lines.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import IO, Union

from .ansi import StyledLine
from .diagnostics import Diagnostics

RawLine = Union[bytes, str]
InputSource = Union[bytes, str, Iterable[RawLine], IO[bytes], IO[str]]

# Same breaks as bytes.splitlines(); str.splitlines() would also split on
# form feeds, separators and other control characters.
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def _split_lines(text: RawLine) -> list[RawLine]:
    if isinstance(text, bytes):
        return text.splitlines()
    lines = _LINE_BREAK_RE.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def _strip_line_ending(line: RawLine) -> RawLine:
    if isinstance(line, bytes):
        return line.rstrip(b"\r\n")
    return line.rstrip("\r\n")


class LazyLineSource:
    """Document lines indexed from 0, pulled from upstream on demand."""

    def __init__(self, lines: Iterable[RawLine] = (), stream: IO[bytes] | IO[str] | None = None) -> None:
        self._lines: list[StyledLine] = [StyledLine(_strip_line_ending(line)) for line in lines]
        self._stream = stream
        self._ignored_lines = 0

    @classmethod
    def from_input(cls, source: InputSource) -> LazyLineSource:
        """Resolve raw text, a line sequence, or a readable stream."""
        if isinstance(source, (bytes, str)):
            return cls(_split_lines(source))
        if hasattr(source, "readline"):
            return cls(stream=source)
        return cls(source)

    @property
    def warnings(self) -> Diagnostics:
        diagnostics = Diagnostics()
        if self._ignored_lines:
            diagnostics.add(f"WARNING: Ignored {self._ignored_lines} unreadable input line(s)")
        return diagnostics

    def is_complete(self) -> bool:
        return self._stream is None

    def _read_one(self) -> bool:
        """Materialize one more line; return ``False`` once upstream is exhausted."""
        assert self._stream is not None
        while True:
            try:
                line = self._stream.readline()
            except UnicodeDecodeError:
                self._ignored_lines += 1
                continue
            break

        if not line:
            self.close()
            return False
        self._lines.append(StyledLine(_strip_line_ending(line)))
        return True

    def get(self, index: int) -> StyledLine | None:
        """Return line ``index``, or ``None`` when it is past the end of input."""
        if index < 0:
            return None
        while index >= len(self._lines) and self._stream is not None:
            if not self._read_one():
                break
        if index < len(self._lines):
            return self._lines[index]
        return None

    def size(self, force_full_read: bool = False) -> int | None:
        """Return the line count, or ``None`` while upstream is still open."""
        if force_full_read:
            while self._stream is not None:
                self._read_one()
        if self._stream is not None:
            return None
        return len(self._lines)

    def close(self) -> None:
        stream = self._stream
        self._stream = None
        if stream is not None:
            stream.close()
