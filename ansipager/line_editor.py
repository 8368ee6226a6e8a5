"""Single-line query editor for interactive search."""

from __future__ import annotations

import re

from .diagnostics import Diagnostics

ACCEPT_KEYS = frozenset({"ENTER", "\r", "\n"})
CANCEL_KEYS = frozenset({"ESC", "CTRL_C", "CTRL_G", "\x1b", "\x03", "\x07"})
BACKSPACE_KEYS = frozenset({"BACKSPACE", "\x7f", "\x08"})


class LineEditor:
    """Accumulates search query text one key event at a time.

    The editor becomes done on accept, on cancel (which also clears the
    text), or when backspacing past an empty query.
    """

    def __init__(self, initial_text: str = "") -> None:
        self.text = initial_text
        self.cursor = len(initial_text)
        self.warnings = Diagnostics()
        self._done = False

    def enter_char(self, key: str | int) -> None:
        """Apply one key token, raw character, or code point."""
        if isinstance(key, int):
            try:
                key = chr(key)
            except (ValueError, OverflowError):
                self.warnings.add(f"WARNING: Unhandled key while searching: {key}")
                return

        if key in ACCEPT_KEYS:
            self._done = True
        elif key in CANCEL_KEYS:
            self.text = ""
            self.cursor = 0
            self._done = True
        elif key in BACKSPACE_KEYS:
            if not self.text:
                self._done = True
            self.text = self.text[:-1]
            self.cursor -= 1
        elif len(key) == 1 and key.isprintable():
            self.text += key
            self.cursor += 1
        else:
            self.warnings.add(f"WARNING: Unhandled key while searching: {key!r}")
            return

        self.cursor = max(0, min(self.cursor, len(self.text)))

    def build_search_pattern(self) -> re.Pattern[str]:
        """Compile the query; upper case anywhere makes the match case sensitive.

        Queries that are not valid regular expressions match literally.
        """
        flags = 0 if any(ch.isupper() for ch in self.text) else re.IGNORECASE
        try:
            return re.compile(self.text, flags)
        except re.error:
            return re.compile(re.escape(self.text), flags)

    def is_done(self) -> bool:
        return self._done

    def is_empty(self) -> bool:
        return not self.text
