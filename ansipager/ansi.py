"""ANSI-aware styled line model.

Normalizes raw input lines into text with explicit SGR escape codes.
Substring, search, and highlight helpers address visible columns only, so
embedded escape sequences are never split, searched, or counted.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

ESC = "\x1b"
TAB_STOP = 8

# Tokenizer view of escape codes: the captured group is the code without
# the ``ESC[`` prefix, e.g. ``"31m"`` or ``"m"``.
ANSI_CODE_RE = re.compile(r"\x1b\[([0-9;]*[A-Za-z])")

# Legacy overstrike: char BS char, optionally followed by a second BS char.
MANPAGE_CODE_RE = re.compile(r"[^\x08]\x08[^\x08](\x08[^\x08])?")

# Control characters that are not part of a recognized escape sequence.
_CONTROL_RE = re.compile(r"(\x1b\[[0-9;]*[A-Za-z])|([\x00-\x08\x0a-\x1f])")

BOLD = f"{ESC}[1m"
NONBOLD = f"{ESC}[22m"
UNDERLINE = f"{ESC}[4m"
NONUNDERLINE = f"{ESC}[24m"
REVERSE = f"{ESC}[7m"
NONREVERSE = f"{ESC}[27m"

Token = tuple[str | None, str]


def split_sgr_params(code: str | None) -> list[str]:
    """Split a tokenizer code like ``"22;1m"`` into ``["22", "1"]``.

    ``None`` yields no parameters and a bare ``"m"`` yields one empty
    parameter, which means reset.
    """
    if code is None:
        return []
    return code[:-1].split(";")


def manpage_to_ansi(text: str) -> str:
    """Rewrite overstrike bold/underline sequences as SGR codes.

    Any style still open at the end of ``text`` is closed.
    """
    out: list[str] = []
    is_bold = False
    is_underline = False
    pos = 0
    for match in MANPAGE_CODE_RE.finditer(text):
        head = text[pos:match.start()]
        if head:
            if is_underline:
                out.append(NONUNDERLINE)
                is_underline = False
            if is_bold:
                out.append(NONBOLD)
                is_bold = False
            out.append(head)

        sequence = match.group(0)
        char = sequence[-1]
        decorations = [sequence[0]]
        if len(sequence) == 5:
            decorations.append(sequence[2])
        want_bold = False
        want_underline = False
        for decoration in decorations:
            if decoration == char:
                want_bold = True
            elif decoration == "_":
                want_underline = True

        if want_bold and not is_bold:
            out.append(BOLD)
            is_bold = True
        if want_underline and not is_underline:
            out.append(UNDERLINE)
            is_underline = True
        if is_underline and not want_underline:
            out.append(NONUNDERLINE)
            is_underline = False
        if is_bold and not want_bold:
            out.append(NONBOLD)
            is_bold = False

        out.append(char)
        pos = match.end()

    if is_underline:
        out.append(NONUNDERLINE)
    if is_bold:
        out.append(NONBOLD)
    out.append(text[pos:])
    return "".join(out)


def _caret(match: re.Match[str]) -> str:
    if match.group(1) is not None:
        return match.group(1)
    return "^" + chr(ord(match.group(2)) + 64)


def scrub_control_chars(text: str) -> str:
    """Replace control characters with caret notation, e.g. ``\\x07`` -> ``^G``.

    Tabs and well-formed escape sequences are kept.
    """
    return _CONTROL_RE.sub(_caret, text)


def expand_tabs(text: str) -> str:
    """Expand tabs to 8-column stops; escape codes take up no columns."""
    if "\t" not in text:
        return text

    out: list[str] = []
    col = 0
    pos = 0
    while pos < len(text):
        match = ANSI_CODE_RE.match(text, pos)
        if match is not None:
            out.append(match.group(0))
            pos = match.end()
            continue
        ch = text[pos]
        if ch == "\t":
            width = TAB_STOP - (col % TAB_STOP)
            out.append(" " * width)
            col += width
        else:
            out.append(ch)
            col += 1
        pos += 1
    return "".join(out)


def normalize(raw: bytes | str) -> str:
    """Run the full normalization pipeline on one raw input line."""
    if isinstance(raw, bytes):
        text = raw.decode("utf-8", errors="replace")
    else:
        text = raw
    return expand_tabs(scrub_control_chars(manpage_to_ansi(text)))


def _as_pattern(pattern: re.Pattern[str] | str) -> re.Pattern[str]:
    if isinstance(pattern, str):
        return re.compile(re.escape(pattern))
    return pattern


class StyledLine:
    """One line of text with embedded SGR codes.

    Construction never fails. Normalization runs on first access and is
    memoized; operations that change the text return new instances.
    """

    __slots__ = ("_raw", "_text")

    def __init__(self, raw: bytes | str = b"") -> None:
        self._raw = raw
        self._text: str | None = None

    @classmethod
    def from_normalized(cls, text: str) -> StyledLine:
        """Wrap already-normalized text without running normalization again."""
        line = cls(text)
        line._text = text
        return line

    def to_display_string(self) -> str:
        if self._text is None:
            self._text = normalize(self._raw)
        return self._text

    def __str__(self) -> str:
        return self.to_display_string()

    def __repr__(self) -> str:
        return f"StyledLine({self.to_display_string()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StyledLine):
            return NotImplemented
        return self.to_display_string() == other.to_display_string()

    def __hash__(self) -> int:
        return hash(self.to_display_string())

    def tokenize(self) -> list[Token]:
        """Split into ``(code, text)`` pairs, in order.

        ``code`` is the escape code preceding ``text`` (``None`` for leading
        text). Every call returns a fresh, identical list.
        """
        return list(self._iter_tokens())

    def _iter_tokens(self) -> Iterator[Token]:
        text = self.to_display_string()
        last_code: str | None = None
        pos = 0
        for match in ANSI_CODE_RE.finditer(text):
            head = text[pos:match.start()]
            if last_code is not None or head:
                yield last_code, head
            last_code = match.group(1)
            pos = match.end()
        yield last_code, text[pos:]

    def plain_text(self) -> str:
        """Return the visible characters with all escape codes removed."""
        return "".join(text for _code, text in self._iter_tokens())

    def visible_length(self) -> int:
        return len(self.plain_text())

    def substring(self, start_column: int) -> StyledLine:
        """Return the line from visible column ``start_column`` onwards.

        All escape codes before ``start_column`` are kept so the remaining
        text renders with the same styling.
        """
        if start_column <= 0:
            return self

        out: list[str] = []
        seen = 0
        for code, text in self._iter_tokens():
            if code is not None:
                out.append(f"{ESC}[{code}")
            if seen < start_column:
                out.append(text[start_column - seen:])
            else:
                out.append(text)
            seen += len(text)
        return StyledLine.from_normalized("".join(out))

    def highlight(self, pattern: re.Pattern[str] | str) -> StyledLine:
        """Wrap every match in the visible text in reverse video."""
        regex = _as_pattern(pattern)
        out: list[str] = []
        for code, text in self._iter_tokens():
            if code is not None:
                out.append(f"{ESC}[{code}")
            pos = 0
            for match in regex.finditer(text):
                if match.start() == match.end():
                    continue
                out.append(text[pos:match.start()])
                out.append(REVERSE)
                out.append(match.group(0))
                out.append(NONREVERSE)
                pos = match.end()
            out.append(text[pos:])
        return StyledLine.from_normalized("".join(out))

    def contains(self, pattern: re.Pattern[str] | str) -> bool:
        """Return whether ``pattern`` matches inside any visible text run."""
        regex = _as_pattern(pattern)
        return any(regex.search(text) is not None for _code, text in self._iter_tokens())
