"""Optional syntax highlighting of files before paging.

Pygments output uses the plain 8-color SGR codes the pager understands.
Any failure leaves the content unmodified.
"""

from __future__ import annotations

from pathlib import Path

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.formatters.terminal import TERMINAL_COLORS
from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound


def _without_bright(attr: str) -> str:
    return attr.replace("bright", "")


# Bright colors (90-97) fall outside the supported SGR subset, so both
# palettes are folded onto the plain 30-37 range.
_COLORSCHEME = {
    ttype: (_without_bright(light), _without_bright(dark)) for ttype, (light, dark) in TERMINAL_COLORS.items()
}
_FORMATTER = TerminalFormatter(bg="light", colorscheme=_COLORSCHEME)


def highlight_source(data: bytes, path: Path) -> bytes | None:
    """Return highlighted ``data`` for ``path``, or ``None`` when not applicable.

    Files without a known lexer, non-UTF-8 files, and highlighter errors all
    yield ``None`` so callers page the original bytes.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return None

    try:
        lexer = get_lexer_for_filename(path.name, text)
    except ClassNotFound:
        return None

    try:
        rendered = pygments_highlight(text, lexer, _FORMATTER)
    except Exception:
        return None
    if "\x1b[" not in rendered:
        return None
    return rendered.encode("utf-8")

