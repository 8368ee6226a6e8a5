"""Help document shown as a nested view over the paged document."""

from __future__ import annotations

from ..source import LazyLineSource

_B = "\033[1m"
_N = "\033[22m"

HELP_LINES: tuple[str, ...] = (
    f"{_B}Welcome to ansipager!{_N}",
    "",
    f"{_B}Quitting{_N}",
    "--------",
    f"* Press {_B}q{_N} to return to the document, or to quit from it",
    "",
    f"{_B}Moving around{_N}",
    "-------------",
    f"* Arrow keys, {_B}j{_N}/{_B}k{_N}/{_B}l{_N} and {_B}Return{_N} scroll",
    f"* {_B}PageUp{_N}/{_B}b{_N} and {_B}PageDown{_N}/{_B}f{_N}/{_B}Space{_N} move one screen",
    f"* {_B}d{_N} and {_B}u{_N} move half a screen",
    f"* {_B}<{_N}/{_B}g{_N} go to the first line, {_B}>{_N}/{_B}G{_N} go to the last line",
    f"* A number before {_B}g{_N}, {_B}G{_N} or {_B}f{_N} jumps to that line, e.g. {_B}42G{_N}",
    "* A number before a scroll key repeats it",
    "",
    f"{_B}Searching{_N}",
    "---------",
    f"* Type {_B}/{_N} to start searching, then type what you want to find",
    f"* Type {_B}Return{_N} to stop searching, {_B}Escape{_N} to cancel",
    f"* Find next by typing {_B}n{_N} (for \"next\")",
    f"* Find previous by typing {_B}N{_N}",
    "* Searches are case insensitive unless the query contains upper case",
    "* Queries are regular expressions; invalid ones match literally",
)


def help_line_source() -> LazyLineSource:
    return LazyLineSource(HELP_LINES)
