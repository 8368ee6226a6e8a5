"""Screen rendering for the pager.

Composes full ANSI frames from pager state and writes them in one call.
Only a fixed subset of SGR codes is passed through to the terminal; every
other code is dropped and reported as a warning.
"""

from __future__ import annotations

import os
from collections.abc import Callable

from ..ansi import StyledLine, split_sgr_params
from ..diagnostics import Diagnostics
from ..input.reader import KeyReader
from ..state import PagerMode, PagerState, unsupported_mode

SUPPORTED_SGR_PARAMS = frozenset(
    {"0", "1", "4", "7", "22", "24", "27", "39", "49"}
    | {str(code) for code in range(30, 38)}
    | {str(code) for code in range(40, 48)}
)

EXTENDED_COLOR_PARAMS = frozenset({"38", "48"})
_EXTENDED_COLOR_ARGUMENTS = {"5": 1, "2": 3}

RESET = "\033[0m"
CLEAR_TO_EOL = "\033[K"


def _move_to(row: int, col: int) -> str:
    return f"\033[{row + 1};{col + 1}H"


def _marker(text: str) -> str:
    return f"\033[0;7m{text}{RESET}"


class Screen:
    """Terminal display: viewport geometry, frame drawing, and key events."""

    def __init__(
        self,
        out_fd: int,
        key_reader: KeyReader | None = None,
        size: Callable[[], os.terminal_size] | None = None,
    ) -> None:
        self.out_fd = out_fd
        self.key_reader = key_reader
        self.warnings = Diagnostics()
        self._size = size if size is not None else self._query_size

    def _query_size(self) -> os.terminal_size:
        try:
            return os.get_terminal_size(self.out_fd)
        except OSError:
            return os.terminal_size((80, 24))

    def viewport_rows(self) -> int:
        """Rows available for content; the bottom row holds the status line."""
        return max(1, self._size().lines - 1)

    def viewport_columns(self) -> int:
        return max(1, self._size().columns)

    def translate_sgr(self, code: str | None) -> str:
        """Return the terminal escape for the supported part of ``code``."""
        if code is None:
            return ""
        if not code.endswith("m"):
            self.warnings.add(f'WARNING: Unsupported ANSI code "{code}"')
            return ""

        supported: list[str] = []
        params = split_sgr_params(code)
        index = 0
        while index < len(params):
            param = params[index]
            index += 1
            normalized = str(int(param)) if param.isdigit() else param
            if normalized == "":
                normalized = "0"
            if normalized in SUPPORTED_SGR_PARAMS:
                supported.append(normalized)
                continue
            self.warnings.add(f'WARNING: Unsupported ANSI code "{code}"')
            if normalized in EXTENDED_COLOR_PARAMS and index < len(params):
                # 38/48 carry their arguments: 5;n or 2;r;g;b.
                mode = params[index]
                index += 1 + _EXTENDED_COLOR_ARGUMENTS.get(mode.lstrip("0") or "0", 0)
        if not supported:
            return ""
        return f"\033[{';'.join(supported)}m"

    def render_line(self, row: int, line: StyledLine, first_column: int) -> str:
        """Render ``line`` on screen row ``row`` scrolled by ``first_column``.

        A reverse-video ``<`` marks horizontal scrolling and a ``>`` in the
        last column marks a line wider than the screen.
        """
        columns = self.viewport_columns()
        out: list[str] = [_move_to(row, 0), RESET]
        printed = 0
        truncated = False
        for code, text in line.substring(first_column).tokenize():
            out.append(self.translate_sgr(code))
            remaining = columns - printed
            if len(text) > remaining:
                out.append(text[:remaining])
                printed = columns
                truncated = True
                break
            out.append(text)
            printed += len(text)
        out.append(RESET)
        out.append(CLEAR_TO_EOL)

        if truncated:
            out.append(_move_to(row, columns - 1))
            out.append(_marker(">"))
        if first_column > 0:
            out.append(_move_to(row, 0))
            out.append(_marker("<"))
        return "".join(out)

    def view_status(self, state: PagerState) -> str:
        first_line = state.first_line
        last_line = state.last_line()
        # Peeking one line ahead settles the total once the end is on screen.
        state.lines.get(last_line + 1)
        total = state.lines.size()

        if total == 0:
            status = "Lines 0-0/0"
        elif total is None:
            status = f"Lines {first_line + 1}-{last_line + 1}/?"
        else:
            percent = 100 * (last_line + 1) // total
            status = f"Lines {first_line + 1}-{last_line + 1}/{total} {percent}%"

        if state.first_column > 0:
            status += f"  Column {state.first_column}"
        return status

    def status_text(self, state: PagerState) -> str:
        if state.mode is PagerMode.VIEWING:
            return self.view_status(state)
        if state.mode is PagerMode.SEARCHING:
            return f"/{state.search_editor.text}"
        if state.mode is PagerMode.NOT_FOUND:
            return f"Not found: {state.search_editor.text}"
        raise unsupported_mode(state.mode)

    def render_status(self, state: PagerState) -> str:
        status = self.status_text(state)[: self.viewport_columns()]
        return f"{_move_to(self.viewport_rows(), 0)}{RESET}\033[7m{status}{RESET}{CLEAR_TO_EOL}"

    def compose(self, state: PagerState) -> str:
        """Build one complete frame for ``state``."""
        rows = self.viewport_rows()
        pattern = None
        if not state.search_editor.is_empty():
            pattern = state.search_editor.build_search_pattern()

        out: list[str] = []
        row = 0
        first_line = state.first_line
        for line_number in range(first_line, state.last_line() + 1):
            line = state.lines.get(line_number)
            if line is None:
                break
            if pattern is not None:
                line = line.highlight(pattern)
            out.append(self.render_line(row, line, state.first_column))
            row += 1

        if row < rows:
            out.append(f"{_move_to(row, 0)}{RESET}{CLEAR_TO_EOL}{_marker('---')}")
            row += 1
        while row < rows:
            out.append(f"{_move_to(row, 0)}{RESET}{CLEAR_TO_EOL}")
            row += 1

        out.append(self.render_status(state))
        return "".join(out)

    def draw(self, state: PagerState) -> None:
        os.write(self.out_fd, self.compose(state).encode("utf-8", errors="replace"))

    def next_event(self) -> str:
        assert self.key_reader is not None
        return self.key_reader.read_key()
