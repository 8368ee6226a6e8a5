"""Pager state machine: view window, view stack, and search navigation."""

from __future__ import annotations

import enum
import re
import sys
from dataclasses import dataclass
from typing import Protocol

from .diagnostics import Diagnostics
from .line_editor import LineEditor
from .source import LazyLineSource


class PagerMode(enum.Enum):
    VIEWING = "viewing"
    SEARCHING = "searching"
    NOT_FOUND = "not-found"


class SearchDirection(enum.Enum):
    FORWARDS = 1
    BACKWARDS = -1


class Viewport(Protocol):
    """Screen geometry the pager needs for window arithmetic."""

    def viewport_rows(self) -> int: ...

    def viewport_columns(self) -> int: ...


@dataclass(frozen=True)
class ViewFrame:
    """A suspended view waiting beneath a nested one."""

    lines: LazyLineSource
    first_line: int


def unsupported_mode(mode: object) -> AssertionError:
    return AssertionError(f"Unsupported mode of operation <{mode}>")


class PagerState:
    """Everything needed to render one screen and react to one key."""

    def __init__(
        self,
        lines: LazyLineSource,
        viewport: Viewport,
        help_lines: LazyLineSource | None = None,
        horizontal_step: int = 16,
    ) -> None:
        self.lines = lines
        self.viewport = viewport
        self.help_lines = help_lines
        self.horizontal_step = horizontal_step
        self.first_column = 0
        self.mode = PagerMode.VIEWING
        self.search_editor = LineEditor()
        self.last_key = ""
        self.prefix = ""
        self.done = False
        self._first_line = 0
        self._view_stack: list[ViewFrame] = []
        self._editor_warnings = Diagnostics()

    def _rows(self) -> int:
        return max(1, self.viewport.viewport_rows())

    def _clamp_first_line(self, first_line: int) -> int:
        rows = self._rows()
        first_line = max(0, first_line)
        # Pull just far enough to know whether a full screen exists below.
        self.lines.get(first_line + rows - 1)
        total = self.lines.size()
        if total is not None:
            first_line = min(first_line, max(0, total - rows))
        return first_line

    @property
    def first_line(self) -> int:
        self._first_line = self._clamp_first_line(self._first_line)
        return self._first_line

    @first_line.setter
    def first_line(self, value: int) -> None:
        self._first_line = self._clamp_first_line(value)

    def last_line(self, first_line: int | None = None) -> int:
        """Return the last visible line for a window starting at ``first_line``."""
        if first_line is None:
            first_line = self.first_line
        else:
            first_line = self._clamp_first_line(first_line)
        last_line = first_line + self._rows() - 1
        total = self.lines.size()
        if total is not None:
            last_line = min(total - 1, last_line)
        return last_line

    def set_last_line(self, last_line: int) -> None:
        self.first_line = last_line - self._rows() + 1

    @property
    def view_depth(self) -> int:
        return len(self._view_stack)

    def push_view(self, lines: LazyLineSource) -> None:
        self._view_stack.append(ViewFrame(self.lines, self.first_line))
        self.lines = lines
        self._first_line = 0
        self.first_column = 0

    def pop_view(self) -> bool:
        """Return to the suspended view; return ``False`` when none is left."""
        if not self._view_stack:
            return False
        frame = self._view_stack.pop()
        self.lines = frame.lines
        self.first_line = frame.first_line
        self.first_column = 0
        return True

    def show_line(self, line_number: int) -> None:
        """Scroll so ``line_number`` is visible, moving at least a full screen."""
        first_line = self.first_line
        last_line = self.last_line()
        if first_line <= line_number <= last_line:
            return

        if line_number < first_line:
            if self.last_line(line_number) >= first_line:
                self.set_last_line(first_line - 1)
                return
        else:
            line_number = max(line_number, last_line + 1)

        self.first_line = line_number

    def search_range(self, first: int, last: int, pattern: re.Pattern[str] | str) -> int | None:
        """Return the first line in ``first..last`` (either direction) matching ``pattern``."""
        if last >= first:
            for line_number in range(first, last + 1):
                line = self.lines.get(line_number)
                if line is None:
                    return None
                if line.contains(pattern):
                    return line_number
            return None

        for line_number in range(first, last - 1, -1):
            line = self.lines.get(line_number)
            if line is not None and line.contains(pattern):
                return line_number
        return None

    def remaining_search(
        self,
        pattern: re.Pattern[str] | str,
        direction: SearchDirection = SearchDirection.FORWARDS,
    ) -> int | None:
        """Search from just outside the view towards the end of the document.

        After a failed search the scan restarts from the opposite extreme.
        """
        if direction is SearchDirection.FORWARDS:
            if self.mode is PagerMode.NOT_FOUND:
                start = 0
            else:
                start = self.last_line() + 1
                if self.lines.get(start) is None:
                    total = self.lines.size()
                    if not total:
                        return None
                    start = min(start, total - 1)
            total = self.lines.size()
            end = total - 1 if total is not None else sys.maxsize
            return self.search_range(start, end, pattern)

        if self.mode is PagerMode.NOT_FOUND:
            total = self.lines.size(force_full_read=True) or 0
            start = total - 1
            if start < 0:
                return None
        else:
            start = max(0, self.first_line - 1)
        return self.search_range(start, 0, pattern)

    def find_next(self, direction: SearchDirection = SearchDirection.FORWARDS) -> None:
        if self.search_editor.is_empty():
            return
        hit = self.remaining_search(self.search_editor.build_search_pattern(), direction)
        if hit is None:
            self.mode = PagerMode.NOT_FOUND
            return
        self.show_line(hit)
        self.mode = PagerMode.VIEWING

    def start_search(self) -> None:
        self._editor_warnings.merge(self.search_editor.warnings)
        self.search_editor = LineEditor()
        self.mode = PagerMode.SEARCHING
        self.update_incremental_search()

    def update_incremental_search(self) -> None:
        """Bring a hit for the current query on screen unless one is visible already."""
        if self.search_editor.is_empty():
            return
        pattern = self.search_editor.build_search_pattern()
        first_line = self.first_line
        last_line = self.last_line()
        if self.search_range(first_line, last_line, pattern) is not None:
            return

        total = self.lines.size()
        end = total - 1 if total is not None else sys.maxsize
        hit = self.search_range(last_line + 1, end, pattern)
        if hit is None and first_line > 0:
            hit = self.search_range(0, first_line - 1, pattern)
        if hit is not None:
            self.show_line(hit)

    def handle_key(self, key: str) -> None:
        """Dispatch one key event according to the current mode."""
        from .input.keys import handle_search_key, handle_view_key

        if self.mode in (PagerMode.VIEWING, PagerMode.NOT_FOUND):
            handle_view_key(self, key)
        elif self.mode is PagerMode.SEARCHING:
            handle_search_key(self, key)
        else:
            raise unsupported_mode(self.mode)
        self.last_key = key

    @property
    def warnings(self) -> Diagnostics:
        diagnostics = Diagnostics(self._editor_warnings)
        diagnostics.merge(self.search_editor.warnings, self.lines.warnings)
        for frame in self._view_stack:
            diagnostics.merge(frame.lines.warnings)
        return diagnostics
