"""Key handling for viewing and searching modes.

Viewing keys move the window, open nested views, or start searches; while
searching, navigation keys fall through to the viewing handler and every
other key edits the query.
"""

from __future__ import annotations

from ..state import PagerMode, PagerState, SearchDirection
from .key_registry import KeyBinding, KeyRegistry

NAVIGATION_KEYS = frozenset(
    {"UP", "DOWN", "LEFT", "RIGHT", "PAGE_UP", "PAGE_DOWN", "HOME", "END"}
)

Count = int | None


def _quit_view(state: PagerState, _count: Count) -> None:
    if not state.pop_view():
        state.done = True


def _show_help(state: PagerState, _count: Count) -> None:
    if state.view_depth > 0 or state.help_lines is None:
        return
    state.push_view(state.help_lines)


def _start_search(state: PagerState, _count: Count) -> None:
    state.start_search()


def _find_next(state: PagerState, _count: Count) -> None:
    state.find_next(SearchDirection.FORWARDS)


def _find_previous(state: PagerState, _count: Count) -> None:
    state.find_next(SearchDirection.BACKWARDS)


def _line_down(state: PagerState, count: Count) -> None:
    state.first_line += count if count is not None else 1


def _line_up(state: PagerState, count: Count) -> None:
    state.first_line -= count if count is not None else 1


def _scroll_right(state: PagerState, count: Count) -> None:
    state.first_column += count if count is not None else state.horizontal_step


def _scroll_left(state: PagerState, count: Count) -> None:
    step = count if count is not None else state.horizontal_step
    state.first_column = max(0, state.first_column - step)


def _page_down(state: PagerState, count: Count) -> None:
    if count is not None:
        state.first_line = count - 1
    else:
        state.first_line = state.last_line() + 1


def _page_up(state: PagerState, _count: Count) -> None:
    state.set_last_line(state.first_line - 1)


def _half_page_down(state: PagerState, _count: Count) -> None:
    state.first_line += max(1, state.viewport.viewport_rows() // 2)


def _half_page_up(state: PagerState, _count: Count) -> None:
    state.first_line -= max(1, state.viewport.viewport_rows() // 2)


def _go_to_start(state: PagerState, count: Count) -> None:
    state.first_line = count - 1 if count is not None else 0
    state.first_column = 0


def _go_to_end(state: PagerState, count: Count) -> None:
    if count is not None:
        state.first_line = count - 1
    else:
        state.first_line = state.lines.size(force_full_read=True) or 0
    state.first_column = 0


# Keys that leave the search result state alone; every other bound key
# counts as movement and returns the pager to plain viewing.
_STATUS_PRESERVING = frozenset({"q", "EOF", "/", "n", "N"})

VIEW_KEYS = KeyRegistry().register_bindings(
    KeyBinding(("q", "EOF"), _quit_view),
    KeyBinding(("h", "?", "F1"), _show_help),
    KeyBinding(("/",), _start_search),
    KeyBinding(("n",), _find_next),
    KeyBinding(("N",), _find_previous),
    KeyBinding(("DOWN", "j", "ENTER"), _line_down),
    KeyBinding(("UP", "k"), _line_up),
    KeyBinding(("RIGHT", "l"), _scroll_right),
    KeyBinding(("LEFT",), _scroll_left),
    KeyBinding(("PAGE_DOWN", "f", " "), _page_down),
    KeyBinding(("PAGE_UP", "b"), _page_up),
    KeyBinding(("d",), _half_page_down),
    KeyBinding(("u",), _half_page_up),
    KeyBinding(("<", "g", "HOME"), _go_to_start),
    KeyBinding((">", "G", "END"), _go_to_end),
)


def handle_view_key(state: PagerState, key: str) -> None:
    """Handle one key in viewing or not-found mode."""
    if key.isdigit() and len(key) == 1:
        state.prefix += key
        return

    count = int(state.prefix) if state.prefix else None
    state.prefix = ""

    # RESIZE and unbound keys need no state change; the next frame re-reads geometry.
    if VIEW_KEYS.dispatch(key, state, count) and key not in _STATUS_PRESERVING:
        state.mode = PagerMode.VIEWING


def handle_search_key(state: PagerState, key: str) -> None:
    """Handle one key while the search prompt is open."""
    if key in NAVIGATION_KEYS or key == "EOF":
        state.mode = PagerMode.VIEWING
        handle_view_key(state, key)
        return
    if key == "RESIZE":
        return

    state.search_editor.enter_char(key)
    state.update_incremental_search()
    if state.search_editor.is_done():
        state.mode = PagerMode.VIEWING
