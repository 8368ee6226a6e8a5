"""Unit tests for key dispatch in viewing and searching modes."""

from __future__ import annotations

import unittest

from ansipager.input.key_registry import KeyBinding, KeyRegistry
from ansipager.source import LazyLineSource
from ansipager.state import PagerMode, PagerState


class FakeViewport:
    def __init__(self, rows: int) -> None:
        self.rows = rows

    def viewport_rows(self) -> int:
        return self.rows

    def viewport_columns(self) -> int:
        return 80


def _make_state(count: int = 10, rows: int = 2) -> PagerState:
    return PagerState(
        LazyLineSource([str(n) for n in range(count)]),
        FakeViewport(rows),
        help_lines=LazyLineSource(["help"]),
    )


def _press(state: PagerState, *keys: str) -> None:
    for key in keys:
        state.handle_key(key)


class KeyRegistryTests(unittest.TestCase):
    def test_dispatch_reports_whether_key_was_bound(self) -> None:
        calls: list[tuple[str, int]] = []
        registry = KeyRegistry().register_binding(
            KeyBinding(("a", "b"), lambda name, count: calls.append((name, count)))
        )

        self.assertTrue(registry.dispatch("b", "ab", 3))
        self.assertFalse(registry.dispatch("c", "ab", 3))
        self.assertEqual(calls, [("ab", 3)])

    def test_later_binding_overrides_earlier(self) -> None:
        calls: list[str] = []
        registry = KeyRegistry().register_bindings(
            KeyBinding(("x",), lambda: calls.append("first")),
            KeyBinding(("x",), lambda: calls.append("second")),
        )
        registry.dispatch("x")
        self.assertEqual(calls, ["second"])


class ViewKeyTests(unittest.TestCase):
    def test_line_movement(self) -> None:
        state = _make_state()
        _press(state, "j")
        self.assertEqual(state.first_line, 1)
        _press(state, "DOWN", "ENTER")
        self.assertEqual(state.first_line, 3)
        _press(state, "k", "UP")
        self.assertEqual(state.first_line, 1)

    def test_numeric_prefix_repeats_line_movement(self) -> None:
        state = _make_state()
        _press(state, "3", "j")
        self.assertEqual(state.first_line, 3)
        self.assertEqual(state.prefix, "")
        _press(state, "j")
        self.assertEqual(state.first_line, 4)

    def test_prefix_accumulates_digits(self) -> None:
        state = _make_state(count=30)
        _press(state, "1", "2")
        self.assertEqual(state.prefix, "12")
        _press(state, "g")
        self.assertEqual(state.first_line, 11)

    def test_page_movement(self) -> None:
        state = _make_state()
        _press(state, "f")
        self.assertEqual(state.first_line, 2)
        _press(state, " ", "PAGE_DOWN")
        self.assertEqual(state.first_line, 6)
        _press(state, "b")
        self.assertEqual(state.first_line, 4)
        _press(state, "PAGE_UP")
        self.assertEqual(state.first_line, 2)

    def test_page_down_with_prefix_goes_to_line(self) -> None:
        state = _make_state()
        _press(state, "5", "f")
        self.assertEqual(state.first_line, 4)

    def test_half_page_movement(self) -> None:
        state = _make_state(count=40, rows=10)
        _press(state, "d")
        self.assertEqual(state.first_line, 5)
        _press(state, "d", "u")
        self.assertEqual(state.first_line, 5)

    def test_start_and_end(self) -> None:
        state = _make_state()
        _press(state, "G")
        self.assertEqual(state.first_line, 8)
        _press(state, "g")
        self.assertEqual(state.first_line, 0)
        _press(state, "END")
        self.assertEqual(state.first_line, 8)
        _press(state, "<")
        self.assertEqual(state.first_line, 0)
        _press(state, "5", ">")
        self.assertEqual(state.first_line, 4)

    def test_horizontal_scroll(self) -> None:
        state = _make_state()
        _press(state, "RIGHT")
        self.assertEqual(state.first_column, 16)
        _press(state, "l")
        self.assertEqual(state.first_column, 32)
        _press(state, "LEFT", "LEFT", "LEFT")
        self.assertEqual(state.first_column, 0)

    def test_jump_to_start_resets_column(self) -> None:
        state = _make_state()
        _press(state, "RIGHT", "g")
        self.assertEqual(state.first_column, 0)

    def test_quit_ends_session(self) -> None:
        state = _make_state()
        _press(state, "q")
        self.assertTrue(state.done)

    def test_end_of_keyboard_input_ends_session(self) -> None:
        state = _make_state()
        _press(state, "EOF")
        self.assertTrue(state.done)

    def test_help_is_pushed_once_and_quit_pops_it(self) -> None:
        state = _make_state()
        _press(state, "j", "h")
        self.assertEqual(state.view_depth, 1)
        self.assertEqual(state.first_line, 0)
        _press(state, "?", "F1")
        self.assertEqual(state.view_depth, 1)

        _press(state, "q")
        self.assertFalse(state.done)
        self.assertEqual(state.view_depth, 0)
        self.assertEqual(state.first_line, 1)

    def test_unbound_keys_and_resize_change_nothing(self) -> None:
        state = _make_state()
        _press(state, "z", "RESIZE", "UNKNOWN")
        self.assertEqual(state.first_line, 0)
        self.assertEqual(state.mode, PagerMode.VIEWING)
        self.assertEqual(state.last_key, "UNKNOWN")

    def test_movement_clears_not_found(self) -> None:
        state = _make_state()
        state.mode = PagerMode.NOT_FOUND
        _press(state, "j")
        self.assertEqual(state.mode, PagerMode.VIEWING)

    def test_unsupported_mode_is_an_error(self) -> None:
        state = _make_state()
        state.mode = "bogus"
        with self.assertRaises(AssertionError):
            state.handle_key("j")


class SearchKeyTests(unittest.TestCase):
    def test_slash_starts_search_with_fresh_query(self) -> None:
        state = _make_state()
        _press(state, "/", "7", "ENTER")
        self.assertEqual(state.mode, PagerMode.VIEWING)
        self.assertEqual(state.search_editor.text, "7")

        _press(state, "/")
        self.assertEqual(state.mode, PagerMode.SEARCHING)
        self.assertEqual(state.search_editor.text, "")

    def test_typing_searches_incrementally(self) -> None:
        state = _make_state()
        _press(state, "/", "7")
        self.assertEqual(state.mode, PagerMode.SEARCHING)
        self.assertEqual(state.first_line, 7)

    def test_digits_go_to_query_not_prefix(self) -> None:
        state = _make_state()
        _press(state, "/", "4")
        self.assertEqual(state.prefix, "")
        self.assertEqual(state.search_editor.text, "4")

    def test_escape_cancels_search(self) -> None:
        state = _make_state()
        _press(state, "/", "7", "ESC")
        self.assertEqual(state.mode, PagerMode.VIEWING)
        self.assertTrue(state.search_editor.is_empty())

    def test_navigation_key_leaves_search_and_moves(self) -> None:
        state = _make_state()
        _press(state, "/", "DOWN")
        self.assertEqual(state.mode, PagerMode.VIEWING)
        self.assertEqual(state.first_line, 1)

    def test_resize_keeps_search_open(self) -> None:
        state = _make_state()
        _press(state, "/", "RESIZE")
        self.assertEqual(state.mode, PagerMode.SEARCHING)

    def test_end_of_keyboard_input_while_searching_quits(self) -> None:
        state = _make_state()
        _press(state, "/", "EOF")
        self.assertTrue(state.done)

    def test_n_and_shift_n_find_next_and_previous(self) -> None:
        state = _make_state(count=20)
        _press(state, "/", "5", "ENTER")
        self.assertEqual(state.first_line, 5)

        _press(state, "n")
        self.assertEqual(state.first_line, 15)
        _press(state, "n")
        self.assertEqual(state.mode, PagerMode.NOT_FOUND)
        _press(state, "n")
        self.assertEqual(state.mode, PagerMode.VIEWING)
        self.assertEqual(state.first_line, 5)

        _press(state, "N")
        self.assertEqual(state.mode, PagerMode.NOT_FOUND)
        _press(state, "N")
        self.assertEqual(state.mode, PagerMode.VIEWING)
        self.assertEqual(state.first_line, 15)


if __name__ == "__main__":
    unittest.main()
