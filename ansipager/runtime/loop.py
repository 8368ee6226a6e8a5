"""Main interactive event loop.

Alternates between drawing the current state and blocking for the next
key event until the pager is done.
"""

from __future__ import annotations

from typing import Protocol

from ..state import PagerState


class Display(Protocol):
    def draw(self, state: PagerState) -> None: ...

    def next_event(self) -> str: ...


def run_main_loop(state: PagerState, display: Display) -> None:
    """Run until a quit action (or end of keyboard input) finishes the pager."""
    while not state.done:
        display.draw(state)
        state.handle_key(display.next_event())
