"""Runtime composition layer for ansipager.

Builds the line source, screen, and pager state, runs the loop inside raw
terminal mode, and reports collected warnings once the terminal is restored.
"""

from __future__ import annotations

import signal
import sys

from ..diagnostics import Diagnostics
from ..input import KeyReader
from ..render import Screen
from ..render.help import help_line_source
from ..source import InputSource, LazyLineSource
from ..state import PagerState
from .loop import run_main_loop
from .terminal import TerminalController


def run_pager(source: InputSource, key_fd: int, out_fd: int, horizontal_step: int = 16) -> None:
    """Page ``source`` interactively until the user quits.

    Keys are read from ``key_fd`` and frames written to ``out_fd``. Exits with
    status 1 after reporting if the session crashed.
    """
    lines = LazyLineSource.from_input(source)
    key_reader = KeyReader(key_fd)
    screen = Screen(out_fd, key_reader)
    state = PagerState(lines, screen, help_lines=help_line_source(), horizontal_step=horizontal_step)
    terminal = TerminalController(key_fd, out_fd)

    previous_handler = signal.signal(signal.SIGWINCH, lambda _signum, _frame: key_reader.notify_resize())
    crash: Exception | None = None
    try:
        with terminal.raw_mode():
            run_main_loop(state, screen)
    except Exception as exc:
        crash = exc
    finally:
        signal.signal(signal.SIGWINCH, previous_handler)
        key_reader.close()
        lines.close()

    warnings = Diagnostics().merge(screen.warnings, key_reader.warnings, state.warnings)
    warnings.report(sys.stderr, crash)
    if crash is not None:
        raise SystemExit(1)
