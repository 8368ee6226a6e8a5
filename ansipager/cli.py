"""Command-line front door for ansipager.

Parses CLI options, picks the input (a file or piped stdin), and either
copies it straight through or starts the interactive pager.
"""

from __future__ import annotations

import argparse
import os
import shutil
import sys
from pathlib import Path

from . import __version__
from .config import load_highlight_enabled, load_horizontal_step
from .highlight import highlight_source
from .runtime import run_pager


def resolve_input_path(files: list[str]) -> Path | None:
    """Validate positional file arguments; ``None`` means read stdin."""
    if not files:
        return None
    if len(files) > 1:
        raise SystemExit("Only one file can be shown")
    path = Path(files[0])
    if not path.exists():
        raise SystemExit(f"File not found: {path}")
    if not path.is_file():
        raise SystemExit(f"Not a file: {path}")
    return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ansipager",
        description="Page text one screen at a time, with ANSI colors and incremental search.",
    )
    parser.add_argument("files", nargs="*", metavar="FILE", help="File to page. Defaults to piped stdin.")
    parser.add_argument("--version", action="version", version=f"ansipager {__version__}")
    parser.add_argument(
        "--no-highlight",
        action="store_true",
        help="Do not syntax highlight files before paging.",
    )
    return parser


def _copy_through(path: Path | None) -> None:
    sys.stdout.flush()
    if path is None:
        shutil.copyfileobj(sys.stdin.buffer, sys.stdout.buffer)
    else:
        with path.open("rb") as handle:
            shutil.copyfileobj(handle, sys.stdout.buffer)
    sys.stdout.buffer.flush()


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and page the selected input."""
    args = build_parser().parse_args(argv)
    path = resolve_input_path(args.files)

    if path is None and sys.stdin.isatty():
        raise SystemExit('Missing filename ("ansipager --help" for help)')

    if not sys.stdout.isatty():
        _copy_through(path)
        return

    if path is None:
        source = sys.stdin.buffer
    else:
        source = None
        if load_highlight_enabled() and not args.no_highlight:
            source = highlight_source(path.read_bytes(), path)
        if source is None:
            source = path.open("rb")

    # With piped stdin the keyboard is only reachable through the tty device.
    owns_key_fd = not sys.stdin.isatty()
    key_fd = os.open("/dev/tty", os.O_RDONLY) if owns_key_fd else sys.stdin.fileno()
    try:
        run_pager(source, key_fd, sys.stdout.fileno(), load_horizontal_step())
    finally:
        if owns_key_fd:
            os.close(key_fd)


if __name__ == "__main__":
    main()
