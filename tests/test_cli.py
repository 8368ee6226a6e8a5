"""CLI argument and input selection behavior tests.

Verifies how ``ansipager.cli.main`` validates files, chooses the input, and
decides between copying through and paging.
"""

from __future__ import annotations

import contextlib
import io
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from ansipager import __version__, cli


def _fake_stream(tty: bool, fileno: int, data: bytes = b"") -> mock.Mock:
    stream = mock.Mock()
    stream.isatty.return_value = tty
    stream.fileno.return_value = fileno
    stream.buffer = io.BytesIO(data)
    return stream


class ResolveInputPathTests(unittest.TestCase):
    def test_no_files_means_stdin(self) -> None:
        self.assertIsNone(cli.resolve_input_path([]))

    def test_more_than_one_file_is_rejected(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            cli.resolve_input_path(["a", "b"])
        self.assertEqual(str(ctx.exception), "Only one file can be shown")

    def test_missing_file_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp) / "missing.txt"
            with self.assertRaises(SystemExit) as ctx:
                cli.resolve_input_path([str(missing)])
        self.assertEqual(str(ctx.exception), f"File not found: {missing}")

    def test_directory_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(SystemExit) as ctx:
                cli.resolve_input_path([tmp])
        self.assertEqual(str(ctx.exception), f"Not a file: {tmp}")


class MainTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name)

    def test_version(self) -> None:
        out = io.StringIO()
        with contextlib.redirect_stdout(out), self.assertRaises(SystemExit) as ctx:
            cli.main(["--version"])
        self.assertEqual(ctx.exception.code, 0)
        self.assertEqual(out.getvalue().strip(), f"ansipager {__version__}")

    def test_missing_filename_on_terminal(self) -> None:
        with mock.patch.object(sys, "stdin", _fake_stream(True, 0)), self.assertRaises(SystemExit) as ctx:
            cli.main([])
        self.assertIn("Missing filename", str(ctx.exception))

    def test_file_is_copied_through_when_stdout_is_not_a_terminal(self) -> None:
        target = self.root / "target.txt"
        target.write_bytes(b"\x1b[31mred\x1b[0m\n")
        stdout = _fake_stream(False, 1)

        with mock.patch.object(sys, "stdin", _fake_stream(True, 0)), mock.patch.object(
            sys, "stdout", stdout
        ), mock.patch("ansipager.cli.run_pager") as run_pager:
            cli.main([str(target)])

        run_pager.assert_not_called()
        self.assertEqual(stdout.buffer.getvalue(), b"\x1b[31mred\x1b[0m\n")

    def test_piped_stdin_is_copied_through_when_stdout_is_not_a_terminal(self) -> None:
        stdout = _fake_stream(False, 1)

        with mock.patch.object(sys, "stdin", _fake_stream(False, 0, b"piped\n")), mock.patch.object(
            sys, "stdout", stdout
        ), mock.patch("ansipager.cli.run_pager") as run_pager:
            cli.main([])

        run_pager.assert_not_called()
        self.assertEqual(stdout.buffer.getvalue(), b"piped\n")

    def _run_interactive(self, argv: list[str], highlight_enabled: bool = True):
        with mock.patch.object(sys, "stdin", _fake_stream(True, 0)), mock.patch.object(
            sys, "stdout", _fake_stream(True, 1)
        ), mock.patch("ansipager.cli.load_highlight_enabled", return_value=highlight_enabled), mock.patch(
            "ansipager.cli.load_horizontal_step", return_value=8
        ), mock.patch("ansipager.cli.run_pager") as run_pager:
            cli.main(argv)
        run_pager.assert_called_once()
        return run_pager.call_args.args

    def test_source_file_is_highlighted_before_paging(self) -> None:
        target = self.root / "example.py"
        target.write_text("def answer():\n    return 42\n", encoding="utf-8")

        source, key_fd, out_fd, step = self._run_interactive([str(target)])
        self.assertIsInstance(source, bytes)
        self.assertIn(b"\x1b[", source)
        self.assertEqual((key_fd, out_fd, step), (0, 1, 8))

    def test_no_highlight_pages_raw_file(self) -> None:
        target = self.root / "example.py"
        target.write_text("def answer():\n    return 42\n", encoding="utf-8")

        for argv, enabled in (([str(target), "--no-highlight"], True), ([str(target)], False)):
            with self.subTest(argv=argv, enabled=enabled):
                source, *_rest = self._run_interactive(argv, highlight_enabled=enabled)
                self.addCleanup(source.close)
                self.assertEqual(source.read(), b"def answer():\n    return 42\n")


if __name__ == "__main__":
    unittest.main()
