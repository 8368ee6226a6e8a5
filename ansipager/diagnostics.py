"""Non-fatal warning collection.

Components record anomalies here instead of interrupting the session.
The runtime merges every collector once the terminal has been restored.
"""

from __future__ import annotations

import traceback
from collections.abc import Iterable, Iterator
from typing import TextIO

REPORT_FOOTER = "Please report issues together with the output of 'ansipager --version'."


class Diagnostics:
    """Ordered set of warning messages."""

    def __init__(self, messages: Iterable[str] = ()) -> None:
        self._messages: dict[str, None] = dict.fromkeys(messages)

    def add(self, message: str) -> None:
        self._messages[message] = None

    def merge(self, *others: Iterable[str]) -> Diagnostics:
        """Add every message from ``others`` and return ``self``."""
        for other in others:
            for message in other:
                self.add(message)
        return self

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __bool__(self) -> bool:
        return bool(self._messages)

    def __contains__(self, message: object) -> bool:
        return message in self._messages

    def report(self, stream: TextIO, crash: BaseException | None = None) -> None:
        """Write sorted warnings, then an optional crash traceback, to ``stream``."""
        for message in sorted(self._messages):
            stream.write(f"{message}\n")

        if crash is not None:
            if self._messages:
                stream.write("\n")
            stream.write("".join(traceback.format_exception(type(crash), crash, crash.__traceback__)))

        if crash is not None or self._messages:
            stream.write(f"\n{REPORT_FOOTER}\n")
