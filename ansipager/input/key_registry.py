"""Key-token dispatch tables."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class KeyBinding:
    """Mapping from one or more key tokens to a single action callback."""

    keys: tuple[str, ...]
    handler: Callable[..., Any]


class KeyRegistry:
    """Small key-dispatch table."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[..., Any]] = {}

    def register_binding(self, binding: KeyBinding) -> KeyRegistry:
        """Register one binding, overwriting existing handlers for the same keys."""
        for key in binding.keys:
            self._handlers[key] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyBinding) -> KeyRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def dispatch(self, key: str, *args: Any) -> bool:
        """Invoke the handler bound to ``key`` with ``args``; return whether one existed."""
        handler = self._handlers.get(key)
        if handler is None:
            return False
        handler(*args)
        return True
