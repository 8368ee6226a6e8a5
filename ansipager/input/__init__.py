"""Input-layer public API for key decoding and mode handlers.

Low-level terminal decoding (``KeyReader``) is kept apart from the handlers
that map key tokens onto pager state changes.
"""

from .key_registry import KeyBinding, KeyRegistry
from .keys import NAVIGATION_KEYS, handle_search_key, handle_view_key
from .reader import ESC_SEQUENCE_TIMEOUT_MS, KeyReader

__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyBinding",
    "KeyReader",
    "KeyRegistry",
    "NAVIGATION_KEYS",
    "handle_search_key",
    "handle_view_key",
]
