"""Persistent JSON config helpers.

Stores the syntax-highlighting preference and the horizontal scroll step.
Malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "ansipager"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_HORIZONTAL_STEP = 16


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def load_highlight_enabled() -> bool:
    """Return whether files are syntax highlighted; only explicit booleans count."""
    value = load_config().get("highlight")
    return value if isinstance(value, bool) else True


def load_horizontal_step() -> int:
    """Return the Left/Right scroll step, falling back for non-positive values."""
    value = load_config().get("horizontal_step")
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return DEFAULT_HORIZONTAL_STEP
    return value
