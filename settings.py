"""JSON-based settings persistence for the calendar picker."""

import json
import os

from calendar_logic import LOCALES
from selection import SelectionMode

_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".mini-calendar-picker.json")

_DEFAULTS = {
    "locale": "en_US",
    "selection_mode": SelectionMode.SINGLE.value,
    "months_before": 1,
    "months_after": 12,
    "months_shown": 3,
}

_MODES = {m.value for m in SelectionMode}


def load_settings(path: str = _SETTINGS_PATH) -> dict:
    """Load settings from disk, returning defaults for missing or bad keys."""
    settings = dict(_DEFAULTS)
    try:
        with open(path, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return settings
    if not isinstance(stored, dict):
        return settings

    if stored.get("locale") in LOCALES:
        settings["locale"] = stored["locale"]
    if stored.get("selection_mode") in _MODES:
        settings["selection_mode"] = stored["selection_mode"]
    for key in ("months_before", "months_after"):
        value = stored.get(key)
        if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 120:
            settings[key] = value
    shown = stored.get("months_shown")
    if isinstance(shown, int) and not isinstance(shown, bool) and 1 <= shown <= 12:
        settings["months_shown"] = shown
    return settings


def save_settings(settings: dict, path: str = _SETTINGS_PATH) -> None:
    """Persist settings to disk."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)
