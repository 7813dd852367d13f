"""Application settings for romindex."""
from __future__ import annotations

import json
import logging
import os
from copy import deepcopy
from typing import Any, Dict, List

from .shared_config import (
    DEFAULT_GAMES_FOLDERS, DEFAULT_HOST, DEFAULT_PORT, LOGS_DIR, SETTINGS_FILE,
    ensure_app_directories,
)

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = os.environ.get("ROMINDEX_SETTINGS", SETTINGS_FILE)

DEFAULT_SETTINGS: Dict[str, Any] = {
    "games_folders": list(DEFAULT_GAMES_FOLDERS),
    "web": {
        "host": DEFAULT_HOST,
        "port": DEFAULT_PORT,
    },
    "logging": {
        "dir": LOGS_DIR,
        "echo": False,
    },
}


def _deep_merge(base: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    out = deepcopy(base)
    for k, v in (updates or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = deepcopy(v)
    return out


def load_settings(path: str | None = None) -> Dict[str, Any]:
    """Load settings from JSON, falling back to defaults for anything missing or unreadable."""
    path = path or DEFAULT_SETTINGS_PATH
    if not os.path.exists(path):
        return deepcopy(DEFAULT_SETTINGS)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("ignoring unreadable settings file %s: %s", path, e)
        return deepcopy(DEFAULT_SETTINGS)
    if not isinstance(data, dict):
        logger.warning("ignoring settings file %s: not a JSON object", path)
        return deepcopy(DEFAULT_SETTINGS)
    return _deep_merge(DEFAULT_SETTINGS, data)


def save_settings(settings: Dict[str, Any], path: str | None = None) -> None:
    path = path or DEFAULT_SETTINGS_PATH
    ensure_app_directories(os.path.dirname(path) or ".")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(settings, f, ensure_ascii=False, indent=2)


def get_games_folders(settings: Dict[str, Any]) -> List[str]:
    folders = settings.get("games_folders") or []
    return [str(f) for f in folders if f]
