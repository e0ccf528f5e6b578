"""Configuration manager for defapps. Persists settings to ~/.config/defapps/settings.json."""

import json
import logging
from pathlib import Path
from typing import Any

from PyQt6.QtCore import QStandardPaths

CONFIG_DIR = Path.home() / ".config" / "defapps"
SETTINGS_FILE = CONFIG_DIR / "settings.json"
CACHE_DIR = Path.home() / ".cache" / "defapps"

MIMEAPPS_FILENAME = "mimeapps.list"

DEFAULTS: dict[str, Any] = {
    "extra_application_dirs": [],
    "mimeapps_path": "",
    "window_width": 900,
    "window_height": 560,
}

# logger.py imports this module, so stay on the plain logging API here
_log = logging.getLogger("defapps.config")


class Config:
    """Singleton settings manager with JSON persistence."""

    _instance: "Config | None" = None

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._loaded = False
        return cls._instance

    def __init__(self) -> None:
        if self._loaded:
            return
        self._data: dict[str, Any] = dict(DEFAULTS)
        self._load()
        self._loaded = True

    def _load(self) -> None:
        if not SETTINGS_FILE.exists():
            return
        try:
            with open(SETTINGS_FILE, "r", encoding="utf-8") as f:
                saved = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            _log.warning("Ignoring unreadable settings %s: %s", SETTINGS_FILE, e)
            return
        if isinstance(saved, dict):
            self._data.update(saved)

    def save(self) -> None:
        try:
            CONFIG_DIR.mkdir(parents=True, exist_ok=True)
            with open(SETTINGS_FILE, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2)
        except OSError as e:
            _log.warning("Could not save settings to %s: %s", SETTINGS_FILE, e)

    def get(self, key: str, fallback: Any = None) -> Any:
        return self._data.get(key, fallback if fallback is not None else DEFAULTS.get(key))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self.save()

    # ── Paths ──
    def application_dirs(self) -> list[Path]:
        """Standard application directories followed by the user's extra ones."""
        dirs: list[Path] = []
        standard = QStandardPaths.standardLocations(
            QStandardPaths.StandardLocation.ApplicationsLocation
        )
        for d in list(standard) + list(self.get("extra_application_dirs") or []):
            p = Path(d).expanduser()
            if p not in dirs:
                dirs.append(p)
        return dirs

    def mimeapps_path(self) -> Path:
        """The default-applications file that gets rewritten."""
        override = self.get("mimeapps_path")
        if override:
            return Path(override).expanduser()
        config_home = QStandardPaths.writableLocation(
            QStandardPaths.StandardLocation.ConfigLocation
        )
        return Path(config_home) / MIMEAPPS_FILENAME
