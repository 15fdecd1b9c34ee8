"""
Configuration management for the Mitra coordinator
Loads and saves system settings and the user's scheduling preferences.

Each section lives in its own JSON file in the config directory and is
created with defaults on first use. Keys missing from an older file fall
back to their defaults.
"""

import json
import os
from pathlib import Path
from datetime import tzinfo
from typing import Dict, Any, Optional

from dateutil import tz

from .models import parse_clock


PROJECT_ROOT = Path(__file__).parent.parent.parent

DEFAULT_SETTINGS = {
    "database_path": "data/database/mitra.db",
    "timezone": "UTC",
    "fetch_timeout_seconds": 10,
}

DEFAULT_PREFERENCES = {
    "work_hours_start": "09:00",
    "work_hours_end": "18:00",
    "lunch_time": "12:00",
    "lunch_duration": 60,
    "large_expense_threshold": 1000,
}

# section name -> (file name, defaults)
SECTIONS = {
    "settings": ("settings.json", DEFAULT_SETTINGS),
    "preferences": ("preferences.json", DEFAULT_PREFERENCES),
}


class Config:
    """Configuration manager for the coordinator"""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize configuration manager

        Args:
            config_dir: Configuration directory; defaults to $MITRA_CONFIG_DIR,
                then <project>/config
        """
        if config_dir is None:
            env_dir = os.environ.get("MITRA_CONFIG_DIR")
            config_dir = Path(env_dir) if env_dir else PROJECT_ROOT / "config"

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self._sections: Dict[str, Dict[str, Any]] = {
            name: self._load_section(file_name, defaults)
            for name, (file_name, defaults) in SECTIONS.items()
        }

    def _section_path(self, section: str) -> Path:
        return self.config_dir / SECTIONS[section][0]

    def _load_section(self, file_name: str, defaults: Dict[str, Any]) -> Dict[str, Any]:
        path = self.config_dir / file_name
        if not path.exists():
            self._write(path, defaults)
            return dict(defaults)
        with open(path, 'r') as f:
            return {**defaults, **json.load(f)}

    def _write(self, path: Path, data: Dict[str, Any]) -> None:
        with open(path, 'w') as f:
            json.dump(data, f, indent=2)

    def get(self, key: str, section: str = "settings", default: Any = None) -> Any:
        """
        Get configuration value

        Args:
            key: Configuration key
            section: 'settings' or 'preferences'
            default: Returned when the key or section is unknown
        """
        return self._sections.get(section, {}).get(key, default)

    def set(self, key: str, value: Any, section: str = "settings") -> None:
        """
        Set configuration value and save the section to disk

        Raises:
            KeyError: for an unknown section
        """
        if section not in SECTIONS:
            raise KeyError(f"Unknown config section: {section}")
        self._sections[section][key] = value
        self._write(self._section_path(section), self._sections[section])

    def get_clock(self, key: str, default: str) -> int:
        """Preference clock time ("HH:MM") as minutes since midnight"""
        return parse_clock(self.get(key, section="preferences", default=default))

    def get_database_path(self) -> Path:
        """SQLite document store path; relative paths resolve from the project root"""
        path = Path(self.get("database_path"))
        return path if path.is_absolute() else PROJECT_ROOT / path

    def get_fetch_timeout(self) -> float:
        """Seconds allowed for the concurrent read phase of a schedule build"""
        return float(self.get("fetch_timeout_seconds", default=10))

    def get_timezone(self) -> tzinfo:
        """
        Zone used to decide what "today" is when no date is given

        Raises:
            ValueError: if the configured name is not a known IANA zone
        """
        name = self.get("timezone", default="UTC")
        zone = tz.gettz(name) if isinstance(name, str) and name else None
        if zone is None:
            raise ValueError(f"Unknown timezone in settings: {name!r}")
        return zone
