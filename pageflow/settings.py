"""User settings that fix the page geometry at startup.

Settings are stored in a JSON file in the user's config directory. They pick
a page preset and may override its font; the resulting PageConfig is
resolved once when the process starts.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .page_config import DEFAULT_PAGE_CONFIG, PAGE_CONFIGS, PageConfig

logger = logging.getLogger(__name__)


class SettingsStore:
    """Loads and saves the settings file."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = Path(config_dir or platformdirs.user_config_dir("pageflow"))
        self._settings_file = self._config_dir / "settings.json"

    @property
    def settings_file(self) -> Path:
        return self._settings_file

    def load(self) -> Dict[str, Any]:
        """Load valid settings; unreadable files and bad values are ignored."""
        if not self._settings_file.exists():
            return {}
        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            return {}

        settings = {}
        for key, value in data.items():
            if validate_setting(key, value):
                settings[key] = value
            else:
                logger.warning(f"Ignoring invalid setting {key}={value!r}")
        return settings

    def save(self, settings: Dict[str, Any]) -> bool:
        """Save settings atomically. Returns True on success."""
        temp_file = self._settings_file.with_suffix('.tmp')
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(settings, f, indent=2)
            temp_file.replace(self._settings_file)
            return True
        except OSError as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False


def validate_setting(key: str, value: Any) -> bool:
    """Validate a setting value.

    Args:
        key: Setting key name.
        value: Setting value to validate.

    Returns:
        True if setting is valid, False otherwise.
    """
    if value is None:
        return True  # None means "not set"

    if key == 'page_preset':
        return isinstance(value, str) and value in PAGE_CONFIGS

    if key in ('font_family', 'font_path'):
        return isinstance(value, str) and bool(value)

    if key in ('font_size', 'line_height'):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return 4 <= value <= 200

    # Unknown settings are considered valid (forward compatibility)
    return True


def load_page_config(settings: Optional[Dict[str, Any]] = None) -> PageConfig:
    """Resolve the page configuration from settings.

    Raises:
        ConfigurationError: If the resulting configuration cannot lay out text.
    """
    settings = settings or {}
    config = PAGE_CONFIGS.get(settings.get('page_preset') or "", DEFAULT_PAGE_CONFIG)
    overrides = {key: settings[key] for key in ('font_family', 'font_size', 'line_height')
                 if settings.get(key) is not None}
    if overrides:
        config = config.replace(**overrides)
    return config.validate()
