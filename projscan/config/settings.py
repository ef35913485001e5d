"""Read-only view of the effective settings.

Each setting is taken from its environment variable when set, then from the
attached ConfigManager (config files), then from the built-in defaults.
"""

from __future__ import annotations

import os
from typing import Any

from projscan.config.defaults import get_default_config
from projscan.config.manager import ConfigManager

_TRUE_WORDS = ("true", "1", "yes", "on")


def _coerce(raw: str, like: Any) -> Any:
    if isinstance(like, bool):
        return raw.lower() in _TRUE_WORDS
    if isinstance(like, int):
        return int(raw)
    return raw


def _setting(key: str, env_key: str):
    def getter(self: Settings) -> Any:
        return self.lookup(key, env_key)

    getter.__name__ = key
    return property(getter)


class Settings:
    top_contributors = _setting("top_contributors", "PROJSCAN_TOP_CONTRIBUTORS")
    most_active_files_limit = _setting(
        "most_active_files_limit", "PROJSCAN_MOST_ACTIVE_FILES_LIMIT"
    )
    detect_renames = _setting("detect_renames", "PROJSCAN_DETECT_RENAMES")
    gitignore_mode = _setting("gitignore_mode", "PROJSCAN_GITIGNORE_MODE")
    output_dir = _setting("output_dir", "PROJSCAN_OUTPUT_DIR")

    log_level = _setting("log_level", "LOG_LEVEL")
    log_format = _setting("log_format", "LOG_FORMAT")
    log_colors = _setting("log_colors", "LOG_COLORS")

    def __init__(self, config_manager: ConfigManager | None = None):
        self._config_manager = config_manager
        self._defaults = get_default_config()

    def lookup(self, key: str, env_key: str | None = None) -> Any:
        default = self._defaults.get(key)
        raw = os.getenv(env_key) if env_key else None
        if raw:
            return _coerce(raw, default)
        if self._config_manager is not None:
            return self._config_manager.get(key, default)
        return default

    def attach(self, config_manager: ConfigManager) -> None:
        """Route lookups through a loaded ConfigManager."""
        self._config_manager = config_manager


# The CLI attaches the process-wide ConfigManager at startup
settings = Settings()
