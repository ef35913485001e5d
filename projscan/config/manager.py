"""Configuration manager built from the global and project config files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from projscan.config.constants import CONFIG_FILENAME
from projscan.config.providers import (
    ConfigProvider,
    LayeredConfigProvider,
    LocalFileConfigProvider,
)
from projscan.config.schema import validate_config
from projscan.utils.logger import get_logger

logger = get_logger("config.manager")


class ConfigManager:
    """Holds the configuration read from a provider.

    Values are read once in initialize(); a scan never sees them change
    underneath it.
    """

    def __init__(self, provider: ConfigProvider):
        self.provider = provider
        self._config: dict[str, Any] = {}

    def initialize(self) -> None:
        """Load and validate the merged configuration.

        Raises:
            ConfigValidationError: a layer supplied an invalid value
        """
        self._config = validate_config(self.provider.load())
        logger.debug("Configuration loaded", keys=sorted(self._config))

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)


def create_config_manager(
    global_config_dir: Path,
    *,
    local_config_path: Path | None = None,
    defaults: dict[str, Any] | None = None,
) -> ConfigManager:
    """Build a manager over the user config.json and optional project overrides.

    Neither file is created; a missing file contributes nothing.

    Args:
        global_config_dir: Directory holding the user-level config.json
        local_config_path: Project-scoped overrides, layered on top
        defaults: Values used wherever the files are silent
    """
    config_path = global_config_dir / CONFIG_FILENAME
    provider: ConfigProvider = LocalFileConfigProvider(config_path, defaults=defaults)
    if local_config_path is not None:
        provider = LayeredConfigProvider(
            [provider, LocalFileConfigProvider(local_config_path)]
        )

    logger.debug(
        "Config manager created",
        config_path=str(config_path),
        local_config=str(local_config_path) if local_config_path else None,
    )
    return ConfigManager(provider)
