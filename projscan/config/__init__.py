"""Layered JSON configuration: defaults, user config.json, project .projscan.json."""

from .defaults import get_default_config
from .manager import ConfigManager, create_config_manager
from .providers import ConfigProvider, LayeredConfigProvider, LocalFileConfigProvider
from .schema import AppConfig, ConfigValidationError, validate_config
from .settings import Settings, settings

__all__ = [
    "AppConfig",
    "ConfigManager",
    "ConfigProvider",
    "ConfigValidationError",
    "LayeredConfigProvider",
    "LocalFileConfigProvider",
    "Settings",
    "create_config_manager",
    "get_default_config",
    "settings",
    "validate_config",
]
