"""Where configuration values come from: JSON files, alone or layered."""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from projscan.config.schema import ConfigValidationError, deep_merge, validate_config
from projscan.utils.logger import get_logger

logger = get_logger("config.providers")


class ConfigProvider(ABC):
    """A read-only source of configuration values."""

    @abstractmethod
    def load(self) -> dict[str, Any]:
        """Return the effective configuration of this source."""


class LocalFileConfigProvider(ConfigProvider):
    """A JSON object on disk merged over a dict of defaults.

    A missing file simply yields the defaults. A file with broken JSON does
    not stop a scan: the last configuration that loaded cleanly is reused,
    or the defaults on a first load. Values that parse but fail validation
    raise ConfigValidationError.
    """

    def __init__(self, config_path: Path, defaults: dict[str, Any] | None = None):
        self.config_path = config_path
        self.defaults = defaults or {}
        self._last_good: dict[str, Any] | None = None

    def _fallback(self) -> dict[str, Any]:
        if self._last_good is not None:
            logger.warning(
                "Keeping previously loaded configuration", path=str(self.config_path)
            )
            return dict(self._last_good)
        logger.warning(
            "Falling back to default configuration", path=str(self.config_path)
        )
        return dict(self.defaults)

    def _read(self) -> dict[str, Any]:
        raw = json.loads(self.config_path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ConfigValidationError(
                [f"Config file must contain a JSON object: {self.config_path}"]
            )
        return raw

    def load(self) -> dict[str, Any]:
        if not self.config_path.exists():
            logger.debug("No config file", path=str(self.config_path))
            self._last_good = dict(self.defaults)
            return dict(self.defaults)

        try:
            user = self._read()
        except json.JSONDecodeError as exc:
            logger.error(
                "Config file is not valid JSON",
                path=str(self.config_path),
                line=exc.lineno,
                column=exc.colno,
            )
            return self._fallback()
        except OSError as exc:
            logger.error(
                "Config file unreadable", path=str(self.config_path), error=str(exc)
            )
            return self._fallback()

        merged = deep_merge(self.defaults, user)
        if self.defaults:
            try:
                merged = validate_config(merged)
            except ConfigValidationError as exc:
                logger.error(
                    "Config values rejected",
                    path=str(self.config_path),
                    errors=exc.errors,
                )
                raise

        self._last_good = dict(merged)
        logger.debug("Config file loaded", path=str(self.config_path))
        return merged


class LayeredConfigProvider(ConfigProvider):
    """Several providers merged in order, later layers winning.

    Typically the user-level config.json first and a project's
    .projscan.json after it.
    """

    def __init__(self, providers: list[ConfigProvider]):
        if not providers:
            raise ValueError("LayeredConfigProvider requires at least one provider")
        self.providers = providers

    def load(self) -> dict[str, Any]:
        merged: dict[str, Any] = {}
        for provider in self.providers:
            merged = deep_merge(merged, provider.load())
        return merged
