"""Validation of the merged configuration."""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def deep_merge(base: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    """Return base with updates merged in, recursing into nested dicts.

    A None in updates means "not set here" and leaves the base value alone.
    Neither argument is modified.
    """
    merged = deepcopy(base)
    for key, value in updates.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        elif value is not None or key not in merged:
            merged[key] = value
    return merged


class AppConfig(BaseModel):
    """Every user-tunable knob; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    top_contributors: int = Field(default=5, ge=0)
    most_active_files_limit: int = Field(default=10, ge=0)
    detect_renames: bool = True
    gitignore_mode: Literal["simple", "gitwildmatch"] = "simple"
    output_dir: str = Field(default=".parsed", min_length=1)
    log_level: str = "WARNING"
    log_format: Literal["pretty", "json"] = "pretty"
    log_colors: bool = True

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"must be one of {', '.join(LOG_LEVELS)}")
        return level


class ConfigValidationError(Exception):
    """Raised with one readable message per rejected field."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


_MESSAGES = {
    "int_type": "Expected integer at '{loc}'",
    "int_parsing": "Expected integer at '{loc}'",
    "int_from_float": "Expected integer at '{loc}'",
    "bool_type": "Expected boolean at '{loc}'",
    "bool_parsing": "Expected boolean at '{loc}'",
    "string_type": "Expected string at '{loc}'",
    "literal_error": "Unsupported value at '{loc}': {msg}",
    "greater_than_equal": "Value at '{loc}' must not be negative",
}


def _describe(exc: ValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "config"
        template = _MESSAGES.get(err["type"], "{loc}: {msg}")
        messages.append(template.format(loc=loc, msg=err["msg"]))
    return messages or ["Invalid configuration"]


def validate_config(config: dict[str, Any]) -> dict[str, Any]:
    """Check config against AppConfig and return the normalized values.

    Raises:
        ConfigValidationError: listing every problem found
    """
    try:
        return AppConfig.model_validate(config).model_dump(mode="json")
    except ValidationError as exc:
        raise ConfigValidationError(_describe(exc)) from exc
