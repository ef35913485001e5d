"""Uniform result envelopes returned by the parsing facade."""

from __future__ import annotations

from typing import Any


def error(
    command: str,
    *,
    code: str,
    message: str,
    error_type: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Describe a failed command without raising."""
    payload: dict[str, Any] = {
        "command": command,
        "error": message,
        "code": code,
    }
    if error_type:
        payload["error_type"] = error_type
    if details:
        payload["details"] = details
    return payload


def file_error(path: str, kind: str, exc: Exception) -> dict[str, Any]:
    """Entry recorded in place of one file that failed to parse."""
    return {
        "path": path,
        "error": f"Failed to parse {kind} file: {exc}",
        "error_type": type(exc).__name__,
    }


def is_error(result: dict[str, Any]) -> bool:
    return "error" in result and "code" in result
