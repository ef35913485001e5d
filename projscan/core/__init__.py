"""Parsing facade shared by the CLI and library callers."""

from .result import error, is_error
from .runner import (
    COMMANDS,
    parse_all,
    parse_file,
    parse_git,
    parse_html,
    parse_java,
    parse_markdown,
    parse_pom,
)

__all__ = [
    "COMMANDS",
    "error",
    "is_error",
    "parse_all",
    "parse_file",
    "parse_git",
    "parse_html",
    "parse_java",
    "parse_markdown",
    "parse_pom",
]
