"""Exceptions raised by the Git introspection layer.

Only repository-level failures are raised. Per-commit and per-diff plumbing
failures are absorbed where they happen and logged.
"""

from __future__ import annotations

from pathlib import Path


class GitIntrospectionError(Exception):
    """Base class for errors surfaced by projscan.git."""

    code = "git_error"

    def __init__(self, message: str, path: Path | str | None = None):
        self.path = str(path) if path is not None else None
        super().__init__(message)


class DirectoryNotFoundError(GitIntrospectionError):
    """The requested path does not exist or is not a directory."""

    code = "directory_not_found"

    def __init__(self, path: Path | str):
        super().__init__(f"Directory does not exist: {path}", path)


class NotARepositoryError(GitIntrospectionError):
    """The directory holds no Git repository that can be opened."""

    code = "invalid_repository"

    def __init__(self, path: Path | str, reason: str | None = None):
        message = f"Not a valid Git repository: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, path)
