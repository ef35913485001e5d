"""Locate and open Git repositories on disk."""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from dulwich.errors import NotGitRepository
from dulwich.repo import Repo

from projscan.git.errors import DirectoryNotFoundError, NotARepositoryError
from projscan.utils.logger import git_logger

GIT_DIRNAME = ".git"


def resolve_directory(path: str | os.PathLike[str]) -> Path:
    """Resolve path against the working directory and require a directory."""
    resolved = Path(path).expanduser().resolve()
    if not resolved.is_dir():
        raise DirectoryNotFoundError(resolved)
    return resolved


@contextmanager
def open_repository(path: str | os.PathLike[str]) -> Iterator[Repo]:
    """Open the repository rooted at path and close it on exit.

    Raises:
        DirectoryNotFoundError: path is missing or not a directory
        NotARepositoryError: no repository can be opened at path
    """
    root = resolve_directory(path)
    try:
        repo = Repo(str(root))
    except NotGitRepository as exc:
        raise NotARepositoryError(root) from exc
    except OSError as exc:
        raise NotARepositoryError(root, str(exc)) from exc

    with repo:
        yield repo


def is_valid_repository(path: str | os.PathLike[str]) -> bool:
    """Return True iff path/.git opens as a repository with an object database.

    The object database lives in the common directory, which differs from
    the control directory for linked worktrees.
    """
    try:
        root = Path(path).expanduser().resolve()
        if not (root / GIT_DIRNAME).exists():
            return False
        with Repo(str(root)) as repo:
            return (Path(repo.commondir()) / "objects").is_dir()
    except (NotGitRepository, OSError, ValueError) as exc:
        git_logger.debug("Repository check failed", path=str(path), error=str(exc))
        return False


def find_repositories(root: str | os.PathLike[str]) -> list[Path]:
    """Find every directory under root that directly contains a .git entry.

    The walk never enters .git itself, but keeps descending into the working
    tree of a found repository, so nested repositories are reported too.
    Symlinked directories are not followed.
    """
    start = resolve_directory(root)
    found: list[Path] = []
    stack = [start]

    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError as exc:
            git_logger.debug(
                "Skipping unreadable directory", path=str(current), error=str(exc)
            )
            continue

        for entry in entries:
            if entry.name == GIT_DIRNAME:
                found.append(current)
                continue
            try:
                if entry.is_dir(follow_symlinks=False):
                    stack.append(Path(entry.path))
            except OSError:
                continue

    return sorted(found)
