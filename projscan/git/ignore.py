"""Working-tree file listing filtered by the root .gitignore.

Two matching modes are available:

* ``simple`` translates each pattern to a regular expression (dots escaped,
  ``*`` to ``.*``, ``?`` to ``.``) and matches it against the relative path
  and every parent directory of it. A leading ``!`` re-includes and the last
  matching pattern wins. There is no ``**`` handling, anchoring or
  per-directory scoping; it is a best-effort approximation.
* ``gitwildmatch`` delegates to pathspec for full gitignore semantics.

Only the ``.gitignore`` at the listed directory's root is read.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

import pathspec

from projscan.config.constants import GITIGNORE_MODES
from projscan.git.errors import DirectoryNotFoundError
from projscan.utils.logger import git_logger

GITIGNORE_FILENAME = ".gitignore"
GIT_DIRNAME = ".git"


@dataclass(frozen=True)
class SimplePattern:
    source: str
    regex: re.Pattern[str]
    negated: bool


def translate_pattern(pattern: str) -> tuple[str, bool]:
    """Turn one ignore line into (regex source, negated)."""
    negated = pattern.startswith("!")
    if negated:
        pattern = pattern[1:]
    if pattern.endswith("/"):
        pattern = pattern[:-1]
    regex = pattern.replace(".", r"\.").replace("*", ".*").replace("?", ".")
    return regex, negated


def read_patterns(gitignore: Path) -> list[str]:
    """Non-blank, non-comment lines of an ignore file (missing file: none)."""
    if not gitignore.is_file():
        return []
    try:
        text = gitignore.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        git_logger.warning(
            "Could not read ignore file", path=str(gitignore), error=str(exc)
        )
        return []
    patterns = []
    for line in text.splitlines():
        line = line.strip()
        # Skip comments and empty lines
        if not line or line.startswith("#"):
            continue
        patterns.append(line)
    return patterns


class IgnoreRules:
    """Compiled ignore patterns for one directory root."""

    def __init__(self, patterns: list[str], mode: str = "simple"):
        if mode not in GITIGNORE_MODES:
            raise ValueError(f"Unknown gitignore mode: {mode}")
        self.mode = mode
        self.patterns = list(patterns)
        self._simple: list[SimplePattern] = []
        self._spec: pathspec.PathSpec | None = None

        if mode == "gitwildmatch":
            self._spec = pathspec.PathSpec.from_lines("gitwildmatch", self.patterns)
            return

        for source in self.patterns:
            regex, negated = translate_pattern(source)
            try:
                compiled = re.compile(regex)
            except re.error as exc:
                git_logger.warning(
                    "Skipping invalid ignore pattern", pattern=source, error=str(exc)
                )
                continue
            self._simple.append(SimplePattern(source, compiled, negated))

    @classmethod
    def from_file(cls, gitignore: Path, mode: str = "simple") -> IgnoreRules:
        return cls(read_patterns(gitignore), mode)

    @classmethod
    def for_directory(cls, directory: Path, mode: str = "simple") -> IgnoreRules:
        return cls.from_file(directory / GITIGNORE_FILENAME, mode)

    def is_ignored(self, relative_path: str) -> bool:
        """Whether a slash-separated path relative to the root is ignored."""
        if self._spec is not None:
            return self._spec.match_file(relative_path)

        parts = relative_path.split("/")
        candidates = ["/".join(parts[: i + 1]) for i in range(len(parts))]
        ignored = False
        for pattern in self._simple:
            if any(pattern.regex.fullmatch(c) for c in candidates):
                ignored = not pattern.negated
        return ignored


def list_files(directory: str | os.PathLike[str], mode: str | None = None) -> list[Path]:
    """Regular files under directory that the root .gitignore does not exclude.

    .git directories are never entered and symlinks are not followed.
    Results are absolute and sorted.
    """
    root = Path(directory).expanduser().resolve()
    if not root.is_dir():
        raise DirectoryNotFoundError(root)
    if mode is None:
        from projscan.config.settings import settings

        mode = settings.gitignore_mode
    rules = IgnoreRules.for_directory(root, mode)

    files: list[Path] = []
    stack = [root]
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
            try:
                if entry.is_dir(follow_symlinks=False):
                    if entry.name != GIT_DIRNAME:
                        stack.append(Path(entry.path))
                    continue
                if not entry.is_file(follow_symlinks=False):
                    continue
            except OSError:
                continue
            path = Path(entry.path)
            relative = path.relative_to(root).as_posix()
            if not rules.is_ignored(relative):
                files.append(path)

    return sorted(files)
