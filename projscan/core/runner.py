"""Parsing facade: one entry point per command, always returning a dict.

Directory and repository problems come back as error envelopes and a file
that fails to parse is recorded next to the others, so callers never see
an exception from here.
"""

from __future__ import annotations

import os
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from projscan.config.settings import settings
from projscan.core.result import error, file_error
from projscan.git.errors import GitIntrospectionError
from projscan.git.ignore import GIT_DIRNAME, list_files
from projscan.git.locator import is_valid_repository
from projscan.git.snapshot import parse_repository
from projscan.parsers.html import HTML_SUFFIXES, parse_html_file
from projscan.parsers.java_source import parse_java_file
from projscan.parsers.markdown_doc import MARKDOWN_SUFFIXES, parse_markdown_file
from projscan.parsers.pom import parse_pom as read_pom
from projscan.utils.logger import parser_logger, scan_log

POM_FILENAME = "pom.xml"
JAVA_SUFFIX = ".java"

# Large text fields left out of directory listings; parse_file keeps them
_MARKDOWN_BULK_FIELDS = {"raw_content", "html_content"}


def _is_pom(path: Path) -> bool:
    return path.name == POM_FILENAME


def _is_java(path: Path) -> bool:
    return path.name.endswith(JAVA_SUFFIX)


def _is_html(path: Path) -> bool:
    return path.name.lower().endswith(HTML_SUFFIXES)


def _is_markdown(path: Path) -> bool:
    return path.name.lower().endswith(MARKDOWN_SUFFIXES)


def _walk(root: Path, predicate: Callable[[Path], bool]) -> list[Path]:
    """Every regular file under root accepted by predicate; .git is skipped."""
    found: list[Path] = []
    stack = [root]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError as exc:
            parser_logger.debug(
                "Skipping unreadable directory", path=str(current), error=str(exc)
            )
            continue
        for entry in entries:
            path = Path(entry.path)
            if entry.is_dir(follow_symlinks=False):
                if entry.name != GIT_DIRNAME:
                    stack.append(path)
            elif entry.is_file() and predicate(path):
                found.append(path)
    return sorted(found)


def _missing_directory(command: str, directory: Path) -> dict[str, Any]:
    return error(
        command,
        code="directory_not_found",
        message=f"Directory does not exist or is not a directory: {directory}",
        error_type="DirectoryNotFoundError",
        details={"path": str(directory)},
    )


def _summaries(
    files: list[Path],
    kind: str,
    parse: Callable[[Path], BaseModel],
    exclude: set[str] | None = None,
) -> list[dict[str, Any]]:
    results = []
    for path in files:
        try:
            model = parse(path)
        except Exception as exc:
            parser_logger.warning(
                "File could not be parsed", kind=kind, path=str(path), error=str(exc)
            )
            results.append(file_error(str(path), kind, exc))
            continue
        summary = model.model_dump(mode="json", exclude=exclude)
        results.append({"path": str(path), **summary})
    return results


def _git_snapshot(directory: Path) -> dict[str, Any]:
    snapshot = parse_repository(
        directory,
        top_contributors=settings.top_contributors,
        most_active_files_limit=settings.most_active_files_limit,
        detect_renames=settings.detect_renames,
    )
    return snapshot.model_dump(mode="json")


def parse_git(directory: str | os.PathLike[str]) -> dict[str, Any]:
    """Snapshot the Git repository rooted at directory."""
    target = Path(directory).expanduser().resolve()
    if not target.is_dir():
        return _missing_directory("git", target)
    if not is_valid_repository(target):
        return error(
            "git",
            code="invalid_repository",
            message=f"Not a valid Git repository: {target}",
            error_type="NotARepositoryError",
            details={"path": str(target)},
        )

    try:
        return {"git_repository": _git_snapshot(target)}
    except GitIntrospectionError as exc:
        return error(
            "git", code=exc.code, message=str(exc), error_type=type(exc).__name__
        )
    except Exception as exc:
        parser_logger.error("Repository parse failed", path=str(target), error=str(exc))
        return error(
            "git",
            code="parse_failed",
            message=f"Failed to parse Git repository: {exc}",
            error_type=type(exc).__name__,
        )


def _directory_command(
    command: str,
    key: str,
    directory: str | os.PathLike[str],
    predicate: Callable[[Path], bool],
    parse: Callable[[Path], BaseModel],
    exclude: set[str] | None = None,
) -> dict[str, Any]:
    target = Path(directory).expanduser().resolve()
    if not target.is_dir():
        return _missing_directory(command, target)

    started = time.perf_counter()
    files = _walk(target, predicate)
    results = _summaries(files, command, parse, exclude)
    scan_log(
        parser_logger,
        command,
        str(target),
        (time.perf_counter() - started) * 1000,
        files=len(files),
    )
    return {key: results}


def parse_java(directory: str | os.PathLike[str]) -> dict[str, Any]:
    return _directory_command("java", "java_files", directory, _is_java, parse_java_file)


def parse_pom(directory: str | os.PathLike[str]) -> dict[str, Any]:
    return _directory_command("pom", "pom_files", directory, _is_pom, read_pom)


def parse_html(directory: str | os.PathLike[str]) -> dict[str, Any]:
    return _directory_command("html", "html_files", directory, _is_html, parse_html_file)


def parse_markdown(directory: str | os.PathLike[str]) -> dict[str, Any]:
    return _directory_command(
        "markdown",
        "markdown_files",
        directory,
        _is_markdown,
        parse_markdown_file,
        exclude=_MARKDOWN_BULK_FIELDS,
    )


def parse_all(directory: str | os.PathLike[str]) -> dict[str, Any]:
    """Run every parser over the non-ignored files of directory.

    The Git snapshot is included only when directory is a repository root.
    """
    target = Path(directory).expanduser().resolve()
    if not target.is_dir():
        return _missing_directory("all", target)

    started = time.perf_counter()
    result: dict[str, Any] = {}
    if is_valid_repository(target):
        git_result = parse_git(target)
        if "error" in git_result:
            result["git_error"] = git_result["error"]
        else:
            result.update(git_result)

    try:
        files = list_files(target, mode=settings.gitignore_mode)
    except OSError as exc:
        parser_logger.warning(
            "Ignore-aware listing failed, using all files", error=str(exc)
        )
        files = _walk(target, lambda _path: True)

    groups = {
        "pom_files": ([p for p in files if _is_pom(p)], "pom", read_pom, None),
        "java_files": ([p for p in files if _is_java(p)], "java", parse_java_file, None),
        "html_files": ([p for p in files if _is_html(p)], "html", parse_html_file, None),
        "markdown_files": (
            [p for p in files if _is_markdown(p)],
            "markdown",
            parse_markdown_file,
            _MARKDOWN_BULK_FIELDS,
        ),
    }
    statistics = {"total_files": len(files)}
    for key, (group, kind, parse, exclude) in groups.items():
        statistics[key] = len(group)
        if group:
            result[key] = _summaries(group, kind, parse, exclude)
    result["file_statistics"] = statistics

    scan_log(
        parser_logger,
        "all",
        str(target),
        (time.perf_counter() - started) * 1000,
        files=len(files),
    )
    return result


_FILE_PARSERS: dict[str, Callable[[Path], BaseModel]] = {
    "pom": read_pom,
    "java": parse_java_file,
    "html": parse_html_file,
    "markdown": parse_markdown_file,
}


def detect_file_type(path: Path) -> str | None:
    if _is_pom(path):
        return "pom"
    if _is_java(path):
        return "java"
    if _is_html(path):
        return "html"
    if _is_markdown(path):
        return "markdown"
    return None


def parse_file(path: str | os.PathLike[str]) -> dict[str, Any]:
    """Parse a single file, choosing the parser from its name."""
    target = Path(path).expanduser().resolve()
    if not target.is_file():
        return error(
            "file",
            code="file_not_found",
            message=f"File does not exist: {target}",
            error_type="FileNotFoundError",
            details={"path": str(target)},
        )
    kind = detect_file_type(target)
    if kind is None:
        return error(
            "file",
            code="unsupported_file",
            message=f"Unsupported file type: {target.name}",
            details={"path": str(target)},
        )

    try:
        model = _FILE_PARSERS[kind](target)
    except Exception as exc:
        parser_logger.warning(
            "File could not be parsed", kind=kind, path=str(target), error=str(exc)
        )
        return error(
            "file",
            code="parse_failed",
            message=f"Failed to parse {kind} file: {exc}",
            error_type=type(exc).__name__,
            details={"path": str(target)},
        )
    return {
        "file_type": kind,
        "path": str(target),
        "result": model.model_dump(mode="json"),
    }


COMMANDS: dict[str, Callable[[str], dict[str, Any]]] = {
    "git": parse_git,
    "all": parse_all,
    "java": parse_java,
    "pom": parse_pom,
    "html": parse_html,
    "markdown": parse_markdown,
    "file": parse_file,
}
