"""Commit translation and commit-level lookups."""

from __future__ import annotations

import io
import os
import re
from collections.abc import Iterable, Iterator
from datetime import UTC, datetime, timedelta, timezone

from dulwich import porcelain
from dulwich.errors import NotCommitError
from dulwich.objects import Commit, Tag
from dulwich.objectspec import parse_commit
from dulwich.patch import write_tree_diff
from dulwich.repo import Repo

from projscan.config.constants import SHORT_ID_LENGTH
from projscan.git.diff import diff_trees
from projscan.git.locator import open_repository
from projscan.models.git import ChangeType, CommitInfo, FileChange
from projscan.utils.logger import git_logger

_IDENTITY_RE = re.compile(rb"^(.*?)\s*<(.*)>\s*$")

_CHANGE_LETTERS = {
    ChangeType.ADD: "A",
    ChangeType.MODIFY: "M",
    ChangeType.DELETE: "D",
    ChangeType.RENAME: "R",
    ChangeType.COPY: "C",
}

LOG_SEPARATOR = "-" * 79


def _decode(raw: bytes, encoding: bytes | None = None) -> str:
    codec = encoding.decode("ascii", errors="replace") if encoding else "utf-8"
    try:
        return raw.decode(codec, errors="replace")
    except LookupError:
        return raw.decode("utf-8", errors="replace")


def parse_identity(raw: bytes, encoding: bytes | None = None) -> tuple[str, str]:
    """Split a "Name <email>" identity line into its two parts."""
    match = _IDENTITY_RE.match(raw)
    if not match:
        return _decode(raw, encoding).strip(), ""
    return _decode(match.group(1), encoding), _decode(match.group(2), encoding)


def to_datetime(timestamp: int, offset_seconds: int) -> datetime:
    """Build an aware datetime in the time zone recorded alongside timestamp."""
    tz = timezone(timedelta(seconds=offset_seconds)) if offset_seconds else UTC
    return datetime.fromtimestamp(timestamp, tz=tz)


def author_date(commit: Commit) -> datetime:
    return to_datetime(commit.author_time, commit.author_timezone)


def head_commit_id(repo: Repo) -> bytes | None:
    """Return the commit HEAD resolves to, or None for an unborn HEAD."""
    try:
        return repo.refs[b"HEAD"]
    except KeyError:
        return None


def peel_to_commit(repo: Repo, sha: bytes) -> Commit | None:
    """Follow tag objects until a commit is reached.

    Returns None when the chain ends on something other than a commit.
    """
    obj = repo[sha]
    while isinstance(obj, Tag):
        obj = repo[obj.object[1]]
    return obj if isinstance(obj, Commit) else None


def ref_tips(repo: Repo) -> list[bytes]:
    """Commit ids of every ref tip, HEAD included, deduplicated."""
    tips: list[bytes] = []
    seen: set[bytes] = set()
    for ref, sha in sorted(repo.refs.as_dict().items()):
        try:
            commit = peel_to_commit(repo, sha)
        except KeyError:
            git_logger.debug("Dangling ref skipped", ref=_decode(ref))
            continue
        if commit is None or commit.id in seen:
            continue
        seen.add(commit.id)
        tips.append(commit.id)
    return tips


def walk_commits(
    repo: Repo,
    include: Iterable[bytes] | None = None,
    max_count: int | None = None,
    paths: list[bytes] | None = None,
) -> Iterator[Commit]:
    """Yield commits newest first, reachable from include (default: all refs)."""
    heads = list(include) if include is not None else ref_tips(repo)
    if not heads:
        return
    walker = repo.get_walker(include=heads, max_entries=max_count, paths=paths)
    for entry in walker:
        yield entry.commit


def first_parent_changes(
    repo: Repo, commit: Commit, detect_renames: bool = True
) -> list[FileChange]:
    """Diff a commit against its first parent; root commits have no changes."""
    if not commit.parents:
        return []
    parent = repo[commit.parents[0]]
    return diff_trees(repo, parent.tree, commit.tree, detect_renames=detect_renames)


def to_commit(repo: Repo, commit: Commit, detect_renames: bool = True) -> CommitInfo:
    """Translate a raw dulwich commit into a CommitInfo.

    A failed diff against the first parent is logged and yields an empty
    change list rather than an error.
    """
    try:
        changes = first_parent_changes(repo, commit, detect_renames)
    except Exception as exc:
        git_logger.warning(
            "Diff against first parent failed",
            commit=commit.id.decode("ascii"),
            error=str(exc),
        )
        changes = []

    author_name, author_email = parse_identity(commit.author, commit.encoding)
    committer_name, committer_email = parse_identity(commit.committer, commit.encoding)
    commit_id = commit.id.decode("ascii")
    return CommitInfo(
        id=commit_id,
        short_id=commit_id[:SHORT_ID_LENGTH],
        message=_decode(commit.message, commit.encoding),
        author_name=author_name,
        author_email=author_email,
        author_date=author_date(commit),
        committer_name=committer_name,
        committer_email=committer_email,
        commit_date=to_datetime(commit.commit_time, commit.commit_timezone),
        parent_ids=[p.decode("ascii") for p in commit.parents],
        changed_files=changes,
    )


def resolve_commit(repo: Repo, committish: str) -> Commit | None:
    """Resolve a commit id, ref name or tag to a commit; None if it does not."""
    try:
        # older dulwich releases hand back the tag object for a tag name
        return peel_to_commit(repo, parse_commit(repo, committish.encode("utf-8")).id)
    except (KeyError, ValueError, NotCommitError) as exc:
        git_logger.debug("Unresolvable commit", committish=committish, error=str(exc))
        return None


def get_commit(
    path: str | os.PathLike[str], commit_id: str, detect_renames: bool = True
) -> CommitInfo | None:
    """Look up a single commit by id or ref; None when it does not resolve."""
    with open_repository(path) as repo:
        commit = resolve_commit(repo, commit_id)
        if commit is None:
            return None
        return to_commit(repo, commit, detect_renames)


def recent_commits(
    path: str | os.PathLike[str], max_count: int = 10, detect_renames: bool = True
) -> list[CommitInfo]:
    """The newest max_count commits reachable from HEAD."""
    with open_repository(path) as repo:
        head = head_commit_id(repo)
        if head is None:
            return []
        return [
            to_commit(repo, c, detect_renames)
            for c in walk_commits(repo, [head], max_count=max_count)
        ]


def all_commits(
    path: str | os.PathLike[str], detect_renames: bool = True
) -> list[CommitInfo]:
    """Every commit reachable from any ref, newest first."""
    with open_repository(path) as repo:
        return [to_commit(repo, c, detect_renames) for c in walk_commits(repo)]


def commits_by_author(
    path: str | os.PathLike[str], author: str, detect_renames: bool = True
) -> list[CommitInfo]:
    """Commits whose author name or email contains the given text."""
    with open_repository(path) as repo:
        matches = []
        for commit in walk_commits(repo):
            name, email = parse_identity(commit.author, commit.encoding)
            if author in name or author in email:
                matches.append(to_commit(repo, commit, detect_renames))
        return matches


def commits_by_date_range(
    path: str | os.PathLike[str],
    since: datetime,
    until: datetime,
    detect_renames: bool = True,
) -> list[CommitInfo]:
    """Commits authored within [since, until]; naive bounds are local time."""
    lower = since if since.tzinfo else since.astimezone()
    upper = until if until.tzinfo else until.astimezone()
    with open_repository(path) as repo:
        return [
            to_commit(repo, commit, detect_renames)
            for commit in walk_commits(repo)
            if lower <= author_date(commit) <= upper
        ]


def file_history(
    path: str | os.PathLike[str], file_path: str, detect_renames: bool = True
) -> list[CommitInfo]:
    """Commits reachable from HEAD that touched file_path, newest first."""
    with open_repository(path) as repo:
        head = head_commit_id(repo)
        if head is None:
            return []
        target = file_path.replace(os.sep, "/").encode("utf-8")
        return [
            to_commit(repo, c, detect_renames)
            for c in walk_commits(repo, [head], paths=[target])
        ]


def diff_between_commits(
    path: str | os.PathLike[str], old_commit_id: str, new_commit_id: str
) -> str | None:
    """Unified patch text between two commits; None if either does not resolve."""
    with open_repository(path) as repo:
        old = resolve_commit(repo, old_commit_id)
        new = resolve_commit(repo, new_commit_id)
        if old is None or new is None:
            return None
        buffer = io.BytesIO()
        write_tree_diff(buffer, repo.object_store, old.tree, new.tree)
        return buffer.getvalue().decode("utf-8", errors="replace")


def formatted_commit_log(
    path: str | os.PathLike[str], max_count: int = 10, detect_renames: bool = True
) -> str:
    """Human-readable log of the newest commits reachable from HEAD."""
    lines: list[str] = []
    for info in recent_commits(path, max_count, detect_renames):
        lines.append(f"Commit: {info.id}")
        lines.append(f"Author: {info.author_name} <{info.author_email}>")
        lines.append(f"Date:   {info.author_date:%Y-%m-%d %H:%M:%S}")
        lines.append("")
        lines.append("    " + info.message.rstrip("\n").replace("\n", "\n    "))
        lines.append("")
        if info.changed_files:
            lines.append("    Changed files:")
            for change in info.changed_files:
                lines.append(f"      {_CHANGE_LETTERS[change.type]} {change.path}")
            lines.append("")
        lines.append(LOG_SEPARATOR)
        lines.append("")
    return "\n".join(lines)


def file_blame(path: str | os.PathLike[str], file_path: str) -> str:
    """Per-line attribution of file_path at HEAD.

    Each line reads "<short id> (<author> - <yyyy-mm-dd>): <text>".

    Raises:
        KeyError: file_path is not present at HEAD
    """
    with open_repository(path) as repo:
        target = file_path.replace(os.sep, "/").encode("utf-8")
        output = []
        for origin, line in porcelain.annotate(repo, target):
            commit = origin[0] if isinstance(origin, tuple) else origin
            name, _email = parse_identity(commit.author, commit.encoding)
            short_id = commit.id.decode("ascii")[:SHORT_ID_LENGTH]
            day = author_date(commit).strftime("%Y-%m-%d")
            text = _decode(line, commit.encoding).rstrip("\r\n")
            output.append(f"{short_id} ({name} - {day}): {text}\n")
        return "".join(output)
