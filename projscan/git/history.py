"""History aggregation: one fold over a commit walk feeds every statistic."""

from __future__ import annotations

import os
import stat
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from dulwich import porcelain
from dulwich.objects import Commit, Tree
from dulwich.repo import Repo

from projscan.config.constants import NO_EXTENSION_BUCKET, NULL_DEVICE_PATH
from projscan.git.commits import (
    author_date,
    first_parent_changes,
    head_commit_id,
    parse_identity,
    peel_to_commit,
    walk_commits,
)
from projscan.git.ignore import list_files
from projscan.git.locator import open_repository
from projscan.models.git import ContributorInfo, FileChange, RepositoryStatistics
from projscan.utils.logger import git_logger

DAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


@dataclass
class _ContributorTally:
    name: str
    email: str
    commit_count: int = 0
    lines_added: int = 0
    lines_deleted: int = 0
    first_commit_date: datetime | None = None
    last_commit_date: datetime | None = None

    def record(self, when: datetime, changes: list[FileChange] | None) -> None:
        self.commit_count += 1
        if changes is not None:
            self.lines_added += sum(c.lines_added for c in changes)
            self.lines_deleted += sum(c.lines_deleted for c in changes)
        if self.first_commit_date is None or when < self.first_commit_date:
            self.first_commit_date = when
        if self.last_commit_date is None or when > self.last_commit_date:
            self.last_commit_date = when

    def freeze(self) -> ContributorInfo:
        return ContributorInfo(
            name=self.name,
            email=self.email,
            commit_count=self.commit_count,
            lines_added=self.lines_added,
            lines_deleted=self.lines_deleted,
            first_commit_date=self.first_commit_date,
            last_commit_date=self.last_commit_date,
        )


class HistoryAggregator:
    """Accumulates repository statistics over a single pass of commits.

    Each commit is diffed against its first parent exactly once. Histograms
    bucket the author timestamp converted to the local system time zone and
    are pre-seeded, so every day, hour and month is always present. A commit
    whose diff cannot be computed counts as having no changes.
    """

    def __init__(self, repo: Repo, detect_renames: bool = True):
        self.repo = repo
        self.detect_renames = detect_renames
        self.total_commits = 0
        self.changed_files_total = 0
        self.by_day_of_week: dict[str, int] = dict.fromkeys(DAY_NAMES, 0)
        self.by_hour: dict[int, int] = dict.fromkeys(range(24), 0)
        self.by_month: dict[str, int] = dict.fromkeys(MONTH_NAMES, 0)
        self.file_changes: Counter[str] = Counter()
        self.earliest: datetime | None = None
        self.latest: datetime | None = None
        self._contributors: dict[str, _ContributorTally] = {}

    def _changes(self, commit: Commit) -> list[FileChange]:
        try:
            return first_parent_changes(self.repo, commit, self.detect_renames)
        except Exception as exc:
            git_logger.debug(
                "Skipping changes of unreadable commit",
                commit=commit.id.decode("ascii"),
                error=str(exc),
            )
            return []

    def add(self, commit: Commit) -> None:
        self.total_commits += 1
        when = author_date(commit)
        local = when.astimezone()
        self.by_day_of_week[DAY_NAMES[local.weekday()]] += 1
        self.by_hour[local.hour] += 1
        self.by_month[MONTH_NAMES[local.month - 1]] += 1

        if self.earliest is None or when < self.earliest:
            self.earliest = when
        if self.latest is None or when > self.latest:
            self.latest = when

        changes = self._changes(commit) if commit.parents else None
        if changes:
            self.changed_files_total += len(changes)
            for change in changes:
                if change.path and change.path != NULL_DEVICE_PATH:
                    self.file_changes[change.path] += 1

        name, email = parse_identity(commit.author, commit.encoding)
        tally = self._contributors.get(email)
        if tally is None:
            tally = self._contributors[email] = _ContributorTally(name, email)
        tally.record(when, changes)

    def consume(self, commits: Iterable[Commit]) -> HistoryAggregator:
        for commit in commits:
            self.add(commit)
        return self

    def top_contributors(self, limit: int) -> list[ContributorInfo]:
        ranked = sorted(
            self._contributors.values(), key=lambda t: t.commit_count, reverse=True
        )
        return [tally.freeze() for tally in ranked[: max(limit, 0)]]

    def most_active_files(self, limit: int) -> dict[str, int]:
        return dict(self.file_changes.most_common(max(limit, 0)))

    @property
    def average_changed_files(self) -> float:
        if not self.total_commits:
            return 0.0
        return self.changed_files_total / self.total_commits

    def statistics(self, most_active_files_limit: int = 10) -> RepositoryStatistics:
        return RepositoryStatistics(
            total_commits=self.total_commits,
            commits_per_day_of_week=dict(self.by_day_of_week),
            commits_per_hour=dict(self.by_hour),
            commits_per_month=dict(self.by_month),
            average_changed_files_per_commit=self.average_changed_files,
            most_active_files=self.most_active_files(most_active_files_limit),
        )


def count_reachable(repo: Repo) -> int:
    """Number of commits reachable from HEAD."""
    head = head_commit_id(repo)
    if head is None:
        return 0
    return sum(1 for _ in walk_commits(repo, [head]))


def working_tree_dirty(repo: Repo) -> bool:
    """True when the index or working tree differs from HEAD.

    Untracked files count as changes. Before the first commit there is no
    HEAD tree to compare with, so any staged entry or any non-ignored file
    makes the repository dirty.
    """
    if repo.bare:
        return False
    if head_commit_id(repo) is None:
        if len(repo.open_index()) > 0:
            return True
        return bool(list_files(repo.path, mode="gitwildmatch"))

    status = porcelain.status(repo)
    staged = any(status.staged.values())
    return bool(staged or status.unstaged or status.untracked)


def extension_counts(repo: Repo) -> dict[str, int]:
    """Census of file extensions in the tree of the latest commit."""
    head = head_commit_id(repo)
    if head is None:
        return {}
    commit = peel_to_commit(repo, head)
    if commit is None:
        return {}

    counts: Counter[str] = Counter()
    stack: list[tuple[str, bytes]] = [("", commit.tree)]
    while stack:
        prefix, tree_id = stack.pop()
        tree = repo[tree_id]
        if not isinstance(tree, Tree):
            continue
        for entry in tree.iteritems():
            name = entry.path.decode("utf-8", errors="replace")
            path = f"{prefix}/{name}" if prefix else name
            if stat.S_ISDIR(entry.mode):
                stack.append((path, entry.sha))
                continue
            counts[_extension_of(path)] += 1
    return dict(sorted(counts.items()))


def _extension_of(path: str) -> str:
    dot = path.rfind(".")
    if dot > 0:
        return path[dot + 1 :].lower()
    return NO_EXTENSION_BUCKET


def _aggregate(repo: Repo, detect_renames: bool = True) -> HistoryAggregator:
    return HistoryAggregator(repo, detect_renames).consume(walk_commits(repo))


# Path-level operations: each opens the repository, computes, and closes it.


def commit_count(path: str | os.PathLike[str]) -> int:
    with open_repository(path) as repo:
        return count_reachable(repo)


def has_uncommitted_changes(path: str | os.PathLike[str]) -> bool:
    with open_repository(path) as repo:
        return working_tree_dirty(repo)


def top_contributors(
    path: str | os.PathLike[str], limit: int = 5, detect_renames: bool = True
) -> list[ContributorInfo]:
    """Authors ranked by commit count over every ref, keyed by email."""
    with open_repository(path) as repo:
        return _aggregate(repo, detect_renames).top_contributors(limit)


def contributions_by_day_of_week(path: str | os.PathLike[str]) -> dict[str, int]:
    with open_repository(path) as repo:
        counts = dict.fromkeys(DAY_NAMES, 0)
        for commit in walk_commits(repo):
            counts[DAY_NAMES[author_date(commit).astimezone().weekday()]] += 1
        return counts


def contributions_by_hour_of_day(path: str | os.PathLike[str]) -> dict[int, int]:
    with open_repository(path) as repo:
        counts = dict.fromkeys(range(24), 0)
        for commit in walk_commits(repo):
            counts[author_date(commit).astimezone().hour] += 1
        return counts


def contribution_heat_map(path: str | os.PathLike[str], year: int) -> dict[str, int]:
    """Commits per calendar day of year, keyed "YYYY-MM-DD" in local time.

    Every day of the year is present, including days without commits.
    """
    start = datetime(year, 1, 1, 0, 0, 0).astimezone()
    end = datetime(year, 12, 31, 23, 59, 59).astimezone()

    heat_map: dict[str, int] = {}
    day = date(year, 1, 1)
    while day.year == year:
        heat_map[day.isoformat()] = 0
        day += timedelta(days=1)

    with open_repository(path) as repo:
        for commit in walk_commits(repo):
            when = author_date(commit).astimezone()
            if start <= when <= end:
                key = when.date().isoformat()
                if key in heat_map:
                    heat_map[key] += 1
    return heat_map


def most_active_files(
    path: str | os.PathLike[str], limit: int = 10, detect_renames: bool = True
) -> dict[str, int]:
    """Paths ordered by how many commits changed them, most first."""
    with open_repository(path) as repo:
        return _aggregate(repo, detect_renames).most_active_files(limit)


def file_extension_counts(path: str | os.PathLike[str]) -> dict[str, int]:
    with open_repository(path) as repo:
        return extension_counts(repo)


def repository_creation_date(path: str | os.PathLike[str]) -> datetime | None:
    """Author date of the earliest commit reachable from any ref."""
    with open_repository(path) as repo:
        earliest = None
        for commit in walk_commits(repo):
            when = author_date(commit)
            if earliest is None or when < earliest:
                earliest = when
        return earliest


def repository_statistics(
    path: str | os.PathLike[str],
    most_active_files_limit: int = 10,
    detect_renames: bool = True,
) -> RepositoryStatistics:
    with open_repository(path) as repo:
        return _aggregate(repo, detect_renames).statistics(most_active_files_limit)
