"""Assemble a complete RepositorySnapshot from one open repository."""

from __future__ import annotations

import os
import time
from pathlib import Path

from projscan.git.commits import head_commit_id, peel_to_commit, to_commit, walk_commits
from projscan.git.history import (
    HistoryAggregator,
    count_reachable,
    extension_counts,
    working_tree_dirty,
)
from projscan.git.locator import open_repository
from projscan.git.refs import current_branch, list_branches, list_tags, remote_url
from projscan.models.git import RepositorySnapshot
from projscan.utils.logger import git_logger, scan_log


def parse_repository(
    path: str | os.PathLike[str],
    *,
    top_contributors: int = 5,
    most_active_files_limit: int = 10,
    detect_renames: bool = True,
) -> RepositorySnapshot:
    """Build a point-in-time snapshot of the repository at path.

    The repository is opened once and every part of the snapshot is read
    from that handle. History statistics come from a single walk over all
    refs; commit_count only counts commits reachable from HEAD.

    Raises:
        DirectoryNotFoundError: path is missing or not a directory
        NotARepositoryError: no repository can be opened at path
    """
    started = time.perf_counter()
    with open_repository(path) as repo:
        root = Path(repo.path).resolve()

        latest_commit = None
        head = head_commit_id(repo)
        head_commit = peel_to_commit(repo, head) if head is not None else None
        if head_commit is not None:
            latest_commit = to_commit(repo, head_commit, detect_renames)

        history = HistoryAggregator(repo, detect_renames).consume(walk_commits(repo))

        snapshot = RepositorySnapshot(
            name=root.name,
            path=str(root),
            current_branch=current_branch(repo),
            remote_url=remote_url(repo),
            latest_commit=latest_commit,
            branches=list_branches(repo),
            tags=list_tags(repo),
            has_uncommitted_changes=working_tree_dirty(repo),
            commit_count=count_reachable(repo),
            statistics=history.statistics(most_active_files_limit),
            top_contributors=history.top_contributors(top_contributors),
            creation_date=history.earliest,
            last_updated_date=latest_commit.author_date if latest_commit else None,
            file_extension_counts=extension_counts(repo),
        )

    scan_log(
        git_logger,
        "repository",
        str(root),
        (time.perf_counter() - started) * 1000,
        commits=snapshot.statistics.total_commits,
        branches=len(snapshot.branches),
    )
    return snapshot
