"""Read-only Git repository introspection built on dulwich."""

from .commits import (
    all_commits,
    commits_by_author,
    commits_by_date_range,
    diff_between_commits,
    file_blame,
    file_history,
    formatted_commit_log,
    get_commit,
    recent_commits,
    to_commit,
    walk_commits,
)
from .diff import diff_trees
from .errors import DirectoryNotFoundError, GitIntrospectionError, NotARepositoryError
from .history import (
    HistoryAggregator,
    commit_count,
    contribution_heat_map,
    contributions_by_day_of_week,
    contributions_by_hour_of_day,
    file_extension_counts,
    has_uncommitted_changes,
    most_active_files,
    repository_creation_date,
    repository_statistics,
    top_contributors,
)
from .ignore import IgnoreRules, list_files
from .locator import find_repositories, is_valid_repository, open_repository
from .refs import current_branch, list_branches, list_tags, remote_url
from .snapshot import parse_repository

__all__ = [
    "DirectoryNotFoundError",
    "GitIntrospectionError",
    "HistoryAggregator",
    "IgnoreRules",
    "NotARepositoryError",
    "all_commits",
    "commit_count",
    "commits_by_author",
    "commits_by_date_range",
    "contribution_heat_map",
    "contributions_by_day_of_week",
    "contributions_by_hour_of_day",
    "current_branch",
    "diff_between_commits",
    "diff_trees",
    "file_blame",
    "file_extension_counts",
    "file_history",
    "find_repositories",
    "formatted_commit_log",
    "get_commit",
    "has_uncommitted_changes",
    "is_valid_repository",
    "list_branches",
    "list_files",
    "list_tags",
    "most_active_files",
    "open_repository",
    "parse_repository",
    "recent_commits",
    "remote_url",
    "repository_creation_date",
    "repository_statistics",
    "to_commit",
    "top_contributors",
    "walk_commits",
]
