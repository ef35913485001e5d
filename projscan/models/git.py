"""Value objects describing a Git repository snapshot.

All models are frozen: a snapshot is built once per call and never mutated.
Datetimes keep the UTC offset recorded in the commit or tag they came from.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class ChangeType(str, Enum):
    ADD = "ADD"
    MODIFY = "MODIFY"
    DELETE = "DELETE"
    RENAME = "RENAME"
    COPY = "COPY"


class GitModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class FileChange(GitModel):
    type: ChangeType
    path: str  # new path; the old path for deletions
    old_path: str  # differs from path only for renames and copies
    lines_added: int = 0
    lines_deleted: int = 0
    mode: int = 0  # new-side mode bits; 0 for deletions


class CommitInfo(GitModel):
    id: str
    short_id: str
    message: str
    author_name: str
    author_email: str
    author_date: datetime
    committer_name: str
    committer_email: str
    commit_date: datetime
    parent_ids: list[str] = []
    changed_files: list[FileChange] = []


class BranchInfo(GitModel):
    name: str
    current: bool = False
    remote: bool = False
    remote_name: str | None = None
    commit_id: str
    tracking_branch: str | None = None
    merged: bool = False


class TagInfo(GitModel):
    """A tag ref resolved to the commit it names.

    Tagger fields and message are populated for annotated tags only.
    """

    name: str
    commit_id: str
    annotated: bool = False
    message: str | None = None
    tagger_name: str | None = None
    tagger_email: str | None = None
    tagger_date: datetime | None = None


class ContributorInfo(GitModel):
    name: str
    email: str
    commit_count: int = 0
    lines_added: int = 0
    lines_deleted: int = 0
    first_commit_date: datetime | None = None
    last_commit_date: datetime | None = None


class RepositoryStatistics(GitModel):
    total_commits: int = 0
    commits_per_day_of_week: dict[str, int] = {}
    commits_per_hour: dict[int, int] = {}
    commits_per_month: dict[str, int] = {}
    average_changed_files_per_commit: float = 0.0
    most_active_files: dict[str, int] = {}


class RepositorySnapshot(GitModel):
    name: str
    path: str
    current_branch: str | None = None
    remote_url: str | None = None
    latest_commit: CommitInfo | None = None
    branches: list[BranchInfo] = []
    tags: list[TagInfo] = []
    has_uncommitted_changes: bool = False
    commit_count: int = 0
    statistics: RepositoryStatistics = RepositoryStatistics()
    top_contributors: list[ContributorInfo] = []
    creation_date: datetime | None = None
    last_updated_date: datetime | None = None
    file_extension_counts: dict[str, int] = {}
