"""Tests for whole-repository snapshots."""

import pytest

from projscan.git import (
    NotARepositoryError,
    get_commit,
    parse_repository,
    repository_statistics,
)


def test_snapshot_of_two_commit_repo(two_commit_repo, base_time):
    b = two_commit_repo.commits["B"].decode("ascii")

    snapshot = parse_repository(two_commit_repo.root)

    assert snapshot.name == "repo"
    assert snapshot.path == str(two_commit_repo.root.resolve())
    assert snapshot.current_branch == "main"
    assert snapshot.remote_url is None
    assert snapshot.commit_count == 2
    assert snapshot.latest_commit is not None
    assert snapshot.latest_commit.id == b
    assert snapshot.last_updated_date == snapshot.latest_commit.author_date
    assert snapshot.creation_date.timestamp() == base_time
    assert [t.name for t in snapshot.tags] == ["v1"]
    assert [br.name for br in snapshot.branches] == ["main"]
    assert snapshot.has_uncommitted_changes is False
    assert snapshot.statistics.total_commits == 2
    assert snapshot.statistics.most_active_files == {"x.txt": 1}
    assert snapshot.file_extension_counts == {"txt": 1}
    assert [c.commit_count for c in snapshot.top_contributors] == [2]


def test_snapshot_is_repeatable(two_commit_repo):
    first = parse_repository(two_commit_repo.root)
    second = parse_repository(two_commit_repo.root)

    assert first.model_dump() == second.model_dump()


def test_snapshot_limits(repo_builder):
    for i in range(4):
        repo_builder.commit(f"c{i}\n", {f"f{i}.txt": f"{i}\n"})

    snapshot = parse_repository(
        repo_builder.root, top_contributors=0, most_active_files_limit=2
    )

    assert snapshot.top_contributors == []
    assert len(snapshot.statistics.most_active_files) == 2


def test_snapshot_of_empty_repository(repo_builder):
    snapshot = parse_repository(repo_builder.root)

    assert snapshot.current_branch == "main"
    assert snapshot.latest_commit is None
    assert snapshot.commit_count == 0
    assert snapshot.creation_date is None
    assert snapshot.last_updated_date is None
    assert snapshot.branches == []
    assert snapshot.statistics.total_commits == 0


def test_snapshot_requires_repository(tmp_path):
    with pytest.raises(NotARepositoryError):
        parse_repository(tmp_path)


def test_unreadable_parent_tree_counts_as_no_changes(two_commit_repo):
    """A commit whose diff cannot be read does not stop the scan."""
    a = two_commit_repo.commits["A"]
    tree_hex = two_commit_repo.repo[a].tree.decode("ascii")
    loose = two_commit_repo.root / ".git" / "objects" / tree_hex[:2] / tree_hex[2:]
    loose.unlink()

    stats = repository_statistics(two_commit_repo.root)
    assert stats.total_commits == 2
    assert stats.average_changed_files_per_commit == 0.0
    assert stats.most_active_files == {}

    latest = get_commit(two_commit_repo.root, "main")
    assert latest is not None
    assert latest.changed_files == []

    snapshot = parse_repository(two_commit_repo.root)
    assert snapshot.statistics.total_commits == 2
    assert snapshot.latest_commit is not None
    assert snapshot.latest_commit.changed_files == []
    assert snapshot.top_contributors[0].commit_count == 2
    assert snapshot.top_contributors[0].lines_added == 0
    assert snapshot.file_extension_counts == {"txt": 1}
