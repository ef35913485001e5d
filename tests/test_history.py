"""Tests for history statistics and working-tree state."""

import time

import pytest

from projscan.git import (
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

BOB = b"Bob Builder <bob@example.org>"


def _three_commits(builder):
    builder.commit("A\n", {"x.txt": "one\ntwo\nthree\n"})
    builder.commit("B\n", {"x.txt": "one\nTWO\nthree\nfour\nfive\n"})
    builder.commit("C\n", {"y.txt": "1\n2\n"}, author=BOB)
    return builder


def test_empty_repository(repo_builder):
    assert commit_count(repo_builder.root) == 0
    assert has_uncommitted_changes(repo_builder.root) is False
    assert repository_creation_date(repo_builder.root) is None
    assert file_extension_counts(repo_builder.root) == {}
    assert top_contributors(repo_builder.root) == []

    stats = repository_statistics(repo_builder.root)
    assert stats.total_commits == 0
    assert stats.average_changed_files_per_commit == 0.0
    assert sum(stats.commits_per_hour.values()) == 0


def test_untracked_file_before_first_commit_is_dirty(repo_builder):
    repo_builder.write("draft.txt", "x\n")

    assert has_uncommitted_changes(repo_builder.root) is True


def test_clean_then_dirty(two_commit_repo):
    assert has_uncommitted_changes(two_commit_repo.root) is False

    two_commit_repo.write("notes.md", "new\n")

    assert has_uncommitted_changes(two_commit_repo.root) is True


def test_histograms_are_complete(two_commit_repo):
    by_day = contributions_by_day_of_week(two_commit_repo.root)
    by_hour = contributions_by_hour_of_day(two_commit_repo.root)

    assert list(by_day) == [
        "Monday",
        "Tuesday",
        "Wednesday",
        "Thursday",
        "Friday",
        "Saturday",
        "Sunday",
    ]
    assert list(by_hour) == list(range(24))
    assert sum(by_day.values()) == sum(by_hour.values()) == 2


def test_heat_map_covers_every_day(two_commit_repo):
    heat_2023 = contribution_heat_map(two_commit_repo.root, 2023)
    heat_2024 = contribution_heat_map(two_commit_repo.root, 2024)

    assert len(heat_2023) == 365
    assert len(heat_2024) == 366
    assert next(iter(heat_2023)) == "2023-01-01"
    assert sum(heat_2023.values()) == 2
    assert sum(heat_2024.values()) == 0


def test_top_contributors_ranked_by_commits(repo_builder):
    _three_commits(repo_builder)

    alice, bob = top_contributors(repo_builder.root)

    assert alice.email == "alice@example.com"
    assert alice.commit_count == 2
    # the root commit contributes no line counts
    assert (alice.lines_added, alice.lines_deleted) == (3, 1)
    assert alice.first_commit_date < alice.last_commit_date
    assert bob.name == "Bob Builder"
    assert bob.commit_count == 1
    assert bob.lines_added == 2

    assert len(top_contributors(repo_builder.root, limit=1)) == 1


def test_most_active_files_skips_root_commit(repo_builder):
    _three_commits(repo_builder)

    assert most_active_files(repo_builder.root) == {"x.txt": 1, "y.txt": 1}
    assert len(most_active_files(repo_builder.root, limit=1)) == 1


def test_repository_statistics(repo_builder):
    _three_commits(repo_builder)

    stats = repository_statistics(repo_builder.root)

    assert stats.total_commits == 3
    assert len(stats.commits_per_month) == 12
    assert sum(stats.commits_per_month.values()) == 3
    assert stats.average_changed_files_per_commit == 2 / 3


def test_creation_date_is_earliest_commit(two_commit_repo, base_time):
    created = repository_creation_date(two_commit_repo.root)

    assert created is not None
    assert created.timestamp() == base_time


def test_file_extension_counts(repo_builder):
    repo_builder.commit(
        "files\n",
        {
            "x.txt": "x\n",
            "docs/y.TXT": "y\n",
            "README": "readme\n",
            "src/main/App.java": "class App {}\n",
        },
    )

    assert file_extension_counts(repo_builder.root) == {
        "(no extension)": 1,
        "java": 1,
        "txt": 2,
    }


@pytest.fixture
def local_utc_minus_five(monkeypatch):
    """Run with the process time zone fixed at UTC-5, no daylight saving."""
    monkeypatch.setenv("TZ", "EST5")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


def test_buckets_use_local_time(repo_builder, local_utc_minus_five):
    """Buckets follow the local zone, not UTC or the commit's own offset."""
    # 2024-01-01 04:30 UTC, recorded at +09:00; 2023-12-31 23:30 (Sunday) local
    repo_builder.commit(
        "late\n", {"x.txt": "x\n"}, when=1_704_083_400, tz_offset=9 * 3600
    )

    by_hour = contributions_by_hour_of_day(repo_builder.root)
    by_day = contributions_by_day_of_week(repo_builder.root)

    assert by_hour[23] == 1
    assert sum(by_hour.values()) == 1
    assert by_day["Sunday"] == 1
    assert sum(by_day.values()) == 1

    assert contribution_heat_map(repo_builder.root, 2023)["2023-12-31"] == 1
    assert sum(contribution_heat_map(repo_builder.root, 2024).values()) == 0

    stats = repository_statistics(repo_builder.root)
    assert stats.commits_per_hour[23] == 1
    assert stats.commits_per_day_of_week["Sunday"] == 1
    assert stats.commits_per_month["December"] == 1
