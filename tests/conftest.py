"""Shared pytest fixtures for all tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from dulwich import porcelain
from dulwich.objects import Commit, Tag
from dulwich.repo import Repo

# 2023-11-14 22:13:20 UTC; every commit built here is an hour after the last
BASE_TIME = 1_700_000_000
DEFAULT_AUTHOR = b"Alice Example <alice@example.com>"


class RepoBuilder:
    """Builds real on-disk repositories with deterministic commits.

    Files are written to the working tree and staged through the index, so
    a repository built here is clean after each commit.
    """

    def __init__(self, root: Path):
        self.root = root
        self.repo = Repo.init(str(root))
        self.repo.refs.set_symbolic_ref(b"HEAD", b"refs/heads/main")
        self._clock = BASE_TIME
        self.commits: dict[str, bytes] = {}

    def write(self, path: str, content: str | bytes) -> Path:
        target = self.root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            target.write_text(content)
        else:
            target.write_bytes(content)
        return target

    def commit(
        self,
        message: str,
        files: dict[str, str | bytes] | None = None,
        *,
        author: bytes = DEFAULT_AUTHOR,
        when: int | None = None,
        tz_offset: int = 0,
        parents: list[bytes] | None = None,
        ref: bytes = b"HEAD",
    ) -> bytes:
        for path, content in (files or {}).items():
            target = self.write(path, content)
            porcelain.add(self.repo, paths=[str(target)])

        tree_id = self.repo.open_index().commit(self.repo.object_store)
        if parents is None:
            try:
                parents = [self.repo.refs[b"HEAD"]]
            except KeyError:
                parents = []

        if when is None:
            when = self._clock
            self._clock += 3600

        commit = Commit()
        commit.tree = tree_id
        commit.parents = parents
        commit.author = commit.committer = author
        commit.author_time = commit.commit_time = when
        commit.author_timezone = commit.commit_timezone = tz_offset
        commit.encoding = b"UTF-8"
        commit.message = message.encode("utf-8")
        self.repo.object_store.add_object(commit)
        self.repo.refs[ref] = commit.id
        return commit.id

    def branch(self, name: str, target: bytes) -> None:
        self.repo.refs[b"refs/heads/" + name.encode()] = target

    def remote_branch(self, remote: str, name: str, target: bytes) -> None:
        self.repo.refs[f"refs/remotes/{remote}/{name}".encode()] = target

    def lightweight_tag(self, name: str, target: bytes) -> None:
        self.repo.refs[b"refs/tags/" + name.encode()] = target

    def annotated_tag(
        self,
        name: str,
        target: bytes,
        message: str,
        tagger: bytes = b"Tess Tagger <tess@example.com>",
        when: int = BASE_TIME + 86_400,
    ) -> bytes:
        tag = Tag()
        tag.tagger = tagger
        tag.message = message.encode("utf-8")
        tag.name = name.encode("utf-8")
        tag.object = (Commit, target)
        tag.tag_time = when
        tag.tag_timezone = 0
        self.repo.object_store.add_object(tag)
        self.repo.refs[b"refs/tags/" + name.encode()] = tag.id
        return tag.id

    def set_config(self, section: tuple[bytes, ...], key: bytes, value: bytes) -> None:
        config = self.repo.get_config()
        config.set(section, key, value)
        config.write_to_path()

    def close(self) -> None:
        self.repo.close()


@pytest.fixture(autouse=True)
def temp_global_config_dir(monkeypatch, tmp_path_factory):
    """Use a temporary directory for global config during tests."""
    config_dir = Path(tmp_path_factory.mktemp("global_config"))
    monkeypatch.setenv("PROJSCAN_CONFIG_DIR", str(config_dir))
    return config_dir


@pytest.fixture
def repo_builder(tmp_path):
    """An empty repository on branch main, closed after the test."""
    root = tmp_path / "repo"
    root.mkdir()
    builder = RepoBuilder(root)
    yield builder
    builder.close()


@pytest.fixture
def two_commit_repo(repo_builder):
    """A (adds x.txt) -> B (modifies x.txt: +3/-1) on main, v1 annotated at B."""
    a = repo_builder.commit("A\n", {"x.txt": "one\ntwo\nthree\n"})
    b = repo_builder.commit("B\n", {"x.txt": "one\nTWO\nthree\nfour\nfive\n"})
    repo_builder.annotated_tag("v1", b, "release")
    repo_builder.commits = {"A": a, "B": b}
    return repo_builder


@pytest.fixture
def base_time():
    """Author timestamp of the first commit a RepoBuilder makes."""
    return BASE_TIME
