"""Tests for .gitignore-aware file listing."""

import pytest

from projscan.git import DirectoryNotFoundError, IgnoreRules, list_files


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "project"
    for rel in [
        "src/App.java",
        "src/app.log",
        "build/out/Gen.java",
        "keep.log",
        "README.md",
        ".git/config",
    ]:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x\n")
    (root / ".gitignore").write_text("# build output\n\nbuild/\n*.log\n!keep.log\n")
    return root


def _relative(root, files):
    return [p.relative_to(root.resolve()).as_posix() for p in files]


@pytest.mark.parametrize("mode", ["simple", "gitwildmatch"])
def test_list_files_honors_root_gitignore(project, mode):
    files = _relative(project, list_files(project, mode=mode))

    assert files == [".gitignore", "README.md", "keep.log", "src/App.java"]


def test_list_files_without_gitignore(tmp_path):
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "b.txt").write_text("b")

    files = list_files(tmp_path, mode="simple")

    assert _relative(tmp_path, files) == ["a.txt", "sub/b.txt"]
    assert all(p.is_absolute() for p in files)


def test_list_files_missing_directory(tmp_path):
    with pytest.raises(DirectoryNotFoundError):
        list_files(tmp_path / "missing", mode="simple")


def test_simple_mode_matches_parent_directories():
    rules = IgnoreRules(["vendor"], "simple")

    assert rules.is_ignored("vendor/lib/x.js")
    assert not rules.is_ignored("src/vendors.txt")


def test_simple_mode_last_match_wins():
    rules = IgnoreRules(["!important.tmp", "*.tmp"], "simple")

    assert rules.is_ignored("important.tmp")


def test_simple_mode_skips_invalid_pattern():
    rules = IgnoreRules(["[", "*.bak"], "simple")

    assert rules.is_ignored("x.bak")
    assert not rules.is_ignored("x.txt")


def test_gitwildmatch_supports_double_star():
    rules = IgnoreRules(["**/generated/*.py", "/top.txt"], "gitwildmatch")

    assert rules.is_ignored("a/b/generated/x.py")
    assert rules.is_ignored("top.txt")
    assert not rules.is_ignored("sub/top.txt")


def test_unknown_mode_rejected():
    with pytest.raises(ValueError):
        IgnoreRules([], "fuzzy")
