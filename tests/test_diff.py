"""Tests for tree diffing and line statistics."""

from dulwich.objects import Blob, Tree

from projscan.git.diff import count_line_changes, diff_trees
from projscan.models import ChangeType


def _tree(repo, files):
    """Store a flat tree of regular files and return its id."""
    tree = Tree()
    for name, data in files.items():
        blob = Blob.from_string(data)
        repo.object_store.add_object(blob)
        tree.add(name.encode(), 0o100644, blob.id)
    repo.object_store.add_object(tree)
    return tree.id


def test_modify_counts_replaced_and_inserted_lines(repo_builder):
    repo = repo_builder.repo
    old = _tree(repo, {"x.txt": b"one\ntwo\nthree\n"})
    new = _tree(repo, {"x.txt": b"one\nTWO\nthree\nfour\nfive\n"})

    [change] = diff_trees(repo, old, new)

    assert change.type == ChangeType.MODIFY
    assert change.path == change.old_path == "x.txt"
    assert (change.lines_added, change.lines_deleted) == (3, 1)
    assert change.mode == 0o100644


def test_empty_old_tree_adds_everything(repo_builder):
    repo = repo_builder.repo
    new = _tree(repo, {"a.txt": b"1\n2\n", "b.txt": b"x\n"})

    changes = diff_trees(repo, None, new)

    assert sorted(c.path for c in changes) == ["a.txt", "b.txt"]
    assert all(c.type == ChangeType.ADD for c in changes)
    assert sum(c.lines_added for c in changes) == 3


def test_delete_keeps_old_path(repo_builder):
    repo = repo_builder.repo
    old = _tree(repo, {"gone.txt": b"a\nb\n", "kept.txt": b"k\n"})
    new = _tree(repo, {"kept.txt": b"k\n"})

    [change] = diff_trees(repo, old, new)

    assert change.type == ChangeType.DELETE
    assert change.path == "gone.txt"
    assert change.lines_deleted == 2
    assert change.mode == 0


def test_rename_detection_toggle(repo_builder):
    repo = repo_builder.repo
    content = b"".join(b"line %d\n" % i for i in range(40))
    old = _tree(repo, {"old.txt": content})
    new = _tree(repo, {"new.txt": content})

    [renamed] = diff_trees(repo, old, new, detect_renames=True)
    assert renamed.type == ChangeType.RENAME
    assert renamed.path == "new.txt"
    assert renamed.old_path == "old.txt"

    plain = diff_trees(repo, old, new, detect_renames=False)
    assert {c.type for c in plain} == {ChangeType.ADD, ChangeType.DELETE}


def test_binary_blobs_report_zero_lines(repo_builder):
    repo = repo_builder.repo
    old = _tree(repo, {"img.bin": b"\x00\x01\x02"})
    new = _tree(repo, {"img.bin": b"\x00\x01\x02\x03\n\x04"})

    [change] = diff_trees(repo, old, new)

    assert change.type == ChangeType.MODIFY
    assert (change.lines_added, change.lines_deleted) == (0, 0)


def test_count_line_changes_against_missing_side(repo_builder):
    repo = repo_builder.repo
    blob = Blob.from_string(b"a\nb\nc\n")
    repo.object_store.add_object(blob)

    assert count_line_changes(repo, None, None, blob.id, 0o100644) == (3, 0)
    assert count_line_changes(repo, blob.id, 0o100644, None, None) == (0, 3)


def test_symlinks_are_not_line_counted(repo_builder):
    repo = repo_builder.repo
    blob = Blob.from_string(b"target\n")
    repo.object_store.add_object(blob)

    assert count_line_changes(repo, None, None, blob.id, 0o120000) == (0, 0)
