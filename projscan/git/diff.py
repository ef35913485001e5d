"""Tree-to-tree diffing with best-effort line statistics."""

from __future__ import annotations

import difflib
import stat

from dulwich.diff_tree import (
    CHANGE_ADD,
    CHANGE_COPY,
    CHANGE_DELETE,
    CHANGE_MODIFY,
    CHANGE_RENAME,
    RenameDetector,
    tree_changes,
)
from dulwich.objects import Blob
from dulwich.patch import is_binary
from dulwich.repo import Repo

from projscan.models.git import ChangeType, FileChange
from projscan.utils.logger import git_logger

_CHANGE_TYPES = {
    CHANGE_ADD: ChangeType.ADD,
    CHANGE_MODIFY: ChangeType.MODIFY,
    CHANGE_DELETE: ChangeType.DELETE,
    CHANGE_RENAME: ChangeType.RENAME,
    CHANGE_COPY: ChangeType.COPY,
}


def _entry(change_side):
    """Return (path, mode, sha) for one side of a TreeChange.

    Missing sides come back either as None or as an all-None TreeEntry
    depending on the dulwich release.
    """
    if change_side is None:
        return None, None, None
    return change_side.path, change_side.mode, change_side.sha


def _decode_path(path: bytes | None) -> str | None:
    if path is None:
        return None
    return path.decode("utf-8", errors="replace")


def _blob_lines(repo: Repo, sha: bytes | None, mode: int | None) -> list[bytes] | None:
    """Load a blob's lines, or None when it is binary or not a regular file."""
    if sha is None:
        return []
    if mode is None or not stat.S_ISREG(mode):
        # symlinks and gitlinks have no line content worth counting
        return None
    obj = repo.object_store[sha]
    if not isinstance(obj, Blob):
        return None
    data = obj.as_raw_string()
    if is_binary(data):
        return None
    return data.splitlines()


def count_line_changes(
    repo: Repo,
    old_sha: bytes | None,
    old_mode: int | None,
    new_sha: bytes | None,
    new_mode: int | None,
) -> tuple[int, int]:
    """Count (added, deleted) lines between two blobs.

    Each non-equal opcode contributes its new-side span to added and its
    old-side span to deleted. Binary content yields (0, 0).
    """
    old_lines = _blob_lines(repo, old_sha, old_mode)
    new_lines = _blob_lines(repo, new_sha, new_mode)
    if old_lines is None or new_lines is None:
        return 0, 0

    added = deleted = 0
    matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        added += j2 - j1
        deleted += i2 - i1
    return added, deleted


def diff_trees(
    repo: Repo,
    old_tree_id: bytes | None,
    new_tree_id: bytes | None,
    detect_renames: bool = True,
) -> list[FileChange]:
    """List the file-level changes between two trees.

    A None old tree means "empty tree", so every path in the new tree is an
    addition. Line counts are best effort: unreadable or binary blobs leave
    both counts at zero without failing the diff.
    """
    store = repo.object_store
    rename_detector = RenameDetector(store) if detect_renames else None

    changes: list[FileChange] = []
    for change in tree_changes(
        store, old_tree_id, new_tree_id, rename_detector=rename_detector
    ):
        old_path, old_mode, old_sha = _entry(change.old)
        new_path, new_mode, new_sha = _entry(change.new)
        change_type = _CHANGE_TYPES.get(change.type, ChangeType.MODIFY)

        path = _decode_path(new_path if new_path is not None else old_path)
        previous = _decode_path(old_path if old_path is not None else new_path)
        if path is None or previous is None:
            continue

        try:
            added, deleted = count_line_changes(
                repo, old_sha, old_mode, new_sha, new_mode
            )
        except Exception as exc:
            git_logger.debug(
                "Line count failed, recording zero", path=path, error=str(exc)
            )
            added, deleted = 0, 0

        changes.append(
            FileChange(
                type=change_type,
                path=path,
                old_path=previous,
                lines_added=added,
                lines_deleted=deleted,
                mode=new_mode or 0,
            )
        )

    return changes
