"""Branch, tag and remote enumeration."""

from __future__ import annotations

from collections import deque

from dulwich.objects import Commit, Tag
from dulwich.repo import Repo

from projscan.git.commits import head_commit_id, parse_identity, to_datetime
from projscan.models.git import BranchInfo, TagInfo
from projscan.utils.logger import git_logger

HEADS_PREFIX = b"refs/heads/"
REMOTES_PREFIX = b"refs/remotes/"
TAGS_PREFIX = b"refs/tags/"
SYMREF_PREFIX = b"ref: "


def _text(value: bytes) -> str:
    return value.decode("utf-8", errors="replace")


def _head_target(repo: Repo) -> bytes | None:
    """Raw HEAD: the ref name it points at, or a commit id when detached."""
    raw = repo.refs.read_ref(b"HEAD")
    if raw is None:
        return None
    if raw.startswith(SYMREF_PREFIX):
        return raw[len(SYMREF_PREFIX) :].strip()
    return raw.strip()


def current_branch(repo: Repo) -> str | None:
    """Short name of the checked-out branch.

    A detached HEAD yields the commit id it points at. A branch may be
    reported before its first commit exists.
    """
    target = _head_target(repo)
    if target is None:
        return None
    if target.startswith(HEADS_PREFIX):
        return _text(target[len(HEADS_PREFIX) :])
    return _text(target)


def _ancestry(repo: Repo, tip: bytes) -> set[bytes]:
    """Every commit reachable from tip, tip included (BFS over parents)."""
    seen: set[bytes] = set()
    queue = deque([tip])
    while queue:
        sha = queue.popleft()
        if sha in seen:
            continue
        seen.add(sha)
        try:
            commit = repo[sha]
        except KeyError:
            # shallow boundary or missing object
            continue
        if isinstance(commit, Commit):
            queue.extend(commit.parents)
    return seen


def _tracking_branch(repo: Repo, name: bytes) -> str | None:
    config = repo.get_config()
    try:
        merge = config.get((b"branch", name), b"merge")
    except KeyError:
        return None
    if merge.startswith(HEADS_PREFIX):
        merge = merge[len(HEADS_PREFIX) :]
    return _text(merge)


def list_branches(repo: Repo) -> list[BranchInfo]:
    """Local branches then remote-tracking branches, each sorted by ref name.

    A branch counts as merged when its tip is the current tip or one of its
    ancestors. Remote HEAD symrefs are not branches and are skipped.
    """
    head_ref = _head_target(repo)
    current_tip = head_commit_id(repo)
    merged_into_current = _ancestry(repo, current_tip) if current_tip else set()

    branches: list[BranchInfo] = []
    local = repo.refs.as_dict(HEADS_PREFIX.rstrip(b"/"))
    for name in sorted(local):
        sha = local[name]
        branches.append(
            BranchInfo(
                name=_text(name),
                current=head_ref == HEADS_PREFIX + name,
                remote=False,
                commit_id=_text(sha),
                tracking_branch=_tracking_branch(repo, name),
                merged=sha in merged_into_current,
            )
        )

    remote = repo.refs.as_dict(REMOTES_PREFIX.rstrip(b"/"))
    for key in sorted(remote):
        remote_name, _, branch_name = key.partition(b"/")
        if not branch_name or branch_name == b"HEAD":
            continue
        sha = remote[key]
        branches.append(
            BranchInfo(
                name=_text(branch_name),
                current=False,
                remote=True,
                remote_name=_text(remote_name),
                commit_id=_text(sha),
                merged=sha in merged_into_current,
            )
        )

    return branches


def _annotated_tag(repo: Repo, name: str, tag: Tag) -> TagInfo | None:
    """Describe an annotated tag, peeling nested tag objects to the commit."""
    target = repo[tag.object[1]]
    while isinstance(target, Tag):
        target = repo[target.object[1]]
    if not isinstance(target, Commit):
        return None

    if tag.tagger:
        tagger_name, tagger_email = parse_identity(tag.tagger)
        tagger_date = to_datetime(tag.tag_time, tag.tag_timezone)
    else:
        # very old tags were written without a tagger line
        tagger_name, tagger_email = "", ""
        tagger_date = to_datetime(0, 0)

    return TagInfo(
        name=name,
        commit_id=_text(target.id),
        annotated=True,
        message=_text(tag.message or b""),
        tagger_name=tagger_name,
        tagger_email=tagger_email,
        tagger_date=tagger_date,
    )


def list_tags(repo: Repo) -> list[TagInfo]:
    """All tags in ref-name order.

    Each ref is classified once by the type of object it points at. Tags
    naming something other than a commit (a tree or blob) are skipped.
    """
    tags: list[TagInfo] = []
    refs = repo.refs.as_dict(TAGS_PREFIX.rstrip(b"/"))
    for key in sorted(refs):
        name = _text(key)
        try:
            obj = repo[refs[key]]
            if isinstance(obj, Tag):
                info = _annotated_tag(repo, name, obj)
            elif isinstance(obj, Commit):
                info = TagInfo(name=name, commit_id=_text(obj.id), annotated=False)
            else:
                info = None
        except KeyError as exc:
            git_logger.debug("Tag target missing", tag=name, error=str(exc))
            continue
        if info is None:
            git_logger.debug("Tag does not name a commit", tag=name)
            continue
        tags.append(info)
    return tags


def remote_url(repo: Repo, remote: str = "origin") -> str | None:
    """Configured fetch URL of a remote, or None when it is not set."""
    config = repo.get_config()
    try:
        url = config.get((b"remote", remote.encode("utf-8")), b"url")
    except KeyError:
        return None
    return _text(url) if url else None
