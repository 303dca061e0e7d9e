"""Git repository discovery and status summary.

The whole summary (head, upstream, ahead/behind, stash count and per-path
changes) comes from a single `git status --porcelain=v2` invocation, so the
working tree is walked at most once per render.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import StrEnum
from pathlib import Path
from typing import Literal

import structlog

from prompt_utils.lib.env.path import canonical_path

logger = structlog.get_logger(__name__)

GIT_MARKER = ".git"
SHORT_ID_LENGTH = 7
DEFAULT_AUTO_FAST_INDEX_BYTES = 16 * 1024 * 1024


class ScanMode(StrEnum):
    """How much of the working tree a status scan enumerates.

    `FAST` skips untracked files, whose enumeration cost has no upper bound in
    large trees. `AUTO` picks `FAST` when the index is larger than a threshold.
    """

    FULL = "full"
    FAST = "fast"
    AUTO = "auto"


@dataclass(frozen=True, slots=True)
class ChangeSummary:
    """Changed paths in the index or the working tree, by kind of change."""

    added: int = 0
    modified: int = 0
    deleted: int = 0

    @property
    def any_changes(self) -> bool:
        return bool(self.added or self.modified or self.deleted)


@dataclass(frozen=True, slots=True)
class RepoStatus:
    """Read-only summary of a repository's state.

    `staged` and `unstaged` count paths; `staging` and `working_tree` break
    the same paths down by kind. Untracked files are only in `untracked`.
    """

    root: str
    branch: str | None = None
    commit: str | None = None
    upstream: str | None = None
    ahead: int = 0
    behind: int = 0
    staged: int = 0
    unstaged: int = 0
    untracked: int = 0
    conflicted: int = 0
    stashed: int = 0
    staging: ChangeSummary = ChangeSummary()
    working_tree: ChangeSummary = ChangeSummary()
    detached: bool = False
    unborn: bool = False
    untracked_scanned: bool = True
    fact: Literal["repo_status"] = "repo_status"

    @property
    def any_changes(self) -> bool:
        return bool(self.staged or self.unstaged or self.untracked or self.conflicted)

    @property
    def in_sync(self) -> bool:
        """True when the branch and its upstream point at the same commit."""

        return self.upstream is not None and not self.ahead and not self.behind


def find_repo_root(start: str | os.PathLike[str], *, max_depth: int | None = None) -> Path | None:
    """Return the nearest directory at or above `start` holding a `.git` entry.

    `start` is canonicalised first, so relative paths and symlinked logical
    paths climb the real ancestors. `max_depth` caps how many ancestors above
    `start` are examined; `None` searches up to the filesystem root.
    """

    candidate = canonical_path(Path(start))
    depth = 0
    while True:
        # A .git entry (file for worktree/submodule, directory for standalone
        # repo) marks a repo boundary.
        if (candidate / GIT_MARKER).exists():
            return candidate
        parent = candidate.parent
        if parent == candidate:
            return None
        if max_depth is not None and depth >= max_depth:
            return None
        candidate = parent
        depth += 1


def resolve_git_dir(root: Path) -> Path | None:
    """Return the git directory for `root`, following `gitdir:` files."""

    marker = root / GIT_MARKER
    if marker.is_dir():
        return marker
    try:
        content = marker.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Unreadable .git file.", path=str(marker), error=str(exc))
        return None
    prefix, _, target = content.strip().partition(":")
    if prefix != "gitdir" or not target.strip():
        return None
    git_dir = Path(target.strip())
    return git_dir if git_dir.is_absolute() else root / git_dir


def resolve_scan_mode(
    mode: ScanMode,
    root: Path,
    *,
    auto_fast_index_bytes: int = DEFAULT_AUTO_FAST_INDEX_BYTES,
) -> ScanMode:
    if mode != ScanMode.AUTO:
        return mode
    git_dir = resolve_git_dir(root)
    if git_dir is None:
        return ScanMode.FULL
    try:
        index_size = (git_dir / "index").stat().st_size
    except OSError:
        return ScanMode.FULL
    return ScanMode.FAST if index_size > auto_fast_index_bytes else ScanMode.FULL


def status_command(mode: ScanMode) -> list[str]:
    untracked = "no" if mode == ScanMode.FAST else "normal"
    return [
        "git",
        "status",
        "--porcelain=v2",
        "--branch",
        "--show-stash",
        "-z",
        f"--untracked-files={untracked}",
        "--ignore-submodules=dirty",
    ]


def run_git(args: list[str], *, cwd: Path) -> str | None:
    """Run git and return stdout, or `None` when git is missing or fails."""

    env = os.environ.copy()
    env["GIT_OPTIONAL_LOCKS"] = "0"
    env["LC_ALL"] = "C"
    try:
        completed = subprocess.run(
            args,
            cwd=cwd,
            env=env,
            capture_output=True,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("Unable to run git.", args=args, error=str(exc))
        return None
    if completed.returncode != 0:
        logger.debug(
            "git exited with an error.",
            args=args,
            exit_code=completed.returncode,
            stderr=completed.stderr.decode("utf-8", errors="replace").strip(),
        )
        return None
    # Paths are only counted, so lossy decoding of odd filenames is harmless.
    return completed.stdout.decode("utf-8", errors="replace")


def _parse_int(value: str, *, field: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        logger.debug("Malformed git status header.", field=field, value=value)
        return None


def _apply_header(status: RepoStatus, header: str) -> RepoStatus:
    key, _, value = header.partition(" ")
    if key == "branch.oid":
        if value == "(initial)":
            return replace(status, commit=None, unborn=True)
        return replace(status, commit=value[:SHORT_ID_LENGTH] or None)
    if key == "branch.head":
        if value == "(detached)":
            return replace(status, branch=None, detached=True)
        return replace(status, branch=value or None)
    if key == "branch.upstream":
        return replace(status, upstream=value or None)
    if key == "branch.ab":
        ahead_text, _, behind_text = value.partition(" ")
        ahead = _parse_int(ahead_text.lstrip("+"), field="ahead")
        behind = _parse_int(behind_text.lstrip("-"), field="behind")
        return replace(status, ahead=abs(ahead or 0), behind=abs(behind or 0))
    if key == "stash":
        return replace(status, stashed=_parse_int(value, field="stash") or 0)
    return status


# Porcelain v2 XY codes by kind of change. Copies count as additions and
# renames as modifications.
_ADDED_CODES = frozenset("AC")
_MODIFIED_CODES = frozenset("MRT")
_DELETED_CODES = frozenset("D")


def _tally(summary: ChangeSummary, code: str) -> ChangeSummary:
    if code in _ADDED_CODES:
        return replace(summary, added=summary.added + 1)
    if code in _MODIFIED_CODES:
        return replace(summary, modified=summary.modified + 1)
    if code in _DELETED_CODES:
        return replace(summary, deleted=summary.deleted + 1)
    return summary


def parse_porcelain_v2(
    records: Iterable[str],
    *,
    root: str,
    untracked_scanned: bool = True,
) -> RepoStatus:
    """Summarise NUL-separated `git status --porcelain=v2 --branch` records."""

    status = RepoStatus(root=root, untracked_scanned=untracked_scanned)
    staged = unstaged = untracked = conflicted = 0
    staging = working_tree = ChangeSummary()
    iterator = iter(records)
    for record in iterator:
        if not record:
            continue
        tag = record[0]
        if tag == "#":
            status = _apply_header(status, record[2:])
        elif tag in {"1", "2"}:
            index_state, worktree_state = record[2:3], record[3:4]
            if index_state not in {"", "."}:
                staged += 1
                staging = _tally(staging, index_state)
            if worktree_state not in {"", "."}:
                unstaged += 1
                working_tree = _tally(working_tree, worktree_state)
            if tag == "2":
                # Renames and copies carry the original path as an extra record.
                next(iterator, None)
        elif tag == "u":
            conflicted += 1
        elif tag == "?":
            untracked += 1
    return replace(
        status,
        staged=staged,
        unstaged=unstaged,
        untracked=untracked,
        conflicted=conflicted,
        staging=staging,
        working_tree=working_tree,
    )


def query_repo_status(
    start: str | os.PathLike[str] | None = None,
    *,
    scan_mode: ScanMode = ScanMode.FULL,
    max_depth: int | None = None,
    auto_fast_index_bytes: int = DEFAULT_AUTO_FAST_INDEX_BYTES,
) -> RepoStatus | None:
    """Summarise the repository containing `start`, or `None` if there is none.

    A repository git cannot read is reported the same as no repository.
    """

    try:
        directory = canonical_path(Path(start) if start is not None else Path.cwd())
    except OSError as exc:
        logger.debug("Working directory lookup failed.", error=str(exc))
        return None
    root = find_repo_root(directory, max_depth=max_depth)
    if root is None:
        return None

    mode = resolve_scan_mode(scan_mode, root, auto_fast_index_bytes=auto_fast_index_bytes)
    output = run_git(status_command(mode), cwd=directory)
    if output is None:
        return None
    return parse_porcelain_v2(
        output.split("\0"),
        root=str(root),
        untracked_scanned=mode == ScanMode.FULL,
    )
