"""Compact repository summary: head, divergence and working-tree counts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from prompt_utils.lib.env.git import ChangeSummary, RepoStatus
from prompt_utils.lib.segment import Segment, SegmentBuilder
from prompt_utils.lib.styling import Color4Bit, StyleAttributes


class GitLayout(StrEnum):
    """How working-tree changes are summarised.

    `COMPACT` shows one count per category. `DETAILED` splits staged and
    working-tree changes into added, modified and deleted counts.
    """

    COMPACT = "compact"
    DETAILED = "detailed"


@dataclass(frozen=True, slots=True)
class GitGlyphs:
    branch: str = "\ue0a0 "
    detached: str = "◉ "
    unborn: str = "○ "
    ahead: str = "↑"
    behind: str = "↓"
    in_sync: str = "≡"
    staged: str = "+"
    unstaged: str = "~"
    untracked: str = "?"
    conflicted: str = "!"
    stashed: str = "⚑"
    added: str = "+"
    modified: str = "~"
    deleted: str = "-"
    working_tree: str = "|"


@dataclass(frozen=True, slots=True)
class GitStyles:
    head: StyleAttributes = StyleAttributes(foreground=Color4Bit.BRIGHT_MAGENTA)
    ahead: StyleAttributes = StyleAttributes(foreground=Color4Bit.BRIGHT_CYAN)
    behind: StyleAttributes = StyleAttributes(foreground=Color4Bit.BRIGHT_CYAN)
    in_sync: StyleAttributes = StyleAttributes(foreground=Color4Bit.DARK_CYAN)
    staged: StyleAttributes = StyleAttributes(foreground=Color4Bit.BRIGHT_GREEN)
    unstaged: StyleAttributes = StyleAttributes(foreground=Color4Bit.BRIGHT_YELLOW)
    untracked: StyleAttributes = StyleAttributes(foreground=Color4Bit.BRIGHT_GRAY)
    conflicted: StyleAttributes = StyleAttributes(foreground=Color4Bit.BRIGHT_RED, bold=True)
    stashed: StyleAttributes = StyleAttributes(foreground=Color4Bit.BRIGHT_BLUE)


DEFAULT_GLYPHS = GitGlyphs()
DEFAULT_STYLES = GitStyles()

# Working-tree categories in display order.
CATEGORY_ORDER: tuple[str, ...] = ("staged", "unstaged", "untracked", "conflicted", "stashed")

type Cluster = tuple[str, StyleAttributes]


def head_text(status: RepoStatus, glyphs: GitGlyphs = DEFAULT_GLYPHS) -> str:
    if status.detached:
        return f"{glyphs.detached}{status.commit or '?'}"
    if status.branch is None:
        return ""
    if status.unborn:
        return f"{glyphs.unborn}{status.branch}"
    return f"{glyphs.branch}{status.branch}"


def change_summary_text(changes: ChangeSummary, glyphs: GitGlyphs = DEFAULT_GLYPHS) -> str:
    """Render added, modified and deleted counts, omitting zeros.

    >>> change_summary_text(ChangeSummary(added=1, deleted=2))
    '+1 -2'
    """

    counts = (
        (glyphs.added, changes.added),
        (glyphs.modified, changes.modified),
        (glyphs.deleted, changes.deleted),
    )
    return " ".join(f"{glyph}{count}" for glyph, count in counts if count)


def _compact_changes(status: RepoStatus, glyphs: GitGlyphs, styles: GitStyles) -> list[Cluster]:
    clusters: list[Cluster] = []
    for category in CATEGORY_ORDER[:-1]:
        count = getattr(status, category)
        if count:
            clusters.append((f"{getattr(glyphs, category)}{count}", getattr(styles, category)))
    return clusters


def _detailed_changes(status: RepoStatus, glyphs: GitGlyphs, styles: GitStyles) -> list[Cluster]:
    clusters: list[Cluster] = []
    if status.staging.any_changes:
        clusters.append((change_summary_text(status.staging, glyphs), styles.staged))
    # Untracked files count as working-tree additions here.
    working_tree = ChangeSummary(
        added=status.working_tree.added + status.untracked,
        modified=status.working_tree.modified,
        deleted=status.working_tree.deleted,
    )
    if working_tree.any_changes:
        text = f"{glyphs.working_tree} {change_summary_text(working_tree, glyphs)}"
        clusters.append((text, styles.unstaged))
    if status.conflicted:
        clusters.append((f"{glyphs.conflicted}{status.conflicted}", styles.conflicted))
    return clusters


def format_git(
    status: RepoStatus,
    *,
    glyphs: GitGlyphs = DEFAULT_GLYPHS,
    styles: GitStyles = DEFAULT_STYLES,
    layout: GitLayout = GitLayout.COMPACT,
    show_in_sync: bool = False,
) -> Segment:
    """Render `status` as space-separated clusters, omitting zero counts.

    With `show_in_sync`, a branch level with its upstream gets the in-sync
    glyph where the divergence counts would otherwise be.

    >>> format_git(RepoStatus(root="/r", branch="main", staged=2, untracked=1)).text
    '\\ue0a0 main +2 ?1'
    """

    clusters: list[Cluster] = []
    head = head_text(status, glyphs)
    if head:
        clusters.append((head, styles.head))
    if status.ahead:
        clusters.append((f"{glyphs.ahead}{status.ahead}", styles.ahead))
    if status.behind:
        clusters.append((f"{glyphs.behind}{status.behind}", styles.behind))
    if show_in_sync and status.in_sync:
        clusters.append((glyphs.in_sync, styles.in_sync))
    if status.any_changes:
        if layout == GitLayout.DETAILED:
            clusters.extend(_detailed_changes(status, glyphs, styles))
        else:
            clusters.extend(_compact_changes(status, glyphs, styles))
    if status.stashed:
        clusters.append((f"{glyphs.stashed}{status.stashed}", styles.stashed))

    builder = SegmentBuilder()
    for index, (text, style) in enumerate(clusters):
        if index:
            builder.add(" ")
        builder.add(text, style)
    return builder.build()
