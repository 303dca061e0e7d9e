"""Working-directory rendering.

The default layout drops leading segments to fit a width. The collapsed
layouts keep the first and last segments and hide the ones in between.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import PurePath, PureWindowsPath

from rich.cells import cell_len

from prompt_utils.lib.env.path import PathFact
from prompt_utils.lib.segment import EMPTY_SEGMENT, Segment, SegmentBuilder
from prompt_utils.lib.styling import Color4Bit, StyleAttributes

DEFAULT_ELLIPSIS = "…"
DEFAULT_PATH_STYLE = StyleAttributes(foreground=Color4Bit.BRIGHT_CYAN, bold=True)
DEFAULT_ELLIPSIS_STYLE = StyleAttributes(foreground=Color4Bit.DARK_CYAN)

# (text, hidden) pairs; hidden pieces stand in for dropped segments.
type Piece = tuple[str, bool]


class PathLayout(StrEnum):
    """How a path is shortened.

    `TRUNCATE` drops leading segments only when the path exceeds the width.
    `MIDDLE_HIDDEN` replaces every intermediate segment with a placeholder.
    `SHORT` replaces all intermediate segments with a single placeholder.
    """

    TRUNCATE = "truncate"
    MIDDLE_HIDDEN = "middle_hidden"
    SHORT = "short"


def native_separator(path: PurePath) -> str:
    return "\\" if isinstance(path, PureWindowsPath) else "/"


def _anchor(path: PurePath, root: str | None) -> str:
    if root is None or not path.root:
        return path.anchor
    return path.drive + root


def _body(path: PurePath) -> list[str]:
    return list(path.parts[1:] if path.anchor else path.parts)


def full_path_text(
    path: str | PurePath,
    *,
    separator: str | None = None,
    root: str | None = None,
) -> str:
    """Render `path` joined with `separator`, showing `root` for the root dir.

    >>> full_path_text("/usr/local/bin", separator=" > ")
    '/usr > local > bin'
    """

    path = PurePath(path)
    sep = native_separator(path) if separator is None else separator
    return _anchor(path, root) + sep.join(_body(path))


def collapsed_pieces(
    path: str | PurePath,
    *,
    single: bool,
    replacement: str = DEFAULT_ELLIPSIS,
    separator: str | None = None,
    root: str | None = None,
) -> list[Piece]:
    """Split `path` into visible and hidden pieces.

    The anchor (or the first segment of a relative path) and the last
    segment stay visible. Each intermediate segment becomes `replacement`,
    or a single `replacement` stands in for all of them when `single` is set.
    """

    path = PurePath(path)
    sep = native_separator(path) if separator is None else separator
    anchor = _anchor(path, root)
    parts = _body(path)
    if anchor:
        lead, rest = anchor, parts
    elif len(parts) > 1:
        lead, rest = parts[0] + sep, parts[1:]
    else:
        return [(part, False) for part in parts]

    pieces: list[Piece] = [(lead, False)]
    middle = rest[:-1]
    if middle:
        hidden = 1 if single else len(middle)
        pieces.extend((replacement + sep, True) for _ in range(hidden))
    pieces.extend((part, False) for part in rest[-1:])
    return pieces


def truncate_parts(
    parts: list[str],
    *,
    max_width: int,
    prefix: str,
    separator: str,
) -> list[str]:
    """Return the longest suffix of `parts` that fits after `prefix`.

    The final part is always kept, even when it alone exceeds `max_width`.
    """

    kept = parts[-1:]
    for part in reversed(parts[:-1]):
        candidate = [part, *kept]
        if cell_len(prefix + separator.join(candidate)) > max_width:
            break
        kept = candidate
    return kept


def format_path(
    fact: PathFact,
    *,
    max_width: int | None = None,
    abbreviate_home: bool = True,
    layout: PathLayout = PathLayout.TRUNCATE,
    separator: str | None = None,
    root: str | None = None,
    ellipsis: str = DEFAULT_ELLIPSIS,
    style: StyleAttributes = DEFAULT_PATH_STYLE,
    ellipsis_style: StyleAttributes = DEFAULT_ELLIPSIS_STYLE,
) -> Segment:
    """Render `fact` in the given `layout`.

    With `TRUNCATE`, leading segments are dropped to fit `max_width` columns
    and replaced by `ellipsis` and a separator. Width is measured in terminal
    cells, so wide characters count double. The collapsed layouts ignore
    `max_width`.
    """

    text = fact.home_relative if abbreviate_home and fact.home_relative is not None else fact.absolute
    if not text:
        return EMPTY_SEGMENT

    path = PurePath(text)
    if layout != PathLayout.TRUNCATE:
        builder = SegmentBuilder()
        pieces = collapsed_pieces(
            path,
            single=layout == PathLayout.SHORT,
            replacement=ellipsis,
            separator=separator,
            root=root,
        )
        for piece, hidden in pieces:
            builder.add(piece, ellipsis_style if hidden else style)
        return builder.build()

    full = full_path_text(path, separator=separator, root=root)
    parts = _body(path)
    if max_width is None or cell_len(full) <= max_width or len(parts) <= 1:
        return Segment.of(full, style)

    sep = native_separator(path) if separator is None else separator
    prefix = ellipsis + sep
    kept = truncate_parts(parts, max_width=max_width, prefix=prefix, separator=sep)
    tail = sep.join(kept)
    if cell_len(prefix + tail) >= cell_len(full):
        return Segment.of(full, style)
    return SegmentBuilder().add(prefix, ellipsis_style).add(tail, style).build()
