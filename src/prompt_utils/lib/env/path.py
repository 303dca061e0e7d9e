"""Working-directory resolution and home-directory abbreviation."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path, PurePath, PureWindowsPath
from typing import Literal

import structlog

logger = structlog.get_logger(__name__)

HOME_MARKER = "~"


@dataclass(frozen=True, slots=True)
class PathFact:
    """Canonical working directory and, when under home, its `~` form."""

    absolute: str
    home_relative: str | None = None
    fact: Literal["path"] = "path"

    @property
    def display(self) -> str:
        return self.home_relative if self.home_relative is not None else self.absolute


def _default_case_sensitive(path: PurePath) -> bool:
    if isinstance(path, PureWindowsPath):
        return False
    # APFS and HFS+ are case-insensitive by default.
    return sys.platform != "darwin"


def _key_parts(path: PurePath, *, case_sensitive: bool) -> tuple[str, ...]:
    if case_sensitive:
        return path.parts
    return tuple(part.casefold() for part in path.parts)


def find_ancestor(
    base: str | PurePath,
    path: str | PurePath,
    *,
    case_sensitive: bool | None = None,
) -> PurePath | None:
    """Return the ancestor of `path` that matches `base`, if any.

    Matching is component-wise, so `/home/u` is an ancestor of `/home/u/a` but
    not of `/home/user`. A relative base never matches an absolute path and
    vice versa; Windows drives must agree.
    """

    path = PurePath(path)
    base = type(path)(base)
    if base.is_absolute() != path.is_absolute():
        return None
    sensitive = _default_case_sensitive(path) if case_sensitive is None else case_sensitive
    base_parts = _key_parts(base, case_sensitive=sensitive)
    path_parts = _key_parts(path, case_sensitive=sensitive)
    if len(base_parts) > len(path_parts) or path_parts[: len(base_parts)] != base_parts:
        return None
    return type(path)(*path.parts[: len(base_parts)])


def strip_ancestor(
    base: str | PurePath,
    path: str | PurePath,
    *,
    case_sensitive: bool | None = None,
) -> PurePath:
    """Return `path` relative to its `base` ancestor.

    Raises `ValueError` when `base` is not an ancestor of `path`.
    """

    path = PurePath(path)
    ancestor = find_ancestor(base, path, case_sensitive=case_sensitive)
    if ancestor is None:
        raise ValueError(f"{str(base)!r} is not an ancestor of {str(path)!r}.")
    return type(path)(*path.parts[len(ancestor.parts) :])


def abbreviate_path(
    path: str | PurePath,
    abbreviations: Mapping[str, str],
    *,
    case_sensitive: bool | None = None,
) -> str | None:
    """Replace the longest matching ancestor of `path` with its abbreviation.

    `abbreviations` maps base directories to replacement markers. Returns
    `None` when no base is an ancestor of `path`.
    """

    path = PurePath(path)
    best: tuple[int, str, PurePath] | None = None
    for base, marker in abbreviations.items():
        ancestor = find_ancestor(base, path, case_sensitive=case_sensitive)
        if ancestor is None:
            continue
        depth = len(ancestor.parts)
        if best is None or depth > best[0]:
            best = (depth, marker, ancestor)
    if best is None:
        return None

    depth, marker, _ = best
    remainder = path.parts[depth:]
    if not remainder:
        return marker
    return str(type(path)(marker, *remainder))


def canonical_path(path: Path) -> Path:
    """Resolve symlinks and relative parts, falling back to an absolute path."""

    try:
        return path.resolve()
    except OSError as exc:
        logger.debug("Path resolution failed.", path=str(path), error=str(exc))
        return path.absolute()


def resolve_home(environ: Mapping[str, str] | None = None) -> Path | None:
    """Return the canonical home directory, or `None` when it cannot be found."""

    env = os.environ if environ is None else environ
    raw = env.get("HOME") or env.get("USERPROFILE")
    try:
        home = Path(raw) if raw else Path.home()
    except (RuntimeError, KeyError) as exc:
        logger.debug("Home directory lookup failed.", error=str(exc))
        return None
    return canonical_path(home)


def query_path(
    cwd: str | os.PathLike[str] | None = None,
    *,
    home: str | os.PathLike[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> PathFact | None:
    """Resolve the working directory and its home-relative form."""

    try:
        raw = Path(cwd) if cwd is not None else Path.cwd()
    except OSError as exc:
        # The working directory was removed underneath the shell.
        logger.debug("Working directory lookup failed.", error=str(exc))
        return None
    absolute = canonical_path(raw)
    home_path = canonical_path(Path(home)) if home is not None else resolve_home(environ)

    home_relative = None
    if home_path is not None:
        home_relative = abbreviate_path(absolute, {str(home_path): HOME_MARKER})
    return PathFact(absolute=str(absolute), home_relative=home_relative)
