"""Ancestor matching, home abbreviation and working-directory facts."""

from __future__ import annotations

from pathlib import Path, PurePosixPath, PureWindowsPath

import pytest

from prompt_utils.lib.env.path import (
    HOME_MARKER,
    PathFact,
    abbreviate_path,
    find_ancestor,
    query_path,
    strip_ancestor,
)


@pytest.mark.parametrize(
    ("base", "path", "expected"),
    (
        pytest.param("/path/to", "/path/to/something", "/path/to", id="absolute-match"),
        pytest.param("path/to", "path/to/something", "path/to", id="relative-match"),
        pytest.param("/", "/path/to/something", "/", id="root-matches-absolute"),
        pytest.param("/", "/", "/", id="root-matches-root"),
        pytest.param("", "path/to/something", "", id="empty-matches-relative"),
        pytest.param("/./path/to", "/path/to/something", "/path/to", id="leading-dot-ignored"),
        pytest.param("/path/to", "path/to/something", None, id="absolute-vs-relative"),
        pytest.param("path/to", "/path/to/something", None, id="relative-vs-absolute"),
        pytest.param("", "/path/to/something", None, id="empty-vs-absolute"),
        pytest.param("/home/u", "/home/user", None, id="component-wise"),
        pytest.param("/a/b/c", "/a/b", None, id="base-longer-than-path"),
    ),
)
def test_find_ancestor_posix(base: str, path: str, expected: str | None) -> None:
    result = find_ancestor(base, PurePosixPath(path), case_sensitive=True)

    if expected is None:
        assert result is None
    else:
        assert result == PurePosixPath(expected)


@pytest.mark.parametrize(
    ("base", "path", "expected"),
    (
        pytest.param("C:/", "C:/path/to/something", "C:/", id="drive-root"),
        pytest.param("C:/", "D:/path/to/something", None, id="drive-mismatch"),
        pytest.param("C:/path/to", "C:path/to/something", None, id="anchored-vs-drive-relative"),
        pytest.param("c:/PATH", "C:/path/to", "C:/path", id="case-insensitive"),
    ),
)
def test_find_ancestor_windows(base: str, path: str, expected: str | None) -> None:
    result = find_ancestor(base, PureWindowsPath(path))

    if expected is None:
        assert result is None
    else:
        assert result == PureWindowsPath(expected)


def test_find_ancestor_case_sensitivity_is_selectable() -> None:
    path = PurePosixPath("/Users/Me/src")

    assert find_ancestor("/users/me", path, case_sensitive=True) is None
    assert find_ancestor("/users/me", path, case_sensitive=False) == PurePosixPath("/Users/Me")


def test_strip_ancestor() -> None:
    path = PurePosixPath("/home/u/src/app")

    assert strip_ancestor("/home/u", path, case_sensitive=True) == PurePosixPath("src/app")
    with pytest.raises(ValueError, match="not an ancestor"):
        strip_ancestor("/srv", path, case_sensitive=True)


def test_abbreviate_path_prefers_longest_match() -> None:
    abbreviations = {"/home/u": "~", "/home/u/src": "@src"}

    result = abbreviate_path(PurePosixPath("/home/u/src/app"), abbreviations, case_sensitive=True)

    assert result == "@src/app"


def test_abbreviate_path_exact_match_is_bare_marker() -> None:
    assert abbreviate_path(PurePosixPath("/home/u"), {"/home/u": "~"}, case_sensitive=True) == "~"


def test_abbreviate_path_without_match() -> None:
    assert abbreviate_path(PurePosixPath("/srv/www"), {"/home/u": "~"}, case_sensitive=True) is None


def test_query_path_under_home(tmp_path: Path) -> None:
    home = tmp_path / "home"
    cwd = home / "a" / "b" / "c"
    cwd.mkdir(parents=True)

    fact = query_path(cwd, home=home)

    assert fact == PathFact(
        absolute=str(cwd.resolve()),
        home_relative=str(Path(HOME_MARKER, "a", "b", "c")),
    )
    assert fact.display == fact.home_relative


def test_query_path_outside_home(tmp_path: Path) -> None:
    home = tmp_path / "home"
    home.mkdir()
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()

    fact = query_path(elsewhere, home=home)

    assert fact is not None
    assert fact.home_relative is None
    assert fact.display == str(elsewhere.resolve())


def test_query_path_reads_home_from_environ(tmp_path: Path) -> None:
    home = tmp_path / "home"
    home.mkdir()

    fact = query_path(home, environ={"HOME": str(home)})

    assert fact is not None
    assert fact.home_relative == HOME_MARKER


def test_query_path_missing_cwd_is_absent(monkeypatch: pytest.MonkeyPatch) -> None:
    def _raise() -> Path:
        raise FileNotFoundError("deleted")

    monkeypatch.setattr(Path, "cwd", staticmethod(_raise))

    assert query_path() is None
