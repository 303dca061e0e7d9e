"""Prompt assembly from a per-render fact cache."""

from __future__ import annotations

from pathlib import Path

import pytest

from prompt_utils.lib import render as render_module
from prompt_utils.lib.config.settings import DurationConfig, GitConfig, PromptConfig, PromptUtilsConfig
from prompt_utils.lib.env.access_rights import Elevation, ElevationState
from prompt_utils.lib.env.command_result import Duration
from prompt_utils.lib.env.git import ChangeSummary, RepoStatus
from prompt_utils.lib.fmt.duration import DurationLayout
from prompt_utils.lib.fmt.git import GitGlyphs, GitLayout
from prompt_utils.lib.fmt.path import PathLayout
from prompt_utils.lib.render import SEGMENT_RENDERERS, RenderContext, render_prompt
from prompt_utils.lib.styling import Color4Bit, StyleAttributes
from prompt_utils.lib.writers import AnsiWriter, PlainWriter


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    home = tmp_path / "home"
    cwd = home / "projects" / "demo"
    cwd.mkdir(parents=True)
    return cwd


def _context(workdir: Path, **kwargs: object) -> RenderContext:
    environ = {"HOME": str(workdir.parents[1])}
    return RenderContext(cwd=workdir, environ=environ, **kwargs)


def test_segment_renderers_cover_every_segment_name() -> None:
    assert tuple(SEGMENT_RENDERERS) == PromptUtilsConfig().prompt.segments


def test_render_prompt_skips_empty_segments(workdir: Path) -> None:
    context = _context(workdir, exit_code=1, duration=Duration.from_milliseconds(1500))

    line = render_prompt(
        context,
        ["interpreter", "path", "duration", "status"],
        PlainWriter(),
    )

    assert line == "~/projects/demo 1s 500ms ✘ 1"


def test_render_prompt_uses_separator_and_order(workdir: Path) -> None:
    context = _context(workdir)

    line = render_prompt(context, ["status", "path"], PlainWriter(), separator=" :: ")

    assert line == "✔ :: ~/projects/demo"


def test_path_width_from_context_overrides_config(workdir: Path) -> None:
    context = _context(workdir, path_width=8)

    assert render_prompt(context, ["path"], PlainWriter()) == "…/demo"


def test_duration_threshold_from_config(workdir: Path) -> None:
    config = PromptUtilsConfig(duration=DurationConfig(min_ms=2000))
    context = _context(workdir, duration=Duration.from_milliseconds(1500), config=config)

    assert render_prompt(context, ["duration"], PlainWriter()) == ""


def test_configured_style_reaches_writer(workdir: Path) -> None:
    config = PromptUtilsConfig(styles={"success": StyleAttributes(underline=True)})
    context = _context(workdir, config=config)

    line = render_prompt(context, ["status"], AnsiWriter())

    expected_style = StyleAttributes(foreground=Color4Bit.BRIGHT_GREEN, underline=True)
    assert line == AnsiWriter().render(expected_style, "✔")


def test_facts_are_queried_once_per_context(
    monkeypatch: pytest.MonkeyPatch,
    workdir: Path,
) -> None:
    calls: list[str] = []

    def _fake_repo_status(*args: object, **kwargs: object) -> RepoStatus:
        calls.append("git")
        return RepoStatus(root=str(workdir), branch="main", staged=1)

    def _fake_elevation() -> Elevation:
        calls.append("elevation")
        return Elevation(state=ElevationState.ELEVATED)

    monkeypatch.setattr(render_module, "query_repo_status", _fake_repo_status)
    monkeypatch.setattr(render_module, "query_elevation", _fake_elevation)
    context = _context(workdir)

    first = render_prompt(context, ["elevation", "git", "git"], PlainWriter())
    second = render_prompt(context, ["git", "elevation"], PlainWriter())

    head = f"{GitGlyphs().branch}main +1"
    assert first == f"# {head} {head}"
    assert second == f"{head} #"
    assert sorted(calls) == ["elevation", "git"]


def test_absent_repository_renders_nothing(
    monkeypatch: pytest.MonkeyPatch,
    workdir: Path,
) -> None:
    monkeypatch.setattr(render_module, "query_repo_status", lambda *args, **kwargs: None)

    assert render_prompt(_context(workdir), ["git"], PlainWriter()) == ""


def test_unknown_segment_name_raises(workdir: Path) -> None:
    with pytest.raises(KeyError):
        render_prompt(_context(workdir), ["clock"], PlainWriter())


def test_configured_layouts_reach_formatters(
    monkeypatch: pytest.MonkeyPatch,
    workdir: Path,
) -> None:
    status = RepoStatus(
        root=str(workdir),
        branch="main",
        upstream="origin/main",
        unstaged=1,
        working_tree=ChangeSummary(deleted=1),
    )
    monkeypatch.setattr(render_module, "query_repo_status", lambda *args, **kwargs: status)
    config = PromptUtilsConfig(
        prompt=PromptConfig(path_layout=PathLayout.SHORT, path_separator=":"),
        git=GitConfig(layout=GitLayout.DETAILED, show_in_sync=True),
        duration=DurationConfig(layout=DurationLayout.NONZERO),
    )
    context = _context(workdir, duration=Duration.from_seconds(61), config=config)

    line = render_prompt(context, ["path", "git", "duration"], PlainWriter())

    assert line == f"~:…:demo {GitGlyphs().branch}main ≡ | -1 1m 1s"
