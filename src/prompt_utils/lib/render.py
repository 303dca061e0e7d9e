"""Assemble requested segments into one prompt line.

A `RenderContext` holds the inputs of a single render and memoises every fact
it collects, so each OS or git query runs at most once per render no matter
how many segments consume it.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path

import structlog

from prompt_utils.lib.config.settings import PromptUtilsConfig
from prompt_utils.lib.env.access_rights import Elevation, query_elevation
from prompt_utils.lib.env.command_result import NANOS_PER_MILLI, CommandResult, Duration
from prompt_utils.lib.env.git import RepoStatus, query_repo_status
from prompt_utils.lib.env.path import PathFact, query_path
from prompt_utils.lib.env.python import Interpreter, query_interpreter
from prompt_utils.lib.env.session import Session, query_session
from prompt_utils.lib.fmt import command_result as result_fmt
from prompt_utils.lib.fmt import git as git_fmt
from prompt_utils.lib.fmt import path as path_fmt
from prompt_utils.lib.fmt.duration import DEFAULT_DURATION_STYLE, format_duration
from prompt_utils.lib.fmt.python import DEFAULT_INTERPRETER_STYLE, format_interpreter
from prompt_utils.lib.fmt.session import (
    DEFAULT_ELEVATION_STYLE,
    DEFAULT_SESSION_STYLE,
    format_elevation,
    format_session,
)
from prompt_utils.lib.segment import EMPTY_SEGMENT, Segment
from prompt_utils.lib.writers import Writer

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RenderContext:
    """Inputs of one prompt render plus lazily collected facts."""

    cwd: Path | None = None
    exit_code: int = 0
    signal: int | None = None
    duration: Duration = Duration()
    path_width: int | None = None
    config: PromptUtilsConfig = field(default_factory=PromptUtilsConfig)
    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))

    @cached_property
    def elevation(self) -> Elevation:
        return query_elevation()

    @cached_property
    def session(self) -> Session:
        return query_session(self.environ)

    @cached_property
    def interpreter(self) -> Interpreter | None:
        return query_interpreter(self.environ)

    @cached_property
    def path(self) -> PathFact | None:
        return query_path(self.cwd, environ=self.environ)

    @cached_property
    def repo_status(self) -> RepoStatus | None:
        git = self.config.git
        return query_repo_status(
            self.cwd,
            scan_mode=git.mode,
            max_depth=git.max_depth,
            auto_fast_index_bytes=git.auto_fast_index_bytes,
        )

    @cached_property
    def command_result(self) -> CommandResult:
        return CommandResult(exit_code=self.exit_code, signal=self.signal, duration=self.duration)


def _elevation_segment(context: RenderContext) -> Segment:
    style = context.config.style("elevation", DEFAULT_ELEVATION_STYLE)
    return format_elevation(context.elevation, style=style)


def _session_segment(context: RenderContext) -> Segment:
    style = context.config.style("session", DEFAULT_SESSION_STYLE)
    return format_session(context.session, style=style)


def _interpreter_segment(context: RenderContext) -> Segment:
    interpreter = context.interpreter
    if interpreter is None:
        return EMPTY_SEGMENT
    style = context.config.style("interpreter", DEFAULT_INTERPRETER_STYLE)
    return format_interpreter(interpreter, style=style)


def _path_segment(context: RenderContext) -> Segment:
    fact = context.path
    if fact is None:
        return EMPTY_SEGMENT
    config = context.config
    width = context.path_width if context.path_width is not None else config.prompt.path_width
    return path_fmt.format_path(
        fact,
        max_width=width,
        layout=config.prompt.path_layout,
        separator=config.prompt.path_separator,
        style=config.style("path", path_fmt.DEFAULT_PATH_STYLE),
        ellipsis_style=config.style("ellipsis", path_fmt.DEFAULT_ELLIPSIS_STYLE),
    )


def _git_styles(config: PromptUtilsConfig) -> git_fmt.GitStyles:
    defaults = git_fmt.DEFAULT_STYLES
    return git_fmt.GitStyles(
        **{
            name: config.style(f"git_{name}", getattr(defaults, name))
            for name in ("head", "ahead", "behind", "in_sync", *git_fmt.CATEGORY_ORDER)
        }
    )


def _git_segment(context: RenderContext) -> Segment:
    status = context.repo_status
    if status is None:
        return EMPTY_SEGMENT
    config = context.config
    return git_fmt.format_git(
        status,
        styles=_git_styles(config),
        layout=config.git.layout,
        show_in_sync=config.git.show_in_sync,
    )


def _duration_segment(context: RenderContext) -> Segment:
    config = context.config
    return format_duration(
        context.command_result.duration,
        min_duration=Duration(config.duration.min_ms * NANOS_PER_MILLI),
        style=config.style("duration", DEFAULT_DURATION_STYLE),
        layout=config.duration.layout,
    )


def _status_segment(context: RenderContext) -> Segment:
    config = context.config
    defaults = result_fmt.DEFAULT_STYLES
    styles = result_fmt.ResultStyles(
        success=config.style("success", defaults.success),
        failure=config.style("failure", defaults.failure),
        signal=config.style("signal", defaults.signal),
        duration=config.style("duration", defaults.duration),
    )
    return result_fmt.format_command_result(
        context.command_result,
        styles=styles,
        show_code=config.prompt.show_code,
    )


SEGMENT_RENDERERS: dict[str, Callable[[RenderContext], Segment]] = {
    "elevation": _elevation_segment,
    "session": _session_segment,
    "interpreter": _interpreter_segment,
    "path": _path_segment,
    "git": _git_segment,
    "duration": _duration_segment,
    "status": _status_segment,
}


def build_segment(context: RenderContext, name: str) -> Segment:
    """Render one named segment; an unknown name raises `KeyError`."""

    return SEGMENT_RENDERERS[name](context)


def render_prompt(
    context: RenderContext,
    segments: Iterable[str],
    writer: Writer,
    separator: str = " ",
) -> str:
    """Render `segments` in order, skipping empty ones, joined by `separator`."""

    rendered: list[str] = []
    for name in segments:
        segment = build_segment(context, name)
        if not segment:
            logger.debug("Segment is empty.", segment=name)
            continue
        rendered.append(writer.render_segment(segment))
    return separator.join(rendered)
