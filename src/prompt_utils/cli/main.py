"""Cyclopts CLI entry point for prompt-utils."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Literal

import structlog
from cyclopts import App, Parameter

from prompt_utils import __version__
from prompt_utils.cli.output import emit_facts
from prompt_utils.lib.config.settings import load_config, parse_segments
from prompt_utils.lib.env.command_result import CommandResult, Duration
from prompt_utils.lib.env.git import ScanMode
from prompt_utils.lib.render import RenderContext, render_prompt
from prompt_utils.lib.writers import writer_for

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = structlog.get_logger(__name__)

CONFIG_ERROR_EXIT_CODE = 2

app = App(
    name="prompt-utils",
    help="Render shell prompt segments from the current environment.",
    version=__version__,
    help_formatter="plain",
)


def _resolve_cwd(cwd: str | None) -> Path | None:
    return Path(cwd).expanduser() if cwd is not None else None


@app.command(name="render")
def render(
    status: Annotated[
        int,
        Parameter(name="--status", help="Exit status of the previous command, as in $?."),
    ] = 0,
    signal: Annotated[
        int | None,
        Parameter(name="--signal", help="Signal that terminated the previous command."),
    ] = None,
    duration_ms: Annotated[
        float | None,
        Parameter(name="--duration-ms", help="Measured duration of the previous command."),
    ] = None,
    width: Annotated[
        int | None,
        Parameter(name="--width", help="Maximum display columns for the path segment."),
    ] = None,
    color: Annotated[
        Literal["auto", "always", "never"] | None,
        Parameter(name="--color", help="Emit ANSI styling: auto, always, or never."),
    ] = None,
    segments: Annotated[
        str | None,
        Parameter(name="--segments", help="Comma-separated segment names, in order."),
    ] = None,
    git_mode: Annotated[
        Literal["full", "fast", "auto"] | None,
        Parameter(name="--git-mode", help="Untracked-file scanning: full, fast, or auto."),
    ] = None,
    cwd: Annotated[
        str | None,
        Parameter(name="--cwd", help="Directory to describe instead of the current one."),
    ] = None,
) -> None:
    """Print one prompt line."""

    config = load_config()
    if git_mode is not None:
        config = replace(config, git=replace(config.git, mode=ScanMode(git_mode)))
    names = parse_segments(segments, source="--segments") if segments else config.prompt.segments

    duration = Duration.from_milliseconds(duration_ms) if duration_ms is not None else Duration()
    if signal is not None:
        result = CommandResult(exit_code=status, signal=signal, duration=duration)
    else:
        result = CommandResult.from_shell_status(status, duration)

    context = RenderContext(
        cwd=_resolve_cwd(cwd),
        exit_code=result.exit_code,
        signal=result.signal,
        duration=result.duration,
        path_width=width,
        config=config,
    )
    writer = writer_for(color or config.prompt.color, stream=sys.stdout)
    print(render_prompt(context, names, writer, separator=config.prompt.separator))


def collect_facts(context: RenderContext) -> dict[str, object]:
    return {
        "elevation": context.elevation,
        "session": context.session,
        "interpreter": context.interpreter,
        "path": context.path,
        "repo_status": context.repo_status,
    }


@app.command(name="facts")
def facts(
    json_mode: Annotated[
        bool,
        Parameter(name="--json", help="Emit facts as JSON."),
    ] = False,
    cwd: Annotated[
        str | None,
        Parameter(name="--cwd", help="Directory to describe instead of the current one."),
    ] = None,
) -> None:
    """Print every collected environment fact."""

    config = load_config()
    context = RenderContext(cwd=_resolve_cwd(cwd), config=config)
    emit_facts(collect_facts(context), json_mode=json_mode)


def _extract_verbosity(argv: Sequence[str]) -> tuple[list[str], int]:
    verbosity = 0
    cleaned: list[str] = []
    for arg in argv:
        if arg in {"--verbose", "-v"}:
            verbosity += 1
            continue
        if arg.startswith("-v") and set(arg[1:]) == {"v"}:
            verbosity += len(arg) - 1
            continue
        cleaned.append(arg)
    return cleaned, verbosity


def _error_message(exc: Exception) -> str:
    message = str(exc).strip()
    if message:
        return message
    return exc.__class__.__name__


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point used by `prompt-utils` and `python -m prompt_utils`."""

    from prompt_utils.lib.logging import configure_logging

    args, verbosity = _extract_verbosity(sys.argv[1:] if argv is None else argv)

    # Configure logging early so structlog output goes to stderr, not stdout.
    configure_logging(json_mode="--json" in args, verbosity=verbosity)

    try:
        app(args)
    except ValueError as exc:
        logger.debug("Command failed.", error=str(exc))
        print(f"error: {_error_message(exc)}", file=sys.stderr)
        raise SystemExit(CONFIG_ERROR_EXIT_CODE) from None
