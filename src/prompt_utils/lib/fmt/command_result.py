"""Success, failure and signal indicators for the previous command."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from prompt_utils.lib.env.command_result import CommandResult, Duration, signal_name
from prompt_utils.lib.fmt.duration import DEFAULT_DURATION_STYLE, format_duration
from prompt_utils.lib.segment import Segment, SegmentBuilder
from prompt_utils.lib.styling import Color4Bit, StyleAttributes


class When(StrEnum):
    """When to show the numeric exit code or signal next to the symbol."""

    NEVER = "never"
    ON_ERROR = "on_error"
    ALWAYS = "always"


@dataclass(frozen=True, slots=True)
class ResultSymbols:
    success: str = "✔"
    failure: str = "✘"
    signal: str = "⚡"


@dataclass(frozen=True, slots=True)
class ResultStyles:
    success: StyleAttributes = StyleAttributes(foreground=Color4Bit.BRIGHT_GREEN)
    failure: StyleAttributes = StyleAttributes(foreground=Color4Bit.BRIGHT_RED)
    signal: StyleAttributes = StyleAttributes(foreground=Color4Bit.BRIGHT_MAGENTA, bold=True)
    duration: StyleAttributes = DEFAULT_DURATION_STYLE


DEFAULT_SYMBOLS = ResultSymbols()
DEFAULT_STYLES = ResultStyles()


def _indicator(
    result: CommandResult,
    *,
    symbols: ResultSymbols,
    styles: ResultStyles,
    show_code: When,
) -> tuple[str, StyleAttributes]:
    if result.signal is not None:
        if show_code == When.NEVER:
            return symbols.signal, styles.signal
        return f"{symbols.signal} {signal_name(result.signal) or result.signal}", styles.signal

    if result.exit_code == 0:
        if show_code == When.ALWAYS:
            return f"{symbols.success} 0", styles.success
        return symbols.success, styles.success

    if show_code == When.NEVER:
        return symbols.failure, styles.failure
    return f"{symbols.failure} {result.exit_code}", styles.failure


def format_command_result(
    result: CommandResult,
    *,
    symbols: ResultSymbols = DEFAULT_SYMBOLS,
    styles: ResultStyles = DEFAULT_STYLES,
    show_code: When = When.ON_ERROR,
    min_duration: Duration | None = None,
) -> Segment:
    """Render exactly one of the success, failure or signal indicators.

    When `min_duration` is given, the measured duration is appended if it
    reaches that threshold.
    """

    text, style = _indicator(result, symbols=symbols, styles=styles, show_code=show_code)
    builder = SegmentBuilder().add(text, style)
    if min_duration is not None:
        elapsed = format_duration(result.duration, min_duration=min_duration, style=styles.duration)
        if elapsed:
            builder.add(" ").add(elapsed.text, styles.duration)
    return builder.build()
