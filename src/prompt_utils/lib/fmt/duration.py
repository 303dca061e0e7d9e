"""Compact, unit-adaptive rendering of command durations."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from enum import StrEnum

from prompt_utils.lib.env.command_result import NANOS_PER_MILLI, Duration, HumanDuration
from prompt_utils.lib.segment import EMPTY_SEGMENT, Segment
from prompt_utils.lib.styling import Color4Bit, StyleAttributes

DEFAULT_MIN_DURATION = Duration(NANOS_PER_MILLI)
DEFAULT_DURATION_STYLE = StyleAttributes(foreground=Color4Bit.DARK_YELLOW)

# Finer units than this are never shown in a prompt.
DISPLAY_PRECISION = "ms"

type Units = Sequence[tuple[int, str]]


class DurationLayout(StrEnum):
    """Which units of a duration are shown."""

    COMPACT = "compact"
    NONZERO = "nonzero"
    SKIP_HIGH_ZEROS = "skip_high_zeros"
    SKIP_LOW_ZEROS = "skip_low_zeros"


def _join(units: Units) -> str:
    return " ".join(f"{value}{suffix}" for value, suffix in units)


def duration_text(duration: Duration, *, max_units: int = 2) -> str:
    """Render `duration` with up to `max_units` units, starting at the coarsest.

    Zero units inside the window are dropped. A duration with no whole
    millisecond renders as an empty string.

    >>> duration_text(Duration.from_milliseconds(1500))
    '1s 500ms'
    >>> duration_text(Duration.from_seconds(3661))
    '1h 1m'
    """

    if max_units < 1:
        raise ValueError(f"max_units must be at least 1, got {max_units}.")
    units = HumanDuration.from_duration(duration).units(DISPLAY_PRECISION)
    first = next((index for index, (value, _) in enumerate(units) if value), None)
    if first is None:
        return ""
    return _join([unit for unit in units[first : first + max_units] if unit[0]])


def nonzero_text(human: HumanDuration, *, precision: str = "ns") -> str:
    """Render every non-zero unit.

    >>> nonzero_text(HumanDuration(hours=1, seconds=5))
    '1h 5s'
    """

    return _join([unit for unit in human.units(precision) if unit[0]])


def skip_high_zeros_text(human: HumanDuration, *, precision: str = "ns") -> str:
    """Render from the coarsest non-zero unit down to `precision`.

    >>> skip_high_zeros_text(HumanDuration(minutes=2, milliseconds=7), precision="ms")
    '2m 0s 7ms'
    """

    units = human.units(precision)
    first = next((index for index, (value, _) in enumerate(units) if value), len(units))
    return _join(units[first:])


def skip_low_zeros_text(human: HumanDuration, *, precision: str = "ns") -> str:
    """Render from days down to the finest non-zero unit.

    >>> skip_low_zeros_text(HumanDuration(hours=3))
    '0d 3h'
    """

    units = human.units(precision)
    last = max((index + 1 for index, (value, _) in enumerate(units) if value), default=0)
    return _join(units[:last])


_LAYOUT_RENDERERS: dict[DurationLayout, Callable[..., str]] = {
    DurationLayout.NONZERO: nonzero_text,
    DurationLayout.SKIP_HIGH_ZEROS: skip_high_zeros_text,
    DurationLayout.SKIP_LOW_ZEROS: skip_low_zeros_text,
}


def format_duration(
    duration: Duration,
    *,
    min_duration: Duration = DEFAULT_MIN_DURATION,
    style: StyleAttributes = DEFAULT_DURATION_STYLE,
    max_units: int = 2,
    layout: DurationLayout = DurationLayout.COMPACT,
) -> Segment:
    """Render `duration`, or nothing at all when it is below `min_duration`.

    Every layout stops at milliseconds, so a duration shorter than one
    millisecond renders nothing whatever the threshold.
    """

    if duration < min_duration:
        return EMPTY_SEGMENT
    if layout == DurationLayout.COMPACT:
        text = duration_text(duration, max_units=max_units)
    else:
        human = HumanDuration.from_duration(duration)
        text = _LAYOUT_RENDERERS[layout](human, precision=DISPLAY_PRECISION)
    return Segment.of(text, style)
