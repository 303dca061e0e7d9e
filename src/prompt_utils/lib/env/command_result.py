"""Exit status and elapsed time of the previous command.

Nothing here measures anything: the host shell times the command and passes
the result in.
"""

from __future__ import annotations

import signal as signal_module
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Literal

NANOS_PER_MICRO = 1_000
NANOS_PER_MILLI = 1_000_000
NANOS_PER_SECOND = 1_000_000_000

# Shells report a command killed by signal N as exit status 128 + N.
SHELL_SIGNAL_OFFSET = 128


@dataclass(frozen=True, slots=True, order=True)
class Duration:
    """A non-negative span of time with nanosecond resolution."""

    nanoseconds: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.nanoseconds, bool) or not isinstance(self.nanoseconds, int):
            raise TypeError(
                f"nanoseconds must be int, got {type(self.nanoseconds).__name__} "
                f"({self.nanoseconds!r})."
            )
        if self.nanoseconds < 0:
            raise ValueError(f"Duration must be non-negative, got {self.nanoseconds}ns.")

    @classmethod
    def from_seconds(cls, seconds: float) -> Duration:
        return cls(round(seconds * NANOS_PER_SECOND))

    @classmethod
    def from_milliseconds(cls, milliseconds: float) -> Duration:
        return cls(round(milliseconds * NANOS_PER_MILLI))

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> Duration:
        micros = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
        return cls(micros * NANOS_PER_MICRO)


@dataclass(frozen=True, slots=True)
class HumanDuration:
    """A duration broken down into calendar-free units."""

    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    milliseconds: int = 0
    microseconds: int = 0
    nanoseconds: int = 0

    @classmethod
    def from_duration(cls, duration: Duration) -> HumanDuration:
        micros, nanos = divmod(duration.nanoseconds, 1000)
        millis, micros = divmod(micros, 1000)
        secs, millis = divmod(millis, 1000)
        mins, secs = divmod(secs, 60)
        hours, mins = divmod(mins, 60)
        days, hours = divmod(hours, 24)
        return cls(days, hours, mins, secs, millis, micros, nanos)

    def units(self, precision: str = "ns") -> tuple[tuple[int, str], ...]:
        """Return `(value, suffix)` pairs from days down to `precision`.

        `precision` is one of the unit suffixes, for example `"ms"`.
        """

        units = (
            (self.days, "d"),
            (self.hours, "h"),
            (self.minutes, "m"),
            (self.seconds, "s"),
            (self.milliseconds, "ms"),
            (self.microseconds, "µs"),
            (self.nanoseconds, "ns"),
        )
        suffixes = [suffix for _, suffix in units]
        if precision not in suffixes:
            raise ValueError(f"Unknown duration unit {precision!r}; expected one of {suffixes}.")
        return units[: suffixes.index(precision) + 1]


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of the previous command.

    `signal` is set when the command was terminated by a signal; `exit_code`
    is then not meaningful and formatters ignore it.
    """

    exit_code: int = 0
    signal: int | None = None
    duration: Duration = field(default_factory=Duration)
    fact: Literal["command_result"] = "command_result"

    def __post_init__(self) -> None:
        if self.signal is not None and self.signal <= 0:
            raise ValueError(f"Signal number must be positive, got {self.signal}.")

    @property
    def is_success(self) -> bool:
        return self.signal is None and self.exit_code == 0

    @property
    def is_signaled(self) -> bool:
        return self.signal is not None

    @classmethod
    def from_shell_status(
        cls,
        status: int,
        duration: Duration | None = None,
    ) -> CommandResult:
        """Interpret a shell `$?`, where `128 + N` means killed by signal N."""

        duration = duration if duration is not None else Duration()
        signum = status - SHELL_SIGNAL_OFFSET
        if status > SHELL_SIGNAL_OFFSET and _is_known_signal(signum):
            return cls(exit_code=status, signal=signum, duration=duration)
        return cls(exit_code=status, duration=duration)

    @classmethod
    def from_returncode(
        cls,
        returncode: int,
        duration: Duration | None = None,
    ) -> CommandResult:
        """Interpret a `subprocess` return code, where `-N` means signal N."""

        duration = duration if duration is not None else Duration()
        if returncode < 0:
            return cls(exit_code=returncode, signal=-returncode, duration=duration)
        return cls(exit_code=returncode, duration=duration)


def _is_known_signal(signum: int) -> bool:
    try:
        signal_module.Signals(signum)
    except ValueError:
        return False
    return True


def signal_name(signum: int) -> str | None:
    """Return the conventional name (`SIGINT`) for `signum`, if the host knows it."""

    try:
        return signal_module.Signals(signum).name
    except ValueError:
        return None
