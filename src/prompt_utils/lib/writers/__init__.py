"""Writers turning styled fragments into output text."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Literal, Protocol, TextIO, runtime_checkable

from prompt_utils.lib.segment import Segment
from prompt_utils.lib.styling import StyleAttributes
from prompt_utils.lib.writers.ansi import AnsiWriter
from prompt_utils.lib.writers.plain import PlainWriter

ColorMode = Literal["auto", "always", "never"]
COLOR_MODES: frozenset[str] = frozenset({"auto", "always", "never"})


@runtime_checkable
class Writer(Protocol):
    """Rendering capability shared by the plain and ANSI writers."""

    def render(self, style: StyleAttributes, text: str) -> str: ...

    def render_segment(self, segment: Segment) -> str: ...


def _stream_is_tty(stream: TextIO | None) -> bool:
    if stream is None:
        return False
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except (OSError, ValueError):
        return False


def writer_for(
    mode: ColorMode,
    *,
    stream: TextIO | None = None,
    environ: Mapping[str, str] | None = None,
) -> Writer:
    """Pick a writer for `mode`.

    `auto` styles only when `stream` is a terminal and `NO_COLOR` is unset.
    """

    if mode == "always":
        return AnsiWriter()
    if mode == "never":
        return PlainWriter()
    env = os.environ if environ is None else environ
    if env.get("NO_COLOR"):
        return PlainWriter()
    return AnsiWriter() if _stream_is_tty(stream) else PlainWriter()


__all__ = ["COLOR_MODES", "AnsiWriter", "ColorMode", "PlainWriter", "Writer", "writer_for"]
