"""Indicators for elevated privileges and remote sessions."""

from __future__ import annotations

from prompt_utils.lib.env.access_rights import Elevation
from prompt_utils.lib.env.session import Session
from prompt_utils.lib.segment import EMPTY_SEGMENT, Segment
from prompt_utils.lib.styling import Color4Bit, StyleAttributes

DEFAULT_ELEVATION_SYMBOL = "#"
DEFAULT_ELEVATION_STYLE = StyleAttributes(foreground=Color4Bit.BRIGHT_RED, bold=True)
DEFAULT_SESSION_STYLE = StyleAttributes(foreground=Color4Bit.BRIGHT_YELLOW)


def format_elevation(
    elevation: Elevation,
    *,
    symbol: str = DEFAULT_ELEVATION_SYMBOL,
    style: StyleAttributes = DEFAULT_ELEVATION_STYLE,
) -> Segment:
    """Show `symbol` only for a confirmed elevated process; unknown shows nothing."""

    if not elevation.is_elevated:
        return EMPTY_SEGMENT
    return Segment.of(symbol, style)


def format_session(
    session: Session,
    *,
    style: StyleAttributes = DEFAULT_SESSION_STYLE,
    always: bool = False,
) -> Segment:
    """Render `user@host` for remote sessions (or for every session with `always`)."""

    if not (session.is_remote or always):
        return EMPTY_SEGMENT
    if session.user and session.host:
        return Segment.of(f"{session.user}@{session.host}", style)
    return Segment.of(session.host or session.user or "", style)
