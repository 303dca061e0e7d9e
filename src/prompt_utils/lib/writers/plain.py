"""Writer that discards styling."""

from __future__ import annotations

from prompt_utils.lib.segment import Segment
from prompt_utils.lib.styling import StyleAttributes


class PlainWriter:
    """Render text only; used for pipes, dumb terminals and `NO_COLOR`."""

    def render(self, style: StyleAttributes, text: str) -> str:
        _ = style
        return text

    def render_segment(self, segment: Segment) -> str:
        return segment.text
