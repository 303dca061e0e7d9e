"""Writer that encodes styles as ANSI SGR escape sequences."""

from __future__ import annotations

from prompt_utils.lib.segment import Segment
from prompt_utils.lib.styling import Ansi256, Color, Color4Bit, Rgb, StyleAttributes

ESC = "\x1b"
RESET = f"{ESC}[0m"

_FLAG_CODES: tuple[tuple[str, str], ...] = (
    ("bold", "1"),
    ("dim", "2"),
    ("italic", "3"),
    ("underline", "4"),
    ("blink", "5"),
    ("strike", "9"),
)


def _color_codes(color: Color, *, background: bool) -> list[str]:
    if isinstance(color, Color4Bit):
        if color.is_bright:
            prefix = "10" if background else "9"
        else:
            prefix = "4" if background else "3"
        return [f"{prefix}{color.base}"]
    selector = "48" if background else "38"
    if isinstance(color, Ansi256):
        return [selector, "5", str(color.code)]
    if isinstance(color, Rgb):
        return [selector, "2", str(color.red), str(color.green), str(color.blue)]
    raise TypeError(f"Unsupported color {color!r}.")


def sgr_parameters(style: StyleAttributes) -> list[str]:
    """Return the SGR parameters for every attribute `style` turns on.

    Unset and explicitly-false attributes contribute nothing: the writer always
    starts from a reset state, so "off" is already in effect.
    """

    params = [code for name, code in _FLAG_CODES if getattr(style, name) is True]
    if style.foreground is not None:
        params.extend(_color_codes(style.foreground, background=False))
    if style.background is not None:
        params.extend(_color_codes(style.background, background=True))
    return params


def _sequence(params: list[str]) -> str:
    return f"{ESC}[{';'.join(params)}m"


class AnsiWriter:
    """Render styled text with one combined escape sequence per style change."""

    def render(self, style: StyleAttributes, text: str) -> str:
        params = sgr_parameters(style)
        if not params or not text:
            return text
        return f"{_sequence(params)}{text}{RESET}"

    def render_segment(self, segment: Segment) -> str:
        parts: list[str] = []
        active: list[str] = []
        for fragment in segment:
            if not fragment.text:
                continue
            params = sgr_parameters(fragment.style)
            if params != active:
                if params:
                    # Folding the reset into the next sequence keeps it to one escape.
                    parts.append(_sequence(["0", *params] if active else params))
                else:
                    parts.append(RESET)
                active = params
            parts.append(fragment.text)
        if active:
            parts.append(RESET)
        return "".join(parts)
