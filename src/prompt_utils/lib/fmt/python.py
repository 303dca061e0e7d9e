"""Active virtual environment indicator."""

from __future__ import annotations

from prompt_utils.lib.env.python import Interpreter
from prompt_utils.lib.segment import EMPTY_SEGMENT, Segment
from prompt_utils.lib.styling import Color4Bit, StyleAttributes

DEFAULT_INTERPRETER_STYLE = StyleAttributes(foreground=Color4Bit.DARK_GREEN)


def format_interpreter(
    interpreter: Interpreter,
    *,
    style: StyleAttributes = DEFAULT_INTERPRETER_STYLE,
) -> Segment:
    if not interpreter.active_env_name:
        return EMPTY_SEGMENT
    return Segment.of(f"({interpreter.active_env_name})", style)
