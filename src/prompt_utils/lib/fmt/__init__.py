"""Pure formatters turning one environment fact into a styled `Segment`."""

from prompt_utils.lib.fmt.command_result import ResultStyles, ResultSymbols, When, format_command_result
from prompt_utils.lib.fmt.duration import DurationLayout, duration_text, format_duration
from prompt_utils.lib.fmt.git import GitGlyphs, GitLayout, GitStyles, format_git
from prompt_utils.lib.fmt.path import PathLayout, format_path
from prompt_utils.lib.fmt.python import format_interpreter
from prompt_utils.lib.fmt.session import format_elevation, format_session

__all__ = [
    "DurationLayout",
    "GitGlyphs",
    "GitLayout",
    "GitStyles",
    "PathLayout",
    "ResultStyles",
    "ResultSymbols",
    "When",
    "duration_text",
    "format_command_result",
    "format_duration",
    "format_elevation",
    "format_git",
    "format_interpreter",
    "format_path",
    "format_session",
]
