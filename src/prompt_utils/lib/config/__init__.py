"""Configuration discovery and parsing helpers."""

from prompt_utils.lib.config.settings import (
    SEGMENT_NAMES,
    DurationConfig,
    GitConfig,
    PromptConfig,
    PromptUtilsConfig,
    load_config,
    parse_segments,
    resolve_config_path,
)

__all__ = [
    "SEGMENT_NAMES",
    "DurationConfig",
    "GitConfig",
    "PromptConfig",
    "PromptUtilsConfig",
    "load_config",
    "parse_segments",
    "resolve_config_path",
]
