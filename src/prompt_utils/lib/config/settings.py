"""User-level prompt configuration loader."""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import StrEnum
from pathlib import Path
from typing import cast

from prompt_utils.lib.env.git import DEFAULT_AUTO_FAST_INDEX_BYTES, ScanMode
from prompt_utils.lib.fmt.command_result import When
from prompt_utils.lib.fmt.duration import DurationLayout
from prompt_utils.lib.fmt.git import GitLayout
from prompt_utils.lib.fmt.path import PathLayout
from prompt_utils.lib.styling import StyleAttributes, parse_style
from prompt_utils.lib.writers import COLOR_MODES, ColorMode

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PROMPT_UTILS_CONFIG"
CONFIG_DIR_NAME = "prompt-utils"
CONFIG_FILE_NAME = "config.toml"

SEGMENT_NAMES: tuple[str, ...] = (
    "elevation",
    "session",
    "interpreter",
    "path",
    "git",
    "duration",
    "status",
)

STYLE_ROLES: frozenset[str] = frozenset(
    {
        "elevation",
        "session",
        "interpreter",
        "path",
        "ellipsis",
        "duration",
        "success",
        "failure",
        "signal",
        "git_head",
        "git_ahead",
        "git_behind",
        "git_in_sync",
        "git_staged",
        "git_unstaged",
        "git_untracked",
        "git_conflicted",
        "git_stashed",
    }
)


@dataclass(frozen=True, slots=True)
class PromptConfig:
    """Which segments to render and how to join them."""

    segments: tuple[str, ...] = SEGMENT_NAMES
    separator: str = " "
    color: ColorMode = "auto"
    path_width: int | None = None
    path_layout: PathLayout = PathLayout.TRUNCATE
    path_separator: str | None = None
    show_code: When = When.ON_ERROR


@dataclass(frozen=True, slots=True)
class GitConfig:
    mode: ScanMode = ScanMode.AUTO
    auto_fast_index_bytes: int = DEFAULT_AUTO_FAST_INDEX_BYTES
    max_depth: int | None = None
    layout: GitLayout = GitLayout.COMPACT
    show_in_sync: bool = False


@dataclass(frozen=True, slots=True)
class DurationConfig:
    min_ms: int = 1
    layout: DurationLayout = DurationLayout.COMPACT


@dataclass(frozen=True, slots=True)
class PromptUtilsConfig:
    """Resolved configuration for prompt rendering."""

    prompt: PromptConfig = PromptConfig()
    git: GitConfig = GitConfig()
    duration: DurationConfig = DurationConfig()
    styles: dict[str, StyleAttributes] = field(default_factory=dict)

    def style(self, role: str, default: StyleAttributes) -> StyleAttributes:
        """Return the configured style for `role`, layered over `default`."""

        override = self.styles.get(role)
        if override is None:
            return default
        return default | override


_ENV_OVERRIDE_MAP: dict[str, tuple[str, str]] = {
    "PROMPT_UTILS_COLOR": ("prompt", "color"),
    "PROMPT_UTILS_PATH_WIDTH": ("prompt", "path_width"),
    "PROMPT_UTILS_SEGMENTS": ("prompt", "segments"),
    "PROMPT_UTILS_GIT_MODE": ("git", "mode"),
    "PROMPT_UTILS_MIN_DURATION_MS": ("duration", "min_ms"),
}


def resolve_config_path(environ: Mapping[str, str] | None = None) -> Path:
    """Return the config file location.

    Precedence:
    1. `PROMPT_UTILS_CONFIG`.
    2. `$XDG_CONFIG_HOME/prompt-utils/config.toml`.
    3. `~/.config/prompt-utils/config.toml`.
    """

    env = os.environ if environ is None else environ
    explicit = env.get(CONFIG_ENV_VAR)
    if explicit:
        return Path(explicit).expanduser()
    xdg_home = env.get("XDG_CONFIG_HOME")
    base = Path(xdg_home).expanduser() if xdg_home else Path.home() / ".config"
    return base / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def _type_error(source: str, expected: str, raw_value: object) -> ValueError:
    return ValueError(
        f"Invalid value for '{source}': expected {expected}, got "
        f"{type(raw_value).__name__} ({raw_value!r})."
    )


def _coerce_int(*, raw_value: object, source: str, minimum: int = 0) -> int:
    if isinstance(raw_value, bool) or not isinstance(raw_value, int):
        raise _type_error(source, "int", raw_value)
    if raw_value < minimum:
        raise ValueError(
            f"Invalid value for '{source}': expected int >= {minimum}, got {raw_value!r}."
        )
    return raw_value


def _coerce_str(*, raw_value: object, source: str, allow_empty: bool = False) -> str:
    if not isinstance(raw_value, str):
        raise _type_error(source, "str", raw_value)
    if not allow_empty and not raw_value.strip():
        raise ValueError(f"Invalid value for '{source}': expected non-empty string.")
    return raw_value


def _coerce_bool(*, raw_value: object, source: str) -> bool:
    if not isinstance(raw_value, bool):
        raise _type_error(source, "bool", raw_value)
    return raw_value


def _coerce_color(*, raw_value: object, source: str) -> ColorMode:
    normalized = _coerce_str(raw_value=raw_value, source=source).strip().lower()
    if normalized not in COLOR_MODES:
        raise ValueError(
            f"Invalid value for '{source}': expected one of {sorted(COLOR_MODES)}, "
            f"got {raw_value!r}."
        )
    return cast("ColorMode", normalized)


def _coerce_choice[E: StrEnum](*, raw_value: object, source: str, enum: type[E]) -> E:
    normalized = _coerce_str(raw_value=raw_value, source=source).strip().lower()
    try:
        return enum(normalized)
    except ValueError as error:
        raise ValueError(
            f"Invalid value for '{source}': expected one of "
            f"{[member.value for member in enum]}, got {raw_value!r}."
        ) from error


def _coerce_segments(*, raw_value: object, source: str) -> tuple[str, ...]:
    if not isinstance(raw_value, list):
        raise _type_error(source, "array[str]", raw_value)
    parsed: list[str] = []
    for item in cast("list[object]", raw_value):
        if not isinstance(item, str):
            raise _type_error(source, "array[str]", item)
        normalized = item.strip().lower()
        if normalized not in SEGMENT_NAMES:
            raise ValueError(
                f"Invalid value for '{source}': unknown segment {item!r}; expected one of "
                f"{list(SEGMENT_NAMES)}."
            )
        parsed.append(normalized)
    return tuple(parsed)


def parse_segments(text: str, *, source: str) -> tuple[str, ...]:
    """Parse a comma-separated segment list such as `"path,git,status"`."""

    names = [name for name in text.split(",") if name.strip()]
    return _coerce_segments(raw_value=names, source=source)


def _coerce_path_width(*, raw_value: object, source: str) -> int | None:
    width = _coerce_int(raw_value=raw_value, source=source)
    # Zero disables truncation.
    return width or None


def _table(raw_value: object, source: str) -> dict[str, object]:
    if not isinstance(raw_value, dict):
        raise ValueError(f"Invalid value for '{source}': expected table.")
    return cast("dict[str, object]", raw_value)


def _coerce_prompt_config(*, raw_value: object, source: str) -> PromptConfig:
    config = PromptConfig()
    for key, value in _table(raw_value, source).items():
        key_source = f"{source}.{key}"
        if key == "segments":
            config = replace(config, segments=_coerce_segments(raw_value=value, source=key_source))
        elif key == "separator":
            config = replace(
                config,
                separator=_coerce_str(raw_value=value, source=key_source, allow_empty=True),
            )
        elif key == "color":
            config = replace(config, color=_coerce_color(raw_value=value, source=key_source))
        elif key == "path_width":
            config = replace(
                config, path_width=_coerce_path_width(raw_value=value, source=key_source)
            )
        elif key == "path_layout":
            config = replace(
                config,
                path_layout=_coerce_choice(raw_value=value, source=key_source, enum=PathLayout),
            )
        elif key == "path_separator":
            config = replace(
                config,
                path_separator=_coerce_str(raw_value=value, source=key_source, allow_empty=True),
            )
        elif key == "show_code":
            config = replace(
                config,
                show_code=_coerce_choice(raw_value=value, source=key_source, enum=When),
            )
        else:
            logger.warning("Ignoring unknown prompt-utils config key '%s'.", key_source)
    return config


def _coerce_git_config(*, raw_value: object, source: str) -> GitConfig:
    config = GitConfig()
    for key, value in _table(raw_value, source).items():
        key_source = f"{source}.{key}"
        if key == "mode":
            config = replace(
                config,
                mode=_coerce_choice(raw_value=value, source=key_source, enum=ScanMode),
            )
        elif key == "auto_fast_index_bytes":
            config = replace(
                config,
                auto_fast_index_bytes=_coerce_int(raw_value=value, source=key_source),
            )
        elif key == "max_depth":
            config = replace(config, max_depth=_coerce_int(raw_value=value, source=key_source))
        elif key == "layout":
            config = replace(
                config,
                layout=_coerce_choice(raw_value=value, source=key_source, enum=GitLayout),
            )
        elif key == "show_in_sync":
            config = replace(
                config, show_in_sync=_coerce_bool(raw_value=value, source=key_source)
            )
        else:
            logger.warning("Ignoring unknown prompt-utils config key '%s'.", key_source)
    return config


def _coerce_duration_config(*, raw_value: object, source: str) -> DurationConfig:
    config = DurationConfig()
    for key, value in _table(raw_value, source).items():
        key_source = f"{source}.{key}"
        if key == "min_ms":
            config = replace(config, min_ms=_coerce_int(raw_value=value, source=key_source))
        elif key == "layout":
            config = replace(
                config,
                layout=_coerce_choice(raw_value=value, source=key_source, enum=DurationLayout),
            )
        else:
            logger.warning("Ignoring unknown prompt-utils config key '%s'.", key_source)
    return config


def _coerce_styles(*, raw_value: object, source: str) -> dict[str, StyleAttributes]:
    styles: dict[str, StyleAttributes] = {}
    for key, value in _table(raw_value, source).items():
        key_source = f"{source}.{key}"
        if key not in STYLE_ROLES:
            logger.warning("Ignoring unknown prompt-utils config key '%s'.", key_source)
            continue
        text = _coerce_str(raw_value=value, source=key_source, allow_empty=True)
        try:
            styles[key] = parse_style(text)
        except ValueError as error:
            raise ValueError(f"Invalid value for '{key_source}': {error}") from error
    return styles


def _apply_toml_payload(config: PromptUtilsConfig, payload: dict[str, object]) -> PromptUtilsConfig:
    for key, raw_value in payload.items():
        if key == "prompt":
            config = replace(config, prompt=_coerce_prompt_config(raw_value=raw_value, source=key))
        elif key == "git":
            config = replace(config, git=_coerce_git_config(raw_value=raw_value, source=key))
        elif key == "duration":
            config = replace(
                config, duration=_coerce_duration_config(raw_value=raw_value, source=key)
            )
        elif key == "styles":
            config = replace(config, styles=_coerce_styles(raw_value=raw_value, source=key))
        else:
            logger.warning("Ignoring unknown prompt-utils config key '%s'.", key)
    return config


def _coerce_env_int(*, raw_value: str, env_name: str) -> int:
    try:
        value = int(raw_value.strip())
    except ValueError as error:
        raise ValueError(
            f"Invalid environment override '{env_name}': expected int, got {raw_value!r}."
        ) from error
    if value < 0:
        raise ValueError(
            f"Invalid environment override '{env_name}': expected int >= 0, got {raw_value!r}."
        )
    return value


def _apply_env_overrides(config: PromptUtilsConfig, environ: Mapping[str, str]) -> PromptUtilsConfig:
    for env_name, (section, field_name) in _ENV_OVERRIDE_MAP.items():
        raw_value = environ.get(env_name)
        if raw_value is None:
            continue

        if field_name == "color":
            value: object = _coerce_color(raw_value=raw_value, source=env_name)
        elif field_name == "path_width":
            value = _coerce_env_int(raw_value=raw_value, env_name=env_name) or None
        elif field_name == "segments":
            value = parse_segments(raw_value, source=env_name)
        elif field_name == "mode":
            value = _coerce_choice(raw_value=raw_value, source=env_name, enum=ScanMode)
        else:
            value = _coerce_env_int(raw_value=raw_value, env_name=env_name)

        section_value = getattr(config, section)
        config = replace(config, **{section: replace(section_value, **{field_name: value})})
    return config


def load_config(
    path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> PromptUtilsConfig:
    """Load the TOML config file, if present, and apply environment overrides.

    Raises `ValueError` for malformed TOML or invalid values.
    """

    env = os.environ if environ is None else environ
    config_path = path if path is not None else resolve_config_path(env)
    config = PromptUtilsConfig()
    if config_path.is_file():
        try:
            payload_obj = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as error:
            raise ValueError(f"Invalid config file '{config_path}': {error}") from error
        config = _apply_toml_payload(config, cast("dict[str, object]", payload_obj))

    return _apply_env_overrides(config, env)
