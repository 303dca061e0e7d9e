"""Abstract text style attributes and their composition.

A `StyleAttributes` value only describes *what* a fragment should look like;
turning it into bytes is the job of a writer (see `prompt_utils.lib.writers`).
Every field is optional and `None` means "inherit whatever is already in
effect", so two attribute sets can be layered with `compose()`.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import IntEnum


class Color4Bit(IntEnum):
    """The 16 standard terminal colors.

    Bits 0-2 select red, green and blue; bit 3 selects the bright variant.
    """

    BLACK = 0b0000
    DARK_RED = 0b0001
    DARK_GREEN = 0b0010
    DARK_YELLOW = 0b0011
    DARK_BLUE = 0b0100
    DARK_MAGENTA = 0b0101
    DARK_CYAN = 0b0110
    DARK_GRAY = 0b0111
    BRIGHT_GRAY = 0b1000
    BRIGHT_RED = 0b1001
    BRIGHT_GREEN = 0b1010
    BRIGHT_YELLOW = 0b1011
    BRIGHT_BLUE = 0b1100
    BRIGHT_MAGENTA = 0b1101
    BRIGHT_CYAN = 0b1110
    WHITE = 0b1111

    @property
    def is_bright(self) -> bool:
        return bool(self.value & 0b1000)

    @property
    def base(self) -> int:
        """Color number without the bright bit (0-7)."""

        return self.value & 0b0111


def _check_channel(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be int, got {type(value).__name__} ({value!r}).")
    if not 0 <= value <= 255:
        raise ValueError(f"{name} must be between 0 and 255, got {value!r}.")


@dataclass(frozen=True, slots=True)
class Ansi256:
    """A color from the 256-color palette."""

    code: int

    def __post_init__(self) -> None:
        _check_channel("code", self.code)


@dataclass(frozen=True, slots=True)
class Rgb:
    """A 24-bit truecolor value."""

    red: int
    green: int
    blue: int

    def __post_init__(self) -> None:
        _check_channel("red", self.red)
        _check_channel("green", self.green)
        _check_channel("blue", self.blue)


type Color = Color4Bit | Ansi256 | Rgb

_COLOR_TYPES = (Color4Bit, Ansi256, Rgb)
_FLAG_NAMES = ("bold", "dim", "italic", "underline", "blink", "strike")


@dataclass(frozen=True, slots=True)
class StyleAttributes:
    """A set of optional style attributes; `None` leaves an attribute unset."""

    foreground: Color | None = None
    background: Color | None = None
    bold: bool | None = None
    dim: bool | None = None
    italic: bool | None = None
    underline: bool | None = None
    blink: bool | None = None
    strike: bool | None = None

    def __post_init__(self) -> None:
        for name in ("foreground", "background"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, _COLOR_TYPES):
                raise TypeError(
                    f"{name} must be Color4Bit, Ansi256 or Rgb, got "
                    f"{type(value).__name__} ({value!r})."
                )
        for name in _FLAG_NAMES:
            value = getattr(self, name)
            if value is not None and not isinstance(value, bool):
                raise TypeError(
                    f"{name} must be bool or None, got {type(value).__name__} ({value!r})."
                )

    @property
    def is_empty(self) -> bool:
        return not self.set_fields()

    def set_fields(self) -> tuple[str, ...]:
        """Return the names of the attributes this set assigns."""

        return tuple(item.name for item in fields(self) if getattr(self, item.name) is not None)

    def __or__(self, other: StyleAttributes) -> StyleAttributes:
        return compose(self, other)


EMPTY_STYLE = StyleAttributes()


def compose(base: StyleAttributes, override: StyleAttributes) -> StyleAttributes:
    """Layer `override` on top of `base`; attributes set by `override` win."""

    changes = {name: getattr(override, name) for name in override.set_fields()}
    if not changes:
        return base
    return replace(base, **changes)


_COLOR_WORDS: dict[str, Color4Bit] = {
    "black": Color4Bit.BLACK,
    "red": Color4Bit.DARK_RED,
    "green": Color4Bit.DARK_GREEN,
    "yellow": Color4Bit.DARK_YELLOW,
    "blue": Color4Bit.DARK_BLUE,
    "magenta": Color4Bit.DARK_MAGENTA,
    "cyan": Color4Bit.DARK_CYAN,
    "gray": Color4Bit.DARK_GRAY,
    "bright-black": Color4Bit.BRIGHT_GRAY,
    "bright-red": Color4Bit.BRIGHT_RED,
    "bright-green": Color4Bit.BRIGHT_GREEN,
    "bright-yellow": Color4Bit.BRIGHT_YELLOW,
    "bright-blue": Color4Bit.BRIGHT_BLUE,
    "bright-magenta": Color4Bit.BRIGHT_MAGENTA,
    "bright-cyan": Color4Bit.BRIGHT_CYAN,
    "white": Color4Bit.WHITE,
}


def _parse_color(word: str) -> Color:
    if word in _COLOR_WORDS:
        return _COLOR_WORDS[word]
    if word.startswith("#") and len(word) == 7:
        try:
            return Rgb(int(word[1:3], 16), int(word[3:5], 16), int(word[5:7], 16))
        except ValueError as error:
            raise ValueError(f"Invalid hex color {word!r}.") from error
    if word.isdigit():
        return Ansi256(int(word))
    raise ValueError(f"Unknown color {word!r}.")


def parse_style(text: str) -> StyleAttributes:
    """Parse a compact description such as ``"bold bright-red on blue"``.

    Flag words (`bold`, `dim`, `italic`, `underline`, `blink`, `strike`) set
    the flag; `no-<flag>` clears it. A color word sets the foreground, and a
    color word after `on` sets the background. Colors are palette names,
    256-color numbers (`208`) or hex triplets (`#ff8800`).

    >>> parse_style("bold red").bold
    True
    """

    values: dict[str, object] = {}
    words = text.strip().lower().split()
    index = 0
    while index < len(words):
        word = words[index]
        if word in _FLAG_NAMES:
            values[word] = True
        elif word.startswith("no-") and word[3:] in _FLAG_NAMES:
            values[word[3:]] = False
        elif word == "on":
            if index + 1 >= len(words):
                raise ValueError(f"Style {text!r}: 'on' must be followed by a color.")
            index += 1
            values["background"] = _parse_color(words[index])
        else:
            values["foreground"] = _parse_color(word)
        index += 1
    return StyleAttributes(**values)  # type: ignore[arg-type]
