"""Style attribute composition, color validation and style parsing."""

from __future__ import annotations

import pytest

from prompt_utils.lib.styling import (
    EMPTY_STYLE,
    Ansi256,
    Color4Bit,
    Rgb,
    StyleAttributes,
    compose,
    parse_style,
)


def test_compose_prefers_override_for_each_set_attribute() -> None:
    base = StyleAttributes(foreground=Color4Bit.DARK_RED, bold=True, italic=True)
    override = StyleAttributes(foreground=Color4Bit.BRIGHT_BLUE, italic=False)

    composed = compose(base, override)

    assert composed == StyleAttributes(
        foreground=Color4Bit.BRIGHT_BLUE,
        bold=True,
        italic=False,
    )
    assert base | override == composed


def test_compose_with_empty_override_returns_base() -> None:
    base = StyleAttributes(underline=True)

    assert compose(base, EMPTY_STYLE) is base
    assert compose(EMPTY_STYLE, base) == base


_COMPOSE_PAIRS = (
    pytest.param(EMPTY_STYLE, EMPTY_STYLE, id="both-empty"),
    pytest.param(StyleAttributes(bold=True), EMPTY_STYLE, id="empty-override"),
    pytest.param(EMPTY_STYLE, StyleAttributes(foreground=Rgb(1, 2, 3)), id="empty-base"),
    pytest.param(
        StyleAttributes(foreground=Color4Bit.DARK_RED, underline=True),
        StyleAttributes(background=Ansi256(17), blink=True),
        id="disjoint",
    ),
    pytest.param(
        StyleAttributes(foreground=Color4Bit.DARK_RED, bold=True, dim=False),
        StyleAttributes(foreground=Color4Bit.BRIGHT_BLUE, bold=False, strike=True),
        id="overlapping",
    ),
    pytest.param(
        StyleAttributes(italic=True, strike=False),
        StyleAttributes(italic=True, strike=False),
        id="identical",
    ),
)


@pytest.mark.parametrize(("base", "override"), _COMPOSE_PAIRS)
def test_compose_sets_union_of_fields_with_override_winning(
    base: StyleAttributes,
    override: StyleAttributes,
) -> None:
    composed = compose(base, override)

    assert set(composed.set_fields()) == set(base.set_fields()) | set(override.set_fields())
    for name in override.set_fields():
        assert getattr(composed, name) == getattr(override, name)
    for name in set(base.set_fields()) - set(override.set_fields()):
        assert getattr(composed, name) == getattr(base, name)


@pytest.mark.parametrize(("base", "override"), _COMPOSE_PAIRS)
def test_compose_is_idempotent_over_same_base(
    base: StyleAttributes,
    override: StyleAttributes,
) -> None:
    composed = compose(base, override)

    assert compose(base, composed) == composed
    assert compose(composed, override) == composed


def test_set_fields_lists_only_assigned_attributes() -> None:
    style = StyleAttributes(background=Ansi256(208), dim=False, strike=True)

    assert set(style.set_fields()) == {"background", "dim", "strike"}
    assert not style.is_empty
    assert EMPTY_STYLE.is_empty


def test_color4bit_bits() -> None:
    assert Color4Bit.BRIGHT_GREEN.is_bright
    assert Color4Bit.BRIGHT_GREEN.base == Color4Bit.DARK_GREEN.value
    assert not Color4Bit.DARK_CYAN.is_bright
    assert Color4Bit.WHITE.base == 7


@pytest.mark.parametrize(
    ("factory", "error"),
    (
        pytest.param(lambda: Ansi256(256), ValueError, id="ansi256-too-large"),
        pytest.param(lambda: Ansi256(-1), ValueError, id="ansi256-negative"),
        pytest.param(lambda: Rgb(0, 300, 0), ValueError, id="rgb-channel-range"),
        pytest.param(lambda: Rgb(0, 0, "ff"), TypeError, id="rgb-channel-type"),
        pytest.param(lambda: Ansi256(True), TypeError, id="ansi256-bool"),
        pytest.param(lambda: StyleAttributes(foreground="red"), TypeError, id="foreground-str"),
        pytest.param(lambda: StyleAttributes(bold=1), TypeError, id="flag-int"),
    ),
)
def test_invalid_colors_and_attributes_are_rejected(factory, error: type[Exception]) -> None:
    with pytest.raises(error):
        factory()


@pytest.mark.parametrize(
    ("text", "expected"),
    (
        pytest.param(
            "bold bright-red on blue",
            StyleAttributes(
                foreground=Color4Bit.BRIGHT_RED,
                background=Color4Bit.DARK_BLUE,
                bold=True,
            ),
            id="flags-and-colors",
        ),
        pytest.param("208", StyleAttributes(foreground=Ansi256(208)), id="ansi256"),
        pytest.param(
            "on #ff8800",
            StyleAttributes(background=Rgb(0xFF, 0x88, 0x00)),
            id="truecolor-background",
        ),
        pytest.param("no-italic strike", StyleAttributes(italic=False, strike=True), id="negated"),
        pytest.param("", EMPTY_STYLE, id="empty"),
    ),
)
def test_parse_style(text: str, expected: StyleAttributes) -> None:
    assert parse_style(text) == expected


@pytest.mark.parametrize(
    "text",
    (
        pytest.param("sparkly", id="unknown-word"),
        pytest.param("bold on", id="dangling-on"),
        pytest.param("#12345", id="short-hex"),
        pytest.param("#gg0000", id="bad-hex"),
        pytest.param("300", id="ansi256-range"),
    ),
)
def test_parse_style_rejects_unknown_words(text: str) -> None:
    with pytest.raises(ValueError):
        parse_style(text)
