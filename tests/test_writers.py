"""Plain and ANSI writer output."""

from __future__ import annotations

import io

import pytest

from prompt_utils.lib.segment import Fragment, Segment, SegmentBuilder
from prompt_utils.lib.styling import EMPTY_STYLE, Ansi256, Color4Bit, Rgb, StyleAttributes
from prompt_utils.lib.writers import AnsiWriter, PlainWriter, Writer, writer_for
from prompt_utils.lib.writers.ansi import RESET, sgr_parameters

RED = StyleAttributes(foreground=Color4Bit.DARK_RED)
BOLD_GREEN = StyleAttributes(foreground=Color4Bit.BRIGHT_GREEN, bold=True)


class _FakeStream(io.StringIO):
    def __init__(self, tty: bool) -> None:
        super().__init__()
        self._tty = tty

    def isatty(self) -> bool:
        return self._tty


def test_plain_writer_is_identity() -> None:
    writer = PlainWriter()
    segment = SegmentBuilder().add("a", RED).add("b", BOLD_GREEN).build()

    assert writer.render(BOLD_GREEN, "text") == "text"
    assert writer.render_segment(segment) == "ab"


@pytest.mark.parametrize(
    ("style", "expected"),
    (
        pytest.param(RED, ["31"], id="4bit-foreground"),
        pytest.param(
            StyleAttributes(background=Color4Bit.BRIGHT_BLUE),
            ["104"],
            id="bright-background",
        ),
        pytest.param(StyleAttributes(foreground=Ansi256(208)), ["38", "5", "208"], id="256"),
        pytest.param(
            StyleAttributes(background=Rgb(1, 2, 3)),
            ["48", "2", "1", "2", "3"],
            id="truecolor",
        ),
        pytest.param(
            StyleAttributes(bold=True, dim=True, italic=True, underline=True, blink=True, strike=True),
            ["1", "2", "3", "4", "5", "9"],
            id="all-flags",
        ),
        pytest.param(StyleAttributes(bold=False, italic=None), [], id="false-and-unset"),
    ),
)
def test_sgr_parameters(style: StyleAttributes, expected: list[str]) -> None:
    assert sgr_parameters(style) == expected


def test_ansi_render_combines_attributes_and_resets() -> None:
    assert AnsiWriter().render(BOLD_GREEN, "ok") == "\x1b[1;92mok\x1b[0m"


def test_ansi_render_leaves_unstyled_text_untouched() -> None:
    assert AnsiWriter().render(EMPTY_STYLE, "plain") == "plain"


def test_ansi_segment_shares_sequence_for_identical_styles() -> None:
    segment = Segment((Fragment(RED, "a"), Fragment(RED, "b")))

    assert AnsiWriter().render_segment(segment) == "\x1b[31mab\x1b[0m"


def test_ansi_segment_style_change_folds_reset() -> None:
    segment = Segment((Fragment(RED, "a"), Fragment(BOLD_GREEN, "b")))

    assert AnsiWriter().render_segment(segment) == "\x1b[31ma\x1b[0;1;92mb\x1b[0m"


def test_ansi_segment_unstyled_gap_resets_once() -> None:
    segment = SegmentBuilder().add("a", RED).add(" ").add("b", RED).build()

    rendered = AnsiWriter().render_segment(segment)

    assert rendered == "\x1b[31ma\x1b[0m \x1b[31mb\x1b[0m"
    assert rendered.endswith(RESET)


def test_ansi_segment_without_styles_has_no_escapes() -> None:
    segment = SegmentBuilder().add("x").add("y").build()

    assert AnsiWriter().render_segment(segment) == "xy"


@pytest.mark.parametrize(
    ("mode", "tty", "environ", "expected"),
    (
        pytest.param("always", False, {}, AnsiWriter, id="always"),
        pytest.param("never", True, {}, PlainWriter, id="never"),
        pytest.param("auto", True, {}, AnsiWriter, id="auto-tty"),
        pytest.param("auto", False, {}, PlainWriter, id="auto-pipe"),
        pytest.param("auto", True, {"NO_COLOR": "1"}, PlainWriter, id="auto-no-color"),
    ),
)
def test_writer_for(mode, tty: bool, environ: dict[str, str], expected: type) -> None:
    writer = writer_for(mode, stream=_FakeStream(tty), environ=environ)

    assert isinstance(writer, expected)
    assert isinstance(writer, Writer)
