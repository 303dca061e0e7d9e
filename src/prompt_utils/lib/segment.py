"""Styled text produced by formatters."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from prompt_utils.lib.styling import EMPTY_STYLE, StyleAttributes


@dataclass(frozen=True, slots=True)
class Fragment:
    """A run of text sharing one set of style attributes."""

    style: StyleAttributes
    text: str


@dataclass(frozen=True, slots=True)
class Segment:
    """Ordered fragments rendering a single fact.

    Concatenating the fragment texts yields the human-readable rendering; the
    styles only affect presentation.
    """

    fragments: tuple[Fragment, ...] = ()

    @classmethod
    def of(cls, text: str, style: StyleAttributes = EMPTY_STYLE) -> Segment:
        if not text:
            return EMPTY_SEGMENT
        return cls((Fragment(style, text),))

    @property
    def text(self) -> str:
        return "".join(fragment.text for fragment in self.fragments)

    def __bool__(self) -> bool:
        return any(fragment.text for fragment in self.fragments)

    def __iter__(self) -> Iterator[Fragment]:
        return iter(self.fragments)


EMPTY_SEGMENT = Segment()


class SegmentBuilder:
    """Accumulate fragments, dropping empty text."""

    def __init__(self) -> None:
        self._fragments: list[Fragment] = []

    def add(self, text: str, style: StyleAttributes = EMPTY_STYLE) -> SegmentBuilder:
        if text:
            self._fragments.append(Fragment(style, text))
        return self

    def build(self) -> Segment:
        if not self._fragments:
            return EMPTY_SEGMENT
        return Segment(tuple(self._fragments))
