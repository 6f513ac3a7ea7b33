"""Canonical text buffer with offset-based edits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence, Union

RangeLike = Union["TextRange", Sequence[int], Mapping[str, int]]


@dataclass(frozen=True, slots=True)
class TextRange:
    """Half-open ``[start, end)`` character span."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < 0:
            raise ValueError(f"Range offsets must be non-negative: {self}")
        if self.start > self.end:
            raise ValueError(f"Range start must not exceed end: {self}")

    @classmethod
    def coerce(cls, value: RangeLike) -> "TextRange":
        if isinstance(value, TextRange):
            return value
        if isinstance(value, Mapping):
            return cls(int(value["start"]), int(value["end"]))
        start, end = value
        return cls(int(start), int(end))

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def __len__(self) -> int:
        return self.end - self.start

    def contains(self, other: "TextRange") -> bool:
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: "TextRange") -> bool:
        return self.start < other.end and other.start < self.end


class ContentStore:
    """Owns the buffer string; edits return the candidate text first.

    The editor decides whether a candidate is committed (and rendered), so
    the ``*_text`` helpers never mutate. ``commit`` is the only writer.
    """

    def __init__(self, text: str = "") -> None:
        self._text = text
        self.version = 0

    def get_content(self) -> str:
        return self._text

    def get_content_at_range(self, span: RangeLike) -> str:
        span = TextRange.coerce(span)
        if span.is_empty:
            return ""
        return self._text[span.start : span.end]

    def inserted_text(self, offset: int, text: str) -> str:
        if offset < 0:
            raise ValueError(f"Insert offset must be non-negative: {offset}")
        if offset == 0:
            return text + self._text
        return self._text[:offset] + text + self._text[offset:]

    def replaced_text(self, span: RangeLike, text: str) -> str:
        span = TextRange.coerce(span)
        if span.is_empty:
            return self._text
        return self._text[: span.start] + text + self._text[span.end :]

    def commit(self, text: str) -> bool:
        """Store ``text``; returns ``False`` when it equals the current buffer."""

        if text == self._text:
            return False
        self._text = text
        self.version += 1
        return True

    def __len__(self) -> int:
        return len(self._text)


__all__ = ["ContentStore", "RangeLike", "TextRange"]
