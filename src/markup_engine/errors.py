"""Exception hierarchy shared by the engine."""

from __future__ import annotations

from typing import Tuple

RangePair = Tuple[int, int]


class MarkupEngineError(RuntimeError):
    """Base class for every error raised by markup_engine."""


class RangeOverlapError(MarkupEngineError):
    """Raised when two transform results overlap without nesting.

    Only raised while range validation is enabled; otherwise the later result
    is dropped and logged as a ``transform.range_overlap`` error.
    """

    def __init__(self, line_idx: int, first: RangePair, second: RangePair) -> None:
        super().__init__(
            f"Line {line_idx}: transform ranges {first} and {second} partially overlap"
        )
        self.line_idx = line_idx
        self.first = first
        self.second = second


class UnknownEventError(MarkupEngineError):
    """Raised when subscribing to a lifecycle channel that does not exist."""

    def __init__(self, event: str) -> None:
        super().__init__(event)
        self.event = event

    def __str__(self) -> str:
        return f"Unknown lifecycle event '{self.event}'"


class EditorDestroyedError(MarkupEngineError):
    """Raised when a destroyed editor is asked to mutate its content."""


__all__ = [
    "MarkupEngineError",
    "RangeOverlapError",
    "UnknownEventError",
    "EditorDestroyedError",
]
