"""Content buffer and line records."""

from .lines import SENTINEL_IDX, Line, split_lines
from .store import ContentStore, RangeLike, TextRange

__all__ = [
    "ContentStore",
    "Line",
    "RangeLike",
    "SENTINEL_IDX",
    "TextRange",
    "split_lines",
]
