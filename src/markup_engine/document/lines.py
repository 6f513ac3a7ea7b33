"""Line records produced fresh from the buffer on every render."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

SENTINEL_IDX = 0


@dataclass(frozen=True, slots=True)
class Line:
    """One raw buffer line.

    ``idx`` is 1-based; index 0 is the empty sentinel that lets providers
    match the start of the buffer. ``start`` is the absolute offset of the
    line's first character.
    """

    content: str
    idx: int
    start: int

    @property
    def end(self) -> int:
        return self.start + len(self.content)

    @property
    def is_sentinel(self) -> bool:
        return self.idx == SENTINEL_IDX


def split_lines(text: str) -> List[Line]:
    """Split ``text`` on ``\\n`` and prepend the sentinel line."""

    lines = [Line(content="", idx=SENTINEL_IDX, start=0)]
    offset = 0
    for idx, content in enumerate(text.split("\n"), start=1):
        lines.append(Line(content=content, idx=idx, start=offset))
        offset += len(content) + 1  # newline
    return lines
