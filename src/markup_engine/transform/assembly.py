"""Resolve nested transform results and display overlays into nodes.

The walk moves an offset across the raw line text. Display definitions
starting at the offset are rendered first and skipped over; otherwise the
innermost open result (top of ``stack``) receives literal text until the
next boundary: the top's inner end, the next result's start, the next
display's start, or the end of the line.
"""

from __future__ import annotations

from bisect import bisect_right
from collections import deque
from typing import Deque, Dict, Iterable, List, Optional, Sequence

from markup_engine.errors import RangeOverlapError
from markup_engine.nodes import Node, Text
from markup_engine.runtime import telemetry

from .models import RangeDisplayDefinition, TextTransformResult

LOGGER_NAME = "markup_engine.transform"


def sort_results(results: Iterable[TextTransformResult]) -> List[TextTransformResult]:
    """Order by start; on equal starts the wider (outer) range comes first."""

    return sorted(results, key=lambda r: (r.range.start, -r.range.end))


def validate_nesting(results: Sequence[TextTransformResult], line_idx: int) -> None:
    """Raise ``RangeOverlapError`` unless ranges are disjoint or nested."""

    ordered = sort_results(results)
    for position, outer in enumerate(ordered):
        for inner in ordered[position + 1 :]:
            if inner.range.start >= outer.range.end:
                break
            if inner.range.end > outer.range.end:
                raise RangeOverlapError(
                    line_idx,
                    (outer.range.start, outer.range.end),
                    (inner.range.start, inner.range.end),
                )


def _index_displays(
    displays: Iterable[RangeDisplayDefinition],
) -> Dict[int, RangeDisplayDefinition]:
    by_start: Dict[int, RangeDisplayDefinition] = {}
    for definition in displays:
        # first registration at a given offset wins
        by_start.setdefault(definition.start, definition)
    return by_start


class _Walk:
    def __init__(
        self,
        content: str,
        results: Sequence[TextTransformResult],
        displays: Sequence[RangeDisplayDefinition],
        *,
        active: bool,
        line_idx: int,
    ) -> None:
        self.content = content
        self.active = active
        self.line_idx = line_idx
        self.pending: Deque[TextTransformResult] = deque(sort_results(results))
        self.displays = _index_displays(displays)
        self.display_starts = sorted(self.displays)
        self.stack: List[TextTransformResult] = []
        self.output: List[Node] = []
        self.offset = 0

    def emit(self, node: Node) -> None:
        if self.stack:
            self.stack[-1].append(node)
        else:
            self.output.append(node)

    def emit_text(self, upto: int) -> None:
        if upto > self.offset:
            self.emit(Text(self.content[self.offset : upto]))
            self.offset = upto

    def flush_top(self) -> None:
        top = self.stack.pop()
        self.emit(top.result.node)
        self.offset = max(self.offset, top.range.end)

    def next_display_start(self) -> Optional[int]:
        position = bisect_right(self.display_starts, self.offset)
        if position < len(self.display_starts):
            return self.display_starts[position]
        return None

    def drop(self, result: TextTransformResult, reason: str) -> None:
        overlap = reason == "escapes_parent"
        telemetry.record_event(
            "transform.range_overlap" if overlap else "transform.drop_result",
            level="error" if overlap else "debug",
            data={
                "line": self.line_idx,
                "start": result.range.start,
                "end": result.range.end,
                "reason": reason,
            },
            logger_name=LOGGER_NAME,
        )

    def next_candidate(self) -> Optional[TextTransformResult]:
        """Front of the queue if it can open inside the current top."""

        top = self.stack[-1] if self.stack else None
        while self.pending:
            candidate = self.pending[0]
            if candidate.range.start < self.offset:
                self.pending.popleft()
                self.drop(candidate, "passed")
                continue
            if top is None:
                return candidate
            if candidate.range.start >= top.inner_end:
                return None  # opens after the top closes
            if candidate.range.end > top.inner_end:
                self.pending.popleft()
                self.drop(candidate, "escapes_parent")
                continue
            return candidate
        return None

    def run(self) -> List[Node]:
        length = len(self.content)
        while self.offset < length:
            display = self.displays.get(self.offset)
            if display is not None:
                rendered = display.render(self.active)
                if rendered is not None:
                    self.emit(rendered)
                self.offset = display.end
                continue

            top = self.stack[-1] if self.stack else None
            if top is not None and self.offset >= top.inner_end:
                self.flush_top()
                continue

            candidate = self.next_candidate()
            if candidate is not None and candidate.range.start == self.offset:
                self.pending.popleft()
                self.stack.append(candidate)
                self.offset = candidate.inner_start
                continue

            boundary = length
            if top is not None:
                boundary = min(boundary, top.inner_end)
            if candidate is not None:
                boundary = min(boundary, candidate.range.start)
            display_start = self.next_display_start()
            if display_start is not None:
                boundary = min(boundary, display_start)
            self.emit_text(boundary)

        while self.stack:
            self.flush_top()
        for leftover in self.pending:
            self.drop(leftover, "past_end")
        return self.output


def assemble_line(
    content: str,
    results: Sequence[TextTransformResult],
    displays: Sequence[RangeDisplayDefinition] = (),
    *,
    active: bool = False,
    line_idx: int = 0,
    validate: bool = False,
) -> List[Node]:
    """Assemble the node sequence for one line of raw text.

    ``active`` selects each display definition's ``active`` rendering.
    With ``validate`` a partial overlap raises ``RangeOverlapError``; without
    it the later of two overlapping results is dropped.
    """

    if validate:
        validate_nesting(results, line_idx)
    return _Walk(content, results, displays, active=active, line_idx=line_idx).run()


__all__ = ["assemble_line", "sort_results", "validate_nesting"]
