"""Lay out an output node tree as styled terminal rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from rich.text import Text as RichText

from markup_engine.nodes import Element, Node, Text, is_block_element

TAG_STYLES: Dict[str, str] = {
    "b": "bold",
    "i": "italic",
    "del": "strike",
    "code": "bold cyan",
    "a": "underline blue",
    "h1": "bold magenta",
    "h2": "bold magenta",
    "h3": "bold",
    "h4": "bold",
    "h5": "bold dim",
    "h6": "bold dim",
    "blockquote": "italic dim",
    "pre": "dim",
}

RULE_WIDTH = 24


@dataclass(frozen=True, slots=True)
class Segment:
    start: int
    end: int
    node_id: int


@dataclass(slots=True)
class Row:
    text: RichText = field(default_factory=RichText)
    segments: List[Segment] = field(default_factory=list)

    def add(self, content: str, style: str, node_id: Optional[int]) -> None:
        if not content:
            return
        start = len(self.text)
        self.text.append(content, style=style or None)
        if node_id is not None:
            self.segments.append(Segment(start, len(self.text), node_id))

    @property
    def empty(self) -> bool:
        return len(self.text) == 0


@dataclass(slots=True)
class RenderedView:
    rows: List[Row]

    @property
    def text(self) -> RichText:
        return RichText("\n").join(row.text for row in self.rows)

    @property
    def plain_lines(self) -> List[str]:
        return [row.text.plain for row in self.rows]

    def node_at(self, row: int, column: int) -> Optional[int]:
        """Node id under ``(row, column)``, falling back to the nearest one."""

        if not 0 <= row < len(self.rows):
            return None
        segments = self.rows[row].segments
        if not segments:
            return None
        best = segments[0]
        for segment in segments:
            if segment.start <= column < segment.end:
                return segment.node_id
            if segment.start <= column:
                best = segment
        return best.node_id


def _breaks_row(node: Element) -> bool:
    return is_block_element(node) or node.get_attribute("class") == "code-line"


class _Layout:
    def __init__(self) -> None:
        self.rows: List[Row] = [Row()]

    @property
    def current(self) -> Row:
        return self.rows[-1]

    def newline(self) -> None:
        if not self.current.empty:
            self.rows.append(Row())

    def visit(self, node: Node, style: str) -> None:
        if isinstance(node, Text):
            self.current.add(node.data, style, node.id)
            return
        if not isinstance(node, Element):
            raise TypeError(f"Cannot lay out {type(node).__name__} node")
        child_style = " ".join(filter(None, (style, TAG_STYLES.get(node.name, ""))))
        block = _breaks_row(node)
        if block:
            self.newline()

        if node.name == "input" and node.get_attribute("type") == "checkbox":
            mark = "☑ " if node.get_attribute("checked") else "☐ "
            self.current.add(mark, child_style, node.id)
        elif node.name == "img":
            label = node.get_attribute("title") or node.get_attribute("src") or ""
            self.current.add(f"[image: {label}]", "italic", node.id)
        elif node.name == "hr" and not node.children:
            self.current.add("─" * RULE_WIDTH, "dim", node.id)
        elif node.name == "li":
            self.current.add("  ", "", None)

        for child in node.children:
            self.visit(child, child_style)

        if block:
            self.newline()


def render_rows(nodes: Sequence[Node]) -> RenderedView:
    layout = _Layout()
    for node in nodes:
        layout.visit(node, "")
    rows = layout.rows
    if len(rows) > 1 and rows[-1].empty:
        rows = rows[:-1]
    return RenderedView(rows=rows)


__all__ = ["RenderedView", "Row", "Segment", "render_rows"]
