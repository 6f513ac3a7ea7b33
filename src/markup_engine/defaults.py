"""Built-in markup rules: the default block providers and their transformers.

Everything here is configuration built from the public factories; the
engine itself knows nothing about headings, lists or emphasis.
"""

from __future__ import annotations

import re
from typing import List

from markup_engine.blocks import BlockProvider, create_block_provider
from markup_engine.document import TextRange
from markup_engine.nodes import Element, create_element, create_text, is_block_element
from markup_engine.transform import (
    BlockTransformerContext,
    LineTransformerContext,
    ParentWithSlot,
    RangeDisplay,
    RangeDisplayDefinition,
    create_block_transformer,
    create_line_transformer,
    create_text_transformer,
)

PATTERNS = {
    "bold": re.compile(r"\*\*(.*?)\*\*"),
    "italic": re.compile(r"(?<!\w)_([^_]+)_(?!\w)"),
    "strike": re.compile(r"~~(.*?)~~"),
    "code": re.compile(r"`([^`]+)`"),
    "link": re.compile(r"\[(.*?)\]\((.*?)\)"),
    "image": re.compile(r"!\[IMAGE\]\((.*?)\)\s*(.*)", re.IGNORECASE),
    "ordered_item": re.compile(r"^\d+\.\s"),
}

CHECKBOX = "- [ ] "
CHECKBOX_CHECKED = "- [x] "
# "- [ ]" is the toggle region; the state character sits at offset 3
CHECKBOX_TOGGLE_WIDTH = 5
CHECKBOX_STATE_OFFSET = 3

FENCE = "```"
MAX_HEADING_LEVEL = 6


def _hidden_prefix(width: int, text: str) -> RangeDisplayDefinition:
    """Hide ``text`` at the start of the line unless the line is active."""

    return RangeDisplayDefinition(
        start=0,
        end=width,
        display=RangeDisplay(default=lambda: None, active=lambda: create_text(text)),
    )


def heading_line(ctx: LineTransformerContext) -> None:
    level = 0
    content = ctx.line.content
    while level < MAX_HEADING_LEVEL and content[level : level + 1] == "#":
        level += 1
    if level == 0:
        return
    ctx.parent = ParentWithSlot(create_element(f"h{level}"))
    ctx.define_range_display(_hidden_prefix(level, "#" * level))


def blockquote_line(ctx: LineTransformerContext) -> None:
    if not ctx.line.content.startswith("> "):
        return
    ctx.parent = ParentWithSlot(create_element("blockquote"))
    ctx.define_range_display(_hidden_prefix(2, "> "))


def horizontal_rule_line(ctx: LineTransformerContext) -> None:
    if not ctx.line.content.startswith("---"):
        return
    ctx.parent = ParentWithSlot(create_element("hr"))
    ctx.define_range_display(_hidden_prefix(3, "---"))


def ordered_item_line(ctx: LineTransformerContext) -> None:
    match = PATTERNS["ordered_item"].match(ctx.line.content)
    if match is None:
        return
    ctx.parent = ParentWithSlot(create_element("li"))
    ctx.define_range_display(_hidden_prefix(match.end(), match.group(0)))


def checkbox_item_line(ctx: LineTransformerContext) -> None:
    prefix = ctx.line.content[: len(CHECKBOX)]
    if prefix not in (CHECKBOX, CHECKBOX_CHECKED):
        return
    checked = prefix == CHECKBOX_CHECKED
    line = ctx.line
    editor = ctx.editor
    ctx.parent = ParentWithSlot(create_element("li"))

    def render_checkbox() -> Element:
        checkbox = create_element("input", {"type": "checkbox", "checked": checked})

        def toggle(_element: Element) -> None:
            state = line.start + CHECKBOX_STATE_OFFSET
            editor.set_content_at_range(
                TextRange(state, state + 1), " " if checked else "x"
            )

        checkbox.add_event_listener("change", toggle)
        # the node is discarded by the next render; drop its binding with it
        editor.once(
            "beforerender", lambda: checkbox.remove_event_listener("change", toggle)
        )
        return checkbox

    ctx.define_range_display(
        RangeDisplayDefinition(
            start=0,
            end=CHECKBOX_TOGGLE_WIDTH,
            display=RangeDisplay(
                default=render_checkbox,
                active=lambda: create_text(prefix[:CHECKBOX_TOGGLE_WIDTH]),
            ),
        )
    )


def unordered_item_line(ctx: LineTransformerContext) -> None:
    if not ctx.line.content.startswith("- "):
        return
    ctx.parent = ParentWithSlot(create_element("li"))
    ctx.define_range_display(_hidden_prefix(2, "- "))


def image_line(ctx: LineTransformerContext) -> None:
    if not ctx.line.content.startswith("!["):
        return
    match = PATTERNS["image"].match(ctx.line.content)
    if match is None or not match.group(1):
        return
    source, title = match.group(1), match.group(2) or ""
    raw = match.group(0)
    ctx.define_range_display(
        RangeDisplayDefinition(
            start=0,
            end=len(raw),
            display=RangeDisplay(
                default=lambda: create_element("img", {"src": source, "title": title}),
                active=lambda: create_text(raw),
            ),
        )
    )


def code_line(ctx: LineTransformerContext) -> None:
    ctx.parent = ParentWithSlot(create_element("span", {"class": "code-line"}))


def list_block(ctx: BlockTransformerContext) -> None:
    if not ctx.children or not all(node.name == "li" for node in ctx.children):
        return
    if not ctx.lines:
        return
    numbered = PATTERNS["ordered_item"].match(ctx.lines[0].content) is not None
    ctx.parent = ParentWithSlot(create_element("ol" if numbered else "ul"))


def paragraph_block(ctx: BlockTransformerContext) -> None:
    if any(is_block_element(node) for node in ctx.children):
        return
    ctx.parent = ParentWithSlot(create_element("p"))


def code_block(ctx: BlockTransformerContext) -> None:
    pre = create_element("pre")
    code = create_element("code")
    pre.append(code)
    ctx.parent = ParentWithSlot(pre, slot=code)


def _link_node(match: "re.Match[str]") -> ParentWithSlot:
    return ParentWithSlot(create_element("a", {"href": match.group(2) or ""}))


HEADING_LINE = create_line_transformer(heading_line, name="heading")
BLOCKQUOTE_LINE = create_line_transformer(blockquote_line, name="blockquote")
HR_LINE = create_line_transformer(horizontal_rule_line, name="hr")
LIST_LINE_NUMERIC = create_line_transformer(ordered_item_line, name="list:numeric")
LIST_LINE_CHECKBOX = create_line_transformer(checkbox_item_line, name="list:checkbox")
LIST_LINE = create_line_transformer(unordered_item_line, name="list")
IMAGE_LINE = create_line_transformer(image_line, name="image")
CODE_LINE = create_line_transformer(code_line, name="code:line")
LIST_BLOCK = create_block_transformer(list_block, name="list:block")
PARAGRAPH_BLOCK = create_block_transformer(paragraph_block, name="paragraph")
CODE_BLOCK = create_block_transformer(code_block, name="code:block")

ITALIC_TEXT = create_text_transformer(
    PATTERNS["italic"], lambda _m: ParentWithSlot(create_element("i")), name="italic"
)
BOLD_TEXT = create_text_transformer(
    PATTERNS["bold"], lambda _m: ParentWithSlot(create_element("b")), name="bold"
)
STRIKE_TEXT = create_text_transformer(
    PATTERNS["strike"], lambda _m: ParentWithSlot(create_element("del")), name="strike"
)
CODE_TEXT = create_text_transformer(
    PATTERNS["code"], lambda _m: ParentWithSlot(create_element("code")), name="code"
)
LINK_TEXT = create_text_transformer(PATTERNS["link"], _link_node, name="link")

TEXT_TRANSFORMERS = (ITALIC_TEXT, BOLD_TEXT, STRIKE_TEXT, CODE_TEXT, LINK_TEXT)

CODE_BLOCK_PROVIDER = create_block_provider(
    start=FENCE,
    end=FENCE,
    transformers=[CODE_LINE, CODE_BLOCK],
    name="code",
)

GENERIC_BLOCK_PROVIDER = create_block_provider(
    start="",
    end="",
    use_end_of_prev_as_start_of_next=True,
    transformers=[
        PARAGRAPH_BLOCK,
        HEADING_LINE,
        LIST_LINE_CHECKBOX,
        LIST_LINE_NUMERIC,
        LIST_LINE,
        LIST_BLOCK,
        IMAGE_LINE,
        BLOCKQUOTE_LINE,
        HR_LINE,
        TEXT_TRANSFORMERS,
    ],
    name="generic",
)


def default_block_providers() -> List[BlockProvider]:
    """Fresh list of the default providers, fenced code first."""

    return [CODE_BLOCK_PROVIDER, GENERIC_BLOCK_PROVIDER]


__all__ = [
    "CHECKBOX",
    "CHECKBOX_CHECKED",
    "CODE_BLOCK_PROVIDER",
    "FENCE",
    "GENERIC_BLOCK_PROVIDER",
    "PATTERNS",
    "TEXT_TRANSFORMERS",
    "default_block_providers",
]
