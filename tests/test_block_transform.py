from __future__ import annotations

from typing import Any, List, Sequence

from markup_engine.blocks import BlockProvider, create_block_provider, segment_lines
from markup_engine.defaults import default_block_providers
from markup_engine.document import split_lines
from markup_engine.nodes import create_element, to_html
from markup_engine.transform import (
    BlockTransformerContext,
    ParentWithSlot,
    TransformedBlock,
    create_block_transformer,
    create_line_transformer,
    transform_block,
    transform_line,
)


class NullEditor:
    def get_content(self) -> str:
        return ""

    def get_content_at_range(self, span: Any) -> str:
        return ""

    def set_content(self, content: str) -> None: ...

    def insert_content(self, offset: int, content: str) -> None: ...

    def set_content_at_range(self, span: Any, content: str) -> None: ...

    def get_active_lines(self) -> List[int]:
        return []

    def on(self, event: str, callback: Any) -> None: ...

    def once(self, event: str, callback: Any) -> None: ...

    def off(self, event: str, callback: Any) -> None: ...


def render_blocks(text: str, providers: Sequence[BlockProvider]) -> List[TransformedBlock]:
    editor = NullEditor()
    rendered = []
    for block in segment_lines(split_lines(text), providers):
        lines = [
            transform_line(line, block.provider.line_transformers, editor)
            for line in block.lines
        ]
        rendered.append(
            transform_block(block, block.provider.block_transformers, lines, editor)
        )
    return rendered


def html_of(text: str) -> List[str]:
    return [to_html(block.nodes()) for block in render_blocks(text, default_block_providers())]


def test_unordered_list_wraps_items() -> None:
    assert html_of("- a\n- b") == ["<ul><li>a</li><li>b</li></ul>"]


def test_ordered_list_uses_ol() -> None:
    assert html_of("1. one\n2. two") == ["<ol><li>one</li><li>two</li></ol>"]


def test_plain_text_becomes_paragraph() -> None:
    assert html_of("hello _w_") == ["<p>hello <i>w</i></p>"]


def test_heading_block_is_not_wrapped_in_paragraph() -> None:
    assert html_of("## Title") == ["<h2> Title</h2>"]


def test_code_block_keeps_one_span_per_line() -> None:
    assert html_of("```\nx = 1\ny\n```") == [
        '<pre><code><span class="code-line">x = 1</span>'
        '<span class="code-line">y</span></code></pre>'
    ]


def test_code_block_ignores_inline_markup() -> None:
    assert html_of("```\n**no**\n```") == [
        '<pre><code><span class="code-line">**no**</span></code></pre>'
    ]


def test_blocks_without_block_transformers_pass_lines_through() -> None:
    provider = create_block_provider(
        start="",
        end="",
        transformers=[
            create_line_transformer(
                lambda ctx: setattr(ctx, "parent", ParentWithSlot(create_element("div")))
            )
        ],
    )
    blocks = render_blocks("a\nb", [provider])

    assert len(blocks) == 1
    assert isinstance(blocks[0].output, list)
    assert to_html(blocks[0].nodes()) == "<div>a</div><div>b</div>"


def test_block_context_exposes_lines_and_children() -> None:
    seen: List[tuple[list[str], list[str]]] = []

    def capture(ctx: BlockTransformerContext) -> None:
        seen.append(
            (
                [line.content for line in ctx.lines],
                [node.text_content for node in ctx.children],
            )
        )
        ctx.parent = ParentWithSlot(create_element("section"))

    provider = create_block_provider(
        start="", end="", transformers=[create_block_transformer(capture)]
    )
    blocks = render_blocks("x\ny", [provider])

    assert seen == [(["x", "y"], ["x", "y"])]
    assert to_html(blocks[0].nodes()) == "<section>xy</section>"
    # one text node per line so each stays mapped to its source line
    assert [child.text_content for child in blocks[0].nodes()[0].children] == ["x", "y"]
