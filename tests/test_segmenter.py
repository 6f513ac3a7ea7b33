from __future__ import annotations

from typing import List

import pytest

from markup_engine.blocks import (
    Block,
    BlockProvider,
    create_block_provider,
    match_provider,
    segment_lines,
)
from markup_engine.defaults import default_block_providers
from markup_engine.document import split_lines
from markup_engine.transform import create_line_transformer


def make_provider(
    start: str, end: str, *, reuse: bool = False, name: str = ""
) -> BlockProvider:
    return create_block_provider(
        start=start, end=end, use_end_of_prev_as_start_of_next=reuse, name=name
    )


def contents(block: Block) -> List[str]:
    return [line.content for line in block.lines]


def test_fence_reuse_opens_next_block_from_closing_line() -> None:
    fence = make_provider("---", "---", reuse=True)
    blocks = segment_lines(split_lines("---\na\n---\nb\n---"), [fence])

    assert [contents(block) for block in blocks] == [["a"], ["b"]]
    assert all(block.terminated for block in blocks)
    assert blocks[1].start_line.idx == 3
    assert blocks[1].end_line is not None and blocks[1].end_line.idx == 5


def test_without_reuse_the_line_after_a_close_is_skipped() -> None:
    fence = make_provider("---", "---")
    blocks = segment_lines(split_lines("---\na\n---\nb\n---"), [fence])

    assert [contents(block) for block in blocks] == [["a"], []]
    assert blocks[0].terminated
    assert not blocks[1].terminated


def test_empty_block_yields_to_fresh_opener() -> None:
    blocks = segment_lines(split_lines("```\nx\n```"), default_block_providers())

    assert len(blocks) == 1
    assert blocks[0].provider.name == "code"
    assert contents(blocks[0]) == ["x"]


def test_unterminated_block_is_flushed_at_end() -> None:
    blocks = segment_lines(split_lines("<<\na\nb"), [make_provider("<<", ">>")])

    assert len(blocks) == 1
    assert contents(blocks[0]) == ["a", "b"]
    assert not blocks[0].terminated


def test_lines_outside_any_block_are_skipped() -> None:
    provider = make_provider("<<", ">>")
    blocks = segment_lines(split_lines("junk\n<<\na\n>>\nmore"), [provider])

    assert [contents(block) for block in blocks] == [["a"]]


def test_blank_lines_split_generic_blocks() -> None:
    blocks = segment_lines(split_lines("a\n\nb"), default_block_providers())

    assert [contents(block) for block in blocks] == [["a"], ["b"]]
    assert blocks[0].start_line.is_sentinel
    assert blocks[1].start_line.idx == 2


def test_match_provider_prefers_first_registered() -> None:
    first = make_provider("::", "::", name="first")
    second = make_provider("::", "::", name="second")
    line = split_lines("::")[1]

    assert match_provider(line, [first, second]) is first
    assert match_provider(split_lines("nope")[1], [first, second]) is None


def test_provider_flattens_nested_transformer_lists() -> None:
    one = create_line_transformer(lambda ctx: None, name="one")
    two = create_line_transformer(lambda ctx: None, name="two")
    provider = create_block_provider(start="", end="", transformers=[one, [two, []]])

    assert provider.transformers == (one, two)
    assert provider.line_transformers == (one, two)
    assert provider.block_transformers == ()


def test_provider_rejects_non_transformers() -> None:
    with pytest.raises(TypeError):
        create_block_provider(start="", end="", transformers=[object()])
