from __future__ import annotations

import pytest

from markup_engine.defaults import (
    CODE_BLOCK_PROVIDER,
    GENERIC_BLOCK_PROVIDER,
    default_block_providers,
)
from markup_engine.editor import Editor
from markup_engine.nodes import to_html
from markup_engine.surfaces import MemoryDisplay, MemoryTextInput


def render(content: str) -> str:
    editor = Editor(MemoryTextInput(), MemoryDisplay(), initial_content=content)
    return to_html(editor.output)


def render_active(content: str, *lines: int) -> str:
    editor = Editor(MemoryTextInput(), MemoryDisplay(), initial_content=content)
    editor.selection.set_active_lines(lines)
    return to_html(editor.output)


def test_default_providers_put_fenced_code_first() -> None:
    providers = default_block_providers()
    assert providers == [CODE_BLOCK_PROVIDER, GENERIC_BLOCK_PROVIDER]
    assert providers is not default_block_providers()
    assert GENERIC_BLOCK_PROVIDER.use_end_of_prev_as_start_of_next


@pytest.mark.parametrize(
    "content,expected",
    [
        ("# one", "<h1> one</h1>"),
        ("### three", "<h3> three</h3>"),
        ("###### six", "<h6> six</h6>"),
        ("> quote", "<blockquote>quote</blockquote>"),
        ("---", "<hr>"),
        ("~~gone~~", "<p><del>gone</del></p>"),
        ("`x`", "<p><code>x</code></p>"),
        ("- **a**", "<ul><li><b>a</b></li></ul>"),
        ("1. one\n2. two", "<ol><li>one</li><li>two</li></ol>"),
    ],
)
def test_inactive_rendering(content: str, expected: str) -> None:
    assert render(content) == expected


def test_image_line_renders_img_with_caption() -> None:
    assert render("![IMAGE](pic.png) A cat") == '<p><img src="pic.png" title="A cat"></p>'
    assert (
        render_active("![IMAGE](pic.png) A cat", 1)
        == "<p>![IMAGE](pic.png) A cat</p>"
    )


def test_active_lines_reveal_their_markers() -> None:
    assert render_active("# one", 1) == "<h1># one</h1>"
    assert render_active("- a\n- b", 2) == "<ul><li>a</li><li>- b</li></ul>"
    assert render_active("- [ ] task", 1) == "<ul><li>- [ ] task</li></ul>"


def test_checkbox_renders_input_when_inactive() -> None:
    assert render("- [x] done") == '<ul><li><input type="checkbox" checked> done</li></ul>'


def test_mixed_document_splits_into_blocks() -> None:
    content = "para\n\n- a\n- b\n\n```\ncode\n```"
    assert render(content) == (
        "<p>para</p>"
        "<ul><li>a</li><li>b</li></ul>"
        '<pre><code><span class="code-line">code</span></code></pre>'
    )
