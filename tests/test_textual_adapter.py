from __future__ import annotations

from typing import List, Tuple

import pytest

from markup_engine.adapters.textual import (
    RenderedView,
    TextualEditorAdapter,
    TextualUIHooks,
    render_rows,
)
from markup_engine.nodes import Node, create_element, create_text


def make_adapter(
    content: str,
) -> Tuple[TextualEditorAdapter, List[RenderedView], List[str], List[str]]:
    views: List[RenderedView] = []
    inputs: List[str] = []
    statuses: List[str] = []
    hooks = TextualUIHooks(
        update_display=views.append,
        update_input=inputs.append,
        update_status=statuses.append,
    )
    adapter = TextualEditorAdapter(hooks, initial_content=content)
    return adapter, views, inputs, statuses


def test_adapter_renders_rows_and_mirrors_input() -> None:
    adapter, views, inputs, statuses = make_adapter("# Title\n\nplain")

    assert views[-1].plain_lines == [" Title", "plain"]
    assert inputs == ["# Title\n\nplain"]
    assert statuses == ["no selection"]


def test_pointer_click_activates_line() -> None:
    adapter, views, _, statuses = make_adapter("# Title\n\nplain")

    adapter.handle_pointer_down(0, 2)
    adapter.handle_pointer_up(0, 2)

    assert adapter.editor.get_active_lines() == [1]
    assert views[-1].plain_lines == ["# Title", "plain"]
    assert statuses[-1] == "lines 1-1"


def test_click_on_second_paragraph_line_activates_it() -> None:
    adapter, views, _, _ = make_adapter("first\nsecond")
    assert views[-1].plain_lines == ["firstsecond"]

    adapter.handle_pointer_down(0, 8)
    adapter.handle_pointer_up(0, 8)

    assert adapter.editor.get_active_lines() == [2]


def test_drag_extends_active_range() -> None:
    adapter, _, _, statuses = make_adapter("# Title\n\nplain")

    adapter.handle_pointer_down(0, 2)
    adapter.handle_pointer_move(1, 1)
    adapter.handle_pointer_up(1, 1)

    assert adapter.editor.get_active_lines() == [1, 2, 3]
    assert statuses[-1] == "lines 1-3"


def test_clicking_checkbox_toggles_buffer() -> None:
    adapter, views, inputs, _ = make_adapter("- [ ] task")
    assert views[-1].plain_lines == ["  ☐  task"]

    adapter.handle_pointer_down(0, 2)

    assert adapter.editor.get_content() == "- [x] task"
    assert inputs[-1] == "- [x] task"
    assert views[-1].plain_lines == ["  ☑  task"]
    # a checkbox click is not a selection
    assert adapter.editor.get_active_lines() == []


def test_host_input_changes_rerender() -> None:
    adapter, views, inputs, _ = make_adapter("a")

    adapter.handle_input_changed("**b**")

    assert adapter.editor.get_content() == "**b**"
    assert views[-1].plain_lines == ["b"]
    # the host already holds this text; nothing is written back
    assert inputs == ["a"]


def test_close_destroys_editor() -> None:
    adapter, views, _, _ = make_adapter("a")
    adapter.close()
    rendered = len(views)

    assert adapter.editor.destroyed
    adapter.handle_input_changed("ignored")
    assert adapter.editor.get_content() == "a"
    adapter.handle_pointer_down(0, 0)
    adapter.handle_pointer_up(0, 0)
    assert len(views) == rendered


def test_render_rows_layout_helpers() -> None:
    view = render_rows(
        [
            create_element("hr"),
            create_element(
                "p", None, create_element("img", {"src": "a.png", "title": "cat"})
            ),
            create_element(
                "p", None, create_text("x"), create_element("b", None, create_text("y"))
            ),
        ]
    )

    assert view.plain_lines == ["─" * 24, "[image: cat]", "xy"]
    assert view.node_at(2, 99) is not None
    assert view.node_at(7, 0) is None
    assert view.text.plain == "\n".join(view.plain_lines)


def test_render_rows_rejects_unknown_node_kinds() -> None:
    with pytest.raises(TypeError):
        render_rows([create_element("p", None, Node())])
