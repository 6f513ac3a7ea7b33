from __future__ import annotations

from typing import List, Tuple

from markup_engine.nodes import Element, create_element, create_text
from markup_engine.selection import NodeLineIndex, SelectionTracker, lines_for_selection
from markup_engine.surfaces import HostSelection, MemoryDisplay


def make_tracker() -> Tuple[SelectionTracker, MemoryDisplay, List[Element], List[int]]:
    """Three rendered lines (1, 2, 3) mapped in a fresh index."""

    display = MemoryDisplay()
    index = NodeLineIndex()
    nodes = [create_element("p", None, create_text(f"line {idx}")) for idx in (1, 2, 3)]
    for idx, node in zip((1, 2, 3), nodes):
        index.register(idx, [node])
    display.replace_children(nodes)
    renders: List[int] = []
    tracker = SelectionTracker(display, index, lambda: renders.append(1))
    return tracker, display, nodes, renders


def test_index_maps_whole_subtrees() -> None:
    index = NodeLineIndex()
    text = create_text("x")
    root = create_element("li", None, text)
    index.register(4, [root])

    assert index.lookup(root.id) == 4
    assert index.lookup(text.id) == 4
    assert len(index) == 2
    index.clear()
    assert index.lookup(text.id) is None


def test_lines_for_selection_orders_reversed_ranges() -> None:
    index = NodeLineIndex()
    first, last = create_text("a"), create_text("b")
    index.register(2, [first])
    index.register(5, [last])

    selection = HostSelection(anchor_id=last.id, extent_id=first.id)
    assert lines_for_selection(selection, index) == [2, 3, 4, 5]


def test_lines_for_selection_handles_unmapped_ids() -> None:
    index = NodeLineIndex()
    known = create_text("a")
    index.register(3, [known])

    assert lines_for_selection(HostSelection(anchor_id=-1), index) is None
    assert lines_for_selection(
        HostSelection(anchor_id=known.id, extent_id=-1), index
    ) == [3]


def test_pointer_down_samples_and_starts_tracking() -> None:
    tracker, display, nodes, renders = make_tracker()
    display.select(nodes[1].children[0])

    assert tracker.handle_pointer_down(0) is True
    assert tracker.active_lines == [2]
    assert tracker.tracking
    assert renders == [1]


def test_move_extends_selection_only_while_tracking() -> None:
    tracker, display, nodes, renders = make_tracker()
    display.select(nodes[0])
    tracker.handle_pointer_down(0)

    display.select(nodes[0], nodes[2])
    assert tracker.handle_pointer_move() is True
    assert tracker.active_lines == [1, 2, 3]

    tracker.handle_pointer_up(0)
    assert not tracker.tracking
    display.select(nodes[1])
    assert tracker.handle_pointer_move() is False
    assert tracker.active_lines == [1, 2, 3]


def test_secondary_button_samples_without_tracking() -> None:
    tracker, display, nodes, renders = make_tracker()
    display.select(nodes[2])

    tracker.handle_pointer_down(2)

    assert tracker.active_lines == [3]
    assert not tracker.tracking
    assert tracker.handle_pointer_up(2) is False


def test_unchanged_selection_does_not_rerender() -> None:
    tracker, display, nodes, renders = make_tracker()
    display.select(nodes[0])
    tracker.handle_pointer_down(0)
    tracker.handle_pointer_up(0)

    assert renders == [1]


def test_selection_outside_display_is_ignored() -> None:
    tracker, display, nodes, renders = make_tracker()
    display.select(create_text("elsewhere"))

    assert tracker.handle_pointer_down(0) is False
    assert tracker.active_lines == []
    assert renders == []


def test_active_lines_is_a_copy() -> None:
    tracker, display, nodes, renders = make_tracker()
    tracker.set_active_lines([1])
    tracker.active_lines.append(9)

    assert tracker.active_lines == [1]
