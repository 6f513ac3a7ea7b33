"""Host-neutral controller wiring the editor to Textual-style UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from markup_engine.editor import Editor, EditorOptions, ProviderSpec
from markup_engine.nodes import Element, Node, iter_tree
from markup_engine.surfaces import HostSelection, InputListener, Unsubscribe

from .render import RenderedView, render_rows

Position = Tuple[int, int]  # (row, column)


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_display: Callable[[RenderedView], None]
    update_input: Callable[[str], None] = _noop
    update_status: Callable[[str], None] = _noop
    # Optional debug line sink
    log: Callable[[str], None] = _noop


class HookedTextInput:
    """Text input surface mirrored into the host's text widget."""

    def __init__(self, hooks: TextualUIHooks) -> None:
        self.hooks = hooks
        self.text = ""
        self._listeners: List[InputListener] = []

    def read(self) -> str:
        return self.text

    def write(self, text: str) -> None:
        if text == self.text:
            return
        self.text = text
        self.hooks.update_input(text)

    def subscribe(self, listener: InputListener) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def host_changed(self, text: str) -> None:
        """The user edited the host widget."""

        self.text = text
        for listener in list(self._listeners):
            listener()


class RowDisplay:
    """Display surface that lays nodes out as rows and tracks a selection."""

    def __init__(self, hooks: TextualUIHooks) -> None:
        self.hooks = hooks
        self.nodes: tuple[Node, ...] = ()
        self.view = RenderedView(rows=[])
        self._by_id: Dict[int, Node] = {}
        self._selection: Optional[HostSelection] = None

    def replace_children(self, nodes: Sequence[Node]) -> None:
        self.nodes = tuple(nodes)
        self._by_id = {node.id: node for node in iter_tree(self.nodes)}
        self.view = render_rows(self.nodes)
        self.hooks.update_display(self.view)

    def get_selection(self) -> Optional[HostSelection]:
        if self._selection is None or self._selection.anchor_id not in self._by_id:
            return None
        return self._selection

    def node(self, node_id: int) -> Optional[Node]:
        return self._by_id.get(node_id)

    def node_at(self, position: Position) -> Optional[Node]:
        node_id = self.view.node_at(*position)
        return None if node_id is None else self._by_id.get(node_id)

    def select(self, anchor: Position, extent: Optional[Position] = None) -> bool:
        anchor_id = self.view.node_at(*anchor)
        if anchor_id is None:
            self._selection = None
            return False
        extent_id = self.view.node_at(*extent) if extent is not None else None
        self._selection = HostSelection(
            anchor_id=anchor_id,
            anchor_offset=anchor[1],
            extent_id=extent_id,
            extent_offset=extent[1] if extent is not None else 0,
        )
        return True


class TextualEditorAdapter:
    """Bridges pointer/input events from a host UI to an ``Editor``."""

    def __init__(
        self,
        hooks: TextualUIHooks,
        *,
        initial_content: str = "",
        block_providers: Optional[Sequence[ProviderSpec]] = None,
        options: Optional[EditorOptions] = None,
    ) -> None:
        self.hooks = hooks
        self.text_input = HookedTextInput(hooks)
        self.display = RowDisplay(hooks)
        self._drag_anchor: Optional[Position] = None
        self.editor = Editor(
            self.text_input,
            self.display,
            initial_content=initial_content,
            block_providers=block_providers,
            options=options,
        )
        self.editor.on("render", self._after_render)
        self._after_render()

    def handle_input_changed(self, text: str) -> None:
        self._log("input ->", length=len(text))
        self.text_input.host_changed(text)

    def handle_pointer_down(self, row: int, column: int, *, button: int = 0) -> None:
        self._log("pointer_down ->", row=row, column=column, button=button)
        if button == self.editor.selection.primary_button and self.activate(row, column):
            return
        self._drag_anchor = (row, column)
        self.display.select((row, column))
        self.editor.selection.handle_pointer_down(button)

    def handle_pointer_move(self, row: int, column: int) -> None:
        if self._drag_anchor is None:
            return
        self.display.select(self._drag_anchor, (row, column))
        self.editor.selection.handle_pointer_move()

    def handle_pointer_up(self, row: int, column: int, *, button: int = 0) -> None:
        self._log("pointer_up ->", row=row, column=column, button=button)
        if self._drag_anchor is not None:
            self.display.select(self._drag_anchor, (row, column))
        self.editor.selection.handle_pointer_up(button)
        if button == self.editor.selection.primary_button:
            self._drag_anchor = None

    def activate(self, row: int, column: int) -> bool:
        """Fire ``change`` on an interactive node (e.g. a checkbox) at the position."""

        node = self.display.node_at((row, column))
        if not isinstance(node, Element) or node.name != "input":
            return False
        self._log("activate ->", node=node.id)
        return node.dispatch_event("change")

    def close(self) -> None:
        self.editor.destroy()

    def _after_render(self) -> None:
        active = self.editor.get_active_lines()
        label = f"lines {active[0]}-{active[-1]}" if active else "no selection"
        self.hooks.update_status(label)

    def _log(self, prefix: str, **fields: object) -> None:
        parts = [prefix]
        parts.extend(f"{key}={value!r}" for key, value in fields.items())
        self.hooks.log(" ".join(parts))


__all__ = [
    "HookedTextInput",
    "RowDisplay",
    "TextualEditorAdapter",
    "TextualUIHooks",
]
