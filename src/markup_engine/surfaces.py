"""Collaborator boundary: the raw text input and the display surface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Sequence

from markup_engine.nodes import Node, iter_tree

InputListener = Callable[[], None]
Unsubscribe = Callable[[], None]


@dataclass(frozen=True, slots=True)
class HostSelection:
    """Selection reported by the display host as output node ids.

    ``extent_id`` is ``None`` for a collapsed cursor.
    """

    anchor_id: int
    anchor_offset: int = 0
    extent_id: Optional[int] = None
    extent_offset: int = 0


class TextInputSurface(Protocol):
    """Editable raw-text surface kept in sync with the buffer."""

    def read(self) -> str:
        """Return the surface's current text."""
        ...

    def write(self, text: str) -> None:
        """Replace the surface's text with the canonical buffer."""
        ...

    def subscribe(self, listener: InputListener) -> Unsubscribe:
        """Call ``listener`` on every input/change; return a detach callable."""
        ...


class DisplaySurface(Protocol):
    """Surface whose children are replaced wholesale on every render."""

    def replace_children(self, nodes: Sequence[Node]) -> None: ...

    def get_selection(self) -> Optional[HostSelection]:
        """Current selection, or ``None`` if it lies outside this surface."""
        ...


class MemoryTextInput:
    """In-process text input; ``type`` simulates a user edit."""

    def __init__(self, text: str = "") -> None:
        self.text = text
        self.writes: List[str] = []
        self._listeners: List[InputListener] = []

    def read(self) -> str:
        return self.text

    def write(self, text: str) -> None:
        self.text = text
        self.writes.append(text)

    def subscribe(self, listener: InputListener) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def type(self, text: str) -> None:
        self.text = text
        for listener in list(self._listeners):
            listener()


class MemoryDisplay:
    """In-process display holding the last committed node sequence."""

    def __init__(self) -> None:
        self.children: tuple[Node, ...] = ()
        self.commits = 0
        self.selection: Optional[HostSelection] = None

    def replace_children(self, nodes: Sequence[Node]) -> None:
        self.children = tuple(nodes)
        self.commits += 1

    def get_selection(self) -> Optional[HostSelection]:
        if self.selection is None:
            return None
        rendered = {node.id for node in iter_tree(self.children)}
        if self.selection.anchor_id not in rendered:
            return None
        return self.selection

    def select(
        self, anchor: Node, extent: Optional[Node] = None, *, offset: int = 0
    ) -> None:
        self.selection = HostSelection(
            anchor_id=anchor.id,
            anchor_offset=offset,
            extent_id=extent.id if extent is not None else None,
        )

    def clear_selection(self) -> None:
        self.selection = None


__all__ = [
    "DisplaySurface",
    "HostSelection",
    "InputListener",
    "MemoryDisplay",
    "MemoryTextInput",
    "TextInputSurface",
    "Unsubscribe",
]
