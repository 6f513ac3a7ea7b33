"""Map host selections to the set of active line indices."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Sequence

from markup_engine.nodes import Node
from markup_engine.runtime import telemetry
from markup_engine.surfaces import DisplaySurface, HostSelection

LOGGER_NAME = "markup_engine.selection"


class NodeLineIndex:
    """Side table from rendered node id to the line index that produced it.

    Rebuilt from scratch on every render; stale ids simply stop resolving.
    """

    def __init__(self) -> None:
        self._lines: Dict[int, int] = {}

    def clear(self) -> None:
        self._lines.clear()

    def register(self, line_idx: int, nodes: Iterable[Node]) -> None:
        for root in nodes:
            for node in root.walk():
                self._lines.setdefault(node.id, line_idx)

    def lookup(self, node_id: int) -> Optional[int]:
        return self._lines.get(node_id)

    def __len__(self) -> int:
        return len(self._lines)


def lines_for_selection(
    selection: HostSelection, index: NodeLineIndex
) -> Optional[List[int]]:
    """Inclusive line range covered by ``selection``; ``None`` if unmapped."""

    start = index.lookup(selection.anchor_id)
    if start is None:
        return None
    end = None
    if selection.extent_id is not None and selection.extent_id != selection.anchor_id:
        end = index.lookup(selection.extent_id)
    if end is None:
        return [start]
    low, high = min(start, end), max(start, end)
    return list(range(low, high + 1))


class SelectionTracker:
    """Pointer-driven active-line tracking.

    Pointer-down always samples; the primary button additionally starts
    move tracking until the matching pointer-up.
    """

    def __init__(
        self,
        display: DisplaySurface,
        index: NodeLineIndex,
        on_change: Callable[[], None],
        *,
        primary_button: int = 0,
    ) -> None:
        self.display = display
        self.index = index
        self._on_change = on_change
        self.primary_button = primary_button
        self._active: List[int] = []
        self._tracking = False

    @property
    def active_lines(self) -> List[int]:
        return list(self._active)

    @property
    def tracking(self) -> bool:
        return self._tracking

    def handle_pointer_down(self, button: int = 0) -> bool:
        changed = self.sample()
        if button == self.primary_button:
            self._tracking = True
        return changed

    def handle_pointer_move(self) -> bool:
        if not self._tracking:
            return False
        return self.sample()

    def handle_pointer_up(self, button: int = 0) -> bool:
        if button != self.primary_button:
            return False
        changed = self.sample()
        self._tracking = False
        return changed

    def sample(self) -> bool:
        """Read the host selection; re-render when the active set changed."""

        selection = self.display.get_selection()
        if selection is None:
            return False
        lines = lines_for_selection(selection, self.index)
        if lines is None:
            return False
        return self.set_active_lines(lines)

    def set_active_lines(self, lines: Sequence[int]) -> bool:
        updated = list(lines)
        if updated == self._active:
            return False
        telemetry.record_event(
            "selection.active_lines",
            data={"previous": self._active, "lines": updated},
            logger_name=LOGGER_NAME,
        )
        self._active = updated
        self._on_change()
        return True


__all__ = ["NodeLineIndex", "SelectionTracker", "lines_for_selection"]
