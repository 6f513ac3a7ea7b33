"""Selection tracking for the active/default display overlay."""

from .tracker import NodeLineIndex, SelectionTracker, lines_for_selection

__all__ = ["NodeLineIndex", "SelectionTracker", "lines_for_selection"]
