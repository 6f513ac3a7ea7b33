"""Live markup-to-tree rendering engine with a cursor-driven syntax overlay."""

__all__ = [
    "adapters",
    "blocks",
    "defaults",
    "document",
    "editor",
    "errors",
    "events",
    "nodes",
    "runtime",
    "selection",
    "surfaces",
    "transform",
]

__version__ = "0.1.0"
