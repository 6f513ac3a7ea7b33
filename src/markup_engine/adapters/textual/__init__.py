"""Textual host adapter (the app module itself needs ``textual``)."""

from .controller import (
    HookedTextInput,
    RowDisplay,
    TextualEditorAdapter,
    TextualUIHooks,
)
from .render import RenderedView, render_rows

__all__ = [
    "HookedTextInput",
    "RenderedView",
    "RowDisplay",
    "TextualEditorAdapter",
    "TextualUIHooks",
    "render_rows",
]
