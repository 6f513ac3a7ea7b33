"""Executable Textual app: raw text on the left, rendered tree on the right."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when the demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Horizontal, VerticalScroll
    from textual.widgets import Footer, Header, Static, TextArea
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use markup_engine.adapters.textual.app"
    ) from exc

from markup_engine.runtime import telemetry

from .controller import TextualEditorAdapter, TextualUIHooks
from .render import RenderedView

SAMPLE_CONTENT = """# Markup engine
hello _**world**_! it's ~~not~~ _great_ to be **here**

- [ ] click the box
- [x] already done

1. first
2. second

> quoted `code`

[a link](https://example.com)"""


class RenderedPane(Static):
    """Display widget forwarding pointer events as (row, column) pairs."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.adapter: TextualEditorAdapter | None = None

    def _position(self, event: events.MouseEvent) -> Optional[tuple[int, int]]:
        offset = event.get_content_offset(self)
        if offset is None:
            return None
        return (offset.y, offset.x)

    def on_mouse_down(self, event: events.MouseDown) -> None:
        position = self._position(event)
        if self.adapter is None or position is None:
            return
        self.capture_mouse()
        self.adapter.handle_pointer_down(*position, button=event.button - 1)
        event.stop()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        position = self._position(event)
        if self.adapter is None or position is None:
            return
        self.adapter.handle_pointer_move(*position)

    def on_mouse_up(self, event: events.MouseUp) -> None:
        self.release_mouse()
        position = self._position(event)
        if self.adapter is None or position is None:
            return
        self.adapter.handle_pointer_up(*position, button=event.button - 1)
        event.stop()


class MarkupEditorApp(App[None]):
    """Minimal Textual UI embedding the markup engine."""

    CSS = """
	#raw-input {
		width: 1fr;
		border: round $accent;
	}

	#rendered-scroll {
		width: 1fr;
		border: round $secondary;
		padding: 0 1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, initial_content: str = SAMPLE_CONTENT) -> None:
        super().__init__()
        self._initial_content = initial_content
        self.adapter: TextualEditorAdapter | None = None
        self._input: TextArea | None = None
        self._pane: RenderedPane | None = None
        self._status: Static | None = None
        self.logger = telemetry.get_logger("markup_engine.textual")

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():
            self._input = TextArea(id="raw-input")
            yield self._input
            with VerticalScroll(id="rendered-scroll"):
                self._pane = RenderedPane("", id="rendered")
                yield self._pane
        self._status = Static("", id="status-line")
        yield self._status
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_display=self._update_display,
            update_input=self._update_input,
            update_status=self._update_status,
            log=self._log_line,
        )
        self.adapter = TextualEditorAdapter(hooks, initial_content=self._initial_content)
        if self._pane is not None:
            self._pane.adapter = self.adapter

    def on_unmount(self) -> None:
        if self.adapter is not None:
            self.adapter.close()
            self.adapter = None

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self.adapter is not None:
            self.adapter.handle_input_changed(event.text_area.text)

    def _update_display(self, view: RenderedView) -> None:
        if self._pane is not None:
            self._pane.update(view.text)

    def _update_input(self, text: str) -> None:
        if self._input is not None and self._input.text != text:
            self._input.load_text(text)

    def _update_status(self, status: str) -> None:
        if self._status is not None:
            self._status.update(status)

    def _log_line(self, line: str) -> None:
        self.logger.debug(line)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the markup engine Textual demo.")
    parser.add_argument(
        "--file",
        default=os.environ.get("MARKUP_ENGINE_DEMO_FILE"),
        help="Load initial content from this file",
    )
    parser.add_argument(
        "--content",
        default=None,
        help="Initial content (overrides --file)",
    )
    parser.add_argument(
        "--log-preset",
        choices=sorted(telemetry.PRESETS),
        default=None,
        help="Telemetry preset to activate before starting",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    content = SAMPLE_CONTENT
    if args.content is not None:
        content = args.content
    elif args.file:
        content = Path(args.file).read_text(encoding="utf-8")
    MarkupEditorApp(initial_content=content).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
