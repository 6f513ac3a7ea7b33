"""The editor instance: buffer, render pipeline, selection, and hooks."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Iterable, List, Optional, Sequence, Union

from markup_engine.blocks import Block, BlockProvider, BlockSegmenter
from markup_engine.defaults import default_block_providers
from markup_engine.document import ContentStore, RangeLike, TextRange, split_lines
from markup_engine.errors import EditorDestroyedError, RangeOverlapError
from markup_engine.events import BEFORE_RENDER, CHANGE, RENDER, Callback, LifecycleHub
from markup_engine.nodes import Node
from markup_engine.runtime import telemetry
from markup_engine.selection import NodeLineIndex, SelectionTracker
from markup_engine.surfaces import DisplaySurface, TextInputSurface
from markup_engine.transform import (
    collect_line,
    transform_block,
    transform_line,
    validate_nesting,
)

LOGGER_NAME = "markup_engine.editor"

ProviderSpec = Union[BlockProvider, Iterable["ProviderSpec"]]


@dataclass(slots=True)
class EditorOptions:
    """Per-instance knobs.

    By default partially overlapping transform results are logged as
    ``transform.range_overlap`` errors and the later result is dropped. With
    ``validate_ranges`` a mutation whose content would overlap is rejected
    with ``RangeOverlapError`` before the buffer, hooks or surfaces change.
    """

    validate_ranges: bool = False
    primary_button: int = 0


def _flatten_providers(entries: Iterable[ProviderSpec]) -> tuple[BlockProvider, ...]:
    flat: List[BlockProvider] = []
    for entry in entries:
        if isinstance(entry, BlockProvider):
            flat.append(entry)
        else:
            flat.extend(_flatten_providers(entry))
    return tuple(flat)


class EditorProxy:
    """The only view of the editor that transformers get to hold."""

    __slots__ = ("_editor",)

    def __init__(self, editor: "Editor") -> None:
        self._editor = editor

    def get_content(self) -> str:
        return self._editor.get_content()

    def get_content_at_range(self, span: RangeLike) -> str:
        return self._editor.get_content_at_range(span)

    def set_content(self, content: str) -> None:
        self._editor.set_content(content)

    def insert_content(self, offset: int, content: str) -> None:
        self._editor.insert_content(offset, content)

    def set_content_at_range(self, span: RangeLike, content: str) -> None:
        self._editor.set_content_at_range(span, content)

    def get_active_lines(self) -> List[int]:
        return self._editor.get_active_lines()

    def on(self, event: str, callback: Callback) -> None:
        self._editor.on(event, callback)

    def once(self, event: str, callback: Callback) -> None:
        self._editor.once(event, callback)

    def off(self, event: str, callback: Callback) -> None:
        self._editor.off(event, callback)


class Editor:
    """Re-renders the whole buffer into the display on every change.

    Mutations and renders requested while another one is in progress (from a
    lifecycle listener or an interactive node) are queued and run, in order,
    right after it finishes and before the outermost call returns.
    """

    def __init__(
        self,
        text_input: TextInputSurface,
        display: DisplaySurface,
        *,
        initial_content: str = "",
        block_providers: Optional[Sequence[ProviderSpec]] = None,
        options: Optional[EditorOptions] = None,
    ) -> None:
        self.text_input = text_input
        self.display = display
        self.options = options or EditorOptions()
        self.logger = telemetry.get_logger(LOGGER_NAME)
        self._store = ContentStore(initial_content)
        self._hub = LifecycleHub()
        self._providers = _flatten_providers(
            default_block_providers() if block_providers is None else block_providers
        )
        self._segmenter = BlockSegmenter(self._providers)
        self._node_index = NodeLineIndex()
        self.selection = SelectionTracker(
            display,
            self._node_index,
            self._request_render,
            primary_button=self.options.primary_button,
        )
        self._proxy = EditorProxy(self)
        self._output: tuple[Node, ...] = ()
        self._blocks: tuple[Block, ...] = ()
        self._on_destroyed: List[Callable[[], None]] = []
        self._deferred: Deque[Callable[[], None]] = deque()
        self._busy = False
        self._destroyed = False

        self._bind_surfaces()
        self._request_render()

    # -- public API -----------------------------------------------------

    @property
    def providers(self) -> tuple[BlockProvider, ...]:
        return self._providers

    @property
    def output(self) -> tuple[Node, ...]:
        return self._output

    @property
    def blocks(self) -> tuple[Block, ...]:
        return self._blocks

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def get_content(self) -> str:
        return self._store.get_content()

    def get_content_at_range(self, span: RangeLike) -> str:
        return self._store.get_content_at_range(span)

    def get_active_lines(self) -> List[int]:
        return self.selection.active_lines

    def set_content(self, content: str) -> None:
        self._run(lambda: self._apply_content(content), label="set_content")

    def insert_content(self, offset: int, content: str) -> None:
        self._run(
            lambda: self._apply_content(self._store.inserted_text(offset, content)),
            label="insert_content",
        )

    def set_content_at_range(self, span: RangeLike, content: str) -> None:
        target = TextRange.coerce(span)
        if target.is_empty:
            return
        self._run(
            lambda: self._apply_content(self._store.replaced_text(target, content)),
            label="set_content_at_range",
        )

    def on(self, event: str, callback: Callback) -> None:
        self._hub.on(event, callback)

    def once(self, event: str, callback: Callback) -> None:
        self._hub.once(event, callback)

    def off(self, event: str, callback: Callback) -> None:
        self._hub.off(event, callback)

    def destroy(self) -> None:
        """Detach the input-surface bindings made at construction."""

        while self._on_destroyed:
            self._on_destroyed.pop()()
        if not self._destroyed:
            telemetry.record_event("editor.destroy", logger_name=LOGGER_NAME)
        self._destroyed = True

    # -- internals ------------------------------------------------------

    def _bind_surfaces(self) -> None:
        def handle_input() -> None:
            self.set_content(self.text_input.read())

        self._on_destroyed.append(self.text_input.subscribe(handle_input))

    def _run(self, action: Callable[[], None], *, label: str) -> None:
        if self._destroyed:
            raise EditorDestroyedError(f"Cannot {label} on a destroyed editor")
        if self._busy:
            self._deferred.append(action)
            telemetry.record_event(
                "editor.defer",
                data={"action": label, "queued": len(self._deferred)},
                logger_name=LOGGER_NAME,
            )
            return
        self._busy = True
        try:
            action()
            while self._deferred:
                self._deferred.popleft()()
        finally:
            self._deferred.clear()
            self._busy = False

    def _apply_content(self, content: str) -> None:
        if content == self._store.get_content():
            return
        if self.options.validate_ranges:
            self._check_ranges(content)
        self._store.commit(content)
        telemetry.record_event(
            "editor.content_changed",
            data={"version": self._store.version, "length": len(content)},
            logger_name=LOGGER_NAME,
        )
        self._hub.emit(CHANGE, content)
        self._render()

    def _check_ranges(self, content: str) -> None:
        for block in self._segmenter.segment(split_lines(content)):
            transformers = block.provider.line_transformers
            for line in block.lines:
                context = collect_line(line, transformers, self._proxy)
                try:
                    validate_nesting(context.transform_results, line.idx)
                except RangeOverlapError as exc:
                    telemetry.record_event(
                        "editor.content_rejected",
                        level="error",
                        data={"line": exc.line_idx, "first": exc.first, "second": exc.second},
                        logger_name=LOGGER_NAME,
                    )
                    raise

    def _request_render(self) -> None:
        if self._destroyed:
            return
        self._run(self._render, label="render")

    def _render(self) -> None:
        self._hub.emit(BEFORE_RENDER)
        with telemetry.span(
            "editor::render",
            logger_name=LOGGER_NAME,
            component="editor",
            metadata={"version": self._store.version},
        ) as handle:
            output = self._build_output()
            handle.add_metadata("nodes", len(output))
            handle.add_metadata("blocks", len(self._blocks))
        self._commit(output)
        self._hub.emit(RENDER)

    def _build_output(self) -> List[Node]:
        self._node_index.clear()
        content = self._store.get_content()
        if content == "":
            self._blocks = ()
            return []

        blocks = self._segmenter.segment(split_lines(content))
        active = set(self.selection.active_lines)
        output: List[Node] = []
        for block in blocks:
            provider = block.provider
            line_transformers = provider.line_transformers
            transformed = []
            for line in block.lines:
                result = transform_line(
                    line,
                    line_transformers,
                    self._proxy,
                    active_lines=active,
                    validate=self.options.validate_ranges,
                )
                self._node_index.register(line.idx, result.nodes())
                transformed.append(result)
            combined = transform_block(
                block, provider.block_transformers, transformed, self._proxy
            )
            output.extend(combined.nodes())
        self._blocks = tuple(blocks)
        return output

    def _commit(self, output: Sequence[Node]) -> None:
        self._output = tuple(output)
        self.text_input.write(self._store.get_content())
        self.display.replace_children(self._output)


__all__ = ["Editor", "EditorOptions", "EditorProxy"]
