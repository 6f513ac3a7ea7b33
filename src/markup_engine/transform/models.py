"""Dataclasses exchanged between transformers and the render pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Literal, Optional, Protocol, Sequence, Union

from markup_engine.document import Line, RangeLike, TextRange
from markup_engine.nodes import Element, Node

TransformerKind = Literal["line", "block"]
TRANSFORMER_KINDS: tuple[str, ...] = ("line", "block")

LineOutput = Union[Node, List[Node]]


class EditorHandle(Protocol):
    """Narrow view of the editor handed to transformers and display callbacks."""

    def get_content(self) -> str: ...

    def get_content_at_range(self, span: RangeLike) -> str: ...

    def set_content(self, content: str) -> None: ...

    def insert_content(self, offset: int, content: str) -> None: ...

    def set_content_at_range(self, span: RangeLike, content: str) -> None: ...

    def get_active_lines(self) -> List[int]: ...

    def on(self, event: str, callback: Callable[..., None]) -> None: ...

    def once(self, event: str, callback: Callable[..., None]) -> None: ...

    def off(self, event: str, callback: Callable[..., None]) -> None: ...


@dataclass(slots=True)
class ParentWithSlot:
    """Wrap request: ``node`` replaces the output, children mount on ``slot``."""

    node: Element
    slot: Optional[Element] = None

    @property
    def mount(self) -> Element:
        return self.slot if self.slot is not None else self.node


@dataclass(frozen=True, slots=True)
class Padding:
    left: int = 0
    right: int = 0


@dataclass(slots=True)
class TextTransformResult:
    """A pattern match over part of a line's raw text.

    ``range`` spans the whole match, delimiters included; ``padding`` is the
    delimiter width on each side of the inner content.
    """

    result: ParentWithSlot
    range: TextRange
    padding: Padding
    content: str

    @property
    def inner_start(self) -> int:
        return self.range.start + self.padding.left

    @property
    def inner_end(self) -> int:
        return self.range.end - self.padding.right

    def append(self, node: Node) -> None:
        self.result.mount.append(node)


DisplayCallback = Callable[[], Optional[Node]]


@dataclass(frozen=True, slots=True)
class RangeDisplay:
    default: DisplayCallback
    active: DisplayCallback


@dataclass(frozen=True, slots=True)
class RangeDisplayDefinition:
    """Toggle region rendered by ``display.active`` while its line is active."""

    start: int
    end: int
    display: RangeDisplay

    def __post_init__(self) -> None:
        if self.start < 0 or self.end <= self.start:
            raise ValueError(f"Invalid display range [{self.start}, {self.end})")

    def render(self, active: bool) -> Optional[Node]:
        callback = self.display.active if active else self.display.default
        return callback()


@dataclass(slots=True)
class LineTransformerContext:
    line: Line
    editor: EditorHandle
    parent: Optional[ParentWithSlot] = None
    transform_results: List[TextTransformResult] = field(default_factory=list)
    range_displays: List[RangeDisplayDefinition] = field(default_factory=list)

    def define_range_display(self, definition: RangeDisplayDefinition) -> None:
        self.range_displays.append(definition)


@dataclass(slots=True)
class BlockTransformerContext:
    lines: Sequence[Line]
    children: List[Node]
    editor: EditorHandle
    parent: Optional[ParentWithSlot] = None


LineTransformCallback = Callable[[LineTransformerContext], None]
BlockTransformCallback = Callable[[BlockTransformerContext], None]


@dataclass(frozen=True, slots=True)
class Transformer:
    """Configured mutation over a line- or block-scoped context."""

    kind: TransformerKind
    transform: Callable[..., None]
    name: str = ""

    def __post_init__(self) -> None:
        if self.kind not in TRANSFORMER_KINDS:
            raise ValueError(
                f"Transformer kind must be one of {TRANSFORMER_KINDS}, got {self.kind!r}"
            )
        if not callable(self.transform):
            raise TypeError("transform must be callable")
        if not self.name:
            label = getattr(self.transform, "__name__", "transform")
            object.__setattr__(self, "name", f"{self.kind}:{label}")

    def __call__(self, context: object) -> None:
        self.transform(context)


@dataclass(slots=True)
class TransformedLine:
    line: Line
    output: LineOutput

    def nodes(self) -> List[Node]:
        return list(self.output) if isinstance(self.output, list) else [self.output]


__all__ = [
    "BlockTransformCallback",
    "BlockTransformerContext",
    "DisplayCallback",
    "EditorHandle",
    "LineOutput",
    "LineTransformCallback",
    "LineTransformerContext",
    "Padding",
    "ParentWithSlot",
    "RangeDisplay",
    "RangeDisplayDefinition",
    "TextTransformResult",
    "TransformedLine",
    "Transformer",
    "TransformerKind",
]
