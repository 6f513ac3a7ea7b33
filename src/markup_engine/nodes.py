"""Output node tree produced by the render pipeline.

Nodes are deliberately small: an ``Element`` has a tag name, attributes,
children and event listeners, a ``Text`` holds a string. Every node gets a
process-unique integer ``id`` at creation time which hosts use to report
selections back to the engine.
"""

from __future__ import annotations

import html
import itertools
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

BLOCK_ELEMENTS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "canvas",
        "dd",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hr",
        "li",
        "main",
        "nav",
        "noscript",
        "ol",
        "p",
        "pre",
        "section",
        "table",
        "ul",
    }
)

VOID_ELEMENTS = frozenset({"br", "hr", "img", "input"})

TEXT_NODE_NAME = "#text"

AttributeValue = str | bool | None
Listener = Callable[["Element"], None]

_node_ids = itertools.count(1)


class Node:
    """Common base for elements and text nodes."""

    __slots__ = ("id", "parent")

    name: str = ""

    def __init__(self) -> None:
        self.id: int = next(_node_ids)
        self.parent: Optional[Element] = None

    @property
    def text_content(self) -> str:
        raise NotImplementedError

    def walk(self) -> Iterator["Node"]:
        """Yield this node and all descendants, depth first."""

        yield self

    def detach(self) -> None:
        if self.parent is not None:
            self.parent.remove(self)


class Text(Node):
    __slots__ = ("data",)

    name = TEXT_NODE_NAME

    def __init__(self, data: str = "") -> None:
        super().__init__()
        self.data = data

    @property
    def text_content(self) -> str:
        return self.data

    def __repr__(self) -> str:
        return f"Text({self.data!r})"


class Element(Node):
    __slots__ = ("name", "attributes", "_children", "_listeners")

    def __init__(
        self,
        tag: str,
        attributes: Optional[Mapping[str, AttributeValue]] = None,
    ) -> None:
        super().__init__()
        if not tag:
            raise ValueError("tag cannot be empty")
        self.name = tag.lower()
        self.attributes: Dict[str, AttributeValue] = dict(attributes or {})
        self._children: List[Node] = []
        self._listeners: Dict[str, List[Listener]] = {}

    @property
    def children(self) -> tuple[Node, ...]:
        return tuple(self._children)

    @property
    def text_content(self) -> str:
        return "".join(child.text_content for child in self._children)

    def walk(self) -> Iterator[Node]:
        yield self
        for child in self._children:
            yield from child.walk()

    def append(self, *nodes: Node) -> None:
        """Append ``nodes`` in order, moving them out of any previous parent."""

        for node in nodes:
            if node is self:
                raise ValueError("cannot append an element to itself")
            node.detach()
            node.parent = self
            self._children.append(node)

    def remove(self, node: Node) -> None:
        self._children.remove(node)
        node.parent = None

    def normalize(self) -> None:
        """Merge adjacent text nodes and drop empty ones, recursively."""

        merged: List[Node] = []
        for child in self._children:
            if isinstance(child, Text):
                if not child.data:
                    child.parent = None
                    continue
                previous = merged[-1] if merged else None
                if isinstance(previous, Text):
                    previous.data += child.data
                    child.parent = None
                    continue
            elif isinstance(child, Element):
                child.normalize()
            merged.append(child)
        self._children = merged

    def get_attribute(self, name: str) -> AttributeValue:
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: AttributeValue) -> None:
        self.attributes[name] = value

    def add_event_listener(self, event: str, listener: Listener) -> None:
        self._listeners.setdefault(event, []).append(listener)

    def remove_event_listener(self, event: str, listener: Listener) -> None:
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def dispatch_event(self, event: str) -> bool:
        """Invoke listeners for ``event``; returns ``True`` if any ran."""

        listeners = list(self._listeners.get(event, ()))
        for listener in listeners:
            listener(self)
        return bool(listeners)

    def __repr__(self) -> str:
        return f"Element({self.name!r}, children={len(self._children)})"


def create_element(
    tag: str,
    attributes: Optional[Mapping[str, AttributeValue]] = None,
    *children: Node,
) -> Element:
    element = Element(tag, attributes)
    element.append(*children)
    return element


def create_text(data: str) -> Text:
    return Text(data)


def is_block_element(node: Node) -> bool:
    return node.name.lower() in BLOCK_ELEMENTS


def iter_tree(nodes: Iterable[Node]) -> Iterator[Node]:
    for node in nodes:
        yield from node.walk()


def _render_attributes(attributes: Mapping[str, AttributeValue]) -> str:
    parts = []
    for key, value in attributes.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {key}")
        else:
            parts.append(f' {key}="{html.escape(value, quote=True)}"')
    return "".join(parts)


def to_html(nodes: Node | Sequence[Node]) -> str:
    """Serialize a node or node sequence to an HTML string."""

    if isinstance(nodes, Node):
        nodes = (nodes,)
    out: List[str] = []
    for node in nodes:
        if isinstance(node, Text):
            out.append(html.escape(node.data, quote=False))
            continue
        if not isinstance(node, Element):
            raise TypeError(f"Cannot serialize {type(node).__name__} node")
        attrs = _render_attributes(node.attributes)
        if node.name in VOID_ELEMENTS and not node.children:
            out.append(f"<{node.name}{attrs}>")
            continue
        out.append(f"<{node.name}{attrs}>{to_html(node.children)}</{node.name}>")
    return "".join(out)


__all__ = [
    "BLOCK_ELEMENTS",
    "Element",
    "Node",
    "Text",
    "create_element",
    "create_text",
    "is_block_element",
    "iter_tree",
    "to_html",
]
