"""Combine a block's line outputs through block-scoped transformers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Sequence, Union

from markup_engine.nodes import Node
from markup_engine.runtime import telemetry

from .models import BlockTransformerContext, EditorHandle, TransformedLine, Transformer

if TYPE_CHECKING:  # pragma: no cover - typing only, avoids an import cycle
    from markup_engine.blocks import Block

LOGGER_NAME = "markup_engine.transform"


@dataclass(slots=True)
class TransformedBlock:
    output: Union[Node, List[TransformedLine]]

    def nodes(self) -> List[Node]:
        """Flatten into the document-level node sequence."""

        if isinstance(self.output, Node):
            return [self.output]
        flat: List[Node] = []
        for line in self.output:
            flat.extend(line.nodes())
        return flat


def transform_block(
    block: "Block",
    transformers: Sequence[Transformer],
    lines: Sequence[TransformedLine],
    editor: EditorHandle,
) -> TransformedBlock:
    children: List[Node] = []
    for line in lines:
        children.extend(line.nodes())

    context = BlockTransformerContext(
        lines=tuple(block.lines), children=children, editor=editor
    )
    with telemetry.span(
        "transform::block",
        logger_name=LOGGER_NAME,
        metadata={"provider": block.provider.name, "lines": len(block.lines)},
    ):
        for transformer in transformers:
            transformer(context)

    if context.parent is None:
        return TransformedBlock(output=list(lines))

    # line outputs stay separate nodes so each maps back to its own line
    mount = context.parent.mount
    for line in lines:
        mount.append(*line.nodes())
    return TransformedBlock(output=context.parent.node)


__all__ = ["TransformedBlock", "transform_block"]
