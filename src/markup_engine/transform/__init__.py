"""Transformer models, factories, and the line/block render engines."""

from .assembly import assemble_line, sort_results, validate_nesting
from .block_engine import TransformedBlock, transform_block
from .factories import (
    create_block_transformer,
    create_line_transformer,
    create_text_transformer,
)
from .line_engine import collect_line, transform_line
from .models import (
    BlockTransformerContext,
    EditorHandle,
    LineTransformerContext,
    Padding,
    ParentWithSlot,
    RangeDisplay,
    RangeDisplayDefinition,
    TextTransformResult,
    TransformedLine,
    Transformer,
)

__all__ = [
    "BlockTransformerContext",
    "EditorHandle",
    "LineTransformerContext",
    "Padding",
    "ParentWithSlot",
    "RangeDisplay",
    "RangeDisplayDefinition",
    "TextTransformResult",
    "TransformedBlock",
    "TransformedLine",
    "Transformer",
    "assemble_line",
    "collect_line",
    "create_block_transformer",
    "create_line_transformer",
    "create_text_transformer",
    "sort_results",
    "transform_block",
    "transform_line",
    "validate_nesting",
]
