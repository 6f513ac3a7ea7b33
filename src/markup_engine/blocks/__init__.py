"""Block providers and the line segmenter."""

from .models import Block, BlockProvider, TransformerSpec, create_block_provider
from .segmenter import BlockSegmenter, match_provider, segment_lines

__all__ = [
    "Block",
    "BlockProvider",
    "BlockSegmenter",
    "TransformerSpec",
    "create_block_provider",
    "match_provider",
    "segment_lines",
]
