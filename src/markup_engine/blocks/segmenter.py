"""Partition buffer lines into blocks using ordered delimiter providers."""

from __future__ import annotations

from typing import List, Optional, Sequence

from markup_engine.document import Line
from markup_engine.runtime import telemetry

from .models import Block, BlockProvider

LOGGER_NAME = "markup_engine.blocks"


def match_provider(
    line: Line, providers: Sequence[BlockProvider]
) -> Optional[BlockProvider]:
    """Return the first provider whose ``start`` equals ``line.content``."""

    for provider in providers:
        if line.content == provider.start:
            return provider
    return None


class BlockSegmenter:
    """Two-variable state machine over the line list.

    ``current`` is the block being built; ``previous`` is the provider that
    most recently closed a block, which lets fence-style delimiters reopen.
    """

    def __init__(self, providers: Sequence[BlockProvider]) -> None:
        self.providers = tuple(providers)

    def segment(self, lines: Sequence[Line]) -> List[Block]:
        with telemetry.span(
            "blocks::segment",
            logger_name=LOGGER_NAME,
            component="blocks",
            metadata={"lines": len(lines), "providers": len(self.providers)},
        ) as handle:
            blocks = self._segment(lines)
            handle.add_metadata("blocks", len(blocks))
        return blocks

    def _segment(self, lines: Sequence[Line]) -> List[Block]:
        blocks: List[Block] = []
        current: Optional[Block] = None
        previous: Optional[BlockProvider] = None

        for position, line in enumerate(lines):
            if current is None:
                provider = match_provider(line, self.providers)
                if provider is not None:
                    current = Block(provider=provider, start_line=line)
                    continue
                prev_line = lines[position - 1] if position > 0 else None
                if (
                    previous is not None
                    and previous.use_end_of_prev_as_start_of_next
                    and prev_line is not None
                    and prev_line.content == previous.start
                ):
                    current = Block(provider=previous, start_line=prev_line, lines=[line])
                    continue
                telemetry.record_event(
                    "blocks.skip_line",
                    data={"idx": line.idx},
                    logger_name=LOGGER_NAME,
                )
                continue

            if line.content == current.provider.end:
                current.end_line = line
                blocks.append(current)
                previous = current.provider
                current = None
                continue

            if not current.lines:
                # an empty block yields to a fresh opener instead of swallowing it
                provider = match_provider(line, self.providers)
                if provider is not None:
                    current = Block(provider=provider, start_line=line)
                    continue

            current.lines.append(line)

        if current is not None:
            blocks.append(current)
        return blocks


def segment_lines(
    lines: Sequence[Line], providers: Sequence[BlockProvider]
) -> List[Block]:
    return BlockSegmenter(providers).segment(lines)


__all__ = ["BlockSegmenter", "match_provider", "segment_lines"]
