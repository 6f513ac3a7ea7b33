"""Helpers for building transformers from plain callables and patterns."""

from __future__ import annotations

import re
from typing import Callable, Pattern, Union

from markup_engine.document import TextRange

from .models import (
    BlockTransformCallback,
    LineTransformCallback,
    LineTransformerContext,
    Padding,
    ParentWithSlot,
    TextTransformResult,
    Transformer,
)

MatchBuilder = Callable[["re.Match[str]"], ParentWithSlot]


def create_line_transformer(
    transform: LineTransformCallback, *, name: str = ""
) -> Transformer:
    return Transformer(kind="line", transform=transform, name=name)


def create_block_transformer(
    transform: BlockTransformCallback, *, name: str = ""
) -> Transformer:
    return Transformer(kind="block", transform=transform, name=name)


def create_text_transformer(
    pattern: Union[str, Pattern[str]], build: MatchBuilder, *, name: str = ""
) -> Transformer:
    """Line transformer pushing one result per match of ``pattern``.

    Group 1 is the inner content; matches where it is empty are skipped.
    Padding is the distance from the match bounds to group 1.
    """

    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    if regex.groups < 1:
        raise ValueError(f"Pattern {regex.pattern!r} needs a capturing group")

    def transform(context: LineTransformerContext) -> None:
        for match in regex.finditer(context.line.content):
            if not match.group(1):
                continue
            start, end = match.span()
            inner_start, inner_end = match.span(1)
            context.transform_results.append(
                TextTransformResult(
                    result=build(match),
                    range=TextRange(start, end),
                    padding=Padding(left=inner_start - start, right=end - inner_end),
                    content=match.group(0),
                )
            )

    transform.__name__ = f"text[{regex.pattern}]"
    return create_line_transformer(transform, name=name)


__all__ = [
    "MatchBuilder",
    "create_block_transformer",
    "create_line_transformer",
    "create_text_transformer",
]
