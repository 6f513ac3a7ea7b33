"""Apply line-scoped transformers and assemble each line's output."""

from __future__ import annotations

from typing import Collection, Sequence

from markup_engine.document import Line

from .assembly import assemble_line
from .models import EditorHandle, LineTransformerContext, TransformedLine, Transformer


def collect_line(
    line: Line, transformers: Sequence[Transformer], editor: EditorHandle
) -> LineTransformerContext:
    """Run ``transformers`` over a fresh context without assembling nodes."""

    context = LineTransformerContext(line=line, editor=editor)
    for transformer in transformers:
        transformer(context)
    return context


def transform_line(
    line: Line,
    transformers: Sequence[Transformer],
    editor: EditorHandle,
    *,
    active_lines: Collection[int] = (),
    validate: bool = False,
) -> TransformedLine:
    context = collect_line(line, transformers, editor)

    nodes = assemble_line(
        line.content,
        context.transform_results,
        context.range_displays,
        active=line.idx in active_lines,
        line_idx=line.idx,
        validate=validate,
    )

    if context.parent is None:
        return TransformedLine(line=line, output=nodes)

    mount = context.parent.mount
    mount.append(*nodes)
    mount.normalize()
    return TransformedLine(line=line, output=context.parent.node)


__all__ = ["collect_line", "transform_line"]
