"""Block provider configuration and the blocks built from it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union

from markup_engine.document import Line
from markup_engine.transform.models import Transformer

TransformerSpec = Union[Transformer, Iterable["TransformerSpec"]]


def _flatten_transformers(entries: Iterable[TransformerSpec]) -> tuple[Transformer, ...]:
    flat: list[Transformer] = []
    for entry in entries:
        if isinstance(entry, Transformer):
            flat.append(entry)
        elif isinstance(entry, Iterable) and not isinstance(entry, (str, bytes)):
            flat.extend(_flatten_transformers(entry))
        else:
            raise TypeError(f"Expected Transformer, got {type(entry).__name__}")
    return tuple(flat)


@dataclass(frozen=True, slots=True)
class BlockProvider:
    """Delimiter pair plus the ordered transformers applied to its blocks.

    A line opens the block when it equals ``start`` and closes it when it
    equals ``end``. With ``use_end_of_prev_as_start_of_next`` the closing
    delimiter of one block may also open the next one.
    """

    start: str
    end: str
    transformers: tuple[Transformer, ...] = ()
    use_end_of_prev_as_start_of_next: bool = False
    name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "transformers", _flatten_transformers(self.transformers)
        )
        if not self.name:
            object.__setattr__(self, "name", f"{self.start!r}..{self.end!r}")

    @property
    def line_transformers(self) -> tuple[Transformer, ...]:
        return tuple(t for t in self.transformers if t.kind == "line")

    @property
    def block_transformers(self) -> tuple[Transformer, ...]:
        return tuple(t for t in self.transformers if t.kind == "block")


@dataclass(slots=True)
class Block:
    provider: BlockProvider
    start_line: Line
    lines: List[Line] = field(default_factory=list)
    end_line: Optional[Line] = None

    @property
    def terminated(self) -> bool:
        return self.end_line is not None


def create_block_provider(
    *,
    start: str,
    end: str,
    transformers: Iterable[TransformerSpec] = (),
    use_end_of_prev_as_start_of_next: bool = False,
    name: str = "",
) -> BlockProvider:
    return BlockProvider(
        start=start,
        end=end,
        transformers=_flatten_transformers(transformers),
        use_end_of_prev_as_start_of_next=use_end_of_prev_as_start_of_next,
        name=name,
    )


__all__ = ["Block", "BlockProvider", "TransformerSpec", "create_block_provider"]
