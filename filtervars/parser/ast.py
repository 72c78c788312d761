from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator

from filtervars.core.span import Span


@dataclass(frozen=True)
class TokenSpan:
    """
    Verbatim source of one attribute: attached lead comments, the name, `=`,
    every expression token and a trailing comment, through the end of the
    attribute's last line.

    The text is never inspected again after capture; it can only be emitted.
    """

    text: str

    def render(self) -> str:
        return self.text


@dataclass(frozen=True)
class RawAttribute:
    name: str
    tokens: TokenSpan
    span: Span


@dataclass
class VarFile:
    filename: str
    attributes: Dict[str, RawAttribute] = field(default_factory=dict)

    def __iter__(self) -> Iterator[RawAttribute]:
        return iter(self.attributes.values())

    def __len__(self) -> int:
        return len(self.attributes)
