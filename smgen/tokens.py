"""Token definitions for identity-map tokenization."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from smgen.source_map import SourceSpan


class TokenType(Enum):
    """Coarse token categories; enough to place one mapping per token."""

    IDENT = auto()  # runs of [$_A-Za-z0-9]
    WHITESPACE = auto()
    PUNCT = auto()  # any other single character

    EOF = auto()


@dataclass(frozen=True)
class Token:
    """A single lexical token with its source span."""

    token_type: TokenType
    value: str
    span: SourceSpan

    def __str__(self) -> str:
        return f"{self.token_type.name}({self.value!r})@{self.span.line}:{self.span.column}"
