"""Position and span values shared by the generator and the tokenizer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """A 1-based line and 0-based column, as used by the Source Map v3 API."""

    line: int
    column: int


@dataclass(frozen=True)
class SourceSpan:
    """Represents a source range with 1-based lines and 0-based columns."""

    file: str
    line: int
    column: int
    end_line: int
    end_column: int

    @property
    def start(self) -> Position:
        return Position(line=self.line, column=self.column)
