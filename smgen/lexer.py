"""Tokenizer that splits C-like source text into mappable tokens."""

from __future__ import annotations

from typing import Final

from smgen.errors import LexError
from smgen.source_map import SourceSpan
from smgen.tokens import Token, TokenType


_INLINE_WHITESPACE: Final[str] = " \t\r\f\v"


class Lexer:
    """Converts source text into a token stream.

    ``//`` and ``/* */`` comments produce no tokens. Whitespace indenting a
    line is skipped; any other whitespace run is a token of its own. Lines
    are 1-based and columns 0-based.
    """

    def __init__(self, source: str, filename: str = "<input>") -> None:
        self.source = source
        self.filename = filename
        self.index = 0
        self.line = 1
        self.column = 0

    def tokenize(self) -> list[Token]:
        """Tokenize full source and return the token stream."""
        tokens: list[Token] = []

        while not self._is_eof():
            ch = self._peek()
            if ch == "\n":
                self._advance()
                continue

            if ch == "/" and self._peek(1) == "/":
                self._consume_line_comment()
                continue

            if ch == "/" and self._peek(1) == "*":
                self._consume_block_comment()
                continue

            if ch in _INLINE_WHITESPACE:
                token = self._lex_whitespace()
                if token.span.column > 0:
                    tokens.append(token)
                continue

            if _is_ident_char(ch):
                tokens.append(self._lex_identifier())
                continue

            start_line, start_col = self.line, self.column
            self._advance()
            span = self._span(start_line, start_col, self.line, self.column)
            tokens.append(Token(token_type=TokenType.PUNCT, value=ch, span=span))

        eof_span = self._span(self.line, self.column, self.line, self.column)
        tokens.append(Token(token_type=TokenType.EOF, value="", span=eof_span))
        return tokens

    def _lex_identifier(self) -> Token:
        start_line, start_col = self.line, self.column
        value_chars: list[str] = []
        while not self._is_eof() and _is_ident_char(self._peek()):
            value_chars.append(self._advance())
        span = self._span(start_line, start_col, self.line, self.column)
        return Token(token_type=TokenType.IDENT, value="".join(value_chars), span=span)

    def _lex_whitespace(self) -> Token:
        start_line, start_col = self.line, self.column
        value_chars: list[str] = []
        while not self._is_eof() and self._peek() in _INLINE_WHITESPACE:
            value_chars.append(self._advance())
        span = self._span(start_line, start_col, self.line, self.column)
        return Token(token_type=TokenType.WHITESPACE, value="".join(value_chars), span=span)

    def _consume_line_comment(self) -> None:
        while not self._is_eof() and self._peek() != "\n":
            self._advance()

    def _consume_block_comment(self) -> None:
        start_line, start_col = self.line, self.column
        self._advance()  # /
        self._advance()  # *
        while not self._is_eof():
            if self._peek() == "*" and self._peek(1) == "/":
                self._advance()
                self._advance()
                return
            self._advance()

        raise LexError(
            code="LEX001",
            message=f"Unterminated block comment starting at {self.filename}:{start_line}:{start_col}.",
            hint="Close the comment with */.",
        )

    def _peek(self, offset: int = 0) -> str:
        idx = self.index + offset
        if idx >= len(self.source):
            return "\0"
        return self.source[idx]

    def _advance(self) -> str:
        ch = self.source[self.index]
        self.index += 1
        if ch == "\n":
            self.line += 1
            self.column = 0
        else:
            self.column += 1
        return ch

    def _is_eof(self) -> bool:
        return self.index >= len(self.source)

    def _span(
        self,
        start_line: int,
        start_col: int,
        end_line: int,
        end_col: int,
    ) -> SourceSpan:
        return SourceSpan(
            file=self.filename,
            line=start_line,
            column=start_col,
            end_line=end_line,
            end_column=end_col,
        )


def _is_ident_char(ch: str) -> bool:
    return (ch.isascii() and ch.isalnum()) or ch in "$_"
