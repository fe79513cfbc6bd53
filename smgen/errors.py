"""Structured diagnostics and exception hierarchy for smgen."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Diagnostic:
    """Machine-readable diagnostic emitted by generator components."""

    code: str
    message: str
    hint: str = ""


class SourceMapError(Exception):
    """Base error carrying a stable code and an optional hint."""

    def __init__(self, code: str, message: str, hint: str = "") -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.hint = hint

    def to_diagnostic(self) -> Diagnostic:
        """Convert exception into serializable diagnostic."""
        return Diagnostic(code=self.code, message=self.message, hint=self.hint)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class MappingError(SourceMapError):
    """Raised when a mapping cannot be accepted by the generator."""


class MissingGeneratedPositionError(MappingError):
    """Raised when a mapping has no generated position."""


class InvalidOriginalShapeError(MappingError):
    """Raised when an original position carries no numeric line or column."""


class InvalidMappingCombinationError(MappingError):
    """Raised when a mapping matches none of the accepted shapes."""


class UnknownMemberError(SourceMapError):
    """Raised when an interned string lookup misses."""


class IndexOutOfRangeError(SourceMapError):
    """Raised when an interned index lookup misses."""


class VLQEncodeError(SourceMapError):
    """Raised by base64 VLQ encoding failures."""


class VLQDecodeError(SourceMapError):
    """Raised by base64 VLQ decoding failures."""


class URLResolutionError(SourceMapError):
    """Raised when a URL cannot be parsed or resolved against its base."""


class ConfigError(SourceMapError):
    """Raised by invalid generator configuration."""


class LexError(SourceMapError):
    """Raised by tokenizer failures."""


class CLIError(SourceMapError):
    """Raised by CLI usage or orchestration failures."""


def format_diagnostic(diag: Diagnostic) -> str:
    """Format diagnostic into a stable human-readable line."""
    hint = f" Hint: {diag.hint}" if diag.hint else ""
    return f"{diag.code}: {diag.message}{hint}"
