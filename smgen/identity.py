"""Identity source maps: every token of a file mapped onto itself."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from smgen.generator import SourceMapGenerator
from smgen.lexer import Lexer
from smgen.tokens import TokenType


def build_identity_map(
    source: str,
    filename: str,
    *,
    file: str | None = None,
    source_root: str | None = None,
    include_names: bool = False,
    include_content: bool = True,
    skip_validation: bool = False,
) -> SourceMapGenerator:
    """Map each token of ``source`` to the same position in ``filename``.

    Useful as a pass-through map for tools that copy a file unchanged, and as
    a fixture for anything consuming source maps.
    """
    generator = SourceMapGenerator(file=file, source_root=source_root, skip_validation=skip_validation)

    for token in Lexer(source, filename=filename).tokenize():
        if token.token_type is TokenType.EOF:
            break
        position = token.span.start
        mapping: dict[str, Any] = {
            "generated": position,
            "original": position,
            "source": filename,
        }
        if include_names and token.token_type is TokenType.IDENT and not token.value[0].isdigit():
            mapping["name"] = token.value
        generator.add_mapping(mapping)

    if include_content:
        generator.set_source_content(filename, source)
    return generator


def identity_map_for_file(
    input_path: str | Path,
    *,
    file: str | None = None,
    source_root: str | None = None,
    include_names: bool = False,
    include_content: bool = True,
    skip_validation: bool = False,
) -> SourceMapGenerator:
    """Read ``input_path`` as UTF-8 and build its identity map."""
    path = Path(input_path)
    return build_identity_map(
        path.read_text(encoding="utf-8"),
        str(path),
        file=file,
        source_root=source_root,
        include_names=include_names,
        include_content=include_content,
        skip_validation=skip_validation,
    )
