"""Serialization helpers for generated source maps."""

from __future__ import annotations

import json
from pathlib import Path

from smgen.generator import SourceMapGenerator


def source_map_to_json(generator: SourceMapGenerator, indent: int | None = None) -> str:
    """Serialize a generator to JSON text; compact unless ``indent`` is given."""
    if indent is None:
        return generator.to_string()
    return json.dumps(generator.to_json(), indent=indent, ensure_ascii=False)


def write_source_map(generator: SourceMapGenerator, path: str | Path, indent: int | None = None) -> None:
    """Write source map JSON to path."""
    target = Path(path)
    target.write_text(source_map_to_json(generator, indent=indent), encoding="utf-8")
