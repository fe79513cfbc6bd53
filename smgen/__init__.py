"""Incremental Source Map v3 generator."""

from __future__ import annotations

from typing import Any


__all__ = [
    "GeneratorConfig",
    "Position",
    "SourceMapGenerator",
    "build_identity_map",
    "compute_source_url",
    "join",
    "relative",
]


def build_identity_map(*args: Any, **kwargs: Any):
    from smgen.identity import build_identity_map as _build_identity_map

    return _build_identity_map(*args, **kwargs)


def compute_source_url(*args: Any, **kwargs: Any):
    from smgen.url_util import compute_source_url as _compute_source_url

    return _compute_source_url(*args, **kwargs)


def join(*args: Any, **kwargs: Any):
    from smgen.url_util import join as _join

    return _join(*args, **kwargs)


def relative(*args: Any, **kwargs: Any):
    from smgen.url_util import relative as _relative

    return _relative(*args, **kwargs)


def __getattr__(name: str):
    if name == "SourceMapGenerator":
        from smgen.generator import SourceMapGenerator

        return SourceMapGenerator
    if name == "GeneratorConfig":
        from smgen.config import GeneratorConfig

        return GeneratorConfig
    if name == "Position":
        from smgen.source_map import Position

        return Position
    raise AttributeError(name)
