"""Incremental Source Map v3 generator."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, is_dataclass
from typing import Any, Final

from smgen import base64_vlq
from smgen.array_set import ArraySet
from smgen.config import GeneratorConfig
from smgen.errors import (
    InvalidMappingCombinationError,
    InvalidOriginalShapeError,
    MappingError,
    MissingGeneratedPositionError,
)
from smgen.mapping_list import Mapping, MappingList, compare_by_generated_positions_inflated
from smgen.url_util import relative


logger = logging.getLogger(__name__)

SOURCE_MAP_VERSION: Final[int] = 3


def _has_field(position: Any, key: str) -> bool:
    if isinstance(position, dict):
        return key in position
    return hasattr(position, key)


def _field(position: Any, key: str) -> Any:
    if isinstance(position, dict):
        return position.get(key)
    return getattr(position, key, None)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integral(value: Any) -> bool:
    if isinstance(value, float):
        return value.is_integer()
    return _is_number(value)


def _coordinate(value: Any) -> Any:
    """Turn an integral float such as ``2.0`` into the ``int`` the encoder needs."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _valid_position(position: Any) -> bool:
    line = _field(position, "line")
    column = _field(position, "column")
    return (
        _has_field(position, "line")
        and _has_field(position, "column")
        and _is_integral(line)
        and _is_integral(column)
        and line > 0
        and column >= 0
    )


def _json_default(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    return str(value)


def validate_mapping(generated: Any, original: Any, source: Any, name: Any) -> MappingError | None:
    """Check a mapping against the three accepted shapes.

    1. Just the generated position.
    2. The generated position, original position, and original source.
    3. Generated and original position, original source, and a name token.

    Returns the error describing the first violation, or ``None``.
    """
    # An original object with empty line and column is most likely a caller
    # mistake, so it gets a dedicated message.
    if (
        original is not None
        and not _is_number(_field(original, "line"))
        and not _is_number(_field(original, "column"))
    ):
        return InvalidOriginalShapeError(
            code="MAP002",
            message=(
                "original.line and original.column are not numbers -- you probably meant to omit "
                "the original mapping entirely and only map the generated position. If so, pass "
                "null for the original mapping instead of an object with empty or null values."
            ),
            hint="Pass original=None for generated-only mappings.",
        )

    if generated is not None and _valid_position(generated) and original is None and not source and not name:
        return None

    if generated is not None and _valid_position(generated) and original is not None and _valid_position(original) and source:
        return None

    payload = json.dumps(
        {"generated": generated, "source": source, "original": original, "name": name},
        default=_json_default,
    )
    return InvalidMappingCombinationError(
        code="MAP003",
        message=f"Invalid mapping: {payload}",
        hint="Map a generated position alone, or with an original position and a source.",
    )


class SourceMapGenerator:
    """A source map being built incrementally.

    Mappings may be added in any order; they are kept sorted by generated
    position and serialized into the Source Map v3 ``mappings`` string on
    every call to :meth:`to_json`.
    """

    def __init__(
        self,
        file: str | None = None,
        source_root: str | None = None,
        skip_validation: bool = False,
    ) -> None:
        self._file = file
        self._source_root = source_root
        self._skip_validation = skip_validation
        self._sources = ArraySet()
        self._names = ArraySet()
        self._mappings = MappingList()
        self._sources_contents: dict[str, str] | None = None

    @classmethod
    def from_config(cls, conf: GeneratorConfig | dict[str, Any] | None = None) -> SourceMapGenerator:
        """Create a generator from a config object or an options mapping."""
        if conf is None:
            conf = GeneratorConfig()
        elif isinstance(conf, dict):
            conf = GeneratorConfig.from_dict(conf)
        return cls(file=conf.file, source_root=conf.source_root, skip_validation=conf.skip_validation)

    @property
    def file(self) -> str | None:
        return self._file

    @property
    def source_root(self) -> str | None:
        return self._source_root

    @property
    def sources(self) -> list[str]:
        return self._sources.to_array()

    @property
    def names(self) -> list[str]:
        return self._names.to_array()

    @property
    def mapping_count(self) -> int:
        return len(self._mappings)

    def add_mapping(self, mapping: dict[str, Any]) -> None:
        """Add a mapping from an original position to a generated position.

        ``mapping`` holds ``generated`` (required), and optionally
        ``original``, ``source`` (relative to the source root) and ``name``.
        Positions are dicts with ``line`` and ``column`` keys or
        :class:`~smgen.source_map.Position` values.
        """
        record = self._prepare(mapping, raise_missing=True)
        if isinstance(record, MappingError):
            raise record
        self._commit(record)

    def try_add_mapping(self, mapping: dict[str, Any]) -> tuple[bool, MappingError | None]:
        """Add a mapping, returning the validation error instead of raising it."""
        record = self._prepare(mapping, raise_missing=False)
        if isinstance(record, MappingError):
            return False, record
        self._commit(record)
        return True, None

    def _prepare(self, mapping: dict[str, Any], *, raise_missing: bool) -> Mapping | MappingError:
        generated = mapping.get("generated")
        original = mapping.get("original")
        source = mapping.get("source")
        name = mapping.get("name")

        if generated is None:
            error = MissingGeneratedPositionError(
                code="MAP001",
                message='"generated" is a required argument',
                hint="Every mapping needs a generated line and column.",
            )
            if raise_missing:
                raise error
            return error

        if not self._skip_validation:
            error = validate_mapping(generated, original, source, name)
            if error is not None:
                return error

        return Mapping(
            generated_line=_coordinate(_field(generated, "line")),
            generated_column=_coordinate(_field(generated, "column")),
            original_line=_coordinate(_field(original, "line")) if original is not None else None,
            original_column=_coordinate(_field(original, "column")) if original is not None else None,
            source=str(source) if source is not None else None,
            name=str(name) if name is not None else None,
        )

    def _commit(self, record: Mapping) -> None:
        if record.source is not None and not self._sources.has(record.source):
            self._sources.add(record.source)
        if record.name is not None and not self._names.has(record.name):
            self._names.add(record.name)
        self._mappings.add(record)

    def set_source_content(self, source_file: str, source_content: str | None) -> None:
        """Set, or with ``None`` remove, the full text of a source file."""
        source = source_file
        if self._source_root is not None:
            source = relative(self._source_root, source)

        if source_content is not None:
            if self._sources_contents is None:
                self._sources_contents = {}
            self._sources_contents[source] = source_content
        elif self._sources_contents is not None:
            self._sources_contents.pop(source, None)
            if not self._sources_contents:
                self._sources_contents = None

    def _serialize_mappings(self) -> str:
        """Serialize the accumulated mappings into base64 VLQ segments."""
        previous_generated_column = 0
        previous_generated_line = 1
        previous_original_column = 0
        previous_original_line = 0
        previous_name = 0
        previous_source = 0
        result: list[str] = []

        mappings = self._mappings.to_array()
        for index, mapping in enumerate(mappings):
            segment = ""

            if mapping.generated_line != previous_generated_line:
                previous_generated_column = 0
                segment += ";" * (mapping.generated_line - previous_generated_line)
                previous_generated_line = mapping.generated_line
            elif index > 0:
                if compare_by_generated_positions_inflated(mapping, mappings[index - 1]) <= 0:
                    continue
                segment += ","

            segment += base64_vlq.encode(mapping.generated_column - previous_generated_column)
            previous_generated_column = mapping.generated_column

            if mapping.source is not None:
                source_index = self._sources.index_of(mapping.source)
                segment += base64_vlq.encode(source_index - previous_source)
                previous_source = source_index

                # Lines are 0-based on the wire.
                segment += base64_vlq.encode(mapping.original_line - 1 - previous_original_line)
                previous_original_line = mapping.original_line - 1

                segment += base64_vlq.encode(mapping.original_column - previous_original_column)
                previous_original_column = mapping.original_column

                if mapping.name is not None:
                    name_index = self._names.index_of(mapping.name)
                    segment += base64_vlq.encode(name_index - previous_name)
                    previous_name = name_index

            result.append(segment)

        return "".join(result)

    def _generate_sources_content(self, sources: list[str]) -> list[str | None]:
        contents: list[str | None] = []
        for source in sources:
            if self._sources_contents is None:
                contents.append(None)
                continue
            if self._source_root:
                source = relative(self._source_root, source)
            contents.append(self._sources_contents.get(source))
        return contents

    def to_json(self) -> dict[str, Any]:
        """Externalize the source map as a JSON-compatible dict."""
        sources = self._sources.to_array()
        payload: dict[str, Any] = {
            "version": SOURCE_MAP_VERSION,
            "sources": sources,
            "names": self._names.to_array(),
            "mappings": self._serialize_mappings(),
        }
        if self._file:
            payload["file"] = self._file
        if self._source_root:
            payload["sourceRoot"] = self._source_root
        if self._sources_contents is not None:
            payload["sourcesContent"] = self._generate_sources_content(sources)

        logger.debug(
            "Serialized %d mappings over %d sources and %d names",
            len(self._mappings),
            len(sources),
            len(payload["names"]),
        )
        return payload

    def to_string(self) -> str:
        """Render the source map as compact JSON text."""
        return json.dumps(self.to_json(), separators=(",", ":"), ensure_ascii=False)

    def __str__(self) -> str:
        return self.to_string()
