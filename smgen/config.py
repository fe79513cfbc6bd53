"""Generator configuration loaded from explicit options and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Final

from smgen.errors import ConfigError


_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})

_KEY_ALIASES: Final[dict[str, str]] = {
    "file": "file",
    "sourceRoot": "source_root",
    "source_root": "source_root",
    "skipValidation": "skip_validation",
    "skip_validation": "skip_validation",
}


@dataclass(frozen=True)
class GeneratorConfig:
    """Options recognized when constructing a source map generator."""

    file: str | None = None
    source_root: str | None = None
    skip_validation: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GeneratorConfig:
        """Build config from a camelCase or snake_case options mapping."""
        if not isinstance(data, dict):
            raise ConfigError(
                code="CFG001",
                message="Generator options must be an object.",
                hint="Pass a dict such as {'file': 'out.js', 'sourceRoot': 'src'}.",
            )

        values: dict[str, Any] = {}
        for key, value in data.items():
            field_name = _KEY_ALIASES.get(key)
            if field_name is None:
                raise ConfigError(
                    code="CFG001",
                    message=f"Unknown generator option '{key}'.",
                    hint=f"Known options: {', '.join(sorted(_KEY_ALIASES))}",
                )
            values[field_name] = value

        for key in ("file", "source_root"):
            value = values.get(key)
            if value is not None and not isinstance(value, str):
                raise ConfigError(
                    code="CFG001",
                    message=f"'{key}' must be a string.",
                    hint="Use null to leave the option unset.",
                )
        skip = values.get("skip_validation", False)
        if not isinstance(skip, bool):
            raise ConfigError(
                code="CFG001",
                message="'skip_validation' must be a boolean.",
                hint="Use true or false.",
            )

        return cls(
            file=values.get("file"),
            source_root=values.get("source_root"),
            skip_validation=skip,
        )


def load_generator_config(overrides: dict[str, Any] | None = None) -> GeneratorConfig:
    """Load config from SMGEN_* environment defaults and explicit overrides."""
    skip_env = os.getenv("SMGEN_SKIP_VALIDATION", "")
    defaults = GeneratorConfig(
        file=os.getenv("SMGEN_FILE") or None,
        source_root=os.getenv("SMGEN_SOURCE_ROOT") or None,
        skip_validation=skip_env.strip().lower() in _TRUTHY,
    )
    if not overrides:
        return defaults

    explicit = GeneratorConfig.from_dict(overrides)
    provided = {_KEY_ALIASES[key] for key in overrides}
    return GeneratorConfig(
        file=explicit.file if "file" in provided else defaults.file,
        source_root=explicit.source_root if "source_root" in provided else defaults.source_root,
        skip_validation=(
            explicit.skip_validation if "skip_validation" in provided else defaults.skip_validation
        ),
    )
