"""Parser configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping


DEFAULT_MAX_DEPTH = 100
DEFAULT_ENCODING = "utf-8"
DEFAULT_ENCODING_ERRORS = "replace"


@dataclass(frozen=True)
class ParserConfig:
    """Knobs for :class:`~miniyaml.parser.MiniYamlParser`.

    ``max_depth`` bounds the nesting of scopes so that a deeply indented
    document fails with a ParseError instead of exhausting the call stack.
    ``encoding`` and ``encoding_errors`` are passed to ``bytes.decode`` for
    every line read from the input buffer.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    encoding: str = DEFAULT_ENCODING
    encoding_errors: str = DEFAULT_ENCODING_ERRORS

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ParserConfig:
        """Build a config from ``MINIYAML_*`` environment variables."""
        env = os.environ if environ is None else environ
        raw_depth = env.get("MINIYAML_MAX_DEPTH", "").strip()
        try:
            max_depth = int(raw_depth) if raw_depth else DEFAULT_MAX_DEPTH
        except ValueError:
            raise ValueError(
                f"MINIYAML_MAX_DEPTH must be an integer, got {raw_depth!r}"
            ) from None
        return cls(
            max_depth=max_depth,
            encoding=env.get("MINIYAML_ENCODING", "").strip() or DEFAULT_ENCODING,
            encoding_errors=(
                env.get("MINIYAML_ENCODING_ERRORS", "").strip()
                or DEFAULT_ENCODING_ERRORS
            ),
        )
