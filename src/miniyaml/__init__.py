"""miniyaml: a parser for a small, indentation-based subset of YAML."""

import logging

from .block import Block, BlockValue, Empty, VLiteral, VMapping, VSequence
from .config import ParserConfig
from .errors import ParseError
from .parser import MiniYamlParser, load, parse
from .reader import LineReader

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "parse",
    "load",
    "MiniYamlParser",
    "ParserConfig",
    "ParseError",
    "Block",
    "BlockValue",
    "Empty",
    "VLiteral",
    "VMapping",
    "VSequence",
    "LineReader",
]
