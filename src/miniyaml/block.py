"""Block tree: the value model produced by the parser."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Union

from .errors import ParseError


_INT_RE = re.compile(r"[+-]?[0-9]+")

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


# ---------------------------------------------------------------------------
# Empty: sentinel for a block that has not been assigned a variant
# ---------------------------------------------------------------------------

class _EmptyType:
    """Singleton marking an untyped block."""

    _instance: _EmptyType | None = None

    def __new__(cls) -> _EmptyType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Empty"

    def __bool__(self) -> bool:
        return False


Empty = _EmptyType()


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class VLiteral:
    text: str


@dataclass(slots=True)
class VMapping:
    entries: dict[str, Block] = field(default_factory=dict)


@dataclass(slots=True)
class VSequence:
    items: list[Block] = field(default_factory=list)


BlockValue = Union[VLiteral, VMapping, VSequence, _EmptyType]


def _type_name(value: BlockValue) -> str:
    if isinstance(value, VLiteral):
        return "literal"
    if isinstance(value, VMapping):
        return "mapping"
    if isinstance(value, VSequence):
        return "sequence"
    return "empty"


# ---------------------------------------------------------------------------
# Block
# ---------------------------------------------------------------------------

class Block:
    """A node of the document tree: a literal, a mapping, a sequence or empty.

    A block starts empty. The first write picks its variant and any later
    write of another variant raises ParseError; the block is never coerced.
    Mappings keep insertion order and a repeated key overwrites the earlier
    value.
    """

    __slots__ = ("_value",)

    def __init__(self) -> None:
        self._value: BlockValue = Empty

    @property
    def value(self) -> BlockValue:
        return self._value

    # -- Type queries ---------------------------------------------------

    def is_empty(self) -> bool:
        return self._value is Empty

    def is_literal(self) -> bool:
        return isinstance(self._value, VLiteral)

    def is_mapping(self) -> bool:
        return isinstance(self._value, VMapping)

    def is_sequence(self) -> bool:
        return isinstance(self._value, VSequence)

    def get_type(self) -> str:
        return _type_name(self._value)

    def _convert_check(self, target: str) -> None:
        current = self.get_type()
        if current not in ("empty", target):
            raise ParseError(
                f"Block of type '{current}' can't be converted to type '{target}'"
            )

    def _expect(self, target: str) -> None:
        current = self.get_type()
        if current != target:
            raise ParseError(f"Block of type '{current}' is not a {target}")

    # -- Literal --------------------------------------------------------

    def set_literal(self, text: str) -> None:
        self._convert_check("literal")
        self._value = VLiteral(text)

    def get_string(self) -> str:
        self._expect("literal")
        return self._value.text

    def get_float(self) -> float:
        """Parse the literal as a 64-bit float."""
        text = self.get_string()
        if not text or not text.isascii() or text != text.strip() or "_" in text:
            raise ParseError(f"Invalid float literal: {text!r}")
        try:
            number = float(text)
        except ValueError:
            raise ParseError(f"Invalid float literal: {text!r}") from None
        if math.isinf(number) and "inf" not in text.lower():
            raise ParseError(f"Float literal out of range: {text!r}")
        return number

    def get_int(self) -> int:
        """Parse the literal as a base-10 signed 64-bit integer."""
        text = self.get_string()
        if _INT_RE.fullmatch(text) is None:
            raise ParseError(f"Invalid integer literal: {text!r}")
        number = int(text)
        if not _INT64_MIN <= number <= _INT64_MAX:
            raise ParseError(f"Integer literal out of range: {text!r}")
        return number

    # -- Mapping --------------------------------------------------------

    def set_key(self, key: str, block: Block) -> None:
        self._convert_check("mapping")
        if self._value is Empty:
            self._value = VMapping()
        self._value.entries[key] = block

    def get_mapping(self) -> Mapping[str, Block]:
        """Read-only view of the mapping, in insertion order."""
        self._expect("mapping")
        return MappingProxyType(self._value.entries)

    def get_key(self, key: str) -> Block | None:
        self._expect("mapping")
        return self._value.entries.get(key)

    def get_keys(self) -> list[str]:
        self._expect("mapping")
        return list(self._value.entries)

    def get_key_string(self, key: str) -> str:
        """Literal text of *key*, or ``""`` when the key is absent."""
        value = self.get_key(key)
        if value is None:
            return ""
        if not value.is_literal():
            raise ParseError(
                f"Key '{key}' is of type '{value.get_type()}', not literal"
            )
        return value.get_string()

    def get_key_float(self, key: str, default: float) -> float:
        value = self.get_key(key)
        if value is None:
            return default
        return value.get_float()

    def get_key_int(self, key: str, default: int) -> int:
        value = self.get_key(key)
        if value is None:
            return default
        return value.get_int()

    # -- Sequence -------------------------------------------------------

    def append(self, block: Block) -> None:
        self._convert_check("sequence")
        if self._value is Empty:
            self._value = VSequence()
        self._value.items.append(block)

    def get_sequence(self) -> tuple[Block, ...]:
        self._expect("sequence")
        return tuple(self._value.items)

    # -- Rendering ------------------------------------------------------

    def to_debug_string(self) -> str:
        """Deterministic rendering; mapping keys are sorted, not insertion-ordered."""
        value = self._value
        if isinstance(value, VLiteral):
            return f"'{value.text}'"
        if isinstance(value, VMapping):
            return "{" + ", ".join(
                f"{k}={value.entries[k].to_debug_string()}"
                for k in sorted(value.entries)
            ) + "}"
        if isinstance(value, VSequence):
            return "[" + ", ".join(b.to_debug_string() for b in value.items) + "]"
        return "<empty container>"

    def __str__(self) -> str:
        return self.to_debug_string()

    def __repr__(self) -> str:
        return f"Block({self.to_debug_string()})"
