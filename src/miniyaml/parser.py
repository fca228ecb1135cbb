"""Document parser: indentation-driven recursive descent into a Block tree.

This is NOT a YAML-compliant parser. It reads this subset only::

    ---           start of document (mandatory)
    # comment     ignored, as are blank lines (except inside a literal)
    key:          opens a key in the enclosing mapping, untyped until the
                  following lines show what it holds
    key: literal  a plain string; inner whitespace is kept, ends are trimmed
    key: |        everything that follows is a multi-line string, up to the
                  next key or sequence item at the same or a lesser indent
    - [entry]     an item of a sequence
    - key: value  a sequence item that is itself a mapping
    ...           end of document (mandatory)

Anything before ``---`` or after ``...`` is ignored. Mixing sequence items
and keys in one block is an error. A key is any run of characters other
than whitespace and ``:``.
"""

from __future__ import annotations

import logging
import re

from .block import Block
from .config import ParserConfig
from .errors import ParseError
from .reader import LineReader


logger = logging.getLogger(__name__)


START_MARKER = "---"
END_MARKER = "..."
LITERAL_MARKER = "|"

# 1=indent
_INDENT_RE = re.compile(r"(\s*)\S.*", re.ASCII)

# A key or sequence item. This covers 3 cases:
# 1- a sequence item:              - optional_literal
# 2- a key:value item:             key: optional_value
# 3- a sequence item opening a key:  - key: optional_value
# Case 3 is an empty sequence item followed by a key:value one level deeper.
#                             1=indent  2=seq 3=key            4=value
_SEQ_OR_KEY_RE = re.compile(r"(\s*)(?:(-)|([^\s:]+)\s*:)\s*(.*)", re.ASCII)
_SEQ_AND_KEY_RE = re.compile(r"(\s*)(-)\s*([^\s:]+)\s*:\s*(.*)", re.ASCII)


def _start_marker_error(cursor: LineReader) -> ParseError:
    return ParseError(
        "Document marker not found (aka c-directives-end). "
        "Tip: start your document with '---'.",
        cursor.line_count,
    )


def _nesting_error(max_depth: int, cursor: LineReader) -> ParseError:
    return ParseError(
        f"Nesting too deep, maximum depth is {max_depth}", cursor.line_count
    )


def _end_marker_error(cursor: LineReader) -> ParseError:
    return ParseError(
        "Document end marker not found (aka c-document-end). "
        "Tip: end your document with '...' or check indentation levels.",
        cursor.line_count,
    )


class MiniYamlParser:
    """Reusable parser; every call works on its own cursor and tree."""

    def __init__(self, config: ParserConfig | None = None) -> None:
        self.config = config or ParserConfig()

    def parse(self, data: bytes | str) -> tuple[Block, ParseError | None]:
        """Parse *data* and return ``(root, error)``.

        On failure the root holds whatever was built before the first error
        and must only be used for diagnostics.
        """
        if isinstance(data, str):
            data = data.encode(self.config.encoding, self.config.encoding_errors)
        cursor = LineReader(
            data,
            encoding=self.config.encoding,
            errors=self.config.encoding_errors,
        )
        doc = Block()
        try:
            self._seek_start(cursor)
            self._parse_document(cursor, doc)
        except ParseError as exc:
            if exc.line == -1:
                exc = exc.at_line(cursor.line_count)
            logger.debug("parse failed: %s", exc)
            return doc, exc
        except RecursionError:
            # max_depth set beyond what the interpreter stack can hold.
            exc = _nesting_error(self.config.max_depth, cursor)
            logger.debug("parse failed: %s", exc)
            return doc, exc
        return doc, None

    # -- Markers --------------------------------------------------------

    def _seek_start(self, cursor: LineReader) -> None:
        while True:
            line = cursor.read_logical_line()
            if line is None:
                raise _start_marker_error(cursor)
            if line == START_MARKER:
                logger.debug("start marker at line %d", cursor.line_count)
                return

    def _parse_document(self, cursor: LineReader, doc: Block) -> None:
        line = cursor.read_logical_line()
        if line is None:
            raise _end_marker_error(cursor)
        cursor.push_back(line)
        m = _INDENT_RE.fullmatch(line)
        indent = m.group(1) if m else ""
        logger.debug("document indent is %d", len(indent))

        self._parse_scope(cursor, doc, indent, 1)

        line = cursor.read_logical_line()
        if line != END_MARKER:
            raise _end_marker_error(cursor)

    # -- Scopes ---------------------------------------------------------

    def _parse_scope(
        self, cursor: LineReader, block: Block, indent: str, depth: int
    ) -> None:
        """Fill *block* with the entries indented exactly by *indent*.

        Returns with the first less-indented line (or the end marker)
        pushed back for the enclosing scope.
        """
        if depth > self.config.max_depth:
            raise _nesting_error(self.config.max_depth, cursor)

        while True:
            line = cursor.read_logical_line()
            if line is None:
                raise _end_marker_error(cursor)
            if line == END_MARKER:
                cursor.push_back(line)
                return

            m = _SEQ_AND_KEY_RE.fullmatch(line) or _SEQ_OR_KEY_RE.fullmatch(line)
            if m is None:
                raise ParseError(
                    f"'key:' or '- sequence' expected, found: {line}",
                    cursor.line_count,
                )

            line_indent, dash, key, value = m.groups()
            if len(line_indent) > len(indent):
                raise ParseError(
                    f"Mismatched map indentation, expected {len(indent)} "
                    f"but was {len(line_indent)}",
                    cursor.line_count,
                )
            if len(line_indent) < len(indent):
                cursor.push_back(line)
                return

            child = Block()
            parse_value = True
            if dash:
                block.append(child)
                if key is not None:
                    # Replay the line with the dash blanked out; it is then
                    # read as a key one column deeper, inside the new item.
                    n = len(line_indent)
                    cursor.push_back(line[:n] + " " + line[n + 1:])
                    parse_value = False
            else:
                block.set_key(key, child)

            if parse_value:
                value = value.strip()
                if value == LITERAL_MARKER:
                    child.set_literal(self._collect_literal(cursor, indent))
                elif value:
                    child.set_literal(value)

            if child.is_empty():
                nxt = cursor.read_logical_line()
                if nxt is not None:
                    cursor.push_back(nxt)
                    m = _INDENT_RE.fullmatch(nxt)
                    if m and len(m.group(1)) > len(indent):
                        self._parse_scope(cursor, child, m.group(1), depth + 1)

    def _collect_literal(self, cursor: LineReader, indent: str) -> str:
        """Gather raw lines up to the next key or item at *indent* or less."""
        parts: list[str] = []
        while True:
            line = cursor.read_raw_line()
            if line is None:
                break
            if line == END_MARKER:
                cursor.push_back(line)
                break
            m = _SEQ_OR_KEY_RE.fullmatch(line)
            if m and len(m.group(1)) <= len(indent):
                cursor.push_back(line)
                break
            parts.append(line + "\n")
        return "".join(parts)


# ---------------------------------------------------------------------------
# Module-level shortcuts
# ---------------------------------------------------------------------------

def parse(
    data: bytes | str, config: ParserConfig | None = None
) -> tuple[Block, ParseError | None]:
    """Parse *data* with a fresh parser; see :meth:`MiniYamlParser.parse`."""
    return MiniYamlParser(config).parse(data)


def load(data: bytes | str, config: ParserConfig | None = None) -> Block:
    """Parse *data* and return the root block, raising ParseError on failure."""
    doc, error = parse(data, config)
    if error is not None:
        raise error
    return doc
