"""ParseError: the single diagnostic raised or returned by miniyaml."""

from __future__ import annotations


class ParseError(ValueError):
    """A document or conversion failure, tagged with a 1-based line number.

    ``line`` is -1 when the error was raised outside of any parse (e.g. by
    the Block API directly); the parser rebinds it with :meth:`at_line`.
    """

    def __init__(self, message: str, line: int = -1) -> None:
        super().__init__(message)
        self._message = message
        self._line = line

    @property
    def message(self) -> str:
        return self._message

    @property
    def line(self) -> int:
        return self._line

    def at_line(self, line: int) -> ParseError:
        """Return a copy of this error bound to *line*."""
        return ParseError(self._message, line)

    def __str__(self) -> str:
        if self._line == -1:
            return self._message
        return f"[line {self._line}] {self._message}"

    def __repr__(self) -> str:
        return f"ParseError({self._message!r}, line={self._line})"
