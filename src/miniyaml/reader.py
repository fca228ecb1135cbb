"""Reader layer: a line cursor over a raw byte buffer.

Only ``\\n`` splits lines. A ``\\r`` is stripped when it immediately
precedes the ``\\n``; a bare ``\\r`` is kept as data. A trailing fragment
with no terminator is returned as the last line.
"""

from __future__ import annotations

import re

from .config import DEFAULT_ENCODING, DEFAULT_ENCODING_ERRORS


_EMPTY_LINE_RE = re.compile(r"\s*(?:#.*)?", re.ASCII)


def is_blank(line: str) -> bool:
    """True for lines that hold only whitespace and/or a ``#`` comment."""
    return _EMPTY_LINE_RE.fullmatch(line) is not None


class LineReader:
    """Cursor yielding logical or raw lines, with one line of pushback.

    ``line_count`` is the 1-based number of the last line consumed from the
    buffer. Once the buffer is exhausted it points one past the last line,
    which is where end-of-input diagnostics are reported.
    """

    def __init__(
        self,
        data: bytes,
        encoding: str = DEFAULT_ENCODING,
        errors: str = DEFAULT_ENCODING_ERRORS,
    ) -> None:
        self._data = bytes(data)
        self._pos = 0
        self._encoding = encoding
        self._errors = errors
        self._pushback: str | None = None
        self._exhausted = False
        self.line_count = 0

    # -- Reading ------------------------------------------------------------

    def read_logical_line(self) -> str | None:
        """Return the next line that is neither blank nor a comment."""
        line = self._pushback
        if line is not None:
            self._pushback = None
            if not is_blank(line):
                return line

        while True:
            line = self._read_eol()
            if line is None or not is_blank(line):
                return line

    def read_raw_line(self) -> str | None:
        """Return the next line, blank and comment lines included."""
        line = self._pushback
        if line is not None:
            self._pushback = None
            return line
        return self._read_eol()

    def push_back(self, line: str) -> None:
        """Make *line* the result of the next read.

        Only one line may be pending. A second push is a parser bug, so it
        raises AssertionError rather than a ParseError.
        """
        if self._pushback is not None:
            raise AssertionError(
                f"Internal Error: can only unread 1 line (line {self.line_count})"
            )
        self._pushback = line

    @property
    def has_pushback(self) -> bool:
        return self._pushback is not None

    # -- Buffer -------------------------------------------------------------

    def _read_eol(self) -> str | None:
        data = self._data
        if self._pos >= len(data):
            if not self._exhausted:
                self._exhausted = True
                self.line_count += 1
            return None

        end = data.find(b"\n", self._pos)
        if end == -1:
            raw = data[self._pos:]
            self._pos = len(data)
        else:
            stop = end
            if stop > self._pos and data[stop - 1] == 0x0D:
                stop -= 1
            raw = data[self._pos:stop]
            self._pos = end + 1

        self.line_count += 1
        return raw.decode(self._encoding, self._errors)
