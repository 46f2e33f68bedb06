"""
Properties Reader - Line-oriented parser for .properties streams.

    - LineReader turns raw physical lines into logical lines: comments
      dropped, backslash continuations joined, leading blanks skipped
    - PropertiesReader splits each logical line into key and value and
      decodes both with the escape codec
    - Byte streams are decoded as Latin-1, text streams are used as-is
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import IO, TYPE_CHECKING, AnyStr

from oprops.codec import load_convert
from oprops.syntax import (
    COMMENT_CHARS,
    ESCAPE,
    LATIN_1,
    LINE_TERMINATORS,
    READ_CHUNK_SIZE,
    SEPARATORS,
    WHITESPACE,
)

if TYPE_CHECKING:
    from oprops.adapter import PropertyMap
    from oprops.store import OrderedProperties

logger = logging.getLogger("oprops.reader")


class LineReader:
    """
    Single forward pass over a stream, yielding logical lines.

    Usage:
        for line in LineReader(stream):
            ...
    """

    def __init__(self, stream: IO[AnyStr], chunk_size: int = READ_CHUNK_SIZE) -> None:
        self._stream = stream
        self._chunk_size = chunk_size
        self._chunk = ""
        self._off = 0
        self._eof = False
        self._line_buf: list[str] = []
        self.lines_read = 0

    def __iter__(self) -> Iterator[str]:
        while True:
            line = self.read_line()
            if line is None:
                return
            yield line

    def _fill(self) -> bool:
        """Read the next chunk. Returns False once the stream is exhausted."""
        if self._eof:
            return False
        data = self._stream.read(self._chunk_size)
        if not data:
            self._eof = True
            self._chunk = ""
            self._off = 0
            return False
        if isinstance(data, (bytes, bytearray)):
            data = data.decode(LATIN_1)
        self._chunk = data
        self._off = 0
        return True

    def _has_more(self) -> bool:
        return self._off < len(self._chunk) or self._fill()

    def read_line(self) -> str | None:
        """Return the next logical line, or None at end of input."""
        buf = self._line_buf
        buf.clear()

        skip_whitespace = True
        is_comment_line = False
        is_new_line = True
        appended_line_begin = False
        preceding_backslash = False
        skip_lf = False

        while True:
            if not self._has_more():
                if not buf or is_comment_line:
                    return None
                if preceding_backslash:
                    buf.pop()
                return self._finish(buf)

            c = self._chunk[self._off]
            self._off += 1

            if skip_lf:
                skip_lf = False
                if c == "\n":
                    continue

            if skip_whitespace:
                if c in WHITESPACE:
                    continue
                if not appended_line_begin and c in LINE_TERMINATORS:
                    continue
                skip_whitespace = False
                appended_line_begin = False

            if is_new_line:
                is_new_line = False
                if c in COMMENT_CHARS:
                    is_comment_line = True
                    continue

            if c not in LINE_TERMINATORS:
                buf.append(c)
                if c == ESCAPE:
                    preceding_backslash = not preceding_backslash
                else:
                    preceding_backslash = False
                continue

            # End of a physical line
            if is_comment_line or not buf:
                is_comment_line = False
                is_new_line = True
                skip_whitespace = True
                buf.clear()
                continue

            if not self._has_more():
                if preceding_backslash:
                    buf.pop()
                return self._finish(buf)

            if preceding_backslash:
                # Continuation: drop the backslash, join the next physical line
                buf.pop()
                skip_whitespace = True
                appended_line_begin = True
                preceding_backslash = False
                if c == "\r":
                    skip_lf = True
            else:
                return self._finish(buf)

    def _finish(self, buf: list[str]) -> str:
        self.lines_read += 1
        return "".join(buf)


def split_line(line: str) -> tuple[str, str]:
    """
    Split a logical line into its raw (still escaped) key and value.

    The key ends at the first unescaped separator or whitespace. After it,
    whitespace, at most one separator, and more whitespace are skipped.
    """
    limit = len(line)
    key_len = 0
    value_start = limit
    has_sep = False
    preceding_backslash = False

    while key_len < limit:
        c = line[key_len]
        if c in SEPARATORS and not preceding_backslash:
            value_start = key_len + 1
            has_sep = True
            break
        if c in WHITESPACE and not preceding_backslash:
            value_start = key_len + 1
            break
        if c == ESCAPE:
            preceding_backslash = not preceding_backslash
        else:
            preceding_backslash = False
        key_len += 1

    while value_start < limit:
        c = line[value_start]
        if c not in WHITESPACE:
            if not has_sep and c in SEPARATORS:
                has_sep = True
            else:
                break
        value_start += 1

    return line[:key_len], line[value_start:]


class PropertiesReader:
    """
    Loads .properties content into anything that can put(key, value).

    Usage:
        # Into an existing store
        PropertiesReader.load(adapter, stream)

        # New store from bytes or text
        props = PropertiesReader.parse(b"a=1\\nb=2\\n")

        # New store from a file
        props = PropertiesReader.read("app.properties")
    """

    @staticmethod
    def load(target: PropertyMap, stream: IO[AnyStr]) -> int:
        """
        Parse every logical line of stream into target.

        Returns the number of entries put. A malformed escape aborts the load;
        entries put before it stay in target.
        """
        count = 0
        for line in LineReader(stream):
            raw_key, raw_value = split_line(line)
            target.put(load_convert(raw_key), load_convert(raw_value))
            count += 1
        logger.debug("loaded %d entries", count)
        return count

    @classmethod
    def parse(cls, data: str | bytes, props: OrderedProperties | None = None) -> OrderedProperties:
        """Parse text or Latin-1 bytes into a (new or given) store."""
        from oprops.store import OrderedProperties

        if props is None:
            props = OrderedProperties()
        stream = io.BytesIO(data) if isinstance(data, (bytes, bytearray)) else io.StringIO(data)
        props.load(stream)
        return props

    @classmethod
    def read(cls, path: str | Path, props: OrderedProperties | None = None) -> OrderedProperties:
        """Read a .properties file (as Latin-1 bytes) into a (new or given) store."""
        from oprops.store import OrderedProperties

        if props is None:
            props = OrderedProperties()
        with open(path, "rb") as f:
            props.load(f)
        return props
