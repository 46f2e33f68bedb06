"""
Properties Writer - Serializes a property map to .properties format.

Output layout:
    #<comment line 1>            <- Optional comment block
    #<comment line n>
    #<current date>              <- Timestamp comment, unless suppressed
    key=value                    <- One line per entry, in store order

Byte streams receive Latin-1 with everything outside printable ASCII written
as \\uXXXX. Text streams receive the characters unescaped.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import IO, TYPE_CHECKING

from oprops.codec import save_convert, write_comments
from oprops.syntax import COMMENT_CHARS, DATE_FORMAT, LATIN_1, LINE_SEPARATOR

if TYPE_CHECKING:
    from oprops.adapter import PropertyMap

logger = logging.getLogger("oprops.writer")


def format_date(now: datetime | None = None) -> str:
    """Render a timestamp the way the date comment line shows it."""
    if now is None:
        now = datetime.now().astimezone()
    return now.strftime(DATE_FORMAT)


def is_binary_stream(stream: IO) -> bool:
    if isinstance(stream, io.TextIOBase):
        return False
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        return True
    return "b" in getattr(stream, "mode", "")


class Latin1Writer:
    """Encodes str writes as Latin-1 onto a byte stream."""

    def __init__(self, stream: IO[bytes]) -> None:
        self._stream = stream

    def write(self, text: str) -> None:
        self._stream.write(text.encode(LATIN_1))

    def flush(self) -> None:
        self._stream.flush()


class DateSuppressingWriter:
    """
    Write filter that drops the last comment line before the data lines.

    A write starting with '#' or '!' opens a comment line; further writes are
    appended to it until one ends with the line separator. A finished comment
    line is held back until the next one finishes, so the newest finished
    line is always pending. Data writes pass straight through, which leaves
    the pending line (the date comment) unwritten for good.
    """

    def __init__(self, out: Callable[[str], object], newline: str = LINE_SEPARATOR) -> None:
        self._out = out
        self._newline = newline
        self._current: list[str] | None = None
        self._previous: str | None = None

    def write(self, text: str) -> None:
        if self._current is None and text and text[0] in COMMENT_CHARS:
            self._current = []
        if self._current is None:
            self._out(text)
            return
        self._current.append(text)
        if text.endswith(self._newline):
            if self._previous is not None:
                self._out(self._previous)
            self._previous = "".join(self._current)
            self._current = None


class PropertiesWriter:
    """
    Writes .properties content from anything with get(key) and keys().

    Usage:
        PropertiesWriter.store(adapter, stream, comments="header")
        data = PropertiesWriter.serialize(adapter, suppress_date=True)
    """

    @staticmethod
    def store(
        source: PropertyMap,
        stream: IO,
        comments: str | None = None,
        suppress_date: bool = False,
        line_separator: str = LINE_SEPARATOR,
    ) -> int:
        """
        Write every entry of source to stream and flush it.

        Returns the number of entries written. The stream is not closed.
        """
        binary = is_binary_stream(stream)
        sink = Latin1Writer(stream) if binary else stream
        write = sink.write
        if suppress_date:
            write = DateSuppressingWriter(write, line_separator).write

        if comments is not None:
            write_comments(write, comments, line_separator)
        write("#" + format_date())
        write(line_separator)

        count = 0
        for key in source.keys():
            value = source.get(key)
            if value is None:
                continue
            key = save_convert(key, True, binary)
            # Embedded and trailing spaces of values need no escape
            value = save_convert(value, False, binary)
            write(key + "=" + value)
            write(line_separator)
            count += 1

        sink.flush()
        logger.debug("stored %d entries (binary=%s, suppress_date=%s)", count, binary, suppress_date)
        return count

    @classmethod
    def serialize(
        cls,
        source: PropertyMap,
        comments: str | None = None,
        suppress_date: bool = False,
        line_separator: str = LINE_SEPARATOR,
    ) -> bytes:
        """Serialize to Latin-1 bytes."""
        buf = io.BytesIO()
        cls.store(source, buf, comments, suppress_date, line_separator)
        return buf.getvalue()

    @classmethod
    def write(
        cls,
        source: PropertyMap,
        path: str | Path,
        comments: str | None = None,
        suppress_date: bool = False,
    ) -> int:
        """Write to a file as Latin-1 bytes."""
        with open(path, "wb") as f:
            return cls.store(source, f, comments, suppress_date)
