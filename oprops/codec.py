"""
Escape codec for property keys, values and comment blocks.

    load_convert()    -> Decode \\uXXXX, \\t \\n \\r \\f and escaped literals
    save_convert()    -> Escape control, structural and (optionally) non-ASCII chars
    write_comments()  -> Emit a free-text comment as '#'-prefixed lines
"""

from __future__ import annotations

from collections.abc import Callable

from oprops.errors import MalformedUnicodeEscapeError, PropertiesFormatError
from oprops.syntax import (
    COMMENT_CHARS,
    CONTROL_ESCAPES,
    CONTROL_UNESCAPES,
    ESCAPE,
    HEX_DIGITS,
    LINE_SEPARATOR,
    LINE_TERMINATORS,
    MAX_COMMENT_CHAR,
    STRUCTURAL_CHARS,
)

_HEX_VALUES = {c: int(c, 16) for c in "0123456789abcdefABCDEF"}


# =============================================================================
# Decoding
# =============================================================================

def load_convert(text: str) -> str:
    """
    Decode the escapes of one key or value.

    Any character after a backslash stands for itself unless it is one of
    t, n, r, f or u. Surrogate pairs written as two \\uXXXX escapes come back
    as a single character.
    """
    out: list[str] = []
    end = len(text)
    off = 0

    while off < end:
        c = text[off]
        off += 1
        if c != ESCAPE:
            out.append(c)
            continue

        if off >= end:
            raise PropertiesFormatError("Malformed \\ escape: nothing follows the backslash")
        c = text[off]
        off += 1

        if c == "u":
            value = 0
            for _ in range(4):
                digit = _HEX_VALUES.get(text[off]) if off < end else None
                if digit is None:
                    raise MalformedUnicodeEscapeError("Malformed \\uxxxx encoding.")
                value = (value << 4) + digit
                off += 1
            out.append(chr(value))
        else:
            out.append(CONTROL_ESCAPES.get(c, c))

    return _join_surrogates("".join(out))


def _join_surrogates(text: str) -> str:
    if not any("\ud800" <= ch <= "\udfff" for ch in text):
        return text
    # Valid pairs merge; lone surrogates pass through unchanged
    return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")


# =============================================================================
# Encoding
# =============================================================================

def save_convert(text: str, escape_space: bool, escape_unicode: bool) -> str:
    """
    Escape one key or value for storing.

    Keys pass escape_space=True. Values pass False, which still escapes a
    leading space so it survives the whitespace skip on load.
    """
    out: list[str] = []

    for x, c in enumerate(text):
        code = ord(c)
        # Common case first: '>' .. '~'
        if 61 < code < 127:
            out.append(ESCAPE + ESCAPE if c == ESCAPE else c)
            continue

        if c == " ":
            out.append(ESCAPE + " " if x == 0 or escape_space else " ")
        elif c in CONTROL_UNESCAPES:
            out.append(ESCAPE + CONTROL_UNESCAPES[c])
        elif c in STRUCTURAL_CHARS:
            out.append(ESCAPE + c)
        elif (code < 0x20 or code > 0x7E) and escape_unicode:
            out.append(unicode_escape(c))
        else:
            out.append(c)

    return "".join(out)


def unicode_escape(ch: str) -> str:
    """\\uXXXX form of a character; characters beyond the BMP become a surrogate pair."""
    code = ord(ch)
    if code > 0xFFFF:
        code -= 0x10000
        return unicode_escape(chr(0xD800 + (code >> 10))) + unicode_escape(chr(0xDC00 + (code & 0x3FF)))
    return ESCAPE + "u" + "".join(HEX_DIGITS[(code >> shift) & 0xF] for shift in (12, 8, 4, 0))


# =============================================================================
# Comments
# =============================================================================

def write_comments(write: Callable[[str], object], comments: str, newline: str = LINE_SEPARATOR) -> None:
    """
    Write a comment block, one '#'-prefixed line per line of text.

    Every line starts with its own write of "#" and ends with a write of
    newline. A line of the text that already starts with '#' or '!' gets no
    extra marker. Characters above Latin-1 are written as \\uXXXX.
    """
    write("#")
    length = len(comments)
    current = 0
    last = 0

    while current < length:
        c = comments[current]
        if ord(c) > MAX_COMMENT_CHAR or c in LINE_TERMINATORS:
            if last != current:
                write(comments[last:current])
            if ord(c) > MAX_COMMENT_CHAR:
                write(unicode_escape(c))
            else:
                write(newline)
                if c == "\r" and current != length - 1 and comments[current + 1] == "\n":
                    current += 1
                if current == length - 1 or comments[current + 1] not in COMMENT_CHARS:
                    write("#")
            last = current + 1
        current += 1

    if last != current:
        write(comments[last:current])
    write(newline)
