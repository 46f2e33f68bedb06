"""
Properties Format Syntax
========================

Layout:
    # free text                  <- Comment line ('#' or '!' as first non-blank char)
    #Sun Oct 18 09:15:02 CEST 2026   <- Timestamp comment (optional on store)
    key=value                    <- Entry, separator '='
    key:value                    <- Entry, separator ':'
    key value                    <- Entry, whitespace separator
    key = long \\                <- Trailing backslash continues the logical line
        value
    key                          <- Entry with empty value

Design Decisions:
    - Byte streams are Latin-1: one byte is one code point, anything else is \\uXXXX
    - A backslash escapes any following character, not a fixed whitelist
    - Line terminators are \\n, \\r or \\r\\n on load, os.linesep on store
    - Store order is the caller's order, never hash order
"""

import os

# Whitespace that separates keys from values and is skipped at line starts
WHITESPACE = " \t\f"

# Key/value separators
SEPARATORS = "=:"

# First character of a comment line
COMMENT_CHARS = "#!"

# Physical line terminators
LINE_TERMINATORS = "\r\n"

ESCAPE = "\\"

# Characters that always get a preceding backslash on store
STRUCTURAL_CHARS = "=:#!"

# Control characters with a one-letter escape
CONTROL_ESCAPES = {
    "t": "\t",
    "n": "\n",
    "r": "\r",
    "f": "\f",
}
CONTROL_UNESCAPES = {v: k for k, v in CONTROL_ESCAPES.items()}

HEX_DIGITS = "0123456789ABCDEF"

# Encoding of raw byte streams
LATIN_1 = "latin-1"

# Highest code point written verbatim inside a comment block
MAX_COMMENT_CHAR = 0xFF

# Line separator used when storing
LINE_SEPARATOR = os.linesep

# Timestamp comment rendering (EEE MMM dd HH:mm:ss zzz yyyy)
DATE_FORMAT = "%a %b %d %H:%M:%S %Z %Y"

# Read chunk size for the line reader
READ_CHUNK_SIZE = 8192

# list() truncates values longer than this
LIST_VALUE_WIDTH = 40

# XML properties document
XML_DOCTYPE = '<!DOCTYPE properties SYSTEM "http://java.sun.com/dtd/properties.dtd">'
XML_ENCODING = "UTF-8"

# Snapshot (pickle) format
SNAPSHOT_VERSION = 1
ORDERING_INSERTION = "insertion"
ORDERING_COMPARATOR = "comparator"
