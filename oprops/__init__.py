"""
oprops - Ordered .properties files.
Reads and writes the classic key=value .properties format byte-for-byte,
keeping entries in insertion order or a caller-supplied key order.
"""

__version__ = "1.0.0"

from oprops.errors import InvalidRestoredStateError, MalformedUnicodeEscapeError, PropertiesFormatError
from oprops.reader import LineReader, PropertiesReader
from oprops.store import OrderedProperties, OrderedPropertiesBuilder
from oprops.writer import DateSuppressingWriter, PropertiesWriter
