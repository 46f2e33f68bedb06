"""Errors raised by oprops."""


class PropertiesFormatError(ValueError):
    """Malformed properties or XML properties input."""


class MalformedUnicodeEscapeError(PropertiesFormatError):
    """A \\uXXXX escape with fewer than four hex digits or a non-hex digit."""


class InvalidRestoredStateError(ValueError):
    """A snapshot that carries no usable store data."""
