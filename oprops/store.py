"""
OrderedProperties - a .properties store with a well-defined entry order.

By default entries keep the order in which they were first added, whether by
set_property() or by reading a file top to bottom. A builder can swap that
for a comparator order over the keys, and can suppress the date comment that
store() normally writes.

The store is not synchronized. Callers that mutate it from several threads
must lock around it themselves.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator, MutableMapping
from pathlib import Path
from typing import IO, Any

from oprops.adapter import MapAdapter
from oprops.errors import InvalidRestoredStateError
from oprops.ordering import Comparator, SortedKeyMap
from oprops.reader import PropertiesReader
from oprops.syntax import (
    LINE_SEPARATOR,
    LIST_VALUE_WIDTH,
    ORDERING_COMPARATOR,
    ORDERING_INSERTION,
    SNAPSHOT_VERSION,
    XML_ENCODING,
)
from oprops.writer import PropertiesWriter
from oprops.xmlprops import load_from_xml, store_to_xml


class OrderedProperties:
    """
    Ordered string-to-string property store.

    Usage:
        props = OrderedProperties()
        props.set_property("b", "2")
        props.set_property("a", "1")
        props.property_names()          # ["b", "a"]

        with open("app.properties", "rb") as f:
            props.load(f)

        props = OrderedProperties.builder().with_suppress_date_in_comment(True).build()
    """

    def __init__(self) -> None:
        self._properties: MutableMapping[str, str] = {}
        self._suppress_date = False

    @classmethod
    def _create(cls, properties: MutableMapping[str, str], suppress_date: bool) -> OrderedProperties:
        props = cls.__new__(cls)
        props._properties = properties
        props._suppress_date = suppress_date
        return props

    @staticmethod
    def builder() -> OrderedPropertiesBuilder:
        return OrderedPropertiesBuilder()

    @property
    def comparator(self) -> Comparator | None:
        """The key comparator, or None for insertion order."""
        if isinstance(self._properties, SortedKeyMap):
            return self._properties.comparator
        return None

    @property
    def suppress_date(self) -> bool:
        return self._suppress_date

    # -------------------------------------------------------------------------
    # Entry access
    # -------------------------------------------------------------------------

    def get_property(self, key: str, default: str | None = None) -> str | None:
        value = self._properties.get(key)
        return default if value is None else value

    def set_property(self, key: str, value: str) -> str | None:
        """Set a property. Returns the previous value, or None."""
        return self._adapter().put(key, value)

    def remove_property(self, key: str) -> str | None:
        """Remove a property. Returns its value, or None if it was absent."""
        return self._properties.pop(key, None)

    def contains_property(self, key: str) -> bool:
        return key in self._properties

    def size(self) -> int:
        return len(self._properties)

    def is_empty(self) -> bool:
        return not self._properties

    def property_names(self) -> list[str]:
        return list(self._properties)

    def string_property_names(self) -> list[str]:
        return list(self._properties)

    def entry_set(self) -> list[tuple[str, str]]:
        return list(self._properties.items())

    items = entry_set

    def __contains__(self, key: object) -> bool:
        return key in self._properties

    def __iter__(self) -> Iterator[str]:
        return iter(self.property_names())

    def __len__(self) -> int:
        return len(self._properties)

    def _adapter(self) -> MapAdapter:
        return MapAdapter(self._properties)

    # -------------------------------------------------------------------------
    # .properties text format
    # -------------------------------------------------------------------------

    def load(self, stream: IO) -> None:
        """Load entries from a byte stream (Latin-1) or a text stream."""
        PropertiesReader.load(self._adapter(), stream)

    def store(self, stream: IO, comments: str | None = None, line_separator: str = LINE_SEPARATOR) -> None:
        """
        Write all entries to a byte stream (Latin-1, \\uXXXX escapes) or a
        text stream, preceded by the optional comments and, unless suppressed,
        the date comment line.
        """
        PropertiesWriter.store(self._adapter(), stream, comments, self._suppress_date, line_separator)

    @classmethod
    def read(cls, path: str | Path) -> OrderedProperties:
        """Read a .properties file into a new insertion-ordered store."""
        return PropertiesReader.read(path, cls())

    def write(self, path: str | Path, comments: str | None = None) -> None:
        PropertiesWriter.write(self._adapter(), path, comments, self._suppress_date)

    # -------------------------------------------------------------------------
    # XML format
    # -------------------------------------------------------------------------

    def load_from_xml(self, stream: IO) -> None:
        load_from_xml(self._adapter(), stream)

    def store_to_xml(self, stream: IO, comment: str | None = None, encoding: str = XML_ENCODING) -> None:
        store_to_xml(self._adapter(), stream, comment, encoding)

    # -------------------------------------------------------------------------
    # Conversion and debugging
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, str]:
        """Copy the entries into a plain dict."""
        return dict(self._properties.items())

    def list(self, out: IO[str] | None = None) -> None:
        """Print a listing of the entries, truncating long values."""
        if out is None:
            out = sys.stdout
        print("-- listing properties --", file=out)
        for key, value in self._properties.items():
            if len(value) > LIST_VALUE_WIDTH:
                value = value[:LIST_VALUE_WIDTH - 3] + "..."
            print(f"{key}={value}", file=out)

    @classmethod
    def copy_of(cls, source: OrderedProperties) -> OrderedProperties:
        """
        New store with the entries and behaviour of source.

        With a custom ordering, source and copy share the comparator.
        """
        builder = OrderedPropertiesBuilder().with_suppress_date_in_comment(source._suppress_date)
        if source.comparator is not None:
            builder.with_ordering(source.comparator)
        result = builder.build()
        for key, value in source.entry_set():
            result.set_property(key, value)
        return result

    # -------------------------------------------------------------------------
    # Snapshots (pickle)
    # -------------------------------------------------------------------------

    def snapshot(self) -> dict[str, Any]:
        """Versioned, plain-data form of the store."""
        comparator = self.comparator
        return {
            "version": SNAPSHOT_VERSION,
            "ordering": ORDERING_INSERTION if comparator is None else ORDERING_COMPARATOR,
            "comparator": comparator,
            "suppress_date": self._suppress_date,
            "entries": self.entry_set(),
        }

    @classmethod
    def from_snapshot(cls, state: dict[str, Any] | None) -> OrderedProperties:
        props = cls.__new__(cls)
        props._restore(state)
        return props

    def _restore(self, state: dict[str, Any] | None) -> None:
        if not state or "entries" not in state:
            raise InvalidRestoredStateError("Snapshot data required")
        if state.get("version") != SNAPSHOT_VERSION:
            raise InvalidRestoredStateError(f"Unsupported snapshot version: {state.get('version')!r}")

        ordering = state.get("ordering")
        if ordering == ORDERING_INSERTION:
            properties: MutableMapping[str, str] = {}
        elif ordering == ORDERING_COMPARATOR and callable(state.get("comparator")):
            properties = SortedKeyMap(state["comparator"])
        else:
            raise InvalidRestoredStateError(f"Unknown ordering in snapshot: {ordering!r}")

        self._properties = properties
        self._suppress_date = bool(state.get("suppress_date", False))
        adapter = self._adapter()
        try:
            for key, value in state["entries"]:
                adapter.put(key, value)
        except (TypeError, ValueError) as e:
            raise InvalidRestoredStateError(f"Malformed snapshot entries: {e}") from e

    def __getstate__(self) -> dict[str, Any]:
        return self.snapshot()

    def __setstate__(self, state: dict[str, Any]) -> None:
        self._restore(state)

    # -------------------------------------------------------------------------
    # Equality and rendering
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if type(self) is not type(other):
            return NotImplemented
        return self.entry_set() == other.entry_set()

    __hash__ = None  # mutable

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}={v}" for k, v in self._properties.items()) + "}"

    def __repr__(self) -> str:
        ordering = ORDERING_INSERTION if self.comparator is None else ORDERING_COMPARATOR
        return f"<OrderedProperties ordering={ordering} entries={len(self)} suppress_date={self._suppress_date}>"


class OrderedPropertiesBuilder:
    """Builder for OrderedProperties instances."""

    def __init__(self) -> None:
        self._comparator: Comparator | None = None
        self._suppress_date = False

    def with_ordering(self, comparator: Comparator) -> OrderedPropertiesBuilder:
        """Order keys by a cmp-style callable (a, b) -> negative, zero or positive."""
        self._comparator = comparator
        return self

    def with_suppress_date_in_comment(self, suppress_date: bool) -> OrderedPropertiesBuilder:
        """Omit the date comment line when storing."""
        self._suppress_date = suppress_date
        return self

    def build(self) -> OrderedProperties:
        properties: MutableMapping[str, str]
        if self._comparator is not None:
            properties = SortedKeyMap(self._comparator)
        else:
            properties = {}
        return OrderedProperties._create(properties, self._suppress_date)
