"""
The narrow view the parser and serializer have of a property store.

Neither side knows about OrderedProperties; they talk to anything with
``get``, ``put`` and ``keys``. MapAdapter provides that view over a plain
backing mapping, whose own iteration order is the store order.
"""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from typing import Protocol


class PropertyMap(Protocol):
    def get(self, key: str) -> str | None: ...

    def put(self, key: str, value: str) -> str | None: ...

    def keys(self) -> Iterator[str]: ...


class MapAdapter:
    """Redirects get/put/keys into a backing mapping."""

    def __init__(self, target: MutableMapping[str, str]) -> None:
        self._target = target

    def get(self, key: str) -> str | None:
        return self._target.get(key)

    def put(self, key: str, value: str) -> str | None:
        if not isinstance(key, str) or not isinstance(value, str):
            raise TypeError(
                f"Property keys and values must be str, got {type(key).__name__}={type(value).__name__}"
            )
        previous = self._target.get(key)
        self._target[key] = value
        return previous

    def keys(self) -> Iterator[str]:
        # Snapshot so callers may mutate while iterating
        return iter(list(self._target))
