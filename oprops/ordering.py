"""
Comparator-ordered mapping.

Keys are kept sorted by a cmp-style callable ``(a, b) -> int``. Two keys the
comparator reports as equal are the same key: the first stored key object is
kept and only its value is replaced.
"""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Callable, Iterator, MutableMapping
from functools import cmp_to_key

Comparator = Callable[[str, str], int]


class SortedKeyMap(MutableMapping):
    """Mapping that iterates its keys in comparator order."""

    def __init__(self, comparator: Comparator) -> None:
        self.comparator = comparator
        self._sort_key = cmp_to_key(comparator)
        self._keys: list[str] = []
        self._values: list[str] = []

    def _find(self, key: str) -> tuple[int, bool]:
        """Return (position, found) of key in the sorted key list."""
        pos = bisect_left(self._keys, self._sort_key(key), key=self._sort_key)
        found = pos < len(self._keys) and self.comparator(self._keys[pos], key) == 0
        return pos, found

    def __getitem__(self, key: str) -> str:
        if not isinstance(key, str):
            raise KeyError(key)
        pos, found = self._find(key)
        if not found:
            raise KeyError(key)
        return self._values[pos]

    def __setitem__(self, key: str, value: str) -> None:
        pos, found = self._find(key)
        if found:
            self._values[pos] = value
        else:
            self._keys.insert(pos, key)
            self._values.insert(pos, value)

    def __delitem__(self, key: str) -> None:
        if not isinstance(key, str):
            raise KeyError(key)
        pos, found = self._find(key)
        if not found:
            raise KeyError(key)
        del self._keys[pos]
        del self._values[pos]

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return self._find(key)[1]

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._keys))

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{k!r}: {v!r}" for k, v in zip(self._keys, self._values))
        return f"SortedKeyMap({{{pairs}}})"
