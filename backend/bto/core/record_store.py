"""Record Store — generic keyed repository, the leaf storage primitive.

Invariants:
    - Keys are unique: put() on an existing key raises DuplicateKeyError
    - get() never raises for a missing key (returns None)
    - all() is lazy, insertion-ordered and restartable
    - No locking: a single writer at a time is assumed

Design Decisions:
    - dict-backed: Python dicts preserve insertion order, and values() is a
      live view that can be iterated any number of times
"""

from collections.abc import Iterator, ValuesView
from typing import Generic, TypeVar

from bto.core.errors import DuplicateKeyError, ResourceNotFoundError

K = TypeVar("K", bound=str)
V = TypeVar("V")


class RecordStore(Generic[K, V]):
    """Insertion-ordered map from entity ID to entity."""

    def __init__(self, name: str):
        self.name = name
        self._items: dict[K, V] = {}

    def put(self, key: K, value: V) -> None:
        if key in self._items:
            raise DuplicateKeyError(self.name, key)
        self._items[key] = value

    def get(self, key: K | None) -> V | None:
        if key is None:
            return None
        return self._items.get(key)

    def require(self, key: K) -> V:
        """Like get(), but raises ResourceNotFoundError for shell lookups."""
        value = self._items.get(key)
        if value is None:
            raise ResourceNotFoundError(self.name, key)
        return value

    def all(self) -> ValuesView[V]:
        return self._items.values()

    def remove(self, key: K) -> V | None:
        return self._items.pop(key, None)

    def keys(self) -> list[K]:
        return list(self._items)

    def next_id(self, prefix: str) -> str:
        """Allocate the next unused '<prefix>-NNNN' id."""
        n = len(self._items) + 1
        while f"{prefix}-{n:04d}" in self._items:
            n += 1
        return f"{prefix}-{n:04d}"

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[V]:
        return iter(self._items.values())
