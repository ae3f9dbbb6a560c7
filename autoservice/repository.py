"""Simple in-memory repositories used by the shop service layer."""

from __future__ import annotations

from dataclasses import asdict
from typing import Dict, Generic, Iterable, Iterator, List, MutableMapping, Optional, TypeVar

T = TypeVar("T")


class RepositoryError(RuntimeError):
    """Base exception for repository errors."""


class DuplicateRecordError(RepositoryError):
    """Raised when attempting to insert a record that already exists."""


class RecordNotFoundError(RepositoryError):
    """Raised when a requested record is missing."""


class InMemoryRepository(Generic[T]):
    """Repository backed by an insertion-ordered dictionary.

    Each repository owns its own id allocator. Ids start at 1 and are never
    handed out twice, so records minted through :meth:`next_id` cannot
    collide.
    """

    def __init__(self) -> None:
        self._items: MutableMapping[int, T] = {}
        self._next_id = 1

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    def next_id(self) -> int:
        item_id = self._next_id
        self._next_id += 1
        return item_id

    def add(self, item_id: int, item: T) -> None:
        if item_id in self._items:
            raise DuplicateRecordError(f"Record with id {item_id!r} already exists")
        self._items[item_id] = item
        if item_id >= self._next_id:
            self._next_id = item_id + 1

    def get(self, item_id: int) -> T:
        try:
            return self._items[item_id]
        except KeyError as exc:
            raise RecordNotFoundError(f"Record with id {item_id!r} not found") from exc

    def find(self, item_id: int) -> Optional[T]:
        return self._items.get(item_id)

    def list(self) -> List[T]:
        return list(self._items.values())

    def as_dicts(self) -> Iterable[Dict]:
        for item in self._items.values():
            yield asdict(item)

    def __iter__(self) -> Iterator[T]:  # pragma: no cover - convenience
        return iter(self._items.values())


__all__ = [
    "InMemoryRepository",
    "RepositoryError",
    "DuplicateRecordError",
    "RecordNotFoundError",
]
