from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Iterable, Iterator, List, Optional, TypeVar

from library_store.exceptions import CapacityExceededError, DecodeError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EntityTable(Generic[T]):
    """Ordered in-memory collection of records with an optional size cap.

    Insertion order is preserved and every lookup is a linear scan, so the
    first match always refers to the earliest inserted record.
    """

    def __init__(self, name: str, capacity: Optional[int] = None) -> None:
        if capacity is not None and capacity < 0:
            raise ValueError("capacity cannot be negative.")
        self.name = name
        self.capacity = capacity
        self._rows: List[T] = []

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[T]:
        return iter(self._rows)

    def is_full(self) -> bool:
        return self.capacity is not None and len(self._rows) >= self.capacity

    def rows(self) -> List[T]:
        return list(self._rows)

    # ------------------------- Mutation ------------------------- #
    def add(self, entity: T) -> T:
        """Append ``entity`` or raise CapacityExceededError when full."""
        if self.is_full():
            raise CapacityExceededError(self.name, self.capacity)
        self._rows.append(entity)
        return entity

    def reload(self, lines: Iterable[str], decoder: Callable[[str], T]) -> int:
        """Replace the contents with records decoded from ``lines``.

        Malformed lines are skipped; loading stops quietly at capacity.
        Returns how many records were loaded.
        """
        self._rows = []
        for lineno, line in enumerate(lines, 1):
            if self.is_full():
                logger.warning(f"{self.name}: capacity {self.capacity} reached, ignoring lines from {lineno} on")
                break
            try:
                record = decoder(line)
            except DecodeError as e:
                logger.warning(f"{self.name}: skipping line {lineno}: {e.reason}")
                continue
            self._rows.append(record)
        return len(self._rows)

    def sort_by(self, key: Callable[[T], Any]) -> None:
        # list.sort is stable: equal keys keep their relative order.
        self._rows.sort(key=key)

    # ------------------------- Lookup ------------------------- #
    def find_first(self, predicate: Callable[[T], bool]) -> Optional[T]:
        for row in self._rows:
            if predicate(row):
                return row
        return None

    def find_all(self, predicate: Callable[[T], bool]) -> List[T]:
        return [row for row in self._rows if predicate(row)]
