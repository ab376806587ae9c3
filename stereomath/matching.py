"""Lists of point correspondences between two views."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

__all__ = ["MatchItem", "Matching"]


@dataclass
class MatchItem:
    """One correspondence: index in the first set, index in the second, and a distance."""

    idx1: int
    idx2: int
    dist: float


class Matching:
    """A bounded list of correspondences; ``reserve`` sets how many may be added."""

    def __init__(self) -> None:
        self._items: list[MatchItem] = []
        self._capacity = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def clear(self) -> None:
        """Drop every match and the reserved capacity."""
        self._items = []
        self._capacity = 0

    def reserve(self, n: int) -> None:
        """Clear the list and allow up to ``n`` matches to be added."""
        self.clear()
        if n > 0:
            self._capacity = n

    def add(self, i: int, j: int, dist: float) -> None:
        """Append a correspondence; raises IndexError when capacity is reached."""
        if len(self._items) >= self._capacity:
            raise IndexError(f"Matching.add: capacity of {self._capacity} reached")
        self._items.append(MatchItem(i, j, dist))

    def __copy__(self) -> "Matching":
        other = Matching()
        other.reserve(len(self._items))
        for item in self._items:
            other.add(item.idx1, item.idx2, item.dist)
        return other

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[MatchItem]:
        return iter(self._items)

    def __getitem__(self, index: int) -> MatchItem:
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matching):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"Matching({self._items!r})"