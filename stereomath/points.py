"""Small 2-D and 3-D point types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

__all__ = ["Point2", "Point3", "Point3Id", "point2_compare_less"]


@dataclass
class Point2:
    """A point in the plane."""

    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y


@dataclass
class Point3:
    """A point in space."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z


@dataclass
class Point3Id(Point3):
    """A 3-D point carrying an identifier; -1 means unassigned."""

    id: int = -1


def point2_compare_less(pt1: Point2, pt2: Point2) -> bool:
    """Order by y, then by x; points with equal y and x compare as less."""
    if pt1.y < pt2.y:
        return True
    if pt1.y == pt2.y:
        return pt1.x <= pt2.x
    return False