from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

# Ordered for deterministic traversal; y grows downward so "north" is y - 1.
CARDINALS: Tuple[Tuple[int, int], ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))
EIGHT_WAY: Tuple[Tuple[int, int], ...] = (
    (0, -1),
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
)


@dataclass(frozen=True, order=True)
class Cell:
    """Integer grid coordinate used as the key of floor and wall sets."""

    x: int
    y: int

    def offset(self, dx: int, dy: int) -> "Cell":
        return Cell(self.x + dx, self.y + dy)

    def neighbors4(self) -> Iterator["Cell"]:
        for dx, dy in CARDINALS:
            yield Cell(self.x + dx, self.y + dy)

    def neighbors8(self) -> Iterator["Cell"]:
        for dx, dy in EIGHT_WAY:
            yield Cell(self.x + dx, self.y + dy)

    def distance_sq(self, other: "Cell") -> int:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle of cells; ``right`` and ``bottom`` are exclusive."""

    x: int
    y: int
    w: int
    h: int

    def __post_init__(self) -> None:
        if self.w < 1 or self.h < 1:
            raise ValueError(f"Rect must be at least 1x1, got {self.w}x{self.h}")

    @classmethod
    def bounding(cls, cells: Iterable[Cell]) -> "Rect":
        """Smallest rectangle covering all ``cells``."""
        xs = []
        ys = []
        for c in cells:
            xs.append(c.x)
            ys.append(c.y)
        if not xs:
            raise ValueError("Cannot bound an empty cell collection")
        return cls(min(xs), min(ys), max(xs) - min(xs) + 1, max(ys) - min(ys) + 1)

    def right(self) -> int:
        return self.x + self.w

    def bottom(self) -> int:
        return self.y + self.h

    @property
    def area(self) -> int:
        return self.w * self.h

    def center(self) -> Cell:
        return Cell(self.x + self.w // 2, self.y + self.h // 2)

    def contains(self, c: Cell) -> bool:
        return (self.x <= c.x < self.right()) and (self.y <= c.y < self.bottom())

    def inset(self, dx: int, dy: Optional[int] = None) -> Optional["Rect"]:
        """Shrink by ``dx`` columns and ``dy`` rows on each side; None when nothing is left."""
        if dy is None:
            dy = dx
        w = self.w - 2 * dx
        h = self.h - 2 * dy
        if w < 1 or h < 1:
            return None
        return Rect(self.x + dx, self.y + dy, w, h)

    def cells(self) -> Iterator[Cell]:
        """Cells in row-major order."""
        for yy in range(self.y, self.bottom()):
            for xx in range(self.x, self.right()):
                yield Cell(xx, yy)

    def intersects(self, other: "Rect") -> bool:
        return not (
            self.right() <= other.x
            or other.right() <= self.x
            or self.bottom() <= other.y
            or other.bottom() <= self.y
        )
