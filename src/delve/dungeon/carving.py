from __future__ import annotations

from typing import Iterable, List, Set

from .geometry import Cell, Rect


def carve_room(room: Rect, margin: int = 1) -> Set[Cell]:
    """Floor cells of ``room`` inset by ``margin`` on every side.

    The inset keeps a gap between floors of neighbouring partitions so walls
    always have somewhere to go.
    """
    if margin < 0:
        raise ValueError(f"margin must be non-negative, got {margin}")
    inner = room.inset(margin)
    if inner is None:
        return set()
    return set(inner.cells())


def corridor_path(start: Cell, end: Cell) -> List[Cell]:
    """Centre line of an L-shaped corridor: vertical leg first, then horizontal."""
    path = [start]
    x, y = start.x, start.y
    y_step = 1 if end.y >= y else -1
    while y != end.y:
        y += y_step
        path.append(Cell(x, y))
    x_step = 1 if end.x >= x else -1
    while x != end.x:
        x += x_step
        path.append(Cell(x, y))
    return path


def widen(cells: Iterable[Cell], width: int) -> Set[Cell]:
    """Stamp a ``width`` x ``width`` square brush on every cell."""
    if width < 1:
        raise ValueError(f"corridor width must be >= 1, got {width}")
    if width == 1:
        return set(cells)
    lo = -((width - 1) // 2)
    hi = width // 2
    out: Set[Cell] = set()
    for c in cells:
        for dy in range(lo, hi + 1):
            for dx in range(lo, hi + 1):
                out.add(Cell(c.x + dx, c.y + dy))
    return out


def carve_corridor(start: Cell, end: Cell, width: int = 1) -> Set[Cell]:
    return widen(corridor_path(start, end), width)
