"""Wall derivation and auto-tiling variants.

Walls are never stored between generations: ``derive_walls`` recomputes the
whole wall map from a floor set every time. A wall cell's variant depends only
on which of its eight neighbours are floor, encoded as a bit mask in the
order N, NE, E, SE, S, SW, W, NW (y grows downward).
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import AbstractSet, Dict

from .geometry import EIGHT_WAY, Cell

logger = logging.getLogger(__name__)

N = 1 << 0
NE = 1 << 1
E = 1 << 2
SE = 1 << 3
S = 1 << 4
SW = 1 << 5
W = 1 << 6
NW = 1 << 7

CARDINAL_MASK = N | E | S | W


class WallVariant(Enum):
    # Straight edges, named after the side of the floor they bound
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"
    # Floor on two perpendicular sides
    INNER_TOP_LEFT = "inner_top_left"
    INNER_TOP_RIGHT = "inner_top_right"
    INNER_BOTTOM_LEFT = "inner_bottom_left"
    INNER_BOTTOM_RIGHT = "inner_bottom_right"
    # Floor touching only one diagonal
    CORNER_TOP_LEFT = "corner_top_left"
    CORNER_TOP_RIGHT = "corner_top_right"
    CORNER_BOTTOM_LEFT = "corner_bottom_left"
    CORNER_BOTTOM_RIGHT = "corner_bottom_right"
    FULL = "full"


_CARDINAL_VARIANTS = {
    S: WallVariant.TOP,
    N: WallVariant.BOTTOM,
    E: WallVariant.LEFT,
    W: WallVariant.RIGHT,
    S | E: WallVariant.INNER_TOP_LEFT,
    S | W: WallVariant.INNER_TOP_RIGHT,
    N | E: WallVariant.INNER_BOTTOM_LEFT,
    N | W: WallVariant.INNER_BOTTOM_RIGHT,
}

_DIAGONAL_VARIANTS = {
    SE: WallVariant.CORNER_TOP_LEFT,
    SW: WallVariant.CORNER_TOP_RIGHT,
    NE: WallVariant.CORNER_BOTTOM_LEFT,
    NW: WallVariant.CORNER_BOTTOM_RIGHT,
}


def neighbor_mask(cell: Cell, floor: AbstractSet[Cell]) -> int:
    mask = 0
    for bit, (dx, dy) in enumerate(EIGHT_WAY):
        if Cell(cell.x + dx, cell.y + dy) in floor:
            mask |= 1 << bit
    return mask


def classify(mask: int) -> WallVariant:
    cardinal = mask & CARDINAL_MASK
    if cardinal:
        return _CARDINAL_VARIANTS.get(cardinal, WallVariant.FULL)
    return _DIAGONAL_VARIANTS.get(mask, WallVariant.FULL)


def derive_walls(floor: AbstractSet[Cell]) -> Dict[Cell, WallVariant]:
    """Map every non-floor cell touching the floor (8-way) to its variant."""
    walls: Dict[Cell, WallVariant] = {}
    for cell in sorted(floor):
        for n in cell.neighbors8():
            if n in floor or n in walls:
                continue
            walls[n] = classify(neighbor_mask(n, floor))
    logger.debug("Derived %d wall cells from %d floor cells", len(walls), len(floor))
    return walls
