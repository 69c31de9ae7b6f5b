from __future__ import annotations

import logging
import random
from typing import List, Sequence, Set, Tuple

from .carving import carve_corridor
from .geometry import CARDINALS, Cell, Rect

logger = logging.getLogger(__name__)


def _closest(current: Cell, candidates: Sequence[Cell]) -> int:
    # Strict comparison keeps the lowest index on equal distances.
    best_index = 0
    best = current.distance_sq(candidates[0])
    for i in range(1, len(candidates)):
        d = current.distance_sq(candidates[i])
        if d < best:
            best = d
            best_index = i
    return best_index


def nearest_neighbor_chain(centers: Sequence[Cell], rng: random.Random) -> List[Tuple[Cell, Cell]]:
    """Order room centers into a chain of (from, to) links.

    Starts from a random center and keeps hopping to the closest center not yet
    visited. Every center is touched exactly once, which keeps all rooms
    connected; it is not a minimum spanning tree.
    """
    if not centers:
        raise ValueError("At least one room center is required to build corridors")
    remaining = list(centers)
    current = remaining.pop(rng.randrange(len(remaining)))
    links: List[Tuple[Cell, Cell]] = []
    while remaining:
        nxt = remaining.pop(_closest(current, remaining))
        links.append((current, nxt))
        current = nxt
    return links


def connect(centers: Sequence[Cell], rng: random.Random, width: int = 1) -> Set[Cell]:
    """Carve L-shaped corridors along the nearest-neighbor chain of ``centers``."""
    corridors: Set[Cell] = set()
    links = nearest_neighbor_chain(centers, rng)
    for a, b in links:
        corridors |= carve_corridor(a, b, width)
    logger.debug("Connected %d centers with %d corridor cells", len(centers), len(corridors))
    return corridors


def random_walk_corridors(
    start: Cell,
    count: int,
    length: int,
    bounds: Rect,
    rng: random.Random,
) -> List[List[Cell]]:
    """Straight corridor legs, each leaving from where the previous one ended.

    A leg picks a random cardinal direction and walks up to ``length`` steps,
    stopping early at the edge of ``bounds``. Each returned leg starts with the
    cell it leaves from, so consecutive legs share an endpoint.
    """
    if not bounds.contains(start):
        raise ValueError(f"Walk start {start} lies outside {bounds}")
    legs: List[List[Cell]] = []
    current = start
    for _ in range(count):
        dx, dy = rng.choice(CARDINALS)
        leg = [current]
        for _ in range(length):
            nxt = current.offset(dx, dy)
            if not bounds.contains(nxt):
                break
            leg.append(nxt)
            current = nxt
        legs.append(leg)
    return legs


def dead_ends(cells: Set[Cell]) -> Set[Cell]:
    """Cells with at most one 4-neighbor in ``cells``."""
    return {c for c in cells if sum(1 for n in c.neighbors4() if n in cells) <= 1}
