from __future__ import annotations

import logging
import random
from typing import List

from .geometry import Rect

logger = logging.getLogger(__name__)

# A side longer than SPLIT_RATIO times the other always gets cut across.
SPLIT_RATIO = 1.25


def partition(area: Rect, min_width: int, min_height: int, rng: random.Random) -> List[Rect]:
    """Binary space partition of ``area`` into leaf rectangles.

    Every leaf is at least ``min_width`` x ``min_height``. Leaves are returned in
    discovery order (depth first, first half before second half), which later
    phases rely on for the player and boss rooms, so the order is fully
    determined by ``rng``.
    """
    if area.w < 2 * min_width and area.h < 2 * min_height:
        logger.warning(
            "Area %dx%d cannot be split with minimum %dx%d; using it as a single room",
            area.w,
            area.h,
            min_width,
            min_height,
        )
        return [area]

    leaves: List[Rect] = []
    _split(area, min_width, min_height, rng, leaves)
    logger.debug("Partitioned %r into %d leaves", area, len(leaves))
    return leaves


def _split_across_height(rect: Rect, rng: random.Random) -> bool:
    split_horiz = rng.choice([True, False])
    if rect.w > SPLIT_RATIO * rect.h:
        split_horiz = False
    elif rect.h > SPLIT_RATIO * rect.w:
        split_horiz = True
    return split_horiz


def _split(rect: Rect, min_width: int, min_height: int, rng: random.Random, out: List[Rect]) -> None:
    split_horiz = _split_across_height(rect, rng)
    size = rect.h if split_horiz else rect.w
    minimum = min_height if split_horiz else min_width

    max_split = size - minimum
    if max_split < minimum:
        out.append(rect)
        return

    split = rng.randint(minimum, max_split)
    if split_horiz:
        first = Rect(rect.x, rect.y, rect.w, split)
        second = Rect(rect.x, rect.y + split, rect.w, rect.h - split)
    else:
        first = Rect(rect.x, rect.y, split, rect.h)
        second = Rect(rect.x + split, rect.y, rect.w - split, rect.h)

    _split(first, min_width, min_height, rng, out)
    _split(second, min_width, min_height, rng, out)
