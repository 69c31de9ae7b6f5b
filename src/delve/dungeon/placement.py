from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Dict, List, Optional, Sequence, Set, Tuple

from ..events import EventBus, EventType
from .geometry import Cell, Rect
from .rooms import Room, RoomTag

logger = logging.getLogger(__name__)

DEFAULT_MIN_SPACING = 1.5
DEFAULT_MAX_RETRIES = 50


class EntityKind(Enum):
    PLAYER = "player"
    BOSS = "boss"
    COIN = "coin"
    ENEMY = "enemy"
    POTION = "potion"
    PROP = "prop"


@dataclass(frozen=True)
class Placement:
    kind: EntityKind
    cell: Cell
    room_index: int


@dataclass(frozen=True)
class PlacementResult:
    """Outcome of one ``place`` call; ``placed < requested`` means the room was too crowded."""

    kind: EntityKind
    requested: int
    positions: Tuple[Cell, ...]

    @property
    def placed(self) -> int:
        return len(self.positions)

    @property
    def shortfall(self) -> int:
        return self.requested - self.placed


def room_floor_cells(room: Rect, floor: AbstractSet[Cell]) -> List[Cell]:
    """Floor cells inside ``room``, sorted so sampling is reproducible."""
    return sorted(c for c in room.cells() if c in floor)


def _is_free(cell: Cell, occupied: AbstractSet[Cell], min_spacing: float) -> bool:
    if cell in occupied:
        return False
    limit = min_spacing * min_spacing
    return all(cell.distance_sq(o) >= limit for o in occupied)


def place(
    kind: EntityKind,
    count: int,
    room: Rect,
    floor: AbstractSet[Cell],
    occupied: Set[Cell],
    rng: random.Random,
    *,
    min_spacing: float = DEFAULT_MIN_SPACING,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> PlacementResult:
    """Pick up to ``count`` free floor cells in ``room`` for entities of ``kind``.

    A candidate is rejected when it is already occupied or closer than
    ``min_spacing`` to any occupied cell. Each entity gets ``max_retries``
    samples; when they run out the entity is skipped. Accepted cells are added
    to ``occupied`` in place.
    """
    candidates = room_floor_cells(room, floor)
    positions: List[Cell] = []
    if candidates:
        for _ in range(count):
            for _attempt in range(max_retries):
                cell = rng.choice(candidates)
                if _is_free(cell, occupied, min_spacing):
                    occupied.add(cell)
                    positions.append(cell)
                    break
    result = PlacementResult(kind=kind, requested=count, positions=tuple(positions))
    if result.shortfall:
        logger.debug(
            "Placed %d/%d %s in %r (room too small or crowded)",
            result.placed,
            count,
            kind.value,
            room,
        )
    return result


def farthest_room(rooms: Sequence[Room], origin: Room) -> Room:
    """Room whose center is farthest (Euclidean) from ``origin``'s center; first wins ties."""
    best = origin
    best_d = -1
    for room in rooms:
        d = room.center.distance_sq(origin.center)
        if d > best_d:
            best = room
            best_d = d
    return best


@dataclass(frozen=True)
class PopulationResult:
    rooms: Tuple[Room, ...]
    placements: Tuple[Placement, ...]
    results: Tuple[PlacementResult, ...]
    start_room: int
    boss_room: int


class EntityPlacer:
    """Runs one placement pass over all rooms of a generated layout.

    The player starts in the first room in generation order, the boss in the
    room farthest from it. Every room then receives its coins, enemies (the
    start room is kept clear), potions and props. All entities share one
    occupancy set, so the spacing rule holds across kinds.
    """

    def __init__(
        self,
        rng: random.Random,
        *,
        counts: Optional[Dict[EntityKind, int]] = None,
        min_spacing: float = DEFAULT_MIN_SPACING,
        max_retries: int = DEFAULT_MAX_RETRIES,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.rng = rng
        self.counts = dict(counts or {})
        self.min_spacing = min_spacing
        self.max_retries = max_retries
        self.bus = bus

    def populate(self, rooms: Sequence[Room], floor: AbstractSet[Cell]) -> PopulationResult:
        if not rooms:
            raise ValueError("Cannot populate a layout without rooms")
        occupied: Set[Cell] = set()
        placements: List[Placement] = []
        results: List[PlacementResult] = []

        start = rooms[0]
        boss = farthest_room(rooms, start)

        for kind, room in ((EntityKind.PLAYER, start), (EntityKind.BOSS, boss)):
            result = self._place_at_center(kind, room, floor, occupied)
            results.append(result)
            self._record(result, room, placements)

        for room in rooms:
            for kind in (EntityKind.COIN, EntityKind.ENEMY, EntityKind.POTION, EntityKind.PROP):
                count = self.counts.get(kind, 0)
                if kind is EntityKind.ENEMY and room.index == start.index:
                    count = 0
                if count <= 0:
                    continue
                result = place(
                    kind,
                    count,
                    room.rect,
                    floor,
                    occupied,
                    self.rng,
                    min_spacing=self.min_spacing,
                    max_retries=self.max_retries,
                )
                results.append(result)
                self._record(result, room, placements)

        tagged = []
        for room in rooms:
            if room.index == start.index:
                tagged.append(room.with_tag(RoomTag.START))
            elif room.index == boss.index:
                tagged.append(room.with_tag(RoomTag.BOSS))
            else:
                tagged.append(room)

        logger.debug(
            "Placed %d entities across %d rooms (start=%d, boss=%d)",
            len(placements),
            len(rooms),
            start.index,
            boss.index,
        )
        return PopulationResult(
            rooms=tuple(tagged),
            placements=tuple(placements),
            results=tuple(results),
            start_room=start.index,
            boss_room=boss.index,
        )

    def _place_at_center(
        self,
        kind: EntityKind,
        room: Room,
        floor: AbstractSet[Cell],
        occupied: Set[Cell],
    ) -> PlacementResult:
        center = room.center
        if center in floor and _is_free(center, occupied, self.min_spacing):
            occupied.add(center)
            return PlacementResult(kind=kind, requested=1, positions=(center,))
        return place(
            kind,
            1,
            room.rect,
            floor,
            occupied,
            self.rng,
            min_spacing=self.min_spacing,
            max_retries=self.max_retries,
        )

    def _record(self, result: PlacementResult, room: Room, out: List[Placement]) -> None:
        for cell in result.positions:
            out.append(Placement(kind=result.kind, cell=cell, room_index=room.index))
            if self.bus is not None:
                self.bus.publish(
                    EventType.ENTITY_PLACED,
                    {"kind": result.kind.value, "x": cell.x, "y": cell.y, "room": room.index},
                )
        if result.shortfall and self.bus is not None:
            self.bus.publish(
                EventType.ENTITY_SHORTFALL,
                {
                    "kind": result.kind.value,
                    "room": room.index,
                    "requested": result.requested,
                    "placed": result.placed,
                },
            )
