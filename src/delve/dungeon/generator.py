"""Generation pipeline.

``generate`` turns a ``DungeonConfig`` into a ``DungeonLayout`` by running a
fixed sequence of phases: a strategy builds rooms and floor, walls are
derived from the floor, then entities are placed. Strategies are plain
functions picked from a closed table by ``config.strategy``; they share the
carving, corridor and wall building blocks instead of subclassing a common
generator.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Tuple, Union

from ..config import DungeonConfig, GenerationStrategy
from ..events import EventBus, EventType
from ..rng import RNGManager
from .carving import carve_room, widen
from .corridors import connect, dead_ends, random_walk_corridors
from .geometry import Cell, Rect
from .layout import DungeonLayout
from .partition import partition
from .placement import EntityKind, EntityPlacer
from .rooms import Room
from .walls import derive_walls

logger = logging.getLogger(__name__)

StrategyOutput = Tuple[List[Room], Set[Cell], int]
Strategy = Callable[[DungeonConfig, Rect, RNGManager], StrategyOutput]


def room_first(config: DungeonConfig, area: Rect, rngm: RNGManager) -> StrategyOutput:
    """Partition the area, carve a room per leaf, chain rooms with corridors."""
    leaves = partition(
        area,
        config.min_partition_width,
        config.min_partition_height,
        rngm.context_rng("partition"),
    )
    rooms = [Room(index=i, rect=leaf) for i, leaf in enumerate(leaves)]

    floor: Set[Cell] = set()
    for room in rooms:
        floor |= carve_room(room.rect, config.room_margin)
    corridors = connect([r.center for r in rooms], rngm.context_rng("corridors"), config.corridor_width)
    corridor_cells = len(corridors - floor)
    floor |= corridors
    return rooms, floor, corridor_cells


def _half_extent_range(min_size: int) -> Tuple[int, int]:
    # Rooms are centred on a corridor cell, so floors are odd-sized: 2 * half + 1.
    lo = min_size // 2
    return lo, lo + 1


def corridor_first(config: DungeonConfig, area: Rect, rngm: RNGManager) -> StrategyOutput:
    """Random-walk corridor legs first, then rooms centred on chosen leg ends."""
    hw_lo, hw_hi = _half_extent_range(config.min_room_width)
    hh_lo, hh_hi = _half_extent_range(config.min_room_height)
    margin = config.room_margin
    walk_bounds = area.inset(hw_hi + margin, hh_hi + margin)
    if walk_bounds is None:
        logger.warning(
            "Area %dx%d too small for corridor-first rooms; falling back to a single room",
            area.w,
            area.h,
        )
        room = Room(index=0, rect=area)
        return [room], carve_room(area, margin), 0

    rng = rngm.context_rng("corridors")
    start = walk_bounds.center()
    legs = random_walk_corridors(start, config.corridor_count, config.corridor_length, walk_bounds, rng)

    path: Set[Cell] = {start}
    ends: List[Cell] = [start]
    for leg in legs:
        path.update(leg)
        if leg[-1] not in ends:
            ends.append(leg[-1])

    chosen = set(rng.sample(ends, round(len(ends) * config.room_ratio)))
    chosen |= dead_ends(path) & set(ends)
    if not chosen:
        # Legs closed into a loop and the ratio picked nothing
        chosen.add(start)

    room_rng = rngm.context_rng("rooms")
    rooms: List[Room] = []
    floor: Set[Cell] = set()
    for center in ends:
        if center not in chosen:
            continue
        hw = room_rng.randint(hw_lo, hw_hi)
        hh = room_rng.randint(hh_lo, hh_hi)
        rect = Rect(
            center.x - hw - margin,
            center.y - hh - margin,
            2 * (hw + margin) + 1,
            2 * (hh + margin) + 1,
        )
        rooms.append(Room(index=len(rooms), rect=rect))
        floor |= carve_room(rect, margin)

    corridors = widen(path, config.corridor_width)
    corridor_cells = len(corridors - floor)
    floor |= corridors
    return rooms, floor, corridor_cells


STRATEGIES: Dict[GenerationStrategy, Strategy] = {
    GenerationStrategy.ROOM_FIRST: room_first,
    GenerationStrategy.CORRIDOR_FIRST: corridor_first,
}


def _coerce_config(config: Union[DungeonConfig, Mapping[str, Any], None]) -> DungeonConfig:
    if config is None:
        return DungeonConfig()
    if isinstance(config, DungeonConfig):
        return config
    return DungeonConfig.from_mapping(config)


def generate(
    config: Union[DungeonConfig, Mapping[str, Any], None] = None,
    *,
    bus: Optional[EventBus] = None,
) -> DungeonLayout:
    """Generate a complete dungeon layout.

    Raises:
        InvalidDungeonConfig: if ``config`` is a mapping that fails validation.
            Nothing is generated in that case.
    """
    cfg = _coerce_config(config)
    rngm = RNGManager(cfg.seed)
    area = Rect(cfg.origin_x, cfg.origin_y, cfg.width, cfg.height)
    strategy = STRATEGIES[cfg.strategy]

    phase_ms: Dict[str, float] = {}

    def _phase(label: str, fn: Callable[..., Any], *a: Any, **k: Any) -> Any:
        started = time.perf_counter()
        result = fn(*a, **k)
        phase_ms[label] = round((time.perf_counter() - started) * 1000, 3)
        return result

    logger.debug("Generating %s dungeon %dx%d seed=%r", cfg.strategy.value, cfg.width, cfg.height, rngm.effective_seed)
    rooms, floor, corridor_cells = _phase("layout", strategy, cfg, area, rngm)
    frozen_floor = frozenset(floor)
    walls = _phase("walls", derive_walls, frozen_floor)

    placer = EntityPlacer(
        rngm.context_rng("entities"),
        counts={
            EntityKind.COIN: cfg.coins_per_room,
            EntityKind.ENEMY: cfg.enemies_per_room,
            EntityKind.POTION: cfg.potions_per_room,
            EntityKind.PROP: cfg.props_per_room,
        },
        min_spacing=cfg.min_prop_spacing,
        max_retries=cfg.placement_retries,
        bus=bus,
    )
    population = _phase("entities", placer.populate, rooms, frozen_floor)

    requested = sum(r.requested for r in population.results)
    metrics: Dict[str, Any] = {
        "rooms": len(rooms),
        "floor_cells": len(frozen_floor),
        "corridor_cells": corridor_cells,
        "wall_cells": len(walls),
        "entities_requested": requested,
        "entities_placed": len(population.placements),
        "phase_ms": phase_ms,
    }

    layout = DungeonLayout(
        area=area,
        floor=frozen_floor,
        walls=walls,
        rooms=population.rooms,
        placements=population.placements,
        placement_results=population.results,
        start_room=population.start_room,
        boss_room=population.boss_room,
        seed=rngm.effective_seed,
        strategy=cfg.strategy.value,
        metrics=metrics,
    )
    logger.info(
        "Generated %s dungeon: %d rooms, %d floor cells, %d walls, %d/%d entities",
        cfg.strategy.value,
        len(rooms),
        len(frozen_floor),
        len(walls),
        len(population.placements),
        requested,
    )
    if bus is not None:
        bus.publish(
            EventType.DUNGEON_GENERATED,
            {"rooms": len(rooms), "floor_cells": len(frozen_floor), "signature": layout.floor_signature()},
        )
    return layout
