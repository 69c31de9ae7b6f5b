from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from .geometry import Cell, Rect
from .placement import EntityKind, Placement, PlacementResult
from .rooms import Room
from .walls import WallVariant

ENTITY_SYMBOLS = {
    EntityKind.PLAYER: "@",
    EntityKind.BOSS: "B",
    EntityKind.COIN: "$",
    EntityKind.ENEMY: "e",
    EntityKind.POTION: "!",
    EntityKind.PROP: "*",
}


@dataclass(frozen=True)
class DungeonLayout:
    """Immutable result of one generation run.

    ``floor`` and ``walls`` are what renderers draw, ``placements`` what gameplay
    spawns, and ``floor`` is what navigation grids are built from. ``walls`` is
    a read-only view; it is derived from ``floor`` and left out of the hash,
    as are the run ``metrics``.
    """

    area: Rect
    floor: FrozenSet[Cell]
    walls: Mapping[Cell, WallVariant] = field(hash=False)
    rooms: Tuple[Room, ...]
    placements: Tuple[Placement, ...]
    placement_results: Tuple[PlacementResult, ...]
    start_room: int
    boss_room: int
    seed: Union[int, str, bytes]
    strategy: str
    metrics: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "walls", MappingProxyType(dict(self.walls)))

    def bounds(self) -> Rect:
        """Rectangle covering every floor and wall cell."""
        return Rect.bounding(list(self.floor) + list(self.walls))

    def positions(self, kind: EntityKind) -> List[Cell]:
        return [p.cell for p in self.placements if p.kind is kind]

    @property
    def player_spawn(self) -> Optional[Cell]:
        cells = self.positions(EntityKind.PLAYER)
        return cells[0] if cells else None

    @property
    def boss_spawn(self) -> Optional[Cell]:
        cells = self.positions(EntityKind.BOSS)
        return cells[0] if cells else None

    def floor_signature(self) -> str:
        """Deterministic digest of the floor set alone."""
        raw = ";".join(f"{c.x},{c.y}" for c in sorted(self.floor)).encode("utf-8")
        return hashlib.blake2b(raw, digest_size=16).hexdigest()

    def signature(self) -> str:
        """Deterministic digest of floor, walls, rooms and placements."""
        payload = {
            "floor": [c.as_tuple() for c in sorted(self.floor)],
            "walls": [[c.x, c.y, v.value] for c, v in sorted(self.walls.items())],
            "rooms": [[r.rect.x, r.rect.y, r.rect.w, r.rect.h, r.tag.value] for r in self.rooms],
            "entities": [[p.kind.value, p.cell.x, p.cell.y] for p in self.placements],
        }
        raw = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
        return hashlib.blake2b(raw, digest_size=16).hexdigest()

    # ---- Export -----------------------------------------------------------
    def to_str_lines(self, path: Iterable[Cell] = ()) -> List[str]:
        """ASCII rendering; ``path`` cells are drawn as 'o' under any entity."""
        bounds = self.bounds()
        marks: Dict[Cell, str] = {c: "o" for c in path}
        for p in self.placements:
            marks[p.cell] = ENTITY_SYMBOLS[p.kind]
        lines: List[str] = []
        for y in range(bounds.y, bounds.bottom()):
            row = []
            for x in range(bounds.x, bounds.right()):
                c = Cell(x, y)
                if c in marks:
                    row.append(marks[c])
                elif c in self.floor:
                    row.append(".")
                elif c in self.walls:
                    row.append("#")
                else:
                    row.append(" ")
            lines.append("".join(row))
        return lines

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable summary for tooling and diffing across runs."""
        bounds = self.bounds()
        return {
            "seed": self.seed.hex() if isinstance(self.seed, bytes) else self.seed,
            "strategy": self.strategy,
            "area": [self.area.x, self.area.y, self.area.w, self.area.h],
            "bounds": [bounds.x, bounds.y, bounds.w, bounds.h],
            "rooms": [
                {
                    "index": r.index,
                    "rect": [r.rect.x, r.rect.y, r.rect.w, r.rect.h],
                    "center": [r.center.x, r.center.y],
                    "tag": r.tag.value,
                }
                for r in self.rooms
            ],
            "entities": [
                {"kind": p.kind.value, "x": p.cell.x, "y": p.cell.y, "room": p.room_index}
                for p in self.placements
            ],
            "floor_cells": len(self.floor),
            "wall_cells": len(self.walls),
            "map": self.to_str_lines(),
            "signature": self.signature(),
            "metrics": self.metrics,
        }
