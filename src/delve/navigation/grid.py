from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, AbstractSet, Iterator, List, Optional, Tuple

from ..dungeon.geometry import CARDINALS, EIGHT_WAY, Cell, Rect

if TYPE_CHECKING:  # pragma: no cover
    from ..dungeon.layout import DungeonLayout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Node:
    """One grid square: where it is, whether agents may stand on it.

    Nodes carry no search state, so a single grid can serve many searches at
    once.
    """

    cell: Cell
    grid_x: int
    grid_y: int
    walkable: bool
    world_position: Tuple[float, float]


class GridMap:
    """Read-only walkability grid over a rectangle of cells.

    Node ``(grid_x, grid_y)`` covers cell ``(bounds.x + grid_x, bounds.y + grid_y)``.
    A grid is built once per generated layout and replaced, never patched, when
    the dungeon is regenerated.
    """

    def __init__(
        self,
        bounds: Rect,
        nodes: Tuple[Tuple[Node, ...], ...],
        *,
        diagonal: bool = True,
        cell_size: float = 1.0,
    ) -> None:
        self.bounds = bounds
        self._nodes = nodes  # _nodes[grid_y][grid_x]
        self.diagonal = diagonal
        self.cell_size = cell_size

    @classmethod
    def build(
        cls,
        floor: AbstractSet[Cell],
        bounds: Rect,
        *,
        diagonal: bool = True,
        cell_size: float = 1.0,
    ) -> "GridMap":
        if cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        half = cell_size / 2.0
        rows = []
        for gy in range(bounds.h):
            row = []
            for gx in range(bounds.w):
                cell = Cell(bounds.x + gx, bounds.y + gy)
                row.append(
                    Node(
                        cell=cell,
                        grid_x=gx,
                        grid_y=gy,
                        walkable=cell in floor,
                        world_position=(cell.x * cell_size + half, cell.y * cell_size + half),
                    )
                )
            rows.append(tuple(row))
        grid = cls(bounds, tuple(rows), diagonal=diagonal, cell_size=cell_size)
        logger.debug("Built %dx%d grid with %d walkable nodes", bounds.w, bounds.h, grid.walkable_count())
        return grid

    @classmethod
    def from_layout(cls, layout: "DungeonLayout", *, diagonal: bool = True, cell_size: float = 1.0) -> "GridMap":
        return cls.build(layout.floor, layout.bounds(), diagonal=diagonal, cell_size=cell_size)

    # ---- Access -----------------------------------------------------------
    @property
    def width(self) -> int:
        return self.bounds.w

    @property
    def height(self) -> int:
        return self.bounds.h

    def in_bounds(self, gx: int, gy: int) -> bool:
        return 0 <= gx < self.bounds.w and 0 <= gy < self.bounds.h

    def node(self, gx: int, gy: int) -> Node:
        if not self.in_bounds(gx, gy):
            raise IndexError(f"Node out of bounds: ({gx},{gy}) not in [0,{self.width})x[0,{self.height})")
        return self._nodes[gy][gx]

    def node_at(self, cell: Cell) -> Optional[Node]:
        gx = cell.x - self.bounds.x
        gy = cell.y - self.bounds.y
        if not self.in_bounds(gx, gy):
            return None
        return self._nodes[gy][gx]

    def node_from_world(self, wx: float, wy: float) -> Node:
        """Node under a world-space point, clamped to the grid edge."""
        cx = math.floor(wx / self.cell_size)
        cy = math.floor(wy / self.cell_size)
        gx = min(max(cx - self.bounds.x, 0), self.width - 1)
        gy = min(max(cy - self.bounds.y, 0), self.height - 1)
        return self._nodes[gy][gx]

    def owns(self, node: Node) -> bool:
        return self.in_bounds(node.grid_x, node.grid_y) and self._nodes[node.grid_y][node.grid_x] == node

    def neighbors(self, node: Node) -> List[Node]:
        """In-bounds neighbours in fixed order; diagonals only when enabled."""
        offsets = EIGHT_WAY if self.diagonal else CARDINALS
        out: List[Node] = []
        for dx, dy in offsets:
            gx = node.grid_x + dx
            gy = node.grid_y + dy
            if self.in_bounds(gx, gy):
                out.append(self._nodes[gy][gx])
        return out

    def walkable_count(self) -> int:
        return sum(1 for n in self if n.walkable)

    def __iter__(self) -> Iterator[Node]:
        for row in self._nodes:
            yield from row

    def __len__(self) -> int:
        return self.bounds.area
