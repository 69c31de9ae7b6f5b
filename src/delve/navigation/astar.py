"""A* search over a GridMap.

Step costs are integers: 10 for an orthogonal move and 14 for a diagonal one
(10 * sqrt(2), rounded). With those costs the octile distance
``14 * min(dx, dy) + 10 * |dx - dy|`` is admissible and consistent, so the
first time the goal is popped from the open set its cost is optimal.

All per-search bookkeeping (g cost, parents, open heap, closed set) lives in a
``_SearchFrame`` created for each call. Nodes and grids are never written to,
which makes concurrent searches on the same grid safe.
"""
from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from ..dungeon.geometry import Cell
from .grid import GridMap, Node

logger = logging.getLogger(__name__)

ORTHOGONAL_COST = 10
DIAGONAL_COST = 14

GridKey = Tuple[int, int]


class SearchState(Enum):
    INITIALIZED = "initialized"
    SEARCHING = "searching"
    FOUND = "found"
    EXHAUSTED = "exhausted"


def octile_distance(a: Node, b: Node) -> int:
    dx = abs(a.grid_x - b.grid_x)
    dy = abs(a.grid_y - b.grid_y)
    return DIAGONAL_COST * min(dx, dy) + ORTHOGONAL_COST * abs(dx - dy)


def manhattan_distance(a: Node, b: Node) -> int:
    return ORTHOGONAL_COST * (abs(a.grid_x - b.grid_x) + abs(a.grid_y - b.grid_y))


def step_cost(a: Node, b: Node) -> int:
    if a.grid_x != b.grid_x and a.grid_y != b.grid_y:
        return DIAGONAL_COST
    return ORTHOGONAL_COST


@dataclass(frozen=True)
class Path:
    """Nodes from the start (excluded) to the goal (included).

    A start equal to the goal gives an empty path with zero cost.
    """

    nodes: Tuple[Node, ...]
    cost: int

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self):
        return iter(self.nodes)

    @property
    def cells(self) -> List[Cell]:
        return [n.cell for n in self.nodes]

    @property
    def waypoints(self) -> List[Tuple[float, float]]:
        return [n.world_position for n in self.nodes]

    def simplified(self, start: Optional[Node] = None) -> List[Tuple[float, float]]:
        """World positions where the direction of travel changes, plus the goal."""
        if not self.nodes:
            return []
        points: List[Tuple[float, float]] = []
        prev = start if start is not None else self.nodes[0]
        old_dir: Optional[Tuple[int, int]] = None
        sequence = self.nodes if start is not None else self.nodes[1:]
        for node in sequence:
            direction = (node.grid_x - prev.grid_x, node.grid_y - prev.grid_y)
            if old_dir is not None and direction != old_dir:
                points.append(prev.world_position)
            old_dir = direction
            prev = node
        points.append(self.nodes[-1].world_position)
        return points


@dataclass(frozen=True)
class SearchResult:
    state: SearchState
    path: Optional[Path]
    expanded: int = 0

    @property
    def found(self) -> bool:
        return self.state is SearchState.FOUND


@dataclass
class _SearchFrame:
    """Transient A* state owned by exactly one search."""

    open_heap: List[Tuple[int, int, int, GridKey]] = field(default_factory=list)
    g_cost: Dict[GridKey, int] = field(default_factory=dict)
    parent: Dict[GridKey, Optional[Node]] = field(default_factory=dict)
    closed: Set[GridKey] = field(default_factory=set)
    seq: int = 0
    state: SearchState = SearchState.INITIALIZED

    def push(self, node: Node, g: int, h: int) -> None:
        self.seq += 1
        heapq.heappush(self.open_heap, (g + h, h, self.seq, (node.grid_x, node.grid_y)))


class PathfindingEngine:
    """Shortest paths over one GridMap.

    Args:
        grid: the walkability grid to search.
        cut_corners: when False a diagonal step is only allowed if both
            orthogonal cells it passes between are walkable.
        max_expansions: optional cap on popped nodes; hitting it ends the
            search as EXHAUSTED.
    """

    def __init__(self, grid: GridMap, *, cut_corners: bool = True, max_expansions: Optional[int] = None) -> None:
        self.grid = grid
        self.cut_corners = cut_corners
        self.max_expansions = max_expansions
        self._heuristic = octile_distance if grid.diagonal else manhattan_distance

    def find_path(self, start: Node, goal: Node) -> Optional[Path]:
        """Return the cheapest path from ``start`` to ``goal`` or None when there is none."""
        return self.search(start, goal).path

    def find_path_cells(self, start: Cell, goal: Cell) -> Optional[Path]:
        a = self.grid.node_at(start)
        b = self.grid.node_at(goal)
        if a is None or b is None:
            return None
        return self.find_path(a, b)

    def find_path_world(self, start: Tuple[float, float], goal: Tuple[float, float]) -> Optional[Path]:
        return self.find_path(self.grid.node_from_world(*start), self.grid.node_from_world(*goal))

    def search(self, start: Node, goal: Node) -> SearchResult:
        if not self.grid.owns(start) or not self.grid.owns(goal):
            raise ValueError("start and goal must be nodes of this grid")
        frame = _SearchFrame()
        if not start.walkable or not goal.walkable:
            frame.state = SearchState.EXHAUSTED
            logger.debug("No path: unwalkable endpoint %s -> %s", start.cell, goal.cell)
            return SearchResult(frame.state, None, 0)

        frame.state = SearchState.SEARCHING
        start_key = (start.grid_x, start.grid_y)
        frame.g_cost[start_key] = 0
        frame.parent[start_key] = None
        frame.push(start, 0, self._heuristic(start, goal))

        expanded = 0
        while frame.open_heap:
            _f, _h, _seq, key = heapq.heappop(frame.open_heap)
            if key in frame.closed:
                continue
            current = self.grid.node(*key)
            if current == goal:
                frame.state = SearchState.FOUND
                path = self._retrace(frame, start, goal)
                logger.debug("Path found %s -> %s: %d steps, cost %d", start.cell, goal.cell, len(path), path.cost)
                return SearchResult(frame.state, path, expanded)

            frame.closed.add(key)
            expanded += 1
            if self.max_expansions is not None and expanded >= self.max_expansions:
                logger.debug("Search capped after %d expansions", expanded)
                break

            g_current = frame.g_cost[key]
            for neighbor in self.grid.neighbors(current):
                nkey = (neighbor.grid_x, neighbor.grid_y)
                if not neighbor.walkable or nkey in frame.closed:
                    continue
                if not self.cut_corners and not self._diagonal_clear(current, neighbor):
                    continue
                tentative = g_current + step_cost(current, neighbor)
                known = frame.g_cost.get(nkey)
                if known is None or tentative < known:
                    frame.g_cost[nkey] = tentative
                    frame.parent[nkey] = current
                    frame.push(neighbor, tentative, self._heuristic(neighbor, goal))

        frame.state = SearchState.EXHAUSTED
        logger.debug("No path %s -> %s after %d expansions", start.cell, goal.cell, expanded)
        return SearchResult(frame.state, None, expanded)

    def _diagonal_clear(self, a: Node, b: Node) -> bool:
        if a.grid_x == b.grid_x or a.grid_y == b.grid_y:
            return True
        return self.grid.node(b.grid_x, a.grid_y).walkable and self.grid.node(a.grid_x, b.grid_y).walkable

    @staticmethod
    def _retrace(frame: _SearchFrame, start: Node, goal: Node) -> Path:
        nodes: List[Node] = []
        current: Optional[Node] = goal
        while current is not None and current != start:
            nodes.append(current)
            current = frame.parent[(current.grid_x, current.grid_y)]
        nodes.reverse()
        return Path(nodes=tuple(nodes), cost=frame.g_cost[(goal.grid_x, goal.grid_y)])
