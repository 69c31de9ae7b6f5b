from .grid import GridMap, Node
from .astar import (
    DIAGONAL_COST,
    ORTHOGONAL_COST,
    Path,
    PathfindingEngine,
    SearchResult,
    SearchState,
    octile_distance,
)

__all__ = [
    "GridMap",
    "Node",
    "Path",
    "PathfindingEngine",
    "SearchResult",
    "SearchState",
    "octile_distance",
    "ORTHOGONAL_COST",
    "DIAGONAL_COST",
]
