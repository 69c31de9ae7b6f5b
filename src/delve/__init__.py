"""
delve: procedural dungeon layouts and grid pathfinding.

Headless core for a top-down dungeon crawler:
- Room-first (BSP) and corridor-first layout generation
- Wall derivation with auto-tiling variants
- Seeded entity placement (player, boss, pickups, props)
- Walkability grids and A* pathfinding for agents

Rendering, physics and game state live elsewhere and consume these results.
"""
from importlib.metadata import PackageNotFoundError, version

from .config import DungeonConfig, GenerationStrategy
from .errors import DelveError, InvalidDungeonConfig
from .events import Event, EventBus, EventType
from .dungeon import Cell, DungeonLayout, EntityKind, Rect, WallVariant, generate
from .navigation import GridMap, Path, PathfindingEngine

try:
    __version__ = version("delve")
except PackageNotFoundError:  # pragma: no cover - during tests without packaging
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "DungeonConfig",
    "GenerationStrategy",
    "DelveError",
    "InvalidDungeonConfig",
    "Event",
    "EventBus",
    "EventType",
    "Cell",
    "Rect",
    "DungeonLayout",
    "EntityKind",
    "WallVariant",
    "generate",
    "GridMap",
    "Path",
    "PathfindingEngine",
]
