from .geometry import Cell, Rect
from .rooms import Room, RoomTag
from .partition import partition
from .carving import carve_room, carve_corridor
from .corridors import connect, nearest_neighbor_chain
from .walls import WallVariant, derive_walls
from .placement import EntityKind, EntityPlacer, Placement, PlacementResult, place
from .layout import DungeonLayout
from .generator import generate

__all__ = [
    "Cell",
    "Rect",
    "Room",
    "RoomTag",
    "partition",
    "carve_room",
    "carve_corridor",
    "connect",
    "nearest_neighbor_chain",
    "WallVariant",
    "derive_walls",
    "EntityKind",
    "EntityPlacer",
    "Placement",
    "PlacementResult",
    "place",
    "DungeonLayout",
    "generate",
]
