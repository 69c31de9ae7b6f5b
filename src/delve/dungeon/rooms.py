from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from .geometry import Cell, Rect


class RoomTag(Enum):
    NORMAL = "normal"
    START = "start"
    BOSS = "boss"


@dataclass(frozen=True)
class Room:
    """A generated room: its rectangle, generation index and lifecycle tag.

    Rooms are immutable; tags are assigned after generation by producing a
    tagged copy.
    """

    index: int
    rect: Rect
    tag: RoomTag = RoomTag.NORMAL

    @property
    def center(self) -> Cell:
        return self.rect.center()

    def with_tag(self, tag: RoomTag) -> "Room":
        return replace(self, tag=tag)
