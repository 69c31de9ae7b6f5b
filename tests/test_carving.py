import pytest

from delve.dungeon.carving import carve_corridor, carve_room, corridor_path, widen
from delve.dungeon.geometry import Cell, Rect


def test_carve_room_insets_by_margin():
    floor = carve_room(Rect(0, 0, 6, 5), 1)
    assert floor == set(Rect(1, 1, 4, 3).cells())


def test_carve_room_with_margin_larger_than_room_is_empty():
    assert carve_room(Rect(0, 0, 4, 4), 2) == set()


def test_carve_room_rejects_negative_margin():
    with pytest.raises(ValueError):
        carve_room(Rect(0, 0, 4, 4), -1)


def test_corridor_path_goes_vertical_then_horizontal():
    path = corridor_path(Cell(0, 0), Cell(3, 2))
    assert path == [Cell(0, 0), Cell(0, 1), Cell(0, 2), Cell(1, 2), Cell(2, 2), Cell(3, 2)]

    back = corridor_path(Cell(3, 2), Cell(0, 0))
    assert back[:3] == [Cell(3, 2), Cell(3, 1), Cell(3, 0)]
    assert back[-1] == Cell(0, 0)


def test_corridor_path_to_self_is_single_cell():
    assert corridor_path(Cell(4, 4), Cell(4, 4)) == [Cell(4, 4)]


def test_widen_brush_sizes():
    assert widen([Cell(0, 0)], 1) == {Cell(0, 0)}
    assert widen([Cell(0, 0)], 2) == {Cell(0, 0), Cell(1, 0), Cell(0, 1), Cell(1, 1)}
    assert widen([Cell(0, 0)], 3) == set(Rect(-1, -1, 3, 3).cells())
    with pytest.raises(ValueError):
        widen([Cell(0, 0)], 0)


def test_carved_corridor_connects_its_endpoints(reachable):
    start, end = Cell(2, 9), Cell(11, 1)
    cells = carve_corridor(start, end)
    assert len(cells) == abs(end.x - start.x) + abs(end.y - start.y) + 1
    assert end in reachable(start, cells)

    wide = carve_corridor(start, end, width=2)
    assert cells <= wide
    assert wide == reachable(start, wide)
