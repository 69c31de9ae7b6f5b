import pytest

from delve.dungeon.geometry import Cell, Rect


def test_rect_rejects_empty_sizes():
    with pytest.raises(ValueError):
        Rect(0, 0, 0, 3)
    with pytest.raises(ValueError):
        Rect(0, 0, 3, -1)


def test_rect_center_rounds_down():
    assert Rect(0, 0, 5, 4).center() == Cell(2, 2)
    assert Rect(10, 3, 6, 7).center() == Cell(13, 6)


def test_rect_inset_and_edges():
    r = Rect(2, 3, 6, 4)
    assert r.right() == 8
    assert r.bottom() == 7
    assert r.area == 24
    assert r.inset(1) == Rect(3, 4, 4, 2)
    assert r.inset(1, 0) == Rect(3, 3, 4, 4)
    assert r.inset(2) is None


def test_rect_cells_row_major():
    assert list(Rect(0, 0, 2, 2).cells()) == [Cell(0, 0), Cell(1, 0), Cell(0, 1), Cell(1, 1)]


def test_rect_contains_is_exclusive_on_far_edges():
    r = Rect(0, 0, 3, 3)
    assert r.contains(Cell(0, 0))
    assert r.contains(Cell(2, 2))
    assert not r.contains(Cell(3, 2))
    assert not r.contains(Cell(-1, 0))


def test_rect_intersects():
    a = Rect(0, 0, 4, 4)
    assert a.intersects(Rect(3, 3, 2, 2))
    assert not a.intersects(Rect(4, 0, 2, 2))


def test_bounding_rect():
    cells = [Cell(3, 1), Cell(-1, 4), Cell(2, 2)]
    assert Rect.bounding(cells) == Rect(-1, 1, 5, 4)
    with pytest.raises(ValueError):
        Rect.bounding([])


def test_cell_neighbors_order_and_distance():
    c = Cell(5, 5)
    assert list(c.neighbors4()) == [Cell(5, 4), Cell(6, 5), Cell(5, 6), Cell(4, 5)]
    eight = list(c.neighbors8())
    assert len(eight) == 8
    assert eight[0] == Cell(5, 4)
    assert eight[1] == Cell(6, 4)
    assert c.distance_sq(Cell(8, 9)) == 25
