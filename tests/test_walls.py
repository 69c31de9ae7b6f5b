import pytest

from delve.config import DungeonConfig
from delve.dungeon.generator import generate
from delve.dungeon.geometry import Cell, Rect
from delve.dungeon.walls import E, N, NE, NW, S, SE, SW, W, WallVariant, classify, derive_walls, neighbor_mask


def test_single_floor_cell_gets_all_eight_variants():
    walls = derive_walls({Cell(0, 0)})
    assert walls == {
        Cell(0, -1): WallVariant.TOP,
        Cell(0, 1): WallVariant.BOTTOM,
        Cell(-1, 0): WallVariant.LEFT,
        Cell(1, 0): WallVariant.RIGHT,
        Cell(-1, -1): WallVariant.CORNER_TOP_LEFT,
        Cell(1, -1): WallVariant.CORNER_TOP_RIGHT,
        Cell(-1, 1): WallVariant.CORNER_BOTTOM_LEFT,
        Cell(1, 1): WallVariant.CORNER_BOTTOM_RIGHT,
    }


def test_neighbor_mask_bits():
    floor = {Cell(0, -1), Cell(1, 1)}
    assert neighbor_mask(Cell(0, 0), floor) == N | SE


@pytest.mark.parametrize(
    "mask, variant",
    [
        (S | SE | SW, WallVariant.TOP),
        (N | NE, WallVariant.BOTTOM),
        (S | E, WallVariant.INNER_TOP_LEFT),
        (S | W, WallVariant.INNER_TOP_RIGHT),
        (N | E | NE, WallVariant.INNER_BOTTOM_LEFT),
        (N | W, WallVariant.INNER_BOTTOM_RIGHT),
        (N | S, WallVariant.FULL),
        (N | E | S, WallVariant.FULL),
        (SE | SW, WallVariant.FULL),
        (NW, WallVariant.CORNER_BOTTOM_RIGHT),
        (0, WallVariant.FULL),
    ],
)
def test_classify(mask, variant):
    assert classify(mask) is variant


def test_room_outline():
    floor = set(Rect(1, 1, 3, 3).cells())
    walls = derive_walls(floor)
    assert set(walls) == set(Rect(0, 0, 5, 5).cells()) - floor
    assert walls[Cell(2, 0)] is WallVariant.TOP
    assert walls[Cell(0, 0)] is WallVariant.CORNER_TOP_LEFT
    assert walls[Cell(4, 2)] is WallVariant.RIGHT


@pytest.mark.parametrize("seed", [1, 2, 3, "walls"])
def test_generated_walls_surround_floor_exactly(seed):
    layout = generate(DungeonConfig(width=40, height=30, seed=seed))
    floor = layout.floor

    assert not (set(layout.walls) & floor)
    for wall in layout.walls:
        assert any(n in floor for n in wall.neighbors8())
    for cell in floor:
        for n in cell.neighbors8():
            assert n in floor or n in layout.walls
