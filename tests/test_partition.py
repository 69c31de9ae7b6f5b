import itertools
import random

import pytest

from delve.dungeon.geometry import Cell, Rect
from delve.dungeon.partition import partition


@pytest.mark.parametrize("seed", range(20))
def test_leaves_tile_area_disjointly(seed):
    area = Rect(0, 0, 60, 40)
    leaves = partition(area, 6, 6, random.Random(seed))

    assert len(leaves) > 1
    assert sum(leaf.area for leaf in leaves) == area.area
    for leaf in leaves:
        assert leaf.w >= 6 and leaf.h >= 6
        assert area.x <= leaf.x and leaf.right() <= area.right()
        assert area.y <= leaf.y and leaf.bottom() <= area.bottom()
    for a, b in itertools.combinations(leaves, 2):
        assert not a.intersects(b), f"{a} overlaps {b}"


def test_partition_is_deterministic_for_same_rng_seed():
    area = Rect(5, 5, 48, 32)
    a = partition(area, 5, 5, random.Random(1234))
    b = partition(area, 5, 5, random.Random(1234))
    assert a == b


def test_first_leaf_holds_area_origin():
    area = Rect(3, 7, 40, 30)
    leaves = partition(area, 6, 6, random.Random(9))
    assert leaves[0].contains(Cell(3, 7))


def test_small_area_is_a_single_leaf():
    area = Rect(0, 0, 10, 10)
    assert partition(area, 6, 6, random.Random(0)) == [area]


def test_narrow_area_is_only_cut_across_its_height():
    area = Rect(0, 0, 5, 40)
    leaves = partition(area, 4, 4, random.Random(3))
    assert len(leaves) >= 2
    assert all(leaf.w == 5 and leaf.x == 0 for leaf in leaves)
    # depth-first order walks the column top to bottom
    assert [leaf.y for leaf in leaves] == sorted(leaf.y for leaf in leaves)
