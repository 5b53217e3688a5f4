import dataclasses

import pytest

from pathviz.core.errors import InvalidGrid
from pathviz.core.types import CellState, Grid, SearchNode, SearchResult


def test_from_rows_shape_and_lookup():
    grid = Grid.from_rows([[0, 1, 0], [0, 0, 1]])
    assert (grid.width, grid.height) == (3, 2)
    assert grid.state(0, 1) == CellState.BLOCKED
    assert grid.state(1, 0) == CellState.WALKABLE
    assert grid.is_walkable((1, 1))
    assert not grid.is_walkable((1, 2))
    assert grid.walkable_count() == 4
    assert grid.to_rows() == [[0, 1, 0], [0, 0, 1]]


def test_in_bounds_uses_row_col():
    grid = Grid.from_rows([[0, 0, 0]])
    assert grid.in_bounds((0, 2))
    assert not grid.in_bounds((2, 0))
    assert not grid.in_bounds((-1, 0))
    assert not grid.in_bounds((0, 3))


@pytest.mark.parametrize("rows", [
    [],
    [[]],
    [[0, 0], [0]],
    [[0, 2]],
    [[0, "x"]],
    [[0, None]],
])
def test_rejects_bad_rows(rows):
    with pytest.raises(InvalidGrid):
        Grid.from_rows(rows)


def test_direct_construction_validates():
    with pytest.raises(InvalidGrid):
        Grid(width=2, height=1, cells=((CellState.WALKABLE,),))
    with pytest.raises(InvalidGrid):
        Grid(width=0, height=0, cells=())


def test_invalid_grid_is_value_error():
    with pytest.raises(ValueError):
        Grid.from_rows([[0], [0, 0]])


def test_grid_is_immutable():
    grid = Grid.from_rows([[0]])
    with pytest.raises(dataclasses.FrozenInstanceError):
        grid.width = 5
    with pytest.raises(TypeError):
        grid.cells[0][0] = CellState.BLOCKED


def test_search_node_f():
    node = SearchNode(position=(1, 2), g=3, h=4)
    assert node.f == 7
    node.g = 1
    assert node.f == 5
    assert node.parent is None


def test_search_node_fields():
    # tie-breaks use the node's pool index, so the node carries no counter of its own
    names = [f.name for f in dataclasses.fields(SearchNode)]
    assert names == ["position", "g", "h", "parent"]


def test_search_result_found():
    assert SearchResult(status="done", path=[(0, 0)]).found
    assert not SearchResult(status="no_path").found
