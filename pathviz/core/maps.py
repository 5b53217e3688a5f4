# pathviz/core/maps.py
"""Grid sources: seeded random generation and JSON map files."""

import json
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from pathviz.core.errors import InvalidGrid
from pathviz.core.types import Cell, CellState, Grid

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MapFile:
    grid: Grid
    start: Optional[Cell] = None
    goal: Optional[Cell] = None


def random_grid(width: int, height: int, ratio: int,
                rng: Optional[random.Random] = None) -> Grid:
    """Each cell is walkable with probability ratio/100."""
    rng = rng or random.Random()
    threshold = ratio / 100
    rows = [
        [CellState.WALKABLE if rng.random() < threshold else CellState.BLOCKED for _ in range(width)]
        for _ in range(height)
    ]
    return Grid.from_rows(rows)


def _cell(data, key: str) -> Optional[Cell]:
    val = data.get(key)
    if val is None:
        return None
    if not isinstance(val, (list, tuple)) or len(val) != 2:
        raise InvalidGrid(f"{key} must be [row, col], got {val!r}")
    try:
        return (int(val[0]), int(val[1]))
    except (TypeError, ValueError) as ex:
        raise InvalidGrid(f"{key} must be [row, col] integers, got {val!r}") from ex


def load_map(path: Union[str, Path]) -> MapFile:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as ex:
        raise InvalidGrid(f"{path}: not valid JSON ({ex})") from ex
    try:
        cells = data["cells"]
    except (KeyError, TypeError):
        raise InvalidGrid(f"{path}: missing 'cells'") from None
    if not isinstance(cells, list):
        raise InvalidGrid(f"{path}: 'cells' must be a list of rows")

    grid = Grid.from_rows(cells)
    try:
        width = int(data.get("width", grid.width))
        height = int(data.get("height", grid.height))
    except (TypeError, ValueError) as ex:
        raise InvalidGrid(f"{path}: width/height must be integers ({ex})") from ex
    if (width, height) != (grid.width, grid.height):
        raise InvalidGrid(
            f"{path}: header says {height}x{width}, cells are {grid.height}x{grid.width}"
        )
    loaded = MapFile(grid=grid, start=_cell(data, "start"), goal=_cell(data, "goal"))
    log.debug("loaded map %s (%dx%d)", path, grid.height, grid.width)
    return loaded
