# pathviz/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Tuple, Optional, Dict, Any, Iterable, Sequence

from pathviz.core.errors import InvalidGrid

Cell = Tuple[int, int]  # (row, col)


class CellState(IntEnum):
    WALKABLE = 0
    BLOCKED = 1


@dataclass(frozen=True)
class Grid:
    width: int
    height: int
    cells: Tuple[Tuple[CellState, ...], ...]   # [row][col]

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise InvalidGrid(f"grid must be at least 1x1, got {self.height}x{self.width}")
        if len(self.cells) != self.height:
            raise InvalidGrid(f"expected {self.height} rows, got {len(self.cells)}")
        for r, row in enumerate(self.cells):
            if len(row) != self.width:
                raise InvalidGrid(f"row {r} has {len(row)} cells, expected {self.width}")

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[int]]) -> "Grid":
        """Build a grid from nested rows of 0 (walkable) / 1 (blocked)."""
        frozen = []
        for r, row in enumerate(rows):
            try:
                frozen.append(tuple(CellState(int(v)) for v in row))
            except (TypeError, ValueError) as ex:
                raise InvalidGrid(f"row {r}: {ex}") from ex
        if not frozen:
            raise InvalidGrid("grid has no rows")
        return cls(width=len(frozen[0]), height=len(frozen), cells=tuple(frozen))

    def in_bounds(self, c: Cell) -> bool:
        r, col = c
        return 0 <= r < self.height and 0 <= col < self.width

    def state(self, row: int, col: int) -> CellState:
        return self.cells[row][col]

    def is_walkable(self, c: Cell) -> bool:
        r, col = c
        return self.cells[r][col] == CellState.WALKABLE

    def walkable_count(self) -> int:
        return sum(row.count(CellState.WALKABLE) for row in self.cells)

    def to_rows(self) -> List[List[int]]:
        return [[int(v) for v in row] for row in self.cells]


@dataclass
class SearchNode:
    position: Cell
    g: int
    h: int
    parent: Optional[int] = None   # index into the run's node pool

    @property
    def f(self) -> int:
        return self.g + self.h


@dataclass
class StepResult:
    status: str                   # "running" | "done" | "no_path"
    opened: List[Cell] = field(default_factory=list)
    closed: List[Cell] = field(default_factory=list)
    current: Optional[Cell] = None
    path: Optional[List[Cell]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SearchResult:
    status: str                   # "done" | "no_path"
    path: Optional[List[Cell]] = None
    visited: List[Cell] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return self.status == "done"
