# pathviz/app/selection.py
from dataclasses import dataclass
from typing import Optional

from pathviz.core.types import Cell


@dataclass
class Selection:
    """Start/goal picked by clicking cells.

    - first click sets the start
    - next click on another cell sets the goal
    - clicking the start clears both
    - clicking the goal clears the goal
    """
    start: Optional[Cell] = None
    goal: Optional[Cell] = None

    @property
    def ready(self) -> bool:
        return self.start is not None and self.goal is not None

    def click(self, cell: Cell) -> None:
        cell = tuple(cell)
        if self.start is None:
            self.start = cell
        elif self.goal is None and cell != self.start:
            self.goal = cell
        elif cell == self.start:
            self.start = None
            self.goal = None
        elif cell == self.goal:
            self.goal = None

    def clear(self) -> None:
        self.start = None
        self.goal = None
