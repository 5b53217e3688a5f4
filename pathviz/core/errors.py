# pathviz/core/errors.py
"""Exceptions raised by the pathfinding core.

"No path" is not an error: searches report it through
``SearchResult.status == "no_path"``.
"""


class PathfindingError(Exception):
    """Base class for everything the core raises on purpose."""


class InvalidGrid(PathfindingError, ValueError):
    """Grid data is empty, ragged, or holds unknown cell values."""


class OutOfBounds(PathfindingError, IndexError):
    """Start or goal lies outside the grid."""

    def __init__(self, label: str, cell, width: int, height: int):
        self.label = label
        self.cell = tuple(cell)
        self.width = width
        self.height = height
        super().__init__(
            f"{label} {self.cell} is outside the {height}x{width} grid (rows x cols)"
        )


class SearchDepthExceeded(PathfindingError, RecursionError):
    """The recursive variant would need more frames than it is allowed."""


class SearchCancelled(PathfindingError):
    """The host asked the search to stop at a yield point."""


class SearchTimeout(SearchCancelled):
    """The search deadline passed at a yield point."""


class ConfigError(PathfindingError, ValueError):
    """Bad width/height/ratio/speed input."""
