# pathviz/core/astar.py
#!/usr/bin/env python3
"""
A* on a 4-connected occupancy grid, one expansion per step() for animation.

Two ways to drive the same search:
- "iterative": a loop of step() calls.
- "recursive": one call per outer iteration and one call per neighbor.
Both go through _select / _close / _relax, so they return the same path and
report the same cells to on_expand, in the same order.

Ordering rules:
- Heuristic is Manhattan distance, edge cost is 1.
- Neighbors are enumerated up, down, left, right.
- Open heap entries are (f, node index). Node indices grow with insertion, so
  ties on f go to the node that entered the open set first.
- An open node is re-parented only on a strictly shorter g.

on_expand fires once for every node moved to the closed set. The goal is not
expanded, so it is never reported; the one exception is start == goal, where
the start is reported once and the search stops.
"""

import heapq
import logging
import sys
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set, Tuple

from pathviz.core.errors import (
    OutOfBounds,
    SearchCancelled,
    SearchDepthExceeded,
    SearchTimeout,
)
from pathviz.core.types import Cell, Grid, SearchNode, SearchResult, StepResult

log = logging.getLogger(__name__)

DIRECTIONS: Tuple[Cell, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))  # up, down, left, right
VARIANTS = ("iterative", "recursive")

# Hard ceiling on interpreter frames the recursive variant may ask for.
MAX_RECURSION_DEPTH = 200_000
# Frames on top of the per-iteration chain: neighbor calls, helpers, on_expand.
_FRAME_MARGIN = 64

ExpandHook = Callable[[Cell], None]


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


# -------------------- recursion headroom --------------------

_limit_lock = threading.Lock()
_limit_users = 0
_saved_limit: Optional[int] = None


def _frame_depth() -> int:
    depth, frame = 0, sys._getframe()
    while frame is not None:
        depth += 1
        frame = frame.f_back
    return depth


@contextmanager
def recursion_headroom(needed: int, ceiling: int = MAX_RECURSION_DEPTH):
    """Make sure the interpreter allows `needed` frames while the block runs.

    The limit is process-wide, so it is only restored once the last
    concurrent user leaves.
    """
    global _limit_users, _saved_limit
    if needed > ceiling:
        raise SearchDepthExceeded(
            f"recursive search needs about {needed} frames, ceiling is {ceiling}"
        )
    with _limit_lock:
        if _limit_users == 0:
            _saved_limit = sys.getrecursionlimit()
        _limit_users += 1
        if needed > sys.getrecursionlimit():
            log.debug("raising recursion limit %d -> %d", sys.getrecursionlimit(), needed)
            sys.setrecursionlimit(needed)
    try:
        yield
    finally:
        with _limit_lock:
            _limit_users -= 1
            if _limit_users == 0 and _saved_limit is not None:
                sys.setrecursionlimit(_saved_limit)
                _saved_limit = None


# -------------------- search run --------------------

@dataclass
class AStarSearch:
    grid: Grid
    start: Cell
    goal: Cell
    on_expand: Optional[ExpandHook] = None
    should_stop: Optional[Callable[[], bool]] = None
    timeout: Optional[float] = None        # seconds, checked at the yield point
    name: str = "A*"

    # Internal state
    nodes: List[SearchNode] = field(default_factory=list)                # node pool
    open_pq: List[Tuple[int, int]] = field(default_factory=list)         # (f, node index)
    open_index: Dict[Cell, int] = field(default_factory=dict)            # position -> node index
    closed_set: Set[Cell] = field(default_factory=set)
    visited: List[Cell] = field(default_factory=list)                    # expansion order
    popped_count: int = 0
    done: bool = False
    no_path: bool = False
    path: Optional[List[Cell]] = None
    _deadline: Optional[float] = None

    def __post_init__(self):
        self.start = tuple(self.start)
        self.goal = tuple(self.goal)
        for label, cell in (("start", self.start), ("goal", self.goal)):
            if not self.grid.in_bounds(cell):
                raise OutOfBounds(label, cell, self.grid.width, self.grid.height)
        self.reset()

    # -------------------- lifecycle --------------------

    def reset(self) -> None:
        """Clear all state and seed with the start node."""
        self.nodes.clear()
        self.open_pq.clear()
        self.open_index.clear()
        self.closed_set.clear()
        self.visited.clear()
        self.popped_count = 0
        self.done = False
        self.no_path = False
        self.path = None
        self._deadline = None if self.timeout is None else time.monotonic() + self.timeout
        self._push(self.start, 0, None)

    # -------------------- shared operations --------------------

    def _push(self, cell: Cell, g: int, parent: Optional[int]) -> None:
        idx = len(self.nodes)
        node = SearchNode(position=cell, g=g, h=manhattan(cell, self.goal), parent=parent)
        self.nodes.append(node)
        self.open_index[cell] = idx
        heapq.heappush(self.open_pq, (node.f, idx))

    def _select(self) -> Optional[int]:
        """Pop the open node with the lowest (f, insertion index)."""
        while self.open_pq:
            f, idx = heapq.heappop(self.open_pq)
            node = self.nodes[idx]
            # Ignore stale pops: node was closed, or re-scored after this entry was pushed
            if self.open_index.get(node.position) != idx or node.f != f:
                continue
            return idx
        return None

    def _terminal(self, idx: Optional[int]) -> Optional[StepResult]:
        """Outcome of the iteration if selection ends the search, else None."""
        if idx is None:
            self.no_path = True
            return StepResult(status="no_path", metrics=self._metrics())
        node = self.nodes[idx]
        if node.position != self.goal:
            return None

        closed: List[Cell] = []
        if self.popped_count == 0:
            # start == goal: report the start as expanded, then stop
            del self.open_index[node.position]
            self._mark_closed(node.position)
            closed.append(node.position)
        self.done = True
        self.path = self._reconstruct_path(idx)
        return StepResult(
            status="done",
            closed=closed,
            current=node.position,
            path=self.path,
            metrics=self._metrics(path_len=len(self.path)),
        )

    def _mark_closed(self, cell: Cell) -> None:
        self.popped_count += 1
        self.closed_set.add(cell)
        self.visited.append(cell)
        if self.on_expand is not None:
            self.on_expand(cell)

    def _close(self, idx: int) -> List[Cell]:
        """Move a node to the closed set and return the neighbors to relax."""
        cell = self.nodes[idx].position
        del self.open_index[cell]
        self._mark_closed(cell)
        self._checkpoint()
        return self._neighbors4(cell)

    def _checkpoint(self) -> None:
        # Only safe place to stop: the node is closed, no neighbor touched yet.
        if self.should_stop is not None and self.should_stop():
            raise SearchCancelled(f"search stopped after {self.popped_count} expansions")
        if self._deadline is not None and time.monotonic() >= self._deadline:
            raise SearchTimeout(
                f"search exceeded {self.timeout}s after {self.popped_count} expansions"
            )

    def _neighbors4(self, c: Cell) -> List[Cell]:
        """In-bounds, walkable, not-yet-closed neighbors in up/down/left/right order."""
        r, col = c
        out: List[Cell] = []
        for dr, dc in DIRECTIONS:
            n = (r + dr, col + dc)
            if self.grid.in_bounds(n) and self.grid.is_walkable(n) and n not in self.closed_set:
                out.append(n)
        return out

    def _relax(self, current: int, cell: Cell) -> bool:
        """Offer `cell` a path through `current`. True if it was newly opened."""
        alt = self.nodes[current].g + 1
        existing = self.open_index.get(cell)
        if existing is None:
            self._push(cell, alt, current)
            return True
        node = self.nodes[existing]
        if alt < node.g:
            node.g = alt
            node.parent = current
            heapq.heappush(self.open_pq, (node.f, existing))
        return False

    def _reconstruct_path(self, end: int) -> List[Cell]:
        path: List[Cell] = []
        cur: Optional[int] = end
        while cur is not None:
            node = self.nodes[cur]
            path.append(node.position)
            cur = node.parent
        path.reverse()
        return path

    # -------------------- stepping --------------------

    def step(self) -> StepResult:
        """Run ONE outer iteration: select, stop on goal, else close and relax neighbors."""
        if self.done:
            return StepResult(status="done", path=self.path,
                              metrics=self._metrics(path_len=len(self.path)))
        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())

        idx = self._select()
        end = self._terminal(idx)
        if end is not None:
            return end

        u = self.nodes[idx].position
        opened_now = [v for v in self._close(idx) if self._relax(idx, v)]
        return StepResult(status="running", opened=opened_now, closed=[u], current=u,
                          metrics=self._metrics())

    def run_iterative(self) -> StepResult:
        res = self.step()
        while res.status == "running":
            res = self.step()
        return res

    # -------------------- recursive variant --------------------

    def required_depth(self) -> int:
        """Frames the recursive variant needs from the current call site.

        Every expanded cell except possibly the start is walkable, so the
        iteration chain is at most walkable_count() + 2 frames deep.
        """
        return _frame_depth() + self.grid.walkable_count() + 2 + _FRAME_MARGIN

    def run_recursive(self, max_depth: int = MAX_RECURSION_DEPTH) -> StepResult:
        with recursion_headroom(self.required_depth(), max_depth):
            return self._process()

    def _process(self) -> StepResult:
        idx = self._select()
        end = self._terminal(idx)
        if end is not None:
            return end
        self._check_neighbors(idx, self._close(idx), 0)
        return self._process()

    def _check_neighbors(self, current: int, neighbors: List[Cell], index: int) -> None:
        if index >= len(neighbors):
            return
        self._relax(current, neighbors[index])
        self._check_neighbors(current, neighbors, index + 1)

    # -------------------- metrics --------------------

    def _metrics(self, path_len: int = 0) -> dict:
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": len(self.open_index),
            "closed_count": len(self.closed_set),
            "path_len": path_len,
        }


# -------------------- entry points --------------------

def search(grid, start: Cell, goal: Cell, variant: str = "iterative",
           on_expand: Optional[ExpandHook] = None, *,
           should_stop: Optional[Callable[[], bool]] = None,
           timeout: Optional[float] = None,
           max_depth: int = MAX_RECURSION_DEPTH) -> SearchResult:
    """
    Find a shortest 4-connected path from start to goal.

    Args:
        grid: Grid, or nested rows of 0 (walkable) / 1 (blocked)
        start: (row, col) of the start cell
        goal: (row, col) of the goal cell
        variant: "iterative" or "recursive"
        on_expand: called with each cell as it is closed, in expansion order
        should_stop: polled after each expansion; True raises SearchCancelled
        timeout: seconds; checked after each expansion, raises SearchTimeout
        max_depth: frame ceiling for the recursive variant

    Returns:
        SearchResult with status "done" and the path, or "no_path"

    Raises:
        OutOfBounds: start or goal outside the grid (no cell is reported)
        SearchDepthExceeded: recursive variant would exceed max_depth
    """
    if variant not in VARIANTS:
        raise ValueError(f"unknown variant {variant!r}, expected one of {VARIANTS}")
    if not isinstance(grid, Grid):
        grid = Grid.from_rows(grid)

    run = AStarSearch(grid, start, goal, on_expand=on_expand,
                      should_stop=should_stop, timeout=timeout,
                      name=f"A* ({variant})")
    log.debug("%s search %s -> %s on %dx%d grid", variant, run.start, run.goal,
              grid.height, grid.width)
    if variant == "recursive":
        res = run.run_recursive(max_depth)
    else:
        res = run.run_iterative()

    metrics = dict(res.metrics, variant=variant)
    log.debug("%s search finished: %s after %d expansions", variant, res.status, run.popped_count)
    return SearchResult(status=res.status, path=res.path, visited=list(run.visited), metrics=metrics)


def find_path(grid, start: Cell, goal: Cell, variant: str = "iterative",
              on_expand: Optional[ExpandHook] = None) -> Optional[List[Cell]]:
    """Path from start to goal as a list of (row, col), or None if no path exists."""
    return search(grid, start, goal, variant, on_expand).path
