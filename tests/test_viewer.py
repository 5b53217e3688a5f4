import pytest

pytest.importorskip("pygame")

from pathviz.app import viewer
from pathviz.app.selection import Selection
from pathviz.core.types import Grid, SearchResult


def _bare_viewer(rows, start, goal):
    # reveal/toast state only; no window is opened
    v = viewer.Viewer.__new__(viewer.Viewer)
    v.grid = Grid.from_rows(rows)
    v.selection = Selection(start=start, goal=goal)
    v.visited = set()
    v.path = []
    v._pending = []
    v._pending_path = []
    v._pending_toast = None
    v._last_metrics = {}
    v._last_reveal_t = 0.0
    v.speed = 60
    v.state = "Idle"
    v.toast = None
    return v


def _drain(v):
    v.speed = viewer.MAX_SPEED
    v._last_reveal_t = 0.0
    v._tick_reveal()


def test_result_toast_texts():
    ok = viewer.result_toast(SearchResult("done", path=[(0, 0)]), "Iterative", 1.5)
    assert (ok.title, ok.ok) == ("Path found!", True)
    assert ok.description == "Running time: 1.50 ms (Iterative)"

    fail = viewer.result_toast(SearchResult("no_path"), "Recursive", 1.5)
    assert (fail.title, fail.ok) == ("No valid path found!", False)
    assert fail.description == ""


def test_toast_waits_for_reveal_to_finish():
    v = _bare_viewer([[0, 0, 0, 0, 0]], (0, 0), (0, 4))
    v._run_search("iterative")
    assert v.busy
    assert v.toast is None
    assert v.path == []

    _drain(v)
    assert not v.busy
    assert v.visited == {(0, 0), (0, 1), (0, 2), (0, 3)}
    assert v.path == [(0, 0), (0, 1), (0, 2), (0, 3), (0, 4)]
    assert v.state == "Done"
    assert v.toast is not None and v.toast.title == "Path found!"


def test_no_path_toast_after_reveal():
    v = _bare_viewer([[0, 1, 0]], (0, 0), (0, 2))
    v._run_search("recursive")
    assert v.toast is None
    _drain(v)
    assert v.state == "No path"
    assert v.toast.title == "No valid path found!"
    assert v.toast.description == ""


def test_clear_drops_pending_toast():
    v = _bare_viewer([[0, 0, 0, 0, 0]], (0, 0), (0, 4))
    v._run_search("iterative")
    v._clear_overlays()
    _drain(v)
    assert v.toast is None
    assert not v.busy
