from pathviz.app.selection import Selection


def test_first_click_sets_start_then_goal():
    sel = Selection()
    sel.click((1, 2))
    assert sel.start == (1, 2) and sel.goal is None
    assert not sel.ready
    sel.click((3, 4))
    assert sel.goal == (3, 4)
    assert sel.ready


def test_second_click_on_start_clears_it():
    sel = Selection()
    sel.click((0, 0))
    sel.click((0, 0))
    assert sel.start is None and sel.goal is None


def test_clicking_start_clears_both():
    sel = Selection(start=(0, 0), goal=(2, 2))
    sel.click((0, 0))
    assert sel.start is None and sel.goal is None


def test_clicking_goal_clears_goal():
    sel = Selection(start=(0, 0), goal=(2, 2))
    sel.click((2, 2))
    assert sel.start == (0, 0) and sel.goal is None


def test_other_cells_ignored_when_both_set():
    sel = Selection(start=(0, 0), goal=(2, 2))
    sel.click((1, 1))
    assert (sel.start, sel.goal) == ((0, 0), (2, 2))


def test_accepts_lists():
    sel = Selection()
    sel.click([4, 5])
    assert sel.start == (4, 5)


def test_clear():
    sel = Selection(start=(0, 0), goal=(1, 1))
    sel.clear()
    assert not sel.ready
