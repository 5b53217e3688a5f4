import importlib.util
from importlib.machinery import SourceFileLoader
from pathlib import Path

import pytest

pytest.importorskip("tkinter")

LAUNCHER = Path(__file__).resolve().parents[1] / "launcher.pyw"


def _load_launcher():
    loader = SourceFileLoader("pathviz_launcher", str(LAUNCHER))
    module_spec = importlib.util.spec_from_loader(loader.name, loader)
    mod = importlib.util.module_from_spec(module_spec)
    loader.exec_module(mod)
    return mod


class _Entry:
    def __init__(self, text):
        self.text = text

    def get(self):
        return self.text


class _Var:
    value = ""

    def set(self, value):
        self.value = value


class _Root:
    destroyed = False

    def destroy(self):
        self.destroyed = True


def test_bad_input_stays_in_form():
    launcher = _load_launcher()
    root, err = _Root(), _Var()
    launcher.start_viewer_and_close(root, [_Entry("60"), _Entry("10"), _Entry("50")], err)
    assert "width must be between 1 and 50" in err.value
    assert not root.destroyed


def test_good_input_starts_viewer(monkeypatch):
    launcher = _load_launcher()
    calls = []
    pytest.importorskip("pygame")
    from pathviz.app import viewer
    monkeypatch.setattr(viewer, "main", calls.append)
    root, err = _Root(), _Var()
    launcher.start_viewer_and_close(root, [_Entry("12"), _Entry(" 8 "), _Entry("65")], err)
    assert root.destroyed
    assert err.value == ""
    assert calls == [["--width=12", "--height=8", "--ratio=65"]]
