import logging
from pathlib import Path

import pytest

from pathviz.core.config import (
    DEFAULT_CONFIG,
    configure_logging,
    resolve_config,
    validate_dimensions,
)
from pathviz.core.errors import ConfigError


def test_defaults():
    cfg = resolve_config([], {})
    assert cfg == DEFAULT_CONFIG
    assert (cfg.width, cfg.height, cfg.ratio) == (40, 20, 70)


def test_env_then_cli():
    env = {"PATHVIZ_WIDTH": "10", "PATHVIZ_HEIGHT": "12", "PATHVIZ_SEED": "5"}
    cfg = resolve_config(["--width=30", "--map=maps/ring.json"], env)
    assert cfg.width == 30
    assert cfg.height == 12
    assert cfg.seed == 5
    assert cfg.map_path == Path("maps/ring.json")


def test_ignores_unrelated_args():
    cfg = resolve_config(["-v", "--verbose", "--colour=blue", "positional"], {})
    assert cfg == DEFAULT_CONFIG


def test_variant_is_chosen_per_run_not_configured():
    # the viewer runs a variant per key press; there is no default to configure
    cfg = resolve_config(["--variant=recursive"], {"PATHVIZ_VARIANT": "recursive"})
    assert cfg == DEFAULT_CONFIG
    assert not hasattr(cfg, "variant")


@pytest.mark.parametrize("width,height,ratio", [
    (0, 10, 50),
    (51, 10, 50),
    (10, 0, 50),
    (10, 101, 50),
    (10, 10, -1),
    (10, 10, 101),
    ("ten", 10, 50),
    ("", 10, 50),
])
def test_validate_dimensions_rejects(width, height, ratio):
    with pytest.raises(ConfigError):
        validate_dimensions(width, height, ratio)


def test_validate_dimensions_accepts_limits_and_strings():
    assert validate_dimensions("50", " 100 ", "0") == {"width": 50, "height": 100, "ratio": 0}
    assert validate_dimensions(1, 1, 100) == {"width": 1, "height": 1, "ratio": 100}


@pytest.mark.parametrize("argv", [
    ["--speed=0"],
    ["--speed=fast"],
    ["--seed=abc"],
    ["--height=500"],
])
def test_resolve_rejects(argv):
    with pytest.raises(ConfigError):
        resolve_config(argv, {})


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        validate_dimensions(0, 0, 0)


def test_configure_logging_reads_level(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
    configure_logging({"PATHVIZ_LOG_LEVEL": "debug"})
    assert calls["level"] == logging.DEBUG
    configure_logging({"PATHVIZ_LOG_LEVEL": "nonsense"})
    assert calls["level"] == logging.INFO
