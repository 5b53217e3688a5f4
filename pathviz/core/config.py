# pathviz/core/config.py
"""
Runtime settings for the viewer and launcher.

Resolution order (later wins):
- defaults below
- ENV: PATHVIZ_WIDTH, PATHVIZ_HEIGHT, PATHVIZ_RATIO, PATHVIZ_SEED,
       PATHVIZ_MAP, PATHVIZ_SPEED
- CLI: --width=, --height=, --ratio=, --seed=, --map=, --speed=
"""

import logging
import os
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

from pathviz.core.errors import ConfigError

MAX_WIDTH = 50
MAX_HEIGHT = 100
MAX_SPEED = 240

ENV_PREFIX = "PATHVIZ_"
_KEYS = ("width", "height", "ratio", "seed", "map", "speed")


@dataclass(frozen=True)
class ViewerConfig:
    width: int = 40
    height: int = 20
    ratio: int = 70                  # percent of walkable cells
    seed: Optional[int] = None
    map_path: Optional[Path] = None  # load this map instead of generating one
    speed: int = 60                  # visited cells revealed per second


DEFAULT_CONFIG = ViewerConfig()


def _parse_int(name: str, raw) -> int:
    try:
        return int(str(raw).strip())
    except ValueError:
        raise ConfigError(f"{name} must be a whole number, got {raw!r}") from None


def validate_dimensions(width, height, ratio) -> Dict[str, int]:
    """Parse and range-check grid size input. Returns {"width", "height", "ratio"}."""
    w = _parse_int("width", width)
    h = _parse_int("height", height)
    r = _parse_int("ratio", ratio)
    if not 1 <= w <= MAX_WIDTH:
        raise ConfigError(f"width must be between 1 and {MAX_WIDTH}, got {w}")
    if not 1 <= h <= MAX_HEIGHT:
        raise ConfigError(f"height must be between 1 and {MAX_HEIGHT}, got {h}")
    if not 0 <= r <= 100:
        raise ConfigError(f"ratio must be between 0 and 100, got {r}")
    return {"width": w, "height": h, "ratio": r}


def _collect(argv: Sequence[str], environ: Mapping[str, str]) -> Dict[str, str]:
    raw: Dict[str, str] = {}
    for key in _KEYS:
        val = environ.get(ENV_PREFIX + key.upper())
        if val is not None:
            raw[key] = val
    for arg in argv:
        if not arg.startswith("--") or "=" not in arg:
            continue
        key, val = arg[2:].split("=", 1)
        if key in _KEYS:
            raw[key] = val
    return raw


def resolve_config(argv: Optional[Sequence[str]] = None,
                   environ: Optional[Mapping[str, str]] = None,
                   base: ViewerConfig = DEFAULT_CONFIG) -> ViewerConfig:
    argv = sys.argv[1:] if argv is None else argv
    environ = os.environ if environ is None else environ
    raw = _collect(argv, environ)

    dims = validate_dimensions(
        raw.get("width", base.width),
        raw.get("height", base.height),
        raw.get("ratio", base.ratio),
    )
    seed = base.seed
    if raw.get("seed", "") != "":
        seed = _parse_int("seed", raw["seed"])
    map_path = Path(raw["map"]) if raw.get("map") else base.map_path

    speed = _parse_int("speed", raw.get("speed", base.speed))
    if not 1 <= speed <= MAX_SPEED:
        raise ConfigError(f"speed must be between 1 and {MAX_SPEED}, got {speed}")

    return replace(base, seed=seed, map_path=map_path, speed=speed, **dims)


def configure_logging(environ: Optional[Mapping[str, str]] = None) -> None:
    environ = os.environ if environ is None else environ
    level_name = environ.get(ENV_PREFIX + "LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
