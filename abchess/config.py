from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, fields
from typing import Optional

from .budget import DEFAULT_MAX_DURATION_S, DEFAULT_MAX_NODES


logger = logging.getLogger(__name__)

CONFIG_ENV = "ABCHESS_CONFIG"
MAX_NODES_ENV = "ABCHESS_MAX_NODES"
MAX_DURATION_ENV = "ABCHESS_MAX_DURATION"


@dataclass
class SearchConfig:
    """Ceilings and depth schedule for one move decision."""

    max_nodes: int = DEFAULT_MAX_NODES
    max_duration_s: float = DEFAULT_MAX_DURATION_S
    initial_depth: int = 2
    depth_step: int = 2
    max_depth: int = 6
    endgame_max_depth: int = 12
    endgame_piece_threshold: int = 10

    def __post_init__(self) -> None:
        for f in fields(self):
            setattr(self, f.name, _coerce(f.name, getattr(self, f.name), f.type))
        if self.max_nodes <= 0:
            raise ValueError(f"max_nodes must be positive, got {self.max_nodes}")
        if self.max_duration_s <= 0:
            raise ValueError(f"max_duration_s must be positive, got {self.max_duration_s}")
        if self.initial_depth < 1 or self.depth_step < 1:
            raise ValueError("initial_depth and depth_step must be at least 1")
        # whole turns only: every iteration must end on the root's side to move
        if self.initial_depth % 2 or self.depth_step % 2:
            raise ValueError("initial_depth and depth_step must be even")
        if self.max_depth < self.initial_depth or self.endgame_max_depth < self.initial_depth:
            raise ValueError("max depths must not be below initial_depth")

    @classmethod
    def load(cls, path: Optional[str] = None) -> "SearchConfig":
        """Build a config from the ``[search]`` table of a TOML file, then env overrides.

        A missing file is not an error; defaults apply.
        """
        path = path or os.environ.get(CONFIG_ENV, "abchess.toml")
        values = {}
        if os.path.exists(path):
            with open(path, "rb") as f:
                raw = tomllib.load(f)
            known = {f.name for f in fields(cls)}
            for key, value in raw.get("search", {}).items():
                if key in known:
                    values[key] = value
                else:
                    logger.warning("Ignoring unknown search option %r in %s", key, path)

        max_nodes = os.environ.get(MAX_NODES_ENV)
        if max_nodes:
            values["max_nodes"] = max_nodes
        max_duration = os.environ.get(MAX_DURATION_ENV)
        if max_duration:
            values["max_duration_s"] = max_duration
        return cls(**values)


def _coerce(name: str, value: object, annotation: str) -> object:
    """Convert TOML/env values to the field's numeric type, or raise ValueError."""
    kind = float if annotation == "float" else int
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"{name} must be {kind.__name__}, got {value!r}")
    try:
        number = float(value) if kind is float else int(value)
    except ValueError:
        raise ValueError(f"{name} must be {kind.__name__}, got {value!r}") from None
    if kind is int and isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{name} must be int, got {value!r}")
    return number
