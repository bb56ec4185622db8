from __future__ import annotations

import threading
import time
from typing import Callable


DEFAULT_MAX_NODES = 500_000
DEFAULT_MAX_DURATION_S = 300.0


class Budget:
    """Positions-visited counter and clock for one move decision.

    The search polls ``is_exhausted()`` before generating each successor and
    calls ``record_visit()`` once per generated successor, so the visit count
    never goes past ``max_nodes``.
    """

    def __init__(
        self,
        max_nodes: int = DEFAULT_MAX_NODES,
        max_duration: float = DEFAULT_MAX_DURATION_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_nodes <= 0:
            raise ValueError(f"max_nodes must be positive, got {max_nodes}")
        if max_duration <= 0:
            raise ValueError(f"max_duration must be positive, got {max_duration}")
        self.max_nodes = max_nodes
        self.max_duration = max_duration
        self._clock = clock
        self._started = clock()
        self._visited = 0
        self._lock = threading.Lock()

    @property
    def visited(self) -> int:
        return self._visited

    @property
    def elapsed(self) -> float:
        return self._clock() - self._started

    def is_exhausted(self) -> bool:
        return self._visited >= self.max_nodes or self.elapsed >= self.max_duration

    def record_visit(self) -> None:
        with self._lock:
            self._visited += 1

    def __repr__(self) -> str:
        return (
            f"Budget(visited={self._visited}/{self.max_nodes}, "
            f"elapsed={self.elapsed:.2f}/{self.max_duration}s)"
        )
