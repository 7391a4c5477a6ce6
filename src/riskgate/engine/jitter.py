"""Jitter sources - the scoring engine's only entropy input.

Residual jitter stands in for signal the factor model does not capture.
It is injected so that tests can pin it and replays are reproducible.
"""

import random
import threading
from itertools import cycle
from typing import Optional, Protocol


class JitterSource(Protocol):
    """Produces a non-negative integer in [0, upper)."""

    def draw(self, upper: int) -> int:
        ...


class RandomJitter:
    """Uniform jitter from a (optionally seeded) ``random.Random``."""

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self.seed = seed
        self._rng = rng or random.Random(seed)
        self._lock = threading.Lock()

    def draw(self, upper: int) -> int:
        if upper <= 0:
            return 0
        with self._lock:
            return self._rng.randrange(upper)


class FixedJitter:
    """Returns a fixed value, or cycles through a fixed sequence.

    ``FixedJitter()`` always returns 0.
    """

    def __init__(self, *values: int):
        if any(v < 0 for v in values):
            raise ValueError("jitter values must be non-negative")
        self._values = cycle(values or (0,))
        self._lock = threading.Lock()

    def draw(self, upper: int) -> int:
        with self._lock:
            return next(self._values)
