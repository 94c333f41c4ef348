"""Injectable random source.

Every random draw in the engine (dodge/critical/variance rolls, rarity and
stat jitter, AI picks) goes through one BattleRandom, so a battle replays
exactly under a fixed seed.
"""

import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


class BattleRandom:
    """Seeded random source shared by all engine components."""

    def __init__(self, seed: int | str | None = None) -> None:
        self.seed = seed
        self._random = random.Random(seed)

    def unit(self) -> float:
        """Uniform float in [0, 1)."""
        return self._random.random()

    def percent(self) -> float:
        """Uniform float in [0, 100), used for chance rolls."""
        return self.unit() * 100

    def uniform(self, low: float, high: float) -> float:
        """Uniform float in [low, high]."""
        return self._random.uniform(low, high)

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], both inclusive."""
        return self._random.randint(low, high)

    def choice(self, items: Sequence[T]) -> T:
        """Uniformly pick one item from a non-empty sequence."""
        return items[self._random.randrange(len(items))]

    def chance(self, probability: float) -> bool:
        """Return True with the given probability."""
        return self.unit() < probability
