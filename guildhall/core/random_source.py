"""Seedable random source threaded through every stochastic operation.

Each simulation run owns exactly one RandomSource; identical seeds reproduce
identical equipment rolls and level-up gains.
"""

from __future__ import annotations

import logging
import random
from typing import Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RandomSource:
    """Wrapper around a private random.Random instance.

    Never touches the module-level `random` state, so two sources with the
    same seed stay in lockstep regardless of what else runs.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._seed = seed
        self._rng = random.Random(seed)
        self._draws = 0

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    @property
    def draw_count(self) -> int:
        """Number of values drawn since construction or the last reseed."""
        return self._draws

    def reseed(self, seed: Optional[int]) -> None:
        self._seed = seed
        self._rng.seed(seed)
        self._draws = 0
        logger.debug("RandomSource reseeded: seed=%s", seed)

    def uniform(self, min_value: float, max_value: float) -> float:
        """Float in [min_value, max_value]."""
        self._draws += 1
        return self._rng.uniform(min_value, max_value)

    def range(self, min_inclusive: int, max_exclusive: int) -> int:
        """Integer in [min_inclusive, max_exclusive).

        An empty range returns min_inclusive, so a (0, 0) table entry
        yields 0 without consuming a draw.
        """
        if max_exclusive <= min_inclusive:
            return min_inclusive
        self._draws += 1
        return self._rng.randrange(min_inclusive, max_exclusive)

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise IndexError("cannot choose from an empty sequence")
        return seq[self.range(0, len(seq))]

    def chance(self, probability: float) -> bool:
        """True with the given probability (0.0 ~ 1.0)."""
        return self.uniform(0.0, 1.0) < probability
