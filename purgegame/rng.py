"""Deterministic linear congruential random generator used by the game."""

from __future__ import annotations

from typing import MutableSequence

RANDOM_MOD = 1 << 31
RANDOM_MASK = RANDOM_MOD - 1
_MAX_RANGE = 1_000_000


class RandomGenerator:
    """A small reproducible generator; the same seed yields the same sequence."""

    def __init__(self, seed: int = 0):
        self._seed = 0
        self.set_seed(seed)

    def set_seed(self, seed: int) -> None:
        self._seed = abs(seed) & RANDOM_MASK

    def _next(self) -> None:
        self._seed = (843314861 * self._seed + 453816693) & RANDOM_MASK

    def uniform(self) -> float:
        """Return a real number in [0, 1)."""
        self._next()
        return self._seed / RANDOM_MOD

    def random(self, low: int, high: int) -> int:
        """Return an integer in [low, high]; low if the interval is empty or too long."""
        if low > high:
            return low
        span = high - low + 1
        if span > _MAX_RANGE:
            return low
        self._next()
        return low + int(span * self.uniform())

    def random_permutation(self, n: int) -> list[int]:
        """Return a random permutation of range(n); empty if n is out of range."""
        if n < 0 or n > _MAX_RANGE:
            return []
        values = list(range(n))
        for i in range(n):
            k = self.random(i, n - 1)
            values[i], values[k] = values[k], values[i]
        return values

    def shuffle(self, items: MutableSequence) -> None:
        """Shuffle items in place."""
        for i in range(len(items) - 1, 0, -1):
            k = self.random(0, i)
            items[i], items[k] = items[k], items[i]