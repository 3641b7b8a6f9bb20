"""
Cut the Cheese - Entropy Sources

The engine never touches the process-wide random generator. Dice rolls and
shuffles come from an EntropySource passed in by the caller, so a game can
be replayed from a seed and two games never share hidden state.
"""

import random
from typing import Protocol, Sequence, TypeVar

T = TypeVar("T")


class EntropySource(Protocol):
    """Randomness required by the engine."""

    def randint(self, low: int, high: int) -> int:
        """Return a uniform integer in [low, high]."""
        ...

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Return a uniformly permuted copy of items."""
        ...


class RandomEntropy:
    """
    EntropySource backed by a private random.Random instance.

    Args:
        seed: Optional seed for reproducible games
    """

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def randint(self, low: int, high: int) -> int:
        return self._rng.randint(low, high)

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Fisher-Yates shuffle into a new list; the input is left untouched."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.randint(0, i)
            result[i], result[j] = result[j], result[i]
        return result
