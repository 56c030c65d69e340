from __future__ import annotations

import random
from typing import List, Optional, Tuple

from .pieces import TetrominoType


class SevenBag:
    """Bag randomizer: every run of 7 draws from a fresh bag is a permutation of all types."""

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None) -> None:
        self.rng = rng or random.Random(seed)
        self._bag: List[int] = []

    def refill(self) -> None:
        self._bag = [int(kind) for kind in TetrominoType]
        # Fisher-Yates
        for i in range(len(self._bag) - 1, 0, -1):
            j = self.rng.randint(0, i)
            self._bag[i], self._bag[j] = self._bag[j], self._bag[i]

    def next(self) -> int:
        if not self._bag:
            self.refill()
        return self._bag.pop()

    def peek_bag(self) -> Tuple[int, ...]:
        """Remaining ids in draw order."""
        return tuple(reversed(self._bag))

    def __len__(self) -> int:
        return len(self._bag)
