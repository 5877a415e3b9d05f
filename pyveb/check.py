"""Correctness harness: compare a ``VEBTree`` with a direct-access table.

The table stores one flag per key of the universe and answers successor /
predecessor queries by a linear scan, so it is obviously correct and slow.
``check_correctness`` inserts random keys into both structures, then for a
number of rounds compares the successor of *every* key of the universe and
erases a handful of random keys.
"""
from __future__ import annotations

import logging
import random
from typing import Optional, Union

from .node import EMPTY
from .policy import SplitPolicy, SplitType
from .tree import VEBTree

__all__ = ["DirectAccessTable", "check_correctness"]

logger = logging.getLogger(__name__)


class DirectAccessTable:
    """Presence flags for ``range(universe)`` with O(U) ordered queries."""

    def __init__(self, universe: int):
        self.universe = universe
        self._table = bytearray(universe)
        self._len = 0

    def add(self, x: int) -> None:
        if not self._table[x]:
            self._table[x] = 1
            self._len += 1

    def remove(self, x: int) -> None:
        if not self._table[x]:
            raise KeyError(x)
        self._table[x] = 0
        self._len -= 1

    def __contains__(self, x: int) -> bool:
        return bool(self._table[x])

    def __len__(self) -> int:
        return self._len

    def successor(self, x: int) -> int:
        idx = self._table.find(1, x + 1)
        return idx if idx != -1 else EMPTY

    def predecessor(self, x: int) -> int:
        idx = self._table.rfind(1, 0, max(x, 0))
        return idx if idx != -1 else EMPTY


def check_correctness(
    universe: int,
    num_inserted: int,
    *,
    rounds: int = 10,
    erase_per_round: int = 20,
    policy: Union[str, SplitType, SplitPolicy] = SplitType.GENERIC,
    rng: Optional[random.Random] = None,
) -> bool:
    """Run the randomized successor check; ``True`` when every answer agrees."""
    rng = rng or random.Random()
    tree = VEBTree(universe, policy=policy)
    table = DirectAccessTable(universe)

    inserted: list[int] = []
    for _ in range(num_inserted):
        x = rng.randrange(universe)
        if x not in tree:
            tree.insert(x)
            inserted.append(x)
        else:
            assert x in table
        table.add(x)

    for rnd in range(rounds):
        for x in range(universe):
            got, want = tree.successor(x), table.successor(x)
            if got != want:
                logger.warning(
                    "successor mismatch universe=%d round=%d x=%d tree=%d table=%d",
                    universe, rnd, x, got, want,
                )
                tree.destroy()
                return False
        # remove some random keys
        for _ in range(min(erase_per_round, len(inserted))):
            pos = rng.randrange(len(inserted))
            inserted[pos], inserted[-1] = inserted[-1], inserted[pos]
            x = inserted.pop()
            table.remove(x)
            tree.erase(x)

    logger.info("correctness check passed universe=%d inserted=%d rounds=%d", universe, num_inserted, rounds)
    tree.destroy()
    return True
