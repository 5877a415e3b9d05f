"""A small skip-list ordered set of integers, used as a timing baseline.

It answers the same ordered queries as ``VEBTree`` but with no bound on the
key range, which makes it a fair comparison point for the benchmarks.

Complexities (average case):
    • search      – O(log n)
    • add/discard – O(log n)
    • successor   – O(log n)
    • iterate     – O(n)

The probabilistic height algorithm uses the classic 50 % branching factor.
"""
from __future__ import annotations

from collections.abc import Iterator
from random import Random
from typing import Optional

from .node import EMPTY

__all__ = ["SkipListSet"]

_MAX_LEVEL = 24  # Supports > 16M elements on average.
_P = 0.5


class _Node:
    __slots__ = ("key", "forward")

    def __init__(self, key: int, level: int):
        self.key = key
        self.forward: list[Optional[_Node]] = [None] * level

    def __repr__(self) -> str:  # pragma: no cover
        return f"Node<{self.key!r}>"


class SkipListSet:
    """Sorted set of integers backed by a skip list."""

    def __init__(self, seed: Optional[int] = None):
        self._level = 1
        self._size = 0
        self._header = _Node(EMPTY, _MAX_LEVEL)
        self._rng = Random(seed)

    def _random_level(self) -> int:
        lvl = 1
        while self._rng.random() < _P and lvl < _MAX_LEVEL:
            lvl += 1
        return lvl

    def _find_update(self, key: int) -> list[_Node]:
        """Rightmost node with ``node.key < key`` on every level."""
        update: list[_Node] = [self._header] * _MAX_LEVEL
        x = self._header
        for i in reversed(range(self._level)):
            while (nxt := x.forward[i]) and nxt.key < key:
                x = nxt
            update[i] = x
        return update

    # ---------------------------------------------------------------------
    # Mutation API
    # ---------------------------------------------------------------------
    def add(self, key: int) -> None:
        """Insert `key`; no-op if present."""
        update = self._find_update(key)
        x = update[0].forward[0]
        if x and x.key == key:
            return
        lvl = self._random_level()
        if lvl > self._level:
            for i in range(self._level, lvl):
                update[i] = self._header
            self._level = lvl
        new_node = _Node(key, lvl)
        for i in range(lvl):
            new_node.forward[i] = update[i].forward[i]
            update[i].forward[i] = new_node
        self._size += 1

    def discard(self, key: int) -> None:
        """Remove `key`; no-op if absent."""
        update = self._find_update(key)
        x = update[0].forward[0]
        if x is None or x.key != key:
            return
        for i in range(len(x.forward)):
            update[i].forward[i] = x.forward[i]
        while self._level > 1 and self._header.forward[self._level - 1] is None:
            self._level -= 1
        self._size -= 1

    # ---------------------------------------------------------------------
    # Query API
    # ---------------------------------------------------------------------
    def __contains__(self, key: int) -> bool:
        x = self._find_update(key)[0].forward[0]
        return x is not None and x.key == key

    def successor(self, key: int) -> int:
        """Smallest key strictly greater than `key`, or -1."""
        x = self._find_update(key + 1)[0].forward[0]
        return x.key if x is not None else EMPTY

    def predecessor(self, key: int) -> int:
        """Largest key strictly smaller than `key`, or -1."""
        x = self._find_update(key)[0]
        return EMPTY if x is self._header else x.key

    def __len__(self) -> int:
        return self._size

    # ------------------------------------------------------------------
    # Iteration helpers (ordered)
    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[int]:
        x = self._header.forward[0]
        while x is not None:
            yield x.key
            x = x.forward[0]
