"""Recursive Van Emde Boas nodes.

Every node covers a universe ``{0, …, U-1}`` and caches the smallest and
largest stored key in ``min``/``max`` (``EMPTY`` when the node holds nothing).
The minimum lives *only* in the cache: it is never stored again further down.
The maximum is also stored in a child unless ``min == max``.

Two node kinds share one interface:

    • ``_Leaf``   – ``U < threshold``; membership kept as bits of an ``int``
    • ``_Branch`` – ``summary`` over the block indices + ``blocks`` children

``build_node`` picks the kind from the universe size and allocates the whole
subtree eagerly. Complexities: insert / erase / successor / predecessor /
contains are all O(log log U); construction and space are O(U).

Nodes trust their caller: keys are in range, inserted keys are absent and
erased keys are present. ``VEBTree`` checks this before calling in.
"""
from __future__ import annotations

from typing import Union

from .policy import Layout, SplitPolicy

__all__ = ["EMPTY", "SMALL_UNIVERSE", "Node", "build_node"]

EMPTY = -1  # "no key" for min/max/successor/predecessor
SMALL_UNIVERSE = 1 << 5  # universes below this are bitmask leaves


class _Leaf:
    __slots__ = ("universe", "min", "max", "_bits")

    def __init__(self, universe: int):
        self.universe = universe
        self.min = EMPTY
        self.max = EMPTY
        self._bits = 0  # members except ``min``

    # ---------------------------------------------------------------------
    # Mutation API
    # ---------------------------------------------------------------------
    def insert(self, x: int) -> None:
        if self.min == EMPTY:
            self.min = self.max = x
            return
        if x < self.min:
            x, self.min = self.min, x
        if x > self.max:
            self.max = x
        self._bits |= 1 << x

    def erase(self, x: int) -> None:
        if x == self.min:
            self.min = EMPTY
        self._bits &= ~(1 << x)
        bits = self._bits
        if self.min == EMPTY and bits:
            lowest = bits & -bits
            self.min = lowest.bit_length() - 1
            self._bits = bits = bits ^ lowest
        self.max = bits.bit_length() - 1 if bits else self.min

    # ---------------------------------------------------------------------
    # Query API
    # ---------------------------------------------------------------------
    def contains(self, x: int) -> bool:
        return x == self.min or bool(self._bits >> x & 1)

    def successor(self, x: int) -> int:
        if x < self.min:
            return self.min
        above = self._bits >> (x + 1)
        if not above:
            return EMPTY
        return x + (above & -above).bit_length()

    def predecessor(self, x: int) -> int:
        if self.max == EMPTY or x <= self.min:
            return EMPTY
        if x > self.max:
            return self.max
        below = self._bits & ((1 << x) - 1)
        return below.bit_length() - 1 if below else self.min

    def count(self) -> int:
        return 1

    def release(self) -> int:
        self.min = self.max = EMPTY
        self._bits = 0
        return 1

    def __repr__(self) -> str:  # pragma: no cover
        return f"Leaf<U={self.universe} min={self.min} max={self.max}>"


class _Branch:
    __slots__ = ("universe", "min", "max", "layout", "summary", "blocks")

    def __init__(self, universe: int, policy: SplitPolicy, threshold: int):
        self.universe = universe
        self.min = EMPTY
        self.max = EMPTY
        self.layout: Layout = policy.layout(universe)
        self.summary: Node = build_node(self.layout.blocks, policy, threshold)
        self.blocks: list[Node] = [
            build_node(self.layout.block_size, policy, threshold) for _ in range(self.layout.blocks)
        ]

    # ---------------------------------------------------------------------
    # Mutation API
    # ---------------------------------------------------------------------
    def insert(self, x: int) -> None:
        if self.min == EMPTY:
            self.min = self.max = x
            return
        if x < self.min:
            x, self.min = self.min, x  # the old min is the one pushed down
        if x > self.max:
            self.max = x
        i = self.layout.high(x)
        block = self.blocks[i]
        if block.min == EMPTY:
            self.summary.insert(i)
        block.insert(self.layout.low(x))

    def erase(self, x: int) -> None:
        layout = self.layout
        if x == self.min:
            i = self.summary.min
            if i == EMPTY:  # last element
                self.min = self.max = EMPTY
                return
            # promote the next smallest key; it is the one to remove below
            x = self.min = layout.index(i, self.blocks[i].min)

        i = layout.high(x)
        block = self.blocks[i]
        block.erase(layout.low(x))
        if block.min == EMPTY:
            self.summary.erase(i)

        if x == self.max:
            i = self.summary.max
            if i == EMPTY:
                self.max = self.min
            else:
                self.max = layout.index(i, self.blocks[i].max)

    # ---------------------------------------------------------------------
    # Query API
    # ---------------------------------------------------------------------
    def contains(self, x: int) -> bool:
        if x == self.min:
            return True
        return self.blocks[self.layout.high(x)].contains(self.layout.low(x))

    def successor(self, x: int) -> int:
        if x < self.min:
            return self.min
        layout = self.layout
        i, j = layout.high(x), layout.low(x)
        if j < self.blocks[i].max:
            j = self.blocks[i].successor(j)
        else:
            i = self.summary.successor(i)
            if i == EMPTY:
                return EMPTY
            j = self.blocks[i].min
            assert j != EMPTY, "summary points at an empty block"
        return layout.index(i, j)

    def predecessor(self, x: int) -> int:
        if self.max == EMPTY or x <= self.min:
            return EMPTY
        if x > self.max:
            return self.max
        layout = self.layout
        i, j = layout.high(x), layout.low(x)
        block_min = self.blocks[i].min
        if block_min != EMPTY and j > block_min:
            return layout.index(i, self.blocks[i].predecessor(j))
        i = self.summary.predecessor(i)
        if i == EMPTY:
            return self.min  # only the out-of-band min is smaller than x
        j = self.blocks[i].max
        assert j != EMPTY, "summary points at an empty block"
        return layout.index(i, j)

    # ------------------------------------------------------------------
    # Structure helpers
    # ------------------------------------------------------------------
    def count(self) -> int:
        """Number of nodes in this subtree, self included."""
        return 1 + self.summary.count() + sum(block.count() for block in self.blocks)

    def release(self) -> int:
        """Drop all children bottom-up and return how many nodes went away."""
        released = 1 + self.summary.release()
        for block in self.blocks:
            released += block.release()
        self.blocks = []
        self.min = self.max = EMPTY
        return released

    def __repr__(self) -> str:  # pragma: no cover
        return f"Branch<U={self.universe} B={self.layout.block_size} min={self.min} max={self.max}>"


Node = Union[_Leaf, _Branch]


def build_node(universe: int, policy: SplitPolicy, threshold: int = SMALL_UNIVERSE) -> Node:
    """Allocate an empty node (and its whole subtree) over *universe* keys."""
    if universe < threshold:
        return _Leaf(universe)
    return _Branch(universe, policy, threshold)
