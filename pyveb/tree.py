"""Public ordered-set interface over a Van Emde Boas node structure.

``VEBTree`` owns the root node, checks every key against the universe before
it reaches the node layer and keeps track of the number of stored keys. The
strict operations (``insert``/``erase``/``contains``/``successor``/
``predecessor``) raise on contract violations; the ``MutableSet`` protocol
(``add``/``discard``/``in``) is lenient, like the built-in ``set``.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, MutableSet
from typing import Optional, Union

import msgpack

from .node import EMPTY, SMALL_UNIVERSE, Node, build_node
from .policy import SplitPolicy, SplitType, get_policy

__all__ = ["VEBTree"]

logger = logging.getLogger(__name__)

_MIN_THRESHOLD = 3  # smaller thresholds let a split reproduce its own universe


class VEBTree(MutableSet[int]):
    """Set of integers drawn from ``range(universe)``.

    Parameters
    ----------
    universe: int
        Number of representable keys; keys are ``0 … universe-1``.
    policy: str | SplitType | SplitPolicy
        ``"generic"`` (any universe) or ``"power2"`` (power-of-two universe,
        shift/mask addressing).
    threshold: int
        Universes below this size are stored as bitmask leaves.
    """

    def __init__(
        self,
        universe: int,
        *,
        policy: Union[str, SplitType, SplitPolicy] = SplitType.GENERIC,
        threshold: int = SMALL_UNIVERSE,
    ) -> None:
        self._policy = get_policy(policy)
        self._policy.validate(universe)
        if threshold < _MIN_THRESHOLD:
            raise ValueError(f"threshold must be at least {_MIN_THRESHOLD}, got {threshold}")
        self._universe = universe
        self._threshold = threshold
        self._len = 0
        self._root: Optional[Node] = None
        self._node_count = 0
        self._build()

    @classmethod
    def from_bits(cls, bits: int, *, threshold: int = SMALL_UNIVERSE) -> "VEBTree":
        """Power-of-two tree over ``2**bits`` keys."""
        if bits < 0:
            raise ValueError(f"bits must be non-negative, got {bits}")
        return cls(1 << bits, policy=SplitType.POWER2, threshold=threshold)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def universe(self) -> int:
        return self._universe

    @property
    def policy(self) -> SplitType:
        return self._policy.kind

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def node_count(self) -> int:
        """Number of nodes currently allocated (0 once destroyed)."""
        return self._node_count

    # ------------------------------------------------------------------
    # Lifecycle 🔧
    # ------------------------------------------------------------------
    def _build(self) -> None:
        self._root = build_node(self._universe, self._policy, self._threshold)
        self._node_count = self._root.count()
        self._len = 0
        logger.debug(
            "built VEB tree universe=%d policy=%s threshold=%d nodes=%d",
            self._universe, self._policy.kind.name, self._threshold, self._node_count,
        )

    def clear(self) -> None:
        """Remove every key by rebuilding an empty node structure."""
        self._require_root()
        self.destroy()
        self._build()

    def destroy(self) -> int:
        """Release the node structure and return the number of nodes released.

        Safe to call more than once; later calls release nothing.
        """
        if self._root is None:
            return 0
        released = self._root.release()
        assert released == self._node_count, "released node count disagrees with build"
        self._root = None
        self._node_count = 0
        self._len = 0
        logger.debug("destroyed VEB tree universe=%d nodes=%d", self._universe, released)
        return released

    # ------------------------------------------------------------------
    # Mutation API
    # ------------------------------------------------------------------
    def insert(self, x: int) -> None:
        """Insert *x*; raises ``KeyError`` if it is already present."""
        root = self._check(x)
        if root.contains(x):
            raise KeyError(x)
        root.insert(x)
        self._len += 1

    def erase(self, x: int) -> None:
        """Erase *x*; raises ``KeyError`` if it is absent."""
        root = self._check(x)
        if not root.contains(x):
            raise KeyError(x)
        root.erase(x)
        self._len -= 1

    def add(self, x: int) -> None:
        root = self._check(x)
        if not root.contains(x):
            root.insert(x)
            self._len += 1

    def discard(self, x: int) -> None:
        root = self._check(x)
        if root.contains(x):
            root.erase(x)
            self._len -= 1

    def pop(self) -> int:
        """Remove and return the smallest key."""
        root = self._require_root()
        if root.min == EMPTY:
            raise KeyError("pop from an empty VEBTree")
        x = root.min
        root.erase(x)
        self._len -= 1
        return x

    # ------------------------------------------------------------------
    # Query API
    # ------------------------------------------------------------------
    def contains(self, x: int) -> bool:
        return self._check(x).contains(x)

    def successor(self, x: int) -> int:
        """Smallest key strictly greater than *x*, or ``-1``."""
        return self._check(x).successor(x)

    def predecessor(self, x: int) -> int:
        """Largest key strictly smaller than *x*, or ``-1``."""
        return self._check(x).predecessor(x)

    def min(self) -> int:
        return self._require_root().min

    def max(self) -> int:
        return self._require_root().max

    def __contains__(self, x: object) -> bool:
        if not isinstance(x, int) or not 0 <= x < self._universe:
            return False
        return self._require_root().contains(x)

    def __len__(self) -> int:
        return self._len

    # ------------------------------------------------------------------
    # Iteration helpers (ordered)
    # ------------------------------------------------------------------
    def iter_keys(self, reverse: bool = False) -> Iterator[int]:
        root = self._require_root()
        step = root.predecessor if reverse else root.successor
        x = root.max if reverse else root.min
        while x != EMPTY:
            yield x
            x = step(x)

    def __iter__(self) -> Iterator[int]:
        return self.iter_keys()

    def keys(self, reverse: bool = False) -> list[int]:
        return list(self.iter_keys(reverse=reverse))

    def _from_iterable(self, it: Iterable[int]) -> "VEBTree":
        # MutableSet builds results of |, &, -, ^ through this hook
        tree = VEBTree(self._universe, policy=self._policy, threshold=self._threshold)
        for x in it:
            tree.add(x)
        return tree

    def __repr__(self) -> str:
        keys = "destroyed" if self._root is None else self.keys()
        return f"VEBTree(universe={self._universe}, policy={self._policy.kind.name.lower()}, keys={keys})"

    # -------------------------------------------------------
    # Serialisation 📦
    # -------------------------------------------------------
    def to_bytes(self) -> bytes:
        """Snapshot universe, policy, threshold and keys as msgpack bytes."""
        header = (self._universe, self._policy.kind.value, self._threshold)
        return msgpack.packb((header, self.keys()), use_bin_type=True)

    @classmethod
    def from_bytes(cls, blob: bytes) -> "VEBTree":
        (universe, kind, threshold), keys = msgpack.unpackb(blob, raw=False)
        tree = cls(universe, policy=SplitType(kind), threshold=threshold)
        for x in keys:
            tree.insert(x)
        return tree

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _require_root(self) -> Node:
        if self._root is None:
            raise RuntimeError("VEBTree has been destroyed")
        return self._root

    def _check(self, x: int) -> Node:
        if not isinstance(x, int) or isinstance(x, bool):
            raise TypeError(f"key must be an int, got {type(x).__name__}")
        if not 0 <= x < self._universe:
            raise IndexError(f"key {x} outside universe [0, {self._universe})")
        return self._require_root()
