"""pyveb: a Van Emde Boas tree for integer keys from a bounded universe.

The package exposes the ordered-set API via `pyveb.VEBTree` (insert, erase,
contains, successor, predecessor in O(log log U)) while keeping the split
policy and the node structure in their own modules. A direct-access oracle
and a skip-list baseline are included for testing and benchmarking.
"""

from __future__ import annotations

__all__ = [
    "EMPTY",
    "SMALL_UNIVERSE",
    "SplitType",
    "VEBTree",
]

from .node import EMPTY, SMALL_UNIVERSE
from .policy import SplitType
from .tree import VEBTree
