"""Universe split policies.

A Van Emde Boas node of universe ``U`` is carved into ``blocks`` children of
universe ``block_size`` each, plus a summary child over ``blocks`` keys. A key
``x`` is addressed as ``(high(x), low(x))`` and rebuilt with ``index(i, j)``.

Two policies are supported:

Power-of-two (``POWER2``):
- ``U`` must be a power of two
- children cover ``2^floor(bits/2)`` keys, there are ``2^ceil(bits/2)`` of them
- high/low/index are shifts and masks

Generic (``GENERIC``):
- any positive ``U``
- ``block_size = ceil(sqrt(U))``, ``blocks = ceil(U / block_size)``
- high/low/index use ``divmod``

The policy is picked once per tree and asked for a :class:`Layout` at every
level of the recursion; the node code never branches on the policy itself.
"""
from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Union

__all__ = [
    "SplitType",
    "Layout",
    "ShiftLayout",
    "DivLayout",
    "SplitPolicy",
    "PowerOfTwoSplit",
    "GenericSplit",
    "get_policy",
]


class SplitType(enum.Enum):
    """Available split policies."""
    GENERIC = 0
    POWER2 = 1


@dataclass(frozen=True)
class Layout:
    """How one node's universe is divided between its children."""
    universe: int
    block_size: int  # universe of every block child
    blocks: int  # number of block children == universe of the summary

    def high(self, x: int) -> int:
        raise NotImplementedError

    def low(self, x: int) -> int:
        raise NotImplementedError

    def index(self, i: int, j: int) -> int:
        raise NotImplementedError


@dataclass(frozen=True)
class ShiftLayout(Layout):
    shift: int = 0
    mask: int = 0

    def high(self, x: int) -> int:
        return x >> self.shift

    def low(self, x: int) -> int:
        return x & self.mask

    def index(self, i: int, j: int) -> int:
        return i << self.shift | j


@dataclass(frozen=True)
class DivLayout(Layout):

    def high(self, x: int) -> int:
        return x // self.block_size

    def low(self, x: int) -> int:
        return x % self.block_size

    def index(self, i: int, j: int) -> int:
        return i * self.block_size + j


class SplitPolicy:
    """Base class for split policies."""

    kind: SplitType

    def validate(self, universe: int) -> None:
        """Raise ``ValueError`` if *universe* cannot be represented."""
        if universe < 1:
            raise ValueError(f"universe must be positive, got {universe}")

    def layout(self, universe: int) -> Layout:
        """Return the child layout of a branch node over *universe* keys."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PowerOfTwoSplit(SplitPolicy):
    """Bit-shift split; requires the universe to be a power of two."""

    kind = SplitType.POWER2

    def validate(self, universe: int) -> None:
        super().validate(universe)
        if universe & (universe - 1):
            raise ValueError(f"universe must be a power of two for {self.kind.name}, got {universe}")

    def layout(self, universe: int) -> Layout:
        bits = universe.bit_length() - 1
        lo_bits = bits >> 1
        hi_bits = (bits + 1) >> 1
        return ShiftLayout(
            universe=universe,
            block_size=1 << lo_bits,
            blocks=1 << hi_bits,
            shift=lo_bits,
            mask=(1 << lo_bits) - 1,
        )


class GenericSplit(SplitPolicy):
    """Integer division split for arbitrary universe sizes."""

    kind = SplitType.GENERIC

    def layout(self, universe: int) -> Layout:
        block_size = math.isqrt(universe - 1) + 1  # ceil(sqrt(universe))
        blocks = -(-universe // block_size)
        return DivLayout(universe=universe, block_size=block_size, blocks=blocks)


_POLICIES: dict[SplitType, SplitPolicy] = {
    SplitType.GENERIC: GenericSplit(),
    SplitType.POWER2: PowerOfTwoSplit(),
}


def get_policy(policy: Union[str, SplitType, SplitPolicy]) -> SplitPolicy:
    """Resolve a policy name, enum member or instance to a :class:`SplitPolicy`."""
    if isinstance(policy, SplitPolicy):
        return policy
    if isinstance(policy, str):
        policy = SplitType[policy.upper()]
    return _POLICIES[policy]
