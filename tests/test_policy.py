"""Unit tests for the universe split policies."""
import pytest

from pyveb.policy import (
    DivLayout,
    GenericSplit,
    PowerOfTwoSplit,
    ShiftLayout,
    SplitType,
    get_policy,
)


def test_power_of_two_layout():
    layout = PowerOfTwoSplit().layout(1 << 11)
    assert isinstance(layout, ShiftLayout)
    assert layout.block_size == 1 << 5
    assert layout.blocks == 1 << 6
    assert layout.high(0b10110_10101) == 0b10110
    assert layout.low(0b10110_10101) == 0b10101
    assert layout.index(0b10110, 0b10101) == 0b10110_10101


@pytest.mark.parametrize(
    "universe,block_size,blocks",
    [
        (32, 6, 6),
        (40, 7, 6),
        (1024, 32, 32),
        (5000, 71, 71),
        (1025, 33, 32),
    ],
)
def test_generic_layout_covers_universe(universe, block_size, blocks):
    layout = GenericSplit().layout(universe)
    assert isinstance(layout, DivLayout)
    assert (layout.block_size, layout.blocks) == (block_size, blocks)
    assert layout.block_size * layout.blocks >= universe
    assert layout.block_size * (layout.blocks - 1) < universe


def test_generic_addressing():
    layout = GenericSplit().layout(40)
    for x in (0, 6, 7, 39):
        i, j = layout.high(x), layout.low(x)
        assert 0 <= i < layout.blocks
        assert 0 <= j < layout.block_size
        assert layout.index(i, j) == x


def test_power_of_two_rejects_other_sizes():
    with pytest.raises(ValueError):
        PowerOfTwoSplit().validate(48)
    PowerOfTwoSplit().validate(64)


def test_get_policy_accepts_names_and_members():
    assert get_policy("generic").kind is SplitType.GENERIC
    assert get_policy("POWER2").kind is SplitType.POWER2
    assert get_policy(SplitType.POWER2) is get_policy("power2")
    custom = GenericSplit()
    assert get_policy(custom) is custom
