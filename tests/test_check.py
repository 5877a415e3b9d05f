"""Tests for the correctness harness and the skip-list baseline."""
import logging
import random

import pytest

from pyveb import EMPTY, VEBTree
from pyveb.check import DirectAccessTable, check_correctness
from pyveb.skiplist import SkipListSet


@pytest.fixture
def table():
    t = DirectAccessTable(50)
    for x in (3, 10, 49):
        t.add(x)
    return t


def test_table_queries(table):
    assert len(table) == 3
    assert table.successor(0) == 3
    assert table.successor(3) == 10
    assert table.successor(49) == EMPTY
    assert table.predecessor(3) == EMPTY
    assert table.predecessor(49) == 10
    table.remove(10)
    assert table.successor(3) == 49
    with pytest.raises(KeyError):
        table.remove(10)


@pytest.mark.parametrize("seed", range(5))
def test_check_correctness_passes(seed):
    rng = random.Random(seed)
    assert check_correctness(rng.randint(40, 2000), rng.randrange(400), rng=rng)


def test_check_correctness_power_of_two():
    assert check_correctness(2048, 300, policy="power2", rng=random.Random(11))


def test_check_correctness_reports_mismatch(monkeypatch, caplog):
    monkeypatch.setattr(VEBTree, "successor", lambda self, x: EMPTY)
    with caplog.at_level(logging.WARNING, logger="pyveb.check"):
        assert not check_correctness(100, 50, rng=random.Random(1))
    assert "successor mismatch" in caplog.text


def test_skiplist_matches_table():
    rng = random.Random(5)
    universe = 300
    s = SkipListSet(seed=5)
    table = DirectAccessTable(universe)
    for _ in range(1000):
        x = rng.randrange(universe)
        if x in table:
            s.discard(x)
            table.remove(x)
        else:
            s.add(x)
            table.add(x)

    assert len(s) == len(table)
    assert list(s) == [x for x in range(universe) if x in table]
    for x in range(universe):
        assert s.successor(x) == table.successor(x)
        assert s.predecessor(x) == table.predecessor(x)
        assert (x in s) == (x in table)


def test_skiplist_duplicates_and_missing():
    s = SkipListSet()
    s.add(4)
    s.add(4)
    s.discard(7)
    assert len(s) == 1
    assert s.successor(0) == 4
    assert s.successor(4) == EMPTY
