from __future__ import annotations

import random

import pytest

from hpa_core.fenwick import FenwickTree


def _linear_find(values, x):
    acc = 0
    for i, v in enumerate(values):
        acc += v
        if acc >= x:
            return i
    raise AssertionError("x beyond total")


def test_prefix_sums_and_find():
    fw = FenwickTree(values=[1, 0, 3, 2])
    assert fw.total == 6
    assert fw.prefix_sum(0) == 0
    assert fw.prefix_sum(3) == 4
    assert fw.range_sum(1, 3) == 3
    assert [fw.find(x) for x in range(1, 7)] == [0, 2, 2, 2, 3, 3]


def test_find_non_power_of_two_capacity():
    fw = FenwickTree(capacity=3, values=[1, 1, 1])
    assert fw.capacity == 3
    assert [fw.find(x) for x in (1, 2, 3)] == [0, 1, 2]


@pytest.mark.parametrize("capacity", range(1, 40))
def test_find_matches_linear_scan_for_every_capacity(capacity):
    values = [(i * 7) % 4 for i in range(capacity)]
    fw = FenwickTree(capacity=capacity, values=values)
    assert fw.capacity == capacity
    for x in range(1, fw.total + 1):
        assert fw.find(x) == _linear_find(values, x)


def test_zero_weight_slots_never_found():
    fw = FenwickTree(values=[0, 2, 0, 0, 1, 0])
    found = {fw.find(x) for x in range(1, fw.total + 1)}
    assert found == {1, 4}


def test_set_and_add_update_total():
    fw = FenwickTree(capacity=4)
    fw.add(0, 2)
    fw.add(3, 5)
    fw.set(0, 0)
    assert fw.total == 5
    assert fw.get(0) == 0
    assert fw.find(1) == 3


def test_grows_by_doubling():
    fw = FenwickTree(capacity=2)
    fw.add(5, 4)
    assert fw.capacity == 8
    assert fw.total == 4
    assert fw.get(5) == 4
    assert fw.find(4) == 5
    assert fw.prefix_sum(5) == 0


def test_negative_weight_rejected():
    fw = FenwickTree(values=[1])
    with pytest.raises(ValueError):
        fw.add(0, -2)
    with pytest.raises(ValueError):
        FenwickTree(values=[1, -1])


def test_find_out_of_range():
    fw = FenwickTree(values=[1, 2])
    with pytest.raises(ValueError):
        fw.find(0)
    with pytest.raises(ValueError):
        fw.find(4)


def test_matches_linear_scan_after_random_updates():
    rnd = random.Random(7)
    fw = FenwickTree(capacity=1)
    values = []
    for _ in range(300):
        i = rnd.randrange(0, 50)
        while len(values) <= i:
            values.append(0)
        if rnd.random() < 0.2:
            fw.set(i, 0)
            values[i] = 0
        else:
            d = rnd.randrange(1, 4)
            fw.add(i, d)
            values[i] += d
    assert fw.total == sum(values)
    assert fw.to_list()[: len(values)] == values
    for x in range(1, fw.total + 1):
        assert fw.find(x) == _linear_find(values, x)
