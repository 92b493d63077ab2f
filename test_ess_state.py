#!/usr/bin/env python3
"""
Test Search State Representation
================================
Root construction, split axis selection, legality and bisection.
"""

import itertools

import pytest

from ess_state import SearchState, UNBOUNDED, LEFT, TOP, RIGHT


def make_state(low, high, upper=0.0):
    return SearchState(tuple(low), tuple(high), upper)


def test_full_space_exact():
    root = SearchState.full_space(10, 8)
    assert root.low == (0, 0, 0, 0)
    assert root.high == (9, 7, 9, 7)
    assert root.upper == UNBOUNDED


def test_full_space_quantized_rounds_down():
    root = SearchState.full_space(10, 8, qbits=1)
    assert root.high == (8, 6, 8, 6)

    root = SearchState.full_space(10, 8, qbits=2)
    assert root.high == (8, 4, 8, 4)


def test_full_space_single_pixel_is_singleton():
    root = SearchState.full_space(1, 1)
    assert root.is_singleton()
    assert root.split_axis() is None


def test_split_axis_none_iff_collapsed():
    collapsed = make_state((3, 2, 5, 4), (3, 2, 5, 4))
    assert collapsed.split_axis() is None

    for axis in range(4):
        high = [3, 2, 5, 4]
        high[axis] += 1
        state = make_state((3, 2, 5, 4), high)
        assert state.split_axis() == axis


def test_split_axis_prefers_widest_interval():
    state = make_state((0, 0, 0, 0), (2, 1, 6, 3))
    assert state.split_axis() == RIGHT


def test_split_axis_ties_keep_lowest_index():
    state = make_state((0, 0, 0, 0), (4, 4, 4, 4))
    assert state.split_axis() == LEFT

    state = make_state((0, 0, 0, 0), (1, 4, 2, 4))
    assert state.split_axis() == TOP


def test_split_axis_quantized_extent():
    # Both values fall in the same 2-pixel bucket
    state = make_state((0, 0, 2, 2), (1, 1, 3, 3))
    assert state.split_axis(qbits=0) == LEFT
    assert state.split_axis(qbits=1) is None

    state = make_state((0, 0, 0, 0), (1, 1, 2, 1))
    assert state.split_axis(qbits=1) == RIGHT


@pytest.mark.parametrize("low,high,legal", [
    ((0, 0, 0, 0), (5, 5, 5, 5), True),
    ((3, 0, 0, 0), (5, 5, 2, 5), False),   # left always right of right
    ((0, 4, 0, 0), (5, 5, 5, 3), False),   # top always below bottom
    ((2, 2, 2, 2), (2, 2, 2, 2), True),
    ((3, 0, 0, 0), (5, 5, 3, 5), True),
])
def test_is_legal(low, high, legal):
    assert make_state(low, high).is_legal() is legal


def test_split_bisects_one_interval():
    parent = make_state((0, 1, 2, 3), (9, 4, 7, 8), upper=5.0)
    first, second = parent.split(LEFT)

    assert first.low == (0, 1, 2, 3)
    assert first.high == (4, 4, 7, 8)
    assert second.low == (5, 1, 2, 3)
    assert second.high == (9, 4, 7, 8)
    assert first.upper == second.upper == 5.0


def test_split_children_partition_parent():
    parent = make_state((0, 0, 0, 0), (3, 2, 3, 2))
    for axis in range(4):
        first, second = parent.split(axis)
        parent_values = set(range(parent.low[axis], parent.high[axis] + 1))
        first_values = set(range(first.low[axis], first.high[axis] + 1))
        second_values = set(range(second.low[axis], second.high[axis] + 1))
        assert first_values | second_values == parent_values
        assert not first_values & second_values


def test_split_collapsed_interval_rejected():
    state = make_state((1, 1, 1, 1), (1, 1, 4, 1))
    with pytest.raises(ValueError):
        state.split(LEFT)


def test_empty_interval_rejected():
    with pytest.raises(ValueError):
        make_state((4, 0, 0, 0), (3, 5, 5, 5))


def test_repeated_splitting_reaches_singletons():
    pending = [SearchState.full_space(3, 2)]
    singletons = set()
    while pending:
        state = pending.pop()
        axis = state.split_axis()
        if axis is None:
            assert state.is_singleton()
            singletons.add(state.union_box())
            continue
        pending.extend(child for child in state.split(axis) if child.is_legal())

    expected = {(l, t, r, b)
                for l, r in itertools.product(range(3), repeat=2) if l <= r
                for t, b in itertools.product(range(2), repeat=2) if t <= b}
    assert singletons == expected


def test_union_and_intersection_boxes():
    state = make_state((1, 2, 4, 5), (3, 3, 6, 7))
    assert state.union_box() == (1, 2, 6, 7)
    assert state.intersection_box() == (3, 3, 4, 5)

    overlapping = make_state((0, 0, 0, 0), (5, 5, 5, 5))
    assert overlapping.intersection_box() is None


def test_ranks_below_compares_bounds_only():
    small = make_state((0, 0, 0, 0), (9, 9, 9, 9), upper=1.0)
    large = make_state((2, 2, 2, 2), (2, 2, 2, 2), upper=2.0)
    assert small.ranks_below(large)
    assert not large.ranks_below(small)
    assert not small.ranks_below(small.with_upper(1.0))


def test_state_is_compact_value():
    state = SearchState.full_space(10, 8)
    assert not hasattr(state, '__dict__')
    with pytest.raises(AttributeError):
        state.upper = 1.0


def test_derived_states_skip_revalidation(monkeypatch):
    root = SearchState.full_space(16, 16)
    checks = []
    monkeypatch.setattr(SearchState, '__post_init__', lambda self: checks.append(self))

    first, second = root.split(LEFT)
    rebounded = first.with_upper(3.0)

    assert checks == []
    assert rebounded.low == first.low and rebounded.high == first.high
    assert rebounded.upper == 3.0
    assert second.upper == root.upper
    with pytest.raises(AttributeError):
        rebounded.upper = 1.0


def test_describe():
    state = make_state((0, 1, 2, 3), (4, 5, 6, 7))
    assert state.describe() == "low < 0 1 2 3 > high < 4 5 6 7 >"
