"""Test iteration module."""

import pytest

from classmoments.basetypes import FixedSlice
from classmoments.iteration import batch_slices, next_cursor, split_sizes

batch_params = [
    (10, 5),
    (123456, 79)
]


@pytest.mark.parametrize("N,B", batch_params)
def test_batch_slices(N, B):
    ixs = list(batch_slices(B, N))
    start, stop = tuple(zip(*[(s.start, s.stop) for s in ixs]))
    assert start == tuple(range(0, N, B))
    assert stop == tuple(list(range(B, N, B)) + [N])


def test_batch_slices_bad_size():
    with pytest.raises(ValueError):
        list(batch_slices(0, 10))


def test_next_cursor():
    assert next_cursor(FixedSlice(0, 4), 10) == 4
    assert next_cursor(FixedSlice(6, 10), 10) is None


def test_split_sizes():
    slices = split_sizes([3, 0, 2, 5])
    assert slices == [FixedSlice(0, 3), FixedSlice(3, 3),
                      FixedSlice(3, 5), FixedSlice(5, 10)]
