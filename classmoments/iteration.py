"""Utilities to support iteration."""

# Copyright 2019 CSIRO (Data61)
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from typing import Iterator, List, Optional

from classmoments.basetypes import FixedSlice


def batch_slices(batchsize: int, total_size: int) -> Iterator[FixedSlice]:
    """Group range indices into slices of a given batchsize."""
    if batchsize < 1:
        raise ValueError(f"batchsize must be positive. Got {batchsize}.")
    n = total_size // batchsize
    ret = [(i * batchsize, (i + 1) * batchsize) for i in range(n)]
    if total_size % batchsize != 0:
        ret.append((n * batchsize, total_size))

    for start, stop in ret:
        yield FixedSlice(start, stop)


def next_cursor(s: FixedSlice, total_size: int) -> Optional[int]:
    """Cursor following slice s, or None when s reaches the end."""
    return s.stop if s.stop < total_size else None


def split_sizes(sizes: List[int]) -> List[FixedSlice]:
    """Turn a list of block lengths into contiguous slices."""
    slices = []
    start = 0
    for n in sizes:
        slices.append(FixedSlice(start, start + n))
        start += n
    return slices
