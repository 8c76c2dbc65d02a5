"""Utilities."""

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

import logging

import numpy as np

from classmoments.basetypes import ContinuousType, LabelType

log = logging.getLogger(__name__)


def _mbytes_per_row(ndim: int, labelled: bool) -> float:
    bytes_data = np.dtype(ContinuousType).itemsize * ndim
    bytes_label = np.dtype(LabelType).itemsize if labelled else 0
    return (bytes_data + bytes_label) * 1e-6


def block_mb(nrows: int, ndim: int, labelled: bool = True) -> float:
    """Estimate the size in megabytes of a block held in memory."""
    return nrows * _mbytes_per_row(ndim, labelled)


def mb_to_rows(batchMB: float, ndim: int, labelled: bool = True) -> int:
    """Calculate the number of rows of data to fill a memory allocation."""
    log.info("Batch size of {}MB requested".format(batchMB))
    mb_per_row = _mbytes_per_row(ndim, labelled)
    nrows = int(round(max(1.0, batchMB / mb_per_row)))
    log.info(
        "Batch size set to {} rows, total {:0.2f}MB".format(
            nrows, nrows * mb_per_row
        )
    )
    return nrows
