"""Streaming class-conditional means and covariances."""

from classmoments.accumulate import Accumulator
from classmoments.basetypes import Block, BlockSource
from classmoments.chunked import estimate_chunked
from classmoments.dataset import LabelledData
from classmoments.direct import covm, estimate
from classmoments.moments import meancov
from classmoments.results import ClassMoments, MeanCov
from classmoments.sources import (ArrayBlockSource, H5BlockSource,
                                  materialise, write_h5)

__version__ = "0.1.0"

__all__ = [
    "Accumulator",
    "ArrayBlockSource",
    "Block",
    "BlockSource",
    "ClassMoments",
    "H5BlockSource",
    "LabelledData",
    "MeanCov",
    "covm",
    "estimate",
    "estimate_chunked",
    "materialise",
    "meancov",
    "write_h5",
]
