"""Estimation of the means and covariances of multiclass data."""

import logging
from typing import Any, Optional

import numpy as np

from classmoments import errors
from classmoments.basetypes import BlockSource
from classmoments.chunked import estimate_chunked
from classmoments.dataset import LabelledData
from classmoments.direct import estimate
from classmoments.results import MeanCov

log = logging.getLogger(__name__)


def meancov(a: Any,
            n: Optional[int] = None,
            covariances: bool = True,
            progress: bool = False
            ) -> MeanCov:
    """
    Compute the mean vectors and covariance matrices of each class.

    Arguments
    ---------
    a : Union[np.ndarray, LabelledData, BlockSource]
        A plain array is treated as one unlabelled pool. A LabelledData
        may carry hard or soft labels. A BlockSource is read block by
        block and must have hard labels or none.
    n : Optional[int]
        Normalisation of the covariances: by M, the number of samples
        (n = 1), or by M - 1 (n = 0, unbiased). Defaults to 0.
    covariances : bool
        Whether to compute covariances as well as means.
    progress : bool
        Show a progress bar when reading a BlockSource.

    Returns
    -------
    result : MeanCov
        Means of shape (C, K), covariances of shape (K, K, C), with the
        class labels, feature labels and priors of the input.

    """
    if n is None:
        log.debug("Normalisation not specified, assuming by M-1")
        n = 0

    if isinstance(a, BlockSource):
        return estimate_chunked(a, n, covariances, progress)
    if isinstance(a, LabelledData):
        return estimate(a, n, covariances)
    if isinstance(a, np.ndarray):
        return estimate(LabelledData(a), n, covariances)
    raise errors.InvalidArgument("a", type(a).__name__,
                                 "an array, LabelledData or BlockSource")
