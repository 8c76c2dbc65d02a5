"""Class means and covariances from a source read block by block."""

import logging
from typing import Optional

from tqdm import tqdm

from classmoments import errors
from classmoments.accumulate import Accumulator
from classmoments.basetypes import BlockSource
from classmoments.results import MeanCov, check_normalisation

log = logging.getLogger(__name__)


def estimate_chunked(source: BlockSource,
                     n: int = 0,
                     covariances: bool = True,
                     progress: bool = False
                     ) -> MeanCov:
    """
    Compute class means and covariances by accumulating blocks.

    Blocks are pulled from the source until it reports no next cursor.
    The result matches what the direct estimator gives on the whole
    data, whatever the split into blocks. An exception raised while
    reading a block aborts the computation.

    Arguments
    ---------
    source : BlockSource
        The data, with hard labels or no labels.
    n : int
        Normalisation: 0 divides by M - 1 (unbiased), 1 divides by M.
    covariances : bool
        Whether to compute covariances as well as means.
    progress : bool
        Show a progress bar over the rows read.

    Returns
    -------
    result : MeanCov
        Means of shape (C, K) and covariances of shape (K, K, C).

    """
    check_normalisation(n)
    if source.soft:
        raise errors.InvalidArgument(
            "source", "soft labels",
            "hard labels; materialise the data to use soft labels")

    n_rows, n_features = source.shape
    log.info("Computing class statistics of {} rows in blocks".format(n_rows))
    accum = Accumulator(source.nclasses, n_features or None)
    nblocks = 0
    with tqdm(total=n_rows, disable=not progress) as pbar:
        with source:
            cursor: Optional[int] = 0
            while cursor is not None:
                block = source.read(cursor)
                accum.merge(block.data, block.nlab)
                pbar.update(block.data.shape[0])
                nblocks += 1
                cursor = block.next
    log.info("Accumulated {} rows from {} blocks".format(
        int(accum.counts.sum()), nblocks))
    return accum.finish(n, covariances, source.lablist,
                        source.featlabels or None, source.prior)
