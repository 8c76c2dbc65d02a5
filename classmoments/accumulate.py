"""Running per-class sums for blockwise mean and covariance estimation."""

import logging
from typing import Any, List, Optional

import numpy as np

from classmoments import errors
from classmoments.basetypes import ContinuousType
from classmoments.results import MeanCov, check_normalisation, mark_degenerate

log = logging.getLogger(__name__)


class Accumulator:
    """
    Class that accumulates counts, sums and outer products per class.

    Each class keeps a shift, the first row it was given, and sums the
    shifted rows ``x - shift``. Without the shift the final
    ``outer / f - mean mean^T`` cancels catastrophically for data far
    from the origin. The sums stay additive, so the result does not
    depend on how the rows were split into blocks or on their order.

    Arguments
    ---------
    nclasses : int
        Number of classes. With 0 classes every row goes into a single
        pooled bucket and labels are ignored.
    nfeatures : Optional[int]
        Number of columns, if known before the first block.

    """

    def __init__(self, nclasses: int, nfeatures: Optional[int] = None) -> None:
        """Initialise the counters."""
        if nclasses < 0:
            raise errors.InvalidArgument("nclasses", nclasses,
                                         "a non-negative integer")
        self.nclasses = nclasses
        self._nbuckets = max(nclasses, 1)
        self.counts = np.zeros(self._nbuckets, dtype=np.int64)
        self._k: Optional[int] = None
        self._initialise(nfeatures if nfeatures is not None else 0)
        self._k = nfeatures

    @property
    def nfeatures(self) -> Optional[int]:
        return self._k

    def _initialise(self, k: int) -> None:
        self._k = k
        self.shifts = np.zeros((self._nbuckets, k), dtype=ContinuousType)
        self.sums = np.zeros((self._nbuckets, k), dtype=ContinuousType)
        self.outer = np.zeros((self._nbuckets, k, k), dtype=ContinuousType)

    def _check_columns(self, k: int) -> None:
        if self._k is None:
            self._initialise(k)
        elif k != self._k:
            raise errors.ShapeMismatch("Feature column count", self._k, k)

    def _add(self, j: int, x: np.ndarray) -> None:
        if x.shape[0] == 0:
            return
        if self.counts[j] == 0:
            self.shifts[j] = x[0]
        xs = x - self.shifts[j]
        self.counts[j] += x.shape[0]
        self.sums[j] += xs.sum(axis=0)
        self.outer[j] += xs.T @ xs

    def merge(self, block: np.ndarray,
              nlab: Optional[np.ndarray] = None) -> None:
        """
        Add the rows of a new block to the running sums.

        Arguments
        ---------
        block : np.ndarray
            An (R, K) array of samples.
        nlab : Optional[np.ndarray]
            Hard labels in 0..C for each row. Rows labelled 0 are skipped.
            Required when the accumulator has classes.

        """
        block = np.asarray(block, dtype=ContinuousType)
        if block.ndim != 2:
            raise errors.InvalidArgument("block", block.shape, "a 2D array")
        self._check_columns(block.shape[1])

        if self.nclasses == 0:
            self._add(0, block)
            return

        if nlab is None:
            raise errors.InvalidArgument("nlab", None,
                                         "hard labels for labelled data")
        nlab = np.asarray(nlab).ravel()
        if nlab.shape[0] != block.shape[0]:
            raise errors.ShapeMismatch("Label count", block.shape[0],
                                       nlab.shape[0])
        if nlab.size > 0 and (nlab.min() < 0 or nlab.max() > self.nclasses):
            raise errors.InvalidArgument(
                "nlab", (int(nlab.min()), int(nlab.max())),
                f"labels in the range 0..{self.nclasses}")
        for i in np.unique(nlab[nlab > 0]):
            self._add(int(i) - 1, block[nlab == i])

    def update(self, other: "Accumulator") -> None:
        """
        Add the state of another accumulator to this one.

        The other accumulator's sums are first moved onto this one's
        shifts: with delta = other.shift - shift, the shifted rows gain
        delta, so sums grow by f delta and outer by
        delta S^T + S delta^T + f delta delta^T.
        """
        if other.nclasses != self.nclasses:
            raise errors.ShapeMismatch("Class count", self.nclasses,
                                       other.nclasses)
        if other.nfeatures is None:
            return
        self._check_columns(other.nfeatures)
        for j in np.flatnonzero(other.counts > 0):
            f = other.counts[j]
            s = other.sums[j]
            if self.counts[j] == 0:
                self.shifts[j] = other.shifts[j]
                delta = np.zeros_like(s)
            else:
                delta = other.shifts[j] - self.shifts[j]
            self.counts[j] += f
            self.sums[j] += s + f * delta
            self.outer[j] += other.outer[j] + np.outer(delta, s) + \
                np.outer(s, delta) + f * np.outer(delta, delta)

    def finish(self,
               n: int = 0,
               covariances: bool = True,
               lablist: Optional[List[Any]] = None,
               featlabels: Optional[List[str]] = None,
               prior: Optional[np.ndarray] = None
               ) -> MeanCov:
        """
        Derive means and covariances from the running sums.

        For a class with f samples and shifted sums S and O, d = S / f,
        mean = shift + d and the covariance is O / f - d d^T, rescaled by
        f / (f - 1) when n is 0. An accumulator that never saw a block
        gives undefined (NaN) statistics with no feature columns, as the
        direct estimator does for an empty matrix.

        Arguments
        ---------
        n : int
            Normalisation: 0 divides by f - 1, 1 divides by f.
        covariances : bool
            Whether to compute the covariance matrices.
        lablist : Optional[List]
            Class labels for the result. Defaults to 1..C.

        Returns
        -------
        result : MeanCov
            The class statistics.

        """
        check_normalisation(n)
        if lablist is None:
            lablist = list(range(1, self.nclasses + 1))
        if len(lablist) != self.nclasses:
            raise errors.ShapeMismatch("Class label count", self.nclasses,
                                       len(lablist))

        k = self._k if self._k is not None else 0
        f = self.counts.astype(ContinuousType)
        defined = self.counts > 0
        means = np.full((self._nbuckets, k), np.nan, dtype=ContinuousType)
        d = np.zeros((self._nbuckets, k), dtype=ContinuousType)
        d[defined] = self.sums[defined] / f[defined, np.newaxis]
        means[defined] = self.shifts[defined] + d[defined]

        degenerate = defined & (self.counts == 1) if n == 0 \
            else np.zeros(self._nbuckets, dtype=bool)
        covs = None
        if covariances:
            covs = np.full((k, k, self._nbuckets), np.nan,
                           dtype=ContinuousType)
            for j in np.flatnonzero(defined & ~degenerate):
                g = self.outer[j] / f[j] - np.outer(d[j], d[j])
                if n == 0:
                    g = (f[j] / (f[j] - 1)) * g
                covs[:, :, j] = g
        mark_degenerate(covs, degenerate, lablist)

        empty = [lablist[i] for i in np.flatnonzero(~defined)] \
            if self.nclasses > 0 else []
        if empty:
            log.warning("No samples found for classes {}".format(empty))
        return MeanCov(means, covs, self.counts.copy(), lablist,
                       featlabels, prior, degenerate)
