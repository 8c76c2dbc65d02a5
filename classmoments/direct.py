"""Direct estimation of class means and covariances from in-memory data."""

import logging
from typing import Any, List, Optional, Tuple

import numpy as np

from classmoments.basetypes import ContinuousType
from classmoments.dataset import LabelledData
from classmoments.results import MeanCov, check_normalisation, mark_degenerate

log = logging.getLogger(__name__)


def covm(x: np.ndarray, n: int = 0) -> np.ndarray:
    """
    Covariance matrix of the rows of x.

    Arguments
    ---------
    x : np.ndarray
        An (M, K) array of samples.
    n : int
        Normalisation: 0 divides by M - 1, 1 divides by M.

    Returns
    -------
    g : np.ndarray
        The (K, K) covariance matrix.

    """
    m = x.shape[0]
    xc = x - x.mean(axis=0)
    return (xc.T @ xc) / (m - 1 + n)


def _moments(x: np.ndarray, n: int,
             covariances: bool) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    u = x.mean(axis=0)
    g = covm(x, n) if covariances else None
    return u, g


def _empty(nslots: int, k: int,
           covariances: bool) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    means = np.full((nslots, k), np.nan, dtype=ContinuousType)
    covs = np.full((k, k, nslots), np.nan, dtype=ContinuousType) \
        if covariances else None
    return means, covs


def _finalise(a: LabelledData, lablist: List[Any], means: np.ndarray,
              covs: Optional[np.ndarray], counts: np.ndarray,
              degenerate: np.ndarray) -> MeanCov:
    mark_degenerate(covs, degenerate, lablist)
    empty = [lablist[i] for i in np.flatnonzero(~(counts > 0))] \
        if lablist else []
    if empty:
        log.warning("No samples found for classes {}".format(empty))
    return MeanCov(means, covs, counts, lablist, a.featlabels, a.prior,
                   degenerate)


def pooled_meancov(a: LabelledData, n: int = 0,
                   covariances: bool = True) -> MeanCov:
    """Mean and covariance of all rows of a, ignoring any labels."""
    x = a.data
    m, k = x.shape
    means, covs = _empty(1, k, covariances)
    degenerate = np.array([m == 1 and n == 0])
    if m > 0:
        means[0], g = _moments(x, n, covariances and not degenerate[0])
        if g is not None:
            covs[:, :, 0] = g
    counts = np.array([m], dtype=np.int64)
    return _finalise(a, [], means, covs, counts, degenerate)


def hard_meancov(a: LabelledData, n: int = 0,
                 covariances: bool = True) -> MeanCov:
    """Mean and covariance of the rows carrying each hard label."""
    assert a.nlab is not None
    x = a.data
    c = a.nclasses
    k = x.shape[1]
    means, covs = _empty(c, k, covariances)
    counts = np.array([np.sum(a.nlab == i) for i in range(1, c + 1)],
                      dtype=np.int64)
    degenerate = (counts == 1) if n == 0 else np.zeros(c, dtype=bool)
    for j in np.flatnonzero(counts > 0):
        rows = x[a.nlab == j + 1]
        means[j], g = _moments(rows, n, covariances and not degenerate[j])
        if g is not None:
            covs[:, :, j] = g
    return _finalise(a, a.lablist, means, covs, counts, degenerate)


def soft_meancov(a: LabelledData, n: int = 0,
                 covariances: bool = True) -> MeanCov:
    """
    Weighted means and covariances from soft labels.

    Each class's weights are first scaled to have mean one. The weighted
    covariance is obtained from the biased covariance of the rows scaled
    by the square root of the weights, corrected with the weighted mean
    and the square-root-weighted mean. The M - 1 rescaling is applied
    after that correction.
    """
    assert a.targets is not None
    x = a.data
    m, k = x.shape
    c = a.nclasses
    means, covs = _empty(c, k, covariances)
    counts = a.targets.sum(axis=0)
    degenerate = (counts > 0) & (m == 1) if n == 0 \
        else np.zeros(c, dtype=bool)
    for i in np.flatnonzero(counts > 0):
        g = a.targets[:, i]
        g = g / g.mean()
        means[i] = np.mean(x * g[:, np.newaxis], axis=0)
        if not covariances or degenerate[i]:
            continue
        xs = x * np.sqrt(g)[:, np.newaxis]
        u = xs.mean(axis=0)
        gi = covm(xs, 1) - np.outer(means[i], means[i]) + np.outer(u, u)
        if n == 0:
            gi = m * gi / (m - 1)
        covs[:, :, i] = gi
    return _finalise(a, a.lablist, means, covs, counts, degenerate)


def estimate(a: LabelledData, n: int = 0,
             covariances: bool = True) -> MeanCov:
    """
    Compute the class means and covariances of an in-memory dataset.

    Arguments
    ---------
    a : LabelledData
        The data and its (hard, soft or absent) class membership.
    n : int
        Normalisation: 0 divides by M - 1 (unbiased), 1 divides by M.
    covariances : bool
        Whether to compute covariances as well as means.

    Returns
    -------
    result : MeanCov
        Means of shape (C, K) and covariances of shape (K, K, C).

    """
    check_normalisation(n)
    log.debug("Estimating moments of {} samples, {} features, {} classes"
              .format(a.shape[0], a.shape[1], a.nclasses))
    if a.soft:
        if a.nclasses == 0:
            log.warning("The dataset has soft labels but no targets "
                        "defined: using all samples as one class")
            return pooled_meancov(a, n, covariances)
        return soft_meancov(a, n, covariances)
    if a.nclasses == 0:
        return pooled_meancov(a, n, covariances)
    return hard_meancov(a, n, covariances)
