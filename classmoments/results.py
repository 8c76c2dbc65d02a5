"""Per-class mean and covariance results."""

import logging
import warnings
from typing import Any, List, NamedTuple, Optional

import numpy as np

from classmoments import errors

log = logging.getLogger(__name__)


class ClassMoments(NamedTuple):
    """
    Statistics of a single class with at least one sample.

    ``cov`` is None when only means were computed. ``degenerate`` is set
    when the class has a single sample under M-1 normalisation, in which
    case ``cov`` is all NaN.
    """

    label: Any
    mean: np.ndarray
    cov: Optional[np.ndarray]
    count: float
    degenerate: bool


def check_normalisation(n: int) -> None:
    """Raise if n is not one of the two supported normalisations."""
    if n not in (0, 1):
        raise errors.InvalidArgument("n", n, "0 (divide by M-1) or 1 "
                                     "(divide by M)")


def mark_degenerate(covs: Optional[np.ndarray],
                    degenerate: np.ndarray,
                    lablist: List[Any]
                    ) -> None:
    """Fill degenerate covariance slices with NaN and warn about them."""
    if not np.any(degenerate):
        return
    if covs is not None:
        covs[:, :, degenerate] = np.nan
    names = [lablist[i] for i in np.flatnonzero(degenerate)] \
        if lablist else ["<pooled>"]
    warnings.warn(errors.DegenerateNormalization(names), stacklevel=3)


class MeanCov:
    """
    Class means and covariances.

    Internally the statistics are stored with one slot per class, or a
    single slot when the data had no classes. The ``means`` array is
    ``(C, K)`` (``(1, K)`` when unlabelled) and ``covariances`` is
    ``(K, K, C)`` (``(K, K)`` when unlabelled). Slots of classes without
    samples are NaN, and are None when accessed through :meth:`stat`.

    Parameters
    ----------
    means : np.ndarray
        Array of shape (slots, K).
    covariances : Optional[np.ndarray]
        Array of shape (K, K, slots), or None if not computed.
    counts : np.ndarray
        Number of samples (or total weight) behind each slot.
    lablist : List
        Class labels in slot order, empty for unlabelled data.
    featlabels : Optional[List[str]]
        Feature names, passed through from the input.
    prior : Optional[np.ndarray]
        Class priors, passed through from the input.
    degenerate : Optional[np.ndarray]
        Boolean flag per slot for single-sample M-1 normalisation.

    """

    def __init__(self,
                 means: np.ndarray,
                 covariances: Optional[np.ndarray],
                 counts: np.ndarray,
                 lablist: List[Any],
                 featlabels: Optional[List[str]] = None,
                 prior: Optional[np.ndarray] = None,
                 degenerate: Optional[np.ndarray] = None
                 ) -> None:
        nslots = max(len(lablist), 1)
        assert means.shape[0] == nslots
        assert counts.shape == (nslots,)
        if covariances is not None:
            assert covariances.shape[2] == nslots
        self.means = means
        self._covs = covariances
        self.counts = counts
        self.lablist = lablist
        self.featlabels = featlabels
        self.prior = prior
        self.defined = counts > 0
        self.degenerate = degenerate if degenerate is not None \
            else np.zeros(nslots, dtype=bool)

    @property
    def covariances(self) -> Optional[np.ndarray]:
        if self._covs is None or self.nclasses > 0:
            return self._covs
        return self._covs[:, :, 0]

    @property
    def nclasses(self) -> int:
        return len(self.lablist)

    @property
    def nfeatures(self) -> int:
        return self.means.shape[1]

    def stat(self, i: int) -> Optional[ClassMoments]:
        """
        Get the statistics of the i'th class (0-based).

        Returns
        -------
        result : Optional[ClassMoments]
            None if the class had no samples.

        """
        if not self.defined[i]:
            return None
        label = self.lablist[i] if self.lablist else None
        cov = self._covs[:, :, i] if self._covs is not None else None
        return ClassMoments(label=label,
                            mean=self.means[i],
                            cov=cov,
                            count=self.counts[i],
                            degenerate=bool(self.degenerate[i]))

    def classes(self) -> List[Optional[ClassMoments]]:
        """Get the statistics of every class, None for empty ones."""
        return [self.stat(i) for i in range(self.means.shape[0])]

    def __repr__(self) -> str:
        return ("MeanCov(classes={}, features={}, defined={})".format(
            self.nclasses, self.nfeatures, int(np.sum(self.defined))))
