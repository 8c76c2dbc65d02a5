"""Labelled data container."""

from typing import Any, List, Optional

import numpy as np

from classmoments import errors
from classmoments.basetypes import ContinuousType, LabelType


class LabelledData:
    """
    An in-memory data matrix with optional class membership.

    Class membership is either hard (``nlab``, an integer per row in
    ``0..C`` where 0 marks an unlabelled row) or soft (``targets``, an
    ``(M, C)`` array of non-negative weights). Without either, the data
    is a single unlabelled pool and has zero classes.

    Arguments
    ---------
    data : np.ndarray
        The (M, K) sample matrix.
    nlab : Optional[np.ndarray]
        Hard labels, one per row.
    targets : Optional[np.ndarray]
        Soft label weights, one row per sample and one column per class.
    lablist : Optional[List]
        Class names in result order. Defaults to ``1..C``.
    featlabels : Optional[List[str]]
        Feature (column) names, passed through to results.
    prior : Optional[np.ndarray]
        Class prior probabilities, passed through to results.

    """

    def __init__(self,
                 data: np.ndarray,
                 nlab: Optional[np.ndarray] = None,
                 targets: Optional[np.ndarray] = None,
                 lablist: Optional[List[Any]] = None,
                 featlabels: Optional[List[str]] = None,
                 prior: Optional[np.ndarray] = None
                 ) -> None:
        data = np.asarray(data, dtype=ContinuousType)
        if data.ndim != 2:
            raise errors.InvalidArgument("data", data.shape, "a 2D array")
        if nlab is not None and targets is not None:
            raise errors.InvalidArgument(
                "targets", "<array>", "None when hard labels are given")
        m = data.shape[0]

        if nlab is not None:
            nlab = np.asarray(nlab).ravel().astype(LabelType)
            if nlab.shape[0] != m:
                raise errors.ShapeMismatch("Label count", m, nlab.shape[0])
        if targets is not None:
            targets = np.asarray(targets, dtype=ContinuousType)
            if targets.ndim == 1:
                targets = targets[:, np.newaxis]
            if targets.shape[0] != m:
                raise errors.ShapeMismatch("Target rows", m, targets.shape[0])
            if np.any(targets < 0):
                raise errors.InvalidArgument(
                    "targets", "<array>", "non-negative weights")

        if lablist is None:
            if targets is not None:
                c = targets.shape[1]
            elif nlab is not None and nlab.size > 0:
                c = int(nlab.max())
            else:
                c = 0
            lablist = list(range(1, c + 1))
        c = len(lablist)
        if c > 0 and nlab is None and targets is None:
            nlab = np.zeros(m, dtype=LabelType)

        if nlab is not None and nlab.size > 0 and \
                (nlab.min() < 0 or nlab.max() > c):
            raise errors.InvalidArgument(
                "nlab", (int(nlab.min()), int(nlab.max())),
                f"labels in the range 0..{c}")
        if targets is not None and targets.shape[1] != c:
            raise errors.ShapeMismatch("Target columns", c, targets.shape[1])
        if featlabels is not None and len(featlabels) != data.shape[1]:
            raise errors.ShapeMismatch("Feature label count",
                                       data.shape[1], len(featlabels))

        self.data = data
        self.nlab = nlab
        self.targets = targets
        self.lablist = list(lablist)
        self.featlabels = featlabels
        self.prior = prior

    @property
    def shape(self) -> tuple:
        return self.data.shape

    @property
    def nclasses(self) -> int:
        return len(self.lablist)

    @property
    def soft(self) -> bool:
        return self.targets is not None

    def __len__(self) -> int:
        return self.data.shape[0]
