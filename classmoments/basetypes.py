"""Base classes for datatypes."""

import logging
from types import TracebackType
from typing import List, NamedTuple, Optional, Sized, Tuple

import numpy as np

log = logging.getLogger(__name__)

# Definitions of numerical types used in the project.
ContinuousType = np.float64
LabelType = np.int32


class FixedSlice(NamedTuple):
    """simpler slice."""

    start: int
    stop: int


class Block(NamedTuple):
    """A block of rows read from a BlockSource.

    ``next`` is the cursor to pass to the following read, or None once
    the source is exhausted.
    """

    data: np.ndarray
    nlab: Optional[np.ndarray]
    next: Optional[int]


class BlockSource(Sized):
    """Abstract pull interface over a dataset stored as row blocks."""

    def __init__(self) -> None:
        """Baseclass for block backends."""
        self._shape: Tuple[int, int] = (0, 0)
        self._lablist: List = []
        self._featlabels: List[str] = []
        self._prior: Optional[np.ndarray] = None
        self._soft: bool = False
        self._open: bool = False

    @property
    def shape(self) -> Tuple[int, int]:
        """Get the (rows, features) size hint of the source.

        Returns
        -------
        shape: Tuple[int, int]

        """
        return self._shape

    @property
    def nclasses(self) -> int:
        """Get the number of declared classes (0 for unlabelled data)."""
        return len(self._lablist)

    @property
    def lablist(self) -> List:
        """
        Get the class labels in the order used for the results.

        Returns
        -------
        l : List
            One entry per class. Hard label ``i`` in a block refers to
            ``lablist[i - 1]``.

        """
        return self._lablist

    @property
    def featlabels(self) -> List[str]:
        """Get text descriptors of each (column) feature."""
        return self._featlabels

    @property
    def prior(self) -> Optional[np.ndarray]:
        """Get the class prior probabilities, if any were declared."""
        return self._prior

    @property
    def soft(self) -> bool:
        """Whether the source carries soft (weighted) labels."""
        return self._soft

    def read(self, cursor: int) -> Block:
        """
        Read the block starting at cursor.

        Parameters
        ----------
        cursor : int
            Row position to read from. The first call uses 0, later calls
            use the ``next`` field of the previous block.

        """
        if not self._open:
            raise RuntimeError("Block access must be within context manager")
        return self._readblock(cursor)

    def __enter__(self) -> None:
        self._open = True

    def __exit__(self,
                 ex_type: type,
                 ex_val: Exception,
                 ex_tb: TracebackType
                 ) -> None:
        self._open = False

    def _readblock(self, cursor: int) -> Block:
        """Perform the block read. This gets overridden by children."""
        raise NotImplementedError

    def __len__(self) -> int:
        """Return the number of rows (1st dimension)."""
        return self._shape[0]
