"""Block sources over in-memory arrays and HDF5 files."""

import logging
from types import TracebackType
from typing import Any, List, Optional, Sequence, Union

import numpy as np
import tables

from classmoments import errors
from classmoments.basetypes import (Block, BlockSource, ContinuousType,
                                    FixedSlice, LabelType)
from classmoments.dataset import LabelledData
from classmoments.iteration import batch_slices, next_cursor, split_sizes
from classmoments.util import block_mb, mb_to_rows

log = logging.getLogger(__name__)

RowIndex = Union[FixedSlice, np.ndarray]


class ArrayBlockSource(BlockSource):
    """
    Serve an in-memory dataset as a sequence of blocks.

    The blocks are given either as a fixed number of rows per block, a
    list of block lengths, or a list of row index arrays (which need not
    be contiguous). The cursor is the index of the block to read.

    Arguments
    ---------
    data : np.ndarray
        The (M, K) sample matrix.
    nlab : Optional[np.ndarray]
        Hard labels in 0..C for each row.
    batchrows : Optional[int]
        Rows per block. Defaults to the whole array as one block.
    sizes : Optional[Sequence[int]]
        Explicit lengths of consecutive blocks.
    partitions : Optional[Sequence[np.ndarray]]
        Explicit row indices of each block.
    lablist : Optional[List]
        Class labels, defaults to 1..max(nlab).

    """

    def __init__(self,
                 data: np.ndarray,
                 nlab: Optional[np.ndarray] = None,
                 batchrows: Optional[int] = None,
                 sizes: Optional[Sequence[int]] = None,
                 partitions: Optional[Sequence[np.ndarray]] = None,
                 lablist: Optional[List[Any]] = None,
                 featlabels: Optional[List[str]] = None,
                 prior: Optional[np.ndarray] = None
                 ) -> None:
        super().__init__()
        a = LabelledData(data, nlab=nlab, lablist=lablist,
                         featlabels=featlabels, prior=prior)
        m = len(a)
        if sum(x is not None for x in (batchrows, sizes, partitions)) > 1:
            raise errors.InvalidArgument(
                "batchrows/sizes/partitions", "several",
                "at most one way of splitting the data")
        blocks: List[RowIndex]
        if partitions is not None:
            blocks = [np.asarray(p, dtype=int).ravel() for p in partitions]
            rows = np.sort(np.concatenate(blocks)) if blocks \
                else np.zeros(0, dtype=int)
            if rows.shape[0] != m or np.any(rows != np.arange(m)):
                raise errors.ShapeMismatch(
                    "Partition rows (each row exactly once)", m,
                    rows.shape[0])
        elif sizes is not None:
            if sum(sizes) != m:
                raise errors.ShapeMismatch("Total block rows", m, sum(sizes))
            blocks = list(split_sizes(list(sizes)))
        else:
            blocks = list(batch_slices(batchrows or max(m, 1), m))

        self._data = a.data
        self._nlab = a.nlab
        self._blocks = blocks
        self._shape = a.shape
        self._lablist = a.lablist
        self._featlabels = a.featlabels or []
        self._prior = a.prior

    @property
    def nblocks(self) -> int:
        return len(self._blocks)

    def _readblock(self, cursor: int) -> Block:
        if not 0 <= cursor < max(len(self._blocks), 1):
            raise errors.InvalidArgument("cursor", cursor,
                                         f"0..{len(self._blocks) - 1}")
        if not self._blocks:
            return Block(self._data[:0], None if self._nlab is None
                         else self._nlab[:0], None)
        ix = self._blocks[cursor]
        if isinstance(ix, FixedSlice):
            ix = slice(ix.start, ix.stop)
        nlab = self._nlab[ix] if self._nlab is not None else None
        nxt = cursor + 1 if cursor + 1 < len(self._blocks) else None
        return Block(self._data[ix], nlab, nxt)


def write_h5(a: LabelledData, path: str, title: str = "classmoments") -> None:
    """
    Write a hard-labelled or unlabelled dataset to an HDF5 file.

    The file holds a ``data`` CArray of rows, an optional ``nlab`` CArray
    of labels and string arrays for the feature labels. Class labels are
    stored as an integer array when they are all integers and as strings
    otherwise, so they read back with the same values.
    """
    if a.soft:
        raise errors.InvalidArgument("a", "soft labels",
                                     "hard labelled or unlabelled data")
    filters = tables.Filters(complevel=1, complib="blosc:lz4")
    m, k = a.shape
    with tables.open_file(path, mode="w", title=title) as hfile:
        data = hfile.create_carray(hfile.root, name="data",
                                   atom=tables.Float64Atom(shape=(k,)),
                                   shape=(m,), filters=filters)
        data[:] = a.data
        hfile.root._v_attrs.N = m
        hfile.root._v_attrs.K = k
        if a.nlab is not None:
            nlab = hfile.create_carray(hfile.root, name="nlab",
                                       atom=tables.Int32Atom(),
                                       shape=(m,), filters=filters)
            nlab[:] = a.nlab
        if a.lablist and all(isinstance(l, (int, np.integer))
                             for l in a.lablist):
            hfile.create_array(hfile.root, name="lablist",
                               obj=np.asarray(a.lablist, dtype=np.int64))
        else:
            _make_str_vlarray(hfile, "lablist",
                              [str(l) for l in a.lablist])
        _make_str_vlarray(hfile, "featlabels", a.featlabels or [])
        if a.prior is not None:
            hfile.create_array(hfile.root, name="prior",
                               obj=np.asarray(a.prior, dtype=np.float64))
    log.info("Wrote {} rows of {} features to {}".format(m, k, path))


def _make_str_vlarray(h5file: tables.File,
                      name: str,
                      attribute: List[str]
                      ) -> None:
    vlarray = h5file.create_vlarray(h5file.root, name=name,
                                    atom=tables.VLStringAtom())
    for a in attribute:
        vlarray.append(a.encode())


def _read_lablist(h5file: tables.File) -> List[Any]:
    node = h5file.root.lablist
    if isinstance(node, tables.VLArray):
        return [l.decode() for l in node.read()]
    return [int(l) for l in node.read()]


class H5BlockSource(BlockSource):
    """
    Read blocks of rows from an HDF5 file written by ``write_h5``.

    Arguments
    ---------
    path : str
        The HDF5 file.
    batch_mb : float
        Approximate size in megabytes of each block read.
    batchrows : Optional[int]
        Rows per block, overriding ``batch_mb``.

    """

    def __init__(self, path: str, batch_mb: float = 10.0,
                 batchrows: Optional[int] = None) -> None:
        super().__init__()
        self._path = path
        with tables.open_file(self._path, "r") as hfile:
            carray = hfile.root.data
            self._shape = (carray.shape[0], carray.atom.dtype.shape[0])
            self._labelled = hasattr(hfile.root, "nlab")
            self._lablist = _read_lablist(hfile)
            self._featlabels = [l.decode()
                                for l in hfile.root.featlabels.read()]
            if hasattr(hfile.root, "prior"):
                self._prior = hfile.root.prior.read()
        self.batchrows = batchrows if batchrows else \
            mb_to_rows(batch_mb, self._shape[1], self._labelled)

    def __enter__(self) -> None:
        self._hfile = tables.open_file(self._path, "r")
        self._carray = self._hfile.root.data
        if self._labelled:
            self._nlabarray = self._hfile.root.nlab
        super().__enter__()

    def __exit__(self, ex_type: type, ex_val: Exception,
                 ex_tb: TracebackType) -> None:
        self._hfile.close()
        del(self._carray)
        if hasattr(self, "_nlabarray"):
            del(self._nlabarray)
        del(self._hfile)
        super().__exit__(ex_type, ex_val, ex_tb)

    def _readblock(self, cursor: int) -> Block:
        m = self._shape[0]
        s = FixedSlice(cursor, min(cursor + self.batchrows, m))
        data = self._carray[s.start:s.stop].astype(ContinuousType)
        nlab = self._nlabarray[s.start:s.stop].astype(LabelType) \
            if self._labelled else None
        log.debug("Read rows {}:{} from {}".format(s.start, s.stop,
                                                   self._path))
        return Block(data, nlab, next_cursor(s, m))


def materialise(source: BlockSource,
                max_block_mb: float = 200.0) -> LabelledData:
    """
    Read a whole block source into memory.

    Arguments
    ---------
    source : BlockSource
        The source to read.
    max_block_mb : float
        Largest in-memory size allowed for the materialised data. Use
        ``np.inf`` to disable the check.

    Returns
    -------
    a : LabelledData
        The concatenated data with the source's labels and metadata.

    """
    m, k = source.shape
    size = block_mb(m, k, source.nclasses > 0)
    if size > max_block_mb:
        raise errors.BlockTooLarge(size, max_block_mb)
    log.info("Materialising {} rows ({:0.2f}MB)".format(m, size))
    datas, nlabs = [], []
    with source:
        cursor: Optional[int] = 0
        while cursor is not None:
            b = source.read(cursor)
            datas.append(b.data)
            if b.nlab is not None:
                nlabs.append(b.nlab)
            cursor = b.next
    data = np.concatenate(datas, axis=0)
    nlab = np.concatenate(nlabs) if nlabs else None
    return LabelledData(data, nlab=nlab, lablist=source.lablist,
                        featlabels=source.featlabels or None,
                        prior=source.prior)
