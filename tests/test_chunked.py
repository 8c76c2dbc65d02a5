"""Tests for the chunked driver."""

import numpy as np
import pytest

from classmoments import errors
from classmoments.basetypes import Block, BlockSource
from classmoments.chunked import estimate_chunked
from classmoments.dataset import LabelledData
from classmoments.direct import estimate
from classmoments.sources import ArrayBlockSource


def _assert_same(a, b):
    np.testing.assert_allclose(a.means, b.means, equal_nan=True)
    np.testing.assert_allclose(a.covariances, b.covariances,
                               rtol=1e-7, atol=1e-9, equal_nan=True)
    np.testing.assert_array_equal(a.defined, b.defined)


@pytest.mark.parametrize("n", [0, 1])
@pytest.mark.parametrize("batchrows", [1, 7, 50, 1000])
def test_chunk_invariance_contiguous(random_class_data, n, batchrows):
    d = random_class_data
    direct = estimate(LabelledData(d.data, nlab=d.nlab), n=n)
    src = ArrayBlockSource(d.data, nlab=d.nlab, batchrows=batchrows)
    _assert_same(estimate_chunked(src, n=n), direct)


@pytest.mark.parametrize("n", [0, 1])
def test_chunk_invariance_arbitrary(random_class_data, n):
    d = random_class_data
    m = d.data.shape[0]
    perm = d.rnd.permutation(m)
    cuts = np.sort(d.rnd.choice(np.arange(1, m), size=4, replace=False))
    parts = np.split(perm, cuts)
    direct = estimate(LabelledData(d.data, nlab=d.nlab), n=n)
    src = ArrayBlockSource(d.data, nlab=d.nlab, partitions=parts)
    _assert_same(estimate_chunked(src, n=n), direct)


@pytest.mark.parametrize("n", [0, 1])
def test_chunk_invariance_pooled(random_class_data, n):
    d = random_class_data
    direct = estimate(LabelledData(d.data), n=n)
    src = ArrayBlockSource(d.data, batchrows=11)
    res = estimate_chunked(src, n=n)
    _assert_same(res, direct)
    assert res.covariances.shape == direct.covariances.shape


def test_class_missing_from_some_blocks(small_data):
    x, nlab = small_data
    src = ArrayBlockSource(x, nlab=nlab, sizes=[2, 2])
    res = estimate_chunked(src, n=0)
    np.testing.assert_allclose(res.means, [[2., 3.], [6., 7.]])
    np.testing.assert_allclose(res.covariances[:, :, 0], np.full((2, 2), 2.))


def test_chunked_empty_class(small_data):
    x, nlab = small_data
    src = ArrayBlockSource(x, nlab=np.where(nlab == 2, 3, nlab),
                           lablist=[1, 2, 3], batchrows=3)
    res = estimate_chunked(src, n=0)
    assert res.stat(1) is None
    assert list(res.counts) == [2, 0, 2]


def test_chunked_passes_metadata(small_data):
    x, nlab = small_data
    prior = np.array([0.5, 0.5])
    src = ArrayBlockSource(x, nlab=nlab, lablist=["A", "B"],
                           featlabels=["f1", "f2"], prior=prior,
                           batchrows=1)
    res = estimate_chunked(src, n=1, covariances=False)
    assert res.lablist == ["A", "B"]
    assert res.featlabels == ["f1", "f2"]
    assert res.prior is prior
    assert res.covariances is None


class SoftSource(BlockSource):
    def __init__(self):
        super().__init__()
        self._shape = (4, 2)
        self._lablist = [1, 2]
        self._soft = True


def test_chunked_rejects_soft():
    with pytest.raises(errors.InvalidArgument):
        estimate_chunked(SoftSource())


class FailingSource(BlockSource):
    def __init__(self, x, fail_at):
        super().__init__()
        self._shape = x.shape
        self._data = x
        self._fail_at = fail_at

    def _readblock(self, cursor):
        if cursor == self._fail_at:
            raise IOError("disk went away")
        return Block(self._data[cursor:cursor + 1], None, cursor + 1)


def test_read_failure_aborts(small_data):
    x, _ = small_data
    src = FailingSource(x, 2)
    with pytest.raises(IOError):
        estimate_chunked(src)
    assert not src._open


class ShiftingSource(BlockSource):
    def __init__(self):
        super().__init__()
        self._shape = (4, 2)

    def _readblock(self, cursor):
        k = 2 if cursor == 0 else 3
        return Block(np.ones((2, k)), None, 1 if cursor == 0 else None)


def test_column_change_between_blocks():
    with pytest.raises(errors.ShapeMismatch):
        estimate_chunked(ShiftingSource())


def test_chunked_bad_normalisation(small_data):
    x, nlab = small_data
    with pytest.raises(errors.InvalidArgument):
        estimate_chunked(ArrayBlockSource(x, nlab=nlab), n=5)


def test_chunked_progress(small_data, mocker):
    x, nlab = small_data
    m_tqdm = mocker.patch("classmoments.chunked.tqdm")
    src = ArrayBlockSource(x, nlab=nlab, batchrows=3)
    estimate_chunked(src, progress=True)
    m_tqdm.assert_called_once_with(total=4, disable=False)
    pbar = m_tqdm.return_value.__enter__.return_value
    assert pbar.update.call_count == 2


@pytest.mark.parametrize("offset", [1e4, 1e8])
@pytest.mark.parametrize("n", [0, 1])
def test_chunk_invariance_large_offset(offset, n):
    rnd = np.random.RandomState(5)
    x = rnd.normal(size=(1000, 2)) + offset
    nlab = np.ones(1000, dtype=int)
    direct = estimate(LabelledData(x, nlab=nlab), n=n)
    res = estimate_chunked(ArrayBlockSource(x, nlab=nlab, batchrows=100), n=n)
    np.testing.assert_allclose(res.means, direct.means)
    np.testing.assert_allclose(res.covariances, direct.covariances,
                               rtol=1e-6, atol=1e-8)
    assert np.all(np.linalg.eigvalsh(res.covariances[:, :, 0]) > 0)


def test_chunked_single_row_pooled():
    x = np.array([[1., 2.]])
    with pytest.warns(errors.DegenerateNormalization, match="<pooled>"):
        res = estimate_chunked(ArrayBlockSource(x), n=0)
    assert res.degenerate[0]
    assert np.all(np.isnan(res.covariances))
    np.testing.assert_allclose(res.means, x)


class EmptySource(BlockSource):
    def _readblock(self, cursor):
        return Block(np.zeros((0, 0)), None, None)


def test_chunked_empty_matches_direct():
    res = estimate_chunked(EmptySource(), n=0)
    direct = estimate(LabelledData(np.zeros((0, 0))), n=0)
    assert res.means.shape == direct.means.shape == (1, 0)
    assert res.covariances.shape == direct.covariances.shape == (0, 0)
    assert res.stat(0) is None
    assert direct.stat(0) is None
