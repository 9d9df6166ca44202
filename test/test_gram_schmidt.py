# Copyright (C) 2020-2022 Markus Wallerberger, Hiroshi Shinaoka, and others
# SPDX-License-Identifier: MIT
import numpy as np
import pytest

from sparse_dlr import gram_schmidt


def _rand(rng, shape, dtype):
    if dtype == complex:
        return rng.rand(*shape) + 1j * rng.rand(*shape)
    return rng.rand(*shape)


def low_rank_matrix(rng, m, n, dtype):
    """Random matrix with singular values 2**-k, k = 0, ..., n-1"""
    u = gram_schmidt.pivrgs(_rand(rng, (m, m), dtype), rank=m).q
    v = gram_schmidt.pivrgs(_rand(rng, (n, n), dtype), rank=n).q
    for q in u, v:
        np.testing.assert_allclose(q.conj().T @ q, np.eye(q.shape[0]),
                                   atol=1e-14, rtol=0)
    v *= 2.0**-np.arange(n)[:, None]
    return u[:, :n] @ v


@pytest.mark.parametrize("dtype", [float, complex])
def test_low_rank(dtype):
    rng = np.random.RandomState(4711)
    m, n, eps = 50, 40, 1e-6
    a = low_rank_matrix(rng, m, n, dtype)
    q, norms, piv = res = gram_schmidt.pivrgs(a, eps)

    r = res.rank
    assert q.shape == (r, n) and norms.shape == piv.shape == (r,)
    assert np.ceil(np.log2(1/eps)) - 3 <= r <= np.ceil(np.log2(1/eps)) + 3
    assert (np.diff(norms) <= 0).all()
    assert np.linalg.norm(np.eye(r) - q @ q.conj().T) <= 1e-14

    # Projection of a random combination of rows onto the row space of q
    x = _rand(rng, (m,), dtype) * 2 - 1
    x /= np.linalg.norm(x)
    b = a.conj().T @ x
    assert np.linalg.norm(b - q.conj().T @ (q @ b)) < 10 * eps

    # Projection of all of a onto the row space of q
    assert np.linalg.norm(a - (a @ q.conj().T) @ q) < 10 * eps

    # Repeating the process on the pivot rows reproduces q in order
    qthin, _, pivthin = gram_schmidt.pivrgs(a[piv], eps)
    np.testing.assert_array_equal(pivthin, np.arange(r))
    assert np.linalg.norm(q - qthin) <= 1e-14


def test_fixed_rank():
    rng = np.random.RandomState(4712)
    a = low_rank_matrix(rng, 30, 20, float)
    res = gram_schmidt.pivrgs(a, rank=5)
    assert res.rank == 5
    ref = gram_schmidt.pivrgs(a, rank=15)
    np.testing.assert_array_equal(ref.piv[:5], res.piv)

    res = gram_schmidt.pivrgs(a, rank=0)
    assert res.q.shape == (0, 20)


def test_exact_rank():
    a = np.zeros((5, 3))
    a[1] = [1, 2, 3]
    a[3] = [0, 1, 1]
    res = gram_schmidt.pivrgs(a, 1e-8)
    np.testing.assert_array_equal(res.piv, [1, 3])
    with pytest.raises(ValueError):
        gram_schmidt.pivrgs(a, rank=3)


def test_integer_input():
    res = gram_schmidt.pivrgs([[3, 0], [0, 4]], 1e-10)
    np.testing.assert_array_equal(res.piv, [1, 0])
    np.testing.assert_allclose(res.norms, [4, 3])
    np.testing.assert_allclose(res.q, [[0, 1], [1, 0]])


def check_pairs(piv, m):
    piv = list(piv)
    if m % 2 == 1 and m // 2 in piv:
        assert piv[0] == m // 2
        piv = piv[1:]
    assert len(piv) % 2 == 0
    for i in range(0, len(piv), 2):
        assert piv[i] + piv[i+1] == m - 1


@pytest.mark.parametrize("m", [30, 31])
@pytest.mark.parametrize("dtype", [float, complex])
def test_sym(m, dtype):
    rng = np.random.RandomState(4713)
    n, eps = 24, 1e-6
    a = low_rank_matrix(rng, m, n, dtype)
    q, norms, piv = res = gram_schmidt.pivrgs_sym(a, eps)

    check_pairs(piv, m)
    assert (m // 2 in piv) == (m % 2 == 1)
    r = res.rank
    assert np.linalg.norm(np.eye(r) - q @ q.conj().T) <= 1e-14
    assert np.linalg.norm(a - (a @ q.conj().T) @ q) < 10 * eps


def test_sym_rank():
    rng = np.random.RandomState(4714)
    a_even = rng.rand(10, 8)
    a_odd = rng.rand(11, 8)

    piv = gram_schmidt.pivrgs_sym(a_even, rank=6).piv
    assert piv.size == 6
    check_pairs(piv, 10)

    piv = gram_schmidt.pivrgs_sym(a_odd, rank=5).piv
    assert piv.size == 5 and piv[0] == 5
    check_pairs(piv, 11)

    piv = gram_schmidt.pivrgs_sym(a_odd, rank=4).piv
    assert piv.size == 4 and 5 not in piv
    check_pairs(piv, 11)

    with pytest.raises(ValueError):
        gram_schmidt.pivrgs_sym(a_even, rank=5)


def test_sym_zero_middle():
    rng = np.random.RandomState(4717)
    a = rng.rand(7, 5)
    a[3] = 0
    q, _, piv = res = gram_schmidt.pivrgs_sym(a, 1e-8)
    assert 3 not in piv
    assert res.rank == 4
    check_pairs(piv, 7)
    np.testing.assert_allclose(q @ q.T, np.eye(4), atol=1e-14, rtol=0)

    # An odd rank requires the middle row
    with pytest.raises(ValueError):
        gram_schmidt.pivrgs_sym(a, rank=3)


def test_invalid():
    a = np.random.RandomState(4715).rand(6, 4)
    with pytest.raises(ValueError):
        gram_schmidt.pivrgs(a)
    with pytest.raises(ValueError):
        gram_schmidt.pivrgs(a, 1e-6, rank=2)
    with pytest.raises(ValueError):
        gram_schmidt.pivrgs(a, rank=5)
    with pytest.raises(ValueError):
        gram_schmidt.pivrgs(a, rank=1.5)
    with pytest.raises(ValueError):
        gram_schmidt.pivrgs(a, -1e-6)
    with pytest.raises(ValueError):
        gram_schmidt.pivrgs(a[0], 1e-6)


def test_precision_warning():
    a = np.random.RandomState(4716).rand(6, 4)
    with pytest.warns(gram_schmidt.PrecisionWarning):
        res = gram_schmidt.pivrgs(a, 1e-15)
    assert res.rank == 4
    with pytest.warns(gram_schmidt.PrecisionWarning):
        gram_schmidt.pivrgs_sym(a, 1e-14)
