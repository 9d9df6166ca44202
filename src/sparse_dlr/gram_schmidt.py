# Copyright (C) 2020-2022 Markus Wallerberger, Hiroshi Shinaoka, and others
# SPDX-License-Identifier: MIT
"""Pivoted, reorthogonalized Gram-Schmidt process.

Rank-revealing factorization which greedily selects a numerically
independent subset of the rows of a matrix ``A``.  In each step, the row with
the largest residual norm (after projecting out all previously selected
rows) is taken as the next pivot, orthogonalized a second time against all
previously selected rows, and normalized.  The result is a triple
``(q, norms, piv)`` such that::

    A[piv] == R @ q,    q @ q.conj().T == I

with ``R`` lower triangular, and ``A`` is approximated by its projection onto
the rows of ``q`` to relative accuracy ``eps``::

    norm(A - (A @ q.conj().T) @ q) <~ eps * norm(A)
"""
from typing import NamedTuple
from warnings import warn
import numpy as np

EPS_WARN = 1e-14


class PivotResult(NamedTuple):
    """Result of the pivoted Gram-Schmidt process.

    Attributes:
        q (2D ndarray):
            Orthonormal rows spanning (numerically) the row space, ``(r, n)``
        norms (1D ndarray):
            Residual norm of each pivot row at the point it was selected
        piv (1D ndarray of int):
            Indices of the pivot rows into the original matrix, in the order
            they were selected
    """
    q: np.ndarray
    norms: np.ndarray
    piv: np.ndarray

    @property
    def rank(self):
        return self.piv.size


class PrecisionWarning(RuntimeWarning):
    """Warns about a tolerance requested near machine precision.

    This warning is issued if the rank cutoff ``eps`` is at or below about
    ``1e-14``.  The selection of pivots then relies on residuals that are
    dominated by rounding errors, so the resulting rank is ambiguous.  The
    result may still be usable, but consider increasing ``eps``.
    """
    pass


def pivrgs(a, eps=None, *, rank=None):
    """Pivoted reorthogonalized Gram-Schmidt on rows of ``a``.

    Arguments:

      - ``a``: Real or complex matrix of shape ``(m, n)``
      - ``eps``: Relative tolerance.  The process stops as soon as the residual
        norm of the next pivot falls below ``eps`` times the norm of the first
        (largest) pivot.
      - ``rank``: Alternatively, the number of pivots to select.

    Exactly one of ``eps`` and ``rank`` must be given.  Returns a
    ``PivotResult``.
    """
    gs = _GramSchmidt(a)
    maxrank, thresh = _check_cutoff(gs, eps, rank, gs.sqnorms.max())

    while gs.nsel < maxrank:
        sqnorms = np.where(gs.available, gs.sqnorms, -1)
        jpiv = sqnorms.argmax()
        if rank is None and not (sqnorms[jpiv] > thresh):
            break
        gs.select(jpiv)

    return gs.result()


def pivrgs_sym(a, eps=None, *, rank=None):
    """Symmetrized pivoted reorthogonalized Gram-Schmidt on rows of ``a``.

    Same as ``pivrgs``, but with the additional constraint that the rows are
    selected in pairs ``(i, m-1-i)``, preserving the symmetry of the rows
    about the center of the matrix.  If ``m`` is odd, the middle row has no
    partner: it is selected first if ``rank`` is odd or, in tolerance mode,
    if its norm is above the cutoff, and never selected otherwise.
    """
    gs = _GramSchmidt(a)
    m = gs.m
    half = m // 2
    if rank is not None and rank % 2 == 1 and m % 2 == 0:
        raise ValueError("symmetric selection requires an even rank for "
                         "matrix with even number of rows")

    with_middle = m % 2 == 1 and (rank is None or rank % 2 == 1)
    pair_sqnorms = gs.sqnorms[:half] + gs.sqnorms[::-1][:half]
    largest = pair_sqnorms.max(initial=0)
    if with_middle:
        largest = max(largest, gs.sqnorms[half])
    maxrank, thresh = _check_cutoff(gs, eps, rank, largest)

    if rank is None:
        with_middle = with_middle and gs.sqnorms[half] > thresh
    if with_middle and maxrank > 0:
        gs.select(half)

    while gs.nsel + 2 <= maxrank:
        pair_sqnorms = gs.sqnorms[:half] + gs.sqnorms[::-1][:half]
        pair_sqnorms = np.where(gs.available[:half], pair_sqnorms, -1)
        jpiv = pair_sqnorms.argmax()
        if rank is None and not (pair_sqnorms[jpiv] > thresh):
            break
        gs.select(jpiv)
        gs.select(m - 1 - jpiv)

    return gs.result()


def _check_cutoff(gs, eps, rank, largest):
    """Return maximum rank and squared norm threshold"""
    maxrank = min(gs.m, gs.n)
    if (eps is None) == (rank is None):
        raise ValueError("exactly one of eps and rank must be given")
    if rank is not None:
        if not (0 <= rank <= maxrank) or int(rank) != rank:
            raise ValueError(f"rank must be an integer in [0, {maxrank}]")
        return int(rank), 0.0

    if not (eps > 0):
        raise ValueError("tolerance eps must be positive")
    if eps <= EPS_WARN:
        warn(f"Tolerance eps = {eps:.2g} is near or below machine precision: "
             "selection of pivots might fail, consider increasing eps.",
             PrecisionWarning, 3)
    return maxrank, eps**2 * largest


class _GramSchmidt:
    """State of the Gram-Schmidt process: residual rows and selected pivots"""
    def __init__(self, a):
        a = np.array(a)
        if a.ndim != 2:
            raise ValueError("a must be of matrix form")
        if not np.issubdtype(a.dtype, np.inexact):
            a = a.astype(float)

        self.m, self.n = a.shape
        self.res = a
        self.sqnorms = _sqnorms(a)
        self.available = np.ones(self.m, bool)

        maxrank = min(self.m, self.n)
        self.nsel = 0
        self.q = np.zeros((maxrank, self.n), a.dtype)
        self.norms = np.zeros(maxrank)
        self.piv = np.zeros(maxrank, int)

    def select(self, j):
        k = self.nsel
        if not (self.sqnorms[j] > 0):
            raise ValueError("matrix has lower rank than requested")

        # The residual of row j is already orthogonal to the previous pivots
        # up to rounding, but the errors accumulate.  Orthogonalize it again.
        q_prev = self.q[:k]
        v = self.res[j] - (q_prev.conj() @ self.res[j]) @ q_prev
        self.q[k] = v / np.linalg.norm(v)
        self.norms[k] = np.sqrt(self.sqnorms[j])
        self.piv[k] = j
        self.available[j] = False
        self.nsel += 1

        # Project new pivot out of the remaining rows
        rest = self.available.nonzero()[0]
        res_rest = self.res[rest]
        # Row sums have a fixed summation order, independent of the number of
        # rows, so repeating the process on a subset of rows is reproducible.
        coef = (res_rest * self.q[k].conj()).sum(axis=1)
        res_rest -= np.outer(coef, self.q[k])
        self.res[rest] = res_rest
        self.sqnorms[rest] = _sqnorms(res_rest)

    def result(self):
        k = self.nsel
        return PivotResult(self.q[:k].copy(), self.norms[:k].copy(),
                           self.piv[:k].copy())


def _sqnorms(a):
    """Squared Euclidean norms of the rows of a"""
    return np.einsum('ij,ij->i', a.real, a.real) + \
        np.einsum('ij,ij->i', a.imag, a.imag)
