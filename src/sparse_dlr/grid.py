# Copyright (C) 2020-2022 Markus Wallerberger, Hiroshi Shinaoka, and others
# SPDX-License-Identifier: MIT
import numpy as np
from scipy.interpolate import BarycentricInterpolator

from . import _gauss
from . import _util
from . import kernel

DEFAULT_ORDER = 24
DEFAULT_NMAX_FLOOR = 20


class FineParams:
    """Parameters of the fine composite grids in imaginary time and frequency.

    The fine grids discretize the analytic continuation kernel to double
    machine precision, and are used as the candidate sets from which the DLR
    frequencies and the imaginary time and frequency nodes are selected.  The
    panel counts are derived from the cutoff ``lambda_`` as follows::

        npom == max(ceil(log2(lambda_)), 1)       # frequency panels on (0, Λ]
        npt  == max(ceil(log2(lambda_)) - 2, 1)   # time panels on (0, 1/2]
        nmax == max(ceil(lambda_), nmax_floor)    # Matsubara cutoff

    Note:
        The default panel order ``p`` and Matsubara cutoff floor have been
        chosen empirically.
    """
    def __init__(self, lambda_, p=DEFAULT_ORDER, *,
                 nmax_floor=DEFAULT_NMAX_FLOOR):
        if not (lambda_ > 0):
            raise ValueError("cutoff lambda_ must be positive")
        if not (p > 0) or int(p) != p:
            raise ValueError("panel order p must be a positive integer")

        log2_lambda = np.ceil(np.log2(lambda_))
        self._lambda = lambda_
        self._p = int(p)
        self._nmax = int(max(np.ceil(lambda_), nmax_floor))
        self._npom = int(max(log2_lambda, 1))
        self._npt = int(max(log2_lambda - 2, 1))

    def __repr__(self):
        return f"FineParams({self._lambda!r}, p={self._p!r})"

    @property
    def lambda_(self):
        """DLR cutoff parameter"""
        return self._lambda

    @property
    def p(self):
        """Number of points per panel"""
        return self._p

    @property
    def nmax(self):
        """Imaginary frequency (Matsubara index) cutoff"""
        return self._nmax

    @property
    def npom(self):
        """Number of real frequency panels on (0, Λ]"""
        return self._npom

    @property
    def npt(self):
        """Number of imaginary time panels on (0, 1/2]"""
        return self._npt

    @property
    def nom(self):
        """Total number of points of the real frequency grid"""
        return 2 * self._p * self._npom

    @property
    def nt(self):
        """Total number of points of the imaginary time grid"""
        return 2 * self._p * self._npt


def build_rf_fine(fine):
    """Fine composite Chebyshev grid in real frequency.

    The panels on ``(0, Λ]`` are dyadically refined towards the origin, i.e.,
    they have edges ``Λ/2**(npom-1), ..., Λ/2, Λ``, and are mirrored onto
    ``[-Λ, 0)``.
    """
    edges = fine.lambda_ / 2.0**np.arange(fine.npom - 1, -1, -1)
    edges = np.hstack(([0.0], edges))
    pos = _gauss.chebyshev(fine.p).piecewise(edges)
    return _gauss.Rule.join(pos.reflect(), pos).x


def build_it_fine(fine):
    """Fine composite Gauss-Legendre grid in imaginary time.

    The panels on ``(0, 1/2]`` are dyadically refined towards zero, i.e.,
    they have edges ``2**-npt, ..., 1/4, 1/2``, and are mirrored onto
    ``(1/2, 1)`` by the symmetry ``t -> 1 - t``.  Returns the nodes in
    relative format together with the square roots of the quadrature weights.
    """
    edges = 0.5**np.arange(fine.npt, 0, -1)
    edges = np.hstack(([0.0], edges))
    pos = _gauss.legendre(fine.p).piecewise(edges)
    neg = pos.reflect()
    t = np.hstack((pos.x, neg.x))
    w = np.hstack((pos.w, neg.w))
    return t, np.sqrt(w)


def matsubara_fine(fine, statistics):
    """All Matsubara indices up to the cutoff.

    For fermions, ``2*n+1`` ranges from ``-2*nmax+1`` to ``2*nmax-1``, so ``n``
    ranges from ``-nmax`` to ``nmax-1``.  For bosons, ``n`` ranges from
    ``-nmax`` to ``nmax``.  In both cases, index ``i`` and ``size-1-i`` are
    negation partners.
    """
    zeta = _util.check_statistics(statistics)
    return np.arange(-fine.nmax, fine.nmax + 1 - zeta)


def kernel_discretization_error(fine, t, om, kmat):
    """Estimate the error of the fine discretization of the kernel.

    Interpolates the tabulated kernel ``kmat`` (as given by ``matrix_it`` on
    the grids ``build_it_fine(fine)`` and ``build_rf_fine(fine)``) onto grids
    with twice the number of points per panel, and compares against the
    exact kernel.  Returns a tuple ``(err_t, err_om)``: the maximum absolute
    error in time for fixed frequency and in frequency for fixed time, each
    normalized by the largest kernel value for that frequency or time.
    """
    t = np.asarray(t)
    om = np.asarray(om)
    kmat = np.asarray(kmat)
    if kmat.shape != (fine.nt, fine.nom):
        raise ValueError("kernel matrix does not match fine grid")

    p = fine.p
    fine2 = FineParams(fine.lambda_, 2 * p)
    t2, _ = build_it_fine(fine2)
    om2 = build_rf_fine(fine2)
    p2 = fine2.p
    xl = _gauss.legendre(p).x
    xl2 = _gauss.legendre(p2).x
    xc = _gauss.chebyshev(p).x
    xc2 = _gauss.chebyshev(p2).x

    # Time discretization for each fixed frequency.  By symmetry, we only
    # need to test the first half of the matrix.
    err_t = np.zeros(om.size)
    for i in range(fine.npt):
        ktst = BarycentricInterpolator(xl, kmat[i*p:(i+1)*p], axis=0)(xl2)
        ktru = kernel.k_it(t2[i*p2:(i+1)*p2, None], om[None, :])
        err_t = np.maximum(err_t, np.abs(ktru - ktst).max(axis=0))
    err_t = (err_t / np.abs(kmat).max(axis=0)).max()

    # Frequency discretization for each fixed time.
    nt_half = fine.nt // 2
    err_om = np.zeros(nt_half)
    for j in range(2 * fine.npom):
        ktst = BarycentricInterpolator(
                    xc, kmat[:nt_half, j*p:(j+1)*p], axis=1)(xc2)
        ktru = kernel.k_it(t[:nt_half, None], om2[None, j*p2:(j+1)*p2])
        err_om = np.maximum(err_om, np.abs(ktru - ktst).max(axis=1))
    err_om = (err_om / np.abs(kmat[:nt_half]).max(axis=1)).max()
    return err_t, err_om


def eqptsrel(n):
    """Equispaced points on [0, 1] in relative format.

    Points beyond ``1/2`` are stored as ``t - 1``; the end point ``t == 1``
    becomes ``-0.0``.
    """
    if n < 2:
        raise ValueError("need at least two points")
    return abs2rel(np.linspace(0, 1, n))


def rel2abs(t):
    """Convert imaginary time from relative to absolute format"""
    t = _util.check_range(t, -1, 1)
    return np.where(np.signbit(t), t + 1, t)


def abs2rel(t):
    """Convert imaginary time from absolute to relative format"""
    t = _util.check_range(t, 0, 1)
    return np.where(t > 0.5, -(1 - t), t)
