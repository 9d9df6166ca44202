# Copyright (C) 2020-2022 Markus Wallerberger, Hiroshi Shinaoka, and others
# SPDX-License-Identifier: MIT
import numpy as np

from . import _util
from . import grid
from . import gram_schmidt
from . import kernel


class DLRBasis:
    """Discrete Lehmann representation (DLR) basis for given cutoff.

    For a continuation kernel from real frequencies, ω ∈ [-Λ, Λ], to
    relative imaginary time, this class stores the set of DLR frequencies
    ``omega``, i.e., a small set of poles such that any propagator::

        G(t) == ∫ K(t, ω) ρ(ω) dω

    with spectral function supported on ``[-Λ, Λ]`` is represented to
    relative accuracy ``eps`` by an expansion::

        G(t) ≈ sum(gc[l] * K(t, omega[l]) for l in range(r))

    The frequencies are selected from a fine composite grid by a pivoted
    Gram-Schmidt process on the columns of the kernel matrix [1].

    Example:
        Build the basis and evaluate the basis functions::

            basis = sparse_dlr.DLRBasis(1000, 1e-10)
            ut = basis.u([0.1, 0.2, -0.1])    # shape (basis.size, 3)

    [1]: J. Kaye, K. Chen, O. Parcollet, Phys. Rev. B 105, 235115 (2022)
    """
    def __init__(self, lambda_, eps=None, symmetrize=False, *, omega=None,
                 order=grid.DEFAULT_ORDER,
                 nmax_floor=grid.DEFAULT_NMAX_FLOOR):
        self._fine = grid.FineParams(lambda_, order, nmax_floor=nmax_floor)
        self._strategy = SymmetrizedDLR() if symmetrize else StandardDLR()

        if omega is None:
            if eps is None:
                raise ValueError("either eps or omega must be given")
            omega = build_dlr_rf(lambda_, eps, symmetrize, fine=self._fine)
        else:
            omega = _util.check_range(np.array(omega, float), -lambda_, lambda_)
            if omega.ndim != 1:
                raise ValueError("DLR frequencies must be vector")

        self._eps = eps
        self._omega = omega
        self._u = TauPoles(omega)

    def __repr__(self):
        return (f"DLRBasis({self.lambda_!r}, {self._eps!r}, "
                f"symmetrize={self.symmetrize!r}) with rank {self.size}")

    @property
    def lambda_(self):
        """Basis cutoff parameter, ``Λ == β * ωmax``"""
        return self._fine.lambda_

    @property
    def eps(self):
        """Requested accuracy (``None`` if reconstructed from frequencies)"""
        return self._eps

    @property
    def symmetrize(self):
        return self._strategy.symmetrize

    @property
    def strategy(self):
        """Node selection strategy: ``StandardDLR`` or ``SymmetrizedDLR``"""
        return self._strategy

    @property
    def fine(self) -> grid.FineParams:
        """Parameters of fine grids from which nodes are selected"""
        return self._fine

    @property
    def omega(self) -> np.ndarray:
        """DLR frequencies in ascending order"""
        return self._omega

    @property
    def shape(self): return self._omega.shape

    @property
    def size(self):
        """Number of basis functions, the DLR rank ``r``"""
        return self._omega.size

    rank = size

    @property
    def u(self):
        """Basis functions on the relative imaginary time axis.

        ``basis.u(t)`` evaluates all basis functions at ``t``, yielding an array
        of shape ``(basis.size,) + np.shape(t)``.
        """
        return self._u

    def uhat(self, statistics):
        """Basis functions on the Matsubara axis for given statistics"""
        return MatsubaraPoles(statistics, self._omega)


class StandardDLR:
    """Selection of DLR frequencies and nodes without symmetry constraint"""
    symmetrize = False

    def select(self, a, eps=None, rank=None):
        """Select pivot rows of ``a`` with given tolerance or rank"""
        return gram_schmidt.pivrgs(a, eps, rank=rank)

    def select_nodes(self, a, size):
        """Indices of ``size`` node rows of ``a`` in ascending order"""
        return np.sort(self.select(a, rank=size).piv)

    def matsubara_size(self, rank, statistics):
        """Number of Matsubara nodes for DLR rank and statistics"""
        _util.check_statistics(statistics)
        return rank

    def is_invertible(self, statistics):
        """Whether values on the Matsubara nodes can be fitted"""
        _util.check_statistics(statistics)
        return True


class SymmetrizedDLR(StandardDLR):
    """Selection of DLR frequencies and nodes symmetric under negation.

    The DLR frequencies come in pairs ``±ω``, the imaginary time nodes in
    pairs ``t, 1-t`` and the Matsubara nodes in pairs ``ν, -ν``.  For bosons,
    the zero frequency must be included in addition, so there are ``r + 1``
    Matsubara nodes for ``r`` basis functions.  The corresponding
    transformation is thus not square, and the representation is
    evaluation-only.
    """
    symmetrize = True

    def select(self, a, eps=None, rank=None):
        return gram_schmidt.pivrgs_sym(a, eps, rank=rank)

    def select_nodes(self, a, size):
        m, n = a.shape
        if size <= n:
            return super().select_nodes(a, size)
        if m % 2 == 0 or size != n + 1:
            raise ValueError(f"cannot select {size} symmetric nodes from "
                             f"matrix of shape {a.shape}")

        # The matrix has rank n, so the middle row (zero bosonic frequency)
        # is added to the n rows selected in pairs.
        piv = self.select(a, rank=n).piv
        return np.sort(np.append(piv, m // 2))

    def matsubara_size(self, rank, statistics):
        zeta = _util.check_statistics(statistics)
        return rank + 1 - zeta

    def is_invertible(self, statistics):
        return _util.check_statistics(statistics) == 1


def build_dlr_rf(lambda_, eps, symmetrize=False, *, fine=None):
    """Construct DLR basis by obtaining DLR frequencies.

    Arguments:

      - ``lambda_``: DLR cutoff parameter
      - ``eps``: Accuracy of the DLR basis.  Values near or below machine
        precision trigger a ``PrecisionWarning``.
      - ``symmetrize``: Select frequencies in pairs ``±ω``
      - ``fine``: Fine grid parameters, defaults to ``FineParams(lambda_)``

    Returns the DLR frequencies in ascending order.
    """
    if fine is None:
        fine = grid.FineParams(lambda_)
    strategy = SymmetrizedDLR() if symmetrize else StandardDLR()

    # Discretize the kernel on the fine grids, weighted in the time variable
    # by the square root of the quadrature weights, such that dot products of
    # columns approximate the L2 inner product.
    t, w = grid.build_it_fine(fine)
    om = grid.build_rf_fine(fine)
    kmat = kernel.matrix_it(t, om, w)

    # Pivoted Gram-Schmidt on columns of K matrix to obtain DLR frequencies
    piv = strategy.select(kmat.T, eps=eps).piv
    return om[np.sort(piv)]


class TauPoles:
    """Set of exponentials ``K(t, omega[l])`` on relative imaginary time"""
    def __init__(self, omega):
        self._omega = np.array(omega)

    @_util.ravel_argument(last_dim=True)
    def __call__(self, t):
        """Evaluate basis functions at relative time t"""
        t = _util.check_range(t, -1, 1)

        # Apply the reflection rule once per time point for all frequencies
        neg = np.signbit(t)
        om = np.where(neg[None, :], -self._omega[:, None],
                      self._omega[:, None])
        return kernel.k_it_abs(np.abs(t)[None, :], om)

    @property
    def omega(self):
        return self._omega

    @property
    def size(self):
        return self._omega.size


class MatsubaraPoles:
    """Set of poles ``K(n, omega[l])`` on the Matsubara axis"""
    def __init__(self, statistics, omega):
        _util.check_statistics(statistics)
        self._statistics = statistics
        self._omega = np.array(omega)

    @_util.ravel_argument(last_dim=True)
    def __call__(self, n):
        """Evaluate basis functions at Matsubara indices n"""
        return kernel.k_if(n[None, :], self._omega[:, None], self._statistics)

    @property
    def statistics(self):
        return self._statistics

    @property
    def omega(self):
        return self._omega

    @property
    def size(self):
        return self._omega.size
