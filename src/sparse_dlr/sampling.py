# Copyright (C) 2020-2022 Markus Wallerberger, Hiroshi Shinaoka, and others
# SPDX-License-Identifier: MIT
import numpy as np
import scipy.linalg as sp_linalg

from . import _util
from . import basis as _basis
from . import grid
from . import kernel


class AbstractSampling:
    """Base class for sampling on DLR nodes.

    Encodes the "basis transformation" of a propagator from the DLR
    coefficients ``gc[l]`` to time/frequency sampled on the DLR nodes
    ``G(x[i])`` together with its inverse, a linear solve::

             ________________                   ___________________
            |                |    evaluate     |                   |
            |      DLR       |---------------->|     Value on      |
            |  coefficients  |<----------------|     DLR nodes     |
            |________________|      fit        |___________________|

    All transformations act along one axis (by default the first one) of the
    input array, which must have the size of the DLR rank or the number of
    nodes, respectively.
    """
    def evaluate(self, gc, axis=0):
        """Evaluate the DLR coefficients at the nodes"""
        _check_axis_size(gc, axis, self.basis.size, "DLR rank")
        return self.matrix.matmul(gc, axis)

    def fit(self, g, axis=0):
        """Fit DLR coefficients from the values on the nodes"""
        _check_axis_size(g, axis, self.sampling_points.size, "number of nodes")
        return self.matrix.solve(g, axis)

    def evaluate_at(self, gc, x, axis=0):
        """Evaluate the DLR expansion with coefficients gc at points x.

        Returns an array of shape ``np.shape(x) + rest``, where ``rest`` is the
        shape of ``gc`` without ``axis``.
        """
        _check_axis_size(gc, axis, self.basis.size, "DLR rank")
        gc = np.moveaxis(np.asarray(gc), axis, 0)
        return np.tensordot(self.basis_functions(x), gc, axes=(0, 0))

    @property
    def basis_functions(self):
        """Basis functions, callable on the sampling domain"""
        raise NotImplementedError()

    @property
    def sampling_points(self):
        """Set of sampling points"""
        raise NotImplementedError()

    @property
    def matrix(self):
        """Evaluation matrix in decomposed form"""
        raise NotImplementedError()

    @property
    def basis(self) -> _basis.DLRBasis:
        """Basis instance"""
        raise NotImplementedError()

    @property
    def is_invertible(self):
        """Returns True if values on the nodes can be fitted"""
        return self.matrix.is_invertible


class TauSampling(AbstractSampling):
    """Sampling on the DLR imaginary time nodes.

    The nodes are selected from the fine imaginary time grid by a pivoted
    Gram-Schmidt process on the rows of the kernel matrix restricted to the
    DLR frequencies.  They are given in relative format (see
    ``sparse_dlr.kernel``) and sorted ascendingly by their position in the
    fine grid.

    If ``sampling_points`` (and optionally the transformation ``matrix`` and
    its LU decomposition ``lu_result``) are given, they are used instead.
    """
    def __init__(self, basis, sampling_points=None, *, matrix=None,
                 lu_result=None):
        if sampling_points is None:
            t, _ = grid.build_it_fine(basis.fine)
            kmat = kernel.matrix_it(t, basis.omega)
            piv = basis.strategy.select_nodes(kmat, basis.size)
            sampling_points = t[piv]
            matrix = kmat[piv]
        else:
            sampling_points = _util.check_range(sampling_points, -1, 1)
            if sampling_points.ndim != 1:
                raise ValueError("sampling points must be vector")
            if sampling_points.size != basis.size:
                raise ValueError("number of sampling points must be DLR rank")
            if matrix is None:
                matrix = basis.u(sampling_points).T

        self._basis = basis
        self._sampling_points = sampling_points
        self._matrix = DecomposedMatrix(matrix, lu_result)

    @property
    def basis(self): return self._basis

    @property
    def basis_functions(self): return self._basis.u

    @property
    def sampling_points(self): return self._sampling_points

    @property
    def matrix(self): return self._matrix

    @property
    def tau(self):
        """Sampling points in relative imaginary time"""
        return self._sampling_points


class MatsubaraSampling(AbstractSampling):
    """Sampling on the DLR Matsubara frequency nodes.

    The nodes are selected among the Matsubara indices ``|n| <~ nmax`` by a
    pivoted Gram-Schmidt process on the rows of the kernel matrix restricted
    to the DLR frequencies.  They are given as indices ``n``, where the
    frequency is ``ν[n] == (2*n + zeta) * π/β``.

    Values on the physical Matsubara axis scale with the inverse temperature:
    ``fit``, ``evaluate`` and ``evaluate_at`` take an optional ``beta``, in
    which case values are divided by ``beta`` before fitting and multiplied
    by it after evaluation.  The DLR coefficients are independent of ``beta``.

    For a symmetrized basis and bosons, there are ``r + 1`` nodes for ``r``
    basis functions.  Such a sampling is evaluation-only: ``fit`` is not
    available.
    """
    def __init__(self, basis, statistics, sampling_points=None, *,
                 matrix=None, lu_result=None):
        strategy = basis.strategy
        size = strategy.matsubara_size(basis.size, statistics)
        uhat = basis.uhat(statistics)
        if sampling_points is None:
            n = grid.matsubara_fine(basis.fine, statistics)
            kmat = kernel.matrix_if(n, basis.omega, statistics)
            piv = strategy.select_nodes(kmat, size)
            sampling_points = n[piv]
            matrix = kmat[piv]
        else:
            sampling_points = _util.check_matsubara_index(sampling_points)
            if sampling_points.ndim != 1:
                raise ValueError("sampling points must be vector")
            if sampling_points.size != size:
                raise ValueError(f"expecting {size} sampling frequencies")
            if matrix is None:
                matrix = uhat(sampling_points).T

        self._basis = basis
        self._statistics = statistics
        self._uhat = uhat
        self._sampling_points = sampling_points
        if strategy.is_invertible(statistics):
            self._matrix = DecomposedMatrix(matrix, lu_result)
        else:
            self._matrix = DecomposedMatrix(matrix, factorize=False)

    def evaluate(self, gc, axis=0, *, beta=None):
        giw = super().evaluate(gc, axis)
        return giw if beta is None else beta * giw

    def fit(self, g, axis=0, *, beta=None):
        if not self.is_invertible:
            raise RuntimeError(
                "symmetrized bosonic Matsubara sampling is evaluation-only: "
                "there are more nodes than coefficients")
        if beta is not None:
            g = np.asarray(g) / beta
        return super().fit(g, axis)

    def evaluate_at(self, gc, x, axis=0, *, beta=None):
        giw = super().evaluate_at(gc, x, axis)
        return giw if beta is None else beta * giw

    @property
    def basis(self): return self._basis

    @property
    def basis_functions(self): return self._uhat

    @property
    def statistics(self):
        """Quantum statistic (`"F"` for fermionic, `"B"` for bosonic)"""
        return self._statistics

    @property
    def sampling_points(self): return self._sampling_points

    @property
    def matrix(self): return self._matrix

    @property
    def wn(self):
        """Sampling points as Matsubara indices"""
        return self._sampling_points


class DecomposedMatrix:
    """Matrix in LU decomposed form for fast solution of linear systems.

    Stores a matrix ``A`` together with its LU decomposition with partial
    pivoting, in the LAPACK form returned by ``scipy.linalg.lu_factor``::

        P @ A == L @ U

    This allows for fast solution of ``A @ y == x`` using ``A.solve(x)``.  If
    ``factorize`` is false, no decomposition is done, and only
    multiplication is available.
    """
    def __init__(self, a, lu_result=None, *, factorize=True):
        a = np.asarray(a)
        if a.ndim != 2:
            raise ValueError("a must be of matrix form")
        if lu_result is not None:
            lu, piv = _util.check_lu_result(lu_result, a.shape)
        elif factorize:
            if a.shape[0] != a.shape[1]:
                raise ValueError("only square matrix can be LU decomposed")
            lu, piv = sp_linalg.lu_factor(a)
        else:
            lu, piv = None, None

        self._a = a
        self._lu = lu
        self._piv = piv

    def __matmul__(self, x):
        """Matrix-matrix multiplication."""
        return self._a @ x

    def matmul(self, x, axis=0):
        """Compute ``A @ x`` (along specified axis of x)"""
        return _matop_along_axis(self._a.__matmul__, x, axis)

    def _solve(self, x):
        if self._lu is None:
            raise RuntimeError("matrix has not been LU decomposed")
        if np.iscomplexobj(x) and not np.iscomplexobj(self._lu):
            return self._solve(x.real) + 1j * self._solve(x.imag)
        return sp_linalg.lu_solve((self._lu, self._piv), x)

    def solve(self, x, axis=0):
        """Return ``y`` such that ``A @ y == x`` (along specified axis of x)"""
        return _matop_along_axis(self._solve, x, axis)

    def __array__(self, dtype=None, copy=None):
        """Convert to numpy array."""
        return self._a if dtype is None else self._a.astype(dtype)

    @property
    def a(self):
        """Full matrix"""
        return self._a

    @property
    def lu(self):
        """LU factors, or None if not decomposed"""
        return self._lu

    @property
    def piv(self):
        """LU pivot indices (LAPACK convention, zero-based)"""
        return self._piv

    @property
    def is_invertible(self):
        return self._lu is not None

    @property
    def cond(self):
        """Condition number of matrix"""
        return np.linalg.cond(self._a)


class ShapeError(ValueError):
    """Input array does not have the required size along transformed axis"""
    pass


def _check_axis_size(x, axis, size, what):
    shape = np.shape(x)
    if not shape:
        raise ShapeError("expecting array, not scalar")
    if shape[axis] != size:
        raise ShapeError(f"size of axis {axis} is {shape[axis]}, but "
                         f"{what} is {size}")


def _matop_along_axis(op, x, axis=0):
    # Move axis to the front and flatten the rest, such that op acts on a
    # matrix (r, rest).
    x = np.moveaxis(np.asarray(x), axis, 0)
    r = op(x.reshape(x.shape[0], -1))
    r = r.reshape(r.shape[:1] + x.shape[1:])
    return np.moveaxis(r, 0, axis)
