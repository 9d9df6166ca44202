# Copyright (C) 2020-2022 Markus Wallerberger, Hiroshi Shinaoka, and others
# SPDX-License-Identifier: MIT
import functools
import numpy as np


def ravel_argument(last_dim=False):
    """Wrap function operating on 1-D numpy array to allow arbitrary shapes.

    This decorator allows to write functions which only need to operate over
    one-dimensional (ravelled) arrays.  This often simplifies the "shape logic"
    of the computation.
    """
    return lambda fn: RavelArgumentDecorator(fn, last_dim)


class RavelArgumentDecorator(object):
    def __init__(self, inner, last_dim=False):
        self.inner = inner
        self.last_dim = last_dim
        functools.update_wrapper(self, inner)

    def __get__(self, instance, _owner=None):
        # Bind without storing the instance, so that a shared object can be
        # used from several threads at once.
        if instance is None:
            return self
        return functools.partial(self._call, instance)

    def __call__(self, x):
        return self._call(None, x)

    def _call(self, instance, x):
        x = np.asarray(x)
        if instance is None:
            res = self.inner(x.ravel())
        else:
            res = self.inner(instance, x.ravel())
        if self.last_dim:
            return res.reshape(res.shape[:-1] + x.shape)
        else:
            return res.reshape(x.shape + res.shape[1:])


def check_statistics(statistics):
    """Checks that ``statistics`` is either 'F' or 'B' and returns zeta"""
    if statistics not in ('F', 'B'):
        raise ValueError("statistics must either be 'F' (for fermions) "
                         "or 'B' (for bosons)")
    return 1 if statistics == 'F' else 0


def check_matsubara_index(n):
    """Checks that ``n`` is an (array of) integer Matsubara index.

    Note that we expect an *index* ``n`` here, related to the frequency by::

        beta / np.pi * w[n] == 2 * n + zeta

    where ``zeta == 1`` for fermions and ``zeta == 0`` for bosons.  This is
    distinct from the reduced frequency ``2 * n + zeta``.
    """
    n = np.asarray(n)
    if not np.issubdtype(n.dtype, np.integer):
        nfloat = n
        n = nfloat.astype(int)
        if not (n == nfloat).all():
            raise ValueError("Matsubara index n must be integer")
    return n


def check_range(x, xmin, xmax):
    """Checks each element is in range [xmin, xmax]"""
    x = np.asarray(x)
    if not (x >= xmin).all():
        raise ValueError(f"Some x violate lower bound {xmin}")
    if not (x <= xmax).all():
        raise ValueError(f"Some x violate upper bound {xmax}")
    return x


def check_lu_result(lu_result, matrix_shape=None):
    """Checks that argument is a valid LU pair (lu, piv)"""
    lu, piv = map(np.asarray, lu_result)
    m_lu, n_lu = lu.shape
    k_piv, = piv.shape
    if m_lu != n_lu or n_lu != k_piv:
        raise ValueError("shape mismatch between LU elements:"
                         f"({m_lu}, {n_lu}) x ({k_piv})")
    if not np.issubdtype(piv.dtype, np.integer):
        raise ValueError("LU pivots must be integers")
    if matrix_shape is not None and lu.shape != tuple(matrix_shape):
        raise ValueError(f"shape mismatch between LU ({m_lu}, {n_lu}) "
                         f"and matrix {tuple(matrix_shape)}")
    return lu, piv
