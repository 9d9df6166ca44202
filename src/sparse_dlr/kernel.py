# Copyright (C) 2020-2022 Markus Wallerberger, Hiroshi Shinaoka, and others
# SPDX-License-Identifier: MIT
"""Analytic continuation kernel in imaginary time and frequency.

In dimensionless variables, the imaginary time ``t ∈ [0, 1]`` (``τ/β``) and
the real frequency ``ω`` (``β`` times the physical frequency), the analytic
continuation (Lehmann) kernel reads::

    K(t, ω) == exp(-t * ω) / (1 + exp(-ω))

and its Fourier transform to the Matsubara frequency with index ``n`` is::

    K(n, ω) == -1 / (i * ν[n] - ω),     ν[n] == (2 * n + zeta) * π

where ``zeta == 1`` for fermions and ``zeta == 0`` for bosons.

Imaginary times are given in *relative format*: a time ``t`` in ``[0, 1/2]``
is stored as is, while a time ``t`` in ``(1/2, 1]`` is stored as ``t - 1``,
i.e., as a negative number.  Since ``K(1 - t, ω) == K(t, -ω)``, this allows
to evaluate the kernel near ``t == 1`` without cancellation.  In particular,
``-0.0`` stands for ``t == 1``, which is why we branch on the sign bit.
"""
import numpy as np

from . import _util


def k_it(t, om):
    """Kernel ``K(t, ω)`` for relative time ``t`` and real frequency ``om``.

    Both arguments may be numpy arrays, in which case the function is
    evaluated over the broadcast arrays.
    """
    t = _util.check_range(t, -1, 1)
    om = np.asarray(om)
    neg = np.signbit(t)
    return k_it_abs(np.where(neg, -t, t), np.where(neg, -om, om))


def k_it_abs(t, om):
    """Kernel ``K(t, ω)`` for non-negative time ``t ∈ [0, 1]``"""
    # The kernel can be written in the following two ways:
    #
    #    k = exp(-t * om) / (1 + exp(-om))
    #      = exp(-(1 - t) * -om) / (1 + exp(om))
    #
    # We need to use the upper equation for om >= 0 and the lower one for
    # om < 0 to avoid overflowing both numerator and denominator
    t = np.asarray(t)
    om = np.asarray(om)
    abs_om = np.abs(om)
    enum = np.exp(-abs_om * np.where(om >= 0, t, 1 - t))
    denom = 1 + np.exp(-abs_om)
    return enum / denom


def k_if(n, om, statistics):
    """Kernel ``K(n, ω)`` for Matsubara index ``n`` and real frequency ``om``

    Both arguments may be numpy arrays, in which case the function is
    evaluated over the broadcast arrays.
    """
    zeta = _util.check_statistics(statistics)
    n = _util.check_matsubara_index(n)
    nu = (2 * n + zeta) * np.pi
    return -1 / (1j * nu - np.asarray(om))


def matrix_it(t, om, w=None):
    """Tabulate kernel on time grid ``t`` times frequency grid ``om``.

    If the (square roots of the) quadrature weights ``w`` for the time grid
    are given, the rows are scaled by them.  This way, dot products of
    columns approximate the L2 inner product over time.
    """
    t = np.asarray(t)
    om = np.asarray(om)
    kmat = k_it(t[:, None], om[None, :])
    if w is not None:
        kmat *= np.asarray(w)[:, None]
    return kmat


def matrix_if(n, om, statistics):
    """Tabulate kernel on Matsubara indices ``n`` times frequencies ``om``"""
    n = np.asarray(n)
    om = np.asarray(om)
    return k_if(n[:, None], om[None, :], statistics)
