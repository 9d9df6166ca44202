# Copyright (C) 2020-2022 Markus Wallerberger, Hiroshi Shinaoka, and others
# SPDX-License-Identifier: MIT
from .basis import DLRBasis
from .sampling import TauSampling, MatsubaraSampling


class DLRBasisSet:
    """Class for holding a DLR basis and sampling objects.

    The DLR frequencies and imaginary time nodes do not depend on statistics,
    so an object of this class holds one basis, one imaginary time sampling
    and a Matsubara sampling for fermions and bosons each.

    Attributes:
        basis (DLRBasis):
            DLR basis shared by all sampling objects
        lambda_ (float):
            Cut-off parameter
        eps (float):
            Accuracy of the basis
        omega (1D ndarray of float):
            DLR frequencies
        tau (1D ndarray of float):
            Sampling points in relative imaginary time
        wn_f (1D ndarray of int):
            Sampling fermionic Matsubara indices
        wn_b (1D ndarray of int):
            Sampling bosonic Matsubara indices
        smpl_tau (TauSampling):
            Sampling in imaginary time
        smpl_wn_f (MatsubaraSampling):
            Sampling for Matsubara frequency & fermion
        smpl_wn_b (MatsubaraSampling):
            Sampling for Matsubara frequency & boson
    """
    def __init__(self, lambda_, eps=None, symmetrize=False, *, basis=None):
        if basis is None:
            basis = DLRBasis(lambda_, eps, symmetrize)
        elif basis.lambda_ != lambda_:
            raise ValueError("lambda of basis and basis set mismatch")
        self.basis = basis

        # Tau sampling
        self.smpl_tau = TauSampling(basis)

        # Matsubara sampling
        self.smpl_wn_f = MatsubaraSampling(basis, 'F')
        self.smpl_wn_b = MatsubaraSampling(basis, 'B')

    @property
    def lambda_(self): return self.basis.lambda_

    @property
    def eps(self): return self.basis.eps

    @property
    def rank(self): return self.basis.size

    @property
    def omega(self): return self.basis.omega

    @property
    def tau(self): return self.smpl_tau.sampling_points

    @property
    def wn_f(self): return self.smpl_wn_f.sampling_points

    @property
    def wn_b(self): return self.smpl_wn_b.sampling_points
