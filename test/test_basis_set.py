# Copyright (C) 2020-2022 Markus Wallerberger, Hiroshi Shinaoka, and others
# SPDX-License-Identifier: MIT
import numpy as np
import pytest

import sparse_dlr


@pytest.mark.parametrize("sym", [False, True])
def test_consistency(dlr_basis, dlr_basis_set, sym):
    basis = dlr_basis[sym]
    bs = dlr_basis_set[sym]
    assert bs.basis is basis
    assert bs.lambda_ == 1000
    assert bs.eps == 1e-10
    assert bs.rank == basis.size
    np.testing.assert_array_equal(bs.omega, basis.omega)

    smpl_tau = sparse_dlr.TauSampling(basis)
    np.testing.assert_array_equal(bs.tau, smpl_tau.tau)
    assert bs.smpl_tau.basis is basis

    for statistics, wn, smpl in [('F', bs.wn_f, bs.smpl_wn_f),
                                 ('B', bs.wn_b, bs.smpl_wn_b)]:
        ref = sparse_dlr.MatsubaraSampling(basis, statistics)
        assert smpl.statistics == statistics
        np.testing.assert_array_equal(wn, ref.wn)

    assert bs.smpl_wn_f.is_invertible
    assert bs.smpl_wn_b.is_invertible != sym


def test_construct():
    bs = sparse_dlr.DLRBasisSet(10, 1e-6)
    assert bs.basis.lambda_ == 10
    assert bs.tau.size == bs.wn_f.size == bs.wn_b.size == bs.rank

    bs_sym = sparse_dlr.DLRBasisSet(10, 1e-6, symmetrize=True)
    assert bs_sym.wn_b.size == bs_sym.rank + 1


def test_lambda_mismatch(dlr_basis):
    with pytest.raises(ValueError):
        sparse_dlr.DLRBasisSet(10, basis=dlr_basis[False])
