# Copyright (C) 2020-2022 Markus Wallerberger, Hiroshi Shinaoka, and others
# SPDX-License-Identifier: MIT
#
# This file is available from EVERY test in the directory.  This is why
# we use it to compute the bases ONCE.
import pytest
import sparse_dlr


@pytest.fixture(scope="package")
def dlr_basis():
    """DLR bases for Lambda = 1000, eps = 1e-10 (standard and symmetrized)"""
    print("Precomputing DLR bases ...")
    return {
        False:  sparse_dlr.DLRBasis(1000, 1e-10),
        True:   sparse_dlr.DLRBasis(1000, 1e-10, symmetrize=True),
        }


@pytest.fixture(scope="package")
def dlr_basis_set(dlr_basis):
    """Basis sets for Lambda = 1000, eps = 1e-10"""
    return {
        sym: sparse_dlr.DLRBasisSet(1000, basis=basis)
        for sym, basis in dlr_basis.items()
        }
