# Copyright (C) 2020-2022 Markus Wallerberger, Hiroshi Shinaoka, and others
# SPDX-License-Identifier: MIT
"""Serializable surface of the sampling objects.

A sampling object is fully described by the following record, which can be
written to any structured storage (e.g., as groups in an HDF5 file)::

    format      "sparse_dlr.TauSampling" or "sparse_dlr.MatsubaraSampling"
    version     record version (integer)
    generator   "sparse-dlr; version=..."
    lambda      DLR cutoff parameter
    statistics  "F", "B", or None for imaginary time
    symmetrize  whether the basis is symmetrized
    omega       DLR frequencies
    nodes       sampling points (relative times or Matsubara indices)
    matrix      coefficients to values matrix
    lu, piv     LU decomposition of matrix (None if evaluation-only)

Restoring from such a record does not redo the selection of frequencies and
nodes nor the LU decomposition.
"""
import numpy as np

from . import __version__
from .basis import DLRBasis
from .sampling import TauSampling, MatsubaraSampling

VERSION = 1
FORMATS = ("sparse_dlr.TauSampling", "sparse_dlr.MatsubaraSampling")


def dump(smpl):
    """Return record describing sampling object ``smpl`` as dict"""
    if isinstance(smpl, MatsubaraSampling):
        fmt = "sparse_dlr.MatsubaraSampling"
        statistics = smpl.statistics
    elif isinstance(smpl, TauSampling):
        fmt = "sparse_dlr.TauSampling"
        statistics = None
    else:
        raise ValueError("Unknown sampling type")

    basis = smpl.basis
    matrix = smpl.matrix
    return {
        "format": fmt,
        "version": VERSION,
        "generator": f"sparse-dlr; version={__version__}",
        "lambda": basis.lambda_,
        "statistics": statistics,
        "symmetrize": basis.symmetrize,
        "omega": basis.omega.copy(),
        "nodes": smpl.sampling_points.copy(),
        "matrix": matrix.a.copy(),
        "lu": None if matrix.lu is None else matrix.lu.copy(),
        "piv": None if matrix.piv is None else matrix.piv.copy(),
        }


def load(record):
    """Restore sampling object from record created by ``dump``"""
    fmt = record["format"]
    if fmt not in FORMATS:
        raise ValueError(f"Unknown format: {fmt}")
    if record["version"] > VERSION:
        raise ValueError(f"Record version {record['version']} is newer than "
                         f"supported version {VERSION}")

    basis = DLRBasis(record["lambda"], symmetrize=bool(record["symmetrize"]),
                     omega=record["omega"])
    lu_result = None
    if record["lu"] is not None:
        lu_result = np.asarray(record["lu"]), np.asarray(record["piv"])

    if fmt == "sparse_dlr.MatsubaraSampling":
        return MatsubaraSampling(basis, record["statistics"], record["nodes"],
                                 matrix=record["matrix"], lu_result=lu_result)
    return TauSampling(basis, record["nodes"], matrix=record["matrix"],
                       lu_result=lu_result)
