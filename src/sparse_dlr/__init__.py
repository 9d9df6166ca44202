"""
Discrete Lehmann representation (DLR) for many-body propagators
===============================================================

This library provides routines for constructing and working with the
discrete Lehmann representation of imaginary time and frequency
correlation functions.  It provides:

 - selection of DLR frequencies for arbitrary cutoff Λ and accuracy ε
   by a pivoted, reorthogonalized Gram-Schmidt process
 - selection of imaginary time and Matsubara frequency nodes
 - transformations between DLR coefficients and values on the nodes
 - symmetrized variants preserving the symmetry under ``ω -> -ω``
"""
__copyright__ = "2020-2023 Markus Wallerberger, Hiroshi Shinaoka, and others"
__license__ = "MIT"
__version__ = "0.9.0"

from .kernel import k_it, k_if
from .grid import FineParams, eqptsrel, rel2abs, abs2rel
from .gram_schmidt import pivrgs, pivrgs_sym, PivotResult, PrecisionWarning
from .basis import DLRBasis, build_dlr_rf, StandardDLR, SymmetrizedDLR
from .basis_set import DLRBasisSet
from .sampling import TauSampling, MatsubaraSampling, ShapeError
