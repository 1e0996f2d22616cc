# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025, Wenyang Zhao, Osamu Miyashita, Florence Tama, RIKEN


"""
tricubic3d: tricubic interpolation on rectilinear 3D grids

Local tricubic interpolation (Lekien & Marsden, 2005) from function
values and their mixed partial derivatives, with gradient and curvature
queries, optimum search, resampling and a binary storage format.

Contributors:
    - Wenyang Zhao <wenyang.zhao@riken.jp>
    - Osamu Miyashita <osamu.miyashita@riken.jp>
    - Florence Tama <florence.tama@riken.jp>

Affiliation:
    Computational Structural Biology Research Team
    RIKEN Center for Computational Science
"""


__version__ = "0.1.0"

from .exceptions import (
    OutOfRangeError,
    DimensionMismatchError,
    NonMonotonicSequenceError,
    NumberIsTooSmallError,
)
from .coefficients import compute_coefficients, compute_coefficients_inline
from .function import (
    TricubicFunction,
    CubicSplinePosition,
    IndexedCubicSplinePosition,
    compute_power_table,
    compute_float_power_table,
)
from .interp_function import (
    TricubicInterpolatingFunction,
    ArrayProcedure,
    GridSize,
)
from .interpolator import TricubicInterpolator

__all__ = [
    "OutOfRangeError",
    "DimensionMismatchError",
    "NonMonotonicSequenceError",
    "NumberIsTooSmallError",
    "compute_coefficients",
    "compute_coefficients_inline",
    "TricubicFunction",
    "CubicSplinePosition",
    "IndexedCubicSplinePosition",
    "compute_power_table",
    "compute_float_power_table",
    "TricubicInterpolatingFunction",
    "ArrayProcedure",
    "GridSize",
    "TricubicInterpolator",
]
