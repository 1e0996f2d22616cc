# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025, Wenyang Zhao, Osamu Miyashita, Florence Tama, RIKEN


import numpy as np
import numba as nb


__all__ = [
    "AINV",
    "NUM_COEFFICIENTS",
    "compute_coefficients",
    "compute_coefficients_inline",
    "fill_coefficients",
]


NUM_COEFFICIENTS = 64


# Inverse of the 64x64 matrix mapping the polynomial coefficients
# a[p + 4q + 16r] of x^p y^q z^r onto the cube corner data
# (f, fx, fy, fz, fxy, fxz, fyz, fxyz), see Lekien & Marsden (2005).
AINV = np.array([
    [1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [-3, 3, 0, 0, 0, 0, 0, 0, -2, -1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [2, -2, 0, 0, 0, 0, 0, 0, 1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -3, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -2, -1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 2, -2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [-3, 0, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -2, 0, -1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, -3, 0, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -2, 0, -1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [9, -9, -9, 9, 0, 0, 0, 0, 6, 3, -6, -3, 0, 0, 0, 0, 6, -6, 3, -3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 4, 2, 2, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [-6, 6, 6, -6, 0, 0, 0, 0, -3, -3, 3, 3, 0, 0, 0, 0, -4, 4, -2, 2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -2, -2, -1, -1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [2, 0, -2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 2, 0, -2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [-6, 6, 6, -6, 0, 0, 0, 0, -4, -2, 4, 2, 0, 0, 0, 0, -3, 3, -3, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -2, -1, -2, -1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [4, -4, -4, 4, 0, 0, 0, 0, 2, 2, -2, -2, 0, 0, 0, 0, 2, -2, 2, -2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -3, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -2, -1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 2, -2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -3, 3, 0, 0, 0, 0, 0, 0, -2, -1, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 2, -2, 0, 0, 0, 0, 0, 0, 1, 1, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -3, 0, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -2, 0, -1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -3, 0, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -2, 0, -1, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 9, -9, -9, 9, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 6, 3, -6, -3, 0, 0, 0, 0, 6, -6, 3, -3, 0, 0, 0, 0, 4, 2, 2, 1, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -6, 6, 6, -6, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -3, -3, 3, 3, 0, 0, 0, 0, -4, 4, -2, 2, 0, 0, 0, 0, -2, -2, -1, -1, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 2, 0, -2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 2, 0, -2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 1, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -6, 6, 6, -6, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -4, -2, 4, 2, 0, 0, 0, 0, -3, 3, -3, 3, 0, 0, 0, 0, -2, -1, -2, -1, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 4, -4, -4, 4, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 2, 2, -2, -2, 0, 0, 0, 0, 2, -2, 2, -2, 0, 0, 0, 0, 1, 1, 1, 1, 0, 0, 0, 0],
    [-3, 0, 0, 0, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -2, 0, 0, 0, -1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, -3, 0, 0, 0, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -2, 0, 0, 0, -1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [9, -9, 0, 0, -9, 9, 0, 0, 6, 3, 0, 0, -6, -3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 6, -6, 0, 0, 3, -3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 4, 2, 0, 0, 2, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [-6, 6, 0, 0, 6, -6, 0, 0, -3, -3, 0, 0, 3, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -4, 4, 0, 0, -2, 2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -2, -2, 0, 0, -1, -1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -3, 0, 0, 0, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -2, 0, 0, 0, -1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -3, 0, 0, 0, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -2, 0, 0, 0, -1, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 9, -9, 0, 0, -9, 9, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 6, 3, 0, 0, -6, -3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 6, -6, 0, 0, 3, -3, 0, 0, 4, 2, 0, 0, 2, 1, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -6, 6, 0, 0, 6, -6, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -3, -3, 0, 0, 3, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -4, 4, 0, 0, -2, 2, 0, 0, -2, -2, 0, 0, -1, -1, 0, 0],
    [9, 0, -9, 0, -9, 0, 9, 0, 0, 0, 0, 0, 0, 0, 0, 0, 6, 0, 3, 0, -6, 0, -3, 0, 6, 0, -6, 0, 3, 0, -3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 4, 0, 2, 0, 2, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 9, 0, -9, 0, -9, 0, 9, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 6, 0, 3, 0, -6, 0, -3, 0, 6, 0, -6, 0, 3, 0, -3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 4, 0, 2, 0, 2, 0, 1, 0],
    [-27, 27, 27, -27, 27, -27, -27, 27, -18, -9, 18, 9, 18, 9, -18, -9, -18, 18, -9, 9, 18, -18, 9, -9, -18, 18, 18, -18, -9, 9, 9, -9, -12, -6, -6, -3, 12, 6, 6, 3, -12, -6, 12, 6, -6, -3, 6, 3, -12, 12, -6, 6, -6, 6, -3, 3, -8, -4, -4, -2, -4, -2, -2, -1],
    [18, -18, -18, 18, -18, 18, 18, -18, 9, 9, -9, -9, -9, -9, 9, 9, 12, -12, 6, -6, -12, 12, -6, 6, 12, -12, -12, 12, 6, -6, -6, 6, 6, 6, 3, 3, -6, -6, -3, -3, 6, 6, -6, -6, 3, 3, -3, -3, 8, -8, 4, -4, 4, -4, 2, -2, 4, 4, 2, 2, 2, 2, 1, 1],
    [-6, 0, 6, 0, 6, 0, -6, 0, 0, 0, 0, 0, 0, 0, 0, 0, -3, 0, -3, 0, 3, 0, 3, 0, -4, 0, 4, 0, -2, 0, 2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -2, 0, -2, 0, -1, 0, -1, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, -6, 0, 6, 0, 6, 0, -6, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -3, 0, -3, 0, 3, 0, 3, 0, -4, 0, 4, 0, -2, 0, 2, 0, 0, 0, 0, 0, 0, 0, 0, 0, -2, 0, -2, 0, -1, 0, -1, 0],
    [18, -18, -18, 18, -18, 18, 18, -18, 12, 6, -12, -6, -12, -6, 12, 6, 9, -9, 9, -9, -9, 9, -9, 9, 12, -12, -12, 12, 6, -6, -6, 6, 6, 3, 6, 3, -6, -3, -6, -3, 8, 4, -8, -4, 4, 2, -4, -2, 6, -6, 6, -6, 3, -3, 3, -3, 4, 2, 4, 2, 2, 1, 2, 1],
    [-12, 12, 12, -12, 12, -12, -12, 12, -6, -6, 6, 6, 6, 6, -6, -6, -6, 6, -6, 6, 6, -6, 6, -6, -8, 8, 8, -8, -4, 4, 4, -4, -3, -3, -3, -3, 3, 3, 3, 3, -4, -4, 4, 4, -2, -2, 2, 2, -4, 4, -4, 4, -2, 2, -2, 2, -2, -2, -2, -2, -1, -1, -1, -1],
    [2, 0, 0, 0, -2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 2, 0, 0, 0, -2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [-6, 6, 0, 0, 6, -6, 0, 0, -4, -2, 0, 0, 4, 2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -3, 3, 0, 0, -3, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -2, -1, 0, 0, -2, -1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [4, -4, 0, 0, -4, 4, 0, 0, 2, 2, 0, 0, -2, -2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 2, -2, 0, 0, 2, -2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 0, 0, 1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 2, 0, 0, 0, -2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 2, 0, 0, 0, -2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 1, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -6, 6, 0, 0, 6, -6, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -4, -2, 0, 0, 4, 2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -3, 3, 0, 0, -3, 3, 0, 0, -2, -1, 0, 0, -2, -1, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 4, -4, 0, 0, -4, 4, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 2, 2, 0, 0, -2, -2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 2, -2, 0, 0, 2, -2, 0, 0, 1, 1, 0, 0, 1, 1, 0, 0],
    [-6, 0, 6, 0, 6, 0, -6, 0, 0, 0, 0, 0, 0, 0, 0, 0, -4, 0, -2, 0, 4, 0, 2, 0, -3, 0, 3, 0, -3, 0, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -2, 0, -1, 0, -2, 0, -1, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, -6, 0, 6, 0, 6, 0, -6, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -4, 0, -2, 0, 4, 0, 2, 0, -3, 0, 3, 0, -3, 0, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, -2, 0, -1, 0, -2, 0, -1, 0],
    [18, -18, -18, 18, -18, 18, 18, -18, 12, 6, -12, -6, -12, -6, 12, 6, 12, -12, 6, -6, -12, 12, -6, 6, 9, -9, -9, 9, 9, -9, -9, 9, 8, 4, 4, 2, -8, -4, -4, -2, 6, 3, -6, -3, 6, 3, -6, -3, 6, -6, 3, -3, 6, -6, 3, -3, 4, 2, 2, 1, 4, 2, 2, 1],
    [-12, 12, 12, -12, 12, -12, -12, 12, -6, -6, 6, 6, 6, 6, -6, -6, -8, 8, -4, 4, 8, -8, 4, -4, -6, 6, 6, -6, -6, 6, 6, -6, -4, -4, -2, -2, 4, 4, 2, 2, -3, -3, 3, 3, -3, -3, 3, 3, -4, 4, -2, 2, -4, 4, -2, 2, -2, -2, -1, -1, -2, -2, -1, -1],
    [4, 0, -4, 0, -4, 0, 4, 0, 0, 0, 0, 0, 0, 0, 0, 0, 2, 0, 2, 0, -2, 0, -2, 0, 2, 0, -2, 0, 2, 0, -2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 1, 0, 1, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 4, 0, -4, 0, -4, 0, 4, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 2, 0, 2, 0, -2, 0, -2, 0, 2, 0, -2, 0, 2, 0, -2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 1, 0, 1, 0, 1, 0],
    [-12, 12, 12, -12, 12, -12, -12, 12, -8, -4, 8, 4, 8, 4, -8, -4, -6, 6, -6, 6, 6, -6, 6, -6, -6, 6, 6, -6, -6, 6, 6, -6, -4, -2, -4, -2, 4, 2, 4, 2, -4, -2, 4, 2, -4, -2, 4, 2, -3, 3, -3, 3, -3, 3, -3, 3, -2, -1, -2, -1, -2, -1, -2, -1],
    [8, -8, -8, 8, -8, 8, 8, -8, 4, 4, -4, -4, -4, -4, 4, 4, 4, -4, 4, -4, -4, 4, -4, 4, 4, -4, -4, 4, 4, -4, -4, 4, 2, 2, 2, 2, -2, -2, -2, -2, 2, 2, -2, -2, 2, 2, -2, -2, 2, -2, 2, -2, 2, -2, 2, -2, 1, 1, 1, 1, 1, 1, 1, 1],
], dtype=np.float64)
AINV.flags.writeable = False


def _check_beta(beta):
    beta = np.asarray(beta, dtype=np.float64)
    if beta.ndim != 1 or beta.shape[0] != NUM_COEFFICIENTS:
        raise ValueError(
            f"Invalid beta: expected {NUM_COEFFICIENTS} values, "
            f"got shape {beta.shape}."
        )
    return beta


def compute_coefficients(beta):
    """
    Compute the tricubic coefficients by a dense matrix product.

    Parameters
    ----------
    beta : array-like, shape (64,)
        Function values and derivatives at the 8 cube corners, ordered
        f, fx, fy, fz, fxy, fxz, fyz, fxyz, each over the corners with x
        fastest, then y, then z.

    Returns
    -------
    a : np.ndarray, shape (64,)
        Polynomial coefficients, a[p + 4q + 16r] multiplies x^p y^q z^r.
    """

    beta = _check_beta(beta)
    return AINV @ beta


def compute_coefficients_inline(beta):
    """
    Compute the tricubic coefficients from the expanded closed form.

    Gives the same result as :func:`compute_coefficients` up to
    floating-point rounding, without the 4096 multiplications.

    Parameters
    ----------
    beta : array-like, shape (64,)
        Corner data, ordered as for :func:`compute_coefficients`.

    Returns
    -------
    a : np.ndarray, shape (64,)
        Polynomial coefficients.
    """

    beta = _check_beta(beta)
    a = np.empty(NUM_COEFFICIENTS, dtype=np.float64)
    fill_coefficients(beta, a)
    return a


@nb.njit(nogil=True)
def fill_coefficients(beta, a):
    """
    Write the coefficients for `beta` into the preallocated array `a`.

    Compiled so the grid build kernel can call it once per cell without
    leaving nopython mode.
    """

    a[0] = beta[0]
    a[1] = beta[8]
    a[2] = -3*(beta[0]-beta[1])-2*beta[8]-beta[9]
    a[3] = 2*(beta[0]-beta[1])+(beta[8]+beta[9])
    a[4] = beta[16]
    a[5] = beta[32]
    a[6] = -3*(beta[16]-beta[17])-2*beta[32]-beta[33]
    a[7] = 2*(beta[16]-beta[17])+(beta[32]+beta[33])
    a[8] = -3*(beta[0]-beta[2])-2*beta[16]-beta[18]
    a[9] = -3*(beta[8]-beta[10])-2*beta[32]-beta[34]
    a[10] = 9*(beta[0]-beta[1]-beta[2]+beta[3])+6*(beta[8]-beta[10]+beta[16]-beta[17])+4*beta[32]+3*(beta[9]-beta[11]+beta[18]-beta[19])+2*(beta[33]+beta[34])+beta[35]
    a[11] = -6*(beta[0]-beta[1]-beta[2]+beta[3])-4*(beta[16]-beta[17])-3*(beta[8]+beta[9]-beta[10]-beta[11])-2*(beta[18]-beta[19]+beta[32]+beta[33])-(beta[34]+beta[35])
    a[12] = 2*(beta[0]-beta[2])+(beta[16]+beta[18])
    a[13] = 2*(beta[8]-beta[10])+(beta[32]+beta[34])
    a[14] = -6*(beta[0]-beta[1]-beta[2]+beta[3])-4*(beta[8]-beta[10])-3*(beta[16]-beta[17]+beta[18]-beta[19])-2*(beta[9]-beta[11]+beta[32]+beta[34])-(beta[33]+beta[35])
    a[15] = 4*(beta[0]-beta[1]-beta[2]+beta[3])+2*(beta[8]+beta[9]-beta[10]-beta[11]+beta[16]-beta[17]+beta[18]-beta[19])+(beta[32]+beta[33]+beta[34]+beta[35])
    a[16] = beta[24]
    a[17] = beta[40]
    a[18] = -3*(beta[24]-beta[25])-2*beta[40]-beta[41]
    a[19] = 2*(beta[24]-beta[25])+(beta[40]+beta[41])
    a[20] = beta[48]
    a[21] = beta[56]
    a[22] = -3*(beta[48]-beta[49])-2*beta[56]-beta[57]
    a[23] = 2*(beta[48]-beta[49])+(beta[56]+beta[57])
    a[24] = -3*(beta[24]-beta[26])-2*beta[48]-beta[50]
    a[25] = -3*(beta[40]-beta[42])-2*beta[56]-beta[58]
    a[26] = 9*(beta[24]-beta[25]-beta[26]+beta[27])+6*(beta[40]-beta[42]+beta[48]-beta[49])+4*beta[56]+3*(beta[41]-beta[43]+beta[50]-beta[51])+2*(beta[57]+beta[58])+beta[59]
    a[27] = -6*(beta[24]-beta[25]-beta[26]+beta[27])-4*(beta[48]-beta[49])-3*(beta[40]+beta[41]-beta[42]-beta[43])-2*(beta[50]-beta[51]+beta[56]+beta[57])-(beta[58]+beta[59])
    a[28] = 2*(beta[24]-beta[26])+(beta[48]+beta[50])
    a[29] = 2*(beta[40]-beta[42])+(beta[56]+beta[58])
    a[30] = -6*(beta[24]-beta[25]-beta[26]+beta[27])-4*(beta[40]-beta[42])-3*(beta[48]-beta[49]+beta[50]-beta[51])-2*(beta[41]-beta[43]+beta[56]+beta[58])-(beta[57]+beta[59])
    a[31] = 4*(beta[24]-beta[25]-beta[26]+beta[27])+2*(beta[40]+beta[41]-beta[42]-beta[43]+beta[48]-beta[49]+beta[50]-beta[51])+(beta[56]+beta[57]+beta[58]+beta[59])
    a[32] = -3*(beta[0]-beta[4])-2*beta[24]-beta[28]
    a[33] = -3*(beta[8]-beta[12])-2*beta[40]-beta[44]
    a[34] = 9*(beta[0]-beta[1]-beta[4]+beta[5])+6*(beta[8]-beta[12]+beta[24]-beta[25])+4*beta[40]+3*(beta[9]-beta[13]+beta[28]-beta[29])+2*(beta[41]+beta[44])+beta[45]
    a[35] = -6*(beta[0]-beta[1]-beta[4]+beta[5])-4*(beta[24]-beta[25])-3*(beta[8]+beta[9]-beta[12]-beta[13])-2*(beta[28]-beta[29]+beta[40]+beta[41])-(beta[44]+beta[45])
    a[36] = -3*(beta[16]-beta[20])-2*beta[48]-beta[52]
    a[37] = -3*(beta[32]-beta[36])-2*beta[56]-beta[60]
    a[38] = 9*(beta[16]-beta[17]-beta[20]+beta[21])+6*(beta[32]-beta[36]+beta[48]-beta[49])+4*beta[56]+3*(beta[33]-beta[37]+beta[52]-beta[53])+2*(beta[57]+beta[60])+beta[61]
    a[39] = -6*(beta[16]-beta[17]-beta[20]+beta[21])-4*(beta[48]-beta[49])-3*(beta[32]+beta[33]-beta[36]-beta[37])-2*(beta[52]-beta[53]+beta[56]+beta[57])-(beta[60]+beta[61])
    a[40] = 9*(beta[0]-beta[2]-beta[4]+beta[6])+6*(beta[16]-beta[20]+beta[24]-beta[26])+4*beta[48]+3*(beta[18]-beta[22]+beta[28]-beta[30])+2*(beta[50]+beta[52])+beta[54]
    a[41] = 9*(beta[8]-beta[10]-beta[12]+beta[14])+6*(beta[32]-beta[36]+beta[40]-beta[42])+4*beta[56]+3*(beta[34]-beta[38]+beta[44]-beta[46])+2*(beta[58]+beta[60])+beta[62]
    a[42] = -27*(beta[0]-beta[1]-beta[2]+beta[3]-beta[4]+beta[5]+beta[6]-beta[7])-18*(beta[8]-beta[10]-beta[12]+beta[14]+beta[16]-beta[17]-beta[20]+beta[21]+beta[24]-beta[25]-beta[26]+beta[27])-12*(beta[32]-beta[36]+beta[40]-beta[42]+beta[48]-beta[49])-9*(beta[9]-beta[11]-beta[13]+beta[15]+beta[18]-beta[19]-beta[22]+beta[23]+beta[28]-beta[29]-beta[30]+beta[31])-8*beta[56]-6*(beta[33]+beta[34]-beta[37]-beta[38]+beta[41]-beta[43]+beta[44]-beta[46]+beta[50]-beta[51]+beta[52]-beta[53])-4*(beta[57]+beta[58]+beta[60])-3*(beta[35]-beta[39]+beta[45]-beta[47]+beta[54]-beta[55])-2*(beta[59]+beta[61]+beta[62])-beta[63]
    a[43] = 18*(beta[0]-beta[1]-beta[2]+beta[3]-beta[4]+beta[5]+beta[6]-beta[7])+12*(beta[16]-beta[17]-beta[20]+beta[21]+beta[24]-beta[25]-beta[26]+beta[27])+9*(beta[8]+beta[9]-beta[10]-beta[11]-beta[12]-beta[13]+beta[14]+beta[15])+8*(beta[48]-beta[49])+6*(beta[18]-beta[19]-beta[22]+beta[23]+beta[28]-beta[29]-beta[30]+beta[31]+beta[32]+beta[33]-beta[36]-beta[37]+beta[40]+beta[41]-beta[42]-beta[43])+4*(beta[50]-beta[51]+beta[52]-beta[53]+beta[56]+beta[57])+3*(beta[34]+beta[35]-beta[38]-beta[39]+beta[44]+beta[45]-beta[46]-beta[47])+2*(beta[54]-beta[55]+beta[58]+beta[59]+beta[60]+beta[61])+(beta[62]+beta[63])
    a[44] = -6*(beta[0]-beta[2]-beta[4]+beta[6])-4*(beta[24]-beta[26])-3*(beta[16]+beta[18]-beta[20]-beta[22])-2*(beta[28]-beta[30]+beta[48]+beta[50])-(beta[52]+beta[54])
    a[45] = -6*(beta[8]-beta[10]-beta[12]+beta[14])-4*(beta[40]-beta[42])-3*(beta[32]+beta[34]-beta[36]-beta[38])-2*(beta[44]-beta[46]+beta[56]+beta[58])-(beta[60]+beta[62])
    a[46] = 18*(beta[0]-beta[1]-beta[2]+beta[3]-beta[4]+beta[5]+beta[6]-beta[7])+12*(beta[8]-beta[10]-beta[12]+beta[14]+beta[24]-beta[25]-beta[26]+beta[27])+9*(beta[16]-beta[17]+beta[18]-beta[19]-beta[20]+beta[21]-beta[22]+beta[23])+8*(beta[40]-beta[42])+6*(beta[9]-beta[11]-beta[13]+beta[15]+beta[28]-beta[29]-beta[30]+beta[31]+beta[32]+beta[34]-beta[36]-beta[38]+beta[48]-beta[49]+beta[50]-beta[51])+4*(beta[41]-beta[43]+beta[44]-beta[46]+beta[56]+beta[58])+3*(beta[33]+beta[35]-beta[37]-beta[39]+beta[52]-beta[53]+beta[54]-beta[55])+2*(beta[45]-beta[47]+beta[57]+beta[59]+beta[60]+beta[62])+(beta[61]+beta[63])
    a[47] = -12*(beta[0]-beta[1]-beta[2]+beta[3]-beta[4]+beta[5]+beta[6]-beta[7])-8*(beta[24]-beta[25]-beta[26]+beta[27])-6*(beta[8]+beta[9]-beta[10]-beta[11]-beta[12]-beta[13]+beta[14]+beta[15]+beta[16]-beta[17]+beta[18]-beta[19]-beta[20]+beta[21]-beta[22]+beta[23])-4*(beta[28]-beta[29]-beta[30]+beta[31]+beta[40]+beta[41]-beta[42]-beta[43]+beta[48]-beta[49]+beta[50]-beta[51])-3*(beta[32]+beta[33]+beta[34]+beta[35]-beta[36]-beta[37]-beta[38]-beta[39])-2*(beta[44]+beta[45]-beta[46]-beta[47]+beta[52]-beta[53]+beta[54]-beta[55]+beta[56]+beta[57]+beta[58]+beta[59])-(beta[60]+beta[61]+beta[62]+beta[63])
    a[48] = 2*(beta[0]-beta[4])+(beta[24]+beta[28])
    a[49] = 2*(beta[8]-beta[12])+(beta[40]+beta[44])
    a[50] = -6*(beta[0]-beta[1]-beta[4]+beta[5])-4*(beta[8]-beta[12])-3*(beta[24]-beta[25]+beta[28]-beta[29])-2*(beta[9]-beta[13]+beta[40]+beta[44])-(beta[41]+beta[45])
    a[51] = 4*(beta[0]-beta[1]-beta[4]+beta[5])+2*(beta[8]+beta[9]-beta[12]-beta[13]+beta[24]-beta[25]+beta[28]-beta[29])+(beta[40]+beta[41]+beta[44]+beta[45])
    a[52] = 2*(beta[16]-beta[20])+(beta[48]+beta[52])
    a[53] = 2*(beta[32]-beta[36])+(beta[56]+beta[60])
    a[54] = -6*(beta[16]-beta[17]-beta[20]+beta[21])-4*(beta[32]-beta[36])-3*(beta[48]-beta[49]+beta[52]-beta[53])-2*(beta[33]-beta[37]+beta[56]+beta[60])-(beta[57]+beta[61])
    a[55] = 4*(beta[16]-beta[17]-beta[20]+beta[21])+2*(beta[32]+beta[33]-beta[36]-beta[37]+beta[48]-beta[49]+beta[52]-beta[53])+(beta[56]+beta[57]+beta[60]+beta[61])
    a[56] = -6*(beta[0]-beta[2]-beta[4]+beta[6])-4*(beta[16]-beta[20])-3*(beta[24]-beta[26]+beta[28]-beta[30])-2*(beta[18]-beta[22]+beta[48]+beta[52])-(beta[50]+beta[54])
    a[57] = -6*(beta[8]-beta[10]-beta[12]+beta[14])-4*(beta[32]-beta[36])-3*(beta[40]-beta[42]+beta[44]-beta[46])-2*(beta[34]-beta[38]+beta[56]+beta[60])-(beta[58]+beta[62])
    a[58] = 18*(beta[0]-beta[1]-beta[2]+beta[3]-beta[4]+beta[5]+beta[6]-beta[7])+12*(beta[8]-beta[10]-beta[12]+beta[14]+beta[16]-beta[17]-beta[20]+beta[21])+9*(beta[24]-beta[25]-beta[26]+beta[27]+beta[28]-beta[29]-beta[30]+beta[31])+8*(beta[32]-beta[36])+6*(beta[9]-beta[11]-beta[13]+beta[15]+beta[18]-beta[19]-beta[22]+beta[23]+beta[40]-beta[42]+beta[44]-beta[46]+beta[48]-beta[49]+beta[52]-beta[53])+4*(beta[33]+beta[34]-beta[37]-beta[38]+beta[56]+beta[60])+3*(beta[41]-beta[43]+beta[45]-beta[47]+beta[50]-beta[51]+beta[54]-beta[55])+2*(beta[35]-beta[39]+beta[57]+beta[58]+beta[61]+beta[62])+(beta[59]+beta[63])
    a[59] = -12*(beta[0]-beta[1]-beta[2]+beta[3]-beta[4]+beta[5]+beta[6]-beta[7])-8*(beta[16]-beta[17]-beta[20]+beta[21])-6*(beta[8]+beta[9]-beta[10]-beta[11]-beta[12]-beta[13]+beta[14]+beta[15]+beta[24]-beta[25]-beta[26]+beta[27]+beta[28]-beta[29]-beta[30]+beta[31])-4*(beta[18]-beta[19]-beta[22]+beta[23]+beta[32]+beta[33]-beta[36]-beta[37]+beta[48]-beta[49]+beta[52]-beta[53])-3*(beta[40]+beta[41]-beta[42]-beta[43]+beta[44]+beta[45]-beta[46]-beta[47])-2*(beta[34]+beta[35]-beta[38]-beta[39]+beta[50]-beta[51]+beta[54]-beta[55]+beta[56]+beta[57]+beta[60]+beta[61])-(beta[58]+beta[59]+beta[62]+beta[63])
    a[60] = 4*(beta[0]-beta[2]-beta[4]+beta[6])+2*(beta[16]+beta[18]-beta[20]-beta[22]+beta[24]-beta[26]+beta[28]-beta[30])+(beta[48]+beta[50]+beta[52]+beta[54])
    a[61] = 4*(beta[8]-beta[10]-beta[12]+beta[14])+2*(beta[32]+beta[34]-beta[36]-beta[38]+beta[40]-beta[42]+beta[44]-beta[46])+(beta[56]+beta[58]+beta[60]+beta[62])
    a[62] = -12*(beta[0]-beta[1]-beta[2]+beta[3]-beta[4]+beta[5]+beta[6]-beta[7])-8*(beta[8]-beta[10]-beta[12]+beta[14])-6*(beta[16]-beta[17]+beta[18]-beta[19]-beta[20]+beta[21]-beta[22]+beta[23]+beta[24]-beta[25]-beta[26]+beta[27]+beta[28]-beta[29]-beta[30]+beta[31])-4*(beta[9]-beta[11]-beta[13]+beta[15]+beta[32]+beta[34]-beta[36]-beta[38]+beta[40]-beta[42]+beta[44]-beta[46])-3*(beta[48]-beta[49]+beta[50]-beta[51]+beta[52]-beta[53]+beta[54]-beta[55])-2*(beta[33]+beta[35]-beta[37]-beta[39]+beta[41]-beta[43]+beta[45]-beta[47]+beta[56]+beta[58]+beta[60]+beta[62])-(beta[57]+beta[59]+beta[61]+beta[63])
    a[63] = 8*(beta[0]-beta[1]-beta[2]+beta[3]-beta[4]+beta[5]+beta[6]-beta[7])+4*(beta[8]+beta[9]-beta[10]-beta[11]-beta[12]-beta[13]+beta[14]+beta[15]+beta[16]-beta[17]+beta[18]-beta[19]-beta[20]+beta[21]-beta[22]+beta[23]+beta[24]-beta[25]-beta[26]+beta[27]+beta[28]-beta[29]-beta[30]+beta[31])+2*(beta[32]+beta[33]+beta[34]+beta[35]-beta[36]-beta[37]-beta[38]-beta[39]+beta[40]+beta[41]-beta[42]-beta[43]+beta[44]+beta[45]-beta[46]-beta[47]+beta[48]-beta[49]+beta[50]-beta[51]+beta[52]-beta[53]+beta[54]-beta[55])+(beta[56]+beta[57]+beta[58]+beta[59]+beta[60]+beta[61]+beta[62]+beta[63])
