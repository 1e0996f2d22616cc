# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025, Wenyang Zhao, Osamu Miyashita, Florence Tama, RIKEN


import numpy as np
import numba as nb

from .coefficients import NUM_COEFFICIENTS, fill_coefficients


__all__ = [
    "fill_power_table",
    "polynomial_value",
    "polynomial_value_d1",
    "polynomial_value_d2",
    "polynomial_gradient",
    "build_cells",
    "sample_cells",
    "evaluate",
]


@nb.njit(nogil=True)
def fill_power_table(x, y, z, table):
    """
    Write the 64 monomials x^p y^q z^r into `table` at p + 4q + 16r.
    """

    x = 1.0 * x
    y = 1.0 * y
    z = 1.0 * z
    px = (1.0, x, x * x, x * x * x)
    py = (1.0, y, y * y, y * y * y)
    pz = (1.0, z, z * z, z * z * z)
    n = 0
    for r in range(4):
        for q in range(4):
            yz = py[q] * pz[r]
            for p in range(4):
                table[n] = yz * px[p]
                n += 1


@nb.njit(nogil=True)
def polynomial_value(a, table):
    result = 0.0
    for n in range(NUM_COEFFICIENTS):
        result += a[n] * table[n]
    return result


@nb.njit(nogil=True)
def polynomial_value_d1(a, table, table2, table3, derivative1):
    """
    Evaluate the polynomial and its gradient.

    `table2` and `table3` are the power table scaled by 2 and 3. The
    derivative of the term at n along x uses the monomial at n - 1,
    along y at n - 4 and along z at n - 16.

    Returns
    -------
    value : float
        The gradient is written into `derivative1`.
    """

    result = 0.0
    dx = 0.0
    dy = 0.0
    dz = 0.0
    n = 0
    for r in range(4):
        for q in range(4):
            for p in range(4):
                c = a[n]
                result += c * table[n]
                if p == 1:
                    dx += c * table[n - 1]
                elif p == 2:
                    dx += c * table2[n - 1]
                elif p == 3:
                    dx += c * table3[n - 1]
                if q == 1:
                    dy += c * table[n - 4]
                elif q == 2:
                    dy += c * table2[n - 4]
                elif q == 3:
                    dy += c * table3[n - 4]
                if r == 1:
                    dz += c * table[n - 16]
                elif r == 2:
                    dz += c * table2[n - 16]
                elif r == 3:
                    dz += c * table3[n - 16]
                n += 1
    derivative1[0] = dx
    derivative1[1] = dy
    derivative1[2] = dz
    return result


@nb.njit(nogil=True)
def polynomial_value_d2(a, table, table2, table3, table6,
                        derivative1, derivative2):
    """
    Evaluate the polynomial, its gradient and its pure second partials.

    Same as :func:`polynomial_value_d1` with the second derivatives taken
    from the monomial two powers down (n - 2, n - 8, n - 32).
    """

    result = 0.0
    dx = 0.0
    dy = 0.0
    dz = 0.0
    dxx = 0.0
    dyy = 0.0
    dzz = 0.0
    n = 0
    for r in range(4):
        for q in range(4):
            for p in range(4):
                c = a[n]
                result += c * table[n]
                if p == 1:
                    dx += c * table[n - 1]
                elif p == 2:
                    dx += c * table2[n - 1]
                    dxx += c * table2[n - 2]
                elif p == 3:
                    dx += c * table3[n - 1]
                    dxx += c * table6[n - 2]
                if q == 1:
                    dy += c * table[n - 4]
                elif q == 2:
                    dy += c * table2[n - 4]
                    dyy += c * table2[n - 8]
                elif q == 3:
                    dy += c * table3[n - 4]
                    dyy += c * table6[n - 8]
                if r == 1:
                    dz += c * table[n - 16]
                elif r == 2:
                    dz += c * table2[n - 16]
                    dzz += c * table2[n - 32]
                elif r == 3:
                    dz += c * table3[n - 16]
                    dzz += c * table6[n - 32]
                n += 1
    derivative1[0] = dx
    derivative1[1] = dy
    derivative1[2] = dz
    derivative2[0] = dxx
    derivative2[1] = dyy
    derivative2[2] = dzz
    return result


@nb.njit(nogil=True)
def polynomial_gradient(a, table, table2, table3, derivative1):
    dx = 0.0
    dy = 0.0
    dz = 0.0
    n = 0
    for r in range(4):
        for q in range(4):
            for p in range(4):
                c = a[n]
                if p == 1:
                    dx += c * table[n - 1]
                elif p == 2:
                    dx += c * table2[n - 1]
                elif p == 3:
                    dx += c * table3[n - 1]
                if q == 1:
                    dy += c * table[n - 4]
                elif q == 2:
                    dy += c * table2[n - 4]
                elif q == 3:
                    dy += c * table3[n - 4]
                if r == 1:
                    dz += c * table[n - 16]
                elif r == 2:
                    dz += c * table2[n - 16]
                elif r == 3:
                    dz += c * table3[n - 16]
                n += 1
    derivative1[0] = dx
    derivative1[1] = dy
    derivative1[2] = dz


@nb.njit(nogil=True)
def build_cells(start, stop, data, xval, yval, zval, integer, coefficients):
    """
    Solve the cells with flat index in [start, stop).

    Parameters
    ----------
    start, stop : int
        Flat cell range, i fastest, then j, then k.
    data : np.ndarray, shape (8, nx, ny, nz)
        Grid samples f, fx, fy, fz, fxy, fxz, fyz, fxyz.
    xval, yval, zval : np.ndarray
        Axis coordinates.
    integer : bool
        Unit spacing; derivative samples are used unscaled.
    coefficients : np.ndarray, shape (nx - 1, ny - 1, nz - 1, 64)
        Output, float64 or float32.
    """

    last_i = coefficients.shape[0]
    last_ij = last_i * coefficients.shape[1]
    beta = np.empty(NUM_COEFFICIENTS, dtype=np.float64)
    a = np.empty(NUM_COEFFICIENTS, dtype=np.float64)
    factor = np.ones(8, dtype=np.float64)
    for index in range(start, stop):
        k = index // last_ij
        rest = index - k * last_ij
        j = rest // last_i
        i = rest - j * last_i

        if not integer:
            xr = xval[i + 1] - xval[i]
            yr = yval[j + 1] - yval[j]
            zr = zval[k + 1] - zval[k]
            factor[1] = xr
            factor[2] = yr
            factor[3] = zr
            factor[4] = xr * yr
            factor[5] = xr * zr
            factor[6] = yr * zr
            factor[7] = xr * yr * zr

        n = 0
        for d in range(8):
            for dk in range(2):
                for dj in range(2):
                    for di in range(2):
                        beta[n] = data[d, i + di, j + dj, k + dk] * factor[d]
                        n += 1

        fill_coefficients(beta, a)
        for n in range(NUM_COEFFICIENTS):
            coefficients[i, j, k, n] = a[n]


@nb.njit(nogil=True)
def sample_cells(coefficients, tables, xp, xt, yp, yt, zp, zt, nx1, ny1,
                 values):
    """
    Fill `values[x, y, z]` from the cell xp[x], yp[y], zp[z] and the
    power table at nx1 * (yt[y] + ny1 * zt[z]) + xt[x].
    """

    for z in range(zp.shape[0]):
        for y in range(yp.shape[0]):
            j = nx1 * (yt[y] + ny1 * zt[z])
            for x in range(xp.shape[0]):
                values[x, y, z] = polynomial_value(
                    coefficients[xp[x], yp[y], zp[z]], tables[j + xt[x]]
                )


@nb.njit(parallel=True)
def evaluate(
    coefficients,
    index_x,
    index_y,
    index_z,
    tx,
    ty,
    tz,
    nu,
    values,
    derivative1,
    derivative2,
):
    """
    Evaluate at multiple query points located in their cells.

    Parameters
    ----------
    coefficients : np.ndarray, shape (lastI, lastJ, lastK, 64)
        Cell coefficients.
    index_x, index_y, index_z : np.ndarray, dtype=int
        Cell index of each point.
    tx, ty, tz : np.ndarray
        Offset of each point inside its cell, in [0, 1].
    nu : int
        0 for values only, 1 to also fill the gradient, 2 to also fill
        the pure second partials.
    values : np.ndarray, shape (num_points,)
        Output values, modified in place.
    derivative1, derivative2 : np.ndarray, shape (num_points, 3)
        Output derivatives with respect to the cell offsets.

    Returns
    -------
    None
        The evaluated results are stored in-place.
    """

    for m in nb.prange(values.shape[0]):
        table = np.empty(NUM_COEFFICIENTS, dtype=np.float64)
        fill_power_table(tx[m], ty[m], tz[m], table)
        a = coefficients[index_x[m], index_y[m], index_z[m]]
        if nu == 0:
            values[m] = polynomial_value(a, table)
        elif nu == 1:
            values[m] = polynomial_value_d1(
                a, table, 2.0 * table, 3.0 * table, derivative1[m]
            )
        else:
            values[m] = polynomial_value_d2(
                a, table, 2.0 * table, 3.0 * table, 6.0 * table,
                derivative1[m], derivative2[m]
            )
