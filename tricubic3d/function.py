# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025, Wenyang Zhao, Osamu Miyashita, Florence Tama, RIKEN


import numpy as np

from .coefficients import NUM_COEFFICIENTS
from .exceptions import OutOfRangeError
from .kernels import (
    fill_power_table,
    polynomial_value,
    polynomial_value_d1,
    polynomial_value_d2,
    polynomial_gradient,
)


__all__ = [
    "TricubicFunction",
    "CubicSplinePosition",
    "IndexedCubicSplinePosition",
    "compute_power_table",
    "compute_float_power_table",
    "scale_power_table",
    "is_boundary",
    "are_equal",
]


class CubicSplinePosition:
    """
    Offset inside a cell along one axis, with its powers.

    Parameters
    ----------
    x : float
        Offset in [0, 1].
    """

    def __init__(self, x):
        x = float(x)
        if not 0.0 <= x <= 1.0:
            raise OutOfRangeError(x, 0.0, 1.0)
        self.x = x
        self.x2 = x * x
        self.x3 = self.x2 * x

    def power(self, n):
        """Return x^n for n in 0..3."""
        if n == 0:
            return 1.0
        if n == 1:
            return self.x
        if n == 2:
            return self.x2
        if n == 3:
            return self.x3
        raise IndexError(f"Power must be in [0, 3], got {n}.")

    def scale_gradient(self, value):
        return value

    def scale_gradient2(self, value):
        return value


class IndexedCubicSplinePosition(CubicSplinePosition):
    """
    Offset inside a given cell of an interpolating function.

    Parameters
    ----------
    index : int
        Cell index on the axis.
    x : float
        Offset in [0, 1].
    scale : float, optional
        Cell width. Derivatives with respect to the offset are divided
        by it (and by its square for second derivatives). None on grids
        with unit spacing.

    Notes
    -----
    A position is only meaningful for the function that created it.
    """

    def __init__(self, index, x, scale=None):
        super().__init__(x)
        self.index = int(index)
        self.scale = scale

    def scale_gradient(self, value):
        if self.scale is None:
            return value
        return value / self.scale

    def scale_gradient2(self, value):
        if self.scale is None:
            return value
        return value / (self.scale * self.scale)


def _offset(value):
    if isinstance(value, CubicSplinePosition):
        return value.x
    value = float(value)
    if not 0.0 <= value <= 1.0:
        raise OutOfRangeError(value, 0.0, 1.0)
    return value


def compute_power_table(x, y, z):
    """
    Compute the 64 monomials x^p y^q z^r for a position in the unit cube.

    Parameters
    ----------
    x, y, z : float or CubicSplinePosition
        Offsets in [0, 1].

    Returns
    -------
    table : np.ndarray, shape (64,)
        table[p + 4q + 16r] = x^p y^q z^r.
    """

    table = np.empty(NUM_COEFFICIENTS, dtype=np.float64)
    fill_power_table(_offset(x), _offset(y), _offset(z), table)
    return table


def compute_float_power_table(x, y, z):
    """Same as :func:`compute_power_table`, stored in single precision."""
    return compute_power_table(x, y, z).astype(np.float32)


def scale_power_table(table, factor):
    """
    Multiply a power table by `factor`, keeping its precision.

    The derivative evaluations take the tables scaled by 2 and 3, and by
    6 for second derivatives.
    """

    table = np.asarray(table)
    return (table * factor).astype(table.dtype, copy=False)


def is_boundary(dimension, table):
    """
    True when the offset of the power table on `dimension` is 0 or 1.
    """

    if dimension == 0:
        value = table[1]
    elif dimension == 1:
        value = table[4]
    elif dimension == 2:
        value = table[16]
    else:
        raise ValueError(f"Dimension must be 0, 1 or 2, got {dimension}.")
    return value == 0 or value == 1


def are_equal(previous, current, relative_error, absolute_error):
    """
    Convergence test of the search: the values differ by at most
    `absolute_error`, or by at most `relative_error` times the larger
    magnitude. Negative tolerances never match.
    """

    difference = abs(previous - current)
    if difference <= absolute_error:
        return True
    size = max(abs(previous), abs(current))
    return difference <= size * relative_error


def _derivative_tables(table, table2, table3, table6=None, second=False):
    if table2 is None:
        table2 = scale_power_table(table, 2)
    if table3 is None:
        table3 = scale_power_table(table, 3)
    if second and table6 is None:
        table6 = scale_power_table(table, 6)
    return table2, table3, table6


def _output(array):
    if array is None:
        return np.empty(3, dtype=np.float64)
    return array


class TricubicFunction:
    """
    Tricubic polynomial on the unit cube.

    Parameters
    ----------
    coefficients : array-like, shape (64,)
        Polynomial coefficients, entry p + 4q + 16r multiplies
        x^p y^q z^r.
    single_precision : bool, optional
        Store the coefficients as float32. Evaluation is always carried
        out in double precision. Default is False.
    """

    def __init__(self, coefficients, single_precision=False):
        dtype = np.float32 if single_precision else np.float64
        coefficients = np.array(coefficients, dtype=dtype)
        if coefficients.shape != (NUM_COEFFICIENTS,):
            raise ValueError(
                f"Invalid coefficients: expected {NUM_COEFFICIENTS} values, "
                f"got shape {coefficients.shape}."
            )
        self._a = coefficients

    @property
    def is_single_precision(self):
        return self._a.dtype == np.float32

    @property
    def coefficients(self):
        """Copy of the coefficients in double precision."""
        return self._a.astype(np.float64)

    def get(self, index):
        """Return coefficient `index` as a float."""
        if not 0 <= index < NUM_COEFFICIENTS:
            raise IndexError(
                f"Coefficient index must be in [0, {NUM_COEFFICIENTS}), "
                f"got {index}."
            )
        return float(self._a[index])

    def __repr__(self):
        precision = "single" if self.is_single_precision else "double"
        return f"{type(self).__name__}({precision}, a0={self.get(0)!r})"

    # Evaluation at the cell origin

    def value000(self):
        return float(self._a[0])

    def value000_d1(self):
        """
        Value and gradient at (0, 0, 0).

        Returns
        -------
        value : float
        derivative1 : np.ndarray, shape (3,)
        """

        a = self._a
        derivative1 = np.array([a[1], a[4], a[16]], dtype=np.float64)
        return float(a[0]), derivative1

    def value000_d2(self):
        """
        Value, gradient and pure second partials at (0, 0, 0).
        """

        a = self._a
        value, derivative1 = self.value000_d1()
        derivative2 = 2.0 * np.array([a[2], a[8], a[32]], dtype=np.float64)
        return value, derivative1, derivative2

    # Evaluation from raw offsets

    def value(self, x, y, z):
        """
        Evaluate at offsets in the unit cube.

        The offsets are not range checked.
        """

        table = np.empty(NUM_COEFFICIENTS, dtype=np.float64)
        fill_power_table(float(x), float(y), float(z), table)
        return self.value_table(table)

    def value_d1(self, x, y, z, derivative1=None):
        """
        Evaluate the value and gradient.

        Parameters
        ----------
        x, y, z : float
            Offsets in the unit cube (not range checked).
        derivative1 : np.ndarray, optional
            Output array of size 3, filled with df/dx, df/dy, df/dz.

        Returns
        -------
        value : float
        derivative1 : np.ndarray, shape (3,)
        """

        table = np.empty(NUM_COEFFICIENTS, dtype=np.float64)
        fill_power_table(float(x), float(y), float(z), table)
        return self.value_table_d1(table, derivative1)

    def value_d2(self, x, y, z, derivative1=None, derivative2=None):
        """
        Evaluate the value, gradient and pure second partials
        (d2f/dx2, d2f/dy2, d2f/dz2).
        """

        table = np.empty(NUM_COEFFICIENTS, dtype=np.float64)
        fill_power_table(float(x), float(y), float(z), table)
        return self.value_table_d2(table, derivative1, derivative2)

    # Evaluation from precomputed positions

    def value_at(self, x, y, z):
        return self.value_table(compute_power_table(x, y, z))

    def value_at_d1(self, x, y, z, derivative1=None):
        """
        Value and gradient at three precomputed positions. Each gradient
        component is rescaled by its position.
        """

        value, derivative1 = self.value_table_d1(
            compute_power_table(x, y, z), derivative1
        )
        derivative1[0] = x.scale_gradient(derivative1[0])
        derivative1[1] = y.scale_gradient(derivative1[1])
        derivative1[2] = z.scale_gradient(derivative1[2])
        return value, derivative1

    def value_at_d2(self, x, y, z, derivative1=None, derivative2=None):
        value, derivative1, derivative2 = self.value_table_d2(
            compute_power_table(x, y, z), derivative1, derivative2
        )
        for i, position in enumerate((x, y, z)):
            derivative1[i] = position.scale_gradient(derivative1[i])
            derivative2[i] = position.scale_gradient2(derivative2[i])
        return value, derivative1, derivative2

    # Evaluation from power tables

    def value_table(self, table):
        """
        Evaluate from a power table (see :func:`compute_power_table`).
        """

        return float(polynomial_value(self._a, table))

    def value_table_d1(self, table, derivative1=None, table2=None,
                       table3=None):
        """
        Evaluate the value and gradient from a power table.

        Parameters
        ----------
        table : np.ndarray, shape (64,)
            Power table.
        derivative1 : np.ndarray, optional
            Output array of size 3.
        table2, table3 : np.ndarray, optional
            The power table scaled by 2 and 3. Computed when omitted.

        Returns
        -------
        value : float
        derivative1 : np.ndarray, shape (3,)
        """

        table2, table3, _ = _derivative_tables(table, table2, table3)
        derivative1 = _output(derivative1)
        value = polynomial_value_d1(
            self._a, table, table2, table3, derivative1
        )
        return float(value), derivative1

    def value_table_d2(self, table, derivative1=None, derivative2=None,
                       table2=None, table3=None, table6=None):
        """
        Evaluate the value, gradient and pure second partials from a
        power table. `table6` is the power table scaled by 6.
        """

        table2, table3, table6 = _derivative_tables(
            table, table2, table3, table6, second=True
        )
        derivative1 = _output(derivative1)
        derivative2 = _output(derivative2)
        value = polynomial_value_d2(
            self._a, table, table2, table3, table6, derivative1, derivative2
        )
        return float(value), derivative1, derivative2

    def gradient_table(self, table, derivative1=None):
        """Gradient only, from a power table."""
        table2, table3, _ = _derivative_tables(table, None, None)
        derivative1 = _output(derivative1)
        polynomial_gradient(self._a, table, table2, table3, derivative1)
        return derivative1

    # Optimisation

    def search(self, maximum, refinements, relative_error=-1,
               absolute_error=-1):
        """
        Find the optimum inside the cell by binary refinement.

        The 8 vertices of a cube starting at the unit cube are evaluated
        and the best one kept; the opposite bound on each axis is then
        moved to the midpoint. After n rounds the location is known to
        within 2^-n.

        Parameters
        ----------
        maximum : bool
            Search for the maximum, else the minimum.
        refinements : int
            Number of refinement rounds, at least 1.
        relative_error, absolute_error : float, optional
            Stop early when the best vertex moves and its value changes
            by no more than either tolerance. Negative disables.

        Returns
        -------
        result : np.ndarray
            [x, y, z, value] with offsets in the unit cube.
        """

        if refinements < 1:
            raise ValueError(
                f"Refinements must be positive, got {refinements}."
            )
        check_value = relative_error > 0 or absolute_error > 0

        # Lower and upper bound per axis
        bounds = ([0.0, 1.0], [0.0, 1.0], [0.0, 1.0])
        table = np.empty(NUM_COEFFICIENTS, dtype=np.float64)
        values = np.empty(8, dtype=np.float64)

        # Vertices packed as z * 4 + y * 2 + x; vertex 0 is known
        last_index = 0
        last_value = self.value000()
        while True:
            best = 0
            for index in range(8):
                if index == last_index:
                    values[index] = last_value
                else:
                    fill_power_table(
                        bounds[0][index & 1],
                        bounds[1][(index >> 1) & 1],
                        bounds[2][index >> 2],
                        table,
                    )
                    values[index] = polynomial_value(self._a, table)
                if maximum:
                    if values[index] > values[best]:
                        best = index
                elif values[index] < values[best]:
                    best = index
            value = float(values[best])
            vertex = (best & 1, (best >> 1) & 1, best >> 2)

            refinements -= 1
            converged = refinements == 0
            if not converged and check_value and last_index != best:
                converged = are_equal(
                    last_value, value, relative_error, absolute_error
                )
            if converged:
                return np.array([
                    bounds[0][vertex[0]],
                    bounds[1][vertex[1]],
                    bounds[2][vertex[2]],
                    value,
                ])

            last_index = best
            last_value = value
            for axis_bounds, side in zip(bounds, vertex):
                mid = (axis_bounds[0] + axis_bounds[1]) / 2
                axis_bounds[(side + 1) % 2] = mid

    # Storage

    def to_single_precision(self):
        if self.is_single_precision:
            return self
        return TricubicFunction(self._a, single_precision=True)

    def to_double_precision(self):
        if not self.is_single_precision:
            return self
        return TricubicFunction(self._a, single_precision=False)

    def copy(self):
        return TricubicFunction(self._a, self.is_single_precision)

    def scale(self, factor):
        """Multiply every coefficient by `factor`, in place."""
        self._a *= self._a.dtype.type(factor)
