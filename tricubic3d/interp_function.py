# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025, Wenyang Zhao, Osamu Miyashita, Florence Tama, RIKEN


import logging
from concurrent.futures import ThreadPoolExecutor, wait

from numba import set_num_threads

import numpy as np

from .coefficients import NUM_COEFFICIENTS
from .exceptions import DimensionMismatchError, NumberIsTooSmallError
from .function import (
    TricubicFunction,
    IndexedCubicSplinePosition,
    _derivative_tables,
    _output,
    compute_power_table,
)
from .kernels import (
    fill_power_table,
    polynomial_value,
    polynomial_value_d1,
    polynomial_value_d2,
    build_cells,
    sample_cells,
    evaluate,
)
from .utils import (
    Ticker,
    check_length,
    check_order,
    check_points,
    check_bounds,
    check_dimensions,
    is_uniform,
    is_integer_range,
    search_index_binary,
    search_index_integer,
)


__all__ = [
    "TricubicInterpolatingFunction",
    "ArrayProcedure",
    "GridSize",
]


log = logging.getLogger(__name__)


# Order of the grid sample bundle
VALUE_NAMES = (
    "f", "dfdx", "dfdy", "dfdz",
    "d2fdxdy", "d2fdxdz", "d2fdydz", "d3fdxdydz",
)
AXIS_NAMES = ("X", "Y", "Z")


class GridSize:
    """
    Size of an interpolating function over a grid of samples.

    Parameters
    ----------
    dimensions : sequence of int
        Number of samples on the X, Y and Z axes, each at least 2.
    """

    def __init__(self, dimensions):
        dimensions = tuple(int(n) for n in dimensions)
        if len(dimensions) != 3:
            raise ValueError(
                f"Dimensions must have length 3, got {len(dimensions)}."
            )
        for n, name in zip(dimensions, AXIS_NAMES):
            if n < 2:
                raise NumberIsTooSmallError(n, 2, name)
        self.dimensions = dimensions

    def function_points(self, dimension):
        return self.dimensions[dimension]

    def spline_points(self, dimension):
        return self.dimensions[dimension] - 1

    @property
    def total_function_points(self):
        nx, ny, nz = self.dimensions
        return nx * ny * nz

    @property
    def total_spline_points(self):
        nx, ny, nz = self.dimensions
        return (nx - 1) * (ny - 1) * (nz - 1)

    def memory_footprint(self, single_precision=False):
        """
        Bytes held by the coefficients plus the axes and cell widths.
        """

        itemsize = 4 if single_precision else 8
        total = self.total_spline_points * NUM_COEFFICIENTS * itemsize
        for n in self.dimensions:
            total += 8 * (n + n - 1)
        return total

    def enlarge(self, n):
        """Size after resampling every cell n times per axis."""
        return GridSize(
            [1 + self.spline_points(i) * n for i in range(3)]
        )

    def __repr__(self):
        return f"GridSize{self.dimensions}"


class ArrayProcedure:
    """
    Sampling procedure collecting the axes and values into arrays.

    After :meth:`TricubicInterpolatingFunction.sample` the attributes
    `x`, `y`, `z` hold the sample coordinates and `values` the samples
    with shape (len(x), len(y), len(z)).
    """

    def __init__(self):
        self.x = None
        self.y = None
        self.z = None
        self.values = None

    def set_dimensions(self, nx, ny, nz):
        self.x = np.empty(nx, dtype=np.float64)
        self.y = np.empty(ny, dtype=np.float64)
        self.z = np.empty(nz, dtype=np.float64)
        self.values = np.empty((nx, ny, nz), dtype=np.float64)
        return True

    def set_x(self, i, value):
        self.x[i] = value

    def set_y(self, j, value):
        self.y[j] = value

    def set_z(self, k, value):
        self.z[k] = value

    def set_value(self, i, j, k, value):
        self.values[i, j, k] = value


def _check_axis_lengths(coordinates):
    try:
        xval, yval, zval = coordinates
    except (ValueError, TypeError):
        raise ValueError(
            "Coordinates must be a sequence of three 1D arrays: (x, y, z)."
        ) from None
    return [
        check_length(axis, name)
        for axis, name in zip((xval, yval, zval), AXIS_NAMES)
    ]


def _check_axis_order(axes):
    for axis, name in zip(axes, AXIS_NAMES):
        check_order(axis, name)


def _read_exact(stream, size):
    data = stream.read(size)
    if len(data) != size:
        raise EOFError(
            f"Unexpected end of stream: expected {size} bytes, "
            f"got {len(data)}."
        )
    return data


def _sample_offsets(n):
    step = 1.0 / n
    offsets = np.arange(n + 1, dtype=np.float64) * step
    # Final sample sits exactly on the upper cell bound
    offsets[n] = 1.0
    return offsets


def _sample_axis(values, scale, offsets, setter):
    n = offsets.shape[0] - 1
    last = (values.shape[0] - 1) * n
    position = np.empty(last + 1, dtype=np.int64)
    table = np.empty(last + 1, dtype=np.int64)
    for s in range(last + 1):
        p = s // n
        t = s % n
        if s == last:
            p -= 1
            t = n
        position[s] = p
        table[s] = t
        if t == n:
            # Closing sample is the last node itself
            setter(s, values[p + 1])
        else:
            setter(s, values[p] + scale[p] * offsets[t])
    return position, table


class TricubicInterpolatingFunction:
    """
    Tricubic interpolation over a rectilinear 3D grid.

    Each cell holds the coefficients of a tricubic polynomial matching the
    function value and the seven derivatives f_x, f_y, f_z, f_xy, f_xz,
    f_yz, f_xyz at its 8 corners (Lekien & Marsden, 2005). The
    interpolant is C1 continuous across cells.

    Parameters
    ----------
    coordinates : array-like
        A sequence of three 1D arrays (x, y, z), each strictly increasing
        with at least 2 samples.
    values : sequence of array-like
        Eight 3D arrays of shape (len(x), len(y), len(z)):
        f, df/dx, df/dy, df/dz, d2f/dxdy, d2f/dxdz, d2f/dydz, d3f/dxdydz.
    progress : callable, tqdm.tqdm or bool, optional
        Called with the completed fraction of the build in [0, 1], or a
        tqdm bar advanced per cell. True shows a new tqdm bar.
    executor : concurrent.futures.Executor, optional
        Thread pool used to build the cells in chunks.
    task_size : int, optional
        Number of cells per chunk. Default is 1000.
    num_threads : int, optional
        Number of threads for the build when no executor is given, and
        for bulk evaluation with :meth:`__call__`. Default is 1.
    single_precision : bool, optional
        Store the coefficients as float32. Default is False.
    integer_fast_path : bool, optional
        Use the unscaled path when every axis has unit spacing.
        Default is True.
    bounds_error : bool, optional
        If True, :meth:`__call__` raises an error when query points are
        outside the grid. Default is True.
    fill_value : float, optional
        Value used by :meth:`__call__` for points outside the grid.
        Default is numpy.nan.
    """

    def __init__(
        self,
        coordinates,
        values,
        progress=None,
        executor=None,
        task_size=1000,
        num_threads=1,
        single_precision=False,
        integer_fast_path=True,
        bounds_error=True,
        fill_value=np.nan,
    ):

        # Validate and preprocess input parameters
        xval, yval, zval, data = self._check_inputs(coordinates, values)
        self._set_axes(xval, yval, zval, integer_fast_path)

        if task_size < 1:
            raise NumberIsTooSmallError(task_size, 1, "task_size")

        # Solve the coefficients of every cell
        self._coefficients = self._construct(
            data, progress, executor, task_size, num_threads,
            single_precision
        )

        self.bounds_error = bounds_error
        self.fill_value = fill_value
        self.num_threads = num_threads

    def _check_inputs(self, coordinates, values):
        """
        Validate the axes and the grid sample bundle.

        Checks, in order, the axis lengths, the shape of every sample
        array and the axis ordering.

        Returns
        -------
        xval, yval, zval : np.ndarray
            Validated 1D axes.
        data : np.ndarray, shape (8, nx, ny, nz)
            Stacked grid samples.
        """

        axes = _check_axis_lengths(coordinates)
        shape = tuple(axis.shape[0] for axis in axes)

        if len(values) != len(VALUE_NAMES):
            raise DimensionMismatchError(
                len(VALUE_NAMES), len(values), "Values"
            )
        data = np.empty((len(VALUE_NAMES),) + shape, dtype=np.float64)
        for d, (value, name) in enumerate(zip(values, VALUE_NAMES)):
            value = np.asarray(value, dtype=np.float64)
            check_dimensions(value.shape, shape, name)
            data[d] = value

        _check_axis_order(axes)

        return axes[0], axes[1], axes[2], data

    def _set_axes(self, xval, yval, zval, integer_fast_path=True):
        self._xval = xval
        self._yval = yval
        self._zval = zval
        self._xscale = np.diff(xval)
        self._yscale = np.diff(yval)
        self._zscale = np.diff(zval)
        self.is_uniform = all(is_uniform(v) for v in (xval, yval, zval))
        self.is_integer = self.is_uniform and all(
            is_integer_range(v) for v in (xval, yval, zval)
        )
        self._integer = self.is_integer and integer_fast_path
        self._search_index = (
            search_index_integer if self._integer else search_index_binary
        )
        bounds = ((xval[0], xval[-1]), (yval[0], yval[-1]),
                  (zval[0], zval[-1]))
        self.bounds = bounds

    def _construct(self, data, progress, executor, task_size, num_threads,
                   single_precision):
        """
        Build the cell coefficients in chunks of `task_size` cells,
        serially or on a thread pool.

        Returns
        -------
        coefficients : np.ndarray, shape (lastI, lastJ, lastK, 64)
        """

        shape = tuple(v.shape[0] - 1 for v in
                      (self._xval, self._yval, self._zval))
        total = shape[0] * shape[1] * shape[2]
        dtype = np.float32 if single_precision else np.float64
        coefficients = np.empty(shape + (NUM_COEFFICIENTS,), dtype=dtype)

        owned = None
        if executor is None and num_threads > 1:
            owned = ThreadPoolExecutor(max_workers=num_threads)
            executor = owned
        parallel = executor is not None and total > task_size

        log.debug(
            "Building %d cells %s (integer=%s, single=%s, parallel=%s)",
            total, shape, self._integer, single_precision, parallel
        )

        ticker = Ticker.create(
            progress, total, thread_safe=parallel, desc="Building cells"
        )
        ticker.start()

        def build(start, stop):
            build_cells(
                start, stop, data, self._xval, self._yval, self._zval,
                self._integer, coefficients
            )
            ticker.tick(stop - start)

        chunks = [
            (start, min(start + task_size, total))
            for start in range(0, total, task_size)
        ]
        try:
            if parallel:
                futures = [executor.submit(build, *chunk) for chunk in chunks]
                wait(futures)
                # Re-raise the first worker error
                for future in futures:
                    future.result()
            else:
                for chunk in chunks:
                    build(*chunk)
        finally:
            if owned is not None:
                owned.shutdown()

        ticker.stop()
        return coefficients

    @classmethod
    def _from_coefficients(cls, coordinates, coefficients):
        axes = _check_axis_lengths(coordinates)
        check_dimensions(
            coefficients.shape,
            tuple(axis.shape[0] - 1 for axis in axes) + (NUM_COEFFICIENTS,),
            "Functions"
        )
        _check_axis_order(axes)

        self = cls.__new__(cls)
        self._set_axes(*axes)
        self._coefficients = coefficients
        self.bounds_error = True
        self.fill_value = np.nan
        self.num_threads = 1
        return self

    @classmethod
    def from_functions(cls, coordinates, functions):
        """
        Create from precomputed cell functions.

        Parameters
        ----------
        coordinates : array-like
            A sequence of three 1D arrays (x, y, z).
        functions : array-like
            Nested sequence (or object array) of shape
            (len(x) - 1, len(y) - 1, len(z) - 1) of TricubicFunction.
            The precision of the cell at (0, 0, 0) is used for all cells.

        Returns
        -------
        TricubicInterpolatingFunction
        """

        functions = np.asarray(functions, dtype=object)
        if functions.ndim != 3 or functions.size == 0:
            raise ValueError(
                "Functions must be a 3D nested sequence of "
                f"TricubicFunction, got shape {functions.shape}."
            )
        for index in np.ndindex(functions.shape):
            if not isinstance(functions[index], TricubicFunction):
                raise ValueError(
                    f"Invalid function at {index}: expected "
                    f"TricubicFunction, got {type(functions[index]).__name__}."
                )
        single = functions[0, 0, 0].is_single_precision
        dtype = np.float32 if single else np.float64
        mixed = sum(
            f.is_single_precision != single for f in functions.flat
        )
        if mixed:
            log.debug("Converting %d cells to the precision of cell "
                      "(0, 0, 0)", mixed)
        coefficients = np.empty(
            functions.shape + (NUM_COEFFICIENTS,), dtype=dtype
        )
        for index in np.ndindex(functions.shape):
            coefficients[index] = functions[index].coefficients
        return cls._from_coefficients(coordinates, coefficients)

    # Axes

    @property
    def x(self):
        return self._xval.copy()

    @property
    def y(self):
        return self._yval.copy()

    @property
    def z(self):
        return self._zval.copy()

    @property
    def shape(self):
        """Number of cells on each axis."""
        return self._coefficients.shape[:3]

    @property
    def is_single_precision(self):
        return self._coefficients.dtype == np.float32

    @property
    def min_x(self):
        return float(self._xval[0])

    @property
    def max_x(self):
        return float(self._xval[-1])

    @property
    def min_y(self):
        return float(self._yval[0])

    @property
    def max_y(self):
        return float(self._yval[-1])

    @property
    def min_z(self):
        return float(self._zval[0])

    @property
    def max_z(self):
        return float(self._zval[-1])

    @property
    def max_x_spline_position(self):
        return self._xval.shape[0] - 2

    @property
    def max_y_spline_position(self):
        return self._yval.shape[0] - 2

    @property
    def max_z_spline_position(self):
        return self._zval.shape[0] - 2

    def get_x_spline_value(self, position):
        return float(self._xval[position])

    def get_y_spline_value(self, position):
        return float(self._yval[position])

    def get_z_spline_value(self, position):
        return float(self._zval[position])

    def get_scale(self):
        """
        Sample spacing on each axis, mapping the unit cell back to axis
        units. Only defined on uniform grids.
        """

        if not self.is_uniform:
            raise RuntimeError("The function is not uniform.")
        return np.array([
            (v[-1] - v[0]) / (v.shape[0] - 1)
            for v in (self._xval, self._yval, self._zval)
        ])

    def is_valid_point(self, x, y, z):
        return all(
            lower <= value <= upper
            for value, (lower, upper) in zip((x, y, z), self.bounds)
        )

    # Cell access

    def get_coefficients(self, i, j, k):
        return self._coefficients[i, j, k].astype(np.float64)

    def get_spline_node(self, i, j, k):
        return TricubicFunction(
            self._coefficients[i, j, k], self.is_single_precision
        )

    # Locating points

    def _position(self, value, values, scale):
        i = self._search_index(value, values)
        if self._integer:
            t = value - values[i]
        else:
            t = (value - values[i]) / scale[i]
        # Rounding may leave the offset a hair outside the unit cell
        return i, min(max(t, 0.0), 1.0)

    def _locate(self, x, y, z):
        i, tx = self._position(x, self._xval, self._xscale)
        j, ty = self._position(y, self._yval, self._yscale)
        k, tz = self._position(z, self._zval, self._zscale)
        table = np.empty(NUM_COEFFICIENTS, dtype=np.float64)
        fill_power_table(tx, ty, tz, table)
        return i, j, k, table

    def _spline_position(self, value, values, scale):
        i, t = self._position(value, values, scale)
        return IndexedCubicSplinePosition(
            i, t, None if self._integer else scale[i]
        )

    def get_x_spline_position(self, value):
        return self._spline_position(value, self._xval, self._xscale)

    def get_y_spline_position(self, value):
        return self._spline_position(value, self._yval, self._yscale)

    def get_z_spline_position(self, value):
        return self._spline_position(value, self._zval, self._zscale)

    def _rescale(self, i, j, k, derivative1, derivative2=None):
        if self._integer:
            return
        sx = self._xscale[i]
        sy = self._yscale[j]
        sz = self._zscale[k]
        derivative1[0] /= sx
        derivative1[1] /= sy
        derivative1[2] /= sz
        if derivative2 is not None:
            derivative2[0] /= sx * sx
            derivative2[1] /= sy * sy
            derivative2[2] /= sz * sz

    # Evaluation from raw coordinates

    def value(self, x, y, z):
        """
        Interpolated value at (x, y, z).

        Raises
        ------
        OutOfRangeError
            If any coordinate is outside the grid.
        """

        i, j, k, table = self._locate(x, y, z)
        return self.value_table(i, j, k, table)

    def value_d1(self, x, y, z, derivative1=None):
        """
        Interpolated value and gradient at (x, y, z).

        Returns
        -------
        value : float
        derivative1 : np.ndarray, shape (3,)
            df/dx, df/dy, df/dz in axis units.
        """

        i, j, k, table = self._locate(x, y, z)
        return self.value_table_d1(i, j, k, table, derivative1)

    def value_d2(self, x, y, z, derivative1=None, derivative2=None):
        """
        Interpolated value, gradient and pure second partials
        (d2f/dx2, d2f/dy2, d2f/dz2) at (x, y, z).
        """

        i, j, k, table = self._locate(x, y, z)
        return self.value_table_d2(i, j, k, table, derivative1, derivative2)

    # Evaluation from positions created by this function

    def value_at(self, x, y, z):
        table = compute_power_table(x, y, z)
        return self.value_table(x.index, y.index, z.index, table)

    def value_at_d1(self, x, y, z, derivative1=None):
        return self.get_spline_node(x.index, y.index, z.index).value_at_d1(
            x, y, z, derivative1
        )

    def value_at_d2(self, x, y, z, derivative1=None, derivative2=None):
        return self.get_spline_node(x.index, y.index, z.index).value_at_d2(
            x, y, z, derivative1, derivative2
        )

    # Evaluation from power tables

    def value_table(self, i, j, k, table):
        """
        Value in cell (i, j, k) from a power table.

        See :func:`tricubic3d.function.compute_power_table`.
        """

        return float(polynomial_value(self._coefficients[i, j, k], table))

    def value_table_d1(self, i, j, k, table, derivative1=None, table2=None,
                       table3=None):
        """
        Value and gradient in cell (i, j, k) from a power table. The
        gradient is in axis units.
        """

        table2, table3, _ = _derivative_tables(table, table2, table3)
        derivative1 = _output(derivative1)
        value = polynomial_value_d1(
            self._coefficients[i, j, k], table, table2, table3, derivative1
        )
        self._rescale(i, j, k, derivative1)
        return float(value), derivative1

    def value_table_d2(self, i, j, k, table, derivative1=None,
                       derivative2=None, table2=None, table3=None,
                       table6=None):
        table2, table3, table6 = _derivative_tables(
            table, table2, table3, table6, second=True
        )
        derivative1 = _output(derivative1)
        derivative2 = _output(derivative2)
        value = polynomial_value_d2(
            self._coefficients[i, j, k], table, table2, table3, table6,
            derivative1, derivative2
        )
        self._rescale(i, j, k, derivative1, derivative2)
        return float(value), derivative1, derivative2

    # Bulk evaluation

    def __call__(self, points, nu=0):
        """
        Evaluate the interpolant at the given query points.

        Parameters
        ----------
        points : array-like
            Input query point coordinates.
            Expected shape is (num_points, 3).
        nu : int, optional
            0 returns the values, 1 also the gradients, 2 also the pure
            second partials. Default is 0.

        Returns
        -------
        values : np.ndarray, shape (num_points,)
            Evaluated values at the input points. Points outside the grid
            are set to `fill_value` if `bounds_error` is False.
        derivative1 : np.ndarray, shape (num_points, 3)
            Only for nu >= 1.
        derivative2 : np.ndarray, shape (num_points, 3)
            Only for nu == 2.
        """

        if nu not in (0, 1, 2):
            raise ValueError(f"nu must be 0, 1 or 2, got {nu}.")

        # Validate input points
        msg, points = check_points(points)
        if msg:
            raise ValueError(msg)

        # Check for out-of-bound points
        flag_all_in, mask_in, num_in = check_bounds(points, self.bounds)
        if self.bounds_error and not flag_all_in:
            raise ValueError("One or more query points are out of bounds.")

        values_in = np.zeros(num_in, dtype=np.float64)
        d1_in = np.zeros((num_in if nu >= 1 else 0, 3), dtype=np.float64)
        d2_in = np.zeros((num_in if nu == 2 else 0, 3), dtype=np.float64)
        if num_in != 0:
            px, py, pz = points[mask_in].T
            index = []
            offset = []
            for p, v, s in zip(
                (px, py, pz),
                (self._xval, self._yval, self._zval),
                (self._xscale, self._yscale, self._zscale),
            ):
                i = self._search_index(p, v)
                t = p - v[i] if self._integer else (p - v[i]) / s[i]
                index.append(np.asarray(i, dtype=np.int64))
                offset.append(np.clip(t, 0.0, 1.0))

            set_num_threads(self.num_threads)
            evaluate(
                self._coefficients, index[0], index[1], index[2],
                offset[0], offset[1], offset[2], nu,
                values_in, d1_in, d2_in
            )
            if nu >= 1 and not self._integer:
                scale = np.stack([
                    self._xscale[index[0]],
                    self._yscale[index[1]],
                    self._zscale[index[2]],
                ], axis=1)
                d1_in /= scale
                if nu == 2:
                    d2_in /= scale * scale

        # Assign computed values into in-bound points
        num_points = points.shape[0]
        values = np.full(num_points, self.fill_value, dtype=np.float64)
        values[mask_in] = values_in
        if nu == 0:
            return values
        derivative1 = np.full((num_points, 3), self.fill_value,
                              dtype=np.float64)
        derivative1[mask_in] = d1_in
        if nu == 1:
            return values, derivative1
        derivative2 = np.full((num_points, 3), self.fill_value,
                              dtype=np.float64)
        derivative2[mask_in] = d2_in
        return values, derivative1, derivative2

    # Precision

    def to_single_precision(self):
        """Convert the coefficients to float32 in place."""
        if self.is_single_precision:
            return
        log.debug("Converting %s cells to single precision", self.shape)
        self._coefficients = self._coefficients.astype(np.float32)

    def to_double_precision(self):
        """Convert the coefficients to float64 in place."""
        if not self.is_single_precision:
            return
        log.debug("Converting %s cells to double precision", self.shape)
        self._coefficients = self._coefficients.astype(np.float64)

    # Resampling

    def sample(self, nx, procedure, ny=None, nz=None, progress=None):
        """
        Sample every cell n times per axis, plus a final sample on the
        last node of each axis.

        Parameters
        ----------
        nx : int
            Samples per cell on the X axis (and on Y and Z when `ny` and
            `nz` are omitted).
        procedure : object
            Receives the samples. It must provide
            ``set_dimensions(nx, ny, nz) -> bool`` (False aborts),
            ``set_x(i, value)``, ``set_y(j, value)``, ``set_z(k, value)``
            and ``set_value(i, j, k, value)``. Values are passed with z
            outermost and x innermost.
        ny, nz : int, optional
            Samples per cell on the Y and Z axes.
        progress : callable, tqdm.tqdm or bool, optional
            Called with the completed fraction in [0, 1], or a tqdm bar
            advanced per sample.
        """

        ny = nx if ny is None else ny
        nz = nx if nz is None else nz
        if nx < 1 or ny < 1 or nz < 1:
            raise ValueError(
                f"Samples must be positive, got ({nx}, {ny}, {nz})."
            )

        cells = self.shape
        maxx = cells[0] * nx
        maxy = cells[1] * ny
        maxz = cells[2] * nz
        if not procedure.set_dimensions(maxx + 1, maxy + 1, maxz + 1):
            return

        ticker = Ticker.create(
            progress, (maxx + 1) * (maxy + 1) * (maxz + 1), desc="Sampling"
        )
        ticker.start()

        # One power table per distinct offset combination
        nx1 = nx + 1
        ny1 = ny + 1
        nz1 = nz + 1
        ox = _sample_offsets(nx)
        oy = _sample_offsets(ny)
        oz = _sample_offsets(nz)
        tables = np.empty((nx1 * ny1 * nz1, NUM_COEFFICIENTS),
                          dtype=np.float64)
        i = 0
        for z in range(nz1):
            for y in range(ny1):
                for x in range(nx1):
                    fill_power_table(ox[x], oy[y], oz[z], tables[i])
                    i += 1

        xp, xt = _sample_axis(self._xval, self._xscale, ox, procedure.set_x)
        yp, yt = _sample_axis(self._yval, self._yscale, oy, procedure.set_y)
        zp, zt = _sample_axis(self._zval, self._zscale, oz, procedure.set_z)

        values = np.empty((maxx + 1, maxy + 1, maxz + 1), dtype=np.float64)
        sample_cells(
            self._coefficients, tables, xp, xt, yp, yt, zp, zt, nx1, ny1,
            values
        )
        for z in range(maxz + 1):
            for y in range(maxy + 1):
                for x in range(maxx + 1):
                    procedure.set_value(x, y, z, float(values[x, y, z]))
                    ticker.tick()

        ticker.stop()

    # Optimisation

    def search(self, maximum, refinements, relative_error=-1,
               absolute_error=-1):
        """
        Find the optimum of the interpolant.

        The cell whose origin holds the best sample is chosen. When the
        gradient at that origin points away from the cell (negative for a
        maximum, positive for a minimum) the search moves one cell back on
        that axis. The cell is then refined with
        :meth:`TricubicFunction.search`.

        Returns
        -------
        result : np.ndarray
            [x, y, z, value] in axis units.
        """

        if refinements < 1:
            raise ValueError(
                f"Refinements must be positive, got {refinements}."
            )

        origins = self._coefficients[..., 0]
        flat = np.argmax(origins) if maximum else np.argmin(origins)
        cell = list(np.unravel_index(flat, origins.shape))

        _, gradient = self.get_spline_node(*cell).value000_d1()
        for axis in range(3):
            wrong_way = gradient[axis] < 0 if maximum else gradient[axis] > 0
            if wrong_way:
                cell[axis] = max(0, cell[axis] - 1)

        ox, oy, oz = (int(c) for c in cell)
        optimum = self.get_spline_node(ox, oy, oz).search(
            maximum, refinements, relative_error, absolute_error
        )
        optimum[0] = self._xval[ox] + self._xscale[ox] * optimum[0]
        optimum[1] = self._yval[oy] + self._yscale[oy] * optimum[1]
        optimum[2] = self._zval[oz] + self._zscale[oz] * optimum[2]
        return optimum

    # Size

    @staticmethod
    def estimate_size(dimensions):
        """
        Size of a function built on a grid with the given number of
        samples per axis.

        Returns
        -------
        GridSize
        """

        return GridSize(dimensions)

    # Serialization

    def write(self, stream, progress=None):
        """
        Write to a binary stream.

        The layout is big-endian: three int32 axis lengths, the three
        axes as float64, one byte for single precision, then 64 float32
        or float64 coefficients per cell with the x index outermost and
        the z index innermost.
        """

        nx, ny, nz = (v.shape[0] for v in
                      (self._xval, self._yval, self._zval))
        log.debug("Writing function with %d x %d x %d samples", nx, ny, nz)
        stream.write(np.array([nx, ny, nz], dtype=">i4").tobytes())
        for axis in (self._xval, self._yval, self._zval):
            stream.write(axis.astype(">f8").tobytes())
        single = self.is_single_precision
        stream.write(b"\x01" if single else b"\x00")

        dtype = ">f4" if single else ">f8"
        cells = self.shape
        ticker = Ticker.create(
            progress, cells[0] * cells[1] * cells[2], desc="Writing"
        )
        ticker.start()
        for i in range(cells[0]):
            stream.write(self._coefficients[i].astype(dtype).tobytes())
            ticker.tick(cells[1] * cells[2])
        ticker.stop()

    @classmethod
    def read(cls, stream, progress=None):
        """
        Read a function written by :meth:`write`.

        Raises
        ------
        EOFError
            If the stream ends early.
        ValueError
            If the stream content does not describe a valid function.
        """

        nx, ny, nz = (int(n) for n in
                      np.frombuffer(_read_exact(stream, 12), dtype=">i4"))
        for n, name in zip((nx, ny, nz), AXIS_NAMES):
            if n < 2:
                raise NumberIsTooSmallError(n, 2, name)
        axes = [
            np.frombuffer(_read_exact(stream, 8 * n), dtype=">f8")
            .astype(np.float64)
            for n in (nx, ny, nz)
        ]
        single = _read_exact(stream, 1) != b"\x00"
        log.debug("Reading function with %d x %d x %d samples (single=%s)",
                  nx, ny, nz, single)

        dtype = np.dtype(">f4" if single else ">f8")
        native = np.float32 if single else np.float64
        cells = (nx - 1, ny - 1, nz - 1)
        slab = cells[1] * cells[2] * NUM_COEFFICIENTS
        coefficients = np.empty(cells + (NUM_COEFFICIENTS,), dtype=native)
        ticker = Ticker.create(
            progress, cells[0] * cells[1] * cells[2], desc="Reading"
        )
        ticker.start()
        for i in range(cells[0]):
            data = _read_exact(stream, slab * dtype.itemsize)
            coefficients[i] = np.frombuffer(data, dtype=dtype).reshape(
                cells[1], cells[2], NUM_COEFFICIENTS
            )
            ticker.tick(cells[1] * cells[2])
        ticker.stop()

        return cls._from_coefficients(axes, coefficients)
