# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025, Wenyang Zhao, Osamu Miyashita, Florence Tama, RIKEN


import logging

from threadpoolctl import threadpool_limits

import numpy as np
from scipy.interpolate import make_interp_spline

from .coefficients import compute_coefficients_inline
from .exceptions import DimensionMismatchError, NumberIsTooSmallError
from .function import TricubicFunction
from .interp_function import (
    AXIS_NAMES,
    TricubicInterpolatingFunction,
    _check_axis_lengths,
    _check_axis_order,
)
from .utils import check_dimensions


__all__ = [
    "TricubicInterpolator",
    "finite_differences",
    "spline_derivatives",
]


log = logging.getLogger(__name__)


def _central_difference(f, axis, coord):
    """
    (f[i+1] - f[i-1]) / (x[i+1] - x[i-1]) along `axis`, zero on the
    first and last sample.
    """

    n = f.shape[axis]
    out = np.zeros_like(f)
    if n < 3:
        return out
    upper = [slice(None)] * 3
    lower = [slice(None)] * 3
    inner = [slice(None)] * 3
    upper[axis] = slice(2, None)
    lower[axis] = slice(None, -2)
    inner[axis] = slice(1, -1)
    shape = [1, 1, 1]
    shape[axis] = n - 2
    delta = (coord[2:] - coord[:-2]).reshape(shape)
    out[tuple(inner)] = (f[tuple(upper)] - f[tuple(lower)]) / delta
    return out


def _spline_derivative(f, axis, coord):
    k = 3 if coord.shape[0] >= 4 else 1
    bc_type = "not-a-knot" if k == 3 else None
    spl = make_interp_spline(
        coord, f, axis=axis, k=k, bc_type=bc_type, check_finite=False
    )
    return spl.derivative()(coord)


def _compose(derivative, f, coordinates):
    """
    Apply a 1D derivative operator along each axis to build the seven
    derivative kinds, in grid sample bundle order.
    """

    cx, cy, cz = coordinates
    dx = derivative(f, 0, cx)
    dy = derivative(f, 1, cy)
    dz = derivative(f, 2, cz)
    dxy = derivative(dx, 1, cy)
    dxz = derivative(dx, 2, cz)
    dyz = derivative(dy, 2, cz)
    dxyz = derivative(dxy, 2, cz)
    return [f, dx, dy, dz, dxy, dxz, dyz, dxyz]


def finite_differences(coordinates, data):
    """
    Estimate the grid sample bundle by central differences.

    Parameters
    ----------
    coordinates : sequence of np.ndarray
        Axes (x, y, z).
    data : np.ndarray
        3D function values.

    Returns
    -------
    values : list of np.ndarray
        f, df/dx, df/dy, df/dz, d2f/dxdy, d2f/dxdz, d2f/dydz, d3f/dxdydz.
        Any derivative taken across an axis edge sample is zero.
    """

    return _compose(_central_difference, data, coordinates)


def spline_derivatives(coordinates, data, num_threads=1):
    """
    Estimate the grid sample bundle from 1D interpolating splines along
    each axis (cubic not-a-knot, or linear on axes with fewer than 4
    samples).
    """

    with threadpool_limits(limits=num_threads):
        return _compose(_spline_derivative, data, coordinates)


def _cell_function(values, scale=None):
    """
    Solve the cell spanning samples 0-1 of each 2x2x2 array in the
    bundle. Derivatives are multiplied by the cell widths in `scale`.
    """

    factor = np.ones(8, dtype=np.float64)
    if scale is not None:
        xr, yr, zr = scale
        factor[1:] = (xr, yr, zr, xr * yr, xr * zr, yr * zr, xr * yr * zr)
    beta = np.concatenate([
        # Corners with x fastest, then y, then z
        np.transpose(value[:2, :2, :2], (2, 1, 0)).ravel() * factor[d]
        for d, value in enumerate(values)
    ])
    return TricubicFunction(compute_coefficients_inline(beta))


class TricubicInterpolator:
    """
    Build tricubic interpolating functions from function values alone.

    The seven derivatives required at each sample are estimated either by
    central differences or from 1D splines along each axis.

    Parameters
    ----------
    method : str, optional
        Derivative estimate. Supported options are:
        - "finite" : central differences [default]
        - "spline" : derivatives of 1D interpolating splines
    progress : callable, tqdm.tqdm or bool, optional
        Passed to the function build.
    executor : concurrent.futures.Executor, optional
        Thread pool for the function build.
    task_size : int, optional
        Cells per build chunk. Default is 1000.
    num_threads : int, optional
        Number of threads for the build and the spline fits.
        Default is 1.
    single_precision : bool, optional
        Store the coefficients as float32. Default is False.
    """

    METHODS = ("finite", "spline")

    def __init__(
        self,
        method="finite",
        progress=None,
        executor=None,
        task_size=1000,
        num_threads=1,
        single_precision=False,
    ):
        if method not in self.METHODS:
            raise ValueError(
                f"Unknown method {method} (Available: finite, spline)."
            )
        self.method = method
        self.progress = progress
        self.executor = executor
        self.task_size = task_size
        self.num_threads = num_threads
        self.single_precision = single_precision

    def _derivatives(self, coordinates, data):
        if self.method == "spline":
            return spline_derivatives(coordinates, data, self.num_threads)
        return finite_differences(coordinates, data)

    def interpolate(self, coordinates, data, **kwargs):
        """
        Build an interpolating function over the grid.

        Parameters
        ----------
        coordinates : array-like
            A sequence of three 1D arrays (x, y, z).
        data : array-like
            3D function values of shape (len(x), len(y), len(z)).
        **kwargs
            Passed to :class:`TricubicInterpolatingFunction`
            (e.g. `bounds_error`, `fill_value`).

        Returns
        -------
        TricubicInterpolatingFunction
        """

        coordinates, data = self._check_grid(coordinates, data)
        log.debug("Estimating derivatives by %s method on %s grid",
                  self.method, data.shape)
        values = self._derivatives(coordinates, data)
        return TricubicInterpolatingFunction(
            coordinates,
            values,
            progress=self.progress,
            executor=self.executor,
            task_size=self.task_size,
            num_threads=self.num_threads,
            single_precision=self.single_precision,
            **kwargs,
        )

    @staticmethod
    def _check_grid(coordinates, data):
        axes = _check_axis_lengths(coordinates)
        data = np.asarray(data, dtype=np.float64)
        if data.ndim != 3:
            raise ValueError(
                f"Invalid data: a 3D array is expected, got shape "
                f"{data.shape}."
            )
        check_dimensions(data.shape, [a.shape[0] for a in axes], "Data")
        _check_axis_order(axes)
        return axes, data

    @staticmethod
    def create(data, coordinates=None):
        """
        Build the function of the middle cell of a 4x4x4 cube.

        Derivatives at the 8 inner samples are central differences.
        The returned function maps the unit cube onto the cell between
        samples 1 and 2 of each axis.

        Parameters
        ----------
        data : array-like, shape (4, 4, 4)
            Function values.
        coordinates : array-like, optional
            Three axes of length 4. Unit spacing when omitted.

        Returns
        -------
        TricubicFunction
        """

        data = np.asarray(data, dtype=np.float64)
        if data.ndim != 3:
            raise ValueError(
                f"Invalid data: a 3D array is expected, got shape "
                f"{data.shape}."
            )
        check_dimensions(data.shape, (4, 4, 4), "Data")
        if coordinates is None:
            coordinates = [np.arange(4, dtype=np.float64)] * 3
            scale = None
        else:
            coordinates, _ = TricubicInterpolator._check_grid(
                coordinates, data
            )
            scale = [c[2] - c[1] for c in coordinates]
        values = finite_differences(coordinates, data)
        inner = [value[1:3, 1:3, 1:3] for value in values]
        return _cell_function(inner, scale)

    @staticmethod
    def create_at(data, x, y, z):
        """
        Build the unit-spaced function of the cell at offset (x, y, z).

        Parameters
        ----------
        data : array-like
            3D function values.
        x, y, z : int
            Index of the cell origin. At least two samples must remain
            on each axis from the origin.

        Returns
        -------
        TricubicFunction
            Derivatives on the edges of `data` are zero.
        """

        data = np.asarray(data, dtype=np.float64)
        if data.ndim != 3:
            raise ValueError(
                f"Invalid data: a 3D array is expected, got shape "
                f"{data.shape}."
            )
        offset = (x, y, z)
        if min(offset) < 0:
            raise ValueError(f"Offset must be positive, got {offset}.")
        for o, n, name in zip(offset, data.shape, AXIS_NAMES):
            if n - o < 2:
                raise NumberIsTooSmallError(n, o + 2, name)

        # Window holding the cell and its neighbours, clipped to the data
        lower = [max(o - 1, 0) for o in offset]
        upper = [min(o + 3, n) for o, n in zip(offset, data.shape)]
        window = data[lower[0]:upper[0], lower[1]:upper[1],
                      lower[2]:upper[2]]
        coordinates = [
            np.arange(hi - lo, dtype=np.float64)
            for lo, hi in zip(lower, upper)
        ]
        values = finite_differences(coordinates, window)
        start = [o - lo for o, lo in zip(offset, lower)]
        cell = [
            value[start[0]:start[0] + 2, start[1]:start[1] + 2,
                  start[2]:start[2] + 2]
            for value in values
        ]
        return _cell_function(cell)

    def sample(self, data, nx, procedure, coordinates=None, ny=None,
               nz=None, progress=None):
        """
        Interpolate `data` and resample it with
        :meth:`TricubicInterpolatingFunction.sample`. Unit-spaced axes
        are used when `coordinates` is omitted.
        """

        if coordinates is None:
            shape = np.shape(data)
            if len(shape) != 3:
                raise DimensionMismatchError(3, len(shape), "Data rank")
            coordinates = [np.arange(n, dtype=np.float64) for n in shape]
        function = self.interpolate(coordinates, data)
        function.sample(nx, procedure, ny, nz, progress)
        return function
