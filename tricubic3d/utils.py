# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025, Wenyang Zhao, Osamu Miyashita, Florence Tama, RIKEN


import threading

import numpy as np
import tqdm

from .exceptions import (
    OutOfRangeError,
    DimensionMismatchError,
    NonMonotonicSequenceError,
    NumberIsTooSmallError,
)


__all__ = [
    "UNIFORM_TOLERANCE",
    "INTEGER_TOLERANCE",
    "search_index_integer",
    "search_index_binary",
    "check_length",
    "check_order",
    "check_dimensions",
    "check_points",
    "check_bounds",
    "is_uniform",
    "is_integer_range",
    "Ticker",
    "TqdmTicker",
]


UNIFORM_TOLERANCE = 1e-6
INTEGER_TOLERANCE = 1e-6


def _check_range(value, values):
    lower = values[0]
    upper = values[-1]
    value = np.asarray(value, dtype=np.float64)
    outside = ~((lower <= value) & (value <= upper))
    if outside.any():
        bad = value[outside] if value.ndim else value
        raise OutOfRangeError(float(np.ravel(bad)[0]), lower, upper)
    return value


def search_index_integer(value, values):
    """
    Find the cell index on an axis with unit spacing.

    Parameters
    ----------
    value : float or np.ndarray
        Coordinate(s) in [values[0], values[-1]].
    values : np.ndarray
        Strictly increasing axis with spacing 1.

    Returns
    -------
    index : int or np.ndarray
        floor(value - values[0]) clamped to len(values) - 2.
    """

    value = _check_range(value, values)
    index = np.floor(value - values[0]).astype(np.int64)
    index = np.minimum(index, values.shape[0] - 2)
    return int(index) if index.ndim == 0 else index


def search_index_binary(value, values):
    """
    Find the cell index on an arbitrary strictly increasing axis.

    Exact hits on an interior node resolve to the cell on its right, as
    in :func:`search_index_integer`. The last node maps to the last cell.

    Parameters
    ----------
    value : float or np.ndarray
        Coordinate(s) in [values[0], values[-1]].
    values : np.ndarray
        Strictly increasing axis.

    Returns
    -------
    index : int or np.ndarray
        Cell index in [0, len(values) - 2].
    """

    value = _check_range(value, values)
    index = np.searchsorted(values, value, side="right") - 1
    index = np.minimum(index, values.shape[0] - 2)
    return int(index) if np.ndim(index) == 0 else index


def check_order(values, name=None):
    """
    Raise NonMonotonicSequenceError unless `values` strictly increases.
    Infinite or NaN coordinates raise ValueError.
    """

    if not np.isfinite(values).all():
        raise ValueError(
            f"{name or 'Axis'} coordinates must not contain NaNs or "
            "infinite values."
        )
    step = np.diff(values)
    bad = np.flatnonzero(~(step > 0))
    if bad.size:
        index = int(bad[0]) + 1
        raise NonMonotonicSequenceError(
            values[index], values[index - 1], index, name
        )


def check_length(values, name=None):
    """
    Return `values` as a float64 1D array of at least 2 samples.
    """

    values = np.array(values, dtype=np.float64)
    if values.ndim != 1:
        raise ValueError(
            f"{name or 'Axis'} coordinates must be a 1-dimensional array, "
            f"got shape {values.shape}."
        )
    if values.shape[0] < 2:
        raise NumberIsTooSmallError(values.shape[0], 2, name)
    return values


def check_dimensions(shape, expected, name=None):
    """
    Raise DimensionMismatchError when `shape` differs from `expected`.
    """

    shape = tuple(int(n) for n in shape)
    expected = tuple(int(n) for n in expected)
    if shape != expected:
        raise DimensionMismatchError(expected, shape, name)


def check_points(points):
    """
    Validate the input array of query points.

    Parameters
    ----------
    points : array-like
        Input query point coordinates to be validated.
        Expected shape is (num_points, 3).

    Returns
    -------
    msg : str or None
        Error message if validation fails, otherwise None.
    points : np.ndarray or None
        Validated array of shape (num_points, 3), or None on failure.
    """

    try:
        points = np.asarray(points, dtype=np.float64)
    except (ValueError, TypeError):
        return "Invalid points: could not convert to a float64 array.", None
    if points.ndim == 1 and points.shape[0] == 3:
        points = points.reshape(1, 3)
    if points.ndim != 2 or points.shape[1] != 3:
        msg = (
            "Invalid points: expected a 2D array with shape (N, 3), "
            f"got shape {points.shape}."
        )
        return msg, None
    if points.shape[0] == 0:
        return "Invalid points: expected at least one point, got empty.", None
    if not np.isfinite(points).all():
        return "Invalid points: must not contain infs or nans.", None
    return None, points


def check_bounds(points, bounds):
    """
    Check whether points lie within the given domain bounds.

    Parameters
    ----------
    points : np.ndarray, shape (num_points, 3)
        Query point coordinates.
    bounds : tuple of tuples
        ((xmin, xmax), (ymin, ymax), (zmin, zmax)), inclusive.

    Returns
    -------
    flag_all_in : bool
        True if all points lie inside the bounds.
    mask_in : np.ndarray, dtype=bool
        Which points lie inside the bounds.
    num_in : int
        Number of points inside the bounds.
    """

    mask_in = np.ones(points.shape[0], dtype=bool)
    for axis, (lower, upper) in enumerate(bounds):
        mask_in &= (lower <= points[:, axis]) & (points[:, axis] <= upper)
    num_in = int(np.count_nonzero(mask_in))
    return bool(mask_in.all()), mask_in, num_in


def is_uniform(values, tolerance=UNIFORM_TOLERANCE):
    """
    True when every spacing matches the first one to within
    `tolerance` times the first spacing.
    """

    values = np.asarray(values, dtype=np.float64)
    if values.shape[0] < 3:
        return True
    step = np.diff(values)
    return bool(np.all(np.abs(step - step[0]) <= step[0] * tolerance))


def is_integer_range(values, tolerance=INTEGER_TOLERANCE):
    """
    True when the average spacing is 1 to within `tolerance`.
    """

    values = np.asarray(values, dtype=np.float64)
    spacing = (values[-1] - values[0]) / (values.shape[0] - 1)
    return bool(1 - tolerance < spacing < 1 + tolerance)


class Ticker:
    """
    Report the progress of a counted task.

    Parameters
    ----------
    progress : callable
        Called with the completed fraction in [0, 1].
    total : int
        Number of ticks expected before :meth:`stop`.

    Notes
    -----
    Use :meth:`create` rather than the constructor; it also accepts a
    ``tqdm`` progress bar and returns a no-op ticker when there is
    nothing to report to.
    """

    def __init__(self, progress, total):
        self.progress = progress
        self.total = total
        self.current = 0
        self.next = 0
        # Report at about 1% steps on long tasks
        self.interval = total // 100 if total > 200 else 1

    @staticmethod
    def create(progress, total, thread_safe=False, desc=None):
        """
        Build a ticker for `total` ticks.

        Parameters
        ----------
        progress : callable, tqdm.tqdm, bool or None
            Progress sink. A callable receives the completed fraction; a
            ``tqdm`` bar is advanced by the tick count; True opens (and
            closes) a new bar. None or False gives a ticker that does
            nothing.
        total : int
            Expected number of ticks.
        thread_safe : bool, optional
            Guard the counter with a lock so several workers may tick.
        desc : str, optional
            Label of a bar opened for ``progress=True``.
        """

        if progress is None or progress is False:
            return NullTicker()
        if progress is True:
            bar = tqdm.tqdm(
                total=total, desc=desc, ascii=True, ncols=80,
                bar_format="{l_bar}{bar}|",
            )
            return TqdmTicker(bar, total, owned=True)
        if isinstance(progress, tqdm.tqdm):
            return TqdmTicker(progress, total)
        if thread_safe:
            return ConcurrentTicker(progress, total)
        return Ticker(progress, total)

    def start(self):
        self.current = 0
        self.next = self.interval
        self.progress(0.0)

    def tick(self, count=1):
        self.current += count
        if self.current >= self.next:
            self.next = self.current + self.interval
            self.progress(min(1.0, self.current / self.total))

    def stop(self):
        self.progress(1.0)


class TqdmTicker(Ticker):
    """
    Advance a ``tqdm`` bar. Ticks are always locked since build workers
    share the bar. A bar opened by :meth:`Ticker.create` is closed on
    :meth:`stop`; a caller's bar is only refreshed.
    """

    def __init__(self, bar, total, owned=False):
        super().__init__(None, total)
        self.bar = bar
        self.owned = owned
        self._lock = threading.Lock()

    def start(self):
        self.current = 0
        if self.bar.total is None:
            self.bar.reset(total=self.total)

    def tick(self, count=1):
        with self._lock:
            self.current += count
            self.bar.update(count)

    def stop(self):
        if self.owned:
            self.bar.close()
        else:
            self.bar.refresh()


class ConcurrentTicker(Ticker):

    def __init__(self, progress, total):
        super().__init__(progress, total)
        self._lock = threading.Lock()

    def tick(self, count=1):
        with self._lock:
            super().tick(count)


class NullTicker(Ticker):

    def __init__(self):
        super().__init__(None, 0)

    def start(self):
        pass

    def tick(self, count=1):
        pass

    def stop(self):
        pass
