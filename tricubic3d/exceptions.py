# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2025, Wenyang Zhao, Osamu Miyashita, Florence Tama, RIKEN


__all__ = [
    "OutOfRangeError",
    "DimensionMismatchError",
    "NonMonotonicSequenceError",
    "NumberIsTooSmallError",
]


class OutOfRangeError(ValueError):
    """
    A coordinate lies outside the interpolation range.

    Parameters
    ----------
    value : float
        The offending value.
    lower, upper : float
        Inclusive bounds of the valid range.
    """

    def __init__(self, value, lower, upper):
        super().__init__(
            f"{value} out of range [{lower}, {upper}]."
        )
        self.value = value
        self.lower = lower
        self.upper = upper


class DimensionMismatchError(ValueError):
    """
    An array size does not match the size implied by the axes.
    """

    def __init__(self, expected, actual, name=None):
        prefix = f"{name} size mismatch: " if name else "Size mismatch: "
        super().__init__(
            f"{prefix}expected {expected}, got {actual}."
        )
        self.expected = expected
        self.actual = actual


class NonMonotonicSequenceError(ValueError):
    """
    An axis is not strictly increasing.
    """

    def __init__(self, current, previous, index, name=None):
        label = f"{name} coordinates" if name else "Coordinates"
        super().__init__(
            f"{label} must be strictly increasing: "
            f"value {current} at index {index} is not greater than "
            f"{previous} at index {index - 1}."
        )
        self.current = current
        self.previous = previous
        self.index = index


class NumberIsTooSmallError(ValueError):
    """
    A size or count is below its minimum.
    """

    def __init__(self, value, minimum, name=None):
        prefix = f"{name} too small: " if name else "Too small: "
        super().__init__(
            f"{prefix}expected at least {minimum}, got {value}."
        )
        self.value = value
        self.minimum = minimum
