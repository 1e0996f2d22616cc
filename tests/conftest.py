"""
Shared helpers: exact tricubic polynomials and their grid sample bundles.
"""
import numpy as np
import pytest

# Derivative orders of the grid sample bundle
BUNDLE_ORDERS = (
    (0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, 1),
    (1, 1, 0), (1, 0, 1), (0, 1, 1), (1, 1, 1),
)


def _power(v, p, d):
    """d-th derivative of v**p."""
    if d == 0:
        return v ** p
    if d == 1:
        return p * v ** (p - 1) if p >= 1 else np.zeros_like(v)
    return p * (p - 1) * v ** (p - 2) if p >= 2 else np.zeros_like(v)


def evaluate_polynomial(a, x, y, z, dx=0, dy=0, dz=0):
    """Evaluate sum a[p + 4q + 16r] x^p y^q z^r or one of its partials."""
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    z = np.asarray(z, dtype=np.float64)
    total = np.zeros(np.broadcast(x, y, z).shape)
    for r in range(4):
        for q in range(4):
            for p in range(4):
                total = total + (
                    a[p + 4 * q + 16 * r]
                    * _power(x, p, dx) * _power(y, q, dy) * _power(z, r, dz)
                )
    return total


def polynomial_bundle(a, cx, cy, cz):
    """The 8 grid arrays f, fx, fy, fz, fxy, fxz, fyz, fxyz."""
    X, Y, Z = np.meshgrid(cx, cy, cz, indexing="ij")
    return [evaluate_polynomial(a, X, Y, Z, *d) for d in BUNDLE_ORDERS]


def corner_beta(bundle):
    """Beta vector of the cell at the origin of a 2x2x2 bundle."""
    return np.concatenate([
        np.transpose(v[:2, :2, :2], (2, 1, 0)).ravel() for v in bundle
    ])


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def coefficients(rng):
    return rng.uniform(-1, 1, 64)


@pytest.fixture
def axes():
    """Non-uniform axes of different lengths."""
    cx = np.array([-1.0, -0.4, 0.1, 0.9, 1.5])
    cy = np.array([0.2, 0.7, 1.0, 1.8])
    cz = np.array([-0.5, 0.0, 0.6, 0.8, 1.2, 1.7])
    return cx, cy, cz
