"""
Tests for the tricubic interpolating function over a 3D grid.

Covers construction and validation, reproduction of tricubic
polynomials, the integer and scaled evaluation paths, the calling
conventions (raw coordinates, positions, power tables, bulk points),
parallel build, precision conversion, resampling, grid search and the
binary stream format.

Tolerances:
    polynomial reproduction : rtol=1e-8 (exact up to rounding)
    single precision        : rtol=1e-4 (float32 coefficients)
"""
import io
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest
import tqdm

from tricubic3d import (
    ArrayProcedure,
    DimensionMismatchError,
    NonMonotonicSequenceError,
    NumberIsTooSmallError,
    OutOfRangeError,
    TricubicFunction,
    TricubicInterpolatingFunction,
)
from tricubic3d.function import compute_power_table

from conftest import BUNDLE_ORDERS, evaluate_polynomial, polynomial_bundle

RTOL = 1e-8
ATOL = 1e-8


def build(coefficients, axes, **kwargs):
    bundle = polynomial_bundle(coefficients, *axes)
    return TricubicInterpolatingFunction(axes, bundle, **kwargs)


def peak_coefficients(cx, cy, cz):
    """Coefficients of -(x-cx)^2 - (y-cy)^2 - (z-cz)^2."""
    a = np.zeros(64)
    a[0] = -(cx * cx + cy * cy + cz * cz)
    a[1] = 2 * cx
    a[2] = -1.0
    a[4] = 2 * cy
    a[8] = -1.0
    a[16] = 2 * cz
    a[32] = -1.0
    return a


def random_points(rng, axes, n):
    return np.stack([rng.uniform(a[0], a[-1], n) for a in axes], axis=1)


class RecordingProcedure(ArrayProcedure):
    def __init__(self, accept=True):
        super().__init__()
        self.accept = accept
        self.order = []

    def set_dimensions(self, nx, ny, nz):
        super().set_dimensions(nx, ny, nz)
        return self.accept

    def set_value(self, i, j, k, value):
        super().set_value(i, j, k, value)
        self.order.append((i, j, k))


# ===================================================================
# Construction
# ===================================================================

class TestConstruction:
    def test_shape_and_axes(self, coefficients, axes):
        f = build(coefficients, axes)
        assert f.shape == (4, 3, 5)
        assert f.max_x_spline_position == 3
        assert f.max_y_spline_position == 2
        assert f.max_z_spline_position == 4
        assert f.min_x == -1.0 and f.max_x == 1.5
        assert f.min_y == 0.2 and f.max_y == 1.8
        assert f.min_z == -0.5 and f.max_z == 1.7
        assert f.get_y_spline_value(1) == 0.7
        assert np.array_equal(f.z, axes[2])

    def test_axes_are_copies(self, coefficients, axes):
        f = build(coefficients, axes)
        x = f.x
        x[0] = 100.0
        assert f.min_x == -1.0

    def test_too_few_samples(self, coefficients):
        axes = (np.array([0.0]), np.arange(3.0), np.arange(3.0))
        values = [np.zeros((1, 3, 3))] * 8
        with pytest.raises(NumberIsTooSmallError):
            TricubicInterpolatingFunction(axes, values)

    def test_dimension_mismatch(self):
        axes = (np.arange(3.0), np.arange(3.0), np.arange(4.0))
        values = [np.zeros((3, 3, 4))] * 7 + [np.zeros((3, 3, 3))]
        with pytest.raises(DimensionMismatchError, match="d3fdxdydz"):
            TricubicInterpolatingFunction(axes, values)

    def test_missing_values(self):
        axes = (np.arange(3.0),) * 3
        with pytest.raises(DimensionMismatchError):
            TricubicInterpolatingFunction(axes, [np.zeros((3, 3, 3))] * 7)

    def test_not_increasing(self):
        axes = (np.arange(3.0), np.array([0.0, 2.0, 1.0]), np.arange(3.0))
        with pytest.raises(NonMonotonicSequenceError):
            TricubicInterpolatingFunction(axes, [np.zeros((3, 3, 3))] * 8)

    def test_length_checked_before_size(self):
        axes = (np.array([0.0]), np.array([2.0, 1.0]), np.arange(3.0))
        with pytest.raises(NumberIsTooSmallError):
            TricubicInterpolatingFunction(axes, [np.zeros((3, 3, 3))] * 8)

    def test_size_checked_before_order(self):
        axes = (np.array([1.0, 0.0]), np.arange(3.0), np.arange(3.0))
        with pytest.raises(DimensionMismatchError):
            TricubicInterpolatingFunction(axes, [np.zeros((3, 3, 3))] * 8)

    def test_progress(self, coefficients, axes):
        calls = []
        build(coefficients, axes, progress=calls.append, task_size=7)
        assert calls[0] == 0.0
        assert calls[-1] == 1.0

    def test_progress_bar(self, coefficients, axes):
        bar = tqdm.tqdm(file=io.StringIO())
        build(coefficients, axes, progress=bar, num_threads=2, task_size=7)
        assert bar.total == 60
        assert bar.n == 60
        bar.close()

    def test_flags(self, coefficients, axes):
        f = build(coefficients, axes)
        assert not f.is_uniform
        assert not f.is_integer
        c = np.arange(4.0)
        g = build(coefficients, (c, c + 0.25, c - 2))
        assert g.is_uniform
        assert g.is_integer
        h = build(coefficients, (c * 0.5, c, c))
        assert h.is_uniform
        assert not h.is_integer


# ===================================================================
# Evaluation
# ===================================================================

class TestReproduction:
    def test_value_at_nodes(self, coefficients, axes):
        f = build(coefficients, axes)
        fval = polynomial_bundle(coefficients, *axes)[0]
        for i, x in enumerate(axes[0]):
            for j, y in enumerate(axes[1]):
                for k, z in enumerate(axes[2]):
                    assert np.isclose(f.value(x, y, z), fval[i, j, k],
                                      rtol=RTOL, atol=ATOL)

    def test_polynomial(self, coefficients, axes, rng):
        f = build(coefficients, axes)
        for x, y, z in random_points(rng, axes, 50):
            value, d1, d2 = f.value_d2(x, y, z)
            assert np.isclose(
                value, evaluate_polynomial(coefficients, x, y, z),
                rtol=RTOL, atol=ATOL
            )
            for axis in range(3):
                order = [0, 0, 0]
                order[axis] = 1
                assert np.isclose(
                    d1[axis], evaluate_polynomial(coefficients, x, y, z,
                                                  *order),
                    rtol=1e-7, atol=1e-7
                )
                order[axis] = 2
                assert np.isclose(
                    d2[axis], evaluate_polynomial(coefficients, x, y, z,
                                                  *order),
                    rtol=1e-6, atol=1e-6
                )

    def test_single_precision(self, coefficients, axes, rng):
        f = build(coefficients, axes, single_precision=True)
        assert f.is_single_precision
        for x, y, z in random_points(rng, axes, 20):
            assert np.isclose(
                f.value(x, y, z), evaluate_polynomial(coefficients, x, y, z),
                rtol=1e-4, atol=1e-4
            )

    def test_out_of_range(self, coefficients, axes):
        f = build(coefficients, axes)
        with pytest.raises(OutOfRangeError):
            f.value(1.6, 1.0, 0.0)
        with pytest.raises(OutOfRangeError):
            f.value_d1(0.0, 0.1, 0.0)
        with pytest.raises(OutOfRangeError):
            f.get_z_spline_position(-0.6)
        assert not f.is_valid_point(1.6, 1.0, 0.0)
        assert f.is_valid_point(1.5, 1.8, -0.5)

    def test_closed_form(self, axes, rng):
        X, Y, Z = np.meshgrid(*axes, indexing="ij")
        zero = np.zeros_like(X)
        bundle = [
            X**3 + 2 * Y**2 * Z - Z,
            3 * X**2, 4 * Y * Z, 2 * Y**2 - 1,
            zero, zero, 4 * Y, zero,
        ]
        f = TricubicInterpolatingFunction(axes, bundle)
        for x, y, z in random_points(rng, axes, 50):
            value, d1 = f.value_d1(x, y, z)
            assert abs(value - (x**3 + 2 * y**2 * z - z)) < 1e-6
            assert np.allclose(
                d1, [3 * x**2, 4 * y * z, 2 * y**2 - 1], rtol=0, atol=1e-6
            )


class TestContinuity:
    def test_faces_agree(self, axes, rng):
        shape = tuple(a.shape[0] for a in axes)
        bundle = [rng.uniform(-1, 1, shape) for _ in range(8)]
        f = TricubicInterpolatingFunction(axes, bundle)
        for axis in range(3):
            for _ in range(20):
                cell = [int(rng.integers(0, n)) for n in f.shape]
                cell[axis] = int(rng.integers(0, f.shape[axis] - 1))
                offsets = list(rng.uniform(0, 1, 3))
                offsets[axis] = 1.0
                lower = f.value_table_d1(*cell, compute_power_table(*offsets))
                cell[axis] += 1
                offsets[axis] = 0.0
                upper = f.value_table_d1(*cell, compute_power_table(*offsets))
                assert abs(lower[0] - upper[0]) < 1e-9
                assert np.allclose(lower[1], upper[1], rtol=0, atol=1e-9)


class TestCallingConventions:
    def test_positions(self, coefficients, axes):
        f = build(coefficients, axes)
        x, y, z = 0.3, 1.1, 0.7
        px = f.get_x_spline_position(x)
        py = f.get_y_spline_position(y)
        pz = f.get_z_spline_position(z)
        assert (px.index, py.index, pz.index) == (2, 2, 2)
        value, d1, d2 = f.value_d2(x, y, z)
        assert f.value_at(px, py, pz) == value
        v1, e1 = f.value_at_d1(px, py, pz)
        assert v1 == value
        assert np.allclose(e1, d1, rtol=1e-12, atol=1e-12)
        v2, e1, e2 = f.value_at_d2(px, py, pz)
        assert np.allclose(e2, d2, rtol=1e-12, atol=1e-12)

    def test_tables(self, coefficients, axes):
        f = build(coefficients, axes)
        x, y, z = 0.3, 1.1, 0.7
        px = f.get_x_spline_position(x)
        py = f.get_y_spline_position(y)
        pz = f.get_z_spline_position(z)
        table = compute_power_table(px, py, pz)
        i, j, k = px.index, py.index, pz.index
        value, d1, d2 = f.value_d2(x, y, z)
        assert f.value_table(i, j, k, table) == value
        v1, e1 = f.value_table_d1(i, j, k, table)
        assert v1 == value
        assert np.array_equal(e1, d1)
        v2, e1, e2 = f.value_table_d2(i, j, k, table)
        assert np.array_equal(e2, d2)

    def test_integer_paths_agree(self, coefficients, rng):
        c = np.arange(5.0)
        axes = (c, c, c)
        fast = build(coefficients, axes)
        slow = build(coefficients, axes, integer_fast_path=False)
        assert fast.is_integer
        for x, y, z in random_points(rng, axes, 30):
            v1, d1, s1 = fast.value_d2(x, y, z)
            v2, d2, s2 = slow.value_d2(x, y, z)
            assert np.isclose(v1, v2, rtol=1e-14, atol=1e-12)
            assert np.allclose(d1, d2, rtol=1e-14, atol=1e-12)
            assert np.allclose(s1, s2, rtol=1e-14, atol=1e-12)

    def test_perturbed_spacing_agrees(self, rng):
        s = 1.0 + 1e-5
        c = np.arange(5.0)
        bundle = [rng.uniform(-1, 1, (5, 5, 5)) for _ in range(8)]
        unit = TricubicInterpolatingFunction((c, c, c), bundle)
        # Derivatives in stretched axis units
        stretched_bundle = [
            v / s ** sum(order) for v, order in zip(bundle, BUNDLE_ORDERS)
        ]
        stretched = TricubicInterpolatingFunction(
            (c * s, c * s, c * s), stretched_bundle
        )
        assert unit.is_integer
        assert stretched.is_uniform
        assert not stretched.is_integer
        for u in rng.uniform(0, 4, (30, 3)):
            v1, d1 = unit.value_d1(*u)
            v2, d2 = stretched.value_d1(*(u * s))
            assert abs(v1 - v2) < 1e-6
            assert np.allclose(d1, d2 * s, rtol=0, atol=1e-6)

    def test_integer_positions_unscaled(self, coefficients):
        c = np.arange(4.0) + 10.0
        f = build(coefficients * 1e-3, (c, c, c))
        p = f.get_x_spline_position(11.25)
        assert p.index == 1
        assert p.x == 0.25
        assert p.scale is None

    def test_bulk_matches_scalar(self, coefficients, axes, rng):
        f = build(coefficients, axes)
        points = random_points(rng, axes, 40)
        values, d1, d2 = f(points, nu=2)
        for m, (x, y, z) in enumerate(points):
            value, e1, e2 = f.value_d2(x, y, z)
            assert np.isclose(values[m], value, rtol=1e-12, atol=1e-12)
            assert np.allclose(d1[m], e1, rtol=1e-12, atol=1e-12)
            assert np.allclose(d2[m], e2, rtol=1e-12, atol=1e-12)
        assert np.array_equal(f(points), values)

    def test_bulk_bounds(self, coefficients, axes):
        f = build(coefficients, axes)
        points = np.array([[0.0, 1.0, 0.0], [5.0, 1.0, 0.0]])
        with pytest.raises(ValueError):
            f(points)
        g = build(coefficients, axes, bounds_error=False, fill_value=-1.0)
        values, d1 = g(points, nu=1)
        assert values[1] == -1.0
        assert np.all(d1[1] == -1.0)
        assert np.isclose(values[0], g.value(0.0, 1.0, 0.0), rtol=1e-12)

    def test_bulk_invalid(self, coefficients, axes):
        f = build(coefficients, axes)
        with pytest.raises(ValueError):
            f(np.zeros((3, 2)))
        with pytest.raises(ValueError):
            f(np.zeros((3, 3)), nu=3)


# ===================================================================
# Cells and parallel build
# ===================================================================

class TestCells:
    def test_parallel_identical(self, coefficients, rng):
        axes = (np.sort(rng.uniform(0, 5, 9)), np.arange(8.0),
                np.linspace(-1, 1, 7))
        serial = build(coefficients, axes)
        with ThreadPoolExecutor(max_workers=3) as executor:
            pooled = build(coefficients, axes, executor=executor,
                           task_size=5)
        threaded = build(coefficients, axes, num_threads=4, task_size=11)
        assert np.array_equal(pooled._coefficients, serial._coefficients)
        assert np.array_equal(threaded._coefficients, serial._coefficients)

    def test_spline_node(self, coefficients):
        c = np.arange(3.0)
        f = build(coefficients, (c, c, c))
        node = f.get_spline_node(1, 0, 1)
        assert isinstance(node, TricubicFunction)
        assert np.array_equal(node.coefficients, f.get_coefficients(1, 0, 1))
        # Unit cells reproduce the global polynomial shifted to the origin
        assert np.isclose(node.value(0.5, 0.5, 0.5),
                          evaluate_polynomial(coefficients, 1.5, 0.5, 1.5),
                          rtol=RTOL, atol=ATOL)

    def test_get_coefficients_is_copy(self, coefficients):
        c = np.arange(3.0)
        f = build(coefficients, (c, c, c))
        a = f.get_coefficients(0, 0, 0)
        a[:] = 123.0
        assert not np.array_equal(f.get_coefficients(0, 0, 0), a)

    def test_from_functions(self, coefficients, axes, rng):
        f = build(coefficients, axes)
        nx, ny, nz = f.shape
        functions = [[[f.get_spline_node(i, j, k) for k in range(nz)]
                      for j in range(ny)] for i in range(nx)]
        g = TricubicInterpolatingFunction.from_functions(axes, functions)
        for x, y, z in random_points(rng, axes, 10):
            assert g.value(x, y, z) == f.value(x, y, z)

    def test_from_functions_count(self, coefficients, axes):
        f = build(coefficients, axes)
        functions = [[[f.get_spline_node(0, 0, 0)] * 5] * 3] * 3
        with pytest.raises(DimensionMismatchError):
            TricubicInterpolatingFunction.from_functions(axes, functions)

    def test_from_functions_invalid(self, coefficients, axes):
        f = build(coefficients, axes)
        functions = np.empty(f.shape, dtype=object)
        for index in np.ndindex(f.shape):
            functions[index] = f.get_spline_node(*index)
        functions[1, 2, 3] = "cell"
        with pytest.raises(ValueError, match="TricubicFunction"):
            TricubicInterpolatingFunction.from_functions(axes, functions)

    def test_from_functions_precision(self, coefficients):
        c = np.arange(3.0)
        f = build(coefficients, (c, c, c))
        functions = np.empty(f.shape, dtype=object)
        for index in np.ndindex(f.shape):
            functions[index] = f.get_spline_node(*index)
        functions[0, 0, 0] = functions[0, 0, 0].to_single_precision()
        g = TricubicInterpolatingFunction.from_functions((c, c, c), functions)
        assert g.is_single_precision
        expected = f.get_coefficients(1, 1, 1).astype(np.float32)
        assert np.array_equal(g.get_coefficients(1, 1, 1), expected)

    def test_scale(self, coefficients):
        c = np.arange(4.0)
        f = build(coefficients, (c * 0.5, c - 3, c * 2.0 + 1))
        assert np.allclose(f.get_scale(), [0.5, 1.0, 2.0], rtol=1e-15)

    def test_scale_not_uniform(self, coefficients, axes):
        f = build(coefficients, axes)
        with pytest.raises(RuntimeError):
            f.get_scale()

    def test_estimate_size(self):
        size = TricubicInterpolatingFunction.estimate_size([3, 4, 5])
        assert size.total_function_points == 60
        assert size.total_spline_points == 24
        assert size.spline_points(2) == 4
        assert size.memory_footprint(False) == \
            24 * 64 * 8 + 8 * (5 + 7 + 9)
        assert size.memory_footprint(True) == \
            24 * 64 * 4 + 8 * (5 + 7 + 9)
        assert size.enlarge(3).dimensions == (7, 10, 13)
        with pytest.raises(NumberIsTooSmallError):
            TricubicInterpolatingFunction.estimate_size([1, 4, 5])


class TestPrecision:
    def test_round_trip(self, coefficients, axes):
        f = build(coefficients, axes)
        before = f.value(0.3, 1.1, 0.7)
        f.to_double_precision()
        assert not f.is_single_precision
        f.to_single_precision()
        assert f.is_single_precision
        assert np.isclose(f.value(0.3, 1.1, 0.7), before,
                          rtol=1e-4, atol=1e-4)
        f.to_double_precision()
        assert not f.is_single_precision
        node = f.get_spline_node(0, 0, 0)
        assert np.array_equal(
            node.coefficients,
            node.coefficients.astype(np.float32).astype(np.float64)
        )


# ===================================================================
# Resampling
# ===================================================================

class TestSample:
    def test_axes_and_values(self, coefficients, axes):
        f = build(coefficients, axes)
        procedure = ArrayProcedure()
        f.sample(2, procedure, ny=3, nz=1)
        assert procedure.values.shape == (9, 10, 6)
        assert procedure.x[0] == axes[0][0]
        assert procedure.x[-1] == axes[0][-1]
        assert np.isclose(procedure.x[1], (axes[0][0] + axes[0][1]) / 2,
                          rtol=1e-15, atol=1e-15)
        assert np.allclose(procedure.z, axes[2], rtol=0, atol=1e-15)
        for i, j, k in [(0, 0, 0), (3, 4, 2), (8, 9, 5), (5, 1, 3)]:
            expected = f.value(procedure.x[i], procedure.y[j],
                               procedure.z[k])
            assert np.isclose(procedure.values[i, j, k], expected,
                              rtol=1e-10, atol=1e-10)

    @pytest.mark.parametrize("n", [1, 2, 3, 5, 7])
    def test_last_sample_on_last_node(self, coefficients, axes, n):
        f = build(coefficients, axes)
        procedure = ArrayProcedure()
        f.sample(n, procedure)
        assert procedure.x[-1] == f.max_x
        assert procedure.y[-1] == f.max_y
        assert procedure.z[-1] == f.max_z
        for values, lower, upper in (
            (procedure.x, f.min_x, f.max_x),
            (procedure.y, f.min_y, f.max_y),
            (procedure.z, f.min_z, f.max_z),
        ):
            assert np.all(values >= lower)
            assert np.all(values <= upper)
            assert np.all(np.diff(values) > 0)
        assert np.isclose(procedure.values[-1, -1, -1],
                          f.value(f.max_x, f.max_y, f.max_z),
                          rtol=1e-12, atol=1e-12)

    def test_value_order(self, coefficients):
        c = np.arange(2.0)
        f = build(coefficients, (c, c, c))
        procedure = RecordingProcedure()
        f.sample(1, procedure)
        assert procedure.order == [
            (0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 1, 0),
            (0, 0, 1), (1, 0, 1), (0, 1, 1), (1, 1, 1),
        ]

    def test_abort(self, coefficients, axes):
        f = build(coefficients, axes)
        procedure = RecordingProcedure(accept=False)
        f.sample(2, procedure)
        assert procedure.order == []

    def test_not_positive(self, coefficients, axes):
        f = build(coefficients, axes)
        with pytest.raises(ValueError):
            f.sample(0, ArrayProcedure())
        with pytest.raises(ValueError):
            f.sample(2, ArrayProcedure(), nz=-1)

    def test_progress(self, coefficients, axes):
        f = build(coefficients, axes)
        calls = []
        f.sample(1, ArrayProcedure(), progress=calls.append)
        assert calls[0] == 0.0
        assert calls[-1] == 1.0


# ===================================================================
# Search
# ===================================================================

class TestSearch:
    def test_maximum(self):
        cx = np.arange(4.0)
        cy = np.array([10.0, 11.5, 13.0, 14.5])
        cz = np.array([-4.0, -3.0, -2.5, -1.0])
        a = peak_coefficients(0.7, 10.9, -3.2)
        f = build(a, (cx, cy, cz))
        x, y, z, value = f.search(True, 20)
        assert abs(x - 0.7) < 1e-5
        assert abs(y - 10.9) < 1e-5
        assert abs(z + 3.2) < 1e-5
        assert abs(value) < 1e-9

    def test_minimum(self):
        c = np.linspace(0.0, 4.0, 5)
        a = -peak_coefficients(2.6, 1.3, 3.4)
        f = build(a, (c, c, c))
        x, y, z, _ = f.search(False, 20)
        assert abs(x - 2.6) < 1e-5
        assert abs(y - 1.3) < 1e-5
        assert abs(z - 3.4) < 1e-5

    def test_zero_gradient_keeps_cell(self):
        c = np.arange(4.0)
        a = peak_coefficients(1.0, 2.0, 1.0)
        f = build(a, (c, c, c))
        result = f.search(True, 10)
        assert np.allclose(result, [1.0, 2.0, 1.0, 0.0], rtol=0,
                           atol=1e-12)

    def test_last_cell_scanned(self):
        c = np.arange(4.0)
        a = peak_coefficients(2.4, 2.5, 2.6)
        f = build(a, (c, c, c))
        x, y, z, _ = f.search(True, 20)
        assert abs(x - 2.4) < 1e-5
        assert abs(y - 2.5) < 1e-5
        assert abs(z - 2.6) < 1e-5

    def test_refinements_must_be_positive(self, coefficients, axes):
        f = build(coefficients, axes)
        with pytest.raises(ValueError):
            f.search(True, 0)


# ===================================================================
# Serialization
# ===================================================================

class TestSerialization:
    @pytest.mark.parametrize("single", [False, True])
    def test_round_trip(self, coefficients, axes, single):
        f = build(coefficients, axes, single_precision=single)
        buffer = io.BytesIO()
        f.write(buffer)
        nx, ny, nz = (a.shape[0] for a in axes)
        cells = (nx - 1) * (ny - 1) * (nz - 1)
        itemsize = 4 if single else 8
        assert len(buffer.getvalue()) == \
            12 + 8 * (nx + ny + nz) + 1 + cells * 64 * itemsize
        buffer.seek(0)
        g = TricubicInterpolatingFunction.read(buffer)
        assert g.is_single_precision == single
        assert np.array_equal(g.x, f.x)
        assert np.array_equal(g.z, f.z)
        assert np.array_equal(g._coefficients, f._coefficients)

    def test_header_big_endian(self, coefficients):
        c = np.arange(3.0)
        f = build(coefficients, (c, c, np.arange(4.0)))
        buffer = io.BytesIO()
        f.write(buffer)
        data = buffer.getvalue()
        assert data[:12] == bytes([0, 0, 0, 3, 0, 0, 0, 3, 0, 0, 0, 4])
        assert data[12 + 8 * 10] == 0

    def test_truncated(self, coefficients, axes):
        f = build(coefficients, axes)
        buffer = io.BytesIO()
        f.write(buffer)
        data = buffer.getvalue()
        for size in (5, 40, len(data) - 1):
            with pytest.raises(EOFError):
                TricubicInterpolatingFunction.read(io.BytesIO(data[:size]))

    def test_corrupt_axis(self, coefficients):
        c = np.arange(3.0)
        f = build(coefficients, (c, c, c))
        buffer = io.BytesIO()
        f.write(buffer)
        data = bytearray(buffer.getvalue())
        # Make x[1] equal to x[0]
        data[20:28] = data[12:20]
        with pytest.raises(NonMonotonicSequenceError):
            TricubicInterpolatingFunction.read(io.BytesIO(bytes(data)))

    def test_corrupt_length(self):
        data = np.array([1, 3, 3], dtype=">i4").tobytes()
        with pytest.raises(NumberIsTooSmallError):
            TricubicInterpolatingFunction.read(io.BytesIO(data))

    def test_progress(self, coefficients, axes):
        f = build(coefficients, axes)
        calls = []
        buffer = io.BytesIO()
        f.write(buffer, progress=calls.append)
        assert calls[0] == 0.0 and calls[-1] == 1.0
        calls.clear()
        buffer.seek(0)
        TricubicInterpolatingFunction.read(buffer, progress=calls.append)
        assert calls[0] == 0.0 and calls[-1] == 1.0
