"""
Tests for utils: cell index search, axis validation and progress.

Covers search_index_integer, search_index_binary, check_length,
check_order, check_dimensions, check_points, check_bounds, is_uniform,
is_integer_range and Ticker.
"""
import io
import threading

import numpy as np
import pytest
import tqdm

from tricubic3d.exceptions import (
    DimensionMismatchError,
    NonMonotonicSequenceError,
    NumberIsTooSmallError,
    OutOfRangeError,
)
from tricubic3d.utils import (
    Ticker,
    TqdmTicker,
    check_bounds,
    check_dimensions,
    check_length,
    check_order,
    check_points,
    is_integer_range,
    is_uniform,
    search_index_binary,
    search_index_integer,
)


# ===================================================================
# Index search
# ===================================================================

class TestSearchIndex:
    def test_algorithms_agree(self, rng):
        values = np.arange(12, dtype=np.float64)
        queries = np.concatenate([rng.uniform(0, 11, 10000), values])
        for q in queries:
            assert search_index_integer(q, values) == \
                search_index_binary(q, values)

    def test_vectorised(self, rng):
        values = np.arange(12, dtype=np.float64)
        queries = rng.uniform(0, 11, 500)
        assert np.array_equal(
            search_index_integer(queries, values),
            search_index_binary(queries, values),
        )

    def test_interior_node_goes_right(self):
        values = np.array([0.0, 0.5, 2.0, 3.5])
        assert search_index_binary(0.5, values) == 1
        assert search_index_binary(2.0, values) == 2

    def test_last_node_clamped(self):
        values = np.array([0.0, 0.5, 2.0, 3.5])
        assert search_index_binary(3.5, values) == 2
        assert search_index_integer(3.0, np.arange(4.0)) == 2

    def test_first_node(self):
        assert search_index_binary(0.0, np.array([0.0, 0.5, 2.0])) == 0
        assert search_index_integer(0.0, np.arange(4.0)) == 0

    def test_returns_int(self):
        assert isinstance(search_index_binary(0.7, np.arange(4.0)), int)
        assert isinstance(search_index_integer(0.7, np.arange(4.0)), int)

    @pytest.mark.parametrize("bad", [-0.01, 3.01, np.nan])
    def test_out_of_range(self, bad):
        values = np.arange(4.0)
        with pytest.raises(OutOfRangeError):
            search_index_integer(bad, values)
        with pytest.raises(ValueError):
            search_index_binary(bad, values)

    def test_out_of_range_message(self):
        with pytest.raises(OutOfRangeError, match=r"5\.0 out of range"):
            search_index_binary(5.0, np.arange(4.0))


# ===================================================================
# Validation
# ===================================================================

class TestCheckAxis:
    def test_valid(self):
        axis = check_length([0, 1, 3])
        check_order(axis)
        assert axis.dtype == np.float64
        assert np.array_equal(axis, [0.0, 1.0, 3.0])

    def test_too_short(self):
        with pytest.raises(NumberIsTooSmallError):
            check_length([1.0], "X")

    def test_not_increasing(self):
        with pytest.raises(NonMonotonicSequenceError) as info:
            check_order(np.array([0.0, 1.0, 1.0, 2.0]), "Y")
        assert info.value.index == 2
        assert "Y coordinates" in str(info.value)

    def test_decreasing(self):
        with pytest.raises(ValueError):
            check_order(np.array([3.0, 2.0]))

    def test_not_finite(self):
        with pytest.raises(ValueError):
            check_order(np.array([0.0, np.inf]))
        with pytest.raises(ValueError):
            check_order(np.array([0.0, np.nan, 2.0]))

    def test_not_1d(self):
        with pytest.raises(ValueError):
            check_length(np.zeros((2, 2)))


class TestCheckDimensions:
    def test_match(self):
        check_dimensions((2, 3, 4), [2, 3, 4])

    def test_mismatch(self):
        with pytest.raises(DimensionMismatchError) as info:
            check_dimensions((2, 3, 5), (2, 3, 4), "f")
        assert info.value.expected == (2, 3, 4)
        assert info.value.actual == (2, 3, 5)


class TestCheckPoints:
    def test_valid(self):
        msg, points = check_points([[0, 1, 2], [3, 4, 5]])
        assert msg is None
        assert points.shape == (2, 3)

    def test_single_point(self):
        msg, points = check_points([0.5, 0.5, 0.5])
        assert msg is None
        assert points.shape == (1, 3)

    def test_wrong_shape(self):
        msg, points = check_points(np.zeros((4, 2)))
        assert msg is not None
        assert points is None

    def test_empty(self):
        msg, _ = check_points(np.zeros((0, 3)))
        assert "empty" in msg

    def test_nan(self):
        msg, _ = check_points([[0, np.nan, 0]])
        assert msg is not None

    def test_bounds(self):
        points = np.array([[0.5, 0.5, 0.5], [1.5, 0.5, 0.5], [1, 1, 1]])
        bounds = ((0, 1), (0, 1), (0, 1))
        flag, mask, num = check_bounds(points, bounds)
        assert not flag
        assert np.array_equal(mask, [True, False, True])
        assert num == 2


class TestGridShape:
    def test_uniform(self):
        assert is_uniform(np.arange(3) * 0.5)
        bad = np.arange(3.0)
        bad[1] *= 1.001
        assert not is_uniform(bad)
        good = np.arange(3.0)
        good[1] += 2.5e-7
        assert is_uniform(good)

    def test_two_points_uniform(self):
        assert is_uniform([0.0, 3.0])

    def test_integer(self):
        assert is_integer_range(np.arange(3) + 4.2345)
        assert is_integer_range(np.arange(3) + 17.5)
        assert not is_integer_range(np.arange(3) * (1 + 2e-6))
        assert not is_integer_range(np.arange(3) * 0.5)


# ===================================================================
# Progress
# ===================================================================

class TestTicker:
    def test_null(self):
        ticker = Ticker.create(None, 100)
        ticker.start()
        ticker.tick(5)
        ticker.stop()

    def test_reports_fractions(self):
        calls = []
        ticker = Ticker.create(calls.append, 1000)
        ticker.start()
        for _ in range(1000):
            ticker.tick()
        ticker.stop()
        assert calls[0] == 0.0
        assert calls[-1] == 1.0
        assert 90 <= len(calls) <= 110
        assert all(b >= a for a, b in zip(calls, calls[1:]))

    def test_small_total_every_tick(self):
        calls = []
        ticker = Ticker.create(calls.append, 10)
        ticker.start()
        for _ in range(10):
            ticker.tick()
        ticker.stop()
        assert len(calls) == 12

    def test_batched_ticks(self):
        calls = []
        ticker = Ticker.create(calls.append, 500)
        ticker.start()
        ticker.tick(250)
        ticker.tick(250)
        ticker.stop()
        assert calls == [0.0, 0.5, 1.0, 1.0]

    def test_thread_safe(self):
        calls = []
        ticker = Ticker.create(calls.append, 4000, thread_safe=True)
        ticker.start()

        def work():
            for _ in range(1000):
                ticker.tick()

        threads = [threading.Thread(target=work) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        ticker.stop()
        assert ticker.current == 4000
        assert calls[-1] == 1.0

    def test_tqdm_bar(self):
        bar = tqdm.tqdm(total=300, file=io.StringIO())
        ticker = Ticker.create(bar, 300)
        assert isinstance(ticker, TqdmTicker)
        ticker.start()
        ticker.tick(100)
        ticker.tick(200)
        ticker.stop()
        assert bar.n == 300
        bar.close()

    def test_tqdm_bar_without_total(self):
        bar = tqdm.tqdm(file=io.StringIO())
        ticker = Ticker.create(bar, 50)
        ticker.start()
        assert bar.total == 50
        ticker.tick(50)
        ticker.stop()
        assert bar.n == 50
        bar.close()

    def test_tqdm_owned_bar(self):
        ticker = Ticker.create(True, 20, desc="Test")
        ticker.start()
        for _ in range(20):
            ticker.tick()
        ticker.stop()
        assert ticker.bar.n == 20
        assert ticker.owned

    def test_disabled(self):
        ticker = Ticker.create(False, 20)
        ticker.start()
        ticker.tick(20)
        ticker.stop()
        assert ticker.current == 0

    def test_tqdm_thread_safe(self):
        bar = tqdm.tqdm(total=4000, file=io.StringIO())
        ticker = Ticker.create(bar, 4000, thread_safe=True)
        ticker.start()

        def work():
            for _ in range(1000):
                ticker.tick()

        threads = [threading.Thread(target=work) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        ticker.stop()
        assert bar.n == 4000
        bar.close()
