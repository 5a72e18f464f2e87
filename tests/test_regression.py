"""Tests for simple linear regression."""

import numpy as np
import pytest

from csv_visualizer.data_model import RangeFilter
from csv_visualizer.errors import (
    ColumnSelectionError, DegenerateDataError, DegenerateFitError,
    InsufficientDataError,
)
from csv_visualizer.regression import (
    apply_range, correlation_label, editor_limits, extract_pairs, fit_line,
    fit_regression, format_equation, observed_range, open_unchanged_bounds,
    r_squared_label,
)

from conftest import make_dataset


class TestFitLine:
    def test_exact_line(self, linear_dataset):
        res = fit_regression(linear_dataset, "a", "b")
        assert res.slope == pytest.approx(2.0)
        assert res.intercept == pytest.approx(0.0, abs=1e-12)
        assert res.r_squared == pytest.approx(1.0)
        assert res.correlation == pytest.approx(1.0)
        assert res.n == 3
        assert res.equation == "y = 2.0000x + 0.0000"
        assert res.predicted_values == pytest.approx([2.0, 4.0, 6.0])

    def test_matches_numpy_polyfit(self):
        rng = np.random.default_rng(7)
        x = rng.uniform(0, 10, 40)
        y = 1.5 * x - 3 + rng.normal(0, 0.5, 40)
        res = fit_line(list(x), list(y))
        slope, intercept = np.polyfit(x, y, 1)
        assert res.slope == pytest.approx(slope)
        assert res.intercept == pytest.approx(intercept)
        assert res.correlation == pytest.approx(np.corrcoef(x, y)[0, 1])
        assert res.r_squared == pytest.approx(res.correlation ** 2)

    def test_standard_error(self):
        res = fit_line([1, 2, 3, 4], [1, 3, 2, 4])
        resid = np.array([1, 3, 2, 4]) - np.array(res.predicted_values)
        assert res.standard_error == pytest.approx(np.sqrt(np.sum(resid ** 2) / 2))

    def test_standard_error_undefined_for_two_points(self):
        res = fit_line([0, 1], [1, 3])
        assert res.standard_error is None
        assert res.slope == pytest.approx(2.0)

    def test_fit_points_span_x(self):
        res = fit_line([2, 4, 10], [1, 2, 4])
        assert len(res.fit_points) == 101
        assert res.fit_points[0][0] == pytest.approx(2.0)
        assert res.fit_points[-1][0] == pytest.approx(10.0)
        x, y = res.fit_points[50]
        assert y == pytest.approx(res.slope * x + res.intercept)

    def test_negative_correlation(self):
        res = fit_line([1, 2, 3], [3, 2, 1])
        assert res.correlation == pytest.approx(-1.0)
        assert res.slope == pytest.approx(-1.0)


class TestDegenerateInput:
    def test_constant_x(self):
        with pytest.raises(DegenerateFitError, match="x values"):
            fit_line([5, 5, 5], [1, 2, 3])

    def test_constant_y(self):
        with pytest.raises(DegenerateFitError, match="y values"):
            fit_line([1, 2, 3], [4, 4, 4])

    def test_degenerate_is_data_error(self):
        assert issubclass(DegenerateFitError, DegenerateDataError)

    def test_single_pair(self):
        with pytest.raises(InsufficientDataError):
            fit_line([1], [2])

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            fit_line([1, 2], [1])

    def test_unknown_column(self, linear_dataset):
        with pytest.raises(ColumnSelectionError):
            fit_regression(linear_dataset, "a", "zzz")


class TestPairs:
    def test_unparseable_rows_excluded(self):
        ds = make_dataset(
            ["x", "y"],
            [{"x": 1, "y": 2}, {"x": "bad", "y": 100}, {"x": 2, "y": 4},
             {"x": 3, "y": None}, {"x": 3, "y": 6}],
        )
        xs, ys = extract_pairs(ds, "x", "y")
        assert xs == [1.0, 2.0, 3.0]
        assert ys == [2.0, 4.0, 6.0]
        assert fit_regression(ds, "x", "y").slope == pytest.approx(2.0)

    def test_zero_is_a_value(self):
        ds = make_dataset(["x", "y"], [{"x": 0, "y": 0}, {"x": 1, "y": 1}])
        assert extract_pairs(ds, "x", "y") == ([0.0, 1.0], [0.0, 1.0])


class TestRangeFilter:
    def test_observed_range_is_identity(self):
        xs, ys = [1.0, 2.0, 3.0, 4.0], [2.0, 5.0, 5.5, 9.0]
        full = fit_line(xs, ys)
        filtered = fit_line(*apply_range(xs, ys, observed_range(xs, ys)))
        assert filtered.slope == full.slope
        assert filtered.intercept == full.intercept
        assert filtered.n == full.n

    def test_inclusive_bounds(self):
        xs, ys = [1.0, 2.0, 3.0, 4.0], [1.0, 2.0, 3.0, 4.0]
        kept = apply_range(xs, ys, RangeFilter(x_min=2.0, x_max=3.0))
        assert kept == ([2.0, 3.0], [2.0, 3.0])

    def test_y_bound(self):
        kept = apply_range([1, 2, 3], [10, 20, 30], RangeFilter(y_max=20))
        assert kept == ([1, 2], [10, 20])

    def test_filtered_fit(self, series_dataset):
        res = fit_regression(
            series_dataset, "idx", "value", RangeFilter(x_min=10, x_max=20)
        )
        assert res.n == 11
        assert min(res.x_values) == 10.0

    def test_filter_leaving_one_pair(self, linear_dataset):
        with pytest.raises(InsufficientDataError):
            fit_regression(linear_dataset, "a", "b", RangeFilter(x_min=3))

    def test_no_range_for_empty(self):
        assert observed_range([], []) == RangeFilter()


class TestFormatting:
    def test_negative_intercept(self):
        assert format_equation(1.0, -1.0) == "y = 1.0000x - 1.0000"

    def test_column_labels(self):
        assert format_equation(2.0, 0.5, "ads", "revenue") == \
            "revenue = 2.0000 × ads + 0.5000"

    @pytest.mark.parametrize("r2, label", [
        (0.9, "Strong fit"), (0.7, "Strong fit"),
        (0.6, "Moderate fit"), (0.2, "Weak fit"),
    ])
    def test_r_squared_label(self, r2, label):
        assert r_squared_label(r2) == label

    def test_correlation_label(self):
        assert correlation_label(0.95) == "Strong positive correlation"
        assert correlation_label(-0.55) == "Moderate negative correlation"
        assert correlation_label(0.1) == "Weak positive correlation"


class TestRangeEditors:
    def test_rounded_defaults_keep_extremes(self):
        xs = [0.123456, 0.2, 0.3, 0.987654]
        ys = [1.0, 2.5, 2.9, 4.2]
        shown = RangeFilter(x_min=round(min(xs), 4), x_max=round(max(xs), 4),
                            y_min=1.0, y_max=4.2)
        rng = open_unchanged_bounds(shown, shown)
        assert rng == RangeFilter()
        kept = apply_range(xs, ys, rng)
        assert fit_line(*kept).slope == fit_line(xs, ys).slope

    def test_edited_bound_applies(self):
        shown = RangeFilter(x_min=0.1235, x_max=0.9877, y_min=1.0, y_max=4.2)
        edited = RangeFilter(x_min=0.25, x_max=0.9877, y_min=1.0, y_max=4.2)
        assert open_unchanged_bounds(edited, shown) == RangeFilter(x_min=0.25)

    def test_editor_limits_cover_large_values(self):
        low, high = editor_limits(-5e13, 2e14)
        assert low < -5e13 and high > 2e14

    def test_editor_limits_small_range(self):
        low, high = editor_limits(0.001, 0.002)
        assert low <= -0.999 and high >= 1.002
