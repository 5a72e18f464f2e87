"""Tests for column transforms."""

import math

import numpy as np
import pytest

from csv_visualizer.constants import LOG_FLOOR
from csv_visualizer.errors import ColumnSelectionError, InsufficientDataError
from csv_visualizer.transforms import (
    ChunkedTransform, transform_column, transform_value,
)

from conftest import make_dataset


@pytest.fixture
def values_dataset():
    return make_dataset(
        ["label", "v"],
        [
            {"label": "a", "v": 4},
            {"label": "b", "v": 1},
            {"label": "c", "v": "n/a"},
            {"label": "d", "v": 10},
            {"label": "e", "v": 5},
        ],
    )


def _column(ds, name):
    return [r[name] for r in ds.rows]


class TestTransformColumn:
    def test_standardize_mean_is_zero(self, values_dataset):
        out = transform_column(values_dataset, "v", "standardize")
        vals = [v for v in _column(out, "v") if v is not None]
        assert np.mean(vals) == pytest.approx(0.0, abs=1e-12)
        assert np.std(vals, ddof=1) == pytest.approx(1.0)

    def test_minmax_range_and_endpoints(self, values_dataset):
        out = transform_column(values_dataset, "v", "minmax")
        col = _column(out, "v")
        vals = [v for v in col if v is not None]
        assert all(0.0 <= v <= 1.0 for v in vals)
        assert col[1] == 0.0   # original minimum
        assert col[3] == 1.0   # original maximum

    def test_normalize_sums_to_one(self, values_dataset):
        out = transform_column(values_dataset, "v", "normalize")
        vals = [v for v in _column(out, "v") if v is not None]
        assert math.fsum(vals) == pytest.approx(1.0)

    def test_log(self):
        ds = make_dataset(["v"], [{"v": math.e}, {"v": 0}, {"v": -3}])
        col = _column(transform_column(ds, "v", "log"), "v")
        assert col[0] == pytest.approx(1.0)
        assert col[1] == pytest.approx(math.log(LOG_FLOOR))
        assert col[2] == pytest.approx(math.log(LOG_FLOOR))

    def test_non_numeric_become_missing(self, values_dataset):
        out = transform_column(values_dataset, "v", "log")
        assert out.rows[2]["v"] is None

    def test_other_columns_untouched(self, values_dataset):
        out = transform_column(values_dataset, "v", "minmax")
        assert out.row_count == values_dataset.row_count
        assert out.column_names == values_dataset.column_names
        assert _column(out, "label") == _column(values_dataset, "label")

    def test_input_not_modified(self, values_dataset):
        transform_column(values_dataset, "v", "standardize")
        assert values_dataset.rows[0]["v"] == 4


class TestGuards:
    def test_constant_standardize(self):
        ds = make_dataset(["v"], [{"v": 3}, {"v": 3}])
        assert _column(transform_column(ds, "v", "standardize"), "v") == [0.0, 0.0]

    def test_constant_minmax(self):
        ds = make_dataset(["v"], [{"v": 3}, {"v": 3}])
        assert _column(transform_column(ds, "v", "minmax"), "v") == [0.0, 0.0]

    def test_zero_sum_normalize(self):
        ds = make_dataset(["v"], [{"v": -1}, {"v": 1}])
        assert _column(transform_column(ds, "v", "normalize"), "v") == [0.0, 0.0]

    def test_unknown_kind(self, values_dataset):
        with pytest.raises(ValueError):
            transform_column(values_dataset, "v", "sqrt")
        with pytest.raises(ValueError):
            transform_value("sqrt", 1.0, {})

    def test_text_column(self, values_dataset):
        with pytest.raises(InsufficientDataError):
            transform_column(values_dataset, "label", "log")

    def test_unknown_column(self, values_dataset):
        with pytest.raises(ColumnSelectionError):
            transform_column(values_dataset, "nope", "log")


class TestChunkedTransform:
    def test_batches_report_progress(self, values_dataset):
        job = ChunkedTransform(values_dataset, "v", "minmax", batch_size=2)
        assert list(job.batches()) == [(2, 5), (4, 5), (5, 5)]
        assert job.done

    def test_step_by_step_matches_one_shot(self, values_dataset):
        job = ChunkedTransform(values_dataset, "v", "standardize", batch_size=1)
        steps = 0
        while not job.step():
            steps += 1
        assert steps == 4
        expected = transform_column(values_dataset, "v", "standardize")
        assert job.result().rows == expected.rows

    def test_source_is_input_snapshot(self, values_dataset):
        job = ChunkedTransform(values_dataset, "v", "log")
        for _ in job.batches():
            pass
        assert job.source is values_dataset
        assert job.result() is not values_dataset

    def test_result_before_done(self, values_dataset):
        job = ChunkedTransform(values_dataset, "v", "log", batch_size=2)
        job.step()
        with pytest.raises(RuntimeError):
            job.result()

    def test_bad_batch_size(self, values_dataset):
        with pytest.raises(ValueError):
            ChunkedTransform(values_dataset, "v", "log", batch_size=0)

    def test_statistics_fixed_before_first_batch(self, values_dataset):
        # Every batch uses the same min/max even though rows change
        job = ChunkedTransform(values_dataset, "v", "minmax", batch_size=1)
        for _ in job.batches():
            pass
        assert job.result().rows[3]["v"] == 1.0
