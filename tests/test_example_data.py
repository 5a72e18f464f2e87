"""Tests for the example dataset generator."""

import pytest

from csv_visualizer.cleaning import remove_duplicates
from csv_visualizer.csv_parser import load_csv
from csv_visualizer.example_data import (
    EXAMPLE_COLUMNS, EXAMPLE_FILENAME, generate_example_csv,
)
from csv_visualizer.regression import fit_regression


@pytest.fixture(scope="module")
def example(tmp_path_factory):
    out_dir = tmp_path_factory.mktemp("example")
    return load_csv(generate_example_csv(str(out_dir)))


class TestExampleData:
    def test_loads(self, example):
        assert example.column_names == EXAMPLE_COLUMNS
        assert example.row_count == 245
        assert example.source_file.endswith(EXAMPLE_FILENAME)

    def test_column_kinds(self, example):
        assert example.numeric_columns == ["Units", "Price", "Advertising", "Revenue"]

    def test_has_missing_cells(self, example):
        assert any(
            row[c] is None for row in example.rows for c in example.numeric_columns
        )

    def test_duplicates(self, example):
        assert remove_duplicates(example).changed == 5

    def test_advertising_drives_revenue(self, example):
        res = fit_regression(example, "Advertising", "Revenue")
        assert res.slope == pytest.approx(3.2, abs=0.5)
        assert res.r_squared > 0.5

    def test_reproducible(self, tmp_path):
        a = generate_example_csv(str(tmp_path / "a"), n_rows=20, seed=1)
        b = generate_example_csv(str(tmp_path / "b"), n_rows=20, seed=1)
        with open(a) as fa, open(b) as fb:
            assert fa.read() == fb.read()
