"""
Root conftest.py for the CSV Data Visualizer tests.

Shared fixtures: small datasets, a CSV writer into ``tmp_path`` and an
Agg-backed matplotlib figure.  No test imports Qt.
"""

import sys
from pathlib import Path

import matplotlib
matplotlib.use("Agg")

import pytest
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

# Ensure the project root is in the path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from csv_visualizer.data_model import Dataset  # noqa: E402


# ============================================================================
# Helpers
# ============================================================================


def make_dataset(names, rows):
    """Dataset from a column list and row dicts."""
    return Dataset.from_rows(names, rows)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def linear_dataset():
    """b = 2·a exactly."""
    return make_dataset(
        ["a", "b"],
        [{"a": 1, "b": 2}, {"a": 2, "b": 4}, {"a": 3, "b": 6}],
    )


@pytest.fixture
def sales_dataset():
    """Mixed text/numeric table with a missing cell and a duplicate row."""
    return make_dataset(
        ["region", "units", "price"],
        [
            {"region": "North", "units": 10, "price": 2.5},
            {"region": "South", "units": 4, "price": 3.0},
            {"region": "North", "units": 6, "price": None},
            {"region": "East", "units": 8, "price": 1.5},
            {"region": "South", "units": 4, "price": 3.0},
        ],
    )


@pytest.fixture
def series_dataset():
    """100 rows: idx 0..99 and value = idx²."""
    return make_dataset(
        ["idx", "value"],
        [{"idx": i, "value": i * i} for i in range(100)],
    )


@pytest.fixture
def write_csv(tmp_path):
    """Write text to a CSV file in ``tmp_path`` and return its path."""
    def _write(text, name="data.csv", encoding="utf-8"):
        path = tmp_path / name
        path.write_bytes(text.encode(encoding) if isinstance(text, str) else text)
        return str(path)
    return _write


@pytest.fixture
def figure():
    """Small figure with an Agg canvas attached."""
    fig = Figure(figsize=(4, 3))
    FigureCanvasAgg(fig)
    return fig
