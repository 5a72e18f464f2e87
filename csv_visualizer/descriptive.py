"""
Descriptive statistics for the CSV Data Visualizer.

Mean, median, sum, sample standard deviation, min and max over the
valid numeric cells of a column.  Cells that do not parse as numbers
are filtered out first; they are never substituted.

The scalar helpers return ``NaN`` for an empty input (mean/median) so
they compose inside other computations; ``summarize`` and
``compute_descriptive_stats`` are the display-facing entry points and
raise ``InsufficientDataError`` instead of handing back a NaN.
"""

from typing import Sequence

import numpy as np

from .data_model import Dataset, DescriptiveStats
from .errors import InsufficientDataError
from .value_parsing import numeric_values


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; ``NaN`` when *values* is empty."""
    if len(values) == 0:
        return float('nan')
    return float(np.mean(values))


def median(values: Sequence[float]) -> float:
    """Middle value (average of the two central values for even n)."""
    if len(values) == 0:
        return float('nan')
    return float(np.median(values))


def sample_std(values: Sequence[float]) -> float:
    """Sample standard deviation (Bessel's correction); 0 when n ≤ 1."""
    if len(values) <= 1:
        return 0.0
    return float(np.std(values, ddof=1))


def summarize(values: Sequence[float], column: str = "") -> DescriptiveStats:
    """Aggregate already-parsed numeric *values*.

    Raises
    ------
    InsufficientDataError
        If *values* is empty.
    """
    if len(values) == 0:
        where = f" in column '{column}'" if column else ""
        raise InsufficientDataError(f"No numeric values found{where}.")
    arr = np.asarray(values, dtype=float)
    return DescriptiveStats(
        column=column,
        count=int(arr.size),
        mean=float(np.mean(arr)),
        median=float(np.median(arr)),
        std=sample_std(arr),
        sum=float(np.sum(arr)),
        min=float(np.min(arr)),
        max=float(np.max(arr)),
    )


def compute_descriptive_stats(dataset: Dataset, column: str) -> DescriptiveStats:
    """Descriptive statistics of one dataset column."""
    raw = dataset.column_values(column)
    return summarize(numeric_values(raw), column)
