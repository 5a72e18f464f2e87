"""
Statistics engine: the single entry point the GUI calls for analysis.

A ``StatisticsEngine`` wraps one immutable ``Dataset`` snapshot.  Every
method is pure: it reads the snapshot and returns a result (or a new
dataset) without touching the engine or the snapshot.  Failures are
raised as ``CsvVisualizerError`` subclasses carrying a display message.
"""

from dataclasses import replace
from typing import Optional, Sequence

from .cleaning import (
    CleaningOutcome, fill_missing_with_mean, fill_missing_with_median,
    remove_duplicates, remove_rows_with_missing,
)
from .data_model import (
    Dataset, DescriptiveStats, PivotTable, RangeFilter, RegressionResult,
    TestResult,
)
from .descriptive import compute_descriptive_stats
from .hypothesis_tests import run_test
from .pivot import pivot
from .regression import fit_regression, format_equation
from .transforms import ChunkedTransform, transform_column

CLEANING_ACTIONS = {
    "fill_mean": fill_missing_with_mean,
    "fill_median": fill_missing_with_median,
    "remove_missing": remove_rows_with_missing,
    "remove_duplicates": remove_duplicates,
}


class StatisticsEngine:
    """Descriptive stats, transforms, regression, tests and pivots.

    Parameters
    ----------
    dataset : Dataset
        Snapshot every call operates on.
    """

    def __init__(self, dataset: Dataset):
        self.dataset = dataset

    def compute_descriptive_stats(self, column: str) -> DescriptiveStats:
        return compute_descriptive_stats(self.dataset, column)

    def transform(self, column: str, kind: str) -> Dataset:
        """New dataset with *column* rewritten by transform *kind*."""
        return transform_column(self.dataset, column, kind)

    def start_transform(self, column: str, kind: str) -> ChunkedTransform:
        """Same as ``transform`` but returned as a batch-stepped job."""
        return ChunkedTransform(self.dataset, column, kind)

    def fit_regression(
        self,
        x_column: str,
        y_column: str,
        range_filter: Optional[RangeFilter] = None,
    ) -> RegressionResult:
        """Least-squares fit of *y_column* on *x_column*.

        The result's ``equation`` is labelled with the column names.
        """
        result = fit_regression(self.dataset, x_column, y_column, range_filter)
        labelled = format_equation(
            result.slope, result.intercept, x_column, y_column
        )
        return replace(result, equation=labelled)

    def run_test(self, kind: str, columns: Sequence[str]) -> TestResult:
        return run_test(self.dataset, kind, columns)

    def pivot(self, group_column: str) -> PivotTable:
        return pivot(self.dataset, group_column)

    def clean(self, action: str) -> CleaningOutcome:
        """Run one of ``CLEANING_ACTIONS`` on the snapshot."""
        try:
            func = CLEANING_ACTIONS[action]
        except KeyError:
            raise ValueError(f"Unknown cleaning action: {action!r}") from None
        return func(self.dataset)
