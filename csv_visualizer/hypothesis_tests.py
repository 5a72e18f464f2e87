"""
Hypothesis tests for the CSV Data Visualizer.

Three independent tests on one or two selected columns:

``ttest``
    One column: one-sample t-test of the mean against 0 (n − 1 dof).
    Two columns: pooled two-sample t-test of the means (n₁ + n₂ − 2 dof).
    Two-tailed p-values from the Student-t distribution.
``chiSquare``
    Test of independence on the contingency table of two categorical
    columns.  Expected cell = rowTotal·colTotal / grandTotal,
    dof = (rows − 1)(cols − 1), p = upper tail of χ².
``correlation``
    Pearson r of two columns with t = r·sqrt((n − 2) / (1 − r²)) and a
    two-tailed Student-t p-value (n − 2 dof).

Every failure is raised as a ``CsvVisualizerError`` subclass with a
message fit for display; no test returns NaN.
"""

from collections import OrderedDict
from typing import Dict, List, Sequence

import numpy as np
from scipy import stats as sp_stats

from .data_model import Dataset, TestResult
from .errors import (
    ColumnSelectionError, DegenerateDataError, InsufficientDataError,
)
from .regression import extract_pairs
from .value_parsing import is_missing, numeric_values


def _require_selection(dataset: Dataset, columns: Sequence[str], minimum: int, maximum: int) -> None:
    if len(columns) < minimum:
        noun = "column" if minimum == 1 else "columns"
        raise ColumnSelectionError(
            f"Please select at least {minimum} {noun} for this test."
        )
    if len(columns) > maximum:
        raise ColumnSelectionError(
            f"This test accepts at most {maximum} columns; {len(columns)} selected."
        )
    dataset.require_columns(*columns)


def _checked(value: float, what: str) -> float:
    if not np.isfinite(value):
        raise DegenerateDataError(
            f"The {what} is undefined for this data (zero variance)."
        )
    return float(value)


# ── t-test ───────────────────────────────────────────────────────────────

def t_test(dataset: Dataset, columns: Sequence[str]) -> TestResult:
    """One-sample (vs 0) or pooled two-sample t-test."""
    _require_selection(dataset, columns, 1, 2)
    first = numeric_values(dataset.column_values(columns[0]))
    if len(first) < 2:
        raise InsufficientDataError(
            f"Column '{columns[0]}' needs at least 2 numeric values for a t-test."
        )

    if len(columns) == 1:
        if np.ptp(first) == 0:
            raise DegenerateDataError(
                f"All values in '{columns[0]}' are identical; the t statistic is undefined."
            )
        res = sp_stats.ttest_1samp(first, 0.0)
        return TestResult(
            test_name="One-Sample T-Test",
            result=_checked(res.statistic, "t statistic"),
            p_value=_checked(res.pvalue, "p-value"),
            description=f"T-test for {columns[0]} against μ=0 (df={len(first) - 1})",
        )

    second = numeric_values(dataset.column_values(columns[1]))
    if len(second) < 2:
        raise InsufficientDataError(
            f"Column '{columns[1]}' needs at least 2 numeric values for a t-test."
        )
    if np.ptp(first) == 0 and np.ptp(second) == 0:
        raise DegenerateDataError(
            "Both columns are constant; the pooled variance is zero."
        )
    res = sp_stats.ttest_ind(first, second, equal_var=True)
    dof = len(first) + len(second) - 2
    return TestResult(
        test_name="Two-Sample T-Test",
        result=_checked(res.statistic, "t statistic"),
        p_value=_checked(res.pvalue, "p-value"),
        description=f"T-test comparing {columns[0]} and {columns[1]} (df={dof})",
    )


# ── Chi-square ───────────────────────────────────────────────────────────

def contingency_table(
    dataset: Dataset,
    columns: Sequence[str],
) -> "OrderedDict[str, Dict[str, int]]":
    """Co-occurrence counts of stringified values.

    With one column the second dimension is a single ``"count"`` bucket.
    Rows missing either value are skipped.
    """
    table: "OrderedDict[str, Dict[str, int]]" = OrderedDict()
    for row in dataset.rows:
        first = row.get(columns[0])
        if is_missing(first):
            continue
        if len(columns) > 1:
            second = row.get(columns[1])
            if is_missing(second):
                continue
            col_key = str(second)
        else:
            col_key = "count"
        counts = table.setdefault(str(first), {})
        counts[col_key] = counts.get(col_key, 0) + 1
    return table


def chi_square_statistic(observed: np.ndarray) -> float:
    """Σ (observed − expected)² / expected over every cell."""
    row_totals = observed.sum(axis=1, keepdims=True)
    col_totals = observed.sum(axis=0, keepdims=True)
    expected = row_totals * col_totals / observed.sum()
    return float(np.sum((observed - expected) ** 2 / expected))


def chi_square_test(dataset: Dataset, columns: Sequence[str]) -> TestResult:
    """Chi-square test of independence."""
    _require_selection(dataset, columns, 1, 2)
    table = contingency_table(dataset, columns)
    if not table:
        raise InsufficientDataError(
            "No rows have values in the selected columns."
        )

    row_keys = list(table)
    col_keys: List[str] = []
    for counts in table.values():
        for key in counts:
            if key not in col_keys:
                col_keys.append(key)
    observed = np.array(
        [[table[r].get(c, 0) for c in col_keys] for r in row_keys],
        dtype=float,
    )

    dof = (len(row_keys) - 1) * (len(col_keys) - 1)
    if dof == 0:
        raise DegenerateDataError(
            "The chi-square test has zero degrees of freedom: select two "
            "columns that each have at least two distinct values."
        )

    chi2 = chi_square_statistic(observed)
    p_value = float(sp_stats.chi2.sf(chi2, dof))
    other = columns[1] if len(columns) > 1 else "count"
    return TestResult(
        test_name="Chi-Square Test",
        result=chi2,
        p_value=p_value,
        description=(
            f"Chi-square test of independence between {columns[0]} and "
            f"{other} (df={dof})"
        ),
    )


# ── Pearson correlation ──────────────────────────────────────────────────

def correlation_p_value(r: float, n: int) -> float:
    """Two-tailed p-value of Pearson *r* over *n* pairs."""
    dof = n - 2
    if dof <= 0:
        raise InsufficientDataError("A correlation test needs at least 3 pairs.")
    if abs(r) >= 1.0:
        return 0.0
    t = r * np.sqrt(dof / (1.0 - r * r))
    return float(2.0 * sp_stats.t.sf(abs(t), dof))


def correlation_test(dataset: Dataset, columns: Sequence[str]) -> TestResult:
    """Pearson correlation between two columns."""
    _require_selection(dataset, columns, 2, 2)
    xs, ys = extract_pairs(dataset, columns[0], columns[1])
    n = len(xs)
    if n < 3:
        raise InsufficientDataError(
            f"A correlation test needs at least 3 rows where both columns "
            f"are numeric (found {n})."
        )
    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    if np.ptp(x) == 0 or np.ptp(y) == 0:
        raise DegenerateDataError(
            "One of the columns is constant; the correlation is undefined."
        )
    dx = x - x.mean()
    dy = y - y.mean()
    r = float(np.clip(
        np.sum(dx * dy) / np.sqrt(np.sum(dx * dx) * np.sum(dy * dy)),
        -1.0, 1.0,
    ))
    return TestResult(
        test_name="Pearson Correlation",
        result=r,
        p_value=correlation_p_value(r, n),
        description=f"Correlation between {columns[0]} and {columns[1]} (n={n})",
    )


_TESTS = {
    "ttest": t_test,
    "chiSquare": chi_square_test,
    "correlation": correlation_test,
}


def run_test(dataset: Dataset, kind: str, columns: Sequence[str]) -> TestResult:
    """Dispatch to the test named *kind*."""
    try:
        func = _TESTS[kind]
    except KeyError:
        raise ValueError(
            f"Unknown test {kind!r}; expected one of {', '.join(_TESTS)}."
        ) from None
    return func(dataset, list(columns))
