"""
Missing-value handling and de-duplication.

Each operation takes the current ``Dataset`` and returns a
``CleaningOutcome`` holding a brand-new dataset plus a short message
for the status bar.  The input dataset is never modified.
"""

import warnings
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Sequence

from .constants import DUPLICATE_KEY_SEPARATOR, FILL_DECIMALS
from .data_model import Dataset, Row
from .descriptive import mean, median
from .value_parsing import is_missing, numeric_values


@dataclass(frozen=True)
class CleaningOutcome:
    dataset: Dataset
    changed: int
    message: str


# ── Fill ─────────────────────────────────────────────────────────────────

def _fill_missing(
    dataset: Dataset,
    statistic: Callable[[Sequence[float]], float],
    label: str,
) -> CleaningOutcome:
    fills: Dict[str, str] = {}
    skipped: List[str] = []
    for name in dataset.column_names:
        raw = dataset.column_values(name)
        if not any(is_missing(v) for v in raw):
            continue
        values = numeric_values(raw)
        if not values:
            skipped.append(name)
            continue
        fills[name] = f"{statistic(values):.{FILL_DECIMALS}f}"

    if skipped:
        warnings.warn(
            f"No numeric values in {', '.join(repr(s) for s in skipped)}; "
            f"missing cells there were left empty.",
            stacklevel=3,
        )

    filled = 0
    rows: List[Row] = []
    for row in dataset.rows:
        new_row = dict(row)
        for name, text in fills.items():
            if is_missing(new_row.get(name)):
                new_row[name] = text
                filled += 1
        rows.append(new_row)

    return CleaningOutcome(
        dataset=dataset.with_rows(rows),
        changed=filled,
        message=f"Filled {filled} missing values with {label} values",
    )


def fill_missing_with_mean(dataset: Dataset) -> CleaningOutcome:
    """Write each column's mean (2 decimals) into its missing cells."""
    return _fill_missing(dataset, mean, "mean")


def fill_missing_with_median(dataset: Dataset) -> CleaningOutcome:
    """Write each column's median (2 decimals) into its missing cells."""
    return _fill_missing(dataset, median, "median")


# ── Remove ───────────────────────────────────────────────────────────────

def remove_rows_with_missing(dataset: Dataset) -> CleaningOutcome:
    """Drop every row with a missing value in *any* column."""
    names = dataset.column_names
    kept = [
        row for row in dataset.rows
        if not any(is_missing(row.get(name)) for name in names)
    ]
    removed = dataset.row_count - len(kept)
    return CleaningOutcome(
        dataset=dataset.with_rows(kept),
        changed=removed,
        message=f"Removed {removed} rows with missing values",
    )


def _row_key(row: Row, names: Sequence[str]) -> str:
    def cell(value: Any) -> str:
        return "" if value is None else str(value)
    return DUPLICATE_KEY_SEPARATOR.join(cell(row.get(n)) for n in names)


def remove_duplicates(dataset: Dataset) -> CleaningOutcome:
    """Keep the first occurrence of every distinct row, in original order."""
    names = dataset.column_names
    seen = set()
    kept: List[Row] = []
    for row in dataset.rows:
        key = _row_key(row, names)
        if key in seen:
            continue
        seen.add(key)
        kept.append(row)
    removed = dataset.row_count - len(kept)
    return CleaningOutcome(
        dataset=dataset.with_rows(kept),
        changed=removed,
        message=f"Removed {removed} duplicate rows",
    )
