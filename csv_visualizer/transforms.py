"""
Column transforms for the CSV Data Visualizer.

Rewrites one column of a dataset with ``log``, ``standardize``
(z-score), ``normalize`` (x / column sum) or ``minmax``.  The column
statistics are taken from the *current* values before any row is
rewritten, so the result does not depend on processing order.

Large tables are processed in fixed-size batches by ``ChunkedTransform``
so the GUI can yield to its event loop between batches (see
``gui_statistics_tab``).  ``transform_column`` runs the same batches
back to back for non-interactive callers.

Guards:
- ``log`` maps non-positive inputs to ``log(LOG_FLOOR)``
- ``standardize`` divides by 1 when the standard deviation is 0
- ``normalize`` writes 0 when the column sums to 0
- ``minmax`` writes 0 when max == min

Cells that are not numeric become ``None``.
"""

import math
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .constants import LOG_FLOOR, TRANSFORM_BATCH_SIZE, TRANSFORM_KINDS
from .data_model import Dataset, Row
from .descriptive import mean, sample_std
from .errors import InsufficientDataError
from .value_parsing import numeric_values, parse_numeric


def _column_parameters(kind: str, values: List[float]) -> Dict[str, float]:
    if kind == "standardize":
        std = sample_std(values)
        return {'mean': mean(values), 'std': std if std != 0 else 1.0}
    if kind == "normalize":
        return {'sum': float(math.fsum(values))}
    if kind == "minmax":
        return {'min': min(values), 'max': max(values)}
    return {}


def transform_value(kind: str, value: Any, params: Dict[str, float]) -> Optional[float]:
    """Apply one transform to one raw cell; ``None`` if not numeric."""
    x = parse_numeric(value)
    if x is None:
        return None
    if kind == "log":
        return math.log(x) if x > 0 else math.log(LOG_FLOOR)
    if kind == "standardize":
        return (x - params['mean']) / params['std']
    if kind == "normalize":
        total = params['sum']
        return x / total if total != 0 else 0.0
    if kind == "minmax":
        span = params['max'] - params['min']
        return (x - params['min']) / span if span != 0 else 0.0
    raise ValueError(f"Unknown transform kind: {kind!r}")


class ChunkedTransform:
    """A column transform executed in batches.

    Parameters
    ----------
    dataset : Dataset
        Snapshot to transform (never modified).
    column : str
        Column to rewrite.
    kind : str
        One of ``constants.TRANSFORM_KINDS``.
    batch_size : int
        Rows processed per ``step()``.

    Raises
    ------
    ValueError
        Unknown *kind* or non-positive *batch_size*.
    ColumnSelectionError
        *column* is not in the dataset.
    InsufficientDataError
        The column holds no numeric values.
    """

    def __init__(
        self,
        dataset: Dataset,
        column: str,
        kind: str,
        batch_size: int = TRANSFORM_BATCH_SIZE,
    ):
        if kind not in TRANSFORM_KINDS:
            raise ValueError(
                f"Unknown transform kind {kind!r}; expected one of "
                f"{', '.join(TRANSFORM_KINDS)}."
            )
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        values = numeric_values(dataset.column_values(column))
        if not values:
            raise InsufficientDataError(
                f"Column '{column}' has no numeric values to transform."
            )

        self._dataset = dataset
        self._column = column
        self._kind = kind
        self._batch_size = batch_size
        self._params = _column_parameters(kind, values)
        self._rows: List[Row] = []
        self._next = 0

    @property
    def source(self) -> Dataset:
        """The dataset this job reads from."""
        return self._dataset

    @property
    def column(self) -> str:
        return self._column

    @property
    def kind(self) -> str:
        return self._kind

    @property
    def done(self) -> bool:
        return self._next >= self._dataset.row_count

    @property
    def progress(self) -> Tuple[int, int]:
        """``(rows processed, total rows)``."""
        return self._next, self._dataset.row_count

    def step(self) -> bool:
        """Process one batch.  Returns ``True`` once every row is done."""
        stop = min(self._next + self._batch_size, self._dataset.row_count)
        for row in self._dataset.rows[self._next:stop]:
            new_row = dict(row)
            new_row[self._column] = transform_value(
                self._kind, row.get(self._column), self._params
            )
            self._rows.append(new_row)
        self._next = stop
        return self.done

    def batches(self) -> Iterator[Tuple[int, int]]:
        """Yield progress after each batch until finished."""
        while not self.done:
            self.step()
            yield self.progress

    def result(self) -> Dataset:
        """The transformed dataset; only available once ``done``."""
        if not self.done:
            processed, total = self.progress
            raise RuntimeError(
                f"Transform still running ({processed}/{total} rows)."
            )
        return self._dataset.with_rows(self._rows)


def transform_column(
    dataset: Dataset,
    column: str,
    kind: str,
    batch_size: int = TRANSFORM_BATCH_SIZE,
) -> Dataset:
    """Transform *column* and return the new dataset."""
    job = ChunkedTransform(dataset, column, kind, batch_size=batch_size)
    for _ in job.batches():
        pass
    return job.result()
