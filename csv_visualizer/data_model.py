"""
Data model for the CSV Data Visualizer.

Immutable dataclasses describing a loaded table and every result the
statistics layer produces.  A ``Dataset`` is built once per file load
and replaced wholesale by every cleaning or transform operation; rows
are never edited in place once a dataset has been constructed.

Missing cells are modelled as ``None`` (never ``0`` and never ``NaN``).
Column order from the source file is preserved in ``Dataset.columns``
and in the key order of every row.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .constants import (
    DEFAULT_CHART_COLOR, DEFAULT_CHART_TYPE, DEFAULT_SHOW_GRID,
    DEFAULT_VISIBLE_POINTS,
)
from .errors import ColumnSelectionError
from .value_parsing import is_missing, parse_numeric

NUMERIC = "numeric"
TEXT = "text"

Row = Dict[str, Any]


@dataclass(frozen=True)
class ColumnSchema:
    """One column of the table.

    Parameters
    ----------
    name : str
        Header text (unique within a dataset).
    kind : str
        ``"numeric"`` when every present cell parses as a number and at
        least one cell is present, otherwise ``"text"``.
    """
    name: str
    kind: str

    @property
    def is_numeric(self) -> bool:
        return self.kind == NUMERIC


def infer_column_kind(values: Sequence[Any]) -> str:
    """Declare a column numeric or text from its cells."""
    present = [v for v in values if not is_missing(v)]
    if present and all(parse_numeric(v) is not None for v in present):
        return NUMERIC
    return TEXT


def infer_schema(names: Sequence[str], rows: Sequence[Row]) -> List[ColumnSchema]:
    return [
        ColumnSchema(name, infer_column_kind([row.get(name) for row in rows]))
        for name in names
    ]


@dataclass(frozen=True)
class Dataset:
    """An ordered table of uniform rows.

    Parameters
    ----------
    columns : list of ColumnSchema
        Ordered column list with a declared type per column.
    rows : list of dict
        Every row carries exactly the keys in ``columns``, in order.
    source_file : str
        Path the data was read from (empty for derived/test data).
    """
    columns: List[ColumnSchema]
    rows: List[Row]
    source_file: str = ""

    @classmethod
    def from_rows(
        cls,
        names: Sequence[str],
        rows: Sequence[Row],
        source_file: str = "",
    ) -> "Dataset":
        """Build a dataset, normalising row keys and inferring the schema."""
        names = list(names)
        normalised = [{name: row.get(name) for name in names} for row in rows]
        return cls(
            columns=infer_schema(names, normalised),
            rows=normalised,
            source_file=source_file,
        )

    def with_rows(self, rows: Sequence[Row]) -> "Dataset":
        """Return a new dataset with the same columns and *rows*."""
        return Dataset.from_rows(self.column_names, rows, self.source_file)

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    @property
    def numeric_columns(self) -> List[str]:
        return [c.name for c in self.columns if c.is_numeric]

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def is_empty(self) -> bool:
        return not self.rows

    def has_column(self, name: str) -> bool:
        return any(c.name == name for c in self.columns)

    def schema_for(self, name: str) -> ColumnSchema:
        for col in self.columns:
            if col.name == name:
                return col
        raise ColumnSelectionError(f"Column '{name}' does not exist in the dataset.")

    def require_columns(self, *names: str) -> None:
        """Raise ``ColumnSelectionError`` unless every name is a column."""
        for name in names:
            if not name:
                raise ColumnSelectionError("Please select a column first.")
            if not self.has_column(name):
                raise ColumnSelectionError(
                    f"Column '{name}' does not exist in the dataset."
                )

    def column_values(self, name: str) -> List[Any]:
        """Raw cells of one column, in row order."""
        self.require_columns(name)
        return [row.get(name) for row in self.rows]


# ── Statistics results ───────────────────────────────────────────────────

@dataclass(frozen=True)
class DescriptiveStats:
    """Aggregates over the valid numeric values of one column."""
    column: str
    count: int
    mean: float
    median: float
    std: float
    sum: float
    min: float
    max: float


@dataclass(frozen=True)
class RangeFilter:
    """Inclusive bounding box applied before a regression re-fit.

    ``None`` on any bound means "the observed extreme".
    """
    x_min: Optional[float] = None
    x_max: Optional[float] = None
    y_min: Optional[float] = None
    y_max: Optional[float] = None

    def contains(self, x: float, y: float) -> bool:
        if self.x_min is not None and x < self.x_min:
            return False
        if self.x_max is not None and x > self.x_max:
            return False
        if self.y_min is not None and y < self.y_min:
            return False
        if self.y_max is not None and y > self.y_max:
            return False
        return True


@dataclass(frozen=True)
class RegressionResult:
    """Simple ordinary-least-squares fit ``y = slope·x + intercept``.

    Parameters
    ----------
    slope, intercept : float
    r_squared : float
        Coefficient of determination; may be negative only for
        pathological fits.
    correlation : float
        Pearson r in [-1, 1].
    standard_error : float or None
        ``sqrt(SSE / (n − 2))``; ``None`` when n ≤ 2 (undefined).
    equation : str
        Human-readable ``"y = 2.0000x + 0.0000"``.
    predicted_values : list of float
        ŷ for every fitted x, in sample order.
    fit_points : list of (float, float)
        101 evenly spaced points across [min(x), max(x)] on the line.
    n : int
        Number of (x, y) pairs the fit used.
    x_values, y_values : list of float
        The samples actually fitted.
    """
    slope: float
    intercept: float
    r_squared: float
    correlation: float
    standard_error: Optional[float]
    equation: str
    predicted_values: List[float]
    fit_points: List[Tuple[float, float]]
    n: int
    x_values: List[float] = field(default_factory=list)
    y_values: List[float] = field(default_factory=list)


@dataclass(frozen=True)
class TestResult:
    """Outcome of one hypothesis test."""
    __test__ = False  # not a pytest test class

    test_name: str
    result: float
    p_value: float
    description: str


@dataclass(frozen=True)
class ColumnAggregate:
    """Per-(group, column) aggregates of a pivot."""
    count: int
    sum: float
    mean: float
    median: float
    std: float

    def metric(self, name: str) -> float:
        return getattr(self, name)


@dataclass(frozen=True)
class PivotGroup:
    """One group of a pivot: its key, row count and column aggregates."""
    key: str
    row_count: int
    columns: Dict[str, ColumnAggregate]


@dataclass(frozen=True)
class PivotTable:
    """Groups in order of first appearance in the dataset."""
    group_column: str
    groups: List[PivotGroup]

    def group(self, key: str) -> PivotGroup:
        for g in self.groups:
            if g.key == key:
                return g
        raise KeyError(key)

    @property
    def value_columns(self) -> List[str]:
        seen: Dict[str, None] = {}
        for g in self.groups:
            for name in g.columns:
                seen.setdefault(name, None)
        return list(seen)


# ── Chart configuration ──────────────────────────────────────────────────

@dataclass(frozen=True)
class ChartConfig:
    """What to draw and how.

    Parameters
    ----------
    chart_type : str
        One of ``constants.CHART_TYPES``.
    x_axis, y_axis : str
        Column names ('' until data is loaded).
    title : str
    color : str
        Matplotlib colour for the series.
    show_grid : bool
    visible_points : int
        Rows drawn at once.
    start_index : int
        First row of the drawn window.
    """
    chart_type: str = DEFAULT_CHART_TYPE
    x_axis: str = ""
    y_axis: str = ""
    title: str = ""
    color: str = DEFAULT_CHART_COLOR
    show_grid: bool = DEFAULT_SHOW_GRID
    visible_points: int = DEFAULT_VISIBLE_POINTS
    start_index: int = 0
