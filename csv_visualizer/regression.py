"""
Simple linear regression for the CSV Data Visualizer.

Ordinary least squares ``y = slope·x + intercept`` over (x, y) pairs
drawn from two columns.  A row contributes a pair only when *both*
cells parse as numbers; rows with an unparseable x or y are excluded,
never read as 0.

Degenerate inputs are reported, not computed:

- fewer than 2 valid pairs → ``InsufficientDataError``
- all x identical (zero x variance) → ``DegenerateFitError``
- all y identical (R² and r undefined) → ``DegenerateFitError``

The standard error needs n > 2 and is ``None`` for exactly two pairs.

A ``RangeFilter`` restricts the fit to an inclusive x/y bounding box;
the filtered fit is simply ``fit_line`` over the surviving pairs.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from .constants import FIT_LINE_POINTS, MODERATE_THRESHOLD, STRONG_THRESHOLD
from .data_model import Dataset, RangeFilter, RegressionResult
from .errors import DegenerateFitError, InsufficientDataError
from .value_parsing import parse_numeric


# ── Sample extraction ────────────────────────────────────────────────────

def extract_pairs(
    dataset: Dataset,
    x_column: str,
    y_column: str,
) -> Tuple[List[float], List[float]]:
    """Paired numeric samples from two columns, in row order."""
    dataset.require_columns(x_column, y_column)
    xs: List[float] = []
    ys: List[float] = []
    for row in dataset.rows:
        x = parse_numeric(row.get(x_column))
        y = parse_numeric(row.get(y_column))
        if x is None or y is None:
            continue
        xs.append(x)
        ys.append(y)
    return xs, ys


def observed_range(xs: Sequence[float], ys: Sequence[float]) -> RangeFilter:
    """The bounding box of the samples (the default range filter)."""
    if not xs or not ys:
        return RangeFilter()
    return RangeFilter(
        x_min=float(min(xs)), x_max=float(max(xs)),
        y_min=float(min(ys)), y_max=float(max(ys)),
    )


def apply_range(
    xs: Sequence[float],
    ys: Sequence[float],
    range_filter: Optional[RangeFilter],
) -> Tuple[List[float], List[float]]:
    """Keep only the pairs inside *range_filter* (inclusive)."""
    if range_filter is None:
        return list(xs), list(ys)
    kept_x: List[float] = []
    kept_y: List[float] = []
    for x, y in zip(xs, ys):
        if range_filter.contains(x, y):
            kept_x.append(x)
            kept_y.append(y)
    return kept_x, kept_y


def open_unchanged_bounds(
    requested: RangeFilter,
    shown_defaults: RangeFilter,
) -> RangeFilter:
    """Drop every bound the user left at its displayed default.

    Range editors show the observed extremes rounded to their display
    precision.  A bound still equal to that rounded default means "no
    limit", so the exact observed extreme applies and no sample is lost
    to rounding.
    """
    kept = {}
    for key in ('x_min', 'x_max', 'y_min', 'y_max'):
        value = getattr(requested, key)
        kept[key] = None if value == getattr(shown_defaults, key) else value
    return RangeFilter(**kept)


def editor_limits(low: float, high: float) -> Tuple[float, float]:
    """Editable span around [*low*, *high*], padded by the data magnitude."""
    pad = max(abs(high - low), abs(low), abs(high), 1.0)
    return low - pad, high + pad


# ── Formatting ───────────────────────────────────────────────────────────

def format_equation(
    slope: float,
    intercept: float,
    x_label: str = "x",
    y_label: str = "y",
) -> str:
    """``"y = 2.0000x + 1.5000"`` (sign-aware for the intercept)."""
    sign = "-" if intercept < 0 else "+"
    joiner = " × " if len(x_label) > 1 else ""
    return (
        f"{y_label} = {slope:.4f}{joiner}{x_label} {sign} {abs(intercept):.4f}"
    )


def fit_line_points(
    slope: float,
    intercept: float,
    x_min: float,
    x_max: float,
    count: int = FIT_LINE_POINTS,
) -> List[Tuple[float, float]]:
    """*count* evenly spaced points on the fitted line over [x_min, x_max]."""
    grid = np.linspace(x_min, x_max, count)
    return [(float(x), float(slope * x + intercept)) for x in grid]


def r_squared_label(r_squared: float) -> str:
    if r_squared >= STRONG_THRESHOLD:
        return "Strong fit"
    if r_squared >= MODERATE_THRESHOLD:
        return "Moderate fit"
    return "Weak fit"


def correlation_label(r: float) -> str:
    magnitude = abs(r)
    if magnitude >= STRONG_THRESHOLD:
        strength = "Strong"
    elif magnitude >= MODERATE_THRESHOLD:
        strength = "Moderate"
    else:
        strength = "Weak"
    direction = "positive" if r > 0 else "negative"
    return f"{strength} {direction} correlation"


# ── Fitting ──────────────────────────────────────────────────────────────

def fit_line(xs: Sequence[float], ys: Sequence[float]) -> RegressionResult:
    """Least-squares fit of *ys* on *xs*.

    Parameters
    ----------
    xs, ys : sequence of float
        Paired, already-parsed samples of equal length.

    Returns
    -------
    RegressionResult

    Raises
    ------
    InsufficientDataError
        Fewer than 2 pairs.
    DegenerateFitError
        No variance in x, or no variance in y.
    """
    if len(xs) != len(ys):
        raise ValueError(f"x and y lengths differ ({len(xs)} vs {len(ys)})")
    n = len(xs)
    if n < 2:
        raise InsufficientDataError(
            f"Not enough valid numeric data points for regression analysis "
            f"(found {n}, need at least 2)."
        )

    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)

    # Exact range checks: a tiny rounding residue in sum((x - mean)^2)
    # must not pass as variance.
    if np.ptp(x) == 0:
        raise DegenerateFitError(
            "All x values are identical, so the slope is undefined."
        )
    if np.ptp(y) == 0:
        raise DegenerateFitError(
            "All y values are identical, so R² and correlation are undefined."
        )

    mean_x = float(np.mean(x))
    mean_y = float(np.mean(y))
    dx = x - mean_x
    dy = y - mean_y
    s_xy = float(np.sum(dx * dy))
    s_xx = float(np.sum(dx * dx))
    s_yy = float(np.sum(dy * dy))

    slope = s_xy / s_xx
    intercept = mean_y - slope * mean_x
    predicted = slope * x + intercept
    ss_res = float(np.sum((y - predicted) ** 2))

    r_squared = 1.0 - ss_res / s_yy
    correlation = float(np.clip(s_xy / np.sqrt(s_xx * s_yy), -1.0, 1.0))
    standard_error = float(np.sqrt(ss_res / (n - 2))) if n > 2 else None

    return RegressionResult(
        slope=slope,
        intercept=intercept,
        r_squared=r_squared,
        correlation=correlation,
        standard_error=standard_error,
        equation=format_equation(slope, intercept),
        predicted_values=[float(v) for v in predicted],
        fit_points=fit_line_points(slope, intercept, float(np.min(x)), float(np.max(x))),
        n=n,
        x_values=[float(v) for v in x],
        y_values=[float(v) for v in y],
    )


def fit_regression(
    dataset: Dataset,
    x_column: str,
    y_column: str,
    range_filter: Optional[RangeFilter] = None,
) -> RegressionResult:
    """Fit *y_column* on *x_column*, optionally inside *range_filter*."""
    xs, ys = extract_pairs(dataset, x_column, y_column)
    xs, ys = apply_range(xs, ys, range_filter)
    return fit_line(xs, ys)
