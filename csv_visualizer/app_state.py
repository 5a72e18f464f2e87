"""
Application state for the CSV Data Visualizer.

One ``AppState`` value holds everything the window shows: the working
dataset, the untransformed original it can be reset to, the chart
configuration, and the view flags.  Widgets never keep their own copy
of the data; they read the current state and call one of the update
functions below, each of which returns a *new* ``AppState``.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from .cleaning import CleaningOutcome
from .constants import (
    CHART_TYPES, DEFAULT_VISIBLE_POINTS, MIN_VISIBLE_POINTS,
)
from .data_model import ChartConfig, Dataset
from .errors import ColumnSelectionError


@dataclass(frozen=True)
class AppState:
    """Single source of truth for the GUI.

    Parameters
    ----------
    dataset : Dataset or None
        The working table (cleaned and/or transformed).
    original_dataset : Dataset or None
        Baseline the transform reset returns to.  Set on load and
        whenever a cleaning operation is committed.
    chart_config : ChartConfig
    is_transformed : bool
        ``True`` while ``dataset`` carries a transformed column.
    transformed_column, transform_kind : str
        Last transform applied ('' when none).
    status : str
        Short message for the status label.
    """
    dataset: Optional[Dataset] = None
    original_dataset: Optional[Dataset] = None
    chart_config: ChartConfig = field(default_factory=ChartConfig)
    is_transformed: bool = False
    transformed_column: str = ""
    transform_kind: str = ""
    status: str = ""

    @property
    def has_data(self) -> bool:
        return self.dataset is not None and not self.dataset.is_empty()

    @property
    def row_count(self) -> int:
        return self.dataset.row_count if self.dataset is not None else 0


# ── Dataset updates ──────────────────────────────────────────────────────

def load_dataset(state: AppState, dataset: Dataset) -> AppState:
    """Install a freshly parsed dataset.

    The x axis defaults to the first column and the y axis to the second
    (or the first again for single-column files).  The chart window is
    reset to the start of the data.
    """
    names = dataset.column_names
    x_axis = names[0] if names else ""
    y_axis = names[1] if len(names) > 1 else x_axis
    config = replace(
        state.chart_config,
        x_axis=x_axis,
        y_axis=y_axis,
        visible_points=_initial_visible_points(dataset.row_count),
        start_index=0,
    )
    return AppState(
        dataset=dataset,
        original_dataset=dataset,
        chart_config=config,
        status=f"Loaded {dataset.row_count} rows × {len(names)} columns",
    )


def apply_cleaning(state: AppState, outcome: CleaningOutcome) -> AppState:
    """Commit a cleaning result; it becomes the new reset baseline."""
    return replace(
        state,
        dataset=outcome.dataset,
        original_dataset=outcome.dataset,
        is_transformed=False,
        transformed_column="",
        transform_kind="",
        chart_config=_clamp_window(state.chart_config, outcome.dataset.row_count),
        status=outcome.message,
    )


def apply_transform(
    state: AppState,
    dataset: Dataset,
    column: str,
    kind: str,
    source: Optional[Dataset] = None,
) -> AppState:
    """Install a transformed dataset, keeping the original for reset.

    When *source* is given and is no longer the current dataset, the
    data was replaced while the transform ran; the result is discarded
    and only the status changes.
    """
    if source is not None and source is not state.dataset:
        return replace(
            state,
            status="Transform discarded: the data changed while it was running",
        )
    return replace(
        state,
        dataset=dataset,
        is_transformed=True,
        transformed_column=column,
        transform_kind=kind,
        status=f"Applied {kind} transform to '{column}'",
    )


def reset_transform(state: AppState) -> AppState:
    """Restore the untransformed original dataset."""
    if state.original_dataset is None:
        return state
    return replace(
        state,
        dataset=state.original_dataset,
        is_transformed=False,
        transformed_column="",
        transform_kind="",
        status="Transformation reset to original data",
    )


def clear_data(state: AppState) -> AppState:
    """Drop all data, keeping only the chart styling."""
    config = replace(
        state.chart_config, x_axis="", y_axis="",
        visible_points=DEFAULT_VISIBLE_POINTS, start_index=0,
    )
    return AppState(chart_config=config, status="Data cleared")


# ── Chart configuration ──────────────────────────────────────────────────

def update_chart_config(state: AppState, **changes) -> AppState:
    """Change chart settings (type, axes, title, colour, grid, window).

    Raises
    ------
    ValueError
        Unknown chart type.
    ColumnSelectionError
        An axis that is not a column of the current dataset.
    """
    chart_type = changes.get('chart_type')
    if chart_type is not None and chart_type not in CHART_TYPES:
        raise ValueError(f"Unknown chart type: {chart_type!r}")
    if state.dataset is not None:
        for key in ('x_axis', 'y_axis'):
            name = changes.get(key)
            if name:
                state.dataset.require_columns(name)
    elif changes.get('x_axis') or changes.get('y_axis'):
        raise ColumnSelectionError("Load a CSV file before choosing axes.")
    config = replace(state.chart_config, **changes)
    return replace(state, chart_config=_clamp_window(config, state.row_count))


# ── Chart window ─────────────────────────────────────────────────────────

def _initial_visible_points(row_count: int) -> int:
    return max(1, min(DEFAULT_VISIBLE_POINTS, row_count)) if row_count else DEFAULT_VISIBLE_POINTS


def _clamp_window(config: ChartConfig, row_count: int) -> ChartConfig:
    if row_count <= 0:
        return replace(config, start_index=0)
    visible = max(1, min(config.visible_points, row_count))
    start = min(max(0, config.start_index), row_count - visible)
    return replace(config, visible_points=visible, start_index=start)


def chart_window(config: ChartConfig, row_count: int) -> Tuple[int, int]:
    """``(start, stop)`` row slice the chart draws."""
    clamped = _clamp_window(config, row_count)
    return clamped.start_index, min(row_count, clamped.start_index + clamped.visible_points)


def set_visible_points(state: AppState, points: int) -> AppState:
    """Slider change: at least ``MIN_VISIBLE_POINTS``, at most every row."""
    n = state.row_count
    visible = max(MIN_VISIBLE_POINTS, min(n, points)) if n else points
    config = replace(state.chart_config, visible_points=visible)
    return replace(state, chart_config=_clamp_window(config, n))


def apply_window_preset(state: AppState, preset: int) -> AppState:
    """"Last N" buttons (``preset=-1`` for All); the window restarts at 0."""
    n = state.row_count
    visible = n if preset < 0 else min(preset, n)
    config = replace(state.chart_config, visible_points=max(1, visible), start_index=0)
    return replace(state, chart_config=_clamp_window(config, n))


def navigate_window(state: AppState, direction: str) -> AppState:
    """Shift the window by half its width.

    ``"newer"`` moves toward row 0, ``"older"`` toward the end.
    """
    if direction not in ("newer", "older"):
        raise ValueError(f"direction must be 'newer' or 'older', got {direction!r}")
    config = state.chart_config
    step = max(1, config.visible_points // 2)
    delta = -step if direction == "newer" else step
    moved = replace(config, start_index=config.start_index + delta)
    return replace(state, chart_config=_clamp_window(moved, state.row_count))


def can_navigate(state: AppState, direction: str) -> bool:
    start, stop = chart_window(state.chart_config, state.row_count)
    if direction == "newer":
        return start > 0
    return stop < state.row_count
