"""
Main chart rendering for the CSV Data Visualizer.

Draws the configured chart (line, bar, area, scatter, pie, histogram)
for the current chart window of the dataset.  The x axis is treated as
a category axis: rows are plotted in order at positions 0..n-1 and the
x values become tick labels.  Scatter plots use the real x values when
the x column is numeric.
"""

from typing import List, Tuple

import numpy as np
from matplotlib.figure import Figure

from .app_state import chart_window
from .constants import (
    CHART_PALETTE, CHART_TYPE_LABELS, DARK_COLORS, EXPORT_BG_COLOR,
    EXPORT_TEXT_COLOR, MAX_PIE_SLICES,
)
from .data_model import ChartConfig, Dataset
from .value_parsing import format_cell, numeric_values, parse_numeric

# Tick labels beyond this count are thinned out
_MAX_TICK_LABELS = 20


def chart_series(dataset: Dataset, config: ChartConfig) -> Tuple[List[str], np.ndarray]:
    """x labels and y values (``NaN`` where not numeric) for the window."""
    start, stop = chart_window(config, dataset.row_count)
    rows = dataset.rows[start:stop]
    labels = [format_cell(r.get(config.x_axis)) for r in rows]
    ys = np.array(
        [
            v if v is not None else np.nan
            for v in (parse_numeric(r.get(config.y_axis)) for r in rows)
        ],
        dtype=float,
    )
    return labels, ys


def pie_slices(labels: List[str], ys: np.ndarray, max_slices: int = MAX_PIE_SLICES) -> Tuple[List[str], List[float]]:
    """Positive values only; everything past *max_slices* − 1 becomes "Other"."""
    pairs = [(lab, float(y)) for lab, y in zip(labels, ys) if np.isfinite(y) and y > 0]
    if len(pairs) <= max_slices:
        return [p[0] for p in pairs], [p[1] for p in pairs]
    head = pairs[:max_slices - 1]
    rest = sum(p[1] for p in pairs[max_slices - 1:])
    return [p[0] for p in head] + ["Other"], [p[1] for p in head] + [rest]


def _no_data(ax, message: str) -> None:
    ax.text(0.5, 0.5, message,
            transform=ax.transAxes, ha='center', va='center')
    ax.set_xticks([])
    ax.set_yticks([])


def _set_category_ticks(ax, labels: List[str]) -> None:
    n = len(labels)
    step = max(1, int(np.ceil(n / _MAX_TICK_LABELS)))
    positions = list(range(0, n, step))
    ax.set_xticks(positions)
    ax.set_xticklabels([labels[i] for i in positions], rotation=45, ha='right')


def render_chart(
    fig: Figure,
    dataset: Dataset,
    config: ChartConfig,
    *,
    for_export: bool = False,
) -> None:
    """Render the chart described by *config* on *fig*.

    Parameters
    ----------
    fig : matplotlib.figure.Figure
        Figure to draw on (will be cleared).
    dataset : Dataset
        Current working dataset.
    config : ChartConfig
        Chart type, axes, title, colour, grid and window.
    for_export : bool
        If ``True``, use light-theme colours for annotations.
    """
    fig.clf()
    ax = fig.add_subplot(111)

    if dataset is None or dataset.is_empty() or not config.y_axis:
        _no_data(ax, 'Load a CSV file to see a chart')
        return

    labels, ys = chart_series(dataset, config)
    if not np.any(np.isfinite(ys)):
        _no_data(ax, f"No numeric values in '{config.y_axis}'")
        return

    color = config.color or CHART_PALETTE['default']
    positions = np.arange(len(labels))
    kind = config.chart_type

    if kind == "line":
        ax.plot(positions, ys, color=color, linewidth=1.8,
                marker='o', markersize=3, zorder=3, label=config.y_axis)
        _set_category_ticks(ax, labels)
    elif kind == "bar":
        ax.bar(positions, np.nan_to_num(ys), color=color, alpha=0.9,
               zorder=3, label=config.y_axis)
        _set_category_ticks(ax, labels)
    elif kind == "area":
        ax.plot(positions, ys, color=color, linewidth=1.5, zorder=3,
                label=config.y_axis)
        ax.fill_between(positions, ys, color=color, alpha=0.3, zorder=2)
        _set_category_ticks(ax, labels)
    elif kind == "scatter":
        start, stop = chart_window(config, dataset.row_count)
        xs = np.array(
            [
                v if v is not None else np.nan
                for v in (parse_numeric(r.get(config.x_axis))
                          for r in dataset.rows[start:stop])
            ],
            dtype=float,
        )
        numeric_x = dataset.has_column(config.x_axis) and \
            dataset.schema_for(config.x_axis).is_numeric
        if numeric_x:
            ax.scatter(xs, ys, c=color, s=25, alpha=0.8, zorder=3,
                       label=config.y_axis)
        else:
            ax.scatter(positions, ys, c=color, s=25, alpha=0.8, zorder=3,
                       label=config.y_axis)
            _set_category_ticks(ax, labels)
    elif kind == "pie":
        slice_labels, sizes = pie_slices(labels, ys)
        if not sizes:
            _no_data(ax, f"No positive values in '{config.y_axis}' to chart")
            return
        cycle = CHART_PALETTE['cycle']
        text_color = EXPORT_TEXT_COLOR if for_export else DARK_COLORS['fg']
        ax.pie(
            sizes, labels=slice_labels,
            colors=[cycle[i % len(cycle)] for i in range(len(sizes))],
            autopct='%1.1f%%', startangle=90,
            textprops={'fontsize': 7, 'color': text_color},
            wedgeprops={'edgecolor': 'white', 'linewidth': 0.5},
        )
        ax.set_aspect('equal')
    elif kind == "histogram":
        values = np.asarray(numeric_values(
            [r.get(config.y_axis) for r in dataset.rows]
        ))
        # Sturges' rule, capped at 50
        n_bins = min(50, max(5, int(np.ceil(np.log2(values.size) + 1))))
        ax.hist(values, bins=n_bins, color=color, edgecolor='white',
                linewidth=0.5, alpha=0.85, zorder=3)
        ax.set_ylabel("Count", fontsize=8)
    else:
        raise ValueError(f"Unknown chart type: {kind!r}")

    # ── Labels ───────────────────────────────────────────────────────
    if kind != "pie":
        if kind == "histogram":
            ax.set_xlabel(config.y_axis, fontsize=8)
        else:
            ax.set_xlabel(config.x_axis, fontsize=8)
            ax.set_ylabel(config.y_axis, fontsize=8)
        if config.show_grid:
            ax.grid(linewidth=0.4, alpha=0.5, linestyle='--')
        else:
            ax.grid(False)

    title = config.title or f"{CHART_TYPE_LABELS.get(kind, kind)}: {config.y_axis}"
    ax.set_title(title, fontsize=10, fontweight='bold')

    if for_export:
        fig.set_facecolor(EXPORT_BG_COLOR)

    fig.tight_layout(pad=1.5)
