"""
Regression scatter plot for the CSV Data Visualizer.

Fitted samples as points, the least-squares line through them, and a
read-out box with the equation, R² and correlation.
"""

from typing import Optional

from matplotlib.figure import Figure

from .constants import (
    CHART_PALETTE, DARK_COLORS, EXPORT_BG_COLOR, EXPORT_TEXT_COLOR,
)
from .data_model import RegressionResult
from .regression import correlation_label, r_squared_label


def regression_summary(result: RegressionResult) -> str:
    """Multi-line read-out shown on the chart and in the side panel."""
    se = "n/a" if result.standard_error is None else f"{result.standard_error:.4f}"
    return (
        f"{result.equation}\n"
        f"R² = {result.r_squared * 100:.2f}% ({r_squared_label(result.r_squared)})\n"
        f"r = {result.correlation:.4f} ({correlation_label(result.correlation)})\n"
        f"Std. error = {se}\n"
        f"n = {result.n}"
    )


def render_regression(
    fig: Figure,
    result: Optional[RegressionResult],
    x_label: str,
    y_label: str,
    *,
    message: str = "",
    for_export: bool = False,
) -> None:
    """Render data points and the fitted line on *fig*.

    Parameters
    ----------
    fig : matplotlib.figure.Figure
        Figure to draw on (will be cleared).
    result : RegressionResult or None
        Fit to draw; ``None`` shows *message* instead.
    x_label, y_label : str
        Column names for the axes.
    message : str
        Text shown when there is no fit (e.g. a degenerate-data error).
    for_export : bool
        If ``True``, use light-theme colours.
    """
    fig.clf()
    pal = CHART_PALETTE
    ax = fig.add_subplot(111)

    if result is None:
        ax.text(0.5, 0.5, message or 'Select X and Y columns to fit',
                transform=ax.transAxes, ha='center', va='center', wrap=True)
        ax.set_xticks([])
        ax.set_yticks([])
        return

    ax.scatter(
        result.x_values, result.y_values,
        c=pal['data_points'], s=22, alpha=0.75, zorder=3,
        label='Data points',
    )
    fit_x = [p[0] for p in result.fit_points]
    fit_y = [p[1] for p in result.fit_points]
    ax.plot(
        fit_x, fit_y, color=pal['fit_line'], linewidth=2.0, zorder=4,
        label='Regression line',
    )

    text_color = EXPORT_TEXT_COLOR if for_export else DARK_COLORS['fg']
    box_color = EXPORT_BG_COLOR if for_export else DARK_COLORS['bg_widget']
    ax.text(
        0.02, 0.97, regression_summary(result),
        transform=ax.transAxes, ha='left', va='top',
        fontsize=6.5, family='monospace',
        color=text_color,
        bbox=dict(
            boxstyle='round,pad=0.4',
            facecolor=box_color,
            edgecolor='#999999',
            alpha=0.9,
        ),
    )

    ax.set_xlabel(x_label, fontsize=8)
    ax.set_ylabel(y_label, fontsize=8)
    ax.set_title(f"Linear Regression: {y_label} vs {x_label}",
                 fontsize=10, fontweight='bold')
    ax.legend(loc='lower right', fontsize=6, framealpha=0.9)
    ax.grid(linewidth=0.4, alpha=0.5)

    fig.tight_layout(pad=1.5)
