"""
Export utilities for the CSV Data Visualizer.

Handles PNG/JPEG export and single-page PDF export with automatic
light-theme switching (dark GUI theme → white-background export), plus
clipboard copy.  Uses try/finally to guarantee theme restoration.

The PDF is an A4 page with the rendered chart image scaled to fit
inside the margins, aspect ratio preserved, centred on the page.
"""

import io
import os
from typing import Tuple

import matplotlib.image as mpimg
from matplotlib.figure import Figure

from .constants import (
    CLIPBOARD_DPI, DARK_COLORS, DEFAULT_EXPORT_STEM, EXPORT_DPI,
    EXPORT_FORMATS, PDF_MARGIN_INCHES, PDF_PAGE_SIZE_INCHES, PLOT_STYLE_LIGHT,
)


def _save_figure_state(fig: Figure) -> dict:
    """Save current figure/axes colours for later restoration."""
    state = {
        'fig_facecolor': fig.get_facecolor(),
        'axes_states': [],
    }
    for ax in fig.get_axes():
        ax_state = {
            'facecolor': ax.get_facecolor(),
            'title_color': ax.title.get_color(),
            'xlabel_color': ax.xaxis.label.get_color(),
            'ylabel_color': ax.yaxis.label.get_color(),
            'spine_colors': {
                spine: ax.spines[spine].get_edgecolor()
                for spine in ax.spines
            },
            'tick_label_colors_x': [t.get_color() for t in ax.get_xticklabels()],
            'tick_label_colors_y': [t.get_color() for t in ax.get_yticklabels()],
            'xtick_mark_color': None,
            'ytick_mark_color': None,
            'grid_colors': [
                line.get_color()
                for line in ax.get_xgridlines() + ax.get_ygridlines()
            ],
            'text_colors': [t.get_color() for t in ax.texts],
        }
        xticks = ax.xaxis.get_major_ticks()
        if xticks:
            ax_state['xtick_mark_color'] = xticks[0].tick1line.get_color()
        yticks = ax.yaxis.get_major_ticks()
        if yticks:
            ax_state['ytick_mark_color'] = yticks[0].tick1line.get_color()

        legend = ax.get_legend()
        if legend is not None:
            frame = legend.get_frame()
            ax_state['legend_facecolor'] = frame.get_facecolor()
            ax_state['legend_edgecolor'] = frame.get_edgecolor()
            ax_state['legend_text_colors'] = [
                t.get_color() for t in legend.get_texts()
            ]
        state['axes_states'].append(ax_state)
    return state


def _apply_light_theme(fig: Figure) -> None:
    """Apply light (white background) theme to figure for export."""
    light = PLOT_STYLE_LIGHT
    fig.set_facecolor(light['figure.facecolor'])

    _dark_fg_set = frozenset((
        DARK_COLORS['fg'], DARK_COLORS['fg_dim'], DARK_COLORS['fg_bright'],
    ))

    for ax in fig.get_axes():
        ax.set_facecolor(light['axes.facecolor'])
        ax.title.set_color(light['text.color'])
        ax.xaxis.label.set_color(light['axes.labelcolor'])
        ax.yaxis.label.set_color(light['axes.labelcolor'])

        for spine in ax.spines.values():
            spine.set_edgecolor(light['axes.edgecolor'])

        ax.tick_params(axis='x', colors=light['xtick.color'],
                       labelcolor=light['xtick.color'])
        ax.tick_params(axis='y', colors=light['ytick.color'],
                       labelcolor=light['ytick.color'])

        legend = ax.get_legend()
        if legend is not None:
            frame = legend.get_frame()
            frame.set_facecolor(light['legend.facecolor'])
            frame.set_edgecolor(light['legend.edgecolor'])
            for text in legend.get_texts():
                text.set_color(light['text.color'])

        for line in ax.get_xgridlines() + ax.get_ygridlines():
            line.set_color(light['grid.color'])

        # Only dark-theme foreground text is converted; slice labels and
        # annotation boxes keep their own colours.
        for text in ax.texts:
            if text.get_color() in _dark_fg_set:
                text.set_color(light['text.color'])


def _restore_figure_state(fig: Figure, state: dict) -> None:
    """Restore saved figure/axes colours after export."""
    fig.set_facecolor(state['fig_facecolor'])

    for ax, ax_state in zip(fig.get_axes(), state['axes_states']):
        ax.set_facecolor(ax_state['facecolor'])
        ax.title.set_color(ax_state['title_color'])
        ax.xaxis.label.set_color(ax_state['xlabel_color'])
        ax.yaxis.label.set_color(ax_state['ylabel_color'])

        for spine_name, color in ax_state['spine_colors'].items():
            ax.spines[spine_name].set_edgecolor(color)

        # tick_params sets mark and label colours together, so labels
        # are re-set afterwards
        if ax_state['xtick_mark_color'] is not None:
            ax.tick_params(axis='x', colors=ax_state['xtick_mark_color'])
        if ax_state['ytick_mark_color'] is not None:
            ax.tick_params(axis='y', colors=ax_state['ytick_mark_color'])
        for label, color in zip(ax.get_xticklabels(), ax_state['tick_label_colors_x']):
            label.set_color(color)
        for label, color in zip(ax.get_yticklabels(), ax_state['tick_label_colors_y']):
            label.set_color(color)

        for line, color in zip(
            ax.get_xgridlines() + ax.get_ygridlines(), ax_state['grid_colors']
        ):
            line.set_color(color)
        for text, color in zip(ax.texts, ax_state['text_colors']):
            text.set_color(color)

        legend = ax.get_legend()
        if legend is not None and 'legend_facecolor' in ax_state:
            frame = legend.get_frame()
            frame.set_facecolor(ax_state['legend_facecolor'])
            frame.set_edgecolor(ax_state['legend_edgecolor'])
            for text, color in zip(legend.get_texts(), ax_state['legend_text_colors']):
                text.set_color(color)


def _render_light(fig: Figure, target, *, fmt: str, dpi: int, **kwargs) -> None:
    state = _save_figure_state(fig)
    try:
        _apply_light_theme(fig)
        fig.savefig(
            target,
            format=fmt,
            dpi=dpi,
            bbox_inches='tight',
            facecolor=fig.get_facecolor(),
            edgecolor='none',
            pad_inches=0.1,
            **kwargs,
        )
    finally:
        _restore_figure_state(fig, state)


# ── Raster export ────────────────────────────────────────────────────────

def export_image(fig: Figure, filepath: str, fmt: str = "png", *, dpi: int = EXPORT_DPI) -> None:
    """Export figure as PNG or JPEG with light theme.

    Parameters
    ----------
    fig : matplotlib.figure.Figure
    filepath : str
    fmt : str
        ``"png"`` or ``"jpeg"``.
    dpi : int
        Export resolution.
    """
    if fmt not in ("png", "jpeg"):
        raise ValueError(f"Unsupported image format: {fmt!r}")
    extra = {'pil_kwargs': {'quality': 95}} if fmt == "jpeg" else {}
    _render_light(fig, filepath, fmt=fmt, dpi=dpi, **extra)


# ── PDF export ───────────────────────────────────────────────────────────

def fit_image_on_page(
    image_width: float,
    image_height: float,
    page_width: float,
    page_height: float,
    margin: float = 0.0,
) -> Tuple[float, float, float, float]:
    """Largest aspect-preserving placement of an image inside a page.

    Returns
    -------
    (x, y, width, height)
        Lower-left corner and size, in page units, centred on the page.

    Raises
    ------
    ValueError
        Non-positive image size, or margins that leave no room.
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError("Image dimensions must be positive.")
    avail_w = page_width - 2 * margin
    avail_h = page_height - 2 * margin
    if avail_w <= 0 or avail_h <= 0:
        raise ValueError("Page margins leave no printable area.")
    scale = min(avail_w / image_width, avail_h / image_height)
    width = image_width * scale
    height = image_height * scale
    return (page_width - width) / 2, (page_height - height) / 2, width, height


def export_pdf(
    fig: Figure,
    filepath: str,
    *,
    dpi: int = EXPORT_DPI,
    page_size: Tuple[float, float] = PDF_PAGE_SIZE_INCHES,
    margin: float = PDF_MARGIN_INCHES,
) -> None:
    """Export figure as a single-page PDF holding the chart image."""
    buf = io.BytesIO()
    _render_light(fig, buf, fmt="png", dpi=dpi)
    buf.seek(0)
    image = mpimg.imread(buf, format='png')
    img_h, img_w = image.shape[:2]

    page_w, page_h = page_size
    x, y, w, h = fit_image_on_page(img_w, img_h, page_w, page_h, margin)

    page = Figure(figsize=page_size)
    ax = page.add_axes([x / page_w, y / page_h, w / page_w, h / page_h])
    ax.imshow(image, interpolation='lanczos')
    ax.set_axis_off()
    page.savefig(filepath, format='pdf', dpi=dpi, facecolor='white')


# ── Dispatch ─────────────────────────────────────────────────────────────

def default_export_path(directory: str, fmt: str, stem: str = DEFAULT_EXPORT_STEM) -> str:
    ext = "jpg" if fmt == "jpeg" else fmt
    return os.path.join(directory, f"{stem}.{ext}")


def format_from_path(filepath: str) -> str:
    """Export format from a file extension (``.jpg`` → ``"jpeg"``)."""
    ext = os.path.splitext(filepath)[1].lower().lstrip('.')
    if ext == "jpg":
        ext = "jpeg"
    if ext not in EXPORT_FORMATS:
        raise ValueError(
            f"Unsupported export format '.{ext}'; use PNG, JPEG or PDF."
        )
    return ext


def export_chart(fig: Figure, filepath: str, fmt: str = "") -> str:
    """Export *fig* to *filepath*; the format defaults to the extension.

    Returns the format written.
    """
    fmt = fmt or format_from_path(filepath)
    if fmt == "pdf":
        export_pdf(fig, filepath)
    else:
        export_image(fig, filepath, fmt)
    return fmt


def copy_to_clipboard(fig: Figure, dpi: int = CLIPBOARD_DPI) -> bool:
    """Copy figure to system clipboard as PNG image.

    Returns ``True`` on success, ``False`` if clipboard is unavailable.
    """
    from PySide6.QtGui import QImage
    from PySide6.QtWidgets import QApplication

    buf = io.BytesIO()
    _render_light(fig, buf, fmt="png", dpi=dpi)
    img = QImage()
    img.loadFromData(buf.getvalue())

    clipboard = QApplication.clipboard()
    if clipboard is None or img.isNull():
        return False
    clipboard.setImage(img)
    return True
