"""
Chart widgets for the CSV Data Visualizer.

``ChartCanvasPanel`` hosts a matplotlib FigureCanvas with a navigation
toolbar and copy/export buttons; the main chart tab and the regression
tab both build on it.  ``ChartTab`` adds the chart-window controls
(newer/older navigation, visible-points slider, "Last N" presets).
"""

import os

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QFileDialog, QHBoxLayout, QLabel, QMessageBox, QPushButton, QSlider,
    QVBoxLayout, QWidget,
)

import matplotlib
matplotlib.use('QtAgg')
from matplotlib.backends.backend_qtagg import (
    FigureCanvasQTAgg as FigureCanvas,
    NavigationToolbar2QT as NavigationToolbar,
)
from matplotlib.figure import Figure

from .app_state import AppState, can_navigate, chart_window
from .chart_renderer import render_chart
from .constants import (
    DARK_COLORS, DEFAULT_EXPORT_STEM, MIN_VISIBLE_POINTS, VISIBLE_POINT_PRESETS,
)
from .export import copy_to_clipboard, export_chart, format_from_path
from .theme import use_dark_plots

_EXPORT_FILTERS = {
    "PNG Image (*.png)": "png",
    "JPEG Image (*.jpg *.jpeg)": "jpeg",
    "PDF Document (*.pdf)": "pdf",
}
_EXTENSIONS = {"png": ".png", "jpeg": ".jpg", "pdf": ".pdf"}


def _status(widget: QWidget, message: str, timeout: int = 3000) -> None:
    window = widget.window()
    if hasattr(window, 'statusBar'):
        window.statusBar().showMessage(message, timeout)


class ChartCanvasPanel(QWidget):
    """Figure canvas with toolbar, copy and export buttons."""

    def __init__(self, figsize=(7, 4.5), parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(4)

        toolbar_row = QHBoxLayout()
        toolbar_row.setSpacing(4)

        self._fig = Figure(figsize=figsize)
        self._fig.set_facecolor(DARK_COLORS['bg_alt'])
        self._canvas = FigureCanvas(self._fig)
        self._toolbar = NavigationToolbar(self._canvas, self)

        toolbar_row.addWidget(self._toolbar)
        toolbar_row.addStretch()

        self._btn_copy = QPushButton("Copy to Clipboard")
        self._btn_copy.clicked.connect(lambda *_: self.copy())
        toolbar_row.addWidget(self._btn_copy)

        self._btn_export = QPushButton("Export...")
        self._btn_export.setToolTip("Save the chart as PNG, JPEG or PDF")
        self._btn_export.clicked.connect(lambda *_: self.export_dialog())
        toolbar_row.addWidget(self._btn_export)

        layout.addLayout(toolbar_row)
        layout.addWidget(self._canvas, 1)

    @property
    def fig(self) -> Figure:
        return self._fig

    def refresh(self):
        """Redraw the canvas after figure changes."""
        self._canvas.draw_idle()

    def copy(self):
        if copy_to_clipboard(self._fig):
            _status(self, "Chart copied to clipboard")
        else:
            QMessageBox.warning(self, "Copy Failed",
                                "Could not copy chart to clipboard.")

    def export_dialog(self, fmt: str = ""):
        """Ask for a path and export; *fmt* preselects the file type."""
        filters = list(_EXPORT_FILTERS)
        selected = next(
            (f for f, v in _EXPORT_FILTERS.items() if v == fmt), filters[0]
        )
        path, chosen = QFileDialog.getSaveFileName(
            self, "Export Chart",
            DEFAULT_EXPORT_STEM + _EXTENSIONS.get(fmt, ".png"),
            ";;".join(filters), selected,
        )
        if not path:
            return
        try:
            fmt = format_from_path(path)
        except ValueError:
            fmt = _EXPORT_FILTERS.get(chosen, "png")
            path += _EXTENSIONS[fmt]
        try:
            export_chart(self._fig, path, fmt)
        except (ValueError, OSError) as exc:
            QMessageBox.critical(self, "Export Error", f"Failed to export: {exc}")
            return
        _status(self, f"Exported to {os.path.basename(path)}")


class ChartTab(QWidget):
    """Main chart with window navigation controls.

    The tab never changes state itself; it emits requests that the main
    window turns into ``AppState`` updates.
    """

    navigate_requested = Signal(str)          # "newer" / "older"
    visible_points_requested = Signal(int)
    preset_requested = Signal(int)            # N, or -1 for All

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._panel = ChartCanvasPanel(figsize=(8, 5))
        layout.addWidget(self._panel, 1)

        nav_row = QHBoxLayout()
        self._btn_newer = QPushButton("◀ Newer")
        self._btn_newer.clicked.connect(
            lambda *_: self.navigate_requested.emit("newer")
        )
        nav_row.addWidget(self._btn_newer)

        self._slider = QSlider(Qt.Orientation.Horizontal)
        self._slider.setMinimum(MIN_VISIBLE_POINTS)
        self._slider.setMaximum(MIN_VISIBLE_POINTS)
        # Only emit on release so dragging does not redraw per tick
        self._slider.sliderReleased.connect(
            lambda: self.visible_points_requested.emit(self._slider.value())
        )
        nav_row.addWidget(self._slider, 1)

        self._lbl_window = QLabel("")
        self._lbl_window.setStyleSheet(f"color: {DARK_COLORS['fg_dim']};")
        nav_row.addWidget(self._lbl_window)

        self._btn_older = QPushButton("Older ▶")
        self._btn_older.clicked.connect(
            lambda *_: self.navigate_requested.emit("older")
        )
        nav_row.addWidget(self._btn_older)
        layout.addLayout(nav_row)

        preset_row = QHBoxLayout()
        for n in VISIBLE_POINT_PRESETS:
            btn = QPushButton(f"Last {n}")
            btn.clicked.connect(lambda checked=False, n=n: self.preset_requested.emit(n))
            preset_row.addWidget(btn)
        btn_all = QPushButton("All")
        btn_all.clicked.connect(lambda *_: self.preset_requested.emit(-1))
        preset_row.addWidget(btn_all)
        layout.addLayout(preset_row)

        use_dark_plots()

    @property
    def canvas_panel(self) -> ChartCanvasPanel:
        return self._panel

    def update_chart(self, state: AppState) -> None:
        """Re-render from *state*."""
        use_dark_plots()
        render_chart(self._panel.fig, state.dataset, state.chart_config)
        self._panel.refresh()

        n = state.row_count
        self._slider.blockSignals(True)
        self._slider.setMaximum(max(MIN_VISIBLE_POINTS, n))
        self._slider.setValue(state.chart_config.visible_points)
        self._slider.blockSignals(False)

        if n:
            start, stop = chart_window(state.chart_config, n)
            self._lbl_window.setText(f"Rows {start + 1}–{stop} of {n}")
        else:
            self._lbl_window.setText("")
        self._btn_newer.setEnabled(bool(n) and can_navigate(state, "newer"))
        self._btn_older.setEnabled(bool(n) and can_navigate(state, "older"))
