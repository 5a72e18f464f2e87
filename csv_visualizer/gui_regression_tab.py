"""
Regression tab for the CSV Data Visualizer.

Choose X and Y columns, fit a least-squares line, and narrow the fit to
an x/y range.  The range spin boxes default to the observed extremes
(rounded for display; a bound left at its default applies the exact
extreme) and their limits follow the data.  "Reset Range" puts them
back.
"""

from PySide6.QtWidgets import (
    QComboBox, QDoubleSpinBox, QFormLayout, QGroupBox, QHBoxLayout, QLabel,
    QPushButton, QVBoxLayout, QWidget,
)

from .chart_regression import regression_summary, render_regression
from .data_model import RangeFilter
from .gui_chart_tabs import ChartCanvasPanel
from .regression import (
    editor_limits, extract_pairs, observed_range, open_unchanged_bounds,
)
from .statistics_engine import StatisticsEngine
from .theme import use_dark_plots


class RegressionTab(QWidget):
    """Scatter plot with fitted line and range controls."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self._dataset = None
        self._shown = RangeFilter()
        self._setup_ui()

    # ── UI setup ─────────────────────────────────────────────────────

    def _setup_ui(self):
        layout = QHBoxLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)

        side = QVBoxLayout()
        grp_cols = QGroupBox("Columns")
        form = QFormLayout(grp_cols)
        self._cmb_x = QComboBox()
        self._cmb_y = QComboBox()
        form.addRow("X:", self._cmb_x)
        form.addRow("Y:", self._cmb_y)
        btn_fit = QPushButton("Fit Regression")
        btn_fit.clicked.connect(lambda *_: self._on_columns_changed())
        form.addRow(btn_fit)
        side.addWidget(grp_cols)

        grp_range = QGroupBox("Range")
        range_form = QFormLayout(grp_range)
        self._spins = {}
        for key, label in (('x_min', "X min:"), ('x_max', "X max:"),
                           ('y_min', "Y min:"), ('y_max', "Y max:")):
            spin = QDoubleSpinBox()
            spin.setDecimals(4)
            spin.editingFinished.connect(lambda *_: self._refit())
            range_form.addRow(label, spin)
            self._spins[key] = spin
        btn_reset = QPushButton("Reset Range")
        btn_reset.clicked.connect(lambda *_: self._reset_range())
        range_form.addRow(btn_reset)
        side.addWidget(grp_range)

        self._lbl_result = QLabel("")
        self._lbl_result.setObjectName("resultLabel")
        self._lbl_result.setWordWrap(True)
        side.addWidget(self._lbl_result)
        side.addStretch()

        side_widget = QWidget()
        side_widget.setLayout(side)
        side_widget.setMaximumWidth(320)
        layout.addWidget(side_widget)

        self._panel = ChartCanvasPanel(figsize=(7, 5))
        layout.addWidget(self._panel, 1)

    # ── Public API ───────────────────────────────────────────────────

    @property
    def canvas_panel(self) -> ChartCanvasPanel:
        return self._panel

    def set_dataset(self, dataset) -> None:
        self._dataset = dataset
        names = dataset.numeric_columns if dataset is not None else []
        for combo, default in ((self._cmb_x, 0), (self._cmb_y, 1)):
            current = combo.currentText()
            combo.blockSignals(True)
            combo.clear()
            combo.addItems(names)
            idx = combo.findText(current)
            if idx < 0:
                idx = min(default, len(names) - 1)
            combo.setCurrentIndex(idx)
            combo.blockSignals(False)
        self._on_columns_changed()

    # ── Slots ────────────────────────────────────────────────────────

    def _on_columns_changed(self):
        self._reset_range()

    def _set_range(self, rng: RangeFilter):
        """Show *rng* as the editable defaults; spin limits follow the data."""
        shown = {}
        for axis in ("x", "y"):
            low = getattr(rng, f"{axis}_min")
            high = getattr(rng, f"{axis}_max")
            limits = editor_limits(low, high) if low is not None else (-1.0, 1.0)
            for key, value in ((f"{axis}_min", low), (f"{axis}_max", high)):
                spin = self._spins[key]
                spin.blockSignals(True)
                spin.setRange(*limits)
                spin.setValue(value if value is not None else 0.0)
                spin.blockSignals(False)
                shown[key] = spin.value()
        self._shown = RangeFilter(**shown)

    def _current_range(self) -> RangeFilter:
        requested = RangeFilter(**{key: spin.value() for key, spin in self._spins.items()})
        return open_unchanged_bounds(requested, self._shown)

    def _reset_range(self):
        if self._dataset is None or not self._cmb_x.currentText():
            self._set_range(RangeFilter())
            self._draw(None, "Load a CSV file with at least two numeric columns")
            return
        try:
            xs, ys = extract_pairs(
                self._dataset, self._cmb_x.currentText(), self._cmb_y.currentText()
            )
        except ValueError as exc:
            self._draw(None, str(exc))
            return
        self._set_range(observed_range(xs, ys))
        self._refit(use_range=False)

    def _refit(self, use_range: bool = True):
        if self._dataset is None:
            return
        x_col = self._cmb_x.currentText()
        y_col = self._cmb_y.currentText()
        engine = StatisticsEngine(self._dataset)
        try:
            result = engine.fit_regression(
                x_col, y_col, self._current_range() if use_range else None
            )
        except ValueError as exc:
            self._draw(None, str(exc))
            return
        self._draw(result, "")

    def _draw(self, result, message: str):
        use_dark_plots()
        render_regression(
            self._panel.fig, result,
            self._cmb_x.currentText(), self._cmb_y.currentText(),
            message=message,
        )
        self._panel.refresh()
        self._lbl_result.setText(regression_summary(result) if result else message)
