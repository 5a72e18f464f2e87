"""
Configuration panel (left side) for the CSV Data Visualizer.

File input, chart type, axes, title, colour, grid toggle, and the
export buttons.
"""

import os
import tempfile
import warnings

from PySide6.QtCore import Signal
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QCheckBox, QColorDialog, QComboBox, QFileDialog, QFormLayout, QGroupBox,
    QHBoxLayout, QLabel, QLineEdit, QMessageBox, QPushButton, QVBoxLayout,
    QWidget,
)

from .constants import (
    CHART_TYPE_LABELS, CHART_TYPES, DARK_COLORS, DEFAULT_CHART_COLOR,
    EXPORT_FORMATS,
)
from .csv_parser import load_csv
from .data_model import ChartConfig


class ConfigPanel(QWidget):
    """Left-side panel with file input and chart options."""

    # Signals
    config_changed = Signal()
    dataset_loaded = Signal(object)     # emits Dataset
    export_requested = Signal(str)      # "png" / "jpeg" / "pdf"
    copy_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._color = DEFAULT_CHART_COLOR
        self._setup_ui()
        self._connect_signals()

    # ── UI setup ─────────────────────────────────────────────────────

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)
        layout.setSpacing(8)

        # ── Group 1: Data File ───────────────────────────────────────
        grp_file = QGroupBox("Data File")
        file_layout = QVBoxLayout(grp_file)

        row = QHBoxLayout()
        self._edt_file = QLineEdit()
        self._edt_file.setReadOnly(True)
        self._edt_file.setPlaceholderText("Drop a CSV file here or browse")
        self._btn_browse = QPushButton("Browse...")
        row.addWidget(self._edt_file, 1)
        row.addWidget(self._btn_browse)
        file_layout.addLayout(row)

        self._btn_example = QPushButton("Load Example Data")
        file_layout.addWidget(self._btn_example)

        self._lbl_file_status = QLabel("")
        self._lbl_file_status.setWordWrap(True)
        file_layout.addWidget(self._lbl_file_status)

        layout.addWidget(grp_file)

        # ── Group 2: Chart ───────────────────────────────────────────
        grp_chart = QGroupBox("Chart")
        chart_layout = QFormLayout(grp_chart)
        chart_layout.setSpacing(4)

        self._cmb_type = QComboBox()
        for kind in CHART_TYPES:
            self._cmb_type.addItem(CHART_TYPE_LABELS[kind], kind)
        chart_layout.addRow("Type:", self._cmb_type)

        self._cmb_x = QComboBox()
        self._cmb_y = QComboBox()
        chart_layout.addRow("X axis:", self._cmb_x)
        chart_layout.addRow("Y axis:", self._cmb_y)

        self._edt_title = QLineEdit()
        self._edt_title.setPlaceholderText("Chart title")
        chart_layout.addRow("Title:", self._edt_title)

        self._btn_color = QPushButton()
        self._btn_color.setFixedWidth(60)
        self._paint_color_button()
        chart_layout.addRow("Colour:", self._btn_color)

        self._chk_grid = QCheckBox("Show grid")
        self._chk_grid.setChecked(True)
        chart_layout.addRow("", self._chk_grid)

        layout.addWidget(grp_chart)

        # ── Group 3: Export ──────────────────────────────────────────
        grp_export = QGroupBox("Export")
        export_layout = QVBoxLayout(grp_export)
        self._export_buttons = {}
        for fmt in EXPORT_FORMATS:
            btn = QPushButton(f"Export as {fmt.upper()}...")
            export_layout.addWidget(btn)
            self._export_buttons[fmt] = btn
        self._btn_copy = QPushButton("Copy Chart to Clipboard")
        export_layout.addWidget(self._btn_copy)
        layout.addWidget(grp_export)

        layout.addStretch()
        self.set_columns([], ChartConfig())

    # ── Signal connections ───────────────────────────────────────────

    def _connect_signals(self):
        self._btn_browse.clicked.connect(lambda *_: self._browse_file())
        self._btn_example.clicked.connect(lambda *_: self.load_example())
        self._btn_color.clicked.connect(lambda *_: self._pick_color())
        self._btn_copy.clicked.connect(lambda *_: self.copy_requested.emit())
        for fmt, btn in self._export_buttons.items():
            btn.clicked.connect(
                lambda checked=False, f=fmt: self.export_requested.emit(f)
            )

        # config_changed is Signal() with no arguments, so the lambdas
        # absorb whatever each widget signal passes
        self._cmb_type.currentIndexChanged.connect(
            lambda *_: self.config_changed.emit()
        )
        self._cmb_x.currentIndexChanged.connect(
            lambda *_: self.config_changed.emit()
        )
        self._cmb_y.currentIndexChanged.connect(
            lambda *_: self.config_changed.emit()
        )
        self._edt_title.editingFinished.connect(
            lambda *_: self.config_changed.emit()
        )
        self._chk_grid.toggled.connect(
            lambda *_: self.config_changed.emit()
        )

    # ── Slot implementations ─────────────────────────────────────────

    def _paint_color_button(self):
        self._btn_color.setStyleSheet(
            f"QPushButton {{ background-color: {self._color}; "
            f"border: 1px solid {DARK_COLORS['border']}; }}"
        )

    def _pick_color(self):
        color = QColorDialog.getColor(QColor(self._color), self, "Series Colour")
        if color.isValid():
            self._color = color.name()
            self._paint_color_button()
            self.config_changed.emit()

    def _browse_file(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "Open CSV File",
            "", "CSV Files (*.csv *.tsv *.txt);;All Files (*)",
        )
        if path:
            self.load_file(path)

    def _set_file_status(self, text: str, color_key: str):
        self._lbl_file_status.setText(text)
        self._lbl_file_status.setStyleSheet(
            f"color: {DARK_COLORS[color_key]}; font-size: 11px;"
        )

    def load_example(self):
        """Generate and load the example CSV."""
        from .example_data import generate_example_csv

        example_dir = os.path.join(tempfile.gettempdir(), 'csv_visualizer_example')
        try:
            path = generate_example_csv(example_dir)
        except OSError as exc:
            QMessageBox.critical(self, "Example Data Error", str(exc))
            return
        self.load_file(path)

    def load_file(self, path: str) -> bool:
        """Parse *path* and emit ``dataset_loaded`` on success."""
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            try:
                dataset = load_csv(path)
            except (ValueError, OSError) as exc:
                self._set_file_status(f"Error: {exc}", 'red')
                QMessageBox.critical(self, "Data Load Error", str(exc))
                return False

        self._edt_file.setText(os.path.basename(path))
        self._edt_file.setToolTip(path)
        notes = [str(w.message) for w in caught]
        summary = f"Loaded {dataset.row_count} rows × {len(dataset.columns)} columns"
        if notes:
            self._set_file_status(summary + "\n" + "\n".join(notes), 'yellow')
        else:
            self._set_file_status(summary, 'green')
        self.dataset_loaded.emit(dataset)
        return True

    # ── Public API ───────────────────────────────────────────────────

    def set_columns(self, names, config: ChartConfig) -> None:
        """Fill the axis combos and select *config*'s axes silently."""
        for combo, current in ((self._cmb_x, config.x_axis), (self._cmb_y, config.y_axis)):
            combo.blockSignals(True)
            combo.clear()
            combo.addItems(list(names))
            idx = combo.findText(current)
            if idx >= 0:
                combo.setCurrentIndex(idx)
            combo.setEnabled(bool(names))
            combo.blockSignals(False)
        has_data = bool(names)
        for btn in self._export_buttons.values():
            btn.setEnabled(has_data)
        self._btn_copy.setEnabled(has_data)
        if not has_data:
            self._edt_file.clear()
            self._lbl_file_status.setText("")

    def get_config(self) -> dict:
        """Chart settings as keyword arguments for ``update_chart_config``."""
        return {
            'chart_type': self._cmb_type.currentData() or CHART_TYPES[0],
            'x_axis': self._cmb_x.currentText(),
            'y_axis': self._cmb_y.currentText(),
            'title': self._edt_title.text().strip(),
            'color': self._color,
            'show_grid': self._chk_grid.isChecked(),
        }
