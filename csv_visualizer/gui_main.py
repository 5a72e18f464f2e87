"""
Main window for the CSV Data Visualizer.

Hosts the ConfigPanel (left) and a tab widget (right) with the chart,
data preview, statistics and regression tabs.  The window owns the one
``AppState``; every user action goes through an ``app_state`` update
function and then ``_refresh`` pushes the new state to the widgets.
"""

import os
import sys
import warnings

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction
from PySide6.QtWidgets import (
    QMainWindow, QMessageBox, QScrollArea, QSplitter, QTabWidget,
    QVBoxLayout, QWidget,
)

from . import APP_DATE, APP_NAME, APP_VERSION
from . import app_state as st
from .gui_chart_tabs import ChartTab
from .gui_config_panel import ConfigPanel
from .gui_data_tab import DataTab
from .gui_regression_tab import RegressionTab
from .gui_statistics_tab import StatisticsTab
from .statistics_engine import StatisticsEngine


class VisualizerMainWindow(QMainWindow):
    """Main window for the CSV Data Visualizer."""

    def __init__(self):
        super().__init__()
        self._state = st.AppState()

        self.setWindowTitle(f"{APP_NAME} v{APP_VERSION}")
        self.setMinimumSize(1200, 800)
        self.setAcceptDrops(True)

        self._setup_ui()
        self._setup_menu()
        self._connect_signals()

        self.statusBar().showMessage("Ready. Open or drop a CSV file to begin")

    # ── UI setup ─────────────────────────────────────────────────────

    def _setup_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(4, 4, 4, 4)

        splitter = QSplitter(Qt.Orientation.Horizontal)

        self._config_panel = ConfigPanel()
        scroll = QScrollArea()
        scroll.setWidget(self._config_panel)
        scroll.setWidgetResizable(True)
        scroll.setMinimumWidth(300)
        scroll.setMaximumWidth(420)

        self._tabs = QTabWidget()
        self._chart_tab = ChartTab()
        self._data_tab = DataTab()
        self._stats_tab = StatisticsTab()
        self._regression_tab = RegressionTab()
        self._tabs.addTab(self._chart_tab, "Chart")
        self._tabs.addTab(self._data_tab, "Data")
        self._tabs.addTab(self._stats_tab, "Statistics")
        self._tabs.addTab(self._regression_tab, "Regression")

        splitter.addWidget(scroll)
        splitter.addWidget(self._tabs)
        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 1)
        splitter.setSizes([340, 860])

        main_layout.addWidget(splitter)

    def _setup_menu(self):
        menubar = self.menuBar()

        # ── File menu ────────────────────────────────────────────────
        file_menu = menubar.addMenu("File")

        act_open = QAction("Open CSV...", self)
        act_open.setShortcut("Ctrl+O")
        act_open.triggered.connect(lambda *_: self._config_panel._browse_file())
        file_menu.addAction(act_open)

        act_example = QAction("Load Example Data", self)
        act_example.triggered.connect(lambda *_: self._config_panel.load_example())
        file_menu.addAction(act_example)

        file_menu.addSeparator()

        act_export = QAction("Export Current Chart...", self)
        act_export.setShortcut("Ctrl+E")
        act_export.triggered.connect(lambda *_: self._export(""))
        file_menu.addAction(act_export)

        file_menu.addSeparator()

        act_exit = QAction("Exit", self)
        act_exit.triggered.connect(self.close)
        file_menu.addAction(act_exit)

        # ── Help menu ────────────────────────────────────────────────
        help_menu = menubar.addMenu("Help")
        act_about = QAction("About", self)
        act_about.triggered.connect(lambda *_: self._show_about())
        help_menu.addAction(act_about)

    def _connect_signals(self):
        cp = self._config_panel
        cp.dataset_loaded.connect(self._on_dataset_loaded)
        cp.config_changed.connect(self._on_config_changed)
        cp.export_requested.connect(self._export)
        cp.copy_requested.connect(lambda: self._current_canvas().copy())

        self._chart_tab.navigate_requested.connect(
            lambda d: self._update(st.navigate_window(self._state, d))
        )
        self._chart_tab.visible_points_requested.connect(
            lambda n: self._update(st.set_visible_points(self._state, n))
        )
        self._chart_tab.preset_requested.connect(
            lambda n: self._update(st.apply_window_preset(self._state, n))
        )

        self._data_tab.cleaning_requested.connect(self._on_cleaning)
        self._data_tab.clear_requested.connect(
            lambda: self._update(st.clear_data(self._state), data_changed=True)
        )

        self._stats_tab.transform_finished.connect(self._on_transform_finished)
        self._stats_tab.busy_changed.connect(
            lambda busy: self._data_tab.set_cleaning_enabled(not busy)
        )
        self._stats_tab.reset_requested.connect(
            lambda: self._update(st.reset_transform(self._state), data_changed=True)
        )

    # ── State plumbing ───────────────────────────────────────────────

    def _update(self, new_state: st.AppState, data_changed: bool = False):
        self._state = new_state
        self._refresh(data_changed)

    def _refresh(self, data_changed: bool):
        state = self._state
        if data_changed:
            names = state.dataset.column_names if state.dataset is not None else []
            self._config_panel.set_columns(names, state.chart_config)
            self._data_tab.set_dataset(state.dataset)
            self._stats_tab.set_dataset(state.dataset, state.is_transformed)
            self._regression_tab.set_dataset(state.dataset)
        try:
            self._chart_tab.update_chart(state)
        except (ValueError, OSError) as exc:
            # A half-updated config while combos refill; the next
            # change redraws.
            print(f"[CSV Visualizer] Chart render warning: {exc}", file=sys.stderr)
        if state.status:
            self.statusBar().showMessage(state.status, 5000)

    # ── Slots ────────────────────────────────────────────────────────

    def _on_dataset_loaded(self, dataset):
        self._update(st.load_dataset(self._state, dataset), data_changed=True)

    def _on_config_changed(self):
        if self._state.dataset is None:
            return
        try:
            new_state = st.update_chart_config(
                self._state, **self._config_panel.get_config()
            )
        except ValueError as exc:
            self.statusBar().showMessage(str(exc), 5000)
            return
        self._update(new_state)

    def _on_cleaning(self, action: str):
        if self._state.dataset is None:
            QMessageBox.warning(self, "No Data", "Please load a CSV file first.")
            return
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            try:
                outcome = StatisticsEngine(self._state.dataset).clean(action)
            except ValueError as exc:
                QMessageBox.critical(self, "Cleaning Error", str(exc))
                return
        self._update(st.apply_cleaning(self._state, outcome), data_changed=True)
        for w in caught:
            self.statusBar().showMessage(f"{outcome.message}. {w.message}", 8000)

    def _on_transform_finished(self, dataset, source, column: str, kind: str):
        self._update(
            st.apply_transform(self._state, dataset, column, kind, source),
            data_changed=True,
        )

    def _current_canvas(self):
        if self._tabs.currentWidget() is self._regression_tab:
            return self._regression_tab.canvas_panel
        return self._chart_tab.canvas_panel

    def _export(self, fmt: str):
        if self._state.dataset is None:
            QMessageBox.warning(
                self, "Nothing to Export",
                "Please load a CSV file before exporting a chart.",
            )
            return
        self._current_canvas().export_dialog(fmt)

    # ── Drag and drop ────────────────────────────────────────────────

    def dragEnterEvent(self, event):
        if event.mimeData().hasUrls():
            event.acceptProposedAction()

    def dropEvent(self, event):
        for url in event.mimeData().urls():
            path = url.toLocalFile()
            if path and os.path.isfile(path):
                self.load_file(path)
                break

    def load_file(self, path: str) -> bool:
        return self._config_panel.load_file(path)

    def _show_about(self):
        QMessageBox.about(
            self,
            f"About {APP_NAME}",
            f"<h3>{APP_NAME} v{APP_VERSION}</h3>"
            f"<p>Released {APP_DATE}</p>"
            f"<p>Load a CSV file, explore it as a table, chart any column, "
            f"clean and transform the data, run hypothesis tests, build "
            f"pivot tables and fit linear regressions.</p>"
            f"<p>Charts export to PNG, JPEG or PDF.</p>",
        )
