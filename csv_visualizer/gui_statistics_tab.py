"""
Statistics tab for the CSV Data Visualizer.

Column transforms (run in batches on a QTimer so the window stays
responsive), descriptive statistics, hypothesis tests and the pivot
table.
"""

import math

from PySide6.QtCore import QTimer, Signal
from PySide6.QtWidgets import (
    QComboBox, QFormLayout, QGroupBox, QHBoxLayout, QLabel, QProgressBar,
    QPushButton, QTableWidget, QTableWidgetItem, QVBoxLayout, QWidget,
)

from .constants import (
    ELLIPSIS, PIVOT_METRICS, PIVOT_PAGE_DELTA, PIVOT_ROWS_PER_PAGE,
    TEST_KINDS, TEST_LABELS, TRANSFORM_KINDS, TRANSFORM_LABELS,
)
from .statistics_engine import StatisticsEngine
from .table_view import page_bounds, page_count, visible_page_numbers

_NONE = "(none)"
_ALL_COLUMNS = "(all columns)"


def _fmt(value: float) -> str:
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        return "–"
    return f"{value:.4f}"


class StatisticsTab(QWidget):
    """Transforms, descriptive statistics, tests and pivot."""

    transform_finished = Signal(object, object, str, str)   # result, source, column, kind
    busy_changed = Signal(bool)
    reset_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._dataset = None
        self._job = None
        self._pivot = None
        self._pivot_page = 1
        self._timer = QTimer(self)
        self._timer.setInterval(0)
        self._timer.timeout.connect(self._step_transform)
        self._setup_ui()

    # ── UI setup ─────────────────────────────────────────────────────

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)

        # ── Transform ────────────────────────────────────────────────
        grp_tf = QGroupBox("Data Transformation")
        tf_layout = QFormLayout(grp_tf)
        self._cmb_tf_column = QComboBox()
        self._cmb_tf_kind = QComboBox()
        for kind in TRANSFORM_KINDS:
            self._cmb_tf_kind.addItem(TRANSFORM_LABELS[kind], kind)
        tf_layout.addRow("Column:", self._cmb_tf_column)
        tf_layout.addRow("Transform:", self._cmb_tf_kind)
        row = QHBoxLayout()
        self._btn_apply = QPushButton("Apply Transform")
        self._btn_apply.clicked.connect(lambda *_: self._start_transform())
        self._btn_reset = QPushButton("Reset")
        self._btn_reset.setEnabled(False)
        self._btn_reset.clicked.connect(lambda *_: self.reset_requested.emit())
        row.addWidget(self._btn_apply)
        row.addWidget(self._btn_reset)
        tf_layout.addRow(row)
        self._progress = QProgressBar()
        self._progress.setVisible(False)
        tf_layout.addRow(self._progress)
        self._lbl_tf = QLabel("")
        tf_layout.addRow(self._lbl_tf)
        layout.addWidget(grp_tf)

        # ── Descriptive statistics ───────────────────────────────────
        grp_desc = QGroupBox("Descriptive Statistics")
        desc_layout = QHBoxLayout(grp_desc)
        self._cmb_desc_column = QComboBox()
        btn_desc = QPushButton("Compute")
        btn_desc.clicked.connect(lambda *_: self._compute_descriptive())
        self._lbl_desc = QLabel("")
        self._lbl_desc.setObjectName("resultLabel")
        desc_layout.addWidget(self._cmb_desc_column)
        desc_layout.addWidget(btn_desc)
        desc_layout.addWidget(self._lbl_desc, 1)
        layout.addWidget(grp_desc)

        # ── Hypothesis tests ─────────────────────────────────────────
        grp_test = QGroupBox("Hypothesis Tests")
        test_layout = QFormLayout(grp_test)
        self._cmb_test = QComboBox()
        for kind in TEST_KINDS:
            self._cmb_test.addItem(TEST_LABELS[kind], kind)
        self._cmb_test_a = QComboBox()
        self._cmb_test_b = QComboBox()
        test_layout.addRow("Test:", self._cmb_test)
        test_layout.addRow("First column:", self._cmb_test_a)
        test_layout.addRow("Second column:", self._cmb_test_b)
        btn_test = QPushButton("Run Test")
        btn_test.clicked.connect(lambda *_: self._run_test())
        test_layout.addRow(btn_test)
        self._lbl_test = QLabel("")
        self._lbl_test.setObjectName("resultLabel")
        self._lbl_test.setWordWrap(True)
        test_layout.addRow(self._lbl_test)
        layout.addWidget(grp_test)

        # ── Pivot ────────────────────────────────────────────────────
        grp_pivot = QGroupBox("Pivot Table")
        pivot_layout = QVBoxLayout(grp_pivot)
        controls = QHBoxLayout()
        self._cmb_group = QComboBox()
        self._cmb_pivot_value = QComboBox()
        self._cmb_metric = QComboBox()
        self._cmb_metric.addItems(PIVOT_METRICS)
        self._cmb_metric.setCurrentText("mean")
        btn_pivot = QPushButton("Build Pivot")
        btn_pivot.clicked.connect(lambda *_: self._build_pivot())
        controls.addWidget(QLabel("Group by:"))
        controls.addWidget(self._cmb_group)
        controls.addWidget(QLabel("Column:"))
        controls.addWidget(self._cmb_pivot_value)
        controls.addWidget(QLabel("Metric:"))
        controls.addWidget(self._cmb_metric)
        controls.addWidget(btn_pivot)
        pivot_layout.addLayout(controls)
        self._cmb_metric.currentIndexChanged.connect(lambda *_: self._render_pivot())
        self._cmb_pivot_value.currentIndexChanged.connect(lambda *_: self._render_pivot())

        self._pivot_table = QTableWidget()
        self._pivot_table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        pivot_layout.addWidget(self._pivot_table, 1)
        self._lbl_pivot = QLabel("")
        pivot_layout.addWidget(self._lbl_pivot)
        self._pivot_pages = QHBoxLayout()
        pivot_layout.addLayout(self._pivot_pages)
        layout.addWidget(grp_pivot, 1)

    # ── Public API ───────────────────────────────────────────────────

    def set_dataset(self, dataset, is_transformed: bool = False) -> None:
        self._dataset = dataset
        names = dataset.column_names if dataset is not None else []
        numeric = dataset.numeric_columns if dataset is not None else []
        self._refill(self._cmb_tf_column, numeric or names)
        self._refill(self._cmb_desc_column, numeric or names)
        self._refill(self._cmb_test_a, names)
        self._refill(self._cmb_test_b, [_NONE] + names)
        self._refill(self._cmb_group, names)
        self._btn_reset.setEnabled(is_transformed)
        self._btn_apply.setEnabled(dataset is not None and self._job is None)
        self._pivot = None
        self._render_pivot()

    @staticmethod
    def _refill(combo: QComboBox, items) -> None:
        current = combo.currentText()
        combo.blockSignals(True)
        combo.clear()
        combo.addItems(list(items))
        idx = combo.findText(current)
        if idx >= 0:
            combo.setCurrentIndex(idx)
        combo.blockSignals(False)

    def _engine(self):
        if self._dataset is None:
            return None
        return StatisticsEngine(self._dataset)

    # ── Transform ────────────────────────────────────────────────────

    def _start_transform(self):
        engine = self._engine()
        if engine is None or self._job is not None:
            return
        column = self._cmb_tf_column.currentText()
        kind = self._cmb_tf_kind.currentData()
        try:
            self._job = engine.start_transform(column, kind)
        except ValueError as exc:
            self._lbl_tf.setText(str(exc))
            return
        _, total = self._job.progress
        self._progress.setRange(0, max(1, total))
        self._progress.setValue(0)
        self._progress.setVisible(True)
        self._btn_apply.setEnabled(False)
        self._lbl_tf.setText(f"Transforming '{column}'...")
        self._timer.start()
        self.busy_changed.emit(True)

    def _step_transform(self):
        job = self._job
        done = job.step()
        processed, _ = job.progress
        self._progress.setValue(processed)
        if not done:
            return
        self._timer.stop()
        self._job = None
        self._progress.setVisible(False)
        self._lbl_tf.setText(
            f"Applied {TRANSFORM_LABELS[job.kind]} to '{job.column}'"
        )
        self.busy_changed.emit(False)
        self.transform_finished.emit(job.result(), job.source, job.column, job.kind)

    # ── Descriptive / tests ──────────────────────────────────────────

    def _compute_descriptive(self):
        engine = self._engine()
        if engine is None:
            return
        try:
            s = engine.compute_descriptive_stats(self._cmb_desc_column.currentText())
        except ValueError as exc:
            self._lbl_desc.setText(str(exc))
            return
        self._lbl_desc.setText(
            f"n={s.count}  mean={s.mean:.4f}  median={s.median:.4f}  "
            f"std={s.std:.4f}  sum={s.sum:.4f}  min={s.min:.4f}  max={s.max:.4f}"
        )

    def _run_test(self):
        engine = self._engine()
        if engine is None:
            return
        columns = [self._cmb_test_a.currentText()]
        second = self._cmb_test_b.currentText()
        if second and second != _NONE:
            columns.append(second)
        try:
            result = engine.run_test(self._cmb_test.currentData(), columns)
        except ValueError as exc:
            self._lbl_test.setText(str(exc))
            return
        verdict = "significant" if result.p_value < 0.05 else "not significant"
        self._lbl_test.setText(
            f"{result.test_name}\n{result.description}\n"
            f"Statistic = {result.result:.4f}   p = {result.p_value:.4g} "
            f"({verdict} at α = 0.05)"
        )

    # ── Pivot ────────────────────────────────────────────────────────

    def _build_pivot(self):
        engine = self._engine()
        if engine is None:
            return
        try:
            self._pivot = engine.pivot(self._cmb_group.currentText())
        except ValueError as exc:
            self._pivot = None
            self._lbl_pivot.setText(str(exc))
            return
        self._refill(self._cmb_pivot_value, [_ALL_COLUMNS] + self._pivot.value_columns)
        self._pivot_page = 1
        self._render_pivot()

    def _render_pivot(self):
        table = self._pivot_table
        table.clear()
        while self._pivot_pages.count():
            item = self._pivot_pages.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()
        if self._pivot is None:
            table.setRowCount(0)
            table.setColumnCount(0)
            return

        metric = self._cmb_metric.currentText()
        chosen = self._cmb_pivot_value.currentText()
        columns = self._pivot.value_columns
        if chosen and chosen != _ALL_COLUMNS:
            columns = [chosen]

        groups = self._pivot.groups
        total_pages = page_count(len(groups), PIVOT_ROWS_PER_PAGE)
        self._pivot_page = min(self._pivot_page, total_pages)
        start, end = page_bounds(self._pivot_page, PIVOT_ROWS_PER_PAGE, len(groups))

        table.setColumnCount(2 + len(columns))
        table.setHorizontalHeaderLabels(
            [self._pivot.group_column, "Rows"] + [f"{metric}({c})" for c in columns]
        )
        table.setRowCount(end - start)
        for r, group in enumerate(groups[start:end]):
            table.setItem(r, 0, QTableWidgetItem(group.key))
            table.setItem(r, 1, QTableWidgetItem(str(group.row_count)))
            for c, name in enumerate(columns):
                agg = group.columns.get(name)
                text = _fmt(agg.metric(metric)) if agg is not None else "–"
                table.setItem(r, 2 + c, QTableWidgetItem(text))
        self._lbl_pivot.setText(f"{len(groups)} groups")

        if total_pages > 1:
            for item in visible_page_numbers(self._pivot_page, total_pages, PIVOT_PAGE_DELTA):
                if item == ELLIPSIS:
                    self._pivot_pages.addWidget(QLabel(ELLIPSIS))
                    continue
                btn = QPushButton(str(item))
                btn.setCheckable(True)
                btn.setChecked(item == self._pivot_page)
                btn.clicked.connect(lambda checked=False, p=item: self._go_to_pivot_page(p))
                self._pivot_pages.addWidget(btn)
            self._pivot_pages.addStretch()

    def _go_to_pivot_page(self, page: int):
        self._pivot_page = page
        self._render_pivot()
