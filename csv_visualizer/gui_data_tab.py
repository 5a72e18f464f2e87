"""
Data tab for the CSV Data Visualizer.

Paginated, sortable, searchable preview of the working dataset, plus
the cleaning tools (fill / remove missing values, remove duplicates,
clear data) and the per-column mean/median calculator.
"""

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QComboBox, QGridLayout, QGroupBox, QHBoxLayout, QHeaderView, QLabel,
    QLineEdit, QMessageBox, QPushButton, QTableWidget, QTableWidgetItem,
    QVBoxLayout, QWidget,
)

from .constants import (
    DARK_COLORS, DEFAULT_ROWS_PER_PAGE, ELLIPSIS, PREVIEW_PAGE_DELTA,
    ROWS_PER_PAGE_OPTIONS,
)
from .descriptive import compute_descriptive_stats
from .table_view import (
    TableViewState, build_page, go_to_page, set_rows_per_page, set_search,
    toggle_sort, visible_page_numbers,
)
from .value_parsing import format_cell

_CLEANING_BUTTONS = [
    ("fill_mean", "Fill Missing with Mean"),
    ("fill_median", "Fill Missing with Median"),
    ("remove_missing", "Remove Rows with Missing Values"),
    ("remove_duplicates", "Remove Duplicate Rows"),
]


class DataTab(QWidget):
    """Preview table and cleaning tools."""

    cleaning_requested = Signal(str)
    clear_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._dataset = None
        self._view = TableViewState()
        self._page_count = 1
        self._setup_ui()

    # ── UI setup ─────────────────────────────────────────────────────

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)

        # ── Search / rows per page ───────────────────────────────────
        top = QHBoxLayout()
        self._edt_search = QLineEdit()
        self._edt_search.setPlaceholderText("Search all columns...")
        self._edt_search.textChanged.connect(self._on_search)
        top.addWidget(self._edt_search, 1)

        top.addWidget(QLabel("Rows per page:"))
        self._cmb_rows = QComboBox()
        for n in ROWS_PER_PAGE_OPTIONS:
            self._cmb_rows.addItem("All" if n < 0 else str(n), n)
        self._cmb_rows.setCurrentIndex(ROWS_PER_PAGE_OPTIONS.index(DEFAULT_ROWS_PER_PAGE))
        self._cmb_rows.currentIndexChanged.connect(
            lambda *_: self._on_rows_per_page()
        )
        top.addWidget(self._cmb_rows)
        layout.addLayout(top)

        # ── Table ────────────────────────────────────────────────────
        self._table = QTableWidget()
        self._table.setAlternatingRowColors(True)
        self._table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self._table.horizontalHeader().setSectionResizeMode(
            QHeaderView.ResizeMode.Interactive
        )
        self._table.horizontalHeader().sectionClicked.connect(self._on_header_clicked)
        layout.addWidget(self._table, 1)

        # ── Pagination ───────────────────────────────────────────────
        bottom = QHBoxLayout()
        self._lbl_caption = QLabel("")
        self._lbl_caption.setStyleSheet(f"color: {DARK_COLORS['fg_dim']};")
        bottom.addWidget(self._lbl_caption)
        bottom.addStretch()
        self._page_row = QHBoxLayout()
        bottom.addLayout(self._page_row)
        layout.addLayout(bottom)

        # ── Cleaning tools ───────────────────────────────────────────
        self._grp_clean = grp_clean = QGroupBox("Data Cleaning")
        grid = QGridLayout(grp_clean)
        for i, (action, label) in enumerate(_CLEANING_BUTTONS):
            btn = QPushButton(label)
            btn.clicked.connect(
                lambda checked=False, a=action: self.cleaning_requested.emit(a)
            )
            grid.addWidget(btn, i // 2, i % 2)

        self._cmb_stat_column = QComboBox()
        btn_mean = QPushButton("Calculate Mean")
        btn_median = QPushButton("Calculate Median")
        btn_mean.clicked.connect(lambda *_: self._calculate("mean"))
        btn_median.clicked.connect(lambda *_: self._calculate("median"))
        self._lbl_stat = QLabel("")
        self._lbl_stat.setObjectName("resultLabel")
        grid.addWidget(self._cmb_stat_column, 2, 0)
        stat_row = QHBoxLayout()
        stat_row.addWidget(btn_mean)
        stat_row.addWidget(btn_median)
        grid.addLayout(stat_row, 2, 1)
        grid.addWidget(self._lbl_stat, 3, 0, 1, 2)

        btn_clear = QPushButton("Clear Data")
        btn_clear.setStyleSheet(f"color: {DARK_COLORS['red']};")
        btn_clear.clicked.connect(lambda *_: self._confirm_clear())
        grid.addWidget(btn_clear, 4, 0, 1, 2)

        layout.addWidget(grp_clean)

    # ── Public API ───────────────────────────────────────────────────

    def set_cleaning_enabled(self, enabled: bool) -> None:
        """Disable cleaning and clearing while a transform is running."""
        self._grp_clean.setEnabled(enabled)

    def set_dataset(self, dataset) -> None:
        """Show *dataset*; a different table restarts at page 1."""
        if dataset is not self._dataset:
            self._view = go_to_page(self._view, 1, 1)
            if dataset is None or (
                self._view.sort_column and not dataset.has_column(self._view.sort_column)
            ):
                self._view = TableViewState(rows_per_page=self._view.rows_per_page)
        self._dataset = dataset

        names = dataset.column_names if dataset is not None else []
        current = self._cmb_stat_column.currentText()
        self._cmb_stat_column.clear()
        self._cmb_stat_column.addItems(names)
        idx = self._cmb_stat_column.findText(current)
        if idx >= 0:
            self._cmb_stat_column.setCurrentIndex(idx)
        self._lbl_stat.setText("")
        self._render()

    # ── Rendering ────────────────────────────────────────────────────

    def _render(self):
        self._table.clear()
        self._clear_page_buttons()
        if self._dataset is None:
            self._table.setRowCount(0)
            self._table.setColumnCount(0)
            self._lbl_caption.setText("No data loaded")
            return

        page = build_page(self._dataset, self._view)
        self._page_count = page.page_count
        names = self._dataset.column_names

        headers = []
        for name in names:
            arrow = ""
            if name == self._view.sort_column:
                arrow = " ▲" if self._view.ascending else " ▼"
            headers.append(name + arrow)

        self._table.setColumnCount(len(names))
        self._table.setHorizontalHeaderLabels(headers)
        self._table.setRowCount(len(page.rows))
        self._table.setVerticalHeaderLabels(
            [str(i) for i in range(page.start + 1, page.end + 1)]
        )
        for r, row in enumerate(page.rows):
            for c, name in enumerate(names):
                self._table.setItem(r, c, QTableWidgetItem(format_cell(row.get(name))))
        self._lbl_caption.setText(page.caption)
        self._build_page_buttons(page.page, page.page_count)

    def _clear_page_buttons(self):
        while self._page_row.count():
            item = self._page_row.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()

    def _build_page_buttons(self, current: int, total: int):
        if total <= 1:
            return

        def add(label, page, enabled=True, checked=False):
            btn = QPushButton(label)
            btn.setCheckable(checked)
            btn.setChecked(checked)
            btn.setEnabled(enabled)
            btn.clicked.connect(lambda *_: self._go_to(page))
            self._page_row.addWidget(btn)

        add("Previous", current - 1, enabled=current > 1)
        for item in visible_page_numbers(current, total, PREVIEW_PAGE_DELTA):
            if item == ELLIPSIS:
                self._page_row.addWidget(QLabel(ELLIPSIS))
            else:
                add(str(item), item, checked=item == current)
        add("Next", current + 1, enabled=current < total)

    # ── Slots ────────────────────────────────────────────────────────

    def _go_to(self, page: int):
        self._view = go_to_page(self._view, page, self._page_count)
        self._render()

    def _on_search(self, text: str):
        self._view = set_search(self._view, text)
        self._render()

    def _on_rows_per_page(self):
        self._view = set_rows_per_page(self._view, self._cmb_rows.currentData())
        self._render()

    def _on_header_clicked(self, index: int):
        if self._dataset is None or index >= len(self._dataset.columns):
            return
        self._view = toggle_sort(self._view, self._dataset.column_names[index])
        self._render()

    def _calculate(self, which: str):
        if self._dataset is None:
            return
        column = self._cmb_stat_column.currentText()
        try:
            stats = compute_descriptive_stats(self._dataset, column)
        except ValueError as exc:
            self._lbl_stat.setText(str(exc))
            return
        value = stats.mean if which == "mean" else stats.median
        self._lbl_stat.setText(f"{which.capitalize()} of {column}: {value:.2f}")

    def _confirm_clear(self):
        if self._dataset is None:
            return
        answer = QMessageBox.question(
            self, "Clear Data",
            "Remove the loaded data? This cannot be undone.",
        )
        if answer == QMessageBox.StandardButton.Yes:
            self.clear_requested.emit()
