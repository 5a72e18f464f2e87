"""
Table view state for the data preview and pivot tables.

Sorting, free-text search and pagination are display concerns only:
they select and order rows for the screen and never change the
``Dataset`` the statistics are computed from.  ``TableViewState`` is
immutable; every interaction returns a new state.
"""

import math
from dataclasses import dataclass, replace
from typing import Any, List, Optional, Sequence, Tuple, Union

from .constants import DEFAULT_ROWS_PER_PAGE, ELLIPSIS, PREVIEW_PAGE_DELTA
from .data_model import Dataset, Row
from .value_parsing import format_cell, is_missing, parse_numeric

ALL_ROWS = -1


@dataclass(frozen=True)
class TableViewState:
    """What part of the table is on screen.

    Parameters
    ----------
    sort_column : str or None
        Column the rows are ordered by (``None`` keeps file order).
    ascending : bool
    page : int
        1-based page number.
    rows_per_page : int
        ``ALL_ROWS`` (-1) shows every row on one page.
    search : str
        Case-insensitive substring matched against every cell.
    """
    sort_column: Optional[str] = None
    ascending: bool = True
    page: int = 1
    rows_per_page: int = DEFAULT_ROWS_PER_PAGE
    search: str = ""


@dataclass(frozen=True)
class TablePage:
    rows: List[Row]
    start: int            # 0-based index of the first shown row
    end: int              # exclusive
    total_rows: int       # rows matching the search
    page: int
    page_count: int
    caption: str


# ── State transitions ────────────────────────────────────────────────────

def toggle_sort(state: TableViewState, column: str) -> TableViewState:
    """Sort by *column*; clicking the sorted column again flips direction."""
    if state.sort_column == column:
        return replace(state, ascending=not state.ascending, page=1)
    return replace(state, sort_column=column, ascending=True, page=1)


def set_search(state: TableViewState, text: str) -> TableViewState:
    return replace(state, search=text, page=1)


def set_rows_per_page(state: TableViewState, rows_per_page: int) -> TableViewState:
    if rows_per_page != ALL_ROWS and rows_per_page <= 0:
        raise ValueError(f"rows_per_page must be positive or -1, got {rows_per_page}")
    return replace(state, rows_per_page=rows_per_page, page=1)


def go_to_page(state: TableViewState, page: int, page_total: int) -> TableViewState:
    return replace(state, page=min(max(1, page), max(1, page_total)))


# ── Row selection ────────────────────────────────────────────────────────

def search_rows(rows: Sequence[Row], columns: Sequence[str], text: str) -> List[Row]:
    """Rows where any cell contains *text* (case-insensitive)."""
    needle = text.strip().lower()
    if not needle:
        return list(rows)
    return [
        row for row in rows
        if any(needle in format_cell(row.get(c)).lower() for c in columns)
    ]


def _sort_key(value: Any) -> Tuple[int, Union[float, str]]:
    number = parse_numeric(value)
    if number is not None:
        return (0, number)
    return (1, str(value).lower())


def sort_rows(rows: Sequence[Row], column: str, ascending: bool = True) -> List[Row]:
    """Stable sort on *column*.

    Numbers compare numerically and come before text; text compares
    case-insensitively.  Missing cells always go last, whatever the
    direction.
    """
    present = [r for r in rows if not is_missing(r.get(column))]
    missing = [r for r in rows if is_missing(r.get(column))]
    present.sort(key=lambda r: _sort_key(r.get(column)), reverse=not ascending)
    return present + missing


def page_count(total_rows: int, rows_per_page: int) -> int:
    if rows_per_page == ALL_ROWS or total_rows == 0:
        return 1
    return math.ceil(total_rows / rows_per_page)


def page_bounds(page: int, rows_per_page: int, total_rows: int) -> Tuple[int, int]:
    """``(start, end)`` row indices of *page* (1-based)."""
    if rows_per_page == ALL_ROWS:
        return 0, total_rows
    start = (page - 1) * rows_per_page
    return start, min(start + rows_per_page, total_rows)


def visible_page_numbers(
    current: int,
    total: int,
    delta: int = PREVIEW_PAGE_DELTA,
) -> List[Union[int, str]]:
    """Page buttons: first, last and *delta* pages around *current*.

    Gaps become ``ELLIPSIS``; a gap of a single page shows that page
    instead, e.g. ``[1, '...', 4, 5, 6, '...', 10]``.
    """
    pages = [
        i for i in range(1, total + 1)
        if i == 1 or i == total or current - delta <= i <= current + delta
    ]
    out: List[Union[int, str]] = []
    last = None
    for i in pages:
        if last is not None:
            if i - last == 2:
                out.append(last + 1)
            elif i - last != 1:
                out.append(ELLIPSIS)
        out.append(i)
        last = i
    return out


def caption(start: int, end: int, total_rows: int) -> str:
    if total_rows == 0:
        return "No rows to display"
    return f"Showing rows {start + 1} to {end} of {total_rows} total rows"


def build_page(dataset: Dataset, state: TableViewState) -> TablePage:
    """Apply search, sort and pagination to *dataset*."""
    columns = dataset.column_names
    rows = search_rows(dataset.rows, columns, state.search)
    if state.sort_column and dataset.has_column(state.sort_column):
        rows = sort_rows(rows, state.sort_column, state.ascending)

    total = len(rows)
    pages = page_count(total, state.rows_per_page)
    page = min(max(1, state.page), pages)
    start, end = page_bounds(page, state.rows_per_page, total)
    return TablePage(
        rows=rows[start:end],
        start=start,
        end=end,
        total_rows=total,
        page=page,
        page_count=pages,
        caption=caption(start, end, total),
    )
