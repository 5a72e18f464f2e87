"""
CSV parser for the CSV Data Visualizer.

Loads one delimited text file (first row = header) into a ``Dataset``.
Handles:

- Auto-detected delimiters (tab → semicolon → comma), ignoring
  delimiter characters inside quoted header fields
- Decimal commas in semicolon-delimited files (``"1,5"`` → 1.5)
- UTF-8 BOM markers
- Quoted fields containing delimiters or newlines
- Blank lines (skipped) and blank cells (mapped to ``None``)
- Dynamic typing: plain numeric cells become ``int``/``float``
- Blank or repeated header names (renamed, with a warning)

Each way a file can fail to become a table raises its own error class
so the GUI can tell the user exactly what is wrong with the file.
"""

import csv
import io
import os
import warnings
from typing import List

from .constants import LARGE_FILE_BYTES, MAX_REPORTED_BAD_LINES
from .data_model import Dataset
from .errors import CsvParseError, EmptyCsvError, NoColumnsError
from .value_parsing import coerce_cell


# ── Delimiter auto-detection ─────────────────────────────────────────────

_DELIMITERS = ("\t", ";", ",")


def _detect_delimiter(sample_line: str) -> str:
    """Detect CSV delimiter from a sample line.

    Priority: tab → semicolon → comma.  Only characters outside
    double-quoted fields count, so a header such as
    ``id,"note; extra",value`` is still comma-delimited.
    """
    counts = dict.fromkeys(_DELIMITERS, 0)
    in_quotes = False
    for ch in sample_line:
        if ch == '"':
            in_quotes = not in_quotes
        elif not in_quotes and ch in counts:
            counts[ch] += 1
    for delimiter in _DELIMITERS:
        if counts[delimiter]:
            return delimiter
    return ","


def decimal_for(delimiter: str) -> str:
    """Semicolon-delimited files use the decimal comma."""
    return "," if delimiter == ";" else "."


def _first_content_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line
    return ""


# ── Header normalisation ─────────────────────────────────────────────────

def _normalise_header(tokens: List[str]) -> List[str]:
    """Strip header cells, name blank ones, and make every name unique."""
    names: List[str] = []
    renamed: List[str] = []
    for idx, token in enumerate(tokens, start=1):
        name = token.strip()
        if not name:
            name = f"Column {idx}"
            renamed.append(name)
        base = name
        suffix = 2
        while name in names:
            name = f"{base}_{suffix}"
            suffix += 1
        if name != base:
            renamed.append(name)
        names.append(name)

    if renamed:
        warnings.warn(
            f"Header contains blank or repeated column names; renamed to "
            f"{', '.join(repr(n) for n in renamed)}.",
            stacklevel=3,
        )
    return names


# ── Parsing ──────────────────────────────────────────────────────────────

def parse_csv_text(text: str, source_file: str = "") -> Dataset:
    """Parse CSV *text* into a ``Dataset``.

    Raises
    ------
    EmptyCsvError
        No header, or a header with no data rows.
    NoColumnsError
        The header row has no non-blank column names.
    CsvParseError
        Malformed quoting, or rows whose field count differs from the
        header.
    """
    label = os.path.basename(source_file) if source_file else "input"
    if text.startswith('\ufeff'):
        text = text[1:]

    first_line = _first_content_line(text)
    if not first_line:
        raise EmptyCsvError(f"'{label}' is empty.")
    delimiter = _detect_delimiter(first_line)
    decimal = decimal_for(delimiter)

    reader = csv.reader(io.StringIO(text, newline=''), delimiter=delimiter, strict=True)
    header: List[str] = []
    records: List[List[str]] = []
    bad_lines: List[str] = []

    try:
        for tokens in reader:
            # Whitespace-only line
            if not tokens or (len(tokens) == 1 and not tokens[0].strip()):
                continue
            if not header:
                # First non-empty line is the header, even if every name is blank
                if not any(t.strip() for t in tokens):
                    raise NoColumnsError(
                        f"'{label}' has no column names in its header row."
                    )
                header = _normalise_header(tokens)
                continue
            # Skip blank lines
            if all(not t.strip() for t in tokens):
                continue
            if len(tokens) != len(header):
                bad_lines.append(
                    f"line {reader.line_num}: {len(tokens)} fields"
                )
                continue
            records.append(tokens)
    except csv.Error as exc:
        raise CsvParseError(
            f"Could not parse '{label}' near line {reader.line_num}: {exc}"
        ) from exc

    if not header:
        raise NoColumnsError(f"'{label}' has no column names in its header row.")

    if bad_lines:
        detail = "; ".join(bad_lines[:MAX_REPORTED_BAD_LINES])
        if len(bad_lines) > MAX_REPORTED_BAD_LINES:
            detail += f" ... and {len(bad_lines) - MAX_REPORTED_BAD_LINES} more"
        raise CsvParseError(
            f"'{label}' has rows that do not match the header's "
            f"{len(header)} columns: {detail}."
        )

    if not records:
        raise EmptyCsvError(
            f"'{label}' has a header row but no data rows."
        )

    rows = [
        {name: coerce_cell(cell, decimal) for name, cell in zip(header, tokens)}
        for tokens in records
    ]
    return Dataset.from_rows(header, rows, source_file=source_file)


def load_csv(filepath: str) -> Dataset:
    """Load a CSV file from disk.

    Parameters
    ----------
    filepath : str

    Returns
    -------
    Dataset

    Raises
    ------
    FileNotFoundError
        If *filepath* does not exist.
    CsvParseError
        If the file is not UTF-8 text or is malformed.
    EmptyCsvError, NoColumnsError
        See ``parse_csv_text``.
    """
    if not os.path.isfile(filepath):
        raise FileNotFoundError(f"CSV file not found: {filepath}")

    # Guard against very large files
    file_size = os.path.getsize(filepath)
    if file_size > LARGE_FILE_BYTES:
        warnings.warn(
            f"File is very large ({file_size / (1024 * 1024):.0f} MB). "
            f"Loading and charting may be slow.",
            stacklevel=2,
        )

    try:
        with open(filepath, 'r', encoding='utf-8-sig', newline='') as fh:
            text = fh.read()
    except UnicodeDecodeError as exc:
        raise CsvParseError(
            f"'{os.path.basename(filepath)}' is not UTF-8 text: {exc.reason}."
        ) from exc

    return parse_csv_text(text, source_file=filepath)
