"""
Cell value parsing for the CSV Data Visualizer.

A cell holds text, a number, or nothing.  Statistics only ever see the
numbers, so every consumer goes through ``parse_numeric`` instead of
calling ``float()`` on raw cells.  Parsing never raises: a cell that is
not numeric yields ``None`` and is filtered out by the caller.

Two decimal conventions are understood.  With the default ``"."``
decimal a comma is only accepted as a thousands separator in a proper
grouping (``"1,234.5"``); ``"1,5"`` is *not* a number.  Files that use
``;`` as the field delimiter are read with a ``","`` decimal
(``"1,5"`` → 1.5, ``"1.234,5"`` → 1234.5), see ``csv_parser``.
"""

import math
import re
from typing import Any, Iterable, List, Optional

_CURRENCY = "$€£¥₹"

_BOOLEAN_WORDS = frozenset(("true", "false", "yes", "no"))

# Plain decimal or scientific notation; rejects "1_000", "0x1f", "nan"
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Space, no-break space, thin space, narrow no-break space
_SPACES = " \u00a0\u2009\u202f"

# Digit groups of three after a 1-3 digit lead, one separator throughout
_GROUPED_RE = {
    ".": re.compile(
        rf"[+-]?\d{{1,3}}(?P<sep>[,{_SPACES}])\d{{3}}(?:(?P=sep)\d{{3}})*(?:\.\d+)?"
    ),
    ",": re.compile(
        rf"[+-]?\d{{1,3}}(?P<sep>[.{_SPACES}])\d{{3}}(?:(?P=sep)\d{{3}})*(?:,\d+)?"
    ),
}

_DECIMAL_COMMA_RE = re.compile(r"[+-]?(?:\d+,\d*|,\d+)(?:[eE][+-]?\d+)?")


def is_missing(value: Any) -> bool:
    """Return ``True`` for ``None`` and the empty string.

    Missing cells are never zero: ``0`` and ``"0"`` are present values.
    """
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value == ""


def _plain_number_text(text: str, decimal: str) -> Optional[str]:
    """Rewrite *text* as ``float()``-ready notation, or ``None``.

    *text* must already be stripped of surrounding whitespace and
    currency symbols.
    """
    grouped = _GROUPED_RE[decimal].fullmatch(text)
    # "1.234" in a decimal-comma file is read as 1.234, not 1234
    if grouped and not (decimal == "," and grouped.group('sep') == "." and "," not in text):
        text = text.replace(grouped.group('sep'), "")
        return text.replace(",", ".") if decimal == "," else text
    if decimal == "," and _DECIMAL_COMMA_RE.fullmatch(text):
        return text.replace(",", ".")
    if _NUMBER_RE.fullmatch(text):
        return text
    return None


def parse_numeric(value: Any, decimal: str = ".") -> Optional[float]:
    """Convert a raw cell into a finite float, or ``None``.

    Handles:
    - ints and floats (booleans are rejected, not read as 0/1)
    - ``"3.14"``, ``" 42 "``
    - a leading or trailing currency symbol: ``"$1,234.50"`` → ``1234.5``
    - thousands groupings: ``"1,234"``, ``"1 000"``
    - ``decimal=","``: ``"3,14"`` and ``"1.234,5"``

    Empty strings, boolean-like words, ``nan``/``inf``, broken groupings
    (``"1,5"`` with a ``"."`` decimal, ``"1 2"``) and anything else that
    is not plain decimal/scientific notation come back as ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
        return result if math.isfinite(result) else None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text or text.lower() in _BOOLEAN_WORDS:
        return None
    sign = ""
    if text[0] in "+-":
        sign, text = text[0], text[1:].lstrip()
    text = text.strip(_CURRENCY).strip()
    plain = _plain_number_text(sign + text, decimal)
    if plain is None:
        return None
    result = float(plain)
    if not math.isfinite(result):
        return None
    return result


def numeric_values(raw: Iterable[Any]) -> List[float]:
    """Parse *raw* cells and keep only the numeric ones, in order."""
    values = []
    for cell in raw:
        parsed = parse_numeric(cell)
        if parsed is not None:
            values.append(parsed)
    return values


def coerce_cell(text: str, decimal: str = ".") -> Any:
    """Dynamic typing for a freshly read CSV cell.

    Blank → ``None``; a plain number → ``int``/``float``; anything else
    stays text.  Unlike ``parse_numeric`` this does *not* strip currency
    or ``"."``-decimal groupings: ``"$5"`` and ``"1,234"`` remain text in
    the table.  With ``decimal=","`` decimal-comma numbers become floats,
    so the rest of the program never sees ``"1,5"``.
    """
    s = text.strip()
    if not s:
        return None
    if re.fullmatch(r"[+-]?\d+", s):
        return int(s)
    plain = _plain_number_text(s, decimal) if decimal == "," else s
    if plain is None or not _NUMBER_RE.fullmatch(plain):
        return s
    result = float(plain)
    return result if math.isfinite(result) else s


def format_cell(value: Any) -> str:
    """Display form of a cell (``None`` → empty)."""
    if value is None:
        return ""
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e15:
            return f"{value:.1f}"
        return f"{value:.6g}"
    return str(value)
