"""
Error taxonomy for the CSV Data Visualizer.

Every domain error is a ``ValueError`` so GUI action handlers can keep
catching ``(ValueError, OSError)`` at the boundary of a user action and
render the message inline.  Nothing here is fatal at process level.
"""


class CsvVisualizerError(ValueError):
    """Base class for all user-reportable conditions."""


# ── Input errors: file loading ───────────────────────────────────────────

class CsvLoadError(CsvVisualizerError):
    """The selected file could not be turned into a dataset."""


class CsvParseError(CsvLoadError):
    """The file is not well-formed delimited text."""


class EmptyCsvError(CsvLoadError):
    """The file parsed but contains no data rows."""


class NoColumnsError(CsvLoadError):
    """The header row yields zero columns."""


# ── Input errors: selections and sample size ─────────────────────────────

class ColumnSelectionError(CsvVisualizerError):
    """A requested column is missing, or too few columns were selected."""


class InsufficientDataError(CsvVisualizerError):
    """Not enough valid numeric values to compute the statistic."""


# ── Numerical degeneracy ─────────────────────────────────────────────────

class DegenerateDataError(CsvVisualizerError):
    """A required denominator is zero (no variance, no range, no dof)."""


class DegenerateFitError(DegenerateDataError):
    """Linear regression input with no x variance or no y variance."""
