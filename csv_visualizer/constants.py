"""
Constants for the CSV Data Visualizer.

Centralises colour palettes, font families, chart and table defaults,
transform guards, and export settings so no module carries magic
numbers of its own.
"""

# ── Font family fallback chain ───────────────────────────────────────────
FONT_FAMILIES = [
    "Segoe UI", "Inter", "DejaVu Sans", "Noto Sans",
    "Helvetica", "Arial", "sans-serif",
]

# ── Dark GUI colour palette ──────────────────────────────────────────────
DARK_COLORS = {
    'bg':           '#1e1e2e',
    'bg_alt':       '#252536',
    'surface0':     '#313244',
    'bg_widget':    '#2a2a3c',
    'bg_input':     '#333348',
    'fg':           '#cdd6f4',
    'fg_dim':       '#9399b2',
    'fg_bright':    '#ffffff',
    'accent':       '#89b4fa',
    'accent_hover': '#74c7ec',
    'green':        '#a6e3a1',
    'yellow':       '#f9e2af',
    'red':          '#f38ba8',
    'border':       '#45475a',
    'overlay0':     '#6c7086',
    'selection':    '#45475a',
}

# ── Chart palette ────────────────────────────────────────────────────────
CHART_PALETTE = {
    'default':        '#3B82F6',
    'data_points':    '#8B5CF6',
    'fit_line':       '#EF4444',
    'zero_line':      '#333333',
    # Pie slices / multi-series cycle
    'cycle': [
        '#3B82F6', '#EF4444', '#10B981', '#F59E0B', '#8B5CF6',
        '#EC4899', '#14B8A6', '#F97316', '#6366F1', '#84CC16',
    ],
}

# ── Chart configuration ──────────────────────────────────────────────────
CHART_TYPES = ["line", "bar", "area", "scatter", "pie", "histogram"]
CHART_TYPE_LABELS = {
    "line": "Line Chart",
    "bar": "Bar Chart",
    "area": "Area Chart",
    "scatter": "Scatter Plot",
    "pie": "Pie Chart",
    "histogram": "Histogram",
}
DEFAULT_CHART_TYPE = "line"
DEFAULT_CHART_COLOR = CHART_PALETTE['default']
DEFAULT_SHOW_GRID = True

# Chart window (rows drawn at once)
DEFAULT_VISIBLE_POINTS = 50
MIN_VISIBLE_POINTS = 10
VISIBLE_POINT_PRESETS = [20, 50, 100]

# Pie charts become unreadable past this many slices
MAX_PIE_SLICES = 12

# ── Table / pagination ───────────────────────────────────────────────────
ROWS_PER_PAGE_OPTIONS = [10, 25, 50, 100, -1]   # -1 → "All"
DEFAULT_ROWS_PER_PAGE = 10
PIVOT_ROWS_PER_PAGE = 15
PREVIEW_PAGE_DELTA = 1
PIVOT_PAGE_DELTA = 2
ELLIPSIS = "..."

# ── Statistics / transforms ──────────────────────────────────────────────
FIT_LINE_POINTS = 101
LOG_FLOOR = 1e-4
TRANSFORM_KINDS = ["log", "standardize", "normalize", "minmax"]
TRANSFORM_LABELS = {
    "log": "Log Transform",
    "standardize": "Standardize (Z-score)",
    "normalize": "Normalize (x / sum)",
    "minmax": "Min-Max Scaling",
}
TRANSFORM_BATCH_SIZE = 2000
TEST_KINDS = ["ttest", "chiSquare", "correlation"]
TEST_LABELS = {
    "ttest": "T-Test",
    "chiSquare": "Chi-Square Test",
    "correlation": "Pearson Correlation",
}
PIVOT_METRICS = ["count", "sum", "mean", "median", "std"]
FILL_DECIMALS = 2

# Row de-duplication key separator (ASCII unit separator)
DUPLICATE_KEY_SEPARATOR = "\x1f"

# Strength labels for regression read-outs
STRONG_THRESHOLD = 0.7
MODERATE_THRESHOLD = 0.5

# ── CSV input ────────────────────────────────────────────────────────────
LARGE_FILE_BYTES = 100 * 1024 * 1024
MAX_REPORTED_BAD_LINES = 10

# ── Export settings ──────────────────────────────────────────────────────
EXPORT_FORMATS = ["png", "jpeg", "pdf"]
EXPORT_DPI = 300
CLIPBOARD_DPI = 150
PDF_PAGE_SIZE_INCHES = (8.27, 11.69)   # A4 portrait
PDF_MARGIN_INCHES = 0.4
DEFAULT_EXPORT_STEM = "chart"

EXPORT_TEXT_COLOR = '#333333'
EXPORT_BG_COLOR = '#ffffff'

# ── Matplotlib dark-theme style dict (GUI preview) ──────────────────────
PLOT_STYLE_DARK = {
    'figure.facecolor':  DARK_COLORS['bg_alt'],
    'axes.facecolor':    DARK_COLORS['bg_widget'],
    'axes.edgecolor':    DARK_COLORS['border'],
    'axes.labelcolor':   DARK_COLORS['fg'],
    'text.color':        DARK_COLORS['fg'],
    'xtick.color':       DARK_COLORS['fg_dim'],
    'ytick.color':       DARK_COLORS['fg_dim'],
    'xtick.labelsize':   8,
    'ytick.labelsize':   8,
    'axes.labelsize':    9,
    'axes.titlesize':    11,
    'legend.fontsize':   8,
    'grid.color':        DARK_COLORS['border'],
    'legend.facecolor':  DARK_COLORS['bg_widget'],
    'legend.edgecolor':  DARK_COLORS['border'],
}

# ── Matplotlib light-theme style dict (export) ──────────────────────────
PLOT_STYLE_LIGHT = {
    'figure.facecolor':  '#ffffff',
    'axes.facecolor':    '#ffffff',
    'axes.edgecolor':    '#333333',
    'axes.labelcolor':   '#1a1a2e',
    'text.color':        '#1a1a2e',
    'xtick.color':       '#333333',
    'ytick.color':       '#333333',
    'xtick.labelsize':   8,
    'ytick.labelsize':   8,
    'axes.labelsize':    9,
    'axes.titlesize':    11,
    'legend.fontsize':   8,
    'grid.color':        '#cccccc',
    'legend.facecolor':  '#ffffff',
    'legend.edgecolor':  '#999999',
}
