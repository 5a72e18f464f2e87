"""
CSV Data Visualizer v1.0.0

Desktop tool for exploring a CSV file: preview, sort and search the
rows, clean missing values and duplicates, transform columns, run
descriptive statistics, hypothesis tests, pivot aggregation and simple
linear regression, and export the configured chart as PNG, JPEG or a
single-page PDF.
"""

APP_NAME = "CSV Data Visualizer"
APP_VERSION = "1.0.0"
APP_DATE = "2026-10-19"
__version__ = APP_VERSION
