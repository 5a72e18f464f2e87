"""
Command-line launcher for the CSV Data Visualizer.

    csv-visualizer [path/to/data.csv]
    python -m csv_visualizer --version
"""

import argparse
import importlib.util
import os
import sys
import traceback

from . import APP_NAME, APP_VERSION

# (import name, distribution name)
_REQUIRED = (
    ("PySide6", "PySide6"),
    ("matplotlib", "matplotlib"),
    ("numpy", "numpy"),
    ("scipy", "scipy"),
)


def missing_packages():
    """Distribution names of required packages that cannot be imported."""
    return [dist for name, dist in _REQUIRED
            if importlib.util.find_spec(name) is None]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csv-visualizer",
        description=f"{APP_NAME}: explore, clean and chart a CSV file",
    )
    parser.add_argument(
        "path",
        nargs="?",
        help="CSV file to open on startup",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )
    return parser


def _report_unhandled(exc_type, exc_value, exc_tb):
    print("".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
          file=sys.stderr)

    from PySide6.QtWidgets import QApplication, QMessageBox

    from .errors import CsvVisualizerError

    if QApplication.instance() is None:
        return
    if issubclass(exc_type, CsvVisualizerError):
        QMessageBox.warning(None, APP_NAME, str(exc_value))
    else:
        QMessageBox.critical(
            None, "Unexpected Error",
            f"{exc_type.__name__}: {exc_value}\n\n"
            f"The full traceback was written to the console.",
        )


def main(argv=None):
    args = build_parser().parse_args(argv)

    missing = missing_packages()
    if missing:
        print(f"[CSV Visualizer] Cannot start, missing packages: "
              f"{', '.join(missing)}\n"
              f"  pip install {' '.join(missing)}", file=sys.stderr)
        return 1

    # matplotlib picks its Qt binding from QT_API
    os.environ.setdefault("QT_API", "pyside6")
    import matplotlib
    matplotlib.use("QtAgg")

    from PySide6.QtWidgets import QApplication

    from .gui_main import VisualizerMainWindow
    from .theme import apply_app_theme

    sys.excepthook = _report_unhandled
    app = QApplication([sys.argv[0]])
    apply_app_theme(app)

    window = VisualizerMainWindow()
    if args.path:
        if os.path.isfile(args.path):
            window.load_file(args.path)
        else:
            print(f"[CSV Visualizer] No such file: {args.path}", file=sys.stderr)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
