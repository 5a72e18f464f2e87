"""
Theme and stylesheet for the CSV Data Visualizer.

Dark Catppuccin-style Qt stylesheet for the GUI and the matching
on-screen matplotlib rcParams (export switches to light in ``export``).
``apply_app_theme`` sets the application style, font and stylesheet at
startup.
"""

import matplotlib as mpl

from .constants import DARK_COLORS, FONT_FAMILIES, PLOT_STYLE_DARK


def get_dark_stylesheet() -> str:
    """Qt stylesheet for the dark GUI theme."""
    c = DARK_COLORS
    return f"""
    QMainWindow, QWidget {{
        background-color: {c['bg']};
        color: {c['fg']};
        font-size: 13px;
    }}
    QTabWidget::pane {{ border: 1px solid {c['border']}; }}
    QTabBar::tab {{
        background-color: {c['bg_alt']};
        color: {c['fg_dim']};
        padding: 7px 14px;
        border: 1px solid {c['border']};
        border-bottom: none;
        border-top-left-radius: 4px;
        border-top-right-radius: 4px;
    }}
    QTabBar::tab:selected {{
        color: {c['accent']};
        border-bottom: 2px solid {c['accent']};
    }}
    QGroupBox {{
        border: 1px solid {c['border']};
        border-radius: 6px;
        margin-top: 12px;
        padding-top: 14px;
        font-weight: bold;
        color: {c['accent']};
    }}
    QGroupBox::title {{ subcontrol-origin: margin; left: 10px; padding: 0 4px; }}
    QPushButton {{
        background-color: {c['bg_widget']};
        border: 1px solid {c['border']};
        border-radius: 4px;
        padding: 5px 12px;
    }}
    QPushButton:hover {{ border-color: {c['accent']}; }}
    QPushButton:pressed, QPushButton:checked {{
        background-color: {c['accent']};
        color: {c['bg']};
    }}
    QPushButton:disabled {{ color: {c['overlay0']}; }}
    QLineEdit, QSpinBox, QDoubleSpinBox, QComboBox {{
        background-color: {c['bg_input']};
        border: 1px solid {c['border']};
        border-radius: 4px;
        padding: 3px 6px;
    }}
    QLineEdit:focus, QDoubleSpinBox:focus, QComboBox:focus {{
        border-color: {c['accent']};
    }}
    QComboBox QAbstractItemView {{
        background-color: {c['bg_widget']};
        selection-background-color: {c['selection']};
    }}
    QTableWidget {{
        background-color: {c['bg_widget']};
        alternate-background-color: {c['bg_alt']};
        gridline-color: {c['border']};
    }}
    QHeaderView::section {{
        background-color: {c['surface0']};
        color: {c['fg']};
        padding: 4px 6px;
        border: 1px solid {c['border']};
        font-weight: bold;
    }}
    QProgressBar {{
        background-color: {c['bg_input']};
        border: 1px solid {c['border']};
        border-radius: 4px;
        text-align: center;
    }}
    QProgressBar::chunk {{ background-color: {c['green']}; }}
    QStatusBar {{
        background-color: {c['bg_alt']};
        color: {c['fg_dim']};
    }}
    QMenuBar, QMenu {{ background-color: {c['bg_alt']}; }}
    QMenu::item:selected, QMenuBar::item:selected {{
        background-color: {c['selection']};
    }}
    QLabel#resultLabel {{ color: {c['fg_bright']}; font-family: monospace; }}
    """


def apply_plot_style(style_dict: dict) -> None:
    """Apply a style dictionary to matplotlib rcParams.

    Parameters
    ----------
    style_dict : dict
        One of ``PLOT_STYLE_DARK`` or ``PLOT_STYLE_LIGHT``.
    """
    for key, value in style_dict.items():
        mpl.rcParams[key] = value


def use_dark_plots() -> None:
    apply_plot_style(PLOT_STYLE_DARK)



def apply_app_theme(app) -> None:
    """Fusion style, the first installed UI font and the dark stylesheet."""
    from PySide6.QtGui import QFont, QFontDatabase

    app.setStyle("Fusion")
    font = QFont()
    family = next((f for f in FONT_FAMILIES if QFontDatabase.hasFamily(f)), None)
    if family is not None:
        font.setFamily(family)
    font.setPointSize(10)
    app.setFont(font)
    app.setStyleSheet(get_dark_stylesheet())
