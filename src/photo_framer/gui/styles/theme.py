"""
Theme definitions for the Photo Framer GUI.
"""


class Colors:
    # Primary Colors
    PRIMARY = "#667eea"
    PRIMARY_HOVER = "#5a6fd6"
    PRIMARY_PRESSED = "#764ba2"

    # Backgrounds
    BACKGROUND = "#f5f5f5"
    SURFACE = "#ffffff"
    HOVER = "#f0f0f0"
    DISABLED_BG = "#e0e0e0"

    # Text
    TEXT_PRIMARY = "#1f1f1f"
    TEXT_SECONDARY = "#666666"
    TEXT_DISABLED = "#757575"
    TEXT_ON_PRIMARY = "#ffffff"

    # Borders & Dividers
    BORDER = "#e0e0e0"
    BORDER_FOCUS = "#667eea"

    # Status
    ERROR = "#d32f2f"
    SUCCESS = "#388e3c"
    WARNING = "#f57c00"
    INFO = "#1976d2"

    # Selection
    SELECTION_BG = "#eef0fd"
    SELECTION_TEXT = "#1f1f1f"

    # Crop view
    CROP_BACKDROP = "#2b2b2b"
    CROP_SHADE = "#99000000"    # ARGB: dimmed area outside the circle
    CROP_GUIDE = "#ffffff"


class ColorsDark:
    """Dark theme color palette."""

    PRIMARY = "#7f93f5"
    PRIMARY_HOVER = "#94a5f7"
    PRIMARY_PRESSED = "#8a63b8"

    BACKGROUND = "#1e1e1e"
    SURFACE = "#252526"
    HOVER = "#21262D"
    DISABLED_BG = "#3D444D"

    TEXT_PRIMARY = "#E6EDF3"
    TEXT_SECONDARY = "#8B949E"
    TEXT_DISABLED = "#9CA3AF"
    TEXT_ON_PRIMARY = "#FFFFFF"

    BORDER = "#30363D"
    BORDER_FOCUS = "#7f93f5"

    ERROR = "#F85149"
    SUCCESS = "#3FB950"
    WARNING = "#D29922"
    INFO = "#58A6FF"

    SELECTION_BG = "#2c3566"
    SELECTION_TEXT = "#FFFFFF"

    CROP_BACKDROP = "#111111"
    CROP_SHADE = "#b3000000"
    CROP_GUIDE = "#E6EDF3"


class Fonts:
    # Font Families
    UI_FONT = "-apple-system, 'SF Pro Text', 'Segoe UI', Roboto, Helvetica, Arial, sans-serif"
    MONO_FONT = "Consolas, Monaco, Menlo, 'Courier New', monospace"

    # Sizes
    H1 = "18pt"
    BODY = "14pt"
    SMALL = "12pt"
    CONSOLE = "13pt"

    # Weights
    WEIGHT_REGULAR = "400"
    WEIGHT_MEDIUM = "500"
    WEIGHT_BOLD = "600"


def _button_primary(C) -> str:
    return f"""
        QPushButton {{
            background-color: {C.PRIMARY};
            color: {C.TEXT_ON_PRIMARY};
            border-radius: 6px;
            padding: 8px 16px;
            font-weight: {Fonts.WEIGHT_MEDIUM};
            border: none;
            qproperty-iconSize: 20px 20px;
        }}
        QPushButton:hover {{
            background-color: {C.PRIMARY_HOVER};
        }}
        QPushButton:pressed {{
            background-color: {C.PRIMARY_PRESSED};
        }}
        QPushButton:disabled {{
            background-color: {C.DISABLED_BG};
            color: {C.TEXT_DISABLED};
        }}
    """


def _button_secondary(C) -> str:
    return f"""
        QPushButton {{
            background-color: {C.SURFACE};
            color: {C.TEXT_PRIMARY};
            border: 1px solid {C.BORDER};
            border-radius: 6px;
            padding: 8px 16px;
            font-weight: {Fonts.WEIGHT_MEDIUM};
            qproperty-iconSize: 20px 20px;
        }}
        QPushButton:hover {{
            background-color: {C.HOVER};
            border-color: {C.BORDER_FOCUS};
        }}
        QPushButton:disabled {{
            color: {C.TEXT_DISABLED};
        }}
    """


def _progress_bar(C) -> str:
    return f"""
        QProgressBar {{
            background-color: {C.DISABLED_BG};
            border: none;
            border-radius: 4px;
            height: 8px;
            text-align: center;
            color: transparent;
        }}
        QProgressBar::chunk {{
            background-color: {C.PRIMARY};
            border-radius: 4px;
        }}
    """


def _drop_area(C) -> str:
    return f"""
        QFrame#dropArea {{
            background-color: {C.SURFACE};
            border: 2px dashed {C.BORDER};
            border-radius: 12px;
        }}
        QFrame#dropArea[dragActive="true"] {{
            border-color: {C.PRIMARY};
            background-color: {C.SELECTION_BG};
        }}
    """


class Styles:
    # Common QSS fragments
    BUTTON_PRIMARY = _button_primary(Colors)
    BUTTON_SECONDARY = _button_secondary(Colors)
    PROGRESS_BAR = _progress_bar(Colors)
    DROP_AREA = _drop_area(Colors)


class StylesDark:
    BUTTON_PRIMARY = _button_primary(ColorsDark)
    BUTTON_SECONDARY = _button_secondary(ColorsDark)
    PROGRESS_BAR = _progress_bar(ColorsDark)
    DROP_AREA = _drop_area(ColorsDark)


def _global_stylesheet(C, S) -> str:
    return f"""
    * {{
        font-family: {Fonts.UI_FONT};
        font-size: {Fonts.BODY};
        color: {C.TEXT_PRIMARY};
    }}

    QMainWindow, QWidget {{
        background-color: {C.BACKGROUND};
    }}

    QLabel {{
        background-color: transparent;
        color: {C.TEXT_PRIMARY};
    }}
    QLabel#mainTitle {{
        font-size: {Fonts.H1};
        font-weight: {Fonts.WEIGHT_BOLD};
    }}
    QLabel#hintLabel {{
        font-size: {Fonts.SMALL};
        color: {C.TEXT_SECONDARY};
    }}

    QMenuBar, QMenu {{
        background-color: {C.BACKGROUND};
        color: {C.TEXT_PRIMARY};
        border: none;
    }}
    QMenu::item:selected {{
        background-color: {C.SELECTION_BG};
        color: {C.SELECTION_TEXT};
    }}

    QStatusBar {{
        background-color: {C.SURFACE};
        color: {C.TEXT_SECONDARY};
    }}

    QPlainTextEdit {{
        background-color: {C.SURFACE};
        color: {C.TEXT_PRIMARY};
        border: 1px solid {C.BORDER};
        border-radius: 6px;
        selection-background-color: {C.SELECTION_BG};
        selection-color: {C.SELECTION_TEXT};
    }}

    QSlider::groove:horizontal {{
        height: 4px;
        background: {C.BORDER};
        border-radius: 2px;
    }}
    QSlider::handle:horizontal {{
        background: {C.PRIMARY};
        width: 16px;
        margin: -6px 0;
        border-radius: 8px;
    }}
    {S.PROGRESS_BAR}
    {S.DROP_AREA}
    """


# Global application stylesheets to enforce the palette across all widgets
# (helps avoid inheriting OS dark mode on Windows).
GLOBAL_STYLESHEET = _global_stylesheet(Colors, Styles)
GLOBAL_STYLESHEET_DARK = _global_stylesheet(ColorsDark, StylesDark)


def apply_theme(app, is_dark: bool = False) -> None:
    """
    Apply the appropriate stylesheet (light or dark) to the QApplication.
    """
    set_dark_mode(is_dark)
    app.setStyleSheet(GLOBAL_STYLESHEET_DARK if is_dark else GLOBAL_STYLESHEET)


# Module-level dark mode state (set explicitly when theme changes)
_is_dark_mode = False


def set_dark_mode(is_dark: bool):
    """Explicitly set the dark mode state. Called by apply_theme."""
    global _is_dark_mode
    _is_dark_mode = is_dark


def get_colors():
    """Get the appropriate color palette based on current theme."""
    return ColorsDark if _is_dark_mode else Colors


def get_styles():
    """Get the appropriate styles based on current theme."""
    return StylesDark if _is_dark_mode else Styles
