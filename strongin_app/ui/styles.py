"""
Темна тема для застосунку глобального пошуку методом Стронгіна.

Основні принципи:
    - темні фони, тонкі обводки;
    - теплий акцент для дій і точок випробувань на графіках;
    - вимкнені контроли (кількість воркерів у послідовному режимі) помітно тьмяніші.
"""

from __future__ import annotations
from dataclasses import dataclass

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor, QFont, QPalette
from PyQt6.QtWidgets import (
    QApplication,
    QWidget,
    QTableWidget,
    QHeaderView,
    QGroupBox,
    QPushButton,
    QLabel,
)

MARGIN = 10
SPACING = 8
RADIUS = 5

FONT_FAMILY = "Inter"
FONT_SIZE = 10

@dataclass(frozen=True)
class AppPalette:
    background: str = "#111317"
    surface: str = "#181b21"
    surface_alt: str = "#20252d"

    text_main: str = "#e6e9ef"
    text_muted: str = "#8f99aa"
    text_disabled: str = "#555d6b"
    text_inverse: str = "#111317"

    accent: str = "#f2a65a"  # точки випробувань, кнопки
    accent_alt: str = "#ffd27f"  # знайдений мінімум

    border: str = "#2b313b"
    border_soft: str = "#1d2128"

PALETTE = AppPalette()


# ---------------------------------------------------------------------------
# Глобальний stylesheet
# ---------------------------------------------------------------------------

def build_app_stylesheet() -> str:
    p = PALETTE

    return f"""
    QWidget {{
        background-color: {p.background};
        color: {p.text_main};
        font-family: "{FONT_FAMILY}";
        font-size: {FONT_SIZE}pt;
    }}

    QWidget:disabled {{
        color: {p.text_disabled};
    }}

    /* Групи параметрів */
    QGroupBox {{
        background-color: {p.surface};
        border: 1px solid {p.border_soft};
        border-radius: {RADIUS}px;
        margin-top: 14px;
    }}
    QGroupBox::title {{
        subcontrol-origin: margin;
        left: 10px;
        padding: 0 4px;
        color: {p.accent};
        font-weight: 600;
    }}

    /* Меню */
    QMenuBar {{
        background-color: {p.surface};
        border-bottom: 1px solid {p.border};
    }}
    QMenuBar::item:selected, QMenu::item:selected {{
        background-color: {p.accent};
        color: {p.text_inverse};
    }}
    QMenu {{
        background-color: {p.surface_alt};
        border: 1px solid {p.border};
    }}

    QStatusBar {{
        background-color: {p.surface};
        color: {p.text_muted};
        border-top: 1px solid {p.border};
    }}

    /* Кнопки */
    QPushButton {{
        background-color: {p.accent};
        color: {p.text_inverse};
        border-radius: {RADIUS}px;
        padding: 6px 14px;
        border: 1px solid {p.accent};
        font-weight: 600;
    }}
    QPushButton:hover {{
        background-color: {p.accent_alt};
        border-color: {p.accent_alt};
    }}
    QPushButton:disabled {{
        background-color: {p.surface_alt};
        border-color: {p.border};
        color: {p.text_disabled};
    }}

    /* Поля вводу */
    QSpinBox, QDoubleSpinBox, QComboBox {{
        background-color: {p.surface};
        border: 1px solid {p.border};
        border-radius: {RADIUS}px;
        padding: 5px 8px;
        color: {p.text_main};
    }}
    QSpinBox:focus, QDoubleSpinBox:focus, QComboBox:focus {{
        border: 1px solid {p.accent};
    }}
    QSpinBox:disabled, QComboBox:disabled {{
        color: {p.text_disabled};
        border-color: {p.border_soft};
    }}

    QFrame#aboutColumn {{
        background-color: {p.surface};
        border: 1px solid {p.border_soft};
        border-radius: {RADIUS}px;
    }}

    QCheckBox::indicator {{
        width: 15px;
        height: 15px;
        border-radius: 3px;
        border: 1px solid {p.border};
        background: {p.surface_alt};
    }}
    QCheckBox::indicator:checked {{
        background: {p.accent};
        border: 1px solid {p.accent};
    }}

    /* Таблиці */
    QTableWidget {{
        background-color: {p.surface};
        border: 1px solid {p.border};
        border-radius: {RADIUS}px;
        gridline-color: {p.border};
        alternate-background-color: {p.surface_alt};
        selection-background-color: {p.accent};
        selection-color: {p.text_inverse};
    }}
    QHeaderView::section {{
        background-color: {p.surface_alt};
        color: {p.text_main};
        padding: 5px;
        border: none;
        border-right: 1px solid {p.border};
        font-weight: 600;
    }}

    QScrollBar:vertical {{
        background: transparent;
        width: 11px;
    }}
    QScrollBar::handle:vertical {{
        background: {p.surface_alt};
        border-radius: 5px;
        border: 1px solid {p.border};
    }}

    QToolTip {{
        background-color: {p.surface_alt};
        color: {p.text_main};
        border: 1px solid {p.border};
        padding: 5px;
    }}
    """


# ---------------------------------------------------------------------------
# Застосування теми
# ---------------------------------------------------------------------------

def apply_app_style(app: QApplication) -> None:
    p = app.palette()

    p.setColor(QPalette.ColorRole.Window, QColor(PALETTE.background))
    p.setColor(QPalette.ColorRole.Base, QColor(PALETTE.surface))
    p.setColor(QPalette.ColorRole.AlternateBase, QColor(PALETTE.surface_alt))
    p.setColor(QPalette.ColorRole.Text, QColor(PALETTE.text_main))
    p.setColor(QPalette.ColorRole.Button, QColor(PALETTE.accent))

    app.setPalette(p)
    app.setFont(QFont(FONT_FAMILY, FONT_SIZE))
    app.setStyleSheet(build_app_stylesheet())


# ---------------------------------------------------------------------------
# Хелпери для окремих віджетів
# ---------------------------------------------------------------------------

def apply_groupbox_flat_style(group: QGroupBox):
    group.setContentsMargins(MARGIN, MARGIN, MARGIN, MARGIN)

def apply_table_style(table: QTableWidget):
    table.verticalHeader().setVisible(False)
    table.setAlternatingRowColors(True)
    table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
    table.horizontalHeader().setHighlightSections(False)
    table.horizontalHeader().setDefaultAlignment(
        Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter
    )

def apply_button_secondary(btn: QPushButton):
    p = PALETTE
    btn.setStyleSheet(f"""
        QPushButton {{
            background-color: {p.surface_alt};
            color: {p.text_main};
            border-radius: {RADIUS}px;
            padding: 6px 14px;
            border: 1px solid {p.border};
        }}
        QPushButton:hover {{
            border-color: {p.accent};
        }}
    """)

def apply_label_muted(lbl: QLabel):
    lbl.setStyleSheet(f"color: {PALETTE.text_muted};")

def apply_card_style(widget: QWidget):
    widget.setStyleSheet(f"""
        QWidget#{widget.objectName()} {{
            background-color: {PALETTE.surface};
            border-radius: {RADIUS}px;
            border: 1px solid {PALETTE.border};
        }}
    """)
