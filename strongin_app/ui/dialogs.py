"""
ui/dialogs.py

Стандартні діалоги для GUI-застосунку:

    - show_error     – повідомлення про помилку
    - show_info      – інформаційне повідомлення
    - show_about     – вікно "Про програму"
    - show_summary   – діалог зі зведеною таблицею ResultsSummary
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget,
    QMessageBox,
    QDialog,
    QHBoxLayout,
    QVBoxLayout,
    QLabel,
    QTableWidget,
    QTableWidgetItem,
    QDialogButtonBox,
    QHeaderView,
    QFrame,
)

from strongin_app import __version__
from strongin_app.core.results_summary import ResultsSummary
from .styles import MARGIN, SPACING, apply_label_muted, apply_table_style


# ---------------------------------------------------------------------------
# Простi діалоги: помилка / інформація / about
# ---------------------------------------------------------------------------


def show_error(parent: Optional[QWidget], message: str, title: str = "Помилка") -> None:
    """
    Показати діалог помилки з червоною іконкою.
    """
    dlg = QMessageBox(parent)
    dlg.setIcon(QMessageBox.Icon.Critical)
    dlg.setWindowTitle(title)
    dlg.setText(message)
    dlg.setStandardButtons(QMessageBox.StandardButton.Ok)
    dlg.exec()


def show_info(parent: Optional[QWidget], title: str, message: str) -> None:
    dlg = QMessageBox(parent)
    dlg.setIcon(QMessageBox.Icon.Information)
    dlg.setWindowTitle(title)
    dlg.setText(message)
    dlg.setStandardButtons(QMessageBox.StandardButton.Ok)
    dlg.exec()


def show_about(parent: Optional[QWidget]) -> None:
    dlg = AboutDialog(parent)
    dlg.exec()


def humanize_stop_reason(code: Optional[str]) -> str:
    """
    Перетворити машинний код причини зупинки на людське пояснення.
    """
    if not code:
        return "Невідомо"

    mapping = {
        "epsilon": "Довжина обраного відрізка менша за eps",
        "max_iter": "Досягнуто граничної кількості ітерацій (результат NaN)",
        "nan": "Жодна характеристика не скінченна (NaN/∞ у значеннях f)",
        "degenerate": "Нова точка не ділить відрізок (вичерпано точність float)",
    }

    return mapping.get(code, f"Інша причина ({code})")


# ---------------------------------------------------------------------------
# Діалог зі зведеною таблицею ResultsSummary
# ---------------------------------------------------------------------------


class SummaryDialog(QDialog):
    """
    Діалог, що показує зведену таблицю запусків у різних режимах
    (ResultsSummary).
    """

    _COLUMNS = [
        "Режим",
        "Воркерів",
        "f*",
        "x*",
        "Ітерацій",
        "Виклики f",
        "Відрізків",
        "Причина зупинки",
    ]

    def __init__(self, parent: Optional[QWidget], summary: ResultsSummary) -> None:
        super().__init__(parent)
        self.summary = summary

        self.setWindowTitle("Зведена таблиця результатів")
        self.setModal(True)
        self.resize(880, 360)

        self._build_ui()
        self._populate()

    # ------------------------- UI -------------------------

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(MARGIN, MARGIN, MARGIN, MARGIN)
        layout.setSpacing(SPACING)

        self.label_title = QLabel(
            "Результати методу Стронгіна в різних режимах виконання\n"
            "(однакові функція, відрізок та eps)",
            self,
        )
        self.label_title.setAlignment(Qt.AlignmentFlag.AlignLeft)
        self.label_title.setWordWrap(True)

        self.table = QTableWidget(self)
        self.table.setColumnCount(len(self._COLUMNS))
        self.table.setHorizontalHeaderLabels(self._COLUMNS)
        apply_table_style(self.table)

        header = self.table.horizontalHeader()
        header.setSectionResizeMode(QHeaderView.ResizeMode.Interactive)
        header.setStretchLastSection(True)

        self.label_best = QLabel(self)
        apply_label_muted(self.label_best)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok,
            orientation=Qt.Orientation.Horizontal,
            parent=self,
        )
        buttons.accepted.connect(self.accept)

        layout.addWidget(self.label_title)
        layout.addWidget(self.table)
        layout.addWidget(self.label_best)
        layout.addWidget(buttons)

    # --------------------- Заповнення даних ---------------------

    def _populate(self) -> None:
        rows: List[Dict[str, Any]] = self.summary.as_rows()
        self.table.setRowCount(len(rows))

        def _item(val: Any) -> QTableWidgetItem:
            it = QTableWidgetItem(str(val))
            it.setFlags(it.flags() & ~Qt.ItemFlag.ItemIsEditable)
            return it

        def _num(val: float, fmt: str) -> str:
            return "NaN" if math.isnan(val) else format(val, fmt)

        for row_idx, row in enumerate(rows):
            mode = row["mode"] if row["backend"] is None else f"{row['mode']} ({row['backend']})"

            self.table.setItem(row_idx, 0, _item(mode))
            self.table.setItem(row_idx, 1, _item(row["workers"]))
            self.table.setItem(row_idx, 2, _item(_num(row["f_star"], ".8e")))
            self.table.setItem(row_idx, 3, _item(_num(row["x_star"], ".8f")))
            self.table.setItem(row_idx, 4, _item(row["n_iter"]))
            self.table.setItem(row_idx, 5, _item(row["func_evals"]))
            self.table.setItem(row_idx, 6, _item(row["n_segments"]))
            self.table.setItem(row_idx, 7, _item(humanize_stop_reason(row["stopped_by"])))

        best = self.summary.best_by_f()
        if best is None:
            self.label_best.setText("Жоден запуск не зійшовся.")
        else:
            self.label_best.setText(f"Найменше f*: {best.label}, f* = {best.result.f_star:.8e}")


def show_summary(parent: Optional[QWidget], summary: ResultsSummary) -> None:
    dlg = SummaryDialog(parent, summary)
    dlg.exec()


class AboutDialog(QDialog):
    """
    Вікно "Про програму".
    """

    def __init__(self, parent: Optional[QWidget]) -> None:
        super().__init__(parent)
        self.setWindowTitle("Про програму")
        self.setModal(True)

        if parent is not None:
            self.resize(int(parent.width() * 0.5), int(parent.height() * 0.8))
        else:
            self.resize(720, 560)

        self._build_ui()

    def _build_ui(self) -> None:
        root = QHBoxLayout(self)
        root.setContentsMargins(MARGIN, MARGIN, MARGIN, MARGIN)
        root.setSpacing(SPACING)

        column = QFrame(self)
        column.setObjectName("aboutColumn")
        column_layout = QVBoxLayout(column)
        column_layout.setContentsMargins(MARGIN, MARGIN, MARGIN, MARGIN)
        column_layout.setSpacing(SPACING)

        title = QLabel("<b>Глобальна мінімізація одномірних функцій методом Стронгіна</b>", column)
        title.setWordWrap(True)

        subtitle = QLabel(
            "Послідовний та розподілений режими з явним координатором.",
            column,
        )
        subtitle.setWordWrap(True)
        apply_label_muted(subtitle)

        separator = QFrame(column)
        separator.setFrameShape(QFrame.Shape.HLine)
        separator.setFrameShadow(QFrame.Shadow.Sunken)

        description = QLabel(
            (
                "<p>На кожній ітерації оцінюється константа Ліпшиця M, для всіх "
                "відрізків розбиття обчислюються характеристики R, і відрізок з "
                "найбільшою характеристикою ділиться новою точкою yₙ. Пошук "
                "зупиняється, коли довжина обраного відрізка стає меншою за eps.</p>"
                "<p>У розподіленому режимі відрізки діляться між воркерами майже "
                "порівну, часткові результати збирає координатор (ранг 0) і "
                "розсилає всім.</p>"
            ),
            column,
        )
        description.setWordWrap(True)

        formulas = QLabel(
            """
            <p><b>Формули:</b></p>
            <ul>
                <li>M = max |f(yᵢ) − f(yᵢ₋₁)| / (yᵢ − yᵢ₋₁)</li>
                <li>m = 1, якщо M = 0, інакше r·M</li>
                <li>R = m·Δ + (Δf)² / (m·Δ) − 2(f(yᵢ) + f(yᵢ₋₁))</li>
                <li>yₙ = (yᵢ + yᵢ₋₁)/2 + (f(yᵢ) − f(yᵢ₋₁)) / (2m)</li>
            </ul>
            """,
            column,
        )
        formulas.setWordWrap(True)

        footer = QLabel(
            f"<p><b>Версія:</b> {__version__}</p>",
            column,
        )
        footer.setWordWrap(True)
        apply_label_muted(footer)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok,
            orientation=Qt.Orientation.Horizontal,
            parent=self,
        )
        buttons.accepted.connect(self.accept)

        column_layout.addWidget(title)
        column_layout.addWidget(subtitle)
        column_layout.addWidget(separator)
        column_layout.addWidget(description)
        column_layout.addWidget(formulas)
        column_layout.addStretch(1)
        column_layout.addWidget(footer)
        column_layout.addWidget(buttons, alignment=Qt.AlignmentFlag.AlignRight)

        root.addWidget(column, stretch=1)
