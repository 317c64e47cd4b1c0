"""
table_view.py

Таблиця ітерацій методу Стронгіна.

Функціонал:
    - відображає послідовність IterationResult;
    - колонки:
        k, M, max R, [y_begin, y_end], yₙ;
    - хелпери:
        clear_table()
        add_iteration(iteration)
        populate(iterations, limit=...)
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QTableWidget,
    QTableWidgetItem,
    QHeaderView,
    QAbstractItemView,
)

from strongin_app.core.iteration_result import IterationResult
from .styles import MARGIN, SPACING, apply_table_style, PALETTE

# Для довгих запусків у таблицю потрапляють лише перші рядки
DEFAULT_ROW_LIMIT = 2000


def _fmt(value: float, fmt: str) -> str:
    if value is None or not math.isfinite(value):
        return "—"
    return format(value, fmt)


class IterationsTableWidget(QWidget):
    """
    Обгортка над QTableWidget для траси ітерацій.

    Колонки:
        0: k                 – номер ітерації
        1: M                 – оцінка константи Ліпшиця
        2: max R             – максимальна характеристика
        3: [y_begin, y_end]  – обраний відрізок до поділу
        4: yₙ                – нова точка (або причина зупинки)
    """

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._build_ui()

    # ------------------------------------------------------------------
    # Побудова UI
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(MARGIN, MARGIN, MARGIN, MARGIN)
        root.setSpacing(SPACING)

        header_row = QHBoxLayout()
        header_row.setContentsMargins(0, 0, 0, 0)
        header_row.setSpacing(SPACING)

        title = QLabel("Ітерації пошуку", self)
        title.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter)

        self.subtitle = QLabel("k, M, max R, обраний відрізок і нова точка yₙ", self)
        self.subtitle.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        self.subtitle.setStyleSheet(
            f"color: {PALETTE.text_muted}; font-size: 9pt;"
        )

        header_row.addWidget(title)
        header_row.addStretch(1)
        header_row.addWidget(self.subtitle)

        root.addLayout(header_row)

        self.table = QTableWidget(self)
        self.table.setColumnCount(5)
        self.table.setHorizontalHeaderLabels(["k", "M", "max R", "[y_begin, y_end]", "yₙ"])

        apply_table_style(self.table)

        h_header = self.table.horizontalHeader()
        h_header.setSectionResizeMode(0, QHeaderView.ResizeMode.ResizeToContents)  # k
        h_header.setSectionResizeMode(1, QHeaderView.ResizeMode.ResizeToContents)  # M
        h_header.setSectionResizeMode(2, QHeaderView.ResizeMode.ResizeToContents)  # R
        h_header.setSectionResizeMode(3, QHeaderView.ResizeMode.Stretch)          # відрізок
        h_header.setSectionResizeMode(4, QHeaderView.ResizeMode.Stretch)          # yₙ

        self.table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table.verticalHeader().setDefaultSectionSize(22)

        root.addWidget(self.table)

    # ------------------------------------------------------------------
    # Публічне API
    # ------------------------------------------------------------------

    def clear_table(self) -> None:
        """Очистити всі рядки таблиці."""
        self.table.setRowCount(0)

    def add_iteration(self, iteration: IterationResult) -> None:
        """
        Додати один рядок у таблицю за IterationResult.
        """
        row = self.table.rowCount()
        self.table.insertRow(row)

        def _item(text: Any, align: Qt.AlignmentFlag) -> QTableWidgetItem:
            it = QTableWidgetItem(str(text))
            it.setFlags(it.flags() & ~Qt.ItemFlag.ItemIsEditable)
            it.setTextAlignment(align | Qt.AlignmentFlag.AlignVCenter)
            return it

        begin, end = iteration.segment
        if math.isfinite(begin) and math.isfinite(end):
            segment_text = f"[{begin:.6f}, {end:.6f}]"
        else:
            segment_text = "—"

        stopped_by = (iteration.meta or {}).get("stopped_by")
        if stopped_by is not None and iteration.f is not None and math.isfinite(iteration.f):
            point_text = f"зупинка ({stopped_by}), f = {iteration.f:.6e}"
        elif stopped_by is not None:
            point_text = f"зупинка ({stopped_by})"
        else:
            point_text = _fmt(iteration.x, ".8f")

        self.table.setItem(row, 0, _item(iteration.index, Qt.AlignmentFlag.AlignHCenter))
        self.table.setItem(row, 1, _item(_fmt(iteration.M, ".4e"), Qt.AlignmentFlag.AlignRight))
        self.table.setItem(row, 2, _item(_fmt(iteration.R, ".4e"), Qt.AlignmentFlag.AlignRight))
        self.table.setItem(row, 3, _item(segment_text, Qt.AlignmentFlag.AlignRight))
        self.table.setItem(row, 4, _item(point_text, Qt.AlignmentFlag.AlignRight))

    def populate(
        self,
        iterations: Iterable[IterationResult],
        limit: int = DEFAULT_ROW_LIMIT,
    ) -> None:
        """
        Повністю перезаповнити таблицю трасою ітерацій.

        Показуються перші limit ітерацій та остання (рядок зупинки).
        """
        self.clear_table()
        rows = list(iterations)

        shown = rows if len(rows) <= limit else rows[: limit - 1] + rows[-1:]
        for it in shown:
            self.add_iteration(it)

        if len(rows) > limit:
            self.subtitle.setText(f"показано {limit} з {len(rows)} ітерацій")
        else:
            self.subtitle.setText("k, M, max R, обраний відрізок і нова точка yₙ")
