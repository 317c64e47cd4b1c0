"""
Головне вікно застосунку:
    - зліва: панель керування (функція, відрізок, режим виконання, eps);
    - справа: карусель графіків над таблицею ітерацій.
"""

from __future__ import annotations

import math
from typing import List, Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QAction
from PyQt6.QtWidgets import (
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QStatusBar,
    QLabel,
    QSplitter,
)

from strongin_app.core.engine import OptimizationRunResult
from strongin_app.core.functions import ScalarFunction
from strongin_app.core.iteration_result import IterationResult
from .control_panel import ControlPanelWidget, OptimizationConfig
from .table_view import IterationsTableWidget
from .plot_view import PlotView
from .dialogs import show_about
from .styles import apply_label_muted, MARGIN, SPACING


class MainWindow(QMainWindow):
    """
    Головне вікно GUI.

    Сигнали:
        optimizationRequested(OptimizationConfig) – передається контролеру.
    """

    optimizationRequested = pyqtSignal(OptimizationConfig)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)

        self.setWindowTitle("Метод Стронгіна: глобальний пошук мінімуму")
        self.resize(1360, 860)

        self._create_actions()
        self._create_menu()
        self._create_status_bar()
        self._create_content()
        self._connect_signals()

    # ----------------------------------------------------------------------
    # Меню та дії
    # ----------------------------------------------------------------------
    def _create_actions(self) -> None:
        self.action_exit = QAction("Вихід", self, shortcut="Ctrl+Q")
        self.action_about = QAction("Про програму", self)

    def _create_menu(self) -> None:
        menu = self.menuBar()
        menu.addMenu("Файл").addAction(self.action_exit)
        menu.addMenu("Довідка").addAction(self.action_about)

    def _create_status_bar(self) -> None:
        status = QStatusBar(self)
        self.setStatusBar(status)
        status.showMessage("Готово")

    # ----------------------------------------------------------------------
    # Компоновка
    # ----------------------------------------------------------------------
    def _create_content(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)

        root = QHBoxLayout(central)
        root.setContentsMargins(MARGIN, MARGIN, MARGIN, MARGIN)
        root.setSpacing(SPACING)

        root.addWidget(self._build_left_panel(), stretch=2)
        root.addWidget(self._build_right_panel(), stretch=5)

        self.update_run_stats(None)

    def _build_left_panel(self) -> QWidget:
        widget = QWidget(self)
        widget.setMinimumWidth(360)

        layout = QVBoxLayout(widget)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(SPACING)

        self.control_panel = ControlPanelWidget(widget)
        layout.addWidget(self.control_panel)
        layout.addStretch()

        return widget

    def _build_right_panel(self) -> QWidget:
        widget = QWidget(self)
        widget.setMinimumWidth(760)

        layout = QVBoxLayout(widget)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(SPACING)

        splitter = QSplitter(Qt.Orientation.Vertical, widget)
        splitter.setHandleWidth(6)

        self.plot_view = PlotView(widget)
        splitter.addWidget(self.plot_view)

        bottom = QWidget(widget)
        bottom_layout = QVBoxLayout(bottom)
        bottom_layout.setContentsMargins(0, 0, 0, 0)
        bottom_layout.setSpacing(SPACING)

        self.iterations_table = IterationsTableWidget(bottom)
        bottom_layout.addWidget(self.iterations_table)
        bottom_layout.addLayout(self._build_stats_row())

        splitter.addWidget(bottom)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 2)

        layout.addWidget(splitter)

        return widget

    def _build_stats_row(self) -> QHBoxLayout:
        row = QHBoxLayout()
        row.setContentsMargins(0, 0, 0, 0)
        row.setSpacing(SPACING)

        self.label_iters = QLabel()
        self.label_func_evals = QLabel()
        self.label_segments = QLabel()
        self.label_f_star = QLabel()

        for lbl in (self.label_iters, self.label_func_evals, self.label_segments, self.label_f_star):
            apply_label_muted(lbl)
            row.addWidget(lbl)

        row.addStretch()
        return row

    # ------------------------------------------------------------------
    # Сигнали
    # ------------------------------------------------------------------
    def _connect_signals(self) -> None:
        self.action_exit.triggered.connect(self.close)
        self.action_about.triggered.connect(lambda: show_about(self))

        self.control_panel.exitRequested.connect(self.close)
        self.control_panel.clearRequested.connect(self._on_clear_requested)
        self.control_panel.runRequested.connect(self._on_run_requested)

    def _on_run_requested(self, cfg: OptimizationConfig) -> None:
        self.clear_results()
        self.statusBar().showMessage(
            f"Запуск: {cfg.function_key} на [{cfg.a}, {cfg.b}], eps={cfg.eps}, "
            f"режим={cfg.mode}, воркерів={cfg.workers}"
        )
        self.optimizationRequested.emit(cfg)

    def _on_clear_requested(self) -> None:
        self.clear_results()
        self.statusBar().showMessage("Очищено")

    # ------------------------------------------------------------------
    # Публічне API для контролера
    # ------------------------------------------------------------------
    def clear_results(self) -> None:
        """
        Очистити таблицю, скинути графіки в плейсхолдер і статистику.
        """
        self.iterations_table.clear_table()
        self.plot_view.show_placeholder()
        self.update_run_stats(None)

    def show_run(self, func: ScalarFunction, a: float, b: float, result: OptimizationRunResult) -> None:
        """
        Показати трасу запуску: таблиця, три графіки, статистика.
        """
        iterations: List[IterationResult] = result.iterations
        self.iterations_table.populate(iterations)
        self.plot_view.plot_fk(func, iterations)
        self.plot_view.plot_lengths(iterations)
        self.plot_view.plot_curve(func, a, b, iterations, result.x_star, result.f_star)
        self.update_run_stats(result)

    def update_run_stats(self, result: Optional[OptimizationRunResult]) -> None:
        """
        Оновити підписи під таблицею.
        """
        if result is None:
            self.label_iters.setText("ітерацій: –")
            self.label_func_evals.setText("виклики f: –")
            self.label_segments.setText("відрізків: –")
            self.label_f_star.setText("f*: –")
            return

        self.label_iters.setText(f"ітерацій: {result.n_iter}")
        self.label_func_evals.setText(f"виклики f: {result.func_evals}")
        self.label_segments.setText(f"відрізків: {result.n_segments}")
        self.label_f_star.setText(
            "f*: NaN" if math.isnan(result.f_star) else f"f*: {result.f_star:.8e}"
        )
