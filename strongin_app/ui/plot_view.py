"""
Віджет для відображення графіків процесу глобального пошуку в компактному темному стилі.

Показує один графік за раз у вигляді каруселі:
    - крива f(x) на [a, b] + точки випробувань + знайдений мінімум;
    - значення f у нових точках yₙ по ітераціях;
    - довжина обраного відрізка по ітераціях (логарифмічна шкала).

Публічні методи:
    show_placeholder(), plot_curve(...), plot_fk(...), plot_lengths(...)
"""

from __future__ import annotations

import math
from typing import Dict, List, Optional

import numpy as np
from PyQt6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QPushButton,
    QLabel,
    QStackedWidget,
    QComboBox,
)

from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure

from strongin_app.core.functions import ScalarFunction
from strongin_app.core.iteration_result import IterationResult
from .styles import MARGIN, SPACING, apply_card_style, PALETTE

_CANVAS_BG = PALETTE.surface_alt
_ACCENT = PALETTE.accent
_TEXT = PALETTE.text_main
_MUTED = PALETTE.text_muted


class PlotPage:
    def __init__(self, figure: Figure, canvas: FigureCanvas, axes):
        self.figure = figure
        self.canvas = canvas
        self.axes = axes


def _trial_points(iterations: List[IterationResult]) -> np.ndarray:
    """Точки yₙ, додані до розбиття (NaN-рядки зупинки відкидаються)."""
    xs = np.array([it.x for it in iterations], dtype=float)
    return xs[np.isfinite(xs)]


class PlotView(QWidget):
    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("plotView")
        self.pages_order = ["curve", "fk", "lengths"]
        self.pages: Dict[str, PlotPage] = {}
        self._build_ui()

    # ------------------------------------------------------------------
    # UI
    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(MARGIN, MARGIN, MARGIN, MARGIN)
        layout.setSpacing(SPACING)

        apply_card_style(self)

        # Навігація між графіками
        nav = QHBoxLayout()
        nav.setSpacing(SPACING)
        nav.setContentsMargins(0, 0, 0, 0)

        nav.addWidget(QLabel("Графік:", self))

        self.combo_mode = QComboBox(self)
        self.combo_mode.addItems([
            "Крива f(x) та точки випробувань",
            "Значення f(yₙ) по ітераціях",
            "Довжина відрізка по ітераціях",
        ])
        self.combo_mode.currentIndexChanged.connect(self._on_combo_changed)
        nav.addWidget(self.combo_mode, stretch=1)

        self.btn_prev = QPushButton("◀")
        self.btn_next = QPushButton("▶")
        for btn in (self.btn_prev, self.btn_next):
            btn.setFixedWidth(34)
        self.btn_prev.clicked.connect(self._on_prev)
        self.btn_next.clicked.connect(self._on_next)

        nav.addWidget(self.btn_prev)
        nav.addWidget(self.btn_next)

        layout.addLayout(nav)

        # Стек полотен
        self.stacked = QStackedWidget(self)
        layout.addWidget(self.stacked, stretch=1)

        self._create_pages()
        self.show_placeholder()

    def _create_pages(self) -> None:
        for key in self.pages_order:
            self.pages[key] = self._create_page()
            self.stacked.addWidget(self.pages[key].canvas)

    def _create_page(self) -> PlotPage:
        figure = Figure(facecolor=_CANVAS_BG)
        ax = figure.add_subplot(111)
        canvas = FigureCanvas(figure)
        canvas.setStyleSheet("background-color: transparent;")
        return PlotPage(figure, canvas, ax)

    # ------------------------------------------------------------------
    # Навігація
    # ------------------------------------------------------------------
    def _on_combo_changed(self, index: int) -> None:
        self.stacked.setCurrentIndex(index)

    def _on_prev(self) -> None:
        idx = (self.stacked.currentIndex() - 1) % len(self.pages_order)
        self.stacked.setCurrentIndex(idx)
        self.combo_mode.setCurrentIndex(idx)

    def _on_next(self) -> None:
        idx = (self.stacked.currentIndex() + 1) % len(self.pages_order)
        self.stacked.setCurrentIndex(idx)
        self.combo_mode.setCurrentIndex(idx)

    def _set_page(self, key: str) -> None:
        idx = self.pages_order.index(key)
        self.stacked.setCurrentIndex(idx)
        self.combo_mode.setCurrentIndex(idx)

    # ------------------------------------------------------------------
    # Стилізація
    # ------------------------------------------------------------------
    def _style_axes(self, ax) -> None:
        ax.set_facecolor(_CANVAS_BG)
        ax.tick_params(colors=_MUTED, labelsize=9)
        for spine in ax.spines.values():
            spine.set_color(PALETTE.border)
            spine.set_linewidth(0.8)
        ax.grid(True, color=PALETTE.border, linestyle="--", linewidth=0.5, alpha=0.6)
        ax.title.set_color(_TEXT)
        ax.xaxis.label.set_color(_TEXT)
        ax.yaxis.label.set_color(_TEXT)

    def _redraw(self, key: str) -> None:
        page = self.pages[key]
        page.figure.tight_layout()
        page.canvas.draw_idle()

    def _message(self, key: str, msg: str) -> None:
        ax = self.pages[key].axes
        ax.clear()
        self._style_axes(ax)
        ax.text(0.5, 0.5, msg, ha="center", va="center", transform=ax.transAxes, color=_MUTED)
        self.pages[key].canvas.draw_idle()

    # ------------------------------------------------------------------
    # Публічні методи
    # ------------------------------------------------------------------
    def show_placeholder(self) -> None:
        messages = {
            "curve": "Крива f(x) з'явиться після запуску",
            "fk": "Графік f(yₙ) з'явиться після запуску",
            "lengths": "Графік довжин відрізків з'явиться після запуску",
        }
        for key, msg in messages.items():
            self._message(key, msg)

    def plot_curve(
        self,
        func: ScalarFunction,
        a: float,
        b: float,
        iterations: List[IterationResult],
        x_star: float = math.nan,
        f_star: float = math.nan,
        grid_size: int = 600,
    ) -> None:
        """
        Крива f(x) на [a, b], точки випробувань yₙ та знайдений мінімум.
        """
        ax = self.pages["curve"].axes
        ax.clear()
        self._style_axes(ax)

        grid = np.linspace(a, b, grid_size)
        values = np.array([func(float(x)) for x in grid], dtype=float)
        ax.plot(grid, values, linewidth=1.4, color=_TEXT, alpha=0.85)

        ys = _trial_points(iterations)
        if ys.size:
            f_ys = np.array([func(float(y)) for y in ys], dtype=float)
            ax.scatter(ys, f_ys, s=12, color=_ACCENT, alpha=0.8, zorder=4)

            # Риски точок уздовж осі x показують, де згущується розбиття
            y_min = float(np.nanmin(values)) if np.isfinite(values).any() else 0.0
            ax.plot(ys, np.full_like(ys, y_min), "|", color=_MUTED, markersize=8)

        if math.isfinite(x_star) and math.isfinite(f_star):
            ax.scatter([x_star], [f_star], color=PALETTE.accent_alt, marker="*", s=160, zorder=6)

        ax.set_xlabel("x")
        ax.set_ylabel("f(x)")
        ax.set_title("Крива f(x) та точки випробувань")

        self._redraw("curve")
        self._set_page("curve")

    def plot_fk(self, func: ScalarFunction, iterations: List[IterationResult]) -> None:
        """
        Значення f у новій точці yₙ кожної ітерації.
        """
        points = [(it.index, it.x) for it in iterations if math.isfinite(it.x)]
        if not points:
            self._message("fk", "Нових точок не додано")
            return

        ax = self.pages["fk"].axes
        ax.clear()
        self._style_axes(ax)

        ks = [k for k, _ in points]
        fs = [func(float(x)) for _, x in points]

        ax.plot(ks, fs, marker="o", linestyle="-", linewidth=1.0, markersize=3, color=_ACCENT)
        ax.set_xlabel("k (номер ітерації)")
        ax.set_ylabel("f(yₙ)")
        ax.set_title("Значення f у нових точках")

        self._redraw("fk")

    def plot_lengths(self, iterations: List[IterationResult]) -> None:
        """
        Довжина відрізка з максимальною характеристикою по ітераціях.
        """
        points = [
            (it.index, it.segment_length)
            for it in iterations
            if math.isfinite(it.segment_length) and it.segment_length > 0
        ]
        if not points:
            self._message("lengths", "Немає даних про відрізки")
            return

        ax = self.pages["lengths"].axes
        ax.clear()
        self._style_axes(ax)

        ks = [k for k, _ in points]
        lengths = [length for _, length in points]

        ax.plot(ks, lengths, linestyle="-", linewidth=1.2, color=_ACCENT)
        ax.set_yscale("log")
        ax.set_xlabel("k (номер ітерації)")
        ax.set_ylabel("y_end - y_begin")
        ax.set_title("Довжина обраного відрізка")

        self._redraw("lengths")
