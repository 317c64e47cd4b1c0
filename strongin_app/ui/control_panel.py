"""
control_panel.py

Панель керування для GUI:
    - вибір функції (з відрізком [a, b] за замовчуванням);
    - межі відрізка пошуку a, b;
    - eps (точність за довжиною відрізка);
    - max_iter;
    - режим виконання (послідовно / розподілено), кількість воркерів, backend;
    - опція "Порівняти всі режими";
    - кнопки: Запустити, Очистити, Вихід.

Видає назовні:
    - сигнал runRequested(OptimizationConfig)
    - сигнал clearRequested()
    - сигнал exitRequested()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QGroupBox,
    QComboBox,
    QLabel,
    QPushButton,
    QSpinBox,
    QDoubleSpinBox,
    QCheckBox,
)

from strongin_app.core.engine import MAX_ITERATIONS
from strongin_app.core.functions import FUNCTIONS
from strongin_app.core.strongin import BACKEND_PROCESSES, BACKEND_THREADS
from strongin_app.core.strategies import ExecutionMode

from .styles import (
    MARGIN,
    SPACING,
    apply_groupbox_flat_style,
    apply_button_secondary,
)


# ---------------------------------------------------------------------------
# Конфігурація запуску оптимізації
# ---------------------------------------------------------------------------

@dataclass
class OptimizationConfig:
    function_key: str
    a: float
    b: float
    eps: float
    max_iter: int
    mode: str = ExecutionMode.SEQUENTIAL.value
    workers: int = 1
    # "threads" або "processes"
    backend: str = BACKEND_THREADS
    run_all_modes: bool = False


# ---------------------------------------------------------------------------
# Віджет панелі керування
# ---------------------------------------------------------------------------

class ControlPanelWidget(QWidget):
    """
    Ліва панель керування оптимізацією.

    Сигнали:
        runRequested(OptimizationConfig)  – натиснуто "Запустити"
        clearRequested()                  – натиснуто "Очистити"
        exitRequested()                   – натиснуто "Вихід"
    """

    runRequested = pyqtSignal(OptimizationConfig)
    clearRequested = pyqtSignal()
    exitRequested = pyqtSignal()

    _MODE_KEYS = [ExecutionMode.SEQUENTIAL.value, ExecutionMode.PARALLEL.value]
    _BACKEND_KEYS = [BACKEND_THREADS, BACKEND_PROCESSES]

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._function_keys = list(FUNCTIONS.keys())
        self._build_ui()
        self._connect_signals()
        self._on_function_changed(0)
        self._on_mode_changed(0)

    # ------------------------------------------------------------------
    # Побудова UI
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        self.setObjectName("controlPanel")

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(MARGIN, MARGIN, MARGIN, MARGIN)
        main_layout.setSpacing(SPACING)

        # ------------------------------------------------------------------
        # Блок 1. Цільова функція та відрізок пошуку
        # ------------------------------------------------------------------
        self.problem_group = QGroupBox("Цільова функція та відрізок", self)
        apply_groupbox_flat_style(self.problem_group)

        problem_layout = QVBoxLayout(self.problem_group)
        problem_layout.setContentsMargins(MARGIN, MARGIN, MARGIN, MARGIN)
        problem_layout.setSpacing(SPACING)

        lbl_func = QLabel("Функція:", self.problem_group)
        lbl_func.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter)
        self.combo_function = QComboBox(self.problem_group)
        self.combo_function.addItems([FUNCTIONS[key].name for key in self._function_keys])

        ab_row = QHBoxLayout()
        ab_row.setSpacing(SPACING)

        self.input_a = QDoubleSpinBox(self.problem_group)
        self.input_a.setRange(-1e6, 1e6)
        self.input_a.setDecimals(6)

        self.input_b = QDoubleSpinBox(self.problem_group)
        self.input_b.setRange(-1e6, 1e6)
        self.input_b.setDecimals(6)

        ab_row.addWidget(QLabel("a:", self.problem_group))
        ab_row.addWidget(self.input_a)
        ab_row.addSpacing(SPACING)
        ab_row.addWidget(QLabel("b:", self.problem_group))
        ab_row.addWidget(self.input_b)

        problem_layout.addWidget(lbl_func)
        problem_layout.addWidget(self.combo_function)
        problem_layout.addLayout(ab_row)

        main_layout.addWidget(self.problem_group)

        # ------------------------------------------------------------------
        # Блок 2. Режим виконання
        # ------------------------------------------------------------------
        self.mode_group = QGroupBox("Режим виконання", self)
        apply_groupbox_flat_style(self.mode_group)

        mode_layout = QVBoxLayout(self.mode_group)
        mode_layout.setContentsMargins(MARGIN, MARGIN, MARGIN, MARGIN)
        mode_layout.setSpacing(SPACING)

        self.combo_mode = QComboBox(self.mode_group)
        self.combo_mode.addItems(["Послідовно (один воркер)", "Розподілено (N воркерів)"])

        workers_row = QHBoxLayout()
        workers_row.setSpacing(SPACING)

        self.input_workers = QSpinBox(self.mode_group)
        self.input_workers.setRange(1, 64)
        self.input_workers.setValue(4)

        self.combo_backend = QComboBox(self.mode_group)
        self.combo_backend.addItems(["Потоки", "Процеси"])

        workers_row.addWidget(QLabel("Воркерів:", self.mode_group))
        workers_row.addWidget(self.input_workers)
        workers_row.addSpacing(SPACING)
        workers_row.addWidget(self.combo_backend, stretch=1)

        self.check_run_all = QCheckBox(
            "Порівняти всі режими (послідовно, 1, 2, 4 воркери)",
            self.mode_group,
        )

        mode_layout.addWidget(QLabel("Режим:", self.mode_group))
        mode_layout.addWidget(self.combo_mode)
        mode_layout.addLayout(workers_row)
        mode_layout.addWidget(self.check_run_all)

        main_layout.addWidget(self.mode_group)

        # ------------------------------------------------------------------
        # Блок 3. Параметри точності та ітерацій
        # ------------------------------------------------------------------
        self.params_group = QGroupBox("Параметри точності та ітерацій", self)
        apply_groupbox_flat_style(self.params_group)

        params_layout = QVBoxLayout(self.params_group)
        params_layout.setContentsMargins(MARGIN, MARGIN, MARGIN, MARGIN)
        params_layout.setSpacing(SPACING)

        params_row = QHBoxLayout()
        params_row.setSpacing(SPACING)

        self.input_eps = QDoubleSpinBox(self.params_group)
        self.input_eps.setRange(1e-12, 1e3)
        self.input_eps.setDecimals(12)
        self.input_eps.setValue(1e-4)

        self.input_max_iter = QSpinBox(self.params_group)
        self.input_max_iter.setRange(1, MAX_ITERATIONS)
        self.input_max_iter.setValue(MAX_ITERATIONS)

        params_row.addWidget(QLabel("eps:", self.params_group))
        params_row.addWidget(self.input_eps)
        params_row.addSpacing(SPACING * 2)
        params_row.addWidget(QLabel("max_iter:", self.params_group))
        params_row.addWidget(self.input_max_iter)
        params_row.addStretch(1)

        params_layout.addLayout(params_row)

        main_layout.addWidget(self.params_group)

        # ------------------------------------------------------------------
        # Нижній ряд кнопок
        # ------------------------------------------------------------------
        buttons_row = QHBoxLayout()
        buttons_row.setContentsMargins(0, SPACING, 0, 0)
        buttons_row.setSpacing(SPACING)

        self.button_run = QPushButton("Запустити", self)
        self.button_clear = QPushButton("Очистити", self)
        self.button_exit = QPushButton("Вихід", self)

        apply_button_secondary(self.button_clear)
        apply_button_secondary(self.button_exit)

        buttons_row.addWidget(self.button_run)
        buttons_row.addWidget(self.button_clear)
        buttons_row.addStretch(1)
        buttons_row.addWidget(self.button_exit)

        main_layout.addLayout(buttons_row)
        main_layout.addStretch(1)

    # ------------------------------------------------------------------
    # Сигнали
    # ------------------------------------------------------------------

    def _connect_signals(self) -> None:
        self.combo_function.currentIndexChanged.connect(self._on_function_changed)
        self.combo_mode.currentIndexChanged.connect(self._on_mode_changed)
        self.button_run.clicked.connect(self._on_run_clicked)
        self.button_clear.clicked.connect(self._on_clear_clicked)
        self.button_exit.clicked.connect(self._on_exit_clicked)

    def _on_function_changed(self, index: int) -> None:
        # Підставляємо відрізок за замовчуванням для обраної функції
        tf = FUNCTIONS[self._function_keys[index]]
        self.input_a.setValue(tf.a)
        self.input_b.setValue(tf.b)

    def _on_mode_changed(self, index: int) -> None:
        parallel = self._MODE_KEYS[index] == ExecutionMode.PARALLEL.value
        self.input_workers.setEnabled(parallel)
        self.combo_backend.setEnabled(parallel)

    # ------------------------------------------------------------------
    # Зібрати конфігурацію
    # ------------------------------------------------------------------

    def build_config(self) -> OptimizationConfig:
        """
        Зібрати OptimizationConfig з поточного стану контролів.
        """
        mode = self._MODE_KEYS[self.combo_mode.currentIndex()]
        workers = int(self.input_workers.value()) if mode == ExecutionMode.PARALLEL.value else 1

        return OptimizationConfig(
            function_key=self._function_keys[self.combo_function.currentIndex()],
            a=float(self.input_a.value()),
            b=float(self.input_b.value()),
            eps=float(self.input_eps.value()),
            max_iter=int(self.input_max_iter.value()),
            mode=mode,
            workers=workers,
            backend=self._BACKEND_KEYS[self.combo_backend.currentIndex()],
            run_all_modes=self.check_run_all.isChecked(),
        )

    # ------------------------------------------------------------------
    # Обробники кнопок
    # ------------------------------------------------------------------

    def _on_run_clicked(self) -> None:
        cfg = self.build_config()
        self.runRequested.emit(cfg)

    def _on_clear_clicked(self) -> None:
        self.clearRequested.emit()

    def _on_exit_clicked(self) -> None:
        self.exitRequested.emit()
