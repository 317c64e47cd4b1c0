"""
app.py

Контролер для GUI-застосунку глобальної мінімізації методом Стронгіна.

Зв'язує:
    - ui.MainWindow (PyQt6)
    - core.strongin (run_strongin / run_strongin_group)
    - core.functions.FUNCTIONS

Функціонал:
    - реагує на сигнал MainWindow.optimizationRequested(OptimizationConfig);
    - запускає метод послідовно або на групі воркерів (потоки / процеси);
    - показує трасу координатора: таблиця ітерацій, графіки, статистика;
    - у режимі "Порівняти всі режими" запускає послідовний варіант та
      розподілений на 1, 2, 4 воркерах і показує зведену таблицю.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, Tuple

from PyQt6.QtWidgets import QApplication

from strongin_app.core.engine import OptimizationRunResult
from strongin_app.core.functions import FUNCTIONS
from strongin_app.core.results_summary import ResultsSummary, RunRecord
from strongin_app.core.strategies import ExecutionMode, SequentialStrategy
from strongin_app.core.strongin import run_strongin, run_strongin_group
from strongin_app.ui.control_panel import OptimizationConfig
from strongin_app.ui.dialogs import show_error, show_summary
from strongin_app.ui.main_window import MainWindow
from strongin_app.ui.styles import apply_app_style

logger = logging.getLogger(__name__)

# Кількості воркерів для режиму "Порівняти всі режими"
COMPARE_WORKER_COUNTS: Tuple[int, ...] = (1, 2, 4)


# ---------------------------------------------------------------------------
# Контролер
# ---------------------------------------------------------------------------

class OptimizationController:
    """
    Зв'язує MainWindow та запуск методу Стронгіна.

    Схема:
        GUI (MainWindow) --[OptimizationConfig]--> Controller
        Controller -- run_strongin / run_strongin_group
        Після завершення: MainWindow.show_run(...) з трасою координатора
    """

    def __init__(self, window: MainWindow) -> None:
        self.window = window
        self.window.optimizationRequested.connect(self.on_optimization_requested)

    # ------------------------------------------------------------------
    # Валідація вхідних даних
    # ------------------------------------------------------------------

    def _fail(self, title: str, message: str) -> None:
        show_error(self.window, message, title=title)
        self.window.statusBar().showMessage(f"Помилка: {title}")

    def _validate_config(self, cfg: OptimizationConfig) -> bool:
        """
        Перевірити введені дані перед запуском.

        Якщо щось не так — показує діалог помилки та повертає False.
        """
        if cfg.function_key not in FUNCTIONS:
            self._fail("Функція не знайдена", f"Функція з ключем '{cfg.function_key}' не знайдена.")
            return False

        if not cfg.a < cfg.b:
            self._fail("Некоректний відрізок", "Ліва межа a повинна бути меншою за праву межу b.")
            return False

        if cfg.eps <= 0.0:
            self._fail("Некоректне значення eps", "Точність eps повинна бути додатною.")
            return False

        if cfg.max_iter <= 0:
            self._fail("Некоректне значення max_iter", "Максимальна кількість ітерацій повинна бути додатною.")
            return False

        if cfg.workers <= 0:
            self._fail("Некоректна кількість воркерів", "Кількість воркерів повинна бути додатною.")
            return False

        return True

    # ------------------------------------------------------------------
    # Запуски
    # ------------------------------------------------------------------

    def _run(self, cfg: OptimizationConfig, mode: str, workers: int) -> RunRecord:
        """
        Один запуск у заданому режимі; повертає запис для зведення.
        """
        tf = FUNCTIONS[cfg.function_key]

        if mode == ExecutionMode.SEQUENTIAL.value:
            result = run_strongin(
                tf.func, cfg.a, cfg.b, cfg.eps,
                strategy=SequentialStrategy(),
                max_iter=cfg.max_iter,
            )
            return RunRecord(mode=mode, workers=1, result=result)

        result, f_stars = run_strongin_group(
            tf.func, cfg.a, cfg.b, cfg.eps,
            workers=workers,
            backend=cfg.backend,
            max_iter=cfg.max_iter,
        )
        logger.debug("f* за рангами: %s", f_stars)
        return RunRecord(mode=mode, workers=workers, result=result, backend=cfg.backend)

    def on_optimization_requested(self, cfg: OptimizationConfig) -> None:
        """
        Головний вхід: натиснута кнопка "Запустити" в GUI.
        """
        if not self._validate_config(cfg):
            return

        if cfg.run_all_modes:
            self._run_all_modes(cfg)
        else:
            self._run_single(cfg)

    def _run_single(self, cfg: OptimizationConfig) -> None:
        try:
            record = self._run(cfg, cfg.mode, cfg.workers)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Запуск %s завершився помилкою", cfg.function_key)
            self._fail("Помилка під час оптимізації", f"Під час пошуку виникла помилка:\n\n{exc}")
            self.window.update_run_stats(None)
            return

        self._show(cfg, record.result)

    def _run_all_modes(self, cfg: OptimizationConfig) -> None:
        summary = ResultsSummary()
        modes = [(ExecutionMode.SEQUENTIAL.value, 1)] + [
            (ExecutionMode.PARALLEL.value, n) for n in COMPARE_WORKER_COUNTS
        ]

        shown: Optional[OptimizationRunResult] = None
        for mode, workers in modes:
            try:
                record = self._run(cfg, mode, workers)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Режим %s (%d воркерів) завершився помилкою: %s", mode, workers, exc)
                continue
            summary.add_run(record)
            if shown is None:
                shown = record.result

        if shown is None:
            self._fail(
                "Немає даних для зведеної таблиці",
                "Жоден із запусків не завершився коректно. Перевірте відрізок та eps.",
            )
            self.window.update_run_stats(None)
            return

        # У головному вікні показується траса послідовного запуску
        self._show(cfg, shown)
        show_summary(self.window, summary)

        best = summary.best_by_f()
        if best is not None:
            self.window.statusBar().showMessage(
                f"Найменше f*: {best.label}, f* = {best.result.f_star:.8e}"
            )

    def _show(self, cfg: OptimizationConfig, result: OptimizationRunResult) -> None:
        tf = FUNCTIONS[cfg.function_key]
        self.window.show_run(tf.func, cfg.a, cfg.b, result)
        self.window.statusBar().showMessage(
            f"{result.method_name}: зупинка {result.stopped_by}, ітерацій {result.n_iter}, "
            f"f* = {result.f_star:.8e}, x* = {result.x_star:.8f}"
        )


# ---------------------------------------------------------------------------
# Точка входу
# ---------------------------------------------------------------------------

def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    apply_app_style(app)

    window = MainWindow()
    _controller = OptimizationController(window)

    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
