"""
Глобальна мінімізація одномірних функцій методом Стронгіна
(послідовно або на групі воркерів з обміном повідомленнями).
"""

__version__ = "1.0.0"

from .core.strongin import minimize, minimize_distributed  # noqa: E402

__all__ = ["minimize", "minimize_distributed", "__version__"]
