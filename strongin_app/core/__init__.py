"""Обчислювальне ядро: метод Стронгіна, стратегії виконання, канали зв'язку."""
