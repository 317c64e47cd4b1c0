"""PyQt6-інтерфейс застосунку."""
