"""fitplan: goal-driven calorie, macro and training-volume planning."""

__version__ = "0.3.0"
