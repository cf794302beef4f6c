"""Housing affordability: Case-Shiller home prices vs. BLS weekly earnings."""

__version__ = "0.1.0"
