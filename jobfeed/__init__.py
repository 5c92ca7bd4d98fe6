"""Personal job tracker with a multi-board job feed."""

__version__ = "0.3.0"
