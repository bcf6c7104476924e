"""Public API for the vum terminal output package."""

from .prompts import ask, confirm
from .report import ProgressPrinter

__all__ = ["ProgressPrinter", "ask", "confirm"]
