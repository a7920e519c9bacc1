"""Telegram bot package wrappers."""

from .core import ExpenseBot
from .keyboards import KeyboardFactory
from .parsers import parse_amount, parse_month, validate_description
from .visualization import VisualizationService

__all__ = [
    "ExpenseBot",
    "KeyboardFactory",
    "VisualizationService",
    "parse_amount",
    "parse_month",
    "validate_description",
]
