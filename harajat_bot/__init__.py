"""Harajat Bot: a Telegram assistant for tracking daily expenses."""

__version__ = "1.0.0"
