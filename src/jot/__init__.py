"""Jot - local markdown comment threads for web pages."""

__version__ = "1.0.0"
