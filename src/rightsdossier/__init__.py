"""Grounded citation retrieval for human-rights research."""

__version__ = "0.1.0"
