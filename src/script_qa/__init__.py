"""Sanitize script-like text files: detect and normalize hidden characters and layout defects."""

__version__ = "0.1.0"
