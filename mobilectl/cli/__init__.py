"""Command line interface for mobilectl"""

from .main import cli, main

__all__ = ["cli", "main"]
