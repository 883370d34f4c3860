"""Command-line interface for Canarinho."""

from .main import cli, main

__all__ = ["cli", "main"]
