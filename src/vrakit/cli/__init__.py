"""Command-line interface for vrakit."""

from vrakit.cli.main import build_parser, main

__all__ = ["build_parser", "main"]
