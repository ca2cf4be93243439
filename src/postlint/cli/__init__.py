"""A module for postlint's command-line interface."""

from postlint.cli.main import app

__all__ = ["app", "main"]


def main() -> None:
    """Entry point for the CLI."""
    app()
