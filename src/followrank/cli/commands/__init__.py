"""CLI commands module for followrank."""

from followrank.cli.commands import rank

__all__ = ["rank"]
