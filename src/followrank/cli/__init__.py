"""Command line interface for followrank."""
