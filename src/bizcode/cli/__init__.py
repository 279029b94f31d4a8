"""Command-line interface for bizcode."""
