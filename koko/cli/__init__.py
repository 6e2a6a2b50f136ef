"""Command-line interface for koko."""
