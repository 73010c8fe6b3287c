"""Command-line interface for Time Manager."""
