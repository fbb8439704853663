"""CLI — Command-line entry point."""
