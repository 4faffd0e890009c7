"""Command-line interface for sakpilot."""
