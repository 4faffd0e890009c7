"""Version information for sakpilot."""

__version__ = "0.4.0"
