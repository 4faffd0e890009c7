"""Logging configuration for sakpilot."""

from sakpilot.logging.config import configure_logging, get_logger, token_prefix

__all__ = ["configure_logging", "get_logger", "token_prefix"]
