"""Centralized CLI output utilities.

Usage:
    from sakpilot.cli.output import print_envelope

    print_envelope(gateway.call("list_zones"))
"""

from sakpilot.cli.output.envelope import console, err_console, print_envelope

__all__ = ["console", "err_console", "print_envelope"]
