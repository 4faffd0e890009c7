"""sakpilot - profile-scoped gateway over the Sakura Cloud APIs."""

from sakpilot.__version__ import __version__

__all__ = ["__version__"]
