"""AppRun dedicated service layer."""

from sakpilot.services.apprun.manager import AppRunManager

__all__ = ["AppRunManager"]
