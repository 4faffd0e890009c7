"""AppRun shared service layer."""

from sakpilot.services.apprun_shared.manager import AppRunSharedManager

__all__ = ["AppRunSharedManager"]
