"""AppRun shared integration - HTTP client and display models."""

from sakpilot.integrations.apprun_shared.client import AppRunAuth, AppRunSharedClient

__all__ = ["AppRunAuth", "AppRunSharedClient"]
