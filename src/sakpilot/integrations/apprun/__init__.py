"""AppRun dedicated integration - HTTP client and display models."""

from sakpilot.integrations.apprun.client import MAX_ITEMS, AppRunClient, ItemBounds, parse_uuid

__all__ = ["MAX_ITEMS", "AppRunClient", "ItemBounds", "parse_uuid"]
