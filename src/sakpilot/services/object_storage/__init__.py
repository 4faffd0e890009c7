"""Object storage service layer."""

from sakpilot.services.object_storage.manager import ObjectStorageManager

__all__ = ["ObjectStorageManager"]
