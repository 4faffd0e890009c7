"""Object storage integration - site API client and S3 listing."""

from sakpilot.integrations.object_storage.client import (
    ObjectStorageClient,
    ObjectStorageCredentials,
    S3Lister,
    clamp_max_keys,
)

__all__ = ["ObjectStorageClient", "ObjectStorageCredentials", "S3Lister", "clamp_max_keys"]
