"""Object storage clients.

Two credential domains meet here:

- The site/account API (sites and per-site access keys) authenticates with the
  profile's API token pair, held by ``ObjectStorageCredentials``.
- Bucket and object listing speaks S3 against a site endpoint and
  authenticates with a per-site access key ID and its secret key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import boto3
import httpx
import structlog
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError

from sakpilot.core.exceptions import (
    BackendAuthError,
    BackendConnectionError,
    BackendError,
    BackendNotFoundError,
)
from sakpilot.core.zones import BackendKind
from sakpilot.integrations.base import (
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT,
    BaseBackendClient,
    path_segment,
)

logger = structlog.get_logger()

DEFAULT_BASE_URL = "https://secure.sakura.ad.jp/cloud/zone/is1a/api/objectstorage/1.0"
S3_REGION = "jp-north-1"
MAX_KEYS_LIMIT = 1000


@dataclass(frozen=True)
class ObjectStorageCredentials:
    """API token pair for the site/account API."""

    token: str
    secret: str = field(repr=False)


def clamp_max_keys(max_keys: int | None) -> int:
    """Clamp a page size into 1..1000; None means 1000."""
    if max_keys is None:
        return MAX_KEYS_LIMIT
    return max(1, min(MAX_KEYS_LIMIT, max_keys))


class ObjectStorageClient(BaseBackendClient):
    """Client for the object storage site and account API."""

    backend_kind = BackendKind.OBJECT_STORAGE

    def __init__(
        self,
        credentials: ObjectStorageCredentials,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
    ) -> None:
        super().__init__(base_url, timeout=timeout, retries=retries)
        self._credentials = credentials

    def _build_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            auth=(self._credentials.token, self._credentials.secret),
            headers={"Accept": "application/json"},
        )

    def list_sites(self) -> list[dict[str, Any]]:
        data = self.get("/fed/v1/clusters") or {}
        return list(data.get("data") or [])

    def list_access_keys(self, site_id: str) -> list[dict[str, Any]]:
        site_id = path_segment("site id", site_id)
        data = self.get(f"/{site_id}/v2/account/keys") or {}
        return list(data.get("data") or [])


class S3Lister:
    """Bucket and object listing over the S3 API of one site."""

    def __init__(
        self,
        endpoint: str,
        access_key_id: str,
        secret_access_key: str,
        timeout: int = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
    ) -> None:
        """Initialize the lister.

        Args:
            endpoint: Site S3 endpoint, with or without scheme.
            access_key_id: Site access key ID.
            secret_access_key: Secret key paired with the access key.
            timeout: Connect and read timeout in seconds.
            retries: Maximum attempts for transient failures.
        """
        if not endpoint.startswith(("http://", "https://")):
            endpoint = f"https://{endpoint}"
        self.endpoint = endpoint.rstrip("/")
        self._log = logger.bind(backend=BackendKind.OBJECT_STORAGE.value, endpoint=self.endpoint)
        self._s3 = boto3.client(
            "s3",
            endpoint_url=self.endpoint,
            region_name=S3_REGION,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            config=BotoConfig(
                s3={"addressing_style": "path"},
                connect_timeout=timeout,
                read_timeout=timeout,
                retries={"max_attempts": max(retries, 1), "mode": "standard"},
            ),
        )

    def _translate(self, e: Exception, operation: str) -> BackendError:
        kind = BackendKind.OBJECT_STORAGE.value
        if isinstance(e, EndpointConnectionError):
            self._log.error("connection_failed", operation=operation, error=str(e))
            return BackendConnectionError(
                f"failed to connect: {e}", kind, endpoint=self.endpoint, original_error=e
            )
        if isinstance(e, ClientError):
            status = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            message = e.response.get("Error", {}).get("Message") or str(e)
            self._log.warning("request_failed", operation=operation, status=status)
            if status in (401, 403):
                return BackendAuthError(message, kind, status, self.endpoint)
            if status == 404:
                return BackendNotFoundError(message, kind, status, self.endpoint)
            return BackendError(message, kind, status, self.endpoint)
        self._log.error("request_failed", operation=operation, error=str(e))
        return BackendError(str(e), kind, endpoint=self.endpoint)

    def list_buckets(self) -> list[dict[str, Any]]:
        try:
            response = self._s3.list_buckets()
        except (ClientError, BotoCoreError) as e:
            raise self._translate(e, "list_buckets") from e
        return list(response.get("Buckets") or [])

    def list_objects(
        self,
        bucket: str,
        prefix: str = "",
        continuation_token: str = "",
        max_keys: int | None = None,
    ) -> dict[str, Any]:
        """List one level of a bucket, using "/" as delimiter.

        Returns:
            The raw ListObjectsV2 response.
        """
        params: dict[str, Any] = {
            "Bucket": bucket,
            "Delimiter": "/",
            "MaxKeys": clamp_max_keys(max_keys),
        }
        if prefix:
            params["Prefix"] = prefix
        if continuation_token:
            params["ContinuationToken"] = continuation_token
        self._log.debug("list_objects", bucket=bucket, prefix=prefix)
        try:
            return dict(self._s3.list_objects_v2(**params))
        except (ClientError, BotoCoreError) as e:
            raise self._translate(e, "list_objects") from e
