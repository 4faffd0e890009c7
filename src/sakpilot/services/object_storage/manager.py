"""Object storage manager."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sakpilot.core.exceptions import InvalidIdentifierError
from sakpilot.core.vault import SecretNamespace
from sakpilot.integrations.object_storage import ObjectStorageClient, S3Lister
from sakpilot.integrations.object_storage.models import AccessKey, Bucket, ListObjectsResult, Site
from sakpilot.services.base import BaseResourceManager

if TYPE_CHECKING:
    from sakpilot.core.dispatcher import ClientFactory
    from sakpilot.core.vault import SecretVault


class ObjectStorageManager(BaseResourceManager[ObjectStorageClient]):
    """Manager for object storage sites, access keys, buckets and objects.

    Sites and access keys are read with the profile's API token. Buckets and
    objects are read over S3 with a site access key; its secret key is taken
    from the call, or else from the vault entry saved for
    ``(site_id, access_key_id)``.
    """

    _family = "object_storage"
    _entity_name = "object_storage"

    def __init__(self, factory: ClientFactory, vault: SecretVault) -> None:
        super().__init__(factory)
        self._vault = vault

    def list_sites(self, profile_name: str) -> list[Site]:
        with self._session(profile_name) as (client, _):
            items = client.list_sites()
        return [Site.from_api(item) for item in items]

    def list_access_keys(self, profile_name: str, site_id: str) -> list[AccessKey]:
        with self._session(profile_name) as (client, _):
            items = client.list_access_keys(site_id)
        return [AccessKey.from_api(item, site_id) for item in items]

    def _site_endpoint(self, profile_name: str, site_id: str) -> str:
        for site in self.list_sites(profile_name):
            if site.id == site_id:
                return site.endpoint
        raise InvalidIdentifierError("site id", site_id, details="no such site")

    def _lister(
        self, profile_name: str, site_id: str, access_key_id: str, secret_key: str
    ) -> S3Lister:
        if not secret_key:
            secret_key = self._vault.get(SecretNamespace.OBJECT_STORAGE, site_id, access_key_id)
        settings = self._factory.settings
        return S3Lister(
            self._site_endpoint(profile_name, site_id),
            access_key_id,
            secret_key,
            timeout=settings.timeout,
            retries=settings.retries,
        )

    def list_buckets(
        self,
        profile_name: str,
        site_id: str,
        access_key_id: str,
        secret_key: str = "",
    ) -> list[Bucket]:
        """List the buckets visible to an access key.

        Raises:
            SecretNotFoundError: If no secret key was given or saved.
        """
        lister = self._lister(profile_name, site_id, access_key_id, secret_key)
        buckets = [Bucket.from_s3(b, site_id) for b in lister.list_buckets()]
        self._log.debug("listed_buckets", site_id=site_id, count=len(buckets))
        return buckets

    def list_objects(
        self,
        profile_name: str,
        site_id: str,
        access_key_id: str,
        bucket: str,
        prefix: str = "",
        cursor: str = "",
        max_keys: int | None = None,
        secret_key: str = "",
    ) -> ListObjectsResult:
        """List one level of a bucket below ``prefix``.

        Args:
            profile_name: Profile to authenticate as ("" for the current one).
            site_id: Site the bucket lives in.
            access_key_id: Site access key ID.
            bucket: Bucket name.
            prefix: Key prefix ("" for the bucket root).
            cursor: Continuation token from a previous truncated page.
            max_keys: Page size, clamped to 1..1000 (default 1000).
            secret_key: Secret key; the saved one when empty.

        Returns:
            Objects and common prefixes at this level, with truncation state.
        """
        lister = self._lister(profile_name, site_id, access_key_id, secret_key)
        response = lister.list_objects(bucket, prefix, cursor, max_keys)
        return ListObjectsResult.from_s3(response)
