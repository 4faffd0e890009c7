"""Docker Registry HTTP API v2 client.

Authenticates with the registry user's basic credentials, or anonymously when
either the user name or password is empty.
"""

from __future__ import annotations

import hashlib
from typing import Any

import httpx

from sakpilot.core.exceptions import BackendError
from sakpilot.core.zones import BackendKind
from sakpilot.integrations.base import DEFAULT_RETRIES, DEFAULT_TIMEOUT, BaseBackendClient

MANIFEST_LIST_TYPES = frozenset(
    {
        "application/vnd.docker.distribution.manifest.list.v2+json",
        "application/vnd.oci.image.index.v1+json",
    }
)
MANIFEST_ACCEPT = ", ".join(
    [
        "application/vnd.docker.distribution.manifest.v2+json",
        "application/vnd.oci.image.manifest.v1+json",
        *sorted(MANIFEST_LIST_TYPES),
    ]
)
CATALOG_PAGE_SIZE = 100
MAX_PAGES = 100


class RegistryClient(BaseBackendClient):
    """Client for one container registry, addressed by its FQDN."""

    backend_kind = BackendKind.REGISTRY

    def __init__(
        self,
        fqdn: str,
        username: str = "",
        password: str = "",
        timeout: int = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
    ) -> None:
        base_url = fqdn if fqdn.startswith(("http://", "https://")) else f"https://{fqdn}"
        super().__init__(base_url, timeout=timeout, retries=retries)
        self._auth = (username, password) if username and password else None
        self._log = self._log.bind(registry=fqdn, anonymous=self._auth is None)

    def _build_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            auth=self._auth,
            follow_redirects=True,
        )

    def list_repositories(self) -> list[str]:
        """List every repository, following ``Link`` pagination.

        Raises:
            BackendError: If a next page remains after MAX_PAGES pages.
        """
        repositories: list[str] = []
        path: str | None = "/v2/_catalog"
        params: dict[str, Any] | None = {"n": CATALOG_PAGE_SIZE}
        pages = 0
        while path and pages < MAX_PAGES:
            pages += 1
            response = self._make_retry_request("GET", path, params=params)
            data = self._handle_response(response) or {}
            repositories.extend(data.get("repositories") or [])
            next_link = response.links.get("next", {}).get("url")
            path, params = (next_link, None) if next_link else (None, None)
        if path:
            self._log.warning("page_limit_reached", pages=MAX_PAGES)
            raise BackendError(
                f"catalog exceeds {MAX_PAGES} pages",
                self.backend_kind.value,
                endpoint="/v2/_catalog",
            )
        return repositories

    def list_tags(self, repository: str) -> list[str]:
        data = self.get(f"/v2/{repository}/tags/list") or {}
        return list(data.get("tags") or [])

    def get_manifest(self, repository: str, reference: str) -> tuple[str, int]:
        """Resolve a tag to its digest and total image size.

        Size is the sum of layer sizes plus the config size for an image
        manifest, and the manifest's own size for a manifest list or index.

        Returns:
            Tuple of (digest, size).
        """
        response = self._make_retry_request(
            "GET",
            f"/v2/{repository}/manifests/{reference}",
            headers={"Accept": MANIFEST_ACCEPT},
        )
        manifest = self._handle_response(response)
        if not isinstance(manifest, dict):
            raise BackendError(
                "invalid manifest",
                self.backend_kind.value,
                response.status_code,
                response.request.url.path,
            )
        digest = response.headers.get("Docker-Content-Digest") or (
            f"sha256:{hashlib.sha256(response.content).hexdigest()}"
        )
        content_type = response.headers.get("Content-Type", "").split(";")[0]
        media_type = manifest.get("mediaType") or content_type
        if media_type in MANIFEST_LIST_TYPES or "manifests" in manifest:
            return digest, len(response.content)
        size = sum(int(layer.get("size") or 0) for layer in manifest.get("layers") or [])
        size += int((manifest.get("config") or {}).get("size") or 0)
        return digest, size
