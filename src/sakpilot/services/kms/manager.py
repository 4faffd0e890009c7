"""KMS key manager."""

from __future__ import annotations

import builtins

from sakpilot.integrations.kms import KMSClient
from sakpilot.integrations.kms.models import KMSKey
from sakpilot.services.base import BaseResourceManager


class KMSKeyManager(BaseResourceManager[KMSClient]):
    _family = "kms_keys"
    _entity_name = "kms_key"

    def list(self, profile_name: str) -> builtins.list[KMSKey]:
        with self._session(profile_name) as (client, _):
            items = client.list_keys()
        self._log.debug("listed_entities", count=len(items))
        return [KMSKey.from_api(item) for item in items]
