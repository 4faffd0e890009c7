"""KMS display models."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from sakpilot.core.models import ViewModel, format_timestamp, str_id, to_int, to_str_list


class KMSKey(ViewModel):
    """KMS key display model.

    ``latest_version`` is 0 when the key has no version yet.
    """

    id: str
    name: str = ""
    description: str = ""
    status: str = ""
    key_origin: str = ""
    latest_version: int = 0
    tags: list[str] = Field(default_factory=list)
    created_at: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> KMSKey:
        return cls(
            id=str_id(item.get("id")),
            name=item.get("name") or "",
            description=item.get("description") or "",
            status=item.get("status") or "",
            key_origin=item.get("key_origin") or "",
            latest_version=to_int(item.get("latest_version")),
            tags=to_str_list(item.get("tags")),
            created_at=format_timestamp(item.get("created_at")),
        )
