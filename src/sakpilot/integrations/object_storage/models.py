"""Object storage display models."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from sakpilot.core.models import ViewModel, format_timestamp, str_id, to_bool, to_int


class Site(ViewModel):
    id: str
    display_name: str = ""
    endpoint: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> Site:
        return cls(
            id=str_id(item.get("id")),
            display_name=item.get("display_name_ja") or item.get("display_name") or "",
            endpoint=item.get("s3_endpoint") or "",
        )


class AccessKey(ViewModel):
    """Site access key. The secret key is never part of this model."""

    id: str
    site_id: str = ""
    created_at: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any], site_id: str) -> AccessKey:
        return cls(
            id=str_id(item.get("id")),
            site_id=site_id,
            created_at=format_timestamp(item.get("created_at")),
        )


class Bucket(ViewModel):
    name: str
    site_id: str = ""
    creation_date: str = ""

    @classmethod
    def from_s3(cls, item: dict[str, Any], site_id: str) -> Bucket:
        return cls(
            name=item.get("Name") or "",
            site_id=site_id,
            creation_date=format_timestamp(item.get("CreationDate")),
        )


class ObjectEntry(ViewModel):
    key: str
    size: int = 0
    last_modified: str = ""
    storage_class: str = ""

    @classmethod
    def from_s3(cls, item: dict[str, Any]) -> ObjectEntry:
        return cls(
            key=item.get("Key") or "",
            size=to_int(item.get("Size")),
            last_modified=format_timestamp(item.get("LastModified")),
            storage_class=item.get("StorageClass") or "",
        )


class ListObjectsResult(ViewModel):
    """One page of a delimited object listing."""

    objects: list[ObjectEntry] = Field(default_factory=list)
    prefixes: list[str] = Field(default_factory=list)
    truncated: bool = False
    next_cursor: str = ""

    @classmethod
    def from_s3(cls, response: dict[str, Any]) -> ListObjectsResult:
        return cls(
            objects=[ObjectEntry.from_s3(o) for o in response.get("Contents") or []],
            prefixes=[p["Prefix"] for p in response.get("CommonPrefixes") or [] if p.get("Prefix")],
            truncated=to_bool(response.get("IsTruncated")),
            next_cursor=response.get("NextContinuationToken") or "",
        )
