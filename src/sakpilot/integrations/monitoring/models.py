"""Monitoring Suite display models."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from sakpilot.core.models import ViewModel, _safe_get, str_id


class Routing(ViewModel):
    """Publisher routing into a storage, named "<publisher> (<variant>)"."""

    id: str = ""
    uid: str = ""
    name: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> Routing:
        return cls(
            id=str_id(item.get("id")),
            uid=str_id(item.get("uid")),
            name=f"{item.get('publisher_code') or ''} ({item.get('variant') or ''})",
        )


class Storage(ViewModel):
    """Log, metrics or trace storage with its routings."""

    id: str
    name: str = ""
    description: str = ""
    routings: list[Routing] = Field(default_factory=list)

    @classmethod
    def from_api(cls, item: dict[str, Any], routings: list[Routing] | None = None) -> Storage:
        return cls(
            id=str_id(item.get("id")),
            name=item.get("name") or "",
            description=item.get("description") or "",
            routings=routings or [],
        )


class MetricsStorageDetail(ViewModel):
    """Metrics storage with its query endpoint."""

    id: str
    name: str = ""
    description: str = ""
    endpoint: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> MetricsStorageDetail:
        return cls(
            id=str_id(item.get("id")),
            name=item.get("name") or "",
            description=item.get("description") or "",
            endpoint=_safe_get(item, "endpoints", "address", default=""),
        )


class MetricsAccessKey(ViewModel):
    """Bearer token granting read access to a metrics storage."""

    id: str = ""
    uid: str = ""
    token: str = Field(default="", repr=False)
    description: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> MetricsAccessKey:
        return cls(
            id=str_id(item.get("id")),
            uid=str_id(item.get("uid")),
            token=item.get("token") or "",
            description=item.get("description") or "",
        )
