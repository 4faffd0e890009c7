"""AppRun shared display models."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from sakpilot.core.models import ViewModel, _safe_get, format_timestamp, str_id, to_bool, to_int


class SharedApplication(ViewModel):
    """Application listing entry."""

    id: str
    name: str = ""
    status: str = ""
    public_url: str = ""
    created_at: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> SharedApplication:
        return cls(
            id=str_id(item.get("id")),
            name=item.get("name") or "",
            status=item.get("status") or "",
            public_url=item.get("public_url") or "",
            created_at=format_timestamp(item.get("created_at")),
        )


class Component(ViewModel):
    """Container component of an application."""

    name: str = ""
    image: str = ""
    max_cpu: str = ""
    max_memory: str = ""


class SharedApplicationDetail(ViewModel):
    """Application with its scaling settings and components."""

    id: str
    name: str = ""
    status: str = ""
    public_url: str = ""
    port: int = 0
    min_scale: int = 0
    max_scale: int = 0
    timeout_seconds: int = 0
    created_at: str = ""
    components: list[Component] = Field(default_factory=list)

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> SharedApplicationDetail:
        components = [
            Component(
                name=c.get("name") or "",
                image=_safe_get(c, "deploy_source", "container_registry", "image", default=""),
                max_cpu=str(c.get("max_cpu") or ""),
                max_memory=str(c.get("max_memory") or ""),
            )
            for c in item.get("components") or []
        ]
        return cls(
            id=str_id(item.get("id")),
            name=item.get("name") or "",
            status=item.get("status") or "",
            public_url=item.get("public_url") or "",
            port=to_int(item.get("port")),
            min_scale=to_int(item.get("min_scale")),
            max_scale=to_int(item.get("max_scale")),
            timeout_seconds=to_int(item.get("timeout_seconds")),
            created_at=format_timestamp(item.get("created_at")),
            components=components,
        )


class SharedVersion(ViewModel):
    id: str
    name: str = ""
    status: str = ""
    created_at: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> SharedVersion:
        return cls(
            id=str_id(item.get("id")),
            name=item.get("name") or "",
            status=item.get("status") or "",
            created_at=format_timestamp(item.get("created_at")),
        )


class Traffic(ViewModel):
    """Traffic share of a version.

    An entry names either a version (``version_name``) or the latest version
    (``is_latest_version``).
    """

    version_name: str = ""
    is_latest_version: bool = False
    percent: int = 0

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> Traffic:
        percent = to_int(item.get("percent"))
        if item.get("version_name"):
            return cls(version_name=str(item["version_name"]), percent=percent)
        return cls(is_latest_version=to_bool(item.get("is_latest_version")), percent=percent)
