"""Container registry image models."""

from __future__ import annotations

from sakpilot.core.models import ViewModel


class RegistryImage(ViewModel):
    name: str


class RegistryTag(ViewModel):
    """Image tag; size is 0 and digest empty when the manifest was unreadable."""

    name: str
    size: int = 0
    digest: str = ""
