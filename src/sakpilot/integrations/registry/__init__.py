"""Container registry (Docker Registry HTTP API v2) integration."""

from sakpilot.integrations.registry.client import RegistryClient

__all__ = ["RegistryClient"]
