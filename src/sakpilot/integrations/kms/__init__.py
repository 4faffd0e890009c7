"""KMS integration - HTTP client and display models."""

from sakpilot.integrations.kms.client import KMSClient

__all__ = ["KMSClient"]
