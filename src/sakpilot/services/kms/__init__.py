"""KMS service layer."""

from sakpilot.services.kms.manager import KMSKeyManager

__all__ = ["KMSKeyManager"]
