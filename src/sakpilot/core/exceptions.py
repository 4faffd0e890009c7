"""Gateway error taxonomy.

Every error raised across the gateway boundary derives from GatewayError, so
the presentation layer can render a structured error instead of crashing.
"""

from __future__ import annotations

from typing import Any


class GatewayError(Exception):
    """Base exception for all gateway errors.

    Attributes:
        message: Human-readable error message.
    """

    def __init__(self, message: str) -> None:
        """Initialize GatewayError.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message)
        self.message = message

    @property
    def error_type(self) -> str:
        """Return the stable error type name used in serialized errors."""
        return type(self).__name__.removesuffix("Error")

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for the GUI-facing surface."""
        return {"type": self.error_type, "message": self.message}


class ProfileNotFoundError(GatewayError):
    """Raised when a named credential profile does not exist."""

    def __init__(self, profile_name: str, message: str | None = None) -> None:
        super().__init__(message or f"profile '{profile_name}' not found")
        self.profile_name = profile_name

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "profile": self.profile_name}


class ProfileCorruptError(GatewayError):
    """Raised when a profile's config file cannot be parsed.

    Credentials cannot be synthesized, so this is fatal to the call.
    """

    def __init__(self, profile_name: str, details: str | None = None) -> None:
        message = f"profile '{profile_name}' is corrupt"
        if details:
            message = f"{message}: {details}"
        super().__init__(message)
        self.profile_name = profile_name
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "profile": self.profile_name}


class ProfileExistsError(GatewayError):
    """Raised when creating a profile whose name is already taken."""

    def __init__(self, profile_name: str) -> None:
        super().__init__(f"profile '{profile_name}' already exists")
        self.profile_name = profile_name


class BackendError(GatewayError):
    """Transport or API level failure reported by an upstream backend.

    Attributes:
        backend_kind: The backend that produced the error.
        status_code: HTTP status code (None for transport failures).
        endpoint: The endpoint that was called, if known.
        response_body: Parsed response body, if any.
    """

    def __init__(
        self,
        message: str,
        backend_kind: str,
        status_code: int | None = None,
        endpoint: str | None = None,
        response_body: Any = None,
    ) -> None:
        """Initialize BackendError.

        Args:
            message: Human-readable error message.
            backend_kind: Originating backend kind (e.g. "iaas").
            status_code: HTTP status code from the backend.
            endpoint: The endpoint that was called.
            response_body: Parsed response body from the backend.
        """
        super().__init__(message)
        self.backend_kind = backend_kind
        self.status_code = status_code
        self.endpoint = endpoint
        self.response_body = response_body

    def __str__(self) -> str:
        """Return string representation of the error."""
        parts = [f"[{self.backend_kind}]", self.message]
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        if self.endpoint:
            parts.append(f"[endpoint: {self.endpoint}]")
        return " ".join(parts)

    @property
    def error_type(self) -> str:
        return "BackendError"

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "backendKind": self.backend_kind,
            "status": self.status_code,
        }


class BackendConnectionError(BackendError):
    """Raised when the backend cannot be reached (network, DNS, timeout)."""

    def __init__(
        self,
        message: str,
        backend_kind: str,
        endpoint: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, backend_kind, endpoint=endpoint)
        self.original_error = original_error


class BackendAuthError(BackendError):
    """Raised when the backend rejects the credentials (401/403)."""


class BackendNotFoundError(BackendError):
    """Raised when the requested upstream resource does not exist (404)."""


class PrometheusQueryError(BackendError):
    """Raised when a time-series query envelope reports a non-success status."""


class NoAccessKeyError(GatewayError):
    """Raised when a metrics storage has no access key to query it with."""

    def __init__(self, storage_id: str) -> None:
        super().__init__(f"no access keys found for storage {storage_id}")
        self.storage_id = storage_id


class InvalidIdentifierError(GatewayError):
    """Raised when an identifier argument is malformed."""

    def __init__(self, kind: str, value: object, details: str | None = None) -> None:
        message = f"invalid {kind}: {value!r}"
        if details:
            message = f"{message} ({details})"
        super().__init__(message)
        self.kind = kind
        self.value = value


class SecretNotFoundError(GatewayError):
    """Raised on a secret vault miss."""

    def __init__(self, account: str) -> None:
        super().__init__(f"no secret stored for {account}")
        self.account = account


class VaultError(GatewayError):
    """Raised when the OS keychain backend fails."""
