"""Error types shared across the release publishing package."""

from __future__ import annotations

__all__ = [
    "AuthError",
    "ConfigError",
    "ConflictError",
    "NotFoundError",
    "ReleaseError",
    "TransportError",
]


class ReleaseError(RuntimeError):
    """Raised when the release pipeline cannot continue."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConfigError(ReleaseError):
    """Raised when inputs are malformed; no network call has been made."""


class AuthError(ReleaseError):
    """Raised when GitHub rejects the token or its permissions."""


class NotFoundError(ReleaseError):
    """Raised when the repository or release is unknown or inaccessible."""


class TransportError(ReleaseError):
    """Raised for network failures, timeouts and unexpected responses."""


class ConflictError(ReleaseError):
    """Raised when an asset with the same name already exists on the release."""
