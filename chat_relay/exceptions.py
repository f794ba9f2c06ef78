"""Custom exceptions shared across services."""

from dataclasses import dataclass


@dataclass(eq=False)
class ServiceError(Exception):
    """Base exception for service layer failures."""

    message: str
    code: str = "service_error"
    status_code: int = 500

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass(eq=False)
class BadRequestError(ServiceError):
    """Raised when a client submits an invalid request body."""

    code: str = "bad_request"
    status_code: int = 400


@dataclass(eq=False)
class MessageStoreError(ServiceError):
    """Raised when the list-store backing the message board fails."""

    code: str = "store_error"


@dataclass(eq=False)
class ProviderError(ServiceError):
    """Raised by a provider adapter; converted to response text by the relay."""

    code: str = "provider_error"
    status_code: int = 502
