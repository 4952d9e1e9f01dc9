# Overview: Domain exceptions shared by services, clients and routes.

from __future__ import annotations


class StorefrontError(Exception):
    """Base class for storefront errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(StorefrontError, ValueError):
    """400-level input problem, rejected before any network call."""


class StatusTransitionError(ValidationError):
    """Raised in strict mode when a status change does not move forward."""

    def __init__(self, from_status: str, to_status: str):
        super().__init__(
            f"Cannot change order status from '{from_status}' to '{to_status}'",
            details={"from_status": from_status, "to_status": to_status},
        )
        self.from_status = from_status
        self.to_status = to_status


class NotFoundError(StorefrontError):
    """The remote store has no such resource (HTTP 404)."""


class TransportError(StorefrontError):
    """Network failure or non-404 error response from the remote store."""

    def __init__(self, message: str, status_code: int | None = None, details: dict | None = None):
        super().__init__(message, details)
        self.status_code = status_code


class AuthorizationError(StorefrontError):
    """Missing or rejected credentials (HTTP 401/403)."""

    def __init__(self, message: str, status_code: int = 401, details: dict | None = None):
        super().__init__(message, details)
        self.status_code = status_code


class PaymentCancelledError(StorefrontError):
    """The customer dismissed the payment window."""
