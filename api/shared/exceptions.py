"""Shared exceptions for the DeFi Copilot API."""
from typing import Any, Dict, Optional


class CopilotException(Exception):
    """Base exception for DeFi Copilot API."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(CopilotException):
    """Raised when a required field is missing or empty."""

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", details)


class MalformedRequest(CopilotException):
    """Raised when the request body cannot be parsed."""

    status_code = 400

    def __init__(self, message: str = "Invalid request body", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "MALFORMED_REQUEST", details)


class NotFoundError(CopilotException):
    """Raised when a resource is not found."""

    status_code = 404

    def __init__(self, resource: str, identifier: str):
        message = f"{resource} with identifier '{identifier}' not found"
        super().__init__(message, "NOT_FOUND", {"resource": resource, "identifier": identifier})


class StoreUnavailable(CopilotException):
    """Raised by a store that cannot serve the request (connection, query, schema)."""

    def __init__(self, store: str, message: str, details: Optional[Dict[str, Any]] = None):
        full_message = f"{store} store unavailable: {message}"
        super().__init__(full_message, "STORE_UNAVAILABLE", {"store": store, **(details or {})})


class PersistenceError(CopilotException):
    """Raised when a result could not be written to any store."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "PERSISTENCE_ERROR", details)


class ProviderError(CopilotException):
    """Raised when an answer provider fails or returns an unusable response."""

    def __init__(self, provider: str, message: str, details: Optional[Dict[str, Any]] = None):
        full_message = f"{provider} provider error: {message}"
        super().__init__(full_message, "PROVIDER_ERROR", {"provider": provider, **(details or {})})
