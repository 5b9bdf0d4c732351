"""
Custom exceptions for the FitAI client.
"""
from typing import Optional


class ClientError(Exception):
    """Base exception for client errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ValidationError(ClientError):
    """Form input rejected before any request is made."""
    pass


class ServiceError(ClientError):
    """The identity service answered with a non-success status."""

    def __init__(self, status_code: int, server_message: Optional[str] = None):
        super().__init__(
            f"Identity service returned HTTP {status_code}",
            {"error": server_message} if server_message else None,
        )
        self.status_code = status_code
        self.server_message = server_message


class TransportError(ClientError):
    """The request did not complete or its response could not be used."""
    pass


class SessionStoreError(ClientError):
    """The session token could not be persisted."""
    pass


class FormFieldError(ClientError):
    """An edit targeted a field the form does not have."""
    pass
