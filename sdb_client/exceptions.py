"""
Custom exceptions for the SimpleDB client library.
"""

from typing import Optional


class SimpleDBClientError(Exception):
    """Base exception for SimpleDB client errors."""
    pass


class ConfigurationError(SimpleDBClientError):
    """Raised when client configuration is invalid."""
    pass


class HTTPError(SimpleDBClientError):
    """Raised when the HTTP request fails or the service error is unstructured."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(SimpleDBClientError):
    """Raised when a response body cannot be decoded."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SimpleDBError(SimpleDBClientError):
    """
    Structured error reported by the service.

    Attributes:
        code: Machine readable error code, e.g. ``InvalidParameterValue``
        message: Human readable description
        request_id: Service request id of the failed call
    """

    def __init__(self, code: str, message: str, request_id: str = ""):
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message
        self.request_id = request_id
